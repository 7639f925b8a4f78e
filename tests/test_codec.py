"""
Scenario codec: envelope round trips, graceful fallback, scalar coercion,
per-entry validation and the legacy payload migrations.
"""

import base64
import json
import logging
from dataclasses import replace

import pytest

from codec import (
    MIGRATION_RULES,
    canonical_names,
    decode,
    decode_scenario_report,
    encode,
    params_from_query,
    parse_envelope,
    share_query,
    validate_params,
)
from codec.merge import coerce_scalar
from codec.migrations import LEGACY_PARENT_FIRST_YEAR_AMOUNT
from codec.validators import infer_category, infer_model
from core.params import SupportPlan
from core.schema import CHILD_SUPPORT, ELDER_CARE, FLAT_MODEL, LINEAR_MODEL, SCALAR_FIELDS
from scenarios import generate_default_params


@pytest.fixture
def other_base(fixed_now):
    return generate_default_params(fixed_now, seed=3)


def _decode(params, base):
    return decode_scenario_report(json.dumps({"version": 1, "params": params}), base=base)


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

def test_encode_envelope_shape(supported_params):
    env = json.loads(encode(supported_params))
    assert env["version"] == 1
    assert set(env["params"]) == set(SCALAR_FIELDS) | {"mortgages", "supports"}
    assert env["params"]["realEstate0"] == 900_000
    assert env["params"]["supports"][0]["annualIncrease"] == 500.0
    assert env["params"]["mortgages"][0]["paymentMonthly"] == 3_500


@pytest.mark.parametrize("binary_safe", [False, True])
def test_round_trip(supported_params, other_base, binary_safe):
    token = encode(supported_params, binary_safe=binary_safe)
    assert decode(token, base=other_base) == supported_params


def test_base64_is_plain_json_underneath(base_params):
    token = encode(base_params, binary_safe=True)
    assert json.loads(base64.b64decode(token)) == json.loads(encode(base_params))


def test_urlsafe_unpadded_and_form_decoded_tokens(base_params, other_base):
    token = encode(base_params, binary_safe=True)
    urlsafe = token.replace("+", "-").replace("/", "_").rstrip("=")
    assert decode(urlsafe, base=other_base) == base_params
    assert decode(token.replace("+", " "), base=other_base) == base_params


def test_bytes_and_mapping_input(base_params, other_base):
    assert decode(encode(base_params).encode("utf-8"), base=other_base) == base_params
    assert decode(json.loads(encode(base_params)), base=other_base) == base_params


@pytest.mark.parametrize(
    "raw",
    [None, "", "   ", "not json", "%%%", "[1, 2]", '{"params": {}}', '{"version": "1", "params": {}}',
     '{"version": true, "params": {}}', '{"version": 1}', '{"version": 1, "params": [1]}',
     base64.b64encode(b"not json either").decode()],
)
def test_unusable_input_gives_defaults(raw, base_params):
    params, report = decode_scenario_report(raw, base=base_params)
    assert params == base_params
    assert report.used_defaults


def test_defaults_generated_when_no_base(fixed_now):
    assert decode("garbage", now=fixed_now) == generate_default_params(fixed_now)


def test_unsupported_version_warns(base_params, caplog):
    with caplog.at_level(logging.WARNING, logger="codec.envelope"):
        params, report = decode_scenario_report('{"version": 2, "params": {"cash0": 1}}', base=base_params)
    assert params == base_params
    assert report.used_defaults
    assert "Unsupported scenario payload version: 2" in caplog.text


def test_integral_float_version_accepted(base_params):
    params = decode('{"version": 1.0, "params": {"cash0": 1234}}', base=base_params)
    assert params.cash0 == 1234


@pytest.mark.parametrize("binary_safe", [False, True])
def test_deeply_nested_json_gives_defaults(base_params, binary_safe):
    raw = "[" * 200_000 + "]" * 200_000
    if binary_safe:
        raw = base64.b64encode(raw.encode("ascii")).decode("ascii")
    params, report = decode_scenario_report(raw, base=base_params)
    assert params == base_params
    assert report.used_defaults
    assert parse_envelope(raw) is None


def test_parse_envelope():
    assert parse_envelope('{"version": 1}') == {"version": 1}
    assert parse_envelope(base64.b64encode(b'{"version": 1}').decode()) == {"version": 1}
    assert parse_envelope("nope") is None
    assert parse_envelope(b"\xff\xfe") is None


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

def test_partial_override_keeps_rest(base_params):
    params, report = _decode({"cash0": 250_000, "spendFromStocks": False}, base_params)
    assert params == base_params.replace(cash0=250_000.0, spend_from_stocks=False)
    assert report.is_clean
    assert report.applied_rules == []


def test_null_values_are_absent(base_params):
    params, report = _decode({"cash0": None, "mortgages": None}, base_params)
    assert params == base_params
    assert report.is_clean


def test_invalid_scalars_keep_defaults(base_params):
    params, report = _decode({"cash0": "abc", "stocks0": -5, "currentAge": 40.5, "inflation": "0.03"}, base_params)
    assert params.cash0 == base_params.cash0
    assert params.stocks0 == base_params.stocks0
    assert params.current_age == base_params.current_age
    assert params.inflation == 0.03
    assert len(report.warnings) == 3
    assert not report.used_defaults


@pytest.mark.parametrize(
    "value, kind, expected",
    [(True, "flag", True), ("false", "flag", False), ("YES", "flag", True), (1, "flag", None),
     ("maybe", "flag", None), (45, "int", 45), (45.0, "int", 45), ("45", "int", 45),
     (45.5, "int", None), (-1, "int", None), (True, "int", None), ("12.5", "amount", 12.5),
     (-0.01, "rate", None), (-0.01, "signed", -0.01), (float("nan"), "amount", None),
     ("", "amount", None), ([1], "amount", None)],
)
def test_coerce_scalar(value, kind, expected):
    assert coerce_scalar(value, kind) == expected


def test_ages_above_ceiling_keep_defaults(base_params):
    params, report = _decode({"maxAge": 100_000_000, "currentAge": 121, "startYear": 2030}, base_params)
    assert params.max_age == base_params.max_age
    assert params.current_age == base_params.current_age
    assert params.start_year == 2030
    assert len(report.warnings) == 2
    assert coerce_scalar(120, "age") == 120
    assert coerce_scalar(121, "age") is None


def test_validate_rejects_age_above_ceiling(base_params):
    result = validate_params(base_params.replace(max_age=500))
    assert not result.is_valid
    assert any("maxAge is above" in e for e in result.errors)


def test_ages_clamped(base_params):
    params, report = _decode({"currentAge": 40, "retirementAge": 30, "maxAge": 35}, base_params)
    assert (params.current_age, params.retirement_age, params.max_age) == (40, 40, 40)
    assert len(report.warnings) == 2


# ---------------------------------------------------------------------------
# Collections
# ---------------------------------------------------------------------------

def test_invalid_mortgage_entry_dropped(base_params):
    params, report = _decode(
        {"mortgages": [
            {"principal": -1, "rate": 0.04, "paymentMonthly": 1_000, "endYear": 2040},
            {"principal": "250000", "rate": 0.04, "paymentMonthly": 1_500, "endYear": 2045},
            "not an object",
        ]},
        base_params,
    )
    assert len(params.mortgages) == 1
    assert params.mortgages[0].principal == 250_000
    assert len(report.dropped) == 2
    assert report.dropped[0].startswith("mortgages[0]")
    assert not report.is_clean


def test_empty_mortgage_list_clears_defaults(base_params):
    params, _ = _decode({"mortgages": []}, base_params)
    assert params.mortgages == ()


def test_mortgage_defaults_and_month_fallback(base_params):
    params, _ = _decode(
        {"startYear": 2030, "mortgages": [
            {"balance": 100_000, "interestRate": 0.04, "payment": 1_000, "endYear": 2040,
             "startMonth": 13, "endMonth": 0},
        ]},
        base_params,
    )
    m = params.mortgages[0]
    assert m.name == "Mortgage 1"
    assert (m.start_year, m.start_month) == (2030, 1)
    assert (m.end_year, m.end_month) == (2040, 12)


def test_mortgage_window_must_be_ordered(base_params):
    params, report = _decode(
        {"mortgages": [{"principal": 1_000, "rate": 0.0, "paymentMonthly": 10,
                        "startYear": 2040, "endYear": 2030}]},
        base_params,
    )
    assert params.mortgages == ()
    assert len(report.dropped) == 1


def test_legacy_single_mortgage(base_params):
    params, report = _decode(
        {"mortgage0": 300_000, "mortgageRate": 0.04, "mortgagePaymentMonthly": 2_000,
         "mortgageEndYear": 2045, "mortgageEndMonth": 3},
        base_params,
    )
    m, = params.mortgages
    assert m.name == "Mortgage 1"
    assert m.principal == 300_000
    assert (m.start_year, m.start_month, m.end_year, m.end_month) == (2025, 1, 2045, 3)
    assert report.applied_rules == ["legacy-single-mortgage"]


def test_legacy_single_mortgage_partial_uses_defaults(base_params):
    params, _ = _decode({"mortgage0": 250_000}, base_params)
    m, = params.mortgages
    assert m.principal == 250_000
    assert m.rate == base_params.mortgages[0].rate
    assert (m.end_year, m.end_month) == (2040, 6)


def test_legacy_zero_mortgage_means_none(base_params):
    params, _ = _decode({"mortgage0": 0}, base_params)
    assert params.mortgages == ()


def test_legacy_parent_fields(base_params):
    params, report = _decode(
        {"parentStart": 2030, "parentEndYear": 2040, "parentBaseAnnual": 20_000, "parentInc": 1_000},
        base_params,
    )
    s, = params.supports
    assert s == SupportPlan("Parent", ELDER_CARE, 2030, 2040, 20_000.0, LINEAR_MODEL, 1_000.0)
    assert report.applied_rules == ["legacy-parent-fields"]


def test_legacy_parent_fields_default_amount(base_params):
    params, _ = _decode({"parentStart": 2030, "parentEndYear": 2040, "parentInc": 500}, base_params)
    assert params.supports[0].annual_amount == LEGACY_PARENT_FIRST_YEAR_AMOUNT


def test_legacy_elder_care_list_is_linear(base_params):
    params, _ = _decode(
        {"elderCare": [
            {"startYear": 2030, "endYear": 2035, "firstYearAmount": 15_000, "annualIncrease": 500},
            {"startYear": 2032, "endYear": 2036, "firstYearAmount": 9_000},
        ]},
        base_params,
    )
    assert [s.name for s in params.supports] == ["Parent", "Parent 2"]
    assert all(s.category == ELDER_CARE and s.model == LINEAR_MODEL for s in params.supports)
    assert params.supports[0].annual_increase == 500


def test_legacy_child_supports_list(base_params):
    params, report = _decode(
        {"childSupports": [
            {"startYear": 2030, "years": 5, "annualAmount": 10_000},
            {"startYear": 2031, "annualAmount": 10_000},
        ]},
        base_params,
    )
    s, = params.supports
    assert (s.name, s.category, s.model) == ("Child 1", CHILD_SUPPORT, FLAT_MODEL)
    assert (s.start_year, s.end_year) == (2030, 2034)
    assert report.dropped == ["childSupports[1]: missing startYear or years"]


def test_legacy_kids_fields(base_params):
    params, _ = _decode({"kidsStarts": [2032, 2029], "kidsAnnual": 18_000, "kidsYears": 4}, base_params)
    assert [(s.name, s.start_year, s.end_year) for s in params.supports] == [
        ("Child 1", 2029, 2032),
        ("Child 2", 2032, 2035),
    ]
    assert all(s.model == FLAT_MODEL and s.annual_amount == 18_000 for s in params.supports)


def test_legacy_elder_and_child_combine(base_params):
    params, report = _decode(
        {"parentStart": 2030, "parentEndYear": 2040,
         "kidsStarts": [2029], "kidsAnnual": 18_000, "kidsYears": 4},
        base_params,
    )
    assert [s.name for s in params.supports] == ["Parent", "Child 1"]
    assert report.applied_rules == ["legacy-parent-fields", "legacy-kids-fields"]


def test_current_keys_beat_legacy(base_params):
    params, report = _decode(
        {"mortgages": [{"principal": 1_000, "rate": 0.0, "paymentMonthly": 100, "endYear": 2026}],
         "mortgage0": 999_999,
         "supports": [],
         "parentStart": 2030, "parentEndYear": 2040,
         "elderCare": [{"startYear": 2030, "endYear": 2031, "firstYearAmount": 1}]},
        base_params,
    )
    assert params.mortgages[0].principal == 1_000
    assert params.supports == ()
    assert report.applied_rules == ["mortgages", "supports"]


def test_migration_rule_order():
    names = [r.name for r in MIGRATION_RULES]
    assert names.index("mortgages") < names.index("legacy-single-mortgage")
    assert names.index("supports") < names.index("legacy-elder-care-list") < names.index("legacy-parent-fields")
    assert names.index("legacy-child-supports-list") < names.index("legacy-kids-fields")


def test_support_entry_inference(base_params):
    params, _ = _decode(
        {"supports": [
            {"name": "College fund", "startYear": 2030, "endYear": 2033, "annualAmount": 20_000},
            {"type": "kids", "startYear": 2031, "years": 3, "amount": 5_000},
            {"startYear": 2028, "annualAmount": 7_000, "annualIncrease": 250},
            {"name": "Mom", "category": "elderCare", "startYear": 2026, "endYear": 2030,
             "annualAmount": 8_000, "model": "flat", "annualIncrease": 250},
        ]},
        base_params,
    )
    college, kid, unnamed, mom = params.supports
    assert (college.category, college.model, college.name) == (CHILD_SUPPORT, FLAT_MODEL, "Child 1")
    assert (kid.category, kid.start_year, kid.end_year, kid.annual_amount) == (CHILD_SUPPORT, 2031, 2033, 5_000)
    assert (unnamed.category, unnamed.model, unnamed.end_year, unnamed.name) == (ELDER_CARE, LINEAR_MODEL, 2028, "Parent")
    assert (mom.model, mom.name) == (FLAT_MODEL, "Parent 2")


def test_support_amount_must_be_positive(base_params):
    params, report = _decode(
        {"supports": [{"startYear": 2030, "endYear": 2033, "annualAmount": 0}]},
        base_params,
    )
    assert params.supports == ()
    assert report.dropped[0].startswith("supports[0]")


def test_infer_helpers():
    assert infer_category("Child Support", None) == CHILD_SUPPORT
    assert infer_category(None, "Kid's tuition") == CHILD_SUPPORT
    assert infer_category(None, "Dad's care home") == ELDER_CARE
    assert infer_category("unknown", "Grandma") == ELDER_CARE
    assert infer_model("LINEAR", 0) == LINEAR_MODEL
    assert infer_model(None, 0) == FLAT_MODEL
    assert infer_model("exotic", -100) == LINEAR_MODEL


def test_canonical_names_ignore_incoming_names(supported_params):
    renamed = tuple(replace(s, name="x") for s in supported_params.supports)
    _, supports = canonical_names(supported_params.mortgages, renamed)
    assert [s.name for s in supports] == ["Parent", "Child 1"]


# ---------------------------------------------------------------------------
# Query strings
# ---------------------------------------------------------------------------

def test_share_query_round_trip(supported_params, other_base):
    query = share_query(supported_params)
    assert query.startswith("scenario=")
    assert params_from_query(query, base=other_base) == supported_params
    assert params_from_query("?" + query, base=other_base) == supported_params


def test_params_from_mapping(base_params, other_base):
    token = encode(base_params, binary_safe=True)
    assert params_from_query({"scenario": [token]}, base=other_base) == base_params
    assert params_from_query({"scenario": token}, base=other_base) == base_params


def test_query_without_scenario(base_params):
    assert params_from_query("foo=bar", base=base_params) == base_params
    assert params_from_query(None, base=base_params) == base_params


# ---------------------------------------------------------------------------
# Structural validation
# ---------------------------------------------------------------------------

def test_validate_clean(supported_params):
    result = validate_params(supported_params)
    assert result.is_valid
    assert result.warnings == []


def test_validate_flags_problems(base_params, mortgage):
    bad = base_params.replace(
        retirement_age=30,
        inflation=2.5,
        mortgages=(replace(mortgage, payment_monthly=100),),
        supports=(SupportPlan("Parent", ELDER_CARE, 2030, 2029, 1_000, "exponential"),),
    )
    result = validate_params(bad)
    assert not result.is_valid
    assert any("retirementAge" in e for e in result.errors)
    assert any("ends before it starts" in e for e in result.errors)
    assert any("unknown model" in e for e in result.errors)
    assert any("inflation" in w for w in result.warnings)
    assert any("does not cover interest" in w for w in result.warnings)
