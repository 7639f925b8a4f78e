"""
Schema migration rules for scenario collections.

Older share links stored the same logical data under different keys:

  mortgages     current list  |  single mortgage0 / mortgageRate / ... fields
  supports      current list  |  elderCare list, parentStart/... fields
                              |  childSupports list, kidsStarts/kidsAnnual/kidsYears

Each rule is a pure function ``(raw, context) -> Optional[RuleOutcome]`` that
returns None when its keys are absent. Rules are tried in MIGRATION_RULES
order and the first rule producing a value for a slot wins, so current-schema
keys always beat legacy ones. A future schema adds rules here; nothing else
branches on key presence.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from pydantic import ValidationError

from core.params import MortgagePlan, ScenarioParams, SupportPlan
from core.schema import CHILD_SUPPORT, ELDER_CARE, FLAT_MODEL, LINEAR_MODEL
from core.utils import as_number

from .validators import MortgageEntry, SupportEntry

# Slots
MORTGAGES = "mortgages"
SUPPORTS = "supports"
ELDER_CARE_SLOT = "elderCare"
CHILD_SUPPORT_SLOT = "childSupport"

# Old single-parent links had no amount field; the sandbox assumed this one.
LEGACY_PARENT_FIRST_YEAR_AMOUNT = 10_000


@dataclass(frozen=True)
class MigrationContext:
    start_year: int  # scenario start year after scalar overrides
    base: ScenarioParams  # defaults the payload is overlaid on


@dataclass
class RuleOutcome:
    plans: List[Any]
    dropped: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class MigrationRule:
    name: str
    slot: str
    apply: Callable[[Mapping[str, Any], MigrationContext], Optional[RuleOutcome]]


# ---------------------------------------------------------------------------
# Entry parsing
# ---------------------------------------------------------------------------

def _describe(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "entry"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def parse_mortgages(
    entries: Any, ctx: MigrationContext, source: str = "mortgages"
) -> RuleOutcome:
    outcome = RuleOutcome(plans=[])
    if not isinstance(entries, list):
        outcome.dropped.append(f"{source}: expected a list, got {type(entries).__name__}")
        return outcome
    for i, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            outcome.dropped.append(f"{source}[{i}]: not an object")
            continue
        candidate = dict(entry)
        if candidate.get("startYear") is None:
            candidate["startYear"] = ctx.start_year
        try:
            outcome.plans.append(MortgageEntry.model_validate(candidate).to_plan())
        except ValidationError as e:
            outcome.dropped.append(f"{source}[{i}]: {_describe(e)}")
    return outcome


def parse_supports(
    entries: Any,
    source: str = "supports",
    overrides: Optional[Dict[str, Any]] = None,
) -> RuleOutcome:
    """Validate support entries; ``overrides`` pins fields such as category/model."""
    outcome = RuleOutcome(plans=[])
    if not isinstance(entries, list):
        outcome.dropped.append(f"{source}: expected a list, got {type(entries).__name__}")
        return outcome
    for i, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            outcome.dropped.append(f"{source}[{i}]: not an object")
            continue
        candidate = {**entry, **(overrides or {})}
        try:
            outcome.plans.append(SupportEntry.model_validate(candidate).to_plan())
        except ValidationError as e:
            outcome.dropped.append(f"{source}[{i}]: {_describe(e)}")
    return outcome


# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------

def current_mortgages(raw: Mapping[str, Any], ctx: MigrationContext) -> Optional[RuleOutcome]:
    if "mortgages" not in raw:
        return None
    return parse_mortgages(raw["mortgages"], ctx)


def legacy_single_mortgage(raw: Mapping[str, Any], ctx: MigrationContext) -> Optional[RuleOutcome]:
    """mortgage0 / mortgageRate / mortgagePaymentMonthly / mortgageEndYear / mortgageEndMonth."""
    if "mortgage0" not in raw:
        return None
    if as_number(raw["mortgage0"]) == 0:
        return RuleOutcome(plans=[])  # old links encoded "no mortgage" as 0
    # Partial legacy links relied on the defaults for the missing parts.
    fallback = ctx.base.mortgages[0].to_payload() if ctx.base.mortgages else {}
    candidate = {
        "principal": raw["mortgage0"],
        "rate": raw.get("mortgageRate", fallback.get("rate")),
        "paymentMonthly": raw.get("mortgagePaymentMonthly", fallback.get("paymentMonthly")),
        "startYear": raw.get("mortgageStartYear", ctx.start_year),
        "startMonth": raw.get("mortgageStartMonth", 1),
        "endYear": raw.get("mortgageEndYear", fallback.get("endYear")),
        "endMonth": raw.get("mortgageEndMonth", fallback.get("endMonth")),
    }
    return parse_mortgages([candidate], ctx, source="mortgage0")


def current_supports(raw: Mapping[str, Any], ctx: MigrationContext) -> Optional[RuleOutcome]:
    if "supports" not in raw:
        return None
    return parse_supports(raw["supports"])


def legacy_elder_care_list(raw: Mapping[str, Any], ctx: MigrationContext) -> Optional[RuleOutcome]:
    """elderCare: [{startYear, endYear, firstYearAmount, annualIncrease}]; always linear."""
    if "elderCare" not in raw:
        return None
    return parse_supports(
        raw["elderCare"],
        source="elderCare",
        overrides={"category": ELDER_CARE, "model": LINEAR_MODEL},
    )


def legacy_parent_fields(raw: Mapping[str, Any], ctx: MigrationContext) -> Optional[RuleOutcome]:
    """parentStart / parentEndYear / parentBaseAnnual|parentAnnual / parentInc."""
    start = as_number(raw.get("parentStart"))
    end = as_number(raw.get("parentEndYear"))
    if start is None or end is None:
        return None
    amount = as_number(raw.get("parentBaseAnnual", raw.get("parentAnnual")))
    if amount is None:
        amount = LEGACY_PARENT_FIRST_YEAR_AMOUNT
    if amount <= 0:
        return None
    increase = as_number(raw.get("parentInc"))
    candidate = {
        "startYear": start,
        "endYear": end,
        "annualAmount": amount,
        "annualIncrease": increase if increase is not None else 0.0,
        "category": ELDER_CARE,
        "model": LINEAR_MODEL,
    }
    return parse_supports([candidate], source="parentStart")


def _child_window(entry: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
    start = as_number(entry.get("startYear"))
    years = as_number(entry.get("years", entry.get("duration", entry.get("length"))))
    if start is None or years is None or years <= 0:
        return None
    return {**entry, "startYear": start, "endYear": start + math.ceil(years) - 1}


def legacy_child_supports_list(raw: Mapping[str, Any], ctx: MigrationContext) -> Optional[RuleOutcome]:
    """childSupports: [{startYear, years, annualAmount}]; flat, years counted from start."""
    if "childSupports" not in raw:
        return None
    entries = raw["childSupports"]
    if not isinstance(entries, list):
        return parse_supports(entries, source="childSupports")
    outcome = RuleOutcome(plans=[])
    windowed = []
    for i, entry in enumerate(entries):
        w = _child_window(entry) if isinstance(entry, Mapping) else None
        if w is None:
            outcome.dropped.append(f"childSupports[{i}]: missing startYear or years")
            continue
        windowed.append(w)
    parsed = parse_supports(
        windowed,
        source="childSupports",
        overrides={"category": CHILD_SUPPORT, "model": FLAT_MODEL},
    )
    outcome.plans.extend(parsed.plans)
    outcome.dropped.extend(parsed.dropped)
    return outcome


def legacy_kids_fields(raw: Mapping[str, Any], ctx: MigrationContext) -> Optional[RuleOutcome]:
    """kidsStarts: [year, ...] + kidsAnnual + kidsYears: one flat plan per child."""
    starts = raw.get("kidsStarts")
    amount = as_number(raw.get("kidsAnnual"))
    years = as_number(raw.get("kidsYears"))
    if not isinstance(starts, list) or amount is None or amount <= 0 or years is None or years <= 0:
        return None
    start_years = sorted(s for s in (as_number(v) for v in starts) if s is not None)
    candidates = [
        {"startYear": s, "endYear": s + math.ceil(years) - 1, "annualAmount": amount}
        for s in start_years
    ]
    return parse_supports(
        candidates,
        source="kidsStarts",
        overrides={"category": CHILD_SUPPORT, "model": FLAT_MODEL},
    )


MIGRATION_RULES: Tuple[MigrationRule, ...] = (
    MigrationRule("mortgages", MORTGAGES, current_mortgages),
    MigrationRule("legacy-single-mortgage", MORTGAGES, legacy_single_mortgage),
    MigrationRule("supports", SUPPORTS, current_supports),
    MigrationRule("legacy-elder-care-list", ELDER_CARE_SLOT, legacy_elder_care_list),
    MigrationRule("legacy-parent-fields", ELDER_CARE_SLOT, legacy_parent_fields),
    MigrationRule("legacy-child-supports-list", CHILD_SUPPORT_SLOT, legacy_child_supports_list),
    MigrationRule("legacy-kids-fields", CHILD_SUPPORT_SLOT, legacy_kids_fields),
)

# A current "supports" list covers both legacy support slots.
_SUPERSEDED_BY: Dict[str, str] = {
    ELDER_CARE_SLOT: SUPPORTS,
    CHILD_SUPPORT_SLOT: SUPPORTS,
}


@dataclass
class ResolvedCollections:
    slots: Dict[str, RuleOutcome] = field(default_factory=dict)
    applied: List[str] = field(default_factory=list)

    @property
    def dropped(self) -> List[str]:
        return [d for outcome in self.slots.values() for d in outcome.dropped]

    def mortgages(self, base: ScenarioParams) -> Tuple[MortgagePlan, ...]:
        if MORTGAGES in self.slots:
            return tuple(self.slots[MORTGAGES].plans)
        return base.mortgages

    def supports(self, base: ScenarioParams) -> Tuple[SupportPlan, ...]:
        if SUPPORTS in self.slots:
            return tuple(self.slots[SUPPORTS].plans)
        elder = self.slots.get(ELDER_CARE_SLOT)
        child = self.slots.get(CHILD_SUPPORT_SLOT)
        if elder is None and child is None:
            return base.supports
        elder_plans = elder.plans if elder is not None else [s for s in base.supports if s.is_elder_care]
        child_plans = child.plans if child is not None else [s for s in base.supports if s.is_child_support]
        return tuple(elder_plans) + tuple(child_plans)


def resolve_collections(
    raw: Mapping[str, Any],
    ctx: MigrationContext,
    rules: Tuple[MigrationRule, ...] = MIGRATION_RULES,
) -> ResolvedCollections:
    resolved = ResolvedCollections()
    for rule in rules:
        if rule.slot in resolved.slots:
            continue
        if _SUPERSEDED_BY.get(rule.slot) in resolved.slots:
            continue
        outcome = rule.apply(raw, ctx)
        if outcome is None:
            continue
        resolved.slots[rule.slot] = outcome
        resolved.applied.append(rule.name)
    return resolved
