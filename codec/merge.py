"""
Overlay decoded payload fields onto a default scenario.

Only keys present in the payload are applied; everything else keeps its
default. Scalars are coerced one by one (a bad value keeps the default),
collections go through the migration rules, and the final plans get
canonical names.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from core.params import MortgagePlan, ScenarioParams, SupportPlan
from core.schema import MAX_AGE, SCALAR_FIELDS
from core.utils import as_number, as_whole_number

from .migrations import MigrationContext, resolve_collections
from .validators import DecodeReport

logger = logging.getLogger(__name__)

_TRUE_STRINGS = {"true", "1", "yes"}
_FALSE_STRINGS = {"false", "0", "no"}


def coerce_scalar(value: Any, kind: str) -> Optional[Any]:
    """Coerce one payload value to its field kind; None means "reject"."""
    if kind == "flag":
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            s = value.strip().lower()
            if s in _TRUE_STRINGS:
                return True
            if s in _FALSE_STRINGS:
                return False
        return None
    if kind in ("int", "age"):
        number = as_whole_number(value)
        if number is None or number < 0:
            return None
        if kind == "age" and number > MAX_AGE:
            return None
        return number
    number = as_number(value)
    if number is None:
        return None
    if kind in ("amount", "rate") and number < 0:
        return None
    return number


def canonical_names(
    mortgages: Iterable[MortgagePlan],
    supports: Iterable[SupportPlan],
) -> Tuple[Tuple[MortgagePlan, ...], Tuple[SupportPlan, ...]]:
    """
    Deterministic display names:
      elder care     "Parent", "Parent 2", ...
      child support  "Child 1", "Child 2", ...
      mortgages      keep their name, "Mortgage N" when unnamed
    """
    named_mortgages = tuple(
        m if m.name.strip() else replace(m, name=f"Mortgage {i}")
        for i, m in enumerate(mortgages, start=1)
    )

    named_supports = []
    n_elder = 0
    n_child = 0
    for s in supports:
        if s.is_child_support:
            n_child += 1
            name = f"Child {n_child}"
        else:
            n_elder += 1
            name = "Parent" if n_elder == 1 else f"Parent {n_elder}"
        named_supports.append(replace(s, name=name))

    return named_mortgages, tuple(named_supports)


def _clamp_ages(values: Dict[str, Any], report: DecodeReport) -> None:
    if values["retirement_age"] < values["current_age"]:
        report.warnings.append(
            f"retirementAge {values['retirement_age']} below currentAge; raised to {values['current_age']}."
        )
        values["retirement_age"] = values["current_age"]
    if values["max_age"] < values["retirement_age"]:
        report.warnings.append(
            f"maxAge {values['max_age']} below retirementAge; raised to {values['retirement_age']}."
        )
        values["max_age"] = values["retirement_age"]


def merge_overrides(
    base: ScenarioParams,
    overrides: Mapping[str, Any],
    report: Optional[DecodeReport] = None,
) -> ScenarioParams:
    """
    Parameters
    ----------
    base : ScenarioParams
        Freshly generated defaults.
    overrides : Mapping
        Decoded ``params`` object of an envelope (camelCase keys). Keys with a
        None value are treated as absent.
    report : DecodeReport, optional
        Collects warnings and dropped entries.
    """
    if report is None:
        report = DecodeReport()
    present = {k: v for k, v in overrides.items() if v is not None}

    values: Dict[str, Any] = {snake: getattr(base, snake) for snake, _kind in SCALAR_FIELDS.values()}
    for camel, (snake, kind) in SCALAR_FIELDS.items():
        if camel not in present:
            continue
        coerced = coerce_scalar(present[camel], kind)
        if coerced is None:
            report.warnings.append(f"Ignored invalid value for {camel}: {present[camel]!r}")
            logger.debug("Ignored invalid value for %s: %r", camel, present[camel])
            continue
        values[snake] = coerced

    _clamp_ages(values, report)

    ctx = MigrationContext(start_year=values["start_year"], base=base)
    resolved = resolve_collections(present, ctx)
    report.applied_rules.extend(resolved.applied)
    for dropped in resolved.dropped:
        report.dropped.append(dropped)
        logger.debug("Dropped scenario entry %s", dropped)

    mortgages, supports = canonical_names(resolved.mortgages(base), resolved.supports(base))
    return ScenarioParams(mortgages=mortgages, supports=supports, **values)
