"""
Validation for untrusted scenario payloads before they reach the engine.

Collection entries (mortgages, supports) are parsed one by one through
pydantic models; an entry that fails is dropped on its own and never aborts
the whole decode. Catches:
- Missing or non-numeric required fields (numeric strings are accepted)
- Non-positive principal / payment / support amount
- Negative mortgage rate
- Windows that end before they start
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from typing import Annotated, Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator, model_validator

from core.params import MortgagePlan, ScenarioParams, SupportPlan
from core.schema import (
    CHILD_SUPPORT,
    ELDER_CARE,
    FLAT_MODEL,
    LINEAR_MODEL,
    MAX_AGE,
    SUPPORT_MODEL_NAMES,
)
from core.utils import as_number, as_whole_number


# ---------------------------------------------------------------------------
# Field coercion
# ---------------------------------------------------------------------------

def _finite_number(value: Any) -> float:
    number = as_number(value)
    if number is None:
        raise ValueError("expected a finite number or numeric string")
    return number


def _number_or_zero(value: Any) -> float:
    number = as_number(value)
    return 0.0 if number is None else number


def _whole_number(value: Any) -> int:
    number = as_whole_number(value)
    if number is None:
        raise ValueError("expected a whole number")
    return number


def _month_or(value: Any, fallback: int) -> int:
    month = as_whole_number(value)
    if month is None or not 1 <= month <= 12:
        return fallback
    return month


def _start_month(value: Any) -> int:
    return _month_or(value, 1)


def _end_month(value: Any) -> int:
    return _month_or(value, 12)


def _text_or_none(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


FiniteNumber = Annotated[float, BeforeValidator(_finite_number)]
LenientNumber = Annotated[float, BeforeValidator(_number_or_zero)]
WholeYear = Annotated[int, BeforeValidator(_whole_number)]
StartMonth = Annotated[int, BeforeValidator(_start_month)]
EndMonth = Annotated[int, BeforeValidator(_end_month)]
OptionalText = Annotated[Optional[str], BeforeValidator(_text_or_none)]


def _fill_from_aliases(data: Dict[str, Any], key: str, *aliases: str) -> None:
    """Populate ``key`` from the first alias that carries a value."""
    if data.get(key) is not None:
        return
    for alias in aliases:
        if data.get(alias) is not None:
            data[key] = data[alias]
            return


# ---------------------------------------------------------------------------
# Category / model inference
# ---------------------------------------------------------------------------

_CATEGORY_TOKENS: Dict[str, str] = {
    "eldercare": ELDER_CARE,
    "elder": ELDER_CARE,
    "parent": ELDER_CARE,
    "parents": ELDER_CARE,
    "childsupport": CHILD_SUPPORT,
    "child": CHILD_SUPPORT,
    "children": CHILD_SUPPORT,
    "kid": CHILD_SUPPORT,
    "kids": CHILD_SUPPORT,
}

_CHILD_KEYWORDS = ("child", "kid", "college")
_ELDER_KEYWORDS = ("elder", "parent", "care")


def infer_category(explicit: Optional[str], name: Optional[str]) -> str:
    """Explicit category/type first, then keywords in the name, else elder care."""
    if explicit:
        token = re.sub(r"[^a-z]", "", explicit.lower())
        if token in _CATEGORY_TOKENS:
            return _CATEGORY_TOKENS[token]
    text = (name or "").lower()
    if any(k in text for k in _CHILD_KEYWORDS):
        return CHILD_SUPPORT
    if any(k in text for k in _ELDER_KEYWORDS):
        return ELDER_CARE
    return ELDER_CARE


def infer_model(explicit: Optional[str], annual_increase: float) -> str:
    if explicit and explicit.lower() in SUPPORT_MODEL_NAMES:
        return explicit.lower()
    return LINEAR_MODEL if annual_increase != 0 else FLAT_MODEL


# ---------------------------------------------------------------------------
# Entry models
# ---------------------------------------------------------------------------

class MortgageEntry(BaseModel):
    """One mortgage as found in a payload (camelCase keys, loose types)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: OptionalText = None
    principal: FiniteNumber
    rate: FiniteNumber
    payment_monthly: FiniteNumber = Field(alias="paymentMonthly")
    start_year: WholeYear = Field(alias="startYear")
    start_month: StartMonth = Field(default=1, alias="startMonth")
    end_year: WholeYear = Field(alias="endYear")
    end_month: EndMonth = Field(default=12, alias="endMonth")

    @model_validator(mode="before")
    @classmethod
    def _resolve_aliases(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        _fill_from_aliases(data, "principal", "balance", "amount")
        _fill_from_aliases(data, "rate", "interestRate")
        _fill_from_aliases(data, "paymentMonthly", "payment", "monthlyPayment")
        return data

    @field_validator("principal", "payment_monthly")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("rate")
    @classmethod
    def _non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("must be >= 0")
        return v

    @model_validator(mode="after")
    def _window_order(self) -> "MortgageEntry":
        if self.end_year < self.start_year:
            raise ValueError("endYear must be >= startYear")
        return self

    def to_plan(self) -> MortgagePlan:
        return MortgagePlan(
            name=self.name or "",
            principal=self.principal,
            rate=self.rate,
            payment_monthly=self.payment_monthly,
            start_year=self.start_year,
            start_month=self.start_month,
            end_year=self.end_year,
            end_month=self.end_month,
        )


class SupportEntry(BaseModel):
    """One dependent-support plan as found in a payload."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: OptionalText = None
    category: OptionalText = None
    start_year: WholeYear = Field(alias="startYear")
    end_year: WholeYear = Field(alias="endYear")
    annual_amount: FiniteNumber = Field(alias="annualAmount")
    annual_increase: LenientNumber = Field(default=0.0, alias="annualIncrease")
    growth_model: OptionalText = Field(default=None, alias="model")

    @model_validator(mode="before")
    @classmethod
    def _resolve_aliases(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        _fill_from_aliases(data, "category", "type", "kind")
        _fill_from_aliases(data, "annualAmount", "firstYearAmount", "amount", "baseAnnual")
        _fill_from_aliases(data, "annualIncrease", "increase")
        _fill_from_aliases(data, "endYear", "stopYear", "finishYear")
        if data.get("endYear") is None:
            start = as_number(data.get("startYear"))
            years = as_number(data.get("years", data.get("duration")))
            if start is not None and years is not None and years > 0:
                data["endYear"] = start + math.ceil(years) - 1
            else:
                data["endYear"] = data.get("startYear")
        if data.get("annualIncrease") is None:
            data.pop("annualIncrease", None)
        return data

    @field_validator("annual_amount")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @model_validator(mode="after")
    def _window_order(self) -> "SupportEntry":
        if self.end_year < self.start_year:
            raise ValueError("endYear must be >= startYear")
        return self

    def to_plan(self) -> SupportPlan:
        return SupportPlan(
            name=self.name or "",
            category=infer_category(self.category, self.name),
            start_year=self.start_year,
            end_year=self.end_year,
            annual_amount=self.annual_amount,
            model=infer_model(self.growth_model, self.annual_increase),
            annual_increase=self.annual_increase,
        )


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@dataclass
class DecodeReport:
    """What happened while turning an envelope into ScenarioParams."""

    used_defaults: bool = False
    warnings: List[str] = field(default_factory=list)
    dropped: List[str] = field(default_factory=list)
    applied_rules: List[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return not (self.used_defaults or self.warnings or self.dropped)

    def summary(self) -> str:
        lines = []
        if self.used_defaults:
            lines.append("Scenario could not be read; using generated defaults.")
        if self.applied_rules:
            lines.append(f"Collections read via: {', '.join(self.applied_rules)}")
        if self.dropped:
            lines.append(f"DROPPED ENTRIES ({len(self.dropped)}):")
            for d in self.dropped:
                lines.append(f"  ✗ {d}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ Scenario decoded cleanly.")
        return "\n".join(lines)


@dataclass
class ValidationResult:
    """Structural checks on a fully built ScenarioParams."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0


def validate_params(params: ScenarioParams) -> ValidationResult:
    """
    Check the invariants the engine relies on.
    Errors are blocking; warnings flag values that are legal but unusual.
    """
    result = ValidationResult()

    # --- Ages ---
    if params.retirement_age < params.current_age:
        result.errors.append("retirementAge is below currentAge.")
    if params.max_age < params.retirement_age:
        result.errors.append("maxAge is below retirementAge.")
    if params.max_age > MAX_AGE:
        result.errors.append(f"maxAge is above {MAX_AGE}.")

    # --- Balances / rates ---
    for label in ("stocks0", "cash0", "real_estate0", "base_monthly", "vacation_monthly",
                  "home_upgrades_annual", "contribution0"):
        if getattr(params, label) < 0:
            result.errors.append(f"{label} is negative.")
    for label in ("stock_return", "cash_return", "real_estate_return", "inflation"):
        value = getattr(params, label)
        if value < 0:
            result.errors.append(f"{label} is negative.")
        elif value > 1.0:
            result.warnings.append(
                f"{label} = {value} — check if rates are in percent vs decimal form."
            )

    # --- Collections ---
    for m in params.mortgages:
        if m.principal <= 0 or m.payment_monthly <= 0 or m.rate < 0:
            result.errors.append(f"{m.name or 'mortgage'} has non-positive terms.")
        if (m.end_year, m.end_month) < (m.start_year, m.start_month):
            result.errors.append(f"{m.name or 'mortgage'} ends before it starts.")
        if not (1 <= m.start_month <= 12 and 1 <= m.end_month <= 12):
            result.errors.append(f"{m.name or 'mortgage'} has a month outside 1-12.")
        if m.payment_monthly <= m.principal * m.rate / 12:
            result.warnings.append(
                f"{m.name or 'mortgage'} payment does not cover interest; balance never falls."
            )
    for s in params.supports:
        if s.annual_amount <= 0:
            result.errors.append(f"{s.name or 'support'} has a non-positive amount.")
        if s.end_year < s.start_year:
            result.errors.append(f"{s.name or 'support'} ends before it starts.")
        if s.category not in (ELDER_CARE, CHILD_SUPPORT):
            result.errors.append(f"{s.name or 'support'} has unknown category {s.category!r}.")
        if s.model not in SUPPORT_MODEL_NAMES:
            result.errors.append(f"{s.name or 'support'} has unknown model {s.model!r}.")

    return result
