"""
Scenario data model — the immutable inputs of one projection run.

ScenarioParams is a value type: the UI layer never patches it in place, it
builds a new one (``params.replace(...)``) and re-runs the engine.
Python attributes are snake_case; the envelope payload uses camelCase keys
(see core/schema.py for the mapping).
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Mapping, Tuple

from .schema import (
    CHILD_SUPPORT,
    ELDER_CARE,
    MORTGAGE_FIELDS,
    SCALAR_FIELDS,
    SUPPORT_FIELDS,
)


@dataclass(frozen=True)
class MortgagePlan:
    """One independent amortizing loan. Several may coexist and are summed."""

    name: str
    principal: float
    rate: float  # annual, decimal
    payment_monthly: float
    start_year: int
    start_month: int
    end_year: int
    end_month: int

    def to_payload(self) -> Dict[str, Any]:
        values = asdict(self)
        return {camel: values[snake] for camel, snake in MORTGAGE_FIELDS.items()}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "MortgagePlan":
        return cls(**{snake: payload[camel] for camel, snake in MORTGAGE_FIELDS.items()})


@dataclass(frozen=True)
class SupportPlan:
    """
    A recurring, savings-funded obligation towards a dependent.

    ``model`` is "flat" (same amount every year) or "linear"
    (``annual_amount + annual_increase * years_since_start``).
    """

    name: str
    category: str  # ELDER_CARE or CHILD_SUPPORT
    start_year: int
    end_year: int  # inclusive
    annual_amount: float
    model: str = "flat"
    annual_increase: float = 0.0

    @property
    def is_elder_care(self) -> bool:
        return self.category == ELDER_CARE

    @property
    def is_child_support(self) -> bool:
        return self.category == CHILD_SUPPORT

    def to_payload(self) -> Dict[str, Any]:
        values = asdict(self)
        return {camel: values[snake] for camel, snake in SUPPORT_FIELDS.items()}

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SupportPlan":
        return cls(**{snake: payload[camel] for camel, snake in SUPPORT_FIELDS.items()})


@dataclass(frozen=True)
class ScenarioParams:
    """Complete, immutable-per-run input of the projection engine."""

    # Temporal anchors
    start_year: int
    current_age: int
    retirement_age: int
    max_age: int

    # Starting balances
    stocks0: float
    cash0: float
    real_estate0: float

    # Return / inflation rates
    stock_return: float
    cash_return: float
    real_estate_return: float
    inflation: float

    # Glidepath bands, keyed by years to retirement
    use_glidepath: bool = True
    gp_ret_minus20: float = 0.10
    gp_ret_minus10: float = 0.085
    gp_ret_minus5: float = 0.065
    gp_ret0: float = 0.05
    gp_post_ret: float = 0.04

    # Contributions (while working)
    contribution0: float = 0.0
    contribution_growth: float = 0.0

    # Recurring expense bases, today's money
    base_monthly: float = 0.0
    vacation_monthly: float = 0.0
    home_upgrades_annual: float = 0.0

    spend_from_stocks: bool = True

    mortgages: Tuple[MortgagePlan, ...] = field(default_factory=tuple)
    supports: Tuple[SupportPlan, ...] = field(default_factory=tuple)

    @property
    def end_year(self) -> int:
        """Last simulated calendar year (inclusive)."""
        return self.start_year + (self.max_age - self.current_age)

    @property
    def horizon_years(self) -> int:
        return self.end_year - self.start_year + 1

    @property
    def retirement_year(self) -> int:
        return self.start_year + (self.retirement_age - self.current_age)

    def replace(self, **changes: Any) -> "ScenarioParams":
        return replace(self, **changes)

    def to_payload(self) -> Dict[str, Any]:
        """camelCase mapping as stored inside the scenario envelope."""
        payload: Dict[str, Any] = {
            camel: getattr(self, snake) for camel, (snake, _kind) in SCALAR_FIELDS.items()
        }
        payload["mortgages"] = [m.to_payload() for m in self.mortgages]
        payload["supports"] = [s.to_payload() for s in self.supports]
        return payload

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScenarioParams":
        """
        Build from a complete, already-sanitized payload.
        Untrusted input goes through codec.decode_scenario() instead.
        """
        kwargs: Dict[str, Any] = {
            snake: payload[camel] for camel, (snake, _kind) in SCALAR_FIELDS.items()
        }
        kwargs["mortgages"] = tuple(
            MortgagePlan.from_payload(m) for m in payload.get("mortgages", ())
        )
        kwargs["supports"] = tuple(
            SupportPlan.from_payload(s) for s in payload.get("supports", ())
        )
        return cls(**kwargs)
