"""
Base classes for support schedules.
A schedule turns one SupportPlan into the cash it costs in a given year.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.params import SupportPlan


@dataclass(frozen=True)
class SupportTotals:
    """One year's support obligation, split by category."""

    elder_care: float = 0.0
    child_support: float = 0.0

    @property
    def total(self) -> float:
        return self.elder_care + self.child_support


class SupportModel:
    """
    Interface for support growth models.

    ``amount()`` handles the [start_year, end_year] window and the zero floor;
    subclasses only describe the in-window curve.
    """

    name: str = ""

    def amount(self, plan: SupportPlan, year: int) -> float:
        if year < plan.start_year or year > plan.end_year:
            return 0.0
        return max(0.0, self.in_window_amount(plan, year))

    def in_window_amount(self, plan: SupportPlan, year: int) -> float:
        raise NotImplementedError
