"""
LinearSupportModel — a first-year amount growing by a fixed increment.

Typical for elder care, where costs step up each year as needs grow:
    year 0: annual_amount
    year k: annual_amount + k * annual_increase

A negative increment is allowed; once the curve goes below zero the year
costs nothing (clamped per year, the deficit is not carried forward).
"""

from __future__ import annotations

from core.params import SupportPlan
from core.schema import LINEAR_MODEL

from .base import SupportModel


class LinearSupportModel(SupportModel):
    name = LINEAR_MODEL

    def in_window_amount(self, plan: SupportPlan, year: int) -> float:
        return plan.annual_amount + plan.annual_increase * (year - plan.start_year)
