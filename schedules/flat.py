"""
FlatSupportModel — the same annual amount every year of the window.
"""

from __future__ import annotations

from core.params import SupportPlan
from core.schema import FLAT_MODEL

from .base import SupportModel


class FlatSupportModel(SupportModel):
    name = FLAT_MODEL

    def in_window_amount(self, plan: SupportPlan, year: int) -> float:
        return float(plan.annual_amount)
