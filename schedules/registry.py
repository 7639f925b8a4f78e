"""
Support model registry and the per-year evaluators the engine calls.
"""

from __future__ import annotations

from typing import Dict, Iterable

from core.params import SupportPlan

from .base import SupportModel, SupportTotals
from .flat import FlatSupportModel
from .linear import LinearSupportModel

SUPPORT_MODELS: Dict[str, SupportModel] = {
    model.name: model for model in (FlatSupportModel(), LinearSupportModel())
}


def get_support_model(name: str) -> SupportModel:
    try:
        return SUPPORT_MODELS[name]
    except KeyError:
        raise ValueError(f"Unknown support model: {name!r}") from None


def support_amount(plan: SupportPlan, year: int) -> float:
    """Cash owed for ``plan`` in calendar ``year`` (0 outside its window)."""
    return get_support_model(plan.model).amount(plan, year)


def support_totals(plans: Iterable[SupportPlan], year: int) -> SupportTotals:
    elder = 0.0
    child = 0.0
    for plan in plans:
        amount = support_amount(plan, year)
        if plan.is_child_support:
            child += amount
        else:
            elder += amount
    return SupportTotals(elder_care=elder, child_support=child)
