"""
Projection engine — mortgage amortization, reserve waterfall, and the yearly runner.
"""

from .amortization import MortgageState, amortize_all, level_payment
from .glidepath import applied_stock_return, glidepath_return
from .rows import ExpenseBreakdown, Row, YearTotals
from .runner import project, run_projection
from .waterfall import WaterfallResult, apply_waterfall

__all__ = [
    "MortgageState",
    "amortize_all",
    "level_payment",
    "applied_stock_return",
    "glidepath_return",
    "ExpenseBreakdown",
    "Row",
    "YearTotals",
    "project",
    "run_projection",
    "WaterfallResult",
    "apply_waterfall",
]
