"""
Support schedules — convert dependent-support plans into yearly cash obligations.
"""

from .base import SupportModel, SupportTotals
from .flat import FlatSupportModel
from .linear import LinearSupportModel
from .registry import SUPPORT_MODELS, get_support_model, support_amount, support_totals

__all__ = [
    "SupportModel",
    "SupportTotals",
    "FlatSupportModel",
    "LinearSupportModel",
    "SUPPORT_MODELS",
    "get_support_model",
    "support_amount",
    "support_totals",
]
