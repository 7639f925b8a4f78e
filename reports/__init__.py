"""
Reports — summary aggregates and tabular series built from projection rows.
"""

from .series import chart_frame, real_factors, rows_to_frame
from .summary import ProjectionSummary, income_funded_subtotal, summarize_projection

__all__ = [
    "chart_frame",
    "real_factors",
    "rows_to_frame",
    "ProjectionSummary",
    "income_funded_subtotal",
    "summarize_projection",
]
