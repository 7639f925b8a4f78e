"""
Core package — scenario data model, field schema, configuration, and shared utilities.
No business logic lives here.
"""

from .schema import (
    CHILD_SUPPORT,
    ELDER_CARE,
    ENVELOPE_VERSION,
    FLAT_MODEL,
    LINEAR_MODEL,
    SCALAR_FIELDS,
    SCENARIO_QUERY_KEY,
)
from .config import ProjectionConfig
from .params import MortgagePlan, ScenarioParams, SupportPlan
from .utils import as_number, as_whole_number, clamp, excel_round, growth_factor

__all__ = [
    "CHILD_SUPPORT",
    "ELDER_CARE",
    "ENVELOPE_VERSION",
    "FLAT_MODEL",
    "LINEAR_MODEL",
    "SCALAR_FIELDS",
    "SCENARIO_QUERY_KEY",
    "ProjectionConfig",
    "MortgagePlan",
    "ScenarioParams",
    "SupportPlan",
    "as_number",
    "as_whole_number",
    "clamp",
    "excel_round",
    "growth_factor",
]
