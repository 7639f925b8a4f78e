"""
Projection configuration.
Scenario inputs live in core/params.py (ScenarioParams); this only holds
engine knobs that are not part of a household scenario.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ProjectionConfig:
    # remaining need above this after both reserves are drained is a shortfall
    shortfall_tolerance: float = 1e-6

    months_per_year: int = 12
