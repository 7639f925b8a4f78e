"""
Shared fixtures: small, fully specified households so engine and codec
tests never depend on the clock-seeded defaults.
"""

from datetime import datetime, timezone

import pytest

from core.params import MortgagePlan, ScenarioParams, SupportPlan
from core.schema import CHILD_SUPPORT, ELDER_CARE, FLAT_MODEL, LINEAR_MODEL

FIXED_NOW = datetime(2024, 6, 15, 9, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def mortgage():
    return MortgagePlan(
        name="Mortgage 1",
        principal=400_000,
        rate=0.045,
        payment_monthly=3_500,
        start_year=2025,
        start_month=1,
        end_year=2040,
        end_month=6,
    )


@pytest.fixture
def base_params(mortgage):
    return ScenarioParams(
        start_year=2025,
        current_age=40,
        retirement_age=60,
        max_age=90,
        stocks0=1_000_000,
        cash0=200_000,
        real_estate0=900_000,
        stock_return=0.07,
        cash_return=0.02,
        real_estate_return=0.03,
        inflation=0.025,
        contribution0=50_000,
        contribution_growth=0.03,
        base_monthly=6_000,
        vacation_monthly=1_000,
        home_upgrades_annual=12_000,
        mortgages=(mortgage,),
    )


@pytest.fixture
def supported_params(base_params):
    """base_params plus one elder-care and one child-support plan, canonically named."""
    return base_params.replace(
        supports=(
            SupportPlan(
                name="Parent",
                category=ELDER_CARE,
                start_year=2026,
                end_year=2035,
                annual_amount=12_000,
                model=LINEAR_MODEL,
                annual_increase=500.0,
            ),
            SupportPlan(
                name="Child 1",
                category=CHILD_SUPPORT,
                start_year=2030,
                end_year=2047,
                annual_amount=15_000,
                model=FLAT_MODEL,
                annual_increase=0.0,
            ),
        )
    )


@pytest.fixture
def broke_params(base_params):
    """Already retired with tiny reserves: every year is a shortfall."""
    return base_params.replace(
        current_age=70,
        retirement_age=70,
        max_age=75,
        stocks0=10_000,
        cash0=5_000,
        contribution0=0,
        mortgages=(),
    )
