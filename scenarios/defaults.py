"""
Smart defaults — a randomized but plausible starting household.

Every draw comes from DeterministicRng, so a given seed (or a given UTC hour)
always produces the same scenario. No other randomness source is touched.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

from dateutil.relativedelta import relativedelta

from core.params import MortgagePlan, ScenarioParams
from core.utils import clamp, excel_round
from engine.amortization import level_payment

from .rng import DeterministicRng, seed_from_datetime

# Fixed market assumptions
STOCK_RETURN = 0.07
CASH_RETURN = 0.02
INFLATION = 0.028

# Glidepath: expected equity return by years to retirement
GLIDEPATH_DEFAULTS = {
    "gp_ret_minus20": 0.10,
    "gp_ret_minus10": 0.085,
    "gp_ret_minus5": 0.065,
    "gp_ret0": 0.05,
    "gp_post_ret": 0.04,
}


def mortgage_payment(principal: float, annual_rate: float, term_years: int) -> float:
    """Level monthly payment P·r / (1 − (1+r)^-n), rounded to whole currency units."""
    pmt = level_payment(principal, annual_rate / 12.0, term_years * 12)
    return float(excel_round(pmt, 0))


def generate_default_params(
    now: Optional[datetime] = None,
    *,
    seed: Optional[int] = None,
) -> ScenarioParams:
    """
    Build the default scenario.

    Parameters
    ----------
    now : datetime, optional
        Clock used for the start year and (unless ``seed`` is given) the seed.
        Defaults to the current UTC time.
    seed : int, optional
        Explicit RNG seed; overrides the clock-derived one.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    rng = DeterministicRng(seed if seed is not None else seed_from_datetime(now))

    start_year = now.year + 1

    current_age = rng.randint(32, 46)
    rng.randint(-3, 3)  # spouse age offset, unused; every later draw follows it
    retirement_age = int(clamp(current_age + rng.randint(18, 24), current_age + 15, 68))
    max_age = retirement_age + rng.randint(25, 33)

    stocks0 = rng.rounded(900_000, 2_200_000, 25_000)
    cash0 = rng.rounded(120_000, 260_000, 10_000)
    real_estate0 = rng.rounded(850_000, 1_350_000, 25_000)

    principal = rng.rounded(
        float(excel_round(real_estate0 * 0.35, 0)),
        float(excel_round(real_estate0 * 0.6, 0)),
        10_000,
    )
    mortgage_rate = rng.rounded(0.0375, 0.055, 0.0005)
    term_years = rng.randint(15, 25)
    payoff = date(start_year, 1, 1) + relativedelta(years=term_years, month=rng.randint(1, 12))
    mortgage = MortgagePlan(
        name="Mortgage 1",
        principal=principal,
        rate=mortgage_rate,
        payment_monthly=mortgage_payment(principal, mortgage_rate, term_years),
        start_year=start_year,
        start_month=1,
        end_year=payoff.year,
        end_month=payoff.month,
    )

    real_estate_return = rng.rounded(0.025, 0.04, 0.0005)

    base_monthly = rng.rounded(6_000, 8_500, 250)
    vacation_monthly = rng.rounded(900, 1_400, 50)
    home_upgrades_annual = rng.rounded(10_000, 18_000, 1_000)

    contribution0 = rng.rounded(40_000, 70_000, 2_500)
    contribution_growth = rng.rounded(0.025, 0.04, 0.0005)

    return ScenarioParams(
        start_year=start_year,
        current_age=current_age,
        retirement_age=retirement_age,
        max_age=max_age,
        stocks0=stocks0,
        cash0=cash0,
        real_estate0=real_estate0,
        stock_return=STOCK_RETURN,
        cash_return=CASH_RETURN,
        real_estate_return=real_estate_return,
        inflation=INFLATION,
        use_glidepath=True,
        contribution0=contribution0,
        contribution_growth=contribution_growth,
        base_monthly=base_monthly,
        vacation_monthly=vacation_monthly,
        home_upgrades_annual=home_upgrades_annual,
        spend_from_stocks=True,
        mortgages=(mortgage,),
        supports=(),
        **GLIDEPATH_DEFAULTS,
    )
