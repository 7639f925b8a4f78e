"""
Projection runner — walks one scenario year by year into a list of Rows.

State carried from year to year: stocks, cash, real estate, and one
MortgageState per loan. Everything else is recomputed from the scenario and
the year index, so a run is a pure function of ScenarioParams:

  1. age / working status        (working iff age < retirement_age)
  2. contribution                contribution0 · (1+g)^i while working
  3. inflated base, vacation, home upgrades
  4. mortgage amortization       engine/amortization.py
  5. support obligations         schedules/
  6. income-funded vs savings-funded split
  7. applied stock return        engine/glidepath.py
  8. growth, then contribution
  9. waterfall                   engine/waterfall.py
 10. net worth (0 on shortfall)
"""

from __future__ import annotations

from typing import List, Optional

from core.config import ProjectionConfig
from core.params import ScenarioParams
from core.utils import growth_factor
from schedules import support_totals

from .amortization import amortize_all, init_states
from .glidepath import applied_stock_return
from .rows import ExpenseBreakdown, Row, YearTotals
from .waterfall import apply_waterfall


def _check_params(params: ScenarioParams) -> None:
    if params.retirement_age < params.current_age:
        raise ValueError(
            f"retirement_age ({params.retirement_age}) must be >= current_age ({params.current_age})."
        )
    if params.max_age < params.retirement_age:
        raise ValueError(
            f"max_age ({params.max_age}) must be >= retirement_age ({params.retirement_age})."
        )


def run_projection(
    params: ScenarioParams,
    config: Optional[ProjectionConfig] = None,
) -> List[Row]:
    """
    Project ``params`` from start_year through the year the household reaches max_age.

    Parameters
    ----------
    params : ScenarioParams
        Scenario to simulate. Never mutated.
    config : ProjectionConfig, optional
        Engine knobs (shortfall tolerance, months per year).

    Returns
    -------
    List[Row], one per year, ``params.horizon_years`` long.
    """
    _check_params(params)
    cfg = config or ProjectionConfig()

    stocks = float(params.stocks0)
    cash = float(params.cash0)
    real_estate = float(params.real_estate0)
    mortgages = init_states(params.mortgages)

    rows: List[Row] = []
    for year in range(params.start_year, params.end_year + 1):
        i = year - params.start_year
        age = params.current_age + i
        working = age < params.retirement_age

        contribution = (
            params.contribution0 * growth_factor(params.contribution_growth, i) if working else 0.0
        )

        inflation = growth_factor(params.inflation, i)
        base = params.base_monthly * 12 * inflation
        vacation = params.vacation_monthly * 12 * inflation
        upgrades = params.home_upgrades_annual * inflation

        mortgage_expense, mortgage_balance = amortize_all(mortgages, year, cfg.months_per_year)
        support = support_totals(params.supports, year)

        expenses = ExpenseBreakdown(
            base=base,
            mortgage=mortgage_expense,
            vacation=vacation,
            upgrades=upgrades,
            elder_care=support.elder_care,
            child_support=support.child_support,
        )
        income_funded = expenses.income_funded
        total_expenses = income_funded + expenses.support_total
        income = income_funded if working else 0.0
        savings_funded = max(0.0, total_expenses - income)

        stock_return = applied_stock_return(params, age)
        stocks_grown = stocks * (1 + stock_return) + contribution
        cash_grown = cash * (1 + params.cash_return)
        real_estate = real_estate * (1 + params.real_estate_return)

        drawn = apply_waterfall(
            savings_funded,
            stocks_grown,
            cash_grown,
            spend_from_stocks=params.spend_from_stocks,
            tolerance=cfg.shortfall_tolerance,
        )
        stocks = drawn.stocks
        cash = drawn.cash

        if drawn.shortfall:
            net_worth = 0.0
        else:
            net_worth = stocks + cash + (real_estate - mortgage_balance)

        rows.append(
            Row(
                year=year,
                age=age,
                stock_return_applied=stock_return,
                contribution=contribution,
                income=income,
                expenses=expenses,
                totals=YearTotals(
                    total_expenses=total_expenses,
                    savings_funded_expenses=savings_funded,
                    stocks_end=stocks,
                    cash_end=cash,
                    real_estate_end=real_estate,
                    mortgage_balance=mortgage_balance,
                    net_worth=net_worth,
                    shortfall=drawn.shortfall,
                ),
            )
        )

    return rows


# The public name used by collaborators: project(params) -> rows
project = run_projection
