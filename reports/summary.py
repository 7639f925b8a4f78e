"""
Projection summary — the handful of numbers the sandbox shows next to the chart.

Answers a household can act on:
  "What do we spend today that earnings must cover?"  → income_funded_subtotal
  "Do the reserves last?"                             → first shortfall year
  "What are we worth at retirement / at the end?"     → retirement / final net worth
  "When is the house ours?"                           → mortgage payoff year
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from core.params import ScenarioParams
from engine.rows import Row


def income_funded_subtotal(params: ScenarioParams) -> float:
    """Annual spending covered by earnings in today's money (incl. mortgage payments)."""
    mortgage_payments = sum(m.payment_monthly * 12 for m in params.mortgages)
    return (
        params.base_monthly * 12
        + params.vacation_monthly * 12
        + params.home_upgrades_annual
        + mortgage_payments
    )


@dataclass
class ProjectionSummary:
    start_year: int
    end_year: int
    n_years: int

    income_funded_subtotal: float

    final_net_worth: float
    peak_net_worth: float
    peak_year: int
    retirement_year: int
    net_worth_at_retirement: Optional[float]

    first_shortfall_year: Optional[int]
    shortfall_years: int

    mortgage_payoff_year: Optional[int]

    flags: List[str] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        """Display-friendly two-column table."""
        def money(v: Optional[float]) -> str:
            return "—" if v is None else f"{v:,.0f}"

        def year(v: Optional[int]) -> str:
            return "—" if v is None else str(v)

        rows = [
            {"Metric": "Horizon", "Value": f"{self.start_year}–{self.end_year} ({self.n_years} years)"},
            {"Metric": "Income-funded spending (annual)", "Value": money(self.income_funded_subtotal)},
            {"Metric": "Net worth at retirement", "Value": money(self.net_worth_at_retirement)},
            {"Metric": "Peak net worth", "Value": f"{money(self.peak_net_worth)} ({self.peak_year})"},
            {"Metric": "Final net worth", "Value": money(self.final_net_worth)},
            {"Metric": "First shortfall year", "Value": year(self.first_shortfall_year)},
            {"Metric": "Shortfall years", "Value": str(self.shortfall_years)},
            {"Metric": "Mortgage paid off", "Value": year(self.mortgage_payoff_year)},
        ]
        for f in self.flags:
            rows.append({"Metric": "Flag", "Value": f})
        return pd.DataFrame(rows)


def summarize_projection(params: ScenarioParams, rows: Sequence[Row]) -> ProjectionSummary:
    if not rows:
        raise ValueError("No projection rows to summarize.")

    years = np.array([r.year for r in rows], dtype=int)
    net_worth = np.array([r.totals.net_worth for r in rows], dtype=float)
    shortfall = np.array([r.totals.shortfall for r in rows], dtype=bool)
    mortgage_balance = np.array([r.totals.mortgage_balance for r in rows], dtype=float)

    peak_idx = int(np.argmax(net_worth))

    first_shortfall: Optional[int] = None
    if shortfall.any():
        first_shortfall = int(years[np.argmax(shortfall)])

    payoff: Optional[int] = None
    if params.mortgages:
        paid = mortgage_balance <= 0
        if paid.any():
            payoff = int(years[np.argmax(paid)])

    at_retirement: Optional[float] = None
    retirement_mask = years == params.retirement_year
    if retirement_mask.any():
        at_retirement = float(net_worth[retirement_mask][0])

    flags: List[str] = []
    if first_shortfall is not None:
        flags.append(f"Reserves exhausted in {first_shortfall} (age {rows[int(np.argmax(shortfall))].age}).")
    if params.mortgages and payoff is None:
        flags.append("Mortgage balance remains at the end of the projection.")
    if float(net_worth[-1]) < float(net_worth[0]):
        flags.append("Net worth ends below its first-year value.")

    return ProjectionSummary(
        start_year=int(years[0]),
        end_year=int(years[-1]),
        n_years=len(rows),
        income_funded_subtotal=income_funded_subtotal(params),
        final_net_worth=float(net_worth[-1]),
        peak_net_worth=float(net_worth[peak_idx]),
        peak_year=int(years[peak_idx]),
        retirement_year=params.retirement_year,
        net_worth_at_retirement=at_retirement,
        first_shortfall_year=first_shortfall,
        shortfall_years=int(shortfall.sum()),
        mortgage_payoff_year=payoff,
        flags=flags,
    )
