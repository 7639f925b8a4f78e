"""
Row sequences → pandas tables.

rows_to_frame  one flat row per simulated year (table view, CSV export)
chart_frame    the four trend lines the sandbox plots, optionally in
               today's dollars (deflated by (1+inflation)^(year-start_year))
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd

from core.params import ScenarioParams
from engine.rows import Row

FRAME_COLUMNS = [
    "year", "age", "stock_return_applied", "contribution", "income",
    "base", "mortgage", "vacation", "upgrades", "elder_care", "child_support",
    "support_total", "total_expenses", "savings_funded_expenses",
    "stocks_end", "cash_end", "real_estate_end", "mortgage_balance",
    "net_worth", "shortfall",
]


def rows_to_frame(rows: Sequence[Row]) -> pd.DataFrame:
    records = []
    for r in rows:
        e = r.expenses
        t = r.totals
        records.append({
            "year": r.year,
            "age": r.age,
            "stock_return_applied": r.stock_return_applied,
            "contribution": r.contribution,
            "income": r.income,
            "base": e.base,
            "mortgage": e.mortgage,
            "vacation": e.vacation,
            "upgrades": e.upgrades,
            "elder_care": e.elder_care,
            "child_support": e.child_support,
            "support_total": e.support_total,
            "total_expenses": t.total_expenses,
            "savings_funded_expenses": t.savings_funded_expenses,
            "stocks_end": t.stocks_end,
            "cash_end": t.cash_end,
            "real_estate_end": t.real_estate_end,
            "mortgage_balance": t.mortgage_balance,
            "net_worth": t.net_worth,
            "shortfall": t.shortfall,
        })
    return pd.DataFrame(records, columns=FRAME_COLUMNS)


def real_factors(years: Sequence[int], params: ScenarioParams) -> np.ndarray:
    """1 / (1+inflation)^(year - start_year) for each year."""
    offsets = np.asarray(years, dtype=float) - params.start_year
    return 1.0 / np.power(1.0 + params.inflation, offsets)


def chart_frame(
    rows: Sequence[Row],
    params: ScenarioParams,
    *,
    real_dollars: bool = False,
) -> pd.DataFrame:
    """
    Year-indexed trend lines: net_worth, stocks, cash, real_estate_equity.
    """
    years = [r.year for r in rows]
    out = pd.DataFrame({
        "year": years,
        "net_worth": [r.totals.net_worth for r in rows],
        "stocks": [r.totals.stocks_end for r in rows],
        "cash": [r.totals.cash_end for r in rows],
        "real_estate_equity": [r.totals.real_estate_equity for r in rows],
    })
    if real_dollars and len(out):
        factors = real_factors(years, params)
        for col in ("net_worth", "stocks", "cash", "real_estate_equity"):
            out[col] = out[col].to_numpy(dtype=float) * factors
    return out
