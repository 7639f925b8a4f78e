"""
Engine output — one immutable Row per simulated year.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ExpenseBreakdown:
    base: float
    mortgage: float
    vacation: float
    upgrades: float
    elder_care: float
    child_support: float

    @property
    def support_total(self) -> float:
        return self.elder_care + self.child_support

    @property
    def income_funded(self) -> float:
        """Costs assumed to be covered by earnings while working."""
        return self.base + self.mortgage + self.vacation + self.upgrades


@dataclass(frozen=True)
class YearTotals:
    total_expenses: float
    savings_funded_expenses: float
    stocks_end: float
    cash_end: float
    real_estate_end: float
    mortgage_balance: float
    net_worth: float
    shortfall: bool = False

    @property
    def real_estate_equity(self) -> float:
        return self.real_estate_end - self.mortgage_balance


@dataclass(frozen=True)
class Row:
    year: int
    age: int
    stock_return_applied: float
    contribution: float
    income: float
    expenses: ExpenseBreakdown
    totals: YearTotals
