"""
Mortgage amortization — month-by-month debt service for each loan.

Each MortgagePlan gets its own MortgageState holding the remaining balance.
The state is engine-local: it is built from the plan at the start of a run
and never written back to the plan.

Per active month:
    interest       = balance * rate / 12
    principal_paid = clamp(payment - interest, 0, balance)
    expense       += principal_paid + interest
    balance       -= principal_paid
A loan is inactive before (start_year, start_month), after
(end_year, end_month), and once its balance reaches zero.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from core.params import MortgagePlan
from core.utils import clamp


def level_payment(balance: float, monthly_rate: float, n_months: int) -> float:
    """Standard fully-amortizing level payment (PMT) with near-zero rate guard."""
    if n_months <= 0:
        return float(balance)
    if abs(monthly_rate) < 1e-12:
        return float(balance) / n_months
    return float(balance) * monthly_rate / (1 - (1 + monthly_rate) ** -n_months)


@dataclass
class MortgageState:
    plan: MortgagePlan
    balance: float

    @classmethod
    def from_plan(cls, plan: MortgagePlan) -> "MortgageState":
        return cls(plan=plan, balance=float(plan.principal))

    @property
    def paid_off(self) -> bool:
        return self.balance <= 0

    def in_window(self, year: int, month: int) -> bool:
        p = self.plan
        return (p.start_year, p.start_month) <= (year, month) <= (p.end_year, p.end_month)

    def pay_month(self) -> float:
        """Apply one scheduled payment; returns the cash paid (principal + interest)."""
        interest = self.balance * (self.plan.rate / 12.0)
        principal_paid = clamp(self.plan.payment_monthly - interest, 0.0, self.balance)
        self.balance -= principal_paid
        return principal_paid + interest

    def amortize_year(self, year: int, months_per_year: int = 12) -> float:
        """Run calendar ``year`` and return the year's mortgage expense."""
        expense = 0.0
        for month in range(1, months_per_year + 1):
            if self.paid_off:
                break
            if not self.in_window(year, month):
                continue
            expense += self.pay_month()
        return expense


def amortize_all(
    states: Iterable[MortgageState],
    year: int,
    months_per_year: int = 12,
) -> Tuple[float, float]:
    """
    Advance every mortgage through ``year``.

    Returns
    -------
    (annual_expense, ending_balance) summed over all loans.
    """
    expense = 0.0
    balance = 0.0
    for state in states:
        expense += state.amortize_year(year, months_per_year)
        balance += state.balance
    return expense, balance


def init_states(plans: Iterable[MortgagePlan]) -> List[MortgageState]:
    return [MortgageState.from_plan(plan) for plan in plans]
