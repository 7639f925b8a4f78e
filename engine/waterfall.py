"""
Portfolio waterfall — cover the year's savings-funded spending from reserves.

Order is stocks → cash when spend_from_stocks is set, otherwise cash → stocks.
Each source gives min(balance, remaining need).

If both reserves run dry and a need above the tolerance remains, the year is
a shortfall: BOTH reserves are set to zero (no partial cover is kept) and the
engine reports net worth 0 for that year.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class WaterfallResult:
    stocks: float
    cash: float
    drawn_from_stocks: float
    drawn_from_cash: float
    unmet: float
    shortfall: bool


def apply_waterfall(
    need: float,
    stocks: float,
    cash: float,
    *,
    spend_from_stocks: bool,
    tolerance: float = 1e-6,
) -> WaterfallResult:
    remaining = max(0.0, need)

    def draw(balance: float) -> float:
        return min(max(balance, 0.0), remaining)

    if spend_from_stocks:
        from_stocks = draw(stocks)
        remaining -= from_stocks
        from_cash = draw(cash)
        remaining -= from_cash
    else:
        from_cash = draw(cash)
        remaining -= from_cash
        from_stocks = draw(stocks)
        remaining -= from_stocks

    unmet = max(0.0, remaining)
    if unmet > tolerance:
        return WaterfallResult(
            stocks=0.0,
            cash=0.0,
            drawn_from_stocks=from_stocks,
            drawn_from_cash=from_cash,
            unmet=unmet,
            shortfall=True,
        )

    return WaterfallResult(
        stocks=max(0.0, stocks - from_stocks),
        cash=max(0.0, cash - from_cash),
        drawn_from_stocks=from_stocks,
        drawn_from_cash=from_cash,
        unmet=unmet,
        shortfall=False,
    )
