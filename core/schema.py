from __future__ import annotations

from typing import Dict, Tuple

# Envelope constants. The share link carries the envelope in ?scenario=...
ENVELOPE_VERSION: int = 1
SCENARIO_QUERY_KEY: str = "scenario"

# Upper bound on any age field; keeps the projection horizon bounded.
MAX_AGE: int = 120

# Support categories / growth models
ELDER_CARE: str = "elderCare"
CHILD_SUPPORT: str = "childSupport"
SUPPORT_CATEGORIES: Tuple[str, ...] = (ELDER_CARE, CHILD_SUPPORT)

FLAT_MODEL: str = "flat"
LINEAR_MODEL: str = "linear"
SUPPORT_MODEL_NAMES: Tuple[str, ...] = (FLAT_MODEL, LINEAR_MODEL)

# Scalar payload fields: camelCase key -> (attribute, kind).
#   int     whole number, >= 0
#   age     whole number, 0..MAX_AGE
#   amount  money, >= 0
#   rate    decimal rate, >= 0
#   signed  decimal growth delta, any sign
#   flag    boolean
SCALAR_FIELDS: Dict[str, Tuple[str, str]] = {
    "startYear": ("start_year", "int"),
    "currentAge": ("current_age", "age"),
    "retirementAge": ("retirement_age", "age"),
    "maxAge": ("max_age", "age"),
    "stocks0": ("stocks0", "amount"),
    "cash0": ("cash0", "amount"),
    "realEstate0": ("real_estate0", "amount"),
    "stockReturn": ("stock_return", "rate"),
    "cashReturn": ("cash_return", "rate"),
    "realEstateReturn": ("real_estate_return", "rate"),
    "inflation": ("inflation", "rate"),
    "useGlidepath": ("use_glidepath", "flag"),
    "gpRetMinus20": ("gp_ret_minus20", "rate"),
    "gpRetMinus10": ("gp_ret_minus10", "rate"),
    "gpRetMinus5": ("gp_ret_minus5", "rate"),
    "gpRet0": ("gp_ret0", "rate"),
    "gpPostRet": ("gp_post_ret", "rate"),
    "contribution0": ("contribution0", "amount"),
    "contributionGrowth": ("contribution_growth", "signed"),
    "baseMonthly": ("base_monthly", "amount"),
    "vacationMonthly": ("vacation_monthly", "amount"),
    "homeUpgradesAnnual": ("home_upgrades_annual", "amount"),
    "spendFromStocks": ("spend_from_stocks", "flag"),
}

MORTGAGE_FIELDS: Dict[str, str] = {
    "name": "name",
    "principal": "principal",
    "rate": "rate",
    "paymentMonthly": "payment_monthly",
    "startYear": "start_year",
    "startMonth": "start_month",
    "endYear": "end_year",
    "endMonth": "end_month",
}

SUPPORT_FIELDS: Dict[str, str] = {
    "name": "name",
    "category": "category",
    "startYear": "start_year",
    "endYear": "end_year",
    "annualAmount": "annual_amount",
    "model": "model",
    "annualIncrease": "annual_increase",
}

COLLECTION_KEYS: Tuple[str, ...] = ("mortgages", "supports")
