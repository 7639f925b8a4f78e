"""
Glidepath — expected equity return banded by years to retirement.

    years_to_retire >= 15      gp_ret_minus20
    7 <= years < 15            gp_ret_minus10
    2 <= years < 7             gp_ret_minus5
    0 <= years < 2             gp_ret0
    years < 0 (retired)        gp_post_ret
"""

from __future__ import annotations

from core.params import ScenarioParams


def glidepath_return(params: ScenarioParams, age: int) -> float:
    years_to_retire = params.retirement_age - age
    if years_to_retire >= 15:
        return params.gp_ret_minus20
    if years_to_retire >= 7:
        return params.gp_ret_minus10
    if years_to_retire >= 2:
        return params.gp_ret_minus5
    if years_to_retire >= 0:
        return params.gp_ret0
    return params.gp_post_ret


def applied_stock_return(params: ScenarioParams, age: int) -> float:
    if params.use_glidepath:
        return glidepath_return(params, age)
    return params.stock_return
