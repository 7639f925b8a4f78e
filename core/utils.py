from __future__ import annotations

import math
from typing import Any, Optional

import numpy as np


def excel_round(x, decimals: int = 2):
    """Excel ROUND: half away from zero (vectorized)."""
    m = 10 ** decimals
    x = np.asarray(x, dtype=float)
    return np.sign(x) * (np.floor(np.abs(x) * m + 0.5) / m)


def as_number(value: Any) -> Optional[float]:
    """
    Coerce an untrusted payload value to a finite float.
    Accepts numbers and numeric strings; booleans, blanks, NaN/inf and
    anything else give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        s = value.strip()
        if not s:
            return None
        try:
            number = float(s)
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def as_whole_number(value: Any) -> Optional[int]:
    number = as_number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def growth_factor(rate: float, periods: int) -> float:
    """Compound factor (1 + rate) ** periods."""
    return (1.0 + rate) ** periods
