"""
Deterministic RNG for reproducible default scenarios.

A 32-bit counter-based generator (mulberry32 mixing): the state advances by a
fixed odd increment and each draw is a bijective scramble of the counter, so
the same seed always yields the same sequence of floats in [0, 1).

The seed comes from the clock at hour resolution, so everyone opening the
sandbox in the same UTC hour sees the same starting household.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from core.utils import excel_round

_MASK32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32x32-bit multiply."""
    return (a * b) & _MASK32


def seed_from_datetime(now: Optional[datetime] = None) -> int:
    """
    Positional seed from the UTC date: (year+1)·10^6 + month·10^4 + day·10^2 + hour.
    Naive datetimes are taken as UTC.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    return (now.year + 1) * 1_000_000 + now.month * 10_000 + now.day * 100 + now.hour


class DeterministicRng:
    """
    Usage:
        rng = DeterministicRng(seed_from_datetime())
        age = rng.randint(32, 46)
        stocks = rng.rounded(900_000, 2_200_000, 25_000)
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        self._state = self.seed & _MASK32

    def random(self) -> float:
        self._state = (self._state + _INCREMENT) & _MASK32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _MASK32
        return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high]."""
        return int(self.random() * (high - low + 1)) + low

    def rounded(self, low: float, high: float, step: float) -> float:
        """Uniform value in [low, high] snapped to the nearest multiple of step."""
        raw = low + (high - low) * self.random()
        return float(excel_round(raw / step, 0)) * step
