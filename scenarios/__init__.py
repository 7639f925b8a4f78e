"""
Scenarios package — deterministic RNG and the smart-defaults generator.

  1. rng.py       — seeded 32-bit generator + integer / stepped-value helpers
  2. defaults.py  — plausible starting household built from that generator
"""

from .rng import DeterministicRng, seed_from_datetime
from .defaults import generate_default_params, mortgage_payment

__all__ = [
    "DeterministicRng",
    "seed_from_datetime",
    "generate_default_params",
    "mortgage_payment",
]
