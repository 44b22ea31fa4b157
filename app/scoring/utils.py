"""
Decimal Utilities
app/scoring/utils.py

Precision-safe rounding and clamping shared by the pipeline and the scorer.
Python's round() is banker's rounding; exported figures use half-up.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable


def to_decimal(value: float, places: int = 4) -> Decimal:
    """Convert float to Decimal with explicit precision."""
    return Decimal(str(value)).quantize(
        Decimal(10) ** -places, rounding=ROUND_HALF_UP
    )


def round_half_up(value: float, places: int = 0) -> float:
    """Round half away from zero to `places` decimals."""
    return float(to_decimal(value, places))


def round_to_int(value: float) -> int:
    """Nearest integer, halves rounded up (2.5 -> 3)."""
    return int(to_decimal(value, 0))


def clamp(value: float, min_val: float = 0.0, max_val: float = 1.0) -> float:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    values = list(values)
    return sum(values) / len(values) if values else 0.0
