"""Numeric rounding helpers."""

import math


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves toward positive infinity (2.5 -> 3, 0.125 -> 0.13, -2.5 -> -2)."""
    factor = 10 ** ndigits
    scaled = round(value * factor, 9)
    return math.floor(scaled + 0.5) / factor
