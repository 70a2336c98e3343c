"""Math utilities for common operations."""

from __future__ import annotations

import math
from typing import TypeVar

import numpy as np

Number = TypeVar("Number", int, float, np.number)


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """Clamp value to range [min_val, max_val].

    Args:
        value: Value to clamp
        min_val: Minimum allowed value
        max_val: Maximum allowed value

    Returns:
        Clamped value
    """
    return max(min_val, min(max_val, value))


def lerp(a: Number, b: Number, t: float) -> float:
    """Linear interpolation between a and b.

    Args:
        a: Start value
        b: End value
        t: Interpolation factor [0, 1]

    Returns:
        Interpolated value
    """
    return float(a + (b - a) * t)


def round_half_up(x: float) -> int:
    """Round to nearest integer, halves away from zero.

    Python's built-in round() uses banker's rounding (round(2.5) == 2);
    pixel placement needs the conventional rule (2.5 -> 3).
    """
    if x < 0:
        return -math.floor(-x + 0.5)
    return math.floor(x + 0.5)
