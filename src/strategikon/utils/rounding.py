"""Rounding helpers shared by the combat calculators."""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (unlike ``round``).

    >>> round_half_up(2.5), round_half_up(-0.5), round_half_up(-1.5)
    (3, 0, -1)
    """
    return math.floor(value + 0.5)
