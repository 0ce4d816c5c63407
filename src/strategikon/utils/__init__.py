"""Utility functions for the Strategikon combat engine."""

from strategikon.utils.rng import DiceRoll, generate_seed, roll_dice
from strategikon.utils.rounding import round_half_up

__all__ = [
    "DiceRoll",
    "generate_seed",
    "roll_dice",
    "round_half_up",
]
