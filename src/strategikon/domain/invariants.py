"""Checks for conditions that can only arise from a defect in the calculators.

Unknown equipment or culture names are never errors (they fall back to
floor values).  The checks here guard the three invariants the rest of
the engine relies on and fail loudly when they are broken.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from strategikon.domain.models import Unit
from strategikon.domain.rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)


class CombatInvariantError(ValueError):
    """Raised when a combat value leaves its documented range."""


def ensure_strength(unit: Unit) -> None:
    if unit.max_strength < 0 or not 0 <= unit.current_strength <= unit.max_strength:
        logger.error(
            "unit %s strength %s outside [0, %s]",
            unit.id,
            unit.current_strength,
            unit.max_strength,
        )
        raise CombatInvariantError(
            f"Unit {unit.id} strength {unit.current_strength} outside [0, {unit.max_strength}]"
        )


def ensure_roster_strengths(units: Iterable[Unit]) -> None:
    for unit in units:
        ensure_strength(unit)


def ensure_chaos_level(level: int, rules: RulesConfig = DEFAULT_RULES) -> None:
    # The calculator floors at 2, but a zero level is a legal input to rolls.
    if not 0 <= level <= rules.chaos.maximum_level:
        logger.error("chaos level %s outside [0, %s]", level, rules.chaos.maximum_level)
        raise CombatInvariantError(
            f"Chaos level {level} outside [0, {rules.chaos.maximum_level}]"
        )


def ensure_preparation_level(level: float, rules: RulesConfig = DEFAULT_RULES) -> None:
    low = rules.preparation.minimum_level
    high = rules.preparation.maximum_level
    if not low <= level <= high:
        logger.error("preparation level %s outside [%s, %s]", level, low, high)
        raise CombatInvariantError(f"Preparation level {level} outside [{low}, {high}]")
