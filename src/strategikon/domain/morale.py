"""Morale rules: unit break checks and turn outcome classification."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from strategikon.domain.culture import cultural_morale_bonus
from strategikon.domain.enums import CombatOutcome, TroopQuality
from strategikon.domain.models import Unit
from strategikon.domain.rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)

# Casualty fraction of max strength, in a single turn, that breaks a unit.
BASE_BREAK_THRESHOLDS: Mapping[str, float] = {
    TroopQuality.LEVY: 0.18,
    TroopQuality.TRIBAL_WARRIORS: 0.18,
    TroopQuality.MILITIA: 0.18,
    TroopQuality.PROFESSIONAL: 0.30,
    TroopQuality.VETERAN_MERCENARY: 0.40,
    TroopQuality.ELITE_GUARD: 0.48,
    TroopQuality.LEGENDARY: 0.55,
}

MORALE_DELTAS: Mapping[CombatOutcome, tuple[int, int]] = {
    CombatOutcome.ATTACKER_MAJOR_VICTORY: (15, -20),
    CombatOutcome.ATTACKER_VICTORY: (10, -15),
    CombatOutcome.ATTACKER_ADVANTAGE: (5, -8),
    CombatOutcome.STALEMATE: (-2, -2),
    CombatOutcome.DEFENDER_ADVANTAGE: (-8, 5),
    CombatOutcome.DEFENDER_VICTORY: (-15, 10),
    CombatOutcome.DEFENDER_MAJOR_VICTORY: (-20, 15),
}


def break_threshold(
    quality: str, culture: str | None = None, rules: RulesConfig = DEFAULT_RULES
) -> float:
    base = BASE_BREAK_THRESHOLDS.get(quality, BASE_BREAK_THRESHOLDS[TroopQuality.PROFESSIONAL])
    bonus = cultural_morale_bonus(culture) * rules.morale.cultural_point_threshold
    return max(rules.morale.minimum_break_threshold, base + bonus)


def check_unit_break(
    unit: Unit,
    casualties_this_turn: int,
    culture: str | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> bool:
    """Return True when this turn's losses rout the unit."""

    if unit.routed or unit.max_strength <= 0 or casualties_this_turn <= 0:
        return False
    rate = casualties_this_turn / unit.max_strength
    threshold = break_threshold(unit.quality, culture or unit.culture, rules)
    if rate >= threshold:
        logger.info(
            "unit %s breaks: lost %.0f%% (threshold %.0f%%)", unit.id, rate * 100, threshold * 100
        )
        return True
    return False


def classify_outcome(damage_difference: float, rules: RulesConfig = DEFAULT_RULES) -> CombatOutcome:
    """Classify a turn from damage dealt by the attacker minus damage dealt by the defender."""

    cfg = rules.resolution
    if damage_difference >= cfg.major_victory_margin:
        return CombatOutcome.ATTACKER_MAJOR_VICTORY
    if damage_difference >= cfg.victory_margin:
        return CombatOutcome.ATTACKER_VICTORY
    if damage_difference >= cfg.advantage_margin:
        return CombatOutcome.ATTACKER_ADVANTAGE
    if damage_difference <= -cfg.major_victory_margin:
        return CombatOutcome.DEFENDER_MAJOR_VICTORY
    if damage_difference <= -cfg.victory_margin:
        return CombatOutcome.DEFENDER_VICTORY
    if damage_difference <= -cfg.advantage_margin:
        return CombatOutcome.DEFENDER_ADVANTAGE
    return CombatOutcome.STALEMATE


def morale_deltas(outcome: CombatOutcome) -> tuple[int, int]:
    """Return (attacker, defender) morale swings for a turn outcome."""
    return MORALE_DELTAS[outcome]
