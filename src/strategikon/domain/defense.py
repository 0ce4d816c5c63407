"""Defense rating calculator."""

from __future__ import annotations

from collections.abc import Iterable

from strategikon.domain.enums import Role, SituationFlag
from strategikon.domain.models import CombatContext, Unit
from strategikon.domain.rating_tables import (
    ARMOR_DEFENSE_RATINGS,
    FORMATION_DEFENSE_MODIFIERS,
    SHIELD_DEFENSE_BONUSES,
    SITUATIONAL_DEFENSE_MODIFIERS,
    TRAINING_DEFENSE_BONUSES,
)


def formation_defense_value(formation: str) -> int:
    return FORMATION_DEFENSE_MODIFIERS.get(formation, 0)


def situational_defense_modifier(flags: Iterable[SituationFlag]) -> int:
    return sum(SITUATIONAL_DEFENSE_MODIFIERS.get(flag, 0) for flag in set(flags))


def calculate_defense_rating(
    unit: Unit,
    context: CombatContext | None = None,
    *,
    role: Role | None = None,
    ignore_formation_fraction: float = 0.0,
) -> float:
    """Return the unit's defense rating, never below 0.

    ``ignore_formation_fraction`` removes part of a positive formation
    bonus (berserker charges break formed lines).  With the default of 0
    the result is a whole number.
    """

    context = context or CombatContext()
    formation_bonus: float = formation_defense_value(unit.formation)
    if ignore_formation_fraction and formation_bonus > 0:
        formation_bonus *= 1.0 - ignore_formation_fraction

    total = (
        ARMOR_DEFENSE_RATINGS.get(unit.armor, 0)
        + SHIELD_DEFENSE_BONUSES.get(unit.shield, 0)
        + TRAINING_DEFENSE_BONUSES.get(unit.quality, 0)
        + formation_bonus
        + situational_defense_modifier(context.flags_for(role))
    )
    return max(0, total)
