"""Attack rating calculator."""

from __future__ import annotations

from collections.abc import Iterable

from strategikon.domain.enums import DamageType, Role, SituationFlag, Terrain
from strategikon.domain.models import CombatContext, Unit
from strategikon.domain.rating_tables import (
    ANTI_ARMOR_BONUSES,
    ANTI_CAVALRY_FORMATIONS,
    ARMOR_TYPE_EFFECTIVENESS,
    FORMATION_ATTACK_MODIFIERS,
    RANGED_PRIMARY_MARKERS,
    RANGED_WEAPONS,
    SITUATIONAL_ATTACK_MODIFIERS,
    TRAINING_ATTACK_BONUSES,
    UNKNOWN_WEAPON_ATTACK,
    WEAPON_ATTACK_RATINGS,
    WEAPON_DAMAGE_TYPES,
)

MAX_CLOSING_DISTANCE_BONUS = 4

_CLOSING_DISTANCE_BY_TERRAIN = {
    Terrain.FOREST: 2,
    Terrain.URBAN: 1,
    Terrain.MARSH: 2,
}


def is_ranged_weapon(weapon: str | None) -> bool:
    return weapon in RANGED_WEAPONS


def has_ranged_weapon(unit: Unit) -> bool:
    return any(is_ranged_weapon(weapon) for weapon in unit.weapons)


def is_ranged_primary(unit: Unit) -> bool:
    """True when the unit's first weapon is a missile weapon."""

    weapon = unit.primary_weapon
    if not weapon:
        return False
    return any(marker in weapon for marker in RANGED_PRIMARY_MARKERS)


def weapon_attack_value(weapon: str | None) -> int:
    if not weapon:
        return UNKNOWN_WEAPON_ATTACK
    return WEAPON_ATTACK_RATINGS.get(weapon, UNKNOWN_WEAPON_ATTACK)


def weapon_damage_type(weapon: str | None) -> DamageType:
    if not weapon:
        return DamageType.SLASHING
    return WEAPON_DAMAGE_TYPES.get(weapon, DamageType.SLASHING)


def armor_effectiveness(armor: str, damage_type: DamageType | str) -> int:
    """Protection an armor category offers against one damage type."""

    return ARMOR_TYPE_EFFECTIVENESS.get(armor, {}).get(DamageType(damage_type), 0)


def anti_armor_bonus(weapon: str | None, target_armor: str) -> int:
    """Extra attack a weapon gains against a particular armor category."""

    if not weapon:
        return 0
    return ANTI_ARMOR_BONUSES.get(weapon, {}).get(target_armor, 0)


def anti_cavalry_penalty(unit: Unit, target: Unit | None) -> int:
    """Negative modifier for mounted troops charging formed infantry."""

    if not unit.mounted or target is None or target.mounted:
        return 0
    if target.formation in ANTI_CAVALRY_FORMATIONS:
        return -2
    return -1


def closing_distance_bonus(
    unit: Unit,
    target: Unit,
    context: CombatContext,
    *,
    is_defender: bool = False,
) -> int:
    """Free volleys a missile unit gets while the enemy closes the gap.

    A defender ambushed by melee troops gets nothing: the enemy is already
    in its ranks before the bows matter.
    """

    if not has_ranged_weapon(unit):
        return 0

    target_ranged = has_ranged_weapon(target)
    ambush = context.is_ambush

    if is_defender and ambush and not target_ranged:
        return 0

    if not target_ranged:
        bonus = _CLOSING_DISTANCE_BY_TERRAIN.get(context.terrain, 3)
    else:
        bonus = 1
    if ambush and not is_defender:
        bonus += 1

    return min(bonus, MAX_CLOSING_DISTANCE_BONUS)


def situational_attack_modifier(flags: Iterable[SituationFlag]) -> int:
    return sum(SITUATIONAL_ATTACK_MODIFIERS.get(flag, 0) for flag in set(flags))


def calculate_attack_rating(
    unit: Unit,
    context: CombatContext | None = None,
    *,
    target: Unit | None = None,
    role: Role | None = None,
) -> int:
    """Return the unit's attack rating, never below 1.

    ``role`` selects which side-specific flags of ``context`` apply and
    whether the closing-distance ambush exception is in effect.
    """

    context = context or CombatContext()
    total = weapon_attack_value(unit.primary_weapon)
    total += TRAINING_ATTACK_BONUSES.get(unit.quality, 0)
    total += FORMATION_ATTACK_MODIFIERS.get(unit.formation, 0)
    total += anti_cavalry_penalty(unit, target)
    total += situational_attack_modifier(context.flags_for(role))

    if target is not None:
        total += closing_distance_bonus(
            unit, target, context, is_defender=role is Role.DEFENDER
        )

    return max(1, total)
