"""Preparation: how well a unit is readied against battlefield chaos.

Preparation never raises a rating.  It narrows the gap between the
chaos level and the unit, which in turn controls how much of the raw
attack and defense survives the multiplicative chaos attrition.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from strategikon.domain.attack import is_ranged_primary
from strategikon.domain.culture import cultural_preparation_bonus
from strategikon.domain.enums import Role, SituationFlag, Terrain
from strategikon.domain.invariants import ensure_preparation_level
from strategikon.domain.models import CombatContext, Unit
from strategikon.domain.rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)

PREPARATION_CATEGORIES: Mapping[str, tuple[SituationFlag, ...]] = {
    "time_position": (
        SituationFlag.TIME_TO_PREPARE,
        SituationFlag.WELL_RESTED,
        SituationFlag.SCOUTED_TERRAIN,
        SituationFlag.FORTIFIED_POSITION,
        SituationFlag.HIGH_GROUND,
    ),
    "intelligence": (
        SituationFlag.SCOUTED_ENEMY,
        SituationFlag.ENEMY_COMPOSITION_KNOWN,
        SituationFlag.LOCAL_GUIDES,
        SituationFlag.SPIES_IN_CAMP,
    ),
    "coordination": (
        SituationFlag.CLEAR_COMMAND,
        SituationFlag.SIGNAL_SYSTEM,
        SituationFlag.DRILLED_MANEUVERS,
        SituationFlag.COMBINED_ARMS,
    ),
    "environmental": (
        SituationFlag.WEATHER_ADAPTED,
        SituationFlag.TERRAIN_ADAPTED,
        SituationFlag.NIGHT_TRAINED,
        SituationFlag.ACCLIMATIZED,
    ),
    "tactical": (
        SituationFlag.NUMERICAL_SUPERIORITY,
        SituationFlag.FLANKING_POSITION,
        SituationFlag.RESERVES_AVAILABLE,
    ),
    "morale": (
        SituationFlag.HIGH_MORALE,
        SituationFlag.WELL_SUPPLIED,
        SituationFlag.VETERAN_LEADERSHIP,
        SituationFlag.RELIGIOUS_BLESSING,
    ),
}

PREPARATION_PENALTIES: Mapping[SituationFlag, float] = {
    SituationFlag.SURPRISED: -1.0,
    SituationFlag.AMBUSHED: -0.5,
    SituationFlag.FLANKED: -0.5,
    SituationFlag.SURROUNDED: -1.0,
    SituationFlag.FORMATION_BROKEN: -0.5,
    SituationFlag.UNKNOWN_ENEMY: -0.5,
    SituationFlag.EXHAUSTED: -0.5,
    SituationFlag.LOW_SUPPLIES: -0.3,
    SituationFlag.CROSSING_OBSTACLE: -0.3,
    SituationFlag.RETREATING: -0.3,
}

ATTACKER_PREPARATION_BONUSES: Mapping[SituationFlag, float] = {
    SituationFlag.INITIATIVE_ADVANTAGE: 0.3,
    SituationFlag.MOMENTUM_CHARGE: 0.3,
    SituationFlag.CHOSEN_BATTLEFIELD: 0.3,
    SituationFlag.CONCENTRATED_ASSAULT: 0.3,
    SituationFlag.TACTICAL_SURPRISE: 0.3,
    SituationFlag.AMBUSH_ADVANTAGE: 1.2,
    SituationFlag.FIRST_STRIKE: 0.8,
}

DEFENDER_PREPARATION_BONUSES: Mapping[SituationFlag, float] = {
    SituationFlag.PREPARED_POSITION: 0.3,
    SituationFlag.TERRAIN_KNOWLEDGE: 0.3,
    SituationFlag.SECURE_SUPPLIES: 0.3,
    SituationFlag.DEFENSIVE_OPTIMIZATION: 0.3,
    SituationFlag.INTERIOR_LINES: 0.3,
}

# Melee ambushers in woodland are on the enemy before a plan can form.
FOREST_AMBUSH_MELEE_BONUS = 2.0

_DESCRIPTIONS = (
    (1.0, "Unprepared - maximum chaos vulnerability"),
    (1.5, "Minimal preparation - very vulnerable to chaos"),
    (2.0, "Basic preparation - some chaos resistance"),
    (2.5, "Adequate preparation - moderate chaos resistance"),
    (3.0, "Good preparation - solid chaos resistance"),
    (3.5, "Well prepared - strong chaos resistance"),
    (4.0, "Very well prepared - excellent chaos resistance"),
)


@dataclass(slots=True)
class PreparationBreakdown:
    """Per-category preparation points, penalties and bonuses."""

    categories: dict[str, float] = field(default_factory=dict)
    penalties: float = 0.0
    role_bonus: float = 0.0
    cultural: float = 0.0
    factors: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PreparationResult:
    """Clamped preparation level for one unit in one role."""

    level: float
    raw_total: float
    capped: bool
    breakdown: PreparationBreakdown
    description: str


@dataclass(frozen=True, slots=True)
class ChaosMitigation:
    """Chaos left over after preparation and the attrition it causes."""

    chaos_level: int
    preparation: float
    modifier: float
    attrition_factor: float


def preparation_description(level: float) -> str:
    for upper, text in _DESCRIPTIONS:
        if level < upper:
            return text
    return "Perfectly prepared - maximum chaos resistance (but never immune)"


def _role_bonus(
    flags: frozenset[SituationFlag],
    context: CombatContext,
    role: Role | None,
    unit: Unit | None,
    breakdown: PreparationBreakdown,
) -> float:
    if role is Role.ATTACKER:
        table = ATTACKER_PREPARATION_BONUSES
    elif role is Role.DEFENDER:
        table = DEFENDER_PREPARATION_BONUSES
    else:
        return 0.0

    bonus = 0.0
    for flag, value in table.items():
        if flag in flags:
            bonus += value
            breakdown.factors.append(f"{role} ({flag}): +{value}")

    if (
        role is Role.ATTACKER
        and context.terrain == Terrain.FOREST
        and context.is_ambush
        and unit is not None
        and not is_ranged_primary(unit)
    ):
        bonus += FOREST_AMBUSH_MELEE_BONUS
        breakdown.factors.append(f"Forest melee ambush: +{FOREST_AMBUSH_MELEE_BONUS}")
    return bonus


def calculate_preparation(
    context: CombatContext,
    role: Role | None = None,
    *,
    unit: Unit | None = None,
    culture: str | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> PreparationResult:
    """Compute one unit's preparation level for one side of the encounter."""

    prep = rules.preparation
    flags = context.flags_for(role)
    breakdown = PreparationBreakdown()
    total = prep.base_level

    for category, members in PREPARATION_CATEGORIES.items():
        subtotal = 0.0
        for flag in members:
            if flag not in flags:
                continue
            increment = (
                prep.fortified_increment
                if flag is SituationFlag.FORTIFIED_POSITION
                else prep.flag_increment
            )
            subtotal += increment
            breakdown.factors.append(f"{category} ({flag}): +{increment}")
        breakdown.categories[category] = subtotal
        total += subtotal

    for flag, penalty in PREPARATION_PENALTIES.items():
        if flag in flags:
            breakdown.penalties += penalty
            breakdown.factors.append(f"Penalty ({flag}): {penalty}")
    total += breakdown.penalties

    breakdown.role_bonus = _role_bonus(flags, context, role, unit, breakdown)
    total += breakdown.role_bonus

    if culture is None and unit is not None:
        culture = unit.culture
    if culture:
        breakdown.cultural = cultural_preparation_bonus(culture) * prep.cultural_point_weight
        if breakdown.cultural:
            breakdown.factors.append(f"Culture ({culture}): {breakdown.cultural:+.1f}")
        total += breakdown.cultural

    total = round(total, 6)
    level = max(prep.minimum_level, min(prep.maximum_level, total))
    ensure_preparation_level(level, rules)
    logger.debug("preparation %s for %s: raw %.2f", level, role, total)
    return PreparationResult(
        level=level,
        raw_total=total,
        capped=total > prep.maximum_level or total < prep.minimum_level,
        breakdown=breakdown,
        description=preparation_description(level),
    )


def apply_preparation_to_chaos(
    chaos_level: int, preparation: float, rules: RulesConfig = DEFAULT_RULES
) -> ChaosMitigation:
    """Residual chaos is never below 1: preparation mitigates but never immunizes."""

    modifier = max(1.0, chaos_level - preparation)
    factor = 1.0 - modifier * rules.preparation.chaos_attrition_per_point
    return ChaosMitigation(
        chaos_level=chaos_level,
        preparation=preparation,
        modifier=modifier,
        attrition_factor=factor,
    )
