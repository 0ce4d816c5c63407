"""Battlefield chaos: how much disorder stands between a plan and its execution.

The chaos level (2-10 after the floor) drives two things downstream:
the per-side random chaos roll and, together with preparation, the
multiplicative attrition applied to raw ratings.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from strategikon.domain.enums import (
    CombatSituation,
    CommandState,
    Formation,
    FormationState,
    SpecialChaosModifier,
    Terrain,
    TimeOfDay,
    UnitDensity,
    Weather,
)
from strategikon.domain.invariants import ensure_chaos_level
from strategikon.domain.models import ChaosConditions, Unit
from strategikon.domain.rules_config import DEFAULT_RULES, RulesConfig
from strategikon.utils.rng import roll_dice
from strategikon.utils.rounding import round_half_up

logger = logging.getLogger(__name__)

TERRAIN_CHAOS: Mapping[str, int] = {
    Terrain.PLAINS: 0,
    Terrain.HILL: 1,
    Terrain.FOREST: 2,
    Terrain.MARSH: 2,
    Terrain.MOUNTAIN: 2,
    Terrain.RIVER: 1,
    Terrain.DESERT: 1,
    Terrain.URBAN: 3,
}

WEATHER_CHAOS: Mapping[str, int] = {
    Weather.CLEAR: 0,
    Weather.OVERCAST: 0,
    Weather.LIGHT_RAIN: 1,
    Weather.HEAVY_RAIN: 2,
    Weather.FOG: 3,
    Weather.SNOW: 2,
    Weather.SANDSTORM: 4,
    Weather.THUNDERSTORM: 3,
}

TIME_OF_DAY_CHAOS: Mapping[str, int] = {
    TimeOfDay.DAWN: 1,
    TimeOfDay.MORNING: 0,
    TimeOfDay.MIDDAY: 0,
    TimeOfDay.AFTERNOON: 0,
    TimeOfDay.DUSK: 1,
    TimeOfDay.NIGHT: 4,
    TimeOfDay.MIDNIGHT: 4,
}

UNIT_DENSITY_CHAOS: Mapping[str, int] = {
    UnitDensity.SPARSE: 0,
    UnitDensity.NORMAL: 0,
    UnitDensity.DENSE: 1,
    UnitDensity.COMPRESSED: 3,
    UnitDensity.CRUSH: 5,
}

COMBAT_SITUATION_CHAOS: Mapping[str, int] = {
    CombatSituation.PREPARED: 0,
    CombatSituation.MEETING_ENGAGEMENT: 1,
    CombatSituation.AMBUSH: 4,
    CombatSituation.PURSUIT: 2,
    CombatSituation.SIEGE_ASSAULT: 2,
    CombatSituation.RIVER_CROSSING: 2,
    CombatSituation.NIGHT_RAID: 3,
    CombatSituation.RETREAT: 3,
}

FORMATION_STATE_CHAOS: Mapping[str, int] = {
    FormationState.INTACT: 0,
    FormationState.PARTIALLY_DISRUPTED: 1,
    FormationState.MIXED: 2,
    FormationState.MOSTLY_DISRUPTED: 3,
    FormationState.BROKEN: 4,
}

COMMAND_STATE_CHAOS: Mapping[str, int] = {
    CommandState.COORDINATED: 0,
    CommandState.DELAYED: 1,
    CommandState.CONFUSED: 2,
    CommandState.INTERRUPTED: 3,
    CommandState.LEADERLESS: 4,
}

SPECIAL_CHAOS_MODIFIERS: Mapping[str, int] = {
    SpecialChaosModifier.THREE_WAY_BATTLE: 2,
    SpecialChaosModifier.CIVIL_WAR: 1,
    SpecialChaosModifier.FOREST_NIGHT: 1,
    SpecialChaosModifier.MARSH_FOG: 2,
    SpecialChaosModifier.URBAN_FIRE: 3,
    SpecialChaosModifier.WAR_ELEPHANTS_PRESENT: 1,
    SpecialChaosModifier.FIRST_BATTLE: 1,
    SpecialChaosModifier.BLOOD_FEUD: -1,
    SpecialChaosModifier.RELIGIOUS_FERVOR: -1,
    SpecialChaosModifier.WEAPON_BREAKAGE: 1,
    SpecialChaosModifier.SUPPLY_SHORTAGE: 1,
    SpecialChaosModifier.COMMUNICATION_FAILURE: 2,
}

CHAOS_DESCRIPTIONS: Mapping[int, str] = {
    0: "Perfect conditions - clear field, good weather, organized forces",
    1: "Minor complications - light weather or terrain effects",
    2: "Noticeable disorder - weather, terrain, or tactical issues",
    3: "Moderate chaos - multiple complicating factors",
    4: "Significant confusion - poor visibility or major disruption",
    5: "High chaos - dangerous conditions, formations breaking",
    6: "Severe disorder - multiple critical factors, friend-foe confusion",
    7: "Extreme chaos - sandstorm or night combat with disrupted command",
    8: "Near-total confusion - multiple severe factors combined",
    9: "Catastrophic disorder - barely organized combat",
    10: "Complete chaos - battle is more melee than organized warfare",
}

# Warriors per density tier on the standard battlefield.
DENSITY_TIER_SIZE = 200

_DENSITY_TIERS = (
    UnitDensity.SPARSE,
    UnitDensity.NORMAL,
    UnitDensity.DENSE,
    UnitDensity.COMPRESSED,
)

_FORMATION_STATE_THRESHOLDS = (
    (0.8, FormationState.INTACT),
    (0.6, FormationState.PARTIALLY_DISRUPTED),
    (0.4, FormationState.MIXED),
    (0.2, FormationState.MOSTLY_DISRUPTED),
)


@dataclass(slots=True)
class ChaosBreakdown:
    """Environmental and tactical chaos points behind a level."""

    environmental: int = 0
    tactical: int = 0
    special: int = 0
    factors: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ChaosResult:
    """Clamped chaos level with the raw total it came from."""

    level: int
    raw_total: int
    minimum_applied: bool
    capped: bool
    breakdown: ChaosBreakdown
    description: str


@dataclass(frozen=True, slots=True)
class ChaosRoll:
    """One side's chaos die and the modifier it yields."""

    roll: int
    modifier: int
    level: int
    description: str


def chaos_description(level: int) -> str:
    return CHAOS_DESCRIPTIONS.get(level, f"Chaos level {level}")


def _add_factor(
    breakdown: ChaosBreakdown, bucket: str, label: str, key: str | None, table: Mapping[str, int]
) -> int:
    if not key:
        return 0
    value = table.get(key, 0)
    setattr(breakdown, bucket, getattr(breakdown, bucket) + value)
    if value > 0:
        breakdown.factors.append(f"{label} ({key}): +{value}")
    return value


def calculate_chaos(
    conditions: ChaosConditions, rules: RulesConfig = DEFAULT_RULES
) -> ChaosResult:
    """Sum environmental, tactical and special disorder into a bounded level."""

    breakdown = ChaosBreakdown()
    total = 0

    total += _add_factor(breakdown, "environmental", "Terrain", conditions.terrain, TERRAIN_CHAOS)
    total += _add_factor(breakdown, "environmental", "Weather", conditions.weather, WEATHER_CHAOS)
    total += _add_factor(
        breakdown, "environmental", "Time", conditions.time_of_day, TIME_OF_DAY_CHAOS
    )

    total += _add_factor(
        breakdown, "tactical", "Unit density", conditions.unit_density, UNIT_DENSITY_CHAOS
    )
    total += _add_factor(
        breakdown, "tactical", "Situation", conditions.combat_situation, COMBAT_SITUATION_CHAOS
    )
    total += _add_factor(
        breakdown, "tactical", "Formation", conditions.formation_state, FORMATION_STATE_CHAOS
    )
    total += _add_factor(
        breakdown, "tactical", "Command", conditions.command_state, COMMAND_STATE_CHAOS
    )
    if conditions.extra_disorder:
        total += conditions.extra_disorder
        breakdown.tactical += conditions.extra_disorder
        breakdown.factors.append(f"Battle disorder: {conditions.extra_disorder:+d}")

    for modifier in conditions.special_modifiers:
        value = SPECIAL_CHAOS_MODIFIERS.get(modifier, 0)
        if value == 0:
            continue
        total += value
        breakdown.special += value
        breakdown.factors.append(f"{modifier}: {value:+d}")

    minimum = rules.chaos.minimum_level
    maximum = rules.chaos.maximum_level
    with_minimum = max(minimum, total)
    level = min(maximum, with_minimum)
    minimum_applied = total < minimum
    if minimum_applied:
        breakdown.factors.append(f"Minimum battlefield uncertainty: +{minimum}")

    ensure_chaos_level(level, rules)
    return ChaosResult(
        level=level,
        raw_total=total,
        minimum_applied=minimum_applied,
        capped=with_minimum > maximum,
        breakdown=breakdown,
        description=chaos_description(level),
    )


def roll_chaos_modifier(
    level: int,
    seed: str,
    *,
    fixed_roll: int | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> ChaosRoll:
    """Roll 1d``level`` and centre it on zero.

    ``fixed_roll`` replaces the die (clamped to the die's faces) for
    replays and tests.
    """

    ensure_chaos_level(level, rules)
    if level == 0:
        return ChaosRoll(
            roll=0, modifier=0, level=0, description="Perfect conditions - no random effects"
        )

    if fixed_roll is not None:
        roll = max(1, min(level, fixed_roll))
    else:
        roll = roll_dice(seed, f"1d{level}").total
    modifier = round_half_up(roll - level / 2)
    return ChaosRoll(
        roll=roll,
        modifier=modifier,
        level=level,
        description=f"Rolled {roll} on d{level} ({modifier:+d} chaos modifier)",
    )


def analyze_battle_for_chaos(
    units: Sequence[Unit],
    *,
    terrain: str = Terrain.PLAINS,
    weather: str = Weather.CLEAR,
    time_of_day: str = TimeOfDay.MIDDAY,
    turn: int = 1,
    special_modifiers: Iterable[str] = (),
) -> ChaosConditions:
    """Derive density and formation-state chaos inputs from the engaged rosters."""

    modifiers = list(special_modifiers)
    if turn == 1 and SpecialChaosModifier.FIRST_BATTLE not in modifiers:
        modifiers.append(SpecialChaosModifier.FIRST_BATTLE)

    if not units:
        return ChaosConditions(
            terrain=terrain,
            weather=weather,
            time_of_day=time_of_day,
            unit_density=UnitDensity.SPARSE,
            formation_state=FormationState.INTACT,
            special_modifiers=tuple(modifiers),
        )

    warriors = sum(unit.current_strength for unit in units)
    tier = int(warriors // DENSITY_TIER_SIZE)
    density = _DENSITY_TIERS[tier] if tier < len(_DENSITY_TIERS) else UnitDensity.CRUSH

    in_formation = sum(1 for unit in units if unit.formation and unit.formation != Formation.LOOSE)
    ratio = in_formation / len(units)
    formation_state = FormationState.BROKEN
    for threshold, state in _FORMATION_STATE_THRESHOLDS:
        if ratio >= threshold:
            formation_state = state
            break

    logger.debug(
        "chaos analysis: %s warriors -> %s, formation ratio %.2f -> %s",
        warriors,
        density,
        ratio,
        formation_state,
    )
    return ChaosConditions(
        terrain=terrain,
        weather=weather,
        time_of_day=time_of_day,
        unit_density=density,
        formation_state=formation_state,
        special_modifiers=tuple(modifiers),
    )
