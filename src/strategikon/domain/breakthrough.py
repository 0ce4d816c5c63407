"""Stalemate detection and breakthrough multipliers.

Two evenly matched lines can trade near-zero damage forever.  Once the
damage history shows such a stall, each army receives an attack
multiplier from its best breakthrough unit plus the special matchup
rules that fit the armies' majority characteristics.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from strategikon.domain.attack import is_ranged_primary
from strategikon.domain.enums import (
    BreakthroughUnitType,
    Formation,
    MatchupRule,
    Role,
    TroopQuality,
)
from strategikon.domain.models import Army, DamageHistoryEntry, Unit
from strategikon.domain.rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)

FORMATION_BREAKTHROUGH_BONUSES: Mapping[str, int] = {
    Formation.WEDGE: 3,
    Formation.GERMANIC_BOAR: 3,
    Formation.CELTIC_FURY: 4,
    Formation.LOOSE: 1,
    Formation.CRESCENT: 1,
    Formation.PHALANX: -2,
    Formation.TESTUDO: -3,
    Formation.SHIELD_WALL: -2,
    Formation.SQUARE: -1,
    Formation.LINE: 0,
    Formation.COLUMN: -1,
    Formation.ECHELON: 0,
    Formation.ROMAN_MANIPULAR: 1,
    Formation.MACEDONIAN_PHALANX: -2,
    Formation.PARTHIAN_FEINT: 2,
    Formation.CHINESE_FIVE_ELEMENTS: 0,
}

UNIT_TYPE_MULTIPLIERS: Mapping[BreakthroughUnitType, float] = {
    BreakthroughUnitType.MOUNTED: 2.0,
    BreakthroughUnitType.HEAVY_INFANTRY: 1.5,
    BreakthroughUnitType.RANGED_PRIMARY: 0.8,
    BreakthroughUnitType.ELITE: 1.3,
    BreakthroughUnitType.STANDARD: 1.0,
}

PIKE_FORMATIONS = frozenset({Formation.PHALANX, Formation.MACEDONIAN_PHALANX})
ANTI_CAVALRY_WEAPON_MARKERS = ("spear", "sarissa", "framea")
_ELITE_QUALITIES = frozenset({TroopQuality.VETERAN_MERCENARY, TroopQuality.ELITE_GUARD})
_HEAVY_ARMORS = frozenset({"heavy_armor", "medium_armor"})


@dataclass(frozen=True, slots=True)
class MatchupEffect:
    """One special matchup rule that fired for a side."""

    rule: MatchupRule
    beneficiary: Role
    multiplier_delta: float
    description: str
    chaos_increase: int = 0
    ignore_formation_fraction: float = 0.0


@dataclass(slots=True)
class ArmyBreakthrough:
    """Multiplier and matchup effects for a single army."""

    attack_multiplier: float = 1.0
    ignore_enemy_formation_fraction: float = 0.0
    special_rules: list[str] = field(default_factory=list)


@dataclass(slots=True)
class BreakthroughResult:
    """Breakthrough state for both armies in one turn."""

    applied: bool
    turn: int
    attacker: ArmyBreakthrough = field(default_factory=ArmyBreakthrough)
    defender: ArmyBreakthrough = field(default_factory=ArmyBreakthrough)
    matchups: list[MatchupEffect] = field(default_factory=list)
    chaos_increase: int = 0

    def for_role(self, role: Role) -> ArmyBreakthrough:
        return self.attacker if role is Role.ATTACKER else self.defender


@dataclass(frozen=True, slots=True)
class ArmyProfile:
    """Majority characteristics of a roster, weighted by current strength."""

    mounted: bool
    ranged_primary: bool
    formation: str | None
    weapons: tuple[str, ...]


def detect_stalemate(
    history: Sequence[DamageHistoryEntry], turn: int, rules: RulesConfig = DEFAULT_RULES
) -> bool:
    cfg = rules.breakthrough
    if turn < cfg.start_turn:
        return False
    if len(history) < cfg.history_window:
        return True
    recent = history[-cfg.history_window :]
    average = sum(entry.combined for entry in recent) / len(recent)
    return average < cfg.min_damage_threshold


def is_heavy_infantry(unit: Unit) -> bool:
    return (
        not unit.mounted and unit.armor in _HEAVY_ARMORS and unit.quality != TroopQuality.LEVY
    )


def breakthrough_unit_type(unit: Unit) -> BreakthroughUnitType:
    if unit.mounted:
        return BreakthroughUnitType.MOUNTED
    if is_ranged_primary(unit):
        return BreakthroughUnitType.RANGED_PRIMARY
    if is_heavy_infantry(unit):
        return BreakthroughUnitType.HEAVY_INFANTRY
    if unit.quality in _ELITE_QUALITIES:
        return BreakthroughUnitType.ELITE
    return BreakthroughUnitType.STANDARD


def turn_progression(turn: int, rules: RulesConfig = DEFAULT_RULES) -> float:
    cfg = rules.breakthrough
    if turn < cfg.start_turn:
        return 0.0
    return min((turn - cfg.start_turn) * cfg.progression_per_turn, cfg.progression_cap)


def calculate_breakthrough_multiplier(
    unit: Unit, turn: int, rules: RulesConfig = DEFAULT_RULES
) -> float:
    cfg = rules.breakthrough
    multiplier = UNIT_TYPE_MULTIPLIERS[breakthrough_unit_type(unit)]
    multiplier += FORMATION_BREAKTHROUGH_BONUSES.get(unit.formation, 0) * cfg.formation_weight
    multiplier += turn_progression(turn, rules)

    ratio = unit.strength_ratio
    if ratio < cfg.desperation_ratio:
        multiplier *= cfg.desperation_multiplier
    elif ratio < cfg.wavering_ratio:
        multiplier *= cfg.wavering_multiplier

    return max(cfg.minimum_multiplier, multiplier)


def army_profile(units: Sequence[Unit]) -> ArmyProfile:
    living = [unit for unit in units if unit.is_alive]
    total = sum(unit.current_strength for unit in living)
    if total <= 0:
        return ArmyProfile(mounted=False, ranged_primary=False, formation=None, weapons=())

    mounted = sum(unit.current_strength for unit in living if unit.mounted)
    ranged = sum(unit.current_strength for unit in living if is_ranged_primary(unit))
    formations: dict[str, int] = {}
    weapons: list[str] = []
    for unit in living:
        formations[unit.formation] = formations.get(unit.formation, 0) + unit.current_strength
        weapons.extend(unit.weapons)

    return ArmyProfile(
        mounted=mounted / total > 0.5,
        ranged_primary=ranged / total > 0.5,
        formation=max(formations, key=formations.__getitem__),
        weapons=tuple(weapons),
    )


def _matchups_for(
    side: ArmyProfile, enemy: ArmyProfile, beneficiary: Role, turn: int, rules: RulesConfig
) -> list[MatchupEffect]:
    cfg = rules.breakthrough
    effects: list[MatchupEffect] = []

    if side.mounted and enemy.formation in PIKE_FORMATIONS:
        effects.append(
            MatchupEffect(
                rule=MatchupRule.CAVALRY_VS_PHALANX,
                beneficiary=beneficiary,
                multiplier_delta=2 * cfg.matchup_weight,
                description="Cavalry seeks gaps in pike wall",
                chaos_increase=2,
            )
        )
    if side.mounted and any(
        marker in weapon for weapon in enemy.weapons for marker in ANTI_CAVALRY_WEAPON_MARKERS
    ):
        effects.append(
            MatchupEffect(
                rule=MatchupRule.CAVALRY_VS_SPEARS,
                beneficiary=beneficiary,
                multiplier_delta=-3 * cfg.matchup_weight,
                description="Spear points deter cavalry charges",
            )
        )
    if not side.mounted and enemy.ranged_primary:
        closing = min(
            turn * cfg.closing_distance_rate * cfg.closing_distance_step,
            cfg.closing_distance_cap,
        )
        effects.append(
            MatchupEffect(
                rule=MatchupRule.INFANTRY_VS_RANGED,
                beneficiary=beneficiary,
                multiplier_delta=cfg.matchup_weight + closing,
                description="Infantry advances under arrow fire",
            )
        )
    if side.formation == Formation.CELTIC_FURY:
        effects.append(
            MatchupEffect(
                rule=MatchupRule.BERSERKER_VS_FORMATION,
                beneficiary=beneficiary,
                multiplier_delta=0.0,
                description="Wild charge breaks formation lines",
                ignore_formation_fraction=cfg.berserker_formation_ignore,
            )
        )
    return effects


def detect_matchups(
    attacker_units: Sequence[Unit],
    defender_units: Sequence[Unit],
    turn: int,
    rules: RulesConfig = DEFAULT_RULES,
) -> list[MatchupEffect]:
    """Evaluate every matchup rule in both directions."""

    attacker = army_profile(attacker_units)
    defender = army_profile(defender_units)
    return _matchups_for(attacker, defender, Role.ATTACKER, turn, rules) + _matchups_for(
        defender, attacker, Role.DEFENDER, turn, rules
    )


def _army_multiplier(army: Army, turn: int, rules: RulesConfig) -> float:
    best = 1.0
    for unit in army.living_units:
        best = max(best, calculate_breakthrough_multiplier(unit, turn, rules))
    return best


def apply_breakthrough(
    attacker: Army,
    defender: Army,
    history: Sequence[DamageHistoryEntry],
    turn: int,
    rules: RulesConfig = DEFAULT_RULES,
) -> BreakthroughResult:
    """Compute both armies' breakthrough state for this turn."""

    if not detect_stalemate(history, turn, rules):
        return BreakthroughResult(applied=False, turn=turn)

    result = BreakthroughResult(
        applied=True,
        turn=turn,
        attacker=ArmyBreakthrough(attack_multiplier=_army_multiplier(attacker, turn, rules)),
        defender=ArmyBreakthrough(attack_multiplier=_army_multiplier(defender, turn, rules)),
    )
    result.matchups = detect_matchups(attacker.units, defender.units, turn, rules)

    for effect in result.matchups:
        side = result.for_role(effect.beneficiary)
        side.attack_multiplier += effect.multiplier_delta
        side.ignore_enemy_formation_fraction = max(
            side.ignore_enemy_formation_fraction, effect.ignore_formation_fraction
        )
        side.special_rules.append(effect.description)
        result.chaos_increase += effect.chaos_increase

    floor = rules.breakthrough.minimum_multiplier
    for side in (result.attacker, result.defender):
        side.attack_multiplier = max(floor, side.attack_multiplier)

    logger.debug(
        "breakthrough turn %s: attacker x%.2f defender x%.2f rules=%s",
        turn,
        result.attacker.attack_multiplier,
        result.defender.attack_multiplier,
        [effect.rule.value for effect in result.matchups],
    )
    return result
