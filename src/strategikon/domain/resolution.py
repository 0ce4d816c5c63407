"""Turn resolution: from two rosters and a context to casualties and deltas.

Operation order for every unit is fixed:

1. additive rating (weapon, training, formation, situation, anti-armor)
2. cultural additive bonuses
3. chaos attrition scaled by preparation (multiplicative)
4. breakthrough multiplier (multiplicative, army level)
5. casualty bucket accumulation

Army totals are the sum of per-unit effective values weighted by
``current_strength / max_strength`` over living units.  The caller's
armies and ``BattleState`` are never mutated; updated copies come back
in the :class:`TurnResult`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from strategikon.domain.attack import anti_armor_bonus, calculate_attack_rating
from strategikon.domain.breakthrough import BreakthroughResult, apply_breakthrough
from strategikon.domain.casualties import (
    CasualtyConversion,
    apply_damage_to_bucket,
    distribute_casualties,
)
from strategikon.domain.chaos import ChaosResult, ChaosRoll, calculate_chaos, roll_chaos_modifier
from strategikon.domain.culture import (
    apply_cultural_attack_modifiers,
    apply_cultural_defense_modifiers,
)
from strategikon.domain.defense import calculate_defense_rating
from strategikon.domain.enums import BattleStatus, CombatOutcome, Role
from strategikon.domain.invariants import ensure_roster_strengths
from strategikon.domain.models import (
    Army,
    BattleState,
    CombatContext,
    DamageHistoryEntry,
    Unit,
    UnitID,
)
from strategikon.domain.morale import check_unit_break, classify_outcome, morale_deltas
from strategikon.domain.preparation import apply_preparation_to_chaos, calculate_preparation
from strategikon.domain.rules_config import DEFAULT_RULES, RulesConfig
from strategikon.utils.rng import generate_seed

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResolutionOptions:
    """Seeding and overrides for one turn."""

    battle_id: int = 0
    attacker_seed: str | None = None
    defender_seed: str | None = None
    attacker_fixed_roll: int | None = None
    defender_fixed_roll: int | None = None

    def seed_for(self, role: Role, turn: int) -> str:
        explicit = self.attacker_seed if role is Role.ATTACKER else self.defender_seed
        if explicit is not None:
            return f"{explicit}:{turn}"
        return generate_seed(self.battle_id, turn, role.value, "chaos")

    def fixed_roll_for(self, role: Role) -> int | None:
        return self.attacker_fixed_roll if role is Role.ATTACKER else self.defender_fixed_roll


@dataclass(slots=True)
class UnitTurnRecord:
    """Ratings and weight of one unit in a turn."""

    unit_id: UnitID
    weight: float
    raw_attack: float
    raw_defense: float
    preparation: float
    attrition_factor: float
    effective_attack: float
    effective_defense: float
    routed: bool = False


@dataclass(slots=True)
class ArmyTurnRecord:
    """Aggregated ratings, rolls and losses for a single army."""

    role: Role
    units: list[UnitTurnRecord]
    raw_attack: float
    raw_defense: float
    preparation: float
    chaos_roll: ChaosRoll
    breakthrough_multiplier: float
    effective_attack: float
    effective_defense: float
    damage_received: float = 0.0
    conversion: CasualtyConversion | None = None
    casualties_by_unit: dict[UnitID, int] = field(default_factory=dict)
    routed_units: list[UnitID] = field(default_factory=list)
    morale_delta: int = 0

    @property
    def casualties(self) -> int:
        return sum(self.casualties_by_unit.values())


@dataclass(slots=True)
class TurnResult:
    """Everything one resolved turn produced, including the next state."""

    turn: int
    attacker: ArmyTurnRecord
    defender: ArmyTurnRecord
    chaos: ChaosResult
    breakthrough: BreakthroughResult
    outcome: CombatOutcome
    status: BattleStatus
    attacker_army: Army
    defender_army: Army
    state: BattleState

    def record_for(self, role: Role) -> ArmyTurnRecord:
        return self.attacker if role is Role.ATTACKER else self.defender


def _copy_army(army: Army) -> Army:
    return replace(army, units=[replace(unit, weapons=list(unit.weapons)) for unit in army.units])


def _target_unit(enemy: Army) -> Unit | None:
    living = enemy.living_units
    return living[0] if living else None


def _rate_unit(
    unit: Unit,
    army: Army,
    target: Unit | None,
    role: Role,
    context: CombatContext,
    chaos_level: int,
    ignore_formation_fraction: float,
    rules: RulesConfig,
) -> UnitTurnRecord:
    culture = army.culture_of(unit)
    flags = context.flags_for(role)

    attack = float(calculate_attack_rating(unit, context, target=target, role=role))
    if target is not None:
        attack += anti_armor_bonus(unit.primary_weapon, target.armor)
    attack = apply_cultural_attack_modifiers(attack, culture, flags, formation=unit.formation)

    defense = calculate_defense_rating(
        unit, context, role=role, ignore_formation_fraction=ignore_formation_fraction
    )
    defense = apply_cultural_defense_modifiers(defense, culture, flags, formation=unit.formation)

    if unit.routed:
        attack = 0.0
        defense *= rules.morale.routed_defense_factor

    preparation = calculate_preparation(context, role, unit=unit, culture=culture, rules=rules)
    mitigation = apply_preparation_to_chaos(chaos_level, preparation.level, rules)

    return UnitTurnRecord(
        unit_id=unit.id,
        weight=unit.strength_ratio,
        raw_attack=attack,
        raw_defense=defense,
        preparation=preparation.level,
        attrition_factor=mitigation.attrition_factor,
        effective_attack=attack * mitigation.attrition_factor,
        effective_defense=defense * mitigation.attrition_factor,
        routed=unit.routed,
    )


def _rate_army(
    army: Army,
    enemy: Army,
    role: Role,
    context: CombatContext,
    chaos: ChaosResult,
    breakthrough: BreakthroughResult,
    options: ResolutionOptions,
    turn: int,
    rules: RulesConfig,
) -> ArmyTurnRecord:
    target = _target_unit(enemy)
    ignore_fraction = breakthrough.for_role(role.opponent).ignore_enemy_formation_fraction
    units = [
        _rate_unit(unit, army, target, role, context, chaos.level, ignore_fraction, rules)
        for unit in army.living_units
    ]

    raw_attack = sum(record.raw_attack * record.weight for record in units)
    raw_defense = sum(record.raw_defense * record.weight for record in units)
    attack = sum(record.effective_attack * record.weight for record in units)
    defense = sum(record.effective_defense * record.weight for record in units)

    total_weight = sum(record.weight for record in units)
    if total_weight > 0:
        preparation = sum(record.preparation * record.weight for record in units) / total_weight
    else:
        preparation = rules.preparation.minimum_level

    chaos_roll = roll_chaos_modifier(
        chaos.level,
        options.seed_for(role, turn),
        fixed_roll=options.fixed_roll_for(role),
        rules=rules,
    )
    multiplier = breakthrough.for_role(role).attack_multiplier

    if army.active_units:
        attack = max(1.0, attack + chaos_roll.modifier / preparation)
        attack *= multiplier
    else:
        attack = 0.0

    return ArmyTurnRecord(
        role=role,
        units=units,
        raw_attack=raw_attack,
        raw_defense=raw_defense,
        preparation=preparation,
        chaos_roll=chaos_roll,
        breakthrough_multiplier=multiplier,
        effective_attack=attack,
        effective_defense=defense,
    )


def _apply_losses(
    army: Army,
    record: ArmyTurnRecord,
    damage: float,
    state: BattleState,
    rules: RulesConfig,
) -> None:
    record.damage_received = damage
    record.conversion = apply_damage_to_bucket(state.bucket_for(record.role), damage, rules)
    record.casualties_by_unit = distribute_casualties(army.units, record.conversion.casualties)

    units_by_id = {unit.id: unit for unit in army.units}
    for unit_id, lost in record.casualties_by_unit.items():
        unit = units_by_id[unit_id]
        unit.current_strength -= lost
        if unit.is_alive and check_unit_break(unit, lost, army.culture_of(unit), rules):
            unit.routed = True
            record.routed_units.append(unit_id)


def _status(attacker: Army, defender: Army) -> BattleStatus:
    if attacker.is_broken and defender.is_broken:
        return BattleStatus.DRAW
    if defender.is_broken:
        return BattleStatus.ATTACKER_WON
    if attacker.is_broken:
        return BattleStatus.DEFENDER_WON
    return BattleStatus.ONGOING


def resolve_turn(
    attacker: Army,
    defender: Army,
    context: CombatContext,
    state: BattleState,
    *,
    options: ResolutionOptions | None = None,
    rules: RulesConfig = DEFAULT_RULES,
) -> TurnResult:
    """Resolve one turn of combat between two armies."""

    options = options or ResolutionOptions()
    ensure_roster_strengths(attacker.units)
    ensure_roster_strengths(defender.units)

    turn = state.turn
    breakthrough = apply_breakthrough(attacker, defender, state.history, turn, rules)
    chaos = calculate_chaos(
        context.chaos_conditions(extra_disorder=breakthrough.chaos_increase), rules
    )

    attacker_record = _rate_army(
        attacker, defender, Role.ATTACKER, context, chaos, breakthrough, options, turn, rules
    )
    defender_record = _rate_army(
        defender, attacker, Role.DEFENDER, context, chaos, breakthrough, options, turn, rules
    )

    damage_to_defender = max(
        0.0, attacker_record.effective_attack - defender_record.effective_defense
    )
    damage_to_attacker = max(
        0.0, defender_record.effective_attack - attacker_record.effective_defense
    )

    new_state = state.copy()
    new_attacker = _copy_army(attacker)
    new_defender = _copy_army(defender)
    _apply_losses(new_attacker, attacker_record, damage_to_attacker, new_state, rules)
    _apply_losses(new_defender, defender_record, damage_to_defender, new_state, rules)

    outcome = classify_outcome(damage_to_defender - damage_to_attacker, rules)
    attacker_record.morale_delta, defender_record.morale_delta = morale_deltas(outcome)

    new_state.history.append(
        DamageHistoryEntry(
            turn=turn, army_a_damage=damage_to_attacker, army_b_damage=damage_to_defender
        )
    )
    new_state.turn = turn + 1

    ensure_roster_strengths(new_attacker.units)
    ensure_roster_strengths(new_defender.units)

    logger.debug(
        "turn %s: chaos %s, attack %.2f/%.2f, defense %.2f/%.2f, prep %.2f/%.2f, "
        "damage %.2f/%.2f, casualties %s/%s",
        turn,
        chaos.level,
        attacker_record.effective_attack,
        defender_record.effective_attack,
        attacker_record.effective_defense,
        defender_record.effective_defense,
        attacker_record.preparation,
        defender_record.preparation,
        damage_to_attacker,
        damage_to_defender,
        attacker_record.casualties,
        defender_record.casualties,
    )

    return TurnResult(
        turn=turn,
        attacker=attacker_record,
        defender=defender_record,
        chaos=chaos,
        breakthrough=breakthrough,
        outcome=outcome,
        status=_status(new_attacker, new_defender),
        attacker_army=new_attacker,
        defender_army=new_defender,
        state=new_state,
    )
