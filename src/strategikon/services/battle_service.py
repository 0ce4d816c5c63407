"""Battle session service for Strategikon.

A :class:`BattleSession` owns the running state of exactly one battle
(turn counter, damage history, casualty buckets) and feeds it through
the pure turn resolver one turn at a time.  Independent sessions share
nothing, so many battles can be simulated side by side.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace

from strategikon.domain.chaos import analyze_battle_for_chaos
from strategikon.domain.enums import BattleStatus, Role
from strategikon.domain.models import Army, BattleID, BattleState, CombatContext
from strategikon.domain.resolution import ResolutionOptions, TurnResult, resolve_turn
from strategikon.domain.rules_config import DEFAULT_RULES, RulesConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BattleReport:
    """Summary of a finished (or turn-limited) battle."""

    battle_id: BattleID
    status: BattleStatus
    turns: int
    attacker_strength: int
    defender_strength: int
    attacker_casualties: int
    defender_casualties: int
    results: list[TurnResult] = field(default_factory=list)

    @property
    def winner(self) -> Role | None:
        if self.status is BattleStatus.ATTACKER_WON:
            return Role.ATTACKER
        if self.status is BattleStatus.DEFENDER_WON:
            return Role.DEFENDER
        return None


class BattleSession:
    """Sequential turn-by-turn resolution of one battle."""

    def __init__(
        self,
        battle_id: BattleID,
        attacker: Army,
        defender: Army,
        context: CombatContext,
        *,
        rules: RulesConfig = DEFAULT_RULES,
        state: BattleState | None = None,
        derive_conditions: bool = False,
    ) -> None:
        self.battle_id = battle_id
        self.attacker = attacker
        self.defender = defender
        self.context = context
        self.rules = rules
        self.state = state or BattleState()
        self.derive_conditions = derive_conditions
        self.status = BattleStatus.ONGOING
        self.results: list[TurnResult] = []

    @property
    def finished(self) -> bool:
        return self.status is not BattleStatus.ONGOING

    def _turn_context(self) -> CombatContext:
        """Refresh density and formation state from the rosters when requested."""

        if not self.derive_conditions:
            return self.context
        units = self.attacker.living_units + self.defender.living_units
        derived = analyze_battle_for_chaos(
            units,
            terrain=self.context.terrain,
            weather=self.context.weather,
            time_of_day=self.context.time_of_day,
            turn=self.state.turn,
            special_modifiers=self.context.special_modifiers,
        )
        return replace(
            self.context,
            unit_density=derived.unit_density,
            formation_state=derived.formation_state,
            special_modifiers=derived.special_modifiers,
        )

    def resolve_next_turn(
        self,
        *,
        attacker_fixed_roll: int | None = None,
        defender_fixed_roll: int | None = None,
    ) -> TurnResult:
        """Resolve the next turn and advance the session state."""

        if self.finished:
            raise ValueError(f"Battle {self.battle_id} is already over ({self.status})")

        options = ResolutionOptions(
            battle_id=self.battle_id,
            attacker_fixed_roll=attacker_fixed_roll,
            defender_fixed_roll=defender_fixed_roll,
        )
        result = resolve_turn(
            self.attacker,
            self.defender,
            self._turn_context(),
            self.state,
            options=options,
            rules=self.rules,
        )

        self.attacker = result.attacker_army
        self.defender = result.defender_army
        self.state = result.state
        self.results.append(result)
        self.status = result.status

        if not self.finished and result.turn >= self.rules.resolution.max_turns:
            self.status = self._decide_on_strength()
            logger.info(
                "battle %s reached the %s-turn limit: %s",
                self.battle_id,
                self.rules.resolution.max_turns,
                self.status,
            )
        return result

    def _decide_on_strength(self) -> BattleStatus:
        attacker_ratio = _remaining_ratio(self.attacker)
        defender_ratio = _remaining_ratio(self.defender)
        if attacker_ratio > defender_ratio:
            return BattleStatus.ATTACKER_WON
        if defender_ratio > attacker_ratio:
            return BattleStatus.DEFENDER_WON
        return BattleStatus.DRAW

    def run(self) -> BattleReport:
        """Resolve turns until a side breaks or the turn limit is reached."""

        while not self.finished:
            self.resolve_next_turn()
        return self.report()

    def report(self) -> BattleReport:
        return BattleReport(
            battle_id=self.battle_id,
            status=self.status,
            turns=len(self.results),
            attacker_strength=self.attacker.total_strength,
            defender_strength=self.defender.total_strength,
            attacker_casualties=sum(result.attacker.casualties for result in self.results),
            defender_casualties=sum(result.defender.casualties for result in self.results),
            results=list(self.results),
        )


def _remaining_ratio(army: Army) -> float:
    """Share of the army's strength still fighting (routed units excluded)."""

    if army.max_strength <= 0:
        return 0.0
    return sum(unit.current_strength for unit in army.active_units) / army.max_strength
