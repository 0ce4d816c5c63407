"""End-to-end battles across the built-in scenarios."""

from __future__ import annotations

import pytest

from strategikon.domain.enums import BattleStatus, Role
from strategikon.domain.models import BattleID, CombatContext
from strategikon.domain.rules_config import DEFAULT_RULES
from strategikon.services.balance_service import BUILTIN_SCENARIOS
from strategikon.services.battle_service import BattleSession


@pytest.mark.parametrize("scenario_key", list(BUILTIN_SCENARIOS))
@pytest.mark.parametrize("battle_id", [1, 2, 3])
def test_full_battle_keeps_invariants(scenario_key, battle_id):
    scenario = BUILTIN_SCENARIOS[scenario_key]
    attacker, defender = scenario.build_armies()
    session = BattleSession(
        BattleID(battle_id), attacker, defender, scenario.context, derive_conditions=True
    )

    while not session.finished:
        result = session.resolve_next_turn()

        assert 2 <= result.chaos.level <= DEFAULT_RULES.chaos.maximum_level
        for role in (Role.ATTACKER, Role.DEFENDER):
            record = result.record_for(role)
            bucket = result.state.buckets[role]
            assert 0.0 <= bucket.fill < 1.0
            assert record.effective_attack >= 0.0
            assert 0.5 <= record.preparation <= 4.0
        for army in (result.attacker_army, result.defender_army):
            for unit in army.units:
                assert 0 <= unit.current_strength <= unit.max_strength

    report = session.report()
    assert report.status is not BattleStatus.ONGOING
    assert report.turns <= DEFAULT_RULES.resolution.max_turns
    assert report.attacker_casualties == attacker.max_strength - report.attacker_strength
    assert report.defender_casualties == defender.max_strength - report.defender_strength
    assert len(session.state.history) == report.turns


def test_battle_in_bad_conditions_still_resolves():
    scenario = BUILTIN_SCENARIOS["basic_professional"]
    attacker, defender = scenario.build_armies()
    context = CombatContext(
        terrain="marsh",
        weather="thunderstorm",
        time_of_day="night",
        command_state="confused",
    )

    report = BattleSession(BattleID(11), attacker, defender, context).run()

    assert report.status in {
        BattleStatus.ATTACKER_WON,
        BattleStatus.DEFENDER_WON,
        BattleStatus.DRAW,
    }
    first = report.results[0]
    assert first.chaos.level == 10
    assert first.chaos.capped is True
