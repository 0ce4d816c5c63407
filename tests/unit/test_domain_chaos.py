"""Unit tests for battlefield chaos."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from strategikon.domain.chaos import (
    COMBAT_SITUATION_CHAOS,
    COMMAND_STATE_CHAOS,
    FORMATION_STATE_CHAOS,
    SPECIAL_CHAOS_MODIFIERS,
    TERRAIN_CHAOS,
    TIME_OF_DAY_CHAOS,
    UNIT_DENSITY_CHAOS,
    WEATHER_CHAOS,
    analyze_battle_for_chaos,
    calculate_chaos,
    chaos_description,
    roll_chaos_modifier,
)
from strategikon.domain.enums import (
    FormationState,
    SpecialChaosModifier,
    Terrain,
    TimeOfDay,
    UnitDensity,
    Weather,
)
from strategikon.domain.invariants import CombatInvariantError
from strategikon.domain.models import ChaosConditions, Unit, UnitID


def test_no_inputs_gives_minimum_chaos():
    result = calculate_chaos(ChaosConditions())

    assert result.level == 2
    assert result.raw_total == 0
    assert result.minimum_applied is True
    assert result.capped is False
    assert "Minimum battlefield uncertainty: +2" in result.breakdown.factors


def test_clear_plains_midday_is_minimum():
    conditions = ChaosConditions(
        terrain=Terrain.PLAINS,
        weather=Weather.CLEAR,
        time_of_day=TimeOfDay.MIDDAY,
        unit_density=UnitDensity.NORMAL,
        formation_state=FormationState.INTACT,
    )
    assert calculate_chaos(conditions).level == 2


def test_environmental_and_tactical_factors_add_up():
    conditions = ChaosConditions(
        terrain=Terrain.FOREST,
        weather=Weather.HEAVY_RAIN,
        unit_density=UnitDensity.DENSE,
        command_state="delayed",
    )
    result = calculate_chaos(conditions)

    assert result.breakdown.environmental == 4
    assert result.breakdown.tactical == 2
    assert result.level == 6
    assert result.minimum_applied is False
    assert "Terrain (forest): +2" in result.breakdown.factors


def test_chaos_caps_at_ten():
    conditions = ChaosConditions(
        terrain=Terrain.FOREST,
        weather=Weather.FOG,
        time_of_day=TimeOfDay.NIGHT,
        unit_density=UnitDensity.CRUSH,
    )
    result = calculate_chaos(conditions)

    assert result.raw_total == 14
    assert result.level == 10
    assert result.capped is True


def test_extra_disorder_counts_as_tactical():
    result = calculate_chaos(ChaosConditions(terrain=Terrain.URBAN, extra_disorder=2))

    assert result.breakdown.tactical == 2
    assert result.level == 5
    assert "Battle disorder: +2" in result.breakdown.factors


def test_special_modifiers_can_reduce_chaos():
    conditions = ChaosConditions(
        terrain=Terrain.URBAN,
        weather=Weather.FOG,
        special_modifiers=(SpecialChaosModifier.BLOOD_FEUD, "not_a_modifier"),
    )
    result = calculate_chaos(conditions)

    assert result.breakdown.special == -1
    assert result.level == 5


def test_unknown_condition_names_contribute_nothing():
    result = calculate_chaos(ChaosConditions(terrain="lava_field", weather="acid_rain"))
    assert result.raw_total == 0
    assert result.level == 2


def test_chaos_description_covers_every_level():
    assert chaos_description(2).startswith("Noticeable disorder")
    assert chaos_description(10).startswith("Complete chaos")
    assert chaos_description(42) == "Chaos level 42"


class TestRollChaosModifier:
    def test_zero_chaos_has_no_random_effect(self):
        roll = roll_chaos_modifier(0, "any-seed")
        assert roll.modifier == 0
        assert roll.roll == 0

    @pytest.mark.parametrize(
        ("level", "fixed", "expected"),
        [(6, 6, 3), (6, 1, -2), (6, 3, 0), (5, 3, 1), (5, 1, -1), (2, 1, 0), (2, 2, 1)],
    )
    def test_fixed_roll_is_centred_with_half_up_rounding(self, level, fixed, expected):
        assert roll_chaos_modifier(level, "seed", fixed_roll=fixed).modifier == expected

    def test_fixed_roll_is_clamped_to_die_faces(self):
        assert roll_chaos_modifier(5, "seed", fixed_roll=99).roll == 5
        assert roll_chaos_modifier(5, "seed", fixed_roll=-3).roll == 1

    def test_seeded_rolls_are_deterministic(self):
        first = roll_chaos_modifier(8, "7:3:attacker:chaos")
        second = roll_chaos_modifier(8, "7:3:attacker:chaos")
        assert first == second
        assert 1 <= first.roll <= 8

    def test_level_out_of_range_is_rejected(self):
        with pytest.raises(CombatInvariantError):
            roll_chaos_modifier(11, "seed")

    @given(level=st.integers(min_value=1, max_value=10), seed=st.text(min_size=1))
    def test_modifier_stays_within_half_the_die(self, level, seed):
        roll = roll_chaos_modifier(level, seed)
        assert 1 <= roll.roll <= level
        assert -level // 2 <= roll.modifier <= (level + 1) // 2


def _units(*specs: tuple[int, str]) -> list[Unit]:
    return [
        Unit(
            id=UnitID(index),
            current_strength=strength,
            max_strength=max(strength, 1),
            formation=formation,
        )
        for index, (strength, formation) in enumerate(specs, start=1)
    ]


class TestAnalyzeBattleForChaos:
    def test_density_tiers_follow_warrior_count(self):
        assert analyze_battle_for_chaos(_units((150, "line"))).unit_density == UnitDensity.SPARSE
        assert (
            analyze_battle_for_chaos(_units((200, "line"), (150, "line"))).unit_density
            == UnitDensity.NORMAL
        )
        compressed = analyze_battle_for_chaos(_units((650, "line")))
        assert compressed.unit_density == UnitDensity.COMPRESSED
        crush = analyze_battle_for_chaos(_units((850, "line")))
        assert crush.unit_density == UnitDensity.CRUSH

    def test_formation_state_from_share_in_formation(self):
        intact = _units((10, "line"), (10, "line"), (10, "line"), (10, "phalanx"), (10, "loose"))
        assert analyze_battle_for_chaos(intact).formation_state == FormationState.INTACT

        disrupted = _units((10, "line"), (10, "loose"), (10, "loose"), (10, "loose"), (10, "loose"))
        assert analyze_battle_for_chaos(disrupted).formation_state == (
            FormationState.MOSTLY_DISRUPTED
        )

        scattered = _units((10, "loose"), (10, "loose"))
        assert analyze_battle_for_chaos(scattered).formation_state == FormationState.BROKEN

    def test_first_battle_only_on_turn_one(self):
        units = _units((100, "line"))
        first = analyze_battle_for_chaos(units)
        assert SpecialChaosModifier.FIRST_BATTLE in first.special_modifiers
        later = analyze_battle_for_chaos(units, turn=2)
        assert SpecialChaosModifier.FIRST_BATTLE not in later.special_modifiers

    def test_environment_is_passed_through(self):
        conditions = analyze_battle_for_chaos(
            _units((100, "line")), terrain=Terrain.MARSH, weather=Weather.FOG, turn=4
        )
        assert conditions.terrain == Terrain.MARSH
        assert conditions.weather == Weather.FOG
        assert calculate_chaos(conditions).level == 5


def _optional(table):
    return st.sampled_from([None, *sorted(table)])


@given(
    terrain=_optional(TERRAIN_CHAOS),
    weather=_optional(WEATHER_CHAOS),
    time_of_day=_optional(TIME_OF_DAY_CHAOS),
    unit_density=_optional(UNIT_DENSITY_CHAOS),
    combat_situation=_optional(COMBAT_SITUATION_CHAOS),
    formation_state=_optional(FORMATION_STATE_CHAOS),
    command_state=_optional(COMMAND_STATE_CHAOS),
    special=st.lists(st.sampled_from(sorted(SPECIAL_CHAOS_MODIFIERS)), max_size=4),
    extra_disorder=st.integers(min_value=-3, max_value=4),
)
def test_chaos_level_always_within_bounds(
    terrain,
    weather,
    time_of_day,
    unit_density,
    combat_situation,
    formation_state,
    command_state,
    special,
    extra_disorder,
):
    conditions = ChaosConditions(
        terrain=terrain,
        weather=weather,
        time_of_day=time_of_day,
        unit_density=unit_density,
        combat_situation=combat_situation,
        formation_state=formation_state,
        command_state=command_state,
        special_modifiers=tuple(special),
        extra_disorder=extra_disorder,
    )
    result = calculate_chaos(conditions)
    assert 2 <= result.level <= 10
    assert result.minimum_applied == (result.raw_total < 2)
