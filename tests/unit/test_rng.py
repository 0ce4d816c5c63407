"""Tests for the deterministic RNG used by chaos rolls.

Tests cover:
- Determinism (same seed -> same result)
- Variety (different seeds -> different results)
- Dice notation parsing and validation
- Property-based tests
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from strategikon.utils.rng import generate_seed, roll_dice
from strategikon.utils.rounding import round_half_up


class TestGenerateSeed:
    """Tests for generate_seed function."""

    def test_basic_seed_generation(self):
        seed = generate_seed(1, 3, "attacker", "chaos")
        assert seed == "1:3:attacker:chaos"

    def test_different_parameters_produce_different_seeds(self):
        seeds = {
            generate_seed(1, 1, "attacker", "chaos"),
            generate_seed(2, 1, "attacker", "chaos"),
            generate_seed(1, 2, "attacker", "chaos"),
            generate_seed(1, 1, "defender", "chaos"),
            generate_seed(1, 1, "attacker", "other"),
        }
        assert len(seeds) == 5, "All seeds should be unique"

    def test_negative_battle_id_raises_error(self):
        with pytest.raises(ValueError, match="battle_id must be non-negative"):
            generate_seed(-1, 1, "attacker", "chaos")

    def test_negative_turn_raises_error(self):
        with pytest.raises(ValueError, match="turn must be non-negative"):
            generate_seed(1, -1, "attacker", "chaos")

    def test_zero_values_allowed(self):
        assert generate_seed(0, 0, "defender", "chaos") == "0:0:defender:chaos"

    @given(
        battle_id=st.integers(min_value=0, max_value=10000),
        turn=st.integers(min_value=0, max_value=200),
        side=st.sampled_from(["attacker", "defender"]),
        context=st.text(min_size=1),
    )
    def test_seed_generation_properties(self, battle_id, turn, side, context):
        seed = generate_seed(battle_id, turn, side, context)
        assert seed == f"{battle_id}:{turn}:{side}:{context}"


class TestRollDice:
    """Tests for roll_dice function."""

    def test_determinism_same_seed_same_result(self):
        seed = generate_seed(1, 1, "attacker", "chaos")
        assert roll_dice(seed, "1d10") == roll_dice(seed, "1d10")

    def test_different_seeds_produce_variety(self):
        totals = {
            roll_dice(generate_seed(1, turn, "attacker", "chaos"), "1d10").total
            for turn in range(30)
        }
        assert len(totals) > 1

    def test_result_structure(self):
        seed = generate_seed(4, 2, "defender", "chaos")
        result = roll_dice(seed, "2d6")

        assert result.notation == "2d6"
        assert len(result.rolls) == 2
        assert all(1 <= roll <= 6 for roll in result.rolls)
        assert result.total == sum(result.rolls)
        assert result.seed == seed

    def test_default_notation_is_single_d6(self):
        result = roll_dice("seed")
        assert result.notation == "1d6"
        assert len(result.rolls) == 1

    def test_case_insensitive(self):
        assert roll_dice("seed", "2d6").rolls == roll_dice("seed", "2D6").rolls

    @pytest.mark.parametrize("notation", ["2x6", "d6", "2d", "2.5d6", "", "abc", "-2d6"])
    def test_invalid_notation_raises_error(self, notation):
        with pytest.raises(ValueError, match="Invalid dice notation"):
            roll_dice("seed", notation)

    def test_zero_dice_raises_error(self):
        with pytest.raises(ValueError, match="Number of dice must be positive"):
            roll_dice("seed", "0d6")

    def test_zero_sides_raises_error(self):
        with pytest.raises(ValueError, match="Number of sides must be positive"):
            roll_dice("seed", "2d0")

    @given(
        num_dice=st.integers(min_value=1, max_value=10),
        num_sides=st.integers(min_value=2, max_value=100),
    )
    def test_dice_roll_properties(self, num_dice, num_sides):
        result = roll_dice(generate_seed(1, 1, "attacker", "property"), f"{num_dice}d{num_sides}")

        assert len(result.rolls) == num_dice
        assert all(1 <= roll <= num_sides for roll in result.rolls)
        assert num_dice <= result.total <= num_dice * num_sides


class TestRoundHalfUp:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.5, 1), (1.5, 2), (2.5, 3), (-0.5, 0), (-1.5, -1), (2.49, 2), (-2.6, -3), (3.0, 3)],
    )
    def test_halves_round_towards_positive_infinity(self, value, expected):
        assert round_half_up(value) == expected
