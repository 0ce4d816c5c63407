"""Unit tests for the defense rating calculator."""

from __future__ import annotations

import pytest
from hypothesis import given
from hypothesis import strategies as st

from strategikon.domain.defense import calculate_defense_rating, formation_defense_value
from strategikon.domain.enums import Role, SituationFlag
from strategikon.domain.models import CombatContext, Unit, UnitID
from strategikon.domain.rating_tables import (
    ARMOR_DEFENSE_RATINGS,
    FORMATION_DEFENSE_MODIFIERS,
    SHIELD_DEFENSE_BONUSES,
    SITUATIONAL_DEFENSE_MODIFIERS,
    TRAINING_DEFENSE_BONUSES,
)


def test_roman_professional_defense():
    unit = Unit(
        id=UnitID(1),
        armor="medium_armor",
        shield="medium_shield",
        quality="professional",
        formation="line",
    )
    # armor 6 + shield 2 + professional 4 + line 1
    assert calculate_defense_rating(unit) == 13


def test_testudo_defends_well_but_attacks_poorly():
    assert formation_defense_value("testudo") == 6
    assert formation_defense_value("unknown") == 0


def test_fortified_position_only_for_the_side_that_holds_it():
    unit = Unit(id=UnitID(1), armor="light_armor")
    context = CombatContext(defender_flags=frozenset({SituationFlag.FORTIFIED_POSITION}))

    assert calculate_defense_rating(unit, context, role=Role.DEFENDER) == 3 + 1 + 4
    assert calculate_defense_rating(unit, context, role=Role.ATTACKER) == 3 + 1


def test_ignore_formation_fraction_reduces_positive_bonus():
    phalanx = Unit(id=UnitID(1), formation="phalanx")
    assert calculate_defense_rating(phalanx, ignore_formation_fraction=0.5) == pytest.approx(2.0)


def test_ignore_formation_fraction_leaves_penalties_alone():
    wedge = Unit(id=UnitID(1), armor="light_armor", formation="wedge")
    assert calculate_defense_rating(wedge, ignore_formation_fraction=0.5) == 1


def test_defense_rating_floors_at_zero():
    unit = Unit(id=UnitID(1), formation="celtic_fury")
    context = CombatContext(flags=frozenset({SituationFlag.SURPRISED, SituationFlag.REAR_ATTACK}))
    assert calculate_defense_rating(unit, context) == 0


@given(
    armor=st.sampled_from(sorted(ARMOR_DEFENSE_RATINGS) + ["unknown"]),
    shield=st.sampled_from(sorted(SHIELD_DEFENSE_BONUSES) + ["unknown"]),
    quality=st.sampled_from(sorted(TRAINING_DEFENSE_BONUSES) + ["unknown"]),
    formation=st.sampled_from(sorted(FORMATION_DEFENSE_MODIFIERS) + ["unknown"]),
    flags=st.frozensets(st.sampled_from(sorted(SITUATIONAL_DEFENSE_MODIFIERS))),
    ignore=st.floats(min_value=0.0, max_value=1.0),
)
def test_defense_rating_never_negative(armor, shield, quality, formation, flags, ignore):
    unit = Unit(id=UnitID(1), armor=armor, shield=shield, quality=quality, formation=formation)
    context = CombatContext(flags=flags)
    assert calculate_defense_rating(unit, context, ignore_formation_fraction=ignore) >= 0
