"""Unit tests for cultural combat modifiers."""

from __future__ import annotations

import logging

from strategikon.domain.culture import (
    CULTURAL_COMBAT_MODIFIERS,
    NEUTRAL_CULTURE,
    apply_cultural_attack_modifiers,
    apply_cultural_defense_modifiers,
    cultural_morale_bonus,
    cultural_preparation_bonus,
    get_cultural_modifiers,
    has_cultural_trait,
    resolve_culture_name,
)
from strategikon.domain.enums import Formation, SituationFlag


def test_eight_playable_cultures():
    assert len(CULTURAL_COMBAT_MODIFIERS) == 8


def test_resolve_culture_name_handles_aliases_and_case():
    assert resolve_culture_name("Celtic") == "Celtic Tribes"
    assert resolve_culture_name("celts") == "Celtic Tribes"
    assert resolve_culture_name("roman republic") == "Roman Republic"
    assert resolve_culture_name("Atlantis") is None
    assert resolve_culture_name(None) is None


def test_unknown_culture_is_neutral_with_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="strategikon.domain.culture"):
        modifiers = get_cultural_modifiers("Atlantis")

    assert modifiers is NEUTRAL_CULTURE
    assert "unknown culture 'Atlantis'" in caplog.text


def test_missing_culture_is_neutral_silently(caplog):
    with caplog.at_level(logging.WARNING, logger="strategikon.domain.culture"):
        assert get_cultural_modifiers(None) is NEUTRAL_CULTURE
    assert caplog.text == ""


def test_flag_keyed_attack_bonus():
    assert apply_cultural_attack_modifiers(5, "Celtic Tribes", [SituationFlag.CHARGING]) == 7
    assert apply_cultural_attack_modifiers(5, "Celtic Tribes") == 5


def test_formation_counts_as_active_key():
    assert apply_cultural_attack_modifiers(5, "Macedonian Kingdoms", formation="phalanx") == 6
    assert (
        apply_cultural_defense_modifiers(10, "Spartan City-State", formation=Formation.PHALANX)
        == 13
    )
    assert apply_cultural_defense_modifiers(10, "Roman Republic", formation="testudo") == 12


def test_plain_string_flags_match():
    assert apply_cultural_defense_modifiers(4, "Celtic Tribes", ["forest_cover"]) == 6


def test_wootz_steel_needs_the_upgrade_flag():
    upgraded = [SituationFlag.HAS_WOOTZ_UPGRADE]

    assert apply_cultural_attack_modifiers(5, "Mauryan Empire", upgraded) == 6
    assert apply_cultural_attack_modifiers(5, "Mauryan Empire") == 5
    assert apply_cultural_attack_modifiers(5, "Roman Republic", upgraded) == 5


def test_floors():
    assert apply_cultural_attack_modifiers(0.2, None) == 1
    assert apply_cultural_defense_modifiers(-3, None) == 0


def test_trait_and_bonus_helpers():
    assert has_cultural_trait("Celtic Tribes", "berserker_fury")
    assert not has_cultural_trait("Roman Republic", "berserker_fury")
    assert has_cultural_trait("Mauryan Empire", "wootz_steel")

    assert cultural_preparation_bonus("Celtic Tribes") == -1
    assert cultural_preparation_bonus("Atlantis") == 0
    assert cultural_morale_bonus("Spartan City-State") == 2
    assert cultural_morale_bonus(None) == 0
