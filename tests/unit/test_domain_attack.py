"""Unit tests for the attack rating calculator."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from strategikon.domain.attack import (
    anti_armor_bonus,
    anti_cavalry_penalty,
    armor_effectiveness,
    calculate_attack_rating,
    closing_distance_bonus,
    is_ranged_primary,
    is_ranged_weapon,
    weapon_attack_value,
    weapon_damage_type,
)
from strategikon.domain.enums import CombatSituation, DamageType, Role, SituationFlag, Terrain
from strategikon.domain.models import CombatContext, Unit, UnitID
from strategikon.domain.rating_tables import (
    FORMATION_ATTACK_MODIFIERS,
    SITUATIONAL_ATTACK_MODIFIERS,
    TRAINING_ATTACK_BONUSES,
    WEAPON_ATTACK_RATINGS,
)


def _roman() -> Unit:
    return Unit(
        id=UnitID(1),
        weapons=["roman_gladius"],
        armor="medium_armor",
        shield="medium_shield",
        quality="professional",
        formation="line",
    )


def _celt() -> Unit:
    return Unit(
        id=UnitID(2),
        weapons=["celtic_longsword"],
        armor="light_armor",
        shield="medium_shield",
        quality="tribal_warriors",
        formation="loose",
    )


def _archer(unit_id: int = 3) -> Unit:
    return Unit(id=UnitID(unit_id), weapons=["self_bow_professional"], quality="professional")


def test_roman_professional_line_rates_ten():
    assert calculate_attack_rating(_roman(), CombatContext()) == 10


def test_celtic_warriors_loose_rating():
    # longsword 5 + tribal 1 + loose 1
    assert calculate_attack_rating(_celt(), CombatContext()) == 7


def test_mounted_attacker_against_phalanx_takes_anti_cavalry_penalty():
    rider = Unit(id=UnitID(4), weapons=["sword_standard"], quality="professional", mounted=True)
    phalanx = Unit(id=UnitID(5), weapons=["spear_professional"], formation="phalanx")

    assert anti_cavalry_penalty(rider, phalanx) == -2
    assert calculate_attack_rating(rider, target=phalanx) == 9 - 2


def test_anti_cavalry_penalty_is_smaller_against_open_order():
    rider = Unit(id=UnitID(4), weapons=["sword_standard"], mounted=True)
    skirmisher = Unit(id=UnitID(5), formation="loose")
    other_rider = Unit(id=UnitID(6), mounted=True)

    assert anti_cavalry_penalty(rider, skirmisher) == -1
    assert anti_cavalry_penalty(rider, other_rider) == 0
    assert anti_cavalry_penalty(_roman(), skirmisher) == 0
    assert anti_cavalry_penalty(rider, None) == 0


def test_closing_distance_reduced_by_forest():
    context = CombatContext(terrain=Terrain.FOREST)
    assert closing_distance_bonus(_archer(), _roman(), context) == 2


def test_closing_distance_by_terrain_and_target():
    assert closing_distance_bonus(_archer(), _roman(), CombatContext()) == 3
    assert closing_distance_bonus(_archer(), _roman(), CombatContext(terrain=Terrain.URBAN)) == 1
    assert closing_distance_bonus(_archer(), _archer(9), CombatContext()) == 1
    assert closing_distance_bonus(_roman(), _celt(), CombatContext()) == 0


def test_closing_distance_ambush_bonus_is_capped():
    ambush = CombatContext(combat_situation=CombatSituation.AMBUSH)
    assert closing_distance_bonus(_archer(), _roman(), ambush) == 4
    urban_ambush = CombatContext(terrain=Terrain.URBAN, combat_situation=CombatSituation.AMBUSH)
    assert closing_distance_bonus(_archer(), _roman(), urban_ambush) == 2


def test_context_reports_ambush_situation():
    assert CombatContext(combat_situation=CombatSituation.AMBUSH).is_ambush is True
    assert CombatContext(combat_situation=CombatSituation.NIGHT_RAID).is_ambush is False
    assert CombatContext().is_ambush is False


def test_ambushed_defender_gets_no_closing_distance_against_melee():
    ambush = CombatContext(combat_situation=CombatSituation.AMBUSH)

    assert closing_distance_bonus(_archer(), _roman(), ambush, is_defender=True) == 0
    # Against missile troops the volleys still count, minus the ambusher's extra point.
    assert closing_distance_bonus(_archer(), _archer(9), ambush, is_defender=True) == 1


def test_attack_rating_includes_closing_distance_for_role():
    context = CombatContext(terrain=Terrain.FOREST)
    # bow 5 + professional 4 + line 1 + forest closing 2
    assert calculate_attack_rating(_archer(), context, target=_roman(), role=Role.ATTACKER) == 12

    ambush = CombatContext(combat_situation=CombatSituation.AMBUSH)
    assert calculate_attack_rating(_archer(), ambush, target=_roman(), role=Role.DEFENDER) == 10


def test_side_specific_flags_only_apply_to_their_role():
    context = CombatContext(attacker_flags=frozenset({SituationFlag.FLANKING}))

    assert calculate_attack_rating(_roman(), context, role=Role.ATTACKER) == 12
    assert calculate_attack_rating(_roman(), context, role=Role.DEFENDER) == 10
    assert calculate_attack_rating(_roman(), context) == 10


def test_shared_flags_apply_to_both_sides():
    context = CombatContext(flags=frozenset({SituationFlag.NIGHT_COMBAT}))
    assert calculate_attack_rating(_roman(), context, role=Role.DEFENDER) == 8


def test_attack_rating_floors_at_one():
    unit = Unit(id=UnitID(7), weapons=["daggers"], quality="levy", formation="testudo")
    context = CombatContext(flags=frozenset({SituationFlag.SURPRISED, SituationFlag.RETREATING}))
    assert calculate_attack_rating(unit, context) == 1


def test_unknown_equipment_falls_back_to_floor_values():
    unit = Unit(id=UnitID(8), weapons=["laser_sword"], quality="demigod", formation="blob")
    assert weapon_attack_value("laser_sword") == 2
    assert weapon_attack_value(None) == 2
    assert calculate_attack_rating(unit) == 2


def test_weapon_damage_types_and_armor_effectiveness():
    assert weapon_damage_type("mace") is DamageType.BLUNT
    assert weapon_damage_type("roman_pilum") is DamageType.PIERCING
    assert weapon_damage_type("roman_gladius") is DamageType.SLASHING
    assert weapon_damage_type(None) is DamageType.SLASHING

    assert armor_effectiveness("heavy_armor", DamageType.PIERCING) == 8
    assert armor_effectiveness("light_armor", "slashing") == 4
    assert armor_effectiveness("dragon_scale", DamageType.BLUNT) == 0


def test_anti_armor_bonuses():
    assert anti_armor_bonus("mace", "heavy_armor") == 3
    assert anti_armor_bonus("spear_professional", "light_armor") == 3
    assert anti_armor_bonus("battle_axe", "medium_armor") == 1
    assert anti_armor_bonus("roman_gladius", "heavy_armor") == 0
    assert anti_armor_bonus(None, "heavy_armor") == 0


def test_ranged_classification():
    assert is_ranged_weapon("han_chinese_crossbow")
    assert not is_ranged_weapon("roman_gladius")
    assert not is_ranged_weapon(None)

    assert is_ranged_primary(_archer())
    assert is_ranged_primary(Unit(id=UnitID(9), weapons=["roman_plumbatae", "roman_gladius"]))
    assert not is_ranged_primary(Unit(id=UnitID(10), weapons=["roman_gladius", "sling"]))
    assert not is_ranged_primary(Unit(id=UnitID(11)))


@given(
    weapon=st.sampled_from(sorted(WEAPON_ATTACK_RATINGS) + ["unknown"]),
    quality=st.sampled_from(sorted(TRAINING_ATTACK_BONUSES) + ["unknown"]),
    formation=st.sampled_from(sorted(FORMATION_ATTACK_MODIFIERS) + ["unknown"]),
    mounted=st.booleans(),
    flags=st.frozensets(st.sampled_from(sorted(SITUATIONAL_ATTACK_MODIFIERS))),
    terrain=st.sampled_from(list(Terrain)),
    situation=st.sampled_from([None, *CombatSituation]),
    role=st.sampled_from([None, Role.ATTACKER, Role.DEFENDER]),
)
def test_attack_rating_never_below_one(
    weapon, quality, formation, mounted, flags, terrain, situation, role
):
    unit = Unit(
        id=UnitID(1), weapons=[weapon], quality=quality, formation=formation, mounted=mounted
    )
    context = CombatContext(terrain=terrain, combat_situation=situation, flags=flags)
    assert calculate_attack_rating(unit, context, target=_roman(), role=role) >= 1
