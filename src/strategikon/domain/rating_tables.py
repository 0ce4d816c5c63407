"""Static lookup tables for attack, defense and situational ratings.

Weapons rate on a 2-12 attack scale, armor on a 0-10 defense scale.
Attack and defense keep independent training and formation tables: the
same formation can help one and hurt the other (``testudo``).
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from strategikon.domain.enums import (
    ArmorType,
    DamageType,
    Formation,
    ShieldType,
    SituationFlag,
    TroopQuality,
)


def _frozen(table: dict) -> Mapping:
    return MappingProxyType(table)


UNKNOWN_WEAPON_ATTACK = 2

WEAPON_ATTACK_RATINGS: Mapping[str, int] = _frozen(
    {
        # Light weapons
        "clubs": 3,
        "daggers": 2,
        "spear_basic": 4,
        "sickle": 2,
        "light_javelin": 2,
        "sling": 4,
        "self_bow_basic": 3,
        "throwing_spear": 3,
        "germanic_war_scythe": 3,
        "chinese_quarterstaff": 3,
        "roman_pugio": 2,
        "roman_plumbatae": 2,
        "germanic_throwing_axe": 3,
        # Medium weapons
        "spear_professional": 5,
        "battle_axe": 5,
        "mace": 4,
        "sword_standard": 4,
        "self_bow_professional": 5,
        "javelin_heavy": 6,
        "sling_professional": 6,
        "roman_gladius": 5,
        "greek_xiphos": 4,
        "chinese_dao": 5,
        "celtic_longsword": 5,
        "persian_akinakes": 3,
        "roman_pilum": 6,
        "greek_composite_bow": 6,
        "persian_recurve_bow": 6,
        "han_chinese_crossbow": 8,
        "parthian_horse_bow": 6,
        # Heavy weapons
        "two_handed_spear": 7,
        "heavy_mace": 9,
        "great_axe": 8,
        "macedonian_sarissa": 6,
        "thracian_rhomphaia": 8,
        "celtic_champions_sword": 7,
        "chinese_chang_dao": 7,
        "germanic_framea": 6,
        "persian_kontos": 12,
    }
)

RANGED_WEAPONS: frozenset[str] = frozenset(
    {
        "compositeBow",
        "bow",
        "crossbow",
        "sling",
        "javelin",
        "throwing_axe",
        "han_chinese_crossbow",
        "self_bow_professional",
        "self_bow_basic",
        "greek_composite_bow",
        "persian_recurve_bow",
        "parthian_horse_bow",
        "sling_professional",
        "javelin_heavy",
    }
)

# Substrings marking a primary weapon as missile-first for breakthrough purposes.
RANGED_PRIMARY_MARKERS: tuple[str, ...] = ("bow", "crossbow", "sling", "javelin", "plumbatae")

TWO_HANDED_WEAPONS: frozenset[str] = frozenset(
    {
        "two_handed_spear",
        "heavy_mace",
        "great_axe",
        "macedonian_sarissa",
        "thracian_rhomphaia",
        "chinese_chang_dao",
        "germanic_war_scythe",
    }
)

TRAINING_ATTACK_BONUSES: Mapping[str, int] = _frozen(
    {
        TroopQuality.LEVY: 0,
        TroopQuality.TRIBAL_WARRIORS: 1,
        TroopQuality.MILITIA: 2,
        TroopQuality.PROFESSIONAL: 4,
        TroopQuality.VETERAN_MERCENARY: 6,
        TroopQuality.ELITE_GUARD: 8,
        TroopQuality.LEGENDARY: 10,
    }
)

TRAINING_DEFENSE_BONUSES: Mapping[str, int] = _frozen(
    {
        TroopQuality.LEVY: 0,
        TroopQuality.TRIBAL_WARRIORS: 1,
        TroopQuality.MILITIA: 2,
        TroopQuality.PROFESSIONAL: 4,
        TroopQuality.VETERAN_MERCENARY: 6,
        TroopQuality.ELITE_GUARD: 8,
        TroopQuality.LEGENDARY: 10,
    }
)

FORMATION_ATTACK_MODIFIERS: Mapping[str, int] = _frozen(
    {
        Formation.PHALANX: -1,
        Formation.TESTUDO: -2,
        Formation.SHIELD_WALL: -1,
        Formation.SQUARE: -1,
        Formation.WEDGE: 2,
        Formation.LINE: 1,
        Formation.LOOSE: 1,
        Formation.COLUMN: 0,
        Formation.CRESCENT: 1,
        Formation.ECHELON: 0,
        Formation.CELTIC_FURY: 3,
        Formation.ROMAN_MANIPULAR: 1,
        Formation.MACEDONIAN_PHALANX: -1,
        Formation.PARTHIAN_FEINT: 2,
        Formation.GERMANIC_BOAR: 2,
        Formation.CHINESE_FIVE_ELEMENTS: 0,
    }
)

FORMATION_DEFENSE_MODIFIERS: Mapping[str, int] = _frozen(
    {
        Formation.PHALANX: 4,
        Formation.TESTUDO: 6,
        Formation.SHIELD_WALL: 3,
        Formation.SQUARE: 2,
        Formation.HEDGEHOG: 5,
        Formation.LINE: 1,
        Formation.COLUMN: 0,
        Formation.ECHELON: 1,
        Formation.WEDGE: -2,
        Formation.LOOSE: -1,
        Formation.CRESCENT: 0,
        Formation.CELTIC_FURY: -3,
        Formation.ROMAN_MANIPULAR: 2,
        Formation.MACEDONIAN_PHALANX: 4,
        Formation.PARTHIAN_FEINT: -1,
        Formation.GERMANIC_BOAR: -2,
        Formation.CHINESE_FIVE_ELEMENTS: 1,
    }
)

# Formations that brace against a mounted charge.
ANTI_CAVALRY_FORMATIONS: frozenset[str] = frozenset(
    {Formation.LINE, Formation.PHALANX, Formation.SQUARE, Formation.SHIELD_WALL}
)

SITUATIONAL_ATTACK_MODIFIERS: Mapping[SituationFlag, int] = _frozen(
    {
        SituationFlag.HIGH_GROUND: 1,
        SituationFlag.FLANKING: 2,
        SituationFlag.REAR_ATTACK: 4,
        SituationFlag.CROSSING_OBSTACLE: -2,
        SituationFlag.IN_FORTIFICATION: -1,
        SituationFlag.CHARGING: 2,
        SituationFlag.PURSUING_BROKEN: 3,
        SituationFlag.DESPERATE: 1,
        SituationFlag.SURPRISED: -3,
        SituationFlag.RETREATING: -2,
        SituationFlag.FOREST_FIGHTING: -1,
        SituationFlag.NIGHT_COMBAT: -2,
        SituationFlag.RAIN_WEATHER: -1,
        SituationFlag.EXTREME_HEAT: -1,
        SituationFlag.MARSH_TERRAIN: -2,
    }
)

ARMOR_DEFENSE_RATINGS: Mapping[str, int] = _frozen(
    {
        ArmorType.NO_ARMOR: 0,
        ArmorType.LIGHT_ARMOR: 3,
        ArmorType.MEDIUM_ARMOR: 6,
        ArmorType.HEAVY_ARMOR: 9,
    }
)

SHIELD_DEFENSE_BONUSES: Mapping[str, int] = _frozen(
    {
        ShieldType.NO_SHIELD: 0,
        ShieldType.LIGHT_SHIELD: 1,
        ShieldType.MEDIUM_SHIELD: 2,
        ShieldType.HEAVY_SHIELD: 3,
    }
)

SITUATIONAL_DEFENSE_MODIFIERS: Mapping[SituationFlag, int] = _frozen(
    {
        SituationFlag.HIGH_GROUND: 2,
        SituationFlag.FORTIFIED_POSITION: 4,
        SituationFlag.RIVER_BANK: 1,
        SituationFlag.FOREST_COVER: 1,
        SituationFlag.MARSH_DEFENDER: 2,
        SituationFlag.PREPARED_DEFENSE: 2,
        SituationFlag.FIGHTING_RETREAT: 1,
        SituationFlag.DESPERATE_LAST_STAND: 2,
        SituationFlag.SURPRISED: -4,
        SituationFlag.FLANKED: -3,
        SituationFlag.REAR_ATTACK: -5,
        SituationFlag.FORMATION_BROKEN: -3,
        SituationFlag.NIGHT_COMBAT: -1,
        SituationFlag.RAIN_WEATHER: -1,
        SituationFlag.EXTREME_HEAT: -2,
        SituationFlag.DUST_STORM: 1,
    }
)

# Bonus attack for particular weapons against particular armor.
ANTI_ARMOR_BONUSES: Mapping[str, Mapping[str, int]] = _frozen(
    {
        "clubs": {ArmorType.HEAVY_ARMOR: 2, ArmorType.MEDIUM_ARMOR: 1},
        "mace": {ArmorType.HEAVY_ARMOR: 3, ArmorType.MEDIUM_ARMOR: 2},
        "heavy_mace": {ArmorType.HEAVY_ARMOR: 4, ArmorType.MEDIUM_ARMOR: 3},
        "sling": {ArmorType.HEAVY_ARMOR: 2, ArmorType.MEDIUM_ARMOR: 1},
        "sling_professional": {ArmorType.HEAVY_ARMOR: 3, ArmorType.MEDIUM_ARMOR: 2},
        "spear_basic": {ArmorType.NO_ARMOR: 1, ArmorType.LIGHT_ARMOR: 2},
        "spear_professional": {ArmorType.NO_ARMOR: 2, ArmorType.LIGHT_ARMOR: 3},
        "two_handed_spear": {ArmorType.NO_ARMOR: 2, ArmorType.LIGHT_ARMOR: 3},
        "macedonian_sarissa": {ArmorType.NO_ARMOR: 2, ArmorType.LIGHT_ARMOR: 3},
        "han_chinese_crossbow": {ArmorType.LIGHT_ARMOR: 2, ArmorType.MEDIUM_ARMOR: 1},
        "battle_axe": {ArmorType.MEDIUM_ARMOR: 1},
        "great_axe": {ArmorType.MEDIUM_ARMOR: 2, ArmorType.HEAVY_ARMOR: 1},
        "germanic_throwing_axe": {ArmorType.LIGHT_ARMOR: 1},
    }
)

ARMOR_TYPE_EFFECTIVENESS: Mapping[str, Mapping[DamageType, int]] = _frozen(
    {
        ArmorType.NO_ARMOR: {DamageType.BLUNT: 0, DamageType.PIERCING: 0, DamageType.SLASHING: 0},
        ArmorType.LIGHT_ARMOR: {
            DamageType.BLUNT: 2,
            DamageType.PIERCING: 1,
            DamageType.SLASHING: 4,
        },
        ArmorType.MEDIUM_ARMOR: {
            DamageType.BLUNT: 3,
            DamageType.PIERCING: 5,
            DamageType.SLASHING: 6,
        },
        ArmorType.HEAVY_ARMOR: {
            DamageType.BLUNT: 4,
            DamageType.PIERCING: 8,
            DamageType.SLASHING: 9,
        },
    }
)

_BLUNT = ("clubs", "mace", "heavy_mace", "sling", "sling_professional")
_PIERCING = (
    "spear_basic",
    "spear_professional",
    "two_handed_spear",
    "macedonian_sarissa",
    "germanic_framea",
    "light_javelin",
    "javelin_heavy",
    "roman_pilum",
    "throwing_spear",
    "persian_kontos",
    "han_chinese_crossbow",
    "self_bow_basic",
    "self_bow_professional",
    "greek_composite_bow",
    "persian_recurve_bow",
    "parthian_horse_bow",
)

# Everything unlisted is treated as slashing.
WEAPON_DAMAGE_TYPES: Mapping[str, DamageType] = _frozen(
    {
        **{weapon: DamageType.BLUNT for weapon in _BLUNT},
        **{weapon: DamageType.PIERCING for weapon in _PIERCING},
    }
)
