"""Cultural combat modifiers for the playable civilizations.

Bonus maps are keyed by situational flag or formation name.  A bonus
applies when its key is active: either the flag is set for the unit's
side or the unit is deployed in that formation.  Special traits are
gates and never grant anything on their own.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from strategikon.domain.enums import Formation, SituationFlag

logger = logging.getLogger(__name__)

WOOTZ_STEEL_TRAIT = "wootz_steel"
WOOTZ_STEEL_ATTACK_BONUS = 1


@dataclass(frozen=True, slots=True)
class CulturalModifierSet:
    preparation_bonus: int = 0
    attack_bonuses: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    defense_bonuses: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    morale_bonus: int = 0
    special_traits: frozenset[str] = frozenset()


NEUTRAL_CULTURE = CulturalModifierSet()


def _culture(
    preparation_bonus: int,
    attack_bonuses: dict[str, int],
    defense_bonuses: dict[str, int],
    morale_bonus: int,
    special_traits: Iterable[str],
) -> CulturalModifierSet:
    return CulturalModifierSet(
        preparation_bonus=preparation_bonus,
        attack_bonuses=MappingProxyType(attack_bonuses),
        defense_bonuses=MappingProxyType(defense_bonuses),
        morale_bonus=morale_bonus,
        special_traits=frozenset(special_traits),
    )


CULTURAL_COMBAT_MODIFIERS: Mapping[str, CulturalModifierSet] = MappingProxyType(
    {
        "Roman Republic": _culture(
            2,
            {SituationFlag.FORTIFIED_POSITION: 1, SituationFlag.SYSTEMATIC_ADVANCE: 1},
            {Formation.TESTUDO: 2, SituationFlag.FORTIFIED_POSITION: 2},
            1,
            ("engineering", "professional_army", "auxiliary_recruitment"),
        ),
        "Macedonian Kingdoms": _culture(
            2,
            {Formation.PHALANX: 1, SituationFlag.COMBINED_ARMS: 1},
            {Formation.PHALANX: 2, SituationFlag.VETERAN_EXPERIENCE: 1},
            1,
            ("veteran_start", "equipment_flexibility", "no_militia"),
        ),
        "Celtic Tribes": _culture(
            -1,
            {
                SituationFlag.CHARGING: 2,
                SituationFlag.FLANKING: 2,
                SituationFlag.FOREST_FIGHTING: 1,
            },
            {SituationFlag.FOREST_COVER: 2, SituationFlag.INDIVIDUAL_COMBAT: 1},
            0,
            ("berserker_fury", "guerrilla_warfare", "woodland_mobility", "poor_archery"),
        ),
        "Han Dynasty": _culture(
            2,
            {SituationFlag.CROSSBOW_VOLLEY: 2, SituationFlag.COORDINATED_ADVANCE: 1},
            {SituationFlag.PREPARED_DEFENSE: 1, SituationFlag.FORTIFIED_POSITION: 1},
            1,
            ("advanced_technology", "larger_units", "assimilation"),
        ),
        "Sarmatian Confederations": _culture(
            0,
            {
                SituationFlag.CHARGING: 2,
                SituationFlag.HORSE_ARCHERY: 2,
                SituationFlag.FEIGNED_RETREAT: 2,
            },
            {SituationFlag.MOBILE_DEFENSE: 2, SituationFlag.DUAL_MODE: 1},
            0,
            ("cavalry_requirement", "dual_mode_combat", "no_infantry"),
        ),
        "Mauryan Empire": _culture(
            1,
            {SituationFlag.ELEPHANT_CHARGE: 3},
            {SituationFlag.COMBINED_ARMS: 1, SituationFlag.DHARMIC_DISCIPLINE: 1},
            1,
            (WOOTZ_STEEL_TRAIT, "war_elephants", "no_pursuit", "diverse_requirement"),
        ),
        "Spartan City-State": _culture(
            2,
            {Formation.PHALANX: 2, SituationFlag.LAST_STAND: 3},
            {Formation.PHALANX: 3, SituationFlag.NEVER_RETREAT: 2},
            2,
            ("fight_to_last", "no_mercenaries", "no_adaptation", "perioeci_militia"),
        ),
        "Berber Confederations": _culture(
            0,
            {
                SituationFlag.HIT_AND_RUN: 2,
                SituationFlag.DESERT_FIGHTING: 2,
                SituationFlag.SMALL_UNIT_TACTICS: 1,
            },
            {SituationFlag.DESERT_TERRAIN: 3, SituationFlag.MOBILE_DEFENSE: 1},
            0,
            ("desert_navigation", "master_raiders", "forest_penalty"),
        ),
    }
)

CULTURE_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "roman": "Roman Republic",
        "rome": "Roman Republic",
        "macedonian": "Macedonian Kingdoms",
        "celtic": "Celtic Tribes",
        "celts": "Celtic Tribes",
        "han": "Han Dynasty",
        "sarmatian": "Sarmatian Confederations",
        "mauryan": "Mauryan Empire",
        "spartan": "Spartan City-State",
        "berber": "Berber Confederations",
    }
)

_CANONICAL_BY_LOWER = {name.lower(): name for name in CULTURAL_COMBAT_MODIFIERS}


def resolve_culture_name(culture: str | None) -> str | None:
    """Return the canonical culture name, or None when it is unknown."""

    if not culture:
        return None
    if culture in CULTURAL_COMBAT_MODIFIERS:
        return culture
    key = culture.strip().lower()
    return _CANONICAL_BY_LOWER.get(key) or CULTURE_ALIASES.get(key)


def get_cultural_modifiers(culture: str | None) -> CulturalModifierSet:
    """Look up a culture; unknown names get the neutral set."""

    if culture is None:
        return NEUTRAL_CULTURE
    name = resolve_culture_name(culture)
    if name is None:
        logger.warning("unknown culture %r; using neutral modifiers", culture)
        return NEUTRAL_CULTURE
    return CULTURAL_COMBAT_MODIFIERS[name]


def _active_keys(flags: Iterable[str], formation: str | None) -> set[str]:
    keys = {str(flag) for flag in flags}
    if formation:
        keys.add(str(formation))
    return keys


def apply_cultural_attack_modifiers(
    base_attack: float,
    culture: str | None,
    flags: Iterable[str] = (),
    *,
    formation: str | None = None,
) -> float:
    modifiers = get_cultural_modifiers(culture)
    active = _active_keys(flags, formation)
    total = base_attack + sum(
        bonus for key, bonus in modifiers.attack_bonuses.items() if key in active
    )
    if WOOTZ_STEEL_TRAIT in modifiers.special_traits and SituationFlag.HAS_WOOTZ_UPGRADE in active:
        total += WOOTZ_STEEL_ATTACK_BONUS
    return max(1, total)


def apply_cultural_defense_modifiers(
    base_defense: float,
    culture: str | None,
    flags: Iterable[str] = (),
    *,
    formation: str | None = None,
) -> float:
    modifiers = get_cultural_modifiers(culture)
    active = _active_keys(flags, formation)
    total = base_defense + sum(
        bonus for key, bonus in modifiers.defense_bonuses.items() if key in active
    )
    return max(0, total)


def cultural_preparation_bonus(culture: str | None) -> int:
    return get_cultural_modifiers(culture).preparation_bonus


def cultural_morale_bonus(culture: str | None) -> int:
    return get_cultural_modifiers(culture).morale_bonus


def has_cultural_trait(culture: str | None, trait: str) -> bool:
    return trait in get_cultural_modifiers(culture).special_traits
