"""Enumerations and type aliases for the combat domain."""

from __future__ import annotations

from enum import StrEnum


class Role(StrEnum):
    """Which side of the current encounter a force fights on."""

    ATTACKER = "attacker"
    DEFENDER = "defender"

    @property
    def opponent(self) -> Role:
        return Role.DEFENDER if self is Role.ATTACKER else Role.ATTACKER


class TroopQuality(StrEnum):
    """Training tiers, from farmers to famous units."""

    LEVY = "levy"
    TRIBAL_WARRIORS = "tribal_warriors"
    MILITIA = "militia"
    PROFESSIONAL = "professional"
    VETERAN_MERCENARY = "veteran_mercenary"
    ELITE_GUARD = "elite_guard"
    LEGENDARY = "legendary"


class ArmorType(StrEnum):
    NO_ARMOR = "no_armor"
    LIGHT_ARMOR = "light_armor"
    MEDIUM_ARMOR = "medium_armor"
    HEAVY_ARMOR = "heavy_armor"


class ShieldType(StrEnum):
    NO_SHIELD = "no_shield"
    LIGHT_SHIELD = "light_shield"
    MEDIUM_SHIELD = "medium_shield"
    HEAVY_SHIELD = "heavy_shield"


class DamageType(StrEnum):
    BLUNT = "blunt"
    PIERCING = "piercing"
    SLASHING = "slashing"


class Formation(StrEnum):
    """Known battle formations (standard and cultural)."""

    PHALANX = "phalanx"
    TESTUDO = "testudo"
    SHIELD_WALL = "shield_wall"
    SQUARE = "square"
    HEDGEHOG = "hedgehog"
    WEDGE = "wedge"
    LINE = "line"
    LOOSE = "loose"
    COLUMN = "column"
    CRESCENT = "crescent"
    ECHELON = "echelon"
    CELTIC_FURY = "celtic_fury"
    ROMAN_MANIPULAR = "roman_manipular"
    MACEDONIAN_PHALANX = "macedonian_phalanx"
    PARTHIAN_FEINT = "parthian_feint"
    GERMANIC_BOAR = "germanic_boar"
    CHINESE_FIVE_ELEMENTS = "chinese_five_elements"


class Terrain(StrEnum):
    PLAINS = "plains"
    HILL = "hill"
    FOREST = "forest"
    MARSH = "marsh"
    MOUNTAIN = "mountain"
    RIVER = "river"
    DESERT = "desert"
    URBAN = "urban"


class Weather(StrEnum):
    CLEAR = "clear"
    OVERCAST = "overcast"
    LIGHT_RAIN = "light_rain"
    HEAVY_RAIN = "heavy_rain"
    FOG = "fog"
    SNOW = "snow"
    SANDSTORM = "sandstorm"
    THUNDERSTORM = "thunderstorm"


class TimeOfDay(StrEnum):
    DAWN = "dawn"
    MORNING = "morning"
    MIDDAY = "midday"
    AFTERNOON = "afternoon"
    DUSK = "dusk"
    NIGHT = "night"
    MIDNIGHT = "midnight"


class UnitDensity(StrEnum):
    SPARSE = "sparse"
    NORMAL = "normal"
    DENSE = "dense"
    COMPRESSED = "compressed"
    CRUSH = "crush"


class CombatSituation(StrEnum):
    PREPARED = "prepared"
    MEETING_ENGAGEMENT = "meeting_engagement"
    AMBUSH = "ambush"
    PURSUIT = "pursuit"
    SIEGE_ASSAULT = "siege_assault"
    RIVER_CROSSING = "river_crossing"
    NIGHT_RAID = "night_raid"
    RETREAT = "retreat"


class FormationState(StrEnum):
    INTACT = "intact"
    PARTIALLY_DISRUPTED = "partially_disrupted"
    MIXED = "mixed"
    MOSTLY_DISRUPTED = "mostly_disrupted"
    BROKEN = "broken"


class CommandState(StrEnum):
    COORDINATED = "coordinated"
    DELAYED = "delayed"
    CONFUSED = "confused"
    INTERRUPTED = "interrupted"
    LEADERLESS = "leaderless"


class SpecialChaosModifier(StrEnum):
    THREE_WAY_BATTLE = "three_way_battle"
    CIVIL_WAR = "civil_war"
    FOREST_NIGHT = "forest_night"
    MARSH_FOG = "marsh_fog"
    URBAN_FIRE = "urban_fire"
    WAR_ELEPHANTS_PRESENT = "war_elephants_present"
    FIRST_BATTLE = "first_battle"
    BLOOD_FEUD = "blood_feud"
    RELIGIOUS_FERVOR = "religious_fervor"
    WEAPON_BREAKAGE = "weapon_breakage"
    SUPPLY_SHORTAGE = "supply_shortage"
    COMMUNICATION_FAILURE = "communication_failure"


class SituationFlag(StrEnum):
    """Closed set of named boolean battlefield conditions."""

    # Positioning
    HIGH_GROUND = "high_ground"
    FLANKING = "flanking"
    FLANKED = "flanked"
    REAR_ATTACK = "rear_attack"
    SURROUNDED = "surrounded"
    CROSSING_OBSTACLE = "crossing_obstacle"
    IN_FORTIFICATION = "in_fortification"
    FORTIFIED_POSITION = "fortified_position"
    RIVER_BANK = "river_bank"
    FOREST_COVER = "forest_cover"
    MARSH_DEFENDER = "marsh_defender"

    # Combat state
    CHARGING = "charging"
    PURSUING_BROKEN = "pursuing_broken"
    DESPERATE = "desperate"
    DESPERATE_LAST_STAND = "desperate_last_stand"
    SURPRISED = "surprised"
    AMBUSHED = "ambushed"
    RETREATING = "retreating"
    FIGHTING_RETREAT = "fighting_retreat"
    PREPARED_DEFENSE = "prepared_defense"
    FORMATION_BROKEN = "formation_broken"
    EXHAUSTED = "exhausted"
    UNKNOWN_ENEMY = "unknown_enemy"
    LOW_SUPPLIES = "low_supplies"

    # Environmental
    FOREST_FIGHTING = "forest_fighting"
    NIGHT_COMBAT = "night_combat"
    RAIN_WEATHER = "rain_weather"
    EXTREME_HEAT = "extreme_heat"
    MARSH_TERRAIN = "marsh_terrain"
    DUST_STORM = "dust_storm"

    # Preparation: time and position
    TIME_TO_PREPARE = "time_to_prepare"
    WELL_RESTED = "well_rested"
    SCOUTED_TERRAIN = "scouted_terrain"

    # Preparation: intelligence
    SCOUTED_ENEMY = "scouted_enemy"
    ENEMY_COMPOSITION_KNOWN = "enemy_composition_known"
    LOCAL_GUIDES = "local_guides"
    SPIES_IN_CAMP = "spies_in_camp"

    # Preparation: coordination
    CLEAR_COMMAND = "clear_command"
    SIGNAL_SYSTEM = "signal_system"
    DRILLED_MANEUVERS = "drilled_maneuvers"
    COMBINED_ARMS = "combined_arms"

    # Preparation: environmental adaptation
    WEATHER_ADAPTED = "weather_adapted"
    TERRAIN_ADAPTED = "terrain_adapted"
    NIGHT_TRAINED = "night_trained"
    ACCLIMATIZED = "acclimatized"

    # Preparation: tactical advantage
    NUMERICAL_SUPERIORITY = "numerical_superiority"
    FLANKING_POSITION = "flanking_position"
    RESERVES_AVAILABLE = "reserves_available"

    # Preparation: morale and readiness
    HIGH_MORALE = "high_morale"
    WELL_SUPPLIED = "well_supplied"
    VETERAN_LEADERSHIP = "veteran_leadership"
    RELIGIOUS_BLESSING = "religious_blessing"

    # Attacker-only preparation
    INITIATIVE_ADVANTAGE = "initiative_advantage"
    MOMENTUM_CHARGE = "momentum_charge"
    CHOSEN_BATTLEFIELD = "chosen_battlefield"
    CONCENTRATED_ASSAULT = "concentrated_assault"
    TACTICAL_SURPRISE = "tactical_surprise"
    AMBUSH_ADVANTAGE = "ambush_advantage"
    FIRST_STRIKE = "first_strike"

    # Defender-only preparation
    PREPARED_POSITION = "prepared_position"
    TERRAIN_KNOWLEDGE = "terrain_knowledge"
    SECURE_SUPPLIES = "secure_supplies"
    DEFENSIVE_OPTIMIZATION = "defensive_optimization"
    INTERIOR_LINES = "interior_lines"

    # Cultural triggers
    SYSTEMATIC_ADVANCE = "systematic_advance"
    VETERAN_EXPERIENCE = "veteran_experience"
    INDIVIDUAL_COMBAT = "individual_combat"
    CROSSBOW_VOLLEY = "crossbow_volley"
    COORDINATED_ADVANCE = "coordinated_advance"
    HORSE_ARCHERY = "horse_archery"
    FEIGNED_RETREAT = "feigned_retreat"
    MOBILE_DEFENSE = "mobile_defense"
    DUAL_MODE = "dual_mode"
    ELEPHANT_CHARGE = "elephant_charge"
    DHARMIC_DISCIPLINE = "dharmic_discipline"
    LAST_STAND = "last_stand"
    NEVER_RETREAT = "never_retreat"
    HIT_AND_RUN = "hit_and_run"
    DESERT_FIGHTING = "desert_fighting"
    SMALL_UNIT_TACTICS = "small_unit_tactics"
    DESERT_TERRAIN = "desert_terrain"
    HAS_WOOTZ_UPGRADE = "has_wootz_upgrade"


class BreakthroughUnitType(StrEnum):
    MOUNTED = "mounted"
    HEAVY_INFANTRY = "heavy_infantry"
    RANGED_PRIMARY = "ranged_primary"
    ELITE = "elite"
    STANDARD = "standard"


class MatchupRule(StrEnum):
    CAVALRY_VS_PHALANX = "cavalry_vs_phalanx"
    CAVALRY_VS_SPEARS = "cavalry_vs_spears"
    INFANTRY_VS_RANGED = "infantry_vs_ranged"
    BERSERKER_VS_FORMATION = "berserker_vs_formation"


class CombatOutcome(StrEnum):
    """Classification of a single turn's damage exchange."""

    ATTACKER_MAJOR_VICTORY = "attacker_major_victory"
    ATTACKER_VICTORY = "attacker_victory"
    ATTACKER_ADVANTAGE = "attacker_advantage"
    STALEMATE = "stalemate"
    DEFENDER_ADVANTAGE = "defender_advantage"
    DEFENDER_VICTORY = "defender_victory"
    DEFENDER_MAJOR_VICTORY = "defender_major_victory"


class BattleStatus(StrEnum):
    """Overall state of a battle after a turn."""

    ONGOING = "ongoing"
    ATTACKER_WON = "attacker_won"
    DEFENDER_WON = "defender_won"
    DRAW = "draw"
