"""Dataclasses describing the combat-relevant projection of game entities.

Storage, order parsing and fog-of-war live outside the engine.  The
dataclasses below are the in-memory values the rules layer operates on;
persistence adapters and the HTTP schemas translate to and from them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import NewType

from strategikon.domain.enums import (
    CombatSituation,
    CommandState,
    Formation,
    FormationState,
    Role,
    SituationFlag,
    Terrain,
    TimeOfDay,
    UnitDensity,
    Weather,
)

# --- Strongly typed identifiers -------------------------------------------------

UnitID = NewType("UnitID", int)
ArmyID = NewType("ArmyID", int)
BattleID = NewType("BattleID", int)


# --- Forces ---------------------------------------------------------------------


@dataclass(slots=True)
class Unit:
    """A single block of troops as seen by the combat engine.

    Equipment, quality and formation are free-form identifiers: anything
    the rating tables do not know resolves to a floor value instead of
    failing.
    """

    id: UnitID
    weapons: list[str] = field(default_factory=list)
    armor: str = "no_armor"
    shield: str = "no_shield"
    quality: str = "levy"
    formation: str = Formation.LINE
    mounted: bool = False
    current_strength: int = 100
    max_strength: int = 100
    culture: str | None = None
    routed: bool = False
    name: str | None = None

    @property
    def primary_weapon(self) -> str | None:
        return self.weapons[0] if self.weapons else None

    @property
    def is_alive(self) -> bool:
        return self.current_strength > 0

    @property
    def is_active(self) -> bool:
        """Alive and still holding the line."""
        return self.current_strength > 0 and not self.routed

    @property
    def strength_ratio(self) -> float:
        if self.max_strength <= 0:
            return 0.0
        return self.current_strength / self.max_strength


@dataclass(slots=True)
class Army:
    """One side's roster for the current encounter."""

    id: ArmyID
    units: list[Unit]
    culture: str | None = None
    name: str | None = None

    @property
    def living_units(self) -> list[Unit]:
        return [unit for unit in self.units if unit.is_alive]

    @property
    def active_units(self) -> list[Unit]:
        return [unit for unit in self.units if unit.is_active]

    @property
    def total_strength(self) -> int:
        return sum(unit.current_strength for unit in self.units)

    @property
    def max_strength(self) -> int:
        return sum(unit.max_strength for unit in self.units)

    @property
    def is_broken(self) -> bool:
        return not self.active_units

    def culture_of(self, unit: Unit) -> str | None:
        """A unit's own culture wins over the army-wide default."""
        return unit.culture or self.culture


# --- Battlefield conditions -----------------------------------------------------


@dataclass(frozen=True, slots=True)
class ChaosConditions:
    """Inputs to the chaos calculator."""

    terrain: str | None = None
    weather: str | None = None
    time_of_day: str | None = None
    unit_density: str | None = None
    combat_situation: str | None = None
    formation_state: str | None = None
    command_state: str | None = None
    special_modifiers: tuple[str, ...] = ()
    extra_disorder: int = 0


@dataclass(frozen=True, slots=True)
class CombatContext:
    """Transient record of the conditions for one encounter.

    ``flags`` apply to both sides; ``attacker_flags`` and ``defender_flags``
    carry conditions only one side experiences (``surprised``,
    ``fortified_position`` ...), as decided by the fog-of-war and order
    layers upstream.
    """

    terrain: str = Terrain.PLAINS
    weather: str = Weather.CLEAR
    time_of_day: str = TimeOfDay.MIDDAY
    unit_density: str = UnitDensity.NORMAL
    combat_situation: str | None = None
    formation_state: str = FormationState.INTACT
    command_state: str = CommandState.COORDINATED
    special_modifiers: tuple[str, ...] = ()
    flags: frozenset[SituationFlag] = frozenset()
    attacker_flags: frozenset[SituationFlag] = frozenset()
    defender_flags: frozenset[SituationFlag] = frozenset()

    @property
    def is_ambush(self) -> bool:
        return self.combat_situation == CombatSituation.AMBUSH

    def flags_for(self, role: Role | None) -> frozenset[SituationFlag]:
        """Return the flags active for one side of the encounter."""

        if role is Role.ATTACKER:
            return self.flags | self.attacker_flags
        if role is Role.DEFENDER:
            return self.flags | self.defender_flags
        return self.flags

    def chaos_conditions(self, *, extra_disorder: int = 0) -> ChaosConditions:
        return ChaosConditions(
            terrain=self.terrain,
            weather=self.weather,
            time_of_day=self.time_of_day,
            unit_density=self.unit_density,
            combat_situation=self.combat_situation,
            formation_state=self.formation_state,
            command_state=self.command_state,
            special_modifiers=self.special_modifiers,
            extra_disorder=extra_disorder,
        )


# --- Per-battle running state ---------------------------------------------------


@dataclass(frozen=True, slots=True)
class DamageHistoryEntry:
    """Damage each army received in one turn (army A is the attacker)."""

    turn: int
    army_a_damage: float
    army_b_damage: float

    @property
    def combined(self) -> float:
        return self.army_a_damage + self.army_b_damage


@dataclass(slots=True)
class CasualtyBucket:
    """Fractional damage carried between turns until it overflows."""

    fill: float = 0.0
    total_casualties: int = 0


@dataclass(slots=True)
class BattleState:
    """Running state owned by exactly one battle.

    Concurrent simulations must each hold their own instance.
    """

    turn: int = 1
    history: list[DamageHistoryEntry] = field(default_factory=list)
    buckets: dict[Role, CasualtyBucket] = field(
        default_factory=lambda: {Role.ATTACKER: CasualtyBucket(), Role.DEFENDER: CasualtyBucket()}
    )

    def copy(self) -> BattleState:
        return BattleState(
            turn=self.turn,
            history=list(self.history),
            buckets={
                role: CasualtyBucket(fill=bucket.fill, total_casualties=bucket.total_casualties)
                for role, bucket in self.buckets.items()
            },
        )

    def bucket_for(self, role: Role) -> CasualtyBucket:
        """Return (creating on first encounter) the bucket of the receiving army."""

        bucket = self.buckets.get(role)
        if bucket is None:
            bucket = CasualtyBucket()
            self.buckets[role] = bucket
        return bucket
