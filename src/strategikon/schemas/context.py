from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from pydantic import BaseModel, Field, field_validator

from strategikon.domain import models as dm
from strategikon.domain.enums import (
    CombatSituation,
    CommandState,
    FormationState,
    SituationFlag,
    Terrain,
    TimeOfDay,
    UnitDensity,
    Weather,
)

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def parse_situation_flags(values: Iterable[object] | None) -> frozenset[SituationFlag]:
    """Convert flag names to the closed flag set, dropping names we do not know.

    camelCase names (``highGround``) are accepted alongside snake_case.
    """

    if values is None:
        return frozenset()
    if isinstance(values, str):
        values = [values]

    flags: set[SituationFlag] = set()
    for value in values:
        name = _CAMEL_BOUNDARY.sub("_", str(value)).lower()
        try:
            flags.add(SituationFlag(name))
        except ValueError:
            logger.warning("dropping unknown situational flag %r", value)
    return frozenset(flags)


class CombatContextSchema(BaseModel):
    terrain: str = Field(default=Terrain.PLAINS.value)
    weather: str = Field(default=Weather.CLEAR.value)
    time_of_day: str = Field(default=TimeOfDay.MIDDAY.value)
    unit_density: str = Field(default=UnitDensity.NORMAL.value)
    combat_situation: str | None = Field(
        None, description=f"One of {[s.value for s in CombatSituation]}"
    )
    formation_state: str = Field(default=FormationState.INTACT.value)
    command_state: str = Field(default=CommandState.COORDINATED.value)
    special_modifiers: list[str] = Field(default_factory=list)
    flags: frozenset[SituationFlag] = Field(
        default_factory=frozenset, description="Conditions both sides experience"
    )
    attacker_flags: frozenset[SituationFlag] = Field(default_factory=frozenset)
    defender_flags: frozenset[SituationFlag] = Field(default_factory=frozenset)

    @field_validator("flags", "attacker_flags", "defender_flags", mode="before")
    @classmethod
    def _drop_unknown_flags(cls, value: object) -> frozenset[SituationFlag]:
        return parse_situation_flags(value)  # type: ignore[arg-type]

    def to_domain(self) -> dm.CombatContext:
        return dm.CombatContext(
            terrain=self.terrain,
            weather=self.weather,
            time_of_day=self.time_of_day,
            unit_density=self.unit_density,
            combat_situation=self.combat_situation,
            formation_state=self.formation_state,
            command_state=self.command_state,
            special_modifiers=tuple(self.special_modifiers),
            flags=self.flags,
            attacker_flags=self.attacker_flags,
            defender_flags=self.defender_flags,
        )


class ChaosConditionsSchema(BaseModel):
    terrain: str | None = None
    weather: str | None = None
    time_of_day: str | None = None
    unit_density: str | None = None
    combat_situation: str | None = None
    formation_state: str | None = None
    command_state: str | None = None
    special_modifiers: list[str] = Field(default_factory=list)
    extra_disorder: int = Field(default=0, ge=-10, le=10)

    def to_domain(self) -> dm.ChaosConditions:
        return dm.ChaosConditions(
            terrain=self.terrain,
            weather=self.weather,
            time_of_day=self.time_of_day,
            unit_density=self.unit_density,
            combat_situation=self.combat_situation,
            formation_state=self.formation_state,
            command_state=self.command_state,
            special_modifiers=tuple(self.special_modifiers),
            extra_disorder=self.extra_disorder,
        )
