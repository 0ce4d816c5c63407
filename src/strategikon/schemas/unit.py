from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

from strategikon.domain import models as dm
from strategikon.domain.enums import Formation


class UnitSchema(BaseModel):
    id: int = Field(..., description="Unit identifier, unique within the battle")
    weapons: list[str] = Field(default_factory=list, description="Weapon ids, primary first")
    armor: str = Field(default="no_armor", description="Armor category")
    shield: str = Field(default="no_shield", description="Shield category")
    quality: str = Field(default="levy", description="Training tier")
    formation: str = Field(default=Formation.LINE.value, description="Deployed formation")
    mounted: bool = Field(default=False, description="Fights from horseback")
    current_strength: int = Field(default=100, ge=0, description="Warriors still in the ranks")
    max_strength: int = Field(default=100, ge=0, description="Full-strength headcount")
    culture: str | None = Field(None, description="Overrides the army culture when set")
    routed: bool = Field(default=False, description="Broken by morale and fleeing")
    name: str | None = None

    @model_validator(mode="after")
    def _strength_within_max(self) -> UnitSchema:
        if self.current_strength > self.max_strength:
            raise ValueError(
                f"current_strength {self.current_strength} exceeds max_strength {self.max_strength}"
            )
        return self

    def to_domain(self) -> dm.Unit:
        return dm.Unit(
            id=dm.UnitID(self.id),
            weapons=list(self.weapons),
            armor=self.armor,
            shield=self.shield,
            quality=self.quality,
            formation=self.formation,
            mounted=self.mounted,
            current_strength=self.current_strength,
            max_strength=self.max_strength,
            culture=self.culture,
            routed=self.routed,
            name=self.name,
        )

    @classmethod
    def from_domain(cls, unit: dm.Unit) -> UnitSchema:
        return cls(
            id=unit.id,
            weapons=list(unit.weapons),
            armor=unit.armor,
            shield=unit.shield,
            quality=unit.quality,
            formation=unit.formation,
            mounted=unit.mounted,
            current_strength=unit.current_strength,
            max_strength=unit.max_strength,
            culture=unit.culture,
            routed=unit.routed,
            name=unit.name,
        )


class ArmySchema(BaseModel):
    id: int = Field(..., description="Army identifier")
    units: list[UnitSchema] = Field(..., min_length=1, description="Roster for this encounter")
    culture: str | None = Field(None, description="Culture applied to units without their own")
    name: str | None = None

    def to_domain(self) -> dm.Army:
        return dm.Army(
            id=dm.ArmyID(self.id),
            units=[unit.to_domain() for unit in self.units],
            culture=self.culture,
            name=self.name,
        )

    @classmethod
    def from_domain(cls, army: dm.Army) -> ArmySchema:
        return cls(
            id=army.id,
            units=[UnitSchema.from_domain(unit) for unit in army.units],
            culture=army.culture,
            name=army.name,
        )
