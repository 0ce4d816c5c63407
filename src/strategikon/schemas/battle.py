"""Request and response models for battle resolution endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field

from strategikon.domain import models as dm
from strategikon.domain.breakthrough import BreakthroughResult
from strategikon.domain.chaos import ChaosResult, ChaosRoll
from strategikon.domain.enums import BattleStatus, CombatOutcome, Role
from strategikon.domain.preparation import PreparationResult
from strategikon.domain.resolution import ArmyTurnRecord, TurnResult
from strategikon.schemas.context import ChaosConditionsSchema, CombatContextSchema
from strategikon.schemas.unit import ArmySchema, UnitSchema
from strategikon.services.balance_service import BalanceReport
from strategikon.services.battle_service import BattleReport

# --- Battle state -------------------------------------------------------------


class DamageHistoryEntrySchema(BaseModel):
    turn: int = Field(..., ge=1)
    army_a_damage: float = Field(..., ge=0.0, description="Damage received by the attacker")
    army_b_damage: float = Field(..., ge=0.0, description="Damage received by the defender")


class CasualtyBucketSchema(BaseModel):
    fill: float = Field(default=0.0, ge=0.0, lt=1.0)
    total_casualties: int = Field(default=0, ge=0)


class BattleStateSchema(BaseModel):
    """Running state of one battle, echoed back so clients can resume it."""

    turn: int = Field(default=1, ge=1)
    history: list[DamageHistoryEntrySchema] = Field(default_factory=list)
    buckets: dict[Role, CasualtyBucketSchema] = Field(default_factory=dict)

    def to_domain(self) -> dm.BattleState:
        state = dm.BattleState(
            turn=self.turn,
            history=[
                dm.DamageHistoryEntry(
                    turn=entry.turn,
                    army_a_damage=entry.army_a_damage,
                    army_b_damage=entry.army_b_damage,
                )
                for entry in self.history
            ],
        )
        for role, bucket in self.buckets.items():
            state.buckets[role] = dm.CasualtyBucket(
                fill=bucket.fill, total_casualties=bucket.total_casualties
            )
        return state

    @classmethod
    def from_domain(cls, state: dm.BattleState) -> BattleStateSchema:
        return cls(
            turn=state.turn,
            history=[
                DamageHistoryEntrySchema(
                    turn=entry.turn,
                    army_a_damage=entry.army_a_damage,
                    army_b_damage=entry.army_b_damage,
                )
                for entry in state.history
            ],
            buckets={
                role: CasualtyBucketSchema(
                    fill=bucket.fill, total_casualties=bucket.total_casualties
                )
                for role, bucket in state.buckets.items()
            },
        )


# --- Ratings, chaos and preparation -------------------------------------------


class RatingRequest(BaseModel):
    unit: UnitSchema
    context: CombatContextSchema = Field(default_factory=CombatContextSchema)
    role: Role | None = None
    target: UnitSchema | None = Field(None, description="Opposing unit for matchup bonuses")
    culture: str | None = Field(None, description="Army culture when the unit has none")


class RatingResponse(BaseModel):
    attack: int
    defense: float
    cultural_attack: float
    cultural_defense: float
    anti_armor: int
    preparation: float


class ChaosRequest(ChaosConditionsSchema):
    seed: str | None = Field(None, description="Seed for the chaos roll; omit to skip rolling")
    fixed_roll: int | None = Field(None, ge=1)


class ChaosRollSchema(BaseModel):
    roll: int
    modifier: int
    level: int
    description: str

    @classmethod
    def from_domain(cls, roll: ChaosRoll) -> ChaosRollSchema:
        return cls(
            roll=roll.roll, modifier=roll.modifier, level=roll.level, description=roll.description
        )


class ChaosResponse(BaseModel):
    level: int
    raw_total: int
    minimum_applied: bool
    capped: bool
    environmental: int
    tactical: int
    special: int
    factors: list[str]
    description: str
    roll: ChaosRollSchema | None = None

    @classmethod
    def from_domain(cls, result: ChaosResult, roll: ChaosRoll | None = None) -> ChaosResponse:
        return cls(
            level=result.level,
            raw_total=result.raw_total,
            minimum_applied=result.minimum_applied,
            capped=result.capped,
            environmental=result.breakdown.environmental,
            tactical=result.breakdown.tactical,
            special=result.breakdown.special,
            factors=list(result.breakdown.factors),
            description=result.description,
            roll=ChaosRollSchema.from_domain(roll) if roll is not None else None,
        )


class PreparationRequest(BaseModel):
    context: CombatContextSchema = Field(default_factory=CombatContextSchema)
    role: Role | None = None
    unit: UnitSchema | None = None
    culture: str | None = None
    chaos_level: int | None = Field(
        None, ge=0, le=10, description="Also report mitigation at this chaos level"
    )


class PreparationResponse(BaseModel):
    level: float
    raw_total: float
    capped: bool
    categories: dict[str, float]
    penalties: float
    role_bonus: float
    cultural: float
    factors: list[str]
    description: str
    chaos_modifier: float | None = None
    attrition_factor: float | None = None

    @classmethod
    def from_domain(cls, result: PreparationResult) -> PreparationResponse:
        breakdown = result.breakdown
        return cls(
            level=result.level,
            raw_total=result.raw_total,
            capped=result.capped,
            categories=dict(breakdown.categories),
            penalties=breakdown.penalties,
            role_bonus=breakdown.role_bonus,
            cultural=breakdown.cultural,
            factors=list(breakdown.factors),
            description=result.description,
        )


# --- Turn resolution ------------------------------------------------------------


class MatchupSchema(BaseModel):
    rule: str
    beneficiary: Role
    multiplier_delta: float
    description: str
    chaos_increase: int
    ignore_formation_fraction: float


class ArmyBreakthroughSchema(BaseModel):
    attack_multiplier: float
    ignore_enemy_formation_fraction: float
    special_rules: list[str]


class BreakthroughSchema(BaseModel):
    applied: bool
    turn: int
    attacker: ArmyBreakthroughSchema
    defender: ArmyBreakthroughSchema
    matchups: list[MatchupSchema]
    chaos_increase: int

    @classmethod
    def from_domain(cls, result: BreakthroughResult) -> BreakthroughSchema:
        def side(army) -> ArmyBreakthroughSchema:
            return ArmyBreakthroughSchema(
                attack_multiplier=army.attack_multiplier,
                ignore_enemy_formation_fraction=army.ignore_enemy_formation_fraction,
                special_rules=list(army.special_rules),
            )

        return cls(
            applied=result.applied,
            turn=result.turn,
            attacker=side(result.attacker),
            defender=side(result.defender),
            matchups=[
                MatchupSchema(
                    rule=effect.rule,
                    beneficiary=effect.beneficiary,
                    multiplier_delta=effect.multiplier_delta,
                    description=effect.description,
                    chaos_increase=effect.chaos_increase,
                    ignore_formation_fraction=effect.ignore_formation_fraction,
                )
                for effect in result.matchups
            ],
            chaos_increase=result.chaos_increase,
        )


class ArmyTurnSchema(BaseModel):
    role: Role
    raw_attack: float
    raw_defense: float
    preparation: float
    chaos_roll: ChaosRollSchema
    breakthrough_multiplier: float
    effective_attack: float
    effective_defense: float
    damage_received: float
    casualties: int
    casualties_by_unit: dict[int, int]
    routed_units: list[int]
    morale_delta: int
    bucket_fill: float

    @classmethod
    def from_domain(cls, record: ArmyTurnRecord) -> ArmyTurnSchema:
        return cls(
            role=record.role,
            raw_attack=record.raw_attack,
            raw_defense=record.raw_defense,
            preparation=record.preparation,
            chaos_roll=ChaosRollSchema.from_domain(record.chaos_roll),
            breakthrough_multiplier=record.breakthrough_multiplier,
            effective_attack=record.effective_attack,
            effective_defense=record.effective_defense,
            damage_received=record.damage_received,
            casualties=record.casualties,
            casualties_by_unit=dict(record.casualties_by_unit),
            routed_units=list(record.routed_units),
            morale_delta=record.morale_delta,
            bucket_fill=record.conversion.fill_after if record.conversion else 0.0,
        )


class TurnRequest(BaseModel):
    attacker: ArmySchema
    defender: ArmySchema
    context: CombatContextSchema = Field(default_factory=CombatContextSchema)
    state: BattleStateSchema = Field(default_factory=BattleStateSchema)
    battle_id: int = Field(default=0, ge=0)
    attacker_seed: str | None = None
    defender_seed: str | None = None
    attacker_fixed_roll: int | None = Field(None, ge=1)
    defender_fixed_roll: int | None = Field(None, ge=1)


class TurnResponse(BaseModel):
    turn: int
    outcome: CombatOutcome
    status: BattleStatus
    chaos: ChaosResponse
    breakthrough: BreakthroughSchema
    attacker: ArmyTurnSchema
    defender: ArmyTurnSchema
    attacker_army: ArmySchema
    defender_army: ArmySchema
    state: BattleStateSchema

    @classmethod
    def from_domain(cls, result: TurnResult) -> TurnResponse:
        return cls(
            turn=result.turn,
            outcome=result.outcome,
            status=result.status,
            chaos=ChaosResponse.from_domain(result.chaos),
            breakthrough=BreakthroughSchema.from_domain(result.breakthrough),
            attacker=ArmyTurnSchema.from_domain(result.attacker),
            defender=ArmyTurnSchema.from_domain(result.defender),
            attacker_army=ArmySchema.from_domain(result.attacker_army),
            defender_army=ArmySchema.from_domain(result.defender_army),
            state=BattleStateSchema.from_domain(result.state),
        )


class SimulateRequest(BaseModel):
    attacker: ArmySchema
    defender: ArmySchema
    context: CombatContextSchema = Field(default_factory=CombatContextSchema)
    battle_id: int = Field(default=1, ge=0)
    max_turns: int | None = Field(None, ge=1, le=200)
    derive_conditions: bool = Field(
        default=False, description="Refresh density and formation state from the rosters"
    )
    include_turns: bool = Field(default=False, description="Return every turn's details")


class SimulateResponse(BaseModel):
    battle_id: int
    status: BattleStatus
    winner: Role | None
    turns: int
    attacker_strength: int
    defender_strength: int
    attacker_casualties: int
    defender_casualties: int
    results: list[TurnResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, report: BattleReport, *, include_turns: bool = False) -> SimulateResponse:
        return cls(
            battle_id=report.battle_id,
            status=report.status,
            winner=report.winner,
            turns=report.turns,
            attacker_strength=report.attacker_strength,
            defender_strength=report.defender_strength,
            attacker_casualties=report.attacker_casualties,
            defender_casualties=report.defender_casualties,
            results=(
                [TurnResponse.from_domain(result) for result in report.results]
                if include_turns
                else []
            ),
        )


# --- Balance --------------------------------------------------------------------


class BalanceScenarioSchema(BaseModel):
    key: str
    name: str
    description: str


class BalanceRunRequest(BaseModel):
    scenario: str | None = Field(None, description="Scenario key; omit to run every scenario")
    iterations: int | None = Field(None, ge=1, le=10_000)


class CheeseDetectionSchema(BaseModel):
    role: Role
    strategy: str
    name: str


class BalanceReportSchema(BaseModel):
    scenario: str
    name: str
    iterations: int
    attacker_wins: int
    defender_wins: int
    draws: int
    attacker_win_rate: float
    defender_win_rate: float
    draw_rate: float
    average_turns: float
    balance_score: float
    competitive: bool
    cheese: list[CheeseDetectionSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, report: BalanceReport) -> BalanceReportSchema:
        return cls(
            scenario=report.scenario,
            name=report.name,
            iterations=report.iterations,
            attacker_wins=report.attacker_wins,
            defender_wins=report.defender_wins,
            draws=report.draws,
            attacker_win_rate=report.attacker_win_rate,
            defender_win_rate=report.defender_win_rate,
            draw_rate=report.draw_rate,
            average_turns=report.average_turns,
            balance_score=report.balance_score,
            competitive=report.competitive,
            cheese=[
                CheeseDetectionSchema(role=item.role, strategy=item.strategy, name=item.name)
                for item in report.cheese
            ],
        )
