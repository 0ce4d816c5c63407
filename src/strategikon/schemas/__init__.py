"""Pydantic models for the HTTP boundary and their domain conversions."""

from strategikon.schemas.battle import (
    BalanceReportSchema,
    BalanceRunRequest,
    BalanceScenarioSchema,
    BattleStateSchema,
    ChaosRequest,
    ChaosResponse,
    PreparationRequest,
    PreparationResponse,
    RatingRequest,
    RatingResponse,
    SimulateRequest,
    SimulateResponse,
    TurnRequest,
    TurnResponse,
)
from strategikon.schemas.context import (
    ChaosConditionsSchema,
    CombatContextSchema,
    parse_situation_flags,
)
from strategikon.schemas.unit import ArmySchema, UnitSchema

__all__ = [
    "ArmySchema",
    "BalanceReportSchema",
    "BalanceRunRequest",
    "BalanceScenarioSchema",
    "BattleStateSchema",
    "ChaosConditionsSchema",
    "ChaosRequest",
    "ChaosResponse",
    "CombatContextSchema",
    "PreparationRequest",
    "PreparationResponse",
    "RatingRequest",
    "RatingResponse",
    "SimulateRequest",
    "SimulateResponse",
    "TurnRequest",
    "TurnResponse",
    "UnitSchema",
    "parse_situation_flags",
]
