"""HTTP routes for the Strategikon API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from strategikon.api.runtime import ApiState
from strategikon.domain.attack import anti_armor_bonus, calculate_attack_rating
from strategikon.domain.chaos import calculate_chaos, roll_chaos_modifier
from strategikon.domain.culture import (
    apply_cultural_attack_modifiers,
    apply_cultural_defense_modifiers,
)
from strategikon.domain.defense import calculate_defense_rating
from strategikon.domain.invariants import CombatInvariantError
from strategikon.domain.models import BattleID
from strategikon.domain.preparation import apply_preparation_to_chaos, calculate_preparation
from strategikon.domain.resolution import ResolutionOptions, resolve_turn
from strategikon.schemas import (
    BalanceReportSchema,
    BalanceRunRequest,
    BalanceScenarioSchema,
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

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


def _bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "rules_version": state.settings.rules_version,
        "max_turns": state.rules.resolution.max_turns,
        "active_simulations": state.simulations.active,
    }


@router.post("/ratings", response_model=RatingResponse)
async def rate_unit(request: RatingRequest, state: ApiStateDep) -> RatingResponse:
    unit = request.unit.to_domain()
    target = request.target.to_domain() if request.target is not None else None
    context = request.context.to_domain()
    culture = unit.culture or request.culture
    flags = context.flags_for(request.role)

    attack = calculate_attack_rating(unit, context, target=target, role=request.role)
    anti_armor = anti_armor_bonus(unit.primary_weapon, target.armor) if target else 0
    defense = calculate_defense_rating(unit, context, role=request.role)
    try:
        preparation = calculate_preparation(
            context, request.role, unit=unit, culture=culture, rules=state.rules
        )
    except CombatInvariantError:
        raise
    except ValueError as exc:
        raise _bad_request(exc) from exc

    return RatingResponse(
        attack=attack,
        defense=defense,
        cultural_attack=apply_cultural_attack_modifiers(
            attack + anti_armor, culture, flags, formation=unit.formation
        ),
        cultural_defense=apply_cultural_defense_modifiers(
            defense, culture, flags, formation=unit.formation
        ),
        anti_armor=anti_armor,
        preparation=preparation.level,
    )


@router.post("/chaos", response_model=ChaosResponse)
async def chaos_level(request: ChaosRequest, state: ApiStateDep) -> ChaosResponse:
    try:
        result = calculate_chaos(request.to_domain(), state.rules)
        roll = None
        if request.seed is not None or request.fixed_roll is not None:
            roll = roll_chaos_modifier(
                result.level,
                request.seed or "",
                fixed_roll=request.fixed_roll,
                rules=state.rules,
            )
    except CombatInvariantError:
        raise
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return ChaosResponse.from_domain(result, roll)


@router.post("/preparation", response_model=PreparationResponse)
async def preparation_level(
    request: PreparationRequest, state: ApiStateDep
) -> PreparationResponse:
    unit = request.unit.to_domain() if request.unit is not None else None
    try:
        result = calculate_preparation(
            request.context.to_domain(),
            request.role,
            unit=unit,
            culture=request.culture,
            rules=state.rules,
        )
    except CombatInvariantError:
        raise
    except ValueError as exc:
        raise _bad_request(exc) from exc

    response = PreparationResponse.from_domain(result)
    if request.chaos_level is not None:
        mitigation = apply_preparation_to_chaos(request.chaos_level, result.level, state.rules)
        response.chaos_modifier = mitigation.modifier
        response.attrition_factor = mitigation.attrition_factor
    return response


@router.post("/turns/resolve", response_model=TurnResponse)
async def resolve_single_turn(request: TurnRequest, state: ApiStateDep) -> TurnResponse:
    options = ResolutionOptions(
        battle_id=request.battle_id,
        attacker_seed=request.attacker_seed,
        defender_seed=request.defender_seed,
        attacker_fixed_roll=request.attacker_fixed_roll,
        defender_fixed_roll=request.defender_fixed_roll,
    )
    try:
        result = resolve_turn(
            request.attacker.to_domain(),
            request.defender.to_domain(),
            request.context.to_domain(),
            request.state.to_domain(),
            options=options,
            rules=state.rules,
        )
    except CombatInvariantError:
        raise
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return TurnResponse.from_domain(result)


@router.post("/battles/simulate", response_model=SimulateResponse)
async def simulate_battle(request: SimulateRequest, state: ApiStateDep) -> SimulateResponse:
    rules = state.rules
    if request.max_turns is not None:
        rules = rules.with_max_turns(request.max_turns)
    try:
        report = await state.simulations.simulate(
            BattleID(request.battle_id),
            request.attacker.to_domain(),
            request.defender.to_domain(),
            request.context.to_domain(),
            rules=rules,
            derive_conditions=request.derive_conditions,
        )
    except CombatInvariantError:
        raise
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return SimulateResponse.from_domain(report, include_turns=request.include_turns)


@router.get("/balance/scenarios", response_model=list[BalanceScenarioSchema])
async def list_balance_scenarios(state: ApiStateDep) -> list[BalanceScenarioSchema]:
    return [
        BalanceScenarioSchema(
            key=scenario.key, name=scenario.name, description=scenario.description
        )
        for scenario in state.balance.scenarios.values()
    ]


@router.post("/balance/run", response_model=list[BalanceReportSchema])
async def run_balance(request: BalanceRunRequest, state: ApiStateDep) -> list[BalanceReportSchema]:
    iterations = request.iterations or state.settings.balance_iterations
    if request.scenario is not None and request.scenario not in state.balance.scenarios:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"balance scenario '{request.scenario}' not found",
        )
    try:
        reports = await state.simulations.run_balance(request.scenario, iterations)
    except CombatInvariantError:
        raise
    except ValueError as exc:
        raise _bad_request(exc) from exc
    return [BalanceReportSchema.from_domain(report) for report in reports]
