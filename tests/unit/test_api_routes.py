"""Tests for the FastAPI layer."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from strategikon.api.app import create_app
from strategikon.api.runtime import ApiState
from strategikon.config import Settings

LEGIONARIES = {
    "id": 1,
    "weapons": ["roman_gladius"],
    "armor": "medium_armor",
    "shield": "medium_shield",
    "quality": "professional",
    "formation": "line",
}

WARRIORS = {
    "id": 2,
    "weapons": ["celtic_longsword"],
    "armor": "light_armor",
    "shield": "medium_shield",
    "quality": "tribal_warriors",
    "formation": "loose",
}

ROMANS = {"id": 1, "culture": "Roman Republic", "units": [LEGIONARIES]}
CELTS = {"id": 2, "culture": "Celtic Tribes", "units": [WARRIORS]}


def _make_app():
    def factory() -> ApiState:
        return ApiState(settings=Settings(balance_iterations=2, max_concurrent_simulations=2))

    app = create_app(state_factory=factory)
    transport = ASGITransport(app=app)
    return app, transport


@pytest.mark.asyncio
async def test_health_and_ratings_via_api():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.get("/health")
        assert response.status_code == 200
        payload = response.json()
        assert payload["status"] == "ok"
        assert payload["max_turns"] == 15
        assert payload["active_simulations"] == 0

        response = await client.post(
            "/ratings", json={"unit": LEGIONARIES, "culture": "Roman Republic"}
        )
        assert response.status_code == 200
        rating = response.json()
        assert rating["attack"] == 10
        assert rating["defense"] == pytest.approx(13)
        assert rating["cultural_attack"] == pytest.approx(10)
        assert rating["anti_armor"] == 0
        assert rating["preparation"] == pytest.approx(1.6)

        spearmen = {"id": 5, "weapons": ["spear_professional"], "quality": "professional"}
        response = await client.post("/ratings", json={"unit": spearmen, "target": WARRIORS})
        assert response.status_code == 200
        rating = response.json()
        assert rating["anti_armor"] == 3
        assert rating["cultural_attack"] == pytest.approx(rating["attack"] + 3)


@pytest.mark.asyncio
async def test_chaos_and_preparation_via_api():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        conditions = {
            "terrain": "forest",
            "weather": "heavy_rain",
            "unit_density": "dense",
            "command_state": "delayed",
        }
        response = await client.post("/chaos", json=conditions)
        assert response.status_code == 200
        chaos = response.json()
        assert chaos["level"] == 6
        assert chaos["roll"] is None

        response = await client.post("/chaos", json={**conditions, "fixed_roll": 6})
        assert response.json()["roll"]["modifier"] == 3

        response = await client.post(
            "/preparation",
            json={
                "context": {"flags": ["timeToPrepare", "scouted_enemy", "unknown_flag"]},
                "chaos_level": 6,
            },
        )
        assert response.status_code == 200
        preparation = response.json()
        assert preparation["level"] == pytest.approx(1.6)
        assert preparation["chaos_modifier"] == pytest.approx(4.4)
        assert preparation["attrition_factor"] == pytest.approx(0.78)


@pytest.mark.asyncio
async def test_turn_resolution_roundtrip_via_api():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        request = {
            "attacker": ROMANS,
            "defender": CELTS,
            "battle_id": 1,
            "attacker_fixed_roll": 1,
            "defender_fixed_roll": 1,
        }
        response = await client.post("/turns/resolve", json=request)
        assert response.status_code == 200
        turn = response.json()
        assert turn["turn"] == 1
        assert turn["outcome"] == "attacker_major_victory"
        assert turn["status"] == "ongoing"
        assert turn["defender"]["casualties"] == 12
        assert turn["defender"]["bucket_fill"] == pytest.approx(0.4125)
        assert turn["defender_army"]["units"][0]["current_strength"] == 88
        assert turn["state"]["turn"] == 2

        follow_up = {
            **request,
            "attacker": turn["attacker_army"],
            "defender": turn["defender_army"],
            "state": turn["state"],
        }
        response = await client.post("/turns/resolve", json=follow_up)
        assert response.status_code == 200
        second = response.json()
        assert second["turn"] == 2
        assert len(second["state"]["history"]) == 2


@pytest.mark.asyncio
async def test_simulation_via_api():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.post(
            "/battles/simulate",
            json={"attacker": ROMANS, "defender": CELTS, "max_turns": 1, "include_turns": True},
        )
        assert response.status_code == 200
        report = response.json()
        assert report["turns"] == 1
        assert report["status"] == "attacker_won"
        assert report["winner"] == "attacker"
        assert report["attacker_casualties"] == 0
        assert len(report["results"]) == 1

        response = await client.post(
            "/battles/simulate", json={"attacker": ROMANS, "defender": CELTS}
        )
        report = response.json()
        assert report["status"] != "ongoing"
        assert report["results"] == []


@pytest.mark.asyncio
async def test_balance_endpoints_via_api():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.get("/balance/scenarios")
        assert response.status_code == 200
        keys = {scenario["key"] for scenario in response.json()}
        assert "basic_professional" in keys
        assert len(keys) == 4

        response = await client.post("/balance/run", json={"scenario": "basic_professional"})
        assert response.status_code == 200
        (report,) = response.json()
        assert report["iterations"] == 2
        assert report["attacker_wins"] + report["defender_wins"] + report["draws"] == 2

        response = await client.post("/balance/run", json={"scenario": "naval_battle"})
        assert response.status_code == 404


@pytest.mark.asyncio
async def test_invalid_payloads_are_rejected():
    app, transport = _make_app()

    async with (
        app.router.lifespan_context(app),
        AsyncClient(transport=transport, base_url="http://test") as client,
    ):
        response = await client.post(
            "/turns/resolve", json={"attacker": {"id": 1, "units": []}, "defender": CELTS}
        )
        assert response.status_code == 422

        overstrength = {**LEGIONARIES, "current_strength": 120}
        response = await client.post("/ratings", json={"unit": overstrength})
        assert response.status_code == 422

        response = await client.post("/balance/run", json={"iterations": 0})
        assert response.status_code == 422
