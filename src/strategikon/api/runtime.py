"""Runtime primitives backing the Strategikon HTTP API."""

from __future__ import annotations

import asyncio
import logging

from strategikon.config import Settings, get_settings
from strategikon.domain.models import Army, BattleID, CombatContext
from strategikon.domain.rules_config import RulesConfig
from strategikon.services.balance_service import BalanceReport, BalanceService
from strategikon.services.battle_service import BattleReport, BattleSession

logger = logging.getLogger(__name__)


class SimulationRunner:
    """Run CPU-bound battle work off the event loop with bounded concurrency.

    Every simulation builds its own :class:`BattleSession`, so concurrent
    requests never share battle state.
    """

    def __init__(self, balance: BalanceService, *, max_concurrent: int) -> None:
        self._balance = balance
        self._rules = balance.rules
        self._limit = asyncio.Semaphore(max(1, max_concurrent))
        self._active = 0
        self._closed = False

    @property
    def active(self) -> int:
        return self._active

    async def _run(self, func, *args):
        if self._closed:
            raise RuntimeError("simulation runner is shut down")
        async with self._limit:
            self._active += 1
            try:
                return await asyncio.to_thread(func, *args)
            finally:
                self._active -= 1

    async def simulate(
        self,
        battle_id: BattleID,
        attacker: Army,
        defender: Army,
        context: CombatContext,
        *,
        rules: RulesConfig | None = None,
        derive_conditions: bool = False,
    ) -> BattleReport:
        session = BattleSession(
            battle_id,
            attacker,
            defender,
            context,
            rules=rules or self._rules,
            derive_conditions=derive_conditions,
        )
        return await self._run(session.run)

    async def run_balance(self, scenario: str | None, iterations: int) -> list[BalanceReport]:
        if scenario is None:
            return await self._run(self._balance.run_all, iterations)
        report = await self._run(self._balance.run_scenario, scenario, iterations)
        return [report]

    def close(self) -> None:
        self._closed = True


class ApiState:
    """Aggregated services shared by the FastAPI layer."""

    def __init__(
        self, *, settings: Settings | None = None, rules: RulesConfig | None = None
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules or self.settings.build_rules()
        self.balance = BalanceService(rules=self.rules)
        self.simulations = SimulationRunner(
            self.balance, max_concurrent=self.settings.max_concurrent_simulations
        )

    async def shutdown(self) -> None:
        self.simulations.close()
        if self.simulations.active:
            logger.info("shutting down with %d simulations in flight", self.simulations.active)


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
