"""FastAPI application wiring for Strategikon."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from strategikon import __version__
from strategikon.api import routes
from strategikon.api.runtime import ApiState, build_state
from strategikon.config import get_settings
from strategikon.domain.invariants import CombatInvariantError

logger = logging.getLogger(__name__)


async def _invariant_violation(request: Request, exc: Exception) -> JSONResponse:
    # A broken invariant is an engine defect, never a client mistake.
    logger.error("combat invariant violated on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": f"combat invariant violated: {exc}"},
    )


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Build the combat API; ``state_factory`` lets tests inject settings and rules."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        logger.info(
            "combat API ready: rules %s, %d-turn limit, %d concurrent simulations",
            state.settings.rules_version,
            state.rules.resolution.max_turns,
            state.settings.max_concurrent_simulations,
        )
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(title="Strategikon Combat API", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_settings().cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(CombatInvariantError, _invariant_violation)
    app.include_router(routes.router)
    return app


app = create_app()
