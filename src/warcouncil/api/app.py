"""FastAPI application wiring for warcouncil."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from warcouncil.api import routes
from warcouncil.api.runtime import ApiState, build_state
from warcouncil.config import get_settings
from warcouncil.domain.models import InvalidInputError
from warcouncil.domain.restoration import RestorationActiveError
from warcouncil.domain.war import WarDeclarationRequired, WarStateError
from warcouncil.services.world import UnknownKingdomError

logger = logging.getLogger(__name__)

# Domain errors raised below the route layer and the status each maps to.
ERROR_STATUS: dict[type[Exception], int] = {
    UnknownKingdomError: status.HTTP_404_NOT_FOUND,
    InvalidInputError: 422,
    RestorationActiveError: status.HTTP_409_CONFLICT,
    WarDeclarationRequired: status.HTTP_409_CONFLICT,
    WarStateError: status.HTTP_409_CONFLICT,
}


def _install_error_handlers(app: FastAPI) -> None:
    for error_type, status_code in ERROR_STATUS.items():

        async def handler(request: Request, exc: Exception, status_code: int = status_code):
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
            return JSONResponse(status_code=status_code, content={"detail": str(exc)})

        app.add_exception_handler(error_type, handler)


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Instantiate the FastAPI application with routing, error mapping and lifecycle hooks."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        logger.info(
            "warcouncil API ready (rules %s, data dir %s)",
            state.settings.rules_version,
            state.settings.data_dir,
        )
        try:
            yield
        finally:
            await state.shutdown()

    app = FastAPI(title="warcouncil API", version="0.1.0", lifespan=lifespan)
    settings = get_settings()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _install_error_handlers(app)
    app.include_router(routes.router)
    return app


app = create_app()
