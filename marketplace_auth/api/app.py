import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import SQLModel

from marketplace_auth import __version__
from marketplace_auth.adapter.services.logging_token_delivery import LoggingTokenDelivery
from marketplace_auth.adapter.workers.session_sweeper import SessionSweeper
from marketplace_auth.app.services.auth_services import build_auth_services
from marketplace_auth.app.services.clock import Clock
from marketplace_auth.app.services.secret_validator import validate_secrets
from marketplace_auth.app.services.token_delivery import ITokenDelivery
from .error import ClientError, ServerError
from .utils.request_gate import RequestGate

logger = logging.getLogger(__name__)


async def handle_client_error(request: Request, exc: ClientError):
    error_dict = {"code": exc.base_error.code, "message": exc.base_error.message}
    logger.warning(f"Client error: {error_dict}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


async def handle_server_error(request: Request, exc: ServerError):
    if exc.status_code == status.HTTP_503_SERVICE_UNAVAILABLE:
        message = exc.base_error.message
    else:
        message = "Internal server error"
    error_dict = {"code": exc.base_error.code, "message": message}
    logger.error(f"Server error: {exc.base_error.code}")
    return JSONResponse(status_code=exc.status_code, content={"error": error_dict})


def create_app(
    ApplicationConfig,
    token_delivery: Optional[ITokenDelivery] = None,
    clock: Optional[Clock] = None,
) -> FastAPI:
    # Fails with ConfigurationError before anything else is built
    settings = validate_secrets(ApplicationConfig)
    auth = build_auth_services(settings, token_delivery or LoggingTokenDelivery(), clock)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        from marketplace_auth.depends import AsyncSessionLocal, engine

        if getattr(ApplicationConfig, "CREATE_TABLES_ON_STARTUP", False):
            async with engine.begin() as conn:
                await conn.run_sync(SQLModel.metadata.create_all)

        sweeper = None
        if settings.session_sweep_enabled:
            sweeper = SessionSweeper(AsyncSessionLocal, auth, settings.session_sweep_interval)
            sweeper.start()
        app.state.session_sweeper = sweeper

        yield

        if sweeper is not None:
            await sweeper.stop()
        await engine.dispose()

    app = FastAPI(title="Marketplace Auth", version=__version__, lifespan=lifespan)

    app.state.auth_settings = settings
    app.state.auth = auth
    app.state.request_gate = RequestGate(auth.tokens)
    app.state.admin_api_key = getattr(ApplicationConfig, "ADMIN_API_KEY", None)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ApplicationConfig.CORS_ORIGINS,
        allow_credentials=ApplicationConfig.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from marketplace_auth.api.routes import admin, auth as auth_routes, health_check

    prefix = getattr(ApplicationConfig, "API_PREFIX", "") or ""
    app.include_router(health_check.router, tags=["Health"])
    app.include_router(auth_routes.router, prefix=prefix, tags=["Authentication"])
    app.include_router(admin.router, prefix=prefix, tags=["Admin"])

    app.add_exception_handler(ClientError, handle_client_error)
    app.add_exception_handler(ServerError, handle_server_error)

    return app
