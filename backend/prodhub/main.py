"""
AI Productivity Hub Backend — FastAPI Application Factory
==========================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes settings injection, middleware, routes, exception handlers
       and lifecycle management in one place.
How:   create_app(settings) returns a configured FastAPI instance. The settings
       object, the engine and the session factory are stored on app.state,
       so a test can build an app around its own Settings.
Who:   uvicorn (`uvicorn prodhub.main:app`) and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │  app.state: settings │ engine │ session_factory     │
    │                                                     │
    │  Middleware:  Request ID → Logging → GZip → CORS    │
    │                                                     │
    │  Routes:                                            │
    │   /api/cron*      (cron gate: Bearer CRON_SECRET)   │
    │   /api/admin/*    (admin gate: x-admin-key)         │
    │   /health         (open)                            │
    │                                                     │
    │  Exception Handlers:                                │
    │   Unauthorized→401 │ Config→500 │ Upstream→500      │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:   logging → validate secrets (fatal on failure) → ready
    Shutdown:  dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from prodhub import __version__
from prodhub.config import Settings, get_settings
from prodhub.database import build_engine, build_session_factory, dispose_engine
from prodhub.exceptions import (
    ConfigurationError,
    NotFoundError,
    ProdHubError,
    UnauthorizedError,
    UpstreamError,
)
from prodhub.middleware.logging import RequestLoggingMiddleware
from prodhub.middleware.request_id import RequestIDMiddleware, request_id_var
from prodhub.routes import admin, cron, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(settings: Settings) -> None:
    """
    Configure logging for the whole process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout
    (the hosting platform collects stdout).
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Per-request and per-query noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup refuses to continue when a required secret is missing: an auth
    gate without a secret cannot protect anything, so the process exits
    instead of serving job endpoints that anyone could trigger.
    """
    settings: Settings = app.state.settings

    setup_logging(settings)
    logger.info("=" * 60)
    logger.info("AI Productivity Hub backend starting up...")

    try:
        settings.validate_required_for_production()
    except ConfigurationError as e:
        logger.critical("Configuration error: %s", e.message)
        logger.critical("Set the missing variables and restart the server.")
        await dispose_engine(app.state.engine)
        raise

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("AI Productivity Hub backend shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"ok": False, "error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to the {"ok": false, "error": ...} envelope.

        UnauthorizedError   → 401
        NotFoundError       → 404
        ConfigurationError  → 500 "Server misconfigured"
        UpstreamError       → 500 with the upstream message
        ProdHubError (base) → 500
        Exception           → 500 "Internal error" (stack trace logged only)
    """

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        return _error(401, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(ConfigurationError)
    async def handle_configuration_error(request: Request, exc: ConfigurationError):
        rid = request_id_var.get("")
        logger.error("[%s] Configuration error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, "Server misconfigured")

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        rid = request_id_var.get("")
        logger.error("[%s] Upstream error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, exc.message)

    @app.exception_handler(ProdHubError)
    async def handle_app_error(request: Request, exc: ProdHubError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error(500, "Internal error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Assemble the application around one Settings instance.

    Args:
        settings: Configuration to inject; defaults to the process-wide
                  instance from get_settings().
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="AI Productivity Hub API",
        description=(
            "Scheduled jobs, admin reads and AI usage metering for the "
            "AI Productivity Hub."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.session_factory = build_session_factory(app.state.engine)

    # Middleware executes in reverse order of addition:
    # RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(cron.router)
    app.include_router(admin.router)
    app.include_router(health.router)

    return app


app = create_app()
