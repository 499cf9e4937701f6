"""
Forge API - FastAPI Application Factory
=========================================

What:  Creates and configures the FastAPI application instance.
How:   create_app(settings) builds the shared, read-only collaborators once
       (database handle, password hasher, token codec, auth service), stores
       them on app.state, registers middleware, exception handlers and routes.
Who:   uvicorn imports `forge_api.main:app`; tests call create_app() with
       their own Settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  POST /login  POST /register  GET /health           │
    │  /notes CRUD (PUT/DELETE behind the auth guard)     │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ Unauthorized→401 │ NotFound→404   │
    │  Conflict→409   │ Database/Internal→500             │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Build:     resolve the signing secret (MissingSecretError in production
               when it is absent), create engine and services
    Startup:   configure logging
    Shutdown:  dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from forge_api import __version__
from forge_api.config import Settings, settings as default_settings
from forge_api.database import Database
from forge_api.exceptions import (
    ConflictError,
    DatabaseError,
    ForgeApiError,
    InternalError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from forge_api.middleware.logging import RequestLoggingMiddleware
from forge_api.middleware.request_id import RequestIDMiddleware, request_id_var
from forge_api.routes import auth, health, notes
from forge_api.services.auth_service import AuthService
from forge_api.services.password_hasher import PasswordHasher
from forge_api.services.token_codec import TokenCodec

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    app_settings: Settings = app.state.settings

    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("Forge API %s starting up (%s)", __version__, app_settings.environment.value)
    logger.info("Server ready at http://%s", app_settings.server.addr)
    logger.info("API docs: http://%s/docs", app_settings.server.addr)
    logger.info("=" * 60)

    yield

    logger.info("Forge API shutting down...")
    await app.state.database.dispose()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[dict] = None,
    headers: Optional[dict] = None,
) -> JSONResponse:
    content = {
        "success": False,
        "error": error,
        "message": message,
        "request_id": request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and a uniform JSON body.

    Handler hierarchy:
        ValidationError          → 400 Bad Request
        UnauthorizedError        → 401 Unauthorized
        NotFoundError            → 404 Not Found
        ConflictError            → 409 Conflict
        DatabaseError            → 500 (generic message)
        InternalError            → 500 (generic message)
        ForgeApiError (base)     → 500 (generic message)
        HTTPException            → its own status (e.g. 404 for unknown routes)
        Exception (fallback)     → 500 (generic message)

    5xx bodies never include driver messages, SQL or stack traces; those are
    logged server-side together with the request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        details = {"field": exc.field} if exc.field else None
        return _error_response(400, "validation_error", exc.message, details=details)

    @app.exception_handler(UnauthorizedError)
    async def handle_unauthorized(request: Request, exc: UnauthorizedError):
        # The reason stays in the log; the client sees one uniform message
        logger.info(
            "[%s] Unauthorized: %s",
            request_id_var.get(""),
            exc.context.get("reason", "unknown"),
        )
        return _error_response(
            401, "unauthorized", exc.message, headers={"WWW-Authenticate": "Bearer"}
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.info("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        return _error_response(409, "conflict", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(
            500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(InternalError)
    async def handle_internal_error(request: Request, exc: InternalError):
        rid = request_id_var.get("")
        logger.error("[%s] Internal error: %s | Context: %s", rid, exc.message, exc.context)
        return _error_response(
            500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(ForgeApiError)
    async def handle_app_error(request: Request, exc: ForgeApiError):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unhandled %s: %s | Context: %s",
            rid,
            type(exc).__name__,
            exc.message,
            exc.context,
        )
        return _error_response(
            500, "server_error", "An internal error occurred. Please try again later."
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            logger.info("Fallback handler triggered: route not found (%s)", request.url.path)
            return _error_response(404, "not_found", "not found")
        return _error_response(
            exc.status_code,
            "http_error",
            str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error_response(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Defaults to the module-level settings singleton.

    Raises:
        MissingSecretError: production settings without a JWT secret.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Forge API",
        description="Notes CRUD backend with name/password authentication and signed tokens.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Shared collaborators (read-only after startup) ────────────────────
    token_codec = TokenCodec(
        secret=app_settings.resolve_jwt_secret(),
        ttl=timedelta(seconds=app_settings.auth.token_ttl_seconds),
        algorithm=app_settings.auth.jwt_algorithm,
    )
    password_hasher = PasswordHasher(rounds=app_settings.auth.bcrypt_rounds)

    app.state.settings = app_settings
    app.state.database = Database(
        app_settings.database, echo=app_settings.log_level == "DEBUG"
    )
    app.state.token_codec = token_codec
    app.state.auth_service = AuthService(hasher=password_hasher, codec=token_codec)

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added = outermost)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "WWW-Authenticate"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(auth.router)
    app.include_router(notes.router)
    app.include_router(health.router)

    return app


app = create_app()
