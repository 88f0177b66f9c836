"""
Parking API — FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes app configuration, middleware registration, route mounting,
       exception handling and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn parking_api.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                       FastAPI App                        │
    │                                                          │
    │  Middleware Chain:                                       │
    │  ┌────────┐ ┌─────────┐ ┌──────────────────┐ ┌────────┐  │
    │  │ Req ID │→│ Logging │→│ Security Headers │→│  CORS  │  │
    │  └────────┘ └─────────┘ └──────────────────┘ └────────┘  │
    │                                                          │
    │  Per-route dependency chain:                             │
    │  authenticate → authorize_admin → validate → handler     │
    │                                                          │
    │  Exception Handlers:                                     │
    │  Validation→400 │ Auth→401/403 │ NotFound→404 │          │
    │  Conflict→409   │ Persistence→500 │ Exception→500        │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → config validation → admin bootstrap
    Shutdown: dispose database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from parking_api import __version__
from parking_api.config import settings
from parking_api.database import async_session_factory, dispose_engine
from parking_api.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    NotFoundError,
    ParkingAPIError,
    PersistenceError,
    ValidationError,
)
from parking_api.middleware.logging import RequestLoggingMiddleware
from parking_api.middleware.request_id import RequestIDMiddleware, request_id_var
from parking_api.middleware.security_headers import SecurityHeadersMiddleware
from parking_api.routes import auth, cars, health, parking_lots, parking_sessions, reports
from parking_api.services.auth_service import auth_service
from parking_api.validation import format_errors

logger = logging.getLogger(__name__)

GENERIC_SERVER_ERROR = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's; SQL echo is opt-in via LOG_LEVEL=DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)


async def bootstrap_admin() -> None:
    """Create the ADMIN_EMAIL account on startup when configured and missing."""
    if not (settings.admin_email and settings.admin_password):
        return
    try:
        async with async_session_factory() as session:
            created = await auth_service.ensure_admin(
                session, settings.admin_email, settings.admin_password
            )
            await session.commit()
    except SQLAlchemyError as e:
        # The API can still serve; the admin can be created once the DB is up
        logger.error("Admin bootstrap failed: %s", str(e))
        return
    if not created:
        logger.info("Admin account %s already exists", settings.admin_email)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("Parking API starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: local development runs with the defaults
        logger.error("Configuration error: %s", str(e))

    await bootstrap_admin()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("Parking API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_body(error: str, message: str) -> dict:
    return {"error": error, "message": message, "request_id": request_id_var.get("")}


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        ValidationError, RequestValidationError → 400 {"errors": [...]}
        AuthenticationError                     → 401 {"message"} + WWW-Authenticate
        AuthorizationError                      → 403 {"message"}
        NotFoundError                           → 404 {"message"}
        ConflictError                           → 409 {"message"}
        PersistenceError                        → 500 generic {"message"}
        ParkingAPIError (base)                  → 500 generic {"message"}
        Exception (fallback)                    → 500 generic {"message"}

    Security: handlers never put stack traces, SQL or exception context in
    the response body. Details are logged server-side with the request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error on %s: %s", rid, request.url.path, exc.errors)
        return JSONResponse(
            status_code=400,
            content={"errors": exc.errors, "request_id": rid},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Bodies and path parameters: same 400 shape instead of FastAPI's 422."""
        rid = request_id_var.get("")
        errors = format_errors(exc.errors())
        logger.warning("[%s] Validation error on %s: %s", rid, request.url.path, errors)
        return JSONResponse(
            status_code=400,
            content={"errors": errors, "request_id": rid},
        )

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return JSONResponse(
            status_code=401,
            content=_error_body("authentication_error", exc.message),
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(AuthorizationError)
    async def handle_authorization_error(request: Request, exc: AuthorizationError):
        return JSONResponse(
            status_code=403,
            content=_error_body("authorization_error", exc.message),
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=_error_body("not_found", exc.message))

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        rid = request_id_var.get("")
        logger.info("[%s] Conflict: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=409, content=_error_body("conflict", exc.message))

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError):
        rid = request_id_var.get("")
        logger.error("[%s] Persistence error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", GENERIC_SERVER_ERROR),
        )

    @app.exception_handler(ParkingAPIError)
    async def handle_app_error(request: Request, exc: ParkingAPIError):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled application error %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(
            status_code=500,
            content=_error_body("server_error", GENERIC_SERVER_ERROR),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=_error_body("internal_server_error", GENERIC_SERVER_ERROR),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Why factory (not module-level app):
        Tests build a fresh app per test and override `get_db_session`
        without touching global state.
    """
    app = FastAPI(
        title="Parking Management API",
        description=(
            "Parking management backend: cars, parking lots, entry/exit sessions, "
            "and admin reports on traffic, occupancy and revenue."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added = outermost)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(cars.router)
    app.include_router(parking_lots.router)
    app.include_router(parking_sessions.router)
    app.include_router(reports.router)
    app.include_router(health.router)

    return app


app = create_app()
