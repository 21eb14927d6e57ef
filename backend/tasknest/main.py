"""
TaskNest Backend — FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn tasknest.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────┐ ┌──────┐ │
    │  │ Req ID   │→│  Logging        │→│ GZip │→│ CORS │ │
    │  └──────────┘ └─────────────────┘ └──────┘ └──────┘ │
    │                                                     │
    │  Routes:                                            │
    │  profiles · checklists · tasks · share requests     │
    │  timer logs · /health                               │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ Auth→401 │ NotFound→404           │
    │  Conflict→409   │ Database→500 │ other→500          │
    └─────────────────────────────────────────────────────┘

Error body (all handlers):
    {"error": <human message>, "code": <machine code>, "request_id": <id>}
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from tasknest import __version__
from tasknest.config import settings
from tasknest.database import dispose_engine, wait_for_database
from tasknest.exceptions import (
    AuthenticationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    TaskNestError,
    ValidationError,
)
from tasknest.middleware.logging import RequestLoggingMiddleware
from tasknest.middleware.request_id import RequestIDLogFilter, RequestIDMiddleware, request_id_var
from tasknest.routes import checklists, health, profiles, share_requests, tasks, timer_logs

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once, at startup.

    Every record goes to stdout with the request id of the request that
    produced it ("-" for startup and shutdown lines).
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] [%(request_id)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[handler],
        force=True,  # uvicorn installs its own handlers first
    )

    # Our access middleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.log_level == "DEBUG" else logging.WARNING
    )


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: configure logging, report configuration problems, wait for
    the database.
    Shutdown: dispose the database engine.
    """
    setup_logging()
    logger.info("=" * 60)
    logger.info("TaskNest Backend starting up...")

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: development setups run with the defaults
        logger.warning("Configuration warning: %s", str(e))

    try:
        await wait_for_database()
    except Exception as e:
        logger.critical("Database unreachable, aborting startup: %s", str(e))
        raise

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("TaskNest Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    message: str,
    code: str,
    details: Optional[Dict[str, Any]] = None,
    request_id: Optional[str] = None,
) -> JSONResponse:
    content: Dict[str, Any] = {
        "error": message,
        "code": code,
        "request_id": request_id or request_id_var.get(""),
    }
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _describe_request_error(exc: RequestValidationError) -> str:
    """Turn FastAPI's first schema error into a short sentence."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    field = ".".join(loc)
    if first.get("type") == "missing":
        return f"{field} is required" if field else "Request body is required"
    message = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    return f"{field}: {message}" if field else message


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        RequestValidationError → 400 (schema violations, missing fields)
        ValidationError        → 400
        AuthenticationError    → 401
        NotFoundError          → 404
        ConflictError          → 409
        DatabaseError          → 500 (generic message; context logged)
        TaskNestError (base)   → its status_code
        Exception (fallback)   → 500
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        message = _describe_request_error(exc)
        logger.warning("Invalid request: %s", message)
        return _error_response(400, message, "validation_error")

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("Validation error: %s", exc.message)
        details = {"field": exc.field} if exc.field else None
        return _error_response(400, exc.message, exc.code, details)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _error_response(401, exc.message, exc.code)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, exc.message, exc.code)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return _error_response(409, exc.message, exc.code)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("Database error: %s | Context: %s", exc.message, exc.context)
        return _error_response(500, exc.message, exc.code)

    @app.exception_handler(TaskNestError)
    async def handle_app_error(request: Request, exc: TaskNestError):
        logger.error("Application error: %s", exc.message)
        return _error_response(exc.status_code, exc.message, exc.code)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Catch-all: stack trace to the log, generic 500 to the client.

        Runs outside the middleware stack, so the request id comes from
        request.state rather than the ContextVar.
        """
        rid = getattr(request.state, "request_id", "")
        logger.error("Unexpected error: %s", str(exc), exc_info=True, extra={"request_id": rid or "-"})
        return _error_response(
            500,
            "An unexpected error occurred. Please try again or contact support.",
            "internal_server_error",
            request_id=rid,
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="TaskNest API",
        description=(
            "Multi-profile checklist backend: profiles, checklists, nested tasks, "
            "checklist sharing between profiles and timer logs."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS
    origins = settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(profiles.router)
    app.include_router(checklists.router)
    app.include_router(tasks.router)
    app.include_router(share_requests.router)
    app.include_router(timer_logs.router)
    app.include_router(health.router)

    return app


# uvicorn expects `tasknest.main:app`
app = create_app()
