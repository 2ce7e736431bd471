"""
Catalog Backend: FastAPI Application Factory
=============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn catalog.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────┐ ┌──────────────────┐  │
    │  │  Req ID  │→│  Logging    │→│  GZip / CORS     │  │
    │  └──────────┘ └─────────────┘ └──────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────┐ ┌──────────────┐ ┌───────────┐  │
    │  │/api/categories │ │/api/products │ │ /health   │  │
    │  └────────────────┘ └──────────────┘ └───────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ NotFound→404 │ Constraint→409│  │
    │  │ Persistence→500                               │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  initialize logging, log the effective configuration
    Shutdown: dispose database engine (close all connections)
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

from catalog import __version__
from catalog.config import settings
from catalog.database import dispose_engine
from catalog.exceptions import (
    ConstraintViolationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from catalog.middleware.logging import RequestLoggingMiddleware
from catalog.middleware.request_id import (
    REQUEST_ID_HEADER,
    RequestIDMiddleware,
    current_request_id,
)
from catalog.routes import categories, health, products
from catalog.validation import field_errors_from_pydantic

logger = logging.getLogger(__name__)


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
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Catalog Backend %s starting up...", __version__)
    logger.info("Database dialect: %s", settings.database_url.split("://", 1)[0])
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Catalog Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    details: Optional[Dict[str, Any]] = None,
) -> JSONResponse:
    """Uniform error body: {error, message, details?, request_id}."""
    content: Dict[str, Any] = {"error": error, "message": message}
    if details is not None:
        content["details"] = details
    rid = current_request_id(request)
    content["request_id"] = rid
    return JSONResponse(
        status_code=status_code,
        content=content,
        headers={REQUEST_ID_HEADER: rid} if rid else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and a single response format.

    Handler hierarchy:
        ValidationError          → 400 Bad Request
        RequestValidationError   → 400 Bad Request (malformed path/query/body)
        NotFoundError            → 404 Not Found
        ConstraintViolationError → 409 Conflict
        PersistenceError         → 500 Internal Server Error
        Exception (fallback)     → 500 Internal Server Error

    Internal details (stack traces, SQL) are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def on_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Invalid %s %s: fields %s",
                       current_request_id(request), request.method, request.url.path, exc.fields)
        return error_response(request, 400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def on_request_validation_error(request: Request, exc: RequestValidationError):
        return await on_validation_error(
            request, ValidationError(field_errors_from_pydantic(exc.errors()))
        )

    @app.exception_handler(NotFoundError)
    async def on_not_found(request: Request, exc: NotFoundError):
        return error_response(request, 404, "not_found", exc.message, exc.context)

    @app.exception_handler(ConstraintViolationError)
    async def on_constraint_violation(request: Request, exc: ConstraintViolationError):
        logger.warning("[%s] Constraint violation: %s", current_request_id(request), exc.message)
        return error_response(request, 409, "constraint_violation", exc.message, exc.context)

    @app.exception_handler(PersistenceError)
    async def on_persistence_error(request: Request, exc: PersistenceError):
        logger.error("[%s] Persistence error: %s | Context: %s",
                     current_request_id(request), exc.message, exc.context)
        return error_response(request, 500, "server_error", "The catalog store is unavailable. Please retry.")

    @app.exception_handler(Exception)
    async def on_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unhandled %s on %s %s",
                     current_request_id(request), type(exc).__name__, request.method, request.url.path,
                     exc_info=exc)
        return error_response(request, 500, "internal_server_error", "Unexpected server error.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble middleware, exception handlers and routers into a FastAPI app."""
    app = FastAPI(
        title="Catalog API",
        description="CRUD API for product categories and products.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Total-Count", "Location"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(categories.router)
    app.include_router(products.router)
    app.include_router(health.router)

    return app


# uvicorn expects `catalog.main:app` to be importable
app = create_app()
