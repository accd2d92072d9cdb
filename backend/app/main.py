"""
RectSizer Backend: FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       with its own RectangleStore and RectangleService on `app.state`.
Who:   uvicorn (`uvicorn app.main:app`), the `rectsizer` script, and tests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────────────────────┐ ┌──────────────┐  │
    │  │ Request ID + access log      │→│  CORS        │  │
    │  └──────────────────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────┐ ┌────────────────────────┐  │
    │  │ GET/POST rectangle │ │ GET /health            │  │
    │  └────────────────────┘ └────────────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Malformed→400 │ width>height→400 │ Save→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, load (or create) the durable record
    Shutdown: log; the record is already up to date after every commit
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.config import Settings, settings
from app.exceptions import (
    DimensionValidationError,
    MalformedRequestError,
    PersistenceError,
)
from app.middleware.request_context import (
    RequestContextMiddleware,
    RequestIDLogFilter,
    request_id_var,
)
from app.routes import health, rectangle
from app.schemas.rectangle import RectangleDimensions
from app.services.rectangle_service import RectangleService
from app.services.rectangle_store import RectangleStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [%(request_id)s]: %(message)s"


def setup_logging(log_level: str) -> None:
    """
    Send every log record to stdout, tagged with the current request ID.

    Concurrent POSTs interleave during their validation delays; the
    [request_id] column is what keeps one request's lines together.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIDLogFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        handlers=[handler],
        force=True,
    )

    # rectsizer.access already reports every request with its delay
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging
        2. Load the durable record, creating it with the default if absent
    Shutdown:
        1. Log shutdown
    """
    app_settings: Settings = app.state.settings
    store: RectangleStore = app.state.rectangle_store

    setup_logging(app_settings.log_level)
    logger.info("=" * 60)
    logger.info("RectSizer Backend starting up...")

    # A record that cannot be created is fatal at startup
    current = await store.load()
    logger.info(
        "Rectangle state: %s (backing=%s)",
        current,
        store.record_path if store.is_durable else "memory",
    )
    logger.info("Validation delay: %.2fs", app_settings.validation_delay_seconds)

    logger.info("Server ready at http://%s:%d", app_settings.backend_host, app_settings.backend_port)
    logger.info("API docs: http://%s:%d/docs", app_settings.backend_host, app_settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("RectSizer Backend shutting down... last value %s", store.get())


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers for consistent error responses.

    Handler map:
        RequestValidationError    → 400 malformed_request (replaces FastAPI's 422)
        DimensionValidationError  → 400 {"error": reason}
        PersistenceError          → 500 persistence_error
        Exception (fallback)      → 500 internal_server_error

    Bodies are parsed by FastAPI before any handler runs, so every malformed
    body surfaces as RequestValidationError; it is translated into a
    MalformedRequestError to build the response.

    Internal details (paths, OS errors, stack traces) are logged, never returned.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Body is missing, not JSON, or not two finite numbers."""
        error = MalformedRequestError(errors=list(exc.errors()))
        logger.warning("Malformed request body: %s", error.errors)
        return JSONResponse(
            status_code=400,
            content={
                "error": "malformed_request",
                "message": error.message,
                "details": jsonable_encoder(error.errors),
                "request_id": request_id_var.get(""),
            },
        )

    @app.exception_handler(DimensionValidationError)
    async def handle_dimension_validation_error(request: Request, exc: DimensionValidationError):
        """Candidate broke width <= height."""
        logger.warning("Validation failed: %s | %s", exc.reason, exc.context)
        return JSONResponse(status_code=400, content={"error": exc.reason})

    @app.exception_handler(PersistenceError)
    async def handle_persistence_error(request: Request, exc: PersistenceError):
        """Record write failed; the previous value is still being served."""
        rid = request_id_var.get("")
        logger.error("Persistence error: %s | Context: %s", exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "persistence_error",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Catch-all; stack trace is logged server-side only."""
        rid = request_id_var.get("")
        logger.error("Unexpected error: %s", str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred. Please try again.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    app_settings: Optional[Settings] = None,
    store: Optional[RectangleStore] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Configuration; defaults to the module-level `settings`.
        store: Pre-built store (tests pass one already loaded). When omitted,
               a store is built from the settings and loaded at startup.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app_settings = app_settings or settings

    if store is None:
        store = RectangleStore(
            record_path=app_settings.record_path,
            default=RectangleDimensions(
                width=app_settings.default_width,
                height=app_settings.default_height,
            ),
        )

    app = FastAPI(
        title="RectSizer API",
        description=(
            "Stores the dimensions of a single rectangle and validates resize "
            "requests from the browser editor (width must not exceed height)."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.rectangle_store = store
    app.state.rectangle_service = RectangleService(
        store=store,
        validation_delay=app_settings.validation_delay_seconds,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestContext → CORS
    cors_origins = app_settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        # Browsers refuse credentialed responses for a wildcard origin
        allow_credentials="*" not in cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestContextMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(rectangle.router)
    if app_settings.expose_validate_endpoint:
        app.include_router(rectangle.validate_router)
    app.include_router(health.router)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn using the configured host/port."""
    uvicorn.run(
        "app.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
