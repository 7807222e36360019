"""
Restaurants API - FastAPI Application Factory
==============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance
       with middleware, exception handlers and routers registered.
Who:   Used by restaurants_api.server.start (programmatic / tests) and by
       uvicorn directly (uvicorn restaurants_api.main:app).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐                   │
    │  │ Req ID   │→│  Logging        │                   │
    │  └──────────┘ └─────────────────┘                   │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────────────────────┐ ┌─────────────────┐ │
    │  │ GET/POST/PUT/DELETE        │ │ GET /health     │ │
    │  │ /restaurants[/{id}]        │ │                 │ │
    │  └────────────────────────────┘ └─────────────────┘ │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation→400 │ Store→500 │ No route→404    │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Store ownership:
    The app reads its Database handle from `app.state.database`. When the
    handle is provided up front (server.start), the caller owns the
    connection. When the app is served without one, the lifespan connects
    to settings.database_url on startup and disconnects on shutdown.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from restaurants_api import __version__
from restaurants_api.config import settings
from restaurants_api.database import Database
from restaurants_api.exceptions import (
    MissingFieldError,
    StoreError,
    ValidationError,
)
from restaurants_api.middleware.logging import RequestLoggingMiddleware
from restaurants_api.middleware.request_id import RequestIDMiddleware, request_id_var
from restaurants_api.routes import health, restaurants

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"
NOT_FOUND_MESSAGE = "Not Found"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output: stdout (captured by Docker / systemd)
    """
    log_format = (
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,  # Override any existing logging config
    )

    # Reduce noise from third-party libraries
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
    Connect a store for the app if nobody attached one.

    Startup sequence (only when app.state.database is unset, i.e. the app
    is served directly by uvicorn):
        1. Setup logging
        2. Connect to settings.database_url

    When server.start() attached a store, the embedding process keeps its
    own logging configuration untouched.

    Shutdown sequence:
        1. Disconnect the store, only if this lifespan connected it
    """
    owned: Optional[Database] = None

    if getattr(app.state, "database", None) is None:
        setup_logging()
        owned = Database(settings.database_url)
        await owned.connect()
        app.state.database = owned

    logger.info("Restaurants API %s ready", __version__)

    yield

    if owned is not None:
        await owned.disconnect()
        app.state.database = None
        logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP responses.

    Handler hierarchy:
        MissingFieldError       → 400, plain text message
        ValidationError         → 400, {"message": ...}
        StoreError              → 500, {"message": "Internal server error"}
        HTTPException 404/405   → 404, {"message": "Not Found"}
        HTTPException (other)   → its status, {"message": detail}
        Exception (fallback)    → 500, {"message": "Internal server error"}

    Exceptions raised inside the route stack reach RequestIDMiddleware
    first, which answers them with the same generic 500 and the request ID.

    Store details (query errors, missing ids) are logged, never returned.
    """

    @app.exception_handler(MissingFieldError)
    async def handle_missing_field(request: Request, exc: MissingFieldError):
        rid = request_id_var.get("")
        logger.warning("[%s] %s", rid, exc.message)
        return PlainTextResponse(exc.message, status_code=400)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(status_code=400, content={"message": exc.message})

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        # Unknown paths and unsupported methods both fall through to "Not Found"
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"message": NOT_FOUND_MESSAGE})
        return JSONResponse(
            status_code=exc.status_code,
            content={"message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error(
            "[%s] Unexpected error: %s",
            rid,
            str(exc),
            exc_info=True,
        )
        return JSONResponse(status_code=500, content={"message": INTERNAL_ERROR_MESSAGE})


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(database: Optional[Database] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        database: Connected store handle to serve from. When omitted, the
                  lifespan connects one from settings on startup.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Restaurants API",
        description="CRUD over a collection of restaurant documents.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.database = database

    # Middleware executes in REVERSE order of addition:
    # RequestID runs first so the logging middleware can read the ID
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(restaurants.router)
    app.include_router(health.router)

    return app


# uvicorn expects `restaurants_api.main:app` to be importable
app = create_app()
