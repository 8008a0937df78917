"""
Hivemind — FastAPI Application Factory
======================================

What:  Creates and configures the FastAPI application around a store.
How:   create_app(store) registers middleware, exception handlers and routes,
       and keeps the store on app.state for the route dependencies.
Who:   Used by uvicorn (`uvicorn hivemind.main:app`), by `python -m hivemind`
       and by the tests (with their own store).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  Request ID → Access log               │
    │                                                     │
    │  Routes:                                            │
    │    /api/sensor/…  /api/switch/…   (resources.py)    │
    │    /  /api/  + 404 / 501 fallbacks (root.py)        │
    │                                                     │
    │  Exception Handlers (empty bodies):                 │
    │    ValidationError→400  Decode/Encode/Store→500     │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, open the store (failure aborts startup)
    Shutdown: close the store
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response

from hivemind import __version__
from hivemind.config import Settings, settings
from hivemind.exceptions import (
    DecodeError,
    EncodeError,
    HivemindError,
    StoreError,
    ValidationError,
)
from hivemind.middleware.logging import AccessLogMiddleware
from hivemind.middleware.request_id import RequestIDMiddleware, request_id_var
from hivemind.responses import empty_response
from hivemind.routes import resources, root
from hivemind.routes.root import answer_unlisted_method
from hivemind.stores import HivemindStore, build_store

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure process-wide logging.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Level:  `level`, or the configured log_level when omitted.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access log replaces uvicorn's
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the injected store on startup and close it on shutdown.

    A store that cannot be opened is fatal: the error is logged and
    re-raised, which makes the server abort startup. There is no retry.
    """
    app_settings: Settings = app.state.settings
    store: HivemindStore = app.state.store

    setup_logging(app_settings.log_level)
    logger.info("Hivemind %s starting up (store: %s)", __version__, type(store).__name__)

    try:
        await store.open()
    except StoreError as e:
        logger.critical("%s: %s", e.message, e.context.get("error", ""))
        raise

    logger.info("Listening on http://%s:%d", app_settings.host, app_settings.port)

    yield

    logger.info("Hivemind shutting down...")
    await store.close()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes.

    Handler hierarchy:
        ValidationError   → 400
        DecodeError       → 500
        EncodeError       → 500
        StoreError        → 500
        HivemindError     → its status_code
        HTTPException     → 405 answered by path, others empty with their status
        Exception         → 500

    Every response has an empty body and the API headers of its path;
    details go to the server log only.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError) -> Response:
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return empty_response(400, request.url.path)

    @app.exception_handler(DecodeError)
    async def handle_decode_error(request: Request, exc: DecodeError) -> Response:
        rid = request_id_var.get("")
        logger.warning("[%s] Decode error: %s | Context: %s", rid, exc.message, exc.context)
        return empty_response(500, request.url.path)

    @app.exception_handler(EncodeError)
    async def handle_encode_error(request: Request, exc: EncodeError) -> Response:
        rid = request_id_var.get("")
        logger.error("[%s] Encode error: %s | Context: %s", rid, exc.message, exc.context)
        return empty_response(500, request.url.path)

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError) -> Response:
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return empty_response(500, request.url.path)

    @app.exception_handler(HivemindError)
    async def handle_hivemind_error(request: Request, exc: HivemindError) -> Response:
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return empty_response(exc.status_code, request.url.path)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
        # 405: the method is not in HTTP_METHODS, the path still decides
        if exc.status_code == 405:
            return answer_unlisted_method(request)
        return empty_response(exc.status_code, request.url.path)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> Response:
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return empty_response(500, request.url.path)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    store: Optional[HivemindStore] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        store:        Store the routes read and write. Built from the
                      settings when omitted. The app owns its open/close.
        app_settings: Settings to use instead of the module-level ones.

    Returns: Configured FastAPI instance.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Hivemind API",
        description="Sensor and switch registry backed by a pluggable key-value store.",
        version=__version__,
        # Every path is part of the routing contract, so no /docs or /openapi.json
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.store = store if store is not None else build_store(app_settings)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → AccessLog
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    # root carries the catch-alls, so it goes last
    app.include_router(resources.router)
    app.include_router(root.router)

    return app


app = create_app()
