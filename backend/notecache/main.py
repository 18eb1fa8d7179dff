"""
NoteCache — FastAPI Application Factory
========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance whose NoteStore is bound to settings.storage_root.
Who:   The `notecache` CLI, `uvicorn --factory notecache.main:create_app`,
       and the test suite.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────────────┐ ┌──────────────┐  │
    │  │  Req ID  │→│  Logging        │→│  GZip        │  │
    │  └──────────┘ └─────────────────┘ └──────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────────┐ ┌────────────┐ ┌───────────┐  │
    │  │ GET/PUT/DELETE   │ │ POST       │ │ GET       │  │
    │  │ /notes[/{name}]  │ │ /write     │ │ /health   │  │
    │  └──────────────────┘ └────────────┘ └───────────┘  │
    │  Static files at "/" (when STATIC_DIR exists)       │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Validation/AlreadyExists→400 │ NotFound→404  │   │
    │  │ FileStorage→500              │ other→500     │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from notecache import __version__
from notecache.config import Settings
from notecache.exceptions import (
    AlreadyExistsError,
    FileStorageError,
    NoteCacheError,
    NotFoundError,
    ValidationError,
)
from notecache.middleware.logging import RequestLoggingMiddleware
from notecache.middleware.request_id import RequestIDMiddleware, request_id_var
from notecache.routes import health, notes, write
from notecache.services.note_store import NoteStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s, to stdout.
    Called by the CLI before uvicorn starts and again by the lifespan handler
    so that running under plain uvicorn gets the same format.
    """
    log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # RequestLoggingMiddleware already writes one line per request
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        1. Setup logging at the configured level
        2. Log storage root and bind address
    Shutdown:
        Nothing to release; every operation opens and closes its own file.
    """
    settings: Settings = app.state.settings
    store: NoteStore = app.state.note_store

    setup_logging(settings.log_level)
    logger.info("=" * 60)
    logger.info("NoteCache starting up...")
    logger.info("Storage directory: %s", store.root)
    logger.info("Server ready at http://%s:%d", settings.host, settings.port)
    logger.info("API docs: http://%s:%d/docs", settings.host, settings.port)
    logger.info("=" * 60)

    yield

    logger.info("NoteCache shutting down...")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map store exceptions to HTTP status codes and a single JSON error format.

    Handler hierarchy:
        ValidationError     → 400 Bad Request
        AlreadyExistsError  → 400 Bad Request
        NotFoundError       → 404 Not Found
        FileStorageError    → 500 Internal Server Error
        NoteCacheError      → 500 Internal Server Error
        Exception           → 500 Internal Server Error

    500 responses never include paths or OS errors; those are logged.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": {"field": exc.field} if exc.field else None,
                "request_id": rid,
            },
        )

    @app.exception_handler(AlreadyExistsError)
    async def handle_already_exists(request: Request, exc: AlreadyExistsError):
        rid = request_id_var.get("")
        logger.warning("[%s] %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "already_exists",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(FileStorageError)
    async def handle_file_storage_error(request: Request, exc: FileStorageError):
        rid = request_id_var.get("")
        logger.error("[%s] File storage error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "Internal Server Error",
                "request_id": rid,
            },
        )

    @app.exception_handler(NoteCacheError)
    async def handle_note_cache_error(request: Request, exc: NoteCacheError):
        rid = request_id_var.get("")
        logger.error("[%s] Unhandled application error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(
            status_code=500,
            content={
                "error": "server_error",
                "message": "Internal Server Error",
                "request_id": rid,
            },
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "internal_server_error",
                "message": "An unexpected error occurred.",
                "request_id": rid,
            },
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration to bind the app to. When omitted, Settings are
                  read from the environment.

    The Settings value and the NoteStore built from it are stored on
    `app.state` and reach handlers through notecache.dependencies.
    """
    settings = settings or Settings()

    app = FastAPI(
        title="NoteCache API",
        description="Stores short text notes as one file per note in a directory.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.note_store = NoteStore(settings.storage_root)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added executes first: RequestID → Logging → GZip
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(notes.router)
    app.include_router(write.router)
    app.include_router(health.router)

    # Static assets go last: a mount at "/" would otherwise shadow the API
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
        logger.info("Serving static files from %s", static_dir.resolve())

    return app
