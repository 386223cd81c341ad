"""
Blogsite Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes configuration, middleware registration, route mounting,
       and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn blogsite.main:app) or the `blogsite` command.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌────────────┐  │
    │  │ Req ID   │→│ Logging  │→│ GZip │→│ CORS       │  │
    │  └──────────┘ └──────────┘ └──────┘ └────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │ /api/...     │ │ /health  │ │ pages (fallback)│  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ BlogsiteError→its status │ 405 │ other→500   │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup (any failure aborts the process):
    1. Initialize logging
    2. Validate configuration (MONGO_URI must be set)
    3. Connect to MongoDB and ping it within CONNECT_TIMEOUT
    4. Warn when the frontend directory is missing

    Shutdown (uvicorn stops accepting connections and drains in-flight
    requests on SIGINT/SIGTERM first):
    1. Disconnect from MongoDB within SHUTDOWN_TIMEOUT (errors logged only)
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blogsite import __version__
from blogsite.config import settings
from blogsite.database import Database
from blogsite.exceptions import BlogsiteError, DatabaseConnectionError, MethodNotAllowedError
from blogsite.middleware.cors import CORSMiddleware, cors_headers
from blogsite.middleware.logging import RequestLoggingMiddleware
from blogsite.middleware.request_id import RequestIDMiddleware, request_id_var
from blogsite.routes import blog, health, pages

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during startup, before anything else logs.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # These log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Connect the database gateway on startup and close it on shutdown.

    Configuration and connection errors are re-raised: uvicorn then reports
    "Application startup failed" and exits non-zero.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("Blogsite backend starting up...")

    try:
        settings.validate_required()
    except ValueError as e:
        logger.critical("Configuration error: %s", str(e))
        raise

    try:
        database = await Database.connect(
            settings.mongo_uri,
            settings.mongo_database,
            timeout=settings.connect_timeout,
        )
    except DatabaseConnectionError as e:
        logger.critical("failed to connect to MongoDB: %s", e.message)
        raise
    app.state.database = database

    if not Path(settings.static_dir).is_dir():
        logger.warning("frontend directory not found: %s", settings.static_dir)

    logger.info("Server listening on %s:%d", settings.host, settings.port)

    try:
        yield  # Application runs here
    finally:
        # ── Shutdown ──────────────────────────────────────────────────────
        logger.info("Shutting down server...")
        await database.disconnect(timeout=settings.shutdown_timeout)
        app.state.database = None
        logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_response(body: str, status_code: int, headers: Optional[dict] = None) -> PlainTextResponse:
    """Plain-text error body terminated by a newline, as the site's clients expect."""
    return PlainTextResponse(
        body + "\n",
        status_code=status_code,
        headers={**(headers or {}), "X-Content-Type-Options": "nosniff"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register global exception handlers.

    Handler hierarchy:
        BlogsiteError           → exc.status_code, body = exc.message
        HTTPException 405       → per-route "method not allowed" body
        HTTPException (other)   → FastAPI default
        Exception (fallback)    → 500, stack trace logged
    """

    @app.exception_handler(BlogsiteError)
    async def handle_blogsite_error(request: Request, exc: BlogsiteError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid,
                type(exc).__name__,
                exc.message,
                exc.context,
            )
        else:
            logger.warning("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return error_response(exc.message, exc.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 405:
            error = MethodNotAllowedError(
                blog.METHOD_NOT_ALLOWED_BODIES.get(request.url.path, "method not allowed"),
                context={"method": request.method, "path": request.url.path},
            )
            logger.warning(
                "[%s] %s: %s %s",
                request_id_var.get(""),
                type(error).__name__,
                request.method,
                request.url.path,
            )
            # Keep Starlette's Allow header
            return error_response(error.message, error.status_code, headers=exc.headers)
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        # Runs in ServerErrorMiddleware, outside CORSMiddleware
        return error_response(
            "internal server error",
            500,
            headers=cors_headers(request.headers.get("Origin")),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Tests build a fresh instance per test and set `app.state.database`
    themselves, since ASGI test transports do not run the lifespan.
    """
    app = FastAPI(
        title="Blogsite API",
        description="Blog posts API and static pages for a personal site.",
        version=__version__,
        lifespan=lifespan,
        # "/blog/" must reach the page fallback, not redirect to "/blog"
        redirect_slashes=False,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → routes
    app.add_middleware(CORSMiddleware)
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(blog.router)
    app.include_router(health.router)

    # Requests no route above matches at all (not even by path with another
    # verb) fall through to the frontend pages.
    app.router.default = pages.router

    return app


# uvicorn expects `blogsite.main:app` to be importable
app = create_app()


def run() -> None:
    """Console entry point: serve on HOST:PORT with a bounded graceful shutdown."""
    import uvicorn

    uvicorn.run(
        "blogsite.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=int(settings.shutdown_timeout),
    )
