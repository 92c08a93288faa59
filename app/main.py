# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the article API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   poetry run uvicorn app.main:app --reload
#   poetry run python scripts/start_server.py
# =============================================================================

import logging
import time
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.config import ConfigWatcher, Settings, get_settings
from app.exceptions import (
    ArticleApiException,
    article_api_exception_handler,
    database_exception_handler,
    general_exception_handler,
    validation_exception_handler,
)
from app.routers import articles, health, users
from core.models.envelope import Envelope
from core.services.article_store import ArticleStore
from lib.database import Database, DatabaseConnectionError
from lib.logger import fatal, set_level, setup_logging

logger = logging.getLogger(__name__)


def _on_config_reload(app: FastAPI):
    """Build the callback that applies reloaded settings to a running app."""

    def apply(new_settings: Settings) -> None:
        app.state.settings = new_settings
        set_level(new_settings.log.level)
        logger.info(f"Log level is now {new_settings.log.level}")

    return apply


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Runs on startup and shutdown:
    - Startup: Configure logging, connect MySQL (if enabled), start config watcher
    - Shutdown: Stop the watcher, close the database
    """
    settings: Settings = app.state.settings

    # Startup
    setup_logging(settings.log)
    logger.info(
        "Starting application...",
        extra={"fields": {
            "app_name": settings.app.name,
            "version": settings.app.version,
            "env": settings.app.env,
            "port": settings.server.port,
        }},
    )

    if settings.database.mysql.enabled and app.state.database is None:
        try:
            app.state.database = Database(settings.database.mysql).connect()
        except DatabaseConnectionError as e:
            fatal(logger, f"MySQL connection failed: {e}")

    watcher = None
    if settings.app.watch_config:
        watcher = ConfigWatcher(on_change=[_on_config_reload(app)])
        watcher.start()

    yield

    # Shutdown
    logger.info("Shutting down...")

    if watcher is not None:
        watcher.stop()

    if app.state.database is not None:
        app.state.database.close()
        app.state.database = None


def create_app(
    settings: Settings | None = None,
    store: ArticleStore | None = None,
    database: Database | None = None,
) -> FastAPI:
    """
    Build a FastAPI application.

    Each application owns its own ArticleStore, so separate apps (e.g. in
    tests) never share articles.

    Args:
        settings: Settings to use (defaults to get_settings())
        store: Pre-built store (defaults to a new, empty one)
        database: Already-connected Database (skips connecting at startup)
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Article API",
        description="""
## In-Memory Article API

A small REST service that keeps articles in memory.

| Method | Path | Description |
|--------|------|-------------|
| POST | /article | Create an article |
| GET | /article/{id} | Get an article |
| PUT | /article/{id} | Update an article |
| DELETE | /article/{id} | Delete an article |
| GET | /articles | List articles |
| POST | /register | Register (demo) |
| POST | /login | Log in (demo) |

Every response is wrapped as `{"code": int, "message": str, "data": any}`,
where `code` mirrors the HTTP status.
""",
        version=settings.app.version,
        lifespan=lifespan,
        openapi_tags=[
            {"name": "Articles", "description": "Article CRUD"},
            {"name": "Users", "description": "Registration and login demo"},
            {"name": "Health", "description": "API health and readiness checks"},
        ],
    )

    app.state.settings = settings
    app.state.article_store = store if store is not None else ArticleStore()
    app.state.database = database

    # =========================================================================
    # Middleware
    # =========================================================================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms"
        )
        return response

    # =========================================================================
    # Exception Handlers
    # =========================================================================

    app.add_exception_handler(ArticleApiException, article_api_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(DatabaseConnectionError, database_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # =========================================================================
    # Routers
    # =========================================================================

    app.include_router(articles.router, tags=["Articles"])
    app.include_router(users.router, tags=["Users"])
    app.include_router(health.router, tags=["Health"])

    @app.get("/", tags=["Root"], response_model=Envelope[None])
    def root():
        """Root endpoint."""
        return Envelope(code=200, message="Hello, World!", data=None)

    return app


def run() -> None:
    """Start the API server with uvicorn using the configured port."""
    settings = get_settings()
    if settings.server.port == 0:
        setup_logging(settings.log)
        fatal(logger, "Port is invalid")

    uvicorn.run(
        create_app(settings),
        host="0.0.0.0",
        port=settings.server.port,
        timeout_keep_alive=settings.server.timeout,
        log_level=settings.server.log_level,
        access_log=settings.is_debug,
        # Keep the handlers installed by setup_logging()
        log_config=None,
    )


# Application used by `uvicorn app.main:app`
app = create_app()
