# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends().
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import Settings
from core.services.article_store import ArticleStore
from lib.database import Database


def get_app_settings(request: Request) -> Settings:
    """
    Get the Settings this application was built with.

    Updated in place by the config watcher when the YAML file changes.
    """
    return request.app.state.settings


def get_article_store(request: Request) -> ArticleStore:
    """
    Get the ArticleStore owned by this application instance.

    Created once in create_app() and kept on app.state.
    """
    return request.app.state.article_store


def get_database(request: Request) -> Database | None:
    """Get the connected Database, or None when MySQL is disabled."""
    return request.app.state.database


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_app_settings)]
ArticleStoreDep = Annotated[ArticleStore, Depends(get_article_store)]
DatabaseDep = Annotated[Database | None, Depends(get_database)]
