# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Points the config loader at a file that doesn't exist, so the repo's
#   config/config.yaml never leaks into tests
# - Provides a fresh ArticleStore and app per test
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# app.main builds a module-level app (and reads settings) on import

os.environ["APP_CONFIG_FILE"] = os.path.join(os.path.dirname(__file__), "missing-config.yaml")
os.environ.setdefault("LOG__LEVEL", "debug")

import pytest
from fastapi.testclient import TestClient

from app.config import AppConfig, LogConfig, Settings
from app.main import create_app
from core.services.article_store import ArticleStore


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def test_settings():
    """Settings with file logging disabled."""
    return Settings(
        log=LogConfig(level="debug", output_path=""),
        app=AppConfig(env="test"),
    )


@pytest.fixture
def store():
    """Empty ArticleStore."""
    return ArticleStore()


@pytest.fixture
def app(test_settings, store):
    """Application wired to the `store` fixture."""
    return create_app(settings=test_settings, store=store)


@pytest.fixture
def client(app):
    """TestClient with the app lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def sample_articles():
    """Sample article payloads."""
    return [
        {"title": "A", "content": "B"},
        {"title": "C", "content": "D"},
        {"title": "Release notes", "content": "Version 1.0 is out"},
    ]
