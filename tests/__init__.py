# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the article API:
# - test_article_store.py: ArticleStore semantics and concurrency
# - test_articles_api.py / test_users_api.py: HTTP endpoints and envelopes
# - test_config.py: Settings sources and live reload
# - test_logger.py / test_query_logger.py: Logging setup and SQL tracing
# - test_database.py: DSN masking and engine bootstrap
#
# Run tests with: poetry run pytest
# =============================================================================
