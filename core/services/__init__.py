# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .article_store import ArticleStore
from .user_service import validate_credentials

__all__ = [
    "ArticleStore",
    "validate_credentials",
]
