# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for data validation:
# - article.py: Article and its write payload
# - user.py: Register/login credentials
# - envelope.py: The {code, message, data} response wrapper
#
# These models define the "contract" between API and clients.
# =============================================================================

from .article import Article, ArticleWrite
from .envelope import Envelope, envelope
from .user import User, UserCredentials

__all__ = [
    "Article",
    "ArticleWrite",
    "Envelope",
    "envelope",
    "User",
    "UserCredentials",
]
