# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - articles.py: In-memory article CRUD endpoints
# - users.py: Registration/login demo endpoints
# - health.py: Health check endpoints
#
# Each router is mounted in main.py.
# =============================================================================

from . import articles
from . import health
from . import users

__all__ = [
    "articles",
    "health",
    "users",
]
