# =============================================================================
# lib/ - Standalone Infrastructure Modules
# =============================================================================
# This package contains reusable infrastructure:
# - logger.py: Logging setup (console + rotating file, json/console format)
# - query_logger.py: Level-gated SQL trace logger with slow-query detection
# - database.py: MySQL engine bootstrap (pool tuning, ping, DSN masking)
# - utils.py: Shared utilities (base application error)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.database import Database, DatabaseConnectionError, mask_dsn
from lib.logger import fatal, setup_logging
from lib.query_logger import LogLevel, QueryLogger
from lib.utils import ApplicationError

__all__ = [
    # Database
    "Database",
    "DatabaseConnectionError",
    "mask_dsn",
    # Logging
    "fatal",
    "setup_logging",
    "LogLevel",
    "QueryLogger",
    # Utils
    "ApplicationError",
]
