# =============================================================================
# lib/query_logger.py - SQL Query Trace Logger
# =============================================================================
# Adapter that forwards database log calls and per-statement traces into the
# application's logging tree.
#
# It does not depend on an ORM: trace() receives the start time, a
# callable returning (sql, rows_affected), and an optional error. The
# SQLAlchemy wiring lives in lib/database.py.
#
# Usage:
#   query_logger = QueryLogger(logging.getLogger("sql"), LogLevel.WARN,
#                              slow_threshold=0.2)
#   begin = time.perf_counter()
#   ... run statement ...
#   query_logger.trace(begin, lambda: (sql, rowcount), error)
# =============================================================================

from __future__ import annotations

import copy
import logging
import time
from enum import IntEnum
from typing import Any, Callable


class LogLevel(IntEnum):
    """Verbosity of the query logger. Higher values log more."""
    SILENT = 1
    ERROR = 2
    WARN = 3
    INFO = 4


class RecordNotFoundError(Exception):
    """Raised by data access code when a lookup matches no rows."""


class QueryLogger:
    """
    Level-gated logger for SQL statements.

    Attributes:
        logger: Destination logger
        level: Current verbosity
        slow_threshold: Seconds; statements slower than this are warned about
            (0 disables slow-query detection)
        ignore_record_not_found: Don't log "no rows" errors as failures
        not_found_errors: Exception types that mean "no rows" rather than a
            failing statement
    """

    def __init__(
        self,
        logger: logging.Logger,
        level: LogLevel = LogLevel.WARN,
        slow_threshold: float = 0.0,
        ignore_record_not_found: bool = True,
        not_found_errors: tuple[type[BaseException], ...] = (RecordNotFoundError,),
    ):
        self.logger = logger
        self.level = level
        self.slow_threshold = slow_threshold
        self.ignore_record_not_found = ignore_record_not_found
        self.not_found_errors = not_found_errors

    def log_mode(self, level: LogLevel) -> QueryLogger:
        """Return a copy of this logger with a different level."""
        new_logger = copy.copy(self)
        new_logger.level = level
        return new_logger

    # -------------------------------------------------------------------------
    # Plain messages
    # -------------------------------------------------------------------------

    def info(self, msg: str, *args: Any) -> None:
        if self.level >= LogLevel.INFO:
            self.logger.info(msg, *args)

    def warn(self, msg: str, *args: Any) -> None:
        if self.level >= LogLevel.WARN:
            self.logger.warning(msg, *args)

    def error(self, msg: str, *args: Any) -> None:
        if self.level >= LogLevel.ERROR:
            self.logger.error(msg, *args)

    # -------------------------------------------------------------------------
    # Statement tracing
    # -------------------------------------------------------------------------

    def _is_ignored(self, err: BaseException) -> bool:
        return self.ignore_record_not_found and isinstance(err, self.not_found_errors)

    def trace(
        self,
        begin: float,
        fc: Callable[[], tuple[str, int]],
        err: BaseException | None = None,
    ) -> None:
        """
        Log one executed statement.

        Args:
            begin: time.perf_counter() value taken before execution
            fc: Returns (sql, rows_affected); not called when SILENT
            err: Exception raised by the statement, if any

        Exactly one of these is emitted, checked in order:
        - ERROR if the statement failed (unless it is an ignored not-found)
        - WARN if it took longer than slow_threshold
        - INFO if the level is INFO
        """
        if self.level <= LogLevel.SILENT:
            return

        elapsed = time.perf_counter() - begin
        sql, rows = fc()

        fields: dict[str, Any] = {
            "sql": sql,
            "elapsed_ms": round(elapsed * 1000, 3),
            "rows": rows,
        }

        if err is not None and self.level >= LogLevel.ERROR and not self._is_ignored(err):
            fields["error"] = str(err)
            self.logger.error("SQL execution failed", extra={"fields": fields})
        elif self.slow_threshold and elapsed > self.slow_threshold and self.level >= LogLevel.WARN:
            fields["threshold_ms"] = round(self.slow_threshold * 1000, 3)
            self.logger.warning("Slow query detected", extra={"fields": fields})
        elif self.level == LogLevel.INFO:
            self.logger.info("SQL executed", extra={"fields": fields})

    def params_filter(self, sql: str, params: Any) -> tuple[str, Any]:
        """Only expose bound parameters when logging at INFO."""
        if self.level == LogLevel.INFO:
            return sql, params
        return sql, None
