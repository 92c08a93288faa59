# =============================================================================
# lib/database.py - MySQL Connection Bootstrap
# =============================================================================
# Creates and verifies the SQLAlchemy engine described by the
# database.mysql settings section:
# - Connection pool sizing (max open / max idle connections)
# - Connection recycling (max lifetime) and idle eviction (max idle time)
# - SQL tracing through QueryLogger (slow-query detection, error logging)
# - Startup ping with a bounded timeout
#
# Usage:
#   from lib.database import Database
#   db = Database(settings.database.mysql).connect()
#   with db.engine.connect() as conn:
#       conn.execute(text("SELECT 1"))
#   db.close()
# =============================================================================

from __future__ import annotations

import logging
import re
import time
from typing import TYPE_CHECKING, Any

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError, DisconnectionError, NoResultFound

from lib.query_logger import LogLevel, QueryLogger, RecordNotFoundError
from lib.utils import ApplicationError

if TYPE_CHECKING:
    from app.config import MySQLConfig

logger = logging.getLogger(__name__)
sql_logger = logging.getLogger("sql")

# Seconds to wait for the server when opening a connection
CONNECT_TIMEOUT = 5

# "user:password@" at the start of a non-URL DSN
_USERINFO_PATTERN = re.compile(r"^([^:/@]+):([^@]*)@")


class DatabaseConnectionError(ApplicationError):
    """Raised when the database can't be opened or doesn't answer a ping."""

    def __init__(self, message: str, dsn: str | None = None, cause: BaseException | None = None):
        details: dict[str, Any] = {}
        if dsn:
            details["dsn"] = mask_dsn(dsn)
        if cause is not None:
            details["error"] = str(cause)
        super().__init__(
            message=message,
            code="DATABASE_CONNECTION_ERROR",
            suggestion="Check database.mysql.dsn and that the MySQL server is reachable",
            details=details,
        )


def mask_dsn(dsn: str) -> str:
    """
    Hide credentials in a connection string for log output.

    Example:
        mask_dsn("mysql+pymysql://root:secret@db:3306/app")
        # -> "mysql+pymysql://root:***@db:3306/app"

    DSNs of the form "user:pass@tcp(host:3306)/db" get the same treatment.
    Anything else keeps only its first 10 and last 20 characters.
    """
    try:
        url = make_url(dsn)
    except (ArgumentError, ValueError):
        url = None

    if url is not None:
        return url.render_as_string(hide_password=True)

    if _USERINFO_PATTERN.match(dsn):
        return _USERINFO_PATTERN.sub(r"\1:***@", dsn, count=1)

    if len(dsn) > 30:
        return dsn[:10] + "***" + dsn[-20:]
    return "***"


# =============================================================================
# Engine Instrumentation
# =============================================================================

def instrument_engine(engine: Engine, query_logger: QueryLogger) -> None:
    """
    Forward every statement executed on `engine` to `query_logger.trace`.

    Start times are kept on a per-connection stack so nested executions
    don't clobber each other.
    """

    @event.listens_for(engine, "before_cursor_execute")
    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start", []).append(time.perf_counter())

    @event.listens_for(engine, "after_cursor_execute")
    def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        begin = conn.info["query_start"].pop()
        query_logger.trace(begin, lambda: (statement, cursor.rowcount))

    @event.listens_for(engine, "handle_error")
    def _handle_error(exception_context):
        conn = exception_context.connection
        starts = conn.info.get("query_start") if conn is not None else None
        if not starts:
            # Failed before a statement ran (e.g. while connecting)
            return
        begin = starts.pop()
        query_logger.trace(
            begin,
            lambda: (exception_context.statement or "", -1),
            exception_context.original_exception,
        )


def install_idle_timeout(engine: Engine, max_idle_seconds: int) -> None:
    """
    Discard pooled connections that sat idle longer than max_idle_seconds.

    Raising DisconnectionError from a checkout listener makes the pool
    throw the connection away and hand out a fresh one.
    """

    @event.listens_for(engine, "checkin")
    def _checkin(dbapi_connection, connection_record):
        connection_record.info["last_checkin"] = time.monotonic()

    @event.listens_for(engine, "checkout")
    def _checkout(dbapi_connection, connection_record, connection_proxy):
        last_checkin = connection_record.info.get("last_checkin")
        if last_checkin is not None and time.monotonic() - last_checkin > max_idle_seconds:
            logger.debug(f"Discarding connection idle for more than {max_idle_seconds}s")
            raise DisconnectionError("connection exceeded max idle time")


# =============================================================================
# Database
# =============================================================================

class Database:
    """
    Owns the SQLAlchemy engine for the configured MySQL database.

    Example:
        db = Database(settings.database.mysql).connect()
        db.ping()
        db.close()
    """

    def __init__(self, config: MySQLConfig):
        self.config = config
        self.engine: Engine | None = None

    def build_query_logger(self) -> QueryLogger:
        """QueryLogger configured from log_mode and slow_threshold."""
        return QueryLogger(
            sql_logger,
            level=LogLevel.INFO if self.config.log_mode else LogLevel.SILENT,
            slow_threshold=self.config.slow_threshold / 1000,
            ignore_record_not_found=True,
            not_found_errors=(RecordNotFoundError, NoResultFound),
        )

    def _engine_options(self) -> dict[str, Any]:
        cfg = self.config
        # QueuePool treats pool_size=0 as unbounded, so keep at least one
        pool_size = max(cfg.max_idle_conns, 1)
        options: dict[str, Any] = {
            "pool_size": pool_size,
            "max_overflow": max(cfg.max_open_conns - pool_size, 0),
        }
        if cfg.conn_max_lifetime > 0:
            options["pool_recycle"] = cfg.conn_max_lifetime
        if make_url(cfg.dsn).get_backend_name() == "mysql":
            options["connect_args"] = {"connect_timeout": CONNECT_TIMEOUT}
        return options

    def connect(self) -> Database:
        """
        Create the engine and verify it with a ping.

        Returns:
            self, for chaining

        Raises:
            DatabaseConnectionError: If the engine can't be created or the
                server doesn't answer. Not retried.
        """
        cfg = self.config
        masked = mask_dsn(cfg.dsn)
        logger.info(
            "Initializing MySQL connection",
            extra={"fields": {
                "dsn": masked,
                "max_open_conns": cfg.max_open_conns,
                "max_idle_conns": cfg.max_idle_conns,
            }},
        )

        try:
            options = self._engine_options()
            engine = create_engine(cfg.dsn, **options)
        except Exception as e:
            logger.error(f"Failed to create database engine: {e}")
            raise DatabaseConnectionError(
                f"failed to open database: {e}", dsn=cfg.dsn, cause=e
            ) from e

        instrument_engine(engine, self.build_query_logger())
        if cfg.conn_max_lifetime > 0:
            logger.debug(f"Connection max lifetime set to {cfg.conn_max_lifetime}s")
        if cfg.conn_max_idle_time > 0:
            install_idle_timeout(engine, cfg.conn_max_idle_time)
            logger.debug(f"Connection max idle time set to {cfg.conn_max_idle_time}s")

        self.engine = engine
        try:
            self.ping()
        except Exception as e:
            logger.error(f"Database ping failed: {e}")
            engine.dispose()
            self.engine = None
            raise DatabaseConnectionError(
                f"database ping failed: {e}", dsn=cfg.dsn, cause=e
            ) from e

        logger.info(
            "MySQL connection initialized",
            extra={"fields": {
                "max_open_conns": cfg.max_open_conns,
                "max_idle_conns": cfg.max_idle_conns,
                "log_mode": cfg.log_mode,
            }},
        )
        return self

    def ping(self) -> None:
        """
        Run SELECT 1 against the database.

        Raises:
            DatabaseConnectionError: If connect() hasn't been called
            sqlalchemy.exc.DBAPIError: If the query fails
        """
        if self.engine is None:
            raise DatabaseConnectionError("database is not connected")
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def close(self) -> None:
        """Dispose of the connection pool."""
        if self.engine is None:
            return
        logger.info("Closing MySQL connection...")
        self.engine.dispose()
        self.engine = None
        logger.info("MySQL connection closed")
