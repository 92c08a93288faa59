# =============================================================================
# lib/logger.py - Logging Setup
# =============================================================================
# Configures the standard library logging tree from LogConfig:
# - Console output (always)
# - Size-based file rotation (when output_path is set), with optional gzip
#   compression and age-based pruning of rotated files
# - "json" (one object per line) or "console" (human-readable) format
#
# Structured fields are attached with extra={"fields": {...}}:
#   logger.info("MySQL connected", extra={"fields": {"max_open_conns": 20}})
#
# Usage:
#   from lib.logger import setup_logging
#   setup_logging(get_settings().log)
# =============================================================================

from __future__ import annotations

import gzip
import json
import logging
import logging.handlers
import os
import shutil
import time
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

if TYPE_CHECKING:
    from app.config import LogConfig

# Handlers we install are tagged so setup_logging() can be called again
# (e.g. after a config reload) without stacking duplicates.
_HANDLER_TAG = "_article_api_handler"

LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
}

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Backup count used when max_backup is 0 ("keep all")
UNLIMITED_BACKUPS = 9999


def get_log_level(name: str) -> int:
    """Map a config level name to a logging level (INFO if unknown)."""
    return LEVELS.get((name or "").lower(), logging.INFO)


# =============================================================================
# Formatters
# =============================================================================

class JSONFormatter(logging.Formatter):
    """Render each record as a single JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).astimezone().isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "caller": f"{record.pathname}:{record.lineno}",
        }
        fields = getattr(record, "fields", None)
        if fields:
            entry.update(fields)
        if record.exc_info:
            entry["stacktrace"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human-readable lines, with structured fields appended as key=value."""

    def __init__(self):
        super().__init__(CONSOLE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = getattr(record, "fields", None)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


# =============================================================================
# File Rotation
# =============================================================================

class RetentionRotatingFileHandler(logging.handlers.RotatingFileHandler):
    """
    RotatingFileHandler that can gzip rotated files and drop old ones.

    Rotated files are named app.log.1, app.log.2, ... (".gz" appended when
    compressing). After each rotation, backups older than max_age_days are
    deleted.

    backup_count=0 keeps every backup (up to UNLIMITED_BACKUPS) and leaves
    cleanup to max_age_days.
    """

    def __init__(
        self,
        filename: str,
        max_bytes: int,
        backup_count: int,
        max_age_days: int = 0,
        compress: bool = False,
    ):
        super().__init__(
            filename,
            maxBytes=max_bytes,
            backupCount=backup_count if backup_count > 0 else UNLIMITED_BACKUPS,
            encoding="utf-8",
        )
        self.max_age_days = max_age_days
        self.compress = compress
        if compress:
            self.namer = lambda name: name + ".gz"
            self.rotator = self._gzip_rotator

    @staticmethod
    def _gzip_rotator(source: str, dest: str) -> None:
        with open(source, "rb") as src, gzip.open(dest, "wb") as dst:
            shutil.copyfileobj(src, dst)
        os.remove(source)

    def doRollover(self) -> None:
        super().doRollover()
        if self.max_age_days > 0:
            self.prune_backups()

    def prune_backups(self) -> list[Path]:
        """Delete rotated files older than max_age_days. Returns removed paths."""
        cutoff = time.time() - self.max_age_days * 86400
        base = Path(self.baseFilename)
        removed = []
        for path in base.parent.glob(base.name + ".*"):
            try:
                expired = path.stat().st_mtime < cutoff
            except FileNotFoundError:
                # Removed by another process since the glob
                continue
            if expired:
                path.unlink(missing_ok=True)
                removed.append(path)
        return removed


# =============================================================================
# Setup
# =============================================================================

def setup_logging(log_config: LogConfig) -> logging.Logger:
    """
    Configure the root logger from LogConfig.

    Safe to call more than once: handlers installed by a previous call are
    replaced.

    Args:
        log_config: The "log" section of Settings

    Returns:
        The configured root logger
    """
    root = logging.getLogger()
    level = get_log_level(log_config.level)
    root.setLevel(level)

    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            root.removeHandler(handler)
            handler.close()

    formatter: logging.Formatter
    if log_config.format == "json":
        formatter = JSONFormatter()
    else:
        formatter = ConsoleFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_config.output_path:
        log_dir = os.path.dirname(log_config.output_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(
            RetentionRotatingFileHandler(
                log_config.output_path,
                max_bytes=log_config.max_size * 1024 * 1024,
                backup_count=log_config.max_backup,
                max_age_days=log_config.max_age,
                compress=log_config.compress,
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
        setattr(handler, _HANDLER_TAG, True)
        root.addHandler(handler)

    return root


def set_level(level_name: str) -> None:
    """Change the level of the root logger and our handlers in place."""
    level = get_log_level(level_name)
    root = logging.getLogger()
    root.setLevel(level)
    for handler in root.handlers:
        if getattr(handler, _HANDLER_TAG, False):
            handler.setLevel(level)


def fatal(logger: logging.Logger, msg: str, *args: Any, **kwargs: Any) -> NoReturn:
    """Log at CRITICAL and terminate the process."""
    logger.critical(msg, *args, **kwargs)
    raise SystemExit(1)
