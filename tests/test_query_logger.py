# =============================================================================
# tests/test_query_logger.py - QueryLogger Tests
# =============================================================================
# Level gating, slow-query detection and error handling of the SQL trace
# logger, checked through pytest's caplog fixture.
# =============================================================================

import logging
import time
from unittest.mock import MagicMock

import pytest

from lib.query_logger import LogLevel, QueryLogger, RecordNotFoundError

LOGGER_NAME = "test.sql"


@pytest.fixture
def sql_log(caplog):
    caplog.set_level(logging.DEBUG, logger=LOGGER_NAME)
    return caplog


def make_logger(level, slow_threshold=0.0, **kwargs):
    return QueryLogger(logging.getLogger(LOGGER_NAME), level, slow_threshold, **kwargs)


def fc(sql="SELECT * FROM articles", rows=3):
    return lambda: (sql, rows)


# =============================================================================
# Plain messages
# =============================================================================

class TestMessages:
    """info / warn / error gating."""

    def test_info_level_emits_everything(self, sql_log):
        query_logger = make_logger(LogLevel.INFO)

        query_logger.info("opened %s", "db")
        query_logger.warn("slow %d", 5)
        query_logger.error("failed")

        assert [r.levelno for r in sql_log.records] == [logging.INFO, logging.WARNING, logging.ERROR]
        assert sql_log.records[0].getMessage() == "opened db"

    def test_error_level_suppresses_info_and_warn(self, sql_log):
        query_logger = make_logger(LogLevel.ERROR)

        query_logger.info("a")
        query_logger.warn("b")
        query_logger.error("c")

        assert [r.getMessage() for r in sql_log.records] == ["c"]

    def test_silent_suppresses_all(self, sql_log):
        query_logger = make_logger(LogLevel.SILENT)

        query_logger.info("a")
        query_logger.warn("b")
        query_logger.error("c")

        assert sql_log.records == []

    def test_log_mode_returns_copy(self):
        original = make_logger(LogLevel.WARN, slow_threshold=0.5)

        verbose = original.log_mode(LogLevel.INFO)

        assert verbose is not original
        assert verbose.level == LogLevel.INFO
        assert verbose.slow_threshold == 0.5
        assert original.level == LogLevel.WARN


# =============================================================================
# Tracing
# =============================================================================

class TestTrace:
    """trace() outcomes."""

    def test_silent_does_not_evaluate_statement(self, sql_log):
        statement = MagicMock(return_value=("SELECT 1", 1))

        make_logger(LogLevel.SILENT).trace(time.perf_counter(), statement)

        statement.assert_not_called()
        assert sql_log.records == []

    def test_info_logs_executed_statement(self, sql_log):
        make_logger(LogLevel.INFO).trace(time.perf_counter(), fc())

        [record] = sql_log.records
        assert record.levelno == logging.INFO
        assert record.getMessage() == "SQL executed"
        assert record.fields["sql"] == "SELECT * FROM articles"
        assert record.fields["rows"] == 3
        assert record.fields["elapsed_ms"] >= 0

    def test_warn_level_skips_fast_statement(self, sql_log):
        make_logger(LogLevel.WARN, slow_threshold=10).trace(time.perf_counter(), fc())

        assert sql_log.records == []

    def test_error_logged(self, sql_log):
        make_logger(LogLevel.ERROR).trace(time.perf_counter(), fc(), RuntimeError("syntax error"))

        [record] = sql_log.records
        assert record.levelno == logging.ERROR
        assert record.getMessage() == "SQL execution failed"
        assert record.fields["error"] == "syntax error"

    def test_error_wins_over_slow(self, sql_log):
        begin = time.perf_counter() - 1.0

        make_logger(LogLevel.INFO, slow_threshold=0.1).trace(begin, fc(), RuntimeError("boom"))

        assert [r.levelno for r in sql_log.records] == [logging.ERROR]

    def test_slow_query_warned(self, sql_log):
        begin = time.perf_counter() - 1.0

        make_logger(LogLevel.WARN, slow_threshold=0.5).trace(begin, fc())

        [record] = sql_log.records
        assert record.levelno == logging.WARNING
        assert record.getMessage() == "Slow query detected"
        assert record.fields["threshold_ms"] == 500
        assert record.fields["elapsed_ms"] >= 1000

    def test_zero_threshold_disables_slow_detection(self, sql_log):
        begin = time.perf_counter() - 1.0

        make_logger(LogLevel.WARN, slow_threshold=0).trace(begin, fc())

        assert sql_log.records == []

    def test_slow_query_at_error_level_not_warned(self, sql_log):
        begin = time.perf_counter() - 1.0

        make_logger(LogLevel.ERROR, slow_threshold=0.5).trace(begin, fc())

        assert sql_log.records == []

    def test_ignored_not_found_is_not_an_error(self, sql_log):
        make_logger(LogLevel.WARN).trace(time.perf_counter(), fc(), RecordNotFoundError())

        assert sql_log.records == []

    def test_ignored_not_found_logged_as_info_at_info_level(self, sql_log):
        make_logger(LogLevel.INFO).trace(time.perf_counter(), fc(), RecordNotFoundError())

        assert [r.getMessage() for r in sql_log.records] == ["SQL executed"]

    def test_not_found_logged_when_not_ignored(self, sql_log):
        query_logger = make_logger(LogLevel.ERROR, ignore_record_not_found=False)

        query_logger.trace(time.perf_counter(), fc(), RecordNotFoundError("no rows"))

        assert [r.levelno for r in sql_log.records] == [logging.ERROR]

    def test_custom_not_found_errors(self, sql_log):
        class NoRows(Exception):
            pass

        query_logger = make_logger(LogLevel.ERROR, not_found_errors=(NoRows,))

        query_logger.trace(time.perf_counter(), fc(), NoRows())

        assert sql_log.records == []


class TestParamsFilter:
    """params_filter()"""

    def test_params_kept_at_info(self):
        assert make_logger(LogLevel.INFO).params_filter("SELECT ?", (1,)) == ("SELECT ?", (1,))

    @pytest.mark.parametrize("level", [LogLevel.SILENT, LogLevel.ERROR, LogLevel.WARN])
    def test_params_dropped_below_info(self, level):
        assert make_logger(level).params_filter("SELECT ?", (1,)) == ("SELECT ?", None)
