"""
Tests for trace logger configuration.
"""

import logging

import pytest

from funcpipe import Pipeline, StageExecutionError
from funcpipe.logging_config import (
    TRACE_LOGGER_NAME,
    FlushingStreamHandler,
    configure_logger_for_trace,
    get_trace_logger,
    reconfigure_trace_logger,
    restore_stderr_logging,
    suppress_stderr_logging,
)


@pytest.fixture
def fresh_logger(monkeypatch):
    """Rebuild the trace logger from the test environment, and again afterwards."""
    logger = reconfigure_trace_logger()
    yield logger
    for var in ("FUNCPIPE_DEBUG_LOG", "FUNCPIPE_LOG_DIR", "FUNCPIPE_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    reconfigure_trace_logger()


def _stderr_handler(logger):
    return next(h for h in logger.handlers if isinstance(h, FlushingStreamHandler))


class TestTraceLogger:

    def test_logger_setup(self, fresh_logger):
        assert fresh_logger.name == TRACE_LOGGER_NAME
        assert fresh_logger.propagate is False
        assert fresh_logger.level == logging.DEBUG
        assert get_trace_logger() is fresh_logger

    def test_no_file_handler_by_default(self, fresh_logger):
        assert not any(isinstance(h, logging.FileHandler) for h in fresh_logger.handlers)

    def test_stderr_level_from_env(self, monkeypatch, fresh_logger):
        assert _stderr_handler(fresh_logger).level == logging.WARNING
        monkeypatch.setenv("FUNCPIPE_LOG_LEVEL", "debug")
        logger = reconfigure_trace_logger()
        assert _stderr_handler(logger).level == logging.DEBUG

    def test_unknown_level_falls_back_to_warning(self, monkeypatch, fresh_logger):
        monkeypatch.setenv("FUNCPIPE_LOG_LEVEL", "chatty")
        logger = reconfigure_trace_logger()
        assert _stderr_handler(logger).level == logging.WARNING

    def test_file_handler_writes_stage_trace(self, monkeypatch, tmp_path, fresh_logger):
        log_dir = tmp_path / "logs"
        monkeypatch.setenv("FUNCPIPE_LOG_DIR", str(log_dir))
        monkeypatch.setenv("FUNCPIPE_DEBUG_LOG", "trace.log")
        logger = reconfigure_trace_logger()
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)

        Pipeline.of(1, 2).map(lambda x: x + 1).to_list()
        for handler in logger.handlers:
            handler.flush()

        contents = (log_dir / "trace.log").read_text(encoding="utf-8")
        assert "Stage 1/1 map over 2 elements" in contents

    def test_suppress_and_restore(self, fresh_logger):
        suppress_stderr_logging()
        assert _stderr_handler(fresh_logger).level > logging.CRITICAL
        restore_stderr_logging()
        assert _stderr_handler(fresh_logger).level == logging.WARNING

    def test_configure_logger_for_trace(self, fresh_logger):
        logger = configure_logger_for_trace("funcpipe.tests.extra")
        for handler in fresh_logger.handlers:
            assert handler in logger.handlers
        logger.handlers.clear()


class TestEvaluationLogging:

    def test_failure_logged_as_warning(self, fresh_logger, caplog):
        fresh_logger.propagate = True
        try:
            with caplog.at_level(logging.WARNING, logger=TRACE_LOGGER_NAME):
                with pytest.raises(StageExecutionError):
                    Pipeline.of(1, 0).map(lambda x: 1 / x).to_list()
        finally:
            fresh_logger.propagate = False
        assert any("Pipeline evaluation failed" in r.getMessage() for r in caplog.records)

    def test_run_failure_not_logged_as_warning(self, fresh_logger, caplog):
        fresh_logger.propagate = True
        try:
            with caplog.at_level(logging.DEBUG, logger=TRACE_LOGGER_NAME):
                result = Pipeline.of(1, 0).map(lambda x: 1 / x).run()
        finally:
            fresh_logger.propagate = False
        assert result.is_err()
        assert not any(r.levelno >= logging.WARNING for r in caplog.records)
        assert any("map failed" in r.getMessage() for r in caplog.records)

    def test_file_log_dir_passed_directly(self, tmp_path, fresh_logger):
        logger = reconfigure_trace_logger(debug_log="trace.log", log_dir=str(tmp_path / "direct"))
        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        assert (tmp_path / "direct").is_dir()
