"""
Logging Configuration for funcpipe.

Provides centralized setup for the pipeline trace logger. Stage execution
is traced at DEBUG. Failures that surface as exceptions are logged at
WARNING; failures returned by Pipeline.run() stay at DEBUG. Output goes to
stderr and, when FUNCPIPE_DEBUG_LOG names a file, to that file in the log
directory.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Dict, Optional

TRACE_LOGGER_NAME = "funcpipe.trace"

_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# Values passed to reconfigure_trace_logger(), used where the matching
# FUNCPIPE_* variable is unset.
_overrides: Dict[str, Optional[str]] = {}


def _setting(env_var: str, key: str) -> Optional[str]:
    return os.getenv(env_var) or _overrides.get(key)


# Log directory priority:
# 1. FUNCPIPE_LOG_DIR (explicit)
# 2. log_dir passed to reconfigure_trace_logger()
# 3. CWD/.funcpipe (fallback)
def _get_log_directory() -> Path:
    """Get the log directory path."""
    log_dir = _setting("FUNCPIPE_LOG_DIR", "log_dir")
    if not log_dir:
        log_dir = str(Path.cwd() / ".funcpipe")
    return Path(log_dir)


def _ensure_log_directory() -> Path:
    """Ensure log directory exists and return its path."""
    log_dir = _get_log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir


def _debug_log_filename() -> Optional[str]:
    """File name for the trace log, or None when file logging is off."""
    return _setting("FUNCPIPE_DEBUG_LOG", "debug_log") or None


def _stderr_level() -> int:
    """Level for the stderr handler, from FUNCPIPE_LOG_LEVEL."""
    name = (_setting("FUNCPIPE_LOG_LEVEL", "log_level") or "WARNING").upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.WARNING


def _create_file_handler(log_filename: str) -> Optional[logging.FileHandler]:
    """
    Create a file handler for the specified log file.

    Args:
        log_filename: Name of the log file (e.g., 'trace.log')

    Returns:
        Configured FileHandler, or None if the directory is not writable
    """
    try:
        log_dir = _ensure_log_directory()
        handler = logging.FileHandler(log_dir / log_filename, mode='a', encoding='utf-8')
    except OSError:
        return None
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    return handler


class FlushingStreamHandler(logging.StreamHandler):
    """StreamHandler that flushes after every emit.

    ::: This is-in-layer Infrastructure-Layer.
    ::: This is a handler.
    ::: This is stateless.
    """
    def emit(self, record):
        super().emit(record)
        self.flush()


def _create_stderr_handler() -> logging.StreamHandler:
    """Create a stderr handler for console output with auto-flush."""
    handler = FlushingStreamHandler(sys.stderr)
    handler.setLevel(_stderr_level())
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    return handler


def _install_handlers(logger: logging.Logger) -> None:
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    filename = _debug_log_filename()
    if filename:
        file_handler = _create_file_handler(filename)
        if file_handler:
            logger.addHandler(file_handler)

    logger.addHandler(_create_stderr_handler())


def get_trace_logger() -> logging.Logger:
    """
    Get the trace logger used by the pipeline evaluator.

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(TRACE_LOGGER_NAME)

    # Only configure once
    if not logger.handlers:
        _install_handlers(logger)

    return logger


def reconfigure_trace_logger(log_level: Optional[str] = None,
                             debug_log: Optional[str] = None,
                             log_dir: Optional[str] = None) -> logging.Logger:
    """
    Rebuild the trace logger handlers.

    Call this after changing FUNCPIPE_DEBUG_LOG, FUNCPIPE_LOG_DIR or
    FUNCPIPE_LOG_LEVEL at runtime. The arguments are fallbacks for those
    variables; the environment still wins when both are set. Calling with
    no arguments clears earlier fallbacks.

    Returns:
        Configured logger instance
    """
    _overrides.clear()
    _overrides.update(
        (key, value)
        for key, value in (("log_level", log_level), ("debug_log", debug_log), ("log_dir", log_dir))
        if value is not None
    )
    logger = logging.getLogger(TRACE_LOGGER_NAME)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)
    _install_handlers(logger)
    return logger


def configure_logger_for_trace(logger_name: str) -> logging.Logger:
    """
    Configure a logger to also write to the trace handlers.

    Args:
        logger_name: Name of the logger to configure (e.g., __name__)

    Returns:
        Configured logger instance
    """
    trace_logger = get_trace_logger()
    logger = logging.getLogger(logger_name)
    logger.setLevel(logging.DEBUG)
    for handler in trace_logger.handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    return logger


def _stderr_handlers():
    for handler in get_trace_logger().handlers:
        if isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler):
            yield handler


def suppress_stderr_logging():
    """
    Suppress stderr output of the trace logger.

    File logging continues to work normally.
    """
    for handler in _stderr_handlers():
        handler.setLevel(logging.CRITICAL + 1)  # Effectively disable


def restore_stderr_logging():
    """Restore stderr output of the trace logger to the configured level."""
    for handler in _stderr_handlers():
        handler.setLevel(_stderr_level())
