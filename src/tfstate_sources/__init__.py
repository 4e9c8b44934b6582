"""
tfstate-sources - Pluggable state-source backends for Terraform state inventories.

This module owns the package-wide Loguru configuration. Backends receive a bound
logger at construction time, so tests can swap sinks or inject their own logger
without touching global state.
"""

__version__ = "0.1.0"

import os
import sys
import warnings
from pathlib import Path
from typing import Dict, Optional, TextIO, Union

from loguru import logger


# --- Logger Configuration Classes and Types ---

class LoggingConfigError(Exception):
    """Exception raised when logging configuration fails validation or setup."""


class LoggerState:
    """Tracks which sinks this package installed so they can be torn down."""

    def __init__(self):
        self._initialized = False
        self._test_mode = False
        self._sink_ids = []

    def is_initialized(self) -> bool:
        """Check if logger has been initialized."""
        return self._initialized

    def is_test_mode(self) -> bool:
        """Check if logger is in test mode."""
        return self._test_mode

    def mark_initialized(self, test_mode: bool = False):
        """Mark logger as initialized."""
        self._initialized = True
        self._test_mode = test_mode

    def add_sink_id(self, sink_id: int):
        """Track sink IDs for cleanup."""
        self._sink_ids.append(sink_id)

    @property
    def sink_ids(self):
        return list(self._sink_ids)

    def reset(self):
        """Reset logger state for test isolation."""
        self._initialized = False
        self._test_mode = False
        self._sink_ids.clear()


_logger_state = LoggerState()

LOG_LEVEL_ENV_VAR = "TFSTATE_SOURCES_LOG_LEVEL"


# --- Configuration Validation Functions ---

def validate_log_level(level: str) -> str:
    """
    Validate and normalise a Loguru level name.

    Args:
        level: Log level string to validate

    Returns:
        Upper-cased log level string

    Raises:
        LoggingConfigError: If log level is invalid
    """
    valid_levels = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
    level_upper = str(level).upper()

    if level_upper not in valid_levels:
        raise LoggingConfigError(
            f"Invalid log level '{level}'. Must be one of: {', '.join(valid_levels)}"
        )

    return level_upper


# --- Core Logging Configuration Functions ---

def configure_console_logging(
    level: str = "INFO",
    format_template: Optional[str] = None,
    colorize: bool = True,
    destination: TextIO = sys.stderr
) -> int:
    """
    Add a console sink.

    Args:
        level: Log level for console output
        format_template: Custom format template (uses default if None)
        colorize: Enable colored console output
        destination: Console destination (default: sys.stderr)

    Returns:
        Sink ID for tracking and cleanup

    Raises:
        LoggingConfigError: If configuration fails
    """
    validated_level = validate_log_level(level)

    try:
        if format_template is None:
            format_template = (
                "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
            )

        sink_id = logger.add(
            destination,
            level=validated_level,
            format=format_template,
            colorize=colorize
        )

        _logger_state.add_sink_id(sink_id)
        return sink_id

    except Exception as e:
        raise LoggingConfigError(f"Failed to configure console logging: {e}") from e


def configure_file_logging(
    log_file_path: Union[str, Path],
    level: str = "DEBUG",
    rotation: str = "10 MB",
    retention: str = "7 days",
    compression: str = "zip",
    format_template: Optional[str] = None,
    encoding: str = "utf-8",
) -> int:
    """
    Add a rotating file sink, creating the parent directory when needed.

    Returns:
        Sink ID for tracking and cleanup

    Raises:
        LoggingConfigError: If configuration fails
    """
    validated_level = validate_log_level(level)

    try:
        path = Path(log_file_path)
        path.parent.mkdir(parents=True, exist_ok=True)

        if format_template is None:
            format_template = (
                "{time:YYYY-MM-DD HH:mm:ss.SSS} | "
                "{level: <8} | "
                "{name}:{function}:{line} - {message} | {extra}"
            )

        sink_id = logger.add(
            str(path),
            rotation=rotation,
            retention=retention,
            compression=compression,
            level=validated_level,
            format=format_template,
            encoding=encoding
        )

        _logger_state.add_sink_id(sink_id)
        return sink_id

    except Exception as e:
        raise LoggingConfigError(f"Failed to configure file logging: {e}") from e


# --- Test-Specific Entry Points ---

def configure_test_logging(
    console_level: str = "DEBUG",
    console_destination: Optional[TextIO] = None,
) -> Dict[str, int]:
    """
    Reset Loguru and install a single uncoloured console sink for tests.

    Returns:
        Dictionary mapping sink types to sink IDs
    """
    reset_logging()

    destination = console_destination if console_destination is not None else sys.stderr
    sink_ids = {
        "console": configure_console_logging(
            level=console_level,
            destination=destination,
            colorize=False,
        )
    }

    _logger_state.mark_initialized(test_mode=True)
    return sink_ids


def reset_logging():
    """
    Remove every Loguru sink and forget tracked state.

    Raises:
        LoggingConfigError: If reset fails
    """
    try:
        logger.remove()
        _logger_state.reset()
    except Exception as e:
        raise LoggingConfigError(f"Failed to reset logging configuration: {e}") from e


# --- Production Logging Initialization ---

def initialize_logging(
    console_level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
    file_level: str = "DEBUG",
) -> Dict[str, int]:
    """
    Replace Loguru's default handler with this package's sinks.

    ``console_level`` falls back to the ``TFSTATE_SOURCES_LOG_LEVEL`` environment
    variable, then ``INFO``. A file sink is only added when ``log_file`` is given.
    """
    level = console_level or os.environ.get(LOG_LEVEL_ENV_VAR, "INFO")

    try:
        logger.remove()
    except Exception as e:
        raise LoggingConfigError(f"Failed to initialize logging: {e}") from e

    _logger_state.reset()
    sink_ids = {"console": configure_console_logging(level=level)}

    if log_file is not None:
        sink_ids["file"] = configure_file_logging(log_file, level=file_level)

    _logger_state.mark_initialized(test_mode=False)
    logger.debug("tfstate-sources logging initialized at level {}", level)
    return sink_ids


# --- Module-Level Logger State Access ---

def get_logger_state() -> LoggerState:
    """Get current logger state for test inspection."""
    return _logger_state


def is_logging_initialized() -> bool:
    """Check if logging has been initialized."""
    return _logger_state.is_initialized()


def is_test_mode() -> bool:
    """Check if logging is in test mode."""
    return _logger_state.is_test_mode()


def _is_pytest_running() -> bool:
    return "pytest" in sys.modules or "PYTEST_CURRENT_TEST" in os.environ


def _auto_initialize_logging():
    if _logger_state.is_initialized() or _is_pytest_running():
        return
    try:
        initialize_logging()
    except LoggingConfigError as e:
        warnings.warn(f"Failed to initialize logging: {e}. Using basic stderr logging.")
        logger.add(sys.stderr, level="INFO")
        _logger_state.mark_initialized(test_mode=False)


_auto_initialize_logging()

# --- End Logger Configuration ---

from .exceptions import (  # noqa: E402
    ConfigError,
    DiscoveryError,
    InvalidConfiguration,
    MatchFailure,
    RetrievalError,
    StatTargetMissing,
    TfStateSourcesError,
    UnparseableState,
    UnreadableState,
    WalkFailure,
)
from .config import LocalConfig, SourcesConfig, load_config  # noqa: E402
from .statefile import StateFile, read_state, read_state_file  # noqa: E402
from .backends import (  # noqa: E402
    LocalBackend,
    LockInfo,
    StateBackend,
    Version,
    build_backends,
    new_local,
    new_local_collection,
)

__all__ = [
    "__version__",
    "logger",
    # logging
    "LoggingConfigError",
    "LoggerState",
    "validate_log_level",
    "configure_console_logging",
    "configure_file_logging",
    "configure_test_logging",
    "reset_logging",
    "initialize_logging",
    "get_logger_state",
    "is_logging_initialized",
    "is_test_mode",
    # errors
    "TfStateSourcesError",
    "ConfigError",
    "InvalidConfiguration",
    "DiscoveryError",
    "WalkFailure",
    "MatchFailure",
    "RetrievalError",
    "UnreadableState",
    "UnparseableState",
    "StatTargetMissing",
    # configuration
    "LocalConfig",
    "SourcesConfig",
    "load_config",
    # state files
    "StateFile",
    "read_state",
    "read_state_file",
    # backends
    "StateBackend",
    "LocalBackend",
    "Version",
    "LockInfo",
    "new_local",
    "new_local_collection",
    "build_backends",
]
