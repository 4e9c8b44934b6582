"""
tfstate-sources exception hierarchy.

Every failure a backend can report is a typed exception carrying an error code
and a context dictionary:

- TfStateSourcesError: base exception for all package errors
- ConfigError: configuration loading and validation failures
    - InvalidConfiguration: a backend was built from a config missing a required field
- DiscoveryError: state discovery failures
    - WalkFailure: the directory walk reported an error
    - MatchFailure: the name matcher rejected the pattern or failed internally
- RetrievalError: per-path retrieval failures
    - UnreadableState: the state file could not be opened
    - StatTargetMissing: the state file could not be stat'd
    - UnparseableState: the decoder produced no usable document

Nothing in this package retries or recovers from these errors; they are
raised to the immediate caller, which decides whether to skip a path, skip a
backend, or abort.

Usage Examples:
    >>> try:
    ...     states = backend.discover_states()
    ... except WalkFailure as e:
    ...     logger.warning(f"Skipping source {e.context['search_path']}: {e.cause}")
"""

from pathlib import Path
from typing import Any, Dict, Optional


class TfStateSourcesError(Exception):
    """
    Base exception class for all tfstate-sources errors.

    Attributes:
        error_code (str): Unique identifier for programmatic error handling
        context (Dict[str, Any]): Additional context information for debugging

    Error Codes:
        TFSS_001: Generic error
    """

    def __init__(
        self,
        message: str,
        error_code: str = "TFSS_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = dict(context or {})

    def with_context(self, context: Dict[str, Any]) -> 'TfStateSourcesError':
        """
        Add additional context to the exception and return self for chaining.

        Example:
            >>> raise ConfigError("Bad entry").with_context({"index": 2})
        """
        self.context.update(context)
        return self

    def __str__(self) -> str:
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [Error Code: {self.error_code}, Context: {context_str}]"
        return f"{self.message} [Error Code: {self.error_code}]"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"context={self.context!r})"
        )


def _stringify_paths(context: Dict[str, Any], *keys: str) -> None:
    for key in keys:
        if isinstance(context.get(key), Path):
            context[key] = str(context[key])


class ConfigError(TfStateSourcesError):
    """
    Configuration validation and loading errors.

    Error Codes:
        CONFIG_001: Required state path missing, or configuration file not found
        CONFIG_002: Required state file pattern missing
        CONFIG_003: Schema validation failure
        CONFIG_004: YAML parsing error
    """

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIG_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)
        _stringify_paths(self.context, "config_path")


class InvalidConfiguration(ConfigError, ValueError):
    """A backend was constructed from a configuration missing a required field."""

    def __init__(
        self,
        message: str,
        field: str,
        error_code: str = "CONFIG_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        context_data = dict(context or {})
        context_data.setdefault("field", field)
        super().__init__(message, error_code, context_data)
        self.field = field


class DiscoveryError(TfStateSourcesError):
    """
    State discovery errors.

    The underlying exception is always chained (``raise ... from``) and also
    exposed as :attr:`cause` so callers can inspect the exact filesystem or
    matcher error.

    Error Codes:
        DISCOVERY_001: Directory walk failed
        DISCOVERY_003: Pattern matching failed
    """

    def __init__(
        self,
        message: str,
        error_code: str = "DISCOVERY_001",
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, error_code, context)
        self.cause = cause
        _stringify_paths(self.context, "search_path", "path")


class WalkFailure(DiscoveryError):
    """The walker reported an error for a visited entry; discovery was aborted."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, "DISCOVERY_001", context, cause)


class MatchFailure(DiscoveryError):
    """The matcher failed for a visited file; discovery was aborted."""

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, "DISCOVERY_003", context, cause)


class RetrievalError(TfStateSourcesError):
    """
    Errors scoped to a single state path.

    Error Codes:
        LOAD_001: State file could not be opened
        LOAD_002: State file could not be stat'd
        LOAD_003: State file content could not be decoded
    """

    def __init__(
        self,
        message: str,
        error_code: str = "LOAD_001",
        context: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message, error_code, context)
        _stringify_paths(self.context, "path")

    @property
    def path(self) -> Optional[str]:
        return self.context.get("path")


class UnreadableState(RetrievalError):
    """The state file could not be opened (missing, permission denied, ...)."""

    def __init__(self, path: str, context: Optional[Dict[str, Any]] = None) -> None:
        context_data = dict(context or {})
        context_data["path"] = path
        super().__init__(f"unable to read the statefile {path}", "LOAD_001", context_data)


class StatTargetMissing(RetrievalError):
    """The state file could not be stat'd while listing versions."""

    def __init__(self, path: str, context: Optional[Dict[str, Any]] = None) -> None:
        context_data = dict(context or {})
        context_data["path"] = path
        super().__init__(f"unable to stat the statefile {path}", "LOAD_002", context_data)


class UnparseableState(RetrievalError):
    """The decoder returned no usable document for the requested version."""

    def __init__(
        self,
        version_id: str,
        path: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        context_data = dict(context or {})
        context_data["version_id"] = version_id
        if path is not None:
            context_data["path"] = path
        super().__init__(
            f"unable to parse the statefile version {version_id}", "LOAD_003", context_data
        )
        self.version_id = version_id


def log_and_raise(
    exception: TfStateSourcesError,
    logger: Optional[Any] = None,
    level: str = "error"
) -> None:
    """
    Log an exception with its context and then raise it.

    Args:
        exception: The exception to log and raise
        logger: Logger instance to use (optional)
        level: Log level ("error", "warning", "critical")

    Raises:
        The provided exception after logging
    """
    if logger is not None:
        log_method = getattr(logger, level, logger.error)
        summary = f"{exception.__class__.__name__}: {exception.message}"
        if exception.context:
            details = ", ".join(f"{key}={value}" for key, value in exception.context.items())
            summary = f"{summary} ({details})"
        log_method(summary)

    raise exception


__all__ = [
    "TfStateSourcesError",
    "ConfigError",
    "InvalidConfiguration",
    "DiscoveryError",
    "WalkFailure",
    "MatchFailure",
    "RetrievalError",
    "UnreadableState",
    "StatTargetMissing",
    "UnparseableState",
    "log_and_raise",
]
