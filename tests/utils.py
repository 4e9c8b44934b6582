"""
Shared test utilities for the tfstate-sources test suite.

Usage:
    from tests.utils import RecordingLogger, scripted_walker, constant_matcher
"""
from typing import Any, Iterable

from tfstate_sources.backends.providers import WalkEntry


class RecordingLogger:
    """Minimal diagnostics sink recording ``(level, message)`` pairs."""

    def __init__(self):
        self.records = []

    def _record(self, level, message):
        self.records.append((level, message))

    def debug(self, message):
        self._record("debug", message)

    def info(self, message):
        self._record("info", message)

    def warning(self, message):
        self._record("warning", message)

    def error(self, message):
        self._record("error", message)

    def messages(self, level):
        return [message for lvl, message in self.records if lvl == level]


def scripted_walker(entries: Iterable[Any]):
    """
    Build a walker yielding ``entries`` in order.

    Each entry is a ``(path, is_dir)`` pair; an exception instance is raised
    at that point of the walk instead.
    """
    entries = list(entries)

    def _walker(root):
        for entry in entries:
            if isinstance(entry, BaseException):
                raise entry
            path, is_dir = entry
            yield WalkEntry(path, is_dir)

    return _walker


def constant_matcher(matched: bool = True, error: BaseException = None):
    """Build a matcher that always returns ``matched`` or always raises ``error``."""
    calls = []

    def _matcher(pattern, name):
        calls.append((pattern, name))
        if error is not None:
            raise error
        return matched

    _matcher.calls = calls
    return _matcher
