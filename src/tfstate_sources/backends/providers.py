"""Walk and match strategies injected into filesystem-backed state backends."""
from __future__ import annotations

import fnmatch
import os
import stat
from typing import Iterable, Iterator, NamedTuple, Protocol, Union


class WalkEntry(NamedTuple):
    """One filesystem entry visited by a walker."""

    path: str
    is_dir: bool


class Walker(Protocol):
    """
    Protocol for recursive directory walks.

    A walker yields every entry under ``root`` (``root`` included) and raises
    as soon as any entry cannot be visited. Raising aborts the whole walk;
    walkers must not skip entries they failed to read.
    """

    def __call__(self, root: str) -> Iterable[WalkEntry]:
        ...


class Matcher(Protocol):
    """
    Protocol for base-name glob matching.

    Returns whether ``name`` matches ``pattern``; raises when the pattern is
    malformed.
    """

    def __call__(self, pattern: str, name: str) -> bool:
        ...


class PatternSyntaxError(ValueError):
    """Raised by :func:`match_name` for a malformed glob pattern."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"syntax error in pattern {pattern!r}: {reason}")


def walk_dir(root: Union[str, os.PathLike]) -> Iterator[WalkEntry]:
    """
    Walk ``root`` depth-first, pre-order, visiting siblings in lexical order.

    Symbolic links are reported as plain entries and never followed. Any
    ``OSError`` (missing root, unreadable directory, entry vanishing during the
    walk) propagates to the consumer of the iterator.
    """
    root_path = os.fspath(root)
    root_stat = os.lstat(root_path)
    stack = [WalkEntry(root_path, stat.S_ISDIR(root_stat.st_mode))]

    while stack:
        entry = stack.pop()
        yield entry
        if not entry.is_dir:
            continue
        with os.scandir(entry.path) as it:
            children = sorted(it, key=lambda child: child.name)
        stack.extend(
            WalkEntry(child.path, child.is_dir(follow_symlinks=False))
            for child in reversed(children)
        )


def validate_pattern(pattern: str) -> None:
    """Raise :class:`PatternSyntaxError` if a ``[`` character class is never closed."""
    i, n = 0, len(pattern)
    while i < n:
        if pattern[i] != "[":
            i += 1
            continue
        j = i + 1
        if j < n and pattern[j] == "!":
            j += 1
        if j < n and pattern[j] == "]":
            j += 1
        while j < n and pattern[j] != "]":
            j += 1
        if j >= n:
            raise PatternSyntaxError(pattern, f"unterminated character class at offset {i}")
        i = j + 1


def match_name(pattern: str, name: str) -> bool:
    """
    Shell-glob match of a base name, case-sensitive on every platform.

    Supports ``*``, ``?``, ``[seq]`` and ``[!seq]``.
    """
    validate_pattern(pattern)
    return fnmatch.fnmatchcase(name, pattern)


__all__ = [
    "WalkEntry",
    "Walker",
    "Matcher",
    "PatternSyntaxError",
    "walk_dir",
    "validate_pattern",
    "match_name",
]
