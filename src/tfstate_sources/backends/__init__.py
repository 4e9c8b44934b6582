"""State backends and the contract they share."""

from .base import LockInfo, StateBackend, Version
from .local import LocalBackend, new_local, new_local_collection
from .providers import (
    Matcher,
    PatternSyntaxError,
    WalkEntry,
    Walker,
    match_name,
    walk_dir,
)
from .registry import build_backends

__all__ = [
    "StateBackend",
    "Version",
    "LockInfo",
    "LocalBackend",
    "new_local",
    "new_local_collection",
    "build_backends",
    "WalkEntry",
    "Walker",
    "Matcher",
    "PatternSyntaxError",
    "walk_dir",
    "match_name",
]
