"""
Capability contract shared by every state backend.

Aggregators hold collections typed by :class:`StateBackend` and never by a
concrete backend class. Backends satisfy the protocol structurally; there is no
base class to inherit from.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Protocol, runtime_checkable

from tfstate_sources.statefile import StateFile


@dataclass(frozen=True)
class Version:
    """One retrievable revision of a state file."""

    id: str
    last_modified: datetime


@dataclass(frozen=True)
class LockInfo:
    """A lock held on a state file, as recorded by Terraform."""

    id: str
    operation: str = ""
    info: str = ""
    who: str = ""
    version: str = ""
    created: Optional[datetime] = None
    path: str = ""


@runtime_checkable
class StateBackend(Protocol):
    """Operations every state backend implements with identical signatures."""

    def list_locks(self) -> Dict[str, LockInfo]:
        """Return held locks keyed by lock identifier."""
        ...

    def discover_states(self) -> List[str]:
        """Return the identifiers (paths, keys) of every state the backend holds."""
        ...

    def retrieve_state(self, path: str, version_id: str) -> StateFile:
        """Fetch and decode one version of a state."""
        ...

    def list_versions(self, path: str) -> List[Version]:
        """Return the known versions of a state."""
        ...


__all__ = ["Version", "LockInfo", "StateBackend"]
