"""
Local filesystem state backend.

A :class:`LocalBackend` walks a directory tree, keeps every regular file whose
base name matches a glob pattern, and serves those files as Terraform states.
Local files have no history, so each state exposes exactly one version: its
current on-disk content, stamped with its modification time. Local files are
never locked.

Walk, match and decode are injected strategies; the defaults are
:func:`~tfstate_sources.backends.providers.walk_dir`,
:func:`~tfstate_sources.backends.providers.match_name` and
:func:`~tfstate_sources.statefile.read_state`.
"""
from __future__ import annotations

import os
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

from tfstate_sources import logger as _package_logger
from tfstate_sources.config.models import LocalConfig, SourcesConfig
from tfstate_sources.exceptions import (
    InvalidConfiguration,
    MatchFailure,
    StatTargetMissing,
    UnparseableState,
    UnreadableState,
    WalkFailure,
    log_and_raise,
)
from tfstate_sources.statefile import Decoder, StateFile, read_state

from .base import LockInfo, Version
from .providers import Matcher, WalkEntry, Walker, match_name, walk_dir


class LocalBackend:
    """
    State backend over a local directory tree.

    Instances are immutable and hold no open resources, so one instance can be
    shared freely between threads.

    Args:
        path: Root directory walked by :meth:`discover_states`
        pattern: Glob pattern matched against each file's base name
        walker: Directory walk strategy
        matcher: Name matching strategy
        decoder: State decoding strategy
        logger: Diagnostics sink with ``debug``/``info``/``error`` methods taking
            a single message; defaults to the package Loguru logger

    Raises:
        InvalidConfiguration: If ``path`` or ``pattern`` is empty
    """

    __slots__ = ("_path", "_pattern", "_walker", "_matcher", "_decoder", "_logger")

    def __init__(
        self,
        path: str,
        pattern: str,
        *,
        walker: Optional[Walker] = None,
        matcher: Optional[Matcher] = None,
        decoder: Optional[Decoder] = None,
        logger: Optional[Any] = None,
    ) -> None:
        log = logger if logger is not None else _package_logger.bind(backend="local")

        if not path:
            log_and_raise(
                InvalidConfiguration(
                    "state path cannot be empty", field="state_path", error_code="CONFIG_001"
                ),
                log,
            )
        if not pattern:
            log_and_raise(
                InvalidConfiguration(
                    "state file cannot be empty", field="state_file", error_code="CONFIG_002"
                ),
                log,
            )

        object.__setattr__(self, "_path", path)
        object.__setattr__(self, "_pattern", pattern)
        object.__setattr__(self, "_walker", walker or walk_dir)
        object.__setattr__(self, "_matcher", matcher or match_name)
        object.__setattr__(self, "_decoder", decoder or read_state)
        object.__setattr__(self, "_logger", log)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    def __repr__(self) -> str:
        return f"LocalBackend(path={self._path!r}, pattern={self._pattern!r})"

    @property
    def path(self) -> str:
        return self._path

    @property
    def pattern(self) -> str:
        return self._pattern

    # -- locks -------------------------------------------------------------

    def list_locks(self) -> Dict[str, LockInfo]:
        """Local files are never locked; always returns an empty mapping."""
        return {}

    # -- discovery ---------------------------------------------------------

    def _walk(self) -> Iterator[WalkEntry]:
        try:
            yield from self._walker(self._path)
        except Exception as exc:
            failed_path = getattr(exc, "filename", None) or self._path
            self._logger.error(
                f"Error retrieving state for Local backend (path={failed_path}, error={exc})"
            )
            raise WalkFailure(
                f"error walking {failed_path}: {exc}",
                context={"search_path": self._path, "path": failed_path},
                cause=exc,
            ) from exc

    def discover_states(self) -> List[str]:
        """
        Return the paths of every regular file under the root whose base name
        matches the pattern, in walk order.

        Discovery is all-or-nothing: the first walk or match error aborts the
        call and no partial result is returned.

        Raises:
            WalkFailure: If the walker fails on any entry
            MatchFailure: If the matcher fails on any file name
        """
        self._logger.debug(
            f"Listing states from Local (path={self._path}, pattern={self._pattern})"
        )

        states: List[str] = []
        for entry in self._walk():
            if entry.is_dir:
                continue

            name = os.path.basename(entry.path)
            try:
                matched = self._matcher(self._pattern, name)
            except Exception as exc:
                self._logger.error(
                    "Error matching state for Local backend "
                    f"(path={entry.path}, pattern={self._pattern}, error={exc})"
                )
                raise MatchFailure(
                    f"error matching {name!r} against {self._pattern!r}: {exc}",
                    context={"search_path": self._path, "path": entry.path, "pattern": self._pattern},
                    cause=exc,
                ) from exc

            if matched:
                states.append(entry.path)

        self._logger.debug(
            f"Found {len(states)} states in Local (path={self._path}, pattern={self._pattern})"
        )
        return states

    # -- retrieval ---------------------------------------------------------

    def retrieve_state(self, path: str, version_id: str) -> StateFile:
        """
        Decode the current on-disk content of ``path``.

        ``version_id`` does not select content; it is reported in errors only.

        Raises:
            UnreadableState: If the file cannot be opened or read
            UnparseableState: If the decoder returns no document
        """
        self._logger.info(f"Retrieving state from Local (path={path}, version_id={version_id})")

        try:
            with open(path, "rb") as fh:
                state = self._decoder(fh)
        except OSError as exc:
            self._logger.error(f"Unable to read state file (path={path}, error={exc})")
            raise UnreadableState(path, context={"reason": str(exc)}) from exc

        if state is None:
            log_and_raise(UnparseableState(version_id, path=path), self._logger)

        return state

    def list_versions(self, path: str) -> List[Version]:
        """
        Return the single version of ``path``: its current modification time.

        Two calls separated by a write to the file report different versions.

        Raises:
            StatTargetMissing: If the file cannot be stat'd
        """
        try:
            info = os.stat(path)
        except OSError as exc:
            self._logger.error(f"Unable to stat state file (path={path}, error={exc})")
            raise StatTargetMissing(path, context={"reason": str(exc)}) from exc

        return [
            Version(
                id=path,
                last_modified=datetime.fromtimestamp(info.st_mtime, tz=timezone.utc),
            )
        ]


def new_local(config: LocalConfig) -> LocalBackend:
    """
    Build a :class:`LocalBackend` bound to the real filesystem.

    The filesystem is not touched; a missing root or bad pattern only surfaces
    when the backend is used.

    Raises:
        InvalidConfiguration: If ``state_path`` or ``state_file`` is empty
    """
    return LocalBackend(config.state_path, config.state_file)


def new_local_collection(config: SourcesConfig) -> List[LocalBackend]:
    """
    Build one backend per configured local source, in configuration order.

    Construction is all-or-nothing: the first invalid entry raises and no
    backends are returned.

    Raises:
        InvalidConfiguration: For the first entry missing a required field,
            with the entry's position in ``context["index"]``
    """
    instances: List[LocalBackend] = []

    for index, local_config in enumerate(config.local):
        try:
            instances.append(new_local(local_config))
        except InvalidConfiguration as exc:
            raise exc.with_context({"index": index})

    return instances


__all__ = ["LocalBackend", "new_local", "new_local_collection"]
