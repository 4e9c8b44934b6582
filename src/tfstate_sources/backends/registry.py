"""Assemble every configured backend behind the shared capability contract."""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Mapping, Union

from tfstate_sources import logger
from tfstate_sources.config import SourcesConfig, load_config

from .base import StateBackend
from .local import new_local_collection


def build_backends(
    config: Union[SourcesConfig, str, Path, Mapping[str, Any]],
) -> List[StateBackend]:
    """
    Build every backend described by ``config``.

    ``config`` may be a loaded :class:`SourcesConfig`, a YAML path, or a parsed
    mapping. Construction is all-or-nothing.

    Raises:
        ConfigError: If the configuration cannot be loaded
        InvalidConfiguration: If any source is missing a required field
    """
    if not isinstance(config, SourcesConfig):
        config = load_config(config)

    backends: List[StateBackend] = list(new_local_collection(config))
    logger.debug("Built {} state backend(s)", len(backends))
    return backends


__all__ = ["build_backends"]
