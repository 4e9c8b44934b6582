"""
Terraform state file decoding.

Backends hand an open binary stream to :func:`read_state` and only care whether
a usable :class:`StateFile` comes back. Anything that is not a Terraform state
document (empty file, foreign JSON, unsupported format version) decodes to
``None``; the caller turns that into its own error.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from tfstate_sources import logger

#: Oldest and newest state format versions Terraform has written.
MIN_STATE_VERSION = 1
MAX_STATE_VERSION = 4


class StateFile(BaseModel):
    """
    A decoded Terraform state document.

    Only the envelope is modelled; resource instances are kept as plain
    dictionaries. Fields specific to older format versions (``modules`` in
    version 3 and below) are preserved as extra attributes.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    version: int
    terraform_version: Optional[str] = None
    serial: int = 0
    lineage: str = ""
    outputs: Dict[str, Any] = Field(default_factory=dict)
    resources: List[Dict[str, Any]] = Field(default_factory=list)

    @property
    def resource_count(self) -> int:
        return len(self.resources)

    def resource_addresses(self) -> List[str]:
        """Return ``[module.]type.name`` addresses for every managed or data resource."""
        addresses = []
        for resource in self.resources:
            address = f"{resource.get('type', '')}.{resource.get('name', '')}"
            if resource.get("mode") == "data":
                address = f"data.{address}"
            module = resource.get("module")
            if module:
                address = f"{module}.{address}"
            addresses.append(address)
        return addresses


Decoder = Callable[[BinaryIO], Optional[StateFile]]


def read_state(stream: BinaryIO) -> Optional[StateFile]:
    """
    Decode a Terraform state document from a binary stream.

    Args:
        stream: Readable binary stream positioned at the start of the document

    Returns:
        The decoded state, or ``None`` when the content is empty, is not JSON,
        is not a state document, or uses an unsupported format version.
    """
    raw = stream.read()
    if not raw or not raw.strip():
        logger.debug("State stream is empty")
        return None

    try:
        document = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        logger.debug("State stream is not valid JSON: {}", e)
        return None

    if not isinstance(document, dict):
        logger.debug("State document is a {}, not an object", type(document).__name__)
        return None

    version = document.get("version")
    if isinstance(version, bool) or not isinstance(version, int):
        logger.debug("State document has no integer format version")
        return None
    if not MIN_STATE_VERSION <= version <= MAX_STATE_VERSION:
        logger.debug("Unsupported state format version {}", version)
        return None

    try:
        return StateFile.model_validate(document)
    except ValidationError as e:
        logger.debug("State document failed schema validation: {}", e)
        return None


def read_state_file(path: Union[str, Path]) -> Optional[StateFile]:
    """Open ``path`` and decode it with :func:`read_state`. ``OSError`` propagates."""
    with open(path, "rb") as fh:
        return read_state(fh)


__all__ = [
    "MIN_STATE_VERSION",
    "MAX_STATE_VERSION",
    "StateFile",
    "Decoder",
    "read_state",
    "read_state_file",
]
