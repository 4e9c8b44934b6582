"""
Pydantic configuration models for tfstate-sources.

``SourcesConfig`` is the configuration surface handed to backend factories: a
list of local ``{state_path, state_file}`` pairs, plus whatever sections sibling
backends (object storage, hosted APIs, VCS providers) define for themselves.

The models only normalise shapes and keep field values exactly as given.
Whether ``state_path`` and ``state_file`` are present is checked when a backend
is built, and whether the path exists or the pattern is well formed is only
discovered when the backend is used.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LocalConfig(BaseModel):
    """
    One local-filesystem state source.

    Attributes:
        state_path: Root directory walked during discovery
        state_file: Glob pattern matched against each file's base name
    """

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
    )

    state_path: str = Field(
        default="",
        description="Root directory that is walked recursively for state files",
        json_schema_extra={"example": "/var/lib/terraform"},
    )

    state_file: str = Field(
        default="",
        description="Glob pattern matched against the base name of each file",
        json_schema_extra={"example": "*.tfstate"},
    )

    @field_validator("state_path", "state_file", mode="before")
    @classmethod
    def coerce_none_to_empty(cls, v):
        """Treat an explicit YAML ``null`` like an omitted key."""
        if v is None:
            return ""
        return v


class SourcesConfig(BaseModel):
    """Top-level configuration listing every configured state source."""

    model_config = ConfigDict(
        extra="allow",  # sections for other backend kinds are not ours to validate
        frozen=True,
    )

    local: List[LocalConfig] = Field(
        default_factory=list,
        description="Local filesystem state sources, one backend per entry",
    )

    @field_validator("local", mode="before")
    @classmethod
    def coerce_missing_local(cls, v):
        if v is None:
            return []
        return v


__all__ = ["LocalConfig", "SourcesConfig"]
