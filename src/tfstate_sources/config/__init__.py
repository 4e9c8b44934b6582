"""Configuration models and loaders."""

from .loader import load_config
from .models import LocalConfig, SourcesConfig

__all__ = ["LocalConfig", "SourcesConfig", "load_config"]
