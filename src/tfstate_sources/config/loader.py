"""
YAML configuration loading.

Reads a YAML document (or an already parsed mapping) into a validated
:class:`~tfstate_sources.config.models.SourcesConfig`. Example document::

    local:
      - state_path: /srv/terraform/prod
        state_file: "*.tfstate"
      - state_path: /srv/terraform/staging
        state_file: terraform.tfstate
"""
from pathlib import Path
from typing import Any, List, Mapping, Union

import yaml
from pydantic import ValidationError

from tfstate_sources import logger

from ..exceptions import ConfigError
from .models import SourcesConfig


def _format_validation_errors(error: ValidationError) -> List[str]:
    details = []
    for item in error.errors():
        field_path = " -> ".join(str(loc) for loc in item["loc"])
        details.append(f"Field '{field_path}': {item['msg']}")
    return details


def _build_config(raw_config: Any, source: str) -> SourcesConfig:
    if not isinstance(raw_config, Mapping):
        message = (
            f"Configuration from {source} must be a mapping, "
            f"got {type(raw_config).__name__}"
        )
        logger.error(message)
        raise ConfigError(message, error_code="CONFIG_003", context={"source": source})

    try:
        config = SourcesConfig.model_validate(dict(raw_config))
    except ValidationError as e:
        error_details = _format_validation_errors(e)
        detailed_error = (
            f"Configuration validation failed for {source}:\n" + "\n".join(error_details)
        )
        logger.error(detailed_error)
        raise ConfigError(
            detailed_error,
            error_code="CONFIG_003",
            context={"source": source, "validation_errors": error_details},
        ) from e

    logger.debug("Loaded {} local source(s) from {}", len(config.local), source)
    return config


def load_config(config_path_or_dict: Union[str, Path, Mapping[str, Any]]) -> SourcesConfig:
    """Load and validate a sources configuration.

    Args:
        config_path_or_dict: Path to a YAML file, or a mapping holding the
            already parsed configuration.

    Returns:
        SourcesConfig: The validated configuration. An empty YAML document
        yields a configuration with no sources.

    Raises:
        ConfigError: ``CONFIG_001`` when the file cannot be read, ``CONFIG_004``
            when the YAML is malformed, ``CONFIG_003`` when the document does
            not match the schema.
        TypeError: If the argument is neither a path nor a mapping.
    """
    if isinstance(config_path_or_dict, Mapping):
        logger.debug("Processing mapping-based configuration input")
        return _build_config(config_path_or_dict, "<mapping>")

    if not isinstance(config_path_or_dict, (str, Path)):
        raise TypeError(
            f"Invalid input type: {type(config_path_or_dict)}. "
            "Expected a string, Path, or mapping."
        )

    config_path = Path(config_path_or_dict)

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f)
    except OSError as e:
        logger.error("Unable to read configuration file {}: {}", config_path, e)
        raise ConfigError(
            f"Configuration file could not be read: {config_path}",
            error_code="CONFIG_001",
            context={"config_path": config_path, "reason": str(e)},
        ) from e
    except yaml.YAMLError as e:
        logger.error("Error parsing YAML configuration {}: {}", config_path, e)
        raise ConfigError(
            f"Error parsing YAML configuration: {config_path}",
            error_code="CONFIG_004",
            context={"config_path": config_path, "reason": str(e)},
        ) from e

    if raw_config is None:
        raw_config = {}

    return _build_config(raw_config, str(config_path))


__all__ = ["load_config"]
