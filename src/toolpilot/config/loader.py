"""
Configuration loader for toolpilot.

Loads and merges configuration from multiple sources:
1. Default values
2. Global config (~/.toolpilot/config.yaml)
3. Project config (./.toolpilot.yaml) or an explicit file
4. Environment variables (TOOLPILOT_*)
"""

import logging
import os
import re
import types
import typing
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import ValidationError

from toolpilot.config.merger import deep_merge, set_nested_value
from toolpilot.config.paths import find_project_config, get_global_config_path
from toolpilot.config.schema import Config

logger = logging.getLogger(__name__)

ENV_PREFIX = "TOOLPILOT_"

# Variables under the prefix that are not config overrides
_RESERVED_ENV = {"TOOLPILOT_HOME", "TOOLPILOT_CONFIG"}


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary (empty if the file is missing or empty).

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or does not
            hold a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Expected a mapping at the top of {path}")
    return content


def apply_env_overrides(
    config: dict[str, Any], environ: dict[str, str] | None = None
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    Environment variables follow the pattern TOOLPILOT_<SECTION>_<KEY>=<value>.
    The first token names the section; the rest, joined with underscores,
    names the key, so TOOLPILOT_AGENT_MAX_TOKENS sets agent.max_tokens.

    Args:
        config: Configuration dictionary to modify.
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        Configuration with environment overrides applied.
    """
    environ = os.environ if environ is None else environ

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV:
            continue

        section, _, name = key[len(ENV_PREFIX) :].lower().partition("_")
        if not section or not name:
            continue

        logger.debug(f"Config override from environment: {key}")
        config = set_nested_value(
            config,
            f"{section}.{name}",
            _parse_env_value(value, _field_annotation(section, name)),
        )

    return config


def _field_annotation(section: str, name: str) -> Any:
    """Declared type of config field section.name, or None if unknown."""
    section_field = Config.model_fields.get(section)
    if section_field is None:
        return None
    fields = getattr(section_field.annotation, "model_fields", {})
    field = fields.get(name)
    return field.annotation if field is not None else None


def _unwrap_optional(annotation: Any) -> Any:
    if typing.get_origin(annotation) in (Union, types.UnionType):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _parse_env_value(value: str, annotation: Any = None) -> Any:
    """
    Parse an environment variable value to the appropriate type.

    Only list fields are split on commas, and string fields keep the raw
    value. Unknown fields fall back to guessing from the value itself.

    Args:
        value: String value from environment.
        annotation: Declared type of the target field, if known.

    Returns:
        Parsed value (bool, int, float, list or string).
    """
    annotation = _unwrap_optional(annotation)
    if annotation is str:
        return value
    if typing.get_origin(annotation) is list or annotation is list:
        return [item.strip() for item in value.split(",") if item.strip()]

    # Boolean
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    # Integer
    if re.match(r"^-?\d+$", value):
        return int(value)

    # Float
    if re.match(r"^-?\d+\.\d+$", value):
        return float(value)

    return value


def load_config(
    config_path: Path | None = None,
    skip_global: bool = False,
    skip_env: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Args:
        config_path: Explicit config file used in place of the project file.
            Can also be set via the TOOLPILOT_CONFIG environment variable.
        skip_global: Skip loading ~/.toolpilot/config.yaml.
        skip_env: Skip environment variable overrides.

    Returns:
        Merged and validated Config object.

    Raises:
        ConfigurationError: If an explicit file is missing or configuration
            is invalid.
    """
    config_dict = Config().model_dump()

    if not skip_global:
        global_path = get_global_config_path()
        if global_path.exists():
            logger.debug(f"Loading global config: {global_path}")
            config_dict = deep_merge(config_dict, load_yaml_file(global_path))

    explicit = config_path or os.environ.get("TOOLPILOT_CONFIG")
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Config file not found: {path}")
    else:
        path = find_project_config()

    if path is not None:
        logger.debug(f"Loading project config: {path}")
        config_dict = deep_merge(config_dict, load_yaml_file(path))

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    try:
        return Config.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


# Singleton for cached config
_cached_config: Config | None = None


def get_config(reload: bool = False) -> Config:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload configuration from disk.

    Returns:
        Config instance.
    """
    global _cached_config

    if _cached_config is None or reload:
        _cached_config = load_config()

    return _cached_config


def clear_config_cache() -> None:
    """Clear the cached configuration."""
    global _cached_config
    _cached_config = None
