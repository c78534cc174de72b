"""
Configuration for toolpilot.

Defaults, YAML files and TOOLPILOT_* environment variables, merged in
order of priority and validated with pydantic.
"""

from toolpilot.config.loader import (
    ConfigurationError,
    apply_env_overrides,
    clear_config_cache,
    get_config,
    load_config,
    load_yaml_file,
)
from toolpilot.config.merger import deep_merge, set_nested_value
from toolpilot.config.paths import find_project_config, get_global_config_path, get_toolpilot_home
from toolpilot.config.schema import (
    DEFAULT_MODEL,
    AgentConfig,
    Config,
    LoggingConfig,
    ProviderConfig,
    ToolsConfig,
)

__all__ = [
    "DEFAULT_MODEL",
    "AgentConfig",
    "Config",
    "ConfigurationError",
    "LoggingConfig",
    "ProviderConfig",
    "ToolsConfig",
    "apply_env_overrides",
    "clear_config_cache",
    "deep_merge",
    "find_project_config",
    "get_config",
    "get_global_config_path",
    "get_toolpilot_home",
    "load_config",
    "load_yaml_file",
    "set_nested_value",
]
