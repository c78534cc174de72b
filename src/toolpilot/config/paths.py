"""
Path utilities for toolpilot.

Provides consistent path resolution for configuration files.
"""

import os
from pathlib import Path

PROJECT_CONFIG_NAME = ".toolpilot.yaml"


def get_toolpilot_home() -> Path:
    """
    Get the toolpilot home directory.

    Resolution order:
    1. TOOLPILOT_HOME environment variable
    2. Default: ~/.toolpilot

    Returns:
        Path to the toolpilot home directory.
    """
    env_home = os.environ.get("TOOLPILOT_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / ".toolpilot"


def get_global_config_path() -> Path:
    """
    Get the path to the global configuration file.

    Returns:
        Path to ~/.toolpilot/config.yaml
    """
    return get_toolpilot_home() / "config.yaml"


def find_project_config(start_path: Path | None = None) -> Path | None:
    """
    Find the project configuration file by traversing up the directory tree.

    Looks for .toolpilot.yaml starting from the given path
    (or current directory) and moving up to the root.

    Args:
        start_path: Starting directory to search from. Defaults to cwd.

    Returns:
        Path to the project config, or None if not found.
    """
    current = (start_path or Path.cwd()).resolve()

    for directory in (current, *current.parents):
        candidate = directory / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate

    return None
