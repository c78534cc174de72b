"""
Wiring shared by CLI commands: configuration, logging, registry and agent.
"""

from pathlib import Path
from typing import Any

import typer

from toolpilot.agent import Agent
from toolpilot.cli.output import print_error, setup_logging
from toolpilot.config import Config, ConfigurationError, get_config, load_config
from toolpilot.providers import LiteLLMChatClient
from toolpilot.tools.builtin import register_builtin_tools
from toolpilot.tools.registry import ToolRegistry


def _options(ctx: typer.Context) -> dict[str, Any]:
    return ctx.find_root().obj or {}


def load_settings(ctx: typer.Context) -> Config:
    """Load configuration for a command and configure logging.

    Exits with status 1 when the configuration is invalid.
    """
    options = _options(ctx)
    config_path: Path | None = options.get("config_path")

    try:
        config = load_config(config_path) if config_path else get_config()
    except ConfigurationError as e:
        print_error(str(e))
        raise typer.Exit(1)

    level = "DEBUG" if options.get("verbose") else config.logging.level
    setup_logging(level, show_path=config.logging.show_path)
    return config


def build_registry(config: Config) -> ToolRegistry:
    """Create a registry holding the enabled built-in tools."""
    registry = ToolRegistry()
    try:
        register_builtin_tools(registry, config.tools.enabled)
    except ValueError as e:
        print_error(str(e))
        raise typer.Exit(1)
    return registry


def build_agent(config: Config) -> Agent:
    """Create an agent backed by LiteLLM."""
    return Agent(
        client=LiteLLMChatClient(config.providers),
        config=config.agent,
        registry=build_registry(config),
    )
