"""Utility functions for tool registry setup."""

import logging
from collections.abc import Iterable
from typing import Optional

from toolpilot.tools.builtin.examples import EXAMPLE_TOOLS
from toolpilot.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)


def register_builtin_tools(
    registry: ToolRegistry,
    enabled: Optional[Iterable[str]] = None,
) -> None:
    """Register the built-in example tools.

    Args:
        registry: ToolRegistry to register tools in
        enabled: Optional tool names to register (None = all)

    Raises:
        ValueError: If an enabled name is not a built-in tool
    """
    available = {tool.name: tool for tool in EXAMPLE_TOOLS}

    if enabled is None:
        selected = list(EXAMPLE_TOOLS)
    else:
        wanted = list(enabled)
        unknown = [name for name in wanted if name not in available]
        if unknown:
            raise ValueError(f"Unknown built-in tools: {', '.join(unknown)}")
        selected = [tool for tool in EXAMPLE_TOOLS if tool.name in wanted]

    registry.register_many(selected)
    logger.debug(f"Registered {len(selected)} built-in tools")
