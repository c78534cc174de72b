"""Built-in tools for the toolpilot agent.

Mock implementations of the tool contract:
- Arithmetic calculator
- Weather lookup (canned data)
- Web search (canned results)
"""

from toolpilot.tools.builtin.examples import (
    EXAMPLE_TOOLS,
    calculator_tool,
    evaluate_expression,
    search_tool,
    weather_tool,
)
from toolpilot.tools.builtin.registry_utils import register_builtin_tools

__all__ = [
    "EXAMPLE_TOOLS",
    "calculator_tool",
    "weather_tool",
    "search_tool",
    "evaluate_expression",
    "register_builtin_tools",
]
