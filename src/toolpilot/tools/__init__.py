"""Tool use system for toolpilot agent capabilities.

This module provides the tool contract and the registry:
- Tools are capability records: name, description, argument schema, handler
- The registry looks tools up, validates arguments and runs them
- Function-calling definitions are generated from the argument schemas
"""

from toolpilot.tools.base import (
    DuplicateToolError,
    Tool,
    ToolError,
    ToolExecutionError,
    ToolNotFoundError,
    ToolValidationError,
    create_tool,
)
from toolpilot.tools.models import ToolCall, ToolCallRecord, ToolParameter
from toolpilot.tools.registry import ToolRegistry

__all__ = [
    "Tool",
    "create_tool",
    "ToolError",
    "ToolNotFoundError",
    "DuplicateToolError",
    "ToolValidationError",
    "ToolExecutionError",
    "ToolCall",
    "ToolCallRecord",
    "ToolParameter",
    "ToolRegistry",
]
