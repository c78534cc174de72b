"""Tool registry for managing available tools."""

import logging
import threading
from collections.abc import Iterable
from typing import Any, Optional

from toolpilot.tools.base import (
    DuplicateToolError,
    Tool,
    ToolExecutionError,
    ToolNotFoundError,
)

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry for managing available tools.

    The registry maintains an insertion-ordered collection of tools that can
    be invoked by the AI agent. Registering a name twice is an error.
    Reads are lock-free; writes are serialized.
    """

    def __init__(self, tools: Optional[Iterable[Tool]] = None):
        """Initialize the tool registry.

        Args:
            tools: Optional tools to register immediately
        """
        self._tools: dict[str, Tool] = {}
        self._lock = threading.RLock()
        if tools:
            self.register_many(tools)

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Args:
            tool: Tool instance to register

        Raises:
            DuplicateToolError: If tool name already registered
        """
        with self._lock:
            if tool.name in self._tools:
                raise DuplicateToolError(tool.name)

            self._tools[tool.name] = tool
        logger.info(f"Registered tool: {tool.name}")

    def register_many(self, tools: Iterable[Tool]) -> None:
        """Register several tools, all or nothing.

        Args:
            tools: Tools to register

        Raises:
            DuplicateToolError: If any name is already registered or repeated
                within the batch; nothing is registered in that case
        """
        batch = list(tools)
        with self._lock:
            seen: set[str] = set()
            for tool in batch:
                if tool.name in self._tools or tool.name in seen:
                    raise DuplicateToolError(tool.name)
                seen.add(tool.name)

            for tool in batch:
                self._tools[tool.name] = tool

        if batch:
            logger.info(f"Registered {len(batch)} tools: {', '.join(t.name for t in batch)}")

    def unregister(self, name: str) -> bool:
        """Unregister a tool.

        Args:
            name: Tool name to unregister

        Returns:
            True if tool was unregistered, False if not found
        """
        with self._lock:
            if name not in self._tools:
                return False
            del self._tools[name]
        logger.info(f"Unregistered tool: {name}")
        return True

    def get(self, name: str) -> Optional[Tool]:
        """Get a tool by name.

        Args:
            name: Tool name

        Returns:
            Tool instance or None if not found
        """
        return self._tools.get(name)

    def all(self) -> list[Tool]:
        """Get all registered tools in registration order."""
        return list(self._tools.values())

    def names(self) -> list[str]:
        """Get all registered tool names in registration order."""
        return list(self._tools.keys())

    def function_definitions(self) -> list[dict[str, Any]]:
        """Get function-calling definitions, same order as all()."""
        return [tool.get_function_definition() for tool in self.all()]

    async def execute(self, name: str, arguments: Optional[dict[str, Any]] = None) -> Any:
        """Validate arguments and run a tool.

        Args:
            name: Registered tool name
            arguments: Decoded arguments sent by the model

        Returns:
            Whatever the tool handler returns

        Raises:
            ToolNotFoundError: If the tool is not registered
            ToolValidationError: If the arguments do not match the schema;
                the handler is not invoked
            ToolExecutionError: If the handler raises
        """
        tool = self.get(name)
        if tool is None:
            raise ToolNotFoundError(name)

        validated = tool.validate_arguments(arguments)

        logger.info(f"Executing tool: {name}")
        logger.debug(f"Tool '{name}' arguments: {validated}")
        try:
            return await tool.execute(**validated)
        except ToolExecutionError:
            raise
        except Exception as e:
            logger.error(f"Tool execution failed: {name}: {e}", exc_info=True)
            raise ToolExecutionError(str(e), tool_name=name) from e

    def clear(self) -> None:
        """Clear all registered tools."""
        with self._lock:
            self._tools.clear()
        logger.info("Cleared all tools from registry")

    def __len__(self) -> int:
        """Get number of registered tools."""
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        """Check if tool is registered."""
        return name in self._tools

    def __str__(self) -> str:
        """String representation."""
        return f"ToolRegistry({len(self._tools)} tools)"

    def __repr__(self) -> str:
        """Representation."""
        tools = ", ".join(self._tools.keys())
        return f"<ToolRegistry tools=[{tools}]>"
