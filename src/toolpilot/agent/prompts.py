"""System prompt construction."""

from collections.abc import Iterable
from typing import Optional

from toolpilot.tools.base import Tool
from toolpilot.tools.models import ToolParameter

DEFAULT_SYSTEM_PROMPT = "You are a helpful AI assistant that can use tools to accomplish tasks."

TOOL_INSTRUCTIONS = (
    "IMPORTANT INSTRUCTIONS FOR USING TOOLS:",
    "1. When a task requires using a tool, identify the appropriate tool",
    "2. Call the tool with the required parameters",
    "3. Wait for the tool execution to complete before providing your final response",
    "4. Base your response on the tool's output",
    "5. Never invent parameters that are not defined for a tool",
)


def _format_parameter(param: ToolParameter) -> str:
    line = f"- {param.name} ({param.type})"
    if param.description:
        line += f": {param.description}"
    if param.enum:
        line += f" [{', '.join(param.enum)}]"
    return line


def _format_tool(tool: Tool) -> list[str]:
    lines = [f"Tool: {tool.name}", f"Description: {tool.description}"]
    if tool.parameters:
        lines.append("Parameters:")
        lines.extend(_format_parameter(param) for param in tool.parameters)
    lines.append("")
    return lines


def build_system_prompt(base_prompt: Optional[str], tools: Iterable[Tool]) -> str:
    """Build the system prompt advertising the given tools.

    With no tools the result is exactly the base prompt. The function is pure:
    the same inputs always produce the same text.

    Args:
        base_prompt: Configured prompt; None or empty uses DEFAULT_SYSTEM_PROMPT
        tools: Tools in registration order

    Returns:
        Complete system prompt text
    """
    base = base_prompt or DEFAULT_SYSTEM_PROMPT
    tools = list(tools)
    if not tools:
        return base

    lines = [base, "", "You have access to the following tools:"]
    for tool in tools:
        lines.extend(_format_tool(tool))

    lines.extend(TOOL_INSTRUCTIONS)

    examples = [tool.usage_example for tool in tools if tool.usage_example]
    if examples:
        lines.append("")
        lines.append("EXAMPLES:")
        lines.extend(f"- {example}" for example in examples)

    return "\n".join(lines)
