"""Data models for agent execution."""

from collections.abc import Callable
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EventType(str, Enum):
    """Agent events delivered to listeners."""

    THINKING = "thinking"  # Progress text
    TOOL_START = "tool_start"  # {"tool": name, "args": arguments}
    TOOL_END = "tool_end"  # {"tool": name, "result": value}
    RESPONSE = "response"  # Final assistant message
    ERROR = "error"  # Exception that aborted the turn


class AgentStatus(str, Enum):
    """Where the agent is within a turn."""

    IDLE = "idle"
    AWAITING_MODEL = "awaiting_model"
    NO_TOOL_CALLS = "no_tool_calls"
    EXECUTING_TOOLS = "executing_tools"
    AWAITING_FINAL_MODEL = "awaiting_final_model"


class AgentResponse(BaseModel):
    """Result of one processed user message."""

    message: str = Field(description="Final assistant text")
    tools_used: list[str] = Field(
        default_factory=list,
        description="Names of every tool the model asked for, in call order",
    )


EventListener = Callable[[EventType, Any], None]
