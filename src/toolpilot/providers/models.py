"""
Provider data models for toolpilot.

Chat turns and completion requests in the OpenAI wire format LiteLLM speaks.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MessageRole(str, Enum):
    """Valid message roles."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"
    TOOL = "tool"


@dataclass
class Message:
    """Conversation message."""

    role: str
    content: Any = None
    tool_call_id: str | None = None
    tool_calls: list[dict[str, Any]] | None = None
    function_call: dict[str, Any] | None = None
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to LiteLLM-compatible dict, dropping unset keys."""
        result: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_call_id is not None:
            result["tool_call_id"] = self.tool_call_id
        if self.tool_calls:
            result["tool_calls"] = self.tool_calls
        if self.function_call:
            result["function_call"] = self.function_call
        if self.name:
            result["name"] = self.name
        return result

    @classmethod
    def system(cls, content: str) -> "Message":
        """Create a system message."""
        return cls(role=MessageRole.SYSTEM.value, content=content)

    @classmethod
    def user(cls, content: str) -> "Message":
        """Create a user message."""
        return cls(role=MessageRole.USER.value, content=content)

    @classmethod
    def tool(cls, content: str, tool_call_id: str) -> "Message":
        """Create a tool result message."""
        return cls(role=MessageRole.TOOL.value, content=content, tool_call_id=tool_call_id)


@dataclass
class ChatCompletionRequest:
    """A single chat-completion request."""

    model: str | None
    messages: list[dict[str, Any]] = field(default_factory=list)
    tools: list[dict[str, Any]] | None = None
    temperature: float | None = None
    max_tokens: int | None = None

    def to_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the completion call.

        Unset values are dropped, and ``tools`` only appears when non-empty.
        """
        kwargs: dict[str, Any] = {"messages": self.messages}
        if self.model is not None:
            kwargs["model"] = self.model
        if self.tools:
            kwargs["tools"] = self.tools
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        if self.max_tokens is not None:
            kwargs["max_tokens"] = self.max_tokens
        return kwargs
