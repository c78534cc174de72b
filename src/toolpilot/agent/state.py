"""Conversation state owned by an agent."""

from typing import Any

from toolpilot.providers.models import Message
from toolpilot.tools.models import ToolCallRecord


class ConversationState:
    """Ordered chat history plus the record of dispatched tool calls.

    The system message lives in its own slot so ``messages[0]`` is always
    the system turn; everything else is append-only.
    """

    def __init__(self, system_prompt: str):
        self.system_message: dict[str, Any] = Message.system(system_prompt).to_dict()
        self.turns: list[dict[str, Any]] = []
        self.tool_calls: list[ToolCallRecord] = []

    @property
    def messages(self) -> list[dict[str, Any]]:
        """Full history, system message first."""
        return [self.system_message, *self.turns]

    @property
    def system_prompt(self) -> str:
        return self.system_message["content"]

    def set_system_prompt(self, prompt: str) -> None:
        """Replace the system message content."""
        self.system_message = {**self.system_message, "content": prompt}

    def add_user_message(self, content: str) -> None:
        self.turns.append(Message.user(content).to_dict())

    def add_assistant_message(self, message: dict[str, Any]) -> None:
        """Append an assistant message exactly as the model returned it."""
        self.turns.append(message)

    def add_tool_message(self, tool_call_id: str, content: str) -> None:
        self.turns.append(Message.tool(content, tool_call_id).to_dict())

    def record_tool_call(self, record: ToolCallRecord) -> None:
        self.tool_calls.append(record)

    def __len__(self) -> int:
        return len(self.turns) + 1
