"""Data models for tool use system."""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ToolParameter(BaseModel):
    """Model-facing description of a single tool argument."""

    name: str
    type: str  # "string", "number", "boolean", "array"
    description: Optional[str] = None
    required: bool = True
    default: Optional[Any] = None
    enum: Optional[list[str]] = None  # For restricted choices

    def to_schema(self) -> dict[str, Any]:
        """Get the JSON schema fragment for this parameter."""
        schema: dict[str, Any] = {"type": self.type}
        if self.description:
            schema["description"] = self.description
        if self.enum:
            schema["enum"] = list(self.enum)
        return schema


class ToolCall(BaseModel):
    """Canonical tool call request extracted from a model response.

    ``arguments`` is the raw JSON string sent by the model. Some backends send
    an already decoded mapping instead, which is kept as-is.
    """

    id: str
    name: str
    arguments: str | dict[str, Any] = "{}"

    def __str__(self) -> str:
        """String representation."""
        return f"{self.name}({self.arguments})"


class ToolCallRecord(BaseModel):
    """A dispatched tool call and its result, or the "Error: ..." text."""

    id: str
    tool_name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    response: Any = None
