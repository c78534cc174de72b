"""Extraction of tool calls from assistant messages."""

import json
import logging
import re
import uuid
from collections.abc import Callable, Mapping
from typing import Any

from toolpilot.tools.models import ToolCall

logger = logging.getLogger(__name__)

JSON_BLOCK_PATTERN = re.compile(r"```json\s*(\{[\s\S]*?\})\s*```")


class ExtractionParseError(ValueError):
    """An embedded tool-call block could not be decoded.

    Raised by the fenced-block matcher and handled inside
    extract_tool_calls; it never reaches the caller of the extractor.
    """


def get_field(obj: Any, key: str, default: Any = None) -> Any:
    """Read a field by mapping or attribute access."""
    if isinstance(obj, Mapping):
        return obj.get(key, default)
    return getattr(obj, key, default)


def synthetic_call_id() -> str:
    """Generate an id for a tool call the backend did not label."""
    return f"call_{uuid.uuid4().hex}"


def match_tool_calls(message: Any) -> list[ToolCall]:
    """Structured ``tool_calls`` list, passed through in order."""
    entries = get_field(message, "tool_calls")
    if not entries:
        return []

    calls = []
    for entry in entries:
        function = get_field(entry, "function")
        name = get_field(function, "name") if function is not None else None
        if not name:
            logger.warning(f"Ignoring tool call without a function name: {entry!r}")
            continue
        arguments = get_field(function, "arguments")
        calls.append(
            ToolCall(
                id=get_field(entry, "id") or synthetic_call_id(),
                name=name,
                arguments="{}" if arguments is None else arguments,
            )
        )
    return calls


def match_function_call(message: Any) -> list[ToolCall]:
    """Legacy single ``function_call`` field."""
    function_call = get_field(message, "function_call")
    if not function_call:
        return []

    name = get_field(function_call, "name")
    if not name:
        return []
    arguments = get_field(function_call, "arguments")
    return [
        ToolCall(
            id=synthetic_call_id(),
            name=name,
            arguments="{}" if arguments is None else arguments,
        )
    ]


def parse_json_block(content: str) -> list[ToolCall]:
    """Decode a fenced JSON tool-call block from free text.

    Raises:
        ExtractionParseError: If the block is not valid JSON
    """
    match = JSON_BLOCK_PATTERN.search(content)
    if not match:
        return []

    try:
        payload = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        raise ExtractionParseError(f"Invalid JSON in tool call block: {e}") from e

    if not isinstance(payload, dict) or not payload.get("name"):
        return []

    arguments = payload.get("arguments")
    # an empty mapping is a valid argument list, null or "" is not
    if arguments is None or arguments in ("", False, 0):
        return []
    if not isinstance(arguments, str):
        arguments = json.dumps(arguments)

    return [ToolCall(id=synthetic_call_id(), name=str(payload["name"]), arguments=arguments)]


def match_json_block(message: Any) -> list[ToolCall]:
    """Fenced ```json block embedded in string content."""
    content = get_field(message, "content")
    if not isinstance(content, str):
        return []

    try:
        return parse_json_block(content)
    except ExtractionParseError as e:
        logger.warning(f"Failed to parse embedded tool call: {e}")
        return []


Matcher = Callable[[Any], list[ToolCall]]

# Tried in order; the first non-empty result wins
MATCHERS: tuple[Matcher, ...] = (
    match_tool_calls,
    match_function_call,
    match_json_block,
)


def extract_tool_calls(message: Any) -> list[ToolCall]:
    """Extract tool calls from an assistant message.

    Args:
        message: Assistant message (dict or object with matching attributes)

    Returns:
        Canonical tool calls; empty when the message is a final answer
    """
    if message is None:
        return []

    for matcher in MATCHERS:
        calls = matcher(message)
        if calls:
            logger.debug(f"{matcher.__name__} extracted {len(calls)} tool call(s)")
            return calls
    return []


def extract_text_content(message: Any) -> str:
    """Get the message content as a string.

    Structured content is JSON-encoded; missing content becomes "".
    """
    content = get_field(message, "content") if message is not None else None
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    return json.dumps(content)
