"""Agent orchestrator: one user turn, optional tool round, final answer."""

import asyncio
import copy
import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from toolpilot.agent.events import EventEmitter
from toolpilot.agent.models import AgentResponse, AgentStatus, EventListener, EventType
from toolpilot.agent.parser import extract_text_content, extract_tool_calls, get_field
from toolpilot.agent.prompts import build_system_prompt
from toolpilot.agent.state import ConversationState
from toolpilot.config.schema import AgentConfig
from toolpilot.providers.client import ChatClient
from toolpilot.providers.exceptions import ProviderError
from toolpilot.providers.models import ChatCompletionRequest, MessageRole
from toolpilot.tools.base import Tool, ToolError, ToolNotFoundError, ToolValidationError
from toolpilot.tools.models import ToolCall, ToolCallRecord
from toolpilot.tools.registry import ToolRegistry

logger = logging.getLogger(__name__)

_MESSAGE_FIELDS = ("role", "content", "tool_calls", "function_call", "name")


def _to_plain(value: Any) -> Any:
    if hasattr(value, "model_dump"):
        return value.model_dump(exclude_none=True)
    return value


def normalize_message(message: Any) -> dict[str, Any]:
    """Convert a backend message into a wire-format dict.

    Mappings are copied as-is; objects contribute their chat fields only.
    """
    if isinstance(message, Mapping):
        return dict(message)

    result: dict[str, Any] = {}
    for key in _MESSAGE_FIELDS:
        value = getattr(message, key, None)
        if value is None:
            continue
        if key == "tool_calls":
            value = [_to_plain(entry) for entry in value]
        result[key] = _to_plain(value)
    result.setdefault("role", MessageRole.ASSISTANT.value)
    result.setdefault("content", None)
    return result


def first_message(response: Any) -> dict[str, Any]:
    """Get ``choices[0].message`` from a chat-completion response.

    Raises:
        ProviderError: If the response carries no message
    """
    choices = get_field(response, "choices")
    if not choices:
        raise ProviderError("Chat completion response contained no choices")

    message = get_field(choices[0], "message")
    if message is None:
        raise ProviderError("Chat completion response contained no message")
    return normalize_message(message)


def decode_arguments(call: ToolCall) -> Any:
    """Decode the arguments of a tool call.

    Raises:
        ToolValidationError: If the arguments are a string but not valid JSON
    """
    if not isinstance(call.arguments, str):
        return call.arguments
    if not call.arguments.strip():
        return {}
    try:
        return json.loads(call.arguments)
    except json.JSONDecodeError as e:
        raise ToolValidationError(call.name, [("arguments", f"invalid JSON: {e.msg}")]) from e


class Agent:
    """Tool-calling agent.

    Each call to process_input appends the user message, asks the model,
    runs any tools it requested, in order, and asks the model once more
    for the final answer. Turns on one agent never interleave.
    """

    def __init__(
        self,
        client: ChatClient,
        tools: Optional[Iterable[Tool]] = None,
        config: Optional[AgentConfig] = None,
        registry: Optional[ToolRegistry] = None,
    ):
        """Initialize the agent.

        Args:
            client: Chat-completion backend
            tools: Tools to register immediately
            config: Agent settings
            registry: Existing registry to use instead of a new one
        """
        self.client = client
        self.config = config or AgentConfig()
        self.registry = registry if registry is not None else ToolRegistry()
        if tools:
            self.registry.register_many(tools)

        self.status = AgentStatus.IDLE
        self._events = EventEmitter()
        self._lock = asyncio.Lock()
        self.state = ConversationState(self._build_system_prompt())

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    def on(self, kind: EventType | str, listener: EventListener) -> None:
        """Subscribe to an agent event."""
        self._events.on(kind, listener)

    def off(self, kind: EventType | str, listener: EventListener) -> bool:
        """Unsubscribe from an agent event."""
        return self._events.off(kind, listener)

    def _emit(self, kind: EventType, payload: Any = None) -> None:
        self._events.emit(kind, payload)

    # ------------------------------------------------------------------
    # Prompt / state
    # ------------------------------------------------------------------

    def _build_system_prompt(self) -> str:
        return build_system_prompt(self.config.system_prompt, self.registry.all())

    def refresh_system_prompt(self) -> None:
        """Rebuild the system message from the registered tools."""
        self.state.set_system_prompt(self._build_system_prompt())

    def register_tools(self, tools: Iterable[Tool]) -> None:
        """Register tools and advertise them in the system prompt.

        Raises:
            DuplicateToolError: If any name is taken; nothing is registered
        """
        self.registry.register_many(tools)
        self.refresh_system_prompt()

    def reset(self) -> None:
        """Start a fresh conversation. Registered tools are kept."""
        self.state = ConversationState(self._build_system_prompt())
        self.status = AgentStatus.IDLE
        logger.debug("Conversation reset")

    def get_conversation_history(self) -> list[dict[str, Any]]:
        """Copy of the conversation, system message first."""
        return copy.deepcopy(self.state.messages)

    @property
    def tool_calls(self) -> list[ToolCallRecord]:
        """Dispatched tool calls in order, failures included."""
        return list(self.state.tool_calls)

    # ------------------------------------------------------------------
    # Turn processing
    # ------------------------------------------------------------------

    async def process_input(self, user_message: str) -> AgentResponse:
        """Process one user message.

        Args:
            user_message: Text typed by the user

        Returns:
            Final assistant text and the names of the tools requested

        Raises:
            ProviderError: If the chat backend fails; the error event is
                emitted first and the history keeps what was appended
        """
        async with self._lock:
            try:
                return await self._run_turn(user_message)
            except Exception as e:
                logger.error(f"Agent turn failed: {e}")
                self._emit(EventType.ERROR, e)
                raise
            finally:
                self.status = AgentStatus.IDLE

    async def _run_turn(self, user_message: str) -> AgentResponse:
        self.state.add_user_message(user_message)
        self.refresh_system_prompt()

        tool_count = len(self.registry)
        if tool_count:
            self._emit(EventType.THINKING, f"Agent has access to {tool_count} tools")

        self.status = AgentStatus.AWAITING_MODEL
        message = await self._complete(include_tools=True)
        self.state.add_assistant_message(message)

        calls = extract_tool_calls(message)
        if not calls:
            self.status = AgentStatus.NO_TOOL_CALLS
            self._emit(EventType.RESPONSE, message)
            return AgentResponse(message=extract_text_content(message), tools_used=[])

        self.status = AgentStatus.EXECUTING_TOOLS
        self._emit(EventType.THINKING, f"Agent is executing {len(calls)} tools...")

        tools_used = []
        for call in calls:
            tools_used.append(call.name)
            await self._dispatch(call)

        self.status = AgentStatus.AWAITING_FINAL_MODEL
        final = await self._complete(include_tools=False)
        self.state.add_assistant_message(final)
        self._emit(EventType.RESPONSE, final)

        return AgentResponse(message=extract_text_content(final), tools_used=tools_used)

    async def _complete(self, include_tools: bool) -> dict[str, Any]:
        request = ChatCompletionRequest(
            model=self.config.model,
            messages=self.state.messages,
            tools=self.registry.function_definitions() if include_tools else None,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )
        response = await self.client.create_chat_completion(request)
        return first_message(response)

    async def _dispatch(self, call: ToolCall) -> None:
        """Run one tool call and append its outcome to the conversation."""
        if call.name not in self.registry:
            self._handle_missing_tool(call)
            return

        arguments: Any = None
        try:
            arguments = decode_arguments(call)
            self._emit(EventType.TOOL_START, {"tool": call.name, "args": arguments})
            result = await self.registry.execute(call.name, arguments)
        except ToolNotFoundError:
            self._handle_missing_tool(call)
            return
        except ToolError as e:
            logger.warning(f"Tool '{call.name}' failed: {e}")
            error = f"Error: {e}"
            self.state.add_tool_message(call.id, error)
            self._record(call, arguments, error)
            return

        self._emit(EventType.TOOL_END, {"tool": call.name, "result": result})
        self.state.add_tool_message(call.id, json.dumps(result, separators=(",", ":"), default=str))
        self._record(call, arguments, result)

    def _record(self, call: ToolCall, arguments: Any, response: Any) -> None:
        self.state.record_tool_call(
            ToolCallRecord(
                id=call.id,
                tool_name=call.name,
                arguments=arguments if isinstance(arguments, dict) else {},
                response=response,
            )
        )

    def _handle_missing_tool(self, call: ToolCall) -> None:
        logger.warning(f"Tool '{call.name}' not found")
        if self.config.missing_tool_policy == "report":
            self.state.add_tool_message(call.id, f"Error: {ToolNotFoundError(call.name)}")
