"""Tool-calling agent.

This module provides the orchestrator that drives a conversation:
- Advertise registered tools in the system prompt
- Extract tool calls from model responses
- Execute tools through the registry
- Feed results back for a final answer
- Emit progress events to listeners
"""

from toolpilot.agent.events import EventEmitter
from toolpilot.agent.models import AgentResponse, AgentStatus, EventListener, EventType
from toolpilot.agent.orchestrator import Agent
from toolpilot.agent.parser import ExtractionParseError, extract_text_content, extract_tool_calls
from toolpilot.agent.prompts import DEFAULT_SYSTEM_PROMPT, build_system_prompt
from toolpilot.agent.state import ConversationState
from toolpilot.config.schema import AgentConfig

__all__ = [
    "Agent",
    "AgentConfig",
    "AgentResponse",
    "AgentStatus",
    "ConversationState",
    "DEFAULT_SYSTEM_PROMPT",
    "EventEmitter",
    "EventListener",
    "EventType",
    "ExtractionParseError",
    "build_system_prompt",
    "extract_text_content",
    "extract_tool_calls",
]
