"""Tests for the agent orchestrator."""

import asyncio
import json
from types import SimpleNamespace

import pytest
from conftest import ScriptedChatClient, assistant_text, assistant_tool_calls
from pydantic import BaseModel

from toolpilot.agent import Agent, AgentConfig, AgentStatus, EventType
from toolpilot.providers import ProviderError, RateLimitError
from toolpilot.tools import DuplicateToolError, create_tool
from toolpilot.tools.builtin import EXAMPLE_TOOLS, calculator_tool, weather_tool


def record_events(agent: Agent) -> list:
    events = []
    for kind in EventType:
        agent.on(kind, lambda k, payload: events.append((k, payload)))
    return events


def tool_messages(agent: Agent) -> list[dict]:
    return [m for m in agent.get_conversation_history() if m["role"] == "tool"]


class TestAgentSetup:
    """Tests for construction, registration and reset."""

    def test_initial_state(self):
        """Test a new agent holds just the system message."""
        agent = Agent(ScriptedChatClient(), tools=EXAMPLE_TOOLS)

        history = agent.get_conversation_history()

        assert len(history) == 1
        assert history[0]["role"] == "system"
        for tool in EXAMPLE_TOOLS:
            assert history[0]["content"].count(tool.name) == 1
            assert history[0]["content"].count(tool.description) == 1
        assert agent.status == AgentStatus.IDLE

    def test_no_tools_plain_prompt(self):
        """Test the configured prompt is used as-is without tools."""
        agent = Agent(ScriptedChatClient(), config=AgentConfig(system_prompt="Be brief."))

        assert agent.get_conversation_history()[0]["content"] == "Be brief."

    def test_register_tools_refreshes_prompt(self):
        """Test registering tools updates the system message."""
        agent = Agent(ScriptedChatClient(), tools=[calculator_tool])

        agent.register_tools([weather_tool])

        prompt = agent.get_conversation_history()[0]["content"]
        assert "Tool: calculator" in prompt
        assert "Tool: get_weather" in prompt

    def test_register_tools_duplicate(self):
        """Test duplicate registration fails without partial effects."""
        agent = Agent(ScriptedChatClient(), tools=[calculator_tool])

        with pytest.raises(DuplicateToolError):
            agent.register_tools([weather_tool, calculator_tool])

        assert agent.registry.names() == ["calculator"]

    def test_history_is_a_copy(self):
        """Test mutating the returned history does not touch the agent."""
        agent = Agent(ScriptedChatClient())

        history = agent.get_conversation_history()
        history.append({"role": "user", "content": "sneaky"})
        history[0]["content"] = "changed"

        assert len(agent.get_conversation_history()) == 1
        assert agent.get_conversation_history()[0]["content"] != "changed"

    @pytest.mark.asyncio
    async def test_reset(self):
        """Test reset leaves only a fresh system message."""
        client = ScriptedChatClient(
            assistant_tool_calls(("calculator", {"expression": "2+2"})),
            assistant_text("4"),
        )
        agent = Agent(client, tools=EXAMPLE_TOOLS)
        await agent.process_input("What is 2+2?")
        assert agent.tool_calls

        agent.reset()

        history = agent.get_conversation_history()
        assert len(history) == 1
        assert history[0]["role"] == "system"
        assert agent.tool_calls == []
        assert len(agent.registry) == 3


class TestProcessInput:
    """Tests for Agent.process_input."""

    @pytest.mark.asyncio
    async def test_plain_answer(self):
        """Test a prose answer completes in one model call."""
        client = ScriptedChatClient(assistant_text("Hello there"))
        agent = Agent(client, tools=EXAMPLE_TOOLS)

        response = await agent.process_input("Hi")

        assert response.message == "Hello there"
        assert response.tools_used == []
        assert len(client.requests) == 1
        assert [m["role"] for m in agent.get_conversation_history()] == [
            "system",
            "user",
            "assistant",
        ]

    @pytest.mark.asyncio
    async def test_request_contents(self):
        """Test the request carries history, tools and sampling settings."""
        client = ScriptedChatClient(assistant_text("ok"))
        config = AgentConfig(model="fast", temperature=0.2, max_tokens=300)
        agent = Agent(client, tools=EXAMPLE_TOOLS, config=config)

        await agent.process_input("Hi")

        request = client.requests[0]
        assert request.model == "fast"
        assert request.temperature == 0.2
        assert request.max_tokens == 300
        assert request.messages[0]["role"] == "system"
        assert request.messages[-1] == {"role": "user", "content": "Hi"}
        assert request.tools == agent.registry.function_definitions()

    @pytest.mark.asyncio
    async def test_tools_omitted_when_none_registered(self):
        """Test no tools key is sent without tools."""
        client = ScriptedChatClient(assistant_text("ok"))
        agent = Agent(client)

        await agent.process_input("Hi")

        assert client.requests[0].tools is None
        assert "tools" not in client.requests[0].to_kwargs()

    @pytest.mark.asyncio
    async def test_calculator_scenario(self):
        """Test one tool round trip with the calculator."""
        client = ScriptedChatClient(
            assistant_tool_calls(("calculator", '{"expression":"2 + 2"}')),
            assistant_text("2 + 2 = 4"),
        )
        agent = Agent(client, tools=EXAMPLE_TOOLS)

        response = await agent.process_input("What is 2+2?")

        assert response.message == "2 + 2 = 4"
        assert response.tools_used == ["calculator"]

        tools = tool_messages(agent)
        assert tools == [{"role": "tool", "content": '{"result":4}', "tool_call_id": "call_1"}]

        assert len(client.requests) == 2
        assert client.requests[1].tools is None
        assert client.requests[1].messages[-1]["role"] == "tool"

        records = agent.tool_calls
        assert len(records) == 1
        assert records[0].tool_name == "calculator"
        assert records[0].arguments == {"expression": "2 + 2"}
        assert records[0].response == {"result": 4}

    @pytest.mark.asyncio
    async def test_multiple_calls_run_in_order(self):
        """Test several calls from one response run sequentially."""
        order = []

        async def slow(label: str) -> str:
            order.append(f"start {label}")
            await asyncio.sleep(0)
            order.append(f"end {label}")
            return label

        class LabelArgs(BaseModel):
            label: str

        tool = create_tool("slow", "Slow tool", slow, LabelArgs)
        client = ScriptedChatClient(
            assistant_tool_calls(("slow", {"label": "a"}), ("slow", {"label": "b"})),
            assistant_text("done"),
        )
        agent = Agent(client, tools=[tool])

        response = await agent.process_input("go")

        assert order == ["start a", "end a", "start b", "end b"]
        assert response.tools_used == ["slow", "slow"]
        assert [m["tool_call_id"] for m in tool_messages(agent)] == ["call_1", "call_2"]

    @pytest.mark.asyncio
    async def test_missing_tool_skipped(self):
        """Test an unknown tool is skipped by default."""
        client = ScriptedChatClient(
            assistant_tool_calls(("teleport", {"to": "Mars"})),
            assistant_text("I cannot do that."),
        )
        agent = Agent(client, tools=EXAMPLE_TOOLS)

        response = await agent.process_input("Beam me up")

        assert response.message == "I cannot do that."
        assert response.tools_used == ["teleport"]
        assert tool_messages(agent) == []
        assert len(client.requests) == 2

    @pytest.mark.asyncio
    async def test_missing_tool_reported(self):
        """Test the report policy tells the model the tool is missing."""
        client = ScriptedChatClient(
            assistant_tool_calls(("teleport", {})),
            assistant_text("Sorry."),
        )
        agent = Agent(
            client,
            tools=EXAMPLE_TOOLS,
            config=AgentConfig(missing_tool_policy="report"),
        )

        await agent.process_input("Beam me up")

        assert tool_messages(agent) == [
            {"role": "tool", "content": "Error: Tool 'teleport' not found", "tool_call_id": "call_1"}
        ]

    @pytest.mark.asyncio
    async def test_handler_failure_becomes_error_message(self):
        """Test a failing handler is reported and the turn continues."""

        async def explode() -> None:
            raise RuntimeError("boom")

        client = ScriptedChatClient(
            assistant_tool_calls(("explode", {})),
            assistant_text("The tool failed."),
        )
        agent = Agent(client, tools=[create_tool("explode", "Always fails", explode)])

        response = await agent.process_input("Try it")

        assert tool_messages(agent)[0]["content"] == "Error: boom"
        assert response.message == "The tool failed."
        assert response.tools_used == ["explode"]
        assert len(client.requests) == 2

        records = agent.tool_calls
        assert len(records) == 1
        assert records[0].tool_name == "explode"
        assert records[0].arguments == {}
        assert records[0].response == "Error: boom"

    @pytest.mark.asyncio
    async def test_invalid_arguments_become_error_message(self):
        """Test validation failures are reported to the model."""
        client = ScriptedChatClient(
            assistant_tool_calls(("calculator", {"expr": "1"})),
            assistant_text("Oops."),
        )
        agent = Agent(client, tools=EXAMPLE_TOOLS)

        await agent.process_input("Calculate")

        content = tool_messages(agent)[0]["content"]
        assert content.startswith("Error: Invalid arguments for tool 'calculator'")
        assert "expression" in content

    @pytest.mark.asyncio
    async def test_malformed_argument_json(self):
        """Test undecodable arguments are handled as a tool failure."""
        client = ScriptedChatClient(
            assistant_tool_calls(("calculator", "{not json")),
            assistant_text("Oops."),
        )
        agent = Agent(client, tools=EXAMPLE_TOOLS)

        response = await agent.process_input("Calculate")

        assert tool_messages(agent)[0]["content"].startswith("Error: ")
        assert "invalid JSON" in tool_messages(agent)[0]["content"]
        assert response.tools_used == ["calculator"]

    @pytest.mark.asyncio
    async def test_embedded_json_tool_call(self):
        """Test a fenced JSON block triggers a tool call."""
        content = (
            "I'll check.\n```json\n"
            '{"name": "get_weather", "arguments": {"location": "Paris", "unit": "celsius"}}'
            "\n```"
        )
        client = ScriptedChatClient(
            {"role": "assistant", "content": content},
            assistant_text("It is 22 degrees in Paris."),
        )
        agent = Agent(client, tools=EXAMPLE_TOOLS)

        response = await agent.process_input("Weather in Paris?")

        assert response.tools_used == ["get_weather"]
        result = json.loads(tool_messages(agent)[0]["content"])
        assert result["temperature"] == 22
        assert result["unit"] == "celsius"

    @pytest.mark.asyncio
    async def test_attribute_style_response(self):
        """Test responses exposing attributes instead of keys."""
        message = SimpleNamespace(role="assistant", content="Hi!", tool_calls=None)

        class AttributeClient:
            async def create_chat_completion(self, request):
                return SimpleNamespace(choices=[SimpleNamespace(message=message)])

        agent = Agent(AttributeClient())

        response = await agent.process_input("Hello")

        assert response.message == "Hi!"
        assert agent.get_conversation_history()[-1] == {"role": "assistant", "content": "Hi!"}

    @pytest.mark.asyncio
    async def test_empty_choices(self):
        """Test a response without choices is an upstream error."""

        class EmptyClient:
            async def create_chat_completion(self, request):
                return {"choices": []}

        agent = Agent(EmptyClient())

        with pytest.raises(ProviderError, match="no choices"):
            await agent.process_input("Hello")


class TestEvents:
    """Tests for events emitted during a turn."""

    @pytest.mark.asyncio
    async def test_event_sequence(self):
        """Test events for a turn with one tool call."""
        client = ScriptedChatClient(
            assistant_tool_calls(("calculator", {"expression": "6*7"})),
            assistant_text("42"),
        )
        agent = Agent(client, tools=EXAMPLE_TOOLS)
        events = record_events(agent)

        await agent.process_input("6 times 7?")

        assert events[0] == (EventType.THINKING, "Agent has access to 3 tools")
        assert events[1] == (EventType.THINKING, "Agent is executing 1 tools...")
        assert events[2] == (
            EventType.TOOL_START,
            {"tool": "calculator", "args": {"expression": "6*7"}},
        )
        assert events[3] == (EventType.TOOL_END, {"tool": "calculator", "result": {"result": 42}})
        assert events[4][0] == EventType.RESPONSE
        assert events[4][1]["content"] == "42"
        assert len(events) == 5

    @pytest.mark.asyncio
    async def test_no_thinking_without_tools(self):
        """Test no access message when no tools are registered."""
        agent = Agent(ScriptedChatClient(assistant_text("hi")))
        events = record_events(agent)

        await agent.process_input("hello")

        assert [kind for kind, _ in events] == [EventType.RESPONSE]

    @pytest.mark.asyncio
    async def test_upstream_failure(self):
        """Test provider errors emit error and propagate without rollback."""
        failure = RateLimitError("slow down")
        agent = Agent(ScriptedChatClient(failure), tools=EXAMPLE_TOOLS)
        events = record_events(agent)

        with pytest.raises(RateLimitError):
            await agent.process_input("Hi")

        assert (EventType.ERROR, failure) in events
        assert agent.get_conversation_history()[-1] == {"role": "user", "content": "Hi"}
        assert agent.status == AgentStatus.IDLE

    @pytest.mark.asyncio
    async def test_listener_error_propagates(self):
        """Test listener exceptions surface from process_input."""
        agent = Agent(ScriptedChatClient(assistant_text("hi")))

        def broken(kind, payload):
            raise RuntimeError("listener broke")

        agent.on(EventType.RESPONSE, broken)

        with pytest.raises(RuntimeError, match="listener broke"):
            await agent.process_input("hello")

    @pytest.mark.asyncio
    async def test_off(self):
        """Test unsubscribed listeners are not called."""
        agent = Agent(ScriptedChatClient(assistant_text("hi")))
        received = []

        def listener(kind, payload):
            received.append(kind)

        agent.on(EventType.RESPONSE, listener)
        agent.off(EventType.RESPONSE, listener)
        await agent.process_input("hello")

        assert received == []


class TestConcurrency:
    """Tests for turn serialization."""

    @pytest.mark.asyncio
    async def test_overlapping_turns_do_not_interleave(self):
        """Test concurrent process_input calls queue up."""

        class SlowClient:
            def __init__(self):
                self.count = 0

            async def create_chat_completion(self, request):
                self.count += 1
                await asyncio.sleep(0.01)
                return {"choices": [{"message": assistant_text(f"answer {self.count}")}]}

        agent = Agent(SlowClient())

        await asyncio.gather(agent.process_input("first"), agent.process_input("second"))

        roles = [m["role"] for m in agent.get_conversation_history()]
        assert roles == ["system", "user", "assistant", "user", "assistant"]
