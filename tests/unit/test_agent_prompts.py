"""Tests for system prompt construction."""

from toolpilot.agent.prompts import DEFAULT_SYSTEM_PROMPT, build_system_prompt
from toolpilot.tools import create_tool
from toolpilot.tools.builtin import EXAMPLE_TOOLS, calculator_tool, weather_tool


class TestBuildSystemPrompt:
    """Tests for build_system_prompt."""

    def test_no_tools_is_base_prompt(self):
        """Test an empty tool set leaves the base prompt untouched."""
        assert build_system_prompt("Be brief.", []) == "Be brief."
        assert build_system_prompt(None, []) == DEFAULT_SYSTEM_PROMPT

    def test_lists_every_tool(self):
        """Test every tool name and description is present once."""
        prompt = build_system_prompt(None, EXAMPLE_TOOLS)

        assert prompt.startswith(DEFAULT_SYSTEM_PROMPT + "\n\nYou have access to the following tools:")
        for tool in EXAMPLE_TOOLS:
            assert prompt.count(tool.name) == 1
            assert prompt.count(tool.description) == 1
            assert f"Tool: {tool.name}\nDescription: {tool.description}" in prompt

    def test_parameter_lines(self):
        """Test parameters show type, description and choices."""
        prompt = build_system_prompt("Base", [weather_tool])

        assert "- location (string): The city and state, e.g. San Francisco, CA" in prompt
        assert (
            "- unit (string): The unit of temperature to use. Defaults to fahrenheit. "
            "[celsius, fahrenheit]"
        ) in prompt

    def test_instructions(self):
        """Test the numbered usage instructions are included."""
        prompt = build_system_prompt("Base", [calculator_tool])

        assert "IMPORTANT INSTRUCTIONS FOR USING TOOLS:" in prompt
        assert "2. Call the tool with the required parameters" in prompt
        assert "5. Never invent parameters" in prompt

    def test_examples_block(self):
        """Test usage examples are listed verbatim."""
        prompt = build_system_prompt("Base", [calculator_tool])

        assert prompt.endswith("EXAMPLES:\n- " + calculator_tool.usage_example)

    def test_examples_block_omitted_without_examples(self):
        """Test no EXAMPLES block when no tool has an example."""

        async def ping() -> str:
            return "pong"

        prompt = build_system_prompt("Base", [create_tool("ping", "Ping", ping)])

        assert "EXAMPLES:" not in prompt
        assert "Parameters:" not in prompt

    def test_idempotent(self):
        """Test identical inputs give identical prompts."""
        assert build_system_prompt("Base", EXAMPLE_TOOLS) == build_system_prompt(
            "Base", EXAMPLE_TOOLS
        )
