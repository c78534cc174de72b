"""
Pytest configuration and fixtures for toolpilot tests.
"""

import copy
import json
import os
from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest
from pydantic import BaseModel, Field
from typer.testing import CliRunner

from toolpilot.config import clear_config_cache
from toolpilot.providers.models import ChatCompletionRequest
from toolpilot.tools import ToolRegistry, create_tool
from toolpilot.tools.builtin import EXAMPLE_TOOLS


class ScriptedChatClient:
    """ChatClient double that replays canned assistant messages.

    Each scripted item is either a message dict, returned as
    ``{"choices": [{"message": item}]}``, or an exception to raise.
    Requests are recorded as deep copies.
    """

    def __init__(self, *script: Any):
        self.script = list(script)
        self.requests: list[ChatCompletionRequest] = []

    async def create_chat_completion(self, request: ChatCompletionRequest) -> Any:
        self.requests.append(copy.deepcopy(request))
        if not self.script:
            raise AssertionError("Unexpected chat completion request")
        item = self.script.pop(0)
        if isinstance(item, Exception):
            raise item
        return {"choices": [{"message": item}]}


def assistant_text(content: str) -> dict[str, Any]:
    """Plain assistant answer."""
    return {"role": "assistant", "content": content}


def assistant_tool_calls(*calls: tuple[str, Any], prefix: str = "call") -> dict[str, Any]:
    """Assistant message requesting tools, as (name, arguments) pairs."""
    return {
        "role": "assistant",
        "content": None,
        "tool_calls": [
            {
                "id": f"{prefix}_{index}",
                "type": "function",
                "function": {
                    "name": name,
                    "arguments": arguments if isinstance(arguments, str) else json.dumps(arguments),
                },
            }
            for index, (name, arguments) in enumerate(calls, start=1)
        ],
    }


class EchoArgs(BaseModel):
    text: str = Field(description="Text to echo")
    times: int = Field(default=1, description="Repeat count")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Keep tests away from the real ~/.toolpilot, cwd config and env."""
    home = tmp_path / ".toolpilot"
    home.mkdir()
    for key in list(os.environ):
        if key.startswith("TOOLPILOT_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("TOOLPILOT_HOME", str(home))
    monkeypatch.chdir(tmp_path)
    clear_config_cache()
    yield home
    clear_config_cache()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def echo_tool():
    """Tool that echoes its text argument."""

    async def echo(text: str, times: int = 1) -> dict:
        return {"echo": text * times}

    return create_tool(
        name="echo",
        description="Echo text back",
        handler=echo,
        schema=EchoArgs,
        usage_example='To repeat a phrase, call it with {"text": "hello"}.',
    )


@pytest.fixture
def example_registry() -> ToolRegistry:
    """Registry holding the three example tools."""
    return ToolRegistry(EXAMPLE_TOOLS)
