"""
toolpilot chat / ask - Talk to the agent.

Usage:
    toolpilot chat
    toolpilot ask "What is 237 * 15?"
    toolpilot ask "Weather in Paris?" --json
"""

import asyncio
import json
from typing import Annotated, Any

import typer

from toolpilot.agent import Agent, AgentResponse, EventType
from toolpilot.cli import session
from toolpilot.cli.output import console, print_dim, print_error, print_panel
from toolpilot.providers import AuthenticationError, ProviderError

EXIT_COMMANDS = {"exit", "quit"}
RESET_COMMAND = "/reset"


def attach_progress(agent: Agent) -> None:
    """Print agent progress events as they happen."""

    def on_thinking(kind: EventType, text: Any) -> None:
        print_dim(str(text))

    def on_tool_start(kind: EventType, payload: Any) -> None:
        print_dim(f"→ {payload['tool']}({json.dumps(payload['args'], default=str)})")

    def on_tool_end(kind: EventType, payload: Any) -> None:
        print_dim(f"← {payload['tool']}: {json.dumps(payload['result'], default=str)}")

    agent.on(EventType.THINKING, on_thinking)
    agent.on(EventType.TOOL_START, on_tool_start)
    agent.on(EventType.TOOL_END, on_tool_end)


def show_response(response: AgentResponse) -> None:
    print_panel(response.message or "(empty response)", title="Assistant")
    if response.tools_used:
        print_dim(f"Tools used: {', '.join(response.tools_used)}")


def _report_provider_error(error: ProviderError) -> None:
    print_error(str(error))
    if isinstance(error, AuthenticationError):
        console.print("[dim]Check the API key for your provider.[/dim]")


def chat(ctx: typer.Context) -> None:
    """Start an interactive conversation with the agent.

    Type 'exit' or 'quit' to leave, '/reset' to start over.
    """
    config = session.load_settings(ctx)
    agent = session.build_agent(config)
    attach_progress(agent)

    console.print(
        f"[bold blue]toolpilot[/bold blue] chat with {len(agent.registry)} tools. "
        "Type [bold]exit[/bold] to leave, [bold]/reset[/bold] to start over."
    )
    asyncio.run(_chat_loop(agent))


async def _chat_loop(agent: Agent) -> None:
    while True:
        try:
            user_input = console.input("\n[bold green]You:[/bold green] ").strip()
        except (EOFError, KeyboardInterrupt):
            console.print()
            return

        if not user_input:
            continue
        if user_input.lower() in EXIT_COMMANDS:
            return
        if user_input == RESET_COMMAND:
            agent.reset()
            print_dim("Conversation reset.")
            continue

        try:
            response = await agent.process_input(user_input)
        except ProviderError as e:
            _report_provider_error(e)
            continue

        show_response(response)


def ask(
    ctx: typer.Context,
    question: Annotated[
        str,
        typer.Argument(help="Question to ask the agent."),
    ],
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the answer and the tools used as JSON.",
        ),
    ] = False,
) -> None:
    """Ask the agent a single question."""
    config = session.load_settings(ctx)
    agent = session.build_agent(config)
    if not json_output:
        attach_progress(agent)

    try:
        response = asyncio.run(agent.process_input(question))
    except ProviderError as e:
        _report_provider_error(e)
        raise typer.Exit(1)

    if json_output:
        typer.echo(json.dumps(response.model_dump()))
    else:
        show_response(response)
