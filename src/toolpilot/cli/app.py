"""
Main Typer application for the toolpilot CLI.

This module defines the root CLI application and registers all commands.
"""

from pathlib import Path
from typing import Annotated

import typer

from toolpilot import __version__
from toolpilot.cli.commands import chat, tools
from toolpilot.cli.output import print_info

app = typer.Typer(
    name="toolpilot",
    help="LLM agent that calls typed tools on your behalf.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        print_info(f"toolpilot version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Config file to use instead of ./.toolpilot.yaml.",
        ),
    ] = None,
) -> None:
    """
    [bold blue]toolpilot[/bold blue] - tool-calling AI agent

    Use [bold]toolpilot chat[/bold] for a conversation or
    [bold]toolpilot ask[/bold] for a single question.
    """
    ctx.obj = {"verbose": verbose, "config_path": config_path}


app.command("chat")(chat.chat)
app.command("ask")(chat.ask)
app.add_typer(tools.app, name="tools")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
