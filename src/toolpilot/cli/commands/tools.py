"""
toolpilot tools - Inspect and run tools.

Usage:
    toolpilot tools list
    toolpilot tools info <tool-name>
    toolpilot tools run <tool-name> --args '{"expression": "2 + 2"}'
"""

import asyncio
import json
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from toolpilot.cli import session
from toolpilot.cli.output import console, print_error, print_json
from toolpilot.tools.base import ToolError

app = typer.Typer(
    name="tools",
    help="Inspect and run the agent's tools.",
    no_args_is_help=True,
)


@app.command("list")
def list_tools(ctx: typer.Context) -> None:
    """List all registered tools."""
    registry = session.build_registry(session.load_settings(ctx))
    tools = registry.all()

    if not tools:
        console.print("[yellow]No tools registered.[/yellow]")
        return

    table = Table(title="Available Tools")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Parameters", style="magenta")
    table.add_column("Description")

    for tool in tools:
        params = ", ".join(param.name for param in tool.parameters) or "-"
        table.add_row(tool.name, params, escape(tool.description))

    console.print(table)
    console.print(f"\n[dim]Total: {len(tools)} tool(s)[/dim]")


@app.command("info")
def tool_info(
    ctx: typer.Context,
    tool_name: Annotated[
        str,
        typer.Argument(help="Tool name to get info about"),
    ],
) -> None:
    """Show detailed information about a tool."""
    registry = session.build_registry(session.load_settings(ctx))
    tool = registry.get(tool_name)

    if not tool:
        print_error(f"Tool not found: {tool_name}")
        console.print(f"\n[dim]Available tools: {', '.join(registry.names())}[/dim]")
        raise typer.Exit(1)

    console.print(f"\n[bold cyan]{tool.name}[/bold cyan]")
    console.print(f"\n[bold]Description:[/bold]\n{escape(tool.description)}")

    if tool.parameters:
        console.print("\n[bold]Parameters:[/bold]")
        for param in tool.parameters:
            required = "[red]*[/red]" if param.required else ""
            default = f" (default: {param.default})" if param.default is not None else ""
            console.print(f"  • {param.name}{required}: {param.type}{default}", highlight=False)
            details = " ".join(
                part for part in (param.description, param.enum and f"[{', '.join(param.enum)}]") if part
            )
            if details:
                console.print(f"    {escape(details)}", highlight=False)

    if tool.usage_example:
        console.print(f"\n[bold]Example:[/bold]\n{escape(tool.usage_example)}")

    console.print("\n[bold]Function Definition:[/bold]")
    print_json(tool.get_function_definition())


@app.command("run")
def run_tool(
    ctx: typer.Context,
    tool_name: Annotated[
        str,
        typer.Argument(help="Tool name to run"),
    ],
    args: Annotated[
        str,
        typer.Option(
            "--args",
            "-a",
            help="Tool arguments as a JSON object",
        ),
    ] = "{}",
) -> None:
    """Run a tool through the registry and print its result."""
    registry = session.build_registry(session.load_settings(ctx))

    try:
        arguments = json.loads(args)
    except json.JSONDecodeError as e:
        print_error(f"Invalid JSON: {e}")
        raise typer.Exit(1)

    try:
        result = asyncio.run(registry.execute(tool_name, arguments))
    except ToolError as e:
        print_error(str(e))
        raise typer.Exit(1)

    typer.echo(json.dumps(result, default=str))
