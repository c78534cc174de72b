"""
Output formatting utilities for the CLI.

Provides consistent output formatting across all CLI commands.
"""

import json
import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel

# Global console instances
console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]✗ Error:[/red] {escape(message)}")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]i[/blue] {message}")


def print_dim(message: str) -> None:
    """Print de-emphasized progress text."""
    console.print(escape(message), style="dim", highlight=False)


def print_panel(content: str, title: str | None = None) -> None:
    """Print content in a panel."""
    console.print(Panel(escape(content), title=title))


def print_json(data: Any) -> None:
    """Print data as indented JSON."""
    console.print_json(json.dumps(data, default=str))


def setup_logging(level: str = "WARNING", show_path: bool = False) -> None:
    """Route log records through a Rich handler on stderr."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=show_path, rich_tracebacks=True)],
        force=True,
    )
