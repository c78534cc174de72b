"""CLI command modules."""

from toolpilot.cli.commands import chat, tools

__all__ = [
    "chat",
    "tools",
]
