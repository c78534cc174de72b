"""Command-line interface for toolpilot."""
