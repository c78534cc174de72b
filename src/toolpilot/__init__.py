"""
toolpilot - LLM tool-calling agent

Registers typed tools, advertises them to a chat model, executes the calls
the model asks for and feeds the results back for a final answer.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("toolpilot")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = [
    "__version__",
]
