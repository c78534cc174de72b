"""
Example tools for the toolpilot agent.

These are mock implementations that demonstrate the tool contract: the
calculator evaluates real arithmetic, weather and search return canned data.
"""

import ast
import operator
from typing import Any, Literal, Optional
from urllib.parse import quote

from pydantic import BaseModel, Field

from toolpilot.tools.base import Tool, create_tool

_BINARY_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPERATORS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

# Guards against expressions like 9**9**9 hanging the agent
_MAX_EXPONENT = 1000


def _evaluate_node(node: ast.AST) -> int | float:
    if isinstance(node, ast.Expression):
        return _evaluate_node(node.body)

    if isinstance(node, ast.Constant):
        if isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
            return node.value
        raise ValueError(f"Unsupported constant: {node.value!r}")

    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPERATORS:
        left = _evaluate_node(node.left)
        right = _evaluate_node(node.right)
        if isinstance(node.op, ast.Pow) and abs(right) > _MAX_EXPONENT:
            raise ValueError(f"Exponent too large: {right}")
        return _BINARY_OPERATORS[type(node.op)](left, right)

    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPERATORS:
        return _UNARY_OPERATORS[type(node.op)](_evaluate_node(node.operand))

    raise ValueError(f"Unsupported expression element: {type(node).__name__}")


def evaluate_expression(expression: str) -> int | float:
    """Evaluate an arithmetic expression without eval().

    Supports + - * / // % **, unary signs and parentheses.

    Raises:
        ValueError: If the expression is malformed or uses anything else
    """
    try:
        tree = ast.parse(expression.strip(), mode="eval")
    except SyntaxError as e:
        raise ValueError(f"Error evaluating expression: {e.msg}") from e

    try:
        result = _evaluate_node(tree)
    except ZeroDivisionError as e:
        raise ValueError("Error evaluating expression: division by zero") from e

    if isinstance(result, float) and result.is_integer():
        return int(result)
    return result


class CalculatorArgs(BaseModel):
    expression: str = Field(
        description='The arithmetic expression to evaluate (e.g., "2 + 2")'
    )


async def calculate(expression: str) -> dict[str, Any]:
    return {"result": evaluate_expression(expression)}


class WeatherArgs(BaseModel):
    location: str = Field(description="The city and state, e.g. San Francisco, CA")
    unit: Optional[Literal["celsius", "fahrenheit"]] = Field(
        default="fahrenheit",
        description="The unit of temperature to use. Defaults to fahrenheit.",
    )


async def get_weather(location: str, unit: Optional[str] = "fahrenheit") -> dict[str, Any]:
    unit = unit or "fahrenheit"
    return {
        "location": location,
        "temperature": 22 if unit == "celsius" else 72,
        "unit": unit,
        "condition": "sunny",
        "humidity": 45,
        "wind_speed": 10,
    }


class SearchArgs(BaseModel):
    query: str = Field(description="The search query")


async def web_search(query: str) -> dict[str, Any]:
    encoded = quote(query, safe="")
    return {
        "results": [
            {
                "title": f"Results for {query} - Page 1",
                "url": f"https://example.com/search?q={encoded}",
                "snippet": (
                    f'This is an example search result for "{query}". In a real '
                    "implementation, this would contain actual search results."
                ),
            },
            {
                "title": f"Results for {query} - Page 2",
                "url": f"https://example.com/search?q={encoded}&page=2",
                "snippet": (
                    f'Another example search result for "{query}". This demonstrates '
                    "returning multiple results from a single search."
                ),
            },
        ]
    }


calculator_tool = create_tool(
    name="calculator",
    description="Perform arithmetic calculations",
    handler=calculate,
    schema=CalculatorArgs,
    usage_example='To calculate 237 * 15, call it with {"expression": "237 * 15"}.',
)

weather_tool = create_tool(
    name="get_weather",
    description="Get weather information for a location",
    handler=get_weather,
    schema=WeatherArgs,
    usage_example='To check the weather in New York, call it with {"location": "New York"}.',
)

search_tool = create_tool(
    name="web_search",
    description="Search the web for information",
    handler=web_search,
    schema=SearchArgs,
    usage_example='To look up recent news, call it with {"query": "latest AI news"}.',
)

EXAMPLE_TOOLS: tuple[Tool, ...] = (weather_tool, calculator_tool, search_tool)
