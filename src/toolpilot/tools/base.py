"""Tool contract: capability records, schema introspection and tool errors."""

import enum
import logging
import types
import typing
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ValidationError

from toolpilot.tools.models import ToolParameter

logger = logging.getLogger(__name__)

ToolHandler = Callable[..., Awaitable[Any]]

_PRIMITIVES: dict[type, str] = {
    str: "string",
    bool: "boolean",
    int: "number",
    float: "number",
}
_ARRAYS = (list, tuple, set, frozenset)


class ToolError(Exception):
    """Base exception for tool errors."""

    def __init__(self, message: str, tool_name: Optional[str] = None):
        super().__init__(message)
        self.tool_name = tool_name


class ToolNotFoundError(ToolError, KeyError):
    """Requested tool is not registered."""

    def __init__(self, tool_name: str):
        super().__init__(f"Tool '{tool_name}' not found", tool_name)

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return self.args[0]


class DuplicateToolError(ToolError, ValueError):
    """A tool with the same name is already registered."""

    def __init__(self, tool_name: str):
        super().__init__(f"Tool '{tool_name}' is already registered", tool_name)


class ToolValidationError(ToolError):
    """Arguments do not satisfy the tool's schema."""

    def __init__(self, tool_name: str, errors: list[tuple[str, str]]):
        """Initialize error.

        Args:
            tool_name: Tool the arguments were meant for
            errors: (field, message) pairs, one per offending field
        """
        details = "; ".join(f"{name}: {message}" for name, message in errors)
        super().__init__(f"Invalid arguments for tool '{tool_name}': {details}", tool_name)
        self.errors = errors

    @property
    def fields(self) -> list[str]:
        """Names of the offending fields."""
        return [name for name, _ in self.errors]


class ToolExecutionError(ToolError):
    """Raised when the tool's own handler fails.

    The message is the handler's message; the tool name travels on the
    exception so the conversation sees exactly what the tool reported.
    """


def _unwrap_optional(annotation: Any) -> Any:
    origin = typing.get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def describe_annotation(annotation: Any) -> tuple[Optional[str], Optional[list[str]]]:
    """Map a field annotation to a JSON schema type and optional enum.

    Returns:
        (type, enum) or (None, None) for unsupported kinds
    """
    annotation = _unwrap_optional(annotation)
    origin = typing.get_origin(annotation)

    if origin is Literal:
        values = typing.get_args(annotation)
        if values and all(isinstance(value, str) for value in values):
            return "string", list(values)
        return None, None

    if annotation in _ARRAYS or origin in _ARRAYS:
        return "array", None

    if origin is None and isinstance(annotation, type) and issubclass(annotation, enum.Enum):
        values = [member.value for member in annotation]
        if all(isinstance(value, str) for value in values):
            return "string", values
        return None, None

    if annotation in _PRIMITIVES:
        return _PRIMITIVES[annotation], None

    return None, None


def schema_parameters(schema: type[BaseModel]) -> tuple[list[ToolParameter], list[str]]:
    """Introspect a pydantic argument schema.

    Returns:
        Supported parameters in declaration order, and names of skipped fields
    """
    parameters = []
    skipped = []
    for name, info in schema.model_fields.items():
        param_type, options = describe_annotation(info.annotation)
        if param_type is None:
            skipped.append(name)
            continue
        parameters.append(
            ToolParameter(
                name=info.alias or name,
                type=param_type,
                description=info.description,
                required=info.is_required(),
                default=None if info.is_required() else info.get_default(),
                enum=options,
            )
        )
    return parameters, skipped


class _NoArguments(BaseModel):
    pass


@dataclass(frozen=True)
class Tool:
    """A named capability the model may ask to invoke.

    Tools are plain records: metadata, a pydantic model describing the
    arguments, and an async handler receiving the validated arguments as
    keyword arguments.
    """

    name: str
    description: str
    handler: ToolHandler
    schema: type[BaseModel] = _NoArguments
    usage_example: Optional[str] = None
    parameters: tuple[ToolParameter, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Tool name cannot be empty")
        if not self.description:
            raise ValueError("Tool description cannot be empty")

        parameters, skipped = schema_parameters(self.schema)
        if skipped:
            logger.warning(
                f"Tool '{self.name}': unsupported argument types omitted from "
                f"function definition: {', '.join(skipped)}"
            )
        object.__setattr__(self, "parameters", tuple(parameters))

    def get_input_schema(self) -> dict[str, Any]:
        """Get JSON schema for tool input.

        ``required`` is omitted when no argument is required.
        """
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {param.name: param.to_schema() for param in self.parameters},
        }
        required = [param.name for param in self.parameters if param.required]
        if required:
            schema["required"] = required
        return schema

    def get_function_definition(self) -> dict[str, Any]:
        """Get the function-calling definition sent to the model."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.get_input_schema(),
            },
        }

    def validate_arguments(self, arguments: Optional[dict[str, Any]]) -> dict[str, Any]:
        """Validate and coerce arguments, applying schema defaults.

        Raises:
            ToolValidationError: If the arguments do not match the schema
        """
        if arguments is None:
            arguments = {}
        if not isinstance(arguments, dict):
            raise ToolValidationError(
                self.name, [("__root__", f"expected an object, got {type(arguments).__name__}")]
            )

        try:
            validated = self.schema.model_validate(arguments)
        except ValidationError as e:
            errors = [
                (".".join(str(part) for part in error["loc"]) or "__root__", error["msg"])
                for error in e.errors()
            ]
            raise ToolValidationError(self.name, errors) from e

        return validated.model_dump(by_alias=True)

    async def execute(self, **kwargs: Any) -> Any:
        """Run the handler with already validated arguments."""
        return await self.handler(**kwargs)

    def __str__(self) -> str:
        """String representation."""
        return f"Tool({self.name})"


def create_tool(
    name: str,
    description: str,
    handler: ToolHandler,
    schema: type[BaseModel] | None = None,
    usage_example: str | None = None,
) -> Tool:
    """Create a tool from a handler and an argument schema.

    Example:
        class CalculatorArgs(BaseModel):
            expression: str = Field(description="Arithmetic expression")

        async def calculate(expression: str) -> dict:
            ...

        calculator = create_tool(
            name="calculator",
            description="Perform arithmetic calculations",
            handler=calculate,
            schema=CalculatorArgs,
        )
    """
    return Tool(
        name=name,
        description=description,
        handler=handler,
        schema=schema or _NoArguments,
        usage_example=usage_example,
    )
