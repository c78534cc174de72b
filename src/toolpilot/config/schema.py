"""
Pydantic configuration schema for toolpilot.

This module defines all configuration models with validation.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MODEL = "openrouter/anthropic/claude-3-opus"

# =============================================================================
# Provider Configuration
# =============================================================================


class ProviderConfig(BaseModel):
    """Chat-completion backend configuration."""

    model_config = ConfigDict(extra="allow")

    default: str = DEFAULT_MODEL
    aliases: dict[str, str] = Field(default_factory=dict)
    api_base: Optional[str] = None
    timeout: Optional[float] = Field(
        default=120.0,
        gt=0,
        description="Request timeout in seconds, enforced by the transport",
    )

    def resolve_model(self, model: Optional[str]) -> str:
        """Resolve a model name or alias, falling back to the default."""
        if not model or model == "default":
            model = self.default
        return self.aliases.get(model, model)


# =============================================================================
# Agent Configuration
# =============================================================================


class AgentConfig(BaseModel):
    """Configuration for the agent orchestrator. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    system_prompt: Optional[str] = Field(
        default=None,
        description="Base system prompt (None = built-in default sentence)",
    )

    model: Optional[str] = Field(
        default=None,
        description="Model identifier (None = provider default)",
    )

    temperature: Optional[float] = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )

    max_tokens: Optional[int] = Field(
        default=2000,
        ge=1,
        description="Maximum tokens in each model response",
    )

    missing_tool_policy: Literal["skip", "report"] = Field(
        default="skip",
        description=(
            "What to do when the model calls an unregistered tool: "
            "skip it silently or report an error message back to the model"
        ),
    )


# =============================================================================
# Tools / Logging Configuration
# =============================================================================


class ToolsConfig(BaseModel):
    """Built-in tool selection."""

    enabled: Optional[list[str]] = Field(
        default=None,
        description="Built-in tools to register (None = all)",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    show_path: bool = False


# =============================================================================
# Root Configuration Model
# =============================================================================


class Config(BaseModel):
    """
    Root configuration model for toolpilot.

    Configuration can be loaded from YAML files and environment variables,
    merged in order of priority.
    """

    model_config = ConfigDict(extra="allow")

    providers: ProviderConfig = Field(default_factory=ProviderConfig)
    agent: AgentConfig = Field(default_factory=AgentConfig)
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def get_default_model(self) -> str:
        """Get the model the agent will use, resolving aliases."""
        return self.providers.resolve_model(self.agent.model)
