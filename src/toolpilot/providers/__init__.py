"""
Chat-completion providers for toolpilot.

Exports the ChatClient protocol, the LiteLLM-backed client, wire models and
provider errors.
"""

from toolpilot.providers.client import ChatClient, LiteLLMChatClient
from toolpilot.providers.exceptions import (
    AuthenticationError,
    ContextLengthExceededError,
    FailureType,
    InvalidRequestError,
    NetworkError,
    ProviderError,
    RateLimitError,
    ServerError,
    classify_error,
    to_provider_error,
)
from toolpilot.providers.models import ChatCompletionRequest, Message, MessageRole

__all__ = [
    # Clients
    "ChatClient",
    "LiteLLMChatClient",
    # Models
    "ChatCompletionRequest",
    "Message",
    "MessageRole",
    # Exceptions
    "AuthenticationError",
    "ContextLengthExceededError",
    "FailureType",
    "InvalidRequestError",
    "NetworkError",
    "ProviderError",
    "RateLimitError",
    "ServerError",
    "classify_error",
    "to_provider_error",
]
