"""
Provider exceptions for toolpilot.

Defines the errors raised by chat-completion clients and the mapping from
LiteLLM exceptions onto them.
"""

from enum import Enum

import litellm


class FailureType(Enum):
    """Classification of provider failures."""

    RATE_LIMIT = "rate_limit"
    AUTH_ERROR = "auth_error"
    NETWORK_ERROR = "network_error"
    SERVER_ERROR = "server_error"
    CONTEXT_LENGTH = "context_length"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN = "unknown"


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, message: str, provider: str | None = None):
        super().__init__(message)
        self.provider = provider


class AuthenticationError(ProviderError):
    """API key invalid or missing."""

    pass


class RateLimitError(ProviderError):
    """Provider rate limit exceeded."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        retry_after: int | None = None,
    ):
        super().__init__(message, provider)
        self.retry_after = retry_after


class ContextLengthExceededError(ProviderError):
    """Request exceeded the model's context length."""

    pass


class NetworkError(ProviderError):
    """Network-related error (connection, timeout, etc.)."""

    pass


class ServerError(ProviderError):
    """Provider server error (5xx status codes)."""

    pass


class InvalidRequestError(ProviderError):
    """Invalid request sent to provider."""

    pass


_ERROR_CLASSES: dict[FailureType, type[ProviderError]] = {
    FailureType.RATE_LIMIT: RateLimitError,
    FailureType.AUTH_ERROR: AuthenticationError,
    FailureType.NETWORK_ERROR: NetworkError,
    FailureType.SERVER_ERROR: ServerError,
    FailureType.CONTEXT_LENGTH: ContextLengthExceededError,
    FailureType.INVALID_REQUEST: InvalidRequestError,
    FailureType.UNKNOWN: ProviderError,
}


def classify_error(error: Exception) -> FailureType:
    """
    Classify an exception into a failure type.

    Args:
        error: The exception to classify.

    Returns:
        The failure type classification.
    """
    # Order matters: ContextWindowExceededError subclasses BadRequestError
    if isinstance(error, litellm.exceptions.RateLimitError):
        return FailureType.RATE_LIMIT
    if isinstance(error, litellm.exceptions.AuthenticationError):
        return FailureType.AUTH_ERROR
    if isinstance(error, litellm.exceptions.ContextWindowExceededError):
        return FailureType.CONTEXT_LENGTH
    if isinstance(
        error,
        (
            litellm.exceptions.APIConnectionError,
            litellm.exceptions.ServiceUnavailableError,
            litellm.exceptions.Timeout,
        ),
    ):
        return FailureType.NETWORK_ERROR
    if isinstance(error, litellm.exceptions.BadRequestError):
        return FailureType.INVALID_REQUEST
    if isinstance(error, litellm.exceptions.APIError):
        status = getattr(error, "status_code", None)
        if status and 500 <= status < 600:
            return FailureType.SERVER_ERROR
        if status and 400 <= status < 500:
            return FailureType.INVALID_REQUEST
        return FailureType.UNKNOWN

    if isinstance(error, (ConnectionError, TimeoutError)):
        return FailureType.NETWORK_ERROR

    if isinstance(error, ProviderError):
        for failure_type, error_class in _ERROR_CLASSES.items():
            if failure_type is not FailureType.UNKNOWN and isinstance(error, error_class):
                return failure_type

    return FailureType.UNKNOWN


def to_provider_error(error: Exception, provider: str | None = None) -> ProviderError:
    """
    Translate any exception into the matching ProviderError subclass.

    ProviderError instances are returned unchanged.
    """
    if isinstance(error, ProviderError):
        return error

    error_class = _ERROR_CLASSES[classify_error(error)]
    if error_class is RateLimitError:
        return RateLimitError(
            str(error), provider, retry_after=getattr(error, "retry_after", None)
        )
    return error_class(str(error), provider)
