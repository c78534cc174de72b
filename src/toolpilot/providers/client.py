"""
Chat-completion clients for toolpilot.

The agent talks to any object satisfying ChatClient; LiteLLMChatClient is the
implementation used by the CLI.
"""

import logging
from typing import Any, Protocol, runtime_checkable

import litellm
from litellm import acompletion

from toolpilot.config.schema import ProviderConfig
from toolpilot.providers.exceptions import to_provider_error
from toolpilot.providers.models import ChatCompletionRequest

logger = logging.getLogger(__name__)

# Drop params a given backend does not support instead of failing
litellm.drop_params = True


@runtime_checkable
class ChatClient(Protocol):
    """Anything that can answer a chat-completion request.

    The response must expose ``choices[0].message`` with ``role``,
    ``content`` and optionally ``tool_calls``; attribute or mapping access.
    """

    async def create_chat_completion(self, request: ChatCompletionRequest) -> Any: ...


class LiteLLMChatClient:
    """ChatClient backed by ``litellm.acompletion``.

    No retries and no fallback: every failure is translated into the
    ProviderError hierarchy and raised.
    """

    def __init__(self, config: ProviderConfig | None = None):
        """
        Initialize the client.

        Args:
            config: Provider configuration. Defaults to ProviderConfig().
        """
        self.config = config or ProviderConfig()

    def _extract_provider(self, model: str) -> str:
        """Extract provider name from model string."""
        if "/" in model:
            return model.split("/")[0]
        return "unknown"

    def build_kwargs(self, request: ChatCompletionRequest) -> dict[str, Any]:
        """Build the keyword arguments passed to acompletion."""
        kwargs = request.to_kwargs()
        kwargs["model"] = self.config.resolve_model(request.model)
        if self.config.api_base:
            kwargs["api_base"] = self.config.api_base
        if self.config.timeout:
            kwargs["timeout"] = self.config.timeout
        return kwargs

    async def create_chat_completion(self, request: ChatCompletionRequest) -> Any:
        """
        Send a chat-completion request.

        Raises:
            ProviderError: Or the subclass matching the failure.
        """
        kwargs = self.build_kwargs(request)
        model = kwargs["model"]
        logger.debug(
            f"Chat completion request: model={model} messages={len(request.messages)} "
            f"tools={len(request.tools or [])}"
        )

        try:
            response = await acompletion(**kwargs)
        except Exception as e:
            error = to_provider_error(e, self._extract_provider(model))
            logger.error(f"Chat completion failed ({type(error).__name__}): {error}")
            raise error from e

        logger.debug(f"Chat completion response received from {model}")
        return response
