"""Abstract base class for LLM adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from bizplan.schemas import LLMMessage, LLMResponse


class LLMAdapter(ABC):
    """Abstract base class for chat-completion provider adapters.

    Adapters send the request and return the decoded body untouched in
    ``LLMResponse.raw_response``. Pulling usable text out of it is left to
    the extraction strategies, since the shape varies by provider and model.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'openrouter')."""
        ...

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        max_tokens: int = 500,
    ) -> LLMResponse:
        """Send a chat completion request.

        Args:
            messages: List of conversation messages
            model: Model name (uses default if None)
            max_tokens: Maximum tokens in response

        Returns:
            LLMResponse wrapping the raw decoded body

        Raises:
            GenerationFailed: transport error, timeout, non-2xx status or a
                body that is not a JSON object
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the provider API is accessible.

        Returns:
            True if API is accessible, False otherwise
        """
        ...

    async def close(self) -> None:
        """Release any held connections."""

    def _build_request(
        self,
        messages: list[LLMMessage],
        model: str,
        max_tokens: int,
    ) -> dict[str, Any]:
        """Build the API request payload.

        This is a helper method that subclasses can use or override.
        """
        return {
            "model": model,
            "messages": [m.model_dump(exclude_none=True) for m in messages],
            "max_tokens": max_tokens,
        }
