"""OpenRouter LLM adapter.

OpenRouter exposes an OpenAI-compatible API at https://openrouter.ai/api/v1
and routes to many upstream models. Reasoning models (e.g. DeepSeek R1) may
put their output in ``message.reasoning`` instead of ``message.content``.
"""

from __future__ import annotations

import logging
import time

import httpx

from bizplan.config import Settings, get_settings
from bizplan.errors import GenerationFailed
from bizplan.llm.base import LLMAdapter
from bizplan.schemas import LLMMessage, LLMResponse


logger = logging.getLogger(__name__)


class OpenRouterAdapter(LLMAdapter):
    """OpenRouter API adapter using the OpenAI-compatible endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = settings or get_settings()
        self.api_key = api_key or settings.openrouter_api_key
        self.base_url = base_url or settings.openrouter_base_url
        self.default_model = settings.openrouter_model
        self.timeout = timeout or settings.generation_timeout_seconds

        if not self.api_key:
            raise ValueError("OpenRouter API key not configured")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        # Optional attribution headers for openrouter.ai rankings
        if settings.openrouter_site_url:
            headers["HTTP-Referer"] = settings.openrouter_site_url
        if settings.openrouter_site_name:
            headers["X-Title"] = settings.openrouter_site_name

        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=self.timeout,
            transport=transport,
        )

    @property
    def provider_name(self) -> str:
        return "openrouter"

    async def chat_completion(
        self,
        messages: list[LLMMessage],
        model: str | None = None,
        max_tokens: int = 500,
    ) -> LLMResponse:
        """Send chat completion request to OpenRouter."""
        model = model or self.default_model
        payload = self._build_request(messages=messages, model=model, max_tokens=max_tokens)

        start_time = time.perf_counter()

        try:
            response = await self._client.post("chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            raise GenerationFailed(f"Completion request timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"API Error: {e.response.status_code} {e.response.text[:500]}")
            raise GenerationFailed(
                f"Completion service returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GenerationFailed(f"Completion request failed: {e}") from e
        except ValueError as e:
            raise GenerationFailed("Completion service returned a non-JSON body") from e

        if not isinstance(data, dict):
            raise GenerationFailed("Completion service returned an unexpected body")

        latency_ms = int((time.perf_counter() - start_time) * 1000)
        logger.info(f"Completion from {model} in {latency_ms}ms")
        logger.debug(f"API Response: {data}")

        choices = data.get("choices")
        choice = choices[0] if isinstance(choices, list) and choices and isinstance(choices[0], dict) else {}

        return LLMResponse(
            model=data.get("model") or model,
            usage=data.get("usage") or {},
            finish_reason=choice.get("finish_reason"),
            raw_response=data,
        )

    async def health_check(self) -> bool:
        """Check if OpenRouter is accessible."""
        try:
            response = await self._client.get("models")
            return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()
