"""Completion client: turns a business description into plan text.

Builds the prompt, calls the configured adapter and extracts text from the
response. The adapter is created on first use, so a missing credential
fails individual requests instead of application startup. Retries are off
by default (``generation_max_retries=0``); when enabled, each retry waits
``attempt * generation_retry_backoff_seconds``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Union

from bizplan.config import Settings, get_settings
from bizplan.errors import GenerationFailed
from bizplan.llm.base import LLMAdapter
from bizplan.llm.extraction import DEFAULT_STRATEGIES, ExtractionStrategy, extract_plan_text
from bizplan.llm.prompts import format_plan_prompt
from bizplan.schemas import LLMMessage


logger = logging.getLogger(__name__)

AdapterSource = Union[LLMAdapter, Callable[[], LLMAdapter]]


class CompletionClient:
    """Generates plan text through an LLM adapter (or a factory building one)."""

    def __init__(
        self,
        adapter: AdapterSource,
        settings: Settings | None = None,
        strategies: tuple[ExtractionStrategy, ...] = DEFAULT_STRATEGIES,
    ):
        settings = settings or get_settings()
        if isinstance(adapter, LLMAdapter):
            self._adapter: LLMAdapter | None = adapter
            self._adapter_factory = None
        else:
            self._adapter = None
            self._adapter_factory = adapter
        self.model = settings.openrouter_model
        self.max_tokens = settings.generation_max_tokens
        self.max_retries = settings.generation_max_retries
        self.retry_backoff = settings.generation_retry_backoff_seconds
        self.include_market_details = settings.prompt_include_market_details
        self.strategies = strategies

    def _get_adapter(self) -> LLMAdapter:
        """Get or create the adapter."""
        if self._adapter is None:
            try:
                self._adapter = self._adapter_factory()
            except ValueError as e:
                raise GenerationFailed(f"Completion service not configured: {e}") from e
        return self._adapter

    async def generate(
        self,
        business_name: str,
        industry: str,
        target_market: str | None = None,
        usps: str | None = None,
    ) -> str:
        """Return non-empty plan text or raise GenerationFailed."""
        prompt = format_plan_prompt(
            business_name,
            industry,
            target_market=target_market,
            usps=usps,
            include_market_details=self.include_market_details,
        )
        messages = [LLMMessage(role="user", content=prompt)]
        adapter = self._get_adapter()

        attempt = 0
        while True:
            try:
                return await self._generate_once(adapter, messages)
            except GenerationFailed as e:
                if attempt >= self.max_retries:
                    raise
                attempt += 1
                delay = attempt * self.retry_backoff
                logger.warning(
                    f"Generation attempt {attempt} failed ({e.message}), retrying in {delay:.1f}s"
                )
                await asyncio.sleep(delay)

    async def _generate_once(self, adapter: LLMAdapter, messages: list[LLMMessage]) -> str:
        logger.info(f"Sending request to {adapter.provider_name}/{self.model}...")
        response = await adapter.chat_completion(
            messages=messages,
            model=self.model,
            max_tokens=self.max_tokens,
        )

        plan_text = extract_plan_text(response.raw_response, self.strategies)
        if not plan_text:
            if not response.raw_response.get("choices"):
                logger.warning("No choices found in API response")
            raise GenerationFailed("No valid plan text returned from API")

        logger.info(f"Extracted plan text ({len(plan_text)} chars, finish_reason={response.finish_reason})")
        return plan_text

    async def health_check(self) -> bool:
        """True when the completion service is configured and reachable."""
        try:
            adapter = self._get_adapter()
        except GenerationFailed as e:
            logger.warning(e.message)
            return False
        return await adapter.health_check()

    async def close(self) -> None:
        if self._adapter is not None:
            await self._adapter.close()
