"""Tests for CompletionClient: prompt building, extraction fallback, retries."""

from __future__ import annotations

import pytest

from bizplan.errors import GenerationFailed
from bizplan.llm.base import LLMAdapter
from bizplan.llm.completion import CompletionClient
from bizplan.llm.prompts import format_plan_prompt
from bizplan.schemas import LLMResponse


class FakeAdapter(LLMAdapter):
    """Returns queued bodies (or raises queued errors) in order."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.requests = []

    @property
    def provider_name(self) -> str:
        return "fake"

    async def chat_completion(self, messages, model=None, max_tokens=500):
        self.requests.append({"messages": messages, "model": model, "max_tokens": max_tokens})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return LLMResponse(model=model or "fake", raw_response=outcome)

    async def health_check(self) -> bool:
        return True


def _body(**message):
    return {"choices": [{"message": message, "finish_reason": "stop"}]}


async def test_generate_builds_single_user_prompt(settings):
    adapter = FakeAdapter(_body(content="A plan for a coffee shop..."))
    client = CompletionClient(adapter, settings=settings)

    text = await client.generate("Sample Coffee Shop", "Food and Beverage")

    assert text == "A plan for a coffee shop..."
    request = adapter.requests[0]
    assert request["model"] == "test/model"
    assert request["max_tokens"] == 500
    assert len(request["messages"]) == 1
    assert request["messages"][0].role == "user"
    assert request["messages"][0].content == (
        "Create a business plan for Sample Coffee Shop in the Food and Beverage industry."
    )


async def test_generate_uses_reasoning_when_content_empty(settings):
    adapter = FakeAdapter(_body(content="", reasoning="Step one: roast beans"))
    client = CompletionClient(adapter, settings=settings)

    assert await client.generate("X", "Y") == "Step one: roast beans"


async def test_generate_fails_when_no_candidate_text(settings):
    adapter = FakeAdapter(_body(content="", reasoning=None))
    client = CompletionClient(adapter, settings=settings)

    with pytest.raises(GenerationFailed, match="No valid plan text"):
        await client.generate("X", "Y")


async def test_generate_fails_when_no_choices(settings):
    client = CompletionClient(FakeAdapter({"choices": []}), settings=settings)

    with pytest.raises(GenerationFailed):
        await client.generate("X", "Y")


async def test_no_retry_by_default(settings):
    adapter = FakeAdapter(GenerationFailed("boom"), _body(content="late plan"))
    client = CompletionClient(adapter, settings=settings)

    with pytest.raises(GenerationFailed):
        await client.generate("X", "Y")
    assert len(adapter.requests) == 1


async def test_bounded_retry_when_enabled(settings):
    settings.generation_max_retries = 2
    settings.generation_retry_backoff_seconds = 0
    adapter = FakeAdapter(GenerationFailed("boom"), _body(content=""), _body(content="third time"))
    client = CompletionClient(adapter, settings=settings)

    assert await client.generate("X", "Y") == "third time"
    assert len(adapter.requests) == 3


async def test_retries_exhausted_raises_last_error(settings):
    settings.generation_max_retries = 1
    settings.generation_retry_backoff_seconds = 0
    adapter = FakeAdapter(GenerationFailed("first"), GenerationFailed("second"))
    client = CompletionClient(adapter, settings=settings)

    with pytest.raises(GenerationFailed, match="second"):
        await client.generate("X", "Y")


async def test_market_details_only_when_enabled(settings):
    adapter = FakeAdapter(_body(content="p"), _body(content="p"))
    await CompletionClient(adapter, settings=settings).generate(
        "X", "Y", target_market="students", usps="cheap"
    )
    assert "students" not in adapter.requests[0]["messages"][0].content

    settings.prompt_include_market_details = True
    await CompletionClient(adapter, settings=settings).generate(
        "X", "Y", target_market="students", usps="cheap"
    )
    prompt = adapter.requests[1]["messages"][0].content
    assert "Target market: students" in prompt
    assert "Unique selling points: cheap" in prompt


def test_format_plan_prompt_without_details_ignores_flag():
    prompt = format_plan_prompt("X", "Y", include_market_details=True)
    assert prompt == "Create a business plan for X in the Y industry."


async def test_adapter_is_built_on_first_use(settings):
    built = []

    def factory():
        built.append(FakeAdapter(_body(content="plan")))
        return built[-1]

    client = CompletionClient(factory, settings=settings)
    assert built == []

    assert await client.generate("X", "Y") == "plan"
    assert await client.health_check() is True
    assert len(built) == 1


async def test_unconfigured_adapter_fails_per_request(settings):
    def factory():
        raise ValueError("OpenRouter API key not configured")

    client = CompletionClient(factory, settings=settings)

    with pytest.raises(GenerationFailed, match="not configured"):
        await client.generate("X", "Y")
    assert await client.health_check() is False
    await client.close()
