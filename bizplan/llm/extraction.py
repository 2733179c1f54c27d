"""Text extraction from loosely shaped chat-completion responses.

Providers disagree on where the generated text lives. Each strategy checks
one location and returns the text or None; ``extract_plan_text`` tries them
in order and keeps the first non-empty result.
"""

from __future__ import annotations

from typing import Any, Callable, Optional

ExtractionStrategy = Callable[[dict[str, Any]], Optional[str]]


def _first_choice(response: dict[str, Any]) -> dict[str, Any]:
    choices = response.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        return choices[0]
    return {}


def _message_field(response: dict[str, Any], field: str) -> str | None:
    message = _first_choice(response).get("message")
    if not isinstance(message, dict):
        return None
    value = message.get(field)
    return value if isinstance(value, str) else None


def message_content(response: dict[str, Any]) -> str | None:
    """choices[0].message.content"""
    return _message_field(response, "content")


def message_reasoning(response: dict[str, Any]) -> str | None:
    """choices[0].message.reasoning (reasoning-model variants)"""
    return _message_field(response, "reasoning")


def choice_text(response: dict[str, Any]) -> str | None:
    """choices[0].text (legacy completion shape)"""
    value = _first_choice(response).get("text")
    return value if isinstance(value, str) else None


DEFAULT_STRATEGIES: tuple[ExtractionStrategy, ...] = (
    message_content,
    message_reasoning,
    choice_text,
)


def extract_plan_text(
    response: dict[str, Any],
    strategies: tuple[ExtractionStrategy, ...] = DEFAULT_STRATEGIES,
) -> str | None:
    """Return the first non-blank candidate, or None if every strategy misses."""
    for strategy in strategies:
        candidate = strategy(response)
        if candidate and candidate.strip():
            return candidate
    return None
