"""Prompt templates for plan generation."""

from __future__ import annotations

# =============================================================================
# Plan Prompts
# =============================================================================

PLAN_PROMPT = "Create a business plan for {business_name} in the {industry} industry."

MARKET_DETAILS_PROMPT = """
Target market: {target_market}
Unique selling points: {usps}"""


def format_plan_prompt(
    business_name: str,
    industry: str,
    target_market: str | None = None,
    usps: str | None = None,
    include_market_details: bool = False,
) -> str:
    """Format the plan prompt.

    Target market and USPs are appended only when ``include_market_details``
    is set and at least one of them is given.
    """
    prompt = PLAN_PROMPT.format(business_name=business_name, industry=industry)
    if include_market_details and (target_market or usps):
        prompt += MARKET_DETAILS_PROMPT.format(
            target_market=target_market or "not specified",
            usps=usps or "not specified",
        )
    return prompt
