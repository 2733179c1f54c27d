"""Pydantic schemas for the plan-generation contracts.

These schemas define the contracts between:
- API endpoints and clients
- The completion service (outbound LLM calls)
- Database serialization
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Enums
# =============================================================================

class RequestState(str, Enum):
    """Per-request lifecycle of a plan generation."""
    RECEIVED = "received"
    VALIDATED = "validated"
    GENERATED = "generated"
    PERSISTED = "persisted"
    COMPLETED = "completed"
    FAILED = "failed"


class ExportFormat(str, Enum):
    """Document formats a plan can be exported to."""
    PDF = "pdf"
    DOCX = "docx"
    TXT = "txt"


# =============================================================================
# API Request/Response Schemas
# =============================================================================

class GeneratePlanRequest(BaseModel):
    """Body of POST /generate-plan.

    Missing fields default to empty strings so that validation happens in the
    service (and answers 400) rather than in FastAPI (which would answer 422).
    """
    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "businessName": "Sample Coffee Shop",
                "industry": "Food and Beverage",
                "targetMarket": "Young adults aged 18-35 in urban areas",
                "usps": "Specialty coffee blends, cozy atmosphere, community events",
            }
        },
    )

    business_name: str | None = Field(default="", alias="businessName")
    industry: str | None = Field(default="")
    target_market: str | None = Field(default=None, alias="targetMarket")
    usps: str | None = Field(default=None)


class GeneratePlanResponse(BaseModel):
    """Successful response of POST /generate-plan."""
    plan: str


class PlanRecordResponse(BaseModel):
    """A persisted plan as returned by GET /plans."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    business_name: str = Field(alias="businessName")
    industry: str
    plan: str
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")


# =============================================================================
# LLM Schemas
# =============================================================================

class LLMMessage(BaseModel):
    """A single message in an LLM conversation."""
    role: Literal["system", "user", "assistant"] = Field(...)
    content: str = Field(...)


class LLMResponse(BaseModel):
    """Response from an LLM provider.

    ``raw_response`` keeps the full decoded body; the shape varies by
    provider and model, so text extraction works on it rather than on
    typed fields.
    """
    model: str
    usage: dict[str, Any] = Field(default_factory=dict)
    finish_reason: str | None = None
    raw_response: dict[str, Any] = Field(default_factory=dict)
