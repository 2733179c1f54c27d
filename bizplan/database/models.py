"""SQLModel database tables.

Tables:
- PlanRecord: generated business plans, one row per (business_name, industry)
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, Text, UniqueConstraint
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# PlanRecord Model
# =============================================================================

class PlanRecord(SQLModel, table=True):
    """A generated business plan keyed by business name and industry."""

    __tablename__ = "plans"
    __table_args__ = (
        UniqueConstraint("business_name", "industry", name="uq_plans_business_industry"),
    )

    id: int | None = Field(default=None, primary_key=True)
    business_name: str = Field(index=True, description="Business name (part of the key)")
    industry: str = Field(description="Industry (part of the key)")

    plan_text: str = Field(sa_column=Column(Text, nullable=False), description="Generated plan")

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow, description="Set once, at first creation")
    updated_at: datetime | None = Field(default=None)
