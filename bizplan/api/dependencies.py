"""FastAPI dependencies resolving process-scoped components from app state."""

from __future__ import annotations

from fastapi import Request

from bizplan.service import PlanService


def get_plan_service(request: Request) -> PlanService:
    """The PlanService wired up in the application lifespan."""
    return request.app.state.plan_service
