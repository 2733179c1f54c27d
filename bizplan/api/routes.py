"""FastAPI routes for the plan generator API.

Endpoints:
- GET  /               - Welcome text
- GET  /health         - Health check
- POST /generate-plan  - Generate (or regenerate) and save a plan
- GET  /plans          - List all saved plans
- GET  /plans/export   - Download a saved plan as pdf, docx or txt
"""

from __future__ import annotations

import io
import logging
from urllib.parse import quote

from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse, StreamingResponse

from bizplan.api.dependencies import get_plan_service
from bizplan.config import get_settings
from bizplan.errors import PlanNotFound, StoreUnavailable
from bizplan.export import MEDIA_TYPES, PlanDocument, export_filename, render
from bizplan.schemas import (
    ExportFormat,
    GeneratePlanRequest,
    GeneratePlanResponse,
    PlanRecordResponse,
)
from bizplan.service import PlanService


logger = logging.getLogger(__name__)
router = APIRouter()

settings = get_settings()


# =============================================================================
# Root / Health
# =============================================================================

@router.get("/", response_class=PlainTextResponse)
async def root() -> str:
    """Welcome text."""
    return "Welcome to the Business Plan Generator!"


@router.get("/health")
async def health(service: PlanService = Depends(get_plan_service)) -> dict:
    """Health check endpoint.

    ``status`` is process liveness; ``completion`` reports whether the
    completion service is configured and reachable.
    """
    completion_ok = await service.completion_available()
    return {
        "status": "ok",
        "version": settings.app_version,
        "environment": settings.environment,
        "completion": "ok" if completion_ok else "unreachable",
    }


# =============================================================================
# Plans Endpoints
# =============================================================================

@router.post("/generate-plan", response_model=GeneratePlanResponse)
async def generate_plan(
    request: GeneratePlanRequest,
    service: PlanService = Depends(get_plan_service),
) -> GeneratePlanResponse:
    """Generate a plan and save it under (businessName, industry).

    A second request for the same pair overwrites the saved plan.
    """
    logger.info(f"Received request: businessName={request.business_name!r} industry={request.industry!r}")

    plan_text = await service.generate_plan(
        request.business_name,
        request.industry,
        target_market=request.target_market,
        usps=request.usps,
    )
    return GeneratePlanResponse(plan=plan_text)


@router.get("/plans", response_model=list[PlanRecordResponse])
async def list_plans(
    service: PlanService = Depends(get_plan_service),
) -> list[PlanRecordResponse]:
    """List all saved plans."""
    try:
        records = await service.list_plans()
    except StoreUnavailable as e:
        raise StoreUnavailable(e.message, public_message="Error fetching plans") from e

    return [
        PlanRecordResponse(
            business_name=record.business_name,
            industry=record.industry,
            plan=record.plan_text,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
        for record in records
    ]


@router.get("/plans/export")
async def export_plan(
    business_name: str = Query(..., alias="businessName", min_length=1),
    industry: str = Query(..., min_length=1),
    fmt: ExportFormat = Query(default=ExportFormat.PDF, alias="format"),
    target_market: str | None = Query(default=None, alias="targetMarket"),
    usps: str | None = Query(default=None),
    service: PlanService = Depends(get_plan_service),
) -> StreamingResponse:
    """Download a saved plan as a document."""
    try:
        record = await service.get_plan(business_name, industry)
    except StoreUnavailable as e:
        raise StoreUnavailable(e.message, public_message="Error fetching plans") from e

    if not record:
        raise PlanNotFound(f"No plan for ({business_name!r}, {industry!r})")

    doc = PlanDocument(
        business_name=record.business_name,
        industry=record.industry,
        plan=record.plan_text,
        target_market=target_market,
        usps=usps,
    )
    content = render(doc, fmt)

    # RFC 5987 encoding for non-ASCII filenames
    disposition = f"attachment; filename*=UTF-8''{quote(export_filename(doc, fmt))}"

    return StreamingResponse(
        io.BytesIO(content),
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": disposition},
    )
