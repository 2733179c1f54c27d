"""Plan service: validation -> completion -> upsert -> response.

Each call is independent and walks
``Received -> Validated -> Generated -> Persisted -> Completed``, leaving
early to ``Failed`` on any error. Errors propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Protocol

from bizplan.database.models import PlanRecord
from bizplan.errors import GenerationFailed, InvalidRequest, StoreUnavailable
from bizplan.schemas import RequestState


logger = logging.getLogger(__name__)


class PlanGenerator(Protocol):
    async def generate(
        self,
        business_name: str,
        industry: str,
        target_market: str | None = None,
        usps: str | None = None,
    ) -> str: ...

    async def health_check(self) -> bool: ...


class PlanRepository(Protocol):
    async def find_by_key(self, business_name: str, industry: str) -> PlanRecord | None: ...

    async def upsert(self, business_name: str, industry: str, plan_text: str) -> PlanRecord: ...

    async def list_all(self) -> list[PlanRecord]: ...


class PlanService:
    """Orchestrates plan generation and persistence for one request at a time."""

    def __init__(self, generator: PlanGenerator, store: PlanRepository):
        self.generator = generator
        self.store = store

    async def generate_plan(
        self,
        business_name: str | None,
        industry: str | None,
        target_market: str | None = None,
        usps: str | None = None,
    ) -> str:
        """Generate, persist and return the plan text for a business.

        Raises:
            InvalidRequest: business name or industry is blank
            GenerationFailed: the completion service produced no text
            StoreUnavailable: the plan was generated but not saved; the text
                is available as ``plan_text`` on the exception
        """
        state = RequestState.RECEIVED
        business_name = (business_name or "").strip()
        industry = (industry or "").strip()
        logger.info(f"[{business_name!r}/{industry!r}] {state.value}")

        if not business_name or not industry:
            self._log_failed(business_name, industry, state, InvalidRequest.kind)
            raise InvalidRequest("Missing businessName or industry")
        state = self._advance(business_name, industry, RequestState.VALIDATED)

        try:
            plan_text = await self.generator.generate(
                business_name,
                industry,
                target_market=target_market,
                usps=usps,
            )
        except GenerationFailed as e:
            self._log_failed(business_name, industry, state, e.kind, e.message)
            raise
        if not plan_text or not plan_text.strip():
            self._log_failed(business_name, industry, state, GenerationFailed.kind)
            raise GenerationFailed("Completion client returned empty plan text")
        state = self._advance(business_name, industry, RequestState.GENERATED)

        try:
            await self.store.upsert(business_name, industry, plan_text)
        except StoreUnavailable as e:
            self._log_failed(business_name, industry, state, e.kind, e.message)
            logger.warning(f"[{business_name!r}/{industry!r}] plan was generated but not persisted")
            e.plan_text = plan_text
            raise
        self._advance(business_name, industry, RequestState.PERSISTED)
        self._advance(business_name, industry, RequestState.COMPLETED)
        return plan_text

    async def get_plan(self, business_name: str, industry: str) -> PlanRecord | None:
        return await self.store.find_by_key(business_name.strip(), industry.strip())

    async def list_plans(self) -> list[PlanRecord]:
        return await self.store.list_all()

    async def completion_available(self) -> bool:
        return await self.generator.health_check()

    @staticmethod
    def _advance(business_name: str, industry: str, state: RequestState) -> RequestState:
        logger.info(f"[{business_name!r}/{industry!r}] {state.value}")
        return state

    @staticmethod
    def _log_failed(
        business_name: str,
        industry: str,
        at: RequestState,
        kind: str,
        detail: str | None = None,
    ) -> None:
        suffix = f": {detail}" if detail else ""
        logger.warning(f"[{business_name!r}/{industry!r}] {RequestState.FAILED.value}({kind}) after {at.value}{suffix}")
