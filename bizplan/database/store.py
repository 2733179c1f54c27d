"""Plan store: persistence of PlanRecords keyed by (business_name, industry).

``upsert`` is find-then-update-or-insert inside one session. Concurrent
requests for the same key are not serialized; ``plan_text`` is
last-writer-wins. A unique index on the key pair stops duplicate inserts: the
racer whose insert is rejected re-reads the winner's row and updates it, so
``created_at`` always comes from the first committed insert.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from bizplan.database.models import PlanRecord, utcnow
from bizplan.errors import StoreUnavailable


logger = logging.getLogger(__name__)


class PlanStore:
    """Durable key-value persistence over PlanRecord."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker

    async def find_by_key(self, business_name: str, industry: str) -> PlanRecord | None:
        """Look up the record for a key pair, or None."""
        try:
            async with self._session_maker() as session:
                return await self._find(session, business_name, industry)
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailable(f"Plan lookup failed: {e}") from e

    async def upsert(self, business_name: str, industry: str, plan_text: str) -> PlanRecord:
        """Overwrite the plan for a key pair, creating the record if absent."""
        if not plan_text:
            raise ValueError("plan_text must not be empty")

        try:
            return await self._upsert_once(business_name, industry, plan_text)
        except IntegrityError:
            # Lost an insert race against another request for the same key
            logger.info(f"Concurrent insert for ({business_name!r}, {industry!r}), retrying as update")
            try:
                return await self._upsert_once(business_name, industry, plan_text)
            except (SQLAlchemyError, OSError) as e:
                raise StoreUnavailable(f"Plan upsert failed: {e}") from e
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailable(f"Plan upsert failed: {e}") from e

    async def list_all(self) -> list[PlanRecord]:
        """All records, oldest first."""
        try:
            async with self._session_maker() as session:
                result = await session.execute(
                    select(PlanRecord).order_by(PlanRecord.created_at, PlanRecord.id)
                )
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError) as e:
            raise StoreUnavailable(f"Plan listing failed: {e}") from e

    async def _upsert_once(self, business_name: str, industry: str, plan_text: str) -> PlanRecord:
        async with self._session_maker() as session:
            try:
                record = await self._find(session, business_name, industry)
                if record:
                    record.plan_text = plan_text
                    record.updated_at = utcnow()
                    action = "updated"
                else:
                    record = PlanRecord(
                        business_name=business_name,
                        industry=industry,
                        plan_text=plan_text,
                    )
                    action = "created"
                session.add(record)
                await session.commit()
                await session.refresh(record)
            except Exception:
                await session.rollback()
                raise

        logger.info(f"Plan {action} for ({business_name!r}, {industry!r}) id={record.id}")
        return record

    @staticmethod
    async def _find(session: AsyncSession, business_name: str, industry: str) -> PlanRecord | None:
        result = await session.execute(
            select(PlanRecord)
            .where(PlanRecord.business_name == business_name)
            .where(PlanRecord.industry == industry)
        )
        return result.scalar_one_or_none()
