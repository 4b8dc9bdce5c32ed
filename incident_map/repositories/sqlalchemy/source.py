"""SQLAlchemy implementation of evidence source storage."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from incident_map.models import Source
from incident_map.repositories.interfaces import SourceRepository


class SqlAlchemySourceRepository(SourceRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_report(self, report_id: str) -> list[Source]:
        stmt = (
            select(Source)
            .where(Source.report_id == report_id)
            .order_by(Source.created_at.asc(), Source.id.asc())
        )
        return list((await self._session.scalars(stmt)).all())

    async def insert(self, source: Source) -> Source:
        self._session.add(source)
        await self._session.flush()
        return source

    async def count_for_reports(self, report_ids: Sequence[str]) -> dict[str, int]:
        if not report_ids:
            return {}
        stmt = (
            select(Source.report_id, func.count(Source.id))
            .where(Source.report_id.in_(list(report_ids)))
            .group_by(Source.report_id)
        )
        rows = await self._session.execute(stmt)
        return {str(report_id): int(count) for report_id, count in rows.all()}
