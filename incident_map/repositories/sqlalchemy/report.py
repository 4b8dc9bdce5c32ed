"""SQLAlchemy implementation of the report store."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from incident_map.models import Message, Report, ReportStatus, Source, Vote
from incident_map.repositories.interfaces import ReportRepository
from incident_map.utils.geo import BoundingBox


class SqlAlchemyReportRepository(ReportRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, report: Report) -> Report:
        self._session.add(report)
        await self._session.flush()
        return report

    async def get(self, report_id: str) -> Report | None:
        return await self._session.get(Report, report_id)

    async def list_active(self, *, bbox: BoundingBox | None) -> list[Report]:
        stmt = select(Report).where(Report.status != ReportStatus.expired)
        if bbox is not None:
            stmt = stmt.where(
                Report.latitude >= bbox.sw_lat,
                Report.latitude <= bbox.ne_lat,
                Report.longitude >= bbox.sw_lng,
                Report.longitude <= bbox.ne_lng,
            )
        stmt = stmt.order_by(Report.created_at.desc(), Report.id.asc())
        return list((await self._session.scalars(stmt)).all())

    async def expire_stale(self, *, cutoff: datetime) -> int:
        # Ignores admin_locked_at: time-based expiry wins over the lock.
        stmt = (
            update(Report)
            .where(
                Report.status != ReportStatus.expired,
                Report.last_activity_at <= cutoff,
            )
            .values(status=ReportStatus.expired)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        return int(result.rowcount or 0)

    async def delete(self, report: Report) -> None:
        # FK cascades cover PostgreSQL; explicit deletes keep other stores consistent.
        for model in (Vote, Message, Source):
            await self._session.execute(delete(model).where(model.report_id == report.id))
        await self._session.delete(report)
        await self._session.flush()

    async def flush(self) -> None:
        await self._session.flush()
