"""SQLAlchemy implementation of the per-report message board."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from incident_map.core.exceptions import ConflictError
from incident_map.models import Message
from incident_map.repositories.interfaces import MessageRepository


class SqlAlchemyMessageRepository(MessageRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_report(
        self, report_id: str, *, since: datetime | None = None
    ) -> list[Message]:
        stmt = select(Message).where(Message.report_id == report_id)
        if since is not None:
            stmt = stmt.where(Message.created_at > since)
        stmt = stmt.order_by(Message.created_at.asc(), Message.id.asc())
        return list((await self._session.scalars(stmt)).all())

    async def latest_from_sender(self, report_id: str, fingerprint: str) -> Message | None:
        stmt = (
            select(Message)
            .where(Message.report_id == report_id, Message.sender_fingerprint == fingerprint)
            .order_by(Message.created_at.desc())
            .limit(1)
        )
        return (await self._session.scalars(stmt)).first()

    async def alias_for_sender(self, report_id: str, fingerprint: str) -> int | None:
        stmt = (
            select(Message.alias_number)
            .where(Message.report_id == report_id, Message.sender_fingerprint == fingerprint)
            .limit(1)
        )
        alias = await self._session.scalar(stmt)
        return int(alias) if alias is not None else None

    async def max_alias(self, report_id: str) -> int:
        stmt = select(func.coalesce(func.max(Message.alias_number), 0)).where(
            Message.report_id == report_id
        )
        return int(await self._session.scalar(stmt) or 0)

    async def get(self, message_id: str) -> Message | None:
        return await self._session.get(Message, message_id)

    async def insert(self, message: Message) -> Message:
        self._session.add(message)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise ConflictError("message already posted in this cooldown slot") from exc
        return message

    async def delete(self, message: Message) -> None:
        await self._session.delete(message)
        await self._session.flush()

    async def count_for_reports(self, report_ids: Sequence[str]) -> dict[str, int]:
        if not report_ids:
            return {}
        stmt = (
            select(Message.report_id, func.count(Message.id))
            .where(Message.report_id.in_(list(report_ids)))
            .group_by(Message.report_id)
        )
        rows = await self._session.execute(stmt)
        return {str(report_id): int(count) for report_id, count in rows.all()}
