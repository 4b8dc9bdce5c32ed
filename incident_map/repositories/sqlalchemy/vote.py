"""SQLAlchemy implementation of the vote ledger."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from incident_map.core.exceptions import ConflictError
from incident_map.models import Vote
from incident_map.repositories.interfaces import VoteLedger


class SqlAlchemyVoteLedger(VoteLedger):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def has_voted(self, report_id: str, fingerprint: str) -> bool:
        stmt = (
            select(Vote.id)
            .where(Vote.report_id == report_id, Vote.voter_fingerprint == fingerprint)
            .limit(1)
        )
        return (await self._session.scalar(stmt)) is not None

    async def all_votes_for(self, report_id: str) -> list[Vote]:
        stmt = select(Vote).where(Vote.report_id == report_id).order_by(Vote.created_at.asc())
        return list((await self._session.scalars(stmt)).all())

    async def votes_for_reports(self, report_ids: Sequence[str]) -> dict[str, list[Vote]]:
        if not report_ids:
            return {}
        stmt = select(Vote).where(Vote.report_id.in_(list(report_ids)))
        grouped: dict[str, list[Vote]] = defaultdict(list)
        for vote in (await self._session.scalars(stmt)).all():
            grouped[vote.report_id].append(vote)
        return dict(grouped)

    async def insert(self, vote: Vote) -> Vote:
        """Append a vote; the unique (report_id, voter_fingerprint) index rejects repeats."""
        self._session.add(vote)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            raise ConflictError("vote already recorded for this identity") from exc
        return vote
