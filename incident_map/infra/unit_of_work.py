"""Unit of Work abstraction used by the service layer.

One unit of work is one report-scoped transaction: it commits when the block
exits cleanly and rolls back when an exception escapes it.
"""

from __future__ import annotations

from contextlib import AbstractAsyncContextManager
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from incident_map.repositories.interfaces import (
    MessageRepository,
    ReportRepository,
    SourceRepository,
    VoteLedger,
)
from incident_map.repositories.sqlalchemy import (
    SqlAlchemyMessageRepository,
    SqlAlchemyReportRepository,
    SqlAlchemySourceRepository,
    SqlAlchemyVoteLedger,
)


class UnitOfWork(Protocol, AbstractAsyncContextManager["UnitOfWork"]):
    """Defines the repository boundary exposed to services."""

    reports: ReportRepository
    votes: VoteLedger
    messages: MessageRepository
    sources: SourceRepository

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


class SqlAlchemyUnitOfWork(UnitOfWork):
    """Unit of Work backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory
        self._session: AsyncSession | None = None
        self.reports: ReportRepository
        self.votes: VoteLedger
        self.messages: MessageRepository
        self.sources: SourceRepository

    async def __aenter__(self) -> SqlAlchemyUnitOfWork:
        session = self._session_factory()
        self._session = session
        self.reports = SqlAlchemyReportRepository(session)
        self.votes = SqlAlchemyVoteLedger(session)
        self.messages = SqlAlchemyMessageRepository(session)
        self.sources = SqlAlchemySourceRepository(session)
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if self._session is None:
            return
        try:
            if exc_type:
                await self._session.rollback()
            else:
                await self._session.commit()
        finally:
            await self._session.close()
            self._session = None

    async def commit(self) -> None:
        if self._session is not None:
            await self._session.commit()

    async def rollback(self) -> None:
        if self._session is not None:
            await self._session.rollback()
