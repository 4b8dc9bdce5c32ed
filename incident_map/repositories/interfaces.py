"""Repository abstractions for the service layer."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from incident_map.models import Message, Report, Source, Vote
from incident_map.utils.geo import BoundingBox


class ReportRepository(Protocol):
    """Report store; the lifecycle service is its only writer."""

    async def add(self, report: Report) -> Report: ...

    async def get(self, report_id: str) -> Report | None: ...

    async def list_active(self, *, bbox: BoundingBox | None) -> list[Report]: ...

    async def expire_stale(self, *, cutoff: datetime) -> int: ...

    async def delete(self, report: Report) -> None: ...

    async def flush(self) -> None: ...


class VoteLedger(Protocol):
    """Append-only vote record; one vote per (report, fingerprint)."""

    async def has_voted(self, report_id: str, fingerprint: str) -> bool: ...

    async def all_votes_for(self, report_id: str) -> list[Vote]: ...

    async def votes_for_reports(self, report_ids: Sequence[str]) -> dict[str, list[Vote]]: ...

    async def insert(self, vote: Vote) -> Vote: ...


class MessageRepository(Protocol):
    async def list_for_report(
        self, report_id: str, *, since: datetime | None = None
    ) -> list[Message]: ...

    async def latest_from_sender(self, report_id: str, fingerprint: str) -> Message | None: ...

    async def alias_for_sender(self, report_id: str, fingerprint: str) -> int | None: ...

    async def max_alias(self, report_id: str) -> int: ...

    async def get(self, message_id: str) -> Message | None: ...

    async def insert(self, message: Message) -> Message: ...

    async def delete(self, message: Message) -> None: ...

    async def count_for_reports(self, report_ids: Sequence[str]) -> dict[str, int]: ...


class SourceRepository(Protocol):
    async def list_for_report(self, report_id: str) -> list[Source]: ...

    async def insert(self, source: Source) -> Source: ...

    async def count_for_reports(self, report_ids: Sequence[str]) -> dict[str, int]: ...
