"""Evidence links attached to reports."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from urllib.parse import urlsplit

from incident_map.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from incident_map.dto import SourceDTO
from incident_map.dto.mappers import map_source
from incident_map.infra.unit_of_work import UnitOfWork
from incident_map.logging import get_logger
from incident_map.models import Source
from incident_map.utils.datetime import as_utc, utcnow

UnitOfWorkFactory = Callable[[], UnitOfWork]

logger = get_logger(__name__)


def is_valid_source_url(url: str | None) -> bool:
    if not url:
        return False
    try:
        parts = urlsplit(url.strip())
    except ValueError:
        return False
    return parts.scheme in {"http", "https"} and bool(parts.netloc)


class SourceService:
    def __init__(
        self, uow_factory: UnitOfWorkFactory, *, clock: Callable[[], datetime] = utcnow
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock

    async def list_sources(self, report_id: str) -> list[SourceDTO]:
        async with self._uow_factory() as uow:
            if await uow.reports.get(report_id) is None:
                raise NotFoundError("report not found")
            return [map_source(s) for s in await uow.sources.list_for_report(report_id)]

    async def add_source(
        self, report_id: str, *, url: str, added_by_fingerprint: str
    ) -> SourceDTO:
        if not is_valid_source_url(url):
            raise ValidationError("url must be an absolute http(s) URL")
        if not added_by_fingerprint:
            raise ValidationError("added_by_fingerprint is required")

        now = as_utc(self._clock())
        async with self._uow_factory() as uow:
            report = await uow.reports.get(report_id)
            if report is None:
                raise NotFoundError("report not found")
            if report.is_expired:
                raise InvalidStateError("cannot add sources to expired reports")

            source = await uow.sources.insert(
                Source(
                    report_id=report_id,
                    url=url.strip(),
                    added_by_fingerprint=added_by_fingerprint,
                    created_at=now,
                )
            )
            report.last_activity_at = now
            await uow.reports.flush()
            dto = map_source(source)

        logger.info("source_added", report_id=report_id, source_id=dto.id)
        return dto
