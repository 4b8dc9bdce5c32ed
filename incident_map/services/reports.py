"""Report lifecycle use cases: creation, voting, listing, admin override.

This service is the only writer of ``status``, ``last_activity_at`` and
``admin_locked_at``. Scores are never cached: every read and every vote
recomputes them from the full vote ledger with the injected clock.

Status transitions:

* vote-driven (unlocked reports only): unconfirmed/confirmed/denied move to
  whatever :func:`compute_score` derives;
* time-driven: any non-expired report whose last activity is at least
  ``expiry_hours`` old becomes expired, admin lock or not;
* admin-driven: explicit edits may set any status and lock the report.

Expired reports are never revived automatically.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import datetime, timedelta
from typing import Any

from incident_map.core.exceptions import (
    ConflictError,
    DuplicateVoteError,
    InvalidStateError,
    NotFoundError,
    ValidationError,
)
from incident_map.dto import ReportViewDTO
from incident_map.dto.mappers import map_report_view
from incident_map.infra.unit_of_work import UnitOfWork
from incident_map.logging import get_logger
from incident_map.models import Report, ReportStatus, ReportType, Vote, VoteType
from incident_map.services.scoring import ScoreResult, compute_score
from incident_map.utils.datetime import as_utc, utcnow
from incident_map.utils.geo import BoundingBox, is_valid_coordinate

UnitOfWorkFactory = Callable[[], UnitOfWork]
Clock = Callable[[], datetime]

DEFAULT_EXPIRY_HOURS = 4.0

ADMIN_EDITABLE_FIELDS = frozenset(
    {"type", "status", "description", "source_url", "created_at", "last_activity_at", "locked"}
)

logger = get_logger(__name__)


def _parse_enum(enum_cls, value: Any, field: str):
    try:
        return enum_cls(value)
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"{field} must be one of: {allowed}") from exc


class ReportService:
    """Use cases around a report's state machine."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        *,
        clock: Clock = utcnow,
        expiry_hours: float = DEFAULT_EXPIRY_HOURS,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock
        self._expiry_window = timedelta(hours=expiry_hours)

    def _now(self) -> datetime:
        return as_utc(self._clock())

    def _is_stale(self, report: Report, now: datetime) -> bool:
        return as_utc(report.last_activity_at) <= now - self._expiry_window

    async def create_report(
        self,
        *,
        type: ReportType | str,
        latitude: float | None,
        longitude: float | None,
        description: str | None = None,
        source_url: str | None = None,
        creator_fingerprint: str | None = None,
    ) -> ReportViewDTO:
        report_type = _parse_enum(ReportType, type, "type")
        if not is_valid_coordinate(latitude, longitude):
            raise ValidationError("latitude and longitude are required and must be in range")

        now = self._now()
        report = Report(
            type=report_type,
            latitude=float(latitude),
            longitude=float(longitude),
            description=description or None,
            source_url=source_url or None,
            creator_fingerprint=creator_fingerprint or None,
            status=ReportStatus.unconfirmed,
            created_at=now,
            last_activity_at=now,
        )
        async with self._uow_factory() as uow:
            await uow.reports.add(report)
            view = map_report_view(report, status=ReportStatus.unconfirmed, score=0.0)

        logger.info("report_created", report_id=view.id, type=report_type.value)
        return view

    async def cast_vote(
        self, report_id: str, *, voter_fingerprint: str, vote_type: VoteType | str
    ) -> ReportViewDTO:
        parsed_type = _parse_enum(VoteType, vote_type, "vote_type")
        if not voter_fingerprint:
            raise ValidationError("voter_fingerprint is required")

        now = self._now()
        async with self._uow_factory() as uow:
            report = await uow.reports.get(report_id)
            if report is None:
                raise NotFoundError("report not found")
            if report.is_expired:
                raise InvalidStateError("cannot vote on expired reports")
            if await uow.votes.has_voted(report_id, voter_fingerprint):
                raise DuplicateVoteError("you have already voted on this report")
            try:
                await uow.votes.insert(
                    Vote(
                        report_id=report_id,
                        vote_type=parsed_type,
                        voter_fingerprint=voter_fingerprint,
                        created_at=now,
                    )
                )
            except ConflictError as exc:
                # Lost the race against a concurrent vote from the same identity.
                raise DuplicateVoteError("you have already voted on this report") from exc

            report.last_activity_at = now
            votes = await uow.votes.all_votes_for(report_id)
            result = compute_score(votes, now)
            status = self._apply_score(report, result)
            await uow.reports.flush()

            counts = await self._side_counts(uow, [report_id])
            view = map_report_view(
                report,
                status=status,
                score=result.score,
                votes=votes,
                message_count=counts[0].get(report_id, 0),
                source_count=counts[1].get(report_id, 0),
            )

        logger.info(
            "vote_cast",
            report_id=report_id,
            vote_type=parsed_type.value,
            score=result.score,
            status=status.value,
            locked=report.is_locked,
        )
        return view

    async def list_reports(self, *, bbox: BoundingBox | None = None) -> list[ReportViewDTO]:
        now = self._now()
        async with self._uow_factory() as uow:
            expired = await uow.reports.expire_stale(cutoff=now - self._expiry_window)
            if expired:
                logger.info("reports_expired", count=expired)

            reports = await uow.reports.list_active(bbox=bbox)
            ids = [str(r.id) for r in reports]
            votes_by_report = await uow.votes.votes_for_reports(ids)
            message_counts, source_counts = await self._side_counts(uow, ids)

            views: list[ReportViewDTO] = []
            for report in reports:
                votes = votes_by_report.get(str(report.id), [])
                result = compute_score(votes, now)
                status = self._apply_score(report, result)
                views.append(
                    map_report_view(
                        report,
                        status=status,
                        score=result.score,
                        votes=votes,
                        message_count=message_counts.get(str(report.id), 0),
                        source_count=source_counts.get(str(report.id), 0),
                    )
                )
            await uow.reports.flush()
        return views

    async def get_report(self, report_id: str) -> ReportViewDTO:
        now = self._now()
        async with self._uow_factory() as uow:
            report = await uow.reports.get(report_id)
            if report is None:
                raise NotFoundError("report not found")
            if not report.is_expired and self._is_stale(report, now):
                report.status = ReportStatus.expired
                logger.info("reports_expired", count=1, report_id=report_id)

            votes = await uow.votes.all_votes_for(report_id)
            result = compute_score(votes, now)
            status = self._apply_score(report, result)
            await uow.reports.flush()

            message_counts, source_counts = await self._side_counts(uow, [report_id])
            return map_report_view(
                report,
                status=status,
                score=result.score,
                votes=votes,
                message_count=message_counts.get(report_id, 0),
                source_count=source_counts.get(report_id, 0),
            )

    async def update_report(self, report_id: str, fields: Mapping[str, Any]) -> ReportViewDTO:
        """Apply an admin edit.

        Every accepted edit stamps ``admin_locked_at`` so the override survives
        later votes. Passing ``locked=False`` clears the lock instead, handing
        the status back to the scoring engine on the next vote or read.
        """
        updates = {k: v for k, v in fields.items() if k in ADMIN_EDITABLE_FIELDS}
        if not updates:
            raise ValidationError("no valid fields to update")

        if "type" in updates:
            if updates["type"] is None:
                raise ValidationError("type cannot be null")
            updates["type"] = _parse_enum(ReportType, updates["type"], "type")
        if "status" in updates:
            if updates["status"] is None:
                raise ValidationError("status cannot be null")
            updates["status"] = _parse_enum(ReportStatus, updates["status"], "status")
        for ts_field in ("created_at", "last_activity_at"):
            if ts_field in updates:
                if not isinstance(updates[ts_field], datetime):
                    raise ValidationError(f"{ts_field} must be a datetime")
                updates[ts_field] = as_utc(updates[ts_field])

        now = self._now()
        async with self._uow_factory() as uow:
            report = await uow.reports.get(report_id)
            if report is None:
                raise NotFoundError("report not found")

            locked = updates.pop("locked", None)
            for name, value in updates.items():
                if name in ("description", "source_url"):
                    value = value or None
                setattr(report, name, value)
            report.admin_locked_at = None if locked is False else now
            await uow.reports.flush()

            votes = await uow.votes.all_votes_for(report_id)
            result = compute_score(votes, now)
            message_counts, source_counts = await self._side_counts(uow, [report_id])
            view = map_report_view(
                report,
                status=report.status,
                score=result.score,
                votes=votes,
                message_count=message_counts.get(report_id, 0),
                source_count=source_counts.get(report_id, 0),
            )

        logger.info(
            "admin_report_updated",
            report_id=report_id,
            fields=sorted(updates),
            status=view.status.value,
            locked=view.admin_locked_at is not None,
        )
        return view

    async def delete_report(self, report_id: str) -> None:
        async with self._uow_factory() as uow:
            report = await uow.reports.get(report_id)
            if report is None:
                raise NotFoundError("report not found")
            await uow.reports.delete(report)
        logger.info("admin_report_deleted", report_id=report_id)

    def _apply_score(self, report: Report, result: ScoreResult) -> ReportStatus:
        """Write the derived status back unless the report is locked or expired.

        Returns the status callers should see: the stored one for locked or
        expired reports, the freshly derived one otherwise.
        """
        if report.is_locked or report.is_expired:
            return ReportStatus(report.status)
        if report.status != result.status:
            logger.info(
                "report_status_changed",
                report_id=str(report.id),
                from_status=ReportStatus(report.status).value,
                to_status=result.status.value,
                score=result.score,
            )
            report.status = result.status
        return result.status

    @staticmethod
    async def _side_counts(
        uow: UnitOfWork, report_ids: list[str]
    ) -> tuple[dict[str, int], dict[str, int]]:
        messages = await uow.messages.count_for_reports(report_ids)
        sources = await uow.sources.count_for_reports(report_ids)
        return messages, sources
