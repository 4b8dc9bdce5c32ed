"""Per-report anonymous chat.

Senders are identified only by their opaque fingerprint. Each sender gets an
alias number that is stable within a report (first-time senders receive
``max + 1``), and may post at most once per cooldown window.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from datetime import datetime, timedelta

from incident_map.core.exceptions import (
    ConflictError,
    InvalidStateError,
    NotFoundError,
    RateLimitError,
    ValidationError,
)
from incident_map.dto import MessageDTO
from incident_map.dto.mappers import map_message
from incident_map.infra.unit_of_work import UnitOfWork
from incident_map.logging import get_logger
from incident_map.models import Message
from incident_map.utils.datetime import as_utc, utcnow

UnitOfWorkFactory = Callable[[], UnitOfWork]

DEFAULT_COOLDOWN_SECONDS = 30
DEFAULT_MAX_LENGTH = 280

logger = get_logger(__name__)


def cooldown_slot(at: datetime, cooldown_seconds: int) -> int:
    return int(as_utc(at).timestamp()) // cooldown_seconds


class MessageService:
    def __init__(
        self,
        uow_factory: UnitOfWorkFactory,
        *,
        clock: Callable[[], datetime] = utcnow,
        cooldown_seconds: int = DEFAULT_COOLDOWN_SECONDS,
        max_length: int = DEFAULT_MAX_LENGTH,
    ) -> None:
        self._uow_factory = uow_factory
        self._clock = clock
        self._cooldown = timedelta(seconds=cooldown_seconds)
        self._cooldown_seconds = cooldown_seconds
        self._max_length = max_length

    async def list_messages(
        self, report_id: str, *, since: datetime | None = None
    ) -> list[MessageDTO]:
        async with self._uow_factory() as uow:
            report = await uow.reports.get(report_id)
            if report is None:
                raise NotFoundError("report not found")
            rows = await uow.messages.list_for_report(report_id, since=as_utc(since))
            return [map_message(m, creator_fingerprint=report.creator_fingerprint) for m in rows]

    async def post_message(
        self, report_id: str, *, sender_fingerprint: str, content: str
    ) -> MessageDTO:
        content = (content or "").strip()
        if not content or not sender_fingerprint:
            raise ValidationError("content and sender_fingerprint are required")
        if len(content) > self._max_length:
            raise ValidationError(f"content must be {self._max_length} characters or less")

        now = as_utc(self._clock())
        async with self._uow_factory() as uow:
            report = await uow.reports.get(report_id)
            if report is None:
                raise NotFoundError("report not found")
            if report.is_expired:
                raise InvalidStateError("cannot send messages on expired reports")

            latest = await uow.messages.latest_from_sender(report_id, sender_fingerprint)
            if latest is not None:
                elapsed = now - as_utc(latest.created_at)
                if elapsed < self._cooldown:
                    wait = math.ceil((self._cooldown - elapsed).total_seconds())
                    logger.info("message_rate_limited", report_id=report_id, retry_after=wait)
                    raise RateLimitError(
                        "please wait before sending another message", retry_after=wait
                    )

            alias = await uow.messages.alias_for_sender(report_id, sender_fingerprint)
            if alias is None:
                alias = await uow.messages.max_alias(report_id) + 1

            message = Message(
                report_id=report_id,
                sender_fingerprint=sender_fingerprint,
                alias_number=alias,
                content=content,
                cooldown_slot=cooldown_slot(now, self._cooldown_seconds),
                created_at=now,
            )
            try:
                await uow.messages.insert(message)
            except ConflictError as exc:
                raise RateLimitError(
                    "please wait before sending another message",
                    retry_after=self._cooldown_seconds,
                ) from exc

            report.last_activity_at = now
            await uow.reports.flush()
            dto = map_message(message, creator_fingerprint=report.creator_fingerprint)

        logger.info("message_posted", report_id=report_id, alias_number=alias, is_op=dto.is_op)
        return dto

    async def delete_message(self, report_id: str, message_id: str) -> None:
        async with self._uow_factory() as uow:
            message = await uow.messages.get(message_id)
            if message is None or str(message.report_id) != report_id:
                raise NotFoundError("message not found")
            await uow.messages.delete(message)
        logger.info("admin_message_deleted", report_id=report_id, message_id=message_id)
