"""Utilities to map ORM objects into DTOs."""

from __future__ import annotations

from collections.abc import Iterable

from incident_map.dto import MessageDTO, ReportViewDTO, SourceDTO
from incident_map.models import Message, Report, ReportStatus, Source, Vote, VoteType
from incident_map.utils.datetime import isoformat


def count_votes(votes: Iterable[Vote]) -> tuple[int, int]:
    confirm = deny = 0
    for vote in votes:
        if VoteType(vote.vote_type) is VoteType.confirm:
            confirm += 1
        else:
            deny += 1
    return confirm, deny


def map_report_view(
    report: Report,
    *,
    status: ReportStatus,
    score: float,
    votes: Iterable[Vote] = (),
    message_count: int = 0,
    source_count: int = 0,
) -> ReportViewDTO:
    confirm_count, deny_count = count_votes(votes)
    return ReportViewDTO(
        id=str(report.id),
        type=report.type,
        latitude=float(report.latitude),
        longitude=float(report.longitude),
        description=report.description,
        source_url=report.source_url,
        status=status,
        admin_locked_at=isoformat(report.admin_locked_at),
        created_at=isoformat(report.created_at) or "",
        last_activity_at=isoformat(report.last_activity_at) or "",
        score=score,
        confirm_count=confirm_count,
        deny_count=deny_count,
        message_count=message_count,
        source_count=source_count,
    )


def map_message(message: Message, *, creator_fingerprint: str | None) -> MessageDTO:
    # Fingerprints never leave the service; only the OP flag is derived from them.
    is_op = creator_fingerprint is not None and message.sender_fingerprint == creator_fingerprint
    return MessageDTO(
        id=str(message.id),
        report_id=str(message.report_id),
        content=message.content,
        alias_number=int(message.alias_number),
        is_op=is_op,
        created_at=isoformat(message.created_at) or "",
    )


def map_source(source: Source) -> SourceDTO:
    return SourceDTO(
        id=str(source.id),
        report_id=str(source.report_id),
        url=source.url,
        created_at=isoformat(source.created_at) or "",
    )
