"""Time-decayed confidence scoring for incident reports.

Every vote contributes ``1 / (1 + hours_since_vote)``: positive for a
confirmation, negative for a denial. A vote cast "now" weighs 1.0, one hour ago
0.5, three hours ago 0.25. Old confirmations therefore fade without being
purged, and a fresh wave of denials can flip a report quickly.

The module is pure: callers pass ``now`` explicitly and nothing here touches a
clock, the database or a logger.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from incident_map.models.report import ReportStatus
from incident_map.models.vote import VoteType
from incident_map.utils.datetime import as_utc

CONFIRM_THRESHOLD = 2.0
DENY_THRESHOLD = -2.0

_SECONDS_PER_HOUR = 3600.0


class ScorableVote(Protocol):
    vote_type: VoteType | str
    created_at: datetime


@dataclass(frozen=True)
class ScoreResult:
    score: float
    status: ReportStatus


def vote_weight(created_at: datetime, now: datetime) -> float:
    """Decay weight for a vote; votes stamped after ``now`` count as fresh."""
    hours_since = (as_utc(now) - as_utc(created_at)).total_seconds() / _SECONDS_PER_HOUR
    return 1.0 / (1.0 + max(0.0, hours_since))


def round_score(value: float) -> float:
    # half-up to 2 decimals
    return math.floor(value * 100.0 + 0.5) / 100.0


def status_for_score(score: float) -> ReportStatus:
    if score >= CONFIRM_THRESHOLD:
        return ReportStatus.confirmed
    if score <= DENY_THRESHOLD:
        return ReportStatus.denied
    return ReportStatus.unconfirmed


def compute_score(votes: Iterable[ScorableVote], now: datetime) -> ScoreResult:
    contributions: list[float] = []
    for vote in votes:
        weight = vote_weight(vote.created_at, now)
        if VoteType(vote.vote_type) is VoteType.confirm:
            contributions.append(weight)
        else:
            contributions.append(-weight)

    # fsum is exact, so the total does not depend on vote order.
    # Status follows the rounded score so the pair handed to clients agrees.
    score = round_score(math.fsum(contributions))
    return ScoreResult(score=score, status=status_for_score(score))


__all__ = [
    "CONFIRM_THRESHOLD",
    "DENY_THRESHOLD",
    "ScorableVote",
    "ScoreResult",
    "compute_score",
    "round_score",
    "status_for_score",
    "vote_weight",
]
