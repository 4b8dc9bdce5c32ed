from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from incident_map.models.base import Base


class VoteType(str, Enum):
    confirm = "confirm"
    deny = "deny"


class Vote(Base):
    __tablename__ = "votes"
    # One vote per identity per report, enforced by the store
    __table_args__ = (
        UniqueConstraint("report_id", "voter_fingerprint", name="uq_votes_report_voter"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    report_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    vote_type: Mapped[VoteType] = mapped_column(SQLEnum(VoteType, name="vote_type"), nullable=False)
    voter_fingerprint: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
