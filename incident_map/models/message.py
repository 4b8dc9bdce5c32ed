from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from incident_map.models.base import Base


class Message(Base):
    __tablename__ = "messages"
    # A sender can hold at most one message per cooldown slot of a report.
    __table_args__ = (
        UniqueConstraint(
            "report_id",
            "sender_fingerprint",
            "cooldown_slot",
            name="uq_messages_report_sender_slot",
        ),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    report_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("reports.id", ondelete="CASCADE"), nullable=False, index=True
    )
    sender_fingerprint: Mapped[str] = mapped_column(Text, nullable=False)
    alias_number: Mapped[int] = mapped_column(Integer, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # floor(epoch seconds / cooldown); see MessageService
    cooldown_slot: Mapped[int] = mapped_column(BigInteger, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
