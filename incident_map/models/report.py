from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Float, String, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from incident_map.models.base import Base


class ReportType(str, Enum):
    armed_confrontation = "armed_confrontation"
    road_blockade = "road_blockade"
    cartel_activity = "cartel_activity"
    building_fire = "building_fire"
    looting = "looting"
    general_danger = "general_danger"
    criminal_activity = "criminal_activity"


class ReportStatus(str, Enum):
    unconfirmed = "unconfirmed"
    confirmed = "confirmed"
    denied = "denied"
    expired = "expired"


def _new_id() -> str:
    return str(uuid.uuid4())


class Report(Base):
    __tablename__ = "reports"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    type: Mapped[ReportType] = mapped_column(
        SQLEnum(ReportType, name="report_type"), nullable=False
    )
    latitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    source_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    creator_fingerprint: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ReportStatus] = mapped_column(
        SQLEnum(ReportStatus, name="report_status"),
        nullable=False,
        default=ReportStatus.unconfirmed,
        server_default=ReportStatus.unconfirmed.value,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    # Bumped by votes, messages and sources; drives the expiry sweep
    last_activity_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), index=True
    )
    # Set by admin edits; suppresses vote-driven status changes (not expiry)
    admin_locked_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    @property
    def is_locked(self) -> bool:
        return self.admin_locked_at is not None

    @property
    def is_expired(self) -> bool:
        return self.status == ReportStatus.expired
