"""API dependency helpers and service providers."""

from collections.abc import Callable
from datetime import datetime

from fastapi import Depends, Header

from incident_map import db
from incident_map.core.config import Settings, get_settings
from incident_map.infra.unit_of_work import SqlAlchemyUnitOfWork
from incident_map.services.admin_auth import extract_bearer_token, verify_admin_token
from incident_map.services.messages import MessageService
from incident_map.services.reports import ReportService
from incident_map.services.sources import SourceService
from incident_map.utils.datetime import utcnow

__all__ = [
    "get_clock",
    "get_report_service",
    "get_message_service",
    "get_source_service",
    "require_admin",
]


def _uow_factory() -> SqlAlchemyUnitOfWork:
    # db.SessionLocal is resolved per call so configure_engine() can swap it
    return SqlAlchemyUnitOfWork(db.SessionLocal)


def get_clock() -> Callable[[], datetime]:
    return utcnow


# --- Service providers for DI ---


def get_report_service(
    settings: Settings = Depends(get_settings),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> ReportService:
    return ReportService(_uow_factory, clock=clock, expiry_hours=settings.report_expiry_hours)


def get_message_service(
    settings: Settings = Depends(get_settings),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> MessageService:
    return MessageService(
        _uow_factory,
        clock=clock,
        cooldown_seconds=settings.message_cooldown_seconds,
        max_length=settings.message_max_length,
    )


def get_source_service(
    clock: Callable[[], datetime] = Depends(get_clock),
) -> SourceService:
    return SourceService(_uow_factory, clock=clock)


def require_admin(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Bearer check that runs before any lookup, so failures never reveal existence."""
    verify_admin_token(extract_bearer_token(authorization), settings.admin_password)
