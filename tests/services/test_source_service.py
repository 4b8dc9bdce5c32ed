from __future__ import annotations

import pytest

from incident_map.core.exceptions import InvalidStateError, NotFoundError, ValidationError
from incident_map.services.reports import ReportService
from incident_map.services.sources import SourceService, is_valid_source_url


@pytest.fixture
def reports(uow_factory, clock) -> ReportService:
    return ReportService(uow_factory, clock=clock)


@pytest.fixture
def sources(uow_factory, clock) -> SourceService:
    return SourceService(uow_factory, clock=clock)


@pytest.mark.parametrize(
    ("url", "ok"),
    [
        ("https://example.com/nota", True),
        ("http://example.com", True),
        ("ftp://example.com/file", False),
        ("example.com", False),
        ("https://", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_source_url(url, ok):
    assert is_valid_source_url(url) is ok


@pytest.mark.asyncio
async def test_add_and_list_sources(reports, sources, clock):
    report = await reports.create_report(type="looting", latitude=20.6, longitude=-103.3)
    clock.advance(minutes=1)
    first = await sources.add_source(
        report.id, url=" https://example.com/a ", added_by_fingerprint="a"
    )
    clock.advance(minutes=1)
    await sources.add_source(report.id, url="https://example.com/b", added_by_fingerprint="b")

    assert first.url == "https://example.com/a"
    listed = await sources.list_sources(report.id)
    assert [s.url for s in listed] == ["https://example.com/a", "https://example.com/b"]

    view = await reports.get_report(report.id)
    assert view.source_count == 2
    assert view.last_activity_at == clock().isoformat()


@pytest.mark.asyncio
async def test_add_source_validation(reports, sources):
    report = await reports.create_report(type="looting", latitude=20.6, longitude=-103.3)
    with pytest.raises(ValidationError):
        await sources.add_source(report.id, url="javascript:alert(1)", added_by_fingerprint="a")
    with pytest.raises(ValidationError):
        await sources.add_source(report.id, url="https://example.com", added_by_fingerprint="")


@pytest.mark.asyncio
async def test_sources_on_missing_or_expired_report(reports, sources, clock):
    with pytest.raises(NotFoundError):
        await sources.list_sources("missing")
    with pytest.raises(NotFoundError):
        await sources.add_source("missing", url="https://example.com", added_by_fingerprint="a")

    report = await reports.create_report(type="looting", latitude=20.6, longitude=-103.3)
    clock.advance(hours=4)
    await reports.list_reports()
    with pytest.raises(InvalidStateError):
        await sources.add_source(report.id, url="https://example.com", added_by_fingerprint="a")
