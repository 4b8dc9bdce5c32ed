# tests/conftest.py
import os

# アプリ import 前に環境を固定する（db.configure_engine と get_settings がここを読む）
os.environ["TESTING"] = "1"
os.environ.setdefault("ADMIN_PASSWORD", "test-admin-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./.pytest-incident-map.db")

from datetime import UTC, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from incident_map import db  # noqa: E402
from incident_map.api.deps import get_clock  # noqa: E402
from incident_map.core.config import get_settings  # noqa: E402
from incident_map.infra.unit_of_work import SqlAlchemyUnitOfWork  # noqa: E402
from incident_map.main import create_app  # noqa: E402
from incident_map.models import Base  # noqa: E402

get_settings.cache_clear()

ADMIN_PASSWORD = os.environ["ADMIN_PASSWORD"]
T0 = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


class FakeClock:
    """Injectable clock; tests move time explicitly."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


@pytest.fixture(scope="session", autouse=True)
def anyio_backend():
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


# ==== Engine / Schema ====
@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    # TEST_DATABASE_URL があれば Postgres、なければテストごとの SQLite ファイル
    url = os.getenv("TEST_DATABASE_URL") or f"sqlite+aiosqlite:///{tmp_path / 'incident_map.db'}"
    db.configure_engine(url)
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    try:
        yield db.engine
    finally:
        await db.engine.dispose()


@pytest.fixture
def uow_factory(engine):
    return lambda: SqlAlchemyUnitOfWork(db.SessionLocal)


@pytest_asyncio.fixture
async def app_client(engine, clock):
    app = create_app()
    app.dependency_overrides[get_clock] = lambda: clock
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {ADMIN_PASSWORD}"}


@pytest.fixture
def make_report(app_client):
    """POST /reports with sensible defaults; returns the JSON view."""

    async def _make(**overrides) -> dict:
        payload = {
            "type": "armed_confrontation",
            "latitude": 20.65,
            "longitude": -103.35,
            "description": "Disparos cerca del mercado",
            "creator_fingerprint": "fp-creator-0001",
        }
        payload.update(overrides)
        r = await app_client.post("/reports", json=payload)
        assert r.status_code == 201, r.text
        return r.json()

    return _make
