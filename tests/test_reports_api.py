import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_create_report_returns_view(app_client: AsyncClient):
    payload = {
        "type": "road_blockade",
        "latitude": 20.6597,
        "longitude": -103.3496,
        "description": "Camiones atravesados en la avenida",
        "source_url": "https://example.com/foto",
    }
    r = await app_client.post("/reports", json=payload)
    assert r.status_code == 201
    j = r.json()
    assert j["type"] == "road_blockade"
    assert j["status"] == "unconfirmed"
    assert j["score"] == 0.0
    assert j["admin_locked_at"] is None
    assert j["created_at"] == j["last_activity_at"] == "2026-03-01T12:00:00+00:00"
    assert "creator_fingerprint" not in j


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"type": "invalid", "latitude": 20.0, "longitude": -103.0},
        {"type": "looting", "longitude": -103.0},
        {"type": "looting", "latitude": 95.0, "longitude": -103.0},
        {"type": "looting", "latitude": 20.0, "longitude": 200.0},
    ],
)
async def test_create_report_validation_errors(app_client: AsyncClient, payload):
    r = await app_client.post("/reports", json=payload)
    assert r.status_code == 422
    assert r.json()["code"] == "validation_error"


@pytest.mark.asyncio
async def test_vote_flow(app_client: AsyncClient, make_report):
    report = await make_report()
    rid = report["id"]

    r1 = await app_client.post(
        f"/reports/{rid}/vote", json={"vote_type": "confirm", "voter_fingerprint": "v1"}
    )
    assert r1.status_code == 200
    assert r1.json()["score"] == 1.0
    assert r1.json()["status"] == "unconfirmed"

    for fp in ("v2", "v3"):
        r = await app_client.post(
            f"/reports/{rid}/vote", json={"vote_type": "confirm", "voter_fingerprint": fp}
        )
        assert r.status_code == 200
    j = r.json()
    assert j["score"] == 3.0
    assert j["status"] == "confirmed"
    assert j["confirm_count"] == 3

    dup = await app_client.post(
        f"/reports/{rid}/vote", json={"vote_type": "deny", "voter_fingerprint": "v1"}
    )
    assert dup.status_code == 409
    assert dup.json()["code"] == "already_voted"

    detail = await app_client.get(f"/reports/{rid}")
    assert detail.status_code == 200
    assert detail.json()["score"] == 3.0


@pytest.mark.asyncio
async def test_vote_errors(app_client: AsyncClient, make_report):
    missing = await app_client.post(
        "/reports/does-not-exist/vote", json={"vote_type": "confirm", "voter_fingerprint": "v"}
    )
    assert missing.status_code == 404
    assert missing.json() == {"detail": "report not found", "code": "not_found"}

    report = await make_report()
    bad_type = await app_client.post(
        f"/reports/{report['id']}/vote", json={"vote_type": "maybe", "voter_fingerprint": "v"}
    )
    assert bad_type.status_code == 422

    no_fp = await app_client.post(
        f"/reports/{report['id']}/vote", json={"vote_type": "confirm", "voter_fingerprint": ""}
    )
    assert no_fp.status_code == 422


@pytest.mark.asyncio
async def test_get_report_not_found(app_client: AsyncClient):
    r = await app_client.get("/reports/unknown")
    assert r.status_code == 404
    assert r.json()["code"] == "not_found"


@pytest.mark.asyncio
async def test_list_reports_bbox(app_client: AsyncClient, make_report):
    gdl = await make_report(latitude=20.65, longitude=-103.35)
    await make_report(latitude=19.43, longitude=-99.13)

    r_all = await app_client.get("/reports")
    assert r_all.status_code == 200
    assert len(r_all.json()) == 2

    params = {"swLat": 20.0, "swLng": -104.0, "neLat": 21.0, "neLng": -103.0}
    r_box = await app_client.get("/reports", params=params)
    assert r_box.status_code == 200
    assert [j["id"] for j in r_box.json()] == [gdl["id"]]

    # partial viewport is ignored
    r_partial = await app_client.get("/reports", params={"swLat": 20.0, "swLng": -104.0})
    assert len(r_partial.json()) == 2


@pytest.mark.asyncio
async def test_list_reports_rejects_inverted_bbox(app_client: AsyncClient):
    params = {"swLat": 21.0, "swLng": -104.0, "neLat": 20.0, "neLng": -103.0}
    r = await app_client.get("/reports", params=params)
    assert r.status_code == 400
    assert r.json()["code"] == "validation_error"


@pytest.mark.asyncio
async def test_stale_reports_expire_on_list(app_client: AsyncClient, make_report, clock):
    report = await make_report()
    clock.advance(hours=4, minutes=1)

    r = await app_client.get("/reports")
    assert r.status_code == 200
    assert r.json() == []

    detail = await app_client.get(f"/reports/{report['id']}")
    assert detail.json()["status"] == "expired"

    vote = await app_client.post(
        f"/reports/{report['id']}/vote", json={"vote_type": "confirm", "voter_fingerprint": "v"}
    )
    assert vote.status_code == 400
    assert vote.json()["code"] == "invalid_state"


@pytest.mark.asyncio
async def test_score_decays_between_reads(app_client: AsyncClient, make_report, clock):
    report = await make_report()
    await app_client.post(
        f"/reports/{report['id']}/vote", json={"vote_type": "confirm", "voter_fingerprint": "v"}
    )
    clock.advance(hours=1)
    r = await app_client.get(f"/reports/{report['id']}")
    assert r.json()["score"] == 0.5
