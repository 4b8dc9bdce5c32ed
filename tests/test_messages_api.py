import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_post_and_list_messages(app_client: AsyncClient, make_report, clock):
    report = await make_report(creator_fingerprint="op-fp")
    url = f"/reports/{report['id']}/messages"

    r1 = await app_client.post(
        url, json={"content": "Sigue cerrado", "sender_fingerprint": "op-fp"}
    )
    assert r1.status_code == 201
    j1 = r1.json()
    assert j1["alias_number"] == 1
    assert j1["is_op"] is True
    assert "sender_fingerprint" not in j1

    clock.advance(seconds=5)
    r2 = await app_client.post(url, json={"content": "Ya abrieron", "sender_fingerprint": "other"})
    assert r2.status_code == 201
    assert r2.json()["alias_number"] == 2
    assert r2.json()["is_op"] is False

    listed = await app_client.get(url)
    assert listed.status_code == 200
    assert [m["content"] for m in listed.json()] == ["Sigue cerrado", "Ya abrieron"]

    newer = await app_client.get(url, params={"since": j1["created_at"]})
    assert [m["content"] for m in newer.json()] == ["Ya abrieron"]


@pytest.mark.asyncio
async def test_message_cooldown_returns_429(app_client: AsyncClient, make_report, clock):
    report = await make_report()
    url = f"/reports/{report['id']}/messages"
    body = {"content": "uno", "sender_fingerprint": "fp"}

    assert (await app_client.post(url, json=body)).status_code == 201
    clock.advance(seconds=12)
    r = await app_client.post(url, json=body)
    assert r.status_code == 429
    assert r.headers["Retry-After"] == "18"
    assert r.json()["code"] == "rate_limited"

    clock.advance(seconds=18)
    assert (await app_client.post(url, json=body)).status_code == 201


@pytest.mark.asyncio
async def test_message_validation(app_client: AsyncClient, make_report):
    report = await make_report()
    url = f"/reports/{report['id']}/messages"

    too_long = await app_client.post(url, json={"content": "x" * 281, "sender_fingerprint": "a"})
    assert too_long.status_code == 400
    assert too_long.json()["code"] == "validation_error"

    blank = await app_client.post(url, json={"content": "   ", "sender_fingerprint": "a"})
    assert blank.status_code == 400

    no_sender = await app_client.post(url, json={"content": "hola"})
    assert no_sender.status_code == 422

    missing = await app_client.post(
        "/reports/missing/messages", json={"content": "hola", "sender_fingerprint": "a"}
    )
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_messages_rejected_on_expired_report(app_client: AsyncClient, make_report, clock):
    report = await make_report()
    clock.advance(hours=4)
    await app_client.get("/reports")

    r = await app_client.post(
        f"/reports/{report['id']}/messages", json={"content": "hola", "sender_fingerprint": "a"}
    )
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_state"


@pytest.mark.asyncio
async def test_admin_deletes_message(app_client: AsyncClient, admin_headers, make_report):
    report = await make_report()
    url = f"/reports/{report['id']}/messages"
    msg = (await app_client.post(url, json={"content": "spam", "sender_fingerprint": "a"})).json()

    denied = await app_client.delete(f"{url}/{msg['id']}")
    assert denied.status_code == 401

    ok = await app_client.delete(f"{url}/{msg['id']}", headers=admin_headers)
    assert ok.status_code == 200
    assert (await app_client.get(url)).json() == []

    gone = await app_client.delete(f"{url}/{msg['id']}", headers=admin_headers)
    assert gone.status_code == 404
