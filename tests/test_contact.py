"""Tests for the contact form and the admin inbox."""
import pytest
from httpx import AsyncClient

from app.config import settings
from tests.conftest import ADMIN_HEADERS

MESSAGE = {
    "name": "Jordan",
    "email": "jordan@example.com",
    "subject": "Collaboration",
    "message": "Would you be open to a research collaboration?",
}


async def _submit(client: AsyncClient, ip: str = "203.0.113.9", **overrides):
    return await client.post(
        "/api/contact",
        json={**MESSAGE, **overrides},
        headers={"X-Forwarded-For": ip, "User-Agent": "pytest-agent"},
    )


async def _inbox(client: AsyncClient, query: str = "") -> dict:
    resp = await client.get(f"/api/admin/messages{query}", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    return resp.json()


@pytest.mark.asyncio
async def test_submit_stores_message(client: AsyncClient):
    resp = await _submit(client)
    assert resp.status_code == 201

    inbox = await _inbox(client)
    assert inbox["counts"] == {"total": 1, "unread": 1, "unreplied": 1}
    message = inbox["items"][0]
    assert message["ip_address"] == "203.0.113.9"
    assert message["user_agent"] == "pytest-agent"
    assert message["is_read"] is False


@pytest.mark.asyncio
async def test_short_message_rejected(client: AsyncClient):
    resp = await _submit(client, message="hi")
    assert resp.status_code == 422
    assert (await _inbox(client))["counts"]["total"] == 0


@pytest.mark.asyncio
async def test_preview_is_truncated(client: AsyncClient):
    await _submit(client, message="x" * 300)
    preview = (await _inbox(client))["items"][0]["preview"]
    assert len(preview) == 100
    assert preview.endswith("...")


@pytest.mark.asyncio
async def test_show_marks_read(client: AsyncClient):
    await _submit(client)
    message_id = (await _inbox(client))["items"][0]["id"]

    resp = await client.get(f"/api/admin/messages/{message_id}", headers=ADMIN_HEADERS)
    assert resp.json()["is_read"] is True
    assert (await _inbox(client, "?filter=unread"))["total"] == 0


@pytest.mark.asyncio
async def test_read_and_replied_are_independent(client: AsyncClient):
    await _submit(client)
    message_id = (await _inbox(client))["items"][0]["id"]
    base = f"/api/admin/messages/{message_id}"

    data = (await client.post(f"{base}/toggle-replied", headers=ADMIN_HEADERS)).json()
    assert (data["is_read"], data["is_replied"]) == (False, True)

    data = (await client.patch(base, json={"is_read": True, "is_replied": False}, headers=ADMIN_HEADERS)).json()
    assert (data["is_read"], data["is_replied"]) == (True, False)

    data = (await client.post(f"{base}/toggle-read", headers=ADMIN_HEADERS)).json()
    assert data["is_read"] is False


@pytest.mark.asyncio
async def test_bulk_read_unread_delete(client: AsyncClient):
    await _submit(client, subject="One")
    await _submit(client, subject="Two")
    ids = [m["id"] for m in (await _inbox(client))["items"]]

    resp = await client.post("/api/admin/messages/bulk-read", json={"ids": ids}, headers=ADMIN_HEADERS)
    assert resp.json()["affected"] == 2
    assert (await _inbox(client))["counts"]["unread"] == 0

    await client.post("/api/admin/messages/bulk-unread", json={"ids": ids[:1]}, headers=ADMIN_HEADERS)
    assert (await _inbox(client))["counts"]["unread"] == 1

    resp = await client.post("/api/admin/messages/bulk-delete", json={"ids": ids}, headers=ADMIN_HEADERS)
    assert resp.json()["affected"] == 2
    assert (await _inbox(client))["counts"]["total"] == 0


@pytest.mark.asyncio
async def test_bulk_requires_ids(client: AsyncClient):
    resp = await client.post("/api/admin/messages/bulk-read", json={"ids": []}, headers=ADMIN_HEADERS)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_search(client: AsyncClient):
    await _submit(client, subject="Consulting request")
    await _submit(client, subject="Hello", name="Casey")

    data = await _inbox(client, "?search=casey")
    assert [m["name"] for m in data["items"]] == ["Casey"]


@pytest.mark.asyncio
async def test_honeypot_pretends_success(client: AsyncClient):
    for _ in range(2):
        resp = await _submit(client, ip="203.0.113.20", website="http://spam.example")
        assert resp.status_code == 202
        assert "Thank you" in resp.json()["message"]

    assert (await _inbox(client))["counts"]["total"] == 0


@pytest.mark.asyncio
async def test_rate_limit_per_ip(client: AsyncClient):
    for n in range(settings.CONTACT_RATE_LIMIT):
        assert (await _submit(client, ip="203.0.113.30", subject=f"Try {n}")).status_code == 201

    resp = await _submit(client, ip="203.0.113.30", subject="One too many")
    assert resp.status_code == 422
    assert "message" in resp.json()["errors"]

    assert (await _submit(client, ip="203.0.113.31")).status_code == 201
    assert (await _inbox(client))["counts"]["total"] == settings.CONTACT_RATE_LIMIT + 1


@pytest.mark.asyncio
async def test_search_wildcards_match_literally(client: AsyncClient):
    await _submit(client, subject="Discount of 100% please")
    await _submit(client, subject="snake_case naming")
    await _submit(client, subject="Plain hello", name="Robin")

    data = await _inbox(client, "?search=100%25")
    assert [m["subject"] for m in data["items"]] == ["Discount of 100% please"]

    data = await _inbox(client, "?search=e_c")
    assert [m["subject"] for m in data["items"]] == ["snake_case naming"]

    assert (await _inbox(client, "?search=%25"))["total"] == 1
