"""Tests for public comment submission and moderation."""
import pytest
from httpx import AsyncClient

from tests.conftest import ADMIN_HEADERS, create_post

COMMENT = {
    "user_name": "Reader",
    "user_email": "reader@example.com",
    "comment_body": "Great write-up, thanks!",
}


async def _published_post(client: AsyncClient, title: str = "Commentable") -> dict:
    post = await create_post(client, title)
    resp = await client.post(f"/api/admin/blog-posts/{post['id']}/publish", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    return resp.json()


async def _comment(client: AsyncClient, slug: str, ip: str, **overrides):
    return await client.post(
        f"/api/blog/{slug}/comments",
        json={**COMMENT, **overrides},
        headers={"X-Forwarded-For": ip},
    )


async def _queue(client: AsyncClient, query: str = "") -> dict:
    resp = await client.get(f"/api/admin/comments{query}", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    return resp.json()


@pytest.mark.asyncio
async def test_comment_is_held_for_moderation(client: AsyncClient):
    post = await _published_post(client)

    resp = await _comment(client, post["slug"], "10.0.0.1")
    assert resp.status_code == 201

    queue = await _queue(client)
    assert queue["counts"] == {"total": 1, "pending": 1, "approved": 0}
    comment = queue["items"][0]
    assert comment["is_approved"] is False
    assert comment["ip_address"] == "10.0.0.1"
    assert comment["post_title"] == "Commentable"

    page = (await client.get(f"/api/blog/{post['slug']}")).json()
    assert page["comments"] == []


@pytest.mark.asyncio
async def test_approved_comment_is_public(client: AsyncClient):
    post = await _published_post(client)
    await _comment(client, post["slug"], "10.0.0.2")
    comment_id = (await _queue(client))["items"][0]["id"]

    resp = await client.post(f"/api/admin/comments/{comment_id}/approve", headers=ADMIN_HEADERS)
    assert resp.json()["is_approved"] is True

    page = (await client.get(f"/api/blog/{post['slug']}")).json()
    assert [c["comment_body"] for c in page["comments"]] == [COMMENT["comment_body"]]
    assert "user_email" not in page["comments"][0]

    resp = await client.post(f"/api/admin/comments/{comment_id}/toggle-approval", headers=ADMIN_HEADERS)
    assert resp.json()["is_approved"] is False


@pytest.mark.asyncio
async def test_honeypot_pretends_success(client: AsyncClient):
    post = await _published_post(client)

    resp = await _comment(client, post["slug"], "10.0.0.3", website="http://spam.example")
    assert resp.status_code == 202
    assert "awaiting moderation" in resp.json()["message"]

    assert (await _queue(client))["counts"]["total"] == 0


@pytest.mark.asyncio
async def test_rate_limit_per_ip(client: AsyncClient):
    post = await _published_post(client)

    assert (await _comment(client, post["slug"], "10.0.0.4")).status_code == 201
    resp = await _comment(client, post["slug"], "10.0.0.4", comment_body="Another thought here")
    assert resp.status_code == 422
    assert "comment_body" in resp.json()["errors"]

    assert (await _comment(client, post["slug"], "10.0.0.5")).status_code == 201
    assert (await _queue(client))["counts"]["total"] == 2


@pytest.mark.asyncio
async def test_comment_validation(client: AsyncClient):
    post = await _published_post(client)
    resp = await _comment(client, post["slug"], "10.0.0.6", comment_body="hey")
    assert resp.status_code == 422
    resp = await _comment(client, post["slug"], "10.0.0.6", user_email="not-an-email")
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_cannot_comment_on_draft(client: AsyncClient):
    post = await create_post(client, "Still Drafting")
    resp = await _comment(client, post["slug"], "10.0.0.7")
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_bulk_approve_and_delete(client: AsyncClient):
    post = await _published_post(client)
    for index in range(3):
        await _comment(client, post["slug"], f"10.0.1.{index}")
    ids = [c["id"] for c in (await _queue(client))["items"]]

    resp = await client.post("/api/admin/comments/bulk-approve", json={"ids": ids[:2]}, headers=ADMIN_HEADERS)
    assert resp.json()["affected"] == 2
    assert (await _queue(client))["counts"] == {"total": 3, "pending": 1, "approved": 2}

    pending = (await _queue(client, "?status=pending"))["items"]
    assert [c["id"] for c in pending] == [ids[2]]

    resp = await client.post("/api/admin/comments/bulk-delete", json={"ids": ids}, headers=ADMIN_HEADERS)
    assert resp.json()["affected"] == 3
    assert (await _queue(client))["counts"]["total"] == 0


@pytest.mark.asyncio
async def test_bulk_with_unknown_id_changes_nothing(client: AsyncClient):
    post = await _published_post(client)
    await _comment(client, post["slug"], "10.0.2.1")
    comment_id = (await _queue(client))["items"][0]["id"]

    resp = await client.post(
        "/api/admin/comments/bulk-approve",
        json={"ids": [comment_id, 987654]},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 422
    assert "ids.1" in resp.json()["errors"]
    assert (await _queue(client))["counts"]["approved"] == 0


@pytest.mark.asyncio
async def test_deleting_post_removes_its_comments(client: AsyncClient):
    post = await _published_post(client)
    await _comment(client, post["slug"], "10.0.3.1")

    resp = await client.delete(f"/api/admin/blog-posts/{post['id']}", headers=ADMIN_HEADERS)
    assert resp.status_code == 204
    assert (await _queue(client))["counts"]["total"] == 0
