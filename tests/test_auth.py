"""Tests for the admin gate.

Every /api/admin/* route requires X-Admin-Key; public routes do not.
"""
import pytest
from httpx import AsyncClient

from app.config import settings
from tests.conftest import ADMIN_HEADERS


@pytest.mark.asyncio
async def test_admin_route_requires_key(client: AsyncClient):
    resp = await client.get("/api/admin/project-types")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_admin_route_rejects_wrong_key(client: AsyncClient):
    resp = await client.get("/api/admin/project-types", headers={"X-Admin-Key": "nope"})
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_admin_route_accepts_key(client: AsyncClient):
    resp = await client.get("/api/admin/project-types", headers=ADMIN_HEADERS)
    assert resp.status_code == 200
    assert resp.json() == []


@pytest.mark.asyncio
async def test_write_without_key_changes_nothing(client: AsyncClient):
    resp = await client.post("/api/admin/project-types", json={"name": "Sneaky"})
    assert resp.status_code == 401

    resp = await client.get("/api/project-types")
    assert resp.json() == []


@pytest.mark.asyncio
async def test_empty_key_disables_gate(client: AsyncClient, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_API_KEY", "")
    resp = await client.get("/api/admin/project-types")
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_public_routes_are_open(client: AsyncClient):
    for path in ("/api/blog", "/api/projects", "/api/services", "/api/about"):
        resp = await client.get(path)
        assert resp.status_code == 200, path
