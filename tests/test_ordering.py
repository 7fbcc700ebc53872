"""Tests for display_order management and the reorder endpoints."""
import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ValidationError
from app.models.database_models import Skill, SkillCategory
from app.services.ordering import ordering_manager, positional_entries
from tests.conftest import ADMIN_HEADERS, create_project_type


async def _ordered_ids(client: AsyncClient) -> list:
    resp = await client.get("/api/admin/project-types", headers=ADMIN_HEADERS)
    return [t["id"] for t in resp.json()]


async def _three_types(client: AsyncClient) -> list:
    ids = []
    for name in ("Alpha", "Beta", "Gamma"):
        ids.append((await create_project_type(client, name))["id"])
    return ids


def test_positional_entries():
    assert positional_entries([9, 4, 6]) == [(9, 0), (4, 1), (6, 2)]


@pytest.mark.asyncio
async def test_new_rows_are_appended(client: AsyncClient):
    ids = await _three_types(client)
    resp = await client.get("/api/admin/project-types", headers=ADMIN_HEADERS)
    assert [t["display_order"] for t in resp.json()] == [0, 1, 2]
    assert await _ordered_ids(client) == ids


@pytest.mark.asyncio
async def test_reorder_explicit_items(client: AsyncClient):
    a, b, c = await _three_types(client)

    resp = await client.post(
        "/api/admin/project-types/reorder",
        json={"items": [
            {"id": a, "display_order": 2},
            {"id": b, "display_order": 0},
            {"id": c, "display_order": 1},
        ]},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json()["updated"] == 3
    assert await _ordered_ids(client) == [b, c, a]


@pytest.mark.asyncio
async def test_reorder_positional_matches_explicit(client: AsyncClient):
    a, b, c = await _three_types(client)

    resp = await client.post(
        "/api/admin/project-types/reorder",
        json={"order": [b, c, a]},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    assert await _ordered_ids(client) == [b, c, a]

    resp = await client.get("/api/admin/project-types", headers=ADMIN_HEADERS)
    assert [t["display_order"] for t in resp.json()] == [0, 1, 2]


@pytest.mark.asyncio
async def test_reorder_with_unknown_id_writes_nothing(client: AsyncClient):
    a, b, c = await _three_types(client)

    resp = await client.post(
        "/api/admin/project-types/reorder",
        json={"items": [
            {"id": c, "display_order": 0},
            {"id": 999999, "display_order": 1},
        ]},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 422
    data = resp.json()
    assert data["error"] == "ValidationError"
    assert "items.1.id" in data["errors"]

    assert await _ordered_ids(client) == [a, b, c]


@pytest.mark.asyncio
async def test_reorder_rejects_duplicate_ids(client: AsyncClient):
    a, b, _ = await _three_types(client)
    resp = await client.post(
        "/api/admin/project-types/reorder",
        json={"order": [a, b, a]},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 422
    assert "order" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_reorder_requires_exactly_one_shape(client: AsyncClient):
    resp = await client.post("/api/admin/project-types/reorder", json={}, headers=ADMIN_HEADERS)
    assert resp.status_code == 422

    resp = await client.post(
        "/api/admin/project-types/reorder",
        json={"order": [1], "items": [{"id": 1, "display_order": 0}]},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_ties_fall_back_to_name(client: AsyncClient):
    zulu = await create_project_type(client, "Zulu", display_order=0)
    alpha = await create_project_type(client, "Alpha", display_order=0)
    assert await _ordered_ids(client) == [alpha["id"], zulu["id"]]


# ---------------------------------------------------------------------------
# Scoped ordering (skills within a category)
# ---------------------------------------------------------------------------

async def _category_with_skills(db: AsyncSession, name: str, skills: list) -> SkillCategory:
    category = SkillCategory(name=name, slug=name.lower(), display_order=0)
    db.add(category)
    await db.flush()
    for index, skill_name in enumerate(skills):
        db.add(Skill(skill_category_id=category.id, name=skill_name, display_order=index))
    await db.flush()
    return category


@pytest.mark.asyncio
async def test_next_display_order_is_per_scope(db_session: AsyncSession):
    languages = await _category_with_skills(db_session, "Languages", ["Python", "Go", "Rust"])
    tools = await _category_with_skills(db_session, "Tools", [])

    assert await ordering_manager.next_display_order(db_session, Skill, languages.id) == 3
    assert await ordering_manager.next_display_order(db_session, Skill, tools.id) == 0


@pytest.mark.asyncio
async def test_reorder_rejects_ids_from_another_scope(db_session: AsyncSession):
    languages = await _category_with_skills(db_session, "Languages", ["Python"])
    tools = await _category_with_skills(db_session, "Tools", ["Docker"])
    docker = (await db_session.execute(ordering_manager.ordered(Skill, tools.id))).scalars().one()

    with pytest.raises(ValidationError) as exc_info:
        await ordering_manager.reorder(db_session, Skill, [(docker.id, 0)], languages.id)
    assert "items.0.id" in exc_info.value.errors


@pytest.mark.asyncio
async def test_scoped_model_requires_scope(db_session: AsyncSession):
    with pytest.raises(ValueError):
        ordering_manager.ordered(Skill)
