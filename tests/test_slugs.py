"""Tests for slug derivation and uniqueness."""
import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import UniquenessConflict
from app.models.database_models import BlogTag, ProjectType
from app.services.slugs import flush_unique, slug_resolver, slugify
from tests.conftest import ADMIN_HEADERS, create_project_type


async def _add_type(db: AsyncSession, name: str, slug: str = None) -> ProjectType:
    project_type = ProjectType(name=name, display_order=0)
    await slug_resolver.assign_slug(db, project_type, slug)
    db.add(project_type)
    await flush_unique(db, project_type)
    return project_type


def test_slugify_basic():
    assert slugify("Artificial Intelligence") == "artificial-intelligence"
    assert slugify("  Café & Crème!  ") == "cafe-creme"
    assert slugify("C++ / Rust -- Systems") == "c-rust-systems"


def test_slugify_fallback_and_length():
    assert slugify("!!!", fallback="item") == "item"
    assert slugify("abc def", max_length=4) == "abc"


def test_slugify_transliterates_non_latin_text():
    assert slugify("Привет мир", fallback="category") == "privet-mir"
    assert slugify("Straße") == "strasse"
    assert slugify("東京", fallback="category") not in ("", "category")


@pytest.mark.asyncio
async def test_duplicate_titles_get_numeric_suffixes(db_session: AsyncSession):
    first = await _add_type(db_session, "Artificial Intelligence")
    second = await _add_type(db_session, "Artificial Intelligence")
    third = await _add_type(db_session, "Artificial  Intelligence!")

    assert first.slug == "artificial-intelligence"
    assert second.slug == "artificial-intelligence-1"
    assert third.slug == "artificial-intelligence-2"


@pytest.mark.asyncio
async def test_resolving_own_slug_is_idempotent(db_session: AsyncSession):
    project_type = await _add_type(db_session, "Computer Vision")
    slug = await slug_resolver.resolve_slug(
        db_session, ProjectType, "Computer Vision", exclude_id=project_type.id
    )
    assert slug == "computer-vision"


@pytest.mark.asyncio
async def test_free_base_is_used_even_if_suffixed_exists(db_session: AsyncSession):
    await _add_type(db_session, "Robotics", slug="robotics-1")
    slug = await slug_resolver.resolve_slug(db_session, ProjectType, "Robotics")
    assert slug == "robotics"


@pytest.mark.asyncio
async def test_explicit_slug_collision_raises(db_session: AsyncSession):
    await _add_type(db_session, "Machine Learning")
    with pytest.raises(UniquenessConflict) as exc_info:
        await slug_resolver.resolve_slug(db_session, ProjectType, "Other", explicit_slug="machine-learning")
    assert exc_info.value.field == "slug"


@pytest.mark.asyncio
async def test_slugs_are_unique_per_table(db_session: AsyncSession):
    await _add_type(db_session, "Python")
    tag = BlogTag(name="Python")
    await slug_resolver.assign_slug(db_session, tag)
    assert tag.slug == "python"


@pytest.mark.asyncio
async def test_empty_title_uses_model_fallback(db_session: AsyncSession):
    project_type = await _add_type(db_session, "???")
    assert project_type.slug == "type"


@pytest.mark.asyncio
async def test_api_explicit_slug_conflict_returns_409(client: AsyncClient):
    await create_project_type(client, "Data Science", slug="data")
    resp = await client.post(
        "/api/admin/project-types",
        json={"name": "Databases", "slug": "data"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 409
    data = resp.json()
    assert data["error"] == "UniquenessConflict"
    assert data["field"] == "slug"
    assert data["value"] == "data"


@pytest.mark.asyncio
async def test_api_invalid_slug_shape_rejected(client: AsyncClient):
    resp = await client.post(
        "/api/admin/project-types",
        json={"name": "Bad", "slug": "Not A Slug"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_title_change_rederives_automatic_slug(client: AsyncClient):
    created = await create_project_type(client, "Vision")
    assert created["slug"] == "vision"

    resp = await client.put(
        f"/api/admin/project-types/{created['id']}",
        json={"name": "Computer Vision"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json()["slug"] == "computer-vision"


@pytest.mark.asyncio
async def test_title_change_keeps_explicit_slug(client: AsyncClient):
    created = await create_project_type(client, "Vision", slug="cv")

    resp = await client.put(
        f"/api/admin/project-types/{created['id']}",
        json={"name": "Computer Vision"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json()["slug"] == "cv"


@pytest.mark.asyncio
async def test_update_without_title_change_keeps_slug(client: AsyncClient):
    await create_project_type(client, "Vision")
    second = await create_project_type(client, "Vision")
    assert second["slug"] == "vision-1"

    resp = await client.put(
        f"/api/admin/project-types/{second['id']}",
        json={"color": "purple"},
        headers=ADMIN_HEADERS,
    )
    assert resp.json()["slug"] == "vision-1"


@pytest.mark.asyncio
async def test_blog_category_slugs_via_api(client: AsyncClient):
    slugs = []
    for _ in range(2):
        resp = await client.post(
            "/api/admin/blog-categories",
            json={"name": "Artificial Intelligence"},
            headers=ADMIN_HEADERS,
        )
        assert resp.status_code == 201
        slugs.append(resp.json()["slug"])
    assert slugs == ["artificial-intelligence", "artificial-intelligence-1"]


@pytest.mark.asyncio
async def test_lost_race_on_flush_raises_uniqueness_conflict(db_session: AsyncSession):
    slug = await slug_resolver.resolve_slug(db_session, ProjectType, "Robotics")
    assert slug == "robotics"

    # Another writer takes the slug between the check and our insert
    await _add_type(db_session, "Robotics Lab", slug="robotics")

    late = ProjectType(name="Robotics", slug=slug, slug_auto=True, display_order=1)
    db_session.add(late)
    with pytest.raises(UniquenessConflict) as exc_info:
        await flush_unique(db_session, late)
    assert exc_info.value.field == "slug"
    assert exc_info.value.value == "robotics"
    await db_session.rollback()


@pytest.mark.asyncio
async def test_title_change_keeps_resubmitted_explicit_slug(client: AsyncClient):
    resp = await client.post(
        "/api/admin/blog-categories",
        json={"name": "Machine Learning"},
        headers=ADMIN_HEADERS,
    )
    created = resp.json()
    assert created["slug"] == "machine-learning"

    resp = await client.put(
        f"/api/admin/blog-categories/{created['id']}",
        json={"name": "Deep Learning", "slug": "machine-learning"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    assert resp.json()["slug"] == "machine-learning"

    # The slug is now pinned; later renames leave it alone
    resp = await client.put(
        f"/api/admin/blog-categories/{created['id']}",
        json={"name": "Neural Networks"},
        headers=ADMIN_HEADERS,
    )
    assert resp.json()["slug"] == "machine-learning"
