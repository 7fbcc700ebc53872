"""Tests for skills, experiences, the profile and the public about page."""
import pytest
from httpx import AsyncClient

from tests.conftest import ADMIN_HEADERS, png_bytes

PROFILE = {
    "full_name": "Sam Rivera",
    "title": "Machine Learning Engineer",
    "short_bio": "Builds things that learn.",
    "cgpa": 3.9,
    "social_links": {"github": "https://github.com/example"},
}


async def _category(client: AsyncClient, name: str, **extra) -> dict:
    resp = await client.post("/api/admin/skill-categories", json={"name": name, **extra}, headers=ADMIN_HEADERS)
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _skill(client: AsyncClient, category_id: int, name: str, **extra) -> dict:
    resp = await client.post(
        "/api/admin/skills",
        json={"skill_category_id": category_id, "name": name, **extra},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()


async def _experience(client: AsyncClient, title: str, **extra) -> dict:
    body = {"title": title, "company": "Acme", "start_date": "2021-03-01", **extra}
    resp = await client.post("/api/admin/experiences", json=body, headers=ADMIN_HEADERS)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ═══════════════════════════════════════════════════════════════════════════════
# SKILLS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_skills_append_within_their_category(client: AsyncClient):
    languages = await _category(client, "Languages")
    tools = await _category(client, "Tools")

    python = await _skill(client, languages["id"], "Python")
    go = await _skill(client, languages["id"], "Go")
    docker = await _skill(client, tools["id"], "Docker")

    assert (python["display_order"], go["display_order"], docker["display_order"]) == (0, 1, 0)


@pytest.mark.asyncio
async def test_skill_reorder_within_category(client: AsyncClient):
    languages = await _category(client, "Languages")
    python = await _skill(client, languages["id"], "Python")
    go = await _skill(client, languages["id"], "Go")

    resp = await client.post(
        f"/api/admin/skill-categories/{languages['id']}/skills/reorder",
        json={"order": [go["id"], python["id"]]},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200

    resp = await client.get(f"/api/admin/skill-categories/{languages['id']}", headers=ADMIN_HEADERS)
    assert [s["name"] for s in resp.json()["skills"]] == ["Go", "Python"]


@pytest.mark.asyncio
async def test_skill_with_unknown_category_rejected(client: AsyncClient):
    resp = await client.post(
        "/api/admin/skills",
        json={"skill_category_id": 555, "name": "Ghost"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 422
    assert "skill_category_id" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_moving_skill_appends_to_new_category(client: AsyncClient):
    languages = await _category(client, "Languages")
    tools = await _category(client, "Tools")
    await _skill(client, tools["id"], "Docker")
    python = await _skill(client, languages["id"], "Python")

    resp = await client.put(
        f"/api/admin/skills/{python['id']}",
        json={"skill_category_id": tools["id"]},
        headers=ADMIN_HEADERS,
    )
    assert resp.json()["skill_category_id"] == tools["id"]
    assert resp.json()["display_order"] == 1


@pytest.mark.asyncio
async def test_deleting_category_deletes_its_skills(client: AsyncClient):
    languages = await _category(client, "Languages")
    python = await _skill(client, languages["id"], "Python")

    resp = await client.delete(f"/api/admin/skill-categories/{languages['id']}", headers=ADMIN_HEADERS)
    assert resp.status_code == 204
    assert (await client.get(f"/api/admin/skills/{python['id']}", headers=ADMIN_HEADERS)).status_code == 404


# ═══════════════════════════════════════════════════════════════════════════════
# EXPERIENCES
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_current_position_has_no_end_date(client: AsyncClient):
    experience = await _experience(client, "Engineer", is_current=True, end_date="2022-01-01")
    assert experience["end_date"] is None
    assert experience["date_range"] == "Mar 2021 - Present"


@pytest.mark.asyncio
async def test_past_position_date_range(client: AsyncClient):
    experience = await _experience(client, "Intern", end_date="2021-09-30", type="internship")
    assert experience["date_range"] == "Mar 2021 - Sep 2021"


@pytest.mark.asyncio
async def test_end_before_start_rejected(client: AsyncClient):
    resp = await client.post(
        "/api/admin/experiences",
        json={"title": "Backwards", "company": "Acme", "start_date": "2021-03-01", "end_date": "2020-01-01"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 422

    experience = await _experience(client, "Forwards")
    resp = await client.put(
        f"/api/admin/experiences/{experience['id']}",
        json={"end_date": "2020-01-01"},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 422
    assert "end_date" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_experience_reorder(client: AsyncClient):
    first = await _experience(client, "First")
    second = await _experience(client, "Second")

    resp = await client.post(
        "/api/admin/experiences/reorder",
        json={"items": [{"id": first["id"], "display_order": 1}, {"id": second["id"], "display_order": 0}]},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    resp = await client.get("/api/admin/experiences", headers=ADMIN_HEADERS)
    assert [e["title"] for e in resp.json()] == ["Second", "First"]


# ═══════════════════════════════════════════════════════════════════════════════
# PROFILE & ABOUT PAGE
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_profile_is_created_then_replaced(client: AsyncClient):
    assert (await client.get("/api/admin/profile", headers=ADMIN_HEADERS)).status_code == 404

    created = (await client.put("/api/admin/profile", json=PROFILE, headers=ADMIN_HEADERS)).json()
    replaced = (
        await client.put("/api/admin/profile", json={**PROFILE, "title": "Research Engineer"}, headers=ADMIN_HEADERS)
    ).json()

    assert replaced["id"] == created["id"]
    assert replaced["title"] == "Research Engineer"
    assert replaced["status"] == "Open to Opportunities"


@pytest.mark.asyncio
async def test_profile_image_upload(client: AsyncClient):
    await client.put("/api/admin/profile", json=PROFILE, headers=ADMIN_HEADERS)
    resp = await client.post(
        "/api/admin/profile/image",
        files={"file": ("me.png", png_bytes(), "image/png")},
        headers=ADMIN_HEADERS,
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["profile_image"].startswith("profile/")
    assert data["profile_image_url"].endswith(data["profile_image"])


@pytest.mark.asyncio
async def test_about_page_shows_only_active_content(client: AsyncClient):
    await client.put("/api/admin/profile", json=PROFILE, headers=ADMIN_HEADERS)
    languages = await _category(client, "Languages")
    await _category(client, "Retired", is_active=False)
    await _skill(client, languages["id"], "Python")
    await _skill(client, languages["id"], "Perl", is_active=False)
    await _experience(client, "Visible")
    await _experience(client, "Hidden", is_active=False)

    data = (await client.get("/api/about")).json()
    assert data["profile"]["full_name"] == "Sam Rivera"
    assert [c["name"] for c in data["skill_categories"]] == ["Languages"]
    assert [s["name"] for s in data["skill_categories"][0]["skills"]] == ["Python"]
    assert [e["title"] for e in data["experiences"]] == ["Visible"]


@pytest.mark.asyncio
async def test_about_page_without_profile(client: AsyncClient):
    data = (await client.get("/api/about")).json()
    assert data["profile"] is None
    assert data["skill_categories"] == []
