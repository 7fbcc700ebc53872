"""
Skill category and skill administration.

Route summary
-------------
GET    /api/admin/skill-categories                          list with skills
POST   /api/admin/skill-categories
POST   /api/admin/skill-categories/reorder
GET    /api/admin/skill-categories/{category_id}
PUT    /api/admin/skill-categories/{category_id}
DELETE /api/admin/skill-categories/{category_id}            deletes its skills too
POST   /api/admin/skill-categories/{category_id}/skills/reorder

GET    /api/admin/skills                                    list (optionally one category)
POST   /api/admin/skills                                    appended to its category
GET    /api/admin/skills/{skill_id}
PUT    /api/admin/skills/{skill_id}
DELETE /api/admin/skills/{skill_id}
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.database_models import Skill, SkillCategory
from app.models.schemas import (
    ReorderRequest,
    ReorderResponse,
    SkillCategoryCreate,
    SkillCategoryResponse,
    SkillCategoryUpdate,
    SkillCreate,
    SkillResponse,
    SkillUpdate,
)
from app.services.ordering import ordering_manager
from app.services.repository import ensure_exists, get_or_404, reload
from app.services.slugs import flush_unique, slug_resolver

logger = logging.getLogger(__name__)

router = APIRouter()
skills_router = APIRouter()


# ═══════════════════════════════════════════════════════════════════════════════
# CATEGORIES
# ═══════════════════════════════════════════════════════════════════════════════

@router.get("", response_model=List[SkillCategoryResponse])
async def list_skill_categories(db: AsyncSession = Depends(get_db)):
    return (await db.execute(ordering_manager.ordered(SkillCategory))).scalars().all()


@router.post("", response_model=SkillCategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_skill_category(body: SkillCategoryCreate, db: AsyncSession = Depends(get_db)):
    data = body.model_dump(exclude={"slug"})
    if data["display_order"] is None:
        data["display_order"] = await ordering_manager.next_display_order(db, SkillCategory)

    category = SkillCategory(**data)
    await slug_resolver.assign_slug(db, category, body.slug)
    db.add(category)
    await flush_unique(db, category)

    logger.info("Created skill category id=%d slug=%r", category.id, category.slug)
    return await reload(db, SkillCategory, category.id)


@router.post("/reorder", response_model=ReorderResponse)
async def reorder_skill_categories(body: ReorderRequest, db: AsyncSession = Depends(get_db)) -> ReorderResponse:
    updated = await ordering_manager.reorder(db, SkillCategory, body.entries(), field=body.field)
    return ReorderResponse(updated=updated)


@router.get("/{category_id}", response_model=SkillCategoryResponse)
async def get_skill_category(category_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, SkillCategory, category_id)


@router.put("/{category_id}", response_model=SkillCategoryResponse)
async def update_skill_category(
    category_id: int,
    body: SkillCategoryUpdate,
    db: AsyncSession = Depends(get_db),
):
    category = await get_or_404(db, SkillCategory, category_id)
    data = body.changes()
    explicit_slug = data.pop("slug", None)
    title_changed = "name" in data and data["name"] != category.name

    for key, value in data.items():
        setattr(category, key, value)
    await slug_resolver.assign_slug(db, category, explicit_slug, title_changed=title_changed)
    await flush_unique(db, category)

    logger.info("Updated skill category id=%d slug=%r", category.id, category.slug)
    return category


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_skill_category(category_id: int, db: AsyncSession = Depends(get_db)) -> None:
    category = await get_or_404(db, SkillCategory, category_id)
    skill_count = len(category.skills)
    await db.delete(category)
    await db.flush()
    logger.info("Deleted skill category id=%d with %d skill(s)", category_id, skill_count)


@router.post("/{category_id}/skills/reorder", response_model=ReorderResponse)
async def reorder_category_skills(
    category_id: int,
    body: ReorderRequest,
    db: AsyncSession = Depends(get_db),
) -> ReorderResponse:
    category = await get_or_404(db, SkillCategory, category_id)
    updated = await ordering_manager.reorder(db, Skill, body.entries(), category.id, field=body.field)
    return ReorderResponse(updated=updated)


# ═══════════════════════════════════════════════════════════════════════════════
# SKILLS
# ═══════════════════════════════════════════════════════════════════════════════

@skills_router.get("", response_model=List[SkillResponse])
async def list_skills(
    skill_category_id: Optional[int] = None,
    db: AsyncSession = Depends(get_db),
):
    if skill_category_id is not None:
        stmt = ordering_manager.ordered(Skill, skill_category_id)
    else:
        stmt = select(Skill).order_by(Skill.skill_category_id, *ordering_manager.order_by(Skill))
    return (await db.execute(stmt)).scalars().all()


@skills_router.post("", response_model=SkillResponse, status_code=status.HTTP_201_CREATED)
async def create_skill(body: SkillCreate, db: AsyncSession = Depends(get_db)):
    await ensure_exists(db, SkillCategory, body.skill_category_id, "skill_category_id")

    data = body.model_dump()
    if data["display_order"] is None:
        data["display_order"] = await ordering_manager.next_display_order(db, Skill, body.skill_category_id)

    skill = Skill(**data)
    db.add(skill)
    await db.flush()
    logger.info("Created skill id=%d in category id=%d", skill.id, skill.skill_category_id)
    return skill


@skills_router.get("/{skill_id}", response_model=SkillResponse)
async def get_skill(skill_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Skill, skill_id)


@skills_router.put("/{skill_id}", response_model=SkillResponse)
async def update_skill(skill_id: int, body: SkillUpdate, db: AsyncSession = Depends(get_db)):
    skill = await get_or_404(db, Skill, skill_id)
    data = body.changes()

    new_category = data.get("skill_category_id")
    if new_category is not None and new_category != skill.skill_category_id:
        await ensure_exists(db, SkillCategory, new_category, "skill_category_id")
        if "display_order" not in data:
            data["display_order"] = await ordering_manager.next_display_order(db, Skill, new_category)

    for key, value in data.items():
        setattr(skill, key, value)
    await db.flush()
    logger.info("Updated skill id=%d", skill.id)
    return skill


@skills_router.delete("/{skill_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_skill(skill_id: int, db: AsyncSession = Depends(get_db)) -> None:
    skill = await get_or_404(db, Skill, skill_id)
    await db.delete(skill)
    await db.flush()
    logger.info("Deleted skill id=%d", skill_id)
