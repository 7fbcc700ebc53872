"""
Blog category and tag administration.

Route summary
-------------
GET    /api/admin/blog-categories                 list in display order (with post counts)
POST   /api/admin/blog-categories                 create
GET    /api/admin/blog-categories/{category_id}
PUT    /api/admin/blog-categories/{category_id}
DELETE /api/admin/blog-categories/{category_id}   409 while posts are attached
POST   /api/admin/blog-categories/reorder

GET    /api/admin/blog-tags                       list by name (with post counts)
POST   /api/admin/blog-tags
GET    /api/admin/blog-tags/{tag_id}
PUT    /api/admin/blog-tags/{tag_id}
DELETE /api/admin/blog-tags/{tag_id}              detaches the tag from its posts
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.database_models import BlogCategory, BlogTag, blog_post_category, blog_post_tag
from app.models.schemas import (
    BlogCategoryCreate,
    BlogCategoryResponse,
    BlogCategoryUpdate,
    BlogTagCreate,
    BlogTagResponse,
    BlogTagUpdate,
    ReorderRequest,
    ReorderResponse,
)
from app.services.ordering import ordering_manager
from app.services.repository import count_where, counts_by, get_or_404, guard_dependents
from app.services.slugs import flush_unique, slug_resolver

logger = logging.getLogger(__name__)

router = APIRouter()
tags_router = APIRouter()

_POST_CATEGORY = blog_post_category.c.blog_category_id
_POST_TAG = blog_post_tag.c.blog_tag_id


async def _category_response(db: AsyncSession, category: BlogCategory) -> BlogCategoryResponse:
    count = await count_where(db, blog_post_category.c.blog_post_id, _POST_CATEGORY == category.id)
    return BlogCategoryResponse.model_validate(category).model_copy(update={"posts_count": count})


async def _tag_response(db: AsyncSession, tag: BlogTag) -> BlogTagResponse:
    count = await count_where(db, blog_post_tag.c.blog_post_id, _POST_TAG == tag.id)
    return BlogTagResponse.model_validate(tag).model_copy(update={"posts_count": count})


async def _save(db: AsyncSession, entity, data: dict, explicit_slug) -> None:
    title_changed = "name" in data and data["name"] != entity.name
    for key, value in data.items():
        setattr(entity, key, value)
    await slug_resolver.assign_slug(db, entity, explicit_slug, title_changed=title_changed)
    await flush_unique(db, entity)


# ═══════════════════════════════════════════════════════════════════════════════
# CATEGORIES
# ═══════════════════════════════════════════════════════════════════════════════

@router.get("", response_model=List[BlogCategoryResponse])
async def list_blog_categories(db: AsyncSession = Depends(get_db)) -> List[BlogCategoryResponse]:
    categories = (await db.execute(ordering_manager.ordered(BlogCategory))).scalars().all()
    counts = await counts_by(db, _POST_CATEGORY, [c.id for c in categories])
    return [
        BlogCategoryResponse.model_validate(c).model_copy(update={"posts_count": counts.get(c.id, 0)})
        for c in categories
    ]


@router.post("", response_model=BlogCategoryResponse, status_code=status.HTTP_201_CREATED)
async def create_blog_category(
    body: BlogCategoryCreate,
    db: AsyncSession = Depends(get_db),
) -> BlogCategoryResponse:
    data = body.model_dump(exclude={"slug"})
    if data["display_order"] is None:
        data["display_order"] = await ordering_manager.next_display_order(db, BlogCategory)

    category = BlogCategory(**data)
    await slug_resolver.assign_slug(db, category, body.slug)
    db.add(category)
    await flush_unique(db, category)

    logger.info("Created blog category id=%d slug=%r", category.id, category.slug)
    return BlogCategoryResponse.model_validate(category)


@router.post("/reorder", response_model=ReorderResponse)
async def reorder_blog_categories(body: ReorderRequest, db: AsyncSession = Depends(get_db)) -> ReorderResponse:
    updated = await ordering_manager.reorder(db, BlogCategory, body.entries(), field=body.field)
    return ReorderResponse(updated=updated)


@router.get("/{category_id}", response_model=BlogCategoryResponse)
async def get_blog_category(category_id: int, db: AsyncSession = Depends(get_db)) -> BlogCategoryResponse:
    category = await get_or_404(db, BlogCategory, category_id)
    return await _category_response(db, category)


@router.put("/{category_id}", response_model=BlogCategoryResponse)
async def update_blog_category(
    category_id: int,
    body: BlogCategoryUpdate,
    db: AsyncSession = Depends(get_db),
) -> BlogCategoryResponse:
    category = await get_or_404(db, BlogCategory, category_id)
    data = body.changes()
    explicit_slug = data.pop("slug", None)
    await _save(db, category, data, explicit_slug)
    logger.info("Updated blog category id=%d slug=%r", category.id, category.slug)
    return await _category_response(db, category)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_blog_category(category_id: int, db: AsyncSession = Depends(get_db)) -> None:
    category = await get_or_404(db, BlogCategory, category_id)
    await guard_dependents(db, "category", "posts", _POST_CATEGORY, category.id)

    await db.delete(category)
    await db.flush()
    logger.info("Deleted blog category id=%d name=%r", category_id, category.name)


# ═══════════════════════════════════════════════════════════════════════════════
# TAGS
# ═══════════════════════════════════════════════════════════════════════════════

@tags_router.get("", response_model=List[BlogTagResponse])
async def list_blog_tags(db: AsyncSession = Depends(get_db)) -> List[BlogTagResponse]:
    tags = (await db.execute(select(BlogTag).order_by(BlogTag.name, BlogTag.id))).scalars().all()
    counts = await counts_by(db, _POST_TAG, [t.id for t in tags])
    return [
        BlogTagResponse.model_validate(t).model_copy(update={"posts_count": counts.get(t.id, 0)})
        for t in tags
    ]


@tags_router.post("", response_model=BlogTagResponse, status_code=status.HTTP_201_CREATED)
async def create_blog_tag(body: BlogTagCreate, db: AsyncSession = Depends(get_db)) -> BlogTagResponse:
    tag = BlogTag(name=body.name)
    await slug_resolver.assign_slug(db, tag, body.slug)
    db.add(tag)
    await flush_unique(db, tag)

    logger.info("Created blog tag id=%d slug=%r", tag.id, tag.slug)
    return BlogTagResponse.model_validate(tag)


@tags_router.get("/{tag_id}", response_model=BlogTagResponse)
async def get_blog_tag(tag_id: int, db: AsyncSession = Depends(get_db)) -> BlogTagResponse:
    tag = await get_or_404(db, BlogTag, tag_id)
    return await _tag_response(db, tag)


@tags_router.put("/{tag_id}", response_model=BlogTagResponse)
async def update_blog_tag(
    tag_id: int,
    body: BlogTagUpdate,
    db: AsyncSession = Depends(get_db),
) -> BlogTagResponse:
    tag = await get_or_404(db, BlogTag, tag_id)
    data = body.changes()
    explicit_slug = data.pop("slug", None)
    await _save(db, tag, data, explicit_slug)
    logger.info("Updated blog tag id=%d slug=%r", tag.id, tag.slug)
    return await _tag_response(db, tag)


@tags_router.delete("/{tag_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_blog_tag(tag_id: int, db: AsyncSession = Depends(get_db)) -> None:
    tag = await get_or_404(db, BlogTag, tag_id)

    detached = await db.execute(delete(blog_post_tag).where(_POST_TAG == tag.id))
    await db.delete(tag)
    await db.flush()
    logger.info("Deleted blog tag id=%d name=%r (detached from %d post(s))", tag_id, tag.name, detached.rowcount)
