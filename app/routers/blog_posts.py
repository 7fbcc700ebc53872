"""
Blog post administration.

Route summary
-------------
GET    /api/admin/blog-posts                        paginated list (status / category / search)
POST   /api/admin/blog-posts                        create
GET    /api/admin/blog-posts/{post_id}
PUT    /api/admin/blog-posts/{post_id}              partial update
DELETE /api/admin/blog-posts/{post_id}              delete post, comments and cover file
POST   /api/admin/blog-posts/{post_id}/publish
POST   /api/admin/blog-posts/{post_id}/unpublish
POST   /api/admin/blog-posts/{post_id}/toggle-publish
POST   /api/admin/blog-posts/{post_id}/toggle-featured
POST   /api/admin/blog-posts/{post_id}/cover        upload cover image (replaces old file)
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.database_models import BlogCategory, BlogPost, BlogTag, PostStatus
from app.models.schemas import (
    BlogPostCreate,
    BlogPostResponse,
    BlogPostSummary,
    BlogPostUpdate,
    Page,
)
from app.services.blog import blog_publisher
from app.services.repository import get_or_404, load_by_ids, paginate, reload, search_filter
from app.services.slugs import flush_unique, slug_resolver
from app.services.storage import LocalFileStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


async def _apply_links(db: AsyncSession, post: BlogPost, data: Dict[str, Any]) -> None:
    """Replace category / tag links for whichever id list was sent."""
    category_ids = data.pop("category_ids", None)
    tag_ids = data.pop("tag_ids", None)
    if category_ids is not None:
        post.categories = await load_by_ids(db, BlogCategory, category_ids, "category_ids")
    if tag_ids is not None:
        post.tags = await load_by_ids(db, BlogTag, tag_ids, "tag_ids")


# ═══════════════════════════════════════════════════════════════════════════════
# POST CRUD
# ═══════════════════════════════════════════════════════════════════════════════

@router.get("", response_model=Page[BlogPostSummary])
async def list_blog_posts(
    post_status: Optional[PostStatus] = Query(None, alias="status"),
    category_id: Optional[int] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.ADMIN_PAGE_SIZE, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """Newest first."""
    stmt = select(BlogPost).order_by(BlogPost.created_at.desc(), BlogPost.id.desc())
    if post_status is not None:
        stmt = stmt.where(BlogPost.status == post_status)
    if category_id is not None:
        stmt = stmt.where(BlogPost.categories.any(BlogCategory.id == category_id))
    term = search_filter(search, BlogPost.title, BlogPost.excerpt, BlogPost.content)
    if term is not None:
        stmt = stmt.where(term)

    rows, meta = await paginate(db, stmt, page, per_page)
    return {"items": rows, **meta}


@router.post("", response_model=BlogPostResponse, status_code=status.HTTP_201_CREATED)
async def create_blog_post(body: BlogPostCreate, db: AsyncSession = Depends(get_db)):
    data = body.model_dump(exclude={"slug", "status"})
    data["author_name"] = data["author_name"] or settings.DEFAULT_AUTHOR_NAME

    post = BlogPost()
    await _apply_links(db, post, data)
    for key, value in data.items():
        setattr(post, key, value)

    blog_publisher.refresh_reading_time(post)
    blog_publisher.set_status(post, body.status)
    await slug_resolver.assign_slug(db, post, body.slug)

    db.add(post)
    await flush_unique(db, post)

    logger.info("Created blog post id=%d slug=%r status=%s", post.id, post.slug, post.status.value)
    return await reload(db, BlogPost, post.id)


@router.get("/{post_id}", response_model=BlogPostResponse)
async def get_blog_post(post_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, BlogPost, post_id)


@router.put("/{post_id}", response_model=BlogPostResponse)
async def update_blog_post(
    post_id: int,
    body: BlogPostUpdate,
    db: AsyncSession = Depends(get_db),
):
    post = await get_or_404(db, BlogPost, post_id)
    data = body.changes()
    explicit_slug = data.pop("slug", None)
    new_status = data.pop("status", None)
    title_changed = "title" in data and data["title"] != post.title
    content_changed = "content" in data and data["content"] != post.content

    await _apply_links(db, post, data)
    for key, value in data.items():
        setattr(post, key, value)

    if content_changed:
        blog_publisher.refresh_reading_time(post)
    if new_status is not None and new_status != post.status:
        blog_publisher.set_status(post, new_status)
    elif new_status == PostStatus.PUBLISHED and post.published_at is None:
        blog_publisher.publish(post)

    await slug_resolver.assign_slug(db, post, explicit_slug, title_changed=title_changed)
    await flush_unique(db, post)

    logger.info("Updated blog post id=%d slug=%r", post.id, post.slug)
    return await reload(db, BlogPost, post.id)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_blog_post(
    post_id: int,
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
) -> None:
    post = await get_or_404(db, BlogPost, post_id)
    cover = post.cover_image

    await db.delete(post)
    await db.flush()
    await storage.delete(cover)
    logger.info("Deleted blog post id=%d slug=%r", post_id, post.slug)


# ═══════════════════════════════════════════════════════════════════════════════
# STATE
# ═══════════════════════════════════════════════════════════════════════════════

@router.post("/{post_id}/publish", response_model=BlogPostResponse)
async def publish_blog_post(post_id: int, db: AsyncSession = Depends(get_db)):
    post = await get_or_404(db, BlogPost, post_id)
    blog_publisher.publish(post)
    await db.flush()
    return post


@router.post("/{post_id}/unpublish", response_model=BlogPostResponse)
async def unpublish_blog_post(post_id: int, db: AsyncSession = Depends(get_db)):
    post = await get_or_404(db, BlogPost, post_id)
    blog_publisher.unpublish(post)
    await db.flush()
    return post


@router.post("/{post_id}/toggle-publish", response_model=BlogPostResponse)
async def toggle_blog_post_publish(post_id: int, db: AsyncSession = Depends(get_db)):
    post = await get_or_404(db, BlogPost, post_id)
    blog_publisher.toggle(post)
    await db.flush()
    return post


@router.post("/{post_id}/toggle-featured", response_model=BlogPostResponse)
async def toggle_blog_post_featured(post_id: int, db: AsyncSession = Depends(get_db)):
    post = await get_or_404(db, BlogPost, post_id)
    post.is_featured = not post.is_featured
    await db.flush()
    return post


@router.post("/{post_id}/cover", response_model=BlogPostResponse)
async def upload_blog_post_cover(
    post_id: int,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    post = await get_or_404(db, BlogPost, post_id)
    path = await storage.store(file, "blog/covers", field="cover_image")
    await storage.swap(db, post, "cover_image", path)
    return post
