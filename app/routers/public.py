"""
Public, read-mostly endpoints consumed by the site frontend.

Route summary
-------------
GET  /api/blog                        published posts (category / tag / search, paginated) + featured post
GET  /api/blog/{slug}                 post page; increments views_count
POST /api/blog/{slug}/comments        submit a comment (held for moderation)
GET  /api/projects                    active projects (optional ?type=<type slug>)
GET  /api/projects/{slug}             project page + related projects of the same type
GET  /api/project-types               active project types
GET  /api/services                    active services
GET  /api/services/{slug}             service page + related services of the same type
GET  /api/about                       profile, skills and experience
POST /api/contact                     contact form (honeypot + per-IP hourly limit)
"""
import logging
from datetime import timedelta
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.dependencies.auth import client_ip
from app.exceptions import ValidationError
from app.models.database_models import (
    BlogCategory,
    BlogComment,
    BlogPost,
    BlogTag,
    ContactMessage,
    Experience,
    Project,
    ProjectType,
    Service,
    SkillCategory,
    blog_post_category,
    utcnow,
)
from app.models.schemas import (
    AboutPageResponse,
    AboutProfileResponse,
    BlogCategoryResponse,
    BlogPostResponse,
    BlogPostSummary,
    CommentCreate,
    CommentPublic,
    CommentSubmitResponse,
    ContactCreate,
    ContactSubmitResponse,
    ExperienceResponse,
    ProjectResponse,
    ProjectSummary,
    ProjectTypeBrief,
    PublicBlogIndex,
    PublicBlogPostDetail,
    PublicProjectDetail,
    PublicServiceDetail,
    ServiceResponse,
    SkillCategoryResponse,
)
from app.routers.profile import current_profile
from app.services.blog import blog_publisher, check_comment_rate_limit
from app.services.ordering import ordering_manager
from app.services.repository import count_where, get_by_slug_or_404, paginate, search_filter

logger = logging.getLogger(__name__)

router = APIRouter()


# ═══════════════════════════════════════════════════════════════════════════════
# BLOG
# ═══════════════════════════════════════════════════════════════════════════════

async def _visible_post(db: AsyncSession, slug: str) -> BlogPost:
    return await get_by_slug_or_404(db, BlogPost, slug, blog_publisher.visible())


@router.get("/blog", response_model=PublicBlogIndex)
async def blog_index(
    category: Optional[str] = None,
    tag: Optional[str] = None,
    search: Optional[str] = None,
    page: int = Query(1, ge=1),
    db: AsyncSession = Depends(get_db),
):
    """Published posts, newest first."""
    visible = blog_publisher.visible()
    stmt = select(BlogPost).where(visible).order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
    if category:
        stmt = stmt.where(BlogPost.categories.any(BlogCategory.slug == category))
    if tag:
        stmt = stmt.where(BlogPost.tags.any(BlogTag.slug == tag))
    term = search_filter(search, BlogPost.title, BlogPost.excerpt, BlogPost.content)
    if term is not None:
        stmt = stmt.where(term)

    rows, meta = await paginate(db, stmt, page, settings.PUBLIC_PAGE_SIZE)

    featured = (
        await db.execute(
            select(BlogPost)
            .where(visible, BlogPost.is_featured.is_(True))
            .order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
            .limit(1)
        )
    ).scalar_one_or_none()

    # Categories with their count of visible posts
    count_rows = await db.execute(
        select(blog_post_category.c.blog_category_id, func.count().label("cnt"))
        .join(BlogPost, BlogPost.id == blog_post_category.c.blog_post_id)
        .where(visible)
        .group_by(blog_post_category.c.blog_category_id)
    )
    counts = {row[0]: row.cnt for row in count_rows}
    categories = (await db.execute(ordering_manager.ordered(BlogCategory))).scalars().all()

    return {
        "items": rows,
        **meta,
        "featured": featured,
        "categories": [
            BlogCategoryResponse.model_validate(c).model_copy(update={"posts_count": counts[c.id]})
            for c in categories
            if counts.get(c.id)
        ],
    }


@router.get("/blog/{slug}", response_model=PublicBlogPostDetail)
async def blog_show(slug: str, db: AsyncSession = Depends(get_db)) -> PublicBlogPostDetail:
    post = await _visible_post(db, slug)
    post.views_count = (post.views_count or 0) + 1
    await db.flush()

    comments = (
        await db.execute(
            select(BlogComment)
            .where(BlogComment.blog_post_id == post.id, BlogComment.is_approved.is_(True))
            .order_by(BlogComment.created_at.asc(), BlogComment.id.asc())
        )
    ).scalars().all()
    related = await blog_publisher.related_posts(db, post)

    base = BlogPostResponse.model_validate(post)
    return PublicBlogPostDetail(
        **base.model_dump(),
        meta_title_text=post.meta_title_text,
        meta_description_text=post.meta_description_text,
        comments=[CommentPublic.model_validate(c) for c in comments],
        related=[BlogPostSummary.model_validate(r) for r in related],
    )


@router.post("/blog/{slug}/comments", response_model=CommentSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_comment(
    slug: str,
    body: CommentCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    post = await _visible_post(db, slug)

    if body.website:
        # Honeypot filled in: pretend success, store nothing.
        logger.info("Discarded honeypot comment on post id=%d from ip=%s", post.id, client_ip(request))
        return JSONResponse(
            status_code=status.HTTP_202_ACCEPTED,
            content=CommentSubmitResponse().model_dump(),
        )

    ip_address = client_ip(request)
    await check_comment_rate_limit(db, ip_address)

    comment = BlogComment(
        blog_post_id=post.id,
        user_name=body.user_name,
        user_email=body.user_email,
        comment_body=body.comment_body,
        is_approved=False,
        ip_address=ip_address,
        user_agent=request.headers.get("User-Agent"),
    )
    db.add(comment)
    await db.flush()
    logger.info("New comment id=%d on post id=%d awaiting moderation", comment.id, post.id)
    return CommentSubmitResponse()


# ═══════════════════════════════════════════════════════════════════════════════
# PORTFOLIO
# ═══════════════════════════════════════════════════════════════════════════════

@router.get("/projects", response_model=List[ProjectSummary])
async def public_projects(
    project_type: Optional[str] = Query(None, alias="type"),
    featured: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
):
    stmt = ordering_manager.ordered(Project).where(Project.is_active.is_(True))
    if project_type:
        stmt = stmt.where(Project.project_type.has(ProjectType.slug == project_type))
    if featured is not None:
        stmt = stmt.where(Project.is_featured.is_(featured))
    return (await db.execute(stmt)).scalars().all()


@router.get("/projects/{slug}", response_model=PublicProjectDetail)
async def public_project(slug: str, db: AsyncSession = Depends(get_db)) -> PublicProjectDetail:
    project = await get_by_slug_or_404(db, Project, slug, Project.is_active.is_(True))
    related = (
        await db.execute(
            ordering_manager.ordered(Project)
            .where(
                Project.is_active.is_(True),
                Project.id != project.id,
                Project.project_type_id == project.project_type_id,
            )
            .limit(settings.RELATED_ITEMS_LIMIT)
        )
    ).scalars().all()

    base = ProjectResponse.model_validate(project)
    return PublicProjectDetail(
        **base.model_dump(),
        related=[ProjectSummary.model_validate(p) for p in related],
    )


@router.get("/project-types", response_model=List[ProjectTypeBrief])
async def public_project_types(db: AsyncSession = Depends(get_db)):
    stmt = ordering_manager.ordered(ProjectType).where(ProjectType.is_active.is_(True))
    return (await db.execute(stmt)).scalars().all()


@router.get("/services", response_model=List[ServiceResponse])
async def public_services(db: AsyncSession = Depends(get_db)):
    stmt = ordering_manager.ordered(Service).where(Service.is_active.is_(True))
    return (await db.execute(stmt)).scalars().all()


@router.get("/services/{slug}", response_model=PublicServiceDetail)
async def public_service(slug: str, db: AsyncSession = Depends(get_db)) -> PublicServiceDetail:
    service = await get_by_slug_or_404(db, Service, slug, Service.is_active.is_(True))
    related = (
        await db.execute(
            ordering_manager.ordered(Service)
            .where(
                Service.is_active.is_(True),
                Service.id != service.id,
                Service.service_type == service.service_type,
            )
            .limit(settings.RELATED_ITEMS_LIMIT)
        )
    ).scalars().all()

    base = ServiceResponse.model_validate(service)
    return PublicServiceDetail(
        **base.model_dump(),
        related=[ServiceResponse.model_validate(s) for s in related],
    )


@router.get("/about", response_model=AboutPageResponse)
async def about_page(db: AsyncSession = Depends(get_db)) -> AboutPageResponse:
    profile = await current_profile(db)
    categories = (
        await db.execute(ordering_manager.ordered(SkillCategory).where(SkillCategory.is_active.is_(True)))
    ).scalars().all()
    experiences = (
        await db.execute(ordering_manager.ordered(Experience).where(Experience.is_active.is_(True)))
    ).scalars().all()

    skill_categories = []
    for category in categories:
        response = SkillCategoryResponse.model_validate(category)
        skill_categories.append(
            response.model_copy(update={"skills": [s for s in response.skills if s.is_active]})
        )

    return AboutPageResponse(
        profile=AboutProfileResponse.model_validate(profile) if profile and profile.is_active else None,
        skill_categories=skill_categories,
        experiences=[ExperienceResponse.model_validate(e) for e in experiences],
    )


# ═══════════════════════════════════════════════════════════════════════════════
# CONTACT
# ═══════════════════════════════════════════════════════════════════════════════

async def _check_contact_rate_limit(db: AsyncSession, ip_address: Optional[str]) -> None:
    if not ip_address:
        return
    window_start = utcnow() - timedelta(seconds=settings.CONTACT_RATE_WINDOW_SECONDS)
    recent = await count_where(
        db,
        ContactMessage.id,
        ContactMessage.ip_address == ip_address,
        ContactMessage.created_at >= window_start,
    )
    if recent >= settings.CONTACT_RATE_LIMIT:
        logger.info("Contact rate limit hit for ip=%s (%d recent)", ip_address, recent)
        raise ValidationError.single("message", "Too many submissions. Please try again later.")


@router.post("/contact", response_model=ContactSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_contact(
    body: ContactCreate,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    ip_address = client_ip(request)
    await _check_contact_rate_limit(db, ip_address)

    if body.website:
        logger.info("Discarded honeypot contact message from ip=%s", ip_address)
        return JSONResponse(
            status_code=status.HTTP_202_ACCEPTED,
            content=ContactSubmitResponse().model_dump(),
        )

    message = ContactMessage(
        **body.model_dump(exclude={"website"}),
        ip_address=ip_address,
        user_agent=request.headers.get("User-Agent"),
    )
    db.add(message)
    await db.flush()
    logger.info("New contact message id=%d from %r", message.id, message.email)
    return ContactSubmitResponse()
