"""
Blog post lifecycle and reader-facing queries.

Publication
-----------
``draft -> published`` stamps ``published_at`` with the current time unless
it is already set; ``published -> draft`` keeps it, so re-publishing does not
move the post in the timeline.  A post is publicly visible when it is
published and ``published_at`` is not in the future.

Comments
--------
One comment per client IP per ``COMMENT_RATE_LIMIT_SECONDS``.
"""
from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import List, Optional

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import ValidationError
from app.models.database_models import (
    BlogCategory,
    BlogComment,
    BlogPost,
    PostStatus,
    utcnow,
)
from app.utils.helpers import estimate_reading_time

logger = logging.getLogger(__name__)


class BlogPublisher:
    """State transitions and derived fields of BlogPost."""

    def set_status(self, post: BlogPost, status: PostStatus, now: Optional[datetime] = None) -> BlogPost:
        if status == PostStatus.PUBLISHED:
            return self.publish(post, now)
        return self.unpublish(post)

    def publish(self, post: BlogPost, now: Optional[datetime] = None) -> BlogPost:
        post.status = PostStatus.PUBLISHED
        if post.published_at is None:
            post.published_at = now or utcnow()
        logger.info("Published post id=%s slug=%r at %s", post.id, post.slug, post.published_at)
        return post

    def unpublish(self, post: BlogPost) -> BlogPost:
        post.status = PostStatus.DRAFT
        logger.info("Unpublished post id=%s slug=%r", post.id, post.slug)
        return post

    def toggle(self, post: BlogPost) -> BlogPost:
        if post.status == PostStatus.PUBLISHED:
            return self.unpublish(post)
        return self.publish(post)

    @staticmethod
    def refresh_reading_time(post: BlogPost) -> int:
        post.reading_time = estimate_reading_time(post.content or "", settings.READING_WORDS_PER_MINUTE)
        return post.reading_time

    @staticmethod
    def visible(now: Optional[datetime] = None):
        """WHERE clause for publicly visible posts."""
        return and_(
            BlogPost.status == PostStatus.PUBLISHED,
            BlogPost.published_at.is_not(None),
            BlogPost.published_at <= (now or utcnow()),
        )

    async def related_posts(self, db: AsyncSession, post: BlogPost, limit: Optional[int] = None) -> List[BlogPost]:
        """Latest visible posts sharing at least one category with ``post``."""
        category_ids = [category.id for category in post.categories]
        if not category_ids:
            return []
        stmt = (
            select(BlogPost)
            .where(
                self.visible(),
                BlogPost.id != post.id,
                BlogPost.categories.any(BlogCategory.id.in_(category_ids)),
            )
            .order_by(BlogPost.published_at.desc(), BlogPost.id.desc())
            .limit(limit or settings.RELATED_POSTS_LIMIT)
        )
        return list((await db.execute(stmt)).scalars().all())


async def check_comment_rate_limit(db: AsyncSession, ip_address: Optional[str]) -> None:
    """ValidationError on ``comment_body`` if this IP commented too recently."""
    if not ip_address:
        return
    window_start = utcnow() - timedelta(seconds=settings.COMMENT_RATE_LIMIT_SECONDS)
    recent = await db.execute(
        select(BlogComment.id)
        .where(BlogComment.ip_address == ip_address, BlogComment.created_at >= window_start)
        .limit(1)
    )
    if recent.first() is not None:
        logger.info("Comment rate limit hit for ip=%s", ip_address)
        raise ValidationError.single(
            "comment_body",
            "You are commenting too quickly. Please wait a moment before posting again.",
        )


blog_publisher = BlogPublisher()
