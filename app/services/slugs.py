"""
Slug resolution for slug-addressed content.

resolve_slug
------------
1. An explicit slug that is free in the table (ignoring ``exclude_id``) is
   used verbatim; a taken one raises UniquenessConflict.
2. Otherwise a base slug is derived from the title (ASCII transliteration,
   lowercase, punctuation/space runs -> single "-", hyphens trimmed).
3. If the base is taken, "-1", "-2", ... are appended until a free slug is
   found.

The probe is a best-effort pre-check.  The unique index on ``slug`` is the
real guarantee: a concurrent insert that wins the race makes our flush fail
with IntegrityError, which ``flush_unique`` turns into UniquenessConflict.

assign_slug is the explicit "before save" step routers call on create and
update; nothing happens implicitly on ORM events.
"""
from __future__ import annotations

import logging
from typing import Optional, Set, Type

from slugify import slugify as _slugify
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import UniquenessConflict

logger = logging.getLogger(__name__)


def slugify(value: str, fallback: str = "", max_length: Optional[int] = None) -> str:
    """
    Turn a human title into a URL-safe slug.

    >>> slugify("Artificial Intelligence")
    'artificial-intelligence'
    >>> slugify("  Café & Crème!  ")
    'cafe-creme'
    >>> slugify("Привет мир")
    'privet-mir'
    """
    max_length = max_length or settings.SLUG_MAX_LENGTH
    slug = _slugify(value or "", max_length=max_length)
    return slug or fallback


class SlugResolver:
    """Derives and de-duplicates slugs for any model using SluggedMixin."""

    async def _taken(
        self,
        db: AsyncSession,
        model: Type,
        base: str,
        exclude_id: Optional[int],
    ) -> Set[str]:
        """All slugs equal to ``base`` or shaped like ``base-<anything>``."""
        stmt = select(model.slug).where(
            or_(model.slug == base, model.slug.like(f"{base}-%"))
        )
        if exclude_id is not None:
            stmt = stmt.where(model.id != exclude_id)
        result = await db.execute(stmt)
        return set(result.scalars().all())

    async def exists(
        self,
        db: AsyncSession,
        model: Type,
        slug: str,
        exclude_id: Optional[int] = None,
    ) -> bool:
        stmt = select(model.id).where(model.slug == slug)
        if exclude_id is not None:
            stmt = stmt.where(model.id != exclude_id)
        result = await db.execute(stmt.limit(1))
        return result.first() is not None

    async def resolve_slug(
        self,
        db: AsyncSession,
        model: Type,
        candidate_title: str,
        explicit_slug: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> str:
        """Return a slug that is unique in ``model``'s table right now."""
        if explicit_slug:
            if await self.exists(db, model, explicit_slug, exclude_id):
                raise UniquenessConflict("slug", explicit_slug)
            return explicit_slug

        base = slugify(candidate_title, fallback=model.slug_fallback)
        taken = await self._taken(db, model, base, exclude_id)
        if base not in taken:
            return base

        counter = 1
        while f"{base}-{counter}" in taken:
            counter += 1
        slug = f"{base}-{counter}"
        logger.debug("Slug %r taken in %s, using %r", base, model.__tablename__, slug)
        return slug

    async def assign_slug(
        self,
        db: AsyncSession,
        entity,
        explicit_slug: Optional[str] = None,
        title_changed: bool = False,
    ) -> str:
        """
        Before-save step: set ``entity.slug`` according to the slug rules.

        - explicit slug                -> used verbatim (checked if it changed)
        - no slug yet                  -> derived from the title
        - title changed, slug derived  -> re-derived from the new title
        - anything else                -> slug kept as is
        """
        model = type(entity)
        title = getattr(entity, model.slug_source)

        if explicit_slug:
            if explicit_slug != entity.slug:
                entity.slug = await self.resolve_slug(db, model, title, explicit_slug, entity.id)
            entity.slug_auto = False
        elif not entity.slug or (title_changed and entity.slug_auto):
            entity.slug = await self.resolve_slug(db, model, title, None, entity.id)
            entity.slug_auto = True

        return entity.slug


async def flush_unique(db: AsyncSession, entity) -> None:
    """Flush, mapping a lost slug race to UniquenessConflict."""
    try:
        await db.flush()
    except IntegrityError as exc:
        slug = getattr(entity, "slug", None)
        logger.warning("Integrity error while saving %s slug=%r: %s", type(entity).__name__, slug, exc.orig)
        raise UniquenessConflict("slug", slug) from exc


slug_resolver = SlugResolver()
