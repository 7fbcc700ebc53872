"""
Lookup and counting helpers shared by the routers.

Missing path parameters raise NotFound; ids that arrive in a request body
and do not exist raise ValidationError against the offending field.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Type

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import DependencyConflict, NotFound, ValidationError

logger = logging.getLogger(__name__)


def _label(model: Type) -> str:
    # ProjectType -> "Project type"
    name = model.__name__
    words = [name[0]]
    for char in name[1:]:
        words.append(f" {char.lower()}" if char.isupper() else char)
    return "".join(words)


async def reload(db: AsyncSession, model: Type, entity_id: int):
    """Re-select an entity so every eager relationship reflects the flushed state."""
    result = await db.execute(
        select(model).where(model.id == entity_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def get_or_404(db: AsyncSession, model: Type, entity_id: int):
    entity = await db.get(model, entity_id, populate_existing=True)
    if entity is None:
        raise NotFound(_label(model), entity_id)
    return entity


async def get_by_slug_or_404(db: AsyncSession, model: Type, slug: str, *criteria):
    stmt = select(model).where(model.slug == slug, *criteria)
    entity = (await db.execute(stmt)).scalar_one_or_none()
    if entity is None:
        raise NotFound(_label(model), slug)
    return entity


async def ensure_exists(db: AsyncSession, model: Type, entity_id: int, field: str) -> None:
    """ValidationError on ``field`` unless a row with ``entity_id`` exists."""
    found = (await db.execute(select(model.id).where(model.id == entity_id))).first()
    if found is None:
        raise ValidationError.single(field, f"The selected {field} is invalid.")


async def load_by_ids(db: AsyncSession, model: Type, ids: Sequence[int], field: str) -> List[Any]:
    """
    Load every row in ``ids`` (request order, duplicates collapsed).

    Raises:
        ValidationError: one entry per unknown id, keyed ``field.<index>``
    """
    unique_ids = list(dict.fromkeys(ids))
    if not unique_ids:
        return []
    rows = (await db.execute(select(model).where(model.id.in_(unique_ids)))).scalars().all()
    by_id = {row.id: row for row in rows}

    errors: Dict[str, List[str]] = {}
    for index, entity_id in enumerate(ids):
        if entity_id not in by_id:
            errors[f"{field}.{index}"] = [f"The selected id {entity_id} is invalid."]
    if errors:
        raise ValidationError(errors)
    return [by_id[entity_id] for entity_id in unique_ids]


async def count_where(db: AsyncSession, column, *criteria) -> int:
    result = await db.execute(select(func.count(column)).where(*criteria))
    return result.scalar() or 0


async def counts_by(db: AsyncSession, group_column, ids: Iterable[int]) -> Dict[int, int]:
    """``{group id: row count}`` for the given ids (ids with no rows are absent)."""
    ids = list(ids)
    if not ids:
        return {}
    result = await db.execute(
        select(group_column, func.count().label("cnt"))
        .where(group_column.in_(ids))
        .group_by(group_column)
    )
    return {row[0]: row.cnt for row in result}


async def guard_dependents(
    db: AsyncSession,
    entity: str,
    dependents: str,
    column,
    entity_id: int,
) -> None:
    """Refuse a delete while rows still reference the target."""
    count = await count_where(db, column, column == entity_id)
    if count:
        logger.info("Refusing to delete %s id=%s: %d %s attached", entity, entity_id, count, dependents)
        raise DependencyConflict(entity, dependents, count)


async def paginate(
    db: AsyncSession,
    stmt,
    page: int,
    per_page: int,
) -> Tuple[List[Any], Dict[str, int]]:
    """
    Run ``stmt`` for one page.

    Returns:
        (rows, meta) where meta has total / page / per_page / last_page
    """
    total = (await db.execute(select(func.count()).select_from(stmt.order_by(None).subquery()))).scalar() or 0
    rows = (await db.execute(stmt.limit(per_page).offset((page - 1) * per_page))).scalars().all()
    meta = {
        "total": total,
        "page": page,
        "per_page": per_page,
        "last_page": max(1, math.ceil(total / per_page)),
    }
    return list(rows), meta


def search_filter(term: Optional[str], *columns):
    """OR of case-insensitive LIKE matches (wildcards in the term match literally), or None for an empty term."""
    if not term:
        return None
    escaped = term.strip().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    return or_(*[column.ilike(pattern, escape="\\") for column in columns])
