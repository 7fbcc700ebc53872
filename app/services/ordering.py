"""
display_order management for ordered sibling collections.

A sibling scope is either the whole table (projects, services, ...) or the
rows sharing the value of the model's ``order_scope`` column (skills of one
category, images of one project).  Reads sort by ``display_order`` then the
model's ``order_tiebreak`` then ``id``; values need not be contiguous.

reorder() is all-or-nothing: every id is checked against the scope before
the first UPDATE is issued.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Tuple, Type

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ValidationError
from app.utils.helpers import find_duplicates

logger = logging.getLogger(__name__)

# (entity id, new display_order)
OrderEntry = Tuple[int, int]


def positional_entries(ids: Sequence[int]) -> List[OrderEntry]:
    """Reorder-by-position payload -> canonical entries (0-based)."""
    return [(entity_id, index) for index, entity_id in enumerate(ids)]


class OrderingManager:
    """Reads, appends and rewrites display_order within a scope."""

    @staticmethod
    def _scoped(stmt, model: Type, scope_id: Optional[Any]):
        if model.order_scope is not None:
            if scope_id is None:
                raise ValueError(f"{model.__name__} is ordered per {model.order_scope}; scope_id required")
            stmt = stmt.where(getattr(model, model.order_scope) == scope_id)
        return stmt

    @staticmethod
    def order_by(model: Type) -> list:
        """ORDER BY clauses giving the display sequence for ``model``."""
        clauses = [model.display_order.asc()]
        if model.order_tiebreak != "id":
            clauses.append(getattr(model, model.order_tiebreak).asc())
        clauses.append(model.id.asc())
        return clauses

    def ordered(self, model: Type, scope_id: Optional[Any] = None):
        """SELECT of every row in the scope, in display order."""
        stmt = select(model).order_by(*self.order_by(model))
        return self._scoped(stmt, model, scope_id)

    async def next_display_order(
        self,
        db: AsyncSession,
        model: Type,
        scope_id: Optional[Any] = None,
    ) -> int:
        """``max(display_order) + 1`` in the scope, 0 when the scope is empty."""
        stmt = self._scoped(select(func.max(model.display_order)), model, scope_id)
        current = (await db.execute(stmt)).scalar()
        return 0 if current is None else current + 1

    async def reorder(
        self,
        db: AsyncSession,
        model: Type,
        entries: Sequence[OrderEntry],
        scope_id: Optional[Any] = None,
        field: str = "items",
    ) -> int:
        """
        Write ``display_order`` for each (id, order) entry.

        Raises:
            ValidationError: duplicate ids, negative orders, or ids that are
                not in ``model``'s table / the given scope.  Nothing is
                written in that case.

        Returns:
            Number of rows updated.
        """
        errors = {}
        ids = [entity_id for entity_id, _ in entries]

        for entity_id in find_duplicates(ids):
            errors.setdefault(field, []).append(f"Id {entity_id} appears more than once.")

        for index, (_, order) in enumerate(entries):
            if order < 0:
                errors[f"{field}.{index}.display_order"] = ["The display order must be at least 0."]

        if ids:
            stmt = self._scoped(select(model.id).where(model.id.in_(ids)), model, scope_id)
            found = set((await db.execute(stmt)).scalars().all())
            for index, entity_id in enumerate(ids):
                if entity_id not in found:
                    errors[f"{field}.{index}.id"] = [
                        f"The selected id {entity_id} is invalid."
                    ]

        if errors:
            raise ValidationError(errors)

        for entity_id, order in entries:
            await db.execute(
                update(model).where(model.id == entity_id).values(display_order=order)
            )
        await db.flush()

        logger.info(
            "Reordered %d %s row(s)%s",
            len(entries),
            model.__tablename__,
            f" in scope {model.order_scope}={scope_id}" if model.order_scope else "",
        )
        return len(entries)


ordering_manager = OrderingManager()
