"""
Nested child collection synchronisation.

On every sync the parent's existing children for one relationship are
deleted and the supplied records are inserted in their place.  Each new
row gets ``display_order`` = its index in the supplied list unless the
record carries its own ``display_order``.

Child ids are therefore NOT stable across updates: anything pointing at an
old child id is dangling after a sync.  The removed rows are returned so
the caller can clean up files they referenced (see app.services.storage).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Sequence

from sqlalchemy import delete, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class ChildCollectionSynchronizer:
    """Delete-all-then-insert replacement of a one-to-many relationship."""

    @staticmethod
    def _relation(parent, relation: str):
        prop = inspect(type(parent)).relationships[relation]
        child_model = prop.mapper.class_
        # one-to-many: (parent.id, child.<fk>)
        (_, fk_column), = prop.local_remote_pairs
        return child_model, fk_column.key

    async def sync_children(
        self,
        db: AsyncSession,
        parent,
        relation: str,
        records: Sequence[Mapping[str, Any]],
    ) -> List[Any]:
        """
        Replace every child of ``parent.<relation>`` with ``records``.

        Args:
            db:       Request session (the caller owns the transaction)
            parent:   Persisted parent entity (must have an id)
            relation: Relationship name, e.g. ``"features"``
            records:  Column values for the new children, in display order

        Returns:
            The child rows that were deleted.
        """
        child_model, fk_name = self._relation(parent, relation)
        fk_attr = getattr(child_model, fk_name)

        result = await db.execute(select(child_model).where(fk_attr == parent.id))
        removed = list(result.scalars().all())

        await db.execute(delete(child_model).where(fk_attr == parent.id))

        for index, record in enumerate(records):
            values: Dict[str, Any] = dict(record)
            if values.get("display_order") is None:
                values["display_order"] = index
            values[fk_name] = parent.id
            db.add(child_model(**values))

        await db.flush()
        await db.refresh(parent, attribute_names=[relation])

        logger.info(
            "Synced %s.%s id=%s: %d removed, %d inserted",
            type(parent).__name__,
            relation,
            parent.id,
            len(removed),
            len(records),
        )
        return removed


child_synchronizer = ChildCollectionSynchronizer()
