"""
Project persistence: slug, ordering, nested collections and stored files.

Files are removed only after the rows referencing them are gone and the
flush succeeded, so a rejected update never loses an image.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Set

from sqlalchemy.ext.asyncio import AsyncSession

from app.exceptions import ValidationError
from app.models.database_models import Project, ProjectType
from app.services.children import child_synchronizer
from app.services.ordering import ordering_manager
from app.services.repository import ensure_exists, reload
from app.services.slugs import flush_unique, slug_resolver
from app.services.storage import LocalFileStorage

logger = logging.getLogger(__name__)

COLLECTIONS = ("images", "features", "metrics", "videos")


def _file_paths(project: Project) -> Set[str]:
    paths = {image.image_path for image in project.images}
    paths.update(p for p in (project.thumbnail_image, project.cover_image) if p)
    return paths


class ProjectService:
    """Create / update / delete orchestration for Project."""

    def __init__(self, storage: LocalFileStorage) -> None:
        self.storage = storage

    @staticmethod
    def _check_gallery(project: Project, records: List[Dict[str, Any]]) -> None:
        # Gallery updates may keep, drop, caption or reorder uploaded images, never add paths.
        known = {image.image_path for image in project.images}
        errors = {
            f"images.{index}.image_path": ["The image path does not belong to this project."]
            for index, record in enumerate(records)
            if record.get("image_path") not in known
        }
        if errors:
            raise ValidationError(errors)

    async def create(self, db: AsyncSession, data: Dict[str, Any]) -> Project:
        """
        Args:
            data: validated fields; collection keys hold lists of child dicts
                  and ``slug`` an optional explicit slug
        """
        children = {name: data.pop(name, None) for name in COLLECTIONS}
        explicit_slug = data.pop("slug", None)

        await ensure_exists(db, ProjectType, data["project_type_id"], "project_type_id")

        if data.get("display_order") is None:
            data["display_order"] = await ordering_manager.next_display_order(db, Project)

        project = Project(**data)
        await slug_resolver.assign_slug(db, project, explicit_slug)
        db.add(project)
        await flush_unique(db, project)

        for relation, records in children.items():
            if records:
                await child_synchronizer.sync_children(db, project, relation, records)

        logger.info("Created project id=%d slug=%r", project.id, project.slug)
        return await reload(db, Project, project.id)

    async def update(self, db: AsyncSession, project: Project, data: Dict[str, Any]) -> Project:
        """
        Apply a partial update.  A collection key that is absent or None is
        left untouched; an empty list clears the collection.
        """
        children = {name: data.pop(name, None) for name in COLLECTIONS}
        explicit_slug = data.pop("slug", None)

        if "project_type_id" in data and data["project_type_id"] != project.project_type_id:
            await ensure_exists(db, ProjectType, data["project_type_id"], "project_type_id")

        if children["images"] is not None:
            self._check_gallery(project, children["images"])

        title_changed = "title" in data and data["title"] != project.title
        old_files = _file_paths(project)

        for key, value in data.items():
            setattr(project, key, value)

        await slug_resolver.assign_slug(db, project, explicit_slug, title_changed=title_changed)
        await flush_unique(db, project)

        for relation, records in children.items():
            if records is not None:
                await child_synchronizer.sync_children(db, project, relation, records)

        project = await reload(db, Project, project.id)
        await self.storage.delete_many(sorted(old_files - _file_paths(project)))

        logger.info("Updated project id=%d slug=%r", project.id, project.slug)
        return project

    async def delete(self, db: AsyncSession, project: Project) -> List[str]:
        """Delete the project, its children and every file it referenced."""
        files = sorted(_file_paths(project))
        project_id = project.id

        await db.delete(project)
        await db.flush()

        deleted = await self.storage.delete_many(files)
        logger.info("Deleted project id=%d (%d file(s) removed)", project_id, len(deleted))
        return deleted

    async def replace_image(
        self,
        db: AsyncSession,
        project: Project,
        attribute: str,
        new_path: str,
    ) -> Project:
        """Point ``thumbnail_image`` / ``cover_image`` at a new file, removing the old one."""
        await self.storage.swap(db, project, attribute, new_path)
        return await reload(db, Project, project.id)
