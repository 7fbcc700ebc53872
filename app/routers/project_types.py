"""
Project type administration.

Route summary
-------------
GET    /api/admin/project-types                       list (with project counts)
POST   /api/admin/project-types                       create
GET    /api/admin/project-types/{type_id}             detail
PUT    /api/admin/project-types/{type_id}             partial update
DELETE /api/admin/project-types/{type_id}             delete (409 while projects use it)
POST   /api/admin/project-types/{type_id}/toggle-active
POST   /api/admin/project-types/reorder               reorder
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.database_models import Project, ProjectType
from app.models.schemas import (
    ProjectTypeCreate,
    ProjectTypeResponse,
    ProjectTypeUpdate,
    ReorderRequest,
    ReorderResponse,
)
from app.services.ordering import ordering_manager
from app.services.repository import count_where, counts_by, get_or_404, guard_dependents
from app.services.slugs import flush_unique, slug_resolver

logger = logging.getLogger(__name__)

router = APIRouter()


def _response(project_type: ProjectType, projects_count: int) -> ProjectTypeResponse:
    return ProjectTypeResponse.model_validate(project_type).model_copy(
        update={"projects_count": projects_count}
    )


async def _with_count(db: AsyncSession, project_type: ProjectType) -> ProjectTypeResponse:
    count = await count_where(db, Project.id, Project.project_type_id == project_type.id)
    return _response(project_type, count)


@router.get("", response_model=List[ProjectTypeResponse])
async def list_project_types(db: AsyncSession = Depends(get_db)) -> List[ProjectTypeResponse]:
    """All project types in display order."""
    types = (await db.execute(ordering_manager.ordered(ProjectType))).scalars().all()
    counts = await counts_by(db, Project.project_type_id, [t.id for t in types])
    return [_response(t, counts.get(t.id, 0)) for t in types]


@router.post("", response_model=ProjectTypeResponse, status_code=status.HTTP_201_CREATED)
async def create_project_type(
    body: ProjectTypeCreate,
    db: AsyncSession = Depends(get_db),
) -> ProjectTypeResponse:
    data = body.model_dump(exclude={"slug"})
    if data["display_order"] is None:
        data["display_order"] = await ordering_manager.next_display_order(db, ProjectType)

    project_type = ProjectType(**data)
    await slug_resolver.assign_slug(db, project_type, body.slug)
    db.add(project_type)
    await flush_unique(db, project_type)

    logger.info("Created project type id=%d slug=%r", project_type.id, project_type.slug)
    return _response(project_type, 0)


@router.post("/reorder", response_model=ReorderResponse)
async def reorder_project_types(
    body: ReorderRequest,
    db: AsyncSession = Depends(get_db),
) -> ReorderResponse:
    updated = await ordering_manager.reorder(db, ProjectType, body.entries(), field=body.field)
    return ReorderResponse(updated=updated)


@router.get("/{type_id}", response_model=ProjectTypeResponse)
async def get_project_type(type_id: int, db: AsyncSession = Depends(get_db)) -> ProjectTypeResponse:
    project_type = await get_or_404(db, ProjectType, type_id)
    return await _with_count(db, project_type)


@router.put("/{type_id}", response_model=ProjectTypeResponse)
async def update_project_type(
    type_id: int,
    body: ProjectTypeUpdate,
    db: AsyncSession = Depends(get_db),
) -> ProjectTypeResponse:
    project_type = await get_or_404(db, ProjectType, type_id)
    data = body.changes()
    explicit_slug = data.pop("slug", None)
    title_changed = "name" in data and data["name"] != project_type.name

    for key, value in data.items():
        setattr(project_type, key, value)
    await slug_resolver.assign_slug(db, project_type, explicit_slug, title_changed=title_changed)
    await flush_unique(db, project_type)

    logger.info("Updated project type id=%d slug=%r", project_type.id, project_type.slug)
    return await _with_count(db, project_type)


@router.delete("/{type_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_project_type(type_id: int, db: AsyncSession = Depends(get_db)) -> None:
    project_type = await get_or_404(db, ProjectType, type_id)
    await guard_dependents(db, "project type", "projects", Project.project_type_id, project_type.id)

    await db.delete(project_type)
    await db.flush()
    logger.info("Deleted project type id=%d name=%r", type_id, project_type.name)


@router.post("/{type_id}/toggle-active", response_model=ProjectTypeResponse)
async def toggle_project_type_active(type_id: int, db: AsyncSession = Depends(get_db)) -> ProjectTypeResponse:
    project_type = await get_or_404(db, ProjectType, type_id)
    project_type.is_active = not project_type.is_active
    await db.flush()
    return await _with_count(db, project_type)
