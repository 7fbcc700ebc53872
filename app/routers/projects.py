"""
Project administration.

Route summary
-------------
GET    /api/admin/projects                              paginated list (search / type / status filters)
POST   /api/admin/projects                              create with features, metrics, videos
GET    /api/admin/projects/{project_id}                 detail
PUT    /api/admin/projects/{project_id}                 partial update; nested lists replace children
DELETE /api/admin/projects/{project_id}                 delete, removing every stored file
POST   /api/admin/projects/reorder                      reorder projects
POST   /api/admin/projects/{project_id}/toggle-featured
POST   /api/admin/projects/{project_id}/toggle-active
POST   /api/admin/projects/{project_id}/toggle-status   completed <-> ongoing
POST   /api/admin/projects/{project_id}/thumbnail       upload thumbnail (replaces old file)
POST   /api/admin/projects/{project_id}/cover           upload cover image (replaces old file)
POST   /api/admin/projects/{project_id}/images          append gallery image
DELETE /api/admin/projects/{project_id}/images/{image_id}
POST   /api/admin/projects/{project_id}/images/reorder
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.models.database_models import Project, ProjectImage, ProjectStatus
from app.models.schemas import (
    Page,
    ProjectCreate,
    ProjectImageResponse,
    ProjectResponse,
    ProjectSummary,
    ProjectUpdate,
    ReorderRequest,
    ReorderResponse,
)
from app.exceptions import NotFound
from app.services.ordering import ordering_manager
from app.services.projects import ProjectService
from app.services.repository import get_or_404, paginate, search_filter
from app.services.storage import LocalFileStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


def get_project_service(storage: LocalFileStorage = Depends(get_storage)) -> ProjectService:
    return ProjectService(storage)


# ═══════════════════════════════════════════════════════════════════════════════
# PROJECT CRUD
# ═══════════════════════════════════════════════════════════════════════════════

@router.get("", response_model=Page[ProjectSummary])
async def list_projects(
    search: Optional[str] = None,
    project_type_id: Optional[int] = None,
    project_status: Optional[ProjectStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    per_page: int = Query(settings.ADMIN_PAGE_SIZE, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    """List projects in display order."""
    stmt = ordering_manager.ordered(Project)
    term = search_filter(search, Project.title, Project.short_description)
    if term is not None:
        stmt = stmt.where(term)
    if project_type_id is not None:
        stmt = stmt.where(Project.project_type_id == project_type_id)
    if project_status is not None:
        stmt = stmt.where(Project.status == project_status)

    rows, meta = await paginate(db, stmt, page, per_page)
    return {"items": rows, **meta}


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    body: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    service: ProjectService = Depends(get_project_service),
):
    data = body.model_dump()
    return await service.create(db, data)


@router.post("/reorder", response_model=ReorderResponse)
async def reorder_projects(body: ReorderRequest, db: AsyncSession = Depends(get_db)) -> ReorderResponse:
    updated = await ordering_manager.reorder(db, Project, body.entries(), field=body.field)
    return ReorderResponse(updated=updated)


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Project, project_id)


@router.put("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    body: ProjectUpdate,
    db: AsyncSession = Depends(get_db),
    service: ProjectService = Depends(get_project_service),
):
    project = await get_or_404(db, Project, project_id)
    return await service.update(db, project, body.changes())


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_project(
    project_id: int,
    db: AsyncSession = Depends(get_db),
    service: ProjectService = Depends(get_project_service),
) -> None:
    project = await get_or_404(db, Project, project_id)
    await service.delete(db, project)


# ═══════════════════════════════════════════════════════════════════════════════
# FLAGS
# ═══════════════════════════════════════════════════════════════════════════════

@router.post("/{project_id}/toggle-featured", response_model=ProjectResponse)
async def toggle_project_featured(project_id: int, db: AsyncSession = Depends(get_db)):
    project = await get_or_404(db, Project, project_id)
    project.is_featured = not project.is_featured
    await db.flush()
    return project


@router.post("/{project_id}/toggle-active", response_model=ProjectResponse)
async def toggle_project_active(project_id: int, db: AsyncSession = Depends(get_db)):
    project = await get_or_404(db, Project, project_id)
    project.is_active = not project.is_active
    await db.flush()
    return project


@router.post("/{project_id}/toggle-status", response_model=ProjectResponse)
async def toggle_project_status(project_id: int, db: AsyncSession = Depends(get_db)):
    project = await get_or_404(db, Project, project_id)
    project.status = (
        ProjectStatus.ONGOING if project.status == ProjectStatus.COMPLETED else ProjectStatus.COMPLETED
    )
    await db.flush()
    logger.info("Project id=%d status -> %s", project.id, project.status.value)
    return project


# ═══════════════════════════════════════════════════════════════════════════════
# IMAGES
# ═══════════════════════════════════════════════════════════════════════════════

@router.post("/{project_id}/thumbnail", response_model=ProjectResponse)
async def upload_project_thumbnail(
    project_id: int,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
    service: ProjectService = Depends(get_project_service),
):
    project = await get_or_404(db, Project, project_id)
    path = await storage.store(file, "projects/thumbnails", field="thumbnail_image")
    return await service.replace_image(db, project, "thumbnail_image", path)


@router.post("/{project_id}/cover", response_model=ProjectResponse)
async def upload_project_cover(
    project_id: int,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
    service: ProjectService = Depends(get_project_service),
):
    project = await get_or_404(db, Project, project_id)
    path = await storage.store(file, "projects/covers", field="cover_image")
    return await service.replace_image(db, project, "cover_image", path)


@router.post(
    "/{project_id}/images",
    response_model=ProjectImageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_project_image(
    project_id: int,
    file: UploadFile = File(...),
    caption: Optional[str] = Form(None, max_length=255),
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    """Store a gallery image and append it after the project's last image."""
    project = await get_or_404(db, Project, project_id)
    path = await storage.store(file, "projects/gallery", field="image")

    image = ProjectImage(
        project_id=project.id,
        image_path=path,
        caption=caption,
        display_order=await ordering_manager.next_display_order(db, ProjectImage, project.id),
    )
    db.add(image)
    await db.flush()
    logger.info("Added gallery image id=%d to project id=%d", image.id, project.id)
    return image


@router.post("/{project_id}/images/reorder", response_model=ReorderResponse)
async def reorder_project_images(
    project_id: int,
    body: ReorderRequest,
    db: AsyncSession = Depends(get_db),
) -> ReorderResponse:
    project = await get_or_404(db, Project, project_id)
    updated = await ordering_manager.reorder(db, ProjectImage, body.entries(), project.id, field=body.field)
    return ReorderResponse(updated=updated)


@router.delete(
    "/{project_id}/images/{image_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_model=None,
)
async def delete_project_image(
    project_id: int,
    image_id: int,
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
) -> None:
    result = await db.execute(
        select(ProjectImage).where(ProjectImage.id == image_id, ProjectImage.project_id == project_id)
    )
    image = result.scalar_one_or_none()
    if image is None:
        raise NotFound("Project image", image_id)

    path = image.image_path
    await db.delete(image)
    await db.flush()
    await storage.delete(path)
    logger.info("Deleted gallery image id=%d from project id=%d", image_id, project_id)
