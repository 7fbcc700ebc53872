"""
Service administration.

Route summary
-------------
GET    /api/admin/services                         list (search / type / active filters)
POST   /api/admin/services                         create with features
GET    /api/admin/services/{service_id}
PUT    /api/admin/services/{service_id}            partial update; ``features`` replaces the list
DELETE /api/admin/services/{service_id}
POST   /api/admin/services/reorder
POST   /api/admin/services/{service_id}/toggle-active
POST   /api/admin/services/{service_id}/toggle-featured
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.database_models import Service, ServiceType
from app.models.schemas import (
    ReorderRequest,
    ReorderResponse,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
)
from app.services.children import child_synchronizer
from app.services.ordering import ordering_manager
from app.services.repository import get_or_404, reload, search_filter
from app.services.slugs import flush_unique, slug_resolver

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=List[ServiceResponse])
async def list_services(
    search: Optional[str] = None,
    service_type: Optional[ServiceType] = None,
    is_active: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
):
    stmt = ordering_manager.ordered(Service)
    term = search_filter(search, Service.title, Service.short_description)
    if term is not None:
        stmt = stmt.where(term)
    if service_type is not None:
        stmt = stmt.where(Service.service_type == service_type)
    if is_active is not None:
        stmt = stmt.where(Service.is_active.is_(is_active))
    return (await db.execute(stmt)).scalars().all()


@router.post("", response_model=ServiceResponse, status_code=status.HTTP_201_CREATED)
async def create_service(body: ServiceCreate, db: AsyncSession = Depends(get_db)):
    data = body.model_dump(exclude={"slug", "features"})
    if data["display_order"] is None:
        data["display_order"] = await ordering_manager.next_display_order(db, Service)

    service = Service(**data)
    await slug_resolver.assign_slug(db, service, body.slug)
    db.add(service)
    await flush_unique(db, service)

    features = body.model_dump(include={"features"})["features"]
    if features:
        await child_synchronizer.sync_children(db, service, "features", features)

    logger.info("Created service id=%d slug=%r", service.id, service.slug)
    return await reload(db, Service, service.id)


@router.post("/reorder", response_model=ReorderResponse)
async def reorder_services(body: ReorderRequest, db: AsyncSession = Depends(get_db)) -> ReorderResponse:
    updated = await ordering_manager.reorder(db, Service, body.entries(), field=body.field)
    return ReorderResponse(updated=updated)


@router.get("/{service_id}", response_model=ServiceResponse)
async def get_service(service_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Service, service_id)


@router.put("/{service_id}", response_model=ServiceResponse)
async def update_service(
    service_id: int,
    body: ServiceUpdate,
    db: AsyncSession = Depends(get_db),
):
    service = await get_or_404(db, Service, service_id)
    data = body.changes()
    explicit_slug = data.pop("slug", None)
    features = data.pop("features", None)
    title_changed = "title" in data and data["title"] != service.title

    for key, value in data.items():
        setattr(service, key, value)
    await slug_resolver.assign_slug(db, service, explicit_slug, title_changed=title_changed)
    await flush_unique(db, service)

    if features is not None:
        await child_synchronizer.sync_children(db, service, "features", features)

    logger.info("Updated service id=%d slug=%r", service.id, service.slug)
    return await reload(db, Service, service.id)


@router.delete("/{service_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_service(service_id: int, db: AsyncSession = Depends(get_db)) -> None:
    service = await get_or_404(db, Service, service_id)
    await db.delete(service)
    await db.flush()
    logger.info("Deleted service id=%d slug=%r", service_id, service.slug)


@router.post("/{service_id}/toggle-active", response_model=ServiceResponse)
async def toggle_service_active(service_id: int, db: AsyncSession = Depends(get_db)):
    service = await get_or_404(db, Service, service_id)
    service.is_active = not service.is_active
    await db.flush()
    return service


@router.post("/{service_id}/toggle-featured", response_model=ServiceResponse)
async def toggle_service_featured(service_id: int, db: AsyncSession = Depends(get_db)):
    service = await get_or_404(db, Service, service_id)
    service.is_featured = not service.is_featured
    await db.flush()
    return service
