"""
Experience administration.

Route summary
-------------
GET    /api/admin/experiences                 list in display order
POST   /api/admin/experiences                 create (appended unless display_order given)
POST   /api/admin/experiences/reorder
GET    /api/admin/experiences/{experience_id}
PUT    /api/admin/experiences/{experience_id}
DELETE /api/admin/experiences/{experience_id}
POST   /api/admin/experiences/{experience_id}/toggle-active
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.exceptions import ValidationError
from app.models.database_models import Experience
from app.models.schemas import (
    ExperienceCreate,
    ExperienceResponse,
    ExperienceUpdate,
    ReorderRequest,
    ReorderResponse,
)
from app.services.ordering import ordering_manager
from app.services.repository import get_or_404

logger = logging.getLogger(__name__)

router = APIRouter()


def _normalise_current(experience: Experience) -> None:
    # A current position has no end date.
    if experience.is_current:
        experience.end_date = None
    if experience.end_date is not None and experience.end_date < experience.start_date:
        raise ValidationError.single("end_date", "The end date must be a date after or equal to start date.")


@router.get("", response_model=List[ExperienceResponse])
async def list_experiences(db: AsyncSession = Depends(get_db)):
    return (await db.execute(ordering_manager.ordered(Experience))).scalars().all()


@router.post("", response_model=ExperienceResponse, status_code=status.HTTP_201_CREATED)
async def create_experience(body: ExperienceCreate, db: AsyncSession = Depends(get_db)):
    data = body.model_dump()
    if data["display_order"] is None:
        data["display_order"] = await ordering_manager.next_display_order(db, Experience)

    experience = Experience(**data)
    _normalise_current(experience)
    db.add(experience)
    await db.flush()
    logger.info("Created experience id=%d %r at %r", experience.id, experience.title, experience.company)
    return experience


@router.post("/reorder", response_model=ReorderResponse)
async def reorder_experiences(body: ReorderRequest, db: AsyncSession = Depends(get_db)) -> ReorderResponse:
    updated = await ordering_manager.reorder(db, Experience, body.entries(), field=body.field)
    return ReorderResponse(updated=updated)


@router.get("/{experience_id}", response_model=ExperienceResponse)
async def get_experience(experience_id: int, db: AsyncSession = Depends(get_db)):
    return await get_or_404(db, Experience, experience_id)


@router.put("/{experience_id}", response_model=ExperienceResponse)
async def update_experience(
    experience_id: int,
    body: ExperienceUpdate,
    db: AsyncSession = Depends(get_db),
):
    experience = await get_or_404(db, Experience, experience_id)
    for key, value in body.changes().items():
        setattr(experience, key, value)
    _normalise_current(experience)
    await db.flush()
    logger.info("Updated experience id=%d", experience.id)
    return experience


@router.delete("/{experience_id}", status_code=status.HTTP_204_NO_CONTENT, response_model=None)
async def delete_experience(experience_id: int, db: AsyncSession = Depends(get_db)) -> None:
    experience = await get_or_404(db, Experience, experience_id)
    await db.delete(experience)
    await db.flush()
    logger.info("Deleted experience id=%d", experience_id)


@router.post("/{experience_id}/toggle-active", response_model=ExperienceResponse)
async def toggle_experience_active(experience_id: int, db: AsyncSession = Depends(get_db)):
    experience = await get_or_404(db, Experience, experience_id)
    experience.is_active = not experience.is_active
    await db.flush()
    return experience
