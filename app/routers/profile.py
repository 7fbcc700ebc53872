"""
About profile administration (a single row).

Route summary
-------------
GET  /api/admin/profile          current profile (404 until first save)
PUT  /api/admin/profile          create or replace the profile
POST /api/admin/profile/image    upload profile image (replaces old file)
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.exceptions import NotFound
from app.models.database_models import AboutProfile
from app.models.schemas import AboutProfileInput, AboutProfileResponse
from app.services.storage import LocalFileStorage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter()


async def current_profile(db: AsyncSession) -> Optional[AboutProfile]:
    result = await db.execute(select(AboutProfile).order_by(AboutProfile.id).limit(1))
    return result.scalar_one_or_none()


async def _profile_or_404(db: AsyncSession) -> AboutProfile:
    profile = await current_profile(db)
    if profile is None:
        raise NotFound("About profile", "current")
    return profile


@router.get("", response_model=AboutProfileResponse)
async def get_profile(db: AsyncSession = Depends(get_db)):
    return await _profile_or_404(db)


@router.put("", response_model=AboutProfileResponse)
async def save_profile(body: AboutProfileInput, db: AsyncSession = Depends(get_db)):
    profile = await current_profile(db)
    if profile is None:
        profile = AboutProfile()
        db.add(profile)

    for key, value in body.model_dump().items():
        setattr(profile, key, value)
    await db.flush()
    logger.info("Saved about profile id=%d", profile.id)
    return profile


@router.post("/image", response_model=AboutProfileResponse)
async def upload_profile_image(
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
):
    profile = await _profile_or_404(db)
    path = await storage.store(file, "profile", field="profile_image")
    await storage.swap(db, profile, "profile_image", path)
    logger.info("Updated profile image -> %s", path)
    return profile
