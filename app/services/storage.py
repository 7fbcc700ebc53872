"""
Local file storage for uploaded images.

Paths handed back by ``store`` are relative to ``settings.UPLOAD_DIR``
(e.g. ``projects/gallery/3f2a....png``) and are what the database keeps.
``url`` turns such a path into the public URL served under
``settings.STORAGE_URL_PREFIX``; absolute http(s) URLs pass through.

Failures are never swallowed: write and delete errors raise
StorageFailure so a missing or orphaned asset is visible to the caller.
Deleting a file that is already gone is not an error.
"""
from __future__ import annotations

import logging
import os
import uuid
from pathlib import Path
from typing import Iterable, List, Optional

import aiofiles
import aiofiles.os
from fastapi import UploadFile
from PIL import Image, UnidentifiedImageError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import StorageFailure, ValidationError

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1024 * 1024  # 1 MB slices
_VECTOR_TYPES = (".svg",)


def _is_raster_image(path: Path) -> bool:
    """True if Pillow can identify and verify the file."""
    try:
        with Image.open(path) as img:
            img.verify()
        return True
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as exc:
        logger.info("Rejected upload %s: not a readable image (%s)", path.name, exc)
        return False


def public_url(path: Optional[str]) -> Optional[str]:
    """Public URL for a stored path (None stays None)."""
    if not path:
        return None
    if path.startswith(("http://", "https://")):
        return path
    return f"{settings.STORAGE_URL_PREFIX.rstrip('/')}/{path.lstrip('/')}"


class LocalFileStorage:
    """Stores files below a root directory on the local disk."""

    def __init__(self, root: Optional[str] = None) -> None:
        self.root = Path(root or settings.UPLOAD_DIR)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _absolute(self, path: str) -> Path:
        root = self.root.resolve()
        full = (root / path).resolve()
        if root != full and root not in full.parents:
            raise StorageFailure(f"Refusing to touch a path outside the storage root: {path!r}", path=path)
        return full

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def store(self, upload: UploadFile, directory: str, field: str = "file") -> str:
        """
        Stream an upload to ``<root>/<directory>/<uuid><ext>``.

        Raises:
            ValidationError: missing filename, disallowed extension, or file
                larger than MAX_IMAGE_SIZE (reported against ``field``)
            StorageFailure:  the file could not be written
        """
        if not upload.filename:
            raise ValidationError.single(field, "Upload must include a filename.")

        ext = Path(upload.filename).suffix.lower()
        if ext not in settings.ALLOWED_IMAGE_TYPES:
            raise ValidationError.single(
                field,
                f"Unsupported file type '{ext}'. Accepted: {', '.join(settings.ALLOWED_IMAGE_TYPES)}",
            )

        relative = f"{directory.strip('/')}/{uuid.uuid4().hex}{ext}"
        full = self._absolute(relative)
        size = 0

        try:
            os.makedirs(full.parent, exist_ok=True)
            async with aiofiles.open(full, "wb") as out:
                while True:
                    chunk = await upload.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > settings.MAX_IMAGE_SIZE:
                        break
                    await out.write(chunk)
        except OSError as exc:
            logger.error("Could not write %s: %s", full, exc)
            raise StorageFailure(f"Could not store {upload.filename!r}: {exc}", path=relative) from exc

        if size > settings.MAX_IMAGE_SIZE:
            await self.delete(relative)
            raise ValidationError.single(
                field,
                f"The file must not exceed {settings.MAX_IMAGE_SIZE // 1024} kilobytes.",
            )

        if ext not in _VECTOR_TYPES and not _is_raster_image(full):
            await self.delete(relative)
            raise ValidationError.single(field, "The file must be an image.")

        logger.info("Stored %r -> %s (%s bytes)", upload.filename, relative, f"{size:,}")
        return relative

    async def delete(self, path: Optional[str]) -> None:
        """Remove a stored file.  Absolute URLs and empty paths are ignored."""
        if not path or path.startswith(("http://", "https://")):
            return
        full = self._absolute(path)
        try:
            await aiofiles.os.remove(full)
            logger.info("Deleted stored file %s", path)
        except FileNotFoundError:
            logger.warning("Stored file %s already missing", path)
        except OSError as exc:
            logger.error("Could not delete %s: %s", path, exc)
            raise StorageFailure(f"Could not delete {path!r}: {exc}", path=path) from exc

    async def discard(self, path: Optional[str]) -> None:
        """Best-effort delete for cleanup paths; a failure is only logged."""
        try:
            await self.delete(path)
        except StorageFailure as exc:
            logger.warning("Could not discard %s: %s", path, exc)

    async def swap(self, db: AsyncSession, entity, attribute: str, new_path: str) -> None:
        """
        Point ``entity.<attribute>`` at a freshly stored file and remove the
        file it referenced before.

        If the flush or the removal fails, ``new_path`` is discarded so the
        rolled-back request leaves no untracked upload behind.
        """
        old_path = getattr(entity, attribute)
        try:
            setattr(entity, attribute, new_path)
            await db.flush()
            if old_path and old_path != new_path:
                await self.delete(old_path)
        except Exception:
            await self.discard(new_path)
            raise

    async def delete_many(self, paths: Iterable[Optional[str]]) -> List[str]:
        """Delete several files; stops at the first failure."""
        deleted = []
        for path in paths:
            if path:
                await self.delete(path)
                deleted.append(path)
        return deleted

    def url(self, path: Optional[str]) -> Optional[str]:
        return public_url(path)

    async def exists(self, path: str) -> bool:
        return await aiofiles.os.path.exists(self._absolute(path))


def get_storage() -> LocalFileStorage:
    """FastAPI dependency; overridable in tests."""
    return LocalFileStorage()
