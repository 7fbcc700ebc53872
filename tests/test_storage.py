"""Tests for LocalFileStorage."""
import io
from types import SimpleNamespace

import pytest
from fastapi import UploadFile

from app.config import settings
from app.exceptions import StorageFailure, ValidationError
from app.services.storage import LocalFileStorage, public_url
from tests.conftest import png_bytes


def _upload(data: bytes, filename: str = "pic.png") -> UploadFile:
    return UploadFile(file=io.BytesIO(data), filename=filename)


def test_public_url():
    assert public_url(None) is None
    assert public_url("blog/covers/a.png") == f"{settings.STORAGE_URL_PREFIX}/blog/covers/a.png"
    assert public_url("https://cdn.example.com/a.png") == "https://cdn.example.com/a.png"


@pytest.mark.asyncio
async def test_store_and_delete(tmp_path):
    storage = LocalFileStorage(str(tmp_path))

    path = await storage.store(_upload(png_bytes()), "projects/gallery")
    assert path.startswith("projects/gallery/")
    assert path.endswith(".png")
    assert await storage.exists(path)

    await storage.delete(path)
    assert not await storage.exists(path)


@pytest.mark.asyncio
async def test_deleting_missing_file_is_not_an_error(tmp_path):
    storage = LocalFileStorage(str(tmp_path))
    await storage.delete("projects/gallery/gone.png")
    await storage.delete(None)
    await storage.delete("https://cdn.example.com/remote.png")


@pytest.mark.asyncio
async def test_rejects_disallowed_extension(tmp_path):
    storage = LocalFileStorage(str(tmp_path))
    with pytest.raises(ValidationError) as exc_info:
        await storage.store(_upload(b"#!/bin/sh", "run.sh"), "uploads", field="image")
    assert "image" in exc_info.value.errors


@pytest.mark.asyncio
async def test_rejects_oversized_file(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "MAX_IMAGE_SIZE", 16)
    storage = LocalFileStorage(str(tmp_path))

    with pytest.raises(ValidationError):
        await storage.store(_upload(png_bytes(size=(64, 64))), "big")
    assert list((tmp_path / "big").iterdir()) == []


@pytest.mark.asyncio
async def test_rejects_corrupt_image(tmp_path):
    storage = LocalFileStorage(str(tmp_path))
    with pytest.raises(ValidationError):
        await storage.store(_upload(b"not really a png at all"), "corrupt")
    assert list((tmp_path / "corrupt").iterdir()) == []


@pytest.mark.asyncio
async def test_refuses_paths_outside_root(tmp_path):
    storage = LocalFileStorage(str(tmp_path / "root"))
    with pytest.raises(StorageFailure):
        await storage.delete("../escape.png")


class _FlushOnlySession:
    async def flush(self):
        pass


class _StuckFileStorage(LocalFileStorage):
    """Storage whose ``stuck`` file cannot be removed."""

    def __init__(self, root: str, stuck: str) -> None:
        super().__init__(root)
        self.stuck = stuck

    async def delete(self, path):
        if path == self.stuck:
            raise StorageFailure(f"Could not delete {path!r}", path=path)
        await super().delete(path)


@pytest.mark.asyncio
async def test_swap_removes_previous_file(tmp_path):
    storage = LocalFileStorage(str(tmp_path))
    old = await storage.store(_upload(png_bytes()), "blog/covers")
    new = await storage.store(_upload(png_bytes()), "blog/covers")
    post = SimpleNamespace(cover_image=old)

    await storage.swap(_FlushOnlySession(), post, "cover_image", new)

    assert post.cover_image == new
    assert await storage.exists(new)
    assert not await storage.exists(old)


@pytest.mark.asyncio
async def test_swap_discards_new_file_when_old_cannot_be_removed(tmp_path):
    plain = LocalFileStorage(str(tmp_path))
    old = await plain.store(_upload(png_bytes()), "blog/covers")
    storage = _StuckFileStorage(str(tmp_path), stuck=old)
    new = await storage.store(_upload(png_bytes()), "blog/covers")

    with pytest.raises(StorageFailure):
        await storage.swap(_FlushOnlySession(), SimpleNamespace(cover_image=old), "cover_image", new)

    assert not await storage.exists(new)
    assert await storage.exists(old)
