"""
tests/images/test_image_services.py

Unit tests for image storage and the ImageService against a mocked session.
Covers owner-or-admin checks, not-found handling and upload validation.
"""

import io
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest
from fastapi import HTTPException, UploadFile
from sqlalchemy.exc import OperationalError

from conftest import db_result
from softwarepros.core.config import settings
from softwarepros.database.models import User
from softwarepros.images import schemas
from softwarepros.images.models import Image
from softwarepros.images.services import ImageService, can_modify
from softwarepros.images.storage import remove_image_file, save_image

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 128


def _upload(content: bytes, filename: str = "team photo.png") -> UploadFile:
    return UploadFile(file=io.BytesIO(content), filename=filename)


@pytest.fixture
def refreshing_db(mock_db: AsyncMock, fake_regular_user: User) -> AsyncMock:
    """Session whose refresh() fills in the server-side defaults."""

    async def _refresh(obj, attribute_names=None):
        if obj.id is None:
            obj.id = uuid4()
        obj.created_at = obj.created_at or datetime.now(timezone.utc)
        obj.user = obj.user or fake_regular_user

    mock_db.refresh.side_effect = _refresh
    return mock_db


# =====================
# --- Permissions ---
# =====================
def test_can_modify_owner_and_admin(
    fake_image: Image, fake_admin_user: User, fake_regular_user: User
) -> None:
    assert can_modify(fake_image, fake_admin_user)
    assert not can_modify(fake_image, fake_regular_user)

    fake_image.uploaded_by = fake_regular_user.id
    assert can_modify(fake_image, fake_regular_user)


# =====================
# --- Storage ---
# =====================
@pytest.mark.asyncio
async def test_save_image_writes_file(uploads_dir: Path) -> None:
    stored = await save_image(_upload(PNG_BYTES))

    assert stored.mime_type == "image/png"
    assert stored.size == len(PNG_BYTES)
    assert stored.original_name == "team photo.png"
    assert stored.filename.endswith("_team_photo.png")
    assert stored.url == f"/uploads/{stored.filename}"
    assert (uploads_dir / stored.filename).read_bytes() == PNG_BYTES


@pytest.mark.asyncio
async def test_save_image_rejects_non_image(uploads_dir: Path) -> None:
    with pytest.raises(HTTPException) as exc_info:
        await save_image(_upload(b"just some text, definitely not a picture", "notes.png"))

    assert exc_info.value.status_code == 415
    assert list(uploads_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_save_image_rejects_empty_file(uploads_dir: Path) -> None:
    with pytest.raises(HTTPException) as exc_info:
        await save_image(_upload(b""))

    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_save_image_rejects_oversized_file(uploads_dir: Path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "MAX_IMAGE_SIZE_BYTES", 64)

    with pytest.raises(HTTPException) as exc_info:
        await save_image(_upload(PNG_BYTES))

    assert exc_info.value.status_code == 413


def test_remove_image_file_tolerates_missing_file(uploads_dir: Path) -> None:
    (uploads_dir / "a.png").write_bytes(PNG_BYTES)

    remove_image_file("a.png")
    remove_image_file("a.png")

    assert not (uploads_dir / "a.png").exists()


# =====================
# --- Service ---
# =====================
@pytest.mark.asyncio
async def test_list_images_pages(mock_db: AsyncMock, fake_image: Image) -> None:
    mock_db.execute.side_effect = [db_result(values=[fake_image]), db_result(scalar=2)]

    listing = await ImageService(mock_db).list_images(limit=1, offset=0)

    assert listing.total == 2
    assert listing.has_more is True
    assert listing.images[0].user.email == fake_image.user.email


@pytest.mark.asyncio
async def test_get_image_not_found(mock_db: AsyncMock) -> None:
    mock_db.execute.return_value = db_result(value=None)

    with pytest.raises(HTTPException) as exc_info:
        await ImageService(mock_db).get_image(uuid4())

    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Image not found"


@pytest.mark.asyncio
async def test_get_image_database_down(mock_db: AsyncMock) -> None:
    mock_db.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

    with pytest.raises(HTTPException) as exc_info:
        await ImageService(mock_db).get_image(uuid4())

    assert exc_info.value.status_code == 503


@pytest.mark.asyncio
async def test_upload_image_records_owner(
    refreshing_db: AsyncMock, fake_regular_user: User, uploads_dir: Path
) -> None:
    image = await ImageService(refreshing_db).upload_image(
        fake_regular_user, _upload(PNG_BYTES), alt="  Team photo "
    )

    assert image.alt == "Team photo"
    assert image.user.id == fake_regular_user.id
    added = refreshing_db.add.call_args.args[0]
    assert added.uploaded_by == fake_regular_user.id
    refreshing_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_upload_image_defaults_alt_to_file_name(
    refreshing_db: AsyncMock, fake_regular_user: User, uploads_dir: Path
) -> None:
    image = await ImageService(refreshing_db).upload_image(fake_regular_user, _upload(PNG_BYTES))
    assert image.alt == "team photo.png"


@pytest.mark.asyncio
async def test_upload_image_database_down_removes_file(
    mock_db: AsyncMock, fake_regular_user: User, uploads_dir: Path
) -> None:
    mock_db.commit.side_effect = OperationalError("INSERT", {}, Exception("down"))

    with pytest.raises(HTTPException) as exc_info:
        await ImageService(mock_db).upload_image(fake_regular_user, _upload(PNG_BYTES))

    assert exc_info.value.status_code == 503
    assert list(uploads_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_update_image_by_owner(refreshing_db: AsyncMock, fake_image: Image, fake_admin_user: User) -> None:
    refreshing_db.execute.return_value = db_result(value=fake_image)

    image = await ImageService(refreshing_db).update_image(
        fake_image.id, fake_admin_user, schemas.ImageUpdate(alt="New alt")
    )

    assert image.alt == "New alt"
    refreshing_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_update_image_empty_alt_keeps_current(
    refreshing_db: AsyncMock, fake_image: Image, fake_admin_user: User
) -> None:
    refreshing_db.execute.return_value = db_result(value=fake_image)

    image = await ImageService(refreshing_db).update_image(
        fake_image.id, fake_admin_user, schemas.ImageUpdate(alt="")
    )

    assert image.alt == "Our team"


@pytest.mark.asyncio
async def test_update_image_by_stranger_is_forbidden(
    mock_db: AsyncMock, fake_image: Image, fake_regular_user: User
) -> None:
    mock_db.execute.return_value = db_result(value=fake_image)

    with pytest.raises(HTTPException) as exc_info:
        await ImageService(mock_db).update_image(
            fake_image.id, fake_regular_user, schemas.ImageUpdate(alt="Hijacked")
        )

    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Forbidden"
    assert fake_image.alt == "Our team"
    mock_db.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_delete_image_removes_row_and_file(
    mock_db: AsyncMock, fake_image: Image, fake_admin_user: User, uploads_dir: Path
) -> None:
    (uploads_dir / fake_image.filename).write_bytes(PNG_BYTES)
    mock_db.execute.return_value = db_result(value=fake_image)

    result = await ImageService(mock_db).delete_image(fake_image.id, fake_admin_user)

    assert result.message == "Image deleted successfully"
    mock_db.delete.assert_awaited_once_with(fake_image)
    assert not (uploads_dir / fake_image.filename).exists()


@pytest.mark.asyncio
async def test_delete_image_without_file_still_deletes_row(
    mock_db: AsyncMock, fake_image: Image, fake_admin_user: User, uploads_dir: Path
) -> None:
    mock_db.execute.return_value = db_result(value=fake_image)

    result = await ImageService(mock_db).delete_image(fake_image.id, fake_admin_user)

    assert result.message == "Image deleted successfully"
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_delete_image_by_stranger_is_forbidden(
    mock_db: AsyncMock, fake_image: Image, fake_regular_user: User, uploads_dir: Path
) -> None:
    (uploads_dir / fake_image.filename).write_bytes(PNG_BYTES)
    mock_db.execute.return_value = db_result(value=fake_image)

    with pytest.raises(HTTPException) as exc_info:
        await ImageService(mock_db).delete_image(fake_image.id, fake_regular_user)

    assert exc_info.value.status_code == 403
    mock_db.delete.assert_not_awaited()
    assert (uploads_dir / fake_image.filename).exists()
