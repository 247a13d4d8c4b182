"""
backend/softwarepros/images/services.py

Image Services
Business logic for the admin image library:
- Newest-first listing with limit/offset paging
- Upload, alt-text update and delete
- Owner-or-admin checks for changes to an existing image
"""

import logging
from uuid import UUID

from fastapi import HTTPException, UploadFile, status
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from softwarepros.database.enums import UserRole
from softwarepros.database.models import User
from softwarepros.images import schemas
from softwarepros.images.models import Image
from softwarepros.images.storage import remove_image_file, save_image

logger = logging.getLogger(__name__)


def _unavailable(e: Exception) -> HTTPException:
    logger.error(f"[IMAGES] Database error: {e}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database not available"
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Image not found")


def can_modify(image: Image, user: User) -> bool:
    return image.uploaded_by == user.id or user.role == UserRole.ADMIN


# ---------------------------------------------------
# Image Service
# ---------------------------------------------------
class ImageService:
    """Service layer for managing library images."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get(self, image_id: UUID) -> Image:
        try:
            result = await self.db.execute(select(Image).filter(Image.id == image_id))
            image = result.unique().scalar_one_or_none()
        except SQLAlchemyError as e:
            raise _unavailable(e)
        if not image:
            raise _not_found()
        return image

    def _ensure_can_modify(self, image: Image, user: User) -> None:
        if not can_modify(image, user):
            logger.warning(f"[RBAC] User {user.id} may not modify image {image.id}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    # ---------------------------------------------------
    # Retrieval
    # ---------------------------------------------------
    async def list_images(self, limit: int = 50, offset: int = 0) -> schemas.ImageListResponse:
        try:
            result = await self.db.execute(
                select(Image).order_by(Image.created_at.desc()).offset(offset).limit(limit)
            )
            images = list(result.unique().scalars().all())
            total = (await self.db.execute(select(func.count()).select_from(Image))).scalar_one()
        except SQLAlchemyError as e:
            raise _unavailable(e)

        return schemas.ImageListResponse(
            images=[schemas.ImageRead.model_validate(i) for i in images],
            total=total,
            has_more=offset + limit < total,
        )

    async def get_image(self, image_id: UUID) -> schemas.ImageRead:
        return schemas.ImageRead.model_validate(await self._get(image_id))

    # ---------------------------------------------------
    # Mutations
    # ---------------------------------------------------
    async def upload_image(self, owner: User, file: UploadFile, alt: str = "") -> schemas.ImageRead:
        stored = await save_image(file)
        image = Image(
            filename=stored.filename,
            original_name=stored.original_name,
            url=stored.url,
            size=stored.size,
            mime_type=stored.mime_type,
            alt=alt.strip() or stored.original_name,
            uploaded_by=owner.id,
        )
        try:
            self.db.add(image)
            await self.db.commit()
            await self.db.refresh(image)
            await self.db.refresh(image, attribute_names=["user"])
        except SQLAlchemyError as e:
            await self.db.rollback()
            remove_image_file(stored.filename)
            raise _unavailable(e)

        logger.info(f"[UPLOAD] Image {image.id} uploaded by {owner.id}")
        return schemas.ImageRead.model_validate(image)

    async def update_image(
        self, image_id: UUID, user: User, data: schemas.ImageUpdate
    ) -> schemas.ImageRead:
        image = await self._get(image_id)
        self._ensure_can_modify(image, user)

        if data.alt:
            image.alt = data.alt
        try:
            await self.db.commit()
            await self.db.refresh(image)
            await self.db.refresh(image, attribute_names=["user"])
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise _unavailable(e)

        return schemas.ImageRead.model_validate(image)

    async def delete_image(self, image_id: UUID, user: User) -> schemas.ImageDeleteResponse:
        image = await self._get(image_id)
        self._ensure_can_modify(image, user)

        filename = image.filename
        try:
            await self.db.delete(image)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise _unavailable(e)
        remove_image_file(filename)

        logger.info(f"[DELETE] Image {image_id} deleted by {user.id}")
        return schemas.ImageDeleteResponse(message="Image deleted successfully")
