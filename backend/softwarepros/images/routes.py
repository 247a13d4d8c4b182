"""
backend/softwarepros/images/routes.py

Image Routes
Defines API endpoints for the admin image library. Every endpoint requires
a signed-in user; changing or deleting an image is limited to its uploader
and admins.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from softwarepros.core.dependencies import get_current_user
from softwarepros.database.models import User
from softwarepros.database.session import get_db
from softwarepros.images import schemas
from softwarepros.images.services import ImageService

router = APIRouter(prefix="/api/images", tags=["Images"])

DBDep = Annotated[AsyncSession, Depends(get_db)]
UserDep = Annotated[User, Depends(get_current_user)]


@router.get(
    "",
    response_model=schemas.ImageListResponse,
    status_code=status.HTTP_200_OK,
    summary="List Images",
    description="Newest-first listing of the image library.",
)
async def list_images(
    db: DBDep,
    current_user: UserDep,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> schemas.ImageListResponse:
    return await ImageService(db).list_images(limit=limit, offset=offset)


@router.post(
    "",
    response_model=schemas.ImageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Image",
    description="Uploads a JPEG, PNG, GIF or WebP image with optional alt text.",
)
async def upload_image(
    db: DBDep,
    current_user: UserDep,
    file: UploadFile = File(...),
    alt: str = Form(""),
) -> schemas.ImageRead:
    return await ImageService(db).upload_image(current_user, file, alt)


@router.get(
    "/{image_id}",
    response_model=schemas.ImageRead,
    status_code=status.HTTP_200_OK,
    summary="Get Image",
)
async def get_image(image_id: UUID, db: DBDep, current_user: UserDep) -> schemas.ImageRead:
    return await ImageService(db).get_image(image_id)


@router.put(
    "/{image_id}",
    response_model=schemas.ImageRead,
    status_code=status.HTTP_200_OK,
    summary="Update Image",
    description="Updates the alt text (uploader or admin).",
)
async def update_image(
    image_id: UUID,
    payload: schemas.ImageUpdate,
    db: DBDep,
    current_user: UserDep,
) -> schemas.ImageRead:
    return await ImageService(db).update_image(image_id, current_user, payload)


@router.delete(
    "/{image_id}",
    response_model=schemas.ImageDeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete Image",
    description="Deletes the image and its file (uploader or admin).",
)
async def delete_image(
    image_id: UUID, db: DBDep, current_user: UserDep
) -> schemas.ImageDeleteResponse:
    return await ImageService(db).delete_image(image_id, current_user)
