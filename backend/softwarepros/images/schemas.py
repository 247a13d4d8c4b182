"""
images/schemas.py

Pydantic models for the image library:
- Image read model with the uploader summary
- Alt-text update payload
- Paginated listing and delete responses
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class ImageOwner(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None = None
    email: str


class ImageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    filename: str
    original_name: str
    url: str
    alt: str
    size: int
    mime_type: str
    created_at: datetime
    user: ImageOwner


class ImageUpdate(BaseModel):
    """Only the alt text can change; an empty value keeps the current one."""
    alt: str | None = Field(default=None, max_length=500)


class ImageListResponse(BaseModel):
    images: list[ImageRead] = Field(default_factory=list)
    total: int
    has_more: bool


class ImageDeleteResponse(BaseModel):
    message: str
