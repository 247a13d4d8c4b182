"""
posts/schemas.py

Defines Pydantic models for the blog CMS:
- Create/update payloads
- Post read model with embedded author summary
- Paginated listing response
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PostAuthor(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str | None = None
    email: str


class PostCreate(BaseModel):
    """
    Payload for a new post. Presence of title and content is
    enforced by the service so both answer the same 400.
    """
    title: str | None = Field(default=None, max_length=255)
    content: str | None = None
    excerpt: str | None = None
    published: bool = False
    meta_title: str | None = Field(default=None, max_length=255)
    meta_description: str | None = Field(default=None, max_length=500)


class PostUpdate(BaseModel):
    """Partial update; omitted fields keep their stored values."""
    title: str | None = Field(default=None, max_length=255)
    content: str | None = None
    excerpt: str | None = None
    published: bool | None = None
    meta_title: str | None = Field(default=None, max_length=255)
    meta_description: str | None = Field(default=None, max_length=500)


class PostRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    slug: str
    content: str
    excerpt: str | None = None
    published: bool
    published_at: datetime | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    created_at: datetime
    updated_at: datetime
    author: PostAuthor


class PostListResponse(BaseModel):
    posts: list[PostRead] = Field(default_factory=list)
    total: int = Field(..., description="Total number of posts matching the filter")
    has_more: bool = Field(..., description="Indicates if more posts follow this page")


class PostDeleteResponse(BaseModel):
    message: str
