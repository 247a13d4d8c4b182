"""
posts/models.py

Defines the Post model for the blog content-management system.
- Each post belongs to one author (User) and is addressed by a unique slug.
- Drafts stay hidden from the public listing until published.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, DateTime, ForeignKey, String, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from softwarepros.database.base import Base

if TYPE_CHECKING:
    from softwarepros.database.models import User


class Post(Base):
    """
    Blog post authored by an admin, with optional SEO metadata.
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the post",
    )

    # Content
    title: Mapped[str] = mapped_column(String(255), nullable=False, comment="Post title")
    slug: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False, comment="URL slug derived from the title"
    )
    content: Mapped[str] = mapped_column(Text, nullable=False, comment="Post body (Markdown/HTML)")
    excerpt: Mapped[str | None] = mapped_column(Text, nullable=True, comment="Short summary")

    # Publication
    published: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False, comment="Whether the post is publicly visible"
    )
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, comment="First publication time"
    )

    # SEO
    meta_title: Mapped[str | None] = mapped_column(String(255), nullable=True)
    meta_description: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Foreign Keys
    author_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        comment="User ID of the post author",
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    author: Mapped["User"] = relationship("User", back_populates="posts", lazy="joined")

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, slug={self.slug}, published={self.published})>"
