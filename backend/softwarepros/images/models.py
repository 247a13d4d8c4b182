"""
images/models.py

Defines the Image model for the admin image library.
- Each image row points at a file stored under the uploads directory.
- The uploader owns the image; admins may manage any image.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from softwarepros.database.base import Base

if TYPE_CHECKING:
    from softwarepros.database.models import User


class Image(Base):
    __tablename__ = "images"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the image",
    )

    # File
    filename: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, comment="Stored file name inside the uploads directory"
    )
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str] = mapped_column(String(500), nullable=False, comment="Public URL path of the file")
    size: Mapped[int] = mapped_column(Integer, nullable=False, comment="File size in bytes")
    mime_type: Mapped[str] = mapped_column(String(100), nullable=False)

    # Metadata
    alt: Mapped[str] = mapped_column(String(500), nullable=False, default="", comment="Alt text")

    # Foreign Keys
    uploaded_by: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    user: Mapped["User"] = relationship("User", back_populates="images", lazy="joined")

    def __repr__(self) -> str:
        return f"<Image(id={self.id}, filename={self.filename})>"
