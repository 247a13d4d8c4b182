"""
backend/softwarepros/database/models.py

Core SQLAlchemy ORM Models

Defines:
- User: Site accounts that can sign in to the blog editor

Includes relationships with:
- Post (authored blog posts)
- Image (uploaded library images)
"""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Enum, String, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from softwarepros.database.base import Base
from softwarepros.database.enums import UserRole
from softwarepros.images.models import Image
from softwarepros.posts.models import Post

# ---------------------------------------------------
# User Model: Authenticated Site Account
# ---------------------------------------------------


class User(Base):
    __tablename__ = "users"

    # -------------------------------------
    # Fields
    # -------------------------------------
    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        comment="Unique identifier for the user",
    )
    email: Mapped[str] = mapped_column(
        String(255), unique=True, index=True, nullable=False, comment="User's email address"
    )
    name: Mapped[str | None] = mapped_column(
        String(150), nullable=True, comment="Display name shown as post author"
    )
    hashed_password: Mapped[str] = mapped_column(
        String, nullable=False, comment="Bcrypt hash of the user's password"
    )
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole), nullable=False, default=UserRole.USER, comment="User role (ADMIN, EDITOR, USER)"
    )

    # -------------------------------------
    # Timestamps
    # -------------------------------------
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), comment="Account creation time"
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        comment="Last update time",
    )

    # -------------------------------------
    # Relationships
    # -------------------------------------
    posts: Mapped[list["Post"]] = relationship(
        "Post", back_populates="author", cascade="all, delete-orphan"
    )
    images: Mapped[list["Image"]] = relationship(
        "Image", back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"
