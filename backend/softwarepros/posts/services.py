"""
backend/softwarepros/posts/services.py

Post Services
Business logic for the blog CMS:
- Slug generation from titles
- Paginated listing (optionally published-only)
- Create, read, update and delete posts (admin only at the route layer)

Database failures are logged and mapped to 503 responses, except the public
listing which degrades to an empty page.
"""

import logging
import re
from datetime import datetime, timezone
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from softwarepros.posts import schemas
from softwarepros.posts.models import Post

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"[^\w\s-]")
_SEPARATORS = re.compile(r"[\s_-]+")


def generate_slug(title: str) -> str:
    """Builds a URL slug: lowercase words joined by single hyphens."""
    slug = _NON_WORD.sub("", title.lower().strip())
    slug = _SEPARATORS.sub("-", slug)
    return slug.strip("-")


def _unavailable(e: Exception) -> HTTPException:
    logger.error(f"[POSTS] Database error: {e}")
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database not available"
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Post not found")


def _duplicate_title() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST, detail="A post with this title already exists"
    )


# ---------------------------------------------------
# Post Service
# ---------------------------------------------------
class PostService:
    """Service layer for managing blog posts."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def _get_by_slug(self, slug: str) -> Post | None:
        result = await self.db.execute(select(Post).filter(Post.slug == slug))
        return result.unique().scalar_one_or_none()

    # ---------------------------------------------------
    # Retrieval
    # ---------------------------------------------------
    async def list_posts(
        self, published_only: bool = False, limit: int = 10, offset: int = 0
    ) -> schemas.PostListResponse:
        """Newest-first page of posts; an unreachable database yields an empty page."""
        stmt = select(Post)
        count_stmt = select(func.count()).select_from(Post)
        if published_only:
            stmt = stmt.filter(Post.published.is_(True))
            count_stmt = count_stmt.filter(Post.published.is_(True))

        try:
            result = await self.db.execute(
                stmt.order_by(Post.created_at.desc()).offset(offset).limit(limit)
            )
            posts = list(result.unique().scalars().all())
            total = (await self.db.execute(count_stmt)).scalar_one()
        except SQLAlchemyError as e:
            logger.error(f"[POSTS] Database error fetching posts: {e}")
            return schemas.PostListResponse(posts=[], total=0, has_more=False)

        return schemas.PostListResponse(
            posts=[schemas.PostRead.model_validate(p) for p in posts],
            total=total,
            has_more=offset + limit < total,
        )

    async def get_post(self, slug: str) -> schemas.PostRead:
        try:
            post = await self._get_by_slug(slug)
        except SQLAlchemyError as e:
            raise _unavailable(e)
        if not post:
            raise _not_found()
        return schemas.PostRead.model_validate(post)

    async def recent_published(self, limit: int = 20) -> list[Post]:
        """Most recently published posts for syndication."""
        result = await self.db.execute(
            select(Post)
            .filter(Post.published.is_(True))
            .order_by(Post.published_at.desc().nullslast(), Post.created_at.desc())
            .limit(limit)
        )
        return list(result.unique().scalars().all())

    # ---------------------------------------------------
    # Mutations
    # ---------------------------------------------------
    async def create_post(self, author_id: UUID, data: schemas.PostCreate) -> schemas.PostRead:
        if not data.title or not data.content:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail="Title and content are required"
            )

        slug = generate_slug(data.title)
        try:
            if await self._get_by_slug(slug):
                logger.warning(f"[CREATE] Duplicate slug rejected: {slug}")
                raise _duplicate_title()

            post = Post(
                title=data.title,
                slug=slug,
                content=data.content,
                excerpt=data.excerpt,
                published=data.published,
                published_at=datetime.now(timezone.utc) if data.published else None,
                meta_title=data.meta_title,
                meta_description=data.meta_description,
                author_id=author_id,
            )
            self.db.add(post)
            await self.db.commit()
            await self.db.refresh(post)
            await self.db.refresh(post, attribute_names=["author"])
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"[CREATE] Slug taken by a concurrent write: {slug}")
            raise _duplicate_title()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise _unavailable(e)

        logger.info(f"[CREATE] Post created: slug={slug} author={author_id}")
        return schemas.PostRead.model_validate(post)

    async def update_post(self, slug: str, data: schemas.PostUpdate) -> schemas.PostRead:
        try:
            post = await self._get_by_slug(slug)
        except SQLAlchemyError as e:
            raise _unavailable(e)
        if not post:
            raise _not_found()

        try:
            if data.title and data.title != post.title:
                new_slug = generate_slug(data.title)
                clash = await self._get_by_slug(new_slug)
                if clash and clash.id != post.id:
                    logger.warning(f"[UPDATE] Slug collision on rename: {slug} -> {new_slug}")
                    raise _duplicate_title()
                post.title = data.title
                post.slug = new_slug

            if data.content:
                post.content = data.content
            if data.published is not None:
                if data.published and not post.published:
                    post.published_at = datetime.now(timezone.utc)
                post.published = data.published

            fields = data.model_fields_set
            for name in ("excerpt", "meta_title", "meta_description"):
                if name in fields:
                    setattr(post, name, getattr(data, name))

            await self.db.commit()
            await self.db.refresh(post)
            await self.db.refresh(post, attribute_names=["author"])
        except IntegrityError:
            await self.db.rollback()
            logger.warning(f"[UPDATE] Rename of {slug} lost a concurrent slug race")
            raise _duplicate_title()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise _unavailable(e)

        logger.info(f"[UPDATE] Post updated: {slug} -> {post.slug}")
        return schemas.PostRead.model_validate(post)

    async def delete_post(self, slug: str) -> schemas.PostDeleteResponse:
        try:
            post = await self._get_by_slug(slug)
            if not post:
                raise _not_found()
            await self.db.delete(post)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise _unavailable(e)

        logger.info(f"[DELETE] Post deleted: {slug}")
        return schemas.PostDeleteResponse(message="Post deleted successfully")
