"""
backend/softwarepros/posts/routes.py

Post Routes
Defines API endpoints for the blog CMS:
- List posts, optionally published-only, with limit/offset paging (Public)
- Fetch a single post by slug (Public)
- Create, update and delete posts (Admin)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from softwarepros.core.dependencies import require_admin
from softwarepros.core.limiter import limiter
from softwarepros.database.models import User
from softwarepros.database.session import get_db
from softwarepros.posts import schemas
from softwarepros.posts.services import PostService

router = APIRouter(prefix="/api/posts", tags=["Posts"])

DBDep = Annotated[AsyncSession, Depends(get_db)]
AdminDep = Annotated[User, Depends(require_admin)]


# ----------------------------------------------------
# Public Post Endpoints
# ----------------------------------------------------
@router.get(
    "",
    response_model=schemas.PostListResponse,
    status_code=status.HTTP_200_OK,
    summary="List Posts",
    description="Newest-first listing of posts. Pass published=true for the public blog.",
)
@limiter.limit("60/minute")
async def list_posts(
    request: Request,
    db: DBDep,
    published: bool = Query(False, description="Only return published posts"),
    limit: int = Query(10, ge=1, le=100, description="Maximum number of posts to return"),
    offset: int = Query(0, ge=0, description="Number of posts to skip"),
) -> schemas.PostListResponse:
    return await PostService(db).list_posts(published_only=published, limit=limit, offset=offset)


@router.get(
    "/{slug}",
    response_model=schemas.PostRead,
    status_code=status.HTTP_200_OK,
    summary="Get Post",
    description="Fetch a single post by its slug.",
)
@limiter.limit("60/minute")
async def get_post(request: Request, slug: str, db: DBDep) -> schemas.PostRead:
    return await PostService(db).get_post(slug)


# ----------------------------------------------------
# Admin Post Endpoints
# ----------------------------------------------------
@router.post(
    "",
    response_model=schemas.PostRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Post",
    description="Create a new blog post (admin only).",
)
async def create_post(
    payload: schemas.PostCreate,
    db: DBDep,
    current_user: AdminDep,
) -> schemas.PostRead:
    return await PostService(db).create_post(author_id=current_user.id, data=payload)


@router.put(
    "/{slug}",
    response_model=schemas.PostRead,
    status_code=status.HTTP_200_OK,
    summary="Update Post",
    description="Update an existing post. Changing the title changes the slug (admin only).",
)
async def update_post(
    slug: str,
    payload: schemas.PostUpdate,
    db: DBDep,
    current_user: AdminDep,
) -> schemas.PostRead:
    return await PostService(db).update_post(slug, payload)


@router.delete(
    "/{slug}",
    response_model=schemas.PostDeleteResponse,
    status_code=status.HTTP_200_OK,
    summary="Delete Post",
    description="Delete a post (admin only).",
)
async def delete_post(
    slug: str,
    db: DBDep,
    current_user: AdminDep,
) -> schemas.PostDeleteResponse:
    return await PostService(db).delete_post(slug)
