"""
tests/posts/test_post_routes.py

Integration tests for the blog CMS endpoints.
Covers public listing and lookup, and admin-only create/update/delete.
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi import HTTPException, status
from httpx import AsyncClient

from softwarepros.database.models import User
from softwarepros.posts import schemas
from softwarepros.posts import services as post_services
from softwarepros.posts.models import Post


def _read(post: Post) -> schemas.PostRead:
    return schemas.PostRead.model_validate(post)


# Public Post Endpoints


@pytest.mark.asyncio
@patch.object(post_services.PostService, "list_posts", new_callable=AsyncMock)
async def test_list_published_posts(
    mock_list_posts: AsyncMock,
    fake_post: Post,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    """Test the public blog listing with paging parameters."""
    mock_list_posts.return_value = schemas.PostListResponse(
        posts=[_read(fake_post)], total=5, has_more=True
    )

    response = await async_client.get("/api/posts?published=true&limit=2&offset=2")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["total"] == 5
    assert data["has_more"] is True
    assert data["posts"][0]["slug"] == fake_post.slug
    mock_list_posts.assert_awaited_once_with(published_only=True, limit=2, offset=2)


@pytest.mark.asyncio
async def test_list_posts_rejects_bad_limit(async_client: AsyncClient, override_get_db: AsyncMock) -> None:
    response = await async_client.get("/api/posts?limit=0")
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


@pytest.mark.asyncio
@patch.object(post_services.PostService, "get_post", new_callable=AsyncMock)
async def test_get_post_by_slug(
    mock_get_post: AsyncMock,
    fake_post: Post,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    mock_get_post.return_value = _read(fake_post)

    response = await async_client.get(f"/api/posts/{fake_post.slug}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == fake_post.title
    mock_get_post.assert_awaited_once_with(fake_post.slug)


@pytest.mark.asyncio
@patch.object(post_services.PostService, "get_post", new_callable=AsyncMock)
async def test_get_post_not_found_keeps_message(
    mock_get_post: AsyncMock,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
) -> None:
    mock_get_post.side_effect = HTTPException(status_code=404, detail="Post not found")

    response = await async_client.get("/api/posts/missing")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"detail": "Post not found"}


# Admin Post Endpoints


@pytest.mark.asyncio
@patch.object(post_services.PostService, "create_post", new_callable=AsyncMock)
async def test_admin_creates_post(
    mock_create_post: AsyncMock,
    fake_post: Post,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    mock_current_admin_user: User,
) -> None:
    mock_create_post.return_value = _read(fake_post)
    payload = {"title": fake_post.title, "content": fake_post.content, "published": True}

    response = await async_client.post("/api/posts", json=payload)

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["slug"] == fake_post.slug
    kwargs = mock_create_post.await_args.kwargs
    assert kwargs["author_id"] == mock_current_admin_user.id
    assert kwargs["data"].title == fake_post.title


@pytest.mark.asyncio
async def test_create_post_requires_login(async_client: AsyncClient, override_get_db: AsyncMock) -> None:
    response = await async_client.post("/api/posts", json={"title": "T", "content": "C"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"detail": "Unauthorized"}


@pytest.mark.asyncio
@patch.object(post_services.PostService, "create_post", new_callable=AsyncMock)
async def test_non_admin_cannot_create_post(
    mock_create_post: AsyncMock,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    mock_current_regular_user: User,
) -> None:
    response = await async_client.post("/api/posts", json={"title": "T", "content": "C"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    mock_create_post.assert_not_awaited()


@pytest.mark.asyncio
@patch.object(post_services.PostService, "update_post", new_callable=AsyncMock)
async def test_admin_updates_post(
    mock_update_post: AsyncMock,
    fake_post: Post,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    mock_current_admin_user: User,
) -> None:
    mock_update_post.return_value = _read(fake_post)

    response = await async_client.put(f"/api/posts/{fake_post.slug}", json={"excerpt": "New"})

    assert response.status_code == status.HTTP_200_OK
    slug, data = mock_update_post.await_args.args
    assert slug == fake_post.slug
    assert data.model_fields_set == {"excerpt"}


@pytest.mark.asyncio
@patch.object(post_services.PostService, "delete_post", new_callable=AsyncMock)
async def test_admin_deletes_post(
    mock_delete_post: AsyncMock,
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    mock_current_admin_user: User,
) -> None:
    mock_delete_post.return_value = schemas.PostDeleteResponse(message="Post deleted successfully")

    response = await async_client.delete("/api/posts/some-post")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Post deleted successfully"}
    mock_delete_post.assert_awaited_once_with("some-post")


@pytest.mark.asyncio
async def test_non_admin_cannot_delete_post(
    async_client: AsyncClient,
    override_get_db: AsyncMock,
    mock_current_regular_user: User,
) -> None:
    response = await async_client.delete("/api/posts/some-post")

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
