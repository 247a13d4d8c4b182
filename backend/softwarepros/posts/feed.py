"""
posts/feed.py

RSS 2.0 feed of the most recent published posts, rendered with Jinja2.
"""

import logging
from datetime import datetime, timezone
from email.utils import format_datetime
from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from jinja2 import Environment, FileSystemLoader, select_autoescape
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from softwarepros.core.config import settings
from softwarepros.database.session import get_db
from softwarepros.posts.models import Post
from softwarepros.posts.services import PostService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Feed"])

FEED_SIZE = 20

jinja_env = Environment(
    loader=FileSystemLoader(settings.templates_path),
    autoescape=select_autoescape(["html", "xml"]),
)


def _feed_item(post: Post, base_url: str) -> dict[str, str]:
    link = f"{base_url}/blog/{post.slug}"
    published = post.published_at or post.created_at or datetime.now(timezone.utc)
    if published.tzinfo is None:
        published = published.replace(tzinfo=timezone.utc)
    return {
        "title": post.title,
        "link": link,
        "guid": link,
        "description": post.excerpt or "",
        "pub_date": format_datetime(published),
    }


def render_feed(posts: list[Post]) -> str:
    """Renders the RSS document for the given posts."""
    base_url = settings.BASE_URL.rstrip("/")
    return jinja_env.get_template("feed.xml").render(
        title=f"{settings.APP_NAME} Blog",
        link=f"{base_url}/blog",
        feed_url=f"{base_url}/feed.xml",
        description=f"Insights and updates from {settings.APP_NAME}",
        build_date=format_datetime(datetime.now(timezone.utc)),
        items=[_feed_item(post, base_url) for post in posts],
    )


@router.get("/feed.xml", response_class=Response, summary="RSS Feed")
async def feed(db: Annotated[AsyncSession, Depends(get_db)]) -> Response:
    try:
        posts = await PostService(db).recent_published(limit=FEED_SIZE)
    except SQLAlchemyError as e:
        logger.error(f"[FEED] Database error, serving empty feed: {e}")
        posts = []
    return Response(content=render_feed(posts), media_type="application/rss+xml")
