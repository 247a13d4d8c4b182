"""
main.py

Application entrypoint for the SoftwarePros API.
- Initializes structured logging
- Sets up the FastAPI application, its lifespan and middlewares
- Owns the contact-form rate limiter and its background sweep
- Registers all API routers
- Integrates per-IP rate limiting via SlowAPI
- Adds common security headers
- Configures CORS
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Annotated, Any
import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response

from softwarepros.core.logging import init_logging
from softwarepros.core.config import settings
from softwarepros.core.limiter import limiter
from softwarepros.core.rate_limiter import RateLimiter
from softwarepros.core.redis import close_redis, ping_redis
from softwarepros.database.session import engine, get_db
from softwarepros.utils.middleware import LoggingMiddleware, SecurityHeadersMiddleware

from softwarepros.auth.routes import router as auth_router
from softwarepros.contact.routes import router as contact_router
from softwarepros.images.routes import router as images_router
from softwarepros.meetings.routes import router as meetings_router
from softwarepros.posts.feed import router as feed_router
from softwarepros.posts.routes import router as posts_router

init_logging()
logger = logging.getLogger("softwarepros")


# -----------------------------
# Application-Owned Resources
# -----------------------------
contact_rate_limiter = RateLimiter(
    window_ms=settings.CONTACT_RATE_LIMIT_WINDOW_MS,
    max_requests=settings.CONTACT_RATE_LIMIT_MAX_REQUESTS,
    sweep_interval=settings.RATE_LIMIT_SWEEP_INTERVAL_SECONDS,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Runs the limiter sweep for the lifetime of the app and releases connections on shutdown."""
    async with app.state.contact_rate_limiter:
        yield
    await close_redis()
    await engine.dispose()
    logger.info("Shutdown complete")


# -----------------------------
# FastAPI App Initialization
# -----------------------------
app = FastAPI(title=f"{settings.APP_NAME} API", version="1.0.0", lifespan=lifespan)
app.state.contact_rate_limiter = contact_rate_limiter

# -----------------------------
# Middleware Configuration
# -----------------------------
app.state.limiter = limiter


async def rate_limit_exceeded_handler(request: Request, exc: Exception) -> Response:
    return _rate_limit_exceeded_handler(request, exc)  # type: ignore[arg-type]


app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(LoggingMiddleware)

# -----------------------------
# CORSMiddleware Configuration
# -----------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Custom 404 error handler
@app.exception_handler(404)
async def custom_404_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Logs and returns a standardized response for 404 errors.
    """
    logger.warning(f"404 Not Found: {request.method} {request.url.path}")
    return JSONResponse(status_code=404, content={"detail": exc.detail})


# -----------------------------
# API Router Registration
# -----------------------------
app.include_router(auth_router)
app.include_router(posts_router)
app.include_router(images_router)
app.include_router(contact_router)
app.include_router(meetings_router)
app.include_router(feed_router)

# Uploaded library images
settings.uploads_path.mkdir(parents=True, exist_ok=True)
app.mount(
    settings.UPLOADS_URL_PREFIX,
    StaticFiles(directory=settings.uploads_path),
    name="uploads",
)


# -----------------------------
# Root Endpoint
# -----------------------------
@app.get("/", response_class=HTMLResponse, include_in_schema=False)
async def home() -> Any:
    return f"""
    <html>
        <head>
            <title>{settings.APP_NAME} API</title>
        </head>
        <body style="font-family: Arial, sans-serif; text-align: center; padding-top: 50px;">
            <h1>{settings.APP_NAME} API</h1>
            <p>Blog, contact and consultation services for {settings.BASE_URL}.</p>
        </body>
    </html>
    """


# -----------------------------
# Health Check
# -----------------------------
@app.get("/health", tags=["Health"], summary="Service Health")
async def health(db: Annotated[AsyncSession, Depends(get_db)]) -> dict[str, Any]:
    """Reports database and Redis reachability."""
    try:
        await db.execute(text("SELECT 1"))
        database_ok = True
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"[HEALTH] Database check failed: {e}")
        database_ok = False

    redis_ok = await ping_redis()
    healthy = database_ok and (redis_ok or not settings.REDIS_URL)
    return {
        "status": "ok" if healthy else "degraded",
        "database": database_ok,
        "redis": redis_ok,
    }
