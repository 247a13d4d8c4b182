'''
[seed] database/seed.py

Prepares the database for a fresh deployment:
- Creates all tables defined in the SQLAlchemy models
- Creates the admin account from ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME if it does not exist

Usage: python -m softwarepros.database.seed
'''

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from softwarepros.core.config import settings
from softwarepros.core.logging import init_logging
from softwarepros.core.security import get_password_hash
from softwarepros.database.base import Base
from softwarepros.database.enums import UserRole
from softwarepros.database.models import User
from softwarepros.database.session import AsyncSessionLocal, engine

logger = logging.getLogger(__name__)


async def create_tables() -> None:
    """Creates all database tables based on SQLAlchemy models."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def ensure_admin(db: AsyncSession, email: str, password: str, name: str) -> User:
    """Returns the admin account for `email`, creating it when missing."""
    result = await db.execute(select(User).filter(User.email == email))
    user = result.unique().scalar_one_or_none()
    if user:
        logger.info(f"[SEED] Admin already present: {email}")
        return user

    user = User(
        email=email,
        name=name,
        hashed_password=get_password_hash(password),
        role=UserRole.ADMIN,
    )
    db.add(user)
    await db.commit()
    logger.info(f"[SEED] Admin created: {email}")
    return user


async def seed() -> None:
    try:
        await create_tables()
        if not settings.ADMIN_PASSWORD:
            logger.warning("[SEED] ADMIN_PASSWORD not set; skipping admin account")
            return
        async with AsyncSessionLocal() as db:
            await ensure_admin(
                db, str(settings.ADMIN_EMAIL), settings.ADMIN_PASSWORD, settings.ADMIN_NAME
            )
    finally:
        await engine.dispose()


if __name__ == "__main__":
    init_logging()
    asyncio.run(seed())
