"""
tests/database/test_seed.py

Tests for admin account seeding.
"""

from unittest.mock import AsyncMock

import pytest

from conftest import db_result
from softwarepros.core.security import verify_password
from softwarepros.database.enums import UserRole
from softwarepros.database.models import User
from softwarepros.database.seed import ensure_admin


@pytest.mark.asyncio
async def test_ensure_admin_creates_account(mock_db: AsyncMock) -> None:
    mock_db.execute.return_value = db_result(value=None)

    user = await ensure_admin(mock_db, "owner@example.com", "s3cretpass", "Owner")

    assert user.email == "owner@example.com"
    assert user.role == UserRole.ADMIN
    assert verify_password("s3cretpass", user.hashed_password)
    mock_db.add.assert_called_once_with(user)
    mock_db.commit.assert_awaited_once()


@pytest.mark.asyncio
async def test_ensure_admin_is_idempotent(mock_db: AsyncMock, fake_admin_user: User) -> None:
    mock_db.execute.return_value = db_result(value=fake_admin_user)

    user = await ensure_admin(mock_db, fake_admin_user.email, "ignored", "Ignored")

    assert user is fake_admin_user
    mock_db.add.assert_not_called()
    mock_db.commit.assert_not_awaited()
