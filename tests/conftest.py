# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- A temporary SQLite database per test
- Factories for users and classes
"""

import itertools
from collections.abc import AsyncGenerator, Awaitable, Callable, Generator
from typing import Any

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from academy.core.class_level import ClassLevel
from academy.core.config import clear_settings_cache
from academy.infrastructure.database.models import (
    PRIVILEGE_STUDENT,
    Base,
    Class,
    ClassRosterEntry,
    User,
    UserEnrolledClass,
)


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def test_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Generator[None, None, None]:
    """Isolate settings from the developer's environment."""
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'app.db'}")
    for name in (
        "IDENTITY_SECRET_KEY",
        "IDENTITY_JWT_KEY",
        "SMTP_HOST",
        "SMTP_USER",
        "SMTP_PASS",
        "SMTP_FROM",
        "STRIPE_SECRET_KEY",
        "BASE_URL",
        "I18NEXUS_API_KEY",
        "I18NEXUS_PAT",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh SQLite database with the full schema."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a session on the temporary database."""
    sessionmaker = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    async with sessionmaker() as session:
        yield session


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def make_user(db: AsyncSession) -> Callable[..., Awaitable[User]]:
    """Factory that stores a user; keyword arguments override the defaults."""
    counter = itertools.count(1)

    async def _make(**overrides: Any) -> User:
        n = next(counter)
        values: dict[str, Any] = {
            "identity_id": f"idp_user_{n}",
            "first_name": f"First{n}",
            "last_name": f"Last{n}",
            "email": f"user{n}@example.com",
            "privilege": PRIVILEGE_STUDENT,
        }
        values.update(overrides)
        user = User(**values)
        db.add(user)
        await db.commit()
        return user

    return _make


@pytest.fixture
def make_class(db: AsyncSession) -> Callable[..., Awaitable[Class]]:
    """Factory that stores a class; keyword arguments override the defaults."""
    counter = itertools.count(1)

    async def _make(**overrides: Any) -> Class:
        n = next(counter)
        values: dict[str, Any] = {
            "level": ClassLevel.numeric(1),
            "age_group": "adult",
            "instructor": f"Instructor {n}",
            "schedule": [
                {"day": "Monday", "start_time": "18:00", "end_time": "19:00", "timezone": "Etc/UTC"}
            ],
            "link": "https://meet.example.com/class",
            "is_enrollment_open": True,
        }
        values.update(overrides)
        class_ = Class(**values)
        db.add(class_)
        await db.commit()
        return class_

    return _make


@pytest.fixture
def assert_consistent(db: AsyncSession) -> Callable[[], Awaitable[None]]:
    """Check that every enrolled-class entry has its roster mirror and vice versa."""

    async def _check() -> None:
        user_side = {
            tuple(row)
            for row in await db.execute(select(UserEnrolledClass.user_id, UserEnrolledClass.class_id))
        }
        class_side = {
            tuple(row)
            for row in await db.execute(select(ClassRosterEntry.user_id, ClassRosterEntry.class_id))
        }
        assert user_side == class_side

    return _check
