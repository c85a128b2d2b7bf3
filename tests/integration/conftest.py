# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for API integration tests.

The full application runs against a temporary SQLite database; external
services (identity provider, translation service, Stripe) are replaced
through dependency overrides.
"""

import itertools
from collections.abc import AsyncGenerator, Awaitable, Callable
from typing import Any, NamedTuple
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi import FastAPI
from jose import jwt

from academy.api.app import create_app
from academy.api.dependencies import (
    get_identity_client,
    get_stripe_checkout,
    get_translation_client,
)
from academy.api.middleware.rate_limit import limiter
from academy.core.config import clear_settings_cache
from academy.infrastructure.database.connection import db_connector
from academy.infrastructure.database.models import PRIVILEGE_ADMIN, PRIVILEGE_STUDENT, User
from academy.infrastructure.identity import IdentityClient
from academy.infrastructure.payments import StripeCheckout
from academy.infrastructure.translations import TranslationServiceClient

JWT_KEY = "integration-test-signing-key"


class Account(NamedTuple):
    """A stored user and the headers that authenticate as them."""

    id: str
    identity_id: str
    headers: dict[str, str]


def bearer(identity_id: str) -> dict[str, str]:
    """Authorization headers for a session token issued to an identity."""
    token = jwt.encode({"sub": identity_id}, JWT_KEY, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def app(monkeypatch: pytest.MonkeyPatch) -> FastAPI:
    """Application with session verification enabled."""
    monkeypatch.setenv("IDENTITY_SECRET_KEY", "sk_test")
    monkeypatch.setenv("IDENTITY_JWT_KEY", JWT_KEY)
    monkeypatch.setenv("IDENTITY_ALGORITHM", "HS256")
    clear_settings_cache()
    return create_app()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """HTTP client bound to the application, with rate limits off."""
    limiter.enabled = False
    transport = httpx.ASGITransport(app=app)
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        limiter.enabled = True
        await db_connector.close()


@pytest.fixture
def seed_user() -> Callable[..., Awaitable[Account]]:
    """Factory that stores a user directly; keyword arguments override the defaults."""
    counter = itertools.count(1)

    async def _seed(**overrides: Any) -> Account:
        n = next(counter)
        values: dict[str, Any] = {
            "identity_id": f"idp_api_{n}",
            "first_name": f"First{n}",
            "last_name": f"Last{n}",
            "email": f"api{n}@example.com",
            "privilege": PRIVILEGE_STUDENT,
        }
        values.update(overrides)
        async with db_connector.session() as session:
            user = User(**values)
            session.add(user)
            await session.flush()
            user_id = user.id
        return Account(user_id, values["identity_id"], bearer(values["identity_id"]))

    return _seed


@pytest.fixture
def identity(app: FastAPI) -> AsyncMock:
    """Identity provider client stand-in."""
    client = AsyncMock(spec=IdentityClient)
    client.is_configured = True
    app.dependency_overrides[get_identity_client] = lambda: client
    return client


@pytest.fixture
def translations(app: FastAPI) -> AsyncMock:
    """Translation service client stand-in."""
    client = AsyncMock(spec=TranslationServiceClient)
    client.is_configured = True
    app.dependency_overrides[get_translation_client] = lambda: client
    return client


@pytest.fixture
def checkout(app: FastAPI) -> AsyncMock:
    """Stripe checkout stand-in."""
    client = AsyncMock(spec=StripeCheckout)
    client.is_configured = True
    client.create_donation_session.return_value = "https://checkout.stripe.com/c/pay/cs_test_api"
    app.dependency_overrides[get_stripe_checkout] = lambda: client
    return client


@pytest.fixture
def auth_headers() -> Callable[[str], dict[str, str]]:
    """Headers for an arbitrary identity, linked to a local user or not."""
    return bearer


@pytest.fixture
def admin(seed_user: Callable[..., Awaitable[Account]]) -> Callable[[], Awaitable[Account]]:
    """Factory for an admin account."""

    async def _admin() -> Account:
        return await seed_user(privilege=PRIVILEGE_ADMIN, first_name="Dillar", last_name="Admin")

    return _admin


@pytest.fixture
def class_body() -> Callable[..., dict[str, Any]]:
    """Request body builder for creating a class."""

    def _body(**overrides: Any) -> dict[str, Any]:
        values: dict[str, Any] = {
            "level": 1,
            "ageGroup": "adult",
            "instructor": "Aynur",
            "schedule": [{"day": "Monday", "startTime": "18:00", "endTime": "19:00"}],
            "link": "https://meet.example.com/level-1",
        }
        values.update(overrides)
        return values

    return _body
