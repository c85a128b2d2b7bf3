# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the identity provider and translation service HTTP clients."""

import json

import httpx
import pytest

from academy.core.config import IdentitySettings, TranslationServiceSettings
from academy.infrastructure.identity import (
    IdentityClient,
    IdentityProviderError,
    IdentityProviderNotConfiguredError,
)
from academy.infrastructure.translations import (
    TranslationServiceClient,
    TranslationServiceError,
    TranslationServiceNotConfiguredError,
)


class Recorder:
    """Mock transport handler that records requests and replays canned responses."""

    def __init__(self, responses: dict[tuple[str, str], httpx.Response]) -> None:
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responses.get((request.method, request.url.path), httpx.Response(200, json={}))

    @property
    def calls(self) -> list[tuple[str, str]]:
        return [(r.method, r.url.path) for r in self.requests]


def _identity(recorder: Recorder, **overrides) -> IdentityClient:
    values = {"secret_key": "sk_test", "api_url": "https://idp.example.com/v1"}
    values.update(overrides)
    return IdentityClient(IdentitySettings(**values), transport=httpx.MockTransport(recorder))


def _translations(recorder: Recorder, **overrides) -> TranslationServiceClient:
    values = {
        "api_key": "key",
        "personal_access_token": "pat",
        "api_url": "https://i18n.example.com/project_resources",
    }
    values.update(overrides)
    return TranslationServiceClient(
        TranslationServiceSettings(**values), transport=httpx.MockTransport(recorder)
    )


class TestIdentityClient:
    """Tests for IdentityClient."""

    async def test_replace_primary_email(self):
        recorder = Recorder(
            {
                ("GET", "/v1/users/user_1"): httpx.Response(
                    200,
                    json={
                        "email_addresses": [
                            {"id": "idn_new", "email_address": "new@example.com"},
                            {"id": "idn_old", "email_address": "old@example.com"},
                        ]
                    },
                ),
            }
        )

        await _identity(recorder).replace_primary_email("user_1", "old@example.com", "new@example.com")

        assert recorder.calls == [
            ("POST", "/v1/email_addresses"),
            ("GET", "/v1/users/user_1"),
            ("DELETE", "/v1/email_addresses/idn_old"),
        ]
        body = json.loads(recorder.requests[0].content)
        assert body == {
            "user_id": "user_1",
            "email_address": "new@example.com",
            "verified": True,
            "primary": True,
        }
        assert recorder.requests[0].headers["Authorization"] == "Bearer sk_test"

    async def test_error_status(self):
        recorder = Recorder({("DELETE", "/v1/users/user_1"): httpx.Response(404, json={})})

        with pytest.raises(IdentityProviderError) as exc_info:
            await _identity(recorder).delete_user("user_1")

        assert exc_info.value.status_code == 404

    async def test_not_configured(self):
        recorder = Recorder({})

        with pytest.raises(IdentityProviderNotConfiguredError):
            await _identity(recorder, secret_key=None).delete_user("user_1")

        assert recorder.requests == []


class TestTranslationServiceClient:
    """Tests for TranslationServiceClient."""

    async def test_create_base_string(self):
        recorder = Recorder({})

        await _translations(recorder).create_base_string("level_name_1", "Beginner", "levels")

        request = recorder.requests[0]
        assert (request.method, request.url.path) == (
            "POST",
            "/project_resources/base_strings.json",
        )
        assert request.url.params["api_key"] == "key"
        assert request.headers["Authorization"] == "Bearer pat"
        assert json.loads(request.content) == {
            "key": "level_name_1",
            "value": "Beginner",
            "namespace": "levels",
        }

    async def test_export(self):
        exported = {"en": {"levels": {"a": "A"}}}
        recorder = Recorder(
            {("GET", "/project_resources/translations.json"): httpx.Response(200, json=exported)}
        )

        assert await _translations(recorder).export_translations() == exported
        assert "Authorization" not in recorder.requests[0].headers

    async def test_error_status(self):
        recorder = Recorder(
            {("DELETE", "/project_resources/base_strings.json"): httpx.Response(500, text="boom")}
        )

        with pytest.raises(TranslationServiceError) as exc_info:
            await _translations(recorder).delete_base_string("k", "levels")

        assert exc_info.value.status_code == 500

    async def test_not_configured(self):
        recorder = Recorder({})
        client = _translations(recorder, personal_access_token=None)

        assert not client.is_configured
        with pytest.raises(TranslationServiceNotConfiguredError):
            await client.export_translations()
