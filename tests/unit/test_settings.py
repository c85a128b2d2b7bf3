# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for application settings."""

import pytest

from academy.core.config.settings import (
    CORSSettings,
    DatabaseSettings,
    IdentitySettings,
    RateLimitSettings,
    Settings,
    SMTPSettings,
    TranslationServiceSettings,
    clear_settings_cache,
    get_settings,
    is_unset,
)


class TestIsUnset:
    """Tests for the placeholder check."""

    @pytest.mark.parametrize("value", [None, "", "   ", "placeholder", " PlaceHolder "])
    def test_unset_values(self, value) -> None:
        assert is_unset(value)

    def test_real_value(self) -> None:
        assert not is_unset("sk_live_123")


class TestDatabaseSettings:
    """Tests for DatabaseSettings."""

    def test_url_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test DATABASE_URL is picked up."""
        monkeypatch.setenv("DATABASE_URL", "postgresql+asyncpg://u:p@db:5432/academy")

        assert DatabaseSettings().url == "postgresql+asyncpg://u:p@db:5432/academy"

    def test_defaults(self) -> None:
        settings = DatabaseSettings()

        assert settings.pool_size == 10
        assert settings.create_schema is True


class TestIdentitySettings:
    """Tests for IdentitySettings."""

    def test_not_configured_by_default(self) -> None:
        assert not IdentitySettings().is_configured

    def test_configured_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test both keys are required."""
        monkeypatch.setenv("IDENTITY_SECRET_KEY", "sk_test_1")
        assert not IdentitySettings().is_configured

        monkeypatch.setenv("IDENTITY_JWT_KEY", "-----BEGIN PUBLIC KEY-----")
        settings = IdentitySettings()

        assert settings.is_configured
        assert settings.algorithm == "RS256"

    def test_placeholder_counts_as_missing(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("IDENTITY_SECRET_KEY", "placeholder")
        monkeypatch.setenv("IDENTITY_JWT_KEY", "key")

        assert not IdentitySettings().is_configured


class TestCORSSettings:
    """Tests for CORSSettings."""

    def test_origins_list(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://a.example.com, https://b.example.com,")

        assert CORSSettings().origins_list == ["https://a.example.com", "https://b.example.com"]

    def test_empty_allows_any_origin(self) -> None:
        assert CORSSettings(origins="").origins_list == ["*"]


class TestSMTPSettings:
    """Tests for SMTPSettings."""

    def test_requires_all_credentials(self) -> None:
        settings = SMTPSettings(host="smtp.example.com", username="u", from_email="a@example.com")

        assert not settings.is_configured

    def test_configured(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name, value in {
            "SMTP_HOST": "smtp.example.com",
            "SMTP_USER": "mailer",
            "SMTP_PASS": "secret",
            "SMTP_FROM": "noreply@example.com",
        }.items():
            monkeypatch.setenv(name, value)

        settings = SMTPSettings()

        assert settings.is_configured
        assert settings.port == 587
        assert not settings.use_implicit_tls

    def test_port_465_uses_implicit_tls(self) -> None:
        assert SMTPSettings(port=465).use_implicit_tls


class TestTranslationServiceSettings:
    """Tests for TranslationServiceSettings."""

    def test_needs_key_and_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("I18NEXUS_API_KEY", "key")
        assert not TranslationServiceSettings().is_configured

        monkeypatch.setenv("I18NEXUS_PAT", "token")
        settings = TranslationServiceSettings()

        assert settings.is_configured
        assert settings.namespace == "levels"


class TestRateLimitSettings:
    """Tests for RateLimitSettings."""

    def test_defaults(self) -> None:
        settings = RateLimitSettings()

        assert settings.default == "100/15minutes"
        assert settings.burst == "20/15minutes"


class TestSettings:
    """Tests for the aggregate Settings."""

    def test_test_environment(self) -> None:
        settings = Settings()

        assert settings.environment == "test"
        assert not settings.is_production

    def test_production_requires_identity(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test production refuses to start without token verification."""
        monkeypatch.setenv("ENVIRONMENT", "production")

        with pytest.raises(ValueError, match="Identity provider must be configured"):
            Settings()

    def test_production_with_identity(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("IDENTITY_SECRET_KEY", "sk_live_1")
        monkeypatch.setenv("IDENTITY_JWT_KEY", "pem")

        assert Settings().is_production


class TestGetSettings:
    """Tests for the cached accessor."""

    def test_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_clear_cache_reloads(self, monkeypatch: pytest.MonkeyPatch) -> None:
        first = get_settings()
        monkeypatch.setenv("ALLOWED_ORIGINS", "https://new.example.com")

        clear_settings_cache()
        second = get_settings()

        assert second is not first
        assert second.cors.origins_list == ["https://new.example.com"]
