"""Tests for application configuration."""

import pytest
from pydantic import ValidationError

from app.core.config import Settings, get_settings

STORE_ENV = ("SUPABASE_URL", "VITE_SUPABASE_URL", "SUPABASE_SERVICE_ROLE_KEY")


@pytest.fixture
def clean_env(monkeypatch):
    """Remove store credentials inherited from the environment."""
    for name in STORE_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_settings_has_defaults(clean_env):
    """Settings should have sensible defaults."""
    settings = Settings(_env_file=None)

    assert settings.app_name == "ClaimCheck"
    assert settings.app_env == "development"
    assert settings.debug is False
    assert settings.log_level == "INFO"
    assert settings.log_format == "json"
    assert settings.api_port == 8123
    assert settings.supabase_url == ""
    assert settings.supabase_service_role_key == ""
    assert settings.seeder_request_timeout_seconds == 30.0
    assert settings.seeder_dataset_path is None
    assert settings.seeder_demo_marker_path == "metadata->demo_data"
    assert settings.seeder_allow_production is False


def test_settings_is_development_property():
    """is_development should return True for development env."""
    settings = Settings(app_env="development")
    assert settings.is_development is True
    assert settings.is_production is False


def test_settings_is_production_property():
    """is_production should return True for production env."""
    settings = Settings(app_env="production")
    assert settings.is_development is False
    assert settings.is_production is True


def test_get_settings_returns_singleton():
    """get_settings should return cached singleton."""
    settings1 = get_settings()
    settings2 = get_settings()

    assert settings1 is settings2


def test_settings_from_environment(monkeypatch):
    """Settings should load from environment variables."""
    monkeypatch.setenv("APP_NAME", "TestApp")
    monkeypatch.setenv("DEBUG", "true")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = Settings()

    assert settings.app_name == "TestApp"
    assert settings.debug is True
    assert settings.log_level == "DEBUG"


class TestStoreCredentials:
    """Tests for store credential loading."""

    def test_reads_supabase_url(self, clean_env):
        """SUPABASE_URL should populate supabase_url."""
        clean_env.setenv("SUPABASE_URL", "https://demo.supabase.co")
        clean_env.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")

        settings = Settings(_env_file=None)

        assert settings.supabase_url == "https://demo.supabase.co"
        assert settings.supabase_service_role_key == "service-key"
        assert settings.has_store_credentials is True

    def test_accepts_vite_prefixed_url(self, clean_env):
        """VITE_SUPABASE_URL should be accepted as a fallback name."""
        clean_env.setenv("VITE_SUPABASE_URL", "https://vite.supabase.co")

        settings = Settings(_env_file=None)

        assert settings.supabase_url == "https://vite.supabase.co"

    def test_strips_trailing_slash(self, clean_env):
        """Trailing slashes should be removed from the store URL."""
        clean_env.setenv("SUPABASE_URL", "https://demo.supabase.co/")

        settings = Settings(_env_file=None)

        assert settings.supabase_url == "https://demo.supabase.co"

    def test_missing_key_means_no_credentials(self, clean_env):
        """has_store_credentials should be False when the key is missing."""
        clean_env.setenv("SUPABASE_URL", "https://demo.supabase.co")

        settings = Settings(_env_file=None)

        assert settings.has_store_credentials is False

    def test_blank_key_means_no_credentials(self, clean_env):
        """A whitespace-only key should not count as a credential."""
        settings = Settings(
            _env_file=None,
            supabase_url="https://demo.supabase.co",
            supabase_service_role_key="   ",
        )

        assert settings.has_store_credentials is False


class TestSeederSettings:
    """Tests for seeder settings validation."""

    def test_rejects_non_positive_timeout(self):
        """A zero timeout should fail validation."""
        with pytest.raises(ValidationError, match="Request timeout must be positive"):
            Settings(seeder_request_timeout_seconds=0)

    def test_marker_path_from_environment(self, monkeypatch):
        """SEEDER_DEMO_MARKER_PATH should override the marker path."""
        monkeypatch.setenv("SEEDER_DEMO_MARKER_PATH", "is_demo")

        settings = Settings()

        assert settings.seeder_demo_marker_path == "is_demo"
