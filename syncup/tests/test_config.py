"""Tests for centralized configuration module."""

import os
from unittest.mock import patch

import pytest


class TestPostgresSettings:
    """Test PostgreSQL configuration settings."""

    def test_postgres_default_values(self):
        from syncup.config import PostgresSettings

        with patch.dict(os.environ, {}, clear=True):
            settings = PostgresSettings()
            assert settings.host == "postgres"
            assert settings.port == 5432
            assert settings.database == "devdb"
            assert settings.pool_min_size == 2
            assert settings.pool_max_size == 10

    def test_postgres_dsn_generation(self):
        from syncup.config import PostgresSettings

        env = {
            "POSTGRES_HOST": "dbhost",
            "POSTGRES_PORT": "5433",
            "POSTGRES_USER": "myuser",
            "POSTGRES_PASSWORD": "mypass",
            "POSTGRES_DB": "mydb",
        }
        with patch.dict(os.environ, env, clear=True):
            dsn = PostgresSettings().get_dsn()
            assert "host=dbhost" in dsn
            assert "port=5433" in dsn
            assert "user=myuser" in dsn
            assert "password=mypass" in dsn
            assert "dbname=mydb" in dsn


class TestSchedulingSettings:
    """Test scheduling configuration."""

    def test_defaults(self):
        from syncup.config import SchedulingSettings

        with patch.dict(os.environ, {}, clear=True):
            settings = SchedulingSettings()
            assert settings.canonical_timezone == "America/New_York"
            assert settings.app_name == "SyncUp"
            assert settings.uid_domain == "syncup.app"

    def test_from_environment(self):
        from syncup.config import SchedulingSettings

        env = {"SYNCUP_CANONICAL_TIMEZONE": "Europe/Berlin", "SYNCUP_APP_NAME": "Meetly"}
        with patch.dict(os.environ, env, clear=True):
            settings = SchedulingSettings()
            assert settings.canonical_timezone == "Europe/Berlin"
            assert settings.app_name == "Meetly"

    def test_unknown_timezone_rejected(self):
        from syncup.config import SchedulingSettings

        with patch.dict(os.environ, {"SYNCUP_CANONICAL_TIMEZONE": "Nowhere/Special"}, clear=True):
            with pytest.raises(ValueError):
                SchedulingSettings()


class TestFlags:
    """Test boolean flag parsing."""

    @pytest.mark.parametrize("value, expected", [("0", False), ("false", False), ("1", True), ("yes", True)])
    def test_enable_db(self, value, expected):
        from syncup.config import FeatureSettings

        with patch.dict(os.environ, {"ENABLE_DB": value}, clear=True):
            assert FeatureSettings().database is expected

    def test_request_debug_default(self):
        from syncup.config import DebugSettings

        with patch.dict(os.environ, {}, clear=True):
            assert DebugSettings().request is False


class TestCorsSettings:
    def test_origins_parsing(self):
        from syncup.config import CorsSettings

        with patch.dict(os.environ, {"CORS_ORIGINS": "http://a.test, http://b.test"}, clear=True):
            settings = CorsSettings()
            assert settings.origins == ["http://a.test", "http://b.test"]
            assert settings.allow_credentials is True

    def test_wildcard_disables_credentials(self):
        from syncup.config import CorsSettings

        with patch.dict(os.environ, {"CORS_ORIGINS": "*"}, clear=True):
            assert CorsSettings().allow_credentials is False


class TestSettingsCache:
    def test_get_settings_is_cached(self):
        from syncup.config import clear_settings_cache, get_settings

        clear_settings_cache()
        assert get_settings() is get_settings()
        clear_settings_cache()
