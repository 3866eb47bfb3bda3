"""
Tests for configuration loading.
"""

import os

import pytest

from pocketbook.config import AppSettings, StorageSettings, get_settings, validate_all_settings


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_defaults(self, monkeypatch):
        """Test the default database path."""
        monkeypatch.delenv("POCKETBOOK_DB_PATH", raising=False)
        monkeypatch.delenv("POCKETBOOK_DB_ECHO", raising=False)
        settings = StorageSettings()
        assert settings.path.endswith("pocketbook.db")
        assert settings.echo is False

    def test_env_prefix(self, monkeypatch, tmp_path):
        """Test that POCKETBOOK_DB_* variables are picked up."""
        monkeypatch.setenv("POCKETBOOK_DB_PATH", str(tmp_path / "other.db"))
        monkeypatch.setenv("POCKETBOOK_DB_ECHO", "true")

        settings = get_settings().storage
        assert settings.path == str(tmp_path / "other.db")
        assert settings.echo is True

    def test_home_directory_expanded(self):
        """Test that '~' in the path is expanded."""
        settings = StorageSettings(path="~/pocketbook.db")
        assert settings.path == os.path.expanduser("~/pocketbook.db")

    def test_memory_path_untouched(self):
        """Test that ':memory:' is kept as is."""
        assert StorageSettings(path=":memory:").path == ":memory:"


class TestAppSettings:
    """Tests for AppSettings."""

    def test_log_level_normalized(self):
        """Test that the log level is upper-cased."""
        assert AppSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        """Test that an unknown log level is rejected."""
        with pytest.raises(ValueError):
            AppSettings(log_level="loud")

    def test_behaviour_flags_from_env(self, monkeypatch):
        """Test that behaviour flags are read from the environment."""
        monkeypatch.setenv("CARRY_OVER_BALANCE", "false")
        monkeypatch.setenv("SEED_DEFAULT_CATEGORIES", "false")

        settings = get_settings().app
        assert settings.carry_over_balance is False
        assert settings.seed_default_categories is False

    def test_debug_mode_forces_debug_level(self, monkeypatch):
        """Test that DEBUG_MODE overrides the configured log level."""
        monkeypatch.setenv("DEBUG_MODE", "true")
        monkeypatch.setenv("LOG_LEVEL", "warning")

        settings = get_settings().app
        assert settings.log_level == "WARNING"
        assert settings.effective_log_level == "DEBUG"

    def test_log_level_used_without_debug_mode(self):
        """Test that log_level applies when debug mode is off."""
        settings = AppSettings(debug_mode=False, log_level="error")
        assert settings.effective_log_level == "ERROR"


class TestValidateAllSettings:
    """Tests for validate_all_settings()."""

    def test_all_valid(self, monkeypatch):
        """Test that default settings validate."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["app"] is True

    def test_invalid_section_reported(self, monkeypatch):
        """Test that a broken section is reported, not raised."""
        monkeypatch.setenv("LOG_LEVEL", "loud")
        results = validate_all_settings()
        assert results["app"] is False
        assert "app_error" in results
