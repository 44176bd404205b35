"""
Tests for configuration loading.
"""

import pytest

from wallet.config import (
    AuditSettings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestStorageSettings:
    """Tests for StorageSettings."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("WALLET_STORAGE_DUMP_DIR", raising=False)
        monkeypatch.delenv("WALLET_STORAGE_HISTORY_RECORDS_PER_FILE", raising=False)
        settings = StorageSettings()
        assert settings.dump_dir == "data"
        assert settings.history_records_per_file == 100
        assert settings.encoding == "utf-8"

    def test_environment_override(self, monkeypatch):
        monkeypatch.setenv("WALLET_STORAGE_DUMP_DIR", "/tmp/wallet")
        monkeypatch.setenv("WALLET_STORAGE_HISTORY_RECORDS_PER_FILE", "25")
        settings = get_settings().storage
        assert settings.dump_dir == "/tmp/wallet"
        assert settings.history_records_per_file == 25

    def test_records_per_file_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("WALLET_STORAGE_HISTORY_RECORDS_PER_FILE", "0")
        with pytest.raises(ValueError):
            StorageSettings()

    def test_empty_dump_dir_rejected(self):
        with pytest.raises(ValueError):
            StorageSettings(dump_dir="  ")


class TestAuditSettings:

    def test_disable_audit(self, monkeypatch):
        monkeypatch.setenv("WALLET_AUDIT_ENABLED", "false")
        assert AuditSettings().enabled is False


class TestValidateAllSettings:

    def test_all_valid(self, monkeypatch):
        monkeypatch.delenv("WALLET_STORAGE_HISTORY_RECORDS_PER_FILE", raising=False)
        results = validate_all_settings()
        assert results["storage"] is True
        assert results["audit"] is True
        assert results["app"] is True

    def test_invalid_group_reported(self, monkeypatch):
        monkeypatch.setenv("WALLET_STORAGE_HISTORY_RECORDS_PER_FILE", "-3")
        results = validate_all_settings()
        assert results["storage"] is False
        assert "storage_error" in results

    def test_settings_cached(self):
        assert get_settings() is get_settings()
