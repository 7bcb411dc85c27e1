import pytest
from pydantic import ValidationError

from catalog_manager.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.api_prefix == "/api/v1alpha1"
    assert settings.bind_address == "0.0.0.0:8080"
    assert settings.default_page_size == 50
    assert settings.max_page_size == 100
    assert settings.allowed_service_types == ["vm", "container", "cluster", "db"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CATALOG_MANAGER_DATABASE_URL", "sqlite+aiosqlite:///catalog.db")
    monkeypatch.setenv("CATALOG_MANAGER_MAX_PAGE_SIZE", "25")
    monkeypatch.setenv("CATALOG_MANAGER_SEED_ON_STARTUP", "false")
    monkeypatch.setenv("CATALOG_MANAGER_ALLOWED_SERVICE_TYPES", '["vm"]')

    settings = Settings(_env_file=None)

    assert settings.database_url == "sqlite+aiosqlite:///catalog.db"
    assert settings.max_page_size == 25
    assert settings.seed_on_startup is False
    assert settings.allowed_service_types == ["vm"]


def test_log_level_is_normalised(monkeypatch):
    monkeypatch.setenv("CATALOG_MANAGER_LOG_LEVEL", "debug")

    assert Settings(_env_file=None).log_level == "DEBUG"


def test_unknown_log_level_is_rejected():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, log_level="BOGUS")
