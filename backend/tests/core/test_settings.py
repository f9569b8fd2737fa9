"""Settings tests — environment-driven configuration and its validation."""

import pytest
from pydantic import ValidationError

from ledgerfed.config import Settings


def test_postgres_urls_converted_to_asyncpg():
    settings = Settings(
        hot_database_url="postgresql://u:p@hot/db",
        cold_database_url="postgresql://u:p@cold/db",
    )
    assert settings.hot_database_url == "postgresql+asyncpg://u:p@hot/db"
    assert settings.cold_database_url == "postgresql+asyncpg://u:p@cold/db"


def test_routing_switches_default_off():
    settings = Settings()
    assert settings.retention_years == 2
    assert not settings.strict_date_bounds
    assert not settings.defensive_open_ranges


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("RETENTION_YEARS", "3")
    monkeypatch.setenv("DEFENSIVE_OPEN_RANGES", "true")
    settings = Settings()
    assert settings.retention_years == 3
    assert settings.defensive_open_ranges


@pytest.mark.parametrize("overrides", [
    {"retention_years": -1},
    {"default_page_size": 0},
    {"default_page_size": 500, "max_page_size": 200},
    {"tier_timeout_seconds": 0},
])
def test_invalid_federation_limits_rejected(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)
