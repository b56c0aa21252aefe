import pytest
from pydantic import ValidationError

from mastery_srs.config import Settings, get_settings


def test_default_thresholds():
    settings = Settings()

    assert settings.SRS_PROMOTION_STREAK == 3
    assert settings.SRS_DEMOTION_STREAK == 2
    assert settings.SRS_MASTERY_REACTIVATION_DAYS == 90
    assert settings.SRS_SESSION_MEMORY_TTL_HOURS == 24


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SRS_MASTERY_REACTIVATION_DAYS", "30")
    monkeypatch.setenv("SRS_SESSION_MEMORY_TTL_HOURS", "1.5")

    settings = Settings()

    assert settings.SRS_MASTERY_REACTIVATION_DAYS == 30
    assert settings.SRS_SESSION_MEMORY_TTL_HOURS == 1.5


@pytest.mark.parametrize(
    "field", ["SRS_PROMOTION_STREAK", "SRS_DEMOTION_STREAK", "SRS_SESSION_SWEEP_INTERVAL_SECONDS"]
)
def test_non_positive_values_are_rejected(monkeypatch, field):
    monkeypatch.setenv(field, "0")

    with pytest.raises(ValidationError):
        Settings()


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
