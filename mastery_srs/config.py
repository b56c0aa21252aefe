"""Scheduler configuration management."""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Scheduling thresholds loaded from environment variables."""

    SRS_PROMOTION_STREAK: int = Field(
        3, ge=1, description="Persisted correct answers in a row required to promote"
    )
    SRS_DEMOTION_STREAK: int = Field(
        2, ge=1, description="Session-scoped wrong answers in a row required to demote"
    )
    SRS_MASTERY_REACTIVATION_DAYS: int = Field(
        90, ge=1, description="Days after which a mastered item becomes due again"
    )
    SRS_SESSION_MEMORY_TTL_HOURS: float = Field(
        24.0, gt=0, description="Idle time after which session memory entries expire"
    )
    SRS_SESSION_SWEEP_INTERVAL_SECONDS: float = Field(
        600.0, gt=0, description="Interval of the background session memory sweep"
    )

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parent.parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached scheduler settings instance."""

    return Settings()
