"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from calorie_tracker.domain.ledger import WeekStart

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    api_token: str
    health_api_base_url: str
    health_api_token: str
    default_calorie_budget: int = 2000
    force_refresh_days: int = 2
    default_sync_days: int = 30
    weight_lookback_days: int = 90
    weight_change_days: int = 30
    sync_retry_attempts: int = 1
    sync_retry_delay_seconds: float = 0.3
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_week_start(raw: str | None) -> WeekStart:
    """Parse the stored week start preference, defaulting to Monday."""
    if raw is None:
        return WeekStart.MONDAY
    cleaned = raw.strip().lower()
    if cleaned == WeekStart.SUNDAY.value:
        return WeekStart.SUNDAY
    return WeekStart.MONDAY
