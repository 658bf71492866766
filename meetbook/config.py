"""
Configuration management using Pydantic Settings.

The weekly schedule, timezone and meeting length are compiled in; everything
that differs between deployments comes from the environment (or ``.env``).
"""

from datetime import time

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .domain.models import DaySchedule, WeeklySchedule

TIMEZONE = "Asia/Kolkata"
MEETING_DURATION_MINUTES = 15
MAX_UPCOMING_SLOTS = 4
MAX_DAY_SLOTS = 4
MAX_LOOKAHEAD_DAYS = 7

WEEKLY_HOURS = {
    "Monday": DaySchedule(start=time(9, 0), end=time(20, 0)),
    "Tuesday": DaySchedule(start=time(9, 0), end=time(20, 0)),
    "Wednesday": DaySchedule(start=time(9, 0), end=time(20, 0)),
    "Thursday": DaySchedule(start=time(9, 0), end=time(20, 0)),
    "Friday": DaySchedule(start=time(9, 0), end=time(17, 0)),
    "Saturday": DaySchedule(start=time(9, 0), end=time(17, 0)),
}

WEEKLY_SCHEDULE = WeeklySchedule(days=WEEKLY_HOURS, timezone=TIMEZONE)


class Settings(BaseSettings):
    """Deployment settings read from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    port: int = 3000
    api_key: str
    calendar_id: str = "primary"
    google_client_email: str
    google_private_key: str
    request_timeout_seconds: float = 10.0
    api_prefix: str = "/api"
    log_level: str = "INFO"
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    @field_validator("api_key", "google_client_email", "google_private_key")
    @classmethod
    def validate_not_blank(cls, value: str) -> str:
        """Reject empty credentials so startup fails fast."""
        if not value or not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("google_private_key")
    @classmethod
    def unescape_private_key(cls, value: str) -> str:
        """Turn literal ``\\n`` sequences from .env files into real newlines."""
        return value.replace("\\n", "\n")

    @field_validator("request_timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Ensure the backend timeout is positive."""
        if value <= 0:
            raise ValueError("request_timeout_seconds must be greater than zero")
        return value

    @field_validator("api_prefix")
    @classmethod
    def validate_prefix(cls, value: str) -> str:
        """Normalise the prefix to "" or "/something" without a trailing slash."""
        value = value.strip().rstrip("/")
        if value and not value.startswith("/"):
            value = f"/{value}"
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept standard logging level names in any case."""
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {value}")
        return level
