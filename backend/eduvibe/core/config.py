# backend/eduvibe/core/config.py
from dataclasses import dataclass
import logging
import os
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz

from .constants import SESSION_DURATION_MINUTES


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).parent.parent.parent / ".env"  # Goes up to backend/.env
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


@dataclass(frozen=True)
class MatchWeights:
    """Fixed weights of the rule-based mentor scorer."""

    subject: float = 10.0
    level: float = 5.0
    language: float = 3.0
    rating: float = 0.5

    def __post_init__(self) -> None:
        for name in ("subject", "level", "language", "rating"):
            if getattr(self, name) < 0:
                raise ValueError(f"Match weight '{name}' must not be negative")


class Settings(BaseSettings):
    environment: Literal["local", "test", "staging", "production"] = Field(
        default="local",
        description="Deployment environment name",
    )
    database_url: str = Field(
        default="sqlite:///./eduvibe.db",
        alias="DATABASE_URL",
        description="SQLAlchemy database URL",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")
    default_timezone: str = Field(
        default="Asia/Colombo",
        alias="DEFAULT_TIMEZONE",
        description="Timezone used for session wall-clock times and 'now'",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    slow_operation_threshold_seconds: float = Field(
        default=1.0,
        description="Service operations slower than this are logged as warnings",
    )
    is_testing: bool = Field(default=False, alias="is_testing")

    # Scoring weights; scores must stay non-negative
    match_subject_weight: float = Field(default=10.0, ge=0.0)
    match_level_bonus: float = Field(default=5.0, ge=0.0)
    match_language_weight: float = Field(default=3.0, ge=0.0)
    match_rating_weight: float = Field(default=0.5, ge=0.0)

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("default_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @property
    def session_duration_minutes(self) -> int:
        return SESSION_DURATION_MINUTES

    @property
    def match_weights(self) -> MatchWeights:
        return MatchWeights(
            subject=self.match_subject_weight,
            level=self.match_level_bonus,
            language=self.match_language_weight,
            rating=self.match_rating_weight,
        )


settings = Settings()
