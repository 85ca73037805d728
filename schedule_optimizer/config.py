import logging
from functools import lru_cache

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


class Settings(BaseSettings):
    """Schedule optimizer settings"""

    # Suggestion defaults
    default_suggestion_count: int = Field(
        default=4, gt=0, description="Suggestions returned when a request names no count"
    )
    default_horizon_days: int = Field(
        default=7, gt=0, le=366, description="Days searched when a request names no range"
    )

    # Preference defaults for requests that omit them
    default_buffer_minutes: int = Field(
        default=30, ge=0, description="Minimum gap wanted around fixed events"
    )
    default_working_hours_start: int = Field(default=9, ge=0, le=23)
    default_working_hours_end: int = Field(default=17, ge=0, le=23)

    # Logging
    log_level: str = Field(default="INFO", description="Level for configure_logging")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level name"""
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @model_validator(mode="after")
    def validate_working_hours(self) -> "Settings":
        if self.default_working_hours_start > self.default_working_hours_end:
            raise ValueError("Working hours must start before they end")
        return self

    model_config = SettingsConfigDict(
        env_prefix="SCHEDULE_OPTIMIZER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Set the package logger level from settings; handlers stay with the host."""
    if settings is None:
        settings = get_settings()
    logging.getLogger("schedule_optimizer").setLevel(settings.log_level)
