"""
Configuration management for TalentMatch.

Uses Pydantic Settings for type-safe configuration with environment variable support.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Base paths
ROOT_DIR = Path(__file__).parent.parent.parent


class DatabaseSettings(BaseSettings):
    """MongoDB database configuration."""

    model_config = SettingsConfigDict(env_prefix="DB_")

    host: str = "localhost"
    port: int = 27017
    name: str = "talentmatch"
    username: str | None = None
    password: str | None = None
    applications_collection: str = "applications"


class ScoringSettings(BaseSettings):
    """Match scorer configuration."""

    model_config = SettingsConfigDict(env_prefix="SCORING_")

    default_profile: str = "employer"
    top_candidate_score_weight: float = Field(default=0.4, ge=0, le=1)
    top_candidate_skills_weight: float = Field(default=0.6, ge=0, le=1)

    @field_validator("default_profile")
    @classmethod
    def validate_profile(cls, v: str) -> str:
        """Profile names are matched case-insensitively."""
        return v.strip().lower()


class StatsSettings(BaseSettings):
    """Statistics aggregation windows."""

    model_config = SettingsConfigDict(env_prefix="STATS_")

    daily_window_days: int = Field(default=30, ge=1)
    monthly_window_months: int = Field(default=12, ge=1)
    top_candidates_limit: int = Field(default=10, ge=1)


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: str = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}"
    file_path: Path = ROOT_DIR / "logs" / "talentmatch.log"
    rotation: str = "10 MB"
    retention: str = "30 days"
    console_output: bool = True


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application metadata
    name: str = "TalentMatch"
    version: str = "0.1.0"
    description: str = "Candidate-job matching and application lifecycle engine"
    debug: bool = False

    # Environment
    environment: Literal["development", "production", "testing"] = "development"

    # Nested settings
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    scoring: ScoringSettings = Field(default_factory=ScoringSettings)
    stats: StatsSettings = Field(default_factory=StatsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


# Global settings instance (singleton pattern)
_settings: AppSettings | None = None


def get_settings() -> AppSettings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings


def reload_settings() -> AppSettings:
    """Force reload settings from environment."""
    global _settings
    _settings = AppSettings()
    return _settings
