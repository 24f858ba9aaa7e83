"""
Runtime settings for API Tutor.

Uses Pydantic Settings for environment variable management with .env file
support. Every field can be overridden with an API_TUTOR_-prefixed variable,
e.g. API_TUTOR_LOG_LEVEL=DEBUG.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from exercises.config import ExerciseEngineConfig

PROJECT_ROOT = Path(__file__).parent


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="API_TUTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Storage
    # ========================================
    data_dir: Path = Field(
        default=PROJECT_ROOT / "data",
        description="Directory holding exercises.json and lessons.json",
    )
    db_path: Path | None = Field(
        default=None,
        description="SQLite database file (defaults to <data_dir>/tutor.db)",
    )

    # ========================================
    # Learner / engine
    # ========================================
    learner_id: str = Field(
        default="current-user",
        description="Identifier stored on every exercise attempt",
    )
    allow_resubmission: bool = Field(
        default=True,
        description="Allow re-opening completed exercises (new score overwrites)",
    )

    # ========================================
    # Playground
    # ========================================
    playground_timeout: float = Field(
        default=10.0,
        gt=0,
        description="HTTP timeout in seconds for playground requests",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum loguru level written to stderr",
    )

    @property
    def database_path(self) -> Path:
        return self.db_path or self.data_dir / "tutor.db"

    @property
    def exercises_path(self) -> Path:
        return self.data_dir / "exercises.json"

    @property
    def lessons_path(self) -> Path:
        return self.data_dir / "lessons.json"

    def engine_config(self) -> ExerciseEngineConfig:
        return ExerciseEngineConfig(allow_resubmission=self.allow_resubmission)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
