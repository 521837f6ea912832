"""
Configuration settings for the quizcheck engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="QUIZCHECK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Question Text
    # ========================================
    question_min_length: int = Field(
        default=10,
        ge=0,
        description="Prompt length below which a warning is raised",
    )
    question_max_length: int = Field(
        default=500,
        ge=1,
        description="Prompt length above which a warning is raised",
    )

    # ========================================
    # Points
    # ========================================
    min_points: float = Field(
        default=1,
        ge=0,
        description="Smallest point value a question may carry",
    )
    max_points: float = Field(
        default=10,
        ge=0,
        description="Largest point value a question may carry",
    )
    default_points: float = Field(
        default=1,
        ge=0,
        description="Points assumed for a question without an explicit value",
    )

    # ========================================
    # Quiz-Level Checks
    # ========================================
    max_questions: int = Field(
        default=50,
        ge=1,
        description="Question count above which a quiz is flagged as long",
    )
    max_total_points: float = Field(
        default=100,
        ge=0,
        description="Total points above which a quiz is flagged",
    )
    type_variety_min_questions: int = Field(
        default=5,
        ge=0,
        description="Single-type quizzes longer than this get a variety warning",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging verbosity level",
    )

    @model_validator(mode="after")
    def check_ranges(self) -> "Settings":
        if self.question_min_length > self.question_max_length:
            raise ValueError("question_min_length must not exceed question_max_length")
        if self.min_points > self.max_points:
            raise ValueError("min_points must not exceed max_points")
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
