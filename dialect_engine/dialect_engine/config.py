"""Dialect engine configuration loaded from environment variables."""

from __future__ import annotations

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dialect_engine.migration.scoring import ScoreWeights
from dialect_engine.sql_toolkit import Platform

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables with SQLSHIFT_ prefix."""

    model_config = SettingsConfigDict(
        env_prefix="SQLSHIFT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    debug: bool = False

    # Scoring
    error_penalty: int = 15
    warning_penalty: int = 5
    info_penalty: int = 1

    # CLI defaults
    default_source: Platform = Platform.BIGQUERY
    default_target: Platform = Platform.SNOWFLAKE

    # Logging
    structured_logging: bool = False
    log_level: str = "WARNING"

    @field_validator("error_penalty", "warning_penalty", "info_penalty")
    @classmethod
    def non_negative_penalty(cls, v: int) -> int:
        if v < 0:
            raise ValueError("penalty weights must be non-negative")
        return v

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {v}")
        return level

    def score_weights(self) -> ScoreWeights:
        return ScoreWeights(
            error=self.error_penalty,
            warning=self.warning_penalty,
            info=self.info_penalty,
        )


def load_settings(**overrides: object) -> Settings:
    """Load settings from environment, with optional overrides for testing."""
    settings = Settings(**overrides)  # type: ignore[arg-type]

    if settings.debug:
        logger.info(
            "Loaded settings: penalties error=%d warning=%d info=%d",
            settings.error_penalty,
            settings.warning_penalty,
            settings.info_penalty,
        )

    return settings
