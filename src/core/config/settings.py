# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Application configuration settings using Pydantic Settings.

This module provides centralized configuration management for the SCORM
trends report. Settings are loaded from environment variables with sensible
defaults.

The Settings class is the main entry point and aggregates all subsettings.
A singleton instance is provided via get_settings() for dependency injection.

Example:
    >>> from src.core.config.settings import get_settings
    >>> settings = get_settings()
    >>> print(settings.report.interaction_prefix)
    'interactions_'
"""

from functools import lru_cache
from typing import Literal, Self

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    """Database configuration for the LMS tracking store.

    The database holds the SCORM activity, its SCOs and the raw
    tracking records written while learners attempt them. The report
    only ever reads from it.

    Attributes:
        url: SQLAlchemy connection URL.
        echo: Whether to echo SQL statements.
        pool_pre_ping: Whether to test connections before use.
    """

    model_config = SettingsConfigDict(
        env_prefix="DB_",
        extra="ignore",
    )

    url: str = "sqlite:///scorm_trends.db"
    echo: bool = False
    pool_pre_ping: bool = True


class TrendsReportSettings(BaseSettings):
    """Trends report configuration.

    Attributes:
        interaction_prefix: Element prefix that precedes the interaction
            slot index. ``interactions_`` matches ``cmi.interactions_0.type``.
        capability: Capability a user must hold to be reported on.
        strict_key_matching: Match field elements exactly instead of by
            case-insensitive substring.
        question_label: Label template for a slot, ``{index}`` is the slot.
        no_activity_message: Notice shown when no user can be reported.
        table_id_prefix: Prefix of the per-SCO table identifier.
    """

    model_config = SettingsConfigDict(
        env_prefix="TRENDS_",
        extra="ignore",
    )

    interaction_prefix: str = "interactions_"
    capability: str = "mod/scorm:savetrack"
    strict_key_matching: bool = False
    question_label: str = "Question {index}"
    no_activity_message: str = "Nothing to report"
    table_id_prefix: str = "mod-scorm-trends-report-"

    @model_validator(mode="after")
    def validate_prefix(self) -> Self:
        """Reject an empty interaction prefix.

        Raises:
            ValueError: If interaction_prefix is blank.
        """
        if not self.interaction_prefix.strip():
            raise ValueError("TRENDS_INTERACTION_PREFIX must not be empty.")
        return self


class Settings(BaseSettings):
    """Main application settings aggregating all subsettings.

    Use get_settings() to obtain a cached singleton instance.

    Attributes:
        environment: Current environment (development, staging, production).
        debug: Enable debug mode.
        log_level: Logging level.
        database: Tracking store database settings.
        report: Trends report settings.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = True
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "DEBUG"

    # Subsettings - loaded with their own env prefixes
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    report: TrendsReportSettings = Field(default_factory=TrendsReportSettings)

    @model_validator(mode="after")
    def validate_production_settings(self) -> Self:
        """Validate that production settings are properly configured.

        Raises:
            ValueError: If running in production with SQL echo enabled.
        """
        if self.environment == "production" and self.database.echo:
            raise ValueError(
                "SQL echo must be disabled in production. "
                "Unset DB_ECHO environment variable."
            )
        return self

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call clear_settings_cache() if you need to reload settings.

    Returns:
        Cached Settings instance.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache.

    Call this if you need to reload settings from environment.
    Useful for testing or dynamic configuration updates.
    """
    get_settings.cache_clear()
