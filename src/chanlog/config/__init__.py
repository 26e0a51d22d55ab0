"""
Chanlog Configuration Module.

Implements the Nested Settings Pattern: each concern is a separate
pydantic-settings class reading its own `CHANLOG_*` variables.

Usage:
    from chanlog.config import settings

    settings.environment.is_production
    settings.logger.resolve_base_dir()
    settings.logger.config_file
"""

from functools import cached_property

from pydantic_settings import BaseSettings, SettingsConfigDict

from .environment import EnvironmentSettings
from .logger import LoggerSettings


class Settings(BaseSettings):
    """Composite settings aggregating the configuration domains."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @cached_property
    def environment(self) -> EnvironmentSettings:
        return EnvironmentSettings()

    @cached_property
    def logger(self) -> LoggerSettings:
        return LoggerSettings()


# Singleton instance
settings = Settings()

__all__ = ["EnvironmentSettings", "LoggerSettings", "Settings", "settings"]
