"""
Environment Configuration.

The environment is determined by the `CHANLOG_ENV` environment variable and
decides which channels the default configuration enables.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


Environment = Literal["development", "testing", "staging", "production"]


class EnvironmentSettings(BaseSettings):
    """
    Environment detection.

    `verbose` is part of the default channel set everywhere except in
    production.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHANLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: Environment = Field(
        default="development",
        description="Current environment (development, testing, staging, production)",
    )

    @property
    def is_development(self) -> bool:
        return self.env == "development"

    @property
    def is_testing(self) -> bool:
        return self.env == "testing"

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @property
    def verbose_by_default(self) -> bool:
        return self.env != "production"
