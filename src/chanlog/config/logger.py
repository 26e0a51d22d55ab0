"""
Logger Configuration.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggerSettings(BaseSettings):
    """Process-level knobs that are not part of a channel configuration."""

    model_config = SettingsConfigDict(
        env_prefix="CHANLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    base_dir: Path | None = Field(
        default=None,
        description="Directory relative sink paths resolve against (default: directory of the main script)",
    )
    config_file: Path | None = Field(
        default=None,
        description="JSON channel configuration applied at import time",
    )
    week_starts_monday: bool = Field(
        default=True,
        description="Weekly rotation boundary is Monday (False: Sunday)",
    )

    def resolve_base_dir(self) -> Path:
        """Directory used to resolve relative sink paths."""
        if self.base_dir is not None:
            return self.base_dir.expanduser().resolve()
        script = sys.argv[0] if sys.argv else ""
        if script and os.path.exists(script):
            return Path(script).resolve().parent
        return Path.cwd()
