"""
Settings tests.
"""

from __future__ import annotations

from pathlib import Path

from chanlog.config import EnvironmentSettings, LoggerSettings, Settings
from chanlog.core import LoggerContext


class TestEnvironmentSettings:
    def test_default_is_development(self, monkeypatch) -> None:
        monkeypatch.delenv("CHANLOG_ENV", raising=False)
        env = EnvironmentSettings()
        assert env.is_development
        assert env.verbose_by_default

    def test_production_disables_verbose(self, monkeypatch) -> None:
        monkeypatch.setenv("CHANLOG_ENV", "production")
        env = EnvironmentSettings()
        assert env.is_production
        assert not env.verbose_by_default


class TestLoggerSettings:
    def test_base_dir_from_env(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("CHANLOG_BASE_DIR", str(tmp_path))
        assert LoggerSettings().resolve_base_dir() == tmp_path.resolve()

    def test_base_dir_defaults_to_script_directory(self, monkeypatch, tmp_path) -> None:
        monkeypatch.delenv("CHANLOG_BASE_DIR", raising=False)
        script = tmp_path / "main.py"
        script.write_text("")
        monkeypatch.setattr("sys.argv", [str(script)])
        assert LoggerSettings().resolve_base_dir() == tmp_path.resolve()

    def test_base_dir_falls_back_to_cwd(self, monkeypatch, tmp_path) -> None:
        monkeypatch.delenv("CHANLOG_BASE_DIR", raising=False)
        monkeypatch.setattr("sys.argv", [""])
        monkeypatch.chdir(tmp_path)
        assert LoggerSettings().resolve_base_dir() == Path.cwd()

    def test_week_start(self, monkeypatch) -> None:
        monkeypatch.setenv("CHANLOG_WEEK_STARTS_MONDAY", "false")
        assert LoggerSettings().week_starts_monday is False


class TestContextFromSettings:
    def test_production_context(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("CHANLOG_ENV", "production")
        monkeypatch.setenv("CHANLOG_BASE_DIR", str(tmp_path))
        monkeypatch.setenv("CHANLOG_WEEK_STARTS_MONDAY", "0")
        context = LoggerContext.from_settings(Settings())
        assert context.base_dir == tmp_path.resolve()
        assert context.verbose_by_default is False
        assert context.week_starts_monday is False
        assert context.default_spec()["verbose"] is False
