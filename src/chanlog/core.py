"""
Process context and configuration entry points.

There is one ``LoggerContext`` per process. ``configure()`` mutates it in
place: no snapshots, no generation tracking, the last writer wins.
"""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, NoReturn

import orjson

from .config import Settings, settings
from .diagnostics import get_logger
from .exceptions import ConfigurationError
from .factories import SinkFactory, default_sink
from .files import FileHandleRegistry
from .formatters import MessageConstructor, default_message_constructor
from .loader import Completion, start_loading
from .registry import PROTECTED_CHANNELS, Binding, ChannelRegistry
from .sinks import Console, HandlerSink

logger = get_logger("core")

ChannelSpec = Mapping[str, Any]
Terminate = Callable[[int], NoReturn]


class LoggerContext:
    """Owns every piece of process-wide logging state.

    - registry: channel name -> binding
    - files: shared file handles and their rotation timers
    - console: group indentation and debug style toggle
    - message_constructor: the single active formatter
    - exit_code / terminate: the process exit status and termination primitive
    """

    def __init__(
        self,
        *,
        base_dir: Path | None = None,
        week_starts_monday: bool = True,
        verbose_by_default: bool = True,
        terminate: Terminate = sys.exit,
        clock: Callable[[], datetime] = datetime.now,
        console: Console | None = None,
    ) -> None:
        self.base_dir = base_dir or Path.cwd()
        self.week_starts_monday = week_starts_monday
        self.verbose_by_default = verbose_by_default
        self.terminate = terminate
        self.clock = clock
        self.console = console or Console()
        self.registry = ChannelRegistry()
        self.files = FileHandleRegistry(clock=clock)
        self.factory = SinkFactory(self)
        self.message_constructor: MessageConstructor = default_message_constructor
        self.exit_code: int | None = None
        self._bind_protected()

    @classmethod
    def from_settings(cls, config: Settings, **overrides: Any) -> "LoggerContext":
        options: dict[str, Any] = {
            "base_dir": config.logger.resolve_base_dir(),
            "week_starts_monday": config.logger.week_starts_monday,
            "verbose_by_default": config.environment.verbose_by_default,
        }
        options.update(overrides)
        return cls(**options)

    def _bind_protected(self) -> None:
        for name in sorted(PROTECTED_CHANNELS):
            self.registry.bind(name, Binding.enabled(default_sink(self, name)))

    def default_spec(self) -> dict[str, Any]:
        return {
            "log": True,
            "verbose": self.verbose_by_default,
            "warn": True,
            "error": True,
            "group_start": True,
            "group_end": True,
        }

    def resolve_path(self, value: str | os.PathLike[str]) -> Path:
        """Absolute path for ``value``; relative paths hang off ``base_dir``."""
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.base_dir / path
        return path

    # =========================================================================
    # Configuration
    # =========================================================================

    def configure(self, spec: ChannelSpec | None = None) -> Completion:
        """Apply ``spec`` entry by entry; ``None`` applies the default channel set."""
        if spec is None:
            spec = self.default_spec()
        if not isinstance(spec, Mapping):
            raise ConfigurationError(
                channel=None,
                value=spec,
                reason="expected a mapping of channel names to values",
            )

        loading: list[HandlerSink] = []
        try:
            for name, value in spec.items():
                sink = self.factory.apply(name, value)
                if sink is not None:
                    loading.append(sink)
        except ConfigurationError:
            # Entries applied before the bad one stay applied, so do their loads.
            start_loading(loading)
            raise

        logger.debug("configured", channels=list(spec))
        return start_loading(loading)

    def configure_from_file(self, path: str | os.PathLike[str]) -> Completion:
        """Apply a JSON object of channel entries read from ``path``."""
        path = self.resolve_path(path)
        try:
            spec = orjson.loads(path.read_bytes())
        except orjson.JSONDecodeError as exc:
            raise ConfigurationError(channel=None, value=str(path), reason=f"invalid JSON: {exc}") from exc
        if not isinstance(spec, dict):
            raise ConfigurationError(
                channel=None,
                value=spec,
                reason=f"{path} must contain a JSON object",
            )
        return self.configure(spec)

    def close(self) -> None:
        """Close every shared file and cancel every rotation timer."""
        self.files.close_all()

    def reset(self) -> Completion:
        """Drop all channel state and reapply the defaults."""
        self.close()
        self.registry = ChannelRegistry()
        self.files = FileHandleRegistry(clock=self.clock)
        self.console.depth = 0
        self.console.debug_toggle = False
        self.message_constructor = default_message_constructor
        self.exit_code = None
        self._bind_protected()
        return self.configure()


# =============================================================================
# Global State
# =============================================================================

_context = LoggerContext.from_settings(settings)


def get_context() -> LoggerContext:
    return _context


def configure(spec: ChannelSpec | None = None) -> Completion:
    """
    Configure channels.

    Args:
        spec: Mapping of channel name to one of:
            - True / False: enable (restoring a previously disabled sink) or disable
            - callable: receives the formatted message
            - str / PathLike: a ``.py`` handler module, or a file to append to
            - mapping: rotating directory sink options (``directory`` required)
            The key ``message_constructor`` replaces the message formatter.
            ``None`` applies the default channel set.

    Returns:
        An awaitable ``Completion`` that resolves once handler modules are loaded.
    """
    return _context.configure(spec)


def configure_from_file(path: str | os.PathLike[str]) -> Completion:
    return _context.configure_from_file(path)


def set_exit_code(code: int | None) -> None:
    """Record the exit status the process intends to end with."""
    _context.exit_code = code


def reset() -> Completion:
    return _context.reset()


def bootstrap(config: Settings = settings) -> Completion:
    """Apply the default channels, then the configured JSON file if any."""
    completion = _context.configure()
    if config.logger.config_file is not None:
        completion = _context.configure_from_file(config.logger.config_file)
    return completion
