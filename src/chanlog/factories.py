"""
Sink factories: turn one configuration entry into a channel binding.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .exceptions import ConfigurationError
from .files import RotationPolicy
from .loader import is_handler_path
from .registry import Binding
from .sinks import (
    BaseSink,
    CallableSink,
    ConsoleSink,
    DebugSink,
    FileSink,
    GroupEndSink,
    GroupStartSink,
    HandlerSink,
    RotatingFileSink,
)

if TYPE_CHECKING:
    from .core import LoggerContext

MESSAGE_CONSTRUCTOR = "message_constructor"


class RotatingFileOptions(BaseModel):
    """Options of a directory based, date rotated file sink.

    Accepts snake_case and camelCase keys (``keep_old`` / ``keepOld``).
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    directory: str = Field(description="Directory for the dated log files")
    timestamp: bool = Field(default=True, description="Prefix lines with the local date and time")
    rotation: Literal["daily", "weekly", "monthly", "yearly", "day", "week", "month", "year"] = "daily"
    keep_old: int = Field(default=1, ge=0, description="Rotated files to keep")
    compress_old: bool = Field(default=True, description="gzip rotated files")
    copy_to_stdout: bool = Field(default=False, description="Echo every entry to stdout")
    file_name: Optional[str] = Field(default=None, description="File name stem (default: channel name)")


# =============================================================================
# Built-in Defaults
# =============================================================================

DefaultFactory = Callable[["LoggerContext", str], BaseSink]

DEFAULT_SINKS: dict[str, DefaultFactory] = {
    "log": lambda ctx, name: ConsoleSink(ctx, name),
    "verbose": lambda ctx, name: ConsoleSink(ctx, name),
    "debug": lambda ctx, name: DebugSink(ctx, name),
    "warn": lambda ctx, name: ConsoleSink(ctx, name, stream="stderr", color="warn"),
    "error": lambda ctx, name: ConsoleSink(ctx, name, stream="stderr", color="error"),
    "fatal_error": lambda ctx, name: ConsoleSink(ctx, name, stream="stderr", color="error"),
    "exit": lambda ctx, name: ConsoleSink(ctx, name),
    "group_start": lambda ctx, name: GroupStartSink(ctx, name),
    "group_end": lambda ctx, name: GroupEndSink(ctx, name),
}


def default_sink(context: LoggerContext, name: str) -> BaseSink:
    """Built-in sink for ``name``; a plain stdout write for unknown names."""
    factory = DEFAULT_SINKS.get(name)
    if factory is None:
        return ConsoleSink(context, name)
    return factory(context, name)


# =============================================================================
# Factory
# =============================================================================


class SinkFactory:
    """Applies configuration entries to the context's registry."""

    def __init__(self, context: LoggerContext) -> None:
        self._context = context

    def apply(self, name: str, value: Any) -> HandlerSink | None:
        """Apply one ``(name, value)`` entry.

        Returns the new sink when it still has to load an external handler.
        """
        if not isinstance(name, str) or not name:
            raise ConfigurationError(channel=None, value=name, reason="channel names must be non-empty strings")

        if name == MESSAGE_CONSTRUCTOR:
            if isinstance(value, bool) or not callable(value):
                raise ConfigurationError(channel=name, value=value, reason="the message constructor must be callable")
            self._context.message_constructor = value
            return None

        if value is True:
            self.enable(name)
            return None
        if value is False:
            self.disable(name)
            return None

        registry = self._context.registry
        previous = registry.binding(name)
        sink = self.build(name, value)
        registry.bind(name, Binding.enabled(sink))
        # Released after the new sink acquired its file, so rebinding to the same file keeps it open.
        if previous is not None and previous.is_enabled:
            self._release(previous.active)
        return sink if isinstance(sink, HandlerSink) else None

    def enable(self, name: str) -> None:
        registry = self._context.registry
        previous = registry.binding(name)
        if previous is not None and previous.is_enabled:
            return
        if previous is not None and previous.remembered is not None:
            sink = previous.remembered
            if sink.file_handle is not None:
                sink.file_handle = self._context.files.retain(sink.file_handle)
        else:
            sink = default_sink(self._context, name)
        registry.bind(name, Binding.enabled(sink))

    def disable(self, name: str) -> None:
        registry = self._context.registry
        previous = registry.binding(name)
        if previous is None:
            registry.bind(name, Binding.disabled())
        elif previous.is_enabled:
            registry.bind(name, Binding.disabled(previous.active))
            self._release(previous.active)

    def build(self, name: str, value: Any) -> BaseSink:
        if callable(value):
            return CallableSink(self._context, name, value)
        if isinstance(value, (str, os.PathLike)):
            return self._path_sink(name, self._context.resolve_path(value))
        if isinstance(value, Mapping):
            return self._rotating_sink(name, value)
        raise ConfigurationError(
            channel=name,
            value=value,
            reason=f'type "{type(value).__name__}" can not be used to configure a channel',
        )

    def _path_sink(self, name: str, path: Path) -> BaseSink:
        if is_handler_path(path):
            return HandlerSink(self._context, name, str(path))
        handle = self._context.files.acquire(path)
        return FileSink(self._context, name, handle)

    def _rotating_sink(self, name: str, value: Mapping[str, Any]) -> BaseSink:
        try:
            options = RotatingFileOptions.model_validate(dict(value))
        except ValidationError as exc:
            raise ConfigurationError(channel=name, value=value, reason=str(exc)) from exc

        policy = RotationPolicy(
            directory=self._context.resolve_path(options.directory),
            file_name=options.file_name or name,
            period=options.rotation,
            keep_old=options.keep_old,
            compress_old=options.compress_old,
            monday_first=self._context.week_starts_monday,
        )
        handle = self._context.files.acquire(policy.path_for(self._context.clock()), policy)
        return RotatingFileSink(
            self._context,
            name,
            handle,
            timestamp=options.timestamp,
            copy_to_stdout=options.copy_to_stdout,
        )

    def _release(self, sink: Any) -> None:
        if sink.file_handle is not None:
            self._context.files.release(sink.file_handle)
