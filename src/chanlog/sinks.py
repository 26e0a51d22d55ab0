"""
Sink abstractions and concrete implementations.

A sink is what a channel name resolves to: calling it with raw values
performs the side effect. Sinks decide themselves whether and how the
message constructor is applied.
"""

from __future__ import annotations

import sys
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Literal, TextIO

from .formatters import style
from .rotation import iso_timestamp, time_stamp

if TYPE_CHECKING:
    from .core import LoggerContext
    from .files import SharedFileHandle

StreamName = Literal["stdout", "stderr"]
Handler = Callable[[str, str], Any]


# =============================================================================
# Console State
# =============================================================================


class Console:
    """Shared console state: group indentation and the debug style toggle.

    Streams default to whatever ``sys.stdout`` / ``sys.stderr`` are at
    write time, so redirections made after configuration are honoured.
    """

    INDENT = "  "

    def __init__(self, stdout: TextIO | None = None, stderr: TextIO | None = None) -> None:
        self._stdout = stdout
        self._stderr = stderr
        self.depth = 0
        self.debug_toggle = False

    def stream(self, name: StreamName) -> TextIO:
        if name == "stderr":
            return self._stderr or sys.stderr
        return self._stdout or sys.stdout

    def write(self, text: str, *, stream: StreamName = "stdout", color: str | None = None) -> None:
        target = self.stream(stream)
        if self.depth:
            indent = self.INDENT * self.depth
            text = "\n".join(indent + line for line in text.split("\n"))
        target.write(style(text, color, target) + "\n")
        target.flush()

    def group_start(self) -> None:
        self.depth += 1

    def group_end(self) -> None:
        self.depth = max(self.depth - 1, 0)


# =============================================================================
# Sink Abstraction (Strategy Pattern)
# =============================================================================


class BaseSink(ABC):
    """Abstract base class for sinks bound to one channel."""

    file_handle: SharedFileHandle | None = None

    def __init__(self, context: LoggerContext, channel: str) -> None:
        self._context = context
        self.channel = channel

    def __call__(self, *values: Any) -> None:
        self.emit(values)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(channel={self.channel!r})"

    def format(self, values: tuple[Any, ...]) -> str:
        return self._context.message_constructor(self.channel, *values)

    @abstractmethod
    def emit(self, values: tuple[Any, ...]) -> None:
        """Deliver one call's worth of raw values."""
        ...


class NullSink:
    """Accepts any call and does nothing. One shared instance: ``NULL_SINK``."""

    channel = None
    file_handle = None

    def __call__(self, *values: Any) -> None:
        pass

    def __repr__(self) -> str:
        return "NULL_SINK"

    def emit(self, values: tuple[Any, ...]) -> None:
        pass


NULL_SINK = NullSink()


class ConsoleSink(BaseSink):
    """Formatted write to stdout or stderr, optionally styled."""

    def __init__(
        self,
        context: LoggerContext,
        channel: str,
        *,
        stream: StreamName = "stdout",
        color: str | None = None,
    ) -> None:
        super().__init__(context, channel)
        self.stream = stream
        self.color = color

    def emit(self, values: tuple[Any, ...]) -> None:
        self._context.console.write(self.format(values), stream=self.stream, color=self.color)


class DebugSink(ConsoleSink):
    """Console write whose background alternates on every call."""

    def emit(self, values: tuple[Any, ...]) -> None:
        console = self._context.console
        console.debug_toggle = not console.debug_toggle
        color = "debug" if console.debug_toggle else "debug_alt"
        console.write(self.format(values), stream=self.stream, color=color)


class GroupStartSink(BaseSink):
    """Prints an optional label, then indents subsequent console output."""

    def emit(self, values: tuple[Any, ...]) -> None:
        console = self._context.console
        if values:
            console.write(self.format(values))
        console.group_start()


class GroupEndSink(BaseSink):
    def emit(self, values: tuple[Any, ...]) -> None:
        self._context.console.group_end()


class CallableSink(BaseSink):
    """Hands the formatted message to a user supplied function."""

    def __init__(self, context: LoggerContext, channel: str, func: Callable[[str], Any]) -> None:
        super().__init__(context, channel)
        self.func = func

    def emit(self, values: tuple[Any, ...]) -> None:
        self.func(self.format(values))


class HandlerSink(BaseSink):
    """Delivers to an external ``handler(channel, message)`` once it is loaded.

    Until then messages are formatted immediately and queued. Attaching the
    handler flushes the queue in order before any later call is delivered.
    """

    def __init__(self, context: LoggerContext, channel: str, path: str) -> None:
        super().__init__(context, channel)
        self.path = path
        self.handler: Handler | None = None
        self.failed = False
        self._queue: list[str] = []

    @property
    def pending(self) -> int:
        return len(self._queue)

    def emit(self, values: tuple[Any, ...]) -> None:
        if self.failed:
            return
        message = self.format(values)
        if self.handler is None:
            self._queue.append(message)
        else:
            self.handler(self.channel, message)

    def attach(self, handler: Handler) -> None:
        """Attach ``handler`` and flush the queue through it.

        The handler stays attached even if it raises on a queued message;
        the rest of the queue is still delivered and the first error re-raised.
        """
        queued, self._queue = self._queue, []
        self.handler = handler
        error: Exception | None = None
        for message in queued:
            try:
                handler(self.channel, message)
            except Exception as exc:
                if error is None:
                    error = exc
        if error is not None:
            raise error

    def fail(self) -> int:
        """Give up on the handler; returns how many queued messages were dropped."""
        dropped = len(self._queue)
        self._queue = []
        self.failed = True
        return dropped


class FileSink(BaseSink):
    """Appends ``<ISO 8601 UTC>: <message>`` lines to a shared file."""

    def __init__(self, context: LoggerContext, channel: str, handle: SharedFileHandle) -> None:
        super().__init__(context, channel)
        self.file_handle = handle

    def emit(self, values: tuple[Any, ...]) -> None:
        self.file_handle.write(f"{iso_timestamp()}: {self.format(values)}\n")


class RotatingFileSink(BaseSink):
    """Writes to a dated file in a directory, rotated by the handle's timer."""

    def __init__(
        self,
        context: LoggerContext,
        channel: str,
        handle: SharedFileHandle,
        *,
        timestamp: bool = True,
        copy_to_stdout: bool = False,
    ) -> None:
        super().__init__(context, channel)
        self.file_handle = handle
        self.timestamp = timestamp
        self.copy_to_stdout = copy_to_stdout

    def emit(self, values: tuple[Any, ...]) -> None:
        entry = self.format(values)
        if self.timestamp:
            entry = f"{time_stamp()}: {entry}"
        self.file_handle.write(entry + "\n")
        if self.copy_to_stdout:
            self._context.console.write(entry)
