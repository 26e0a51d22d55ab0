"""
Loading of external handler modules.

A handler module is a Python file exposing ``handler(channel, message)``.
Loading is asynchronous when an asyncio loop is running, synchronous
otherwise; either way ``configure()`` hands back a ``Completion``.
"""

from __future__ import annotations

import asyncio
import hashlib
import importlib.util
import sys
from pathlib import Path
from typing import Any, Awaitable, Iterable

from .diagnostics import get_logger
from .exceptions import HandlerLoadError
from .sinks import Handler, HandlerSink

logger = get_logger("loader")

HANDLER_ATTRIBUTE = "handler"
HANDLER_SUFFIXES = (".py",)


def is_handler_path(path: Path) -> bool:
    return path.suffix.lower() in HANDLER_SUFFIXES


def _module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    return f"chanlog_handler_{path.stem}_{digest}"


def load_handler(path: Path) -> Handler:
    """Import ``path`` (once per process) and return its ``handler``."""
    name = _module_name(path)
    module = sys.modules.get(name)
    if module is None:
        spec = importlib.util.spec_from_file_location(name, path)
        if spec is None or spec.loader is None:
            raise ImportError(f"not an importable Python file: {path}")
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
        sys.modules[name] = module
    handler = getattr(module, HANDLER_ATTRIBUTE, None)
    if not callable(handler):
        raise TypeError(f"module has no callable {HANDLER_ATTRIBUTE!r}")
    return handler


def _failed(sink: HandlerSink, exc: BaseException) -> HandlerLoadError:
    dropped = sink.fail()
    logger.warning(
        "handler_load_failed",
        channel=sink.channel,
        path=sink.path,
        dropped=dropped,
        error=str(exc),
    )
    return HandlerLoadError(channel=sink.channel, path=sink.path, reason=str(exc), dropped=dropped)


def _attach(sink: HandlerSink, handler: Handler) -> None:
    try:
        sink.attach(handler)
    except Exception as exc:
        logger.warning("handler_flush_failed", channel=sink.channel, path=sink.path, error=str(exc))
        raise HandlerLoadError(
            channel=sink.channel,
            path=sink.path,
            reason=f"handler raised on a queued message: {exc}",
        ) from exc
    logger.debug("handler_loaded", channel=sink.channel, path=sink.path)


async def _load_async(sink: HandlerSink) -> None:
    try:
        handler = await asyncio.to_thread(load_handler, Path(sink.path))
    except Exception as exc:
        raise _failed(sink, exc) from exc
    # Back on the loop thread: nothing can log to this sink mid-flush.
    _attach(sink, handler)


def _retrieve(task: asyncio.Task) -> None:
    # Failures are already logged; keep asyncio from reporting them again.
    if not task.cancelled():
        task.exception()


class Completion:
    """Awaitable outcome of one ``configure()`` call.

    Resolves once every handler module registered by that call is loaded;
    raises the first ``HandlerLoadError`` otherwise.
    """

    def __init__(
        self,
        pending: Iterable[Awaitable[Any]] = (),
        errors: Iterable[HandlerLoadError] = (),
    ) -> None:
        self._pending = list(pending)
        self._errors = list(errors)

    def __await__(self):
        return self._wait().__await__()

    def __repr__(self) -> str:
        state = "done" if self.done() else "pending"
        return f"<Completion {state} errors={len(self._errors)}>"

    async def _wait(self) -> None:
        if self._errors:
            raise self._errors[0]
        if self._pending:
            await asyncio.gather(*self._pending)

    def done(self) -> bool:
        return all(getattr(task, "done", lambda: True)() for task in self._pending)

    @property
    def errors(self) -> list[HandlerLoadError]:
        return list(self._errors)


def start_loading(sinks: list[HandlerSink]) -> Completion:
    """Begin loading the handler of every sink in ``sinks``."""
    if not sinks:
        return Completion()
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is not None:
        tasks = [loop.create_task(_load_async(sink)) for sink in sinks]
        for task in tasks:
            task.add_done_callback(_retrieve)
        return Completion(pending=tasks)

    errors = []
    for sink in sinks:
        try:
            handler = load_handler(Path(sink.path))
        except Exception as exc:
            errors.append(_failed(sink, exc))
            continue
        try:
            _attach(sink, handler)
        except HandlerLoadError as exc:
            errors.append(exc)
    return Completion(errors=errors)
