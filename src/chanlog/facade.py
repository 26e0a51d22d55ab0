"""
The object modules import to log.

    from chanlog import log

    log("Hello")
    log.debug("only shown when the host enabled debug")
    log.anything_at_all("never raises, even if nobody configured it")

Channel lookups are resolved against the registry on every access, so a
reconfiguration is picked up without callers changing anything.
"""

from __future__ import annotations

from typing import Any

from .core import LoggerContext, get_context
from .exceptions import ProtectedChannelError
from .registry import PROTECTED_CHANNELS, Sink

DEFAULT_CHANNEL = "log"


class _PrefixedCall:
    """Calls the current sink of ``channel`` with ``prefix`` prepended."""

    __slots__ = ("_context", "channel", "prefix")

    def __init__(self, context: LoggerContext, channel: str, prefix: Any) -> None:
        self._context = context
        self.channel = channel
        self.prefix = prefix

    def __call__(self, *values: Any) -> None:
        self._context.registry.resolve(self.channel)(self.prefix, *values)

    def __repr__(self) -> str:
        return f"<prefixed {self.channel!r} {self.prefix!r}>"


class Logger:
    """Callable channel namespace backed by a ``LoggerContext``.

    ``fatal_error`` and ``exit`` always end the process after their sink ran;
    they can be reconfigured but neither removed nor overwritten here.
    """

    def __init__(self, context: LoggerContext) -> None:
        object.__setattr__(self, "_context", context)
        object.__setattr__(self, "_prefixed_calls", {})

    def __call__(self, *values: Any) -> None:
        self._context.registry.resolve(DEFAULT_CHANNEL)(*values)

    def __getattr__(self, name: str) -> Sink:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._context.registry.resolve(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in PROTECTED_CHANNELS:
            raise ProtectedChannelError(channel=name, operation="overwritten")
        raise AttributeError(f"channels can not be assigned, use chanlog.configure({{{name!r}: ...}})")

    def __delattr__(self, name: str) -> None:
        if name in PROTECTED_CHANNELS:
            raise ProtectedChannelError(channel=name, operation="removed")
        raise AttributeError(f"channels can not be deleted, use chanlog.configure({{{name!r}: False}})")

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(self._context.registry))

    def __repr__(self) -> str:
        return f"<chanlog.Logger channels={sorted(self._context.registry)}>"

    def exit(self, *values: Any) -> None:
        """Run the ``exit`` sink, then end the process with the intended status."""
        self._terminate("exit", values)

    def fatal_error(self, *values: Any) -> None:
        """Run the ``fatal_error`` sink, then end the process with a failure status."""
        self._terminate("fatal_error", values)

    def _terminate(self, name: str, values: tuple[Any, ...]) -> None:
        context = self._context
        try:
            context.registry.resolve(name)(*values)
        finally:
            if name == "fatal_error" and not context.exit_code:
                context.exit_code = 1
            context.terminate(context.exit_code or 0)

    def _prefixed(self, name: str, prefix: Any) -> _PrefixedCall:
        key = (name, prefix)
        try:
            call = self._prefixed_calls.get(key)
        except TypeError:
            # Unhashable prefix, nothing to cache under.
            return _PrefixedCall(self._context, name, prefix)
        if call is None:
            call = self._prefixed_calls[key] = _PrefixedCall(self._context, name, prefix)
        return call


class PrefixedLogger:
    """A view on a ``Logger`` that prepends ``prefix`` to every call."""

    def __init__(self, base: Logger, prefix: Any) -> None:
        self._base = base
        self._prefix = prefix

    def __call__(self, *values: Any) -> None:
        self._base(self._prefix, *values)

    def __getattr__(self, name: str) -> _PrefixedCall:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._base._prefixed(name, self._prefix)

    def __repr__(self) -> str:
        return f"<chanlog.PrefixedLogger prefix={self._prefix!r}>"

    def exit(self, *values: Any) -> None:
        self._base._terminate("exit", (self._prefix, *values))

    def fatal_error(self, *values: Any) -> None:
        self._base._terminate("fatal_error", (self._prefix, *values))


log = Logger(get_context())


def prefixed_log(prefix: Any) -> PrefixedLogger:
    """Get a version of ``log`` whose messages all start with ``prefix``.

    Example:
        log = prefixed_log("Some module:")
        log("Hi")
        log.verbose("and hello from some module")
    """
    return PrefixedLogger(log, prefix)
