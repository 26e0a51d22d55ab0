"""
chanlog: process-wide channel logging.

Modules log through named channels without declaring them:

    from chanlog import log

    log("Hello")
    log.verbose("details")
    log.warn("careful")
    log.whatever("a no-op unless the host configured 'whatever'")

The host decides once, and may change at runtime, where each channel goes:

    from chanlog import configure

    configure({
        "debug": True,                         # built-in default
        "warn": False,                         # silenced, remembered for later
        "audit": "audit.log",                  # appended to a file
        "metrics": "handlers/metrics.py",      # external handler(channel, message)
        "events": {"directory": "logs"},       # logs/YYYY-MM-DD-events.log, rotated daily
        "notify": lambda message: ...,         # any callable
    })

``log.fatal_error()`` and ``log.exit()`` always end the process.
"""

from .core import (
    LoggerContext,
    bootstrap,
    configure,
    configure_from_file,
    get_context,
    reset,
    set_exit_code,
)
from .exceptions import ChanlogError, ConfigurationError, HandlerLoadError, ProtectedChannelError
from .facade import Logger, PrefixedLogger, log, prefixed_log
from .formatters import default_message_constructor
from .interceptors import ChannelHandler, intercept_stdlib_loggers
from .loader import Completion
from .rotation import next_boundary

bootstrap()

__all__ = [
    "ChanlogError",
    "ChannelHandler",
    "Completion",
    "ConfigurationError",
    "HandlerLoadError",
    "Logger",
    "LoggerContext",
    "PrefixedLogger",
    "ProtectedChannelError",
    "configure",
    "configure_from_file",
    "default_message_constructor",
    "get_context",
    "intercept_stdlib_loggers",
    "log",
    "next_boundary",
    "prefixed_log",
    "reset",
    "set_exit_code",
]
