"""
Interceptors for routing standard library logging into channels.
"""

from __future__ import annotations

import logging
from typing import Iterable, Mapping

from .diagnostics import ROOT_NAME
from .facade import Logger, log

DEFAULT_LEVEL_CHANNELS: dict[int, str] = {
    logging.DEBUG: "debug",
    logging.INFO: "verbose",
    logging.WARNING: "warn",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


class ChannelHandler(logging.Handler):
    """
    Redirect standard library logging records to chanlog channels.

    Each record goes to the channel mapped to the highest level not above
    the record's level. Records from chanlog's own diagnostics are skipped
    so a channel writing through stdlib logging can not loop.
    """

    def __init__(
        self,
        level: int = logging.NOTSET,
        *,
        channels: Mapping[int, str] | None = None,
        target: Logger | None = None,
    ) -> None:
        super().__init__(level)
        self.channels = dict(sorted((channels or DEFAULT_LEVEL_CHANNELS).items()))
        self.target = target or log

    def channel_for(self, levelno: int) -> str | None:
        channel = None
        for threshold, name in self.channels.items():
            if levelno >= threshold:
                channel = name
        return channel

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == ROOT_NAME or record.name.startswith(ROOT_NAME + "."):
            return
        channel = self.channel_for(record.levelno)
        if channel is None:
            return
        try:
            msg = self.format(record)
            getattr(self.target, channel)(msg)
        except Exception:
            self.handleError(record)


def intercept_stdlib_loggers(
    names: Iterable[str | None] = (None,),
    *,
    channels: Mapping[int, str] | None = None,
    propagate: bool = False,
) -> ChannelHandler:
    """Replace the handlers of the named stdlib loggers (``None``: root) with one ``ChannelHandler``."""
    handler = ChannelHandler(channels=channels)
    for name in names:
        lg = logging.getLogger(name)
        lg.handlers = [handler]
        if name is not None:
            lg.propagate = propagate
    return handler
