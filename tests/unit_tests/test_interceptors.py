"""
stdlib logging bridge tests.
"""

from __future__ import annotations

import logging

import pytest

from chanlog.interceptors import ChannelHandler, intercept_stdlib_loggers


@pytest.fixture
def std_logger():
    lg = logging.getLogger("tests.bridge")
    saved = (lg.handlers[:], lg.level, lg.propagate)
    lg.setLevel(logging.DEBUG)
    yield lg
    lg.handlers, lg.level, lg.propagate = saved


class TestChannelHandler:
    """Records routed by level"""

    def test_level_mapping(self) -> None:
        handler = ChannelHandler()
        assert handler.channel_for(logging.DEBUG) == "debug"
        assert handler.channel_for(logging.INFO) == "verbose"
        assert handler.channel_for(logging.WARNING) == "warn"
        assert handler.channel_for(logging.ERROR) == "error"
        assert handler.channel_for(logging.CRITICAL) == "error"
        assert handler.channel_for(logging.DEBUG - 5) is None

    def test_records_reach_channels(self, context, logger, std_logger) -> None:
        buf = []
        context.configure({"warn": lambda msg: buf.append(("warn", msg)), "debug": lambda msg: buf.append(("debug", msg))})
        std_logger.handlers = [ChannelHandler(target=logger)]
        std_logger.propagate = False

        std_logger.warning("disk at %d%%", 91)
        std_logger.debug("details")
        assert buf == [("warn", "disk at 91%"), ("debug", "details")]

    def test_custom_channels(self, context, logger, std_logger) -> None:
        buf = []
        context.configure({"audit": buf.append})
        std_logger.handlers = [ChannelHandler(channels={logging.INFO: "audit"}, target=logger)]
        std_logger.propagate = False

        std_logger.info("kept")
        std_logger.debug("below every threshold")
        assert buf == ["kept"]

    def test_own_diagnostics_are_skipped(self, context, logger) -> None:
        buf = []
        context.configure({"warn": buf.append})
        handler = ChannelHandler(target=logger)
        record = logging.LogRecord("chanlog.loader", logging.WARNING, __file__, 1, "x", None, None)
        handler.emit(record)
        assert buf == []

    def test_unconfigured_channel_is_silent(self, logger, std_logger, capsys) -> None:
        std_logger.handlers = [ChannelHandler(target=logger)]
        std_logger.propagate = False
        std_logger.debug("debug is off by default")
        assert capsys.readouterr().out == ""


class TestIntercept:
    def test_installs_handler(self, global_context, std_logger, capsys) -> None:
        handler = intercept_stdlib_loggers(["tests.bridge"])
        assert std_logger.handlers == [handler]
        assert std_logger.propagate is False
        std_logger.warning("from stdlib")
        assert capsys.readouterr().err == "from stdlib\n"
