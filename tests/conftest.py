from datetime import datetime

import pytest

from chanlog import get_context
from chanlog.core import LoggerContext
from chanlog.facade import Logger


class FakeClock:
    """Settable clock for rotation tests."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 15, 12, 0, 0))


@pytest.fixture
def context(tmp_path):
    """
    A fresh, fully isolated logging context rooted at ``tmp_path``.
    Files it opened are closed and timers cancelled afterwards.
    """
    ctx = LoggerContext(base_dir=tmp_path)
    ctx.configure()
    yield ctx
    ctx.close()


@pytest.fixture
def logger(context):
    return Logger(context)


@pytest.fixture
def global_context(tmp_path, monkeypatch):
    """
    The process-wide context behind ``chanlog.log``, reset before and after the test.
    """
    ctx = get_context()
    monkeypatch.setattr(ctx, "base_dir", tmp_path)
    ctx.reset()
    yield ctx
    ctx.reset()
