"""
Channel registry tests.
"""

from __future__ import annotations

import pytest

from chanlog.exceptions import ProtectedChannelError
from chanlog.registry import PROTECTED_CHANNELS, Binding, ChannelRegistry
from chanlog.sinks import NULL_SINK, CallableSink


@pytest.fixture
def registry():
    return ChannelRegistry()


class TestResolve:
    def test_unknown_name_resolves_to_shared_null_sink(self, registry) -> None:
        """Unknown names give the same cached no-op sink every time"""
        assert registry.resolve("nope") is NULL_SINK
        assert registry.resolve("other") is registry.resolve("nope")

    def test_null_sink_accepts_anything(self) -> None:
        assert NULL_SINK() is None
        assert NULL_SINK(1, "two", {"three": 3}) is None

    def test_enabled_binding_resolves_to_active(self, registry, context) -> None:
        sink = CallableSink(context, "x", print)
        registry.bind("x", Binding.enabled(sink))
        assert registry.resolve("x") is sink

    def test_disabled_binding_resolves_to_null(self, registry, context) -> None:
        sink = CallableSink(context, "x", print)
        registry.bind("x", Binding.disabled(sink))
        assert registry.resolve("x") is NULL_SINK
        assert registry.binding("x").remembered is sink


class TestProtected:
    """fatal_error and exit can be rebound but never removed"""

    @pytest.mark.parametrize("name", sorted(PROTECTED_CHANNELS))
    def test_remove_protected_raises(self, registry, name) -> None:
        with pytest.raises(ProtectedChannelError):
            registry.remove(name)

    def test_protected_error_is_attribute_error(self, registry) -> None:
        with pytest.raises(AttributeError):
            registry.remove("exit")

    def test_protected_entries_can_be_rebound(self, registry, context) -> None:
        sink = CallableSink(context, "exit", print)
        registry.bind("exit", Binding.enabled(sink))
        assert registry.resolve("exit") is sink
        assert "exit" in registry

    def test_remove_ordinary(self, registry, context) -> None:
        registry.bind("x", Binding.enabled(CallableSink(context, "x", print)))
        assert registry.remove("x") is not None
        assert "x" not in registry
        assert registry.remove("x") is None

    def test_names_lists_both_tables(self, registry, context) -> None:
        registry.bind("exit", Binding.enabled(CallableSink(context, "exit", print)))
        registry.bind("x", Binding.enabled(CallableSink(context, "x", print)))
        assert sorted(registry.names()) == ["exit", "x"]
        assert len(registry) == 2
