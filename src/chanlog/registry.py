"""
Channel registry.

Maps channel names to bindings. A binding is either enabled (calls go to
``active``) or disabled (calls go to the no-op sink while ``remembered``
keeps the sink to restore on re-enable).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, Literal, Optional, Union

from .exceptions import ProtectedChannelError
from .sinks import NULL_SINK, BaseSink, NullSink

Sink = Union[BaseSink, NullSink]
BindingKind = Literal["enabled", "disabled"]

PROTECTED_CHANNELS = frozenset({"fatal_error", "exit"})


@dataclass(frozen=True)
class Binding:
    kind: BindingKind
    active: Sink
    remembered: Optional[Sink] = None

    @classmethod
    def enabled(cls, sink: Sink) -> "Binding":
        return cls("enabled", sink)

    @classmethod
    def disabled(cls, remembered: Optional[Sink] = None) -> "Binding":
        return cls("disabled", NULL_SINK, remembered)

    @property
    def is_enabled(self) -> bool:
        return self.kind == "enabled"


class ChannelRegistry:
    """Channel name -> binding, with ``fatal_error`` and ``exit`` kept apart.

    The protected entries can be rebound (their sink is user logic) but
    never removed.
    """

    def __init__(self) -> None:
        self._channels: dict[str, Binding] = {}
        self._protected: dict[str, Binding] = {}

    def __contains__(self, name: Any) -> bool:
        return name in self._channels or name in self._protected

    def __iter__(self) -> Iterator[str]:
        yield from self._protected
        yield from self._channels

    def __len__(self) -> int:
        return len(self._channels) + len(self._protected)

    def names(self) -> list[str]:
        return list(self)

    def _table(self, name: str) -> dict[str, Binding]:
        return self._protected if name in PROTECTED_CHANNELS else self._channels

    def binding(self, name: str) -> Binding | None:
        return self._table(name).get(name)

    def resolve(self, name: str) -> Sink:
        """The sink calls to ``name`` go to; the shared no-op sink if unknown."""
        binding = self._table(name).get(name)
        if binding is None:
            return NULL_SINK
        return binding.active

    def bind(self, name: str, binding: Binding) -> None:
        self._table(name)[name] = binding

    def remove(self, name: str) -> Binding | None:
        if name in PROTECTED_CHANNELS:
            raise ProtectedChannelError(channel=name, operation="removed")
        return self._channels.pop(name, None)
