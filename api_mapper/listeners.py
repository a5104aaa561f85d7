"""Observers notified after each API call."""

from collections.abc import Callable, Iterable, Iterator
from typing import Protocol, runtime_checkable

from api_mapper.models import CallResult


@runtime_checkable
class Listener(Protocol):
    """Receives the result of every call made by an ``ApiMapper``."""

    def handle(self, result: CallResult) -> None: ...


ListenerLike = Listener | Callable[[CallResult], object]


class ListenerRegistry:
    """Ordered collection of listeners.

    Listeners may be objects with a ``handle(result)`` method or plain callables.
    Notification is synchronous, in registration order; an exception raised by a
    listener propagates and skips the listeners after it.
    """

    def __init__(self, listeners: Iterable[ListenerLike] = ()) -> None:
        self._listeners: list[ListenerLike] = list(listeners)

    def add(self, listener: ListenerLike) -> None:
        self._listeners.append(listener)

    def reset(self, listeners: Iterable[ListenerLike] = ()) -> None:
        """Replace all listeners (clear when ``listeners`` is empty)."""
        self._listeners = list(listeners)

    def notify(self, result: CallResult) -> None:
        for listener in self._listeners:
            if isinstance(listener, Listener):
                listener.handle(result)
            else:
                listener(result)

    def __iter__(self) -> Iterator[ListenerLike]:
        return iter(list(self._listeners))

    def __len__(self) -> int:
        return len(self._listeners)


class RecordingListener:
    """Listener keeping every result it receives, in order."""

    def __init__(self) -> None:
        self.results: list[CallResult] = []

    def handle(self, result: CallResult) -> None:
        self.results.append(result)

    @property
    def last(self) -> CallResult | None:
        return self.results[-1] if self.results else None
