# portal/core/observable.py
"""
Current-value streams used for the portal's shared reactive state.

Each piece of state (session identity, current user, resolved settings) is
owned by exactly one component. The owner keeps the ValueStream and hands
out a read-only view; everybody else reads a snapshot or subscribes.

Delivery is synchronous and in emission order. A value emitted from inside
a subscriber callback is queued and delivered after the current value has
reached every subscriber.
"""

import logging
from collections import deque
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Unsubscribe = Callable[[], None]


class ReadOnlyStream(Generic[T]):
    """Subscriber-side view of a ValueStream (no setter)."""

    def __init__(self, source: "ValueStream[T]"):
        self._source = source

    @property
    def value(self) -> T:
        return self._source.value

    def first(self) -> T:
        """Take exactly one snapshot of the current value."""
        return self._source.value

    def subscribe(self, callback: Callable[[T], None], replay: bool = True) -> Unsubscribe:
        return self._source.subscribe(callback, replay=replay)


class ValueStream(Generic[T]):
    """
    Single current value with "replace on update" semantics.

    Subscribers receive the current value on subscription (unless
    replay=False) and every value emitted afterwards. A failing
    subscriber is logged and does not stop delivery to the others.
    """

    def __init__(self, initial: T):
        self._value = initial
        self._subscribers: list[Callable[[T], None]] = []
        self._pending: deque[T] = deque()
        self._emitting = False

    @property
    def value(self) -> T:
        return self._value

    def as_observable(self) -> ReadOnlyStream[T]:
        return ReadOnlyStream(self)

    def subscribe(self, callback: Callable[[T], None], replay: bool = True) -> Unsubscribe:
        self._subscribers.append(callback)
        if replay:
            self._deliver(callback, self._value)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def next(self, value: T) -> None:
        self._pending.append(value)
        if self._emitting:
            return

        self._emitting = True
        try:
            while self._pending:
                current = self._pending.popleft()
                self._value = current
                for callback in list(self._subscribers):
                    self._deliver(callback, current)
        finally:
            self._emitting = False

    @staticmethod
    def _deliver(callback: Callable[[T], None], value: T) -> None:
        try:
            callback(value)
        except Exception:
            logger.exception("Subscriber %r failed while handling %r", callback, value)


class EventChannel(Generic[T]):
    """
    Fan-out of discrete events with no current value.

    Used for out-of-band signals such as "re-fetch the profile".
    """

    def __init__(self):
        self._stream: ValueStream[T | None] = ValueStream(None)

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        return self._stream.subscribe(callback, replay=False)  # type: ignore[arg-type]

    def publish(self, event: T) -> None:
        self._stream.next(event)
