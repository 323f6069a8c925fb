"""Event bus for the error sink.

Failures are broadcast to observers registered on an EventBus owned by the
engine. Consumers (UI notifications, error reporting) subscribe to the
event types they care about.
"""

from collections.abc import Callable
from typing import Any, Protocol, TypeVar

T = TypeVar("T")


class EventBusProtocol(Protocol):
    """Interface satisfied by EventBus and NullEventBus."""

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None: ...

    def emit(self, event: T) -> None: ...


class EventBus:
    """Synchronous observer registry keyed by event type.

    Handlers run in subscription order. Handler exceptions propagate to the
    code that emitted the event.

    Example:
        bus = EventBus()
        bus.subscribe(FetchFailed, lambda e: print(f"{e.method} {e.url}: {e.reason}"))
    """

    def __init__(self) -> None:
        self._subscribers: dict[type, list[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Register a handler for one event type."""
        self._subscribers.setdefault(event_type, []).append(handler)

    def unsubscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        """Remove a previously registered handler.

        Raises:
            ValueError: If the handler was never subscribed to event_type
        """
        self._subscribers.get(event_type, []).remove(handler)

    def emit(self, event: T) -> None:
        """Dispatch an event to every handler subscribed to its exact type.

        Events without subscribers are dropped.
        """
        for handler in list(self._subscribers.get(type(event), [])):
            handler(event)


class NullEventBus:
    """Bus that ignores subscriptions and drops every event.

    Does not inherit from EventBus so it can never be mistaken for one that
    delivers events.
    """

    def subscribe(self, event_type: type[T], handler: Callable[[T], None]) -> None:
        pass

    def emit(self, event: T) -> None:
        pass
