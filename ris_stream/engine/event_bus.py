"""
Event bus for derived routing events.

The bus is the boundary between the ingestion pipeline and whatever
consumes its output: the line renderer, a file writer, a test collecting
events. It does not interpret events. It delivers them to registered
subscribers, optionally only those of the event classes a subscriber asked
for.
"""

from collections.abc import Callable, Iterable

from ris_stream.events import RoutingEvent

Subscriber = Callable[[RoutingEvent], None]


class EventBus:
    """
    Simple publish-subscribe event bus.

    Subscribers are called synchronously, in the order they were
    registered. If a subscriber raises an exception, propagation stops
    and the error is surfaced to the caller.
    """

    def __init__(self) -> None:
        self._subscribers: list[tuple[Subscriber, tuple[type, ...] | None]] = []
        self._closed: bool = False

    def subscribe(self, handler: Subscriber, kinds: Iterable[type] | None = None) -> None:
        """
        Register a new event handler.

        If ``kinds`` is given the handler only receives instances of those
        event classes.
        """
        if self._closed:
            raise RuntimeError("Cannot subscribe to a closed event bus")

        self._subscribers.append((handler, tuple(kinds) if kinds is not None else None))

    def publish(self, event: RoutingEvent) -> None:
        """
        Publish an event to all matching subscribers.
        """
        if self._closed:
            raise RuntimeError("Cannot publish to a closed event bus")

        for handler, kinds in self._subscribers:
            if kinds is None or isinstance(event, kinds):
                handler(event)

    def close(self) -> None:
        """
        Close the event bus.

        After closing, no further subscriptions or publications are
        permitted.
        """
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed
