"""Typed publish/subscribe channels for navigation and loading events.

A ``Channel[T]`` carries exactly one payload type, so subscribers never
match on string event names. Payloads are frozen dataclasses, safe to
hand to any number of subscribers.

Single-threaded by contract: channels are published from the host's UI
thread, so no locking is needed.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger("navdeck.events")


@dataclass(frozen=True, slots=True)
class NavigationChange:
    """Published by the router after every resolution, matched or not."""

    current_route: str
    previous_route: str | None


@dataclass(frozen=True, slots=True)
class LazyLoaded:
    """Published by the viewport loader when a candidate's resource is ready."""

    element: Any


class Channel[T]:
    """Broadcast channel for one payload type.

    Usage::

        changes: Channel[NavigationChange] = Channel("navigation")
        unsubscribe = changes.subscribe(lambda change: print(change.current_route))
        changes.publish(NavigationChange("/ai-tools", "/"))
        unsubscribe()

    A subscriber that raises is logged and skipped; the remaining
    subscribers still receive the event and the publisher never sees
    the error.
    """

    __slots__ = ("_subscribers", "name")

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._subscribers: list[Callable[[T], None]] = []

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register *callback*; returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: T) -> None:
        """Deliver *event* to every subscriber, in subscription order."""
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception:
                logger.exception("Subscriber %r on channel %r failed", callback, self.name)

    def __len__(self) -> int:
        return len(self._subscribers)
