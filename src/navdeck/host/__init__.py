"""Host platform — the contract the core runs against, and a headless implementation."""

from navdeck.host.headless import HeadlessHost
from navdeck.host.protocol import (
    ClickEvent,
    Event,
    Host,
    HostEvent,
    InputEvent,
    IntersectionEntry,
    IntersectionObserver,
)

__all__ = [
    "ClickEvent",
    "Event",
    "HeadlessHost",
    "Host",
    "HostEvent",
    "InputEvent",
    "IntersectionEntry",
    "IntersectionObserver",
]
