"""Host platform contract.

The router and the viewport loader never touch a browser directly; they
talk to a ``Host``. A host provides the address bar (``Location``), the
session history stack (``History``), the document, typed platform
events, intersection observation, and resource fetching.

Everything here is called from one UI thread. Platform callbacks
(listeners, intersection reports, fetch completion) are delivered
asynchronously relative to the code that triggered them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol

from bs4 import BeautifulSoup, Tag


class HostEvent(Enum):
    """Platform events a host can deliver to listeners."""

    CLICK = "click"
    POPSTATE = "popstate"
    HASHCHANGE = "hashchange"
    RESIZE = "resize"
    SCROLL = "scroll"
    INPUT = "input"


@dataclass(slots=True)
class Event:
    """A platform event. Listeners may cancel its default action."""

    kind: HostEvent
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


@dataclass(slots=True)
class ClickEvent(Event):
    """An activation on an element (mouse click, Enter on a link)."""

    target: Tag | None = None


@dataclass(slots=True)
class InputEvent(Event):
    """The value of a form control changed (a keystroke in a text box)."""

    target: Tag | None = None
    value: str = ""


@dataclass(frozen=True, slots=True)
class IntersectionEntry:
    """One element's visibility report, as delivered by an observer."""

    target: Tag
    is_intersecting: bool
    intersection_ratio: float = 0.0


type Listener = Callable[[Event], None]
type IntersectionCallback = Callable[[list[IntersectionEntry]], None]


class Location(Protocol):
    """The address currently shown by the host."""

    @property
    def pathname(self) -> str: ...

    @property
    def hash(self) -> str: ...

    def set_hash(self, fragment: str) -> None:
        """Assign the fragment. Fires ``HASHCHANGE`` asynchronously when it changes."""
        ...

    def assign(self, href: str) -> None:
        """Full navigation: the document is reloaded from *href*."""
        ...


class History(Protocol):
    """The host's session history stack."""

    def push_state(self, url: str) -> None: ...

    def replace_state(self, url: str) -> None: ...

    def back(self) -> None: ...

    def forward(self) -> None: ...


class IntersectionObserver(Protocol):
    """Reports when watched elements enter or leave the (expanded) viewport."""

    def observe(self, element: Tag) -> None: ...

    def unobserve(self, element: Tag) -> None: ...

    def disconnect(self) -> None: ...


class Host(Protocol):
    """Everything the router and the loader need from the platform."""

    @property
    def location(self) -> Location: ...

    @property
    def history(self) -> History: ...

    @property
    def document(self) -> BeautifulSoup: ...

    @property
    def supports_intersection_observer(self) -> bool: ...

    @property
    def scroll_y(self) -> int: ...

    def listen(self, kind: HostEvent, listener: Listener) -> None: ...

    def unlisten(self, kind: HostEvent, listener: Listener) -> None: ...

    def create_intersection_observer(
        self,
        callback: IntersectionCallback,
        *,
        root_margin: str,
        threshold: float,
    ) -> IntersectionObserver: ...

    def fetch_resource(self, url: str, on_complete: Callable[[], None]) -> None:
        """Start fetching *url*; call *on_complete* once it has loaded."""
        ...

    def call_soon(self, callback: Callable[[], Any]) -> None:
        """Queue *callback* to run after the current task."""
        ...

    def scroll_to(self, y: int) -> None:
        """Scroll the viewport to vertical offset *y*; fires ``SCROLL``."""
        ...
