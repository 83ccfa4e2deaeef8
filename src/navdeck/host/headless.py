"""Headless host — an in-memory browser window over BeautifulSoup.

Used by the test suite and by tooling that needs to drive a rendered
page without a browser. It models the parts of the platform the core
depends on:

- a location and a session history stack (``push_state`` is silent;
  ``back``/``forward`` fire ``POPSTATE``, fragment changes fire
  ``HASHCHANGE``)
- click activation with a default action (full navigation for links)
- text input (``type_text``) firing ``INPUT``
- intersection observation driven by ``reveal()`` / ``conceal()``
- resource fetches, completed immediately or on the task queue

Asynchronous platform callbacks go through a FIFO task queue. Nothing
runs until ``run_pending()`` drains it, which keeps tests deterministic.

Usage::

    host = HeadlessHost(html, url="/ai-tools")
    router = Router(host)
    router.init()
    host.click(host.document.select_one("a.nav-link"))
    host.run_pending()
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Callable
from typing import Any
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup, Tag

from navdeck.host.dom import closest
from navdeck.host.protocol import (
    ClickEvent,
    Event,
    HostEvent,
    InputEvent,
    IntersectionCallback,
    IntersectionEntry,
    Listener,
)

_ORIGIN = "http://headless.invalid"


def _split(url: str, base: str) -> tuple[str, str]:
    """Resolve *url* against *base*; return ``(pathname, hash)``."""
    parts = urlsplit(urljoin(_ORIGIN + base, url))
    return parts.path or "/", f"#{parts.fragment}" if parts.fragment else ""


class HeadlessLocation:
    """Address bar state. Mutated only through the host and its history."""

    __slots__ = ("_host", "hash", "pathname")

    def __init__(self, host: HeadlessHost, pathname: str, hash: str) -> None:
        self._host = host
        self.pathname = pathname
        self.hash = hash

    @property
    def href(self) -> str:
        return self.pathname + self.hash

    def set_hash(self, fragment: str) -> None:
        fragment = fragment if fragment.startswith("#") else f"#{fragment}"
        if fragment == self.hash:
            return
        self._host.history._push(self.pathname, fragment)
        self._host._queue_event(Event(HostEvent.HASHCHANGE))

    def assign(self, href: str) -> None:
        if href.startswith("#"):
            if len(href) > 1:
                self.set_hash(href)
            return
        pathname, fragment = _split(href, self.pathname)
        if pathname == self.pathname and fragment:
            self.set_hash(fragment)
            return
        self._host.history._push(pathname, fragment)
        self._host.page_loads += 1


class HeadlessHistory:
    """Session history: a list of ``(pathname, hash)`` entries and a cursor."""

    __slots__ = ("_entries", "_host", "_index")

    def __init__(self, host: HeadlessHost, pathname: str, hash: str) -> None:
        self._host = host
        self._entries: list[tuple[str, str]] = [(pathname, hash)]
        self._index = 0

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> list[str]:
        return [p + h for p, h in self._entries]

    def push_state(self, url: str) -> None:
        self._push(*_split(url, self._host.location.pathname))

    def replace_state(self, url: str) -> None:
        entry = _split(url, self._host.location.pathname)
        self._entries[self._index] = entry
        self._apply(entry)

    def back(self) -> None:
        self._traverse(-1)

    def forward(self) -> None:
        self._traverse(1)

    def _push(self, pathname: str, hash: str) -> None:
        del self._entries[self._index + 1 :]
        self._entries.append((pathname, hash))
        self._index += 1
        self._apply((pathname, hash))

    def _traverse(self, delta: int) -> None:
        target = self._index + delta
        if not 0 <= target < len(self._entries):
            return
        old_hash = self._host.location.hash
        self._index = target
        self._apply(self._entries[target])
        self._host._queue_event(Event(HostEvent.POPSTATE))
        if self._host.location.hash != old_hash:
            self._host._queue_event(Event(HostEvent.HASHCHANGE))

    def _apply(self, entry: tuple[str, str]) -> None:
        location = self._host.location
        location.pathname, location.hash = entry


class HeadlessIntersectionObserver:
    """Intersection observer driven by the host's visible set."""

    __slots__ = ("_callback", "_host", "_watched", "root_margin", "threshold")

    def __init__(
        self,
        host: HeadlessHost,
        callback: IntersectionCallback,
        root_margin: str,
        threshold: float,
    ) -> None:
        self._host = host
        self._callback = callback
        self._watched: dict[int, Tag] = {}
        self.root_margin = root_margin
        self.threshold = threshold

    @property
    def watched(self) -> list[Tag]:
        return list(self._watched.values())

    def observe(self, element: Tag) -> None:
        if id(element) in self._watched:
            return
        self._watched[id(element)] = element
        # Like the platform, report the initial state of visible elements
        ratio = self._host._visible.get(id(element))
        if ratio is not None:
            self._notify([element], ratio)

    def unobserve(self, element: Tag) -> None:
        self._watched.pop(id(element), None)

    def disconnect(self) -> None:
        self._watched.clear()
        if self in self._host._observers:
            self._host._observers.remove(self)

    def _notify(self, elements: list[Tag], ratio: float) -> None:
        targets = [e for e in elements if id(e) in self._watched]
        if not targets or ratio < self.threshold:
            return

        def deliver() -> None:
            # Elements unobserved while the report was queued are dropped
            entries = [
                IntersectionEntry(target=e, is_intersecting=ratio > 0, intersection_ratio=ratio)
                for e in targets
                if id(e) in self._watched
            ]
            if entries:
                self._callback(entries)

        self._host.call_soon(deliver)


class HeadlessHost:
    """In-memory implementation of the ``Host`` protocol."""

    def __init__(
        self,
        html: str = "",
        url: str = "/",
        *,
        intersection_observer: bool = True,
        immediate_resources: bool = True,
    ) -> None:
        self._document = BeautifulSoup(html, "html.parser")
        pathname, fragment = _split(url, "/")
        self._location = HeadlessLocation(self, pathname, fragment)
        self._history = HeadlessHistory(self, pathname, fragment)
        self._listeners: defaultdict[HostEvent, list[Listener]] = defaultdict(list)
        self._tasks: deque[Callable[[], Any]] = deque()
        self._observers: list[HeadlessIntersectionObserver] = []
        self._visible: dict[int, float] = {}
        self._intersection_observer = intersection_observer
        self._immediate_resources = immediate_resources
        self._scroll_y = 0
        self.page_loads = 0
        self.fetched: list[str] = []
        self.opened_windows: list[str] = []

    # -- Host protocol ---------------------------------------------------

    @property
    def location(self) -> HeadlessLocation:
        return self._location

    @property
    def history(self) -> HeadlessHistory:
        return self._history

    @property
    def document(self) -> BeautifulSoup:
        return self._document

    @property
    def supports_intersection_observer(self) -> bool:
        return self._intersection_observer

    @property
    def scroll_y(self) -> int:
        return self._scroll_y

    def listen(self, kind: HostEvent, listener: Listener) -> None:
        self._listeners[kind].append(listener)

    def unlisten(self, kind: HostEvent, listener: Listener) -> None:
        if listener in self._listeners[kind]:
            self._listeners[kind].remove(listener)

    def listener_count(self, kind: HostEvent) -> int:
        return len(self._listeners[kind])

    def create_intersection_observer(
        self,
        callback: IntersectionCallback,
        *,
        root_margin: str,
        threshold: float,
    ) -> HeadlessIntersectionObserver:
        if not self._intersection_observer:
            msg = "This host does not support intersection observation"
            raise RuntimeError(msg)
        observer = HeadlessIntersectionObserver(self, callback, root_margin, threshold)
        self._observers.append(observer)
        return observer

    def fetch_resource(self, url: str, on_complete: Callable[[], None]) -> None:
        self.fetched.append(url)
        if self._immediate_resources:
            on_complete()
        else:
            self.call_soon(on_complete)

    def call_soon(self, callback: Callable[[], Any]) -> None:
        self._tasks.append(callback)

    # -- Driving the page ------------------------------------------------

    def dispatch(self, event: Event) -> Event:
        """Deliver *event* to its listeners synchronously, in registration order."""
        for listener in list(self._listeners[event.kind]):
            listener(event)
        return event

    def click(self, element: Tag) -> ClickEvent:
        """Activate *element*; perform the default action unless prevented."""
        event = ClickEvent(HostEvent.CLICK, target=element)
        self.dispatch(event)
        if not event.default_prevented:
            anchor = closest(element, "a")
            href = anchor.get("href") if anchor is not None else None
            if anchor is not None and href:
                if anchor.get("target") == "_blank":
                    self.opened_windows.append(str(href))
                elif not str(href).startswith("javascript:"):
                    self._location.assign(str(href))
        return event

    def type_text(self, element: Tag, value: str) -> InputEvent:
        """Replace the value of a text control and fire ``INPUT``."""
        element["value"] = value
        event = InputEvent(HostEvent.INPUT, target=element, value=value)
        self.dispatch(event)
        return event

    def resize(self) -> None:
        self.dispatch(Event(HostEvent.RESIZE))

    def scroll_to(self, y: int) -> None:
        self._scroll_y = y
        self.dispatch(Event(HostEvent.SCROLL))

    def reveal(self, *elements: Tag, ratio: float = 1.0) -> None:
        """Mark *elements* as inside the viewport and notify observers."""
        for element in elements:
            self._visible[id(element)] = ratio
        for observer in list(self._observers):
            observer._notify(list(elements), ratio)

    def conceal(self, *elements: Tag) -> None:
        """Mark *elements* as outside the viewport (no report is sent)."""
        for element in elements:
            self._visible.pop(id(element), None)

    def run_pending(self) -> int:
        """Run queued tasks until the queue is empty. Returns how many ran."""
        count = 0
        while self._tasks:
            self._tasks.popleft()()
            count += 1
        return count

    def _queue_event(self, event: Event) -> None:
        self.call_soon(lambda: self.dispatch(event))
