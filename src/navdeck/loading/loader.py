"""Viewport loader — defers images until they approach the viewport.

Watches every element matching the configured selector. When the host's
intersection observer reports one as intersecting, the element is
unwatched and promoted: its deferred source is copied into the live
attribute and the host fetches it. When the fetch completes the element
gets the loaded class and loses its ``data-src``/``data-srcset``.

Per element::

    UNWATCHED -> WATCHED -> LOADING -> LOADED

Each element is promoted at most once. Hosts without intersection
observation get the fallback policy: every candidate is promoted
immediately.
"""

from __future__ import annotations

import logging
from enum import Enum

from bs4 import Tag

from navdeck.config import LoaderConfig
from navdeck.events import Channel, LazyLoaded
from navdeck.host.dom import add_class, has_class
from navdeck.host.protocol import Event, Host, HostEvent, IntersectionEntry, IntersectionObserver
from navdeck.loading.targets import LazyCandidate, classify

logger = logging.getLogger("navdeck.loader")


class CandidateState(Enum):
    UNWATCHED = "unwatched"
    WATCHED = "watched"
    LOADING = "loading"
    LOADED = "loaded"


class ViewportLoader:
    """Lazy image loader bound to one host.

    Usage::

        loader = ViewportLoader(host, LoaderConfig(selector="img.lazy"))
        loader.init()
        ...
        render_more_cards()
        loader.refresh()

    The set of watched elements belongs to this instance. Other code may
    only ask for a rescan (``refresh``) or tear the loader down
    (``destroy``).
    """

    __slots__ = (
        "_config",
        "_destroyed",
        "_fallback",
        "_host",
        "_initialized",
        "_loaded",
        "_observer",
        "_promoted",
        "_settled",
        "_watched",
    )

    def __init__(
        self,
        host: Host,
        config: LoaderConfig | None = None,
        *,
        loaded: Channel[LazyLoaded] | None = None,
    ) -> None:
        self._host = host
        self._config = config or LoaderConfig()
        self._loaded: Channel[LazyLoaded] = loaded or Channel("lazy-loaded")
        self._observer: IntersectionObserver | None = None
        # Keyed by id(element); values keep the element alive so ids stay unique
        self._watched: dict[int, LazyCandidate] = {}
        self._promoted: dict[int, LazyCandidate] = {}
        self._settled: set[int] = set()
        self._initialized = False
        self._fallback = False
        self._destroyed = False

    @property
    def config(self) -> LoaderConfig:
        return self._config

    @property
    def loaded(self) -> Channel[LazyLoaded]:
        """Channel receiving a ``LazyLoaded`` when a candidate finishes loading."""
        return self._loaded

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def fallback(self) -> bool:
        """True when the host lacks intersection observation."""
        return self._fallback

    @property
    def watched_count(self) -> int:
        return len(self._watched)

    def state_of(self, element: Tag) -> CandidateState:
        key = id(element)
        if key in self._settled or has_class(element, self._config.loaded_class):
            return CandidateState.LOADED
        if key in self._promoted:
            return CandidateState.LOADING
        if key in self._watched:
            return CandidateState.WATCHED
        return CandidateState.UNWATCHED

    # -- Lifecycle -------------------------------------------------------

    def init(self) -> None:
        """Start watching candidates, or load them all when unsupported."""
        if self._destroyed:
            logger.warning("ViewportLoader was destroyed; construct a new loader instead of re-initializing")
            return
        if self._initialized or self._fallback:
            return

        if not self._host.supports_intersection_observer:
            logger.debug("Intersection observation unavailable; loading all candidates eagerly")
            self._fallback = True
            self.load_all()
            return

        self._observer = self._host.create_intersection_observer(
            self._on_intersection,
            root_margin=self._config.root_margin,
            threshold=self._config.threshold,
        )
        self._initialized = True
        self.observe()
        self._host.listen(HostEvent.RESIZE, self._handle_resize)

    def destroy(self) -> None:
        """Stop all observation and detach the resize listener. Not resumable."""
        if self._observer is not None:
            self._observer.disconnect()
            self._observer = None
        self._host.unlisten(HostEvent.RESIZE, self._handle_resize)
        self._watched.clear()
        self._initialized = False
        self._fallback = False
        self._destroyed = True

    # -- Scanning --------------------------------------------------------

    def _prune_detached(self) -> None:
        """Forget elements that are no longer part of the document."""
        document = self._host.document
        for key, candidate in list(self._watched.items()):
            if not _is_attached(candidate.element, document):
                del self._watched[key]
                if self._observer is not None:
                    self._observer.unobserve(candidate.element)
        for key, candidate in list(self._promoted.items()):
            if not _is_attached(candidate.element, document):
                del self._promoted[key]
                self._settled.discard(key)

    def _pending_candidates(self) -> list[Tag]:
        self._prune_detached()
        loaded_class = self._config.loaded_class
        return [
            element
            for element in self._host.document.select(self._config.selector)
            if not has_class(element, loaded_class)
            and id(element) not in self._watched
            and id(element) not in self._promoted
        ]

    def observe(self) -> None:
        """Watch every matching candidate not yet watched, loading, or loaded."""
        if self._observer is None:
            return
        for element in self._pending_candidates():
            self._watched[id(element)] = classify(element)
            self._observer.observe(element)

    def refresh(self) -> None:
        """Pick up candidates revealed since the last scan.

        Call after rendering new content or un-hiding a section. Safe at
        any time; does nothing on an uninitialized or destroyed loader.
        In fallback mode new candidates are loaded straight away.
        """
        if self._initialized:
            self.observe()
        elif self._fallback:
            self.load_all()

    def load_all(self) -> None:
        """Promote every pending candidate now (the fallback policy)."""
        for element in self._pending_candidates():
            self._promote(classify(element))

    # -- Promotion -------------------------------------------------------

    def load_image(self, element: Tag) -> None:
        """Promote *element* now, whether or not it is visible."""
        candidate = self._watched.pop(id(element), None)
        if candidate is not None and self._observer is not None:
            self._observer.unobserve(element)
        self._promote(candidate or classify(element))

    def _promote(self, candidate: LazyCandidate) -> None:
        key = id(candidate.element)
        if key in self._promoted:
            return
        self._promoted[key] = candidate

        url = candidate.fetch_url
        if url is None:
            logger.debug("Lazy candidate <%s> has no data-src; nothing to load", candidate.element.name)
            return

        candidate.apply()
        self._host.fetch_resource(url, lambda: self._complete(candidate))

    def _complete(self, candidate: LazyCandidate) -> None:
        key = id(candidate.element)
        if key in self._settled:
            return
        if key in self._promoted:
            self._settled.add(key)
        add_class(candidate.element, self._config.loaded_class)
        candidate.clear()
        self._loaded.publish(LazyLoaded(element=candidate.element))

    # -- Platform callbacks ----------------------------------------------

    def _on_intersection(self, entries: list[IntersectionEntry]) -> None:
        for entry in entries:
            if not entry.is_intersecting:
                continue
            candidate = self._watched.pop(id(entry.target), None)
            if self._observer is not None:
                self._observer.unobserve(entry.target)
            if candidate is not None:
                self._promote(candidate)

    def _handle_resize(self, event: Event) -> None:
        if self._initialized:
            self.observe()


def _is_attached(element: Tag, document: Tag) -> bool:
    return any(parent is document for parent in element.parents)
