"""Lazy candidates and how each kind is promoted.

A candidate is tagged once, when it is first matched, as either an
``IMAGE`` (an ``<img>``: the deferred source becomes ``src``/``srcset``)
or a ``BACKGROUND`` (any other element: the deferred source becomes its
``background-image``). Promotion dispatches on that tag.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from bs4 import Tag

from navdeck.host.dom import set_style

DATA_SRC = "data-src"
DATA_SRCSET = "data-srcset"


def first_srcset_url(srcset: str | None) -> str | None:
    """Return the first URL of a srcset ("a.png 1x, b.png 2x" -> "a.png")."""
    if not srcset:
        return None
    for candidate in srcset.split(","):
        parts = candidate.split()
        if parts:
            return parts[0]
    return None


class TargetKind(Enum):
    IMAGE = "image"
    BACKGROUND = "background"


@dataclass(frozen=True, slots=True)
class LazyCandidate:
    """An element waiting for its deferred resource."""

    element: Tag
    kind: TargetKind

    @property
    def source(self) -> str | None:
        value = self.element.get(DATA_SRC)
        return str(value) if value else None

    @property
    def source_set(self) -> str | None:
        value = self.element.get(DATA_SRCSET)
        return str(value) if value else None

    @property
    def fetch_url(self) -> str | None:
        """The URL whose completion marks the candidate loaded."""
        if self.source:
            return self.source
        return first_srcset_url(self.source_set)

    def apply(self) -> None:
        """Copy the deferred source(s) into the live attributes."""
        _PROMOTERS[self.kind](self.element, self.source, self.source_set)

    def clear(self) -> None:
        """Drop the deferred-source attributes once the resource is loaded."""
        for attr in (DATA_SRC, DATA_SRCSET):
            if attr in self.element.attrs:
                del self.element[attr]


def classify(element: Tag) -> LazyCandidate:
    kind = TargetKind.IMAGE if element.name == "img" else TargetKind.BACKGROUND
    return LazyCandidate(element=element, kind=kind)


def _promote_image(element: Tag, src: str | None, srcset: str | None) -> None:
    if src:
        element["src"] = src
    if srcset:
        element["srcset"] = srcset


def _promote_background(element: Tag, src: str | None, srcset: str | None) -> None:
    url = src or first_srcset_url(srcset)
    if url:
        set_style(element, "background-image", f"url({url})")


_PROMOTERS: dict[TargetKind, Callable[[Tag, str | None, str | None], None]] = {
    TargetKind.IMAGE: _promote_image,
    TargetKind.BACKGROUND: _promote_background,
}
