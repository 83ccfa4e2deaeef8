"""Site catalog — curated links loaded from a JSON array.

Each entry uses the catalog's camelCase keys::

    {
        "name": "Example",
        "url": "https://example.com",
        "description": "An example site",
        "icon": "./icons/example.svg",
        "category": "ai-tools",
        "subCategories": ["creation"],
        "weight": 10,
        "isNew": true,
        "isHot": false
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from navdeck.errors import CatalogError

logger = logging.getLogger("navdeck.catalog")

_KEYS = {
    "name": "name",
    "url": "url",
    "description": "description",
    "icon": "icon",
    "category": "category",
    "subCategories": "sub_categories",
    "weight": "weight",
    "isNew": "is_new",
    "isHot": "is_hot",
}


@dataclass(frozen=True, slots=True)
class Site:
    """One curated link."""

    name: str = ""
    url: str = "#"
    description: str = ""
    icon: str | None = None
    category: str | None = None
    sub_categories: tuple[str, ...] = ()
    weight: float = 0
    is_new: bool = False
    is_hot: bool = False

    @property
    def categories(self) -> tuple[str, ...]:
        """Primary category followed by sub-categories."""
        head = (self.category,) if self.category else ()
        return head + self.sub_categories

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Site:
        if not isinstance(data, Mapping):
            msg = f"Catalog entry must be an object, got {type(data).__name__}"
            raise CatalogError(msg)

        unknown = sorted(set(data) - set(_KEYS))
        if unknown:
            logger.debug("Ignoring unknown catalog key(s) %s on %r", ", ".join(unknown), data.get("name"))

        values = {_KEYS[k]: v for k, v in data.items() if k in _KEYS and v is not None}
        sub = values.get("sub_categories", ())
        if isinstance(sub, str) or not isinstance(sub, Iterable):
            msg = f"subCategories must be a list, got {sub!r}"
            raise CatalogError(msg)
        values["sub_categories"] = tuple(str(s) for s in sub)
        try:
            values["weight"] = float(values.get("weight", 0))
        except (TypeError, ValueError):
            msg = f"weight must be a number, got {values['weight']!r}"
            raise CatalogError(msg) from None
        for key in ("name", "url", "description", "icon", "category"):
            if key in values:
                values[key] = str(values[key])
        for key in ("is_new", "is_hot"):
            values[key] = bool(values.get(key, False))
        return cls(**values)


def parse_catalog(data: Any) -> list[Site]:
    """Convert decoded catalog JSON into ``Site`` records."""
    if not isinstance(data, list):
        msg = f"Catalog must be a JSON array, got {type(data).__name__}"
        raise CatalogError(msg)
    return [Site.from_json(entry) for entry in data]


def load_catalog(path: str | Path) -> list[Site]:
    """Read and parse a catalog file."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read catalog {str(path)!r}: {exc.strerror}"
        raise CatalogError(msg) from exc
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in catalog {str(path)!r}: {exc}"
        raise CatalogError(msg) from exc

    sites = parse_catalog(data)
    logger.info("Loaded %d sites from %s", len(sites), path)
    return sites


def group_by_category(sites: Iterable[Site], category_ids: Iterable[str]) -> dict[str, list[Site]]:
    """Group *sites* under each known category id.

    A site appears under its primary category and under every listed
    sub-category. Unknown categories are skipped. Each group is sorted
    by weight, highest first; equal weights keep catalog order.
    """
    groups: dict[str, list[Site]] = {cid: [] for cid in category_ids}
    for site in sites:
        for cid in dict.fromkeys(site.categories):
            if cid in groups:
                groups[cid].append(site)
    for members in groups.values():
        members.sort(key=lambda s: s.weight, reverse=True)
    return groups
