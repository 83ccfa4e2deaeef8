"""Router, loader, and site configuration.

Every config is a frozen dataclass — immutable after creation,
IDE-autocompletable, no string-key dict lookups. Mapping-based
construction (``from_mapping``) rejects unknown keys instead of
silently ignoring them.
"""

from __future__ import annotations

import re
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import Path
from typing import Any

import soupsieve

from navdeck.errors import ConfigurationError

_MARGIN_TOKEN = re.compile(r"^-?\d+(\.\d+)?(px|%)$")


class NavigationMode(Enum):
    """How the router derives the current path and writes navigation."""

    HISTORY = "history"
    HASH = "hash"


def _check_keys(cls: type, data: Mapping[str, Any]) -> None:
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(data) - known)
    if unknown:
        msg = f"Unknown {cls.__name__} option(s): {', '.join(unknown)}. Known: {', '.join(sorted(known))}"
        raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration.

    ``base_path`` is stripped from the location path when resolving and
    prepended when navigating (history mode only)::

        config = RouterConfig(mode=NavigationMode.HASH)
    """

    mode: NavigationMode = NavigationMode.HISTORY
    base_path: str = ""

    def __post_init__(self) -> None:
        if isinstance(self.mode, str):
            try:
                object.__setattr__(self, "mode", NavigationMode(self.mode))
            except ValueError:
                msg = f"Unknown navigation mode {self.mode!r}. Use 'history' or 'hash'."
                raise ConfigurationError(msg) from None
        if self.base_path and (not self.base_path.startswith("/") or self.base_path.endswith("/")):
            msg = f"base_path must start with '/' and have no trailing slash, got {self.base_path!r}"
            raise ConfigurationError(msg)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> RouterConfig:
        _check_keys(cls, data)
        return cls(**data)


@dataclass(frozen=True, slots=True)
class LoaderConfig:
    """Viewport loader configuration.

    ``root_margin`` uses CSS margin syntax (one to four ``px`` or ``%``
    values); ``threshold`` is the visible ratio that triggers loading.
    """

    selector: str = "img.lazy"
    root_margin: str = "0px 0px 200px 0px"
    threshold: float = 0.1
    loaded_class: str = "lazy-loaded"

    def __post_init__(self) -> None:
        if not self.selector.strip():
            msg = "selector must not be empty"
            raise ConfigurationError(msg)
        try:
            soupsieve.compile(self.selector)
        except soupsieve.SelectorSyntaxError as exc:
            msg = f"selector {self.selector!r} is not a valid CSS selector: {exc}"
            raise ConfigurationError(msg) from exc
        tokens = self.root_margin.split()
        if not 1 <= len(tokens) <= 4 or not all(_MARGIN_TOKEN.match(t) for t in tokens):
            msg = f"root_margin must be 1-4 px or % values, got {self.root_margin!r}"
            raise ConfigurationError(msg)
        if not 0.0 <= self.threshold <= 1.0:
            msg = f"threshold must be between 0 and 1, got {self.threshold}"
            raise ConfigurationError(msg)
        if not self.loaded_class or any(c.isspace() for c in self.loaded_class):
            msg = f"loaded_class must be a single class name, got {self.loaded_class!r}"
            raise ConfigurationError(msg)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> LoaderConfig:
        _check_keys(cls, data)
        return cls(**data)


@dataclass(frozen=True, slots=True)
class Category:
    """A top-level category: one page section and one route."""

    id: str
    title: str

    @property
    def route(self) -> str:
        return f"/{self.id}"


DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category("ai-tools", "AI Tools"),
    Category("monetization", "Monetization"),
    Category("info-gap", "Info Gap"),
    Category("data-analysis", "Data Analysis"),
    Category("creation", "Creation"),
)


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Site configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = SiteConfig(title="My Links", router=RouterConfig(base_path="/links"))
    """

    # Page
    title: str = "Navdeck"
    tagline: str = "Curated links, sorted by category"
    not_found_title: str = "Page not found"

    # Catalog
    catalog: str | Path = "data/sites.json"
    default_icon: str = "./icons/default-icon.svg"
    categories: tuple[Category, ...] = DEFAULT_CATEGORIES

    # Collaborators
    search_min_length: int = 2
    back_to_top_offset: int = 300

    # Core
    router: RouterConfig = field(default_factory=RouterConfig)
    loader: LoaderConfig = field(
        default_factory=lambda: LoaderConfig(selector="img.lazy, .site-icon.lazy")
    )

    def __post_init__(self) -> None:
        ids = [c.id for c in self.categories]
        duplicates = sorted({i for i in ids if ids.count(i) > 1})
        if duplicates:
            msg = f"Duplicate category id(s): {', '.join(duplicates)}"
            raise ConfigurationError(msg)

    def category(self, category_id: str) -> Category | None:
        """Return the category with *category_id*, or None."""
        for category in self.categories:
            if category.id == category_id:
                return category
        return None

    def page_title(self, heading: str | None = None) -> str:
        """Document title for a section heading, or the home title."""
        if heading is None:
            return f"{self.title} - {self.tagline}"
        return f"{heading} - {self.title}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SiteConfig:
        """Build from a plain mapping (e.g. parsed TOML).

        Nested ``router`` / ``loader`` tables and a ``categories`` list of
        ``{id, title}`` tables are converted to their config types.
        """
        _check_keys(cls, data)
        values = dict(data)
        if "router" in values:
            values["router"] = RouterConfig.from_mapping(values["router"])
        if "loader" in values:
            values["loader"] = LoaderConfig.from_mapping(values["loader"])
        if "categories" in values:
            categories = []
            for entry in values["categories"]:
                _check_keys(Category, entry)
                try:
                    categories.append(Category(id=entry["id"], title=entry["title"]))
                except KeyError as exc:
                    msg = f"Category entry is missing {exc.args[0]!r}: {entry!r}"
                    raise ConfigurationError(msg) from None
            values["categories"] = tuple(categories)
        return cls(**values)


def load_config(path: str | Path) -> SiteConfig:
    """Load a ``navdeck.toml`` file.

    Layout::

        [site]
        title = "My Links"

        [router]
        mode = "hash"

        [loader]
        threshold = 0.25

        [[categories]]
        id = "ai-tools"
        title = "AI Tools"
    """
    try:
        with open(path, "rb") as fh:
            doc = tomllib.load(fh)
    except OSError as exc:
        msg = f"Cannot read config file {str(path)!r}: {exc.strerror}"
        raise ConfigurationError(msg) from exc
    except tomllib.TOMLDecodeError as exc:
        msg = f"Invalid TOML in {str(path)!r}: {exc}"
        raise ConfigurationError(msg) from exc

    unknown = sorted(set(doc) - {"site", "router", "loader", "categories"})
    if unknown:
        msg = f"Unknown config table(s) in {str(path)!r}: {', '.join(unknown)}"
        raise ConfigurationError(msg)

    data: dict[str, Any] = dict(doc.get("site", {}))
    for key in ("router", "loader", "categories"):
        if key in doc:
            data[key] = doc[key]
    return SiteConfig.from_mapping(data)
