"""navdeck application — wires the core to the rendered page.

``NavApp`` owns one ``Router`` and one ``ViewportLoader`` and hands them
to the page collaborators (category visibility, card rendering, search,
tabs, theme, back-to-top). Nothing is reached through global state: code
that needs to trigger a lazy-load rescan or follow navigation gets the
app (or its ``router.changes`` / ``loader.loaded`` channels) passed in.
"""

import logging
from collections.abc import Iterable
from functools import partial

from bs4 import BeautifulSoup, Tag
from kida import Environment

from navdeck.catalog import Site, group_by_category
from navdeck.config import SiteConfig
from navdeck.host.dom import (
    add_class,
    classes,
    remove_class,
    set_style,
    set_title,
    toggle_class,
)
from navdeck.host.protocol import ClickEvent, Event, Host, HostEvent, InputEvent
from navdeck.loading.loader import ViewportLoader
from navdeck.routing.router import Router
from navdeck.templating.render import EMPTY_MESSAGE, create_environment, render_card

logger = logging.getLogger("navdeck.app")


class NavApp:
    """The navigation front end for one rendered page.

    Usage::

        host = HeadlessHost(render_page(sites, config), url="/ai-tools")
        app = NavApp(host, config)
        app.start()
        app.router.navigate("/creation")
        host.run_pending()

    Routes: ``/`` shows every category, ``/<category-id>`` shows one, and
    any other path is redirected to ``/``.
    """

    __slots__ = ("_dark_mode", "_env", "_host", "_started", "config", "loader", "router")

    def __init__(
        self,
        host: Host,
        config: SiteConfig | None = None,
        *,
        env: Environment | None = None,
    ) -> None:
        self.config = config or SiteConfig()
        self._host = host
        self._env = env
        self._dark_mode = False
        self._started = False
        self.loader = ViewportLoader(host, self.config.loader)
        self.router = Router(host, self.config.router)

        self.router.add("/", self.show_all_categories)
        for category in self.config.categories:
            self.router.add(category.route, partial(self.show_category, category.id))
        self.router.not_found(self._redirect_home)

    @property
    def dark_mode(self) -> bool:
        return self._dark_mode

    @property
    def document(self) -> BeautifulSoup:
        return self._host.document

    # -- Lifecycle -------------------------------------------------------

    def start(self) -> None:
        """Initialize lazy loading, then routing, then the page widgets."""
        if self._started:
            return
        self.loader.init()
        self.router.init()
        self._host.listen(HostEvent.CLICK, self._handle_click)
        self._host.listen(HostEvent.SCROLL, self._handle_scroll)
        self._host.listen(HostEvent.INPUT, self._handle_input)
        self._started = True

        if self.document.body is not None:
            remove_class(self.document.body, "is-loading")
        logger.info("navdeck started at %r (%s mode)", self.router.current_route, self.config.router.mode.value)

    def destroy(self) -> None:
        """Detach every listener and stop lazy loading."""
        self._host.unlisten(HostEvent.CLICK, self._handle_click)
        self._host.unlisten(HostEvent.SCROLL, self._handle_scroll)
        self._host.unlisten(HostEvent.INPUT, self._handle_input)
        self.router.destroy()
        self.loader.destroy()
        self._started = False

    def schedule_refresh(self) -> None:
        """Rescan for lazy candidates once the current task finishes."""
        self._host.call_soon(self.loader.refresh)

    # -- Route handlers --------------------------------------------------

    def _sections(self) -> list[Tag]:
        return self.document.select("section.category")

    def show_all_categories(self) -> None:
        for section in self._sections():
            set_style(section, "display", "block")
        set_title(self.document, self.config.page_title())
        self.schedule_refresh()

    def show_category(self, category_id: str) -> None:
        for section in self._sections():
            set_style(section, "display", "block" if section.get("id") == category_id else "none")
        category = self.config.category(category_id)
        set_title(self.document, self.config.page_title(category.title if category else None))
        self.schedule_refresh()

    def _redirect_home(self) -> None:
        logger.info("No page for %r; redirecting to /", self.router.current_route)
        set_title(self.document, self.config.page_title(self.config.not_found_title))
        self._host.call_soon(partial(self.router.navigate, "/", True))

    # -- Collaborators ---------------------------------------------------

    def render_cards(self, sites: Iterable[Site]) -> None:
        """Replace every category's card list with cards for *sites*."""
        env = self._env or create_environment()
        self._env = env
        groups = group_by_category(sites, [c.id for c in self.config.categories])
        for category_id, members in groups.items():
            container = self.document.find(id=f"{category_id}-list")
            if container is None:
                continue
            container.clear()
            if not members:
                empty = self.document.new_tag("div", attrs={"class": "empty-message"})
                empty.string = EMPTY_MESSAGE
                container.append(empty)
                continue
            for site in members:
                fragment = BeautifulSoup(str(render_card(env, site, self.config)), "html.parser")
                for node in fragment.find_all(recursive=False):
                    container.append(node.extract())
        logger.debug("Rendered cards for %d categories", len(groups))
        self.schedule_refresh()

    def search(self, query: str) -> int:
        """Show only cards whose name or description contains *query*.

        Queries shorter than ``search_min_length`` reset the filter.
        Returns the number of visible cards.
        """
        needle = query.strip().lower()
        cards = self.document.select(".site-card")
        visible = 0
        for card in cards:
            if len(needle) < self.config.search_min_length:
                match = True
            else:
                name = card.select_one(".site-name")
                desc = card.select_one(".site-desc")
                haystack = " ".join(t.get_text() for t in (name, desc) if t is not None).lower()
                match = needle in haystack
            set_style(card, "display", "flex" if match else "none")
            visible += match
        return visible

    def select_tab(self, category_id: str, tab_id: str) -> None:
        """Activate a category tab; ``all`` shows every card in the section."""
        section = self.document.find("section", id=category_id)
        if section is None:
            return
        for tab in section.select(".category__tab"):
            toggle_class(tab, "active", tab.get("data-tab") == tab_id)
        for card in section.select(".site-card"):
            tagged = str(card.get("data-categories", "")).split(",")
            set_style(card, "display", "flex" if tab_id == "all" or tab_id in tagged else "none")
        self.schedule_refresh()

    def set_dark_mode(self, on: bool) -> None:
        """Switch the theme. Kept in memory only."""
        self._dark_mode = on
        root = self.document.find("html")
        if root is not None:
            root["data-theme"] = "dark" if on else "light"
        toggle = self.document.find(id="theme-toggle")
        if toggle is not None:
            if on:
                toggle["checked"] = ""
            elif "checked" in toggle.attrs:
                del toggle["checked"]

    # -- Platform listeners ----------------------------------------------

    def _handle_click(self, event: Event) -> None:
        if not isinstance(event, ClickEvent) or event.target is None:
            return
        target = event.target

        if "category__tab" in classes(target):
            event.prevent_default()
            section = target.find_parent("section")
            if section is not None and section.get("id"):
                self.select_tab(str(section["id"]), str(target.get("data-tab", "all")))
        elif target.get("id") == "theme-toggle":
            self.set_dark_mode(not self._dark_mode)
        elif target.get("id") == "back-to-top":
            self._host.scroll_to(0)

    def _handle_input(self, event: Event) -> None:
        if not isinstance(event, InputEvent) or event.target is None:
            return
        if event.target.get("id") == "search-input":
            self.search(event.value)

    def _handle_scroll(self, event: Event) -> None:
        button = self.document.find(id="back-to-top")
        if button is None:
            return
        if self._host.scroll_y > self.config.back_to_top_offset:
            add_class(button, "visible")
        else:
            remove_class(button, "visible")
