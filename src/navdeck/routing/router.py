"""Client-side path router.

Resolves the host's current location to a registered handler without
reloading the page. In history mode it intercepts in-app link
activations and back/forward navigation; in hash mode it follows the
location fragment.

Every resolution, matched or not, ends with a ``NavigationChange``
published on the router's channel.
"""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlsplit

from navdeck.config import NavigationMode, RouterConfig
from navdeck.events import Channel, NavigationChange
from navdeck.host.dom import closest
from navdeck.host.protocol import ClickEvent, Event, Host, HostEvent
from navdeck.routing.links import is_in_app_link
from navdeck.routing.table import RouteHandler, RouteState, RouteTable

logger = logging.getLogger("navdeck.router")

# Placeholder origin for resolving relative hrefs; only the path is kept
_ORIGIN = "http://router.invalid"


class Router:
    """Client-side router bound to one host.

    Usage::

        router = Router(host, RouterConfig(mode=NavigationMode.HISTORY))
        router.add("/", show_home).add("/ai-tools", show_ai_tools)
        router.not_found(show_missing)
        router.changes.subscribe(update_breadcrumbs)
        router.init()

    The route table and route state belong to this instance; they change
    only through ``add``, ``not_found``, ``navigate``, and platform
    navigation events.
    """

    __slots__ = (
        "_changes",
        "_config",
        "_host",
        "_initialized",
        "_not_found",
        "_state",
        "_table",
    )

    def __init__(
        self,
        host: Host,
        config: RouterConfig | None = None,
        *,
        changes: Channel[NavigationChange] | None = None,
    ) -> None:
        self._host = host
        self._config = config or RouterConfig()
        self._changes: Channel[NavigationChange] = changes or Channel("navigation")
        self._table = RouteTable()
        self._state = RouteState()
        self._not_found: RouteHandler | None = None
        self._initialized = False

    @property
    def config(self) -> RouterConfig:
        return self._config

    @property
    def table(self) -> RouteTable:
        return self._table

    @property
    def changes(self) -> Channel[NavigationChange]:
        """Channel receiving a ``NavigationChange`` after every resolution."""
        return self._changes

    @property
    def state(self) -> RouteState:
        return self._state

    @property
    def current_route(self) -> str | None:
        return self._state.current_route

    @property
    def previous_route(self) -> str | None:
        return self._state.previous_route

    @property
    def initialized(self) -> bool:
        return self._initialized

    # -- Registration ----------------------------------------------------

    def add(self, pattern: str, handler: RouteHandler) -> Router:
        """Register *handler* under *pattern*. Chainable.

        The pattern is not validated here; a pattern that is not a valid
        regular expression simply never matches as a pattern.
        """
        self._table.add(pattern, handler)
        return self

    def not_found(self, handler: RouteHandler) -> Router:
        """Register the handler for paths no pattern matches. Chainable."""
        self._not_found = handler
        return self

    # -- Lifecycle -------------------------------------------------------

    def init(self) -> None:
        """Wire platform listeners and resolve the current path once."""
        if self._initialized:
            logger.warning("Router.init() called twice; listeners are already wired")
        else:
            if self._config.mode is NavigationMode.HISTORY:
                self._host.listen(HostEvent.CLICK, self._handle_click)
                self._host.listen(HostEvent.POPSTATE, self._handle_location_event)
            else:
                self._host.listen(HostEvent.HASHCHANGE, self._handle_location_event)
            self._initialized = True
        self.handle_route_change()

    def destroy(self) -> None:
        """Detach platform listeners. Route table and state are kept."""
        if not self._initialized:
            return
        if self._config.mode is NavigationMode.HISTORY:
            self._host.unlisten(HostEvent.CLICK, self._handle_click)
            self._host.unlisten(HostEvent.POPSTATE, self._handle_location_event)
        else:
            self._host.unlisten(HostEvent.HASHCHANGE, self._handle_location_event)
        self._initialized = False

    # -- Navigation ------------------------------------------------------

    def navigate(self, path: str, replace: bool = False) -> None:
        """Change the location to *path* (without the base path).

        Does nothing when *path* is already the current path. In hash
        mode the resolution happens when the host reports the fragment
        change, not before this method returns.
        """
        if self.get_current_path() == path:
            logger.debug("Already at %r; navigation skipped", path)
            return

        if self._config.mode is NavigationMode.HISTORY:
            full_path = self._config.base_path + path
            if replace:
                self._host.history.replace_state(full_path)
            else:
                self._host.history.push_state(full_path)
            self.handle_route_change()
        elif replace:
            # replace_state never fires a fragment change, so resolve here
            self._host.history.replace_state(f"#{path}")
            self.handle_route_change()
        else:
            self._host.location.set_hash(f"#{path}")

    def get_current_path(self) -> str:
        """Return the current path with the base path (or ``#``) removed."""
        location = self._host.location
        if self._config.mode is NavigationMode.HASH:
            return location.hash[1:] or "/"

        stripped = self._strip_base(location.pathname)
        if stripped is None:
            return location.pathname or "/"
        return stripped or "/"

    def _strip_base(self, pathname: str) -> str | None:
        """Remove the base path from *pathname*; None when it lies outside it."""
        base = self._config.base_path
        if not base:
            return pathname
        if pathname == base or pathname.startswith(base + "/"):
            return pathname[len(base) :]
        return None

    def _link_path(self, href: str) -> str | None:
        """Resolve *href* against the current location to a router path.

        Query and fragment are dropped. Returns None for links outside
        the base path, which are left to the platform.
        """
        resolved = urlsplit(urljoin(_ORIGIN + self._host.location.pathname, href)).path or "/"
        path = self._strip_base(resolved)
        if path is None:
            return None
        return path or "/"

    def handle_route_change(self) -> None:
        """Resolve the current path and publish the change.

        State is advanced before any handler runs, so handlers already
        see the new ``current_route``. At most one handler runs. A handler
        that raises is logged; the change is still published.
        """
        path = self.get_current_path()
        state = self._state.advance(path)
        self._state = state

        handler = self._table.resolve(path)
        if handler is None:
            handler = self._not_found
            if handler is None:
                logger.debug("No route matches %r and no not-found handler is registered", path)
            else:
                logger.debug("No route matches %r; using not-found handler", path)

        if handler is not None:
            try:
                handler()
            except Exception:
                logger.exception("Route handler for %r failed", path)

        self._changes.publish(NavigationChange(current_route=path, previous_route=state.previous_route))

    # -- Platform listeners ----------------------------------------------

    def _handle_location_event(self, event: Event) -> None:
        self.handle_route_change()

    def _handle_click(self, event: Event) -> None:
        if not isinstance(event, ClickEvent) or event.target is None:
            return
        anchor = closest(event.target, "a")
        if anchor is None:
            return

        href = anchor.get("href")
        target = anchor.get("target")
        if not is_in_app_link(
            str(href) if href is not None else None,
            str(target) if target is not None else None,
        ):
            return

        path = self._link_path(str(href).strip())
        if path is None:
            return
        event.prevent_default()
        self.navigate(path)
