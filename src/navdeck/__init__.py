"""navdeck — curated link navigation with client-side routing and lazy images.

Renders a categorized link catalog into one page and drives it with a
path router (no page reloads) and a viewport lazy loader (images load as
they approach the viewport).

Basic usage::

    from navdeck import HeadlessHost, NavApp, SiteConfig, load_catalog, render_page

    config = SiteConfig()
    sites = load_catalog("data/sites.json")
    host = HeadlessHost(render_page(sites, config), url="/ai-tools")

    app = NavApp(host, config)
    app.router.changes.subscribe(lambda change: print(change.current_route))
    app.start()

The core pieces work on their own against any ``Host``::

    router = Router(host, RouterConfig(mode=NavigationMode.HASH))
    router.add("/", show_home).not_found(show_missing)
    router.init()
"""

__version__ = "0.1.0"
__all__ = [
    "CatalogError",
    "Channel",
    "ConfigurationError",
    "HeadlessHost",
    "LazyLoaded",
    "LoaderConfig",
    "NavApp",
    "NavdeckError",
    "NavigationChange",
    "NavigationMode",
    "Router",
    "RouterConfig",
    "Site",
    "SiteConfig",
    "ViewportLoader",
    "load_catalog",
    "load_config",
    "render_page",
]

# name -> module that defines it
_LAZY_IMPORTS: dict[str, str] = {
    "CatalogError": "navdeck.errors",
    "Channel": "navdeck.events",
    "ConfigurationError": "navdeck.errors",
    "HeadlessHost": "navdeck.host.headless",
    "LazyLoaded": "navdeck.events",
    "LoaderConfig": "navdeck.config",
    "NavApp": "navdeck.app",
    "NavdeckError": "navdeck.errors",
    "NavigationChange": "navdeck.events",
    "NavigationMode": "navdeck.config",
    "Router": "navdeck.routing.router",
    "RouterConfig": "navdeck.config",
    "Site": "navdeck.catalog",
    "SiteConfig": "navdeck.config",
    "ViewportLoader": "navdeck.loading.loader",
    "load_catalog": "navdeck.catalog",
    "load_config": "navdeck.config",
    "render_page": "navdeck.templating.render",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import navdeck`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
