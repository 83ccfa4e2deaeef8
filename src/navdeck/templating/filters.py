"""Template filters registered on every navdeck kida environment."""

from navdeck.catalog import Site

UNTITLED_SITE = "Untitled site"
NO_DESCRIPTION = "No description yet"


def data_categories(site: Site) -> str:
    """Comma-joined category ids for the card's ``data-categories`` attribute."""
    return ",".join(site.categories)


BUILTIN_FILTERS = {
    "data_categories": data_categories,
}
