"""Kida environment setup and page rendering.

The page is rendered once, server-free: one section per configured
category, each with its filter tabs and site cards. Cards are rendered
individually so the same template serves both the static page and
client-side re-rendering (``NavApp.render_cards``).
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

from kida import Environment, PackageLoader
from kida.template import Markup

from navdeck.catalog import Site, group_by_category
from navdeck.config import Category, SiteConfig
from navdeck.templating.filters import BUILTIN_FILTERS, NO_DESCRIPTION, UNTITLED_SITE

EMPTY_MESSAGE = "Nothing here yet, stay tuned..."


@dataclass(slots=True)
class Section:
    """Everything the page template needs for one category."""

    category: Category
    cards: list[Markup] = field(default_factory=list)
    tabs: list[Category] = field(default_factory=list)


def create_environment() -> Environment:
    """Create the kida environment for navdeck's bundled templates."""
    env = Environment(
        loader=PackageLoader("navdeck.templating", "templates"),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.update_filters(BUILTIN_FILTERS)
    return env


def render_card(env: Environment, site: Site, config: SiteConfig) -> Markup:
    """Render one site card. Missing fields fall back to placeholders."""
    template = env.get_template("card.html")
    html = template.render(
        {
            "site": site,
            "name": site.name or UNTITLED_SITE,
            "description": site.description or NO_DESCRIPTION,
            "icon": site.icon or config.default_icon,
            "url": site.url or "#",
        }
    )
    return Markup(html.strip())


def build_sections(env: Environment, sites: Iterable[Site], config: SiteConfig) -> list[Section]:
    """Group *sites* by category and render their cards.

    A section's tabs are the other configured categories its sites are
    also filed under, in configuration order.
    """
    groups = group_by_category(sites, [c.id for c in config.categories])
    sections: list[Section] = []
    for category in config.categories:
        members = groups[category.id]
        tagged = {cid for site in members for cid in site.categories}
        sections.append(
            Section(
                category=category,
                cards=[render_card(env, site, config) for site in members],
                tabs=[c for c in config.categories if c.id != category.id and c.id in tagged],
            )
        )
    return sections


def render_page(sites: Iterable[Site], config: SiteConfig, env: Environment | None = None) -> str:
    """Render the full navigation page."""
    env = env or create_environment()
    template = env.get_template("page.html")
    return template.render(
        {
            "title": config.page_title(),
            "site_title": config.title,
            "sections": build_sections(env, sites, config),
            "empty_message": EMPTY_MESSAGE,
        }
    )
