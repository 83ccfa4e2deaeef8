"""Templating — kida environment and page/card rendering."""

from navdeck.templating.render import (
    Section,
    build_sections,
    create_environment,
    render_card,
    render_page,
)

__all__ = ["Section", "build_sections", "create_environment", "render_card", "render_page"]
