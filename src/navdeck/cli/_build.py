"""``navdeck build`` — render the navigation page to an HTML file."""

import argparse
import logging
from pathlib import Path

from navdeck.cli._load import load_inputs
from navdeck.templating.render import render_page

logger = logging.getLogger("navdeck.cli")


def run_build(args: argparse.Namespace) -> None:
    config, sites = load_inputs(args)
    html = render_page(sites, config)

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(html, encoding="utf-8")
    logger.info("Wrote %s", output)
    print(f"Rendered {len(sites)} sites into {len(config.categories)} categories -> {output}")
