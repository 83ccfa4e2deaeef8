"""Shared config and catalog loading for CLI commands."""

import argparse
import sys

from navdeck.catalog import Site, load_catalog
from navdeck.config import SiteConfig, load_config
from navdeck.errors import NavdeckError


def load_inputs(args: argparse.Namespace) -> tuple[SiteConfig, list[Site]]:
    """Load ``args.config`` (if any) and ``args.catalog``.

    Prints the error and exits with code 1 on any navdeck error.
    """
    try:
        config = load_config(args.config) if args.config else SiteConfig()
        sites = load_catalog(args.catalog)
    except NavdeckError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    return config, sites
