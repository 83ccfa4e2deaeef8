"""navdeck CLI — render the navigation page and validate the catalog.

Entry point registered as ``navdeck`` in ``pyproject.toml``::

    [project.scripts]
    navdeck = "navdeck.cli:main"
"""

import argparse
import logging
import sys


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("catalog", help="Path to the sites JSON catalog")
    parser.add_argument("-c", "--config", default=None, help="Path to a navdeck.toml file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``navdeck`` command."""
    parser = argparse.ArgumentParser(
        prog="navdeck",
        description="navdeck — curated link navigation with client-side routing and lazy images.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- navdeck build ----------------------------------------------------
    build_parser = subparsers.add_parser("build", help="Render the navigation page")
    _add_common(build_parser)
    build_parser.add_argument(
        "-o",
        "--output",
        default="index.html",
        help="Output HTML file (default: index.html)",
    )

    # -- navdeck check ----------------------------------------------------
    check_parser = subparsers.add_parser("check", help="Validate the catalog and routes")
    _add_common(check_parser)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "build":
        from navdeck.cli._build import run_build

        run_build(args)
    elif args.command == "check":
        from navdeck.cli._check import run_check

        run_check(args)
