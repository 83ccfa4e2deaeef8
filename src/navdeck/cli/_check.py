"""``navdeck check`` — catalog and route validation command.

Prints one line per issue. Exits with code 1 if any error is found.
"""

import argparse

from navdeck.checks import Severity, check_site
from navdeck.cli._load import load_inputs


def run_check(args: argparse.Namespace) -> None:
    config, sites = load_inputs(args)
    issues = check_site(sites, config)

    for issue in issues:
        print(f"{issue.severity.value}: [{issue.category}] {issue.message}")

    errors = sum(1 for issue in issues if issue.severity is Severity.ERROR)
    warnings = sum(1 for issue in issues if issue.severity is Severity.WARNING)
    print(f"{len(sites)} sites checked: {errors} error(s), {warnings} warning(s)")
    if errors:
        raise SystemExit(1)
