"""Catalog and route validation.

Finds problems that would otherwise fail silently on the page: sites
filed under categories that do not exist, duplicate links, and route
patterns that are not valid regular expressions.

Usage::

    issues = check_site(sites, config)
    for issue in issues:
        print(f"{issue.severity.value}: {issue.message}")

    # Or via CLI:
    #   navdeck check data/sites.json
"""

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from navdeck.app import NavApp
from navdeck.catalog import Site
from navdeck.config import SiteConfig
from navdeck.host.headless import HeadlessHost
from navdeck.routing.table import RouteTable


class Severity(Enum):
    """Severity of a validation issue."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Issue:
    """A single validation issue."""

    severity: Severity
    category: str
    message: str
    site: str | None = None


def check_routes(table: RouteTable) -> list[Issue]:
    """Report patterns that can only ever match literally."""
    return [
        Issue(
            severity=Severity.WARNING,
            category="route",
            message=f"Route {pattern!r} is not a valid regular expression ({error}); it only matches the literal path",
        )
        for pattern, error in table.invalid_patterns().items()
    ]


def check_catalog(sites: Sequence[Site], config: SiteConfig) -> list[Issue]:
    """Report catalog entries that will be hidden or duplicated."""
    issues: list[Issue] = []
    known = {c.id for c in config.categories}

    if not sites:
        issues.append(Issue(Severity.ERROR, "catalog", "Catalog is empty"))

    for site in sites:
        label = site.name or site.url
        if not site.name:
            issues.append(Issue(Severity.INFO, "catalog", f"Site {site.url!r} has no name", site=label))
        if not site.url or site.url == "#":
            issues.append(Issue(Severity.WARNING, "catalog", f"Site {label!r} has no url", site=label))
        if not any(cid in known for cid in site.categories):
            issues.append(
                Issue(
                    Severity.ERROR,
                    "category",
                    f"Site {label!r} is not filed under any configured category and will never be shown",
                    site=label,
                )
            )
        for cid in site.categories:
            if cid not in known:
                issues.append(Issue(Severity.WARNING, "category", f"Site {label!r} uses unknown category {cid!r}", site=label))

    counts = Counter(site.url for site in sites if site.url and site.url != "#")
    for url, count in counts.items():
        if count > 1:
            issues.append(Issue(Severity.WARNING, "catalog", f"URL {url!r} appears {count} times"))
    return issues


def check_site(sites: Sequence[Site], config: SiteConfig) -> list[Issue]:
    """Run every check against the catalog and the routes ``NavApp`` would register."""
    app = NavApp(HeadlessHost(), config)
    return check_catalog(sites, config) + check_routes(app.router.table)
