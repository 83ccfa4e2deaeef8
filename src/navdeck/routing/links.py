"""Link interception policy for history-mode routing.

Decides whether an activated link stays inside the app (handled by
``Router.navigate``) or is left to the platform's default navigation.
"""

import re

# RFC 3986 scheme: ALPHA *( ALPHA / DIGIT / "+" / "-" / "." ) ":"
_SCHEME = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.\-]*:")

# Targets that keep the navigation in the current top-level context
_SAME_CONTEXT_TARGETS = frozenset({"", "_self", "_parent", "_top"})


def opens_new_context(target: str | None) -> bool:
    """True for ``_blank`` and named browsing contexts."""
    if target is None:
        return False
    return target.strip().lower() not in _SAME_CONTEXT_TARGETS


def is_in_app_link(href: str | None, target: str | None = None) -> bool:
    """Return True when a link activation should become in-app navigation.

    Links are left alone when they have no href, are absolute (a scheme
    such as ``https:`` or ``mailto:``, or protocol-relative ``//host``),
    are pure fragment links, use ``javascript:``, or open a new browsing
    context.

    Examples::

        is_in_app_link("/ai-tools")                  -> True
        is_in_app_link("https://example.com")        -> False
        is_in_app_link("#top")                       -> False
        is_in_app_link("/ai-tools", target="_blank") -> False
    """
    href = (href or "").strip()
    if not href:
        return False
    if href.startswith(("#", "//")):
        return False
    if href.lower().startswith("javascript:") or _SCHEME.match(href):
        return False
    return not opens_new_context(target)
