"""Ordered route table and route state.

The table maps a route pattern to a zero-argument handler. A pattern is
first tried as a literal path; when no literal entry matches, every
entry is reinterpreted as a regular expression anchored at both ends
and tried in registration order.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger("navdeck.router")

type RouteHandler = Callable[[], Any]


@dataclass(frozen=True, slots=True)
class RouteState:
    """The current and previous resolved paths.

    Replaced as a whole on every navigation event, so the two fields can
    never be observed out of step.
    """

    current_route: str | None = None
    previous_route: str | None = None

    def advance(self, path: str) -> RouteState:
        """Return the state after resolving *path*."""
        return RouteState(current_route=path, previous_route=self.current_route)


class RouteTable:
    """Pattern → handler mapping that preserves registration order.

    Re-registering a pattern replaces its handler in place (the pattern
    keeps its original position). Regular expressions are compiled
    lazily and cached; a pattern that fails to compile is remembered as
    permanently non-matching.
    """

    __slots__ = ("_compiled", "_errors", "_handlers")

    def __init__(self) -> None:
        self._handlers: dict[str, RouteHandler] = {}
        self._compiled: dict[str, re.Pattern[str] | None] = {}
        self._errors: dict[str, str] = {}

    def add(self, pattern: str, handler: RouteHandler) -> None:
        self._handlers[pattern] = handler

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)

    @property
    def patterns(self) -> list[str]:
        """Registered patterns, in registration order."""
        return list(self._handlers)

    def compile_pattern(self, pattern: str) -> re.Pattern[str] | None:
        """Compile *pattern* as ``^pattern$``; None if it is not a valid regex."""
        if pattern in self._compiled:
            return self._compiled[pattern]
        try:
            regex: re.Pattern[str] | None = re.compile(f"^{pattern}$")
        except re.error as exc:
            regex = None
            self._errors[pattern] = str(exc)
            logger.debug("Route pattern %r is not a valid regular expression (%s); it will never match", pattern, exc)
        self._compiled[pattern] = regex
        return regex

    def resolve(self, path: str) -> RouteHandler | None:
        """Return the handler for *path*, or None when nothing matches.

        Exact entries win over patterns; among patterns, the earliest
        registered match wins.
        """
        if path in self._handlers:
            return self._handlers[path]

        for pattern, handler in self._handlers.items():
            regex = self.compile_pattern(pattern)
            if regex is not None and regex.fullmatch(path):
                return handler
        return None

    def invalid_patterns(self) -> dict[str, str]:
        """Compile every pattern; return ``{pattern: error}`` for those that fail."""
        for pattern in self._handlers:
            self.compile_pattern(pattern)
        return {p: self._errors[p] for p in self._handlers if p in self._errors}
