"""navdeck exception hierarchy.

Raised by configuration and catalog loading. The router and the lazy
loader never raise at runtime; they degrade to a safe default instead.
"""


class NavdeckError(Exception):
    """Base for all navdeck-specific errors."""


class ConfigurationError(NavdeckError):
    """Raised when configuration is invalid.

    Covers unknown keys, out-of-range values, and unreadable config files.
    Always raised at construction time, never during navigation.
    """


class CatalogError(NavdeckError):
    """Raised when the site catalog cannot be read or parsed."""
