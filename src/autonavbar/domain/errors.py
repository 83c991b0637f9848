from __future__ import annotations

"""
Navigation Domain Exceptions.

Only raised at the configuration boundary. Everything past validation reports
problems as collected diagnostics instead of raising.
"""


class NavigationError(Exception):
    """Base class for all autonavbar errors."""


class ConfigInvalidError(NavigationError, ValueError):
    """
    Raised when navigation configuration cannot be read or normalized.

    Attributes:
        scope_key: The offending scope key, if the problem is scope-specific.
    """

    def __init__(self, message: str, scope_key: str = "") -> None:
        super().__init__(message)
        self.scope_key = scope_key
