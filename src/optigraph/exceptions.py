"""Exception hierarchy shared by the graph client, locale table and admin API."""

from __future__ import annotations


class GraphError(RuntimeError):
    """Base class for optigraph failures."""


class ConfigurationError(GraphError):
    """Raised when required configuration is missing or malformed.

    Configuration errors are fatal: they are raised where configuration is
    constructed and never replaced by defaults.
    """


class GraphRequestError(GraphError):
    """Raised when the graph backend rejects a pinned-results call."""

    def __init__(self, action: str, status_code: int, reason: str, detail: str) -> None:
        self.action = action
        self.status_code = status_code
        self.reason = reason
        self.detail = detail
        super().__init__(f"Failed to {action}: {status_code} {reason} - {detail}")
