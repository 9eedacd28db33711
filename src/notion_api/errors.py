"""Typed exception hierarchy for Notion-related errors.

This module defines the root exception of the site generator and all custom
exceptions used by the Notion client library. All exceptions inherit from
SiteGenError for easy catching and include descriptive messages with context
to help with debugging.
"""


class SiteGenError(Exception):
    """Base exception for all notion-sitegen errors.

    Use this to catch any application-level error from the generator.
    """
    pass


class NotionError(SiteGenError):
    """Base exception for all Notion API errors."""
    pass


class InvalidCredentialsError(NotionError):
    """Raised when the integration token is missing or rejected."""

    def __init__(self, endpoint: str):
        super().__init__(
            f"Notion token is missing or invalid (endpoint: {endpoint})"
        )
        self.endpoint = endpoint


class PageNotFoundError(NotionError):
    """Raised when a requested page, block or database does not exist."""

    def __init__(self, object_id: str):
        super().__init__(f"Notion object {object_id} not found")
        self.object_id = object_id


class APIUnreachableError(NotionError):
    """Raised when the Notion API is not available or unreachable."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(NotionError):
    """Raised when API access fails after retries or due to access restrictions."""

    def __init__(self, message: str = "Notion API failure (after 3 retries)"):
        super().__init__(message)


class MalformedResponseError(NotionError):
    """Raised when a Notion object lacks data the generator cannot do without."""

    def __init__(self, object_id: str, reason: str):
        super().__init__(f"Malformed Notion object {object_id}: {reason}")
        self.object_id = object_id
        self.reason = reason
