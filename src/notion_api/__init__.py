"""Notion client library for the site generator.

This package provides Python abstractions over the Notion REST API, turning
database rows and block children into the typed page model.
"""

from .errors import (
    SiteGenError,
    NotionError,
    InvalidCredentialsError,
    PageNotFoundError,
    APIUnreachableError,
    APIAccessError,
    MalformedResponseError,
)

__all__ = [
    "SiteGenError",
    "NotionError",
    "InvalidCredentialsError",
    "PageNotFoundError",
    "APIUnreachableError",
    "APIAccessError",
    "MalformedResponseError",
]
