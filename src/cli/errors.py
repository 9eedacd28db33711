"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError so the build command can map them to
exit codes in one place.
"""

from src.notion_api.errors import SiteGenError


class CLIError(SiteGenError):
    """Base exception for all CLI-related errors."""
    pass


class ConfigNotFoundError(CLIError):
    """Raised when configuration file is not found."""

    def __init__(self, config_path: str):
        super().__init__(
            f"Configuration file not found at {config_path}"
        )
        self.config_path = config_path


class BuildError(CLIError):
    """Raised when a build cannot proceed (e.g. a page failed to fetch)."""

    def __init__(self, message: str, page_id: str = ""):
        super().__init__(message)
        self.page_id = page_id
