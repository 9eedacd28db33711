"""Typed exception hierarchy for publishing errors.

This module defines the exceptions raised while loading the site
configuration, rendering templates and writing the output tree. All
exceptions inherit from PublishError and carry the context needed to fix
the problem.
"""

from typing import Optional

from src.notion_api.errors import SiteGenError


class PublishError(SiteGenError):
    """Base exception for all publishing errors."""
    pass


class FilesystemError(PublishError):
    """Raised when filesystem operations fail (read, write, permissions, etc)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class ConfigError(PublishError):
    """Raised when configuration validation fails."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message


class TemplateError(PublishError):
    """Raised when a template is missing or fails to render."""

    def __init__(self, template_name: str, message: str):
        super().__init__(f"Template error in {template_name}: {message}")
        self.template_name = template_name
        self.message = message
