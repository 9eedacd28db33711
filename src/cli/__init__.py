"""Command-line interface for the Notion static site generator.

This package provides the `notion-sitegen` CLI tool that ties together the
Notion client, the rendering core and the publisher with progress
indication and error handling.
"""

__version__ = "0.1.0"

from .build_command import BuildCommand  # noqa: E402
from .errors import BuildError, CLIError, ConfigNotFoundError  # noqa: E402
from .models import BuildSummary, ExitCode  # noqa: E402

__all__ = [
    'BuildCommand',
    'BuildSummary',
    'ExitCode',
    'CLIError',
    'ConfigNotFoundError',
    'BuildError',
]
