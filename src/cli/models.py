"""Data models for CLI operations."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple

from src.models.render_result import RenderWarning


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Site built successfully
    - GENERAL_ERROR (1): General error (config, templates, filesystem)
    - AUTH_ERROR (3): Notion token missing or rejected
    - NETWORK_ERROR (4): Notion API unreachable or failing
    - WARNINGS (5): Site built, but blocks rendered with warnings (--strict)

    Example:
        >>> sys.exit(ExitCode.SUCCESS)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 3
    NETWORK_ERROR = 4
    WARNINGS = 5


@dataclass
class BuildSummary:
    """Summary of a build for display to the user.

    Attributes:
        output_dir: Directory the site was written to
        page_count: Post pages written
        tag_page_count: Tag listing pages written
        preview_count: Unpublished pages written in preview mode
        asset_count: Static files copied
        unpublished_count: Pages skipped because they are not published
        skipped_count: Database rows that could not be read
        warnings: (page title, warning) pairs collected while rendering

    Example:
        >>> summary = BuildSummary(output_dir="public", page_count=12)
        >>> summary.warning_count
        0
    """
    output_dir: str = ""
    page_count: int = 0
    tag_page_count: int = 0
    preview_count: int = 0
    asset_count: int = 0
    unpublished_count: int = 0
    skipped_count: int = 0
    warnings: List[Tuple[str, RenderWarning]] = field(default_factory=list)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)
