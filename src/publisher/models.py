"""Data models for publishing.

This module defines the site configuration and helpers derived from it.
"""

import os
import re
from dataclasses import dataclass
from typing import Optional

from src.site_builder.models import BuildOptions, DateFormat

PACKAGED_TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")

_UUID_PATTERN = re.compile(
    r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}', re.IGNORECASE
)
_TRAILING_ID_PATTERN = re.compile(r'[0-9a-f]{32}$', re.IGNORECASE)
_HEX_ID_PATTERN = re.compile(r'[0-9a-f]{32}', re.IGNORECASE)


def extract_notion_id(url: str) -> Optional[str]:
    """Extract the 32 character Notion id from a database URL or raw id.

    The id is looked up in the last path segment, ignoring any query string.

    Examples:
        >>> extract_notion_id("https://www.notion.so/me/Blog-0123456789abcdef0123456789abcdef?v=1")
        '0123456789abcdef0123456789abcdef'
        >>> extract_notion_id("https://example.com/about") is None
        True
    """
    if not url:
        return None
    segment = url.split('?')[0].split('#')[0].rstrip('/').split('/')[-1]
    match = _UUID_PATTERN.search(segment)
    if match:
        return match.group(0).replace('-', '').lower()
    match = _TRAILING_ID_PATTERN.search(segment) or _HEX_ID_PATTERN.search(segment)
    return match.group(0).lower() if match else None


@dataclass
class SiteConfig:
    """Site generation configuration.

    Attributes:
        url: Notion database URL (or bare database id)
        database_id: Id extracted from url
        title: Site title
        description: Site description
        templates_dir: Directory with post.html, index.html and optional
                       tag.html, main.css and assets/
        output_dir: Directory the site is written to
        excerpt_length: Listing preview length in characters
        date_format: Date display format
        tag_page_enabled: Whether tag pages are generated
        workers: Number of pages fetched and rendered in parallel
        notion_token: Integration token (NOTION_TOKEN is used when unset)
    """
    url: str
    database_id: str
    title: str = "My Blog"
    description: str = ""
    templates_dir: str = PACKAGED_TEMPLATES_DIR
    output_dir: str = "public"
    excerpt_length: int = 150
    date_format: DateFormat = DateFormat.ISO
    tag_page_enabled: bool = True
    workers: int = 4
    notion_token: Optional[str] = None

    def build_options(self) -> BuildOptions:
        """Options handed to the page assembler and site indexer."""
        return BuildOptions(
            excerpt_length=self.excerpt_length,
            date_format=self.date_format,
            tag_page_enabled=self.tag_page_enabled,
        )
