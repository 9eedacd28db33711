"""Data models for site assembly.

This module defines the build options consumed by the page assembler and
site indexer, and the Site aggregate they produce.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from src.models.page import Page
from src.models.render_result import PageRender


class DateFormat(Enum):
    """Display formats for page dates.

    - ISO: 2024-01-05
    - LONG: January 5, 2024
    - SHORT: Jan 5, 2024
    """
    ISO = "iso"
    LONG = "long"
    SHORT = "short"

    def format(self, value: datetime) -> str:
        """Format a timestamp for display."""
        if self is DateFormat.LONG:
            return f"{value:%B} {value.day}, {value.year}"
        if self is DateFormat.SHORT:
            return f"{value:%b} {value.day}, {value.year}"
        return value.strftime("%Y-%m-%d")


@dataclass(frozen=True)
class BuildOptions:
    """Options consumed by the rendering core.

    Attributes:
        excerpt_length: Maximum number of characters in a listing preview
        date_format: Display format of page dates
        tag_page_enabled: Whether tag listings are built at all
    """
    excerpt_length: int = 150
    date_format: DateFormat = DateFormat.ISO
    tag_page_enabled: bool = True

    def __post_init__(self):
        if not isinstance(self.excerpt_length, int) or self.excerpt_length < 1:
            raise ValueError(
                f"excerpt_length must be a positive integer, got {self.excerpt_length!r}"
            )


@dataclass(frozen=True)
class TagStat:
    """Per-tag summary for tag clouds and tag page navigation.

    Attributes:
        name: Tag name
        slug: Filesafe tag identifier
        count: Number of listed published pages with the tag
        color: Notion colour of the tag option
    """
    name: str
    slug: str
    count: int
    color: str = "default"


@dataclass
class Site:
    """Aggregate of all published pages and derived tag indexing.

    Built once per generation run and discarded after output.

    Attributes:
        pages: Published pages, newest first (page id breaks ties)
        tag_index: Tag name to pages with that tag, in the same order
        renders: Page id to the page's render result
        tags: Tag summaries, most used first
    """
    pages: List[Page] = field(default_factory=list)
    tag_index: Dict[str, List[Page]] = field(default_factory=dict)
    renders: Dict[str, PageRender] = field(default_factory=dict)
    tags: List[TagStat] = field(default_factory=list)

    def render_for(self, page: Page) -> Optional[PageRender]:
        """Return the render result of a page, if it was rendered."""
        return self.renders.get(page.id)

    def _listing(self, pages: List[Page]) -> List[PageRender]:
        return [self.renders[p.id] for p in pages if p.in_list and p.id in self.renders]

    def index_listing(self) -> List[PageRender]:
        """Listing data of the index page."""
        return self._listing(self.pages)

    def tag_listing(self, tag: str) -> List[PageRender]:
        """Listing data of one tag page (empty for unknown tags)."""
        return self._listing(self.tag_index.get(tag, []))

    def menu(self) -> List[PageRender]:
        """Pages linked from the site menu."""
        return [self.renders[p.id] for p in self.pages if p.in_menu and p.id in self.renders]
