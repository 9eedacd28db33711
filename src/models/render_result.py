"""Render result data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from src.models.page import PageIcon, Tag


class WarningCode(Enum):
    """Categories of recoverable render problems."""
    UNSUPPORTED_BLOCK_KIND = "unsupported_block_kind"
    MALFORMED_BLOCK_FIELD = "malformed_block_field"


@dataclass(frozen=True)
class RenderWarning:
    """A recoverable problem encountered while rendering one block.

    Attributes:
        code: Warning category
        block_id: Id of the offending block (may be empty)
        block_kind: Kind or source type name of the block
        message: Human readable description
    """
    code: WarningCode
    block_id: str
    block_kind: str
    message: str

    def __str__(self) -> str:
        block_ref = self.block_id or "?"
        return f"[{self.code.value}] {self.block_kind} {block_ref}: {self.message}"


@dataclass
class PageRender:
    """Result of assembling one page.

    Contains the rendered HTML fragment along with the metadata consumed
    by templates and listings, and the warnings raised while rendering.

    Attributes:
        page_id: Notion page id
        html: Concatenated HTML of the root blocks
        title: Plain title
        title_html: Title rendered as inline HTML
        url: Output filename of the page
        excerpt: Plain-text preview
        date: Formatted display date
        created_time: Creation timestamp
        tags: Tags attached to the page
        icon: Page icon
        cover: Cover image URL
        template: Template used for the page
        in_menu: Whether the page is linked from the menu
        in_list: Whether the page appears in listings
        published: Whether the page is published
        warnings: Per-block warnings
    """
    page_id: str
    html: str
    title: str
    url: str
    created_time: datetime
    title_html: str = ""
    excerpt: str = ""
    date: str = ""
    tags: List[Tag] = field(default_factory=list)
    icon: Optional[PageIcon] = None
    cover: Optional[str] = None
    template: str = "post.html"
    in_menu: bool = False
    in_list: bool = True
    published: bool = True
    warnings: List[RenderWarning] = field(default_factory=list)

    @property
    def tag_names(self) -> List[str]:
        return [tag.name for tag in self.tags]

    def to_context(self) -> Dict[str, Any]:
        """Convert to the plain dictionary handed to templates."""
        return {
            "id": self.page_id,
            "title": self.title,
            "titleHtml": self.title_html,
            "url": self.url,
            "date": self.date,
            "preview": self.excerpt,
            "tags": [
                {"name": tag.name, "color": tag.color, "slug": tag.slug}
                for tag in self.tags
            ],
            "iconUrl": self.icon.value if self.icon else None,
            "iconIsEmoji": bool(self.icon and self.icon.emoji),
            "cover": self.cover,
            "inMenu": self.in_menu,
            "inList": self.in_list,
        }
