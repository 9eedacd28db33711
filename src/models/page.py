"""Notion page data model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from src.models.blocks import Block, TextRun


@dataclass(frozen=True)
class Tag:
    """A multi-select tag attached to a page.

    Attributes:
        name: Tag name as shown in Notion
        color: Notion colour name of the option
        slug: Filesafe identifier used for the tag page filename
    """
    name: str
    color: str = "default"
    slug: str = ""


@dataclass(frozen=True)
class PageIcon:
    """Page icon: either an emoji character or an image URL."""
    emoji: Optional[str] = None
    url: Optional[str] = None

    @property
    def value(self) -> Optional[str]:
        """Return the emoji or the URL, whichever is set."""
        return self.emoji or self.url


@dataclass
class Page:
    """Notion page with its metadata and block tree.

    A page owns its block tree exclusively. Pages are built fresh from
    fetched data at the start of every build.

    Attributes:
        id: Notion page id
        title: Title as rich-text runs
        created_time: Creation timestamp (sort key for listings)
        blocks: Root-level blocks in authoring order
        icon: Optional page icon
        cover: Optional cover image URL
        tags: Tags attached to the page (unique names)
        published: Whether the page is part of the site
        in_menu: Whether the page is linked from the site menu
        in_list: Whether the page appears in the index listing
        template: Template name used to wrap the page
        date: Explicit publication date property, if set
    """
    id: str
    title: List[TextRun]
    created_time: datetime
    blocks: List[Block] = field(default_factory=list)
    icon: Optional[PageIcon] = None
    cover: Optional[str] = None
    tags: List[Tag] = field(default_factory=list)
    published: bool = False
    in_menu: bool = False
    in_list: bool = True
    template: str = "post.html"
    date: Optional[datetime] = None

    @property
    def plain_title(self) -> str:
        """Title as plain text."""
        return "".join(run.content for run in self.title).strip()

    @property
    def tag_names(self) -> List[str]:
        """Tag names in source order without duplicates."""
        seen = []
        for tag in self.tags:
            if tag.name not in seen:
                seen.append(tag.name)
        return seen

    @property
    def display_time(self) -> datetime:
        """Date shown on the page: the explicit date, else creation time."""
        return self.date or self.created_time
