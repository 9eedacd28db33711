"""Conversion of Notion API JSON into the typed page model.

Block objects become Block variants (unknown types become UnsupportedBlock
so the renderer can emit a placeholder), rich text becomes TextRun lists and
database rows become Page objects.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from src.models.blocks import (
    Annotations,
    Audio,
    Block,
    Bookmark,
    BulletedListItem,
    Callout,
    Code,
    Divider,
    Embed,
    Equation,
    File,
    Heading,
    Image,
    NumberedListItem,
    Paragraph,
    Pdf,
    Quote,
    TextRun,
    ToDo,
    Toggle,
    UnsupportedBlock,
    Video,
)
from src.models.page import Page, PageIcon, Tag
from src.site_builder.filesafe_converter import FilesafeConverter

from .errors import MalformedResponseError

logger = logging.getLogger(__name__)

Json = Dict[str, Any]


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse a Notion ISO 8601 timestamp or date.

    Examples:
        >>> parse_timestamp("2024-01-05T10:00:00.000Z").year
        2024
        >>> parse_timestamp("2024-01-05").day
        5
    """
    if not value:
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.warning(f"Unparseable timestamp: {value!r}")
        return None


def file_url(payload: Optional[Json]) -> Optional[str]:
    """Return the URL of a Notion file object (external or hosted)."""
    if not payload:
        return None
    for key in ("external", "file", "custom_emoji"):
        url = (payload.get(key) or {}).get("url")
        if url:
            return url
    return None


class BlockParser:
    """Parses Notion JSON into blocks and pages.

    Example:
        >>> parser = BlockParser()
        >>> blocks = parser.parse_blocks(api.get_block_tree(page_id))
        >>> page = parser.parse_page(row, blocks)
    """

    def __init__(self):
        self._builders: Dict[str, Callable[[Json, Json], Block]] = {
            "heading_1": self._heading,
            "heading_2": self._heading,
            "heading_3": self._heading,
            "paragraph": lambda b, d: Paragraph(text=self.parse_rich_text(d.get("rich_text")), color=d.get("color", "default")),
            "bulleted_list_item": lambda b, d: BulletedListItem(text=self.parse_rich_text(d.get("rich_text")), color=d.get("color", "default")),
            "numbered_list_item": lambda b, d: NumberedListItem(text=self.parse_rich_text(d.get("rich_text")), color=d.get("color", "default")),
            "quote": lambda b, d: Quote(text=self.parse_rich_text(d.get("rich_text")), color=d.get("color", "default")),
            "toggle": lambda b, d: Toggle(text=self.parse_rich_text(d.get("rich_text")), color=d.get("color", "default")),
            "to_do": lambda b, d: ToDo(
                text=self.parse_rich_text(d.get("rich_text")),
                checked=bool(d.get("checked")),
                color=d.get("color", "default"),
            ),
            "callout": self._callout,
            "divider": lambda b, d: Divider(),
            "image": lambda b, d: Image(url=file_url(d), caption=self.parse_rich_text(d.get("caption"))),
            "video": lambda b, d: Video(url=file_url(d), caption=self.parse_rich_text(d.get("caption"))),
            "audio": lambda b, d: Audio(url=file_url(d), caption=self.parse_rich_text(d.get("caption"))),
            "pdf": lambda b, d: Pdf(url=file_url(d), caption=self.parse_rich_text(d.get("caption"))),
            "file": lambda b, d: File(url=file_url(d), name=d.get("name"), caption=self.parse_rich_text(d.get("caption"))),
            "bookmark": lambda b, d: Bookmark(url=d.get("url"), caption=self.parse_rich_text(d.get("caption"))),
            "link_preview": lambda b, d: Bookmark(url=d.get("url")),
            "embed": lambda b, d: Embed(url=d.get("url"), caption=self.parse_rich_text(d.get("caption"))),
            "equation": lambda b, d: Equation(latex=d.get("expression") or "", inline=False),
            "code": lambda b, d: Code(
                language=d.get("language") or "plain text",
                text=self.parse_rich_text(d.get("rich_text")),
                caption=self.parse_rich_text(d.get("caption")),
            ),
        }

    @property
    def supported_types(self) -> List[str]:
        """Notion block type names with a dedicated block variant."""
        return sorted(self._builders)

    def parse_rich_text(self, items: Optional[List[Json]]) -> List[TextRun]:
        """Convert a Notion rich text array into text runs."""
        runs = []
        for item in items or []:
            raw = item.get("annotations") or {}
            annotations = Annotations(
                bold=bool(raw.get("bold")),
                italic=bool(raw.get("italic")),
                underline=bool(raw.get("underline")),
                strikethrough=bool(raw.get("strikethrough")),
                code=bool(raw.get("code")),
                color=raw.get("color") or "default",
            )
            kind = item.get("type")
            if kind == "equation":
                runs.append(TextRun(
                    content=(item.get("equation") or {}).get("expression", ""),
                    annotations=annotations,
                    equation=True,
                ))
                continue
            text = item.get("text") or {}
            content = text.get("content")
            if content is None:
                content = item.get("plain_text", "")
            link = (text.get("link") or {}).get("url") or item.get("href")
            runs.append(TextRun(content=content, annotations=annotations, link=link))
        return runs

    def parse_block(self, data: Json) -> Block:
        """Convert one Notion block object, without its children."""
        block_type = data.get("type") or "unknown"
        builder = self._builders.get(block_type)
        if builder is None:
            logger.debug(f"Unknown block type '{block_type}' ({data.get('id', '?')})")
            block: Block = UnsupportedBlock(block_type=block_type)
        else:
            block = builder(data, data.get(block_type) or {})
        block.id = data.get("id", "")
        return block

    def parse_blocks(self, items: List[Json]) -> List[Block]:
        """Convert a block tree (children attached under ``children``).

        The tree is walked with an explicit work list so depth is unbounded.
        """
        roots: List[Block] = []
        pending = [(items, roots)]
        while pending:
            source, target = pending.pop()
            for data in source:
                block = self.parse_block(data)
                target.append(block)
                nested = data.get("children") or []
                if not nested:
                    continue
                if hasattr(block, "children"):
                    pending.append((nested, block.children))
                else:
                    logger.debug(
                        f"Ignoring {len(nested)} child block(s) of {block.kind.value} {block.id}"
                    )
        return roots

    def parse_page(self, data: Json, blocks: Optional[List[Block]] = None) -> Page:
        """Convert a database row (page object) into a Page.

        Recognised properties: ``title`` (any title property), ``tags``
        (multi-select), ``template`` (select), ``publish``, ``inMenu``,
        ``inList`` (checkboxes) and ``date``.

        Raises:
            MalformedResponseError: If the page id or creation time is missing
        """
        page_id = data.get("id")
        if not page_id:
            raise MalformedResponseError("unknown", "page without id")
        created_time = parse_timestamp(data.get("created_time"))
        if created_time is None:
            raise MalformedResponseError(page_id, "missing created_time")

        props = data.get("properties") or {}
        title_prop = props.get("title")
        if not title_prop or title_prop.get("type", "title") != "title":
            title_prop = next(
                (p for p in props.values() if isinstance(p, dict) and p.get("type") == "title"),
                {},
            )

        tags = []
        for option in (props.get("tags") or {}).get("multi_select") or []:
            name = option.get("name")
            if not name or any(t.name == name for t in tags):
                continue
            tags.append(Tag(
                name=name,
                color=option.get("color") or "default",
                slug=FilesafeConverter.tag_to_slug(name),
            ))

        template = ((props.get("template") or {}).get("select") or {}).get("name")
        if template and not template.endswith(".html"):
            template = f"{template}.html"

        date = None
        date_value = (props.get("date") or {}).get("date")
        if date_value:
            date = parse_timestamp(date_value.get("start"))

        return Page(
            id=page_id,
            title=self.parse_rich_text(title_prop.get("title")),
            created_time=created_time,
            blocks=blocks or [],
            icon=self._icon(data.get("icon")),
            cover=file_url(data.get("cover")),
            tags=tags,
            published=self._checkbox(props, "publish", False),
            in_menu=self._checkbox(props, "inMenu", False),
            in_list=self._checkbox(props, "inList", True),
            template=template or "post.html",
            date=date,
        )

    @staticmethod
    def _checkbox(props: Json, name: str, default: bool) -> bool:
        prop = props.get(name)
        if not prop or "checkbox" not in prop:
            return default
        return bool(prop["checkbox"])

    @staticmethod
    def _icon(data: Optional[Json]) -> Optional[PageIcon]:
        if not data:
            return None
        if data.get("type") == "emoji":
            return PageIcon(emoji=data.get("emoji"))
        url = file_url(data)
        return PageIcon(url=url) if url else None

    def _heading(self, data: Json, payload: Json) -> Heading:
        return Heading(
            level=int(data["type"][-1]),
            text=self.parse_rich_text(payload.get("rich_text")),
            toggleable=bool(payload.get("is_toggleable")),
            color=payload.get("color", "default"),
        )

    def _callout(self, data: Json, payload: Json) -> Callout:
        icon = self._icon(payload.get("icon"))
        return Callout(
            icon=icon.value if icon else None,
            text=self.parse_rich_text(payload.get("rich_text")),
            color=payload.get("color", "default"),
        )
