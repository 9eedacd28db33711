"""Data models for the typed block tree.

A page's content is a tree of blocks. Each block kind is its own dataclass,
discriminated by its ``kind`` (a BlockKind value), so the renderer can match
exhaustively over the variants. Text-bearing blocks hold sequences of
TextRun objects; container blocks own an ordered list of child blocks.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, List, Optional


class BlockKind(Enum):
    """Kinds of content blocks."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    QUOTE = "quote"
    DIVIDER = "divider"
    CALLOUT = "callout"
    TOGGLE = "toggle"
    TO_DO = "to_do"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    PDF = "pdf"
    FILE = "file"
    BOOKMARK = "bookmark"
    EMBED = "embed"
    EQUATION = "equation"
    CODE = "code"

    # Placeholder for any block type this generator does not know
    UNSUPPORTED = "unsupported"


# Block kinds that render their own rich text before any children
TEXT_BEARING_KINDS = {
    BlockKind.HEADING,
    BlockKind.PARAGRAPH,
    BlockKind.BULLETED_LIST_ITEM,
    BlockKind.NUMBERED_LIST_ITEM,
    BlockKind.QUOTE,
    BlockKind.CALLOUT,
    BlockKind.TOGGLE,
    BlockKind.TO_DO,
}


@dataclass(frozen=True)
class Annotations:
    """Formatting flags of a text run.

    The flags are independent; any combination is valid.

    Attributes:
        bold: Strong emphasis
        italic: Emphasis
        underline: Underlined text
        strikethrough: Struck-through text
        code: Inline code
        color: Notion colour name ("default", "red", "blue_background", ...)
    """

    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    code: bool = False
    color: str = "default"


@dataclass(frozen=True)
class TextRun:
    """A span of text with a uniform set of annotations and an optional link.

    Attributes:
        content: Raw (unescaped) text
        annotations: Formatting flags
        link: Target URL, if the run is a hyperlink
        equation: True when content is an inline LaTeX formula
    """

    content: str
    annotations: Annotations = field(default_factory=Annotations)
    link: Optional[str] = None
    equation: bool = False


@dataclass
class Block:
    """Base class of all block variants.

    Attributes:
        id: Source block id (used in warnings; may be empty)
    """

    kind: ClassVar[BlockKind]

    id: str = ""

    @property
    def is_text_bearing(self) -> bool:
        """Check if this block renders its own rich text."""
        return self.kind in TEXT_BEARING_KINDS

    def child_blocks(self) -> List["Block"]:
        """Return the nested child blocks (empty for leaf kinds)."""
        return getattr(self, "children", [])


@dataclass
class Heading(Block):
    """Section heading; toggleable headings collapse their children."""

    kind: ClassVar[BlockKind] = BlockKind.HEADING

    level: int = 1
    text: List[TextRun] = field(default_factory=list)
    children: List[Block] = field(default_factory=list)
    toggleable: bool = False
    color: str = "default"


@dataclass
class Paragraph(Block):
    kind: ClassVar[BlockKind] = BlockKind.PARAGRAPH

    text: List[TextRun] = field(default_factory=list)
    children: List[Block] = field(default_factory=list)
    color: str = "default"


@dataclass
class BulletedListItem(Block):
    kind: ClassVar[BlockKind] = BlockKind.BULLETED_LIST_ITEM

    text: List[TextRun] = field(default_factory=list)
    children: List[Block] = field(default_factory=list)
    color: str = "default"


@dataclass
class NumberedListItem(Block):
    """Numbered list item.

    ``index`` is informational; the rendered ordinal is computed from the
    run of consecutive numbered siblings.
    """

    kind: ClassVar[BlockKind] = BlockKind.NUMBERED_LIST_ITEM

    text: List[TextRun] = field(default_factory=list)
    children: List[Block] = field(default_factory=list)
    index: int = 0
    color: str = "default"


@dataclass
class Quote(Block):
    kind: ClassVar[BlockKind] = BlockKind.QUOTE

    text: List[TextRun] = field(default_factory=list)
    children: List[Block] = field(default_factory=list)
    color: str = "default"


@dataclass
class Divider(Block):
    kind: ClassVar[BlockKind] = BlockKind.DIVIDER


@dataclass
class Callout(Block):
    """Highlighted box with an icon (emoji character or image URL)."""

    kind: ClassVar[BlockKind] = BlockKind.CALLOUT

    icon: Optional[str] = None
    text: List[TextRun] = field(default_factory=list)
    children: List[Block] = field(default_factory=list)
    color: str = "default"


@dataclass
class Toggle(Block):
    """Collapsible block: the text is the summary, children the hidden body."""

    kind: ClassVar[BlockKind] = BlockKind.TOGGLE

    text: List[TextRun] = field(default_factory=list)
    children: List[Block] = field(default_factory=list)
    color: str = "default"


@dataclass
class ToDo(Block):
    kind: ClassVar[BlockKind] = BlockKind.TO_DO

    text: List[TextRun] = field(default_factory=list)
    checked: bool = False
    children: List[Block] = field(default_factory=list)
    color: str = "default"


@dataclass
class Image(Block):
    kind: ClassVar[BlockKind] = BlockKind.IMAGE

    url: Optional[str] = None
    caption: List[TextRun] = field(default_factory=list)


@dataclass
class Video(Block):
    kind: ClassVar[BlockKind] = BlockKind.VIDEO

    url: Optional[str] = None
    caption: List[TextRun] = field(default_factory=list)


@dataclass
class Audio(Block):
    kind: ClassVar[BlockKind] = BlockKind.AUDIO

    url: Optional[str] = None
    caption: List[TextRun] = field(default_factory=list)


@dataclass
class Pdf(Block):
    kind: ClassVar[BlockKind] = BlockKind.PDF

    url: Optional[str] = None
    caption: List[TextRun] = field(default_factory=list)


@dataclass
class File(Block):
    """Downloadable attachment; ``name`` defaults to the URL's last segment."""

    kind: ClassVar[BlockKind] = BlockKind.FILE

    url: Optional[str] = None
    name: Optional[str] = None
    caption: List[TextRun] = field(default_factory=list)


@dataclass
class Bookmark(Block):
    kind: ClassVar[BlockKind] = BlockKind.BOOKMARK

    url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    caption: List[TextRun] = field(default_factory=list)


@dataclass
class Embed(Block):
    kind: ClassVar[BlockKind] = BlockKind.EMBED

    url: Optional[str] = None
    caption: List[TextRun] = field(default_factory=list)


@dataclass
class Equation(Block):
    kind: ClassVar[BlockKind] = BlockKind.EQUATION

    latex: str = ""
    inline: bool = False


@dataclass
class Code(Block):
    kind: ClassVar[BlockKind] = BlockKind.CODE

    language: str = "plain text"
    text: List[TextRun] = field(default_factory=list)
    caption: List[TextRun] = field(default_factory=list)


@dataclass
class UnsupportedBlock(Block):
    """Block of a type the generator cannot render.

    Attributes:
        block_type: The source type name (e.g. "synced_block")
        children: Child blocks, still rendered inside the placeholder
    """

    kind: ClassVar[BlockKind] = BlockKind.UNSUPPORTED

    block_type: str = "unknown"
    children: List[Block] = field(default_factory=list)
