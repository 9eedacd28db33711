"""Data models for block trees, pages and render results."""

from src.models.blocks import (
    Annotations,
    Audio,
    Block,
    BlockKind,
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
from src.models.render_result import PageRender, RenderWarning, WarningCode

__all__ = [
    'Annotations',
    'Audio',
    'Block',
    'BlockKind',
    'Bookmark',
    'BulletedListItem',
    'Callout',
    'Code',
    'Divider',
    'Embed',
    'Equation',
    'File',
    'Heading',
    'Image',
    'NumberedListItem',
    'Paragraph',
    'Pdf',
    'Quote',
    'TextRun',
    'ToDo',
    'Toggle',
    'UnsupportedBlock',
    'Video',
    'Page',
    'PageIcon',
    'Tag',
    'PageRender',
    'RenderWarning',
    'WarningCode',
]
