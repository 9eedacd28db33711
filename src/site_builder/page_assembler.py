"""Page assembly: one page's block tree to a PageRender.

The assembler concatenates the rendered root blocks of a page, extracts the
listing excerpt and collects page-level metadata for templates.
"""

import logging
from typing import Iterator, List, Optional

from bs4 import BeautifulSoup

from src.models.blocks import Block
from src.models.page import Page
from src.models.render_result import PageRender, RenderWarning
from src.renderer.block_renderer import BlockRenderer
from src.renderer.rich_text import render_runs

from .filesafe_converter import FilesafeConverter
from .models import BuildOptions

logger = logging.getLogger(__name__)


def iter_blocks(blocks: List[Block]) -> Iterator[Block]:
    """Yield every block of a tree in document (pre-)order without recursion."""
    stack = [iter(blocks)]
    while stack:
        block = next(stack[-1], None)
        if block is None:
            stack.pop()
            continue
        yield block
        children = block.child_blocks() if isinstance(block, Block) else []
        if children:
            stack.append(iter(children))


def visible_text(html: str) -> str:
    """Return the text a reader sees in an HTML fragment.

    Line breaks count as spaces and whitespace runs collapse to one space.
    """
    if not html:
        return ""
    soup = BeautifulSoup(html, "lxml")
    for br in soup.find_all("br"):
        br.replace_with(" ")
    return " ".join(soup.get_text().split())


class PageAssembler:
    """Assembles pages into render results.

    Example:
        >>> assembler = PageAssembler(BuildOptions(excerpt_length=120))
        >>> render = assembler.assemble(page)
        >>> print(render.title, len(render.warnings))
    """

    def __init__(self, options: Optional[BuildOptions] = None, renderer: Optional[BlockRenderer] = None):
        """Initialize the assembler.

        Args:
            options: Build options (defaults apply when None)
            renderer: Block renderer to use (a fresh one when None)
        """
        self.options = options or BuildOptions()
        self.renderer = renderer or BlockRenderer()

    def assemble(self, page: Page) -> PageRender:
        """Render a page and extract its metadata.

        Unpublished pages are rendered too; filtering them out is the site
        indexer's job.

        Args:
            page: Page with its complete block tree

        Returns:
            PageRender with HTML, excerpt, metadata and warnings
        """
        warnings: List[RenderWarning] = []
        html = self.renderer.render_blocks(page.blocks, warnings)

        if not page.blocks:
            logger.debug(f"Page {page.id} has no content blocks")

        if warnings:
            logger.info(f"Page '{page.plain_title}' rendered with {len(warnings)} warning(s)")

        return PageRender(
            page_id=page.id,
            html=html,
            title=page.plain_title,
            title_html=render_runs(page.title),
            url=FilesafeConverter.title_to_filename(page.plain_title, fallback=page.id),
            created_time=page.created_time,
            excerpt=self.extract_excerpt(page),
            date=self.options.date_format.format(page.display_time),
            tags=list(page.tags),
            icon=page.icon,
            cover=page.cover,
            template=page.template,
            in_menu=page.in_menu,
            in_list=page.in_list,
            published=page.published,
            warnings=warnings,
        )

    def extract_excerpt(self, page: Page) -> str:
        """Extract the listing preview of a page.

        Takes the first ``excerpt_length`` characters of the visible text of
        the first text-bearing block whose text is not empty. The excerpt is
        plain text, so truncation can never split an HTML tag.

        Args:
            page: Page to extract from

        Returns:
            Plain-text excerpt ("" when the page has no text)
        """
        for block in iter_blocks(page.blocks):
            if not block.is_text_bearing:
                continue
            try:
                text = visible_text(render_runs(getattr(block, "text", None)))
            except (AttributeError, TypeError, ValueError) as e:
                logger.debug(f"Skipping unreadable text of block {block.id} for the excerpt: {e}")
                continue
            if text:
                return text[: self.options.excerpt_length]
        return ""
