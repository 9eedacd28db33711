"""Block rendering: typed block trees to semantic HTML.

This module converts a tree of Block objects into an HTML fragment. The
traversal uses an explicit stack instead of Python recursion, so arbitrarily
deep content (toggles within toggles, lists within quotes) cannot hit the
interpreter's recursion limit.

Problems with individual blocks never abort rendering. An unknown block kind
renders a visible placeholder and a block with a missing required field
renders a best-effort fallback; both are reported as RenderWarning records
appended to the caller's warnings list.
"""

import logging
from dataclasses import dataclass, field
from html import escape
from typing import Callable, Dict, List, Optional, Sequence
from urllib.parse import unquote, urlparse

from src.models.blocks import (
    Audio,
    Block,
    BlockKind,
    Bookmark,
    BulletedListItem,
    Callout,
    Code,
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
from src.models.render_result import RenderWarning

from .embeds import embed_src
from .errors import MalformedBlockFieldError, RenderError, UnsupportedBlockKindError
from .rich_text import color_class, is_safe_url, plain_text, render_runs

logger = logging.getLogger(__name__)

DEFAULT_CALLOUT_ICON = "\U0001F4A1"

# List item kinds are grouped with their consecutive siblings into a container
LIST_CONTAINER_TAGS = {
    BlockKind.BULLETED_LIST_ITEM: "ul",
    BlockKind.NUMBERED_LIST_ITEM: "ol",
}

Handler = Callable[[Block, str, int], str]


@dataclass
class _Frame:
    """One level of the explicit traversal stack.

    Attributes:
        blocks: Sibling blocks at this level
        owner: Block whose children these are (None for the root sequence)
        owner_ordinal: Ordinal of the owner among its numbered siblings
        position: Index of the next sibling to visit
        ordinal: Length of the current run of numbered siblings
        open_list: Tag of the list container currently open ("ul"/"ol")
        parts: Rendered HTML pieces of this level
    """
    blocks: Sequence[Block]
    owner: Optional[Block] = None
    owner_ordinal: int = 0
    position: int = 0
    ordinal: int = 0
    open_list: Optional[str] = None
    parts: List[str] = field(default_factory=list)


class BlockRenderer:
    """Renders blocks and block sequences to HTML fragments.

    The renderer holds no state between calls; warnings go to the list the
    caller passes in, so one instance can be shared across threads.

    Example:
        >>> renderer = BlockRenderer()
        >>> warnings = []
        >>> html = renderer.render_blocks(page.blocks, warnings)
        >>> for warning in warnings:
        ...     print(warning)
    """

    def __init__(self):
        """Initialize the dispatch table (one handler per BlockKind)."""
        self._handlers: Dict[BlockKind, Handler] = {
            BlockKind.HEADING: self._render_heading,
            BlockKind.PARAGRAPH: self._render_paragraph,
            BlockKind.BULLETED_LIST_ITEM: self._render_bulleted_item,
            BlockKind.NUMBERED_LIST_ITEM: self._render_numbered_item,
            BlockKind.QUOTE: self._render_quote,
            BlockKind.DIVIDER: self._render_divider,
            BlockKind.CALLOUT: self._render_callout,
            BlockKind.TOGGLE: self._render_toggle,
            BlockKind.TO_DO: self._render_to_do,
            BlockKind.IMAGE: self._render_image,
            BlockKind.VIDEO: self._render_video,
            BlockKind.AUDIO: self._render_audio,
            BlockKind.PDF: self._render_pdf,
            BlockKind.FILE: self._render_file,
            BlockKind.BOOKMARK: self._render_bookmark,
            BlockKind.EMBED: self._render_embed,
            BlockKind.EQUATION: self._render_equation,
            BlockKind.CODE: self._render_code,
            BlockKind.UNSUPPORTED: self._render_unsupported,
        }

    @property
    def supported_kinds(self) -> List[BlockKind]:
        """Block kinds with a dedicated handler."""
        return list(self._handlers)

    def render_block(self, block: Block, warnings: Optional[List[RenderWarning]] = None) -> str:
        """Render a single block (and its children) to HTML.

        A lone list item is wrapped in its list container.

        Args:
            block: Block to render
            warnings: Optional list that receives per-block warnings

        Returns:
            HTML fragment (never empty for a block)
        """
        return self.render_blocks([block], warnings)

    def render_blocks(
        self,
        blocks: Optional[Sequence[Block]],
        warnings: Optional[List[RenderWarning]] = None,
    ) -> str:
        """Render a sequence of sibling blocks to HTML.

        Blocks are rendered in sequence order with no separator. Consecutive
        list items share one <ul>/<ol> container, and numbered items are
        numbered within their run of consecutive numbered siblings only.

        Args:
            blocks: Sibling blocks in authoring order
            warnings: Optional list that receives per-block warnings

        Returns:
            Concatenated HTML ("" for an empty sequence)
        """
        if warnings is None:
            warnings = []

        stack = [_Frame(blocks=list(blocks or []))]

        while True:
            frame = stack[-1]

            if frame.position < len(frame.blocks):
                block = frame.blocks[frame.position]
                frame.position += 1
                ordinal = self._next_ordinal(frame, block)

                children = self._children_of(block)
                if children:
                    # Children render first; the owner is wrapped when its frame closes
                    stack.append(_Frame(blocks=children, owner=block, owner_ordinal=ordinal))
                else:
                    self._append(frame, block, self._render_own(block, "", ordinal, warnings))
                continue

            self._close_list(frame)
            stack.pop()
            children_html = "".join(frame.parts)

            if frame.owner is None:
                return children_html

            parent = stack[-1]
            self._append(
                parent,
                frame.owner,
                self._render_own(frame.owner, children_html, frame.owner_ordinal, warnings),
            )

    # ------------------------------------------------------------------
    # Traversal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _kind_of(block: object) -> Optional[BlockKind]:
        kind = getattr(block, "kind", None)
        return kind if isinstance(kind, BlockKind) else None

    def _kind_name(self, block: object) -> str:
        if isinstance(block, UnsupportedBlock):
            return str(block.block_type)
        kind = self._kind_of(block)
        return kind.value if kind else type(block).__name__

    @staticmethod
    def _block_id(block: object) -> str:
        block_id = getattr(block, "id", "")
        return block_id if isinstance(block_id, str) else ""

    @staticmethod
    def _children_of(block: object) -> List[Block]:
        children = getattr(block, "children", None)
        if not isinstance(children, (list, tuple)):
            return []
        return list(children)

    def _next_ordinal(self, frame: _Frame, block: object) -> int:
        """Advance the numbered-run counter; any other kind resets it."""
        if self._kind_of(block) == BlockKind.NUMBERED_LIST_ITEM:
            frame.ordinal += 1
            return frame.ordinal
        frame.ordinal = 0
        return 0

    def _append(self, frame: _Frame, block: object, html: str) -> None:
        """Add a rendered block to its level, opening/closing list containers."""
        tag = LIST_CONTAINER_TAGS.get(self._kind_of(block))
        if frame.open_list != tag:
            self._close_list(frame)
            if tag:
                frame.parts.append(f"<{tag}>")
                frame.open_list = tag
        frame.parts.append(html)

    @staticmethod
    def _close_list(frame: _Frame) -> None:
        if frame.open_list:
            frame.parts.append(f"</{frame.open_list}>")
            frame.open_list = None

    def _render_own(
        self,
        block: Block,
        children_html: str,
        ordinal: int,
        warnings: List[RenderWarning],
    ) -> str:
        """Render one block around its already-rendered children.

        Errors are contained here so a bad block never affects its siblings.
        """
        kind = self._kind_of(block)
        handler = self._handlers.get(kind) if kind else None

        try:
            if handler is None:
                raise UnsupportedBlockKindError(self._kind_name(block), block_id=self._block_id(block))
            return handler(block, children_html, ordinal)
        except UnsupportedBlockKindError as e:
            self._record(e, warnings)
            return self._as_list_item(kind, self._render_placeholder(block, children_html))
        except MalformedBlockFieldError as e:
            self._record(e, warnings)
            return self._as_list_item(kind, self._render_degraded(block, children_html))
        except (AttributeError, TypeError, ValueError) as e:
            error = MalformedBlockFieldError(
                self._kind_name(block),
                "content",
                reason=f"unreadable ({e})",
                block_id=self._block_id(block),
            )
            self._record(error, warnings)
            return self._as_list_item(kind, self._render_degraded(block, children_html))

    @staticmethod
    def _as_list_item(kind: Optional[BlockKind], html: str) -> str:
        """Keep fallbacks of list items valid inside their <ul>/<ol>."""
        if kind in LIST_CONTAINER_TAGS:
            return f"<li>{html}</li>"
        return html

    @staticmethod
    def _record(error: RenderError, warnings: List[RenderWarning]) -> None:
        warning = error.to_warning()
        logger.warning(f"Block rendering problem: {warning}")
        warnings.append(warning)

    # ------------------------------------------------------------------
    # Markup helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _class_attr(*classes: str) -> str:
        names = " ".join(c for c in classes if c)
        return f' class="{names}"' if names else ""

    @staticmethod
    def _children_container(children_html: str) -> str:
        if not children_html:
            return ""
        return f'<div class="block-children">{children_html}</div>'

    @staticmethod
    def _figcaption(caption: Sequence[TextRun]) -> str:
        if not caption:
            return ""
        return f"<figcaption>{render_runs(caption)}</figcaption>"

    @staticmethod
    def _require_url(block: Block) -> str:
        """Return the block's URL, raising if it is absent or unsafe."""
        url = getattr(block, "url", None)
        kind = block.kind.value
        if not isinstance(url, str) or not url.strip():
            raise MalformedBlockFieldError(kind, "url", block_id=block.id)
        url = url.strip()
        if not is_safe_url(url):
            raise MalformedBlockFieldError(kind, "url", reason="not a safe URL", block_id=block.id)
        return url

    @staticmethod
    def _attr(value: str) -> str:
        return escape(value, quote=True)

    # ------------------------------------------------------------------
    # Text-bearing blocks
    # ------------------------------------------------------------------

    def _render_heading(self, block: Heading, children_html: str, ordinal: int) -> str:
        if block.level not in (1, 2, 3):
            raise MalformedBlockFieldError(
                block.kind.value, "level", reason=f"out of range ({block.level})", block_id=block.id
            )
        tag = f"h{block.level}"
        heading = f"<{tag}{self._class_attr(color_class(block.color))}>{render_runs(block.text)}</{tag}>"

        if block.toggleable:
            return (
                f'<details class="toggle toggle-heading"><summary>{heading}</summary>'
                f'<div class="toggle-content">{children_html}</div></details>'
            )
        return heading + self._children_container(children_html)

    def _render_paragraph(self, block: Paragraph, children_html: str, ordinal: int) -> str:
        paragraph = f"<p{self._class_attr(color_class(block.color))}>{render_runs(block.text)}</p>"
        return paragraph + self._children_container(children_html)

    def _render_bulleted_item(self, block: BulletedListItem, children_html: str, ordinal: int) -> str:
        return (
            f"<li{self._class_attr(color_class(block.color))}>"
            f"{render_runs(block.text)}{self._children_container(children_html)}</li>"
        )

    def _render_numbered_item(self, block: NumberedListItem, children_html: str, ordinal: int) -> str:
        return (
            f'<li value="{ordinal or 1}"{self._class_attr(color_class(block.color))}>'
            f"{render_runs(block.text)}{self._children_container(children_html)}</li>"
        )

    def _render_quote(self, block: Quote, children_html: str, ordinal: int) -> str:
        return (
            f"<blockquote{self._class_attr(color_class(block.color))}>"
            f"<p>{render_runs(block.text)}</p>{self._children_container(children_html)}</blockquote>"
        )

    def _render_callout(self, block: Callout, children_html: str, ordinal: int) -> str:
        icon = block.icon or DEFAULT_CALLOUT_ICON
        if icon.startswith(("http://", "https://")):
            icon_html = f'<img class="callout-icon" src="{self._attr(icon)}" alt="">'
        else:
            icon_html = f'<span class="callout-icon">{escape(icon)}</span>'
        return (
            f'<div{self._class_attr("callout", color_class(block.color))}>{icon_html}'
            f'<div class="callout-content"><p>{render_runs(block.text)}</p>'
            f"{self._children_container(children_html)}</div></div>"
        )

    def _render_toggle(self, block: Toggle, children_html: str, ordinal: int) -> str:
        return (
            f'<details{self._class_attr("toggle", color_class(block.color))}>'
            f"<summary>{render_runs(block.text)}</summary>"
            f'<div class="toggle-content">{children_html}</div></details>'
        )

    def _render_to_do(self, block: ToDo, children_html: str, ordinal: int) -> str:
        checked = " checked" if block.checked else ""
        state = "to-do-checked" if block.checked else ""
        return (
            f'<div{self._class_attr("to-do", state, color_class(block.color))}>'
            f'<input type="checkbox" disabled{checked}>'
            f'<span class="to-do-text">{render_runs(block.text)}</span>'
            f"{self._children_container(children_html)}</div>"
        )

    def _render_divider(self, block: Block, children_html: str, ordinal: int) -> str:
        return "<hr>"

    # ------------------------------------------------------------------
    # Media blocks
    # ------------------------------------------------------------------

    def _render_image(self, block: Image, children_html: str, ordinal: int) -> str:
        url = self._require_url(block)
        alt = self._attr(plain_text(block.caption))
        return (
            f'<figure class="image"><img src="{self._attr(url)}" alt="{alt}" loading="lazy">'
            f"{self._figcaption(block.caption)}</figure>"
        )

    def _render_video(self, block: Video, children_html: str, ordinal: int) -> str:
        url = self._require_url(block)
        player = embed_src(url)
        if player:
            media = (
                f'<div class="embed-frame"><iframe src="{self._attr(player)}" '
                f'allowfullscreen loading="lazy"></iframe></div>'
            )
        else:
            media = f'<video controls preload="metadata" src="{self._attr(url)}"></video>'
        return f'<figure class="video">{media}{self._figcaption(block.caption)}</figure>'

    def _render_audio(self, block: Audio, children_html: str, ordinal: int) -> str:
        url = self._require_url(block)
        return (
            f'<figure class="audio"><audio controls preload="metadata" src="{self._attr(url)}"></audio>'
            f"{self._figcaption(block.caption)}</figure>"
        )

    def _render_pdf(self, block: Pdf, children_html: str, ordinal: int) -> str:
        url = self._require_url(block)
        href = self._attr(url)
        return (
            f'<figure class="pdf"><object data="{href}" type="application/pdf">'
            f'<a href="{href}">Download PDF</a></object>'
            f"{self._figcaption(block.caption)}</figure>"
        )

    def _render_file(self, block: File, children_html: str, ordinal: int) -> str:
        url = self._require_url(block)
        name = block.name or unquote(urlparse(url).path.rstrip("/").split("/")[-1]) or "Download file"
        caption = f'<p class="caption">{render_runs(block.caption)}</p>' if block.caption else ""
        return (
            f'<div class="file"><a class="file-link" href="{self._attr(url)}" '
            f'target="_blank" rel="noopener">\U0001F4CE {escape(name)}</a>{caption}</div>'
        )

    def _render_bookmark(self, block: Bookmark, children_html: str, ordinal: int) -> str:
        url = self._require_url(block)
        title = block.title or url
        description = (
            f'<span class="bookmark-description">{escape(block.description)}</span>'
            if block.description else ""
        )
        caption = f'<p class="caption">{render_runs(block.caption)}</p>' if block.caption else ""
        return (
            f'<div class="bookmark-card"><a class="bookmark" href="{self._attr(url)}" '
            f'target="_blank" rel="noopener">'
            f'<span class="bookmark-title">{escape(title)}</span>{description}'
            f'<span class="bookmark-url">{escape(url)}</span></a>{caption}</div>'
        )

    def _render_embed(self, block: Embed, children_html: str, ordinal: int) -> str:
        url = self._require_url(block)
        src = embed_src(url) or url
        return (
            f'<figure class="embed"><div class="embed-frame">'
            f'<iframe src="{self._attr(src)}" allowfullscreen loading="lazy"></iframe></div>'
            f"{self._figcaption(block.caption)}</figure>"
        )

    # ------------------------------------------------------------------
    # Source-carrying blocks
    # ------------------------------------------------------------------

    def _render_equation(self, block: Equation, children_html: str, ordinal: int) -> str:
        latex = (block.latex or "").strip()
        if not latex:
            raise MalformedBlockFieldError(block.kind.value, "latex", reason="empty", block_id=block.id)
        if block.inline:
            return f'<span class="equation" data-display="inline">{escape(latex)}</span>'
        return (
            f'<div class="equation-block">'
            f'<span class="equation" data-display="block">{escape(latex)}</span></div>'
        )

    def _render_code(self, block: Code, children_html: str, ordinal: int) -> str:
        language = (block.language or "plain text").strip() or "plain text"
        css_language = "-".join(language.lower().split())
        caption = self._figcaption(block.caption)
        code = (
            f'<pre class="code-block"><code class="language-{self._attr(css_language)}" '
            f'data-language="{self._attr(language)}">{escape(plain_text(block.text))}</code></pre>'
        )
        if caption:
            return f'<figure class="code">{code}{caption}</figure>'
        return code

    # ------------------------------------------------------------------
    # Fallbacks
    # ------------------------------------------------------------------

    def _render_unsupported(self, block: UnsupportedBlock, children_html: str, ordinal: int) -> str:
        raise UnsupportedBlockKindError(str(block.block_type), block_id=block.id)

    def _render_placeholder(self, block: object, children_html: str) -> str:
        """Visible placeholder for a block kind without a renderer."""
        name = escape(self._kind_name(block))
        return (
            f'<div class="unsupported-block" data-block-type="{name}">'
            f'<span class="unsupported-block-label">Unsupported block: {name}</span>'
            f"{self._children_container(children_html)}</div>"
        )

    def _render_degraded(self, block: object, children_html: str) -> str:
        """Best-effort fragment for a block with missing or unreadable fields."""
        name = escape(self._kind_name(block))
        pieces = []

        for attribute in ("text", "caption"):
            runs = getattr(block, attribute, None)
            if not (isinstance(runs, list) and runs and all(isinstance(r, TextRun) for r in runs)):
                continue
            try:
                pieces.append(f"<span>{render_runs(runs)}</span>")
            except (AttributeError, TypeError, ValueError) as e:
                logger.debug(f"Dropping unreadable {attribute} of {name} block: {e}")

        for attribute in ("title", "name", "description", "latex"):
            value = getattr(block, attribute, None)
            if isinstance(value, str) and value.strip():
                pieces.append(f"<span>{escape(value)}</span>")

        if not pieces:
            pieces.append(f'<span class="block-fallback-label">{name} unavailable</span>')

        return (
            f'<div class="block-fallback" data-block-kind="{name}">'
            f'{"".join(pieces)}{self._children_container(children_html)}</div>'
        )
