"""Block rendering engine.

This package turns typed block trees into semantic HTML fragments.

Key components:
    render_runs: Rich-text runs to inline HTML
    BlockRenderer: Recursive (explicit-stack) block tree renderer
    embed_src: Player URLs for third-party video platforms
"""

from .block_renderer import BlockRenderer
from .embeds import embed_src
from .errors import MalformedBlockFieldError, RenderError, UnsupportedBlockKindError
from .rich_text import color_class, plain_text, render_runs

__all__ = [
    "BlockRenderer",
    "embed_src",
    "render_runs",
    "plain_text",
    "color_class",
    "RenderError",
    "UnsupportedBlockKindError",
    "MalformedBlockFieldError",
]
