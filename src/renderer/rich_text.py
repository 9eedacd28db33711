"""Rich-text rendering.

Converts sequences of annotated text runs into inline HTML. Every function
here is pure: the same runs always produce byte-identical output.
"""

from html import escape
from typing import Iterable, Optional, Sequence

from src.models.blocks import Annotations, TextRun

# Inline tags applied innermost first. Rendering always follows this order,
# independent of how the source flags were set.
CANONICAL_ANNOTATION_ORDER = (
    ("code", "code"),
    ("bold", "strong"),
    ("italic", "em"),
    ("underline", "u"),
    ("strikethrough", "del"),
)

# Link targets that would run script when followed
UNSAFE_URL_SCHEMES = ("javascript:", "vbscript:", "data:text/html")


def is_safe_url(url: str) -> bool:
    """Return False for URLs whose scheme would execute script.

    Whitespace is ignored and the scheme match is case-insensitive.
    """
    return not "".join(url.split()).lower().startswith(UNSAFE_URL_SCHEMES)


def color_class(color: Optional[str]) -> str:
    """Map a Notion colour name to a CSS class.

    Examples:
        >>> color_class("default")
        ''
        >>> color_class("red")
        'color-red'
        >>> color_class("blue_background")
        'bg-blue'
    """
    if not color or color == "default":
        return ""
    if color.endswith("_background"):
        return f"bg-{color[:-len('_background')]}"
    return f"color-{color}"


def render_run(run: TextRun) -> str:
    """Render a single text run to inline HTML."""
    if run.equation:
        return (
            f'<span class="equation" data-display="inline">'
            f'{escape(run.content)}</span>'
        )

    html = escape(run.content).replace("\n", "<br>")
    annotations = run.annotations or Annotations()

    for flag, tag in CANONICAL_ANNOTATION_ORDER:
        if getattr(annotations, flag):
            html = f"<{tag}>{html}</{tag}>"

    css = color_class(annotations.color)
    if css:
        html = f'<span class="{css}">{html}</span>'

    if run.link and is_safe_url(run.link):
        html = f'<a href="{escape(run.link, quote=True)}">{html}</a>'

    return html


def render_runs(runs: Optional[Sequence[TextRun]]) -> str:
    """Render a sequence of text runs to inline HTML.

    Args:
        runs: Text runs in reading order (None or empty renders "")

    Returns:
        Concatenated HTML of all runs, in sequence order
    """
    if not runs:
        return ""
    return "".join(render_run(run) for run in runs)


def plain_text(runs: Optional[Iterable[TextRun]]) -> str:
    """Concatenate the raw content of text runs without any markup."""
    if not runs:
        return ""
    return "".join(run.content for run in runs)
