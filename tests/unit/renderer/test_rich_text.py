"""Unit tests for renderer.rich_text module."""

from src.models.blocks import Annotations, TextRun
from src.renderer.rich_text import color_class, is_safe_url, plain_text, render_run, render_runs
from tests.fixtures.blocks import run


class TestRenderRuns:
    """Test cases for render_runs."""

    def test_empty_input_renders_empty_string(self):
        """None and [] both render as ""."""
        assert render_runs([]) == ""
        assert render_runs(None) == ""

    def test_plain_run_is_escaped(self):
        """Raw content is HTML-escaped before any wrapping."""
        assert render_runs([run("<b>1 & 2</b>")]) == "&lt;b&gt;1 &amp; 2&lt;/b&gt;"

    def test_runs_concatenate_in_order(self):
        """Runs are joined in sequence order without separators."""
        assert render_runs([run("Hello, "), run("world")]) == "Hello, world"

    def test_bold_link_ordering(self):
        """Link anchor wraps the formatting tags."""
        html = render_runs([run("x", link="https://e.com", bold=True)])
        assert html == '<a href="https://e.com"><strong>x</strong></a>'

    def test_canonical_order_for_all_flags(self):
        """Every annotation applies in the fixed nesting order."""
        html = render_runs([run(
            "x", bold=True, italic=True, underline=True, strikethrough=True, code=True,
        )])
        assert html == "<del><u><em><strong><code>x</code></strong></em></u></del>"

    def test_order_independent_of_flag_construction(self):
        """Flags set in a different order produce identical output."""
        first = TextRun("x", Annotations(italic=True, bold=True))
        second = TextRun("x", Annotations(bold=True, italic=True))
        assert render_run(first) == render_run(second) == "<em><strong>x</strong></em>"

    def test_deterministic(self):
        """Rendering the same runs twice is byte-identical."""
        sample = [run("a", bold=True), run("b", link="https://e.com/?q=1&r=2", color="red")]
        assert render_runs(sample) == render_runs(list(sample))

    def test_link_attribute_is_escaped(self):
        """Quotes and ampersands in link targets are escaped."""
        html = render_runs([run("x", link='https://e.com/?a=1&b="2"')])
        assert 'href="https://e.com/?a=1&amp;b=&quot;2&quot;"' in html

    def test_newline_becomes_line_break(self):
        """Soft line breaks inside a run render as <br>."""
        assert render_runs([run("a\nb")]) == "a<br>b"

    def test_color_span_inside_link(self):
        """Colour span sits between the formatting tags and the anchor."""
        html = render_runs([run("x", link="https://e.com", italic=True, color="red")])
        assert html == '<a href="https://e.com"><span class="color-red"><em>x</em></span></a>'

    def test_inline_equation_run(self):
        """Equation runs render as a formula span with escaped LaTeX."""
        html = render_runs([TextRun("a<b", equation=True)])
        assert html == '<span class="equation" data-display="inline">a&lt;b</span>'

    def test_script_link_is_dropped(self):
        """Text of a run with a script link renders without the anchor."""
        html = render_runs([run("click", link="javascript:alert(1)", bold=True)])
        assert html == "<strong>click</strong>"


class TestIsSafeUrl:
    """Test cases for is_safe_url."""

    def test_web_and_relative_links_are_safe(self):
        assert is_safe_url("https://e.com/a")
        assert is_safe_url("mailto:me@e.com")
        assert is_safe_url("/relative/page.html")

    def test_script_schemes_are_unsafe(self):
        assert not is_safe_url("javascript:alert(1)")
        assert not is_safe_url("VBScript:msgbox(1)")
        assert not is_safe_url("data:text/html,<script>alert(1)</script>")

    def test_whitespace_does_not_hide_the_scheme(self):
        assert not is_safe_url("  java\tscript:alert(1)")


class TestColorClass:
    """Test cases for color_class."""

    def test_default_has_no_class(self):
        assert color_class("default") == ""
        assert color_class(None) == ""

    def test_foreground_color(self):
        assert color_class("green") == "color-green"

    def test_background_color(self):
        assert color_class("yellow_background") == "bg-yellow"


class TestPlainText:
    """Test cases for plain_text."""

    def test_joins_raw_content(self):
        """Content is joined without escaping or markup."""
        assert plain_text([run("a & "), run("b", bold=True)]) == "a & b"

    def test_empty(self):
        assert plain_text(None) == ""
