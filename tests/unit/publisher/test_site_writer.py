"""Unit tests for publisher.site_writer module."""

import os

import pytest

from src.publisher.errors import FilesystemError, TemplateError
from src.publisher.models import SiteConfig
from src.publisher.site_writer import SiteWriter
from src.publisher.template_renderer import TemplateRenderer
from src.site_builder.models import BuildOptions
from src.site_builder.page_assembler import PageAssembler
from src.site_builder.site_indexer import SiteIndexer
from tests.fixtures.blocks import make_page, para

DB_ID = "0123456789abcdef0123456789abcdef"


def _writer(output_dir, templates_dir=None):
    kwargs = {"templates_dir": templates_dir} if templates_dir else {}
    config = SiteConfig(url=DB_ID, database_id=DB_ID, output_dir=str(output_dir), **kwargs)
    return SiteWriter(config.output_dir, TemplateRenderer(config))


def _pages():
    return [
        make_page("a", [para("Alpha")], tags=["Python"], title="Alpha", age_days=1),
        make_page("b", [para("Beta")], tags=["Python", "Web Dev"], title="Beta", age_days=0),
        make_page("d", [para("Draft")], tags=["Secret"], title="Draft", published=False),
    ]


def _tree(root):
    files = {}
    for directory, _, names in os.walk(root):
        for name in names:
            path = os.path.join(directory, name)
            with open(path, "rb") as f:
                files[os.path.relpath(path, root)] = f.read()
    return files


class TestWrite:
    """Test cases for SiteWriter.write()."""

    def test_output_layout(self, tmp_path):
        out = tmp_path / "public"
        site = SiteIndexer().build_site(_pages())

        result = _writer(out).write(site)

        assert result.pages == ["Beta.html", "Alpha.html"]
        assert result.tag_pages == ["tag/python.html", "tag/web-dev.html"]
        assert result.preview_pages == []
        assert "main.css" in result.assets
        assert "assets/favicon.svg" in result.assets
        for name in ("index.html", "Alpha.html", "Beta.html", "tag/python.html", "main.css"):
            assert (out / name).is_file()
        assert not (out / "Draft.html").exists()
        assert not (out / "tag" / "secret.html").exists()

    def test_total_counts_index(self, tmp_path):
        result = _writer(tmp_path / "out").write(SiteIndexer().build_site([]))
        assert result.total == 1 + len(result.assets)
        assert (tmp_path / "out" / "index.html").is_file()

    def test_tag_pages_disabled(self, tmp_path):
        out = tmp_path / "public"
        site = SiteIndexer(BuildOptions(tag_page_enabled=False)).build_site(_pages())

        result = _writer(out).write(site)

        assert result.tag_pages == []
        assert not (out / "tag").exists()

    def test_no_tag_page_for_unlisted_pages_only(self, tmp_path):
        out = tmp_path / "public"
        pages = _pages() + [make_page("h", [para("Hidden")], tags=["Hidden"], title="Hidden", in_list=False)]

        result = _writer(out).write(SiteIndexer().build_site(pages))

        assert "Hidden.html" in result.pages
        assert "tag/hidden.html" not in result.tag_pages
        assert not (out / "tag" / "hidden.html").exists()

    def test_rebuild_is_byte_identical(self, tmp_path):
        """Writing the same input twice produces the same tree."""
        out = tmp_path / "public"
        _writer(out).write(SiteIndexer().build_site(_pages()))
        first = _tree(out)

        _writer(out).write(SiteIndexer().build_site(list(reversed(_pages()))))

        assert _tree(out) == first

    def test_no_temporary_files_left(self, tmp_path):
        out = tmp_path / "public"
        _writer(out).write(SiteIndexer().build_site(_pages()))
        assert not [name for name in _tree(out) if name.endswith(".tmp")]

    def test_preview_pages_are_written_but_not_linked(self, tmp_path):
        out = tmp_path / "public"
        pages = _pages()
        site = SiteIndexer().build_site(pages)
        draft = PageAssembler().assemble(pages[2])

        result = _writer(out).write(site, [draft])

        assert result.preview_pages == ["Draft.html"]
        assert "<p>Draft</p>" in (out / "Draft.html").read_text(encoding="utf-8")
        assert "Draft.html" not in (out / "index.html").read_text(encoding="utf-8")

    def test_preview_name_collision(self, tmp_path):
        out = tmp_path / "public"
        site = SiteIndexer().build_site([make_page("a", title="Same")])
        draft = PageAssembler().assemble(make_page("zz", title="Same", published=False))

        result = _writer(out).write(site, [draft])

        assert result.preview_pages == ["Same-zz.html"]

    def test_template_error_writes_nothing(self, tmp_path):
        """A failing template aborts before any file is written."""
        templates = tmp_path / "theme"
        templates.mkdir()
        (templates / "index.html").write_text("ok")
        (templates / "post.html").write_text("{{ post.missing.attribute }}")
        out = tmp_path / "public"

        with pytest.raises(TemplateError):
            _writer(out, str(templates)).write(SiteIndexer().build_site(_pages()))

        assert not out.exists()

    def test_theme_without_static_files(self, tmp_path):
        templates = tmp_path / "theme"
        templates.mkdir()
        (templates / "index.html").write_text("index")
        (templates / "post.html").write_text("post")

        result = _writer(tmp_path / "public", str(templates)).write(SiteIndexer().build_site(_pages()))

        assert result.assets == []


class TestPathSafety:
    """Test cases for output path validation."""

    def test_path_outside_output_dir_is_rejected(self, tmp_path):
        writer = _writer(tmp_path / "public")
        with pytest.raises(FilesystemError) as exc_info:
            writer._write_file("../escape.html", "x")
        assert exc_info.value.operation == "validate"
        assert not (tmp_path / "escape.html").exists()
