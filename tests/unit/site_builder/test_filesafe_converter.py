"""Unit tests for site_builder.filesafe_converter module."""

import pytest

from src.site_builder.filesafe_converter import FilesafeConverter


class TestTitleToFilename:
    """Test cases for FilesafeConverter.title_to_filename()."""

    @pytest.mark.parametrize(
        "title,expected",
        [
            ("Customer Feedback", "Customer-Feedback.html"),
            ("API Reference: Getting Started", "API-Reference--Getting-Started.html"),
            ("Q&A Session", "Q-A-Session.html"),
            ("Path/To\\File", "Path-To-File.html"),
            ("  padded  ", "padded.html"),
            ("a - - - b", "a--b.html"),
        ],
    )
    def test_conversion(self, title, expected):
        """Titles convert to filesafe names with an .html extension."""
        assert FilesafeConverter.title_to_filename(title) == expected

    def test_keeps_unicode_letters(self):
        assert FilesafeConverter.title_to_filename("Café Notes") == "Café-Notes.html"

    def test_empty_title_uses_fallback(self):
        assert FilesafeConverter.title_to_filename("???", fallback="abc123") == "abc123.html"

    def test_empty_title_without_fallback(self):
        assert FilesafeConverter.title_to_filename("") == "untitled.html"


class TestTagToSlug:
    """Test cases for FilesafeConverter.tag_to_slug()."""

    def test_lowercases_and_hyphenates(self):
        assert FilesafeConverter.tag_to_slug("Machine Learning") == "machine-learning"

    def test_special_characters(self):
        assert FilesafeConverter.tag_to_slug("C#") == "c"

    def test_empty_tag(self):
        assert FilesafeConverter.tag_to_slug("") == "tag"
