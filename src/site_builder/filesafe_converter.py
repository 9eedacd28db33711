"""Filesafe filename conversion for pages and tags.

Converts Notion page titles and tag names to names that are safe for all
file systems and URLs.
"""

import re
from typing import Optional


class FilesafeConverter:
    """Converts titles and tag names to filesafe output names.

    Conversion rules:
    - Spaces → hyphens (-)
    - Colons (:) → double hyphens (--)
    - Special characters (/, \\, ?, %, *, |, ", <, >, &, #) → hyphens (-)
    - Runs of three or more hyphens → collapsed to a double hyphen
    - Leading/trailing hyphens → trimmed
    - Page names keep their case; tag slugs are lowercased

    Examples:
        - "Customer Feedback" → "Customer-Feedback.html"
        - "API Reference: Getting Started" → "API-Reference--Getting-Started.html"
        - tag "Machine Learning" → "machine-learning"
    """

    @staticmethod
    def _filesafe(text: str) -> str:
        name = text.strip().replace(': ', '--')
        name = name.replace(':', '--')
        name = re.sub(r'\s+', '-', name)
        name = re.sub(r'[/\\?%*|"<>&#]', '-', name)
        name = re.sub(r'-{3,}', '--', name)
        return name.strip('-')

    @classmethod
    def title_to_filename(cls, title: str, fallback: Optional[str] = None) -> str:
        """Convert a page title to an HTML filename.

        Args:
            title: The page title
            fallback: Name used when the title has no filesafe characters
                      (typically the page id)

        Returns:
            A filesafe filename with .html extension

        Examples:
            >>> FilesafeConverter.title_to_filename("Q&A Session")
            'Q-A-Session.html'
            >>> FilesafeConverter.title_to_filename("???", fallback="abc123")
            'abc123.html'
        """
        name = cls._filesafe(title or "")
        if not name:
            name = cls._filesafe(fallback or "") or "untitled"
        return f"{name}.html"

    @classmethod
    def tag_to_slug(cls, tag: str) -> str:
        """Convert a tag name to a lowercase slug.

        Examples:
            >>> FilesafeConverter.tag_to_slug("Machine Learning")
            'machine-learning'
        """
        return cls._filesafe(tag or "").lower() or "tag"
