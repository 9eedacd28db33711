"""Site assembly pipeline.

Key components:
    PageAssembler: Renders one page and extracts its listing metadata
    SiteIndexer: Orders published pages and groups them by tag
    FilesafeConverter: Output filenames for pages and tags
"""

from .filesafe_converter import FilesafeConverter
from .models import BuildOptions, DateFormat, Site, TagStat
from .page_assembler import PageAssembler
from .site_indexer import SiteIndexer, sort_pages

__all__ = [
    "BuildOptions",
    "DateFormat",
    "FilesafeConverter",
    "PageAssembler",
    "Site",
    "SiteIndexer",
    "TagStat",
    "sort_pages",
]
