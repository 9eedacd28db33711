"""Site indexing: published pages to the Site aggregate.

The indexer filters out unpublished pages, orders the rest newest first and
groups them by tag. All state lives in the returned Site; nothing is shared
between builds.
"""

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional

from src.models.page import Page
from src.models.render_result import PageRender

from .filesafe_converter import FilesafeConverter
from .models import BuildOptions, Site, TagStat
from .page_assembler import PageAssembler

logger = logging.getLogger(__name__)


def sort_pages(pages: Iterable[Page]) -> List[Page]:
    """Order pages by creation time, newest first, page id breaking ties.

    Two stable sorts: ascending id first, then descending creation time.
    """
    by_id = sorted(pages, key=lambda p: p.id)
    return sorted(by_id, key=lambda p: p.created_time, reverse=True)


class SiteIndexer:
    """Builds the Site aggregate from pages.

    Example:
        >>> indexer = SiteIndexer(BuildOptions(tag_page_enabled=True))
        >>> site = indexer.build_site(pages)
        >>> [p.id for p in site.tag_index["python"]]
    """

    def __init__(self, options: Optional[BuildOptions] = None, assembler: Optional[PageAssembler] = None):
        self.options = options or BuildOptions()
        self.assembler = assembler or PageAssembler(self.options)

    def build_site(
        self,
        pages: Iterable[Page],
        renders: Optional[Dict[str, PageRender]] = None,
    ) -> Site:
        """Build the site index from pages.

        Args:
            pages: All fetched pages, in any order
            renders: Already assembled renders keyed by page id; missing
                     renders are assembled here

        Returns:
            Site with ordered pages, tag index, renders and tag summaries
        """
        pages = list(pages)
        published = sort_pages(p for p in pages if p.published)
        skipped = len(pages) - len(published)
        if skipped:
            logger.info(f"Skipping {skipped} unpublished page(s)")

        site_renders: Dict[str, PageRender] = {}
        for page in published:
            render = (renders or {}).get(page.id)
            if render is None:
                render = self.assembler.assemble(page)
            site_renders[page.id] = render
        self._dedupe_urls(published, site_renders)

        site = Site(pages=published, renders=site_renders)
        if self.options.tag_page_enabled:
            site.tag_index = self._build_tag_index(published)
            site.tags = self._build_tag_stats(site.tag_index)
        else:
            logger.debug("Tag pages disabled, skipping tag indexing")

        logger.info(
            f"Indexed {len(site.pages)} page(s) and {len(site.tag_index)} tag(s)"
        )
        return site

    @staticmethod
    def _build_tag_index(pages: List[Page]) -> Dict[str, List[Page]]:
        """Bucket pages by tag name, keeping the page order.

        Buckets only exist for tags that have at least one page, so empty
        tag pages are never produced.
        """
        buckets: Dict[str, List[Page]] = {}
        for page in pages:
            for name in page.tag_names:
                buckets.setdefault(name, []).append(page)
        return {name: buckets[name] for name in sorted(buckets)}

    @staticmethod
    def _build_tag_stats(tag_index: Dict[str, List[Page]]) -> List[TagStat]:
        """Summarise the tags that get a listing page.

        Only pages shown in listings count, and a tag carried solely by
        unlisted pages gets no summary (and therefore no tag page).
        """
        stats = []
        for name, tagged in tag_index.items():
            tagged = [p for p in tagged if p.in_list]
            if not tagged:
                logger.debug(f"Tag '{name}' has no listed pages, no tag page")
                continue
            # Colour and slug come from the newest page carrying the tag
            tag = next(t for t in tagged[0].tags if t.name == name)
            stats.append(
                TagStat(
                    name=name,
                    slug=tag.slug or FilesafeConverter.tag_to_slug(name),
                    count=len(tagged),
                    color=tag.color,
                )
            )
        stats.sort(key=lambda s: (-s.count, s.name))
        return stats

    @staticmethod
    def _dedupe_urls(pages: List[Page], renders: Dict[str, PageRender]) -> None:
        """Make output filenames unique across the site.

        Pages are visited in site order; a page whose filename is already
        taken gets its id appended. The caller's render objects are not
        modified.
        """
        taken = set()
        for page in pages:
            render = renders[page.id]
            url = render.url
            if url in taken:
                stem = url[: -len(".html")] if url.endswith(".html") else url
                url = f"{stem}-{page.id.replace('-', '')[:8]}.html"
                suffix = 2
                while url in taken:
                    url = f"{stem}-{page.id.replace('-', '')[:8]}-{suffix}.html"
                    suffix += 1
                logger.warning(
                    f"Duplicate output name '{render.url}' for page {page.id}, using '{url}'"
                )
                renders[page.id] = replace(render, url=url)
            taken.add(url)
