"""Output tree writing.

All HTML is rendered in memory first; files are only written once every
template rendered successfully. Each file is written to a temporary sibling
and moved into place, so re-running a build replaces files whole.
"""

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from src.models.render_result import PageRender
from src.site_builder.filesafe_converter import FilesafeConverter
from src.site_builder.models import Site

from .errors import FilesystemError
from .template_renderer import TemplateRenderer

logger = logging.getLogger(__name__)

TAG_DIR = "tag"
STYLESHEET = "main.css"
ASSETS_DIR = "assets"


@dataclass
class WriteResult:
    """Files produced by one site write.

    Attributes:
        pages: Post pages written (relative paths)
        tag_pages: Tag listing pages written (relative paths)
        preview_pages: Unpublished pages written in preview mode
        assets: Static files copied (relative paths)
    """
    pages: List[str] = field(default_factory=list)
    tag_pages: List[str] = field(default_factory=list)
    preview_pages: List[str] = field(default_factory=list)
    assets: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.pages) + len(self.tag_pages) + len(self.preview_pages) + len(self.assets) + 1


class SiteWriter:
    """Writes a Site to the output directory.

    Output layout:
        index.html
        <page>.html
        tag/<tag-slug>.html   (when tag pages are enabled)
        main.css, assets/     (copied from the templates directory)

    Example:
        >>> writer = SiteWriter(config.output_dir, TemplateRenderer(config))
        >>> result = writer.write(site)
    """

    def __init__(self, output_dir: str, templates: TemplateRenderer):
        self.output_dir = output_dir
        self.templates = templates

    def write(self, site: Site, preview: Optional[List[PageRender]] = None) -> WriteResult:
        """Render and write the whole site.

        Args:
            site: Assembled site
            preview: Renders of unpublished pages to write as well; they are
                     not linked from any listing

        Returns:
            WriteResult listing the written files

        Raises:
            TemplateError: If a template fails (nothing is written)
            FilesystemError: If the output cannot be written
        """
        result = WriteResult()
        files: List[Tuple[str, str]] = [("index.html", self.templates.render_index(site))]

        taken = {"index.html"}
        for page in site.pages:
            render = site.renders[page.id]
            files.append((render.url, self.templates.render_post(render, site)))
            result.pages.append(render.url)
            taken.add(render.url)

        for render in preview or []:
            url = render.url
            if url in taken:
                url = FilesafeConverter.title_to_filename(f"{url[:-len('.html')]}-{render.page_id}")
            taken.add(url)
            files.append((url, self.templates.render_post(render, site)))
            result.preview_pages.append(url)

        for stat in site.tags:
            path = f"{TAG_DIR}/{stat.slug}.html"
            files.append((path, self.templates.render_tag(stat.name, site)))
            result.tag_pages.append(path)

        self._ensure_dir(self.output_dir)
        for relative_path, content in files:
            self._write_file(relative_path, content)
        result.assets = self._copy_static()

        logger.info(
            f"Wrote {len(result.pages)} page(s), {len(result.tag_pages)} tag page(s) "
            f"and {len(result.assets)} static file(s) to {self.output_dir}"
        )
        return result

    def _ensure_dir(self, directory: str) -> None:
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise FilesystemError(directory, 'create_directory', str(e))

    def _validate_path_safety(self, file_path: str) -> None:
        """Ensure a path resolves inside the output directory.

        Raises:
            FilesystemError: If the path escapes the output directory
        """
        real_base = os.path.realpath(self.output_dir)
        real_path = os.path.realpath(file_path)
        if not real_path.startswith(real_base + os.sep) and real_path != real_base:
            raise FilesystemError(
                file_path,
                'validate',
                f'Path traversal detected: {file_path} is outside output directory {self.output_dir}'
            )

    def _write_file(self, relative_path: str, content: str) -> None:
        target = os.path.join(self.output_dir, relative_path)
        self._validate_path_safety(target)
        directory = os.path.dirname(target)
        self._ensure_dir(directory)

        fd, temp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(content)
            os.replace(temp_path, target)
        except OSError as e:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise FilesystemError(target, 'write', str(e))
        logger.debug(f"Wrote {target}")

    def _copy_static(self) -> List[str]:
        """Copy main.css and the assets directory from the templates directory."""
        copied = []
        templates_dir = self.templates.config.templates_dir

        stylesheet = os.path.join(templates_dir, STYLESHEET)
        if os.path.isfile(stylesheet):
            try:
                shutil.copyfile(stylesheet, os.path.join(self.output_dir, STYLESHEET))
            except OSError as e:
                raise FilesystemError(stylesheet, 'copy', str(e))
            copied.append(STYLESHEET)

        assets_src = os.path.join(templates_dir, ASSETS_DIR)
        if os.path.isdir(assets_src):
            assets_dst = os.path.join(self.output_dir, ASSETS_DIR)
            try:
                shutil.copytree(assets_src, assets_dst, dirs_exist_ok=True)
            except (OSError, shutil.Error) as e:
                raise FilesystemError(assets_src, 'copy', str(e))
            for root, _, names in os.walk(assets_src):
                for name in sorted(names):
                    rel = os.path.relpath(os.path.join(root, name), templates_dir)
                    copied.append(rel.replace(os.sep, "/"))
        return copied

