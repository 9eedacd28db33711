"""Jinja2 templating of rendered pages and listings.

Templates receive plain dictionaries with camelCase keys:

- post.html: ``siteMeta``, ``post`` (with ``content``), ``rootPath``
- index.html: ``siteMeta``, ``pages``, ``allTags``, ``rootPath``
- tag.html: ``siteMeta``, ``tagName``, ``pages``, ``allTags``, ``rootPath``

Rendered HTML fragments (``post.content``, ``titleHtml``) must be output with
the ``safe`` filter; every other value is autoescaped.
"""

import logging
import os
from typing import Any, Dict, List, Optional

import jinja2
from jinja2 import Environment, FileSystemLoader, TemplateNotFound, select_autoescape

from src.models.render_result import PageRender
from src.site_builder.models import Site

from .errors import FilesystemError, TemplateError
from .models import SiteConfig

logger = logging.getLogger(__name__)

POST_TEMPLATE = "post.html"
INDEX_TEMPLATE = "index.html"
TAG_TEMPLATE = "tag.html"


class TemplateRenderer:
    """Wraps page fragments and listings in full HTML layouts.

    Example:
        >>> renderer = TemplateRenderer(config)
        >>> html = renderer.render_index(site)
    """

    def __init__(self, config: SiteConfig):
        """Initialize the template environment.

        Raises:
            FilesystemError: If the templates directory does not exist
        """
        if not os.path.isdir(config.templates_dir):
            raise FilesystemError(config.templates_dir, 'read', 'Templates directory not found')
        self.config = config
        self.env = Environment(
            loader=FileSystemLoader(config.templates_dir),
            autoescape=select_autoescape(["html", "xml"]),
            keep_trailing_newline=True,
        )

    def has_template(self, name: str) -> bool:
        return name in self.env.list_templates()

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with a context.

        Raises:
            TemplateError: If the template is missing or fails to render
        """
        try:
            template = self.env.get_template(template_name)
            return template.render(**context)
        except TemplateNotFound:
            raise TemplateError(template_name, "template not found")
        except jinja2.TemplateError as e:
            raise TemplateError(template_name, str(e))

    def site_meta(self, site: Site, title: Optional[str] = None,
                  pages: Optional[List[PageRender]] = None) -> Dict[str, Any]:
        """Site-wide context shared by all templates."""
        listing = site.index_listing() if pages is None else pages
        return {
            "title": title or self.config.title,
            "description": self.config.description,
            "iconUrl": None,
            "pages": [r.to_context() for r in listing],
            "menu": [r.to_context() for r in site.menu()],
        }

    def all_tags(self, site: Site) -> List[Dict[str, Any]]:
        return [
            {"name": t.name, "slug": t.slug, "count": t.count, "color": t.color}
            for t in site.tags
        ]

    def render_post(self, render: PageRender, site: Site) -> str:
        """Render a full page for one post.

        The page's own template is used when it exists, post.html otherwise.
        """
        post = render.to_context()
        post["content"] = render.html
        post["description"] = render.excerpt
        context = {
            "siteMeta": self.site_meta(site),
            "post": post,
            "allTags": self.all_tags(site),
            "rootPath": ".",
        }
        template_name = render.template
        if template_name != POST_TEMPLATE and not self.has_template(template_name):
            logger.warning(
                f"Template '{template_name}' of page '{render.title}' not found, using {POST_TEMPLATE}"
            )
            template_name = POST_TEMPLATE
        return self.render(template_name, context)

    def render_index(self, site: Site) -> str:
        listing = site.index_listing()
        context = {
            "siteMeta": self.site_meta(site, pages=listing),
            "pages": [r.to_context() for r in listing],
            "allTags": self.all_tags(site),
            "rootPath": ".",
        }
        return self.render(INDEX_TEMPLATE, context)

    def render_tag(self, tag_name: str, site: Site) -> str:
        """Render the listing page of one tag.

        Uses tag.html when the theme has one, index.html otherwise.
        """
        listing = site.tag_listing(tag_name)
        context = {
            "siteMeta": self.site_meta(site, title=f"Tag: {tag_name}", pages=listing),
            "tagName": tag_name,
            "pages": [r.to_context() for r in listing],
            "allTags": self.all_tags(site),
            "rootPath": "..",
        }
        template_name = TAG_TEMPLATE if self.has_template(TAG_TEMPLATE) else INDEX_TEMPLATE
        return self.render(template_name, context)
