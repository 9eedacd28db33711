"""Publishing: configuration, templating and output writing.

Key components:
    ConfigLoader: Loads the YAML site configuration
    TemplateRenderer: Wraps rendered pages in Jinja2 layouts
    SiteWriter: Writes the output tree
"""

from .config_loader import ConfigLoader
from .errors import ConfigError, FilesystemError, PublishError, TemplateError
from .models import PACKAGED_TEMPLATES_DIR, SiteConfig, extract_notion_id
from .site_writer import SiteWriter, WriteResult
from .template_renderer import TemplateRenderer

__all__ = [
    "ConfigLoader",
    "ConfigError",
    "FilesystemError",
    "PublishError",
    "TemplateError",
    "PACKAGED_TEMPLATES_DIR",
    "SiteConfig",
    "extract_notion_id",
    "SiteWriter",
    "WriteResult",
    "TemplateRenderer",
]
