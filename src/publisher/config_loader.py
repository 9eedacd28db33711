"""YAML configuration loading and validation.

This module loads the site configuration file. The file is YAML; plain JSON
configuration files are accepted too since JSON is valid YAML.
"""

import logging
from typing import Any, Dict

import yaml

from src.site_builder.models import DateFormat

from .errors import ConfigError, FilesystemError
from .models import PACKAGED_TEMPLATES_DIR, SiteConfig, extract_notion_id

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Handles configuration file loading and validation.

    Configuration file structure:
        url: "https://www.notion.so/me/0123456789abcdef0123456789abcdef?v=..."
        title: "My Blog"
        description: "Notes and essays"
        templates_dir: "./templates"
        output_dir: "public"
        excerpt_length: 150
        date_format: "iso"          # iso | long | short
        tag_page_enabled: true
        workers: 4
        notion_token: "secret_..."  # optional, NOTION_TOKEN otherwise
    """

    # Required top-level config fields
    REQUIRED_FIELDS = {'url'}

    # Alternative spellings accepted for some fields
    ALIASES = {
        'theme': 'templates_dir',
        'notionToken': 'notion_token',
        'excerptLength': 'excerpt_length',
        'dateFormat': 'date_format',
        'tagPageEnabled': 'tag_page_enabled',
        'outputDir': 'output_dir',
    }

    # Default values for optional fields
    DEFAULTS = {
        'title': 'My Blog',
        'description': '',
        'templates_dir': PACKAGED_TEMPLATES_DIR,
        'output_dir': 'public',
        'excerpt_length': 150,
        'date_format': 'iso',
        'tag_page_enabled': True,
        'workers': 4,
        'notion_token': None,
    }

    @classmethod
    def load(cls, config_path: str) -> SiteConfig:
        """Load and parse configuration from a YAML file.

        Args:
            config_path: Path to the YAML (or JSON) configuration file

        Returns:
            SiteConfig object with parsed configuration

        Raises:
            FilesystemError: If file cannot be read
            ConfigError: If configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            raise FilesystemError(config_path, 'read', 'Configuration file not found')
        except PermissionError:
            raise FilesystemError(config_path, 'read', 'Permission denied')
        except OSError as e:
            raise FilesystemError(config_path, 'read', str(e))

        try:
            config_dict = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML syntax: {str(e)}")

        if config_dict is None:
            raise ConfigError("Configuration file is empty")

        if not isinstance(config_dict, dict):
            raise ConfigError(
                f"Configuration must be a YAML dictionary, got {type(config_dict).__name__}"
            )

        config = cls._parse_config(config_dict)
        logger.debug(f"Loaded configuration from {config_path} (database {config.database_id})")
        return config

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> SiteConfig:
        """Parse and validate configuration dictionary.

        Raises:
            ConfigError: If configuration is invalid
        """
        values = {}
        for key, value in config_dict.items():
            values[cls.ALIASES.get(key, key)] = value

        missing_fields = cls.REQUIRED_FIELDS - set(values.keys())
        if missing_fields:
            raise ConfigError(
                f"Missing required fields: {', '.join(sorted(missing_fields))}"
            )

        url = str(values['url'] or '').strip()
        database_id = extract_notion_id(url)
        if not database_id:
            raise ConfigError(
                f"Cannot extract a 32 character Notion id from '{url}'",
                'url'
            )

        merged = dict(cls.DEFAULTS)
        merged.update({k: v for k, v in values.items() if v is not None})

        try:
            excerpt_length = int(merged['excerpt_length'])
            workers = int(merged['workers'])
        except (ValueError, TypeError) as e:
            raise ConfigError(f"Invalid field type for optional field: {str(e)}")

        if excerpt_length < 1:
            raise ConfigError(
                f"Field 'excerpt_length' must be at least 1, got {excerpt_length}",
                'excerpt_length'
            )
        if workers < 1:
            raise ConfigError(
                f"Field 'workers' must be at least 1, got {workers}",
                'workers'
            )

        try:
            date_format = DateFormat(str(merged['date_format']).lower())
        except ValueError:
            allowed = ', '.join(f.value for f in DateFormat)
            raise ConfigError(
                f"Unknown date format '{merged['date_format']}' (expected one of: {allowed})",
                'date_format'
            )

        tag_page_enabled = merged['tag_page_enabled']
        if not isinstance(tag_page_enabled, bool):
            raise ConfigError(
                f"Field 'tag_page_enabled' must be true or false, got {tag_page_enabled!r}",
                'tag_page_enabled'
            )

        templates_dir = str(merged['templates_dir'])
        if not templates_dir.strip():
            raise ConfigError("Field 'templates_dir' cannot be empty", 'templates_dir')

        output_dir = str(merged['output_dir'])
        if not output_dir.strip():
            raise ConfigError("Field 'output_dir' cannot be empty", 'output_dir')

        return SiteConfig(
            url=url,
            database_id=database_id,
            title=str(merged['title']),
            description=str(merged['description']),
            templates_dir=templates_dir,
            output_dir=output_dir,
            excerpt_length=excerpt_length,
            date_format=date_format,
            tag_page_enabled=tag_page_enabled,
            workers=workers,
            notion_token=merged['notion_token'],
        )
