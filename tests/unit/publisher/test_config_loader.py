"""Unit tests for publisher.config_loader module."""

import pytest

from src.publisher.config_loader import ConfigLoader
from src.publisher.errors import ConfigError, FilesystemError
from src.publisher.models import PACKAGED_TEMPLATES_DIR, SiteConfig, extract_notion_id
from src.site_builder.models import DateFormat

DB_ID = "0123456789abcdef0123456789abcdef"
DB_URL = f"https://www.notion.so/me/Blog-{DB_ID}?v=fedcba9876543210fedcba9876543210"


def _write(tmp_path, content, name="site.yaml"):
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return str(path)


class TestExtractNotionId:
    """Test cases for extract_notion_id()."""

    def test_database_url_with_view(self):
        """The view id in the query string is ignored."""
        assert extract_notion_id(DB_URL) == DB_ID

    def test_bare_id(self):
        assert extract_notion_id(DB_ID.upper()) == DB_ID

    def test_hyphenated_uuid(self):
        assert extract_notion_id("0b4e5c6d-1111-2222-3333-444455556666") == "0b4e5c6d111122223333444455556666"

    def test_no_id(self):
        assert extract_notion_id("https://example.com/about") is None
        assert extract_notion_id("") is None


class TestConfigLoaderLoad:
    """Test cases for ConfigLoader.load() method."""

    def test_load_minimal_config_applies_defaults(self, tmp_path):
        config = ConfigLoader.load(_write(tmp_path, f"url: {DB_URL}\n"))

        assert isinstance(config, SiteConfig)
        assert config.database_id == DB_ID
        assert config.title == "My Blog"
        assert config.templates_dir == PACKAGED_TEMPLATES_DIR
        assert config.output_dir == "public"
        assert config.excerpt_length == 150
        assert config.date_format is DateFormat.ISO
        assert config.tag_page_enabled is True
        assert config.workers == 4
        assert config.notion_token is None

    def test_load_all_fields(self, tmp_path):
        content = f"""
url: "{DB_URL}"
title: Field Notes
description: Notes & essays
templates_dir: ./theme
output_dir: dist
excerpt_length: 80
date_format: long
tag_page_enabled: false
workers: 8
notion_token: secret_abc
"""
        config = ConfigLoader.load(_write(tmp_path, content))

        assert config.title == "Field Notes"
        assert config.description == "Notes & essays"
        assert config.templates_dir == "./theme"
        assert config.output_dir == "dist"
        assert config.excerpt_length == 80
        assert config.date_format is DateFormat.LONG
        assert config.tag_page_enabled is False
        assert config.workers == 8
        assert config.notion_token == "secret_abc"

    def test_camel_case_aliases(self, tmp_path):
        content = (
            f"url: {DB_URL}\ntheme: ./theme\nexcerptLength: 20\n"
            "dateFormat: short\ntagPageEnabled: false\noutputDir: out\n"
        )
        config = ConfigLoader.load(_write(tmp_path, content))

        assert config.templates_dir == "./theme"
        assert config.excerpt_length == 20
        assert config.date_format is DateFormat.SHORT
        assert config.tag_page_enabled is False
        assert config.output_dir == "out"

    def test_json_config(self, tmp_path):
        path = _write(tmp_path, f'{{"url": "{DB_URL}", "title": "JSON Blog"}}', name="site.json")
        assert ConfigLoader.load(path).title == "JSON Blog"

    def test_build_options(self, tmp_path):
        config = ConfigLoader.load(_write(tmp_path, f"url: {DB_URL}\nexcerpt_length: 42\n"))
        options = config.build_options()
        assert options.excerpt_length == 42
        assert options.tag_page_enabled is True

    def test_missing_file(self, tmp_path):
        with pytest.raises(FilesystemError) as exc_info:
            ConfigLoader.load(str(tmp_path / "missing.yaml"))
        assert exc_info.value.operation == "read"

    def test_invalid_yaml(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load(_write(tmp_path, "url: [unclosed\n"))
        assert "Invalid YAML" in str(exc_info.value)

    def test_empty_file(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load(_write(tmp_path, ""))
        assert "empty" in str(exc_info.value)

    def test_not_a_mapping(self, tmp_path):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader.load(_write(tmp_path, "- a\n- b\n"))
        assert "dictionary" in str(exc_info.value)


class TestConfigValidation:
    """Test cases for field validation."""

    def test_missing_url(self):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config({"title": "x"})
        assert "url" in str(exc_info.value)

    def test_url_without_id(self):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config({"url": "https://www.notion.so/me/Blog"})
        assert exc_info.value.config_field == "url"

    @pytest.mark.parametrize("field", ["excerpt_length", "workers"])
    def test_non_positive_numbers(self, field):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config({"url": DB_URL, field: 0})
        assert exc_info.value.config_field == field

    def test_non_numeric_excerpt_length(self):
        with pytest.raises(ConfigError):
            ConfigLoader._parse_config({"url": DB_URL, "excerpt_length": "long"})

    def test_unknown_date_format(self):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config({"url": DB_URL, "date_format": "roman"})
        assert exc_info.value.config_field == "date_format"
        assert "iso" in str(exc_info.value)

    def test_tag_page_enabled_must_be_bool(self):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config({"url": DB_URL, "tag_page_enabled": "yes please"})
        assert exc_info.value.config_field == "tag_page_enabled"

    def test_empty_output_dir(self):
        with pytest.raises(ConfigError) as exc_info:
            ConfigLoader._parse_config({"url": DB_URL, "output_dir": "  "})
        assert exc_info.value.config_field == "output_dir"

    def test_null_values_fall_back_to_defaults(self):
        config = ConfigLoader._parse_config({"url": DB_URL, "title": None, "workers": None})
        assert config.title == "My Blog"
        assert config.workers == 4

