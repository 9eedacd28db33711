"""Build command orchestration for CLI.

This module provides the BuildCommand class that runs a complete site
build: load the configuration, query the Notion database, fetch and render
pages in parallel, index the site and write the output tree.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from src.cli.errors import BuildError, CLIError, ConfigNotFoundError
from src.cli.models import BuildSummary, ExitCode
from src.cli.output import OutputHandler
from src.models.page import Page
from src.models.render_result import PageRender
from src.notion_api.api_wrapper import NotionAPI
from src.notion_api.auth import Authenticator
from src.notion_api.block_parser import BlockParser
from src.notion_api.errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
    MalformedResponseError,
    NotionError,
    PageNotFoundError,
)
from src.publisher.config_loader import ConfigLoader
from src.publisher.errors import ConfigError, PublishError
from src.publisher.models import SiteConfig
from src.publisher.site_writer import SiteWriter
from src.publisher.template_renderer import TemplateRenderer
from src.site_builder.page_assembler import PageAssembler
from src.site_builder.site_indexer import SiteIndexer, sort_pages

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "site.yaml"


class BuildCommand:
    """Orchestrates a complete site build.

    The build workflow:
        1. Load configuration
        2. Query the database for all rows and read their properties
        3. Fetch and render the block tree of every published page
           (and unpublished pages in preview mode) in a thread pool
        4. Index the site (ordering, tag buckets)
        5. Render templates and write the output tree
        6. Return an exit code

    Nothing is written to disk before every page has been rendered.

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> exit_code = BuildCommand(output_handler=output).run()
        >>> sys.exit(exit_code)
    """

    def __init__(
        self,
        config_path: str = DEFAULT_CONFIG_PATH,
        output_handler: Optional[OutputHandler] = None,
        api: Optional[NotionAPI] = None,
        parser: Optional[BlockParser] = None,
    ):
        """Initialize build command with dependencies.

        Args:
            config_path: Path to configuration YAML file
            output_handler: OutputHandler for terminal output (optional)
            api: NotionAPI client (created from the configuration if omitted)
            parser: BlockParser (optional)
        """
        self.config_path = config_path
        self.output_handler = output_handler or OutputHandler()
        self.api = api
        self.parser = parser or BlockParser()

    def run(
        self,
        output_dir: Optional[str] = None,
        preview: bool = False,
        strict: bool = False,
    ) -> ExitCode:
        """Execute the build.

        Args:
            output_dir: Overrides the configured output directory
            preview: Also render unpublished pages (not linked from listings)
            strict: Return ExitCode.WARNINGS when any block rendered with a warning

        Returns:
            ExitCode indicating success or specific failure type
        """
        try:
            config = self._load_config(output_dir)
            summary = self._build(config, preview)
            self.output_handler.print_summary(summary)

            if strict and summary.warning_count:
                logger.warning(f"Build finished with {summary.warning_count} render warning(s)")
                return ExitCode.WARNINGS
            return ExitCode.SUCCESS

        except InvalidCredentialsError as e:
            logger.error(f"Authentication failed: {e}")
            self.output_handler.error(f"Authentication failed: {e}")
            self.output_handler.info(
                "Set NOTION_TOKEN (or notion_token in the configuration) and share "
                "the database with the integration"
            )
            return ExitCode.AUTH_ERROR

        except (APIUnreachableError, APIAccessError) as e:
            logger.error(f"API error: {e}")
            self.output_handler.error(f"API error: {e}")
            self.output_handler.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except PageNotFoundError as e:
            logger.error(f"Notion object not found: {e}")
            self.output_handler.error(f"{e} (is the database shared with the integration?)")
            return ExitCode.GENERAL_ERROR

        except (ConfigError, ConfigNotFoundError) as e:
            logger.error(f"Configuration error: {e}")
            self.output_handler.error(f"Configuration error: {e}")
            return ExitCode.GENERAL_ERROR

        except (PublishError, NotionError, CLIError) as e:
            logger.error(f"Build failed: {e}")
            self.output_handler.error(f"Build failed: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during build")
            self.output_handler.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _load_config(self, output_dir: Optional[str]) -> SiteConfig:
        logger.info(f"Loading configuration from {self.config_path}")
        if not Path(self.config_path).exists():
            raise ConfigNotFoundError(self.config_path)
        config = ConfigLoader.load(self.config_path)
        if output_dir:
            config.output_dir = output_dir
        return config

    def _build(self, config: SiteConfig, preview: bool) -> BuildSummary:
        api = self.api or NotionAPI(Authenticator(token=config.notion_token))
        options = config.build_options()
        assembler = PageAssembler(options)
        summary = BuildSummary(output_dir=config.output_dir)

        with self.output_handler.spinner("Querying Notion database..."):
            rows = api.query_database(config.database_id)

        pages: List[Page] = []
        for row in rows:
            try:
                pages.append(self.parser.parse_page(row))
            except MalformedResponseError as e:
                logger.warning(f"Skipping database row: {e}")
                summary.skipped_count += 1

        published = [p for p in pages if p.published]
        unpublished = [p for p in pages if not p.published]
        summary.unpublished_count = len(unpublished)
        to_render = published + (unpublished if preview else [])
        self.output_handler.info(
            f"Found {len(published)} published and {len(unpublished)} unpublished page(s)"
        )

        renders = self._render_pages(api, assembler, to_render, config.workers)

        site = SiteIndexer(options, assembler).build_site(pages, renders)
        preview_renders = [renders[p.id] for p in sort_pages(unpublished)] if preview else []

        for render in [site.renders[p.id] for p in site.pages] + preview_renders:
            summary.warnings.extend((render.title or render.page_id, w) for w in render.warnings)

        writer = SiteWriter(config.output_dir, TemplateRenderer(config))
        result = writer.write(site, preview_renders)

        summary.page_count = len(result.pages)
        summary.tag_page_count = len(result.tag_pages)
        summary.preview_count = len(result.preview_pages)
        summary.asset_count = len(result.assets)
        self.output_handler.success(f"Wrote {result.total} file(s) to {config.output_dir}")
        return summary

    def _render_pages(
        self,
        api: NotionAPI,
        assembler: PageAssembler,
        pages: List[Page],
        workers: int,
    ) -> Dict[str, PageRender]:
        """Fetch and render pages in parallel.

        Completion order does not matter; the site indexer sorts afterwards.
        The first failure cancels the pages that have not started yet.

        Raises:
            NotionError: If a page's blocks could not be fetched
            BuildError: If a page failed for any other reason
        """
        renders: Dict[str, PageRender] = {}
        if not pages:
            return renders

        with self.output_handler.progress_bar(len(pages), "Rendering pages") as progress:
            task = progress.add_task("Rendering pages", total=len(pages))
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = {
                    executor.submit(self._render_page, api, assembler, page): page
                    for page in pages
                }
                for i, future in enumerate(as_completed(futures), 1):
                    page = futures[future]
                    try:
                        page_id, render = future.result()
                    except NotionError:
                        self._cancel(futures)
                        raise
                    except Exception as e:
                        self._cancel(futures)
                        raise BuildError(f"Rendering page {page.id} failed: {e}", page.id) from e
                    renders[page_id] = render
                    logger.info(f"Rendered page {i}/{len(pages)}: {page.plain_title or page.id}")
                    progress.update(task, advance=1)
        return renders

    def _render_page(self, api: NotionAPI, assembler: PageAssembler, page: Page) -> Tuple[str, PageRender]:
        page.blocks = self.parser.parse_blocks(api.get_block_tree(page.id))
        return page.id, assembler.assemble(page)

    @staticmethod
    def _cancel(futures) -> None:
        for future in futures:
            future.cancel()
