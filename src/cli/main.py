"""Main CLI entry point for notion-sitegen command.

This module provides the Typer application that serves as the entry point
for the notion-sitegen command-line tool. A single command builds the site;
options tune where output goes and how strictly warnings are treated.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from src.cli import __version__
from src.cli.build_command import DEFAULT_CONFIG_PATH, BuildCommand
from src.cli.output import OutputHandler

app = typer.Typer(
    name="notion-sitegen",
    help="""Generate a static website from a Notion database.

QUICK START:
  notion-sitegen                       # Build using ./site.yaml
  notion-sitegen --config blog.yaml    # Use another configuration file
  notion-sitegen --preview             # Also render unpublished pages
  notion-sitegen --strict              # Exit with code 5 on render warnings""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)

GETTING_STARTED_MESSAGE = f"""No configuration found at {DEFAULT_CONFIG_PATH}.

Create one with at least the database URL:

  url: https://www.notion.so/<workspace>/<database-id>?v=...
  title: My Blog

and export your integration token:

  NOTION_TOKEN=secret_...   (environment or .env file)

Run 'notion-sitegen --help' for all options."""


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'src' namespace logger to avoid affecting third-party
    libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("src")
    app_logger.setLevel(level)

    log_format = "%(asctime)s [%(levelname)8s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"notion-sitegen_{timestamp}.log"

        file_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        file_formatter = logging.Formatter(file_format, datefmt=date_format)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


@app.command()
def main_command(
    config: str = typer.Option(
        DEFAULT_CONFIG_PATH,
        "--config",
        "-c",
        help="Path to the site configuration file (YAML or JSON)",
        metavar="PATH",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output directory (overrides output_dir from the configuration)",
        metavar="DIR",
    ),
    preview: bool = typer.Option(
        False,
        "--preview",
        help="Also render unpublished pages (not linked from any listing)",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Exit with code 5 when any block rendered with a warning",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
    ),
) -> None:
    """Generate a static website from a Notion database.

    \b
    EXIT CODES:
      0  site built
      1  configuration, template or filesystem error
      3  Notion token missing or rejected
      4  Notion API unreachable
      5  built with render warnings (--strict only)
    """
    if version:
        typer.echo(f"notion-sitegen version {__version__}")
        raise typer.Exit()

    if config == DEFAULT_CONFIG_PATH and not Path(config).exists():
        typer.echo(GETTING_STARTED_MESSAGE)
        raise typer.Exit(1)

    _configure_logging(verbosity, logdir)
    output_handler = OutputHandler(verbosity=verbosity, no_color=no_color)

    build_cmd = BuildCommand(config_path=config, output_handler=output_handler)
    exit_code = build_cmd.run(output_dir=output, preview=preview, strict=strict)

    raise typer.Exit(int(exit_code))


def main() -> None:
    """Main entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
