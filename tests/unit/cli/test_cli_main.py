"""Unit tests for main CLI entry point (main.py).

Tests the Typer CLI application using CliRunner.
"""

import logging
from unittest.mock import MagicMock, Mock, patch

import pytest
from typer.testing import CliRunner

from src.cli import __version__
from src.cli.main import GETTING_STARTED_MESSAGE, _configure_logging, app
from src.cli.models import ExitCode

runner = CliRunner()


@pytest.fixture
def build_cmd():
    with patch('src.cli.main.BuildCommand') as mock_cls, \
            patch('src.cli.main.OutputHandler'), \
            patch('src.cli.main._configure_logging'):
        instance = Mock()
        instance.run.return_value = ExitCode.SUCCESS
        mock_cls.return_value = instance
        yield mock_cls


class TestConfigureLogging:
    """Test cases for _configure_logging function."""

    @pytest.mark.parametrize(
        "verbosity,level",
        [(0, logging.WARNING), (1, logging.INFO), (2, logging.DEBUG), (5, logging.DEBUG)],
    )
    def test_levels(self, verbosity, level):
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(verbosity)

            mock_logger.setLevel.assert_called_with(level)

    def test_only_configures_app_logger(self):
        with patch('logging.getLogger') as mock_get_logger:
            _configure_logging(0)
            mock_get_logger.assert_any_call("src")

    def test_logdir_creates_log_file(self, tmp_path):
        app_logger = logging.getLogger("src")
        before = list(app_logger.handlers)
        try:
            _configure_logging(1, str(tmp_path / "logs"))
            files = list((tmp_path / "logs").iterdir())
            assert len(files) == 1
            assert files[0].name.startswith("notion-sitegen_")
        finally:
            for handler in app_logger.handlers[len(before):]:
                handler.close()
            app_logger.handlers = before


class TestMainCommand:
    """Test cases for the build command line."""

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"notion-sitegen version {__version__}" in result.output

    def test_missing_default_config_shows_getting_started(self, build_cmd):
        with runner.isolated_filesystem():
            result = runner.invoke(app, [])

        assert result.exit_code == 1
        assert GETTING_STARTED_MESSAGE.splitlines()[0] in result.output
        build_cmd.assert_not_called()

    def test_default_run(self, build_cmd):
        with runner.isolated_filesystem():
            with open("site.yaml", "w") as f:
                f.write("url: 0123456789abcdef0123456789abcdef\n")
            result = runner.invoke(app, [])

        assert result.exit_code == ExitCode.SUCCESS
        assert build_cmd.call_args.kwargs["config_path"] == "site.yaml"
        build_cmd.return_value.run.assert_called_once_with(output_dir=None, preview=False, strict=False)

    def test_options_are_passed_through(self, build_cmd):
        result = runner.invoke(
            app, ["--config", "blog.yaml", "--output", "dist", "--preview", "--strict"]
        )

        assert result.exit_code == ExitCode.SUCCESS
        assert build_cmd.call_args.kwargs["config_path"] == "blog.yaml"
        build_cmd.return_value.run.assert_called_once_with(output_dir="dist", preview=True, strict=True)

    def test_short_options(self, build_cmd):
        result = runner.invoke(app, ["-c", "blog.yaml", "-o", "dist"])

        assert result.exit_code == ExitCode.SUCCESS
        build_cmd.return_value.run.assert_called_once_with(output_dir="dist", preview=False, strict=False)

    @pytest.mark.parametrize(
        "exit_code",
        [ExitCode.GENERAL_ERROR, ExitCode.AUTH_ERROR, ExitCode.NETWORK_ERROR, ExitCode.WARNINGS],
    )
    def test_exit_code_is_propagated(self, build_cmd, exit_code):
        build_cmd.return_value.run.return_value = exit_code

        result = runner.invoke(app, ["--config", "blog.yaml"])

        assert result.exit_code == exit_code

    def test_verbosity_and_color_reach_output_handler(self):
        with patch('src.cli.main.BuildCommand') as mock_cls, \
                patch('src.cli.main.OutputHandler') as mock_output, \
                patch('src.cli.main._configure_logging') as mock_logging:
            mock_cls.return_value.run.return_value = ExitCode.SUCCESS

            runner.invoke(app, ["-c", "blog.yaml", "-v", "2", "--no-color", "--logdir", "logs"])

        mock_output.assert_called_once_with(verbosity=2, no_color=True)
        mock_logging.assert_called_once_with(2, "logs")
