"""Test main CLI functionality."""

import pytest
from click.testing import CliRunner

from site_forge.cli.main import cli
from site_forge import __version__


@pytest.fixture(autouse=True)
def isolated_cwd(tmp_path, monkeypatch):
    """Run commands away from any site_forge.yaml in the working directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("LOG_LEVEL", raising=False)


def test_cli_help():
    """Test that CLI shows help message."""
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])

    assert result.exit_code == 0
    assert "Site Forge" in result.output
    assert "build" in result.output
    assert "pages" in result.output


def test_cli_version():
    """Test CLI version command."""
    runner = CliRunner()
    result = runner.invoke(cli, ['--version'])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_cli_version_subcommand():
    """Test CLI version subcommand."""
    runner = CliRunner()
    result = runner.invoke(cli, ['version'])

    assert result.exit_code == 0
    assert __version__ in result.output
    assert "site-forge" in result.output


def test_cli_invalid_log_level():
    """Test CLI with invalid log level."""
    runner = CliRunner()
    result = runner.invoke(cli, ['--log-level', 'INVALID'])

    assert result.exit_code != 0
    assert "Invalid value for '--log-level'" in result.output or "Error" in result.output


def test_cli_valid_log_level():
    """Test CLI with valid log level."""
    runner = CliRunner()
    result = runner.invoke(cli, ['--log-level', 'DEBUG', '--help'])

    assert result.exit_code == 0


def test_cli_bad_config_file(tmp_path):
    """Test a broken site_forge.yaml exits with an error."""
    (tmp_path / "site_forge.yaml").write_text("app: [unclosed\n")

    runner = CliRunner()
    result = runner.invoke(cli, ['version'])

    assert result.exit_code == 1
    assert "Error loading configuration" in result.output


def test_build_help():
    """Test build command help."""
    runner = CliRunner()
    result = runner.invoke(cli, ['build', '--help'])

    assert result.exit_code == 0
    assert "--strict-copy" in result.output
    assert "--keep-plugin-pages" in result.output
    assert "--max-concurrency" in result.output


def test_pages_help():
    """Test pages command help."""
    runner = CliRunner()
    result = runner.invoke(cli, ['pages', '--help'])

    assert result.exit_code == 0
    assert "--json" in result.output
