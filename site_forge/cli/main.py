"""Main CLI entry point for site-forge."""

import sys
import click
from typing import Optional
from rich.console import Console
from rich.markup import escape

from site_forge import __version__
from site_forge.config.settings import get_settings
from site_forge.exceptions import ConfigLoadError
from site_forge.utils.logging import setup_logging, get_logger
from site_forge.cli.build import build
from site_forge.cli.pages import list_pages


console = Console()
logger = get_logger(__name__)


@click.group()
@click.version_option(version=__version__, prog_name="site-forge")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Set the logging level"
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str] = None) -> None:
    """
    Site Forge - bootstrap pipeline for static site builds.

    Discovers pages, runs plugin hooks and builds the page registry
    that rendering works from.
    """
    ctx.ensure_object(dict)

    config_overrides = {}
    if log_level:
        config_overrides = {"app": {"log_level": log_level}}

    try:
        settings = get_settings(config_overrides)
    except ConfigLoadError as e:
        console.print(f"[red]Error loading configuration: {escape(str(e))}[/red]")
        ctx.exit(1)

    ctx.obj["settings"] = settings
    setup_logging(settings.app, console)
    logger.debug(f"Loaded configuration: pages_dir={settings.discovery.pages_dir}")


@cli.command()
def version() -> None:
    """Display version information."""
    console.print(f"[bold green]site-forge[/bold green] version [bold]{__version__}[/bold]")


cli.add_command(build)
cli.add_command(list_pages)


def main() -> None:
    """Entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)


if __name__ == "__main__":
    main()
