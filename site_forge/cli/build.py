"""Build command for site-forge CLI."""

import sys
import click
from pathlib import Path
from typing import Optional
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from site_forge.config.settings import Settings, get_settings
from site_forge.exceptions import SiteForgeError
from site_forge.models.build import BootstrapResult, ProgramConfig
from site_forge.pipeline.orchestrator import run_bootstrap
from site_forge.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


@click.command('build')
@click.argument('directory', type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path))
@click.option(
    '--strict-copy',
    is_flag=True,
    help='Abort when the intermediate build directory cannot be prepared'
)
@click.option(
    '--keep-plugin-pages',
    is_flag=True,
    help='Do not let auto-discovered pages replace plugin-declared pages at the same route'
)
@click.option(
    '--max-concurrency',
    type=click.IntRange(min=1),
    help='Maximum number of plugin handlers running at once'
)
@click.pass_context
def build(
    ctx: click.Context,
    directory: Path,
    strict_copy: bool = False,
    keep_plugin_pages: bool = False,
    max_concurrency: Optional[int] = None
) -> None:
    """
    Bootstrap the site in DIRECTORY.

    \b
    1. Load site-config.yaml and plugins
    2. Build the query schema
    3. Collect pages from plugins (create_pages)
    4. Discover pages under pages/
    5. Let plugins rewrite the registry (on_post_create_pages)
    6. Hand the registry to the query subsystem
    """
    settings = _build_settings(ctx, strict_copy, keep_plugin_pages, max_concurrency)

    console.print("[bold blue]Site Forge Bootstrap[/bold blue]")
    console.print(f"Site: {escape(str(directory))}")
    console.print()

    try:
        result = run_bootstrap(ProgramConfig(directory=directory, settings=settings))
    except SiteForgeError as e:
        console.print(f"[red]Build failed: {escape(str(e))}[/red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Unexpected error: {escape(str(e))}[/red]")
        logger.exception("Bootstrap failed")
        sys.exit(3)

    _display_results(result)
    console.print("[bold green]✓ Bootstrap completed successfully[/bold green]")


def _build_settings(ctx: click.Context, strict_copy: bool, keep_plugin_pages: bool,
                    max_concurrency: Optional[int]) -> Settings:
    """Apply command flags on top of the loaded settings."""
    settings = (ctx.obj or {}).get("settings")
    if settings is None:
        settings = get_settings()

    build_updates = {}
    if strict_copy:
        build_updates["strict_copy"] = True
    if max_concurrency:
        build_updates["max_concurrency"] = max_concurrency

    discovery_updates = {}
    if keep_plugin_pages:
        discovery_updates["override_existing"] = False

    return settings.model_copy(update={
        "build": settings.build.model_copy(update=build_updates),
        "discovery": settings.discovery.model_copy(update=discovery_updates),
    })


def _display_results(result: BootstrapResult) -> None:
    """Display bootstrap summary and the registered pages."""
    stats = result.stats

    table = Table(title="Bootstrap Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green")

    table.add_row("Plugins", str(stats.plugins))
    table.add_row("Plugin Pages", str(stats.plugin_pages))
    table.add_row("Discovered Pages", str(stats.discovered_pages))
    table.add_row("Overridden Pages", str(stats.overridden_pages))
    table.add_row("Total Pages", str(stats.total_pages))

    console.print(table)

    pages = Table(title="Pages")
    pages.add_column("Route", style="cyan")
    pages.add_column("Component")
    for page in result.pages.values():
        pages.add_row(escape(page.path), escape(page.component))
    console.print(pages)

    console.print(f"\n[bold]State:[/bold] {result.state.value}")
    console.print(f"[bold]Duration:[/bold] {stats.duration:.2f}s")
