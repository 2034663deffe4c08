"""Pages command for site-forge CLI: list auto-discovered routes."""

import json
import sys
import click
from pathlib import Path
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from site_forge.config.settings import get_settings
from site_forge.discovery.filesystem import PageDiscovery
from site_forge.exceptions import SiteForgeError
from site_forge.models.build import ProgramConfig

console = Console()


@click.command('pages')
@click.argument('directory', type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path))
@click.option('--json', 'as_json', is_flag=True, help='Print discovered pages as JSON')
@click.pass_context
def list_pages(ctx: click.Context, directory: Path, as_json: bool = False) -> None:
    """
    List the pages auto-discovered under DIRECTORY's pages folder.

    Plugins are not run; this shows what discovery alone produces.
    """
    settings = (ctx.obj or {}).get("settings") or get_settings()
    program = ProgramConfig(directory=directory, settings=settings)

    discovery = PageDiscovery(program.pages_directory, settings.discovery)
    try:
        pages = discovery.list_pages()
    except SiteForgeError as e:
        console.print(f"[red]Discovery failed: {escape(str(e))}[/red]")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([page.model_dump() for page in pages], indent=2))
        return

    if not pages:
        console.print(f"[yellow]No pages found in {escape(str(program.pages_directory))}[/yellow]")
        return

    table = Table(title=f"Discovered Pages ({len(pages)})")
    table.add_column("Route", style="cyan")
    table.add_column("Component")
    for page in pages:
        table.add_row(escape(page.path), escape(_display_path(page.component, discovery.pages_dir)))
    console.print(table)


def _display_path(component: str, pages_dir: Path) -> str:
    """Component path relative to the resolved pages directory, absolute otherwise."""
    path = Path(component)
    try:
        return str(path.relative_to(pages_dir))
    except ValueError:
        return str(path)
