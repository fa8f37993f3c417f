"""Console UI for pages commands."""
import typer
from rich.console import Console
from rich.table import Table

from wikit.api.models import Page, ResponseResult
from wikit.ui.core.async_action import BatchOutcome

def build_pages_table(pages: list[Page]) -> Table:
    """Build a table of pages."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", justify="right", style="dim")
    table.add_column("Path", style="cyan")
    table.add_column("Title")
    table.add_column("Published", justify="center")
    for page in pages:
        published = "[green]yes[/]" if page.is_published else "[yellow]no[/]"
        table.add_row(str(page.id), page.full_path, page.title, published)
    return table

def render_page_list(console: Console, pages: list[Page], prefix: str = "") -> None:
    """Render the list of pages."""
    if not pages:
        where = f" under {prefix}" if prefix else ""
        console.print(f"[yellow]No pages found{where}.[/yellow]")
        return
    console.print(build_pages_table(pages))
    console.print(f"[dim]{len(pages)} page(s)[/dim]")

def render_delete_preview(console: Console, pages: list[Page], limit: int = 20) -> None:
    """Render the pages about to be deleted."""
    console.print(f"[bold red]About to delete {len(pages)} page(s):[/bold red]")
    for page in pages[:limit]:
        console.print(f"  • {page.full_path} [dim]({page.title})[/dim]")
    if len(pages) > limit:
        console.print(f"  [dim]... and {len(pages) - limit} more[/dim]")

def render_delete_outcome(console: Console, outcome: BatchOutcome) -> None:
    """Render the result of a batch delete."""
    message = outcome.message("Deleted", "page(s)")
    if outcome.failed == 0:
        console.print(f"[green]{message}[/green]")
        return
    for error in outcome.errors:
        console.print(f"  [red]✗[/red] {error}")
    if outcome.succeeded == 0:
        console.print(f"[red]Failed to delete all {outcome.failed} page(s)[/red]")
        raise typer.Exit(1)
    console.print(f"[yellow]{message}[/yellow]")

def render_export_result(console: Console, count: int, path: str) -> None:
    """Render the result of an export."""
    console.print(f"[green]Exported {count} page(s) to {path}[/green]")

def render_mutation_result(console: Console, result: ResponseResult, success: str, failure: str) -> None:
    """Render a page mutation result."""
    if result.succeeded:
        console.print(f"[green]{success}[/green]")
    else:
        console.print(f"[red]{failure}: {result.message or 'unknown error'}[/red]")
        raise typer.Exit(1)
