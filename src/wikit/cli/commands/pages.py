"""Page CLI commands."""

from pathlib import Path
from typing import Optional

import typer

from wikit.api.pages import delete_pages, export_pages, filter_pages, list_pages, move_page, render_page
from wikit.cli.context import console, get_state, handle_errors, run_async
from wikit.ui.console import pages as ui_pages

pages_app = typer.Typer(
    name="pages",
    help="List, export, move, render and delete pages",
)


@pages_app.callback(invoke_without_command=True)
def pages_callback(ctx: typer.Context):
    """Page operations."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@pages_app.command("list")
@handle_errors
def list_command(
    ctx: typer.Context,
    prefix: str = typer.Argument("", help="Path prefix (e.g. /en/docs); optional with --search"),
    limit: int = typer.Option(0, "--limit", "-l", help="Limit number of results (0 = all)"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Include nested pages"),
    search: Optional[str] = typer.Option(None, "--search", "-s", help="Search pages by title or path"),
) -> None:
    """List pages under a prefix."""
    state = get_state(ctx)

    async def _list():
        async with state.client() as client:
            return await list_pages(client)

    pages = filter_pages(
        run_async(_list()),
        prefix,
        recursive=recursive or (not prefix and bool(search)),
        search=search,
        limit=limit,
    )
    ui_pages.render_page_list(console, pages, prefix)


@pages_app.command("delete")
@handle_errors
def delete_command(
    ctx: typer.Context,
    prefix: str = typer.Argument(..., help="Path prefix (e.g. /en/old-docs)"),
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirm prompt"),
) -> None:
    """Delete every page under a prefix."""
    state = get_state(ctx)
    client = state.client()

    async def _list():
        async with client:
            return await list_pages(client)

    pages = filter_pages(run_async(_list()), prefix, recursive=True)
    if not pages:
        console.print(f"[yellow]No pages found under {prefix}.[/yellow]")
        return

    ui_pages.render_delete_preview(console, pages)
    if not force and not typer.confirm("Delete these pages?", default=False):
        console.print("Aborted.")
        raise typer.Exit(0)

    async def _delete():
        async with client:
            return await delete_pages(
                client,
                pages,
                on_progress=lambda current, total: console.print(
                    f"[dim]Deleting {current}/{total}[/dim]", end="\r"
                ),
            )

    outcome = run_async(_delete())
    console.print()
    ui_pages.render_delete_outcome(console, outcome)


@pages_app.command("export")
@handle_errors
def export_command(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Output JSON file"),
    with_content: bool = typer.Option(False, "--with-content", help="Include page content"),
) -> None:
    """Export all pages to a JSON file."""
    state = get_state(ctx)
    console.print(f"Exporting pages{' with content' if with_content else ''} to {file}...")

    async def _export():
        async with state.client() as client:
            return await export_pages(
                client,
                file,
                include_content=with_content,
                on_progress=lambda current, total: console.print(
                    f"[dim]Fetching page content: {current}/{total}[/dim]", end="\r"
                ),
            )

    count = run_async(_export())
    if with_content:
        console.print()
    ui_pages.render_export_result(console, count, str(file))


@pages_app.command("move")
@handle_errors
def move_command(
    ctx: typer.Context,
    page_id: int = typer.Argument(..., metavar="ID", help="Page ID"),
    destination: str = typer.Argument(..., help="Destination path"),
    locale: str = typer.Option("en", "--locale", "-l", help="Destination locale"),
) -> None:
    """Move a page to a different path or locale."""
    state = get_state(ctx)

    async def _move():
        async with state.client() as client:
            return await move_page(client, page_id, destination, locale)

    result = run_async(_move())
    ui_pages.render_mutation_result(
        console,
        result,
        success=f"Page {page_id} moved to {locale}/{destination}",
        failure="Failed to move page",
    )


@pages_app.command("render")
@handle_errors
def render_command(
    ctx: typer.Context,
    page_id: int = typer.Argument(..., metavar="ID", help="Page ID"),
) -> None:
    """Re-render a page."""
    state = get_state(ctx)

    async def _render():
        async with state.client() as client:
            return await render_page(client, page_id)

    result = run_async(_render())
    ui_pages.render_mutation_result(
        console,
        result,
        success=f"Page {page_id} rendered",
        failure="Failed to render page",
    )
