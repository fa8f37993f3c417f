"""Console UI for status commands."""
from typing import Optional

from rich.console import Console
from rich.table import Table

from wikit.api.models import InstanceStatus

def build_status_table(statuses: list[InstanceStatus], active: Optional[str] = None) -> Table:
    """Build a table with one row per instance."""
    table = Table(show_header=True, header_style="bold", expand=True)
    table.add_column("Instance")
    table.add_column("Health")
    table.add_column("Site")
    table.add_column("Version")
    table.add_column("Pages", justify="right")
    table.add_column("Locales")
    table.add_column("Response", justify="right")
    for status in statuses:
        health = status.health
        name = status.instance_name
        if status.instance_id == active:
            name = f"[bold]{name}[/bold] *"
        if health is None:
            state = "[dim]unknown[/dim]"
            response = "-"
        elif health.is_healthy:
            state = "[green]HEALTHY[/green]"
            response = f"{health.response_time_ms}ms"
        else:
            state = "[red]UNHEALTHY[/red]"
            response = f"{health.response_time_ms}ms"
        summary = status.summary
        table.add_row(
            name,
            state,
            status.site_title,
            status.version or "-",
            f"{summary.published_pages}/{summary.total_pages}",
            ", ".join(status.locales) or "-",
            response,
        )
    return table

def render_instance_status(console: Console, status: InstanceStatus) -> None:
    """Render status and health for one instance."""
    health = status.health
    healthy = health is not None and health.is_healthy
    label = "[green]HEALTHY[/green]" if healthy else "[red]UNHEALTHY[/red]"
    console.print(f"[bold]{status.instance_name}[/bold]: {label}")
    if health is not None:
        console.print(f"  Status: {health.message}")
        console.print(f"  Response Time: {health.response_time_ms}ms")
    if healthy:
        summary = status.summary
        console.print(f"  Site: {status.site_title}")
        console.print(f"  Pages: {summary.published_pages}/{summary.total_pages} published")
        console.print(f"  Locales: {', '.join(status.locales) or '-'}")
        console.print(f"  Version: {status.version or 'unknown'}")

def render_status_list(console: Console, statuses: list[InstanceStatus]) -> None:
    """Render status for several instances."""
    for index, status in enumerate(statuses):
        if index:
            console.print()
        render_instance_status(console, status)
