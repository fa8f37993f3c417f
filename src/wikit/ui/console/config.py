"""Console UI for config commands."""
from pathlib import Path

from rich.console import Console
from rich.table import Table

from wikit.config.schema import WikitConfig

def mask_key(key: str) -> str:
    """Show only the last four characters of an API key."""
    if len(key) <= 8:
        return "****"
    return f"****{key[-4:]}"

def render_instance_list(console: Console, config: WikitConfig) -> None:
    """Render configured instances."""
    if not config.instances:
        console.print("[yellow]No instances configured.[/yellow]")
        console.print("[dim]Add one with: wikit config add NAME URL KEY[/dim]")
        return
    default = config.default_instance
    table = Table(show_header=True, header_style="bold")
    table.add_column("")
    table.add_column("Name", style="cyan")
    table.add_column("Label")
    table.add_column("URL")
    table.add_column("Key", style="dim")
    for instance_id, settings in config.instances.items():
        marker = "[green]*[/green]" if instance_id == default else ""
        table.add_row(marker, instance_id, settings.label or "", settings.url, mask_key(settings.key))
    console.print(table)

def render_config_saved(console: Console, message: str, path: Path) -> None:
    """Render a saved config change."""
    console.print(f"[green]{message}[/green]")
    console.print(f"[dim]Saved to {path}[/dim]")
