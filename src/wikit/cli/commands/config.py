"""Configuration management CLI commands."""

from typing import Optional

import typer

from wikit.cli.context import console, get_state, handle_errors
from wikit.config import add_instance, read_config_file, remove_instance, save_config, user_config_path
from wikit.errors import ConfigError
from wikit.ui.console import config as ui_config

config_app = typer.Typer(
    name="config",
    help="Manage Wiki.js instances",
)


@config_app.callback(invoke_without_command=True)
def config_callback(ctx: typer.Context):
    """Configuration management commands."""
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


def _target_path(ctx: typer.Context):
    return get_state(ctx).config_path or user_config_path()


@config_app.command("list")
@handle_errors
def list_instances(ctx: typer.Context) -> None:
    """Show configured instances (files and environment)."""
    ui_config.render_instance_list(console, get_state(ctx).config)


@config_app.command("add")
@handle_errors
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Instance name"),
    url: str = typer.Argument(..., help="GraphQL endpoint, e.g. https://wiki.example.com/graphql"),
    key: str = typer.Argument(..., help="API key"),
    label: Optional[str] = typer.Option(None, "--label", help="Display label"),
    default: bool = typer.Option(False, "--default", help="Make this the default instance"),
) -> None:
    """Add or replace an instance."""
    path = _target_path(ctx)
    config = read_config_file(path)
    config = add_instance(config, name, url, key, label=label, make_default=default)
    saved = save_config(config, path)
    ui_config.render_config_saved(console, f"Added instance '{name}'", saved)


@config_app.command("remove")
@handle_errors
def remove(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Instance name"),
) -> None:
    """Remove an instance."""
    path = _target_path(ctx)
    config = remove_instance(read_config_file(path), name)
    saved = save_config(config, path)
    ui_config.render_config_saved(console, f"Removed instance '{name}'", saved)


@config_app.command("use")
@handle_errors
def use(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Instance name"),
) -> None:
    """Make an instance the default."""
    state = get_state(ctx)
    if name not in state.config.instances:
        available = ", ".join(state.config.instance_ids()) or "none"
        raise ConfigError(f"Unknown instance '{name}' (available: {available})")
    path = _target_path(ctx)
    config = read_config_file(path).model_copy(update={"default_instance": name})
    saved = save_config(config, path)
    ui_config.render_config_saved(console, f"Default instance is now '{name}'", saved)
