import logging
from pathlib import Path
from typing import Optional

import typer

from wikit import __version__
from wikit.cli.commands.config import config_app
from wikit.cli.commands.pages import pages_app
from wikit.cli.commands.status import status
from wikit.cli.context import CliState, console, get_state, handle_errors
from wikit.core.logs import setup_logging
from wikit.errors import WikitError

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="wikit",
    help="""
\b
          _ _    _ _
__      _(_) | _(_) |_
\\ \\ /\\ / / | |/ / | __|
 \\ V  V /| |   <| | |_
  \\_/\\_/ |_|_|\\_\\_|\\__|

wikit - Wiki.js administration from the terminal
(run without a command to open the TUI)
""",
    invoke_without_command=True,
    rich_markup_mode="rich",
)

# Register subcommands
app.add_typer(pages_app)
app.add_typer(config_app)
app.command("status")(status)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"wikit {__version__}")
        raise typer.Exit()


@app.command("tui", help="Open the terminal UI.")
@handle_errors
def tui(ctx: typer.Context) -> None:
    _launch_tui(get_state(ctx))


def _launch_tui(state: CliState) -> None:
    from wikit.ui.app import run

    run(state.config, instance=state.instance)


@app.callback()
def main_callback(
    ctx: typer.Context,
    instance: Optional[str] = typer.Option(
        None, "--instance", "-i", help="Instance to use (defaults to the configured default)"
    ),
    config: Optional[Path] = typer.Option(
        None, "--config", help="Config file to load (overrides WIKIT_CONFIG_PATH)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log to stderr"),
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show version and exit"
    ),
) -> None:
    """Launch TUI by default when no command is specified."""
    state = CliState(instance=instance, config_path=config, verbose=verbose)
    ctx.obj = state

    try:
        settings = state.config
    except WikitError as e:
        if ctx.invoked_subcommand == "config":
            settings = None
        else:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)

    if settings is not None:
        setup_logging(
            level="DEBUG" if verbose else settings.logging.level,
            log_file=settings.logging.file,
            console=verbose,
        )
    else:
        setup_logging(level="DEBUG" if verbose else "INFO", console=verbose)
    logger.debug(f"wikit {__version__} invoked (command={ctx.invoked_subcommand})")

    if ctx.invoked_subcommand is None:
        try:
            _launch_tui(state)
        except WikitError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(1)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
