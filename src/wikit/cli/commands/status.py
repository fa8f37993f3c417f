"""Status CLI command."""

import asyncio

import typer

from wikit.api.system import get_instance_status
from wikit.cli.context import console, get_state, handle_errors, run_async
from wikit.ui.console import status as ui_status


@handle_errors
def status(
    ctx: typer.Context,
    all_instances: bool = typer.Option(False, "--all", "-a", help="Check every configured instance"),
) -> None:
    """Show site, version, page counts and health."""
    state = get_state(ctx)
    config = state.config
    if all_instances:
        instance_ids = config.instance_ids()
        console.print("Checking all instance health...\n")
    else:
        instance_ids = [state.resolve_instance()]

    async def _status(instance_id: str):
        settings = config.instances[instance_id]
        async with state.client(instance_id) as client:
            return await get_instance_status(client, settings.display_name(instance_id))

    async def _gather():
        return await asyncio.gather(*(_status(instance_id) for instance_id in instance_ids))

    statuses = list(run_async(_gather()))
    ui_status.render_status_list(console, statuses)
    if statuses and not any(s.health and s.health.is_healthy for s in statuses):
        raise typer.Exit(1)
