"""Instance status screen."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional

from textual.widget import Widget
from textual.widgets import Static

from wikit.api.models import InstanceStatus
from wikit.api.system import get_instance_status
from wikit.errors import WikitError
from wikit.ui.console.status import build_status_table
from wikit.ui.core import AppMode, DispatchHooks, HelpPatterns, KeyPress
from wikit.ui.screens.base import KernelScreen

logger = logging.getLogger(__name__)


class StatusScreen(KernelScreen):
    """Status and health of every configured instance. ``r`` refreshes."""

    MODE = AppMode.STATUS
    SCOPE_ID = "status"
    TABS = ["status"]
    SEARCH_KEY = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._statuses: list[InstanceStatus] = []
        self._loading = False
        self._error: Optional[str] = None

    def compose_body(self) -> Iterable[Widget]:
        yield Static("", id="status-table")

    def on_mount(self) -> None:
        super().on_mount()
        self.refresh_statuses()

    def header_caption(self) -> tuple[str, Optional[str]]:
        if self._loading:
            return ("Instance Status", "checking...")
        healthy = sum(1 for status in self._statuses if status.health and status.health.is_healthy)
        return ("Instance Status", f"{healthy}/{len(self._statuses)} healthy")

    def help_text(self) -> Optional[str]:
        return HelpPatterns.VIEW_ONLY

    def build_hooks(self) -> DispatchHooks:
        hooks = super().build_hooks()
        hooks.item_count = lambda tab: len(self._statuses)
        hooks.on_key = self._on_shortcut
        return hooks

    def _on_shortcut(self, tab: str, press: KeyPress) -> bool:
        if press.character == "r":
            self.refresh_statuses()
            return True
        return False

    def refresh_statuses(self) -> None:
        if self._loading:
            return
        self._loading = True
        self.refresh_view()
        self.run_worker(self._load(), exclusive=True)

    async def _load(self) -> None:
        config = self.wikit.config
        try:
            ids = config.instance_ids()
            if not ids:
                raise WikitError("No instances configured")
            self._statuses = list(await asyncio.gather(*(self._status_for(i) for i in ids)))
            self._error = None
        except WikitError as exc:
            logger.warning(f"Status refresh failed: {exc}")
            self._error = str(exc)
        finally:
            self._loading = False
        self.refresh_view()
        if self._error:
            self.flash_status(f"[red]{self._error}[/]")
        else:
            self.flash_status(f"Checked {len(self._statuses)} instance(s)")

    async def _status_for(self, instance_id: str) -> InstanceStatus:
        settings = self.wikit.config.instances[instance_id]
        async with self.wikit.create_client(instance_id) as client:
            return await get_instance_status(client, settings.display_name(instance_id))

    def render_body(self) -> None:
        try:
            widget = self.query_one("#status-table", Static)
        except Exception:
            return
        if self._loading and not self._statuses:
            widget.update("[yellow]Checking instances...[/]")
        elif self._error and not self._statuses:
            widget.update(f"[red]{self._error}[/]")
        else:
            widget.update(build_status_table(self._statuses, self.wikit.instance_context.instance))
