"""Main wikit TUI application."""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from textual.app import App
from textual.binding import Binding

from wikit.api.client import GraphQLClient
from wikit.config.schema import WikitConfig
from wikit.core.instance import InstanceContext, get_instance_context
from wikit.errors import ConfigError
from wikit.ui.core import AppMode, InteractionKernel
from wikit.ui.screens import (
    CommandScreen,
    HelpScreen,
    KernelScreen,
    PagesScreen,
    StatusScreen,
)

logger = logging.getLogger(__name__)

MODE_SCREENS = {
    AppMode.PAGES: PagesScreen,
    AppMode.STATUS: StatusScreen,
    AppMode.HELP: HelpScreen,
}


class WikitApp(App):
    """wikit - Wiki.js administration TUI.

    The app owns one ``InteractionKernel``. Escape is a priority binding that
    goes straight to the kernel's escape router, so exactly one layer
    unwinds per press regardless of widget focus.
    """

    TITLE = "wikit"
    SUB_TITLE = "Wiki.js administration"

    BINDINGS = [
        Binding("escape", "escape", "Back", show=False, priority=True),
        Binding("ctrl+q", "quit", "Quit", show=False, priority=True),
    ]

    def __init__(
        self,
        config: WikitConfig,
        instance: Optional[str] = None,
        instance_context: Optional[InstanceContext] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """Initialize the app.

        Args:
            config: Loaded configuration
            instance: Instance to start with (defaults to the configured default)
            instance_context: Shared instance context (defaults to the global one)
            transport: Optional httpx transport for every API client (tests)
        """
        super().__init__()
        self.config = config
        self.kernel = InteractionKernel()
        self.instance_context = instance_context or get_instance_context()
        self._transport = transport

        try:
            self.instance_context.set_instance(config.resolve_instance(instance))
        except ConfigError as exc:
            if instance:
                raise
            logger.warning(f"Starting without an instance: {exc}")

    def on_mount(self) -> None:
        self.push_screen(CommandScreen())
        logger.info(f"TUI started (instance={self.instance_context.instance})")

    def action_escape(self) -> None:
        try:
            self.kernel.escape.dispatch()
        except Exception as exc:
            logger.exception(f"Escape handler failed: {exc}")
            if isinstance(self.screen, KernelScreen):
                self.screen.flash_status(f"Error: {exc}")

    def open_mode(self, mode: AppMode) -> None:
        """Push the screen for ``mode``."""
        screen_class = MODE_SCREENS.get(mode)
        if screen_class is None:
            return
        logger.debug(f"Opening {mode.value} screen")
        self.push_screen(screen_class())

    def instance_labels(self) -> dict[str, str]:
        return {
            instance_id: settings.display_name(instance_id)
            for instance_id, settings in self.config.instances.items()
        }

    def create_client(self, instance_id: Optional[str] = None) -> GraphQLClient:
        """API client for ``instance_id`` or the active instance.

        Raises:
            ConfigError: If no instance is selected
        """
        instance_id = instance_id or self.instance_context.get_instance()
        settings = self.config.instances.get(instance_id)
        if settings is None:
            raise ConfigError(f"Unknown instance '{instance_id}'")
        return GraphQLClient.from_instance(
            instance_id,
            settings,
            timeout=self.config.http.timeout,
            transport=self._transport,
        )


def run(config: WikitConfig, instance: Optional[str] = None) -> None:
    """Run the TUI until the user quits."""
    app = WikitApp(config, instance=instance)
    app.run()
