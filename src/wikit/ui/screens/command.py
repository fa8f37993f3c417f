"""Command menu screen - the TUI's entry point."""

from __future__ import annotations

from typing import Iterable, Optional

from rich.text import Text
from textual.widget import Widget
from textual.widgets import Static

from wikit.ui.core import AppMode, DispatchHooks, HelpPatterns
from wikit.ui.screens.base import KernelScreen

MENU_ITEMS: list[tuple[str, str, Optional[AppMode]]] = [
    ("Pages", "Browse, export and delete pages", AppMode.PAGES),
    ("Status", "Instance status and health", AppMode.STATUS),
    ("Help", "Commands, navigation and UI reference", AppMode.HELP),
    ("Quit", "Exit wikit", None),
]


class CommandScreen(KernelScreen):
    """Top-level menu. Escape does nothing here; Quit or Ctrl+Q exits."""

    MODE = AppMode.COMMAND
    SCOPE_ID = "command"
    TABS = ["menu"]
    SEARCH_KEY = None

    DEFAULT_CSS = """
    CommandScreen #menu {
        padding: 1 2;
    }
    """

    def compose_body(self) -> Iterable[Widget]:
        yield Static("", id="menu")

    def header_caption(self) -> tuple[str, Optional[str]]:
        return ("Command Menu", None)

    def help_text(self) -> Optional[str]:
        return HelpPatterns.MENU

    def build_hooks(self) -> DispatchHooks:
        hooks = super().build_hooks()
        hooks.item_count = lambda tab: len(MENU_ITEMS)
        hooks.on_select = self._select
        return hooks

    def _select(self, tab: str, index: int) -> None:
        mode = MENU_ITEMS[index][2]
        if mode is None:
            self.app.exit()
            return
        self.wikit.open_mode(mode)

    def leave(self) -> None:
        pass

    def render_body(self) -> None:
        text = Text()
        selected = self.input_state.selection_index
        for index, (label, description, _mode) in enumerate(MENU_ITEMS):
            marker = "▸ " if index == selected else "  "
            style = "bold reverse" if index == selected else ""
            text.append(f"{marker}{label:<10}", style=style)
            text.append(f"  {description}\n", style="dim")
        try:
            self.query_one("#menu", Static).update(text)
        except Exception:
            pass
