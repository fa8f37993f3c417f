"""Help screen: CLI commands, key reference and UI components."""

from __future__ import annotations

from typing import Iterable, Optional

from rich.table import Table
from rich.text import Text
from textual.widget import Widget
from textual.widgets import Static

from wikit.ui.core import AppMode, DispatchHooks, HelpText, KeyboardMode, format_help_text
from wikit.ui.screens.base import KernelScreen
from wikit.ui.widgets import TabBar

HELP_ENTRIES: dict[str, list[tuple[str, str]]] = {
    "commands": [
        ("wikit", "Launch the TUI (same as `wikit tui`)."),
        ("wikit pages list [PREFIX]", "List pages under a path prefix. --recursive includes nested pages, --search filters by title or path, --limit caps the result."),
        ("wikit pages delete PREFIX", "Delete every page under a prefix after confirmation (--force skips it). Partial failures are reported per page."),
        ("wikit pages export FILE", "Export all pages to JSON. --with-content fetches page sources too."),
        ("wikit pages move ID DEST", "Move a page to another path; --locale selects the destination locale."),
        ("wikit pages render ID", "Re-render a page."),
        ("wikit status [--all]", "Show site, version, page counts and health for the active instance or every instance."),
        ("wikit config list", "Show configured instances."),
        ("wikit config add NAME URL KEY", "Add or replace an instance (--label, --default)."),
        ("wikit config remove NAME", "Remove an instance."),
        ("wikit config use NAME", "Make an instance the default."),
        ("-i / --instance NAME", "Run any command against a specific instance."),
    ],
    "navigation": [
        ("Tab / Shift+Tab", "Next / previous tab. Always available, resets search and edit modes."),
        ("1-9", "Jump to a tab by number."),
        ("← →", "Switch tabs while the tab bar has focus."),
        ("↓", "Enter the list from the tab bar, or leave the search field."),
        ("↑", "Move up; at the first row, return to the tab bar."),
        ("Enter", "Select, edit a field, or confirm."),
        ("Space", "Mark or unmark a row in multi-select lists."),
        ("s", "Start searching on tabs that support it."),
        ("Esc", "Go back one level: close a dialog, leave edit or search, return to the tab bar, then leave the screen."),
        ("Ctrl+Q", "Quit wikit."),
    ],
    "ui": [
        ("Header", "Shows what the innermost screen or dialog is about, plus a coloured badge for the active instance."),
        ("Tab bar", "Numbered tabs. The active tab is reversed while the tab bar has focus."),
        ("Search", "Typing filters the list; the selection moves back to the first match."),
        ("Confirmation dialog", "Lists up to five affected items. Cancel is selected by default; ← picks confirm."),
        ("Progress", "Long operations report progress while the dialog ignores input."),
        ("Error dialog", "Shows what failed. Try Again returns to the confirmation, Esc does the same."),
        ("Status line", "Short-lived messages above the key help, such as batch results."),
        ("Key help", "Bottom row. Always describes the keys of the innermost active layer."),
    ],
}


class HelpScreen(KernelScreen):
    """Three help tabs with wrap-around tab arrows."""

    MODE = AppMode.HELP
    SCOPE_ID = "help"
    TABS = ["commands", "navigation", "ui"]
    SEARCH_KEY = None
    WRAP_TABS = True

    DEFAULT_CSS = """
    HelpScreen #help-list {
        height: 1fr;
    }

    HelpScreen #help-detail {
        height: auto;
        min-height: 3;
        border-top: solid $primary-darken-2;
        padding: 0 1;
    }
    """

    def compose_body(self) -> Iterable[Widget]:
        yield TabBar(["Commands", "Navigation", "UI Components"], id="tab-bar")
        yield Static("", id="help-list")
        yield Static("", id="help-detail")

    def header_caption(self) -> tuple[str, Optional[str]]:
        return ("Help", self.TABS[self.input_state.tab_index].title())

    def help_text(self) -> Optional[str]:
        if self.input_state.mode is KeyboardMode.TAB_BAR:
            return format_help_text(HelpText.TABS, HelpText.QUICK_TABS, "↓ enter", HelpText.BACK)
        return format_help_text(HelpText.NAVIGATE, "Tab switch tabs", HelpText.BACK)

    def build_hooks(self) -> DispatchHooks:
        hooks = super().build_hooks()
        hooks.item_count = lambda tab: len(HELP_ENTRIES[tab])
        return hooks

    def render_body(self) -> None:
        state = self.input_state
        entries = HELP_ENTRIES[state.current_tab]
        in_content = state.mode is KeyboardMode.CONTENT

        table = Table.grid(padding=(0, 2))
        table.add_column(style="bold cyan", no_wrap=True)
        table.add_column()
        for index, (name, description) in enumerate(entries):
            selected = in_content and index == state.selection_index
            marker = "▸ " if selected else "  "
            summary = description.split(". ")[0]
            table.add_row(Text(marker + name, style="reverse" if selected else ""), summary)

        try:
            self.query_one("#tab-bar", TabBar).set_state(state.tab_index, not in_content)
            self.query_one("#help-list", Static).update(table)
            detail = entries[state.selection_index][1] if in_content and entries else ""
            self.query_one("#help-detail", Static).update(detail)
        except Exception:
            pass
