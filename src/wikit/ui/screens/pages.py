"""Pages screen: browse, export and delete pages.

Tabs:
- pages: searchable list; Enter opens details, ``r`` re-renders a page
- export: directory, filename and include-content fields plus an Export action
- delete: searchable multi-select; Space marks, ``c`` clears, Enter deletes
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional

from rich.console import Group
from rich.text import Text
from textual.widget import Widget
from textual.widgets import Static

from wikit.api.models import Page
from wikit.api.pages import delete_pages, export_pages, filter_pages, list_pages, render_page
from wikit.errors import WikitError
from wikit.ui.core import (
    AppMode,
    AsyncActionConfig,
    DispatchHooks,
    HelpPatterns,
    HelpText,
    KeyboardMode,
    KeyPress,
    begin_edit,
    clamp_selection,
    format_help_text,
)
from wikit.ui.core.kernel import ScreenScope
from wikit.ui.screens.base import KernelScreen
from wikit.ui.widgets import TabBar

logger = logging.getLogger(__name__)

LIST_WINDOW = 18

EXPORT_FIELDS = ["directory", "filename", "include_content", "export"]
EXPORT_LABELS = {
    "directory": "Directory",
    "filename": "Filename",
    "include_content": "Include content",
    "export": "Export",
}


def default_export_filename() -> str:
    return f"pages-{datetime.now().strftime('%Y%m%d-%H%M%S')}.json"


class PagesScreen(KernelScreen):
    """Page management with three tabs."""

    MODE = AppMode.PAGES
    SCOPE_ID = "pages"
    TABS = ["pages", "export", "delete"]

    DEFAULT_CSS = """
    PagesScreen #search-line {
        height: 1;
        color: $text-muted;
    }

    PagesScreen #pages-content {
        height: 1fr;
    }
    """

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._pages: list[Page] = []
        self._loading = False
        self._load_error: Optional[str] = None
        self._marked: set[int] = set()
        self._detail: Optional[Page] = None
        self._detail_scope: Optional[ScreenScope] = None
        self._export: dict[str, Any] = {
            "directory": str(Path.cwd()),
            "filename": default_export_filename(),
            "include_content": False,
        }

    def compose_body(self) -> Iterable[Widget]:
        yield TabBar(["Pages", "Export", "Delete"], id="tab-bar")
        yield Static("", id="search-line")
        yield Static("", id="pages-content")

    def on_mount(self) -> None:
        super().on_mount()
        self.reload_pages()

    def on_unmount(self) -> None:
        self._close_details()
        super().on_unmount()

    # Data

    def reload_pages(self) -> None:
        self._loading = True
        self.refresh_view()
        self.run_worker(self._load_pages(), exclusive=True, group="load")

    async def _load_pages(self) -> None:
        try:
            async with self.wikit.create_client() as client:
                self._pages = await list_pages(client)
            self._load_error = None
        except WikitError as exc:
            logger.warning(f"Loading pages failed: {exc}")
            self._load_error = str(exc)
        finally:
            self._loading = False
        known = {page.id for page in self._pages}
        self._marked &= known
        clamp_selection(self.input_state, len(self.visible_pages()))
        self.refresh_view()

    def visible_pages(self, tab: Optional[str] = None) -> list[Page]:
        tab = tab or self.input_state.current_tab
        if tab not in ("pages", "delete"):
            return []
        query = self.input_state.search_query if tab == self.input_state.current_tab else ""
        if not query:
            return list(self._pages)
        return filter_pages(self._pages, search=query)

    def selected_page(self) -> Optional[Page]:
        pages = self.visible_pages()
        index = self.input_state.selection_index
        if 0 <= index < len(pages):
            return pages[index]
        return None

    # Captions

    def header_caption(self) -> tuple[str, Optional[str]]:
        if self._loading:
            return ("Pages", "loading...")
        if self.input_state.current_tab == "delete" and self._marked:
            return ("Pages", f"{len(self._marked)} of {len(self._pages)} marked")
        return ("Pages", f"{len(self._pages)} pages")

    def help_text(self) -> Optional[str]:
        state = self.input_state
        tab = state.current_tab
        if state.mode is KeyboardMode.TAB_BAR:
            return format_help_text(HelpText.TABS, HelpText.QUICK_TABS, "↓ enter", HelpText.BACK)
        if state.mode is KeyboardMode.SEARCH:
            return HelpPatterns.SEARCHING
        if state.mode is KeyboardMode.EDITING:
            return HelpPatterns.FORM_EDITING
        if tab == "pages":
            return format_help_text(
                HelpText.NAVIGATE, "Enter details", "r render", HelpText.SEARCH, HelpText.BACK
            )
        if tab == "export":
            return format_help_text(HelpText.NAVIGATE, "Enter edit/toggle/export", HelpText.BACK)
        return format_help_text(HelpPatterns.MULTI_SELECT, HelpText.SEARCH)

    # Keyboard

    def build_hooks(self) -> DispatchHooks:
        hooks = super().build_hooks()
        hooks.item_count = self._item_count
        hooks.searchable = lambda tab: tab in ("pages", "delete")
        hooks.on_select = self._on_select
        hooks.on_toggle = self._on_toggle
        hooks.on_commit_edit = self._on_commit_edit
        hooks.on_key = self._on_shortcut
        return hooks

    def modal_active(self) -> bool:
        return super().modal_active() or self._detail is not None

    def on_modal_key(self, press: KeyPress) -> None:
        if super().modal_active():
            super().on_modal_key(press)
        elif self._detail is not None and press.character == "r":
            self._confirm_render(self._detail)

    def _item_count(self, tab: str) -> int:
        if tab == "export":
            return len(EXPORT_FIELDS)
        return len(self.visible_pages(tab))

    def _on_select(self, tab: str, index: int) -> None:
        if tab == "pages":
            page = self.selected_page()
            if page is not None:
                self._open_details(page)
        elif tab == "export":
            field = EXPORT_FIELDS[index]
            if field == "include_content":
                self._export["include_content"] = not self._export["include_content"]
            elif field == "export":
                self._confirm_export()
            else:
                begin_edit(self.input_state, str(self._export[field]))
        else:
            self._confirm_delete()

    def _on_toggle(self, tab: str, index: int) -> None:
        if tab == "export":
            if EXPORT_FIELDS[index] == "include_content":
                self._export["include_content"] = not self._export["include_content"]
            return
        if tab != "delete":
            return
        page = self.selected_page()
        if page is None:
            return
        if page.id in self._marked:
            self._marked.discard(page.id)
        else:
            self._marked.add(page.id)

    def _on_commit_edit(self, tab: str, index: int, value: str) -> None:
        field = EXPORT_FIELDS[index]
        if field in ("directory", "filename") and value.strip():
            self._export[field] = value.strip()

    def _on_shortcut(self, tab: str, press: KeyPress) -> bool:
        if press.character == "r" and tab == "pages":
            page = self.selected_page()
            if page is not None and self.input_state.mode is KeyboardMode.CONTENT:
                self._confirm_render(page)
                return True
            self.reload_pages()
            return True
        if press.character == "c" and tab == "delete":
            self._marked.clear()
            return True
        return False

    # Details layer

    def _open_details(self, page: Page) -> None:
        self._detail = page
        self._detail_scope = self.kernel.scope(f"{self.SCOPE_ID}:details")
        self._detail_scope.on_escape(self._close_details_and_refresh)
        self._detail_scope.header("Page Details", page.full_path)
        self._detail_scope.help(format_help_text("r render", HelpText.BACK))

    def _close_details(self) -> None:
        self._detail = None
        if self._detail_scope is not None:
            self._detail_scope.close()
            self._detail_scope = None

    def _close_details_and_refresh(self) -> None:
        self._close_details()
        self.refresh_view()

    # Async actions

    def _action_defaults(self) -> dict[str, Any]:
        tui = self.wikit.config.tui
        return {
            "success_duration_ms": tui.success_duration_ms,
            "items_limit": tui.items_limit,
            "on_cancel": self.refresh_view,
        }

    def _confirm_render(self, page: Page) -> None:
        async def operation(progress) -> None:
            progress(f"Rendering {page.full_path}...")
            async with self.wikit.create_client() as client:
                result = await render_page(client, page.id)
            if not result.succeeded:
                raise WikitError(result.message or f"Failed to render {page.full_path}")

        self.open_action(
            AsyncActionConfig(
                title="RE-RENDER PAGE",
                message=f"Re-render {page.title or page.full_path}?",
                items=[page.full_path],
                on_confirm=operation,
                on_success=lambda: self.flash_status(f"Rendered {page.full_path}"),
                confirm_text="Render",
                loading_message="Rendering page...",
                success_message="Page rendered",
                **self._action_defaults(),
            )
        )

    def _confirm_export(self) -> None:
        path = Path(self._export["directory"]).expanduser() / self._export["filename"]
        include_content = bool(self._export["include_content"])
        exported: dict[str, int] = {}

        async def operation(progress) -> None:
            progress("Loading pages...")
            async with self.wikit.create_client() as client:
                exported["count"] = await export_pages(
                    client,
                    path,
                    include_content=include_content,
                    on_progress=lambda current, total: progress(f"Fetching content: {current}/{total}"),
                )

        def on_success() -> None:
            self.flash_status(f"Exported {exported.get('count', 0)} pages to {path}")
            self._export["filename"] = default_export_filename()

        self.open_action(
            AsyncActionConfig(
                title="EXPORT PAGES",
                message=f"Export all pages{' with content' if include_content else ''} to {path}?",
                on_confirm=operation,
                on_success=on_success,
                confirm_text="Export",
                loading_message="Exporting pages...",
                success_message="Export complete",
                **self._action_defaults(),
            )
        )

    def _confirm_delete(self) -> None:
        if self._marked:
            targets = [page for page in self._pages if page.id in self._marked]
        else:
            page = self.selected_page()
            targets = [page] if page is not None else []
        if not targets:
            self.flash_status("Nothing selected")
            return
        result: dict[str, Any] = {}

        async def operation(progress) -> None:
            async with self.wikit.create_client() as client:
                outcome = await delete_pages(
                    client,
                    targets,
                    on_progress=lambda current, total: progress(f"Deleting {current}/{total}..."),
                )
            outcome.raise_if_all_failed("delete", "page(s)")
            result["outcome"] = outcome

        def on_success() -> None:
            outcome = result["outcome"]
            self._marked.clear()
            self.flash_status(outcome.message("Deleted", "page(s)"))
            self.reload_pages()

        self.open_action(
            AsyncActionConfig(
                title="CONFIRM DELETION",
                message=f"Delete {len(targets)} page(s)? This cannot be undone.",
                items=[page.full_path for page in targets],
                on_confirm=operation,
                on_success=on_success,
                confirm_text="Delete",
                destructive=True,
                loading_message="Deleting pages...",
                success_message="Deletion finished",
                **self._action_defaults(),
            )
        )

    # Rendering

    def render_body(self) -> None:
        state = self.input_state
        try:
            tab_bar = self.query_one("#tab-bar", TabBar)
            search_line = self.query_one("#search-line", Static)
            content = self.query_one("#pages-content", Static)
        except Exception:
            return

        tab_bar.set_state(state.tab_index, state.mode is KeyboardMode.TAB_BAR)
        if state.mode is KeyboardMode.SEARCH:
            search_line.update(f"Search: {state.search_query}▌")
        elif state.search_query:
            search_line.update(f"[dim]Search: {state.search_query}[/]")
        else:
            search_line.update("")

        if self._detail is not None:
            content.update(self._render_detail(self._detail))
        elif state.current_tab == "export":
            content.update(self._render_export_form())
        elif self._loading and not self._pages:
            content.update("[yellow]Loading pages...[/]")
        elif self._load_error and not self._pages:
            content.update(f"[red]{self._load_error}[/]")
        else:
            content.update(self._render_list(state.current_tab))

    def _render_list(self, tab: str) -> Text:
        pages = self.visible_pages(tab)
        if not pages:
            return Text("No pages match." if self.input_state.search_query else "No pages.", style="dim")
        in_content = self.input_state.mode is KeyboardMode.CONTENT
        selected = self.input_state.selection_index
        start = max(0, min(selected - LIST_WINDOW // 2, len(pages) - LIST_WINDOW))
        text = Text()
        for index in range(start, min(len(pages), start + LIST_WINDOW)):
            page = pages[index]
            highlight = in_content and index == selected
            mark = ""
            if tab == "delete":
                mark = "[x] " if page.id in self._marked else "[ ] "
            line = f"{'▸ ' if highlight else '  '}{mark}{page.full_path}"
            text.append(line, style="bold reverse" if highlight else "")
            text.append(f"  {page.title}\n", style="dim")
        if len(pages) > LIST_WINDOW:
            text.append(f"{selected + 1}/{len(pages)}", style="dim")
        return text

    def _render_export_form(self) -> Text:
        state = self.input_state
        text = Text()
        for index, field in enumerate(EXPORT_FIELDS):
            highlight = state.mode in (KeyboardMode.CONTENT, KeyboardMode.EDITING) and index == state.selection_index
            marker = "▸ " if highlight else "  "
            style = "bold reverse" if highlight else ""
            if field == "export":
                text.append(f"\n{marker}[ Export ]\n", style=style or "bold")
                continue
            if field == "include_content":
                value = "[x]" if self._export[field] else "[ ]"
            elif state.mode is KeyboardMode.EDITING and highlight:
                value = f"{state.edit_buffer}▌"
            else:
                value = str(self._export[field])
            text.append(f"{marker}{EXPORT_LABELS[field]:<16}", style=style)
            text.append(f" {value}\n")
        return text

    def _render_detail(self, page: Page) -> Group:
        rows = [
            ("ID", str(page.id)),
            ("Title", page.title),
            ("Path", page.full_path),
            ("Locale", page.locale),
            ("Published", "yes" if page.is_published else "no"),
            ("Private", "yes" if page.is_private else "no"),
            ("Content type", page.content_type or "-"),
            ("Created", page.created_at or "-"),
            ("Updated", page.updated_at or "-"),
        ]
        lines = [Text(f"{label:<14}", style="bold").append(value, style="") for label, value in rows]
        return Group(*lines)
