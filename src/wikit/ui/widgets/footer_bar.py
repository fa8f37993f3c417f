"""Footer bar with the status line and key help."""

from __future__ import annotations

from typing import Optional

from textual.app import ComposeResult
from textual.widget import Widget
from textual.widgets import Static

from wikit.ui.core import AppMode, Subscription, resolve_help_text
from wikit.ui.core.kernel import InteractionKernel


class FooterBar(Widget):
    """Bottom bar bound to the footer help and status stacks.

    The help row falls back to the mode's default help when the current
    frame published nothing.
    """

    DEFAULT_CSS = """
    FooterBar {
        dock: bottom;
        height: 2;
        width: 100%;
        background: $surface;
    }

    FooterBar .footer-row {
        width: 100%;
        height: 1;
        padding: 0 1;
    }

    FooterBar #footer-status {
        color: $success;
    }

    FooterBar #footer-help {
        background: $primary;
        color: $text;
    }
    """

    def __init__(
        self,
        kernel: InteractionKernel,
        mode: AppMode,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(id=id, classes=classes)
        self._kernel = kernel
        self.mode = mode
        self._subscriptions: list[Subscription] = []

    def compose(self) -> ComposeResult:
        yield Static("", id="footer-status", classes="footer-row")
        yield Static("", id="footer-help", classes="footer-row")

    def on_mount(self) -> None:
        self._subscriptions = [
            self._kernel.footer_help.subscribe(self._on_help),
            self._kernel.footer_status.subscribe(self._on_status),
        ]
        self._on_help(self._kernel.footer_help.current())
        self._on_status(self._kernel.footer_status.current())

    def on_unmount(self) -> None:
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []

    @property
    def help_text(self) -> str:
        return resolve_help_text(self._kernel.footer_help.current(), self.mode)

    def _on_help(self, text: Optional[str]) -> None:
        try:
            self.query_one("#footer-help", Static).update(
                f"[dim]{resolve_help_text(text, self.mode)}[/]"
            )
        except Exception:
            pass

    def _on_status(self, text: str) -> None:
        try:
            self.query_one("#footer-status", Static).update(text or "")
        except Exception:
            pass
