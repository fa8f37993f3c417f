"""Header bar showing the current caption and the active instance."""

from __future__ import annotations

import zlib
from typing import Callable, Optional

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.reactive import reactive
from textual.widget import Widget
from textual.widgets import Static

from wikit.ui.core import HeaderCaption, Subscription
from wikit.ui.core.kernel import InteractionKernel
from wikit.core.instance import InstanceContext

BADGE_COLORS = ["blue", "green", "magenta", "cyan", "yellow", "red", "bright_blue", "purple"]


def instance_color(name: str) -> str:
    """Stable badge colour for an instance name."""
    return BADGE_COLORS[zlib.crc32(name.encode("utf-8")) % len(BADGE_COLORS)]


class HeaderBar(Widget):
    """Header bar bound to the kernel's header stack.

    Layout:
    ┌──────────────────────────────────────────────────────────────┐
    │ wikit   Pages: 42 pages                            [ prod ] │
    └──────────────────────────────────────────────────────────────┘
    """

    DEFAULT_CSS = """
    HeaderBar {
        height: 1;
        width: 100%;
        background: $primary-darken-2;
        color: $text;
    }

    HeaderBar #header-container {
        width: 100%;
        height: 1;
    }

    HeaderBar #app-name {
        width: auto;
        padding: 0 1;
        text-style: bold;
    }

    HeaderBar #caption {
        width: 1fr;
        padding: 0 1;
    }

    HeaderBar #instance-badge {
        width: auto;
        padding: 0 1;
    }
    """

    caption: reactive[HeaderCaption] = reactive(HeaderCaption)
    instance: reactive[Optional[str]] = reactive(None)

    def __init__(
        self,
        kernel: InteractionKernel,
        instances: Optional[InstanceContext] = None,
        labels: Optional[dict[str, str]] = None,
        id: str | None = None,
        classes: str | None = None,
    ) -> None:
        super().__init__(id=id, classes=classes)
        self._kernel = kernel
        self._instances = instances
        self._labels = labels or {}
        self._subscription: Optional[Subscription] = None
        self._unsubscribe_instance: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        with Horizontal(id="header-container"):
            yield Static("wikit", id="app-name")
            yield Static("", id="caption")
            yield Static("", id="instance-badge")

    def on_mount(self) -> None:
        self._subscription = self._kernel.header.subscribe(self._on_caption)
        self.caption = self._kernel.header.current()
        if self._instances is not None:
            self._unsubscribe_instance = self._instances.subscribe(self._on_instance)
            self.instance = self._instances.instance
        self._render_caption()
        self._render_badge()

    def on_unmount(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        if self._unsubscribe_instance is not None:
            self._unsubscribe_instance()
            self._unsubscribe_instance = None

    def _on_caption(self, caption: HeaderCaption) -> None:
        self.caption = caption

    def _on_instance(self, instance: Optional[str]) -> None:
        self.instance = instance

    def watch_caption(self, _caption: HeaderCaption) -> None:
        self._render_caption()

    def watch_instance(self, _instance: Optional[str]) -> None:
        self._render_badge()

    def _render_caption(self) -> None:
        try:
            self.query_one("#caption", Static).update(self.caption.text)
        except Exception:
            pass

    def _render_badge(self) -> None:
        try:
            badge = self.query_one("#instance-badge", Static)
        except Exception:
            return
        if not self.instance:
            badge.update("[dim]no instance[/]")
            return
        label = self._labels.get(self.instance, self.instance)
        color = instance_color(self.instance)
        badge.update(f"[bold white on {color}] {label} [/]")
