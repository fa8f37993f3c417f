"""Dialog widget for confirm -> run -> report actions.

The dialog renders an ``AsyncActionController`` and forwards the user's
choices to it. It is an inline overlay, not a Textual screen: the host screen
forwards keys while it is open and removes it when ``Closed`` is posted.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.text import Text
from textual.message import Message
from textual.widget import Widget

from wikit.ui.core import (
    ActionState,
    AsyncActionController,
    HelpPatterns,
    KeyPress,
    format_help_text,
)
from wikit.ui.core.kernel import InteractionKernel, ScreenScope

logger = logging.getLogger(__name__)

CONFIRM = "confirm"
CANCEL = "cancel"


class AsyncActionDialog(Widget):
    """Overlay that drives one ``AsyncActionController``.

    Keys (CONFIRMING and ERROR only): Left selects the confirm button, Right
    selects cancel, Enter activates the selection. Cancel is selected by
    default. All keys are ignored while the operation runs or while the
    success message is displayed.
    """

    DEFAULT_CSS = """
    AsyncActionDialog {
        layer: overlay;
        width: 70;
        height: auto;
        margin: 3 4;
        background: $surface;
    }
    """

    class Closed(Message):
        """Posted once the controller reached a terminal outcome."""

        def __init__(self, dialog: "AsyncActionDialog", cancelled: bool) -> None:
            self.dialog = dialog
            self.cancelled = cancelled
            super().__init__()

    def __init__(
        self,
        controller: AsyncActionController,
        kernel: InteractionKernel,
        owner: str,
        id: str | None = None,
    ) -> None:
        super().__init__(id=id)
        self.controller = controller
        self._kernel = kernel
        self._owner = owner
        self._scope: Optional[ScreenScope] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._closed_posted = False
        self.selected = CANCEL

    def on_mount(self) -> None:
        self._scope = self._kernel.scope(f"{self._owner}:dialog")
        self._scope.on_escape(self._on_escape)
        self._unsubscribe = self.controller.subscribe(self._on_change)
        self._publish_help()

    def on_unmount(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._scope is not None:
            self._scope.close()
            self._scope = None

    @property
    def is_open(self) -> bool:
        return not self.controller.closed

    def handle_key(self, press: KeyPress) -> bool:
        """Handle a key forwarded by the host screen."""
        if not self.controller.accepts_input:
            return True
        if press.key == "left":
            self.selected = CONFIRM
        elif press.key == "right":
            self.selected = CANCEL
        elif press.key == "enter":
            self._activate()
        else:
            return True
        self.refresh()
        return True

    def _activate(self) -> None:
        state = self.controller.state
        if self.selected == CANCEL:
            self.controller.cancel()
        elif state is ActionState.CONFIRMING:
            self.run_worker(self.controller.confirm(), exclusive=True)
        elif state is ActionState.ERROR:
            self.controller.retry()

    def _on_escape(self) -> None:
        self.controller.escape()

    def _on_change(self, controller: AsyncActionController) -> None:
        if controller.state in (ActionState.CONFIRMING, ActionState.ERROR):
            self.selected = CANCEL if controller.state is ActionState.CONFIRMING else CONFIRM
        self._publish_help()
        self.refresh(layout=True)
        if controller.closed and not self._closed_posted:
            self._closed_posted = True
            if self._scope is not None:
                self._scope.close()
            self.post_message(self.Closed(self, controller.cancelled))

    def _publish_help(self) -> None:
        if self._scope is None or self._scope.closed:
            return
        state = self.controller.state
        if state is ActionState.CONFIRMING:
            self._scope.help(HelpPatterns.CONFIRMATION_DIALOG)
        elif state is ActionState.ERROR:
            self._scope.help(HelpPatterns.ERROR_DIALOG)
        else:
            self._scope.help(format_help_text("Please wait"))

    def _buttons(self, confirm_label: str, cancel_label: str) -> Text:
        text = Text(justify="center")
        confirm_style = "bold reverse red" if self.controller.config.destructive else "bold reverse green"
        text.append(
            f"  {confirm_label}  ",
            style=confirm_style if self.selected == CONFIRM else "dim",
        )
        text.append("    ")
        text.append(
            f"  {cancel_label}  ",
            style="bold reverse" if self.selected == CANCEL else "dim",
        )
        return text

    def render(self) -> RenderableType:
        config = self.controller.config
        state = self.controller.state
        border = "red" if config.destructive else "blue"
        parts: list[RenderableType] = []

        if state is ActionState.CONFIRMING:
            parts.append(Text(config.message))
            visible = self.controller.visible_items()
            if visible:
                parts.append(Text(""))
                for item in visible:
                    parts.append(Text(f"  • {item}"))
                hidden = self.controller.hidden_item_count()
                if hidden:
                    parts.append(Text(f"  ... and {hidden} more", style="dim"))
            parts.append(Text(""))
            parts.append(self._buttons(config.confirm_text, config.cancel_text))
        elif state is ActionState.LOADING:
            parts.append(Text(f"⏳ {config.loading_message}", style="yellow"))
            if self.controller.progress:
                parts.append(Text(self.controller.progress, style="dim"))
        elif state is ActionState.SUCCESS:
            border = "green"
            parts.append(Text(f"✓ {config.success_message}", style="bold green"))
        else:
            border = "red"
            parts.append(Text(f"✗ {self.controller.error}", style="bold red"))
            parts.append(Text(""))
            parts.append(self._buttons("Try Again", config.cancel_text))

        return Panel(Group(*parts), title=config.title, border_style=border)
