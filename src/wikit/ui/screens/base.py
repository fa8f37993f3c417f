"""Base screen wired to the interaction kernel."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from textual import events
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.screen import Screen
from textual.timer import Timer
from textual.widget import Widget

from wikit.ui.core import (
    AppMode,
    AsyncActionConfig,
    AsyncActionController,
    DispatchHooks,
    KeyboardMode,
    KeyPress,
    ScreenInputState,
    dispatch_key,
    unwind,
)
from wikit.ui.core.keyboard import enter_content
from wikit.ui.core.kernel import InteractionKernel, ScreenScope
from wikit.ui.widgets import AsyncActionDialog, FooterBar, HeaderBar

if TYPE_CHECKING:
    from wikit.ui.app import WikitApp

logger = logging.getLogger(__name__)


class KernelScreen(Screen):
    """Screen that owns one kernel scope while mounted.

    Subclasses set ``MODE``, ``SCOPE_ID`` and ``TABS``, yield their body from
    ``compose_body`` and describe their captions through ``header_caption``
    and ``help_text``. Keys go through ``dispatch_key`` with the hooks from
    ``build_hooks``.
    """

    DEFAULT_CSS = """
    KernelScreen {
        layout: vertical;
        layers: base overlay;
    }

    KernelScreen #body {
        height: 1fr;
        padding: 0 1;
    }
    """

    MODE: AppMode = AppMode.COMMAND
    SCOPE_ID: str = "screen"
    TABS: list[str] = ["main"]
    SEARCH_KEY: Optional[str] = "s"
    WRAP_TABS: bool = False

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self.input_state = ScreenInputState(tabs=list(self.TABS))
        if not self.has_tab_bar:
            self.input_state.mode = KeyboardMode.CONTENT
        self.scope: Optional[ScreenScope] = None
        self.dialog: Optional[AsyncActionDialog] = None
        self._status_timer: Optional[Timer] = None

    @property
    def wikit(self) -> "WikitApp":
        return self.app  # type: ignore[return-value]

    @property
    def kernel(self) -> InteractionKernel:
        return self.wikit.kernel

    @property
    def has_tab_bar(self) -> bool:
        return len(self.TABS) > 1

    def compose(self) -> ComposeResult:
        yield HeaderBar(
            self.kernel,
            instances=self.wikit.instance_context,
            labels=self.wikit.instance_labels(),
            id="header-bar",
        )
        with Vertical(id="body"):
            yield from self.compose_body()
        yield FooterBar(self.kernel, self.MODE, id="footer-bar")

    def compose_body(self) -> Iterable[Widget]:
        return []

    def on_mount(self) -> None:
        self.scope = self.kernel.scope(self.SCOPE_ID)
        self.scope.on_escape(self.handle_escape)
        self.refresh_view()

    def on_unmount(self) -> None:
        if self._status_timer is not None:
            self._status_timer.stop()
            self._status_timer = None
        if self.scope is not None:
            self.scope.close()

    # Captions

    def header_caption(self) -> tuple[str, Optional[str]]:
        return (self.SCOPE_ID.title(), None)

    def help_text(self) -> Optional[str]:
        return None

    def publish_captions(self) -> None:
        if self.scope is None:
            return
        title, metadata = self.header_caption()
        self.scope.header(title, metadata)
        self.scope.help(self.help_text())

    def flash_status(self, text: str, seconds: Optional[float] = None) -> None:
        """Show a transient status message, cleared after ``seconds``."""
        if self.scope is None:
            return
        if seconds is None:
            seconds = self.wikit.config.tui.status_flash_seconds
        self.scope.status(text)
        if self._status_timer is not None:
            self._status_timer.stop()
        self._status_timer = self.set_timer(seconds, self._clear_status)

    def _clear_status(self) -> None:
        self._status_timer = None
        if self.scope is not None:
            self.scope.release("footer_status")

    # Rendering

    def refresh_view(self) -> None:
        """Re-render the body and republish captions."""
        self.render_body()
        self.publish_captions()

    def render_body(self) -> None:
        pass

    # Keyboard

    def build_hooks(self) -> DispatchHooks:
        return DispatchHooks(
            modal_active=self.modal_active,
            on_modal_key=self.on_modal_key,
            search_key=self.SEARCH_KEY,
            wrap_tabs=self.WRAP_TABS,
        )

    def modal_active(self) -> bool:
        return self.dialog is not None and self.dialog.is_open

    def on_modal_key(self, press: KeyPress) -> None:
        if self.dialog is not None:
            self.dialog.handle_key(press)

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            return
        press = KeyPress.from_event(event)
        if dispatch_key(self.input_state, press, self.build_hooks()):
            event.stop()
            event.prevent_default()
            self._keep_focus_in_content()
            self.refresh_view()

    def _keep_focus_in_content(self) -> None:
        # Without a tab bar there is nowhere to go above the first row.
        if not self.has_tab_bar and self.input_state.mode is KeyboardMode.TAB_BAR:
            enter_content(self.input_state, self.build_hooks().item_count(self.input_state.current_tab))

    def handle_escape(self) -> None:
        """Step back one focus level, or leave the screen at the top level."""
        state = self.input_state
        if self.has_tab_bar or state.mode is not KeyboardMode.CONTENT:
            if unwind(state):
                self._keep_focus_in_content()
                self.refresh_view()
                return
        self.leave()

    def leave(self) -> None:
        self.app.pop_screen()

    # Async actions

    def open_action(self, config: AsyncActionConfig) -> AsyncActionDialog:
        """Show an async action dialog over this screen."""
        controller = AsyncActionController(config)
        self.dialog = AsyncActionDialog(controller, self.kernel, self.SCOPE_ID)
        self.mount(self.dialog)
        logger.debug(f"{self.SCOPE_ID}: opened action '{config.title}'")
        return self.dialog

    def on_async_action_dialog_closed(self, message: AsyncActionDialog.Closed) -> None:
        message.stop()
        if message.dialog is self.dialog:
            self.dialog = None
        message.dialog.remove()
        self.refresh_view()
