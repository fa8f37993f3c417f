"""Keyboard dispatch - The shared input precedence for tabbed screens.

Every screen-level key handler follows the same order:

1. A displayed modal (confirmation, async action dialog, picker) owns all
   input. Nothing below runs.
2. Always-available keys: Tab / Shift+Tab cycle tabs, digits 1..N jump to
   tab N. Switching tabs resets any nested content, search or edit mode.
3. Left/Right switch tabs only at tab-bar focus, so arrows never mean both
   "change tab" and "move selection".
4. Search mode consumes typing: characters append, Backspace deletes, Down
   leaves search and enters the result list. Edit mode works the same way
   for a single field, with Enter committing.
5. Content navigation: Up/Down move the selection clamped to the list, Up
   at index 0 returns to the tab bar, Enter selects, Space toggles a mark.

Screens keep their own ``ScreenInputState`` and pass per-screen callbacks in
``DispatchHooks``; ``dispatch_key`` is the only decision tree.

Usage:
    state = ScreenInputState(tabs=["pages", "export", "delete"])
    hooks = DispatchHooks(
        item_count=lambda tab: len(self._rows[tab]),
        on_select=self._open_row,
    )

    def on_key(self, event):
        if dispatch_key(state, KeyPress.from_event(event), hooks):
            event.stop()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


class KeyboardMode(str, Enum):
    """Focus depth within a screen."""
    TAB_BAR = "tab_bar"
    CONTENT = "content"
    SEARCH = "search"
    EDITING = "editing"


@dataclass(frozen=True)
class KeyPress:
    """A normalized key press.

    ``key`` uses Textual key names ("tab", "up", "enter", "space", "a", "1");
    ``character`` is the printable character, if any.
    """
    key: str
    character: Optional[str] = None

    @classmethod
    def from_event(cls, event: Any) -> "KeyPress":
        """Build from a Textual ``events.Key``."""
        return cls(key=event.key, character=event.character)

    @classmethod
    def char(cls, character: str) -> "KeyPress":
        """Key press for a printable character."""
        key = "space" if character == " " else character
        return cls(key=key, character=character)

    @property
    def printable(self) -> Optional[str]:
        """The typed character for single printable keys."""
        if self.character and len(self.character) == 1 and self.character.isprintable():
            return self.character
        return None

    @property
    def digit(self) -> Optional[int]:
        """1-9 for digit keys."""
        if len(self.key) == 1 and self.key in "123456789":
            return int(self.key)
        return None


@dataclass
class ScreenInputState:
    """Per-screen keyboard state."""
    tabs: List[str]
    tab_index: int = 0
    mode: KeyboardMode = KeyboardMode.TAB_BAR
    search_query: str = ""
    edit_buffer: str = ""
    selections: Dict[str, int] = field(default_factory=dict)

    @property
    def current_tab(self) -> str:
        return self.tabs[self.tab_index]

    @property
    def selection_index(self) -> int:
        """Selection index on the current tab."""
        return self.selections.get(self.current_tab, 0)

    @selection_index.setter
    def selection_index(self, value: int) -> None:
        self.selections[self.current_tab] = value

    @property
    def in_content(self) -> bool:
        return self.mode is KeyboardMode.CONTENT

    @property
    def searching(self) -> bool:
        return self.mode is KeyboardMode.SEARCH

    @property
    def editing(self) -> bool:
        return self.mode is KeyboardMode.EDITING


@dataclass
class DispatchHooks:
    """Per-screen callbacks used by ``dispatch_key``.

    Attributes:
        modal_active: True while a modal owns input
        on_modal_key: Receives keys while a modal is active
        item_count: Number of selectable rows on a tab
        searchable: Whether a tab supports search mode
        on_tab_switch: Called after the active tab changed
        on_select: Enter on a row (tab, index)
        on_toggle: Space on a row (tab, index)
        on_search_change: Search buffer changed (tab, query)
        on_edit_change: Edit buffer changed (tab, index, value)
        on_commit_edit: Enter while editing (tab, index, value)
        on_key: Screen-specific shortcuts not consumed above (tab, press)
        search_key: Character that enters search mode (None disables)
        wrap_tabs: Whether Left/Right wrap around at the ends
    """
    modal_active: Callable[[], bool] = lambda: False
    on_modal_key: Optional[Callable[[KeyPress], Any]] = None
    item_count: Callable[[str], int] = lambda tab: 0
    searchable: Callable[[str], bool] = lambda tab: False
    on_tab_switch: Optional[Callable[[str], None]] = None
    on_select: Optional[Callable[[str, int], None]] = None
    on_toggle: Optional[Callable[[str, int], None]] = None
    on_search_change: Optional[Callable[[str, str], None]] = None
    on_edit_change: Optional[Callable[[str, int, str], None]] = None
    on_commit_edit: Optional[Callable[[str, int, str], None]] = None
    on_key: Optional[Callable[[str, KeyPress], bool]] = None
    search_key: Optional[str] = "s"
    wrap_tabs: bool = False


def switch_tab(state: ScreenInputState, index: int, hooks: Optional[DispatchHooks] = None) -> None:
    """Activate tab ``index`` and reset every nested mode."""
    state.tab_index = index % len(state.tabs)
    state.mode = KeyboardMode.TAB_BAR
    state.search_query = ""
    state.edit_buffer = ""
    logger.debug(f"Keyboard: switched to tab '{state.current_tab}'")
    if hooks and hooks.on_tab_switch:
        hooks.on_tab_switch(state.current_tab)


def enter_content(state: ScreenInputState, count: int) -> None:
    """Move focus into the list with the selection clamped to ``count``."""
    state.mode = KeyboardMode.CONTENT
    clamp_selection(state, count)


def clamp_selection(state: ScreenInputState, count: int) -> None:
    """Clamp the current selection to ``[0, count - 1]``."""
    state.selection_index = max(0, min(state.selection_index, count - 1))


def begin_edit(state: ScreenInputState, value: str) -> None:
    """Enter edit mode for the selected row with ``value`` as initial text."""
    state.mode = KeyboardMode.EDITING
    state.edit_buffer = value


def unwind(state: ScreenInputState) -> bool:
    """Step back one focus level (the escape behaviour of a tabbed screen).

    Returns:
        False when already at the tab bar
    """
    if state.mode is KeyboardMode.EDITING:
        state.mode = KeyboardMode.CONTENT
        state.edit_buffer = ""
        return True
    if state.mode in (KeyboardMode.SEARCH, KeyboardMode.CONTENT):
        state.mode = KeyboardMode.TAB_BAR
        return True
    return False


def dispatch_key(state: ScreenInputState, press: KeyPress, hooks: DispatchHooks) -> bool:
    """Interpret one key press for a screen.

    Returns:
        True if the key was consumed
    """
    # 1. Modal exclusivity
    if hooks.modal_active():
        if hooks.on_modal_key is not None:
            hooks.on_modal_key(press)
        return True

    multi_tab = len(state.tabs) > 1

    # 2. Always-available tab keys
    if multi_tab:
        if press.key == "tab":
            switch_tab(state, state.tab_index + 1, hooks)
            return True
        if press.key == "shift+tab":
            switch_tab(state, state.tab_index - 1, hooks)
            return True
        digit = press.digit
        if digit is not None and digit <= len(state.tabs):
            switch_tab(state, digit - 1, hooks)
            return True

    # 3. Directional tab switching at tab-bar focus only
    if multi_tab and state.mode is KeyboardMode.TAB_BAR and press.key in ("left", "right"):
        step = 1 if press.key == "right" else -1
        target = state.tab_index + step
        if hooks.wrap_tabs:
            switch_tab(state, target, hooks)
        elif 0 <= target < len(state.tabs):
            switch_tab(state, target, hooks)
        return True

    tab = state.current_tab

    # Mode toggle: enter search
    if (
        hooks.search_key is not None
        and press.character == hooks.search_key
        and state.mode in (KeyboardMode.TAB_BAR, KeyboardMode.CONTENT)
        and hooks.searchable(tab)
    ):
        state.mode = KeyboardMode.SEARCH
        return True

    # 4. Search and edit modes consume typing
    if state.mode is KeyboardMode.SEARCH:
        return _handle_search(state, press, hooks)
    if state.mode is KeyboardMode.EDITING:
        return _handle_editing(state, press, hooks)

    # 5. Content navigation
    count = hooks.item_count(tab)
    if state.mode is KeyboardMode.TAB_BAR:
        if press.key == "down":
            enter_content(state, count)
            return True
        return _fallback(tab, press, hooks)

    if press.key == "up":
        if state.selection_index <= 0:
            state.mode = KeyboardMode.TAB_BAR
        else:
            state.selection_index = state.selection_index - 1
        return True
    if press.key == "down":
        state.selection_index = max(0, min(count - 1, state.selection_index + 1))
        return True
    if press.key == "enter":
        if count > 0 and hooks.on_select is not None:
            hooks.on_select(tab, state.selection_index)
        return True
    if press.key == "space":
        if count > 0 and hooks.on_toggle is not None:
            hooks.on_toggle(tab, state.selection_index)
        return True
    return _fallback(tab, press, hooks)


def _handle_search(state: ScreenInputState, press: KeyPress, hooks: DispatchHooks) -> bool:
    tab = state.current_tab
    if press.key == "down":
        enter_content(state, hooks.item_count(tab))
        return True
    if press.key == "backspace":
        _set_search(state, state.search_query[:-1], hooks)
        return True
    character = press.printable
    if character is not None:
        _set_search(state, state.search_query + character, hooks)
        return True
    return False


def _set_search(state: ScreenInputState, query: str, hooks: DispatchHooks) -> None:
    state.search_query = query
    state.selection_index = 0
    if hooks.on_search_change is not None:
        hooks.on_search_change(state.current_tab, query)


def _handle_editing(state: ScreenInputState, press: KeyPress, hooks: DispatchHooks) -> bool:
    tab = state.current_tab
    index = state.selection_index
    if press.key == "enter":
        value = state.edit_buffer
        state.mode = KeyboardMode.CONTENT
        state.edit_buffer = ""
        if hooks.on_commit_edit is not None:
            hooks.on_commit_edit(tab, index, value)
        return True
    if press.key == "backspace":
        state.edit_buffer = state.edit_buffer[:-1]
    else:
        character = press.printable
        if character is None:
            return True
        state.edit_buffer += character
    if hooks.on_edit_change is not None:
        hooks.on_edit_change(tab, index, state.edit_buffer)
    return True


def _fallback(tab: str, press: KeyPress, hooks: DispatchHooks) -> bool:
    if hooks.on_key is None:
        return False
    return bool(hooks.on_key(tab, press))
