"""Tab bar for tabbed screens."""

from __future__ import annotations

from rich.text import Text
from textual.widgets import Static


class TabBar(Static):
    """Row of numbered tab labels.

    The active tab is highlighted; it is shown reversed while focus sits on
    the tab bar itself.
    """

    DEFAULT_CSS = """
    TabBar {
        height: 1;
        width: 100%;
        padding: 0 1;
        background: $panel;
    }
    """

    def __init__(self, labels: list[str], id: str | None = None) -> None:
        super().__init__("", id=id)
        self._labels = labels
        self._active = 0
        self._focused = True

    def on_mount(self) -> None:
        self.update(self._render_text())

    def set_state(self, active: int, focused: bool) -> None:
        self._active = active
        self._focused = focused
        self.update(self._render_text())

    def _render_text(self) -> Text:
        text = Text()
        for index, label in enumerate(self._labels):
            if index:
                text.append("  ")
            caption = f" {index + 1} {label} "
            if index == self._active:
                style = "bold reverse" if self._focused else "bold underline"
                text.append(caption, style=style)
            else:
                text.append(caption, style="dim")
        return text
