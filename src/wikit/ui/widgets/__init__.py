"""Widgets for the wikit TUI."""

from wikit.ui.widgets.async_action_dialog import AsyncActionDialog
from wikit.ui.widgets.footer_bar import FooterBar
from wikit.ui.widgets.header_bar import HeaderBar, instance_color
from wikit.ui.widgets.tab_bar import TabBar

__all__ = [
    "AsyncActionDialog",
    "FooterBar",
    "HeaderBar",
    "TabBar",
    "instance_color",
]
