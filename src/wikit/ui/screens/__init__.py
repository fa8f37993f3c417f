"""Screens for the wikit TUI."""

from wikit.ui.screens.base import KernelScreen
from wikit.ui.screens.command import CommandScreen
from wikit.ui.screens.help import HelpScreen
from wikit.ui.screens.pages import PagesScreen
from wikit.ui.screens.status import StatusScreen

__all__ = [
    "CommandScreen",
    "HelpScreen",
    "KernelScreen",
    "PagesScreen",
    "StatusScreen",
]
