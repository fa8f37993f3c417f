"""Caption Stacks - Header and footer captions published by mounted screens.

Three stacks share the StackRegistry contract:
- HeaderStack: ``HeaderCaption(title, metadata)`` shown in the header bar
- FooterHelpStack: key help line shown in the footer
- FooterStatusStack: transient status line shown in the footer

A screen publishes on activation and disposes on deactivation, which restores
whatever the enclosing screen published before it. Transient status messages
are cleared by the caller (usually with a UI timer); the stack never schedules
anything itself.

Usage:
    header = HeaderStack()
    reg = header.publish("users", "User Management", "42 users")
    header.current().text  # "User Management: 42 users"
    reg.dispose()
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from wikit.ui.core.stack_registry import Registration, StackRegistry


@dataclass(frozen=True)
class HeaderCaption:
    """Header caption payload."""
    title: str = ""
    metadata: Optional[str] = None

    @property
    def text(self) -> str:
        """Rendered caption, e.g. ``"Pages: 12 pages"``."""
        if not self.title:
            return ""
        if self.metadata:
            return f"{self.title}: {self.metadata}"
        return self.title


EMPTY_HEADER = HeaderCaption()


class HeaderStack(StackRegistry[HeaderCaption]):
    """Header caption stack."""

    def __init__(self) -> None:
        super().__init__("header", default=EMPTY_HEADER)

    def publish(
        self,
        frame_id: str,
        title: str,
        metadata: Optional[str] = None,
    ) -> Registration[HeaderCaption]:
        """Publish a header caption for ``frame_id``."""
        return self.push(frame_id, HeaderCaption(title=title, metadata=metadata))


class FooterHelpStack(StackRegistry[Optional[str]]):
    """Footer key-help stack. Empty text falls back to the mode default."""

    def __init__(self) -> None:
        super().__init__("footer-help", default=None)

    def publish(self, frame_id: str, text: Optional[str]) -> Registration[Optional[str]]:
        """Publish a help line for ``frame_id``."""
        return self.push(frame_id, text)


class FooterStatusStack(StackRegistry[str]):
    """Footer status stack."""

    def __init__(self) -> None:
        super().__init__("footer-status", default="")

    def publish(self, frame_id: str, text: str) -> Registration[str]:
        """Publish a status message for ``frame_id``."""
        return self.push(frame_id, text)


class AppMode(str, Enum):
    """Top-level TUI modes."""
    COMMAND = "command"
    PAGES = "pages"
    STATUS = "status"
    HELP = "help"


class HelpText:
    """Shared help fragments."""
    NAVIGATE = "↑↓ navigate"
    TABS = "Tab/←→ switch tabs"
    QUICK_TABS = "1-9 jump to tab"
    SELECT = "Enter select"
    TOGGLE = "Space toggle"
    SEARCH = "s search"
    EDIT = "Enter edit"
    SAVE = "Enter save"
    CONFIRM = "←→ choose • Enter confirm"
    REFRESH = "r refresh"
    BACK = "Esc back"
    CANCEL = "Esc cancel"
    QUIT = "Ctrl+Q quit"


def format_help_text(*parts: str) -> str:
    """Join non-empty help fragments with a bullet separator."""
    return " • ".join(part for part in parts if part)


class HelpPatterns:
    """Help lines reused across screens."""
    LIST = format_help_text(HelpText.NAVIGATE, HelpText.SELECT, HelpText.BACK)
    TABBED_LIST = format_help_text(
        HelpText.TABS, HelpText.NAVIGATE, HelpText.SEARCH, HelpText.SELECT, HelpText.BACK
    )
    MULTI_SELECT = format_help_text(
        HelpText.NAVIGATE, HelpText.TOGGLE, "c clear", "Enter confirm", HelpText.BACK
    )
    SEARCHING = format_help_text("Type to filter", "↓ results", HelpText.BACK)
    FORM_SELECT_FIELD = format_help_text(HelpText.NAVIGATE, HelpText.EDIT, HelpText.BACK)
    FORM_EDITING = format_help_text("Type to edit", HelpText.SAVE, HelpText.CANCEL)
    CONFIRMATION_DIALOG = format_help_text(HelpText.CONFIRM, HelpText.CANCEL)
    ERROR_DIALOG = format_help_text("←→ choose • Enter select", "Esc try again")
    MENU = format_help_text(HelpText.NAVIGATE, HelpText.SELECT, HelpText.QUIT)
    VIEW_ONLY = format_help_text(HelpText.REFRESH, HelpText.BACK)


def default_help_text(mode: AppMode) -> str:
    """Fallback footer help for a mode when no screen published one."""
    if mode == AppMode.COMMAND:
        return HelpPatterns.MENU
    if mode == AppMode.PAGES:
        return HelpPatterns.TABBED_LIST
    if mode == AppMode.HELP:
        return format_help_text(HelpText.TABS, HelpText.NAVIGATE, HelpText.BACK)
    return HelpPatterns.VIEW_ONLY


def resolve_help_text(published: Optional[str], mode: AppMode) -> str:
    """Published help if non-empty, else the mode default."""
    if published:
        return published
    return default_help_text(mode)
