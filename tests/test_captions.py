"""Tests for caption text helpers."""

from __future__ import annotations

from wikit.ui.core import (
    AppMode,
    HeaderCaption,
    HelpPatterns,
    default_help_text,
    format_help_text,
    resolve_help_text,
)


def test_format_help_text_skips_empty_parts() -> None:
    assert format_help_text("a", "", "b") == "a • b"


def test_header_caption_text() -> None:
    assert HeaderCaption("Pages").text == "Pages"
    assert HeaderCaption("Pages", "12 pages").text == "Pages: 12 pages"
    assert HeaderCaption("", "ignored").text == ""


def test_resolve_help_text_prefers_published() -> None:
    assert resolve_help_text("custom", AppMode.PAGES) == "custom"


def test_resolve_help_text_falls_back_to_mode_default() -> None:
    assert resolve_help_text(None, AppMode.COMMAND) == HelpPatterns.MENU
    assert resolve_help_text("", AppMode.PAGES) == default_help_text(AppMode.PAGES)
    assert resolve_help_text(None, AppMode.STATUS) == HelpPatterns.VIEW_ONLY
