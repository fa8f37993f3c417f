"""wikit - CLI and TUI toolkit for Wiki.js administration."""

__version__ = "0.1.0"
