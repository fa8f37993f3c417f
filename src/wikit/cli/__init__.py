"""Command line interface for wikit."""

from wikit.cli.main import app, main

__all__ = ["app", "main"]
