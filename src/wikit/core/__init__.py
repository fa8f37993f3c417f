"""Shared services for the CLI and the TUI."""

from wikit.core.instance import InstanceContext, get_instance_context, reset_instance_context
from wikit.core.logs import setup_logging

__all__ = [
    "InstanceContext",
    "get_instance_context",
    "reset_instance_context",
    "setup_logging",
]
