"""Active instance tracking shared by the CLI and the TUI.

Usage:
    context = get_instance_context()
    context.set_instance("prod")

    sub = context.subscribe(lambda instance: print(instance))
    sub()  # unsubscribe
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from wikit.errors import ConfigError

logger = logging.getLogger(__name__)

InstanceListener = Callable[[Optional[str]], None]


class InstanceContext:
    """Holds the currently selected instance id."""

    def __init__(self) -> None:
        self._instance: Optional[str] = None
        self._listeners: List[InstanceListener] = []

    @property
    def instance(self) -> Optional[str]:
        """Current instance id or None."""
        return self._instance

    def get_instance(self) -> str:
        """Current instance id.

        Raises:
            ConfigError: If no instance has been selected
        """
        if not self._instance:
            raise ConfigError("No instance selected")
        return self._instance

    def set_instance(self, instance: Optional[str]) -> None:
        """Select an instance and notify listeners if it changed."""
        if instance == self._instance:
            return
        logger.info(f"Active instance: {instance}")
        self._instance = instance
        for listener in list(self._listeners):
            listener(instance)

    def subscribe(self, listener: InstanceListener) -> Callable[[], None]:
        """Subscribe to instance changes; returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe


# Global instance context
_global_context: Optional[InstanceContext] = None


def get_instance_context() -> InstanceContext:
    """Get the global instance context."""
    global _global_context
    if _global_context is None:
        _global_context = InstanceContext()
    return _global_context


def reset_instance_context() -> None:
    """Reset the global instance context (for testing)."""
    global _global_context
    _global_context = None
