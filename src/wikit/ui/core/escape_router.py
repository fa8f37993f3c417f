"""Escape Router - Routes the "back" key to the innermost active layer.

Nested transient UI (dialog inside panel inside tab inside screen) registers
one handler per layer. A single Escape press calls only the most recently
registered handler, so "back" unwinds exactly one layer per press.

Usage:
    router = EscapeRouter()
    registration = router.register("pages", close_pages)
    router.register("pages:delete-dialog", cancel_dialog)

    router.dispatch()  # calls cancel_dialog only
"""

from __future__ import annotations

import logging
from typing import Callable

from wikit.ui.core.stack_registry import Registration, StackRegistry

logger = logging.getLogger(__name__)

EscapeHandler = Callable[[], None]


class EscapeRouter(StackRegistry[EscapeHandler]):
    """Stack of zero-argument escape handlers."""

    def __init__(self) -> None:
        super().__init__("escape", default=None)

    def register(self, handler_id: str, handler: EscapeHandler) -> Registration[EscapeHandler]:
        """Register ``handler`` as the innermost escape consumer.

        Args:
            handler_id: Stable id of the owning layer
            handler: Zero-argument callback

        Returns:
            Registration whose ``dispose()`` unregisters the handler
        """
        return self.push(handler_id, handler)

    def dispatch(self) -> bool:
        """Deliver one Escape event.

        The lookup and the call happen under the registry lock, so a handler
        disposed by another caller before dispatch is never invoked. Handlers
        may push or pop frames themselves.

        Returns:
            True if a handler was called, False when nothing is registered
        """
        with self._lock:
            handler_id = self.current_id()
            handler = self.current()
            if handler is None:
                logger.debug("Escape: no handler registered")
                return False
            logger.debug(f"Escape: dispatching to '{handler_id}'")
            handler()
            return True
