"""Interaction kernel bundle and scoped frame ownership.

``InteractionKernel`` groups the four process-wide stacks. It is created
explicitly (one per app, one per test) and passed to whatever needs it.

``ScreenScope`` is how a screen owns its frames: everything it registers
through the scope is released exactly once when the scope closes, whether
the screen was dismissed, replaced, or unwound by an exception.

Usage:
    kernel = InteractionKernel()

    with kernel.scope("pages") as scope:
        scope.on_escape(close_pages)
        scope.header("Pages", "12 pages")
        scope.help("↑↓ navigate • Esc back")
        ...
    # every frame is gone here
"""

from __future__ import annotations

import logging
from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from wikit.ui.core.captions import (
    FooterHelpStack,
    FooterStatusStack,
    HeaderCaption,
    HeaderStack,
)
from wikit.ui.core.escape_router import EscapeHandler, EscapeRouter
from wikit.ui.core.stack_registry import Registration, StackRegistry

logger = logging.getLogger(__name__)


@dataclass
class InteractionKernel:
    """The escape router and the three caption stacks."""
    escape: EscapeRouter = field(default_factory=EscapeRouter)
    header: HeaderStack = field(default_factory=HeaderStack)
    footer_help: FooterHelpStack = field(default_factory=FooterHelpStack)
    footer_status: FooterStatusStack = field(default_factory=FooterStatusStack)

    def scope(self, owner: str) -> "ScreenScope":
        """Open a scope whose frames are identified by ``owner``."""
        return ScreenScope(self, owner)

    def depth(self) -> Dict[str, int]:
        """Frame count per stack."""
        return {
            "escape": len(self.escape),
            "header": len(self.header),
            "footer_help": len(self.footer_help),
            "footer_status": len(self.footer_status),
        }


class ScreenScope:
    """Frames owned by one mounted screen or dialog.

    Each stack holds at most one frame per scope. Publishing again through
    the same scope updates that frame in place.
    """

    def __init__(self, kernel: InteractionKernel, owner: str) -> None:
        self.kernel = kernel
        self.owner = owner
        self._registrations: Dict[str, Registration] = {}
        self._exit_stack = ExitStack()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def on_escape(self, handler: EscapeHandler) -> Optional[Registration]:
        """Register this scope's escape handler."""
        return self._publish("escape", self.kernel.escape, handler)

    def header(self, title: str, metadata: Optional[str] = None) -> Optional[Registration]:
        """Publish or update this scope's header caption."""
        caption = HeaderCaption(title=title, metadata=metadata)
        return self._publish("header", self.kernel.header, caption)

    def help(self, text: Optional[str]) -> Optional[Registration]:
        """Publish or update this scope's footer help."""
        return self._publish("footer_help", self.kernel.footer_help, text)

    def status(self, text: str) -> Optional[Registration]:
        """Publish or update this scope's footer status."""
        return self._publish("footer_status", self.kernel.footer_status, text)

    def release(self, slot: str) -> None:
        """Dispose one slot ("escape", "header", "footer_help", "footer_status")."""
        registration = self._registrations.pop(slot, None)
        if registration is not None:
            registration.dispose()

    def close(self) -> None:
        """Dispose every frame in reverse registration order. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._registrations.clear()
        self._exit_stack.close()
        logger.debug(f"ScreenScope '{self.owner}': closed")

    def __enter__(self) -> "ScreenScope":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _publish(self, slot: str, stack: StackRegistry, payload: Any) -> Optional[Registration]:
        if self._closed:
            logger.debug(f"ScreenScope '{self.owner}': publish to {slot} after close ignored")
            return None
        registration = self._registrations.get(slot)
        if registration is not None and registration.update(payload):
            return registration
        registration = stack.push(self.owner, payload)
        self._registrations[slot] = registration
        self._exit_stack.callback(registration.dispose)
        return registration
