"""Async Action - Confirm, run, report, retry state machine.

Every screen action that mutates the remote system goes through one
``AsyncActionController``. The controller owns the dialog state; the host
widget renders it and forwards the user's intents.

States:
- CONFIRMING: initial, shows title/message/items; confirm -> LOADING,
  cancel -> closed
- LOADING: runs the operation once, input ignored
- SUCCESS: ``on_success`` runs immediately, the dialog closes after
  ``success_duration_ms``
- ERROR: shows the message; retry -> CONFIRMING, cancel -> closed

Usage:
    controller = AsyncActionController(AsyncActionConfig(
        title="CONFIRM DELETION",
        message="Delete 3 page(s)?",
        on_confirm=delete_marked,
        on_success=refresh,
        on_cancel=close_dialog,
        destructive=True,
    ))
    await controller.confirm()
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional

from wikit.errors import BatchFailedError

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str], None]
ActionOperation = Callable[[ProgressCallback], Awaitable[None]]
ControllerListener = Callable[["AsyncActionController"], None]


class ActionState(str, Enum):
    """Dialog states."""
    CONFIRMING = "confirming"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


_TRANSITIONS: Dict[ActionState, set] = {
    ActionState.CONFIRMING: {ActionState.LOADING},
    ActionState.LOADING: {ActionState.SUCCESS, ActionState.ERROR},
    ActionState.ERROR: {ActionState.CONFIRMING},
    ActionState.SUCCESS: set(),
}


@dataclass
class AsyncActionConfig:
    """Static description of one async action dialog."""
    title: str
    message: str
    on_confirm: ActionOperation
    on_success: Callable[[], None]
    on_cancel: Callable[[], None]
    confirm_text: str = "Confirm"
    cancel_text: str = "Cancel"
    items: List[str] = field(default_factory=list)
    items_limit: int = 5
    destructive: bool = False
    loading_message: str = "Working..."
    success_message: str = "Done!"
    success_duration_ms: int = 3000
    on_error: Optional[Callable[[str], None]] = None
    on_close: Optional[Callable[[], None]] = None


class AsyncActionController:
    """Per-dialog state machine.

    Owned by exactly one dialog and discarded when it closes. The operation
    has no cancellation channel: once LOADING starts, the controller waits
    for it to settle.
    """

    def __init__(
        self,
        config: AsyncActionConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self._sleep = sleep
        self._state = ActionState.CONFIRMING
        self._progress = ""
        self._error: Optional[str] = None
        self._closed = False
        self._cancelled = False
        self._episodes = 0
        self._listeners: Dict[int, ControllerListener] = {}
        self._next_listener = 0

    @property
    def state(self) -> ActionState:
        return self._state

    @property
    def progress(self) -> str:
        """Latest progress line reported by the operation."""
        return self._progress

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def closed(self) -> bool:
        """True once the dialog reached a terminal outcome."""
        return self._closed

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def loading_episodes(self) -> int:
        """Number of times the operation has been started."""
        return self._episodes

    @property
    def accepts_input(self) -> bool:
        """Whether keyboard input should reach the dialog."""
        return not self._closed and self._state in (ActionState.CONFIRMING, ActionState.ERROR)

    def visible_items(self) -> List[str]:
        """Items shown in the confirmation list."""
        return self.config.items[: self.config.items_limit]

    def hidden_item_count(self) -> int:
        """Items beyond ``items_limit`` ("... and N more")."""
        return max(0, len(self.config.items) - self.config.items_limit)

    def subscribe(self, listener: ControllerListener) -> Callable[[], None]:
        """Call ``listener(controller)`` after every state or progress change.

        Returns:
            Function that removes the listener
        """
        listener_id = self._next_listener
        self._next_listener += 1
        self._listeners[listener_id] = listener

        def unsubscribe() -> None:
            self._listeners.pop(listener_id, None)

        return unsubscribe

    async def confirm(self) -> bool:
        """Run the operation (CONFIRMING -> LOADING -> SUCCESS | ERROR).

        Returns:
            True if the operation succeeded and the dialog closed
        """
        if self._closed or self._state is not ActionState.CONFIRMING:
            logger.debug(f"AsyncAction '{self.config.title}': confirm ignored in {self._state.value}")
            return False

        self._episodes += 1
        self._progress = ""
        self._transition(ActionState.LOADING)

        try:
            await self.config.on_confirm(self.set_progress)
        except Exception as e:
            message = str(e) or "Unknown error occurred"
            logger.warning(f"AsyncAction '{self.config.title}': operation failed: {message}")
            self._error = message
            self._transition(ActionState.ERROR)
            if self.config.on_error:
                self.config.on_error(message)
            return False

        self._transition(ActionState.SUCCESS)
        self.config.on_success()

        await self._sleep(self.config.success_duration_ms / 1000)
        self._closed = True
        self._emit()
        if self.config.on_close:
            self.config.on_close()
        return True

    def cancel(self) -> bool:
        """Close the dialog from CONFIRMING or ERROR and call ``on_cancel``."""
        if self._closed or self._state not in (ActionState.CONFIRMING, ActionState.ERROR):
            logger.debug(f"AsyncAction '{self.config.title}': cancel ignored in {self._state.value}")
            return False
        self._closed = True
        self._cancelled = True
        logger.debug(f"AsyncAction '{self.config.title}': cancelled")
        self._emit()
        self.config.on_cancel()
        return True

    def retry(self) -> bool:
        """Return from ERROR to CONFIRMING, clearing the error."""
        if self._closed or self._state is not ActionState.ERROR:
            logger.debug(f"AsyncAction '{self.config.title}': retry ignored in {self._state.value}")
            return False
        self._error = None
        self._transition(ActionState.CONFIRMING)
        return True

    def escape(self) -> bool:
        """Escape key: cancel while confirming, retry on error, else ignored."""
        if self._closed:
            return False
        if self._state is ActionState.CONFIRMING:
            return self.cancel()
        if self._state is ActionState.ERROR:
            return self.retry()
        return False

    def set_progress(self, message: str) -> None:
        """Progress callback handed to the operation."""
        if self._state is not ActionState.LOADING:
            return
        self._progress = message
        self._emit()

    def _transition(self, new_state: ActionState) -> None:
        if new_state not in _TRANSITIONS[self._state]:
            raise RuntimeError(
                f"Invalid transition {self._state.value} -> {new_state.value}"
            )
        logger.debug(
            f"AsyncAction '{self.config.title}': {self._state.value} -> {new_state.value}"
        )
        self._state = new_state
        self._emit()

    def _emit(self) -> None:
        for listener in list(self._listeners.values()):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"AsyncAction '{self.config.title}': listener failed: {e}")


@dataclass
class BatchOutcome:
    """Result of a batch of independent remote operations.

    At least one success counts as overall success (the failure count goes
    into the status message); zero successes is a failure.
    """
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    def record_success(self) -> None:
        self.total += 1
        self.succeeded += 1

    def record_failure(self, error: str) -> None:
        self.total += 1
        self.failed += 1
        self.errors.append(error)

    @property
    def partial(self) -> bool:
        return self.succeeded > 0 and self.failed > 0

    def message(self, verb: str = "Processed", noun: str = "item(s)") -> str:
        """Summary such as ``"Deleted 12 item(s), 3 failed"``."""
        text = f"{verb} {self.succeeded} {noun}"
        if self.failed:
            text += f", {self.failed} failed"
        return text

    def raise_if_all_failed(self, verb: str = "process", noun: str = "item(s)") -> None:
        """Raise ``BatchFailedError`` when nothing succeeded."""
        if self.failed > 0 and self.succeeded == 0:
            raise BatchFailedError(
                f"Failed to {verb} all {self.failed} {noun}", errors=list(self.errors)
            )
