"""Stack Registry - Last-in-first-out registry of named frames.

This module provides the foundation of the interaction kernel. Screens push
a frame when they activate and dispose it when they deactivate; the most
recently pushed frame that is still present is the "current" one.

Frame rules:
- At most one frame per id. Pushing an existing id replaces its payload in
  place and invalidates the earlier registration.
- Popping is idempotent. Popping an unknown id is a no-op.
- Subscribers are notified with the new current value after every change.

Usage:
    stack = StackRegistry[str]("header", default="")

    registration = stack.push("pages", "Pages")
    stack.current()  # "Pages"

    # Update without losing position
    registration.update("Pages (12)")

    # Release (safe to call more than once)
    registration.dispose()

    # Re-render on change
    sub = stack.subscribe(lambda value: print(value))
    sub.unsubscribe()
"""

from __future__ import annotations

import itertools
import logging
import threading
from dataclasses import dataclass, field
from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

StackListener = Callable[[T], None]


@dataclass
class Frame(Generic[T]):
    """One entry in a stack registry."""
    id: str
    payload: T
    token: int


@dataclass
class Registration(Generic[T]):
    """Handle returned by ``StackRegistry.push``.

    Disposing removes the frame only while it still belongs to this
    registration, so a stale handle can never remove a newer frame that
    re-used the same id.
    """
    id: str
    token: int
    _registry: Optional["StackRegistry[T]"] = field(default=None, repr=False)

    @property
    def active(self) -> bool:
        """Whether the frame created by this registration is still present."""
        return self._registry is not None and self._registry._owns(self.id, self.token)

    def update(self, payload: T) -> bool:
        """Replace the payload of this registration's frame in place.

        Returns:
            True if the frame was still present and has been updated
        """
        if self._registry is None:
            return False
        return self._registry._update(self.id, self.token, payload)

    def dispose(self) -> None:
        """Remove the frame. Idempotent."""
        registry = self._registry
        if registry is None:
            return
        self._registry = None
        registry._release(self.id, self.token)

    def __enter__(self) -> "Registration[T]":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.dispose()


@dataclass
class Subscription:
    """A subscription to stack changes."""
    id: int
    _registry: Optional["StackRegistry"] = field(default=None, repr=False)

    def unsubscribe(self) -> None:
        """Stop receiving notifications. Idempotent."""
        if self._registry is not None:
            self._registry.unsubscribe(self.id)
            self._registry = None


class StackRegistry(Generic[T]):
    """Generic LIFO registry of named frames.

    Stack depth is bounded by UI nesting depth, so frames are kept in a plain
    list and lookups by id are linear.
    """

    def __init__(self, name: str, default: T = None) -> None:  # type: ignore[assignment]
        self.name = name
        self._default = default
        self._frames: List[Frame[T]] = []
        self._listeners: Dict[int, StackListener] = {}
        self._tokens = itertools.count(1)
        self._subscription_ids = itertools.count(1)
        self._lock = threading.RLock()

    @property
    def default(self) -> T:
        """Value returned by ``current()`` when the stack is empty."""
        return self._default

    def push(self, frame_id: str, payload: T) -> Registration[T]:
        """Insert or replace the frame for ``frame_id``.

        Args:
            frame_id: Stable id of the owner (e.g., "pages", "pages:delete")
            payload: Handler-specific payload

        Returns:
            Registration whose ``dispose()`` removes the frame
        """
        with self._lock:
            token = next(self._tokens)
            existing = self._find(frame_id)
            if existing is not None:
                existing.payload = payload
                existing.token = token
                logger.debug(f"{self.name}: replaced frame '{frame_id}'")
            else:
                self._frames.append(Frame(id=frame_id, payload=payload, token=token))
                logger.debug(f"{self.name}: pushed frame '{frame_id}' (depth {len(self._frames)})")
            registration = Registration(id=frame_id, token=token, _registry=self)
            self._notify()
        return registration

    def pop(self, frame_id: str) -> bool:
        """Remove the frame for ``frame_id`` if present.

        Returns:
            True if a frame was removed
        """
        with self._lock:
            frame = self._find(frame_id)
            if frame is None:
                return False
            self._frames.remove(frame)
            logger.debug(f"{self.name}: popped frame '{frame_id}' (depth {len(self._frames)})")
            self._notify()
            return True

    def current(self) -> T:
        """Payload of the most recently pushed frame, or the default."""
        with self._lock:
            if not self._frames:
                return self._default
            return self._frames[-1].payload

    def current_id(self) -> Optional[str]:
        """Id of the current frame, or None when empty."""
        with self._lock:
            if not self._frames:
                return None
            return self._frames[-1].id

    def get(self, frame_id: str, default: Optional[T] = None) -> Optional[T]:
        """Payload for a specific frame id."""
        with self._lock:
            frame = self._find(frame_id)
            return frame.payload if frame is not None else default

    def ids(self) -> List[str]:
        """Frame ids, oldest first."""
        with self._lock:
            return [frame.id for frame in self._frames]

    def clear(self) -> None:
        """Remove every frame."""
        with self._lock:
            if not self._frames:
                return
            self._frames.clear()
            self._notify()

    def subscribe(self, listener: StackListener) -> Subscription:
        """Call ``listener(current_value)`` after every change.

        Returns:
            Subscription object for unsubscribing
        """
        with self._lock:
            sub_id = next(self._subscription_ids)
            self._listeners[sub_id] = listener
        return Subscription(id=sub_id, _registry=self)

    def unsubscribe(self, subscription_id: int) -> bool:
        """Remove a listener by subscription id."""
        with self._lock:
            return self._listeners.pop(subscription_id, None) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._frames)

    def __contains__(self, frame_id: object) -> bool:
        with self._lock:
            return any(frame.id == frame_id for frame in self._frames)

    def __iter__(self) -> Iterator[Frame[T]]:
        with self._lock:
            return iter(list(self._frames))

    def __repr__(self) -> str:
        return f"StackRegistry({self.name!r}, ids={self.ids()!r})"

    # Registration callbacks

    def _owns(self, frame_id: str, token: int) -> bool:
        with self._lock:
            frame = self._find(frame_id)
            return frame is not None and frame.token == token

    def _update(self, frame_id: str, token: int, payload: T) -> bool:
        with self._lock:
            frame = self._find(frame_id)
            if frame is None or frame.token != token:
                return False
            frame.payload = payload
            self._notify()
            return True

    def _release(self, frame_id: str, token: int) -> None:
        with self._lock:
            frame = self._find(frame_id)
            if frame is None or frame.token != token:
                logger.debug(f"{self.name}: stale dispose for '{frame_id}' ignored")
                return
            self._frames.remove(frame)
            logger.debug(f"{self.name}: disposed frame '{frame_id}' (depth {len(self._frames)})")
            self._notify()

    def _find(self, frame_id: str) -> Optional[Frame[T]]:
        for frame in self._frames:
            if frame.id == frame_id:
                return frame
        return None

    def _notify(self) -> None:
        value = self.current()
        for sub_id, listener in list(self._listeners.items()):
            try:
                listener(value)
            except Exception as e:
                logger.error(f"{self.name}: listener {sub_id} failed: {e}")
