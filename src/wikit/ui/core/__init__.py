"""Interaction kernel for the wikit TUI.

This module provides the primitives shared by every screen:
- StackRegistry: LIFO registry of named frames with idempotent disposal
- EscapeRouter: Routes Escape to the innermost registered layer
- HeaderStack / FooterHelpStack / FooterStatusStack: Caption stacks
- AsyncActionController: Confirm -> run -> success/error -> retry dialogs
- dispatch_key: The shared keyboard precedence for tabbed screens
- InteractionKernel / ScreenScope: Kernel bundle and scoped frame ownership
"""

from wikit.ui.core.stack_registry import Frame, Registration, StackRegistry, Subscription
from wikit.ui.core.escape_router import EscapeHandler, EscapeRouter
from wikit.ui.core.captions import (
    AppMode,
    FooterHelpStack,
    FooterStatusStack,
    HeaderCaption,
    HeaderStack,
    HelpPatterns,
    HelpText,
    default_help_text,
    format_help_text,
    resolve_help_text,
)
from wikit.ui.core.async_action import (
    ActionState,
    AsyncActionConfig,
    AsyncActionController,
    BatchOutcome,
)
from wikit.ui.core.keyboard import (
    DispatchHooks,
    KeyboardMode,
    KeyPress,
    ScreenInputState,
    begin_edit,
    clamp_selection,
    dispatch_key,
    switch_tab,
    unwind,
)
from wikit.ui.core.kernel import InteractionKernel, ScreenScope

__all__ = [
    # Stack registry
    "Frame",
    "Registration",
    "StackRegistry",
    "Subscription",
    # Escape routing
    "EscapeHandler",
    "EscapeRouter",
    # Captions
    "AppMode",
    "FooterHelpStack",
    "FooterStatusStack",
    "HeaderCaption",
    "HeaderStack",
    "HelpPatterns",
    "HelpText",
    "default_help_text",
    "format_help_text",
    "resolve_help_text",
    # Async actions
    "ActionState",
    "AsyncActionConfig",
    "AsyncActionController",
    "BatchOutcome",
    # Keyboard
    "DispatchHooks",
    "KeyboardMode",
    "KeyPress",
    "ScreenInputState",
    "begin_edit",
    "clamp_selection",
    "dispatch_key",
    "switch_tab",
    "unwind",
    # Kernel
    "InteractionKernel",
    "ScreenScope",
]
