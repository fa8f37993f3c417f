"""Tests for the async action state machine."""

from __future__ import annotations

import pytest

from wikit.errors import BatchFailedError
from wikit.ui.core import ActionState, AsyncActionConfig, AsyncActionController, BatchOutcome


class Recorder:
    """Collects callback invocations and state changes."""

    def __init__(self, fail_times: int = 0) -> None:
        self.fail_times = fail_times
        self.confirm_calls = 0
        self.events: list[str] = []
        self.states: list[ActionState] = []
        self.sleeps: list[float] = []
        self.during_sleep = None

    async def operation(self, progress) -> None:
        self.confirm_calls += 1
        progress("halfway")
        if self.confirm_calls <= self.fail_times:
            raise RuntimeError("server unavailable")

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        if self.during_sleep is not None:
            self.during_sleep()

    def controller(self, **overrides) -> AsyncActionController:
        config = AsyncActionConfig(
            title="CONFIRM DELETION",
            message="Delete 2 page(s)?",
            on_confirm=self.operation,
            on_success=lambda: self.events.append("success"),
            on_cancel=lambda: self.events.append("cancel"),
            on_error=lambda message: self.events.append(f"error:{message}"),
            on_close=lambda: self.events.append("close"),
            destructive=True,
            **overrides,
        )
        controller = AsyncActionController(config, sleep=self.sleep)
        controller.subscribe(self._record_state)
        return controller

    def _record_state(self, controller: AsyncActionController) -> None:
        if not self.states or self.states[-1] is not controller.state:
            self.states.append(controller.state)


def test_cancel_from_confirming() -> None:
    recorder = Recorder()
    controller = recorder.controller()

    assert controller.cancel() is True

    assert controller.closed and controller.cancelled
    assert recorder.events == ["cancel"]
    assert recorder.confirm_calls == 0


@pytest.mark.asyncio
async def test_success_path() -> None:
    recorder = Recorder()
    controller = recorder.controller(success_duration_ms=1500)

    assert await controller.confirm() is True

    assert recorder.states == [ActionState.LOADING, ActionState.SUCCESS]
    assert recorder.events == ["success", "close"]
    assert recorder.sleeps == [1.5]
    assert controller.closed
    assert recorder.confirm_calls == 1


@pytest.mark.asyncio
async def test_error_then_retry_then_success() -> None:
    recorder = Recorder(fail_times=1)
    controller = recorder.controller()

    assert await controller.confirm() is False
    assert controller.state is ActionState.ERROR
    assert controller.error == "server unavailable"

    assert controller.retry() is True
    assert controller.state is ActionState.CONFIRMING
    assert controller.error is None

    assert await controller.confirm() is True
    assert recorder.states == [
        ActionState.LOADING,
        ActionState.ERROR,
        ActionState.CONFIRMING,
        ActionState.LOADING,
        ActionState.SUCCESS,
    ]
    assert recorder.events == ["error:server unavailable", "success", "close"]
    assert recorder.confirm_calls == controller.loading_episodes == 2


@pytest.mark.asyncio
async def test_error_then_cancel() -> None:
    recorder = Recorder(fail_times=1)
    controller = recorder.controller()

    await controller.confirm()
    assert controller.cancel() is True

    assert controller.closed and controller.cancelled
    assert recorder.events == ["error:server unavailable", "cancel"]


@pytest.mark.asyncio
async def test_on_confirm_called_once_per_episode() -> None:
    recorder = Recorder(fail_times=2)
    controller = recorder.controller()

    for _ in range(3):
        await controller.confirm()
        controller.retry()

    assert recorder.confirm_calls == 3
    outcomes = [event for event in recorder.events if event == "success" or event.startswith("error")]
    assert len(outcomes) == 3


@pytest.mark.asyncio
async def test_confirm_ignored_outside_confirming() -> None:
    recorder = Recorder(fail_times=1)
    controller = recorder.controller()
    await controller.confirm()

    assert await controller.confirm() is False
    assert recorder.confirm_calls == 1


def test_escape_confirming_cancels() -> None:
    recorder = Recorder()
    controller = recorder.controller()

    assert controller.escape() is True
    assert recorder.events == ["cancel"]


@pytest.mark.asyncio
async def test_escape_on_error_returns_to_confirming() -> None:
    recorder = Recorder(fail_times=1)
    controller = recorder.controller()
    await controller.confirm()

    assert controller.escape() is True
    assert controller.state is ActionState.CONFIRMING
    assert not controller.closed


@pytest.mark.asyncio
async def test_loading_ignores_escape_and_cancel() -> None:
    """A destructive action that is running cannot be interrupted."""
    seen: dict[str, object] = {}
    controller: AsyncActionController

    async def operation(progress) -> None:
        seen["escape"] = controller.escape()
        seen["cancel"] = controller.cancel()
        seen["retry"] = controller.retry()
        seen["state"] = controller.state
        seen["accepts_input"] = controller.accepts_input

    cancelled: list[str] = []

    async def no_sleep(_seconds: float) -> None:
        return None

    controller = AsyncActionController(
        AsyncActionConfig(
            title="CONFIRM DELETION",
            message="Delete?",
            on_confirm=operation,
            on_success=lambda: None,
            on_cancel=lambda: cancelled.append("cancel"),
            destructive=True,
        ),
        sleep=no_sleep,
    )

    await controller.confirm()

    assert seen == {
        "escape": False,
        "cancel": False,
        "retry": False,
        "state": ActionState.LOADING,
        "accepts_input": False,
    }
    assert cancelled == []
    assert controller.state is ActionState.SUCCESS


@pytest.mark.asyncio
async def test_success_delay_ignores_escape_and_cancel() -> None:
    """Input during the success delay cannot cancel a finished action."""
    recorder = Recorder()
    seen: dict[str, object] = {}
    controller: AsyncActionController

    def during_sleep() -> None:
        seen["escape"] = controller.escape()
        seen["cancel"] = controller.cancel()
        seen["retry"] = controller.retry()
        seen["state"] = controller.state
        seen["closed"] = controller.closed
        seen["events"] = list(recorder.events)

    recorder.during_sleep = during_sleep
    controller = recorder.controller(success_duration_ms=1500)

    assert await controller.confirm() is True

    assert seen == {
        "escape": False,
        "cancel": False,
        "retry": False,
        "state": ActionState.SUCCESS,
        "closed": False,
        "events": ["success"],
    }
    assert recorder.events == ["success", "close"]
    assert controller.state is ActionState.SUCCESS
    assert not controller.cancelled


@pytest.mark.asyncio
async def test_progress_is_reported_while_loading() -> None:
    progress_seen: list[str] = []
    recorder = Recorder()
    controller = recorder.controller()
    controller.subscribe(lambda c: progress_seen.append(c.progress) if c.progress else None)

    await controller.confirm()

    assert "halfway" in progress_seen
    controller.set_progress("ignored after loading")
    assert controller.progress == "halfway"


def test_items_are_truncated() -> None:
    recorder = Recorder()
    controller = recorder.controller(items=[f"/en/page-{i}" for i in range(8)], items_limit=5)

    assert controller.visible_items() == [f"/en/page-{i}" for i in range(5)]
    assert controller.hidden_item_count() == 3


def test_batch_outcome_partial_failure_message() -> None:
    outcome = BatchOutcome()
    for _ in range(12):
        outcome.record_success()
    for index in range(3):
        outcome.record_failure(f"page {index}")

    assert outcome.partial
    assert outcome.message("Deleted", "page(s)") == "Deleted 12 page(s), 3 failed"
    outcome.raise_if_all_failed("delete", "page(s)")


def test_batch_outcome_all_failed_raises() -> None:
    outcome = BatchOutcome()
    outcome.record_failure("a")
    outcome.record_failure("b")

    with pytest.raises(BatchFailedError) as exc_info:
        outcome.raise_if_all_failed("delete", "page(s)")

    assert str(exc_info.value) == "Failed to delete all 2 page(s)"
    assert exc_info.value.errors == ["a", "b"]
