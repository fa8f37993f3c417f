"""Pilot tests for the TUI: escape unwinding, captions and the delete dialog."""

from __future__ import annotations

import pytest

from wikit.config import InstanceConfig, TuiConfig, WikitConfig
from wikit.ui.app import WikitApp
from wikit.ui.screens import CommandScreen, HelpScreen, PagesScreen


def make_app(fake_wiki) -> WikitApp:
    config = WikitConfig(
        instances={"prod": InstanceConfig(url="https://prod.test/graphql", key="secret")},
        tui=TuiConfig(success_duration_ms=0),
    )
    return WikitApp(config, transport=fake_wiki.transport())


async def open_pages(app: WikitApp, pilot) -> PagesScreen:
    await pilot.press("enter")
    await pilot.pause()
    await app.workers.wait_for_complete()
    await pilot.pause()
    assert isinstance(app.screen, PagesScreen)
    return app.screen


@pytest.mark.asyncio
async def test_escape_leaves_help_and_restores_captions(fake_wiki) -> None:
    app = make_app(fake_wiki)
    async with app.run_test() as pilot:
        await pilot.pause()
        assert isinstance(app.screen, CommandScreen)
        assert app.kernel.header.current().text == "Command Menu"

        await pilot.press("down", "down", "enter")
        await pilot.pause()
        assert isinstance(app.screen, HelpScreen)
        assert app.kernel.header.current().text == "Help: Commands"

        await pilot.press("left")
        assert app.kernel.header.current().text == "Help: Ui"

        await pilot.press("escape")
        await pilot.pause()
        assert isinstance(app.screen, CommandScreen)
        assert app.kernel.header.current().text == "Command Menu"
        assert app.kernel.escape.ids() == ["command"]

        # The menu has nowhere to go back to.
        await pilot.press("escape")
        await pilot.pause()
        assert isinstance(app.screen, CommandScreen)


@pytest.mark.asyncio
async def test_escape_unwinds_one_level_per_press(fake_wiki) -> None:
    app = make_app(fake_wiki)
    async with app.run_test() as pilot:
        await pilot.pause()
        screen = await open_pages(app, pilot)
        assert app.kernel.header.current().text == "Pages: 5 pages"

        await pilot.press("down", "s", "d", "o", "c")
        assert screen.input_state.search_query == "doc"
        assert len(screen.visible_pages()) == 4

        await pilot.press("escape")
        assert isinstance(app.screen, PagesScreen)
        await pilot.press("escape")
        await pilot.pause()
        assert isinstance(app.screen, CommandScreen)


@pytest.mark.asyncio
async def test_delete_dialog_cancel_and_confirm(fake_wiki) -> None:
    app = make_app(fake_wiki)
    async with app.run_test() as pilot:
        await pilot.pause()
        screen = await open_pages(app, pilot)

        await pilot.press("3", "down", "space")
        assert app.kernel.header.current().text == "Pages: 1 of 5 marked"

        await pilot.press("enter")
        await pilot.pause()
        assert screen.dialog is not None
        assert app.kernel.escape.current_id() == "pages:dialog"

        # Keys go to the dialog only; escape cancels it.
        await pilot.press("1", "escape")
        await pilot.pause()
        assert screen.dialog is None
        assert screen.input_state.current_tab == "delete"
        assert len(fake_wiki.pages) == 5

        await pilot.press("enter")
        await pilot.pause()
        await pilot.press("left", "enter")
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()
        await app.workers.wait_for_complete()
        await pilot.pause()

        assert screen.dialog is None
        assert [page["id"] for page in fake_wiki.pages] == [2, 3, 4, 5]
        assert app.kernel.footer_status.current() == "Deleted 1 page(s)"
        assert app.kernel.header.current().text == "Pages: 4 pages"


@pytest.mark.asyncio
async def test_failing_escape_handler_keeps_app_running(fake_wiki) -> None:
    app = make_app(fake_wiki)

    def broken() -> None:
        raise RuntimeError("handler exploded")

    async with app.run_test() as pilot:
        await pilot.pause()
        registration = app.kernel.escape.register("broken", broken)

        await pilot.press("escape")
        await pilot.pause()

        assert app.is_running
        assert isinstance(app.screen, CommandScreen)
        assert app.kernel.footer_status.current() == "Error: handler exploded"

        registration.dispose()
        assert app.kernel.escape.ids() == ["command"]
