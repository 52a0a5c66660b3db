"""Tests for the repository picker modal and terminal prompts."""

from __future__ import annotations

import asyncio
import io
from unittest.mock import patch

from textual.widgets import Button, Input

from githistory.engine.models import PickItem, PickOptions
from githistory.tui.prompt import ConsolePrompt, TextualPrompt
from githistory.tui.screens.repo_picker import PickerApp, RepositoryPickerScreen

_ITEMS = [
    PickItem(label="mono", detail="/src/mono", value="/src/mono"),
    PickItem(label="svc", detail="/src/mono/services/svc", value="/src/mono/services/svc"),
    PickItem(label="web", detail="/src/mono/apps/web", value="/src/mono/apps/web"),
]
_OPTIONS = PickOptions(placeholder="Select a Git Repository")


def test_enter_picks_focused_first_item():
    async def _run() -> None:
        app = PickerApp(_ITEMS, _OPTIONS)
        async with app.run_test(size=(100, 40)) as pilot:
            await pilot.pause()
            assert isinstance(app.screen, RepositoryPickerScreen)
            await pilot.press("enter")
        assert app.return_value == 0

    asyncio.run(_run())


def test_escape_cancels():
    async def _run() -> None:
        app = PickerApp(_ITEMS, _OPTIONS)
        async with app.run_test(size=(100, 40)) as pilot:
            await pilot.pause()
            await pilot.press("escape")
        assert app.return_value is None

    asyncio.run(_run())


def test_filter_then_submit_picks_first_match():
    async def _run() -> None:
        app = PickerApp(_ITEMS, _OPTIONS)
        async with app.run_test(size=(100, 40)) as pilot:
            await pilot.pause()
            screen = app.screen
            screen.query_one("#picker-filter", Input).focus()
            await pilot.press(*"apps")
            await pilot.pause()
            assert not screen.query_one("#pick-0", Button).display
            assert not screen.query_one("#pick-1", Button).display
            assert screen.query_one("#pick-2", Button).display
            await pilot.press("enter")
        assert app.return_value == 2

    asyncio.run(_run())


def test_textual_prompt_maps_index_to_item():
    async def _run() -> None:
        prompt = TextualPrompt()
        with patch.object(PickerApp, "run_async", return_value=1) as run_async:
            assert await prompt.prompt_single_select(_ITEMS, _OPTIONS) is _ITEMS[1]
        run_async.assert_called_once()
        with patch.object(PickerApp, "run_async", return_value=None):
            assert await prompt.prompt_single_select(_ITEMS, _OPTIONS) is None
        assert await prompt.prompt_single_select([], _OPTIONS) is None

    asyncio.run(_run())


def test_console_prompt_reasks_until_valid():
    async def _run() -> None:
        out = io.StringIO()
        prompt = ConsolePrompt(stdin=io.StringIO("9\nabc\n2\n"), stderr=out)
        selected = await prompt.prompt_single_select(_ITEMS, _OPTIONS)
        assert selected is _ITEMS[1]
        text = out.getvalue()
        assert "Select a Git Repository" in text
        assert "  2) svc  (/src/mono/services/svc)" in text
        assert text.count("Please enter a number between 1 and 3.") == 2

    asyncio.run(_run())


def test_console_prompt_blank_line_or_eof_cancels():
    async def _run() -> None:
        blank = ConsolePrompt(stdin=io.StringIO("\n"), stderr=io.StringIO())
        assert await blank.prompt_single_select(_ITEMS, _OPTIONS) is None
        eof = ConsolePrompt(stdin=io.StringIO(""), stderr=io.StringIO())
        assert await eof.prompt_single_select(_ITEMS, _OPTIONS) is None

    asyncio.run(_run())
