"""Tests for command registration and dispatch."""

from __future__ import annotations

import pytest

from githistory.engine.orchestrator import HistoryCommandHandler
from githistory.shared.commands import (
    COMMAND_HELP,
    COMMANDS,
    VIEW_FILE_HISTORY,
    VIEW_HISTORY,
    VIEW_LINE_HISTORY,
    dispatch,
)


class _Handler:
    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple]] = []

    async def view_file_history(self, *args):
        self.calls.append(("file", args))

    async def view_line_history(self, *args):
        self.calls.append(("line", args))

    async def view_branch_history(self, *args):
        self.calls.append(("branch", args))


def test_command_names() -> None:
    assert set(COMMANDS) == {
        "git.viewFileHistory", "git.viewLineHistory", "git.viewHistory",
    }
    assert set(COMMAND_HELP) == set(COMMANDS)


def test_every_command_maps_to_a_handler_method() -> None:
    for method_name in COMMANDS.values():
        assert callable(getattr(HistoryCommandHandler, method_name))


@pytest.mark.asyncio
async def test_dispatch_routes_and_forwards_arguments() -> None:
    handler = _Handler()
    await dispatch(handler, VIEW_FILE_HISTORY, "target")
    await dispatch(handler, VIEW_LINE_HISTORY)
    await dispatch(handler, VIEW_HISTORY)

    assert handler.calls == [("file", ("target",)), ("line", ()), ("branch", ())]


@pytest.mark.asyncio
async def test_dispatch_unknown_command() -> None:
    with pytest.raises(KeyError, match="Unknown command: git.blame"):
        await dispatch(_Handler(), "git.blame")
