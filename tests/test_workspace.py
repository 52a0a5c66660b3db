"""Tests for workspace folder resolution."""

from __future__ import annotations

import pytest

from githistory.adapters.workspace import (
    WORKSPACE_PICKER_PLACEHOLDER,
    FolderWorkspaceResolver,
)
from githistory.engine.models import PickItem, PickOptions


class _Prompt:
    def __init__(self, choose: int | None):
        self.choose = choose
        self.placeholders: list[str] = []

    async def prompt_single_select(
        self, items: list[PickItem], options: PickOptions,
    ) -> PickItem | None:
        self.placeholders.append(options.placeholder)
        return None if self.choose is None else items[self.choose]


@pytest.mark.asyncio
async def test_path_hint_picks_deepest_containing_folder() -> None:
    resolver = FolderWorkspaceResolver(["/src", "/src/app", "/other"], _Prompt(None))
    assert await resolver.resolve("/src/app/main.py") == "/src/app"
    assert await resolver.resolve("/src/lib/x.py") == "/src"
    assert await resolver.resolve("/srcfoo/x.py") is None


@pytest.mark.asyncio
async def test_without_hint() -> None:
    prompt = _Prompt(choose=1)
    assert await FolderWorkspaceResolver([], prompt).resolve() is None
    assert await FolderWorkspaceResolver(["/only"], prompt).resolve() == "/only"
    assert prompt.placeholders == []

    assert await FolderWorkspaceResolver(["/a", "/b"], prompt).resolve() == "/b"
    assert prompt.placeholders == [WORKSPACE_PICKER_PLACEHOLDER]


@pytest.mark.asyncio
async def test_cancelled_folder_prompt() -> None:
    resolver = FolderWorkspaceResolver(["/a", "/b"], _Prompt(choose=None))
    assert await resolver.resolve() is None
