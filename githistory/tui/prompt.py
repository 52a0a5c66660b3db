"""Single-select prompts for terminal hosts.

TextualPrompt shows a modal picker; ConsolePrompt is the fallback when
there is no interactive terminal to draw on.
"""
from __future__ import annotations

import asyncio
import logging
import sys
from typing import TextIO

from githistory.engine.models import PickItem, PickOptions
from githistory.tui.screens.repo_picker import PickerApp

logger = logging.getLogger(__name__)


class TextualPrompt:
    """Prompts with a full-screen Textual picker."""

    async def prompt_single_select(
        self, items: list[PickItem], options: PickOptions,
    ) -> PickItem | None:
        if not items:
            return None
        index = await PickerApp(items, options).run_async()
        if index is None:
            return None
        return items[index]


class ConsolePrompt:
    """Numbered-menu prompt on plain text streams."""

    def __init__(
        self,
        stdin: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._stdin = stdin or sys.stdin
        self._out = stderr or sys.stderr

    def _ask_sync(self, items: list[PickItem], options: PickOptions) -> PickItem | None:
        print(options.placeholder or "Select an item:", file=self._out)
        for idx, item in enumerate(items, start=1):
            detail = f"  ({item.detail})" if item.detail else ""
            print(f"  {idx}) {item.label}{detail}", file=self._out)
        while True:
            print("Selection [blank to cancel]: ", end="", file=self._out, flush=True)
            line = self._stdin.readline()
            if not line:
                # EOF
                return None
            choice = line.strip()
            if not choice:
                return None
            if choice.isdigit() and 1 <= int(choice) <= len(items):
                return items[int(choice) - 1]
            print(f"Please enter a number between 1 and {len(items)}.", file=self._out)

    async def prompt_single_select(
        self, items: list[PickItem], options: PickOptions,
    ) -> PickItem | None:
        if not items:
            return None
        selected = await asyncio.to_thread(self._ask_sync, items, options)
        logger.debug(
            "Console prompt %r -> %s",
            options.placeholder, selected.value if selected else None,
        )
        return selected
