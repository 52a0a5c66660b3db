"""Workspace folder resolution.

A workspace is the set of folders the host has open. A path hint picks
the folder that contains it; without a hint a lone folder wins and
several folders ask the user.
"""
from __future__ import annotations

import logging
import os

from githistory.engine.context import SelectionPrompt
from githistory.engine.models import PickItem, PickOptions

logger = logging.getLogger(__name__)

WORKSPACE_PICKER_PLACEHOLDER = "Select a Workspace Folder"


def _contains(folder: str, path: str) -> bool:
    try:
        return os.path.commonpath([folder, path]) == folder
    except ValueError:
        # Different drives on Windows
        return False


class FolderWorkspaceResolver:
    """Resolves workspace folders from a fixed list."""

    def __init__(self, folders: list[str], prompt: SelectionPrompt) -> None:
        self._folders = [os.path.normpath(os.path.abspath(f)) for f in folders]
        self._prompt = prompt

    async def resolve(self, path_hint: str | None = None) -> str | None:
        if path_hint:
            path = os.path.normpath(os.path.abspath(path_hint))
            matches = [f for f in self._folders if _contains(f, path)]
            if not matches:
                logger.info("No workspace folder contains %s", path)
                return None
            # Nested folders: the deepest one owns the path
            return max(matches, key=len)

        if not self._folders:
            return None
        if len(self._folders) == 1:
            return self._folders[0]

        items = [
            PickItem(label=os.path.basename(f), detail=f, value=f)
            for f in self._folders
        ]
        selected = await self._prompt.prompt_single_select(
            items, PickOptions(placeholder=WORKSPACE_PICKER_PLACEHOLDER),
        )
        if selected is None:
            logger.info("Workspace folder selection cancelled")
            return None
        return selected.value
