"""Pick exactly one repository root out of the candidates for a workspace."""
from __future__ import annotations

import logging
import os

from .context import SelectionPrompt
from .models import PickItem, PickOptions

logger = logging.getLogger(__name__)

ROOT_PICKER_PLACEHOLDER = "Select a Git Repository"


async def resolve_repository_root(
    roots: list[str],
    workspace_folder: str,
    prompt: SelectionPrompt,
) -> str | None:
    """Return the chosen root, or None if the user dismissed the prompt.

    Zero candidates fall back to the workspace folder and a single
    candidate is used directly. Only several candidates prompt, listed in
    the order given. Callers that already know the root skip this call.
    """
    if not roots:
        return workspace_folder
    if len(roots) == 1:
        return roots[0]
    return await _select_root(roots, prompt)


async def _select_root(roots: list[str], prompt: SelectionPrompt) -> str | None:
    items = [
        PickItem(label=os.path.basename(root), detail=root, value=root)
        for root in roots
    ]
    options = PickOptions(
        placeholder=ROOT_PICKER_PLACEHOLDER,
        can_pick_many=False,
        match_on_description=True,
        match_on_detail=True,
    )
    selected = await prompt.prompt_single_select(items, options)
    if selected is None:
        logger.info("Repository selection cancelled (%d candidates)", len(roots))
        return None
    return selected.value
