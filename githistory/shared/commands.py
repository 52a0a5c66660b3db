"""Command names and dispatch table for history entry points."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from githistory.engine.models import RenderRequest
    from githistory.engine.orchestrator import HistoryCommandHandler

VIEW_FILE_HISTORY = "git.viewFileHistory"
VIEW_LINE_HISTORY = "git.viewLineHistory"
VIEW_HISTORY = "git.viewHistory"

# Command name -> HistoryCommandHandler method
COMMANDS: dict[str, str] = {
    VIEW_FILE_HISTORY: "view_file_history",
    VIEW_LINE_HISTORY: "view_line_history",
    VIEW_HISTORY: "view_branch_history",
}

COMMAND_HELP: dict[str, str] = {
    VIEW_FILE_HISTORY: "Show the commit history of a file",
    VIEW_LINE_HISTORY: "Show the commit history of the line under the cursor",
    VIEW_HISTORY: "Show the commit history of the current branch",
}


async def dispatch(
    handler: HistoryCommandHandler, name: str, *args: object,
) -> RenderRequest | None:
    """Run the entry point registered under *name*.

    Raises:
        KeyError: *name* is not a history command.
    """
    try:
        method_name = COMMANDS[name]
    except KeyError:
        raise KeyError(f"Unknown command: {name}") from None
    return await getattr(handler, method_name)(*args)
