"""Concurrent initialization for a history view.

Five independent lookups run at once and are joined fail-fast: the first
failure is re-raised unchanged and no partial result escapes. Lookups
still pending at that point are cancelled, except the backing server
start, which is shared by the whole process and is idempotent.
"""
from __future__ import annotations

import asyncio
import logging
import time

from .context import BackingService, LocaleDetector, RepositoryService
from .models import InitializationResult

logger = logging.getLogger(__name__)

_LOOKUPS = (
    "repository_root",
    "branch_name",
    "startup",
    "locale",
    "workspace_roots",
)


async def gather_initialization(
    service: RepositoryService,
    backing_service: BackingService,
    detect_locale: LocaleDetector,
    workspace_folder: str,
) -> InitializationResult:
    """Run the five lookups concurrently and join them.

    Raises:
        Whatever the first failing lookup raised.
    """
    started = time.monotonic()
    start_task = asyncio.ensure_future(backing_service.start(workspace_folder))
    start_task.add_done_callback(_retrieve_start_outcome)
    tasks: dict[str, asyncio.Future] = {
        "repository_root": asyncio.ensure_future(service.current_root()),
        "branch_name": asyncio.ensure_future(service.current_branch()),
        "startup": asyncio.ensure_future(asyncio.shield(start_task)),
        "locale": asyncio.ensure_future(detect_locale()),
        "workspace_roots": asyncio.ensure_future(
            service.list_roots(workspace_folder)
        ),
    }
    try:
        done, pending = await asyncio.wait(
            tasks.values(), return_when=asyncio.FIRST_EXCEPTION,
        )
        for name in _LOOKUPS:
            task = tasks[name]
            if task in done and not task.cancelled() and task.exception() is not None:
                logger.debug(
                    "Initialization lookup %s failed after %.1fms",
                    name, (time.monotonic() - started) * 1000,
                )
                raise task.exception()
    finally:
        await _cancel_pending(tasks.values())

    results = {name: tasks[name].result() for name in _LOOKUPS}
    logger.debug(
        "Initialization joined in %.1fms root=%s branch=%s port=%s",
        (time.monotonic() - started) * 1000,
        results["repository_root"], results["branch_name"],
        results["startup"].port,
    )
    return InitializationResult(
        repository_root=results["repository_root"],
        branch_name=results["branch_name"],
        startup=results["startup"],
        locale=results["locale"],
        workspace_roots=list(results["workspace_roots"]),
    )


def _retrieve_start_outcome(task: asyncio.Future) -> None:
    # A start that outlives a failed join has no other awaiter.
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.debug("Backing service start failed: %s", exc)


async def _cancel_pending(tasks) -> None:
    pending = [task for task in tasks if not task.done()]
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
