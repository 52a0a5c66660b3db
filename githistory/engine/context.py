"""Explicit context passed to the history command handler.

Every collaborator the orchestration talks to lives on HistoryContext.
Nothing is looked up at runtime. The backing server handle is created
once by open_history_context() and always stopped when the block exits.
"""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Protocol

from .config import HistoryConfig
from .models import (
    ActiveEditor,
    BranchSelection,
    PickItem,
    PickOptions,
    StartupInfo,
)

logger = logging.getLogger(__name__)

# Signature: async def detect_locale() -> str
LocaleDetector = Callable[[], Awaitable[str]]

# Signature: def active_editor() -> ActiveEditor | None
EditorProvider = Callable[[], "ActiveEditor | None"]


class SelectionPrompt(Protocol):
    async def prompt_single_select(
        self, items: list[PickItem], options: PickOptions,
    ) -> PickItem | None: ...


class RepositoryService(Protocol):
    async def list_roots(self, path: str) -> list[str]: ...

    async def current_root(self) -> str: ...

    async def current_branch(self) -> str: ...


class RepositoryServiceFactory(Protocol):
    async def create(
        self, workspace_folder: str, path_hint: str,
    ) -> RepositoryService: ...


class WorkspaceResolver(Protocol):
    async def resolve(self, path_hint: str | None = None) -> str | None: ...


class BackingService(Protocol):
    async def start(self, workspace_folder: str) -> StartupInfo: ...

    async def stop(self) -> None: ...


class SessionStateStore(Protocol):
    async def initialize(
        self,
        session_id: str,
        workspace_folder: str,
        repository_root: str,
        branch_name: str,
        selection_mode: BranchSelection,
        search_text: str,
        file_path: str | None = None,
        line_number: int | None = None,
    ) -> None: ...


class Renderer(Protocol):
    async def emit(self, event) -> None: ...


def _no_editor() -> ActiveEditor | None:
    return None


@dataclass
class HistoryContext:
    """Collaborators for one process. Built once, passed explicitly."""

    config: HistoryConfig
    workspace_resolver: WorkspaceResolver
    repository_factory: RepositoryServiceFactory
    backing_service: BackingService
    detect_locale: LocaleDetector
    state_store: SessionStateStore
    prompt: SelectionPrompt
    renderer: Renderer
    active_editor: EditorProvider = field(default=_no_editor)


@asynccontextmanager
async def open_history_context(
    config: HistoryConfig,
    *,
    workspace_resolver: WorkspaceResolver,
    repository_factory: RepositoryServiceFactory,
    backing_service: BackingService,
    detect_locale: LocaleDetector,
    state_store: SessionStateStore,
    prompt: SelectionPrompt,
    renderer: Renderer,
    active_editor: EditorProvider = _no_editor,
) -> AsyncIterator[HistoryContext]:
    """Yield a HistoryContext and release the backing server on exit."""
    context = HistoryContext(
        config=config,
        workspace_resolver=workspace_resolver,
        repository_factory=repository_factory,
        backing_service=backing_service,
        detect_locale=detect_locale,
        state_store=state_store,
        prompt=prompt,
        renderer=renderer,
        active_editor=active_editor,
    )
    try:
        yield context
    finally:
        logger.debug("Releasing backing service %r", backing_service)
        await backing_service.stop()
