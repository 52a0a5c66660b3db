"""History command handler: the three entry points and the orchestration.

Each entry point reduces its input to an optional (file, line) pair and
hands it to view_history(), which:

1. resolves the workspace folder (abort if none),
2. creates a repository service and lists candidate roots,
3. asks the user to pick a root only when there are several (abort on cancel),
4. gathers root, branch, server port, locale and sibling roots concurrently,
5. fingerprints (port, mode, file, root) into the session id,
6. writes session state, awaited, before anything is rendered,
7. publishes a RenderRequested event with the address and title.

Silent aborts return None. Collaborator failures propagate unchanged.
"""
from __future__ import annotations

import logging

from githistory.adapters.events import RenderRequested

from .context import HistoryContext
from .coordinator import gather_initialization
from .fingerprint import session_fingerprint
from .models import BranchSelection, RenderRequest, ViewColumn, ViewRequest
from .root_resolver import resolve_repository_root
from .targets import resolve_target_path
from .view_builder import build_address, build_title

logger = logging.getLogger(__name__)


class HistoryCommandHandler:
    """Opens file, line and branch history views."""

    def __init__(self, context: HistoryContext) -> None:
        self._ctx = context

    def _editor_file(self) -> tuple[str, int] | None:
        """Active editor path and 1-based cursor line, or None if unusable."""
        editor = self._ctx.active_editor()
        if editor is None or editor.is_untitled:
            return None
        return editor.document_path, editor.selection_start_line + 1

    async def view_file_history(self, target: object = None) -> RenderRequest | None:
        file_path = resolve_target_path(target)
        if file_path is None:
            editor_file = self._editor_file()
            if editor_file is None:
                logger.debug("File history: no target and no saved active document")
                return None
            file_path = editor_file[0]
        return await self.view_history(file_path)

    async def view_line_history(self) -> RenderRequest | None:
        editor_file = self._editor_file()
        if editor_file is None:
            logger.debug("Line history: no saved active document")
            return None
        file_path, line_number = editor_file
        return await self.view_history(file_path, line_number)

    async def view_branch_history(self) -> RenderRequest | None:
        return await self.view_history()

    async def view_history(
        self,
        file_path: str | None = None,
        line_number: int | None = None,
    ) -> RenderRequest | None:
        """Build and publish a history view. Returns None on silent abort."""
        ctx = self._ctx
        mode = BranchSelection.CURRENT

        workspace_folder = await ctx.workspace_resolver.resolve(file_path)
        if not workspace_folder:
            logger.debug("No workspace folder for %s", file_path or "<workspace>")
            return None

        scope = file_path or workspace_folder
        service = await ctx.repository_factory.create(workspace_folder, scope)
        candidate_roots = await service.list_roots(scope)
        if len(candidate_roots) > 1:
            selected_root = await resolve_repository_root(
                candidate_roots, workspace_folder, ctx.prompt,
            )
            if not selected_root:
                return None
            service = await ctx.repository_factory.create(workspace_folder, selected_root)

        joined = await gather_initialization(
            service, ctx.backing_service, ctx.detect_locale, workspace_folder,
        )

        # id covers port, mode, file and root only
        session_id = session_fingerprint(
            joined.startup.port, mode, file_path, joined.repository_root,
        )
        await ctx.state_store.initialize(
            session_id,
            workspace_folder,
            joined.repository_root,
            joined.branch_name,
            mode,
            "",
            file_path,
            line_number,
        )

        request = ViewRequest(
            id=session_id,
            workspace_folder=workspace_folder,
            repository_root=joined.repository_root,
            branch_name=joined.branch_name,
            selection_mode=mode,
            locale=joined.locale,
            server_port=joined.startup.port,
            file_path=file_path,
            line_number=line_number,
        )
        render = RenderRequest(
            uri=build_address(ctx.config.preview_base, request),
            title=build_title(
                file_path, line_number, joined.repository_root, joined.workspace_roots,
            ),
            placement=ViewColumn.ONE,
            command=ctx.config.render_command,
        )
        logger.info(
            "History view id=%s title=%r root=%s", session_id, render.title,
            joined.repository_root,
        )
        await ctx.renderer.emit(RenderRequested.from_request(session_id, render))
        return render
