"""Session state store: one record per history view id.

Storage layout (when a state directory is configured):
    {state_dir}/{session_id}.json

Every initialize() replaces the record for its id outright; nothing is
merged with what was stored before. The in-memory copy is authoritative
for this process; files let a restarted backing server serve old ids.
"""
from __future__ import annotations

import asyncio
import json
import logging
import re
from pathlib import Path

from githistory.engine.errors import StateStoreError
from githistory.engine.models import BranchSelection, SessionState
from githistory.shared.services.durable_write import atomic_write_json

logger = logging.getLogger(__name__)

_SESSION_ID_RE = re.compile(r"^[0-9a-f]{32}$")


class WorkspaceQueryStateStore:
    """Keeps SessionState records keyed by session fingerprint."""

    def __init__(self, state_dir: Path | str | None = None) -> None:
        self._states: dict[str, SessionState] = {}
        self._dir = Path(state_dir).expanduser() if state_dir else None

    @property
    def state_dir(self) -> Path | None:
        return self._dir

    def _path_for(self, session_id: str) -> Path:
        if not _SESSION_ID_RE.match(session_id):
            raise StateStoreError(session_id, "id is not a 32-character hex digest")
        return self._dir / f"{session_id}.json"

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
    ) -> None:
        """Create or fully overwrite the state for *session_id*."""
        state = SessionState(
            id=session_id,
            workspace_folder=workspace_folder,
            repository_root=repository_root,
            branch_name=branch_name,
            selection_mode=selection_mode,
            search_text=search_text,
            file_path=file_path,
            line_number=line_number,
        )
        if self._dir is not None:
            path = self._path_for(session_id)
            try:
                await asyncio.to_thread(atomic_write_json, path, state.to_dict())
            except OSError as exc:
                raise StateStoreError(session_id, str(exc)) from exc
        self._states[session_id] = state
        logger.info(
            "Session state initialized id=%s root=%s branch=%s file=%s line=%s",
            session_id, repository_root, branch_name, file_path, line_number,
        )

    def get(self, session_id: str) -> SessionState | None:
        """Return the stored state, falling back to disk for unknown ids."""
        state = self._states.get(session_id)
        if state is not None or self._dir is None:
            return state
        if not _SESSION_ID_RE.match(session_id):
            return None
        path = self._dir / f"{session_id}.json"
        if not path.exists():
            return None
        try:
            state = SessionState.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError, KeyError) as exc:
            logger.warning("Unreadable session state %s: %s", path, exc)
            return None
        self._states[session_id] = state
        return state

    def list_ids(self) -> list[str]:
        return sorted(self._states)
