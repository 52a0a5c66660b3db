"""Tests for session state storage."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from githistory.engine.errors import StateStoreError
from githistory.engine.models import BranchSelection
from githistory.shared.services.durable_write import atomic_write_json
from githistory.shared.services.state_store import WorkspaceQueryStateStore

SID = "d6b73534b1882a34c0bb45daeb57810b"


@pytest.mark.asyncio
async def test_initialize_keeps_state_in_memory() -> None:
    store = WorkspaceQueryStateStore()
    await store.initialize(
        SID, "/repo", "/repo", "main", BranchSelection.CURRENT, "", "/repo/a.ts", None,
    )

    state = store.get(SID)
    assert state is not None
    assert state.repository_root == "/repo"
    assert state.branch_name == "main"
    assert state.file_path == "/repo/a.ts"
    assert state.line_number is None
    assert store.list_ids() == [SID]
    assert store.get("0" * 32) is None


@pytest.mark.asyncio
async def test_initialize_overwrites_instead_of_merging() -> None:
    store = WorkspaceQueryStateStore()
    await store.initialize(
        SID, "/repo", "/repo", "main", BranchSelection.CURRENT, "fix bug", "/repo/a.ts", 7,
    )
    await store.initialize(
        SID, "/repo", "/repo", "dev", BranchSelection.CURRENT, "", None, None,
    )

    state = store.get(SID)
    assert state.branch_name == "dev"
    assert state.search_text == ""
    assert state.file_path is None
    assert state.line_number is None


@pytest.mark.asyncio
async def test_state_is_persisted_and_reloaded(tmp_path: Path) -> None:
    store = WorkspaceQueryStateStore(tmp_path)
    await store.initialize(
        SID, "/ws", "/ws/repo", "main", BranchSelection.CURRENT, "", "/ws/repo/x.py", 3,
    )

    data = json.loads((tmp_path / f"{SID}.json").read_text())
    assert data["selection_mode"] == "current"
    assert data["line_number"] == 3

    reloaded = WorkspaceQueryStateStore(tmp_path).get(SID)
    assert reloaded is not None
    assert reloaded.selection_mode is BranchSelection.CURRENT
    assert reloaded.file_path == "/ws/repo/x.py"
    assert reloaded.updated_at.tzinfo is not None


@pytest.mark.asyncio
async def test_non_digest_ids_are_rejected_on_disk(tmp_path: Path) -> None:
    store = WorkspaceQueryStateStore(tmp_path)
    with pytest.raises(StateStoreError):
        await store.initialize(
            "../escape", "/ws", "/ws", "main", BranchSelection.CURRENT, "",
        )
    assert store.get("../escape") is None
    assert list(tmp_path.iterdir()) == []


@pytest.mark.asyncio
async def test_write_failure_raises_and_leaves_memory_untouched(tmp_path: Path) -> None:
    store = WorkspaceQueryStateStore(tmp_path)
    with patch(
        "githistory.shared.services.state_store.atomic_write_json",
        side_effect=OSError("disk full"),
    ):
        with pytest.raises(StateStoreError, match="disk full"):
            await store.initialize(
                SID, "/ws", "/ws", "main", BranchSelection.CURRENT, "",
            )
    assert store.list_ids() == []


def test_unreadable_state_file_is_ignored(tmp_path: Path) -> None:
    (tmp_path / f"{SID}.json").write_text("{not json")
    assert WorkspaceQueryStateStore(tmp_path).get(SID) is None


def test_atomic_write_json_replaces_file(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "state.json"
    atomic_write_json(target, {"b": 1, "a": 2})
    atomic_write_json(target, {"a": 3})

    assert json.loads(target.read_text()) == {"a": 3}
    assert [p.name for p in target.parent.iterdir()] == ["state.json"]
