"""Core data models for the history viewer.

All dataclasses, enums, and type aliases. Single source of truth
to avoid circular imports.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum, IntEnum
from typing import Any

DEFAULT_RENDER_COMMAND = "previewHtml"


class BranchSelection(str, Enum):
    """Which branch scope a history view targets."""
    CURRENT = "current"
    ALL = "all"


class ViewColumn(IntEnum):
    """Editor placement for a rendered panel."""
    ACTIVE = -1
    BESIDE = -2
    ONE = 1
    TWO = 2
    THREE = 3


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class StartupInfo:
    """What the backing server reports once it is listening."""
    port: int
    host: str = "127.0.0.1"


@dataclass
class InitializationResult:
    """Joined output of the five concurrent lookups."""
    repository_root: str
    branch_name: str
    startup: StartupInfo
    locale: str
    workspace_roots: list[str] = field(default_factory=list)


@dataclass
class ViewRequest:
    """One history view invocation. Discarded once the address is built."""
    id: str
    workspace_folder: str
    repository_root: str
    branch_name: str
    selection_mode: BranchSelection
    locale: str
    server_port: int
    file_path: str | None = None
    line_number: int | None = None


@dataclass
class SessionState:
    """Persisted view state, keyed by the session fingerprint."""
    id: str
    workspace_folder: str
    repository_root: str
    branch_name: str
    selection_mode: BranchSelection
    search_text: str = ""
    file_path: str | None = None
    line_number: int | None = None
    updated_at: datetime = field(default_factory=_utcnow)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["selection_mode"] = self.selection_mode.value
        data["updated_at"] = self.updated_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SessionState:
        updated_at = data.get("updated_at")
        return cls(
            id=data["id"],
            workspace_folder=data["workspace_folder"],
            repository_root=data["repository_root"],
            branch_name=data["branch_name"],
            selection_mode=BranchSelection(data["selection_mode"]),
            search_text=data.get("search_text") or "",
            file_path=data.get("file_path"),
            line_number=data.get("line_number"),
            updated_at=(
                datetime.fromisoformat(updated_at) if updated_at else _utcnow()
            ),
        )


@dataclass
class PickItem:
    """A single row in a single-select prompt."""
    label: str
    detail: str = ""
    value: str = ""


@dataclass
class PickOptions:
    placeholder: str = ""
    can_pick_many: bool = False
    match_on_description: bool = True
    match_on_detail: bool = True


@dataclass
class ActiveEditor:
    """The editor the user is looking at.

    ``selection_start_line`` is 0-based, like every editor API.
    """
    document_path: str
    is_untitled: bool = False
    selection_start_line: int = 0


@dataclass
class RenderRequest:
    """Instruction for a UI-owning host to open a history panel."""
    uri: str
    title: str
    placement: ViewColumn = ViewColumn.ONE
    command: str = DEFAULT_RENDER_COMMAND
