"""Session identifiers for history views.

The id is a content address over exactly four fields: backing server
port, branch selection mode, target file (or empty) and repository root.
Branch name, locale and search text are left out so that switching
branches or typing a query reuses the same stored state.
"""
from __future__ import annotations

import hashlib

from .models import BranchSelection


def fingerprint_source(
    port: int,
    mode: BranchSelection,
    file_path: str | None,
    repository_root: str,
) -> str:
    return f"{port}:{mode.value}:{file_path or ''}:{repository_root}"


def session_fingerprint(
    port: int,
    mode: BranchSelection,
    file_path: str | None,
    repository_root: str,
) -> str:
    """Return the 128-bit hex digest identifying a view session."""
    source = fingerprint_source(port, mode, file_path, repository_root)
    return hashlib.md5(source.encode("utf-8")).hexdigest()
