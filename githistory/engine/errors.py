"""Exception hierarchy for the history viewer.

Silent aborts (no workspace, no editor, cancelled prompt) are not
errors and never raise. Everything here propagates to the caller.
"""
from __future__ import annotations


class HistoryError(Exception):
    """Base exception for all history viewer errors."""


class GitCommandError(HistoryError):
    """A git invocation exited non-zero or could not be run."""
    def __init__(self, args: list[str], returncode: int | None, stderr: str):
        self.args_list = list(args)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or "no output"
        super().__init__(
            f"git {' '.join(args)} failed (exit {returncode}): {detail}"
        )


class RepositoryNotFoundError(HistoryError):
    """The path is not inside a git working tree."""
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Not a git repository: {path}")


class BackingServiceError(HistoryError):
    """The backing server could not be started or reported no port."""
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Backing server unavailable: {reason}")


class StateStoreError(HistoryError):
    """Session state could not be written."""
    def __init__(self, session_id: str, reason: str):
        self.session_id = session_id
        self.reason = reason
        super().__init__(
            f"Cannot store session state {session_id}: {reason}"
        )
