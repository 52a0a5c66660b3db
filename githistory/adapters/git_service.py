"""Git-backed repository service.

Answers the three questions the history view needs: which working trees
live under a path, which one a path belongs to, and which branch it has
checked out. All git calls are non-blocking subprocesses with a timeout.
"""
from __future__ import annotations

import asyncio
import contextlib
import logging
import os
from pathlib import Path

from githistory.engine.config import HistoryConfig
from githistory.engine.errors import GitCommandError, RepositoryNotFoundError

logger = logging.getLogger(__name__)

# Directory names never worth descending into when looking for nested repos.
_SKIP_DIRS = frozenset({
    "node_modules",
    "__pycache__",
    "venv",
    "site-packages",
    "bower_components",
})


def normalize_root(path: str) -> str:
    return os.path.normpath(os.path.realpath(path))


def _working_dir(path: str) -> str:
    """git must run inside a directory; files use their parent."""
    p = Path(path)
    return str(p if p.is_dir() else p.parent)


def _scan_nested_roots(start: str, max_depth: int) -> list[str]:
    """Find working trees (directories holding ``.git``) below *start*."""
    start_path = Path(start)
    if not start_path.is_dir():
        return []
    found: list[str] = []
    frontier = [(start_path, 0)]
    while frontier:
        current, depth = frontier.pop(0)
        if (current / ".git").exists():
            found.append(normalize_root(str(current)))
        if depth >= max_depth:
            continue
        try:
            children = sorted(
                child for child in current.iterdir()
                if child.is_dir()
                and not child.is_symlink()
                and not child.name.startswith(".")
                and child.name not in _SKIP_DIRS
            )
        except OSError as exc:
            logger.debug("Skipping unreadable directory %s: %s", current, exc)
            continue
        frontier.extend((child, depth + 1) for child in children)
    return found


async def _kill_and_reap(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        # git may exit on its own between the check and the kill
        with contextlib.suppress(ProcessLookupError):
            proc.kill()
    await proc.wait()


async def run_git(args: list[str], cwd: str, timeout: float) -> str:
    """Run ``git <args>`` in *cwd* and return stripped stdout.

    Raises:
        GitCommandError: git is missing, timed out, or exited non-zero.
    """
    try:
        proc = await asyncio.create_subprocess_exec(
            "git", *args,
            cwd=cwd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except FileNotFoundError as exc:
        raise GitCommandError(args, None, f"cannot run git in {cwd}: {exc}") from exc

    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError as exc:
        await _kill_and_reap(proc)
        raise GitCommandError(args, None, f"timed out after {timeout}s") from exc
    except asyncio.CancelledError:
        await _kill_and_reap(proc)
        raise

    if proc.returncode != 0:
        raise GitCommandError(
            args, proc.returncode, stderr.decode("utf-8", errors="replace"),
        )
    return stdout.decode("utf-8", errors="replace").strip()


class GitService:
    """Repository queries scoped to one working path inside a workspace."""

    def __init__(
        self,
        workspace_folder: str,
        working_path: str,
        timeout: float = 10.0,
        scan_depth: int = 3,
    ) -> None:
        self._workspace_folder = workspace_folder
        self._working_path = working_path
        self._timeout = timeout
        self._scan_depth = scan_depth

    def __repr__(self) -> str:
        return f"GitService(workspace={self._workspace_folder!r}, path={self._working_path!r})"

    async def _toplevel(self, path: str) -> str | None:
        try:
            out = await run_git(
                ["rev-parse", "--show-toplevel"], _working_dir(path), self._timeout,
            )
        except GitCommandError as exc:
            if exc.returncode is None:
                raise
            return None
        return normalize_root(out) if out else None

    async def list_roots(self, path: str) -> list[str]:
        """Working trees relevant to *path*, containing root first."""
        roots: list[str] = []
        containing = await self._toplevel(path)
        if containing:
            roots.append(containing)
        nested = await asyncio.to_thread(_scan_nested_roots, path, self._scan_depth)
        for root in nested:
            if root not in roots:
                roots.append(root)
        logger.debug("list_roots(%s) -> %s", path, roots)
        return roots

    async def current_root(self) -> str:
        root = await self._toplevel(self._working_path)
        if root is None:
            raise RepositoryNotFoundError(self._working_path)
        return root

    async def current_branch(self) -> str:
        """Checked-out branch name, or the short commit for a detached HEAD."""
        cwd = _working_dir(self._working_path)
        try:
            return await run_git(["symbolic-ref", "--short", "HEAD"], cwd, self._timeout)
        except GitCommandError as exc:
            if exc.returncode is None:
                raise
            logger.debug("HEAD is detached in %s, using commit id", cwd)
        return await run_git(["rev-parse", "--short", "HEAD"], cwd, self._timeout)


class GitServiceFactory:
    """Creates a GitService per (workspace, path) pair."""

    def __init__(self, config: HistoryConfig) -> None:
        self._config = config

    async def create(self, workspace_folder: str, path_hint: str) -> GitService:
        if not os.path.exists(path_hint):
            raise RepositoryNotFoundError(path_hint)
        return GitService(
            workspace_folder,
            path_hint,
            timeout=self._config.git_timeout_seconds,
            scan_depth=self._config.root_scan_depth,
        )
