"""Tests for the concurrent initialization join."""

from __future__ import annotations

import asyncio
import gc
import logging

import pytest

from githistory.engine.coordinator import gather_initialization
from githistory.engine.errors import GitCommandError, RepositoryNotFoundError
from githistory.engine.models import StartupInfo


class _Service:
    def __init__(
        self,
        root: str = "/repo",
        branch: str = "main",
        roots: list[str] | None = None,
        root_error: Exception | None = None,
        branch_error: Exception | None = None,
    ) -> None:
        self.root = root
        self.branch = branch
        self.roots = roots if roots is not None else [root]
        self.root_error = root_error
        self.branch_error = branch_error
        self.list_roots_calls: list[str] = []

    async def list_roots(self, path: str) -> list[str]:
        self.list_roots_calls.append(path)
        return list(self.roots)

    async def current_root(self) -> str:
        if self.root_error:
            raise self.root_error
        return self.root

    async def current_branch(self) -> str:
        if self.branch_error:
            raise self.branch_error
        return self.branch


class _Backing:
    def __init__(self, port: int = 9000, gate: asyncio.Event | None = None) -> None:
        self.port = port
        self.gate = gate
        self.started: list[str] = []
        self.completed = False
        self.cancelled = False

    async def start(self, workspace_folder: str) -> StartupInfo:
        self.started.append(workspace_folder)
        try:
            if self.gate is not None:
                await self.gate.wait()
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        self.completed = True
        return StartupInfo(port=self.port)

    async def stop(self) -> None:
        pass


async def _en_us() -> str:
    return "en-US"


@pytest.mark.asyncio
async def test_all_lookups_are_joined() -> None:
    service = _Service(root="/mono/svc", branch="dev", roots=["/mono", "/mono/svc"])
    backing = _Backing(port=4242)

    result = await gather_initialization(service, backing, _en_us, "/mono")

    assert result.repository_root == "/mono/svc"
    assert result.branch_name == "dev"
    assert result.startup.port == 4242
    assert result.locale == "en-US"
    assert result.workspace_roots == ["/mono", "/mono/svc"]
    assert backing.started == ["/mono"]
    assert service.list_roots_calls == ["/mono"]


@pytest.mark.asyncio
async def test_branch_failure_rejects_the_join() -> None:
    error = GitCommandError(["symbolic-ref", "--short", "HEAD"], 128, "fatal: bad HEAD")
    service = _Service(branch_error=error)

    with pytest.raises(GitCommandError) as excinfo:
        await gather_initialization(service, _Backing(), _en_us, "/repo")

    assert excinfo.value is error


@pytest.mark.asyncio
async def test_simultaneous_failures_raise_in_launch_order() -> None:
    service = _Service(
        root_error=RepositoryNotFoundError("/repo"),
        branch_error=GitCommandError(["rev-parse"], 128, "fatal"),
    )

    with pytest.raises(RepositoryNotFoundError):
        await gather_initialization(service, _Backing(), _en_us, "/repo")


@pytest.mark.asyncio
async def test_failure_cancels_pending_lookups_but_not_server_start() -> None:
    locale_cancelled = asyncio.Event()
    never = asyncio.Event()

    async def slow_locale() -> str:
        try:
            await never.wait()
        except asyncio.CancelledError:
            locale_cancelled.set()
            raise
        return "de-DE"

    gate = asyncio.Event()
    backing = _Backing(gate=gate)
    service = _Service(branch_error=GitCommandError(["symbolic-ref"], 1, "no"))

    with pytest.raises(GitCommandError):
        await gather_initialization(service, backing, slow_locale, "/repo")

    assert locale_cancelled.is_set()
    assert backing.cancelled is False

    gate.set()
    for _ in range(5):
        await asyncio.sleep(0)
    assert backing.completed is True


@pytest.mark.asyncio
async def test_late_server_start_failure_is_retrieved(caplog) -> None:
    gate = asyncio.Event()

    class _FailingBacking(_Backing):
        async def start(self, workspace_folder: str) -> StartupInfo:
            await gate.wait()
            raise OSError("address in use")

    loop_errors: list[dict] = []
    loop = asyncio.get_running_loop()
    loop.set_exception_handler(lambda _loop, context: loop_errors.append(context))
    service = _Service(branch_error=GitCommandError(["symbolic-ref"], 1, "no"))

    try:
        with caplog.at_level(logging.DEBUG, logger="githistory.engine.coordinator"):
            with pytest.raises(GitCommandError):
                await gather_initialization(service, _FailingBacking(), _en_us, "/repo")
            gate.set()
            for _ in range(5):
                await asyncio.sleep(0)
            gc.collect()
    finally:
        loop.set_exception_handler(None)

    assert "Backing service start failed: address in use" in caplog.text
    assert loop_errors == []
