"""HTTP backing server for history panels.

The rendering surface opens a panel with an address carrying a session
id and this server's port, then fetches the stored view state from here.

Routes:
    GET /health        liveness and what is being served
    GET /state/{id}    SessionState for a history view, 404 if unknown
"""
from __future__ import annotations

import asyncio
import logging
import os
import time
import uuid
from typing import Any

from aiohttp import web

from githistory.engine.errors import BackingServiceError
from githistory.engine.models import StartupInfo
from githistory.shared.services.state_store import WorkspaceQueryStateStore

logger = logging.getLogger(__name__)


class HistoryServer:
    """Lazily started, idempotent aiohttp server backing history panels.

    One instance per process. start() binds the first time it is awaited
    and afterwards only reports the port it is already listening on.
    """

    def __init__(
        self,
        state_store: WorkspaceQueryStateStore,
        host: str = "127.0.0.1",
        port: int = 0,
    ) -> None:
        self._state_store = state_store
        self._host = host
        self._port = port
        self._runner: web.AppRunner | None = None
        self._startup: StartupInfo | None = None
        self._start_lock = asyncio.Lock()
        self._started_at = 0.0
        self._workspaces: list[str] = []
        self._app = web.Application(middlewares=[self._request_logging_middleware])
        self._setup_routes()

    def __repr__(self) -> str:
        return f"HistoryServer(host={self._host!r}, port={self.port})"

    @property
    def app(self) -> web.Application:
        return self._app

    @property
    def port(self) -> int | None:
        return self._startup.port if self._startup else None

    @property
    def running(self) -> bool:
        return self._startup is not None

    # ── Lifecycle ──

    async def start(self, workspace_folder: str) -> StartupInfo:
        """Start listening if needed and return where the server is."""
        async with self._start_lock:
            if workspace_folder not in self._workspaces:
                self._workspaces.append(workspace_folder)
            if self._startup is not None:
                return self._startup

            runner = web.AppRunner(self._app)
            await runner.setup()
            try:
                site = web.TCPSite(runner, self._host, self._port)
                await site.start()
            except OSError as exc:
                await runner.cleanup()
                raise BackingServiceError(
                    f"cannot bind {self._host}:{self._port}: {exc}"
                ) from exc

            actual_port = self._resolve_port(site, runner)
            if actual_port is None:
                await runner.cleanup()
                raise BackingServiceError("server started but no listening socket was reported")

            self._runner = runner
            self._started_at = time.time()
            self._startup = StartupInfo(port=actual_port, host=self._host)
            logger.info(
                "History server listening on %s:%d workspace=%s",
                self._host, actual_port, workspace_folder,
            )
            return self._startup

    async def stop(self) -> None:
        async with self._start_lock:
            if self._runner is None:
                return
            logger.info("History server shutting down port=%s", self.port)
            await self._runner.cleanup()
            self._runner = None
            self._startup = None

    @staticmethod
    def _resolve_port(site, runner) -> int | None:
        sockets = getattr(getattr(site, "_server", None), "sockets", None) or ()
        if sockets:
            return sockets[0].getsockname()[1]
        addresses = getattr(runner, "addresses", None) or ()
        if addresses:
            first = addresses[0]
            if isinstance(first, tuple) and len(first) >= 2:
                return int(first[1])
        return None

    # ── Middleware ──

    @web.middleware
    async def _request_logging_middleware(self, request: web.Request, handler) -> web.StreamResponse:
        req_id = request.headers.get("x-githistory-request-id", str(uuid.uuid4())[:8])
        start = time.monotonic()
        try:
            response = await handler(request)
        except Exception:
            elapsed_ms = (time.monotonic() - start) * 1000
            logger.exception(
                "HTTP %s %s req=%s failed duration_ms=%.1f",
                request.method, request.path_qs, req_id, elapsed_ms,
            )
            raise
        elapsed_ms = (time.monotonic() - start) * 1000
        logger.info(
            "HTTP %s %s req=%s status=%s duration_ms=%.1f",
            request.method, request.path_qs, req_id,
            getattr(response, "status", "?"), elapsed_ms,
        )
        return response

    # ── Routes ──

    def _setup_routes(self) -> None:
        r = self._app.router
        r.add_get("/health", self._handle_health)
        r.add_get("/state/{id}", self._handle_get_state)

    async def _handle_health(self, request: web.Request) -> web.Response:
        payload: dict[str, Any] = {
            "status": "ok",
            "pid": os.getpid(),
            "port": self.port,
            "uptime_seconds": round(max(0.0, time.time() - self._started_at), 3)
            if self._started_at else 0.0,
            "workspaces": list(self._workspaces),
            "sessions": len(self._state_store.list_ids()),
        }
        return web.json_response(payload)

    async def _handle_get_state(self, request: web.Request) -> web.Response:
        session_id = request.match_info["id"]
        state = self._state_store.get(session_id)
        if state is None:
            return web.json_response(
                {"error": f"Unknown session: {session_id}"}, status=404,
            )
        return web.json_response(state.to_dict())
