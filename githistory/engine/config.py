"""Configuration loaded from environment variables.

All settings have sensible defaults. Override via GITHISTORY_* env vars.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from .models import DEFAULT_RENDER_COMMAND

logger = logging.getLogger(__name__)

DEFAULT_PREVIEW_BASE = "git-history-viewer://authority/git-history"


@dataclass
class HistoryConfig:
    """History viewer configuration."""

    # Base address the rendering surface is registered under.
    preview_base: str = DEFAULT_PREVIEW_BASE
    # Host command that opens a panel for a RenderRequest.
    render_command: str = DEFAULT_RENDER_COMMAND

    # Backing server bind address. Port 0 picks an ephemeral port.
    host: str = "127.0.0.1"
    port: int = 0

    # Directory for persisted session state. None keeps state in memory.
    state_dir: str | None = None

    # Per-invocation timeout for git subprocesses.
    git_timeout_seconds: float = 10.0
    # How many directory levels below a workspace to look for nested repos.
    root_scan_depth: int = 3

    # Workspace folders known to the host, in display order.
    workspace_folders: list[str] = field(default_factory=list)

    # Logging
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> HistoryConfig:
        """Load configuration from GITHISTORY_* environment variables."""
        overrides = {
            k: v for k, v in os.environ.items() if k.startswith("GITHISTORY_")
        }
        if overrides:
            logger.info(
                "HistoryConfig.from_env: GITHISTORY_* env overrides: %s",
                ", ".join(f"{k}={v}" for k, v in sorted(overrides.items())),
            )
        else:
            logger.debug("HistoryConfig.from_env: no GITHISTORY_* env vars set, using defaults")

        return cls(
            preview_base=os.getenv(
                "GITHISTORY_PREVIEW_BASE", cls.preview_base
            ),
            render_command=os.getenv(
                "GITHISTORY_RENDER_COMMAND", cls.render_command
            ),
            host=os.getenv("GITHISTORY_HOST", cls.host),
            port=int(os.getenv("GITHISTORY_PORT", str(cls.port))),
            state_dir=os.getenv("GITHISTORY_STATE_DIR") or None,
            git_timeout_seconds=float(os.getenv(
                "GITHISTORY_GIT_TIMEOUT", str(cls.git_timeout_seconds)
            )),
            root_scan_depth=int(os.getenv(
                "GITHISTORY_ROOT_SCAN_DEPTH", str(cls.root_scan_depth)
            )),
            log_level=os.getenv("GITHISTORY_LOG_LEVEL", cls.log_level).upper(),
        )
