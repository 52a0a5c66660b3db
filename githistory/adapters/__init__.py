"""Adapters package - default collaborators for the history engine.

Git-backed repository service, workspace folder resolution, locale
detection, and the event bus that carries render requests to a host.
"""
from __future__ import annotations

__all__ = [
    "EventBus",
    "FolderWorkspaceResolver",
    "GitService",
    "GitServiceFactory",
    "RenderRequested",
    "detect_locale",
]

from githistory.adapters.event_bus import EventBus
from githistory.adapters.events import RenderRequested
from githistory.adapters.git_service import GitService, GitServiceFactory
from githistory.adapters.host_locale import detect_locale
from githistory.adapters.workspace import FolderWorkspaceResolver
