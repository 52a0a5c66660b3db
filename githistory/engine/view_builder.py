"""Compose the address and panel title for a history view."""
from __future__ import annotations

import os
from urllib.parse import quote

from .models import ViewRequest

# Characters encodeURIComponent leaves alone.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_query_params(request: ViewRequest) -> list[tuple[str, str]]:
    """Query parameters in their fixed order.

    The order is part of the output contract so addresses are reproducible.
    """
    return [
        ("id", request.id),
        ("port", str(request.server_port)),
        ("file", encode_component(request.file_path) if request.file_path else ""),
        ("branchSelection", request.selection_mode.value),
        ("locale", encode_component(request.locale)),
        ("branchName", encode_component(request.branch_name)),
    ]


def build_address(preview_base: str, request: ViewRequest) -> str:
    query = "&".join(f"{key}={value}" for key, value in build_query_params(request))
    return f"{preview_base}?{query}"


def build_title(
    file_path: str | None,
    line_number: int | None,
    repository_root: str,
    workspace_roots: list[str],
) -> str:
    if file_path:
        name = os.path.basename(file_path)
        if line_number is not None:
            return f"Line History ({name}#{line_number})"
        return f"File History ({name})"
    if len(workspace_roots) > 1:
        return f"Git History ({os.path.basename(repository_root)})"
    return "Git History"
