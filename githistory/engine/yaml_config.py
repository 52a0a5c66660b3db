"""YAML configuration loader.

Layers a YAML file over an existing HistoryConfig (usually the one from
environment variables). Keys that are absent keep the base value.

Example YAML:
    viewer:
      preview_base: git-history-viewer://authority/git-history
      host: 127.0.0.1
      port: 0
      state_dir: ~/.githistory/state
      git_timeout_seconds: 10
      root_scan_depth: 3
      log_level: DEBUG

    workspace:
      folders:
        - ~/src/monorepo
        - ../sibling-project     # relative to this file
"""
from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

import yaml

from .config import HistoryConfig

logger = logging.getLogger(__name__)


def _resolve_folder(raw: str, base_dir: Path) -> str:
    folder = Path(raw).expanduser()
    if not folder.is_absolute():
        folder = base_dir / folder
    return str(folder.resolve())


def load_yaml_config(
    path: str | Path, base: HistoryConfig | None = None,
) -> HistoryConfig:
    """Load a YAML config file on top of *base* (defaults when None)."""
    path = Path(path)
    base = base or HistoryConfig()
    logger.info(
        "load_yaml_config: loading %s (exists=%s)", path, path.exists()
    )
    try:
        with open(path) as f:
            raw = yaml.safe_load(f) or {}
    except FileNotFoundError:
        logger.error(
            "load_yaml_config: config file not found at %s (absolute path: %s)",
            path, path.absolute(),
        )
        raise
    except yaml.YAMLError as exc:
        logger.error("load_yaml_config: YAML parse error in %s: %s", path, exc)
        raise

    if not isinstance(raw, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(raw).__name__}")

    viewer_raw = raw.get("viewer") or {}
    state_dir = viewer_raw.get("state_dir", base.state_dir)
    config = replace(
        base,
        preview_base=str(viewer_raw.get("preview_base", base.preview_base)),
        render_command=str(viewer_raw.get("render_command", base.render_command)),
        host=str(viewer_raw.get("host", base.host)),
        port=int(viewer_raw.get("port", base.port)),
        state_dir=str(Path(state_dir).expanduser()) if state_dir else None,
        git_timeout_seconds=float(viewer_raw.get(
            "git_timeout_seconds", base.git_timeout_seconds
        )),
        root_scan_depth=int(viewer_raw.get(
            "root_scan_depth", base.root_scan_depth
        )),
        log_level=str(viewer_raw.get("log_level", base.log_level)).upper(),
    )

    folders = (raw.get("workspace") or {}).get("folders")
    if folders:
        config.workspace_folders = [
            _resolve_folder(str(folder), path.parent) for folder in folders
        ]

    logger.info(
        "Parsed YAML config %s: sections=%s workspace_folders=%d",
        path.name, ", ".join(sorted(raw.keys())) or "(empty)",
        len(config.workspace_folders),
    )
    return config
