"""githistory CLI: open file, line or branch history from a terminal.

Usage:
    githistory                              # branch history of the workspace
    githistory --file src/app.py            # file history
    githistory --file src/app.py --line 42  # line history
    githistory --workspace ~/a --workspace ~/b --serve

Each render request is printed to stdout as one JSON line. With --serve
the backing server stays up so the panel can fetch /state/{id}.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from githistory.adapters.event_bus import EventBus
from githistory.adapters.events import event_to_dict
from githistory.adapters.git_service import GitServiceFactory
from githistory.adapters.host_locale import detect_locale
from githistory.adapters.workspace import FolderWorkspaceResolver
from githistory.engine.config import HistoryConfig
from githistory.engine.context import open_history_context
from githistory.engine.errors import HistoryError
from githistory.engine.models import ActiveEditor
from githistory.engine.orchestrator import HistoryCommandHandler
from githistory.engine.yaml_config import load_yaml_config
from githistory.server.history_server import HistoryServer
from githistory.shared.commands import (
    VIEW_FILE_HISTORY,
    VIEW_HISTORY,
    VIEW_LINE_HISTORY,
    dispatch,
)
from githistory.shared.services.state_store import WorkspaceQueryStateStore
from githistory.tui.prompt import ConsolePrompt, TextualPrompt

logger = logging.getLogger(__name__)


def _configure_logging(log_level: str) -> Path:
    log_dir = Path.home() / ".githistory" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "githistory.log"

    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level, logging.INFO))
    root.handlers.clear()
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s %(name)s [pid=%(process)d] %(message)s"
    )
    file_handler = RotatingFileHandler(
        log_file, maxBytes=2_000_000, backupCount=5, encoding="utf-8"
    )
    file_handler.setFormatter(formatter)
    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    root.addHandler(file_handler)
    root.addHandler(stream_handler)
    return log_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="githistory",
        description="Open git file, line or branch history views",
    )
    parser.add_argument(
        "--file", metavar="PATH",
        help="File whose history to show (default: branch history)",
    )
    parser.add_argument(
        "--line", metavar="N", type=int,
        help="1-based line number; requires --file",
    )
    parser.add_argument(
        "--workspace", metavar="DIR", action="append", default=None,
        help="Workspace folder (repeatable, default: current directory)",
    )
    parser.add_argument(
        "--config", metavar="PATH",
        help="YAML config file",
    )
    parser.add_argument(
        "--serve", action="store_true",
        help="Keep the backing server running after the view is built",
    )
    parser.add_argument(
        "--port", type=int, default=None,
        help="Backing server port (0=random available port)",
    )
    return parser


def _resolve_config(args: argparse.Namespace) -> HistoryConfig:
    config = HistoryConfig.from_env()
    if args.config:
        config = load_yaml_config(args.config, base=config)
    if args.port is not None:
        config.port = args.port
    if args.workspace:
        config.workspace_folders = [
            str(Path(w).expanduser().resolve()) for w in args.workspace
        ]
    if not config.workspace_folders:
        config.workspace_folders = [str(Path.cwd())]
    return config


def _select_command(args: argparse.Namespace) -> tuple[str, ActiveEditor | None]:
    """Map CLI flags to a command name and the editor state it sees."""
    if args.file is None:
        return VIEW_HISTORY, None
    editor = ActiveEditor(
        document_path=str(Path(args.file).expanduser().resolve()),
        is_untitled=False,
        selection_start_line=max((args.line or 1) - 1, 0),
    )
    if args.line is not None:
        return VIEW_LINE_HISTORY, editor
    return VIEW_FILE_HISTORY, editor


async def run(args: argparse.Namespace, config: HistoryConfig) -> int:
    command, editor = _select_command(args)
    prompt = TextualPrompt() if sys.stdin.isatty() else ConsolePrompt()
    state_store = WorkspaceQueryStateStore(config.state_dir)
    server = HistoryServer(state_store, host=config.host, port=config.port)
    bus = EventBus()

    async with open_history_context(
        config,
        workspace_resolver=FolderWorkspaceResolver(config.workspace_folders, prompt),
        repository_factory=GitServiceFactory(config),
        backing_service=server,
        detect_locale=detect_locale,
        state_store=state_store,
        prompt=prompt,
        renderer=bus,
        active_editor=lambda: editor,
    ) as context:
        handler = HistoryCommandHandler(context)
        result = await dispatch(handler, command)
        for event in bus.drain():
            sys.stdout.write(json.dumps(event_to_dict(event)) + "\n")
        sys.stdout.flush()
        bus.close()

        if result is None:
            logger.info("%s produced no view", command)
            return 0
        if args.serve:
            logger.info("Serving history state on port %s (Ctrl+C to stop)", server.port)
            try:
                await asyncio.Event().wait()
            except asyncio.CancelledError:
                logger.info("Server shutting down")
    return 0


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    if args.line is not None and args.file is None:
        parser.error("--line requires --file")
    if args.line is not None and args.line < 1:
        parser.error("--line must be 1 or greater")

    config = _resolve_config(args)
    log_file = _configure_logging(config.log_level)
    logger.info(
        "Starting githistory cwd=%s workspaces=%s config=%s log=%s",
        Path.cwd(), config.workspace_folders, args.config or "<none>", log_file,
    )
    try:
        code = asyncio.run(run(args, config))
    except KeyboardInterrupt:
        code = 130
    except HistoryError as exc:
        logger.error("githistory failed: %s", exc, exc_info=True)
        code = 1
    sys.exit(code)


if __name__ == "__main__":
    main()
