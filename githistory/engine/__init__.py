"""History view engine: root resolution, session ids and view addresses."""
from .config import HistoryConfig
from .errors import (
    BackingServiceError,
    GitCommandError,
    HistoryError,
    RepositoryNotFoundError,
    StateStoreError,
)
from .fingerprint import session_fingerprint
from .models import (
    ActiveEditor,
    BranchSelection,
    InitializationResult,
    PickItem,
    PickOptions,
    RenderRequest,
    SessionState,
    StartupInfo,
    ViewColumn,
    ViewRequest,
)

__all__ = [
    # Handler and context (lazy import to avoid circular deps)
    "HistoryCommandHandler",
    "HistoryContext",
    "open_history_context",
    # Config
    "HistoryConfig",
    "load_yaml_config",
    # Models
    "ActiveEditor",
    "BranchSelection",
    "InitializationResult",
    "PickItem",
    "PickOptions",
    "RenderRequest",
    "SessionState",
    "StartupInfo",
    "ViewColumn",
    "ViewRequest",
    "session_fingerprint",
    # Errors
    "BackingServiceError",
    "GitCommandError",
    "HistoryError",
    "RepositoryNotFoundError",
    "StateStoreError",
]


def __getattr__(name: str):
    if name == "HistoryCommandHandler":
        from .orchestrator import HistoryCommandHandler
        return HistoryCommandHandler
    if name == "HistoryContext":
        from .context import HistoryContext
        return HistoryContext
    if name == "open_history_context":
        from .context import open_history_context
        return open_history_context
    if name == "load_yaml_config":
        from .yaml_config import load_yaml_config
        return load_yaml_config
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
