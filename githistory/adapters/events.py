"""Events published by the history command handler.

Each event is a typed dataclass. Hosts receive them through the EventBus
and serialize them with event_to_dict().
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from githistory.engine.models import DEFAULT_RENDER_COMMAND, RenderRequest, ViewColumn


@dataclass
class HistoryEvent:
    """Base event from the history command handler."""
    event_type: str = ""


@dataclass
class RenderRequested(HistoryEvent):
    """A host should open a panel for ``uri`` titled ``title``."""
    event_type: str = "render_requested"
    session_id: str = ""
    command: str = DEFAULT_RENDER_COMMAND
    uri: str = ""
    placement: int = int(ViewColumn.ONE)
    title: str = ""

    @classmethod
    def from_request(cls, session_id: str, request: RenderRequest) -> RenderRequested:
        return cls(
            session_id=session_id,
            command=request.command,
            uri=request.uri,
            placement=int(request.placement),
            title=request.title,
        )

    def to_request(self) -> RenderRequest:
        return RenderRequest(
            uri=self.uri,
            title=self.title,
            placement=ViewColumn(self.placement),
            command=self.command,
        )


_EVENT_MAP: dict[str, type[HistoryEvent]] = {
    "render_requested": RenderRequested,
}


def event_to_dict(event: HistoryEvent) -> dict[str, Any]:
    """Convert a typed event dataclass to a plain dict for JSON serialization."""
    d: dict[str, Any] = {}
    for f in event.__dataclass_fields__:
        val = getattr(event, f)
        if val is not None:
            d[f] = val
    # "event" rather than "event_type" on the wire
    if "event_type" in d:
        d["event"] = d.pop("event_type")
    return d


def dict_to_event(data: dict[str, Any]) -> HistoryEvent:
    """Convert a wire dict back into a typed event dataclass."""
    event_type = data.get("event", "")
    cls = _EVENT_MAP.get(event_type, HistoryEvent)
    valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in valid_fields}
    if "event" in data and "event_type" not in filtered:
        filtered["event_type"] = data["event"]
    return cls(**filtered)
