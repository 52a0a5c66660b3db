"""Async event bus carrying render requests to a UI-owning host.

The command handler publishes RenderRequested events here and moves on;
it never waits for, or depends on, the panel actually opening. Hosts
either consume() continuously or drain() once a command has finished.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator

from githistory.adapters.events import HistoryEvent

logger = logging.getLogger(__name__)


class EventBus:
    """Async queue bridging the command handler to host consumers."""

    def __init__(self, maxsize: int = 1000, put_timeout: float = 30.0) -> None:
        self._queue: asyncio.Queue[HistoryEvent] = asyncio.Queue(
            maxsize=maxsize
        )
        self._put_timeout = put_timeout
        self._closed = False

    async def emit(self, event: HistoryEvent) -> None:
        """Publish an event. Never raises; a blocked queue drops the event."""
        if self._closed:
            logger.debug("EventBus closed, dropping: %s", event.event_type)
            return
        try:
            # Backpressure instead of dropping outright
            await asyncio.wait_for(
                self._queue.put(event), timeout=self._put_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(
                "EventBus queue blocked for %.0fs, dropping: %s (queue size: %d)",
                self._put_timeout,
                event.event_type,
                self._queue.qsize(),
            )

    async def consume(self) -> AsyncIterator[HistoryEvent]:
        """Yield events as they arrive. Stops on close()."""
        while not self._closed:
            try:
                event = await asyncio.wait_for(
                    self._queue.get(), timeout=0.5
                )
                yield event
            except asyncio.TimeoutError:
                continue
            except asyncio.CancelledError:
                break

    def drain(self) -> list[HistoryEvent]:
        """Remove and return every queued event without waiting."""
        events: list[HistoryEvent] = []
        while True:
            try:
                events.append(self._queue.get_nowait())
            except asyncio.QueueEmpty:
                break
        return events

    def close(self) -> None:
        """Stop the consumer loop permanently."""
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed
