"""
Presentation sink - where completion events go.

The UI layer implements `CompletionSink`; `QueueSink` adapts the events to
an asyncio queue for consumers that prefer to pull.

Events:
    ai_response_chunk     payload: text fragment
    ai_response_complete  payload: None
    ai_response_error     payload: error message
"""
import asyncio
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional, Protocol

from lumina.models import AI_RESPONSE_COMPLETE, AI_RESPONSE_ERROR

TERMINAL_EVENTS = frozenset({AI_RESPONSE_COMPLETE, AI_RESPONSE_ERROR})


class CompletionSink(Protocol):
    async def emit(self, event: str, payload: Any = None) -> None: ...


@dataclass(frozen=True)
class SinkEvent:
    event: str
    payload: Optional[Any] = None

    @property
    def is_terminal(self) -> bool:
        return self.event in TERMINAL_EVENTS


class QueueSink:
    """
    Collects events in arrival order.

    Usage:
        sink = QueueSink()
        async for event in sink.events():
            render(event)
    """

    def __init__(self) -> None:
        self.queue: "asyncio.Queue[SinkEvent]" = asyncio.Queue()

    async def emit(self, event: str, payload: Any = None) -> None:
        await self.queue.put(SinkEvent(event, payload))

    async def events(self) -> AsyncIterator[SinkEvent]:
        """Yield events up to and including the next terminal one."""
        while True:
            item = await self.queue.get()
            yield item
            if item.is_terminal:
                return

    def drain(self) -> list:
        """Everything received so far, without waiting."""
        items = []
        while not self.queue.empty():
            items.append(self.queue.get_nowait())
        return items
