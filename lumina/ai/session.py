"""
Completion Sessions - one streamed AI answer per session, one current
session per sink.

Features:
- Detached background task per session; `start()` returns an ack at once
- Monotonic sequence numbers; starting a new session makes older ones stale
- Stale sessions keep reading their stream but forward nothing
- Exactly one terminal event (complete or error) per forwarding session
"""
import asyncio
import logging
from contextlib import aclosing
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Set

from lumina.ai.client import CompletionClient
from lumina.ai.sink import CompletionSink
from lumina.ai.stream_decoder import StreamDecoder
from lumina.config import LauncherConfig, ServiceEndpoint, load_config, resolve_service
from lumina.exceptions import TransportError
from lumina.models import (
    AI_RESPONSE_CHUNK,
    AI_RESPONSE_COMPLETE,
    AI_RESPONSE_ERROR,
    ContentDelta,
    Done,
    Malformed,
    StreamFrame,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class CompletionAck:
    """Returned to the activating caller; never carries the answer."""
    sequence: int
    message: str = "AI response started"


# ─────────────────────────── Session ───────────────────────────

class CompletionSession:
    """
    Owns one outstanding request and its decoder. The sink only ever sees
    emitted events, never the decode buffer.
    """

    def __init__(
        self,
        sequence: int,
        query: str,
        endpoint: ServiceEndpoint,
        client: CompletionClient,
        sink: CompletionSink,
        is_current: Callable[[int], bool],
    ) -> None:
        self.sequence = sequence
        self.query = query
        self.endpoint = endpoint
        self._client = client
        self._sink = sink
        self._is_current = is_current
        self.decoder = StreamDecoder()
        self.state = SessionState.PENDING
        self.forwarded = 0
        self.suppressed = 0
        self._terminal_sent = False

    def __repr__(self) -> str:
        return f"<CompletionSession seq={self.sequence} state={self.state.value} stale={self.stale}>"

    @property
    def stale(self) -> bool:
        return not self._is_current(self.sequence)

    @property
    def active(self) -> bool:
        return self.state in (SessionState.PENDING, SessionState.STREAMING)

    # ────────────────────────── Lifecycle ──────────────────────────

    async def run(self) -> SessionState:
        """Stream to completion. Never raises except on cancellation."""
        self.state = SessionState.STREAMING
        try:
            async with aclosing(self._client.stream(self.endpoint, self.query)) as chunks:
                async for chunk in chunks:
                    await self._handle_frames(self.decoder.feed(chunk))
                    if self.decoder.finished:
                        break
            await self._handle_frames(self.decoder.close())

        except TransportError as e:
            await self._fail(str(e))
        except Exception as e:
            logger.error(f"❌ Session {self.sequence} crashed: {e}", exc_info=True)
            await self._fail(f"AI response error: {e}")

        if self.state is SessionState.COMPLETED:
            logger.info(
                f"✅ Session {self.sequence} completed: forwarded={self.forwarded} "
                f"suppressed={self.suppressed} malformed={self.decoder.malformed_count}"
            )
        return self.state

    async def _handle_frames(self, frames) -> None:
        for frame in frames:
            await self._handle(frame)

    async def _handle(self, frame: StreamFrame) -> None:
        if isinstance(frame, ContentDelta):
            await self._forward(AI_RESPONSE_CHUNK, frame.text)
        elif isinstance(frame, Done):
            self.state = SessionState.COMPLETED
            await self._forward_terminal(AI_RESPONSE_COMPLETE, None)
        elif isinstance(frame, Malformed):
            logger.debug(f"Session {self.sequence}: skipping malformed frame ({frame.reason})")

    async def _fail(self, message: str) -> None:
        self.state = SessionState.FAILED
        logger.warning(f"⚠️ Session {self.sequence} failed: {message}")
        await self._forward_terminal(AI_RESPONSE_ERROR, message)

    # ────────────────────────── Forwarding ──────────────────────────

    async def _forward_terminal(self, event: str, payload: Any) -> None:
        if self._terminal_sent:
            return
        self._terminal_sent = True
        await self._forward(event, payload)

    async def _forward(self, event: str, payload: Any) -> None:
        if self.stale:
            if self.suppressed == 0:
                logger.debug(f"Session {self.sequence} superseded; suppressing output")
            self.suppressed += 1
            return

        try:
            await self._sink.emit(event, payload)
            self.forwarded += 1
        except Exception as e:
            logger.error(f"❌ Sink rejected '{event}' from session {self.sequence}: {e}")


# ─────────────────────────── Manager ───────────────────────────

class SessionManager:
    """
    One manager per logical sink (one answer view).

    Usage:
        manager = SessionManager(sink)
        ack = manager.start("how do I rename a file")   # returns immediately
    """

    def __init__(
        self,
        sink: CompletionSink,
        client: Optional[CompletionClient] = None,
        config_loader: Callable[[], LauncherConfig] = load_config,
    ) -> None:
        self._sink = sink
        self._client = client or CompletionClient()
        self._config_loader = config_loader
        self._sequence = 0
        self._current: Optional[CompletionSession] = None
        self._tasks: Set[asyncio.Task] = set()

    @property
    def current_sequence(self) -> int:
        return self._sequence

    @property
    def current(self) -> Optional[CompletionSession]:
        return self._current

    def is_current(self, sequence: int) -> bool:
        return sequence == self._sequence

    def start(self, query: str) -> CompletionAck:
        """
        Launch a session in the background and return at once.

        Raises:
            ConfigurationError: no usable service/key; nothing is sent and
                the current session (if any) stays current
        """
        endpoint = resolve_service(self._config_loader())

        self._sequence += 1
        previous = self._current
        if previous is not None and previous.active:
            logger.info(f"🔄 Session {previous.sequence} superseded by {self._sequence}")

        session = CompletionSession(
            sequence=self._sequence,
            query=query,
            endpoint=endpoint,
            client=self._client,
            sink=self._sink,
            is_current=self.is_current,
        )
        self._current = session

        task = asyncio.create_task(session.run(), name=f"completion-{session.sequence}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

        logger.info(f"🤖 Session {session.sequence} launched ({endpoint.name})")
        return CompletionAck(sequence=session.sequence)

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def wait_idle(self) -> None:
        """Wait for every launched session, stale ones included."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)
