"""
AI Package

Streamed "Ask AI" answers.

Usage:
    from lumina.ai import SessionManager, QueueSink

    sink = QueueSink()
    manager = SessionManager(sink)
    manager.start("explain symlinks")

    async for event in sink.events():
        print(event.payload or "", end="", flush=True)
"""
from lumina.ai.client import CompletionClient, build_headers, build_request
from lumina.ai.session import CompletionAck, CompletionSession, SessionManager, SessionState
from lumina.ai.sink import CompletionSink, QueueSink, SinkEvent
from lumina.ai.stream_decoder import StreamDecoder

__all__ = [
    "CompletionAck",
    "CompletionClient",
    "CompletionSession",
    "CompletionSink",
    "QueueSink",
    "SessionManager",
    "SessionState",
    "SinkEvent",
    "StreamDecoder",
    "build_headers",
    "build_request",
]
