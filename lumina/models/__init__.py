from .result_model import (
    Action,
    CopyText,
    OpenPath,
    OpenUrl,
    QueryResult,
    StartCompletion,
)
from .stream_model import (
    AI_RESPONSE_CHUNK,
    AI_RESPONSE_COMPLETE,
    AI_RESPONSE_ERROR,
    ChatMessage,
    CompletionChunk,
    CompletionRequest,
    ContentDelta,
    Done,
    Malformed,
    StreamFrame,
)

__all__ = [
    "Action",
    "CopyText",
    "OpenPath",
    "OpenUrl",
    "QueryResult",
    "StartCompletion",
    "AI_RESPONSE_CHUNK",
    "AI_RESPONSE_COMPLETE",
    "AI_RESPONSE_ERROR",
    "ChatMessage",
    "CompletionChunk",
    "CompletionRequest",
    "ContentDelta",
    "Done",
    "Malformed",
    "StreamFrame",
]
