"""
Streaming completion models: decoded frames, wire payloads and the event
names forwarded to the presentation layer.
"""
from dataclasses import dataclass
from typing import List, Optional, Union

from pydantic import BaseModel, Field


# ─────────────────────────── Sink events ───────────────────────────

AI_RESPONSE_CHUNK = "ai_response_chunk"
AI_RESPONSE_COMPLETE = "ai_response_complete"
AI_RESPONSE_ERROR = "ai_response_error"


# ─────────────────────────── Decoded frames ───────────────────────────

@dataclass(frozen=True)
class ContentDelta:
    """A non-empty text increment from one `data:` line."""
    text: str


@dataclass(frozen=True)
class Done:
    """Terminal marker: `[DONE]` seen or the byte stream closed."""


@dataclass(frozen=True)
class Malformed:
    """A `data:` line whose payload could not be parsed."""
    line: str
    reason: str = ""


StreamFrame = Union[ContentDelta, Done, Malformed]


# ─────────────────────────── Wire payloads ───────────────────────────

class ChatMessage(BaseModel):
    role: str
    content: str


class CompletionRequest(BaseModel):
    """JSON body POSTed to the chat completions endpoint."""
    model: str
    messages: List[ChatMessage]
    stream: bool = True


class Delta(BaseModel):
    content: Optional[str] = None


class Choice(BaseModel):
    delta: Optional[Delta] = None


class CompletionChunk(BaseModel):
    """Payload of one `data:` line; only `choices[0].delta.content` matters."""
    choices: List[Choice] = Field(...)

    @property
    def text(self) -> Optional[str]:
        if not self.choices:
            return None
        delta = self.choices[0].delta
        return delta.content if delta else None
