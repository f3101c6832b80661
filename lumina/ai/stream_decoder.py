"""
Stream Decoder - turns chunked server-sent-event bytes into frames.

Network chunks never line up with lines, so the decoder keeps whatever
trails the last newline and waits for the next chunk to finish it:

    feed(b'data: {"choices":[{"delta":{"content":"He')   -> []
    feed(b'llo"}}]}\\n')                                   -> [ContentDelta("Hello")]
    feed(b'data: [DONE]\\n')                               -> [Done()]
"""
import codecs
import logging
from typing import List

from pydantic import ValidationError

from lumina.exceptions import FrameParseError
from lumina.models import CompletionChunk, ContentDelta, Done, Malformed, StreamFrame

logger = logging.getLogger(__name__)

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


def parse_data_payload(payload: str) -> CompletionChunk:
    """
    Raises:
        FrameParseError: payload is not a completion chunk
    """
    try:
        return CompletionChunk.model_validate_json(payload)
    except ValidationError as e:
        raise FrameParseError(f"Unparseable frame: {e.error_count()} error(s)") from e


class StreamDecoder:
    """
    Stateful, single-owner decoder for one completion stream.

    Invalid UTF-8 is replaced, never fatal. After the terminal `Done` frame
    every further chunk is ignored.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer: str = ""
        self._finished: bool = False
        self.malformed_count: int = 0

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def pending(self) -> str:
        """Unterminated tail waiting for the next chunk."""
        return self._buffer

    # ────────────────────────── Public API ──────────────────────────

    def feed(self, chunk: bytes) -> List[StreamFrame]:
        """Decode one network chunk into zero or more frames."""
        if self._finished:
            return []

        self._buffer += self._decoder.decode(chunk)
        frames: List[StreamFrame] = []

        cursor = 0
        while True:
            newline = self._buffer.find("\n", cursor)
            if newline == -1:
                break
            line = self._buffer[cursor:newline].strip()
            cursor = newline + 1

            frame = self._classify(line)
            if frame is None:
                continue
            frames.append(frame)
            if isinstance(frame, Done):
                self._finish()
                return frames

        self._buffer = self._buffer[cursor:]
        return frames

    def close(self) -> List[StreamFrame]:
        """
        The byte stream ended. Closing is itself a completion signal, so a
        `Done` frame is produced unless one was already emitted. A trailing
        line without a terminator is dropped.
        """
        if self._finished:
            return []
        if self._buffer.strip():
            logger.debug(f"Dropping unterminated tail ({len(self._buffer)} chars)")
        self._finish()
        return [Done()]

    # ────────────────────────── Internals ──────────────────────────

    def _finish(self) -> None:
        self._finished = True
        self._buffer = ""

    def _classify(self, line: str):
        if not line.startswith(DATA_PREFIX):
            # comments, keep-alives, `event:` lines
            return None

        payload = line[len(DATA_PREFIX):]
        if payload == DONE_SENTINEL:
            return Done()

        try:
            chunk = parse_data_payload(payload)
        except FrameParseError as e:
            self.malformed_count += 1
            return Malformed(line=line, reason=str(e))

        text = (chunk.text or "").replace("\r", "")
        if not text:
            return None
        return ContentDelta(text=text)
