"""Incremental decoder for the relayed chat event stream.

Only the subset of the event-stream format the gateway emits is handled:
``data: <json>`` lines, ``:`` comments, blank separators and the
``data: [DONE]`` terminator. Chunk boundaries may fall anywhere, including
inside a multi-byte character or a JSON token.
"""

import codecs
import enum
import json
from collections.abc import AsyncIterable, Callable
from dataclasses import dataclass
from typing import Any

import structlog

from smart_tutor.schemas.chat_schema import StreamEvent

logger = structlog.get_logger()

DATA_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"


class DecoderState(enum.Enum):
    """Line-level state of :class:`SSELineDecoder`."""

    AWAITING_LINE = "awaiting_line"
    # A data line failed to parse and is held until more bytes arrive.
    HAVE_LINE = "have_line"


def extract_delta(payload: Any) -> str | None:
    """Return ``choices[0].delta.content`` when present and non-empty."""
    if not isinstance(payload, dict):
        return None
    choices = payload.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    delta = first.get("delta") if isinstance(first, dict) else None
    content = delta.get("content") if isinstance(delta, dict) else None
    if isinstance(content, str) and content:
        return content
    return None


class SSELineDecoder:
    """Turns raw stream bytes into :class:`StreamEvent` deltas.

    A ``data:`` line whose JSON does not parse is not an error: it is held
    (state ``HAVE_LINE``) and line processing stops until the next
    :meth:`feed`. A following continuation line is appended to the held
    text and parsing is retried; a following line that starts a new event
    means the held text can never complete, so it is dropped.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._pending = ""
        self._held = ""
        self._state = DecoderState.AWAITING_LINE
        self._done = False

    @property
    def state(self) -> DecoderState:
        return self._state

    @property
    def done(self) -> bool:
        """True once the ``[DONE]`` terminator has been seen."""
        return self._done

    @property
    def pending(self) -> str:
        """Decoded text not yet split into lines."""
        return self._pending

    def feed(self, chunk: bytes) -> list[StreamEvent]:
        """Add one read's worth of bytes and return the deltas it completes.

        ``[DONE]`` ends the whole stream, not just the current read:
        once it is seen this and every later call returns nothing.
        """
        if self._done:
            return []
        self._pending += self._decoder.decode(chunk)
        return self._drain(stop_on_incomplete=True)

    def flush(self) -> list[StreamEvent]:
        """Process everything still buffered once the stream has closed."""
        if self._done:
            return []
        self._pending += self._decoder.decode(b"", final=True)
        events = self._drain(stop_on_incomplete=False)
        if self._state is DecoderState.HAVE_LINE:
            logger.warning("Dropping incomplete stream line", held=self._held[:200])
            self._reset_held()
        if self._pending.strip():
            logger.debug("Discarding unterminated stream tail", tail=self._pending[:200])
        self._pending = ""
        return events

    def _drain(self, stop_on_incomplete: bool) -> list[StreamEvent]:
        events: list[StreamEvent] = []
        while not self._done:
            newline = self._pending.find("\n")
            if newline == -1:
                break
            line = self._pending[:newline]
            self._pending = self._pending[newline + 1 :]
            if line.endswith("\r"):
                line = line[:-1]

            was_holding = self._state is DecoderState.HAVE_LINE
            event = self._process_line(line)
            if event is not None:
                events.append(event)
            if stop_on_incomplete and not was_holding and self._state is DecoderState.HAVE_LINE:
                break
        return events

    def _process_line(self, line: str) -> StreamEvent | None:
        if self._state is DecoderState.HAVE_LINE:
            if self._starts_new_event(line):
                logger.warning("Dropping undecodable stream line", held=self._held[:200])
                self._reset_held()
            else:
                return self._parse(self._held + line)

        if not line.strip() or line.startswith(":"):
            return None
        if not line.startswith(DATA_PREFIX):
            return None

        data = line[len(DATA_PREFIX) :].strip()
        if data == DONE_SENTINEL:
            self._done = True
            return None
        return self._parse(data)

    def _parse(self, data: str) -> StreamEvent | None:
        try:
            payload = json.loads(data)
        except json.JSONDecodeError:
            self._held = data
            self._state = DecoderState.HAVE_LINE
            return None
        self._reset_held()
        delta = extract_delta(payload)
        if delta is None:
            return None
        return StreamEvent(delta_text=delta)

    def _reset_held(self) -> None:
        self._held = ""
        self._state = DecoderState.AWAITING_LINE

    @staticmethod
    def _starts_new_event(line: str) -> bool:
        return not line.strip() or line.startswith((":", "data:", "event:", "id:", "retry:"))


@dataclass(frozen=True)
class ConsumedStream:
    """Outcome of reading one relayed stream to its end."""

    text: str
    completed: bool

    @property
    def has_content(self) -> bool:
        return bool(self.text)


class StreamConsumer:
    """Accumulates assistant text from a relayed stream.

    ``on_update`` receives the full accumulated text after every delta, so
    a view can replace the displayed message instead of appending to it.
    The accumulated text stays readable through :attr:`text` if reading
    fails part-way.
    """

    def __init__(self, on_update: Callable[[str], None] | None = None) -> None:
        self._on_update = on_update
        self._decoder = SSELineDecoder()
        self._parts: list[str] = []

    @property
    def text(self) -> str:
        return "".join(self._parts)

    @property
    def completed(self) -> bool:
        return self._decoder.done

    async def consume(self, chunks: AsyncIterable[bytes]) -> ConsumedStream:
        """Read ``chunks`` until the stream closes."""
        async for chunk in chunks:
            self._apply(self._decoder.feed(chunk))
        self._apply(self._decoder.flush())
        return ConsumedStream(text=self.text, completed=self.completed)

    def _apply(self, events: list[StreamEvent]) -> None:
        for event in events:
            self._parts.append(event.delta_text)
            if self._on_update is not None:
                self._on_update(self.text)
