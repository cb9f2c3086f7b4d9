"""Incremental server-sent-event decoder for chat-completion streams.

The transport delivers text in arbitrary pieces: one delivery may hold part
of a line, several lines, or a line split in the middle of its JSON. The
decoder buffers input and only interprets complete lines.

``decode_chunk`` is the pure transition function
``(state, chunk) -> (state, fragments, terminated)``. For every complete
line it:

1. trims the line and skips it unless it starts with ``data:``;
2. strips the prefix; an empty payload is skipped;
3. ``[DONE]`` terminates the stream and nothing further is examined;
4. otherwise the payload is decoded as a JSON event; undecodable payloads
   and events without a usable first choice are dropped silently;
5. a non-empty ``choices[0].delta.content`` string is appended to the
   accumulated text and emitted as a fragment.

``flush`` handles transport end: a trailing unterminated line is pushed
through the same rules by feeding one synthetic newline. Once terminated a
state absorbs every later chunk unchanged.

``StreamFrameDecoder`` wraps one state per stream and drives the optional
per-token and completion sinks.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any, Callable, List, Mapping, Optional, Tuple

from ...config.defaults import SSE_DATA_PREFIX, SSE_DONE_SENTINEL
from ..utils.json_utils import parse_or_none


@dataclass(frozen=True)
class StreamState:
    """Decoder state for one in-flight stream.

    Attributes:
        pending: Buffered text that does not yet form a complete line.
        text: Concatenation of every emitted fragment.
        terminated: True after the sentinel or transport end.
        dropped: Data lines discarded as undecodable or choice-less.
    """

    pending: str = ""
    text: str = ""
    terminated: bool = False
    dropped: int = 0


def extract_delta(event: Any) -> Optional[str]:
    """Return ``choices[0].delta.content`` when it is a non-empty string.

    Returns ``None`` for events that are not objects, have no choices, or
    carry no textual delta (role-only or finish-reason events).
    """
    if not isinstance(event, Mapping):
        return None
    choices = event.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    delta = first.get("delta") if isinstance(first, Mapping) else None
    content = delta.get("content") if isinstance(delta, Mapping) else None
    return content if isinstance(content, str) and content else None


def _has_choice(event: Any) -> bool:
    return isinstance(event, Mapping) and isinstance(event.get("choices"), list) and bool(event["choices"])


def decode_chunk(
    state: StreamState,
    chunk: Any,
    on_fragment: Optional[Callable[[str], Any]] = None,
) -> Tuple[StreamState, List[str], bool]:
    """Consume one transport delivery.

    Returns the next state, the fragments emitted by this delivery (in
    order), and whether the stream is now terminated. When ``on_fragment``
    is given it is called with each fragment before the next buffered line
    is examined.
    """
    if state.terminated or not isinstance(chunk, str) or not chunk:
        return state, [], state.terminated

    buffer = state.pending + chunk
    text = state.text
    dropped = state.dropped
    fragments: List[str] = []

    while True:
        idx = buffer.find("\n")
        if idx < 0:
            break
        line = buffer[:idx].strip()
        buffer = buffer[idx + 1:]
        if not line or not line.startswith(SSE_DATA_PREFIX):
            continue
        payload = line[len(SSE_DATA_PREFIX):].strip()
        if not payload:
            continue
        if payload == SSE_DONE_SENTINEL:
            return StreamState(pending=buffer, text=text, terminated=True, dropped=dropped), fragments, True
        event = parse_or_none(payload)
        if not _has_choice(event):
            dropped += 1
            continue
        delta = extract_delta(event)
        if delta:
            text += delta
            fragments.append(delta)
            if on_fragment is not None:
                on_fragment(delta)

    return StreamState(pending=buffer, text=text, terminated=False, dropped=dropped), fragments, False


def flush(
    state: StreamState,
    on_fragment: Optional[Callable[[str], Any]] = None,
) -> Tuple[StreamState, List[str]]:
    """Finish a stream at transport end.

    A residual unterminated line is decoded by feeding one synthetic newline;
    the returned state is always terminated.
    """
    if state.terminated:
        return state, []
    fragments: List[str] = []
    if state.pending:
        state, fragments, _ = decode_chunk(state, "\n", on_fragment)
    return replace(state, terminated=True), fragments


class StreamFrameDecoder:
    """Stateful wrapper around :func:`decode_chunk` for a single stream.

    ``on_token`` is invoked synchronously for each fragment, in order, before
    the next buffered line is examined. ``on_done`` is invoked exactly once,
    by the first :meth:`finish` call.
    """

    def __init__(
        self,
        on_token: Optional[Callable[[str], Any]] = None,
        on_done: Optional[Callable[[str], Any]] = None,
    ) -> None:
        self._state = StreamState()
        self._on_token = on_token
        self._on_done = on_done
        self._done_called = False

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def text(self) -> str:
        return self._state.text

    @property
    def terminated(self) -> bool:
        return self._state.terminated

    def feed(self, chunk: Any) -> List[str]:
        """Decode one delivery and return the fragments it produced."""
        self._state, fragments, _ = decode_chunk(self._state, chunk, self._on_token)
        return fragments

    def finish(self) -> str:
        """Flush residual input, fire ``on_done`` once, and return the full text."""
        self._state, _ = flush(self._state, self._on_token)
        if not self._done_called:
            self._done_called = True
            if self._on_done is not None:
                self._on_done(self._state.text)
        return self._state.text


__all__ = [
    "StreamState",
    "StreamFrameDecoder",
    "decode_chunk",
    "extract_delta",
    "flush",
]
