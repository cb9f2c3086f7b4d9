"""Streaming event primitives.

A streaming call is consumed as an ordered sequence of ``ChatStreamEvent``
values: zero or more token events (``delta`` set) followed by exactly one
terminal event (``finish=True``) carrying the accumulated text, or an error
string when the stream ended by cancellation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from ..models import StreamResult


@dataclass(frozen=True)
class ChatStreamEvent:
    """One event of a streaming completion.

    Fields:
      provider: canonical provider name
      model: model id/name
      delta: token fragment (``None`` on the terminal event)
      finish: True on the final event
      text: accumulated text (terminal event only)
      error: terminal error string (e.g. ``"cancelled"``)
    """

    provider: str
    model: str
    delta: Optional[str] = None
    finish: bool = False
    text: Optional[str] = None
    error: Optional[str] = None

    def is_error(self) -> bool:
        return self.error is not None


def accumulate_events(events: Iterable[ChatStreamEvent]) -> StreamResult:
    """Collapse an event sequence into its final text.

    The terminal event's ``text`` wins when present; otherwise the deltas
    are concatenated (e.g. for a sequence cut short by the consumer).
    """
    deltas: List[str] = []
    final: Optional[str] = None
    for evt in events:
        if evt.finish and evt.text is not None:
            final = evt.text
        elif evt.delta:
            deltas.append(evt.delta)
    return StreamResult(text=final if final is not None else "".join(deltas))


__all__ = ["ChatStreamEvent", "accumulate_events"]
