"""Cancellable, single-consumer iterator over a streaming completion.

``StreamController`` owns the event generator of one streaming call. It
exposes ``cancel(reason)`` for cooperative cancellation and records the
terminal event for post-hoc inspection (``finished``, ``text``, ``error``).
"""
from __future__ import annotations

from typing import Callable, Iterator, Optional

from ..cancellation import CancellationToken
from .streaming import ChatStreamEvent

EventSource = Callable[[CancellationToken], Iterator[ChatStreamEvent]]


class StreamController:
    """Single-consumer iterator wrapping a stream event source.

    Responsibilities:
      * Iterate over `ChatStreamEvent` objects (only once).
      * Expose `cancel(reason)` for cooperative cancellation.
      * Track the terminal event for post-hoc inspection.

    The source is not started until iteration begins, so no network I/O
    happens for a controller that is never iterated.
    """

    def __init__(self, source: EventSource, token: Optional[CancellationToken] = None) -> None:
        self._source = source
        self._token = token or CancellationToken()
        self._started = False
        self._terminal_event: Optional[ChatStreamEvent] = None

    def __iter__(self) -> Iterator[ChatStreamEvent]:
        if self._started:
            raise RuntimeError("StreamController supports a single consumer")
        self._started = True
        return self._iterate()

    def _iterate(self) -> Iterator[ChatStreamEvent]:
        for evt in self._source(self._token):
            if evt.finish:
                self._terminal_event = evt
            yield evt

    # API -----------------------------------------------------------------
    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cooperative cancellation; safe after completion."""
        self._token.cancel(reason)

    @property
    def token(self) -> CancellationToken:
        return self._token

    @property
    def finished(self) -> bool:  # noqa: D401 - short property
        """Whether the stream has emitted its terminal event."""
        return self._terminal_event is not None

    @property
    def terminal_event(self) -> Optional[ChatStreamEvent]:  # noqa: D401 - short property
        """Return the captured terminal event if iteration has completed."""
        return self._terminal_event

    @property
    def text(self) -> Optional[str]:
        """Accumulated text from the terminal event (``None`` until finished)."""
        return self._terminal_event.text if self._terminal_event else None

    @property
    def error(self) -> Optional[str]:  # noqa: D401 - short property
        """Return error string from terminal event (if any)."""
        return self._terminal_event.error if self._terminal_event else None


__all__ = ["StreamController", "EventSource"]
