"""Cooperative cancellation primitives for streaming calls.

A ``CancellationToken`` is polled by the stream controller between chunk
deliveries; cancelling it ends the stream with a terminal ``cancelled``
event and closes the underlying HTTP response. Network-level timeouts remain
the transport's concern.
"""

from __future__ import annotations

from threading import Lock
from typing import Optional


class CancellationToken:
    """A thread-safe, one-way cancellation flag with an optional reason."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._cancelled = False
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:  # noqa: D401 - short form
        """Whether cancellation has been requested."""
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:  # noqa: D401 - short form
        """Reason string supplied at cancel time (if any)."""
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Request cancellation; later calls keep the first reason."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            self._reason = reason

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._cancelled}, reason={self._reason!r})"


__all__ = ["CancellationToken"]
