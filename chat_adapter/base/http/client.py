"""Shared HTTP client pool for the adapter transport.

Purpose:
    Provide a thread-safe pool of reusable ``httpx.Client`` instances so
    concurrent calls share connections instead of allocating a client per
    request. Each call still owns its own request and response objects.

Timeout strategy:
    Clients carry no default timeout; every request passes an explicit
    ``httpx.Timeout`` from :func:`get_timeout_config` (plain vs. streaming).

Lifecycle & cleanup:
    - Clients are cached by ``purpose`` (e.g. "chat", "stream"). Requests use
      absolute URLs, so one client serves any base URL.
    - All clients are closed at interpreter exit via ``atexit``. Tests may
      call :func:`close_all_clients` explicitly.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict

import httpx

_CLIENTS: Dict[str, httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(purpose: str) -> httpx.Client:
    """Return the pooled ``httpx.Client`` for ``purpose``.

    The first request for a purpose creates the client; later requests reuse
    it. Safe for concurrent use; creation is guarded by a re-entrant lock.
    """
    client = _CLIENTS.get(purpose)
    if client is not None and not client.is_closed:
        return client
    with _LOCK:
        client = _CLIENTS.get(purpose)
        if client is None or client.is_closed:
            client = httpx.Client()
            _CLIENTS[purpose] = client
        return client


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        for c in _CLIENTS.values():
            c.close()
        _CLIENTS.clear()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "close_all_clients"]
