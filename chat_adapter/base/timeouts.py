"""Timeout configuration for the adapter's HTTP transport.

Cancellation and timeouts are delegated entirely to ``httpx``: this module
only decides the values. The stream decoder has no timer of its own and ends
only on the sentinel, transport end, or a transport-raised error.

get_timeout_config()
    Returns a process-cached configuration, parsing environment overrides on
    first use (and again whenever the relevant variables change). Supported
    environment variables (all optional, positive floats):
        CHAT_ADAPTER_CONNECT_TIMEOUT_SECONDS
        CHAT_ADAPTER_HTTP_TIMEOUT_SECONDS
        CHAT_ADAPTER_STREAM_TIMEOUT_SECONDS
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx

_ENV_NAMES = (
    "CHAT_ADAPTER_CONNECT_TIMEOUT_SECONDS",
    "CHAT_ADAPTER_HTTP_TIMEOUT_SECONDS",
    "CHAT_ADAPTER_STREAM_TIMEOUT_SECONDS",
)


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        connect_timeout_seconds: Time allowed to establish the connection.
        http_timeout_seconds: Read timeout for plain (non-streaming) calls.
        stream_timeout_seconds: Idle read timeout between streamed chunks.
    """

    connect_timeout_seconds: float = 10.0
    http_timeout_seconds: float = 60.0
    stream_timeout_seconds: float = 60.0

    def for_request(self) -> httpx.Timeout:
        return httpx.Timeout(self.http_timeout_seconds, connect=self.connect_timeout_seconds)

    def for_stream(self) -> httpx.Timeout:
        return httpx.Timeout(self.stream_timeout_seconds, connect=self.connect_timeout_seconds)


_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Parse a positive float from the environment, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached `TimeoutConfig` instance."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.connect_timeout_seconds),
        http_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.http_timeout_seconds),
        stream_timeout_seconds=_parse_env_float(_ENV_NAMES[2], defaults.stream_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
