"""Request building for the chat-completions endpoint.

Pure helpers: no I/O and no configuration lookup. Callers pass the already
resolved model and base URL.
"""
from __future__ import annotations

import re
from numbers import Real
from typing import Any, Iterable, Mapping, Optional

from ..config.defaults import (
    COMPLETIONS_PATH,
    DEFAULT_BASE_URL,
    JSON_MODE_DEFAULT_TEMPERATURE,
    JSON_MODE_RESPONSE_FORMAT,
)
from .models import Message, RequestEnvelope

# A run of slashes not directly after ':' (keeps the scheme's '://').
_DUPLICATE_SLASHES = re.compile(r"(?<!:)/{2,}")


def build_completions_url(base_url: Optional[str] = None) -> str:
    """Return ``<base_url>/chat/completions`` with duplicate slashes collapsed.

    Trailing slashes are stripped. Malformed URLs are passed through; their
    validity is the transport's concern.
    """
    url = (base_url or DEFAULT_BASE_URL) + COMPLETIONS_PATH
    return _DUPLICATE_SLASHES.sub("/", url).rstrip("/")


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


def build_request(
    messages: Iterable[Message],
    *,
    model: str,
    json_mode: bool = False,
    temperature: Optional[float] = None,
    streaming: bool = False,
    response_format: Optional[Mapping[str, Any]] = None,
) -> RequestEnvelope:
    """Combine canonical messages and resolved options into a request envelope.

    JSON-mode requests always carry ``response_format={"type": "json_object"}``
    and a temperature of 0 unless the caller supplies a number. Otherwise the
    temperature is included only when numeric, and a caller ``response_format``
    mapping is passed through.
    """
    if json_mode:
        fmt: Optional[Mapping[str, Any]] = dict(JSON_MODE_RESPONSE_FORMAT)
        temp: Optional[float] = temperature if _is_number(temperature) else JSON_MODE_DEFAULT_TEMPERATURE
    else:
        fmt = dict(response_format) if response_format else None
        temp = temperature if _is_number(temperature) else None
    return RequestEnvelope(
        model=model,
        messages=tuple(messages),
        json_mode=json_mode,
        temperature=temp,
        streaming=streaming,
        response_format=fmt,
    )


__all__ = ["build_completions_url", "build_request"]
