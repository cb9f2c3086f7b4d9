"""Response extraction for JSON-mode completions.

Models asked for JSON often wrap it in a Markdown code fence anyway. The
helpers here pull the first choice's content out of a completion envelope,
strip one surrounding fence, and attempt a best-effort decode.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Mapping

from .errors import EmptyResponseError
from .models import CompletionResult
from .utils.json_utils import parse_or_none

_LEADING_FENCE = re.compile(r"^```[\w+-]*\s*", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```\s*$")


def sanitize_model_text(text: Any) -> str:
    """Trim ``text`` and remove one leading and one trailing code fence.

    Idempotent on already-sanitized text. Non-string input yields ``""``.
    """
    if not isinstance(text, str):
        return ""
    cleaned = text.strip()
    cleaned = _LEADING_FENCE.sub("", cleaned, count=1)
    cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
    return cleaned.strip()


def has_choices(envelope: Any) -> bool:
    """Return True when ``envelope`` is a mapping with a non-empty ``choices`` list."""
    if not isinstance(envelope, Mapping):
        return False
    choices = envelope.get("choices")
    return isinstance(choices, list) and bool(choices)


def first_message_content(envelope: Mapping[str, Any]) -> str:
    """Return ``choices[0].message.content``; non-strings become ``""``."""
    first = envelope["choices"][0]
    message = first.get("message") if isinstance(first, Mapping) else None
    content = message.get("content") if isinstance(message, Mapping) else None
    return content if isinstance(content, str) else ""


def extract_completion(envelope: Any) -> CompletionResult:
    """Turn a completion envelope into a :class:`CompletionResult`.

    Raises:
        EmptyResponseError: ``envelope`` is not a mapping or has no choices.
    """
    if not has_choices(envelope):
        raise EmptyResponseError()
    text = sanitize_model_text(first_message_content(envelope))
    return CompletionResult(raw=dict(envelope), text=text, data=parse_or_none(text))


def usage_from_envelope(envelope: Any) -> Dict[str, int]:
    """Return ``{prompt_tokens, completion_tokens}`` from ``usage`` (0 when absent)."""
    usage = envelope.get("usage") if isinstance(envelope, Mapping) else None
    usage = usage if isinstance(usage, Mapping) else {}

    def _count(key: str) -> int:
        value = usage.get(key)
        return value if isinstance(value, int) and not isinstance(value, bool) else 0

    return {"prompt_tokens": _count("prompt_tokens"), "completion_tokens": _count("completion_tokens")}


__all__ = [
    "sanitize_model_text",
    "has_choices",
    "first_message_content",
    "extract_completion",
    "usage_from_envelope",
]
