"""Message normalization helpers.

Callers may describe a conversation either as a list of loosely shaped
message entries or as separate ``system``/``user`` strings. The helpers here
reconcile both shapes into one ordered list of :class:`Message` values.
They are side-effect free.
"""
from __future__ import annotations

from typing import Any, Iterable, List, Mapping, Optional

from ..errors import NoMessagesError
from ..models import Message

# Checked in order; the first truthy value wins.
ROLE_KEYS = ("role", "Role", "type")


def _resolve_role(entry: Mapping[str, Any]) -> Optional[str]:
    for key in ROLE_KEYS:
        value = entry.get(key)
        if value:
            return str(value)
    return None


def _part_text(part: Any) -> str:
    if isinstance(part, str):
        return part
    if isinstance(part, Mapping):
        nested = part.get("content")
        return str(nested) if nested else ""
    return ""


def coerce_content(content: Any) -> str:
    """Flatten arbitrary message content into a string.

    - Strings are returned unchanged.
    - Lists/tuples are joined with newlines; string parts are kept as-is and
      mapping parts contribute their ``content`` field (empty when missing).
    - ``None`` becomes ``""``. Booleans render as ``true``/``false`` and
      whole floats without a fraction (``1.0`` -> ``"1"``), matching the
      JSON-style text clients of this endpoint usually send; anything else
      goes through ``str()``.
    """
    if isinstance(content, str):
        return content
    if isinstance(content, (list, tuple)):
        return "\n".join(_part_text(part) for part in content)
    if content is None:
        return ""
    if isinstance(content, bool):
        return "true" if content else "false"
    if isinstance(content, float) and content.is_integer():
        return str(int(content))
    return str(content)


def normalize_messages(
    messages: Optional[Iterable[Any]] = None,
    *,
    system: Optional[str] = None,
    user: Optional[str] = None,
) -> List[Message]:
    """Build the canonical, ordered message list for one request.

    Summary
    - Entries of ``messages`` are kept in order. Non-mapping entries and
      entries without a resolvable role (``role``, ``Role`` or ``type``) are
      skipped; ``Message`` instances pass through unchanged.
    - When no entry survives, ``system`` (if non-empty) and ``user`` are used
      instead: ``[{system}, {user}]``, with ``user`` defaulting to ``""``.

    Parameters
    - messages: Optional iterable of message-like entries.
    - system: Optional system prompt used only by the fallback.
    - user: Optional user prompt used only by the fallback.

    Returns
    - List[Message]: Non-empty canonical messages.

    Raises
    - NoMessagesError: No entry resolved, ``user`` is ``None`` and ``system``
      is absent or empty.
    """
    final: List[Message] = []
    for entry in messages or ():
        if isinstance(entry, Message):
            final.append(entry)
            continue
        if not isinstance(entry, Mapping):
            continue
        role = _resolve_role(entry)
        if not role:
            continue
        final.append(Message(role=role, content=coerce_content(entry.get("content"))))

    if final:
        return final

    if system:
        final.append(Message(role="system", content=str(system)))
    if user is not None or final:
        final.append(Message(role="user", content=str(user or "")))
    if not final:
        raise NoMessagesError()
    return final


__all__ = ["ROLE_KEYS", "coerce_content", "normalize_messages"]
