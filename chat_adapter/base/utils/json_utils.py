"""Parse-or-None JSON helper.

Every JSON decode in the adapter that is allowed to fail goes through
``parse_or_none``: stream event lines, response bodies, and the model's own
JSON-mode output. Failures are reported as ``None`` instead of raising.
"""
from __future__ import annotations

import json
from typing import Any, Optional, Union


def parse_or_none(raw: Union[str, bytes, bytearray, None]) -> Optional[Any]:
    """Decode ``raw`` as JSON, returning ``None`` for empty or malformed input."""
    if raw is None:
        return None
    if isinstance(raw, (bytes, bytearray)):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


__all__ = ["parse_or_none"]
