"""chat_adapter.config.env
======================

Environment variable mapping and helpers for adapter settings.

Purpose
-------
- Single source of truth for the environment namespace the adapter reads
  (``OPENAI_*``) when a setting was not configured explicitly.
- Small helpers to read a field, a boolean flag, and to recognise
  placeholder values that should not count as real credentials.

Failure Modes
-------------
Helpers never raise on unset variables; they return ``None`` (or ``False``
for flags) and leave the fallback decision to the caller.
"""

from __future__ import annotations

import os
from typing import Dict, Optional

ENV_PREFIX = "OPENAI"

# Config field -> env var suffix
ENV_FIELD_MAP: Dict[str, str] = {
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "model": "MODEL",
    "base_url": "BASE_URL",
    "debug": "DEBUG",
}

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if the provided string looks like a placeholder/test value.

    Heuristics: contains 'placeholder', 'changeme', 'example', or starts with
    'test_'. The check is case-insensitive and ignores surrounding spaces.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return (
        "placeholder" in v
        or "changeme" in v
        or "example" in v
        or v.startswith("test_")
    )


def get_env_var_name(field: str) -> Optional[str]:
    """Return the environment variable name for a config field, or None if unknown."""
    suffix = ENV_FIELD_MAP.get(field)
    return f"{ENV_PREFIX}_{suffix}" if suffix else None


def get_env_value(field: str) -> Optional[str]:
    """Return the non-empty, stripped environment value for ``field``."""
    name = get_env_var_name(field)
    if not name:
        return None
    val = os.environ.get(name)
    if val is None:
        return None
    val = val.strip()
    return val or None


def env_flag(field: str) -> bool:
    """Interpret an environment value as a boolean flag (``1/true/yes/on``)."""
    val = get_env_value(field)
    return bool(val) and val.lower() in _TRUTHY


__all__ = [
    "ENV_PREFIX",
    "ENV_FIELD_MAP",
    "is_placeholder",
    "get_env_var_name",
    "get_env_value",
    "env_flag",
]
