"""Configuration layer for the chat adapter.

Goals
-----
* Hold the shared defaults (API key, model, base URL) as one immutable
  :class:`ChatConfig` value that every call reads and no call mutates.
* ``configure()`` is copy-on-write: it builds a new ``ChatConfig`` and swaps
  the module reference under a lock, so a call already in flight keeps the
  snapshot it started with.
* Resolve each setting per field in a predictable order (earlier wins):
    1. Per-call override
    2. Explicit ``configure()`` value
    3. Environment variables (``OPENAI_API_KEY``, ``OPENAI_MODEL``,
       ``OPENAI_BASE_URL``; a ``.env`` file is loaded once beforehand)
    4. Optional JSON config file pointed to by ``CHAT_ADAPTER_CONFIG_FILE``
       (``{"openai": {"model": ..., "base_url": ..., "api_key": ...}}``)
    5. Built-in defaults (``api_key`` has none)

Public API
----------
* configure(api_key=None, model=None, base_url=None) -> ChatConfig
* get_config() -> ChatConfig
* resolve_settings(config, api_key=None, model=None, base_url=None) -> ResolvedSettings
* debug_enabled(flag=None) -> bool
"""
from __future__ import annotations

import json
import os
import threading
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from .defaults import DEFAULT_BASE_URL, DEFAULT_MODEL, PROVIDER_NAME
from .env import env_flag, get_env_value, is_placeholder

CONFIG_FILE_ENV = "CHAT_ADAPTER_CONFIG_FILE"

BUILTIN_DEFAULTS: Dict[str, Optional[str]] = {
    "api_key": None,
    "model": DEFAULT_MODEL,
    "base_url": DEFAULT_BASE_URL,
}


def normalize_base_url(base_url: Optional[str]) -> Optional[str]:
    """Strip surrounding whitespace and trailing slashes; empty becomes None."""
    if base_url is None:
        return None
    cleaned = str(base_url).strip().rstrip("/")
    return cleaned or None


@dataclass(frozen=True)
class ChatConfig:
    """Shared, immutable adapter defaults.

    ``None`` fields fall back to the environment, then the config file, then
    the built-in defaults at resolution time.
    """

    api_key: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None


@dataclass(frozen=True)
class ResolvedSettings:
    """Effective settings for one call after applying precedence."""

    api_key: Optional[str]
    model: str
    base_url: str


_CONFIG = ChatConfig()
_CONFIG_LOCK = threading.Lock()
_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def configure(
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
) -> ChatConfig:
    """Replace the shared configuration with an updated copy.

    Falsy arguments leave the corresponding field unchanged. ``base_url`` is
    stored without trailing slashes. Returns the new snapshot.
    """
    global _CONFIG
    changes: Dict[str, Any] = {}
    if api_key:
        changes["api_key"] = api_key
    if model:
        changes["model"] = model
    if base_url and (cleaned := normalize_base_url(base_url)):
        changes["base_url"] = cleaned
    with _CONFIG_LOCK:
        if changes:
            _CONFIG = replace(_CONFIG, **changes)
        return _CONFIG


def get_config() -> ChatConfig:
    """Return the current shared configuration snapshot."""
    return _CONFIG


def reset_config() -> None:
    """Restore the empty configuration and drop file/.env caches (tests, reloads)."""
    global _CONFIG, _FILE_CACHE, _DOTENV_LOADED
    with _CONFIG_LOCK:
        _CONFIG = ChatConfig()
        _FILE_CACHE = None
        _DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Lightweight .env loader.

    Parses KEY=VALUE lines, ignoring comments and blank lines. Safe to call
    multiple times. Overrides existing environment variables only if their
    current values appear to be placeholders.
    """
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    """Return the provider section of the optional JSON config file (cached)."""
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv(CONFIG_FILE_ENV)
    data: Any = {}
    if path and Path(path).is_file():
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except ValueError:
            data = {}
    section = data.get(PROVIDER_NAME) if isinstance(data, dict) else None
    _FILE_CACHE = section if isinstance(section, dict) else {}
    return _FILE_CACHE


def _resolve_field(field: str, override: Optional[str], config: ChatConfig) -> Optional[str]:
    if override:
        return override
    configured = getattr(config, field)
    if configured:
        return configured
    env_val = get_env_value(field)
    if env_val and not (field == "api_key" and is_placeholder(env_val)):
        return env_val
    file_val = _load_external_config().get(field)
    if isinstance(file_val, str) and file_val.strip():
        return file_val.strip()
    return BUILTIN_DEFAULTS.get(field)


def resolve_settings(
    config: Optional[ChatConfig] = None,
    *,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
) -> ResolvedSettings:
    """Apply per-field precedence for one call.

    ``config`` is the snapshot the call captured; when omitted the current
    shared configuration is used. ``api_key`` may resolve to ``None``; the
    caller decides whether that is fatal.
    """
    _load_dotenv_once()
    snapshot = config if config is not None else get_config()
    resolved_base = _resolve_field("base_url", normalize_base_url(base_url), snapshot)
    return ResolvedSettings(
        api_key=_resolve_field("api_key", api_key, snapshot),
        model=_resolve_field("model", model, snapshot) or DEFAULT_MODEL,
        base_url=normalize_base_url(resolved_base) or DEFAULT_BASE_URL,
    )


def debug_enabled(flag: Optional[bool] = None) -> bool:
    """Return True when diagnostic tracing is on for a call."""
    return bool(flag) or env_flag("debug")


__all__ = [
    "ChatConfig",
    "ResolvedSettings",
    "BUILTIN_DEFAULTS",
    "CONFIG_FILE_ENV",
    "configure",
    "get_config",
    "reset_config",
    "resolve_settings",
    "normalize_base_url",
    "debug_enabled",
]
