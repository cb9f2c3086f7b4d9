"""chat_adapter.config.defaults
===========================

Central place for small, stable default values used across the adapter.
These defaults can be overridden via ``configure()``, environment variables,
or the optional config file, but provide sensible fallbacks for local
development and tests.

This module intentionally imports nothing from the rest of the package to
prevent circular dependencies. Only plain constants live here.
"""

from __future__ import annotations

# Provider key; also the section name inside the optional config file.
PROVIDER_NAME = "openai"

# Endpoint defaults
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_BASE_URL = "https://api.openai.com/v1"
COMPLETIONS_PATH = "/chat/completions"

# Server-sent event framing
SSE_DATA_PREFIX = "data:"
SSE_DONE_SENTINEL = "[DONE]"

# JSON-mode request defaults
JSON_MODE_RESPONSE_FORMAT = {"type": "json_object"}
JSON_MODE_DEFAULT_TEMPERATURE = 0

# Characters of model output / raw body included in diagnostic traces
TRACE_PREVIEW_CHARS = 400


__all__ = [
    "PROVIDER_NAME",
    "DEFAULT_MODEL",
    "DEFAULT_BASE_URL",
    "COMPLETIONS_PATH",
    "SSE_DATA_PREFIX",
    "SSE_DONE_SENTINEL",
    "JSON_MODE_RESPONSE_FORMAT",
    "JSON_MODE_DEFAULT_TEMPERATURE",
    "TRACE_PREVIEW_CHARS",
]
