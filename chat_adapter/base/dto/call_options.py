"""Per-call override bag for the chat entry points.

Purpose
-------
Collect the keyword overrides accepted by ``chat``, ``stream_chat``,
``chat_stream`` and ``chat_json`` into one validated object so the
orchestrator does not juggle loose keyword arguments.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation.

Failure modes
-------------
- ``pydantic.ValidationError`` for wrongly typed values or unknown override
  names. A non-numeric ``temperature`` is not an error; it is dropped.
"""
from __future__ import annotations

from numbers import Real
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class CallOptions(BaseModel):
    """Optional per-call overrides.

    Attributes
    ----------
    api_key:
        Credential used instead of the configured/environment key.
    model:
        Model identifier for this call.
    base_url:
        Endpoint root for this call (trailing slashes are stripped later).
    temperature:
        Sampling temperature. Only real numbers are kept; anything else
        becomes ``None`` so the request omits it (JSON mode then uses 0).
    debug:
        Enables diagnostic tracing for this call only.
    response_format:
        Passed through on non-JSON-mode requests.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key: Optional[str] = None
    model: Optional[str] = None
    base_url: Optional[str] = None
    temperature: Optional[Any] = None
    debug: bool = False
    response_format: Optional[Dict[str, Any]] = None

    @field_validator("temperature", mode="before")
    @classmethod
    def _numeric_temperature_only(cls, value: Any) -> Any:
        # Non-numbers (strings, bools) are left out of the request, not coerced.
        if isinstance(value, Real) and not isinstance(value, bool):
            return value
        return None


__all__ = ["CallOptions"]
