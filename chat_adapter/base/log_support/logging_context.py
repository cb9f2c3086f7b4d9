"""Structured logging context object for adapter trace events.

This module defines :class:`LogContext`, a dataclass carrying the fields that
every trace event of one call shares (provider, model, operation, request
id). ``to_dict`` merges the ``extra`` mapping and prunes ``None`` values.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Structured context for adapter logging events."""

    provider: Optional[str] = None
    model: Optional[str] = None
    operation: Optional[str] = None
    request_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        extra = data.pop("extra", {}) or {}
        data.update({k: v for k, v in extra.items() if v is not None})
        return {k: v for k, v in data.items() if v is not None}


__all__ = ["LogContext"]
