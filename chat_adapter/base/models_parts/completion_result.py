"""
Result objects returned by the JSON-mode and callback-streaming entry points.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CompletionResult:
    """Outcome of a JSON-mode completion.

    Attributes:
        raw: The full parsed response envelope.
        text: Model output with surrounding code fences removed.
        data: Best-effort decode of ``text``; ``None`` when it is not valid JSON.
    """

    raw: Dict[str, Any]
    text: str
    data: Optional[Any] = None

    @property
    def parsed_ok(self) -> bool:
        return self.data is not None


@dataclass(frozen=True)
class StreamResult:
    """Final accumulated text of a streaming completion."""

    text: str


__all__ = ["CompletionResult", "StreamResult"]
