"""
Request envelope sent to the chat-completions endpoint.

Built once per call by ``build_request`` and never mutated afterwards. The
``to_body`` view renders the exact JSON body, omitting optional keys that
were not requested.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from .message import Message


@dataclass(frozen=True)
class RequestEnvelope:
    """Immutable request description for one completion call.

    Attributes:
        model: Resolved model identifier.
        messages: Canonical, ordered messages.
        json_mode: Whether the structured-output flag is set.
        temperature: Sampling temperature, or ``None`` to omit it.
        streaming: Whether the server should stream the completion.
        response_format: Wire ``response_format`` object, if any.
    """

    model: str
    messages: Tuple[Message, ...]
    json_mode: bool = False
    temperature: Optional[float] = None
    streaming: bool = False
    response_format: Optional[Mapping[str, Any]] = None

    def to_body(self) -> Dict[str, Any]:
        """Return the JSON-serializable request body."""
        body: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
        }
        if self.streaming:
            body["stream"] = True
        if self.response_format:
            body["response_format"] = dict(self.response_format)
        if self.temperature is not None:
            body["temperature"] = self.temperature
        return body


__all__ = ["RequestEnvelope"]
