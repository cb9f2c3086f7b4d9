"""
Canonical chat message DTO.

`Message` is the only message shape that reaches the request builder: the
normalizer coerces every caller-supplied entry into one. Instances are
frozen so a built request can never be altered after normalization.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Message:
    """A normalized ``{role, content}`` pair.

    Attributes:
        role: Non-empty author role (``"system"``, ``"user"``, ``"assistant"``,
            or any role the caller supplied).
        content: Message text; always a string.
    """

    role: str
    content: str

    def __post_init__(self) -> None:
        if not isinstance(self.role, str) or not self.role:
            raise ValueError("Message.role must be a non-empty string")
        if not isinstance(self.content, str):
            raise TypeError("Message.content must be a string")

    def to_dict(self) -> Dict[str, str]:
        """Return the wire representation."""
        return {"role": self.role, "content": self.content}


__all__ = ["Message"]
