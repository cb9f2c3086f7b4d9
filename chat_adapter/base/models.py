"""
Adapter domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``chat_adapter.base.models_parts``.
"""

from .models_parts.message import Message
from .models_parts.request_envelope import RequestEnvelope
from .models_parts.completion_result import CompletionResult, StreamResult

__all__ = [
    "Message",
    "RequestEnvelope",
    "CompletionResult",
    "StreamResult",
]
