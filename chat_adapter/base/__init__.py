"""
Adapter base package.

Provider-neutral building blocks shared by the OpenAI client:

- Models (DTOs): ``Message``, ``RequestEnvelope``, result objects
- Errors: the ``ProviderError`` taxonomy and ``classify_exception``
- Pure helpers: message normalization, request building, stream decoding,
  response extraction
- Infrastructure: pooled HTTP clients, timeouts, cancellation, logging
"""

from .cancellation import CancellationToken
from .errors import (
    EmptyResponseError,
    ErrorCode,
    MissingCredentialError,
    NoMessagesError,
    ProviderError,
    classify_exception,
)
from .extraction import extract_completion, sanitize_model_text, usage_from_envelope
from .models import CompletionResult, Message, RequestEnvelope, StreamResult
from .request import build_completions_url, build_request
from .streaming import ChatStreamEvent, StreamController, StreamFrameDecoder, StreamState, decode_chunk, flush
from .utils.messages import normalize_messages

__all__ = [
    "CancellationToken",
    "ErrorCode",
    "ProviderError",
    "MissingCredentialError",
    "NoMessagesError",
    "EmptyResponseError",
    "classify_exception",
    "Message",
    "RequestEnvelope",
    "CompletionResult",
    "StreamResult",
    "normalize_messages",
    "build_completions_url",
    "build_request",
    "StreamState",
    "StreamFrameDecoder",
    "decode_chunk",
    "flush",
    "ChatStreamEvent",
    "StreamController",
    "extract_completion",
    "sanitize_model_text",
    "usage_from_envelope",
]
