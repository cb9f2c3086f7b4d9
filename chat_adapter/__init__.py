"""chat_adapter package

Client-side adapter for OpenAI-compatible chat-completion endpoints.

Purpose:
    Turn loosely shaped caller input (message lists or ``system``/``user``
    prompts) into well-formed ``/chat/completions`` requests, and turn the
    responses, including server-sent-event token streams, back into
    predictable results.

Public API (re-exported):
    - Version: ``__version__``
    - Configuration: :func:`configure`, :class:`ChatConfig`
    - Calls: :func:`chat`, :func:`stream_chat`, :func:`chat_stream`,
      :func:`chat_json`, :class:`OpenAIChatClient`
    - Results: :class:`CompletionResult`, :class:`StreamResult`,
      :class:`ChatStreamEvent`, :class:`StreamController`
    - Exceptions: :class:`ProviderError` and subclasses, :class:`ErrorCode`

Example:
    >>> import chat_adapter
    >>> chat_adapter.configure(api_key="sk-...")
    >>> result = chat_adapter.chat_json(system="Reply in JSON.", user="List 3 colors")
    >>> result.data
"""

from .base.cancellation import CancellationToken
from .base.errors import (
    EmptyResponseError,
    ErrorCode,
    MissingCredentialError,
    NoMessagesError,
    ProviderError,
)
from .base.logging import configure_logger, get_logger
from .base.models import CompletionResult, Message, StreamResult
from .base.streaming import ChatStreamEvent, StreamController
from .config import ChatConfig, get_config
from .openai import OpenAIChatClient, chat, chat_json, chat_stream, configure, stream_chat

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "configure",
    "get_config",
    "ChatConfig",
    "chat",
    "stream_chat",
    "chat_stream",
    "chat_json",
    "OpenAIChatClient",
    "Message",
    "CompletionResult",
    "StreamResult",
    "ChatStreamEvent",
    "StreamController",
    "CancellationToken",
    "ErrorCode",
    "ProviderError",
    "MissingCredentialError",
    "NoMessagesError",
    "EmptyResponseError",
    "configure_logger",
    "get_logger",
]
