"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `chat_adapter.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .adapter_errors import EmptyResponseError, MissingCredentialError, NoMessagesError
from .classification import classify_exception

__all__ = [
    "ErrorCode",
    "ProviderError",
    "MissingCredentialError",
    "NoMessagesError",
    "EmptyResponseError",
    "classify_exception",
]
