"""Unified adapter error taxonomy public surface.

This module re-exports the one-class-per-file implementations under
``chat_adapter.base.errors_parts`` to maintain a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.adapter_errors import EmptyResponseError, MissingCredentialError, NoMessagesError
from .errors_parts.classification import classify_exception

__all__ = [
    "ErrorCode",
    "ProviderError",
    "MissingCredentialError",
    "NoMessagesError",
    "EmptyResponseError",
    "classify_exception",
]
