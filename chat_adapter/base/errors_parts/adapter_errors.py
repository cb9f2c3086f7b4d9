"""
Fatal adapter errors raised before or after the transport call.

Each class pins its :class:`ErrorCode` so callers can branch either on the
exception type or on ``exc.code``. Transport failures are never wrapped in
these types; they propagate unchanged from ``httpx``.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class MissingCredentialError(ProviderError):
    """No API key resolved from the call, the shared config, or the environment."""

    def __init__(
        self,
        message: str = "missing api_key (call configure() or pass api_key=...)",
        *,
        provider: str = "openai",
        model: Optional[str] = None,
    ) -> None:
        super().__init__(code=ErrorCode.AUTH, message=message, provider=provider, model=model)


class NoMessagesError(ProviderError):
    """Normalization produced no messages and no ``system``/``user`` fallback applied."""

    def __init__(
        self,
        message: str = "no messages to send (pass messages=[...] or user=...)",
        *,
        provider: str = "openai",
        model: Optional[str] = None,
    ) -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message, provider=provider, model=model)


class EmptyResponseError(ProviderError):
    """The completion envelope was not an object or carried no choices."""

    def __init__(
        self,
        message: str = "bad response: missing choices",
        *,
        provider: str = "openai",
        model: Optional[str] = None,
    ) -> None:
        super().__init__(code=ErrorCode.SERVER_ERROR, message=message, provider=provider, model=model)


__all__ = ["MissingCredentialError", "NoMessagesError", "EmptyResponseError"]
