"""OpenAI chat-completions client.

``OpenAIChatClient`` composes the pure helpers (message normalization,
request building, stream decoding, response extraction) around one HTTP
call per entry point:

- ``chat``: plain completion; returns the parsed response envelope.
- ``stream_chat``: cancellable event stream (``StreamController``).
- ``chat_stream``: callback form of streaming; returns ``StreamResult``.
- ``chat_json``: JSON-mode completion; returns ``CompletionResult``.

Each client holds one ``ChatConfig`` snapshot. The module-level functions
build a client from the shared configuration at call time, so a later
``configure()`` never affects a call already in flight.

Credentials and messages are validated before any network I/O. Diagnostic
tracing (``debug=True`` or ``OPENAI_DEBUG``) only emits log events.
"""

from __future__ import annotations

import time
import uuid
from typing import Any, Callable, Dict, Iterable, Iterator, Optional, Tuple

from ..base.cancellation import CancellationToken
from ..base.dto import CallOptions
from ..base.errors import EmptyResponseError, MissingCredentialError
from ..base.extraction import extract_completion, first_message_content, has_choices, usage_from_envelope
from ..base.logging import LogContext, get_logger
from ..base.models import CompletionResult, RequestEnvelope, StreamResult
from ..base.request import build_completions_url, build_request
from ..base.streaming import ChatStreamEvent, StreamController, StreamFrameDecoder, accumulate_events
from ..base.utils.json_utils import parse_or_none
from ..base.utils.messages import normalize_messages
from ..config import ChatConfig, ResolvedSettings, configure, debug_enabled, get_config, resolve_settings
from ..config.defaults import PROVIDER_NAME
from .helpers import Tracer, elapsed_ms, error_boundary, iter_stream_events, post_completion, preview

_PreparedCall = Tuple[str, RequestEnvelope, str, Tracer]


class OpenAIChatClient:
    """Adapter for an OpenAI-compatible ``/chat/completions`` endpoint.

    Parameters
    - config: Configuration snapshot; defaults to the shared configuration at
      construction time.
    """

    def __init__(self, config: Optional[ChatConfig] = None) -> None:
        self._config = config if config is not None else get_config()
        self._logger = get_logger("openai")

    @property
    def config(self) -> ChatConfig:
        return self._config

    # ------------------------------------------------------------------ setup
    def _prepare(
        self,
        operation: str,
        messages: Optional[Iterable[Any]],
        system: Optional[str],
        user: Optional[str],
        overrides: Dict[str, Any],
        *,
        json_mode: bool = False,
        streaming: bool = False,
    ) -> _PreparedCall:
        """Validate inputs and build everything one call needs.

        Raises ``MissingCredentialError``/``NoMessagesError`` (and pydantic
        validation errors for unknown overrides) before any I/O.
        """
        ctx = LogContext(provider=PROVIDER_NAME, operation=operation, request_id=uuid.uuid4().hex)
        tracer = Tracer(self._logger, ctx, debug_enabled(overrides.get("debug") is True))
        with error_boundary(tracer, operation):
            opts = CallOptions(**overrides)
            settings: ResolvedSettings = resolve_settings(
                self._config, api_key=opts.api_key, model=opts.model, base_url=opts.base_url
            )
            ctx.model = settings.model
            tracer.enabled = debug_enabled(opts.debug)
            if not settings.api_key:
                raise MissingCredentialError(model=settings.model)
            canonical = normalize_messages(messages, system=system, user=user)
            envelope = build_request(
                canonical,
                model=settings.model,
                json_mode=json_mode,
                temperature=opts.temperature,
                streaming=streaming,
                response_format=opts.response_format,
            )
        return build_completions_url(settings.base_url), envelope, settings.api_key, tracer

    # -------------------------------------------------------------- entry points
    def chat(
        self,
        messages: Optional[Iterable[Any]] = None,
        *,
        system: Optional[str] = None,
        user: Optional[str] = None,
        **overrides: Any,
    ) -> Dict[str, Any]:
        """Send a plain completion request and return the response envelope.

        Raises:
            MissingCredentialError: no API key resolved.
            NoMessagesError: nothing to send.
            httpx.HTTPError: transport failure or non-2xx status.
            EmptyResponseError: the body is not an object with choices.
        """
        url, envelope, api_key, tracer = self._prepare("chat", messages, system, user, overrides)
        with error_boundary(tracer, "chat"):
            t0 = time.perf_counter()
            tracer.event("chat.start", phase="start", url=url, messages=len(envelope.messages),
                         temperature=envelope.temperature)
            response = post_completion(url, envelope, api_key)
            body = parse_or_none(response.content)
            if not has_choices(body):
                raise EmptyResponseError(model=envelope.model)
            tracer.event(
                "chat.end",
                phase="finalize",
                emitted=True,
                tokens=usage_from_envelope(body),
                status=response.status_code,
                latency_ms=elapsed_ms(t0),
            )
            return body

    def stream_chat(
        self,
        messages: Optional[Iterable[Any]] = None,
        *,
        system: Optional[str] = None,
        user: Optional[str] = None,
        cancellation_token: Optional[CancellationToken] = None,
        **overrides: Any,
    ) -> StreamController:
        """Start a streaming completion and return its event controller.

        Validation happens immediately; the HTTP request is sent when the
        controller is first iterated. Iterate it once: ``ChatStreamEvent``
        deltas followed by a single ``finish=True`` event. ``cancel()`` on the
        controller (or the supplied token) ends it with ``error="cancelled"``.
        """
        url, envelope, api_key, tracer = self._prepare(
            "stream", messages, system, user, overrides, streaming=True
        )

        def _source(token: CancellationToken) -> Iterator[ChatStreamEvent]:
            return iter_stream_events(url, envelope, api_key, StreamFrameDecoder(), tracer, token)

        return StreamController(_source, cancellation_token)

    def chat_stream(
        self,
        messages: Optional[Iterable[Any]] = None,
        *,
        system: Optional[str] = None,
        user: Optional[str] = None,
        on_token: Optional[Callable[[str], Any]] = None,
        on_done: Optional[Callable[[str], Any]] = None,
        **overrides: Any,
    ) -> StreamResult:
        """Stream a completion through callbacks and return the final text.

        ``on_token`` receives each fragment in order as it is decoded;
        ``on_done`` receives the full text exactly once on success.
        """
        url, envelope, api_key, tracer = self._prepare(
            "stream", messages, system, user, overrides, streaming=True
        )
        decoder = StreamFrameDecoder(on_token=on_token, on_done=on_done)
        return accumulate_events(
            iter_stream_events(url, envelope, api_key, decoder, tracer, CancellationToken())
        )

    def chat_json(
        self,
        messages: Optional[Iterable[Any]] = None,
        *,
        system: Optional[str] = None,
        user: Optional[str] = None,
        **overrides: Any,
    ) -> CompletionResult:
        """Request a JSON-object completion and decode it best-effort.

        The request carries ``response_format={"type": "json_object"}`` and a
        temperature of 0 unless overridden. The model text has one code fence
        stripped; ``data`` is ``None`` when it is not valid JSON.
        """
        url, envelope, api_key, tracer = self._prepare(
            "chat_json", messages, system, user, overrides, json_mode=True
        )
        with error_boundary(tracer, "chat_json"):
            t0 = time.perf_counter()
            tracer.event("chat_json.start", phase="start", url=url, messages=len(envelope.messages),
                         temperature=envelope.temperature)
            response = post_completion(url, envelope, api_key)
            tracer.event("chat_json.fetch", phase="fetch", status=response.status_code,
                         latency_ms=elapsed_ms(t0), body_preview=preview(response.text))
            body = parse_or_none(response.content)
            result = extract_completion(body)
            tracer.event(
                "chat_json.content",
                phase="extract",
                len_before=len(first_message_content(body)),
                len_after=len(result.text),
                preview=preview(result.text),
            )
            tracer.event(
                "chat_json.done",
                phase="finalize",
                emitted=True,
                tokens=usage_from_envelope(body),
                parsed_ok=result.parsed_ok,
                total_ms=elapsed_ms(t0),
            )
            return result


# ---------------------------------------------------------------- module level
def chat(messages: Optional[Iterable[Any]] = None, **kwargs: Any) -> Dict[str, Any]:
    """``OpenAIChatClient().chat`` against the current shared configuration."""
    return OpenAIChatClient().chat(messages, **kwargs)


def stream_chat(messages: Optional[Iterable[Any]] = None, **kwargs: Any) -> StreamController:
    """``OpenAIChatClient().stream_chat`` against the current shared configuration."""
    return OpenAIChatClient().stream_chat(messages, **kwargs)


def chat_stream(messages: Optional[Iterable[Any]] = None, **kwargs: Any) -> StreamResult:
    """``OpenAIChatClient().chat_stream`` against the current shared configuration."""
    return OpenAIChatClient().chat_stream(messages, **kwargs)


def chat_json(messages: Optional[Iterable[Any]] = None, **kwargs: Any) -> CompletionResult:
    """``OpenAIChatClient().chat_json`` against the current shared configuration."""
    return OpenAIChatClient().chat_json(messages, **kwargs)


__all__ = [
    "OpenAIChatClient",
    "configure",
    "chat",
    "stream_chat",
    "chat_stream",
    "chat_json",
]
