"""OpenAI chat-completions helpers.

Purpose:
- Keep ``client.py`` focused on the public entry points by collecting the
  transport calls, header construction, diagnostic tracing and the single
  error boundary used by every call.

External dependencies:
- Uses the shared ``httpx`` client via ``get_httpx_client`` (no SDK).

Timeout strategy:
- Plain requests use ``get_timeout_config().for_request()``; streaming reads
  use ``for_stream()``. No retries: every call makes exactly one attempt.

Failure semantics:
- ``httpx`` exceptions (including ``HTTPStatusError`` from
  ``raise_for_status``) propagate unchanged. When tracing is on they are
  logged first as ``<operation>.fatal`` with a classified ``error_code``.
"""

from __future__ import annotations

import logging
import time
from contextlib import ExitStack, contextmanager
from typing import Any, Dict, Iterator, List, Optional

import httpx

from ..base.cancellation import CancellationToken
from ..base.errors import classify_exception
from ..base.http import get_httpx_client
from ..base.logging import LogContext, normalized_log_event
from ..base.models import RequestEnvelope
from ..base.streaming import ChatStreamEvent, StreamFrameDecoder
from ..base.timeouts import get_timeout_config
from ..config.defaults import PROVIDER_NAME, TRACE_PREVIEW_CHARS


def build_headers(api_key: str) -> Dict[str, str]:
    """Return the bearer/JSON headers for a completions request."""
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def preview(text: Optional[str]) -> str:
    """Truncate ``text`` for inclusion in a trace event."""
    return (text or "")[:TRACE_PREVIEW_CHARS]


def elapsed_ms(t0: float) -> float:
    return round((time.perf_counter() - t0) * 1000.0, 2)


class Tracer:
    """Debug-gated emitter of normalized trace events for one call.

    A disabled tracer is a no-op; tracing never changes control flow.
    """

    def __init__(self, logger: logging.Logger, ctx: LogContext, enabled: bool) -> None:
        self.logger = logger
        self.ctx = ctx
        self.enabled = enabled

    def event(self, event: str, *, phase: str, level: int = logging.INFO, **fields: Any) -> None:
        if not self.enabled:
            return
        normalized_log_event(self.logger, event, self.ctx, phase=phase, level=level, **fields)


@contextmanager
def error_boundary(tracer: Tracer, operation: str) -> Iterator[None]:
    """Log ``<operation>.fatal`` for any escaping exception and re-raise it."""
    try:
        yield
    except Exception as exc:
        tracer.event(
            f"{operation}.fatal",
            phase="finalize",
            level=logging.ERROR,
            error_code=classify_exception(exc).value,
            emitted=False,
            error=str(exc),
            error_type=type(exc).__name__,
        )
        raise


def post_completion(url: str, envelope: RequestEnvelope, api_key: str) -> httpx.Response:
    """POST a non-streaming request and return the successful response.

    Raises ``httpx.HTTPStatusError`` for non-2xx statuses.
    """
    client = get_httpx_client("chat")
    response = client.post(
        url,
        json=envelope.to_body(),
        headers=build_headers(api_key),
        timeout=get_timeout_config().for_request(),
    )
    response.raise_for_status()
    return response


def iter_stream_events(
    url: str,
    envelope: RequestEnvelope,
    api_key: str,
    decoder: StreamFrameDecoder,
    tracer: Tracer,
    token: CancellationToken,
) -> Iterator[ChatStreamEvent]:
    """Run one streaming request and yield its events.

    Yields a delta event per decoded fragment, then one terminal event. The
    token is polled before each delivery and after each yielded delta; a
    cancelled stream ends with ``error="cancelled"`` carrying the text
    delivered so far, and ``decoder.finish()`` (so ``on_done``) is skipped.
    The response is closed on every exit path, including abandonment.
    """
    model = envelope.model
    delivered: List[str] = []

    def _delta(fragment: str) -> ChatStreamEvent:
        delivered.append(fragment)
        return ChatStreamEvent(provider=PROVIDER_NAME, model=model, delta=fragment)

    def _cancelled() -> ChatStreamEvent:
        text = "".join(delivered)
        tracer.event("stream.end", phase="finalize", emitted=len(delivered), cancelled=True,
                     reason=token.reason, chars=len(text))
        return ChatStreamEvent(provider=PROVIDER_NAME, model=model, finish=True,
                               text=text, error="cancelled")

    with error_boundary(tracer, "stream"):
        t0 = time.perf_counter()
        tracer.event("stream.start", phase="start", url=url, messages=len(envelope.messages))
        with ExitStack() as stack:
            if token.cancelled:
                yield _cancelled()
                return
            client = get_httpx_client("stream")
            response = stack.enter_context(
                client.stream(
                    "POST",
                    url,
                    json=envelope.to_body(),
                    headers=build_headers(api_key),
                    timeout=get_timeout_config().for_stream(),
                )
            )
            response.raise_for_status()
            for chunk in response.iter_text():
                if token.cancelled:
                    yield _cancelled()
                    return
                for fragment in decoder.feed(chunk):
                    yield _delta(fragment)
                    if token.cancelled:
                        yield _cancelled()
                        return
                if decoder.terminated:
                    break
        before = len(decoder.text)
        text = decoder.finish()
        if len(text) > before:
            yield _delta(text[before:])
        if decoder.state.dropped:
            tracer.event("stream.decode_skipped", phase="finalize", dropped=decoder.state.dropped)
        tracer.event("stream.end", phase="finalize", emitted=len(delivered), chars=len(text),
                     latency_ms=elapsed_ms(t0), preview=preview(text))
        yield ChatStreamEvent(provider=PROVIDER_NAME, model=model, finish=True, text=text)


__all__ = [
    "Tracer",
    "build_headers",
    "elapsed_ms",
    "error_boundary",
    "iter_stream_events",
    "post_completion",
    "preview",
]
