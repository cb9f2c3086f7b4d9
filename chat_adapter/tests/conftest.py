"""Pytest configuration for the adapter test suite.

Every test starts from an empty shared configuration, a clean ``OPENAI_*``
environment, no ``.env`` file and no pooled HTTP clients, so results never
depend on the developer's shell.
"""

from __future__ import annotations

import json
from typing import Callable, Iterator, List

import pytest

from chat_adapter.base.http import close_all_clients
from chat_adapter.config import CONFIG_FILE_ENV, reset_config

_ENV_VARS = (
    "OPENAI_API_KEY",
    "OPENAI_MODEL",
    "OPENAI_BASE_URL",
    "OPENAI_DEBUG",
    "CHAT_ADAPTER_LOG_LEVEL",
    CONFIG_FILE_ENV,
)


@pytest.fixture(autouse=True)
def clean_adapter_state(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Isolate configuration, environment and HTTP pool for one test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "absent.env"))
    reset_config()
    close_all_clients()
    yield
    reset_config()
    close_all_clients()


@pytest.fixture()
def sse_body() -> Callable[..., bytes]:
    """Build a server-sent-event body from content fragments.

    ``done=False`` omits the ``[DONE]`` sentinel; ``trailing_newline=False``
    leaves the last line unterminated.
    """

    def _build(*fragments: str, done: bool = True, trailing_newline: bool = True) -> bytes:
        lines: List[str] = [
            "data: " + json.dumps({"choices": [{"delta": {"content": f}}]}) for f in fragments
        ]
        if done:
            lines.append("data: [DONE]")
        text = "\n\n".join(lines)
        if trailing_newline:
            text += "\n\n"
        return text.encode("utf-8")

    return _build


def completion_body(content, **extra) -> dict:
    """Return a non-streaming completion envelope with one choice."""
    body = {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}
    body.update(extra)
    return body


@pytest.fixture()
def make_completion() -> Callable[..., dict]:
    return completion_body
