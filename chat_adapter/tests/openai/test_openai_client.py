"""End-to-end tests for the OpenAI chat client with a mocked transport.

HTTP is intercepted with ``respx``; no request leaves the process.
"""
from __future__ import annotations

import json
from typing import List

import httpx
import pytest
import respx

import chat_adapter
from chat_adapter.base.cancellation import CancellationToken
from chat_adapter.base.errors import EmptyResponseError, MissingCredentialError, NoMessagesError
from chat_adapter.config import configure
from chat_adapter.openai import OpenAIChatClient

URL = "https://api.openai.com/v1/chat/completions"


def _sent(route) -> dict:
    return json.loads(route.calls.last.request.content)


def _events(stderr: str) -> List[dict]:
    return [json.loads(line) for line in stderr.splitlines() if line.startswith("{")]


@pytest.fixture()
def client() -> OpenAIChatClient:
    configure(api_key="sk-unit")
    return OpenAIChatClient()


# ---------------------------------------------------------------------------- chat
@respx.mock
def test_chat_sends_system_then_user_and_returns_envelope(client, make_completion):
    envelope = make_completion("hi there", id="cmpl-1")
    route = respx.post(URL).mock(return_value=httpx.Response(200, json=envelope))

    result = client.chat(system="S", user="U")

    assert result == envelope  # nosec B101
    body = _sent(route)
    assert body["messages"] == [{"role": "system", "content": "S"}, {"role": "user", "content": "U"}]  # nosec B101
    assert body["model"] == "gpt-4o-mini" and "stream" not in body  # nosec B101
    headers = route.calls.last.request.headers
    assert headers["Authorization"] == "Bearer sk-unit"  # nosec B101
    assert headers["Content-Type"] == "application/json"  # nosec B101


@respx.mock
def test_chat_per_call_overrides(client, make_completion):
    route = respx.post("https://gw.local/v1/chat/completions").mock(
        return_value=httpx.Response(200, json=make_completion("ok"))
    )
    client.chat(
        [{"role": "user", "content": "x"}],
        api_key="sk-call",
        model="gpt-4.1",
        base_url="https://gw.local/v1/",
        temperature=0.5,
        response_format={"type": "text"},
    )
    body = _sent(route)
    assert body["model"] == "gpt-4.1" and body["temperature"] == 0.5  # nosec B101
    assert body["response_format"] == {"type": "text"}  # nosec B101
    assert route.calls.last.request.headers["Authorization"] == "Bearer sk-call"  # nosec B101


@respx.mock
def test_missing_key_raises_before_any_request():
    route = respx.post(URL).mock(return_value=httpx.Response(200, json={}))
    with pytest.raises(MissingCredentialError):
        OpenAIChatClient().chat(user="hi")
    with pytest.raises(MissingCredentialError):
        OpenAIChatClient().stream_chat(user="hi")
    assert not route.called  # nosec B101


@respx.mock
def test_env_key_is_used(monkeypatch, make_completion):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    route = respx.post(URL).mock(return_value=httpx.Response(200, json=make_completion("ok")))
    chat_adapter.chat(user="hi")
    assert route.calls.last.request.headers["Authorization"] == "Bearer sk-env"  # nosec B101


@respx.mock
def test_no_messages_raises_without_request(client):
    route = respx.post(URL).mock(return_value=httpx.Response(200, json={}))
    with pytest.raises(NoMessagesError):
        client.chat([])
    assert not route.called  # nosec B101


@respx.mock
def test_http_error_status_propagates(client):
    respx.post(URL).mock(return_value=httpx.Response(500, json={"error": {"message": "boom"}}))
    with pytest.raises(httpx.HTTPStatusError) as excinfo:
        client.chat(user="hi")
    assert excinfo.value.response.status_code == 500  # nosec B101


@respx.mock
def test_transport_error_propagates(client):
    respx.post(URL).mock(side_effect=httpx.ConnectError("connection refused"))
    with pytest.raises(httpx.ConnectError):
        client.chat(user="hi")


@pytest.mark.parametrize("payload", [{"choices": []}, {"id": "x"}, [1, 2]])
@respx.mock
def test_chat_without_choices_is_bad_response(client, payload):
    respx.post(URL).mock(return_value=httpx.Response(200, json=payload))
    with pytest.raises(EmptyResponseError):
        client.chat(user="hi")


@respx.mock
def test_chat_non_json_body_is_bad_response(client):
    respx.post(URL).mock(return_value=httpx.Response(200, text="<html>"))
    with pytest.raises(EmptyResponseError):
        client.chat(user="hi")


@respx.mock
def test_client_keeps_its_configuration_snapshot(make_completion):
    configure(api_key="sk-old")
    held = OpenAIChatClient()
    configure(api_key="sk-new")
    route = respx.post(URL).mock(return_value=httpx.Response(200, json=make_completion("ok")))

    held.chat(user="hi")
    assert route.calls.last.request.headers["Authorization"] == "Bearer sk-old"  # nosec B101
    chat_adapter.chat(user="hi")
    assert route.calls.last.request.headers["Authorization"] == "Bearer sk-new"  # nosec B101


# ----------------------------------------------------------------------- chat_json
@respx.mock
def test_chat_json_strips_fence_and_parses(client, make_completion):
    route = respx.post(URL).mock(
        return_value=httpx.Response(200, json=make_completion('```json\n{"a": 1}\n```'))
    )
    result = client.chat_json(user="give json")
    assert result.text == '{"a": 1}' and result.data == {"a": 1}  # nosec B101
    body = _sent(route)
    assert body["response_format"] == {"type": "json_object"}  # nosec B101
    assert body["temperature"] == 0  # nosec B101


@respx.mock
def test_chat_json_temperature_override_and_invalid_json(client, make_completion):
    route = respx.post(URL).mock(return_value=httpx.Response(200, json=make_completion("sorry, no")))
    result = client.chat_json(user="x", temperature=0.2)
    assert _sent(route)["temperature"] == 0.2  # nosec B101
    assert result.text == "sorry, no" and result.data is None  # nosec B101


@respx.mock
def test_chat_json_non_numeric_temperature_falls_back_to_zero(client, make_completion):
    route = respx.post(URL).mock(return_value=httpx.Response(200, json=make_completion("{}")))
    client.chat_json(user="x", temperature="hot")
    assert _sent(route)["temperature"] == 0  # nosec B101


@respx.mock
def test_chat_omits_string_temperature(client, make_completion):
    route = respx.post(URL).mock(return_value=httpx.Response(200, json=make_completion("ok")))
    client.chat(user="x", temperature="0.9")
    assert "temperature" not in _sent(route)  # nosec B101


@respx.mock
def test_chat_json_without_choices(client):
    respx.post(URL).mock(return_value=httpx.Response(200, json={"choices": []}))
    with pytest.raises(EmptyResponseError):
        client.chat_json(user="x")


# ----------------------------------------------------------------------- streaming
@respx.mock
def test_stream_chat_yields_deltas_then_terminal(client, sse_body):
    route = respx.post(URL).mock(return_value=httpx.Response(200, content=sse_body("Hel", "lo")))

    ctrl = client.stream_chat(user="hi")
    assert not route.called  # nosec B101
    events = list(ctrl)

    assert [e.delta for e in events if not e.finish] == ["Hel", "lo"]  # nosec B101
    assert [e.finish for e in events].count(True) == 1 and events[-1].finish  # nosec B101
    assert events[-1].text == "Hello" and events[-1].error is None  # nosec B101
    assert ctrl.text == "Hello" and ctrl.finished  # nosec B101
    assert _sent(route)["stream"] is True  # nosec B101


@respx.mock
def test_stream_chat_cancel_after_first_delta(client, sse_body):
    respx.post(URL).mock(return_value=httpx.Response(200, content=sse_body("a", "b", "c")))
    ctrl = client.stream_chat(user="hi")
    seen = []
    for evt in ctrl:
        seen.append(evt)
        if evt.delta:
            ctrl.cancel("enough")
    assert [e.delta for e in seen[:-1]] == ["a"]  # nosec B101
    assert seen[-1].finish and seen[-1].error == "cancelled" and seen[-1].text == "a"  # nosec B101


@respx.mock
def test_stream_chat_pre_cancelled_token_sends_nothing(client, sse_body):
    route = respx.post(URL).mock(return_value=httpx.Response(200, content=sse_body("a")))
    token = CancellationToken()
    token.cancel()
    events = list(client.stream_chat(user="hi", cancellation_token=token))
    assert [e.error for e in events] == ["cancelled"]  # nosec B101
    assert not route.called  # nosec B101


@respx.mock
def test_stream_http_error_propagates_on_iteration(client):
    respx.post(URL).mock(return_value=httpx.Response(401, json={"error": "bad key"}))
    ctrl = client.stream_chat(user="hi")
    with pytest.raises(httpx.HTTPStatusError):
        list(ctrl)


@respx.mock
def test_chat_stream_callbacks_and_trailing_line(client, sse_body):
    respx.post(URL).mock(
        return_value=httpx.Response(200, content=sse_body("a", "b", done=False, trailing_newline=False))
    )
    tokens: List[str] = []
    done: List[str] = []

    result = client.chat_stream(user="hi", on_token=tokens.append, on_done=done.append)

    assert tokens == ["a", "b"]  # nosec B101
    assert done == ["ab"]  # nosec B101
    assert result.text == "ab"  # nosec B101


@respx.mock
def test_chat_stream_ignores_data_after_done(client, sse_body):
    body = sse_body("x") + b'data: {"choices":[{"delta":{"content":"late"}}]}\n\n'
    respx.post(URL).mock(return_value=httpx.Response(200, content=body))
    done: List[str] = []
    assert chat_adapter.chat_stream(user="hi", on_done=done.append).text == "x"  # nosec B101
    assert done == ["x"]  # nosec B101


# --------------------------------------------------------------------------- debug
@respx.mock
def test_debug_tracing_does_not_change_results(capsys, make_completion, sse_body):
    configure(api_key="sk-unit")
    client = OpenAIChatClient()
    respx.post(URL).mock(
        side_effect=[
            httpx.Response(200, json=make_completion('{"k": true}', usage={"prompt_tokens": 3})),
            httpx.Response(200, json=make_completion('{"k": true}', usage={"prompt_tokens": 3})),
            httpx.Response(200, content=sse_body("p", "q") + b"data: {broken\n\n"),
            httpx.Response(200, content=sse_body("p", "q") + b"data: {broken\n\n"),
        ]
    )
    plain = client.chat_json(user="x")
    assert _events(capsys.readouterr().err) == []  # nosec B101
    traced = client.chat_json(user="x", debug=True)
    json_events = [e["event"] for e in _events(capsys.readouterr().err)]
    assert plain == traced  # nosec B101
    assert json_events == ["chat_json.start", "chat_json.fetch", "chat_json.content", "chat_json.done"]  # nosec B101

    quiet = client.chat_stream(user="x").text
    loud = client.chat_stream(user="x", debug=True).text
    stream_events = [e["event"] for e in _events(capsys.readouterr().err)]
    assert quiet == loud == "pq"  # nosec B101
    assert stream_events == ["stream.start", "stream.end"]  # nosec B101


@respx.mock
def test_env_debug_logs_decode_skipped(capsys, sse_body, monkeypatch):
    monkeypatch.setenv("OPENAI_DEBUG", "1")
    configure(api_key="sk-unit")
    client = OpenAIChatClient()
    body = b"data: {broken\n\n" + sse_body("ok")
    respx.post(URL).mock(return_value=httpx.Response(200, content=body))
    assert client.chat_stream(user="x").text == "ok"  # nosec B101
    events = {e["event"]: e for e in _events(capsys.readouterr().err)}
    assert events["stream.decode_skipped"]["dropped"] == 1  # nosec B101
    assert events["stream.end"]["emitted"] == 1  # nosec B101


def test_debug_fatal_event_is_logged_and_error_reraised(capsys):
    with pytest.raises(MissingCredentialError):
        OpenAIChatClient().chat(user="hi", debug=True)
    (event,) = _events(capsys.readouterr().err)
    assert event["event"] == "chat.fatal" and event["error_code"] == "auth"  # nosec B101
    assert event["level"] == "ERROR" and event["error_type"] == "MissingCredentialError"  # nosec B101


def test_unknown_override_is_rejected(client):
    with pytest.raises(ValueError):
        client.chat(user="hi", max_tokens=5)


def test_rejected_override_is_logged_as_fatal(capsys):
    configure(api_key="sk-unit")
    with pytest.raises(ValueError):
        OpenAIChatClient().chat(user="hi", debug=True, max_tokens=5)
    (event,) = _events(capsys.readouterr().err)
    assert event["event"] == "chat.fatal" and event["error_type"] == "ValidationError"  # nosec B101
