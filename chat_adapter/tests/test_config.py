"""Configuration layer tests: precedence, copy-on-write, env and file sources."""
from __future__ import annotations

import json

from chat_adapter.config import (
    CONFIG_FILE_ENV,
    ChatConfig,
    configure,
    debug_enabled,
    get_config,
    reset_config,
    resolve_settings,
)
from chat_adapter.config.env import get_env_var_name, is_placeholder


def test_defaults_without_any_source():
    s = resolve_settings()
    assert s.api_key is None  # nosec B101
    assert s.model == "gpt-4o-mini"  # nosec B101
    assert s.base_url == "https://api.openai.com/v1"  # nosec B101


def test_configure_ignores_falsy_and_strips_base_url():
    configure(api_key="k1", model="m1", base_url="https://proxy.local/v1///")
    cfg = configure(api_key="", model=None, base_url="")
    assert cfg == ChatConfig(api_key="k1", model="m1", base_url="https://proxy.local/v1")  # nosec B101


def test_configure_is_copy_on_write():
    before = configure(api_key="old")
    after = configure(api_key="new")
    assert before.api_key == "old" and after.api_key == "new"  # nosec B101
    assert before is not after and get_config() is after  # nosec B101
    assert resolve_settings(before).api_key == "old"  # nosec B101


def test_precedence_call_over_config_over_env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    monkeypatch.setenv("OPENAI_MODEL", "env-model")
    assert resolve_settings().api_key == "env-key"  # nosec B101
    configure(api_key="cfg-key")
    s = resolve_settings(get_config(), api_key="call-key")
    assert s.api_key == "call-key"  # nosec B101
    assert resolve_settings().api_key == "cfg-key"  # nosec B101
    assert resolve_settings().model == "env-model"  # nosec B101


def test_placeholder_env_key_is_ignored(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "changeme")
    assert resolve_settings().api_key is None  # nosec B101


def test_env_base_url_is_normalized(monkeypatch):
    monkeypatch.setenv("OPENAI_BASE_URL", " https://gw.local/v1/ ")
    assert resolve_settings().base_url == "https://gw.local/v1"  # nosec B101


def test_config_file_is_below_env(tmp_path, monkeypatch):
    path = tmp_path / "adapter.json"
    path.write_text(json.dumps({"openai": {"model": "file-model", "api_key": "file-key"}}), encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    reset_config()
    s = resolve_settings()
    assert (s.model, s.api_key) == ("file-model", "file-key")  # nosec B101
    monkeypatch.setenv("OPENAI_MODEL", "env-model")
    assert resolve_settings().model == "env-model"  # nosec B101


def test_unreadable_config_file_is_empty(tmp_path, monkeypatch):
    path = tmp_path / "broken.json"
    path.write_text("{nope", encoding="utf-8")
    monkeypatch.setenv(CONFIG_FILE_ENV, str(path))
    reset_config()
    assert resolve_settings().model == "gpt-4o-mini"  # nosec B101


def test_dotenv_loaded_once(tmp_path, monkeypatch):
    dotenv = tmp_path / ".env"
    dotenv.write_text("# comment\nOPENAI_API_KEY='sk-from-dotenv'\n", encoding="utf-8")
    monkeypatch.setenv("DOTENV_FILE", str(dotenv))
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    reset_config()
    try:
        assert resolve_settings().api_key == "sk-from-dotenv"  # nosec B101
    finally:
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)


def test_debug_flag_from_call_or_env(monkeypatch):
    assert debug_enabled() is False  # nosec B101
    assert debug_enabled(True) is True  # nosec B101
    for value, expected in (("1", True), ("yes", True), ("ON", True), ("0", False), ("", False)):
        monkeypatch.setenv("OPENAI_DEBUG", value)
        assert debug_enabled() is expected, value  # nosec B101


def test_env_helpers():
    assert get_env_var_name("api_key") == "OPENAI_API_KEY"  # nosec B101
    assert get_env_var_name("unknown") is None  # nosec B101
    assert is_placeholder("YOUR_PLACEHOLDER") and not is_placeholder(None)  # nosec B101
