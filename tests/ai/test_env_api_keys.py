"""Tests for gemini_client.ai.env_api_keys."""

from __future__ import annotations

import pytest

from gemini_client.ai.env_api_keys import get_env_api_key


@pytest.fixture(autouse=True)
def _clear_keys(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("GEMINI_CLIENT_API_KEY", "GOOGLE_API_KEY", "GEMINI_API_KEY"):
        monkeypatch.delenv(var, raising=False)


class TestGetEnvApiKey:
    def test_key_set(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        assert get_env_api_key() == "google-key"

    def test_no_key(self) -> None:
        assert get_env_api_key("google") is None

    def test_unknown_backend_returns_none(self) -> None:
        assert get_env_api_key("unknown-backend") is None

    def test_first_matching_var_wins(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GEMINI_CLIENT_API_KEY", "client-key")
        monkeypatch.setenv("GOOGLE_API_KEY", "google-key")
        assert get_env_api_key() == "client-key"

    def test_fallback_to_last_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GEMINI_API_KEY", "gemini-key")
        assert get_env_api_key() == "gemini-key"

    def test_empty_string_is_treated_as_unset(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GOOGLE_API_KEY", "")
        assert get_env_api_key() is None
