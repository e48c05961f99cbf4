from __future__ import annotations

import pytest

from jusmind.core import ai


class _RecordingOpenAI:
    def __init__(self, **kwargs):
        self.kwargs = kwargs


def test_load_client_requires_api_key(monkeypatch):
    monkeypatch.setattr(ai, "OpenAI", _RecordingOpenAI)
    with pytest.raises(RuntimeError, match="OPENAI_API_KEY"):
        ai.load_client(env={})


def test_load_client_passes_key_and_base(monkeypatch):
    monkeypatch.setattr(ai, "OpenAI", _RecordingOpenAI)

    plain = ai.load_client(env={"OPENAI_API_KEY": "k1"})
    based = ai.load_client(
        api_base="http://localhost:8080/v1", env={"OPENAI_API_KEY": "k2"}
    )

    assert plain.kwargs == {"api_key": "k1"}
    assert based.kwargs == {
        "api_key": "k2",
        "base_url": "http://localhost:8080/v1",
    }


def test_load_client_reads_dotenv_when_env_missing(monkeypatch):
    calls = []
    monkeypatch.setattr(ai, "OpenAI", _RecordingOpenAI)
    monkeypatch.setattr(ai, "load_dotenv", lambda: calls.append(True))
    monkeypatch.setenv("OPENAI_API_KEY", "from-env")

    client = ai.load_client()

    assert calls == [True]
    assert client.kwargs["api_key"] == "from-env"


def test_load_client_can_disable_sdk_retries(monkeypatch):
    monkeypatch.setattr(ai, "OpenAI", _RecordingOpenAI)

    client = ai.load_client(env={"OPENAI_API_KEY": "k"}, max_retries=0)

    assert client.kwargs == {"api_key": "k", "max_retries": 0}
