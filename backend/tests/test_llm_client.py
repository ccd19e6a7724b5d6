import pytest
import requests

from research_assistant import config, llm_client
from research_assistant.llm_client import CompletionError, complete_chat


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text="", bad_json=False):
        self.status_code = status_code
        self._payload = payload
        self.text = text
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


@pytest.fixture
def configured(monkeypatch):
    monkeypatch.setattr(config, "LLM_API_KEY", "test-key")
    monkeypatch.setattr(config, "LLM_BASE_URL", "https://llm.example.com/v1/")
    monkeypatch.setattr(config, "LLM_MODEL", "test-model")


def _patch_post(monkeypatch, response=None, error=None):
    calls = []

    def fake_post(url, json, headers, timeout):
        calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if error is not None:
            raise error
        return response

    monkeypatch.setattr(llm_client.requests, "post", fake_post)
    return calls


def test_builds_openai_style_request(configured, monkeypatch):
    calls = _patch_post(monkeypatch, FakeResponse(payload={"choices": [{"message": {"content": " Answer "}}]}))

    reply = complete_chat(
        [{"role": "user", "content": "hi"}],
        system_prompt="be helpful",
        max_tokens=100,
        temperature=0.5,
    )

    assert reply == "Answer"
    call = calls[0]
    assert call["url"] == "https://llm.example.com/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer test-key"
    assert call["json"]["model"] == "test-model"
    assert call["json"]["messages"] == [
        {"role": "system", "content": "be helpful"},
        {"role": "user", "content": "hi"},
    ]
    assert call["json"]["max_tokens"] == 100
    assert call["json"]["temperature"] == 0.5


def test_falls_back_to_text_field(configured, monkeypatch):
    _patch_post(monkeypatch, FakeResponse(payload={"choices": [{"text": "legacy"}]}))
    assert complete_chat([], system_prompt="s") == "legacy"


def test_no_choices_returns_empty(configured, monkeypatch):
    _patch_post(monkeypatch, FakeResponse(payload={"choices": []}))
    assert complete_chat([], system_prompt="s") == ""


def test_missing_api_key(monkeypatch):
    monkeypatch.setattr(config, "LLM_API_KEY", "")
    with pytest.raises(CompletionError, match="LLM_API_KEY"):
        complete_chat([], system_prompt="s")


def test_transport_error(configured, monkeypatch):
    _patch_post(monkeypatch, error=requests.ConnectionError("refused"))
    with pytest.raises(CompletionError, match="request failed"):
        complete_chat([], system_prompt="s")


def test_non_200_status(configured, monkeypatch):
    _patch_post(monkeypatch, FakeResponse(status_code=503, text="overloaded"))
    with pytest.raises(CompletionError, match="503"):
        complete_chat([], system_prompt="s")


def test_invalid_json(configured, monkeypatch):
    _patch_post(monkeypatch, FakeResponse(bad_json=True))
    with pytest.raises(CompletionError, match="parse"):
        complete_chat([], system_prompt="s")


def test_unexpected_shape(configured, monkeypatch):
    _patch_post(monkeypatch, FakeResponse(payload=["not", "a", "dict"]))
    with pytest.raises(CompletionError, match="shape"):
        complete_chat([], system_prompt="s")
