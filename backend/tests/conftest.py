import itertools
from typing import Dict, List

import pytest
from fastapi.testclient import TestClient

from research_assistant import state
from research_assistant.api.chat import get_conversation
from research_assistant.conversation import ConversationService
from research_assistant.kv_store import InMemoryKeyValueBackend
from research_assistant.main import create_app
from research_assistant.state import SessionStore, get_store


class FakeCompletion:
    """Stands in for the hosted model; records every call it receives."""

    def __init__(self, replies=None, error: Exception | None = None) -> None:
        self.replies = list(replies or ["Here is what I found."])
        self.error = error
        self.calls: List[Dict] = []

    def __call__(self, messages, system_prompt, max_tokens, temperature) -> str:
        self.calls.append({
            "messages": messages,
            "system_prompt": system_prompt,
            "max_tokens": max_tokens,
            "temperature": temperature,
        })
        if self.error is not None:
            raise self.error
        if len(self.replies) > 1:
            return self.replies.pop(0)
        return self.replies[0]


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch):
    """Deterministic millisecond clock: each reading advances by 1000."""
    ticks = itertools.count(1_700_000_000_000, 1000)
    monkeypatch.setattr(state, "_now_ms", lambda: next(ticks))
    return ticks


@pytest.fixture
def backend() -> InMemoryKeyValueBackend:
    return InMemoryKeyValueBackend()


@pytest.fixture
def store(backend: InMemoryKeyValueBackend) -> SessionStore:
    return SessionStore(backend, "test-workspace")


@pytest.fixture
def completion() -> FakeCompletion:
    return FakeCompletion()


@pytest.fixture
def client(store: SessionStore, completion: FakeCompletion):
    app = create_app()
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_conversation] = lambda: ConversationService(store, complete=completion)
    with TestClient(app) as test_client:
        yield test_client
