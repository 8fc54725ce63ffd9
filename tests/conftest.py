"""Shared fixtures: deterministic stand-ins for the OpenAI client."""

from unittest.mock import MagicMock

import pytest


class ScriptedClient:
    """Replays canned Responses API payloads and records every request."""

    def __init__(self, *payloads, api_key="sk-test"):
        self.api_key = api_key
        self.model_name = "gpt-4o-mini"
        self.payloads = list(payloads)
        self.calls = []

    def create_response(self, input, model=None, **options):
        self.calls.append({"input": input, "model": model, **options})
        payload = self.payloads.pop(0)
        if isinstance(payload, Exception):
            raise payload
        return payload


class EchoClient(ScriptedClient):
    """Answers every prompt with a reply derived from the last user turn."""

    def create_response(self, input, model=None, **options):
        self.calls.append({"input": input, "model": model, **options})
        last = input[-1]["content"][0]["text"]
        return {"output_text": f"Joke #{len(self.calls)} about: {last}"}


@pytest.fixture
def scripted():
    return ScriptedClient


@pytest.fixture
def echo_factory():
    return EchoClient


@pytest.fixture
def echo_client():
    return EchoClient()


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.api_key = "sk-test"
    client.model_name = "gpt-4o-mini"
    return client


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for var in ("OPENAI_API_KEY", "OPENAI_BASE_URL", "OPENAI_MODEL",
                "OPENAI_AGENT_ID", "OPENAI_CHATKIT_WORKFLOW_ID"):
        # setenv first so teardown restores the original state, even if a test loads a .env
        monkeypatch.setenv(var, "")
        monkeypatch.delenv(var)
