import asyncio
from types import SimpleNamespace

import pytest

from launchloom.services.llm_client import (
    EmptyGenerationError,
    GenerationTimeoutError,
    LLMClient,
    LLMUnavailableError,
    extract_json_text,
)


class _FakeCompletions:
    def __init__(self, content=None, exc=None, delay=0.0):
        self.content = content
        self.exc = exc
        self.delay = delay
        self.calls = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.exc:
            raise self.exc
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _client(**kwargs):
    completions = _FakeCompletions(**kwargs)
    fake = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return LLMClient(client=fake, model="test-model", timeout=0.2, max_tokens=100), completions


def test_generate_slices_json_from_chatter():
    client, completions = _client(content='Here you go:\n{"executiveSummary": "Go."}\nThanks')
    result = asyncio.run(client.generate("prompt"))
    assert result == '{"executiveSummary": "Go."}'
    assert completions.calls[0]["model"] == "test-model"
    assert completions.calls[0]["messages"][-1] == {"role": "user", "content": "prompt"}


def test_generate_returns_raw_text_when_not_json():
    client, _ = _client(content="# Plan\nDo things")
    assert asyncio.run(client.generate("p")) == "# Plan\nDo things"


def test_timeout_is_mapped():
    client, _ = _client(content="{}", delay=1.0)
    with pytest.raises(GenerationTimeoutError):
        asyncio.run(client.generate("p"))


def test_empty_response_is_an_error():
    client, _ = _client(content="   ")
    with pytest.raises(EmptyGenerationError):
        asyncio.run(client.generate("p"))


@pytest.mark.parametrize(
    "message, fragment",
    [
        ("Error code: 429 - rate_limit_exceeded", "rate limit"),
        ("insufficient_quota", "quota"),
        ("invalid_api_key provided", "API key"),
        ("connection reset", "provider error"),
    ],
)
def test_provider_errors_are_mapped(message, fragment):
    client, _ = _client(exc=RuntimeError(message))
    with pytest.raises(LLMUnavailableError, match=fragment):
        asyncio.run(client.generate("p"))


def test_unconfigured_client_raises_on_use(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    client = LLMClient.from_env()
    assert not client.configured
    with pytest.raises(LLMUnavailableError):
        asyncio.run(client.generate("p"))


def test_env_configuration(monkeypatch):
    monkeypatch.setenv("OPENAI_MODEL", "gpt-test")
    monkeypatch.setenv("GENERATION_TIMEOUT_SECONDS", "12")
    client = LLMClient(client=None)
    assert client.model == "gpt-test"
    assert client.timeout == 12.0


def test_extract_json_text_keeps_unparseable_input():
    assert extract_json_text("{not json}") == "{not json}"
    assert extract_json_text('x {"a": 1} y') == '{"a": 1}'
