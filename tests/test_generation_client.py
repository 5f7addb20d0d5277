from types import SimpleNamespace

import pytest

from conftest import FakeCompletions, RecordingFactory
from ea_wizard import (
    NO_CODE_PLACEHOLDER,
    FailureKind,
    GenerationClient,
    GenerationFailure,
    GenerationSuccess,
    compose,
)


@pytest.mark.asyncio
async def test_missing_api_key_fails_before_any_call(no_api_key, rsi_params):
    completions = FakeCompletions(content="void OnTick(){}")
    factory = RecordingFactory(completions)
    client = GenerationClient(client_factory=factory)

    result = await client.generate(compose(rsi_params))

    assert isinstance(result, GenerationFailure)
    assert result.kind == FailureKind.CONFIGURATION
    assert "OPENAI_API_KEY" in result.message
    assert factory.built == []
    assert completions.calls == []


@pytest.mark.asyncio
async def test_success_returns_raw_text(rsi_params):
    completions = FakeCompletions(content="```mql5\nvoid OnTick(){}\n```")
    factory = RecordingFactory(completions)
    client = GenerationClient(api_key="sk-test", client_factory=factory)
    request = compose(rsi_params)

    result = await client.generate(request)

    assert result == GenerationSuccess(text="```mql5\nvoid OnTick(){}\n```")
    assert len(completions.calls) == 1
    call = completions.calls[0]
    assert call["model"] == request.config.model
    assert call["reasoning_effort"] == request.config.reasoning_effort
    assert call["messages"] == request.to_messages()


@pytest.mark.asyncio
async def test_api_key_and_endpoint_come_from_environment(monkeypatch, rsi_params):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
    monkeypatch.setenv("OPENAI_ENDPOINT", "https://llm.internal.example/v1")
    factory = RecordingFactory(FakeCompletions(content="int x;"))
    client = GenerationClient(client_factory=factory)

    await client.generate(compose(rsi_params))

    assert factory.built == [("sk-env", "https://llm.internal.example/v1")]


@pytest.mark.asyncio
@pytest.mark.parametrize("content", [None, "", "   \n"])
async def test_empty_text_is_a_degenerate_success(content, rsi_params):
    client = GenerationClient(api_key="sk-test", client_factory=RecordingFactory(FakeCompletions(content=content)))

    result = await client.generate(compose(rsi_params))

    assert isinstance(result, GenerationSuccess)
    assert result.degenerate is True
    assert result.text == NO_CODE_PLACEHOLDER


@pytest.mark.asyncio
async def test_service_error_becomes_generic_failure(rsi_params):
    completions = FakeCompletions(error=RuntimeError("429 quota exceeded for org-secret"))
    client = GenerationClient(api_key="sk-test", client_factory=RecordingFactory(completions))

    result = await client.generate(compose(rsi_params))

    assert isinstance(result, GenerationFailure)
    assert result.kind == FailureKind.GENERATION
    assert "quota" not in result.message
    assert "try again" in result.message


@pytest.mark.asyncio
async def test_malformed_response_becomes_failure(rsi_params):
    completions = FakeCompletions(response=SimpleNamespace(choices=[]))
    client = GenerationClient(api_key="sk-test", client_factory=RecordingFactory(completions))

    result = await client.generate(compose(rsi_params))

    assert isinstance(result, GenerationFailure)
    assert result.kind == FailureKind.GENERATION


@pytest.mark.asyncio
async def test_each_generate_makes_exactly_one_call(rsi_params):
    completions = FakeCompletions(content="int x;")
    client = GenerationClient(api_key="sk-test", client_factory=RecordingFactory(completions))
    request = compose(rsi_params)

    await client.generate(request)
    await client.generate(request)

    assert len(completions.calls) == 2
