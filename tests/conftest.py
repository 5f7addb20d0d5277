import asyncio
from types import SimpleNamespace
from typing import List, Optional

import pytest

from ea_wizard import (
    FailureKind,
    GenerationFailure,
    GenerationRequest,
    GenerationSuccess,
    StrategyParameters,
    Timeframe,
)


RSI_DESCRIPTION = (
    "Buy when RSI(14) crosses above 30 (Oversold exit).\n"
    "Sell when RSI(14) crosses below 70 (Overbought exit).\n"
    "Close existing positions on opposite signal."
)


class FakeCompletions:
    """Stands in for `client.chat.completions` of the OpenAI SDK."""

    def __init__(self, content: Optional[str] = None, error: Optional[Exception] = None, response=None):
        self.content = content
        self.error = error
        self.response = response
        self.calls: List[dict] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.response is not None:
            return self.response
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class RecordingFactory:
    """Client factory that records every SDK client it builds."""

    def __init__(self, completions: FakeCompletions):
        self.completions = completions
        self.built: List[tuple] = []

    def __call__(self, api_key, base_url):
        self.built.append((api_key, base_url))
        return SimpleNamespace(chat=SimpleNamespace(completions=self.completions))


class StubGenerator:
    """Returns queued results in order and records the requests it saw."""

    def __init__(self, *results):
        self.results = list(results)
        self.requests: List[GenerationRequest] = []

    async def generate(self, request):
        self.requests.append(request)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class GatedGenerator:
    """First call blocks until `release()`; later calls answer immediately."""

    def __init__(self, first: GenerationSuccess, later: GenerationSuccess):
        self.first = first
        self.later = later
        self.calls = 0
        self._gate = asyncio.Event()

    def release(self):
        self._gate.set()

    async def generate(self, request):
        self.calls += 1
        if self.calls == 1:
            await self._gate.wait()
            return self.first
        return self.later


@pytest.fixture
def rsi_params():
    return StrategyParameters(
        strategy_description=RSI_DESCRIPTION,
        symbol="EURUSD",
        timeframe=Timeframe.H1,
        lot_size=0.1,
        stop_loss_points=100,
        take_profit_points=200,
        use_trailing_stop=False,
    )


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("OPENAI_ENDPOINT", raising=False)


@pytest.fixture
def fenced_success():
    return GenerationSuccess(text="```mql5\nvoid OnTick(){}\n```")


@pytest.fixture
def generation_failure():
    return GenerationFailure(
        kind=FailureKind.GENERATION,
        message="Failed to generate Expert Advisor. Please try again.",
    )
