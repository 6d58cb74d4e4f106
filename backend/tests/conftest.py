"""
Shared fixtures and builders for the backend tests.

No network access: predictors, LLM clients and clocks are fakes.
"""

import asyncio
from typing import Optional

import pytest

from fxpulse.schemas.market import Bar
from fxpulse.schemas.prediction import PredictionRequest, PredictionResult, SignalType
from fxpulse.services.base import PredictionError
from fxpulse.services.llm.interface import PredictionServiceInterface
from fxpulse.services.session import AnalysisSession, SignalSampler


def make_bar(
    time: float,
    open: float,
    close: float,
    high: Optional[float] = None,
    low: Optional[float] = None,
) -> Bar:
    """Bar with 5-pip wicks unless high/low are given."""
    if high is None:
        high = max(open, close) + 0.0005
    if low is None:
        low = min(open, close) - 0.0005
    return Bar(time=time, open=open, high=high, low=low, close=close)


def rising_bars(count: int, start_time: float = 1000.0, start_price: float = 1.1000) -> list[Bar]:
    """Bullish bars, each closing 2 pips above the previous close."""
    bars = []
    price = start_price
    for i in range(count):
        bars.append(make_bar(start_time + i * 2, price, price + 0.0002))
        price += 0.0002
    return bars


def scenario_a_bars(start_time: float = 1000.0) -> list[Bar]:
    """Falling highs followed by a bullish engulfing candle at the last bar."""
    return [
        make_bar(start_time, 1.1020, 1.1005, high=1.1030, low=1.1000),
        make_bar(start_time + 2, 1.1000, 1.0980, high=1.1010, low=1.0970),
        make_bar(start_time + 4, 1.0975, 1.0950, high=1.0985, low=1.0940),
        make_bar(start_time + 6, 1.0945, 1.0990, high=1.0995, low=1.0940),
    ]


class FakePredictor(PredictionServiceInterface):
    """
    Records requests and answers from a script.

    When `gate` is set, every call waits for it before answering, which keeps
    a request in flight until the test releases it.
    """

    def __init__(
        self,
        price: float = 1.1111,
        signal: SignalType = SignalType.BUY,
        fail: bool = False,
    ):
        self.price = price
        self.signal = signal
        self.fail = fail
        self.gate: Optional[asyncio.Event] = None
        self.requests: list[PredictionRequest] = []

    async def execute(self, input_data: PredictionRequest) -> PredictionResult:
        self.requests.append(input_data)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise PredictionError(self.name, "provider unavailable")
        return PredictionResult(
            predicted_price=self.price,
            signal=self.signal,
            rationale="Momentum is building.",
        )

    async def health_check(self) -> bool:
        return True


class CounterClock:
    """Clock that advances by one on every read."""

    def __init__(self, start: int = 0):
        self.value = start

    def __call__(self) -> int:
        current = self.value
        self.value += 1
        return current


def always_sampler() -> SignalSampler:
    """Samples every tick that is not blocked by an in-flight request."""
    return SignalSampler(every=4, phase_width=1, clock=lambda: 0)


def never_sampler() -> SignalSampler:
    """Samples only the first tick after a reset."""
    return SignalSampler(every=4, phase_width=1, clock=lambda: 1)


@pytest.fixture
def predictor() -> FakePredictor:
    return FakePredictor()


@pytest.fixture
def session(predictor) -> AnalysisSession:
    return AnalysisSession(pair="EUR/USD", predictor=predictor, sampler=always_sampler())
