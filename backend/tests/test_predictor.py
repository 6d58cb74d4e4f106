"""
Prediction Service Tests

Uses a fake LLM client; nothing leaves the process.
"""

import pytest

from fxpulse.schemas.prediction import PredictionRequest, PredictionSettings, SignalType
from fxpulse.services.base import PredictionError, ServiceError
from fxpulse.services.llm import PredictionService, parse_prediction
from fxpulse.services.llm.client import LLMProvider, LLMResponse
from fxpulse.services.llm.prompts import format_price_history

from tests.conftest import rising_bars


class FakeLLMClient:

    def __init__(self, content: str = "", configured: bool = True, error: Exception = None):
        self.content = content
        self.is_configured = configured
        self.error = error
        self.calls: list[dict] = []

    async def generate(self, prompt, temperature=None, max_tokens=None, response_schema=None):
        self.calls.append({"prompt": prompt, "temperature": temperature})
        if self.error:
            raise self.error
        return LLMResponse(content=self.content, model="fake", provider=LLMProvider.GEMINI)


class TestParsePrediction:

    def test_plain_json(self):
        result = parse_prediction(
            '{"predictedPrice": 1.0862, "signal": "BUY", "rationale": "Higher lows."}'
        )
        assert result.predicted_price == 1.0862
        assert result.signal == SignalType.BUY
        assert result.rationale == "Higher lows."

    def test_code_fence_is_stripped(self):
        content = '```json\n{"predictedPrice": 1.08, "signal": "sell", "rationale": "x"}\n```'
        assert parse_prediction(content).signal == SignalType.SELL

    def test_unknown_signal_becomes_hold(self):
        result = parse_prediction('{"predictedPrice": 1.08, "signal": "STRONG BUY"}')
        assert result.signal == SignalType.HOLD
        assert result.rationale == ""

    @pytest.mark.parametrize("content", ["not json", "[1, 2]", '{"signal": "BUY"}'])
    def test_invalid_payload_raises(self, content):
        with pytest.raises(ValueError):
            parse_prediction(content)


class TestPredictionService:

    @pytest.mark.asyncio
    async def test_truncates_to_history_length(self):
        client = FakeLLMClient('{"predictedPrice": 1.1, "signal": "HOLD", "rationale": "Flat."}')
        service = PredictionService(llm_client=client)
        bars = rising_bars(25)
        request = PredictionRequest(
            bars=bars,
            pair="EUR/USD",
            settings=PredictionSettings(temperature=0.3, history_length=20),
        )

        result = await service.execute(request)

        assert result.signal == SignalType.HOLD
        prompt = client.calls[0]["prompt"]
        assert "EUR/USD" in prompt
        assert format_price_history(bars[-20:]) in prompt
        assert f"{bars[4].close:.5f}" not in prompt
        assert client.calls[0]["temperature"] == 0.3

    @pytest.mark.asyncio
    async def test_unconfigured_client_raises(self):
        service = PredictionService(llm_client=FakeLLMClient(configured=False))
        request = PredictionRequest(bars=rising_bars(3), pair="EUR/USD")
        with pytest.raises(PredictionError):
            await service.execute(request)
        assert await service.health_check() is False

    @pytest.mark.asyncio
    async def test_provider_failure_raises_prediction_error(self):
        service = PredictionService(llm_client=FakeLLMClient(error=RuntimeError("quota")))
        request = PredictionRequest(bars=rising_bars(3), pair="EUR/USD")
        with pytest.raises(PredictionError):
            await service.execute(request)

    @pytest.mark.asyncio
    async def test_bad_json_raises_prediction_error(self):
        service = PredictionService(llm_client=FakeLLMClient("I think it goes up"))
        request = PredictionRequest(bars=rising_bars(3), pair="EUR/USD")
        with pytest.raises(PredictionError):
            await service.execute(request)

    @pytest.mark.asyncio
    async def test_error_carries_service_name(self):
        service = PredictionService(llm_client=FakeLLMClient(configured=False))
        request = PredictionRequest(bars=rising_bars(3), pair="EUR/USD")
        with pytest.raises(PredictionError) as exc_info:
            await service.execute(request)

        assert exc_info.value.service_name == service.name == "PredictionService"
        assert isinstance(exc_info.value, ServiceError)
