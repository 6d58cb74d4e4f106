"""
Prediction Service Implementation

Asks the LLM for the next-interval close and a BUY/SELL/HOLD signal based on
the trailing closes of the current window.

CRITICAL: The session never trusts the raw answer. Unknown signals are
coerced to HOLD and unparseable answers raise PredictionError.
"""

import json
import logging
from typing import Optional

from fxpulse.schemas.prediction import (
    PredictionRequest,
    PredictionResult,
    SignalType,
    coerce_signal,
)
from fxpulse.services.base import PredictionError
from fxpulse.services.llm.interface import PredictionServiceInterface
from fxpulse.services.llm.client import LLMClient, get_llm_client
from fxpulse.services.llm.prompts import (
    PREDICTION_RESPONSE_SCHEMA,
    format_prediction_prompt,
)

logger = logging.getLogger(__name__)


def _strip_code_fence(content: str) -> str:
    content = content.strip()
    if content.startswith("```"):
        lines = content.split("\n")
        content = "\n".join(lines[1:-1])
    return content


def parse_prediction(content: str) -> PredictionResult:
    """
    Parse the model's JSON answer.

    Raises:
        ValueError: If the payload is not JSON or lacks a numeric price
    """
    try:
        payload = json.loads(_strip_code_fence(content))
    except json.JSONDecodeError as e:
        raise ValueError(f"LLM returned invalid JSON: {e}")
    if not isinstance(payload, dict):
        raise ValueError("LLM returned a non-object JSON payload")

    try:
        predicted_price = float(payload["predictedPrice"])
    except (KeyError, TypeError, ValueError):
        raise ValueError("LLM response is missing a numeric predictedPrice")

    raw_signal = payload.get("signal")
    signal = coerce_signal(raw_signal)
    if signal == SignalType.HOLD and str(raw_signal).strip().upper() != "HOLD":
        logger.warning(f"Invalid signal received: {raw_signal}. Defaulting to HOLD.")

    return PredictionResult(
        predicted_price=predicted_price,
        signal=signal,
        rationale=str(payload.get("rationale", "")),
    )


class PredictionService(PredictionServiceInterface):
    """
    Prediction collaborator backed by the LLM client.

    Usage:
        service = PredictionService()
        result = await service.execute(PredictionRequest(bars=bars, pair="EUR/USD"))
    """

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self._llm_client = llm_client

    @property
    def llm_client(self) -> LLMClient:
        """Lazy initialization of LLM client."""
        if self._llm_client is None:
            self._llm_client = get_llm_client()
        return self._llm_client

    async def execute(self, input_data: PredictionRequest) -> PredictionResult:
        if not self.llm_client.is_configured:
            raise PredictionError(self.name, "LLM API key not configured")

        history = input_data.bars[-input_data.settings.history_length:]
        prompt = format_prediction_prompt(input_data.pair, history)

        try:
            response = await self.llm_client.generate(
                prompt=prompt,
                temperature=input_data.settings.temperature,
                response_schema=PREDICTION_RESPONSE_SCHEMA,
            )
        except Exception as e:
            logger.error(f"Error fetching prediction: {e}")
            raise PredictionError(self.name, f"LLM request failed: {e}")

        try:
            return parse_prediction(response.content)
        except ValueError as e:
            logger.error(f"Failed to parse LLM response: {e}")
            logger.error(f"Response content: {response.content[:500]}")
            raise PredictionError(self.name, str(e))

    async def health_check(self) -> bool:
        return self.llm_client.is_configured


# Singleton instance management
_prediction_service: Optional[PredictionService] = None


def get_prediction_service() -> PredictionService:
    """Get or create prediction service singleton."""
    global _prediction_service
    if _prediction_service is None:
        _prediction_service = PredictionService()
    return _prediction_service
