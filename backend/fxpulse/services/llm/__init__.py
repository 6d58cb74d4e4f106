"""
LLM Prediction Service

CONTRACT:
    Input:  PredictionRequest (trailing bars, pair, temperature/history length)
    Output: PredictionResult (predicted price, BUY/SELL/HOLD, rationale)

RESPONSIBILITIES:
    - Prompt the model with the trailing closing prices
    - Parse the structured JSON answer
    - Coerce unknown signals to HOLD

LLM USAGE:
    - Primary: Gemini (structured JSON output)
    - Fallback: OpenAI (JSON response format)

FAILURE BEHAVIOR:
    - Any provider or parse failure raises PredictionError
    - No retries; the session surfaces the error and waits for the next sample
"""

from fxpulse.services.llm.interface import PredictionServiceInterface
from fxpulse.services.llm.client import (
    LLMClient,
    LLMConfig,
    LLMProvider,
    LLMResponse,
    get_llm_client,
)
from fxpulse.services.llm.predictor import (
    PredictionService,
    get_prediction_service,
    parse_prediction,
)

__all__ = [
    # Interfaces
    "PredictionServiceInterface",
    # Client
    "LLMClient",
    "LLMConfig",
    "LLMProvider",
    "LLMResponse",
    "get_llm_client",
    # Services
    "PredictionService",
    "get_prediction_service",
    "parse_prediction",
]
