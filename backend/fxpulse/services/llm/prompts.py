"""
LLM Prompt Templates

Structured prompt and response schema for the next-interval prediction.

RULES (enforced in the prompt):
- Only closing prices are provided; no indicator values
- The signal must be one of BUY, SELL, HOLD
- The rationale is a single sentence
"""

from typing import Sequence

from fxpulse.schemas.market import Bar

PREDICTION_PROMPT_TEMPLATE = """You are an expert forex trading analyst. Your task is to predict the next price point and generate a clear trading signal.
Analyze the following recent closing price history for the {pair} currency pair: {price_history}.
Based on this data, predict the closing price for the very next interval and provide a trading signal ('BUY', 'SELL', or 'HOLD') along with a concise one-sentence rationale.
Respond with JSON containing the keys "predictedPrice", "signal" and "rationale"."""

# OpenAPI-style schema accepted by Gemini's structured output mode
PREDICTION_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "predictedPrice": {
            "type": "number",
            "description": "The predicted closing price for the next time interval.",
        },
        "signal": {
            "type": "string",
            "description": "A trading signal, which must be one of: 'BUY', 'SELL', or 'HOLD'.",
        },
        "rationale": {
            "type": "string",
            "description": "A brief, one-sentence rationale for the signal based on the price data.",
        },
    },
    "required": ["predictedPrice", "signal", "rationale"],
}


def format_price_history(bars: Sequence[Bar]) -> str:
    """Closes with five decimals, oldest first."""
    return ", ".join(f"{bar.close:.5f}" for bar in bars)


def format_prediction_prompt(pair: str, bars: Sequence[Bar]) -> str:
    return PREDICTION_PROMPT_TEMPLATE.format(
        pair=pair,
        price_history=format_price_history(bars),
    )
