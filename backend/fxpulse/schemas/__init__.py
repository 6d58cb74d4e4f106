"""
ForexPulse Schema Contracts

This module defines all JSON contracts between system components.
These are the authoritative interfaces - all modules must conform to these schemas.
"""

from fxpulse.schemas.market import (
    Bar,
    CurrencyPair,
    CURRENCY_PAIRS,
)
from fxpulse.schemas.indicators import (
    IndicatorName,
    IndicatorPoint,
    IndicatorSettings,
    LineStyle,
)
from fxpulse.schemas.patterns import (
    ALL_PATTERNS,
    PatternEvent,
    PatternFilter,
    PatternName,
    PatternType,
)
from fxpulse.schemas.prediction import (
    Prediction,
    PredictionRequest,
    PredictionResult,
    PredictionSettings,
    Signal,
    SignalType,
    TradeHistoryEntry,
)
from fxpulse.schemas.session import SessionView

__all__ = [
    # Market
    "Bar",
    "CurrencyPair",
    "CURRENCY_PAIRS",
    # Indicators
    "IndicatorName",
    "IndicatorPoint",
    "IndicatorSettings",
    "LineStyle",
    # Patterns
    "ALL_PATTERNS",
    "PatternEvent",
    "PatternFilter",
    "PatternName",
    "PatternType",
    # Prediction
    "Prediction",
    "PredictionRequest",
    "PredictionResult",
    "PredictionSettings",
    "Signal",
    "SignalType",
    "TradeHistoryEntry",
    # Session
    "SessionView",
]
