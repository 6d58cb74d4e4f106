"""
CONTRACT 5: Session View

Output of the Session Orchestrator, consumed by the presentation layer
(REST snapshot and SSE stream). One SessionView per update.
"""

from typing import Optional
from pydantic import BaseModel, Field

from fxpulse.schemas.market import Bar
from fxpulse.schemas.indicators import IndicatorPoint, IndicatorSettings
from fxpulse.schemas.patterns import PatternEvent, PatternFilter, PatternName
from fxpulse.schemas.prediction import (
    Prediction,
    PredictionSettings,
    Signal,
    TradeHistoryEntry,
)


class PairChange(BaseModel):
    """Request body for switching the instrument."""

    pair: str = Field(..., description="Pair label, e.g. 'USD/JPY'")


class SessionView(BaseModel):
    """
    Everything the presentation layer renders for one update.

    `generation` increases whenever the session identity changes; consumers
    clear their own drawings/overlays when they see a new generation.
    """

    pair: str
    generation: int
    bars: list[Bar]
    current_price: float = 0.0
    previous_price: float = 0.0

    indicators: dict[str, list[IndicatorPoint]] = Field(default_factory=dict)
    indicator_settings: dict[str, IndicatorSettings] = Field(default_factory=dict)

    patterns: list[PatternEvent] = Field(default_factory=list)
    pattern_alert: Optional[PatternEvent] = None
    pattern_filter: PatternFilter = PatternFilter()
    pattern_config: dict[PatternName, bool] = Field(default_factory=dict)

    prediction_settings: PredictionSettings = PredictionSettings()
    prediction: Optional[Prediction] = None
    signal: Optional[Signal] = None
    trade_history: list[TradeHistoryEntry] = Field(default_factory=list)
    is_loading: bool = False
    error: Optional[str] = None
