"""
CONTRACT 3: Pattern Detector

Input: Bar Window
Output: list[PatternEvent], ascending by time

Rule-based candlestick recognition. The closed set of pattern names and
their classification lives here so that filters and the detector agree.
"""

from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# ENUMS
# =============================================================================


class PatternType(str, Enum):
    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class PatternName(str, Enum):
    BULLISH_ENGULFING = "Bullish Engulfing"
    BEARISH_ENGULFING = "Bearish Engulfing"
    DOJI = "Doji"
    HAMMER = "Hammer"
    MORNING_STAR = "Morning Star"
    EVENING_STAR = "Evening Star"
    PIERCING_LINE = "Piercing Line"
    DARK_CLOUD_COVER = "Dark Cloud Cover"
    THREE_WHITE_SOLDIERS = "Three White Soldiers"
    THREE_BLACK_CROWS = "Three Black Crows"


ALL_PATTERNS: dict[PatternName, PatternType] = {
    PatternName.BULLISH_ENGULFING: PatternType.BULLISH,
    PatternName.BEARISH_ENGULFING: PatternType.BEARISH,
    PatternName.DOJI: PatternType.NEUTRAL,
    PatternName.HAMMER: PatternType.BULLISH,
    PatternName.MORNING_STAR: PatternType.BULLISH,
    PatternName.EVENING_STAR: PatternType.BEARISH,
    PatternName.PIERCING_LINE: PatternType.BULLISH,
    PatternName.DARK_CLOUD_COVER: PatternType.BEARISH,
    PatternName.THREE_WHITE_SOLDIERS: PatternType.BULLISH,
    PatternName.THREE_BLACK_CROWS: PatternType.BEARISH,
}


# =============================================================================
# EVENTS
# =============================================================================


class PatternEvent(BaseModel):
    """A named formation completed by the candle at `time`."""

    model_config = ConfigDict(frozen=True)

    time: float
    name: PatternName
    type: PatternType


# =============================================================================
# FILTERS
# =============================================================================


class PatternFilter(BaseModel):
    """Which pattern classes are shown; each toggles independently."""

    bullish: bool = True
    bearish: bool = True
    neutral: bool = True

    def allows(self, pattern_type: PatternType) -> bool:
        return getattr(self, pattern_type.value)


def default_pattern_config() -> dict[PatternName, bool]:
    """Every pattern enabled."""
    return {name: True for name in ALL_PATTERNS}


class PatternToggle(BaseModel):
    """Request body for enabling or disabling one pattern."""

    enabled: bool = Field(..., description="Whether the pattern is reported")


class PatternFilterUpdate(BaseModel):
    """Request body for toggling pattern classes; omitted classes are unchanged."""

    bullish: bool | None = None
    bearish: bool | None = None
    neutral: bool | None = None
