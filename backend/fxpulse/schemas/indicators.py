"""
CONTRACT 2: Indicator Engine

Input: Bar Window
Output: IndicatorPoint series per enabled indicator

Pure Python/NumPy - no LLM involvement.
"""

from enum import Enum, IntEnum
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class IndicatorName(str, Enum):
    SMA = "sma"
    RSI = "rsi"


class LineStyle(IntEnum):
    """Chart line styles, numbered as the charting library expects."""

    SOLID = 0
    DOTTED = 1
    DASHED = 2
    LARGE_DASHED = 3
    SPARSE_DOTTED = 4


# =============================================================================
# SETTINGS
# =============================================================================


class IndicatorSettings(BaseModel):
    """User-facing configuration of one indicator overlay."""

    enabled: bool = False
    period: int = Field(..., ge=2, description="Lookback period in bars")
    color: str = "#f6e05e"
    line_style: LineStyle = LineStyle.SOLID


class IndicatorSettingsUpdate(BaseModel):
    """Partial update for an indicator; omitted fields are left unchanged."""

    enabled: bool | None = None
    period: int | None = Field(default=None, ge=2)
    color: str | None = None
    line_style: LineStyle | None = None


# =============================================================================
# OUTPUT
# =============================================================================


class IndicatorPoint(BaseModel):
    """One indicator value aligned to a bar time."""

    time: float
    value: float
