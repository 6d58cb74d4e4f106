"""
CONTRACT 4: Prediction Collaborator

Input: PredictionRequest (trailing bars + pair + settings)
Output: PredictionResult

The LLM interprets the recent closes and returns a next-interval price,
a BUY/SELL/HOLD signal and a one-sentence rationale. Anything outside the
closed signal set is coerced to HOLD.
"""

from datetime import datetime
from enum import Enum
from uuid import UUID, uuid4
from pydantic import BaseModel, Field, field_validator

from fxpulse.schemas.market import Bar


# =============================================================================
# ENUMS
# =============================================================================


class SignalType(str, Enum):
    BUY = "BUY"
    SELL = "SELL"
    HOLD = "HOLD"


def coerce_signal(raw: object) -> SignalType:
    """Map a free-form signal value onto the closed set, defaulting to HOLD."""
    if isinstance(raw, str):
        try:
            return SignalType(raw.strip().upper())
        except ValueError:
            pass
    return SignalType.HOLD


# =============================================================================
# INPUT
# =============================================================================


HISTORY_LENGTH_MIN = 20
HISTORY_LENGTH_MAX = 100
HISTORY_LENGTH_STEP = 5


class PredictionSettings(BaseModel):
    """User-tunable knobs for the prediction request."""

    temperature: float = Field(default=0.5, ge=0.0, le=1.0)
    history_length: int = Field(
        default=50,
        ge=HISTORY_LENGTH_MIN,
        le=HISTORY_LENGTH_MAX,
        description="Number of trailing bars sent to the model",
    )

    @field_validator("history_length")
    @classmethod
    def history_length_on_step(cls, v):
        if v % HISTORY_LENGTH_STEP != 0:
            raise ValueError(f"history_length must be a multiple of {HISTORY_LENGTH_STEP}")
        return v


class PredictionSettingsUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""

    temperature: float | None = Field(default=None, ge=0.0, le=1.0)
    history_length: int | None = Field(
        default=None, ge=HISTORY_LENGTH_MIN, le=HISTORY_LENGTH_MAX
    )

    @field_validator("history_length")
    @classmethod
    def history_length_on_step(cls, v):
        if v is not None and v % HISTORY_LENGTH_STEP != 0:
            raise ValueError(f"history_length must be a multiple of {HISTORY_LENGTH_STEP}")
        return v


class PredictionRequest(BaseModel):
    """Everything the predictor needs for one call."""

    bars: list[Bar] = Field(..., min_length=1)
    pair: str
    settings: PredictionSettings = PredictionSettings()


# =============================================================================
# OUTPUT
# =============================================================================


class PredictionResult(BaseModel):
    """Parsed model answer."""

    predicted_price: float
    signal: SignalType
    rationale: str = ""


class Prediction(BaseModel):
    """Predicted price point plotted after the last bar."""

    time: float
    price: float


class Signal(BaseModel):
    """Current trading signal shown in the signal panel."""

    type: SignalType
    rationale: str


class TradeHistoryEntry(BaseModel):
    """A signal accepted at a point in time."""

    id: UUID = Field(default_factory=uuid4)
    pair: str
    time: datetime
    price: float
    signal: SignalType
