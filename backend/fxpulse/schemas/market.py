"""
CONTRACT 1: Price Bars

Input: pushed by the ingestion feed, one Bar at a time
Output: Bar Window owned by the analysis session

A Bar is immutable once created. Timestamps are epoch seconds and must
strictly increase across a session's window.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


# =============================================================================
# INSTRUMENTS
# =============================================================================


class CurrencyPair(BaseModel):
    """Tradable instrument shown in the pair selector."""

    name: str = Field(..., description="Pair label, e.g. 'EUR/USD'")
    icon: str = ""


CURRENCY_PAIRS: list[CurrencyPair] = [
    CurrencyPair(name="EUR/USD", icon="🇪🇺/🇺🇸"),
    CurrencyPair(name="USD/JPY", icon="🇺🇸/🇯🇵"),
    CurrencyPair(name="GBP/USD", icon="🇬🇧/🇺🇸"),
    CurrencyPair(name="USD/CHF", icon="🇺🇸/🇨🇭"),
    CurrencyPair(name="AUD/USD", icon="🇦🇺/🇺🇸"),
]


def get_pair(name: str) -> CurrencyPair:
    """Look up a supported pair by label (case-insensitive)."""
    wanted = name.strip().upper()
    for pair in CURRENCY_PAIRS:
        if pair.name == wanted:
            return pair
    raise KeyError(f"Unsupported currency pair: {name}")


# =============================================================================
# BAR
# =============================================================================


class Bar(BaseModel):
    """Single OHLC price observation."""

    model_config = ConfigDict(frozen=True)

    time: float = Field(..., description="Bar open time, epoch seconds")
    open: float
    high: float
    low: float
    close: float

    @model_validator(mode="after")
    def wicks_must_contain_body(self):
        if self.low > min(self.open, self.close):
            raise ValueError("low must be <= min(open, close)")
        if self.high < max(self.open, self.close):
            raise ValueError("high must be >= max(open, close)")
        return self

    @property
    def body(self) -> float:
        return abs(self.open - self.close)

    @property
    def upper_wick(self) -> float:
        return self.high - max(self.open, self.close)

    @property
    def lower_wick(self) -> float:
        return min(self.open, self.close) - self.low

    @property
    def range(self) -> float:
        return self.high - self.low

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open
