"""
Candle Primitives

Per-bar shape measures and trend-context predicates shared by the
candlestick rules.
"""

from typing import Sequence

from fxpulse.schemas.market import Bar

# Bodies are judged against the mean body of this many trailing bars
BODY_LOOKBACK = 10


def average_body(history: Sequence[Bar]) -> float:
    """
    Mean body over the trailing BODY_LOOKBACK bars of `history`.

    The sum is always divided by the full lookback, so a history shorter
    than BODY_LOOKBACK yields a proportionally smaller reference body.
    """
    recent = history[-BODY_LOOKBACK:]
    return sum(bar.body for bar in recent) / BODY_LOOKBACK


def is_long_body(candle: Bar, history: Sequence[Bar]) -> bool:
    return candle.body > average_body(history)


def is_short_body(candle: Bar, history: Sequence[Bar]) -> bool:
    return candle.body < average_body(history)


def is_downtrend(candles: Sequence[Bar]) -> bool:
    """Highs strictly falling across a 3-bar slice."""
    return (
        len(candles) >= 3
        and candles[0].high > candles[1].high
        and candles[1].high > candles[2].high
    )


def is_uptrend(candles: Sequence[Bar]) -> bool:
    """Lows strictly rising across a 3-bar slice."""
    return (
        len(candles) >= 3
        and candles[0].low < candles[1].low
        and candles[1].low < candles[2].low
    )


def trend_context(bars: Sequence[Bar], start: int, end: int) -> Sequence[Bar]:
    """Slice `bars[start:end]`, empty when it would reach before the window."""
    if start < 0:
        return []
    return bars[start:end]
