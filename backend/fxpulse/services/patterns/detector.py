"""
Candlestick Pattern Detection

Detects single-, double- and triple-candle formations over a Bar Window.

For every index i >= 2 the candles c1 = bars[i-2], c2 = bars[i-1] and
c3 = bars[i] are checked against each rule independently, so one bar can
complete several patterns. Trend-gated rules look at the three bars before
the formation: [i-3, i-1] for one- and two-candle rules, [i-4, i-2] for
three-candle rules.

The detector keeps no state. Callers re-run it on the whole window after
every update because a bar sliding out of the window can change the trend
context or the body reference of the bars near the start.
"""

import logging
from typing import Sequence

from fxpulse.schemas.market import Bar
from fxpulse.schemas.patterns import ALL_PATTERNS, PatternEvent, PatternName
from fxpulse.services.patterns.candles import (
    is_downtrend,
    is_long_body,
    is_short_body,
    is_uptrend,
    trend_context,
)

logger = logging.getLogger(__name__)

MIN_BARS = 3


# =============================================================================
# SINGLE CANDLE
# =============================================================================


def is_doji(candle: Bar) -> bool:
    total_range = candle.range
    return total_range > 0 and candle.body / total_range < 0.1


def is_hammer(candle: Bar) -> bool:
    body = candle.body
    return body > 0 and candle.lower_wick > body * 2 and candle.upper_wick < body * 0.5


# =============================================================================
# DOUBLE CANDLE
# =============================================================================


def is_bullish_engulfing(current: Bar, previous: Bar) -> bool:
    return (
        previous.is_bearish
        and current.is_bullish
        and current.open < previous.close
        and current.close > previous.open
    )


def is_bearish_engulfing(current: Bar, previous: Bar) -> bool:
    return (
        previous.is_bullish
        and current.is_bearish
        and current.open > previous.close
        and current.close < previous.open
    )


def is_piercing_line(current: Bar, previous: Bar) -> bool:
    midpoint = previous.open - previous.body / 2
    return (
        previous.is_bearish
        and current.is_bullish
        and current.open < previous.low
        and midpoint < current.close < previous.open
    )


def is_dark_cloud_cover(current: Bar, previous: Bar) -> bool:
    midpoint = previous.open + previous.body / 2
    return (
        previous.is_bullish
        and current.is_bearish
        and current.open > previous.high
        and previous.open < current.close < midpoint
    )


# =============================================================================
# TRIPLE CANDLE
# =============================================================================


def is_morning_star(c1: Bar, c2: Bar, c3: Bar, history: Sequence[Bar]) -> bool:
    midpoint = c1.open - c1.body / 2
    return (
        c1.is_bearish
        and is_long_body(c1, history)
        and is_short_body(c2, history)
        and c2.close < c1.close
        and c3.is_bullish
        and c3.open > c2.close
        and c3.close > midpoint
    )


def is_evening_star(c1: Bar, c2: Bar, c3: Bar, history: Sequence[Bar]) -> bool:
    midpoint = c1.open + c1.body / 2
    return (
        c1.is_bullish
        and is_long_body(c1, history)
        and is_short_body(c2, history)
        and c2.close > c1.close
        and c3.is_bearish
        and c3.open < c2.close
        and c3.close < midpoint
    )


def _strong_white(candle: Bar, history: Sequence[Bar]) -> bool:
    return (
        candle.is_bullish
        and is_long_body(candle, history)
        and candle.upper_wick < candle.body * 0.3
    )


def _strong_black(candle: Bar, history: Sequence[Bar]) -> bool:
    return (
        candle.is_bearish
        and is_long_body(candle, history)
        and candle.lower_wick < candle.body * 0.3
    )


def is_three_white_soldiers(c1: Bar, c2: Bar, c3: Bar, history: Sequence[Bar]) -> bool:
    return (
        all(_strong_white(c, history) for c in (c1, c2, c3))
        and c2.open > c1.open
        and c2.close > c1.close
        and c3.open > c2.open
        and c3.close > c2.close
    )


def is_three_black_crows(c1: Bar, c2: Bar, c3: Bar, history: Sequence[Bar]) -> bool:
    return (
        all(_strong_black(c, history) for c in (c1, c2, c3))
        and c2.open < c1.open
        and c2.close < c1.close
        and c3.open < c2.open
        and c3.close < c2.close
    )


# =============================================================================
# DETECTION
# =============================================================================


def detect_at(bars: Sequence[Bar], i: int) -> list[PatternName]:
    """Names of all patterns completed by bars[i] (requires i >= 2)."""
    if i < MIN_BARS - 1 or i >= len(bars):
        return []

    c1, c2, c3 = bars[i - 2], bars[i - 1], bars[i]
    recent = trend_context(bars, i - 3, i)
    earlier = trend_context(bars, i - 4, i - 1)
    down_recent, up_recent = is_downtrend(recent), is_uptrend(recent)
    down_earlier, up_earlier = is_downtrend(earlier), is_uptrend(earlier)
    # Body sizes are judged against the window up to and including c3
    history = bars[: i + 1]

    found = []
    if is_doji(c3):
        found.append(PatternName.DOJI)
    if down_recent and is_hammer(c3):
        found.append(PatternName.HAMMER)

    if down_recent and is_bullish_engulfing(c3, c2):
        found.append(PatternName.BULLISH_ENGULFING)
    if up_recent and is_bearish_engulfing(c3, c2):
        found.append(PatternName.BEARISH_ENGULFING)
    if down_recent and is_piercing_line(c3, c2):
        found.append(PatternName.PIERCING_LINE)
    if up_recent and is_dark_cloud_cover(c3, c2):
        found.append(PatternName.DARK_CLOUD_COVER)

    if down_earlier and is_morning_star(c1, c2, c3, history):
        found.append(PatternName.MORNING_STAR)
    if up_earlier and is_evening_star(c1, c2, c3, history):
        found.append(PatternName.EVENING_STAR)
    if down_earlier and is_three_white_soldiers(c1, c2, c3, history):
        found.append(PatternName.THREE_WHITE_SOLDIERS)
    if up_earlier and is_three_black_crows(c1, c2, c3, history):
        found.append(PatternName.THREE_BLACK_CROWS)

    return found


def detect_patterns(bars: Sequence[Bar]) -> list[PatternEvent]:
    """
    Detect every pattern in the window, ascending by completing bar time.

    Events sharing a time carry no guaranteed relative order.
    Windows shorter than three bars yield no events.
    """
    events: list[PatternEvent] = []
    if len(bars) < MIN_BARS:
        return events

    for i in range(MIN_BARS - 1, len(bars)):
        time = bars[i].time
        for name in detect_at(bars, i):
            events.append(PatternEvent(time=time, name=name, type=ALL_PATTERNS[name]))

    logger.debug(f"Detected {len(events)} patterns over {len(bars)} bars")
    return events
