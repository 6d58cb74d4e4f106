"""
Pattern Detector Service

CONTRACT:
    Input:  Bar Window (sequence of Bar)
    Output: list[PatternEvent], ascending by time

RESPONSIBILITIES:
    - Single-candle rules: Doji, Hammer
    - Double-candle rules: Engulfing, Piercing Line, Dark Cloud Cover
    - Triple-candle rules: Morning/Evening Star, Three White Soldiers,
      Three Black Crows
    - Trend-context preconditions from the bars preceding each formation

Stateless; the whole window is re-evaluated on each call.
"""

from fxpulse.services.patterns.detector import detect_at, detect_patterns

__all__ = [
    "detect_at",
    "detect_patterns",
]
