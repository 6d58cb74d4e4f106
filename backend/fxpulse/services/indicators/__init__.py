"""
Indicator Engine Service

CONTRACT:
    Input:  Bar Window (sequence of Bar)
    Output: dict[str, list[IndicatorPoint]]

RESPONSIBILITIES:
    - Simple moving average of closes
    - Wilder relative strength index (RSI), saturating at 100 without losses
    - Empty series when the window is shorter than the indicator needs

PURE PYTHON - No LLM involvement.
Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from fxpulse.services.indicators.service import (
    IndicatorService,
    compute_moving_average,
    compute_oscillator,
    get_indicator_service,
)

__all__ = [
    "IndicatorService",
    "compute_moving_average",
    "compute_oscillator",
    "get_indicator_service",
]
