"""
Indicator Engine Service Implementation

Turns a Bar Window into indicator series for the chart.
NO LLM INVOLVEMENT - Pure Python/NumPy calculations.

Both series are recomputed from the full window on every call; the window
is never mutated. Evicting the oldest bar changes the oscillator's seed
averages, so extending a cached series would not match a recomputation.
"""

from typing import Optional, Sequence
import numpy as np

from fxpulse.schemas.market import Bar
from fxpulse.schemas.indicators import IndicatorName, IndicatorPoint, IndicatorSettings
from fxpulse.services.indicators.calculations import sma, rsi


def _closes(bars: Sequence[Bar]) -> np.ndarray:
    return np.array([b.close for b in bars], dtype=float)


def _to_points(bars: Sequence[Bar], values: np.ndarray) -> list[IndicatorPoint]:
    """Pair each defined value with its bar time, skipping the NaN warm-up."""
    return [
        IndicatorPoint(time=bar.time, value=float(value))
        for bar, value in zip(bars, values)
        if not np.isnan(value)
    ]


def compute_moving_average(bars: Sequence[Bar], period: int) -> list[IndicatorPoint]:
    """Simple moving average of closes; one point per bar from index period-1."""
    return _to_points(bars, sma(_closes(bars), period))


def compute_oscillator(bars: Sequence[Bar], period: int) -> list[IndicatorPoint]:
    """Wilder RSI of closes in [0, 100]; one point per bar from index period."""
    return _to_points(bars, rsi(_closes(bars), period))


_CALCULATORS = {
    IndicatorName.SMA: compute_moving_average,
    IndicatorName.RSI: compute_oscillator,
}


class IndicatorService:
    """
    Indicator Engine Service.

    Calculates the enabled indicator overlays for a window.
    All calculations are deterministic and reproducible.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    def calculate(
        self,
        bars: Sequence[Bar],
        settings: dict[IndicatorName, IndicatorSettings],
    ) -> dict[str, list[IndicatorPoint]]:
        """Series for every enabled indicator, keyed by indicator name."""
        results = {}
        for indicator, config in settings.items():
            if not config.enabled:
                continue
            results[indicator.value] = _CALCULATORS[indicator](bars, config.period)
        return results


# Singleton instance management
_indicator_service: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service singleton."""
    global _indicator_service
    if _indicator_service is None:
        _indicator_service = IndicatorService()
    return _indicator_service
