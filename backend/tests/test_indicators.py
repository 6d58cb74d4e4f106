"""
Indicator Engine Tests
"""

import random

import numpy as np
import pytest

from fxpulse.schemas.indicators import IndicatorName, IndicatorSettings
from fxpulse.services.base import ConfigurationError
from fxpulse.services.data_ingestion import generate_initial_data
from fxpulse.services.indicators import (
    IndicatorService,
    compute_moving_average,
    compute_oscillator,
)
from fxpulse.services.indicators.calculations import rsi, sma

from tests.conftest import make_bar, rising_bars


class TestSMA:

    def test_values_and_warmup(self):
        result = sma(np.array([1.0, 2.0, 3.0, 4.0, 5.0]), 3)
        assert np.isnan(result[0]) and np.isnan(result[1])
        assert result[2:].tolist() == pytest.approx([2.0, 3.0, 4.0])

    def test_points_start_at_period_minus_one(self):
        bars = rising_bars(25)
        points = compute_moving_average(bars, 20)

        assert len(points) == len(bars) - 20 + 1
        assert points[0].time == bars[19].time
        expected = sum(b.close for b in bars[:20]) / 20
        assert points[0].value == pytest.approx(expected)

    def test_short_window_is_empty(self):
        assert compute_moving_average(rising_bars(5), 20) == []

    def test_rejects_non_positive_period(self):
        with pytest.raises(ConfigurationError):
            compute_moving_average(rising_bars(5), 0)


class TestRSI:

    def test_monotonic_rise_saturates_at_100(self):
        points = compute_oscillator(rising_bars(20), 14)
        assert points[-1].value == 100.0

    def test_first_point_at_period(self):
        bars = rising_bars(20)
        points = compute_oscillator(bars, 14)
        assert len(points) == len(bars) - 14
        assert points[0].time == bars[14].time

    def test_wilder_smoothing(self):
        result = rsi(np.array([1.0, 2.0, 1.0, 3.0]), 2)
        assert result[2] == pytest.approx(50.0)
        # avg_gain = (0.5 + 2) / 2, avg_loss = (0.5 + 0) / 2
        assert result[3] == pytest.approx(100.0 - 100.0 / 6.0)

    def test_needs_period_plus_one_closes(self):
        assert compute_oscillator(rising_bars(14), 14) == []
        assert len(compute_oscillator(rising_bars(15), 14)) == 1

    def test_values_within_bounds(self):
        bars = generate_initial_data("EUR/USD", count=80, rng=random.Random(7))
        values = [p.value for p in compute_oscillator(bars, 14)]
        assert values
        assert all(0.0 <= v <= 100.0 for v in values)

    def test_flat_series_is_100(self):
        bars = [make_bar(1000 + i, 1.1, 1.1) for i in range(16)]
        assert compute_oscillator(bars, 14)[-1].value == 100.0

    def test_rejects_non_positive_period(self):
        with pytest.raises(ConfigurationError):
            rsi(np.array([1.0, 2.0]), -3)


class TestIndicatorService:

    def test_only_enabled_indicators_are_returned(self):
        service = IndicatorService()
        settings = {
            IndicatorName.SMA: IndicatorSettings(enabled=True, period=5),
            IndicatorName.RSI: IndicatorSettings(enabled=False, period=14),
        }
        result = service.calculate(rising_bars(10), settings)

        assert set(result) == {"sma"}
        assert len(result["sma"]) == 6

    def test_does_not_mutate_window(self):
        bars = rising_bars(30)
        snapshot = list(bars)
        settings = {
            IndicatorName.SMA: IndicatorSettings(enabled=True, period=20),
            IndicatorName.RSI: IndicatorSettings(enabled=True, period=14),
        }
        IndicatorService().calculate(bars, settings)
        assert bars == snapshot
