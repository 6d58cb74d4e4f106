"""
Price Simulator and Feed Tests
"""

import asyncio
import random

import pytest

from fxpulse.services.data_ingestion import (
    FeedState,
    PriceFeed,
    generate_initial_data,
    get_base_price,
    next_bar,
)
from fxpulse.services.session import AnalysisSession

from tests.conftest import FakePredictor, never_sampler


class TestSimulator:

    def test_initial_data_is_contiguous(self):
        bars = generate_initial_data("EUR/USD", count=50, end_time=10_000.0, rng=random.Random(1))

        assert len(bars) == 50
        assert bars[0].open == get_base_price("EUR/USD")
        assert bars[-1].time < 10_000.0
        for previous, current in zip(bars, bars[1:]):
            assert current.time > previous.time
            assert current.open == previous.close

    def test_bars_are_valid(self):
        bars = generate_initial_data("USD/JPY", count=100, rng=random.Random(2))
        for bar in bars:
            assert bar.low <= min(bar.open, bar.close)
            assert bar.high >= max(bar.open, bar.close)

    def test_next_bar_continues_walk(self):
        last = generate_initial_data("GBP/USD", count=1, rng=random.Random(3))[0]
        bar = next_bar(last, volatility=0.001, interval_seconds=5.0, rng=random.Random(4))

        assert bar.time == last.time + 5.0
        assert bar.open == last.close
        assert abs(bar.close - bar.open) <= bar.open * 0.001

    def test_unknown_pair_base_price(self):
        assert get_base_price("XAU/USD") == 1.0


class TestPriceFeed:

    def _session(self) -> AnalysisSession:
        return AnalysisSession(pair="EUR/USD", predictor=FakePredictor(), sampler=never_sampler())

    @pytest.mark.asyncio
    async def test_first_step_seeds_history(self):
        session = self._session()
        feed = PriceFeed(session, rng=random.Random(5))

        await feed.step()
        assert len(session.window) == session.prediction_settings.history_length

        last = session.window.latest
        seed_second = session.window.bars()[1]
        await feed.step()
        # Full window: the new bar pushes out the oldest seed bar
        assert len(session.window) == session.prediction_settings.history_length
        assert session.window.bars()[0] == seed_second
        assert session.window.latest.open == last.close
        await session.wait_for_prediction()

    @pytest.mark.asyncio
    async def test_session_reset_reseeds(self):
        session = self._session()
        feed = PriceFeed(session, rng=random.Random(6))
        await feed.step()

        session.set_pair("USD/JPY")
        assert len(session.window) == 0

        await feed.step()
        assert session.window.bars()[0].open == get_base_price("USD/JPY")
        await session.wait_for_prediction()

    @pytest.mark.asyncio
    async def test_start_and_stop(self):
        session = self._session()
        feed = PriceFeed(session, interval_seconds=0.01, rng=random.Random(7))

        await feed.start()
        assert feed.state == FeedState.RUNNING
        await asyncio.sleep(0.05)
        await feed.stop()

        assert feed.state == FeedState.STOPPED
        assert len(session.window) > 0
        await session.wait_for_prediction()
