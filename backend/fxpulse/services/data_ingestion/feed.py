"""
Simulated Price Feed

Pushes simulated bars into the analysis session at a fixed interval.

Features:
- Seeds the session with history on start and after every session reset
- Continuity: each bar opens at the previous bar's close
- Errors from a single bar are logged and the loop keeps running
"""

import asyncio
import logging
import random
from enum import Enum
from typing import Optional

from fxpulse.schemas.market import Bar
from fxpulse.services.data_ingestion.simulator import (
    DEFAULT_INTERVAL_SECONDS,
    DEFAULT_VOLATILITY,
    generate_initial_data,
    next_bar,
)
from fxpulse.services.session import AnalysisSession

logger = logging.getLogger(__name__)


class FeedState(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class PriceFeed:
    """
    Drives an AnalysisSession with simulated bars.

    Usage:
        feed = PriceFeed(session)
        await feed.start()
        # Bars are pushed every interval; views go to session listeners
        await feed.stop()
    """

    def __init__(
        self,
        session: AnalysisSession,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        volatility: float = DEFAULT_VOLATILITY,
        rng: Optional[random.Random] = None,
    ):
        self._session = session
        self._interval = interval_seconds
        self._volatility = volatility
        self._rng = rng or random.Random()
        self._state = FeedState.STOPPED
        self._task: Optional[asyncio.Task] = None
        self._last_bar: Optional[Bar] = None
        self._needs_seed = True

        session.add_reset_listener(self._on_session_reset)

    @property
    def state(self) -> FeedState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state == FeedState.RUNNING

    async def start(self) -> bool:
        """Start pushing bars."""
        if self.is_running:
            logger.warning("Price feed already running")
            return True

        self._state = FeedState.RUNNING
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Price feed started")
        return True

    async def stop(self) -> None:
        """Stop the feed; the next start reseeds the session."""
        self._state = FeedState.STOPPED

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        self._last_bar = None
        self._needs_seed = True
        logger.info("Price feed stopped")

    async def restart(self) -> bool:
        """Stop and start again with fresh history."""
        await self.stop()
        return await self.start()

    def _on_session_reset(self, session: AnalysisSession) -> None:
        self._last_bar = None
        self._needs_seed = True

    async def seed(self) -> None:
        """Load fresh history sized to the session's prediction history length."""
        bars = generate_initial_data(
            self._session.pair,
            count=self._session.prediction_settings.history_length,
            volatility=self._volatility,
            interval_seconds=self._interval,
            rng=self._rng,
        )
        self._needs_seed = False
        self._last_bar = bars[-1]
        await self._session.load_history(bars)
        logger.info(f"Seeded {len(bars)} bars for {self._session.pair}")

    async def step(self) -> None:
        """Push one bar, seeding first when the session needs history."""
        if self._needs_seed or self._last_bar is None:
            await self.seed()
            return

        bar = next_bar(
            self._last_bar,
            volatility=self._volatility,
            interval_seconds=self._interval,
            rng=self._rng,
        )
        self._last_bar = bar
        await self._session.on_new_bar(bar)

    async def _run_loop(self) -> None:
        """Main loop: one bar per interval until stopped."""
        while self.is_running:
            try:
                await self.step()
            except Exception as e:
                logger.error(f"Price feed error: {e}")
            await asyncio.sleep(self._interval)


# Singleton instance
_price_feed: Optional[PriceFeed] = None


def get_price_feed() -> PriceFeed:
    """Get the price feed singleton bound to the session singleton."""
    global _price_feed
    if _price_feed is None:
        from fxpulse.core.config import settings
        from fxpulse.services.session import get_session

        _price_feed = PriceFeed(
            get_session(),
            interval_seconds=settings.feed_interval_seconds,
            volatility=settings.feed_volatility,
        )
    return _price_feed


async def start_price_feed() -> PriceFeed:
    """Start the price feed."""
    feed = get_price_feed()
    await feed.start()
    return feed


async def stop_price_feed() -> None:
    """Stop the price feed."""
    global _price_feed
    if _price_feed:
        await _price_feed.stop()
        _price_feed = None
