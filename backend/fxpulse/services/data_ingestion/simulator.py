"""
Price Simulator

Generates a continuous random walk of OHLC bars for development and demos.
"""

import random
import time
from typing import Optional

from fxpulse.schemas.market import Bar


# Base prices for supported pairs
PAIR_BASE_PRICES = {
    "EUR/USD": 1.0855,
    "USD/JPY": 151.20,
    "GBP/USD": 1.2650,
    "USD/CHF": 0.8850,
    "AUD/USD": 0.6550,
}

DEFAULT_VOLATILITY = 0.00014  # Max move per bar as a fraction of price
DEFAULT_INTERVAL_SECONDS = 2.0


def get_base_price(pair: str) -> float:
    """Get base price for a pair."""
    return PAIR_BASE_PRICES.get(pair, 1.0)


def _random_bar(
    bar_time: float,
    open_price: float,
    volatility: float,
    rng: random.Random,
) -> Bar:
    # Random walk; wicks always extend beyond the body
    step = open_price * volatility
    change = (rng.random() - 0.5) * step * 2
    close_price = open_price + change
    high_price = max(open_price, close_price) + rng.random() * step
    low_price = min(open_price, close_price) - rng.random() * step
    return Bar(
        time=bar_time,
        open=open_price,
        high=high_price,
        low=low_price,
        close=close_price,
    )


def next_bar(
    last: Bar,
    volatility: float = DEFAULT_VOLATILITY,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    rng: Optional[random.Random] = None,
) -> Bar:
    """Continue the walk from `last`: opens at its close, one interval later."""
    rng = rng or random.Random()
    return _random_bar(last.time + interval_seconds, last.close, volatility, rng)


def generate_initial_data(
    pair: str,
    count: int = 50,
    end_time: Optional[float] = None,
    volatility: float = DEFAULT_VOLATILITY,
    interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    rng: Optional[random.Random] = None,
) -> list[Bar]:
    """Generate `count` contiguous bars, the last one opening before `end_time`."""
    if end_time is None:
        end_time = time.time()
    rng = rng or random.Random()

    bars = []
    price = get_base_price(pair)
    bar_time = end_time - count * interval_seconds

    for _ in range(count):
        bar = _random_bar(bar_time, price, volatility, rng)
        bars.append(bar)
        price = bar.close
        bar_time += interval_seconds

    return bars
