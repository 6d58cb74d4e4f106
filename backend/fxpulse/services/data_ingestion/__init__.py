"""
Data Ingestion Service

CONTRACT:
    Input:  none (simulated source)
    Output: Bars pushed into the AnalysisSession one at a time

RESPONSIBILITIES:
    - Generate continuous random-walk OHLC bars per pair
    - Seed the session with history on start and after each reset
    - Push one bar per interval, strictly increasing in time

NO LLM INVOLVEMENT - Pure data generation.
"""

from fxpulse.services.data_ingestion.simulator import (
    PAIR_BASE_PRICES,
    generate_initial_data,
    get_base_price,
    next_bar,
)
from fxpulse.services.data_ingestion.feed import (
    FeedState,
    PriceFeed,
    get_price_feed,
    start_price_feed,
    stop_price_feed,
)

__all__ = [
    "PAIR_BASE_PRICES",
    "generate_initial_data",
    "get_base_price",
    "next_bar",
    "FeedState",
    "PriceFeed",
    "get_price_feed",
    "start_price_feed",
    "stop_price_feed",
]
