"""
Analysis Session Service

CONTRACT:
    Input:  Bars pushed one at a time (on_new_bar) + settings changes
    Output: SessionView published to listeners after every change

RESPONSIBILITIES:
    - Own the sliding Bar Window and the trade-history ledger
    - Recompute patterns and indicators on every bar
    - Gate prediction requests through the Signal Sampler
    - Guard against concurrent and stale prediction responses
    - Apply pattern filters and maintain the single active pattern alert
"""

from fxpulse.services.session.ledger import TradeHistory
from fxpulse.services.session.sampler import SignalSampler
from fxpulse.services.session.session import (
    PREDICTION_ERROR_MESSAGE,
    AnalysisSession,
    close_session,
    get_session,
)
from fxpulse.services.session.window import BarWindow

__all__ = [
    "AnalysisSession",
    "BarWindow",
    "PREDICTION_ERROR_MESSAGE",
    "SignalSampler",
    "TradeHistory",
    "close_session",
    "get_session",
]
