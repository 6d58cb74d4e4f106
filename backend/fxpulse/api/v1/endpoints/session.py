"""
Session API Endpoints

Snapshot and settings for the single analysis session. Every mutating
endpoint returns the resulting SessionView; the same view is also pushed to
SSE subscribers.
"""

import logging

from fastapi import APIRouter

from fxpulse.schemas.indicators import IndicatorName, IndicatorSettingsUpdate
from fxpulse.schemas.market import CURRENCY_PAIRS, CurrencyPair
from fxpulse.schemas.patterns import PatternFilterUpdate, PatternName, PatternToggle
from fxpulse.schemas.prediction import PredictionSettingsUpdate
from fxpulse.schemas.session import PairChange, SessionView
from fxpulse.services.session import get_session

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=SessionView)
async def get_session_view():
    """Current session snapshot."""
    return get_session().view()


@router.get("/pairs", response_model=list[CurrencyPair])
async def list_pairs():
    """Supported currency pairs."""
    return CURRENCY_PAIRS


@router.put("/pair", response_model=SessionView)
async def change_pair(request: PairChange):
    """
    Switch the analysed instrument.

    Clears the bar window and restarts the sampler; a prediction still
    outstanding for the previous pair is discarded when it returns.
    Unsupported pairs are rejected with 400.
    """
    logger.info(f"Switching pair to {request.pair}")
    return get_session().set_pair(request.pair)


@router.put("/prediction", response_model=SessionView)
async def update_prediction_settings(request: PredictionSettingsUpdate):
    """Update temperature and/or history length (a new length resets the session)."""
    return get_session().update_prediction_settings(
        temperature=request.temperature,
        history_length=request.history_length,
    )


@router.put("/indicators/{name}", response_model=SessionView)
async def update_indicator(name: IndicatorName, request: IndicatorSettingsUpdate):
    """Toggle or restyle one indicator overlay."""
    return get_session().update_indicator(
        name,
        enabled=request.enabled,
        period=request.period,
        color=request.color,
        line_style=request.line_style,
    )


@router.put("/patterns/filter", response_model=SessionView)
async def update_pattern_filter(request: PatternFilterUpdate):
    """Show or hide bullish, bearish and neutral patterns."""
    return get_session().set_pattern_filter(
        bullish=request.bullish,
        bearish=request.bearish,
        neutral=request.neutral,
    )


@router.put("/patterns/{name}", response_model=SessionView)
async def toggle_pattern(name: PatternName, request: PatternToggle):
    """Enable or disable one named pattern."""
    return get_session().set_pattern_enabled(name, request.enabled)


@router.delete("/alert", response_model=SessionView)
async def dismiss_alert():
    """Dismiss the active pattern alert."""
    return get_session().dismiss_alert()
