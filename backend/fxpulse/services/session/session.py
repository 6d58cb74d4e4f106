"""
Analysis Session

Wires the Bar Window, Indicator Engine, Pattern Detector, Signal Sampler and
prediction collaborator together for one instrument, and publishes a
SessionView after every change.

CONCURRENCY:
    Single asyncio consumer. on_new_bar() runs the window update and all
    recomputation to completion before returning. The prediction request
    is the only suspending operation; it runs as a task so that bars keep
    flowing while it is outstanding. At most one request is in flight per
    session identity (pair, generation), and a response whose identity no
    longer matches the current session is discarded.
"""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from fxpulse.schemas.market import Bar, get_pair
from fxpulse.schemas.indicators import IndicatorName, IndicatorSettings, LineStyle
from fxpulse.schemas.patterns import (
    PatternEvent,
    PatternFilter,
    PatternName,
    default_pattern_config,
)
from fxpulse.schemas.prediction import (
    HISTORY_LENGTH_MAX,
    HISTORY_LENGTH_MIN,
    HISTORY_LENGTH_STEP,
    Prediction,
    PredictionRequest,
    PredictionResult,
    PredictionSettings,
    Signal,
    TradeHistoryEntry,
)
from fxpulse.schemas.session import SessionView
from fxpulse.services.base import ValidationError
from fxpulse.services.indicators import IndicatorService, get_indicator_service
from fxpulse.services.llm.interface import PredictionServiceInterface
from fxpulse.services.patterns import detect_patterns
from fxpulse.services.session.ledger import TradeHistory
from fxpulse.services.session.sampler import SignalSampler
from fxpulse.services.session.window import BarWindow

logger = logging.getLogger(__name__)

PREDICTION_ERROR_MESSAGE = "Failed to get AI prediction. Please check your API key and try again."

SessionKey = tuple[str, int]
ViewListener = Callable[[SessionView], None]
ResetListener = Callable[["AnalysisSession"], None]


def default_indicator_settings() -> dict[IndicatorName, IndicatorSettings]:
    return {
        IndicatorName.SMA: IndicatorSettings(enabled=False, period=20, color="#f6e05e"),
        IndicatorName.RSI: IndicatorSettings(enabled=False, period=14, color="#4299e1"),
    }


class AnalysisSession:
    """
    Session Orchestrator.

    Usage:
        session = AnalysisSession(pair="EUR/USD", predictor=PredictionService())
        session.add_listener(broadcaster.publish)
        await session.load_history(seed_bars)
        view = await session.on_new_bar(bar)
    """

    def __init__(
        self,
        pair: str,
        predictor: PredictionServiceInterface,
        trade_history_limit: int = 10,
        sampler: Optional[SignalSampler] = None,
        indicator_service: Optional[IndicatorService] = None,
        indicator_settings: Optional[dict[IndicatorName, IndicatorSettings]] = None,
        prediction_settings: Optional[PredictionSettings] = None,
        prediction_horizon_seconds: float = 60.0,
    ):
        self._pair = pair
        self._generation = 0
        self._predictor = predictor
        self._ledger = TradeHistory(trade_history_limit)
        self._sampler = sampler or SignalSampler()
        self._indicator_service = indicator_service or get_indicator_service()
        self._indicator_settings = indicator_settings or default_indicator_settings()
        self._prediction_settings = prediction_settings or PredictionSettings()
        # The window holds exactly the bars a prediction is allowed to see
        self._window = BarWindow(self._prediction_settings.history_length)
        self._prediction_horizon = prediction_horizon_seconds

        self._pattern_filter = PatternFilter()
        self._pattern_config = default_pattern_config()

        # Derived state, rebuilt from the window
        self._patterns: list[PatternEvent] = []
        self._indicators: dict = {}
        self._alert: Optional[PatternEvent] = None

        # Prediction state
        self._prediction: Optional[Prediction] = None
        self._signal: Optional[Signal] = None
        self._error: Optional[str] = None
        self._in_flight: Optional[SessionKey] = None
        # Stale requests keep running until they resolve; hold references here
        self._tasks: set[asyncio.Task] = set()

        self._listeners: list[ViewListener] = []
        self._reset_listeners: list[ResetListener] = []

    @classmethod
    def from_settings(cls, settings, predictor: PredictionServiceInterface) -> "AnalysisSession":
        """Build a session from application Settings."""
        return cls(
            pair=settings.default_pair,
            predictor=predictor,
            trade_history_limit=settings.trade_history_limit,
            sampler=SignalSampler(
                every=settings.sample_every,
                phase_width=settings.sample_phase_width,
            ),
            indicator_settings={
                IndicatorName.SMA: IndicatorSettings(
                    enabled=settings.sma_enabled,
                    period=settings.sma_period,
                    color=settings.sma_color,
                ),
                IndicatorName.RSI: IndicatorSettings(
                    enabled=settings.rsi_enabled,
                    period=settings.rsi_period,
                    color=settings.rsi_color,
                ),
            },
            prediction_settings=PredictionSettings(
                temperature=settings.prediction_temperature,
                history_length=settings.prediction_history_length,
            ),
            prediction_horizon_seconds=settings.prediction_horizon_seconds,
        )

    # ============ Properties ============

    @property
    def pair(self) -> str:
        return self._pair

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def session_key(self) -> SessionKey:
        return (self._pair, self._generation)

    @property
    def window(self) -> BarWindow:
        return self._window

    @property
    def prediction_settings(self) -> PredictionSettings:
        return self._prediction_settings

    @property
    def is_prediction_in_flight(self) -> bool:
        return self._in_flight == self.session_key

    @property
    def pattern_alert(self) -> Optional[PatternEvent]:
        return self._alert

    # ============ Listeners ============

    def add_listener(self, listener: ViewListener) -> None:
        """Called with a fresh SessionView after every update."""
        self._listeners.append(listener)

    def remove_listener(self, listener: ViewListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def add_reset_listener(self, listener: ResetListener) -> None:
        """Called after the session identity changes and the window is cleared."""
        self._reset_listeners.append(listener)

    def _publish(self) -> SessionView:
        view = self.view()
        for listener in self._listeners:
            listener(view)
        return view

    # ============ Bar Flow ============

    async def on_new_bar(self, bar: Bar) -> SessionView:
        """
        Append a bar, recompute patterns and indicators, and request a
        prediction if the sampler accepts this tick.

        Raises:
            BarOrderError: If the bar does not advance the window's time
        """
        self._window.append(bar)
        self._refresh()
        self._maybe_request_prediction()
        return self._publish()

    async def load_history(self, bars: Sequence[Bar]) -> SessionView:
        """Replace the window with a seed batch and treat it as one tick."""
        self._window.replace(bars)
        self._refresh()
        self._maybe_request_prediction()
        return self._publish()

    def _refresh(self) -> None:
        self._refresh_patterns()
        self._refresh_indicators()

    def _refresh_patterns(self) -> None:
        bars = self._window.bars()
        self._patterns = self.filter_patterns(detect_patterns(bars))

        latest = self._window.latest
        if latest is None:
            return
        for event in self._patterns:
            if event.time == latest.time:
                # Superseded, never queued
                self._alert = event
                break

    def _refresh_indicators(self) -> None:
        self._indicators = self._indicator_service.calculate(
            self._window.bars(), self._indicator_settings
        )

    def filter_patterns(self, events: Sequence[PatternEvent]) -> list[PatternEvent]:
        """Keep events whose class and name are both enabled."""
        return [
            event
            for event in events
            if self._pattern_filter.allows(event.type)
            and self._pattern_config.get(event.name, False)
        ]

    # ============ Prediction ============

    def _maybe_request_prediction(self) -> None:
        if not len(self._window):
            return
        if self._sampler.should_sample(in_flight=self.is_prediction_in_flight):
            self._start_prediction()

    def _start_prediction(self) -> None:
        key = self.session_key
        request = PredictionRequest(
            bars=self._window.tail(self._prediction_settings.history_length),
            pair=self._pair,
            settings=self._prediction_settings,
        )
        self._in_flight = key
        self._error = None
        logger.debug(f"Requesting prediction for {key} with {len(request.bars)} bars")
        task = asyncio.create_task(self._run_prediction(key, request))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run_prediction(self, key: SessionKey, request: PredictionRequest) -> None:
        try:
            result = await self._predictor.execute(request)
        except Exception as e:
            if key != self.session_key:
                logger.debug(f"Discarding failed prediction for stale session {key}")
                return
            logger.error(f"Failed to get prediction for {key[0]}: {e}")
            self._error = PREDICTION_ERROR_MESSAGE
        else:
            if key != self.session_key:
                logger.debug(f"Discarding stale prediction for {key}")
                return
            self._accept_prediction(result, request.bars[-1])
        finally:
            if self._in_flight == key:
                self._in_flight = None
        # The task result is never collected; listener errors stop here
        try:
            self._publish()
        except Exception as e:
            logger.error(f"Failed to publish prediction update for {key[0]}: {e}")

    def _accept_prediction(self, result: PredictionResult, last_bar: Bar) -> None:
        self._prediction = Prediction(
            time=last_bar.time + self._prediction_horizon,
            price=result.predicted_price,
        )
        self._signal = Signal(type=result.signal, rationale=result.rationale)
        self._ledger.record(
            TradeHistoryEntry(
                pair=self._pair,
                time=datetime.now(timezone.utc),
                price=last_bar.close,
                signal=result.signal,
            )
        )
        logger.info(f"{self._pair} signal {result.signal.value} at {last_bar.close:.5f}")

    async def wait_for_prediction(self) -> None:
        """Wait for every outstanding prediction task, stale ones included."""
        if self._tasks:
            await asyncio.gather(*self._tasks)

    async def close(self) -> None:
        """Cancel outstanding predictions (shutdown only)."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    # ============ Settings ============

    def set_pair(self, pair: str) -> SessionView:
        """
        Switch instrument; resets the window and the sampler.

        Raises:
            ValidationError: If the pair is not supported
        """
        try:
            pair = get_pair(pair).name
        except KeyError as e:
            raise ValidationError("AnalysisSession", str(e.args[0]))

        if pair == self._pair:
            return self.view()
        self._pair = pair
        return self._reset()

    def update_prediction_settings(
        self,
        temperature: Optional[float] = None,
        history_length: Optional[int] = None,
    ) -> SessionView:
        """
        Apply prediction settings. Temperatures are clamped into [0, 1];
        history lengths outside [20, 100] or off the step of 5 are ignored.
        A history-length change resets the session.
        """
        current = self._prediction_settings
        new_temperature = current.temperature
        new_history = current.history_length

        if temperature is not None:
            new_temperature = min(1.0, max(0.0, float(temperature)))
        if history_length is not None:
            if (
                HISTORY_LENGTH_MIN <= history_length <= HISTORY_LENGTH_MAX
                and history_length % HISTORY_LENGTH_STEP == 0
            ):
                new_history = history_length
            else:
                logger.warning(f"Ignoring invalid history length {history_length}")

        self._prediction_settings = PredictionSettings(
            temperature=new_temperature, history_length=new_history
        )
        if new_history != current.history_length:
            return self._reset()
        return self._publish()

    def update_indicator(
        self,
        name: IndicatorName,
        enabled: Optional[bool] = None,
        period: Optional[int] = None,
        color: Optional[str] = None,
        line_style: Optional[LineStyle] = None,
    ) -> SessionView:
        """Change one indicator overlay; periods below 2 are ignored."""
        changes = {}
        if enabled is not None:
            changes["enabled"] = enabled
        if period is not None:
            if period >= 2:
                changes["period"] = period
            else:
                logger.warning(f"Ignoring invalid {name.value} period {period}")
        if color is not None:
            changes["color"] = color
        if line_style is not None:
            changes["line_style"] = line_style

        current = self._indicator_settings[name]
        self._indicator_settings[name] = current.model_copy(update=changes)
        self._refresh_indicators()
        return self._publish()

    def set_pattern_filter(
        self,
        bullish: Optional[bool] = None,
        bearish: Optional[bool] = None,
        neutral: Optional[bool] = None,
    ) -> SessionView:
        changes = {
            key: value
            for key, value in (("bullish", bullish), ("bearish", bearish), ("neutral", neutral))
            if value is not None
        }
        self._pattern_filter = self._pattern_filter.model_copy(update=changes)
        self._refresh_patterns()
        return self._publish()

    def set_pattern_enabled(self, name: PatternName, enabled: bool) -> SessionView:
        self._pattern_config[name] = enabled
        self._refresh_patterns()
        return self._publish()

    def dismiss_alert(self) -> SessionView:
        self._alert = None
        return self._publish()

    def _reset(self) -> SessionView:
        self._generation += 1
        self._window = BarWindow(self._prediction_settings.history_length)
        self._sampler.reset()
        self._patterns = []
        self._indicators = {}
        self._alert = None
        self._prediction = None
        self._signal = None
        self._error = None
        logger.info(f"Session reset: pair={self._pair} generation={self._generation}")

        for listener in self._reset_listeners:
            listener(self)
        return self._publish()

    # ============ View ============

    def view(self) -> SessionView:
        bars = self._window.bars()
        return SessionView(
            pair=self._pair,
            generation=self._generation,
            bars=bars,
            current_price=bars[-1].close if bars else 0.0,
            previous_price=bars[-2].close if len(bars) > 1 else 0.0,
            indicators=self._indicators,
            indicator_settings={k.value: v for k, v in self._indicator_settings.items()},
            patterns=self._patterns,
            pattern_alert=self._alert,
            pattern_filter=self._pattern_filter,
            pattern_config=dict(self._pattern_config),
            prediction_settings=self._prediction_settings,
            prediction=self._prediction,
            signal=self._signal,
            trade_history=self._ledger.entries(),
            is_loading=self.is_prediction_in_flight,
            error=self._error,
        )


# Singleton instance
_session: Optional[AnalysisSession] = None


def get_session() -> AnalysisSession:
    """Get the analysis session singleton."""
    global _session
    if _session is None:
        from fxpulse.core.config import settings
        from fxpulse.services.llm import get_prediction_service

        _session = AnalysisSession.from_settings(settings, get_prediction_service())
    return _session


async def close_session() -> None:
    """Close the analysis session singleton."""
    global _session
    if _session:
        await _session.close()
        _session = None
