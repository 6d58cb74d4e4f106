"""
Signal Sampler

Rate limiter deciding which incoming bars trigger a prediction request.

A tick is sampled when `clock % every < phase_width`, so with the defaults
roughly one tick in four goes through. The clock is the process monotonic
clock rather than the bar's own timestamp, which keeps the sampling density
independent of bar spacing. The rule is best-effort: it bounds request
frequency, it does not schedule at an exact period.
"""

import logging
import time
from typing import Callable, Optional

from fxpulse.services.base import ConfigurationError

logger = logging.getLogger(__name__)


def monotonic_ms() -> int:
    return time.monotonic_ns() // 1_000_000


class SignalSampler:
    """
    Per-session sampling policy.

    - The first tick after construction or reset() is always sampled.
    - Nothing is sampled while a request for the session is in flight.
    - Otherwise the clock decides.
    """

    def __init__(
        self,
        every: int = 4,
        phase_width: int = 1,
        clock: Callable[[], int] = monotonic_ms,
    ):
        if every < 1 or not 0 < phase_width <= every:
            raise ConfigurationError(
                "SignalSampler",
                f"need every >= 1 and 0 < phase_width <= every, got {every}/{phase_width}",
            )
        self._every = every
        self._phase_width = phase_width
        self._clock = clock
        self._first_pending = True
        self.last_outcome: Optional[bool] = None

    @property
    def first_pending(self) -> bool:
        return self._first_pending

    def reset(self) -> None:
        """Start a new session: the next tick is sampled unconditionally."""
        self._first_pending = True
        self.last_outcome = None

    def should_sample(self, clock_value: Optional[int] = None, in_flight: bool = False) -> bool:
        """
        Decide whether the tick just appended should be forwarded.

        Args:
            clock_value: Clock reading to use; read from the clock when omitted
            in_flight: Whether a request for this session is still outstanding
        """
        if in_flight:
            outcome = False
        elif self._first_pending:
            self._first_pending = False
            outcome = True
        else:
            if clock_value is None:
                clock_value = self._clock()
            outcome = clock_value % self._every < self._phase_width

        self.last_outcome = outcome
        logger.debug(f"Sampler outcome={outcome} in_flight={in_flight}")
        return outcome
