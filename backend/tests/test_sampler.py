"""
Signal Sampler Tests
"""

import pytest

from fxpulse.services.base import ConfigurationError
from fxpulse.services.session import SignalSampler

from tests.conftest import CounterClock


class TestSignalSampler:

    def test_first_tick_always_sampled(self):
        sampler = SignalSampler(clock=lambda: 3)
        assert sampler.should_sample() is True
        assert sampler.should_sample() is False

    def test_in_flight_declines_without_consuming_first_tick(self):
        sampler = SignalSampler(clock=lambda: 0)
        assert sampler.should_sample(in_flight=True) is False
        assert sampler.first_pending
        assert sampler.should_sample() is True

    def test_reset_restores_first_tick(self):
        sampler = SignalSampler(clock=lambda: 2)
        sampler.should_sample()
        assert sampler.should_sample() is False

        sampler.reset()
        assert sampler.should_sample() is True

    def test_explicit_clock_value(self):
        sampler = SignalSampler(every=4, phase_width=1)
        sampler.should_sample()
        assert sampler.should_sample(clock_value=8) is True
        assert sampler.should_sample(clock_value=9) is False
        assert sampler.last_outcome is False

    def test_eleven_ticks_first_sampled(self):
        sampler = SignalSampler(clock=CounterClock(start=1))
        outcomes = [sampler.should_sample() for _ in range(11)]
        assert outcomes[0] is True
        assert sum(outcomes) < 11

    def test_sampled_fraction_near_one_in_four(self):
        sampler = SignalSampler(clock=CounterClock())
        outcomes = [sampler.should_sample() for _ in range(100)]
        fraction = sum(outcomes) / len(outcomes)
        assert 0.20 <= fraction <= 0.30

    @pytest.mark.parametrize("every,phase_width", [(0, 1), (4, 0), (4, 5)])
    def test_rejects_invalid_configuration(self, every, phase_width):
        with pytest.raises(ConfigurationError):
            SignalSampler(every=every, phase_width=phase_width)
