"""Tests for the clock-driven oscillator and the clocks themselves."""

import pytest

from pond.clock import Clock, ManualClock, MonotonicClock
from pond.oscillator import Oscillator


class TestManualClock:
    def test_advance_moves_time(self):
        clock = ManualClock(start=5.0)
        clock.advance(1.5)
        assert clock.now() == pytest.approx(6.5)
        assert clock.elapsed_seconds(5.0) == pytest.approx(1.5)

    def test_cannot_go_backwards(self):
        with pytest.raises(ValueError):
            ManualClock().advance(-1)

    def test_both_clocks_satisfy_protocol(self):
        assert isinstance(ManualClock(), Clock)
        assert isinstance(MonotonicClock(), Clock)


class TestOscillator:
    def test_starts_at_midpoint(self, manual_clock):
        oscillator = Oscillator(0, 1, 4, manual_clock)
        assert oscillator.value() == pytest.approx(0.5)

    def test_follows_a_sine_over_one_period(self, manual_clock):
        oscillator = Oscillator(0, 1, 4, manual_clock)
        expected = [1.0, 0.5, 0.0, 0.5]
        for value in expected:
            manual_clock.advance(1)
            assert oscillator.value() == pytest.approx(value, abs=1e-9)

    def test_speed_factor_shortens_the_period(self, manual_clock):
        oscillator = Oscillator(-10, 10, 4, manual_clock)
        oscillator.set_speed_factor(2)
        manual_clock.advance(0.5)
        assert oscillator.value() == pytest.approx(10)

    def test_value_stays_within_bounds(self, manual_clock, seeded_rng):
        oscillator = Oscillator(-3, 7, 2.7, manual_clock)
        for _ in range(200):
            manual_clock.advance(seeded_rng.uniform(0, 0.5))
            assert -3 <= oscillator.value() <= 7

    def test_phase_is_kept_in_one_turn(self, manual_clock):
        oscillator = Oscillator(0, 1, 1, manual_clock)
        manual_clock.advance(12.25)
        oscillator.value()
        assert 0 <= oscillator.phase < 2 * 3.141592653589794
