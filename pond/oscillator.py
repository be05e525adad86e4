"""Bounded sinusoidal value generator.

The value is recomputed from clock time on every read rather than once per
tick, so oscillation speed does not depend on the frame rate.
"""

import math

from pond.clock import Clock

TWO_PI = 2 * math.pi


class Oscillator:
    """Oscillate between ``minimum`` and ``maximum`` once every ``period`` seconds.

    Attributes:
        minimum: Lowest value produced
        maximum: Highest value produced
        period: Seconds per full cycle at speed factor 1
        phase: Current phase in radians, kept within ``[0, 2*pi)``
        speed_factor: Multiplier on the oscillation speed
    """

    def __init__(self, minimum: float, maximum: float, period: float, clock: Clock, phase: float = 0.0) -> None:
        self.minimum = minimum
        self.maximum = maximum
        self.period = period
        self.phase = phase
        self.speed_factor = 1.0
        self.amplitude = (maximum - minimum) / 2
        self._clock = clock
        self._last_update_time = clock.now()
        self._value = minimum + self.amplitude

    def set_speed_factor(self, factor: float) -> None:
        self.speed_factor = factor

    def _update(self) -> None:
        now = self._clock.now()
        delta = now - self._last_update_time
        self._last_update_time = now

        current_phase = TWO_PI * (delta / (self.period / self.speed_factor)) + self.phase
        value = self.minimum + self.amplitude + self.amplitude * math.sin(current_phase)
        # Guard against float overshoot at the sine peaks.
        self._value = min(max(value, self.minimum), self.maximum)
        self.phase = current_phase % TWO_PI

    def value(self) -> float:
        """Advance the phase to the current time and return the value."""
        self._update()
        return self._value
