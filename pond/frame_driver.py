"""Fixed-timestep driver for the pond.

The display calls ``advance()`` at whatever rate it refreshes; the driver
turns the elapsed wall time into a whole number of simulation ticks at
``tick_rate`` Hz. Each tick clears the render backend, updates and draws
every agent, then flushes the draw manager.
"""

import logging
from typing import Optional

from pond.config.display import MAX_TICKS_PER_ADVANCE, TARGET_TICK_RATE
from pond.environment import PondEnvironment

logger = logging.getLogger(__name__)


class FrameDriver:
    """Accumulator-based tick scheduler around a ``PondEnvironment``.

    Usage:
        driver = FrameDriver(env)
        driver.start()
        while running:
            driver.advance()
    """

    def __init__(
        self,
        environment: PondEnvironment,
        tick_rate: float = TARGET_TICK_RATE,
        max_ticks_per_advance: int = MAX_TICKS_PER_ADVANCE,
    ) -> None:
        if tick_rate <= 0:
            raise ValueError(f"tick_rate must be positive, got {tick_rate}")
        if max_ticks_per_advance < 1:
            raise ValueError(f"max_ticks_per_advance must be at least 1, got {max_ticks_per_advance}")
        self.environment = environment
        self.tick_interval = 1.0 / tick_rate
        self.max_ticks_per_advance = max_ticks_per_advance

        self._accumulator = 0.0
        self._last_time: Optional[float] = None
        self._paused = False
        self._tick_count = 0

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def tick_count(self) -> int:
        """Number of ticks run since construction."""
        return self._tick_count

    def start(self) -> None:
        """Begin measuring time from now; earlier elapsed time is discarded."""
        self._accumulator = 0.0
        self._last_time = self.environment.clock.now()

    def advance(self, now: Optional[float] = None) -> int:
        """Run every tick that has become due since the previous call.

        Args:
            now: Current clock reading (default: the environment's clock)

        Returns:
            Number of ticks run.
        """
        if self._paused:
            return 0
        if now is None:
            now = self.environment.clock.now()
        if self._last_time is None:
            self._last_time = now
            return 0

        self._accumulator += max(0.0, now - self._last_time)
        self._last_time = now

        due = int(self._accumulator // self.tick_interval)
        if due > self.max_ticks_per_advance:
            logger.warning(
                "Frame driver fell behind by %d ticks; dropping %d",
                due,
                due - self.max_ticks_per_advance,
            )
            due = self.max_ticks_per_advance
            self._accumulator = 0.0
        else:
            self._accumulator -= due * self.tick_interval

        for _ in range(due):
            self.tick()
        return due

    def tick(self) -> None:
        """Run one simulation step and render it."""
        env = self.environment
        env.renderer.clear()
        env.update_all_objects()
        env.draw_all_objects()
        env.draw_manager.flush()
        self._tick_count += 1

    def pause(self) -> None:
        if not self._paused:
            self._paused = True
            logger.debug("Frame driver paused after %d ticks", self._tick_count)

    def resume(self) -> None:
        """Reset the pond and restart the clock accumulator."""
        self.environment.reset_environment()
        self._paused = False
        self.start()
        logger.debug("Frame driver resumed")
