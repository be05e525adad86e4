"""Tests for the fixed-timestep frame driver."""

import logging

import pytest

from pond.frame_driver import FrameDriver


@pytest.fixture
def driver(pond_env):
    pond_env.initialize_objects()
    return FrameDriver(pond_env, tick_rate=100, max_ticks_per_advance=10)


class TestAdvance:
    def test_first_call_only_starts_the_clock(self, driver):
        assert driver.advance(now=5.0) == 0
        assert driver.tick_count == 0

    def test_runs_whole_ticks_and_keeps_the_remainder(self, driver):
        driver.advance(now=0.0)
        assert driver.advance(now=0.055) == 5
        assert driver.advance(now=0.061) == 1
        assert driver.tick_count == 6

    def test_caps_ticks_when_far_behind(self, driver, caplog):
        driver.advance(now=0.0)
        with caplog.at_level(logging.WARNING, logger="pond.frame_driver"):
            assert driver.advance(now=2.0) == 10
        assert "fell behind" in caplog.text
        # backlog was dropped
        assert driver.advance(now=2.005) == 0

    def test_start_discards_elapsed_time(self, driver, manual_clock):
        manual_clock.advance(3)
        driver.start()
        assert driver.advance() == 0

    def test_uses_the_environment_clock(self, driver, manual_clock):
        driver.start()
        manual_clock.advance(0.035)
        assert driver.advance() == 3


class TestTick:
    def test_tick_clears_and_renders(self, driver, pond_env):
        driver.tick()
        renderer = pond_env.renderer
        assert renderer.frames == 1
        assert renderer.calls["fill_surface"] == 1
        assert renderer.calls["draw_fish"] == len(pond_env.koi_fish_map)
        assert pond_env.draw_manager.pending_count() == 0


class TestPause:
    def test_paused_driver_does_not_tick(self, driver):
        driver.advance(now=0.0)
        driver.pause()
        assert driver.paused
        assert driver.advance(now=1.0) == 0

    def test_resume_resets_the_pond(self, driver, pond_env):
        fish_ids = set(pond_env.koi_fish_map)
        driver.pause()
        driver.resume()

        assert not driver.paused
        assert not fish_ids & set(pond_env.koi_fish_map)
        assert len(pond_env.koi_fish_map) == len(fish_ids)


@pytest.mark.parametrize("kwargs", [{"tick_rate": 0}, {"max_ticks_per_advance": 0}])
def test_rejects_bad_settings(pond_env, kwargs):
    with pytest.raises(ValueError):
        FrameDriver(pond_env, **kwargs)
