"""Tests for drifting surface waves."""

import pytest

from pond.config.pond_config import PondConfig
from pond.draw_manager import DrawLayer
from pond.entities.wave import Wave
from pond.math_utils import Point, Vector

RIVER_CONFIG = PondConfig().with_overrides({"wave": {"river_mode": True}})


def test_moves_at_constant_speed(pond_env, manual_clock):
    wave = Wave(pond_env, Point(400, 300), Vector.RIGHT.copy())
    manual_clock.advance(2)
    wave.update()
    assert wave.position == Point(400 + 2 * wave.speed, 300)


def test_speed_and_size_come_from_config_and_width(pond_env):
    wave = Wave(pond_env)
    low, high = pond_env.config.wave.speeds
    assert low <= wave.speed <= high
    assert 800 / 20 <= wave.size <= 800 / 15


def test_stays_put_until_far_outside(pond_env, manual_clock):
    wave = Wave(pond_env, Point(400, -450), Vector.DOWN.copy())
    manual_clock.advance(1)
    wave.update()
    assert wave.position.y == pytest.approx(-450 - wave.speed)


def test_river_wave_reenters_from_top_left_heading_down_right(pond_env):
    wave = Wave(pond_env, Point(400, -600), Vector.DOWN.copy(), config=RIVER_CONFIG)
    wave.update()

    on_top = wave.position.y == pytest.approx(600 + Wave.REENTRY_DISTANCE) and 0 <= wave.position.x <= 400
    on_left = wave.position.x == pytest.approx(-Wave.REENTRY_DISTANCE) and 300 <= wave.position.y <= 600
    assert on_top or on_left
    assert wave.direction.dx >= 0
    assert wave.direction.dy <= 0


def test_reentry_points_back_toward_the_surface(pond_env):
    wave = Wave(pond_env, Point(1500, 300), Vector.RIGHT.copy())
    wave.update()

    bounds = pond_env.bounds
    assert bounds.distance_to_border(wave.position) == pytest.approx(-Wave.REENTRY_DISTANCE)
    ahead = wave.position.apply_vector(wave.direction)
    assert bounds.distance_to_border(ahead) > bounds.distance_to_border(wave.position)


def test_river_mode_waves_start_heading_down_right(pond_env):
    for _ in range(20):
        wave = Wave(pond_env, config=RIVER_CONFIG)
        assert wave.direction.dx >= 0 and wave.direction.dy <= 0


def test_draw(pond_env):
    wave = Wave(pond_env, Point(400, 300), Vector.UP.copy())
    wave.draw()
    assert pond_env.draw_manager.pending_count(DrawLayer.WAVE) == 1
    pond_env.draw_manager.flush()
    assert pond_env.renderer.calls["draw_wave"] == 1
