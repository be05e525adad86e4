"""Tests for floating petals."""

import pytest

from pond.color import same_rgb
from pond.draw_manager import DrawLayer
from pond.entities.petal import Petal
from pond.math_utils import Point


class TestPetal:
    def test_initial_heading_is_down_right(self, pond_env):
        for _ in range(20):
            petal = Petal(pond_env)
            assert petal.direction.dx >= 0
            assert petal.direction.dy <= 0
            assert petal.direction.magnitude() == pytest.approx(1)

    def test_tip_is_lighter_than_base(self, pond_env):
        petal = Petal(pond_env)
        assert sum(petal.tip_color[:3]) >= sum(petal.base_color[:3])

    def test_drifts_and_spins(self, pond_env, manual_clock):
        petal = Petal(pond_env, Point(400, 300))
        angle = petal.draw_angle
        manual_clock.advance(1)
        petal.update()

        assert petal.position.distance_to(Point(400, 300)) == pytest.approx(petal.speed)
        assert petal.draw_angle != angle

    def test_reenters_from_river_entry(self, pond_env):
        petal = Petal(pond_env, Point(900, -200))
        petal.update()

        bounds = pond_env.bounds
        assert bounds.distance_to_border(petal.position) == pytest.approx(-Petal.REENTRY_MARGIN)
        assert petal.direction.dx >= 0
        assert petal.direction.dy <= 0

    def test_sway_does_not_move_the_petal(self, pond_env, manual_clock):
        petal = Petal(pond_env, Point(400, 300))
        manual_clock.advance(1.3)
        petal.draw()
        assert petal.position == Point(400, 300)

    def test_draw(self, pond_env):
        petal = Petal(pond_env, Point(400, 300))
        petal.draw()
        assert pond_env.draw_manager.pending_count(DrawLayer.PETAL) == 1
        pond_env.draw_manager.flush()
        assert pond_env.renderer.calls["draw_petal"] == 1


def test_colors_come_from_the_configured_palette(pond_env, config_store):
    config_store.apply_overrides({"petal": {"colors": ["white"], "color_variation": 0}})
    petal = Petal(pond_env, config=config_store.config)
    assert same_rgb(petal.base_color, (255, 255, 255, 1.0))
