"""Tests for food drift, dispersion and two-phase eating."""

import pytest

from pond.draw_manager import DrawLayer
from pond.entities.food import Food
from pond.math_utils import Point


@pytest.fixture
def food(pond_env):
    return pond_env.add_food(Point(100, 100))


class TestFoodMovement:
    def test_drifts_down_and_right(self, food, manual_clock):
        manual_clock.advance(1)
        food.update()
        assert food.position.x > 100
        assert food.position.y < 100
        assert food.position.distance_to(Point(100, 100)) == pytest.approx(Food.SPEED)

    def test_particles_disperse_up_to_a_limit(self, food, manual_clock):
        manual_clock.advance(1)
        food.update()
        assert food.particle_dispersion == pytest.approx(1 + Food.DISPERSION_RATE)

        for _ in range(10):
            manual_clock.advance(1)
            food.update()
        assert food.particle_dispersion == Food.MAX_DISPERSION

    def test_removed_when_off_surface(self, pond_env):
        food = pond_env.add_food(Point(-5, 100))
        food.update()
        assert not pond_env.has_food(food)

    def test_add_food_copies_the_point(self, pond_env):
        point = Point(50, 50)
        food = pond_env.add_food(point)
        food.position.x = 0
        assert point == Point(50, 50)


class TestFoodEating:
    def test_particle_count(self, food):
        assert 8 <= len(food.particles) <= 10

    def test_particles_decay_with_clock_time(self, food, manual_clock):
        count = len(food.particles)
        food.on_eaten()

        manual_clock.advance(0.075)
        food.update()
        assert len(food.particles) == count - 2

    def test_removed_when_last_particle_gone(self, food, pond_env, manual_clock):
        food.on_eaten()
        manual_clock.advance(1)
        food.update()
        assert food.particles == []
        assert not pond_env.has_food(food)

    def test_on_eaten_is_idempotent(self, food, manual_clock):
        food.on_eaten()
        manual_clock.advance(0.02)
        food.on_eaten()
        manual_clock.advance(0.015)
        food.update()
        # decay is timed from the first call
        assert len(food.particles) < 10
        assert food.is_eaten


def test_draw_schedules_one_op_per_particle(food, pond_env):
    food.draw()
    assert pond_env.draw_manager.pending_count(DrawLayer.FOOD) == len(food.particles)
    pond_env.draw_manager.flush()
    assert pond_env.renderer.calls["draw_food_particle"] == len(food.particles)
