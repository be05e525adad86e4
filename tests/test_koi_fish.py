"""Tests for koi fish movement, food seeking and drawing."""

import pytest

from pond.draw_manager import DrawLayer
from pond.entities.koi_fish import KoiFish
from pond.entities.ripple import Ripple
from pond.math_utils import Point, Vector


def make_fish(env, x, y, direction=None, size=0.8, target=None):
    fish = KoiFish(
        env,
        position=Point(x, y),
        direction=direction or Vector.UP.copy(),
        target_point=target,
        size=size,
    )
    env.add_agent(fish)
    return fish


class TestFishSetup:
    def test_lengths_scale_with_size(self, pond_env):
        fish = make_fish(pond_env, 400, 300, size=0.5)
        proportions = pond_env.config.fish.proportions
        assert fish.lengths["trunk_length"] == pytest.approx(proportions.trunk_length * 0.5)

    def test_bigger_fish_are_slower(self, pond_env):
        small = make_fish(pond_env, 400, 300, size=0.7)
        big = make_fish(pond_env, 400, 300, size=1.0)
        assert big.base_speed < small.base_speed
        assert big.base_speed == pytest.approx(15)

    def test_direction_is_normalized(self, pond_env):
        fish = make_fish(pond_env, 400, 300, direction=Vector(3, 4))
        assert fish.direction.magnitude() == pytest.approx(1)

    def test_follow_points_sit_behind_the_fish(self, pond_env):
        fish = make_fish(pond_env, 400, 300)
        follow_distance = pond_env.config.fish.follow_distance
        for point in (fish.left_follow_point, fish.right_follow_point):
            assert fish.position.distance_to(point) == pytest.approx(follow_distance)
            assert point.y < fish.position.y


class TestFishMovement:
    def test_turns_toward_target_at_a_limited_rate(self, pond_env, manual_clock):
        fish = make_fish(pond_env, 400, 300, target=Point(700, 300))
        manual_clock.advance(1)
        fish.update()

        assert 0 < fish.direction.angle() <= KoiFish.MAX_ROTATION_ANGLE_PER_SECOND
        assert fish.direction.magnitude() == pytest.approx(1)

    def test_moves_at_base_speed(self, pond_env, manual_clock):
        fish = make_fish(pond_env, 400, 300, target=Point(400, 550))
        manual_clock.advance(0.5)
        fish.update()
        assert fish.position.distance_to(Point(400, 300)) == pytest.approx(fish.base_speed * 0.5)

    def test_no_turn_inside_deadband(self, pond_env, manual_clock):
        fish = make_fish(pond_env, 400, 300, target=Point(401, 550))
        manual_clock.advance(0.1)
        fish.update()
        assert fish.direction == Vector.UP

    def test_out_of_bounds_fish_is_moved_to_an_edge(self, pond_env):
        fish = make_fish(pond_env, -100, 300)
        fish.update()
        assert pond_env.bounds.distance_to_border(fish.position) == pytest.approx(-16)
        assert fish.direction.magnitude() == pytest.approx(1)

    def test_new_target_is_far_enough_away(self, pond_env):
        fish = make_fish(pond_env, 400, 300)
        fish.set_new_random_target_point()
        assert fish.position.distance_to(fish.target_point) >= KoiFish.NEW_TARGET_MIN_DISTANCE

    def test_new_target_on_a_tiny_pond_stays_on_surface(self, seeded_rng, manual_clock):
        from pond.environment import PondEnvironment

        env = PondEnvironment(120, 80, clock=manual_clock, rng=seeded_rng)
        fish = make_fish(env, 60, 40)
        fish.set_new_random_target_point()
        assert not env.bounds.is_out_of_bounds(fish.target_point)

    def test_reaching_target_picks_a_new_one(self, pond_env, manual_clock):
        fish = make_fish(pond_env, 400, 300, target=Point(400, 320))
        manual_clock.advance(0.1)
        fish.update()
        assert fish.target_point != Point(400, 320)


class TestFoodSeeking:
    def test_food_retargets_a_nearby_fish_in_one_update(self, pond_env):
        fish = make_fish(pond_env, 150, 150, target=Point(700, 500))
        food = pond_env.add_food(Point(100, 100))

        pond_env.update_all_objects()

        assert fish.desired_food is food
        assert fish.target_point == Point(100, 100)
        assert fish.tail_oscillator.speed_factor == 2

    def test_food_out_of_range_is_ignored(self, pond_env):
        fish = make_fish(pond_env, 50, 50)
        pond_env.add_food(Point(750, 550))

        pond_env.update_all_objects()

        assert fish.desired_food is None

    def test_close_food_is_eaten(self, pond_env):
        fish = make_fish(pond_env, 105, 100)
        food = pond_env.add_food(Point(100, 100))

        pond_env.update_all_objects()
        assert fish.desired_food is food
        pond_env.update_all_objects()

        assert food.is_eaten
        assert fish.desired_food is None

    def test_fish_chooses_the_closest_food(self, pond_env):
        fish = make_fish(pond_env, 200, 200)
        pond_env.add_food(Point(300, 200))
        near = pond_env.add_food(Point(160, 200))

        pond_env.update_all_objects()

        assert fish.desired_food is near

    def test_eaten_food_is_not_chased(self, pond_env):
        fish = make_fish(pond_env, 200, 200)
        food = pond_env.add_food(Point(260, 200))
        food.on_eaten()

        pond_env.update_all_objects()

        assert fish.desired_food is None

    def test_fast_approach_when_aligned(self, pond_env):
        fish = make_fish(pond_env, 200, 200, direction=Vector.RIGHT.copy())
        pond_env.add_food(Point(300, 200))

        pond_env.grid.rebuild(pond_env.all_agents())
        fish._food_behavior()

        assert fish.speed == pytest.approx(fish.base_speed * 5)
        assert fish.turn_multiplier == 1

    @pytest.mark.parametrize(
        "food_x, multiplier",
        [
            (230, 4),  # close and misaligned
            (300, 2),  # further off to the side
        ],
    )
    def test_chasing_turns_faster_but_stays_rate_limited(self, pond_env, manual_clock, food_x, multiplier):
        fish = make_fish(pond_env, 200, 200)
        pond_env.add_food(Point(food_x, 200))

        manual_clock.advance(0.1)
        pond_env.update_all_objects()

        limit = KoiFish.MAX_ROTATION_ANGLE_PER_SECOND * 0.1 * multiplier
        assert fish.turn_multiplier == multiplier
        assert fish.direction.angle() == pytest.approx(limit)
        assert fish.direction.angle() <= limit + 1e-9


class TestRipplesAndDrawing:
    def test_ripples_are_spaced_out(self, pond_env, manual_clock):
        fish = make_fish(pond_env, 400, 300)
        fish.generate_ripples()
        assert len(pond_env.ripple_map) == 0

        manual_clock.advance(Ripple.GENERATION_GAP + 0.1)
        fish.generate_ripples()
        fish.generate_ripples()
        assert len(pond_env.ripple_map) == 1

    def test_draw_points_are_complete(self, pond_env):
        fish = make_fish(pond_env, 400, 300)
        points = fish.draw_points(Vector.UP.copy())
        assert len(points) == 30
        assert points["head_curve_anchor"].y > points["center"].y > points["tail_tip"].y

    def test_draw_points_follow_heading(self, pond_env):
        fish = make_fish(pond_env, 400, 300)
        points = fish.draw_points(Vector.RIGHT.copy())
        assert points["head_curve_anchor"].x > points["center"].x
        assert points["head_curve_anchor"].y == pytest.approx(300)

    def test_draw_schedules_shadow_and_body(self, pond_env):
        fish = make_fish(pond_env, 400, 300)
        fish.draw()
        assert pond_env.draw_manager.pending_count(DrawLayer.FISH) == 2

        pond_env.draw_manager.flush()
        assert pond_env.renderer.calls["draw_fish"] == 1
        assert pond_env.renderer.calls["draw_fish_shadow"] == 1

    def test_simplified_draw_uses_dev_layer(self, pond_env, config_store):
        config_store.apply_overrides({"fish": {"draw_simplified": True}})
        fish = make_fish(pond_env, 400, 300)
        fish.config = config_store.config
        fish.draw()

        assert pond_env.draw_manager.pending_count(DrawLayer.FISH) == 0
        assert pond_env.draw_manager.pending_count(DrawLayer.DEV) == 2
