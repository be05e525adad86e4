"""Tests for leader/follower schooling."""

import pytest

from pond.entities.koi_fish import LEFT_SIDE, RIGHT_SIDE, KoiFish
from pond.math_utils import Point, Vector


def make_fish(env, x, y, size, direction=None):
    fish = KoiFish(env, position=Point(x, y), direction=direction or Vector.UP.copy(), size=size)
    env.add_agent(fish)
    return fish


@pytest.fixture
def school(pond_env):
    """A small fish directly behind a bigger one, both heading up."""
    follower = make_fish(pond_env, 400, 300, size=0.7)
    leader = make_fish(pond_env, 400, 340, size=0.9)
    return leader, follower


class TestPairing:
    def test_small_fish_follows_bigger_fish_ahead(self, pond_env, school):
        leader, follower = school
        pond_env.update_all_objects()

        assert follower.leader_id == leader.id
        assert follower.id in (leader.left_follower_id, leader.right_follower_id)
        assert not leader.is_following

    def test_target_is_the_leaders_follow_point(self, pond_env, school):
        leader, follower = school
        pond_env.update_all_objects()
        pond_env.update_all_objects()
        assert follower.target_point == leader.follow_point(follower.follow_side)

    def test_fish_behind_is_not_a_leader(self, pond_env):
        make_fish(pond_env, 400, 260, size=0.9)
        follower = make_fish(pond_env, 400, 300, size=0.7)
        pond_env.update_all_objects()
        assert not follower.is_following

    def test_fish_heading_elsewhere_is_not_a_leader(self, pond_env):
        make_fish(pond_env, 400, 340, size=0.9, direction=Vector.RIGHT.copy())
        follower = make_fish(pond_env, 400, 300, size=0.7)
        pond_env.update_all_objects()
        assert not follower.is_following

    def test_similar_size_is_not_a_leader(self, pond_env):
        make_fish(pond_env, 400, 340, size=0.75)
        follower = make_fish(pond_env, 400, 300, size=0.7)
        pond_env.update_all_objects()
        assert not follower.is_following

    def test_leader_takes_at_most_two_followers(self, pond_env):
        leader = make_fish(pond_env, 400, 340, size=1.0)
        followers = [make_fish(pond_env, 390 + 10 * i, 300, size=0.7) for i in range(3)]
        pond_env.update_all_objects()

        following = [fish for fish in followers if fish.leader_id == leader.id]
        assert len(following) == 2
        assert leader.available_follow_sides() == []


class TestUnpairing:
    def test_unpair_clears_only_the_followers_slot(self, pond_env):
        leader = make_fish(pond_env, 400, 340, size=1.0)
        left = make_fish(pond_env, 390, 300, size=0.7)
        right = make_fish(pond_env, 410, 300, size=0.7)
        KoiFish.pair_leader_follower(leader, left, LEFT_SIDE)
        KoiFish.pair_leader_follower(leader, right, RIGHT_SIDE)

        KoiFish.unpair_leader_follower(leader, left)

        assert leader.left_follower_id is None
        assert leader.right_follower_id == right.id
        assert left.leader_id is None and left.follow_side is None
        assert right.leader_id == leader.id

    def test_removing_leader_releases_followers(self, pond_env, school):
        leader, follower = school
        KoiFish.pair_leader_follower(leader, follower, LEFT_SIDE)

        pond_env.remove_agent(leader)

        assert not follower.is_following

    def test_removing_follower_frees_the_slot(self, pond_env, school):
        leader, follower = school
        KoiFish.pair_leader_follower(leader, follower, RIGHT_SIDE)

        pond_env.remove_agent(follower)

        assert leader.right_follower_id is None

    def test_vanished_leader_is_detected_on_update(self, pond_env, school):
        leader, follower = school
        KoiFish.pair_leader_follower(leader, follower, LEFT_SIDE)
        del pond_env.koi_fish_map[leader.id]

        follower.update()

        assert not follower.is_following

    def test_following_times_out(self, pond_env, school):
        leader, follower = school
        KoiFish.pair_leader_follower(leader, follower, LEFT_SIDE)
        follower.follow_start_time = -(KoiFish.MAX_FOLLOW_SECONDS + 1)

        follower.update()

        assert not follower.is_following
        assert leader.left_follower_id is None

    def test_drifting_too_far_breaks_the_pairing(self, pond_env, school):
        leader, follower = school
        KoiFish.pair_leader_follower(leader, follower, LEFT_SIDE)
        follower.position = Point(100, 100)

        follower.update()

        assert not follower.is_following

    def test_food_beats_following(self, pond_env, school):
        leader, follower = school
        KoiFish.pair_leader_follower(leader, follower, LEFT_SIDE)
        food = pond_env.add_food(Point(380, 280))

        pond_env.update_all_objects()

        assert follower.desired_food is food
        assert not follower.is_following


class TestFollowing:
    def test_settled_follower_turns_at_half_rate(self, pond_env, manual_clock):
        leader = make_fish(pond_env, 400, 340, size=0.9)
        follow_point = leader.follow_point(LEFT_SIDE)
        follower = make_fish(pond_env, follow_point.x - 10, follow_point.y - 2, size=0.7)
        KoiFish.pair_leader_follower(leader, follower, LEFT_SIDE)

        manual_clock.advance(0.1)
        follower.update()

        limit = KoiFish.MAX_ROTATION_ANGLE_PER_SECOND * 0.1 * 0.5
        assert follower.is_following
        assert follower.turn_multiplier == 0.5
        assert follower.direction.angle() == pytest.approx(limit)
