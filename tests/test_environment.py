"""Tests for PondEnvironment population, bookkeeping and frame passes."""

import pytest

from pond.draw_manager import DrawLayer
from pond.entities.base import AgentKind
from pond.entities.koi_fish import KoiFish
from pond.entities.wave import Wave
from pond.environment import PondEnvironment
from pond.exceptions import AgentError, InvalidGeometryError
from pond.math_utils import Point


class TestPopulation:
    """Initial population sizing from the configured densities."""

    def test_desired_counts_scale_with_area(self, pond_env):
        # 800x600 at 96 ppi is ~52 square inches
        counts = pond_env.desired_object_counts()
        assert counts.koi_fish == 5
        assert counts.petals == 3
        assert counts.waves == 4
        assert counts.lanterns == 0

    def test_initialize_objects(self, pond_env):
        pond_env.initialize_objects()
        counts = pond_env.object_counts()
        assert counts["koi_fish"] == 5
        assert counts["petal"] == 3
        assert counts["wave"] == 4
        assert counts["lantern"] == 0
        assert counts["food"] == 0
        assert counts["ripple"] == 0

    def test_some_waves_start_off_screen(self, seeded_rng, manual_clock):
        env = PondEnvironment(1920, 1080, clock=manual_clock, rng=seeded_rng)
        env.initialize_objects()
        off_screen = [wave for wave in env.wave_map.values() if env.bounds.is_out_of_bounds(wave.position)]
        assert len(off_screen) == int(len(env.wave_map) * 0.2)

    def test_reset_repopulates(self, pond_env):
        pond_env.initialize_objects()
        pond_env.add_food(Point(10, 10))
        fish_ids = set(pond_env.koi_fish_map)

        pond_env.reset_environment()

        assert pond_env.object_counts()["food"] == 0
        assert len(pond_env.koi_fish_map) == 5
        assert not fish_ids & set(pond_env.koi_fish_map)

    def test_resize_updates_bounds_and_population(self, pond_env):
        pond_env.initialize_objects()
        pond_env.resize(1600, 1200)
        assert pond_env.bounds.get_dimensions() == (1600, 1200)
        assert pond_env.grid.num_cells_x == 32
        assert len(pond_env.koi_fish_map) == pond_env.desired_object_counts().koi_fish


class TestLanterns:
    def test_enabling_adds_only_lanterns(self, pond_env):
        pond_env.initialize_objects()
        fish_ids = set(pond_env.koi_fish_map)

        pond_env.set_lanterns_enabled(True)

        assert len(pond_env.lanterns()) == 1
        assert set(pond_env.koi_fish_map) == fish_ids
        assert pond_env.config.lantern.include is True

    def test_enabling_twice_keeps_one_lantern(self, pond_env):
        pond_env.set_lanterns_enabled(True)
        pond_env.set_lanterns_enabled(True)
        assert len(pond_env.lanterns()) == 1

    def test_disabling_removes_lanterns(self, pond_env):
        pond_env.set_lanterns_enabled(True)
        pond_env.set_lanterns_enabled(False)
        assert pond_env.lanterns() == []


class TestBookkeeping:
    def test_add_and_remove_agent(self, pond_env):
        fish = pond_env.add_agent(KoiFish(pond_env))
        assert pond_env.contains(fish)
        assert pond_env.get_koi_fish(fish.id) is fish

        pond_env.remove_agent(fish)
        assert not pond_env.contains(fish)
        assert pond_env.get_koi_fish(fish.id) is None

    def test_removing_twice_is_harmless(self, pond_env):
        fish = pond_env.add_agent(KoiFish(pond_env))
        pond_env.remove_agent(fish)
        pond_env.remove_agent(fish)

    def test_unknown_agent_kind_rejected(self, pond_env):
        class Stranger:
            id = "stranger"
            kind = "unicorn"

        with pytest.raises(AgentError):
            pond_env.add_agent(Stranger())

    def test_nearby_objects_filters_by_kind(self, pond_env):
        fish = pond_env.add_agent(KoiFish(pond_env, position=Point(100, 100)))
        food = pond_env.add_food(Point(120, 110))
        pond_env.add_food(Point(700, 500))
        pond_env.grid.rebuild(pond_env.all_agents())

        assert pond_env.get_nearby_objects(fish, AgentKind.FOOD) == [food]
        assert pond_env.get_nearby_objects(fish, AgentKind.KOI_FISH) == []


class TestFramePasses:
    def test_update_moves_agents(self, pond_env, manual_clock):
        pond_env.initialize_objects()
        before = {agent.id: agent.position.copy() for agent in pond_env.koi_fish_map.values()}

        manual_clock.advance(0.5)
        pond_env.update_all_objects()

        moved = [fish for fish in pond_env.koi_fish_map.values() if fish.position != before[fish.id]]
        assert moved

    def test_food_eaten_by_one_fish_is_not_chased_by_another(self, pond_env):
        first = pond_env.add_agent(KoiFish(pond_env, position=Point(105, 100), size=0.8))
        second = pond_env.add_agent(KoiFish(pond_env, position=Point(160, 100), size=0.8))
        food = pond_env.add_food(Point(100, 100))

        pond_env.update_all_objects()
        pond_env.update_all_objects()

        assert food.is_eaten
        assert first.desired_food is None
        assert second.desired_food is None

    def test_draw_schedules_water_surface(self, pond_env):
        pond_env.draw_all_objects()
        assert pond_env.draw_manager.pending_count(DrawLayer.WATER_SURFACE) == 1

        pond_env.draw_manager.flush()
        assert pond_env.renderer.last_surface_color == (29, 88, 140, 0.1)

    def test_failing_agent_is_removed_during_update(self, pond_env, monkeypatch):
        wave = pond_env.add_agent(Wave(pond_env))

        def broken():
            raise InvalidGeometryError("bad wave")

        monkeypatch.setattr(wave, "update", broken)
        pond_env.update_all_objects()

        assert not pond_env.contains(wave)

    def test_failing_draw_is_skipped(self, pond_env, monkeypatch):
        wave = pond_env.add_agent(Wave(pond_env))

        def broken():
            raise InvalidGeometryError("bad wave")

        monkeypatch.setattr(wave, "draw", broken)
        pond_env.draw_all_objects()

        assert pond_env.contains(wave)

    def test_invalid_surface_color_skips_only_the_surface(self, pond_env, config_store):
        config_store.apply_overrides({"environment": {"surface_color": "murky"}})
        pond_env.update_all_objects()
        pond_env.add_agent(Wave(pond_env))

        pond_env.draw_all_objects()

        assert pond_env.draw_manager.pending_count(DrawLayer.WATER_SURFACE) == 0
        assert pond_env.draw_manager.pending_count(DrawLayer.WAVE) == 1


class TestConfigChanges:
    def test_theme_change_resets_the_pond(self, pond_env, config_store):
        pond_env.initialize_objects()
        fish_ids = set(pond_env.koi_fish_map)

        config_store.set_theme("night")
        pond_env.update_all_objects()

        assert not fish_ids & set(pond_env.koi_fish_map)
        assert len(pond_env.lanterns()) == 1
        assert pond_env.config is config_store.config

    def test_overrides_reach_live_agents(self, pond_env, config_store):
        pond_env.initialize_objects()
        fish_ids = set(pond_env.koi_fish_map)

        config_store.apply_overrides({"fish": {"draw_simplified": True}})
        pond_env.update_all_objects()

        assert set(pond_env.koi_fish_map) == fish_ids
        for fish in pond_env.koi_fish_map.values():
            assert fish.config.fish.draw_simplified is True
