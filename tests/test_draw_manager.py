"""Tests for layered draw scheduling."""

import pytest

from pond.draw_manager import LAYER_DRAW_ORDER, DrawLayer, DrawManager


@pytest.fixture
def manager():
    return DrawManager()


def test_fish_layer_is_drawn_first_and_dev_last():
    assert LAYER_DRAW_ORDER[0] is DrawLayer.FISH
    assert LAYER_DRAW_ORDER[-1] is DrawLayer.DEV


def test_flush_runs_layers_bottom_up(manager):
    order = []
    manager.schedule_draw(DrawLayer.DEV, lambda: order.append("dev"))
    manager.schedule_draw(DrawLayer.LANTERN, lambda: order.append("lantern"))
    manager.schedule_draw(DrawLayer.WATER_SURFACE, lambda: order.append("surface"))
    manager.schedule_draw(DrawLayer.FISH, lambda: order.append("fish"))

    assert manager.flush() == 4
    assert order == ["fish", "surface", "lantern", "dev"]


def test_ops_in_a_layer_keep_schedule_order(manager):
    order = []
    for i in range(5):
        manager.schedule_draw(DrawLayer.RIPPLE, lambda i=i: order.append(i))
    manager.flush()
    assert order == [0, 1, 2, 3, 4]


def test_flush_clears_schedule(manager):
    manager.schedule_draw(DrawLayer.FOOD, lambda: None)
    manager.flush()
    assert manager.pending_count() == 0
    assert manager.flush() == 0


def test_schedule_is_cleared_when_an_op_raises(manager):
    def broken():
        raise RuntimeError("boom")

    manager.schedule_draw(DrawLayer.FISH, broken)
    manager.schedule_draw(DrawLayer.DEV, lambda: None)
    with pytest.raises(RuntimeError):
        manager.flush()
    assert manager.pending_count() == 0


def test_pending_count_per_layer(manager):
    manager.schedule_draw(DrawLayer.PETAL, lambda: None)
    manager.schedule_draw(DrawLayer.PETAL, lambda: None)
    manager.schedule_draw(DrawLayer.WAVE, lambda: None)
    assert manager.pending_count(DrawLayer.PETAL) == 2
    assert manager.pending_count(DrawLayer.FISH) == 0
    assert manager.pending_count() == 3

    manager.clear()
    assert manager.pending_count() == 0
