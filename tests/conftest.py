"""Pytest configuration and fixtures for koi pond tests."""

import random

import pytest


@pytest.fixture
def seeded_rng():
    """Provide a deterministic RNG for tests."""
    return random.Random(42)


@pytest.fixture
def manual_clock():
    """Clock that only moves when a test advances it."""
    from pond.clock import ManualClock

    return ManualClock()


@pytest.fixture
def pond_config():
    from pond.config.pond_config import PondConfig

    return PondConfig()


@pytest.fixture
def config_store():
    from pond.config.store import ConfigStore

    return ConfigStore()


@pytest.fixture
def pond_env(config_store, manual_clock, seeded_rng):
    """An empty 800x600 pond with a headless backend and manual time."""
    from pond.environment import PondEnvironment
    from pond.render_backend import HeadlessRenderBackend

    return PondEnvironment(
        800,
        600,
        config_store=config_store,
        renderer=HeadlessRenderBackend(),
        clock=manual_clock,
        rng=seeded_rng,
    )
