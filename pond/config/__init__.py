"""Configuration package for the koi pond.

``display`` holds loop and window constants, ``pond_config`` the typed
agent tunables, ``themes`` the built-in theme overrides and ``store`` the
runtime ``ConfigStore`` that layers them together.
"""

from pond.config.pond_config import (
    EnvironmentConfig,
    FishConfig,
    FishProportions,
    LanternConfig,
    ObjectDensities,
    PetalConfig,
    PondConfig,
    RippleConfig,
    WaveConfig,
    deep_merge,
)
from pond.config.store import ConfigStore
from pond.config.themes import DEFAULT_THEME, THEMES

__all__ = [
    "ConfigStore",
    "DEFAULT_THEME",
    "EnvironmentConfig",
    "FishConfig",
    "FishProportions",
    "LanternConfig",
    "ObjectDensities",
    "PetalConfig",
    "PondConfig",
    "RippleConfig",
    "THEMES",
    "WaveConfig",
    "deep_merge",
]
