"""Core koi pond simulation.

This package contains the pure simulation logic for the koi pond, with no
pygame dependencies. Key modules include:

- environment: ``PondEnvironment``, the coordinator that owns every agent
- frame_driver: Fixed-timestep ``FrameDriver`` around an environment
- entities: Koi fish, waves, petals, ripples, food and lanterns
- spatial: Surface bounds and the uniform spatial grid
- config: Typed configuration, themes and the runtime ``ConfigStore``
- render_backend: The ``RenderBackend`` protocol and a headless backend

Renderers live outside this package (see ``rendering``).
"""

from pond.clock import ManualClock, MonotonicClock
from pond.config import ConfigStore, PondConfig
from pond.draw_manager import DrawLayer, DrawManager
from pond.environment import PondEnvironment
from pond.exceptions import PondError
from pond.frame_driver import FrameDriver
from pond.render_backend import HeadlessRenderBackend, RenderBackend

__all__ = [
    "ConfigStore",
    "DrawLayer",
    "DrawManager",
    "FrameDriver",
    "HeadlessRenderBackend",
    "ManualClock",
    "MonotonicClock",
    "PondConfig",
    "PondEnvironment",
    "PondError",
    "RenderBackend",
]
