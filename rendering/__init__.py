"""Pygame front end for the koi pond: the render backend used by ``koipond``."""

from rendering.pygame_renderer import PygameRenderBackend

__all__ = ["PygameRenderBackend"]
