"""Color parsing and manipulation utilities.

Colors are carried through the simulation as ``(r, g, b, a)`` tuples with
integer channels in 0-255 and a float alpha in 0.0-1.0. Configuration may
spell colors as ``rgb(...)``/``rgba(...)`` strings or as a name from
``COLOR_MAP``.

Design Note:
    These are pure functions with no simulation dependencies.
    They can be tested in isolation and used by any module.
"""

import random
import re
from typing import Optional, Sequence, Tuple, Union

from pond.exceptions import InvalidFormatError

RGBA = Tuple[int, int, int, float]
ColorSpec = Union[str, Sequence[float]]

_COLOR_PATTERN = re.compile(
    r"^\s*(rgba?)\(\s*([\d.]+)\s*,\s*([\d.]+)\s*,\s*([\d.]+)\s*(?:,\s*([\d.]+)\s*)?\)\s*$"
)

RED: RGBA = (166, 16, 30, 1.0)
BLACK: RGBA = (0, 0, 0, 1.0)
ORANGE: RGBA = (255, 117, 24, 1.0)
WHITE: RGBA = (255, 255, 255, 1.0)
VIOLET: RGBA = (218, 66, 245, 1.0)
TRANSPARENT: RGBA = (0, 0, 10, 0.0)
FOOD_COLOR: RGBA = (205, 133, 63, 1.0)

# Lantern colors
WOOD_COLOR: RGBA = (132, 36, 12, 1.0)
WOOD_EDGE_COLOR: RGBA = (54, 34, 4, 1.0)
LANTERN_WALL_COLOR: RGBA = (220, 20, 60, 1.0)
DARK_FIRE_COLOR: RGBA = (255, 90, 0, 1.0)
BRIGHT_FIRE_COLOR: RGBA = (255, 145, 0, 1.0)

COLOR_MAP = {
    "fishRed": "rgba(166, 16, 30, 1)",
    "black": "rgba(0, 0, 0, 1)",
    "fishOrange": "rgba(255, 117, 24, 1)",
    "white": "rgba(255, 255, 255, 1)",
    "sakura": "rgba(255, 192, 203, 1.0)",
    "deepRed": "rgba(200, 0, 0, 1)",
    "deepOrange": "rgba(213, 54, 0, 1)",
    "pastelPink": "rgba(255, 120, 180, 1)",
    "pastelGreen": "rgba(180, 238, 180, 1.0)",
    "darkPink": "rgb(231, 84, 128)",
    "waveBlue": "rgba(29, 88, 140, 0.3)",
    "forestGreen": "rgba(4, 161, 43, 1)",
    "violet": "rgb(218, 66, 245)",
}


def _clamp_channel(value: float) -> int:
    return int(max(0, min(255, round(value))))


def _clamp_opacity(value: float) -> float:
    return float(max(0.0, min(1.0, value)))


def parse_color(color: ColorSpec) -> RGBA:
    """Parse an ``rgb(...)``/``rgba(...)`` string or a 3/4 sequence.

    Raises:
        InvalidFormatError: If the value is not a recognizable color.
    """
    if isinstance(color, str):
        match = _COLOR_PATTERN.match(color)
        if match is None:
            raise InvalidFormatError(f"Invalid color string: {color!r}")
        prefix, red, green, blue, alpha = match.groups()
        if prefix == "rgba" and alpha is None:
            raise InvalidFormatError(f"rgba color is missing its alpha: {color!r}")
        if prefix == "rgb" and alpha is not None:
            raise InvalidFormatError(f"rgb color has an unexpected alpha: {color!r}")
        opacity = float(alpha) if alpha is not None else 1.0
        return (_clamp_channel(float(red)), _clamp_channel(float(green)), _clamp_channel(float(blue)), _clamp_opacity(opacity))

    try:
        channels = list(color)
    except TypeError as exc:
        raise InvalidFormatError(f"Invalid color value: {color!r}") from exc
    if len(channels) not in (3, 4):
        raise InvalidFormatError(f"Color needs 3 or 4 components, got {len(channels)}")
    opacity = float(channels[3]) if len(channels) == 4 else 1.0
    return (_clamp_channel(channels[0]), _clamp_channel(channels[1]), _clamp_channel(channels[2]), _clamp_opacity(opacity))


def parse_config_color(color: ColorSpec) -> RGBA:
    """Resolve a configured color, accepting names from ``COLOR_MAP``.

    Raises:
        InvalidFormatError: If the value is neither a known name nor a color.
    """
    if isinstance(color, str) and color in COLOR_MAP:
        return parse_color(COLOR_MAP[color])
    return parse_color(color)


def parse_opacity(color: ColorSpec) -> float:
    """Alpha component of a color specification."""
    return parse_config_color(color)[3]


def apply_opacity(color: RGBA, opacity: float) -> RGBA:
    """Replace the alpha of ``color``; ``opacity`` is clamped to 0-1."""
    return (color[0], color[1], color[2], _clamp_opacity(opacity))


def randomize_rgb(color: RGBA, deviation: float = 50, rng: Optional[random.Random] = None) -> RGBA:
    """Shift each channel by up to ``deviation``, keeping the alpha.

    Args:
        color: Base color
        deviation: Maximum change per channel
        rng: Random source (defaults to a fresh ``random.Random``)

    Returns:
        A nearby color with channels clamped to 0-255
    """
    rng = rng or random.Random()
    red, green, blue, alpha = color
    return (
        _clamp_channel(red + round(rng.uniform(-deviation, deviation))),
        _clamp_channel(green + round(rng.uniform(-deviation, deviation))),
        _clamp_channel(blue + round(rng.uniform(-deviation, deviation))),
        alpha,
    )


def increment_rgb(current: RGBA, destination: RGBA, max_change: int) -> RGBA:
    """Step each channel of ``current`` toward ``destination``.

    Each channel moves by at most ``max_change``; the alpha of ``current``
    is kept.
    """
    stepped = []
    for start, end in zip(current[:3], destination[:3]):
        delta = end - start
        if abs(delta) > max_change:
            delta = max_change if delta > 0 else -max_change
        stepped.append(_clamp_channel(start + delta))
    return (stepped[0], stepped[1], stepped[2], current[3])


def same_rgb(a: RGBA, b: RGBA) -> bool:
    """Whether two colors match ignoring alpha."""
    return tuple(a[:3]) == tuple(b[:3])


def to_pygame_color(color: RGBA) -> Tuple[int, int, int, int]:
    """Convert to a pygame-style ``(r, g, b, a)`` tuple with 0-255 alpha."""
    return (color[0], color[1], color[2], _clamp_channel(color[3] * 255))
