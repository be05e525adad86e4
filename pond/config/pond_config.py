"""Typed pond configuration.

Every tunable the agents read lives in one of the section dataclasses
below. ``PondConfig`` is immutable; new configurations are derived with
``with_overrides`` which deep-merges a partial dictionary (the same shape
used by themes and JSON config files) and validates the result.
"""

from dataclasses import asdict, dataclass, field, fields
from typing import Any, ClassVar, Dict, Mapping, Tuple

from pond.exceptions import ConfigurationError


@dataclass(frozen=True)
class ObjectDensities:
    """Population sizing, per square inch of surface."""

    fish_per_square_inch: float = 0.08
    petals_per_square_inch: float = 0.05
    min_wave_count: int = 3
    waves_per_square_inch: float = 0.01


@dataclass(frozen=True)
class EnvironmentConfig:
    """Water surface and pond floor colors."""

    surface_color: str = "rgba(29, 88, 140, 0.1)"
    background_color: str = "rgb(34, 58, 52)"


@dataclass(frozen=True)
class FishProportions:
    """Fish body lengths at size 1.0; scaled by each fish's size."""

    head_curve_anchor_length: float = 30.0
    trunk_width: float = 24.0
    trunk_length: float = 36.0
    tail_length: float = 40.0
    fin_length: float = 18.0
    tail_fin_length: float = 20.0


@dataclass(frozen=True)
class FishConfig:
    """Koi fish appearance and behavior.

    Attributes:
        proportions: Body lengths at size 1.0
        body_colors: Palette for the body (duplicates weight the choice)
        fin_colors: Palette for pectoral/ventral fins
        decoration_colors: Palette for spots and tail fins
        follow_distance: Distance of a leader's follow points from its center
        draw_simplified: Draw fish as a point and heading vector
        draw_leader_follower_links: Draw a debug line from follower to leader
        food_eat_distance: Distance at which pursued food is eaten
        food_search_range: Grid range (in cells) scanned for food
    """

    _nested: ClassVar[Dict[str, type]] = {"proportions": FishProportions}

    proportions: FishProportions = field(default_factory=FishProportions)
    body_colors: Tuple[str, ...] = ("fishRed", "white", "fishOrange", "white", "black")
    fin_colors: Tuple[str, ...] = ("white", "fishOrange", "black")
    decoration_colors: Tuple[str, ...] = ("fishRed", "black", "fishOrange")
    follow_distance: float = 50.0
    draw_simplified: bool = False
    draw_leader_follower_links: bool = False
    food_eat_distance: float = 20.0
    food_search_range: int = 5


@dataclass(frozen=True)
class WaveConfig:
    speeds: Tuple[float, float] = (10.0, 20.0)
    river_mode: bool = False
    colors: Tuple[str, ...] = ("waveBlue",)
    color_variation: float = 10.0


@dataclass(frozen=True)
class RippleConfig:
    color: str = "rgb(255, 255, 255)"
    max_opacity: float = 0.2


@dataclass(frozen=True)
class PetalConfig:
    speeds: Tuple[float, float] = (10.0, 20.0)
    oscillation_periods: Tuple[float, float] = (3.0, 6.0)
    colors: Tuple[str, ...] = ("sakura", "pastelPink")
    color_variation: float = 20.0
    sizes: Tuple[float, float] = (8.0, 14.0)
    max_oscillation: float = 10.0


@dataclass(frozen=True)
class LanternConfig:
    include: bool = False
    min_shadow_opacity: float = 0.1
    max_shadow_opacity: float = 0.5
    glow_color: str = "rgba(255, 145, 0, 0.15)"


@dataclass(frozen=True)
class PondConfig:
    """Complete pond configuration, one field per section."""

    _nested: ClassVar[Dict[str, type]] = {
        "object_densities": ObjectDensities,
        "environment": EnvironmentConfig,
        "fish": FishConfig,
        "wave": WaveConfig,
        "ripple": RippleConfig,
        "petal": PetalConfig,
        "lantern": LanternConfig,
    }

    object_densities: ObjectDensities = field(default_factory=ObjectDensities)
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    fish: FishConfig = field(default_factory=FishConfig)
    wave: WaveConfig = field(default_factory=WaveConfig)
    ripple: RippleConfig = field(default_factory=RippleConfig)
    petal: PetalConfig = field(default_factory=PetalConfig)
    lantern: LanternConfig = field(default_factory=LanternConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PondConfig":
        """Build a configuration from a (possibly partial) nested mapping.

        Missing keys take their defaults.

        Raises:
            ConfigurationError: On unknown keys or values of the wrong shape.
        """
        return _build_section(cls, data, "")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def with_overrides(self, overrides: Mapping[str, Any]) -> "PondConfig":
        """Return a copy with ``overrides`` deep-merged on top."""
        return PondConfig.from_dict(deep_merge(self.to_dict(), overrides))


def deep_merge(target: Mapping[str, Any], source: Mapping[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``source`` over ``target`` without mutating either.

    Nested mappings merge key by key; any other value in ``source``
    (including lists) replaces the value in ``target``.
    """
    result = dict(target)
    for key, value in source.items():
        existing = result.get(key)
        if isinstance(value, Mapping) and isinstance(existing, Mapping):
            result[key] = deep_merge(existing, value)
        elif isinstance(value, Mapping):
            result[key] = deep_merge({}, value)
        else:
            result[key] = value
    return result


def _build_section(section_cls: type, data: Mapping[str, Any], path: str) -> Any:
    if not isinstance(data, Mapping):
        raise ConfigurationError(f"Config section '{path or '<root>'}' must be a mapping, got {type(data).__name__}")

    known = {f.name: f for f in fields(section_cls)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ConfigurationError(f"Unknown config key(s) in '{path or '<root>'}': {', '.join(unknown)}")

    nested = getattr(section_cls, "_nested", {})
    kwargs: Dict[str, Any] = {}
    for name, value in data.items():
        key_path = f"{path}.{name}" if path else name
        if name in nested:
            kwargs[name] = _build_section(nested[name], value, key_path)
        elif isinstance(value, (list, tuple)):
            kwargs[name] = tuple(value)
        elif isinstance(value, Mapping):
            raise ConfigurationError(f"Config key '{key_path}' does not take a mapping")
        else:
            kwargs[name] = value

    try:
        return section_cls(**kwargs)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid config section '{path or '<root>'}': {exc}") from exc
