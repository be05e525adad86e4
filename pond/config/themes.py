"""Built-in pond themes.

A theme is a partial configuration merged over the base ``PondConfig``.
Keys mirror the dataclass field names in ``pond.config.pond_config``.
"""

from typing import Any, Dict

DEFAULT_THEME = "koi"

THEMES: Dict[str, Dict[str, Any]] = {
    # Plain koi pond; the base configuration as-is
    "koi": {},
    # Cherry blossom river: everything drifts toward the bottom-right
    "sakura": {
        "object_densities": {"petals_per_square_inch": 0.15, "fish_per_square_inch": 0.06},
        "environment": {"surface_color": "rgba(40, 96, 120, 0.15)"},
        "wave": {"river_mode": True, "speeds": [20, 30]},
        "petal": {"colors": ["sakura", "pastelPink", "darkPink"], "speeds": [20, 35]},
        "fish": {"body_colors": ["white", "fishRed", "white", "deepOrange"]},
    },
    # Night pond lit by a floating lantern
    "night": {
        "object_densities": {"petals_per_square_inch": 0.0},
        "environment": {
            "surface_color": "rgba(5, 12, 40, 0.55)",
            "background_color": "rgb(10, 18, 24)",
        },
        "ripple": {"max_opacity": 0.12},
        "lantern": {"include": True, "min_shadow_opacity": 0.05, "max_shadow_opacity": 0.45},
    },
    # Lily pond with green water and fewer, larger-looking fish
    "lily": {
        "object_densities": {"fish_per_square_inch": 0.05, "petals_per_square_inch": 0.04},
        "environment": {"surface_color": "rgba(4, 161, 43, 0.12)", "background_color": "rgb(28, 52, 30)"},
        "petal": {"colors": ["pastelGreen", "forestGreen"], "sizes": [10, 18]},
        "fish": {"body_colors": ["fishOrange", "deepOrange", "white"], "decoration_colors": ["black", "deepRed"]},
    },
}
