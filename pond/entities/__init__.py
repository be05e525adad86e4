"""Pond agents.

Every agent derives from ``Agent`` and carries an ``AgentKind`` tag used by
the spatial grid and the environment to route it.
"""

from pond.entities.base import Agent, AgentKind
from pond.entities.food import Food, FoodParticle
from pond.entities.koi_fish import LEFT_SIDE, RIGHT_SIDE, Decoration, DecorationDrawInfo, FishColors, KoiFish
from pond.entities.lantern import DEFAULT_SHADOW_DRAW_INFO, Lantern, LanternDrawInfo, ShadowDrawInfo
from pond.entities.petal import Petal
from pond.entities.ripple import Ripple, RippleDrawSettings
from pond.entities.wave import Wave

__all__ = [
    "Agent",
    "AgentKind",
    "DEFAULT_SHADOW_DRAW_INFO",
    "Decoration",
    "DecorationDrawInfo",
    "FishColors",
    "Food",
    "FoodParticle",
    "KoiFish",
    "LEFT_SIDE",
    "Lantern",
    "LanternDrawInfo",
    "Petal",
    "RIGHT_SIDE",
    "Ripple",
    "RippleDrawSettings",
    "ShadowDrawInfo",
    "Wave",
]
