"""Obstacle variants.

Obstacles are tagged by `kind`; the registry maps a tag to its class so
spawning, serialization, collision and drawing stay table driven when new
kinds are added.
"""

from .base import Obstacle
from .registry import get_obstacle_class, make_obstacle, obstacle_from_dict, register_obstacle
from .sign import SignObstacle

# Register built-ins on import
register_obstacle("sign", SignObstacle)

__all__ = [
    "Obstacle",
    "SignObstacle",
    "register_obstacle",
    "get_obstacle_class",
    "make_obstacle",
    "obstacle_from_dict",
]
