"""Axis-aligned rectangle overlap and obstacle hit tests.

Rectangles are float-valued (pygame.Rect truncates to ints, which shifts
edges by up to a pixel at the speeds the runner reaches).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    @property
    def left(self) -> float:
        return self.x

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.h


def rects_overlap(a: Rect, b: Rect) -> bool:
    """Open-interval overlap: rectangles that only share an edge do not collide."""
    return a.left < b.right and b.left < a.right and a.top < b.bottom and b.top < a.bottom


def any_overlap(rect: Rect, others: Iterable[Rect]) -> bool:
    return any(rects_overlap(rect, other) for other in others)


def collides(character_rect: Rect, obstacle) -> bool:
    """True if the character overlaps any hitbox of the obstacle.

    Composite obstacles expose several hitboxes (a sign is its post and its
    board); the test is an OR over them, never the combined bounding box.
    """
    return any_overlap(character_rect, obstacle.hitboxes())


__all__ = ["Rect", "rects_overlap", "any_overlap", "collides"]
