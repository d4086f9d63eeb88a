from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from runner.collision import Rect
from runner.constants import SIGN_POST_W

from .base import Obstacle


@dataclass
class SignObstacle(Obstacle):
    """Signboard: a narrow post standing on the ground with a board on top.

    The post is SIGN_POST_W wide and centred under the board. `base_y` is the
    ground line the sign was planted on.
    """

    post_h: float = 0.0
    board_w: float = 0.0
    board_h: float = 0.0
    base_y: float = 0.0

    kind = "sign"

    @property
    def w(self) -> float:
        return self.board_w

    @property
    def h(self) -> float:
        return self.post_h + self.board_h

    @property
    def y_top(self) -> float:
        return self.base_y - self.post_h - self.board_h

    def post_rect(self) -> Rect:
        return Rect(self.x + (self.board_w - SIGN_POST_W) / 2, self.base_y - self.post_h, SIGN_POST_W, self.post_h)

    def board_rect(self) -> Rect:
        return Rect(self.x, self.y_top, self.board_w, self.board_h)

    def bounds(self) -> Rect:
        return Rect(self.x, self.y_top, self.w, self.h)

    def hitboxes(self) -> Tuple[Rect, ...]:
        return (self.post_rect(), self.board_rect())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "x": self.x,
            "post_h": self.post_h,
            "board_w": self.board_w,
            "board_h": self.board_h,
            "base_y": self.base_y,
            "passed": self.passed,
        }
