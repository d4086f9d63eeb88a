from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Tuple

from runner.collision import Rect


@dataclass
class Obstacle:
    """Base obstacle variant.

    Every kind carries a `kind` tag, a left edge `x` and a one-shot `passed`
    flag. Subclasses describe their shape through `bounds()` and
    `hitboxes()`; collision and drawing dispatch on `kind`, never on
    isinstance checks.
    """

    x: float
    passed: bool = False

    kind = "box"

    @property
    def w(self) -> float:  # pragma: no cover - overridden
        return 0.0

    @property
    def h(self) -> float:  # pragma: no cover - overridden
        return 0.0

    @property
    def trailing_edge(self) -> float:
        return self.x + self.w

    def bounds(self) -> Rect:  # pragma: no cover - overridden
        return Rect(self.x, 0.0, self.w, self.h)

    def hitboxes(self) -> Tuple[Rect, ...]:
        return (self.bounds(),)

    def move_by(self, dx: float) -> None:
        self.x += dx

    def to_dict(self) -> Dict[str, Any]:  # pragma: no cover - overridden
        return {"kind": self.kind, "x": self.x, "passed": self.passed}
