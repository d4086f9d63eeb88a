"""Character vertical physics.

Integration is per tick (gravity is added once per call), matching the
frame-based tuning of the jump arc. The float-assist window is measured in
milliseconds so holding jump lasts the same wall time at any frame rate.
"""

from __future__ import annotations

from dataclasses import dataclass

from runner.collision import Rect
from runner.constants import (
    CEILING_MARGIN,
    CHARACTER_DUCK_H,
    CHARACTER_H,
    CHARACTER_W,
    CHARACTER_X,
    FLOAT_GRAVITY_FACTOR,
    GRAVITY,
    JUMP_VELOCITY,
    MAX_JUMP_HOLD_MS,
)


@dataclass
class Character:
    x: float = CHARACTER_X
    y: float = 0.0
    w: float = CHARACTER_W
    h: float = CHARACTER_H
    vy: float = 0.0
    on_ground: bool = True

    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.w, self.h)

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def stand_on(self, ground_y: float) -> None:
        self.y = ground_y - self.h
        self.vy = 0.0
        self.on_ground = True


@dataclass
class JumpHold:
    """Milliseconds of float assist consumed during the current jump."""

    ms: float = 0.0

    def reset(self) -> None:
        self.ms = 0.0


def effective_gravity(character: Character, dt: float, jump_held: bool, hold: JumpHold) -> float:
    """Gravity for this tick; consumes float-assist time when it applies."""
    if jump_held and not character.on_ground and character.vy < 0 and hold.ms < MAX_JUMP_HOLD_MS:
        hold.ms += dt
        return GRAVITY * FLOAT_GRAVITY_FACTOR
    return GRAVITY


def advance(character: Character, dt: float, jump_held: bool, ground_y: float, hold: JumpHold) -> None:
    g = effective_gravity(character, dt, jump_held, hold)
    character.vy += g
    character.y += character.vy

    if character.bottom >= ground_y:
        character.stand_on(ground_y)
        hold.reset()

    if character.y < CEILING_MARGIN:
        character.y = CEILING_MARGIN
        character.vy = max(0.0, character.vy)


def try_jump(character: Character, hold: JumpHold) -> bool:
    """Launch the character if it is on the ground. Returns True if it jumped."""
    if not character.on_ground:
        return False
    character.vy = JUMP_VELOCITY
    character.on_ground = False
    hold.reset()
    return True


def set_duck(character: Character, pressed: bool, ground_y: float) -> bool:
    """Switch between standing and ducking height; only allowed on the ground.

    Returns True if the height changed.
    """
    if not character.on_ground:
        return False
    target_h = CHARACTER_DUCK_H if pressed else CHARACTER_H
    if target_h == character.h:
        return False
    character.h = target_h
    character.y = ground_y - character.h
    return True


__all__ = ["Character", "JumpHold", "advance", "effective_gravity", "try_jump", "set_duck"]
