"""Run state machine and the per-tick update.

A `SimulationState` is one game session: it owns the character, obstacles,
clouds, timers and its own RNG. Nothing here touches pygame, so tests and
the headless batch runner drive `tick` directly.

States:
    IDLE    -> RUNNING  via start_run()
    RUNNING -> RUNNING  every tick
    RUNNING -> ENDED    on the first collision
    ENDED   -> RUNNING  via start_run() (reset)
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import List, Optional

from runner.collision import collides
from runner.constants import (
    BASE_H,
    BASE_W,
    GROUND_Y,
    OBSTACLE_DESPAWN_X,
    PASS_BONUS,
    SCORE_PER_MS,
    SPEED_ACCEL_PER_MS,
    START_SPEED,
)
from runner.frame_clock import clamp_dt
from runner.logger import get_logger
from runner.obstacles import Obstacle
from runner.physics import Character, JumpHold, advance, set_duck, try_jump
from runner.rng_service import RNGService
from runner.spawner import Cloud, maybe_spawn, phase_for, update_clouds

log = get_logger("simulation")


class RunPhase(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    ENDED = "ended"


@dataclass(frozen=True)
class InputState:
    """Intents sampled for one tick.

    `jump_pressed` is true only on the tick the jump control went down;
    `jump_held` stays true while it is held and feeds the float assist.
    """

    jump_pressed: bool = False
    jump_held: bool = False
    duck_held: bool = False


@dataclass(frozen=True)
class RunResult:
    score: int
    seconds: int
    obstacles_passed: int


@dataclass
class SimulationState:
    rng: RNGService
    width: float = BASE_W
    height: float = BASE_H
    ground_y: float = GROUND_Y
    phase: RunPhase = RunPhase.IDLE
    elapsed_ms: float = 0.0
    clock_ms: float = 0.0  # simulated timestamp fed to the spawner
    score: float = 0.0
    speed: float = START_SPEED
    spawn_cooldown_ms: float = 0.0
    last_spawn_ms: float = 0.0
    last_cloud_ms: float = 0.0
    hold: JumpHold = field(default_factory=JumpHold)
    obstacles_passed: int = 0
    character: Character = field(default_factory=Character)
    obstacles: List[Obstacle] = field(default_factory=list)
    clouds: List[Cloud] = field(default_factory=list)
    result: Optional[RunResult] = None

    @property
    def running(self) -> bool:
        return self.phase is RunPhase.RUNNING

    @property
    def difficulty_phase(self) -> int:
        return phase_for(self.elapsed_ms)

    @property
    def display_score(self) -> int:
        return int(math.floor(self.score))


def new_session(
    seed=None,
    *,
    width: float = BASE_W,
    height: float = BASE_H,
    ground_y: float | None = None,
) -> SimulationState:
    """Create an idle session with the character standing on the ground."""
    state = SimulationState(
        rng=RNGService(seed),
        width=width,
        height=height,
        ground_y=GROUND_Y if ground_y is None else ground_y,
    )
    state.character.stand_on(state.ground_y)
    return state


def start_run(state: SimulationState) -> SimulationState:
    """Reset run values and enter RUNNING (used for both start and retry)."""
    state.phase = RunPhase.RUNNING
    state.elapsed_ms = 0.0
    state.clock_ms = 0.0
    state.score = 0.0
    state.speed = START_SPEED
    state.spawn_cooldown_ms = 0.0
    state.last_spawn_ms = 0.0
    state.last_cloud_ms = 0.0
    state.hold.reset()
    state.obstacles_passed = 0
    state.obstacles = []
    state.clouds = []
    state.result = None
    state.character = Character()
    state.character.stand_on(state.ground_y)
    log.info(f"run started (seed={state.rng.seed_value!r})")
    return state


def end_run(state: SimulationState) -> RunResult:
    state.phase = RunPhase.ENDED
    state.result = RunResult(
        score=state.display_score,
        seconds=int(state.elapsed_ms // 1000),
        obstacles_passed=state.obstacles_passed,
    )
    log.info(f"run ended: score={state.result.score} time={state.result.seconds}s")
    return state.result


def _apply_inputs(state: SimulationState, inputs: InputState) -> None:
    c = state.character
    if inputs.jump_pressed:
        try_jump(c, state.hold)
    set_duck(c, inputs.duck_held, state.ground_y)


def _move_obstacles(state: SimulationState) -> None:
    c = state.character
    for o in state.obstacles:
        o.move_by(-state.speed)
        if not o.passed and o.trailing_edge < c.x:
            o.passed = True
            state.obstacles_passed += 1
            state.score += PASS_BONUS
    state.obstacles = [o for o in state.obstacles if o.trailing_edge > OBSTACLE_DESPAWN_X]


def _check_collisions(state: SimulationState) -> bool:
    rect = state.character.rect()
    for o in state.obstacles:
        if collides(rect, o):
            return True
    return False


def tick(state: SimulationState, dt: float, inputs: InputState | None = None) -> SimulationState:
    """Advance a running session by one frame of `dt` milliseconds.

    Mutates and returns `state`. Outside RUNNING this is a no-op, which is
    what freezes score, speed and obstacle motion after game over.
    """
    if state.phase is not RunPhase.RUNNING:
        return state
    inputs = inputs or InputState()
    dt = clamp_dt(dt)

    state.elapsed_ms += dt
    state.clock_ms += dt
    state.speed += dt * SPEED_ACCEL_PER_MS
    state.score += dt * SCORE_PER_MS

    _apply_inputs(state, inputs)
    advance(state.character, dt, inputs.jump_held, state.ground_y, state.hold)

    _move_obstacles(state)
    maybe_spawn(state, state.clock_ms)
    update_clouds(state, state.clock_ms)

    if _check_collisions(state):
        end_run(state)
    return state


__all__ = [
    "RunPhase",
    "InputState",
    "RunResult",
    "SimulationState",
    "new_session",
    "start_run",
    "end_run",
    "tick",
]
