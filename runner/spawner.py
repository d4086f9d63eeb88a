"""Obstacle spawning and difficulty ramp.

Spawn cadence is decoupled from clustering:

- Whether a sign appears at all is driven by a cooldown that shortens as
  the run advances through phases and as speed rises.
- Whether it comes with followers is a per-phase probability; followers are
  spaced by a gap derived from jump kinematics at the current speed, so
  tightened clusters stay clearable.

All randomness comes from the session's RNGService.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from runner.constants import (
    CLOUD_INTERVAL_MS,
    CLOUD_PARALLAX,
    CLOUD_SPAWN_MARGIN,
    CLOUD_W,
    CLOUD_Y_MIN,
    CLOUD_Y_RANGE,
    CLUSTER_JITTER_PX,
    COOLDOWN_FLOOR_MS,
    COOLDOWN_MAX_REDUCTION_MS,
    COOLDOWN_MS_PER_SPEED,
    COOLDOWN_SPEED_BASELINE,
    DIFFICULTY_RAMP_MS,
    FRAME_MS,
    OBSTACLE_SPAWN_MARGIN,
    PHASE_BASE_COOLDOWN_MS,
    PHASE_BOUNDARIES_MS,
    SAFE_GAP_AIRTIME_MS,
    SAFE_GAP_MAX_PX,
    SAFE_GAP_MIN_PX,
    SAFE_GAP_RUNUP_MS,
    SIGN_BOARD_H_SHORT,
    SIGN_BOARD_H_TALL,
    SIGN_BOARD_W_MIN,
    SIGN_BOARD_W_RANGE,
    SIGN_POST_H_DIFFICULTY,
    SIGN_POST_H_MIN,
    SIGN_POST_H_RANGE,
    SIGN_SHORT_BOARD_CHANCE,
    START_SPEED,
)
from runner.logger import get_logger
from runner.obstacles import Obstacle, make_obstacle, obstacle_from_dict

if TYPE_CHECKING:  # pragma: no cover
    from runner.simulation import SimulationState

log = get_logger("spawner")


@dataclass(frozen=True)
class ClusterConfig:
    probability: float  # chance that a spawn gets followers
    max_extras: int  # followers beyond the first sign
    gap_factor: float  # multiplier applied to the safe jump gap


CLUSTER_CONFIGS = {
    1: ClusterConfig(probability=0.0, max_extras=0, gap_factor=1.0),
    2: ClusterConfig(probability=0.20, max_extras=1, gap_factor=0.95),
    3: ClusterConfig(probability=0.45, max_extras=2, gap_factor=0.92),
    4: ClusterConfig(probability=0.65, max_extras=2, gap_factor=0.90),
}


@dataclass
class Cloud:
    x: float
    y: float
    w: float = CLOUD_W


# ---- Pure difficulty helpers ------------------------------------------
def phase_for(elapsed_ms: float) -> int:
    for idx, boundary in enumerate(PHASE_BOUNDARIES_MS):
        if elapsed_ms < boundary:
            return idx + 1
    return len(PHASE_BOUNDARIES_MS) + 1


def cluster_config(phase: int) -> ClusterConfig:
    return CLUSTER_CONFIGS.get(phase, CLUSTER_CONFIGS[max(CLUSTER_CONFIGS)])


def difficulty_factor(elapsed_ms: float) -> float:
    """0.0 at run start, saturating at 1.0 after DIFFICULTY_RAMP_MS."""
    return min(1.0, max(0.0, elapsed_ms) / DIFFICULTY_RAMP_MS)


def spawn_cooldown_ms(phase: int, speed: float) -> float:
    base = PHASE_BASE_COOLDOWN_MS.get(phase, PHASE_BASE_COOLDOWN_MS[max(PHASE_BASE_COOLDOWN_MS)])
    reduction = min(COOLDOWN_MAX_REDUCTION_MS, max(0.0, (speed - COOLDOWN_SPEED_BASELINE) * COOLDOWN_MS_PER_SPEED))
    return max(COOLDOWN_FLOOR_MS, base - reduction)


def safe_jump_gap(speed: float) -> float:
    """Horizontal distance covered during one full jump plus a short run-up."""
    speed = max(START_SPEED, speed)
    px = speed * ((SAFE_GAP_AIRTIME_MS + SAFE_GAP_RUNUP_MS) / FRAME_MS)
    return max(SAFE_GAP_MIN_PX, min(SAFE_GAP_MAX_PX, px))


def cluster_gap(speed: float, gap_factor: float, jitter: float = 0.0) -> float:
    """Gap between consecutive clustered signs, kept inside the safe range."""
    gap = safe_jump_gap(speed) * gap_factor + jitter
    return max(SAFE_GAP_MIN_PX, min(SAFE_GAP_MAX_PX, gap))


# ---- Spawning ---------------------------------------------------------
def make_sign(state: "SimulationState", x: float) -> Obstacle:
    rng = state.rng
    difficulty = difficulty_factor(state.elapsed_ms)
    post_h = SIGN_POST_H_MIN + rng.random() * SIGN_POST_H_RANGE + difficulty * SIGN_POST_H_DIFFICULTY
    board_w = SIGN_BOARD_W_MIN + rng.random() * SIGN_BOARD_W_RANGE
    board_h = SIGN_BOARD_H_SHORT if rng.random() < SIGN_SHORT_BOARD_CHANCE else SIGN_BOARD_H_TALL
    return make_obstacle("sign", x=x, post_h=post_h, board_w=board_w, board_h=board_h, base_y=state.ground_y)


def _copy_at(template: Obstacle, x: float) -> Obstacle:
    data = template.to_dict()
    data["x"] = x
    data["passed"] = False
    return obstacle_from_dict(data)


def spawn_group(state: "SimulationState") -> List[Obstacle]:
    """Create one sign at the right edge plus any cluster followers."""
    rng = state.rng
    first = make_sign(state, state.width + OBSTACLE_SPAWN_MARGIN)
    group = [first]

    cfg = cluster_config(phase_for(state.elapsed_ms))
    if cfg.max_extras > 0 and rng.random() < cfg.probability:
        extras = 1 + math.floor(rng.random() * cfg.max_extras)
        for _ in range(extras):
            prev = group[-1]
            jitter = rng.random() * (2 * CLUSTER_JITTER_PX) - CLUSTER_JITTER_PX
            gap = cluster_gap(state.speed, cfg.gap_factor, jitter)
            group.append(_copy_at(first, prev.x + prev.w + gap))
        log.debug(f"cluster of {len(group)} at x={first.x:.1f}")
    return group


def maybe_spawn(state: "SimulationState", timestamp_ms: float) -> List[Obstacle]:
    """Run the spawn cooldown for this tick; returns the obstacles added."""
    target = spawn_cooldown_ms(phase_for(state.elapsed_ms), state.speed)
    if state.spawn_cooldown_ms > 0:
        state.spawn_cooldown_ms -= timestamp_ms - state.last_spawn_ms
        state.last_spawn_ms = timestamp_ms
        return []
    state.last_spawn_ms = timestamp_ms
    state.spawn_cooldown_ms = target

    group = spawn_group(state)
    state.obstacles.extend(group)
    return group


def update_clouds(state: "SimulationState", timestamp_ms: float) -> None:
    drift = state.speed * CLOUD_PARALLAX
    for cloud in state.clouds:
        cloud.x -= drift
    state.clouds = [c for c in state.clouds if c.x + c.w > 0]

    if timestamp_ms - state.last_cloud_ms < CLOUD_INTERVAL_MS:
        return
    state.last_cloud_ms = timestamp_ms
    state.clouds.append(Cloud(x=state.width + CLOUD_SPAWN_MARGIN, y=CLOUD_Y_MIN + state.rng.random() * CLOUD_Y_RANGE))


__all__ = [
    "ClusterConfig",
    "CLUSTER_CONFIGS",
    "Cloud",
    "phase_for",
    "cluster_config",
    "difficulty_factor",
    "spawn_cooldown_ms",
    "safe_jump_gap",
    "cluster_gap",
    "make_sign",
    "spawn_group",
    "maybe_spawn",
    "update_clouds",
]
