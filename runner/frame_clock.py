"""Frame timing.

The simulation only ever sees a clamped per-frame delta. Whatever schedules
frames (pygame's clock in the app, a plain loop in tests) feeds raw
timestamps through `FrameClock` or calls `run_ticks` directly.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable

from runner.constants import FRAME_MS, MAX_DT_MS

if TYPE_CHECKING:  # pragma: no cover
    from runner.simulation import InputState, SimulationState


def clamp_dt(raw_ms: float, cap_ms: float = MAX_DT_MS) -> float:
    """Bound a frame delta to [0, cap_ms]; long stalls become one capped step."""
    if raw_ms != raw_ms or raw_ms <= 0:  # NaN or clock going backwards
        return 0.0
    return min(cap_ms, raw_ms)


class FrameClock:
    """Turns monotonically increasing timestamps into clamped deltas."""

    def __init__(self, cap_ms: float = MAX_DT_MS) -> None:
        self.cap_ms = cap_ms
        self._last_ms: float | None = None

    def reset(self, now_ms: float | None = None) -> None:
        self._last_ms = now_ms

    def advance(self, now_ms: float) -> float:
        if self._last_ms is None:
            self._last_ms = now_ms
            return 0.0
        raw = now_ms - self._last_ms
        self._last_ms = now_ms
        return clamp_dt(raw, self.cap_ms)


def run_ticks(
    state: "SimulationState",
    ticks: int,
    dt: float = FRAME_MS,
    inputs: "InputState | Iterable[InputState] | Callable[[SimulationState], InputState] | None" = None,
) -> "SimulationState":
    """Drive `tick` directly, stopping early if the run ends.

    `inputs` may be a single InputState reused every tick, an iterable
    consumed one per tick (exhausted -> no input), or a policy called with
    the state before each tick.
    """
    from runner.simulation import InputState, tick

    if inputs is None or isinstance(inputs, InputState):
        source = None
        fixed = inputs or InputState()
    elif callable(inputs):
        source = inputs
        fixed = None
    else:
        it = iter(inputs)
        source = lambda _state: next(it, InputState())  # noqa: E731
        fixed = None

    for _ in range(ticks):
        if not state.running:
            break
        tick(state, dt, fixed if source is None else source(state))
    return state


__all__ = ["clamp_dt", "FrameClock", "run_ticks"]
