import multiprocessing
import time
from typing import Any, Callable, Dict, Optional

from runner.constants import FRAME_MS
from runner.frame_clock import run_ticks
from runner.simulation import InputState, SimulationState, new_session, start_run

# Lookahead in ticks of travel before the nearest sign at which the autopilot jumps
JUMP_LEAD_TICKS = 11.0


def autopilot(state: SimulationState) -> InputState:
    """Naive policy: jump when the next sign is close, hold while rising."""
    c = state.character
    ahead = [o for o in state.obstacles if o.trailing_edge >= c.x]
    if not ahead:
        return InputState(jump_held=not c.on_ground and c.vy < 0)
    nearest = min(ahead, key=lambda o: o.x)
    gap = nearest.x - (c.x + c.w)
    if c.on_ground and 0 <= gap <= state.speed * JUMP_LEAD_TICKS:
        return InputState(jump_pressed=True, jump_held=True)
    return InputState(jump_held=not c.on_ground and c.vy < 0)


def simulate_run(
    seed: int,
    max_ticks: int = 60 * 60 * 5,
    policy: Optional[Callable[[SimulationState], InputState]] = None,
) -> Dict[str, Any]:
    """Play one headless run to game over (or `max_ticks`)."""
    state = start_run(new_session(seed))
    run_ticks(state, max_ticks, FRAME_MS, policy or autopilot)
    ticks = int(round(state.elapsed_ms / FRAME_MS))
    return {
        "seed": seed,
        "score": state.display_score,
        "seconds": int(state.elapsed_ms // 1000),
        "obstacles_passed": state.obstacles_passed,
        "ended": not state.running,
        "ticks": ticks,
    }


def _worker_run(seeds, max_ticks: int, queue: multiprocessing.Queue):
    """
    Worker function to play a list of seeded runs.
    """
    for seed in seeds:
        queue.put(simulate_run(seed, max_ticks))


class BatchSimulation:
    """
    Manages parallel execution of headless autopilot runs.
    """

    def __init__(self, num_envs: int = 4, base_seed: int = 42):
        self.num_envs = num_envs
        self.base_seed = base_seed

    def run_batch(self, runs_per_env: int = 5, max_ticks: int = 60 * 60 * 5) -> Dict[str, Any]:
        queue: multiprocessing.Queue = multiprocessing.Queue()
        processes = []

        start_time = time.time()

        for i in range(self.num_envs):
            seeds = [self.base_seed + i * runs_per_env + k for k in range(runs_per_env)]
            p = multiprocessing.Process(target=_worker_run, args=(seeds, max_ticks, queue))
            processes.append(p)
            p.start()

        results = []
        for _ in range(self.num_envs * runs_per_env):
            results.append(queue.get())

        for p in processes:
            p.join()

        end_time = time.time()
        total_time = end_time - start_time

        total_ticks = sum(r["ticks"] for r in results)
        scores = [r["score"] for r in results]

        return {
            "runs": len(results),
            "total_ticks": total_ticks,
            "wall_time": total_time,
            "tps": total_ticks / total_time if total_time > 0 else 0,
            "best_score": max(scores) if scores else 0,
            "mean_score": sum(scores) / len(scores) if scores else 0,
            "results": sorted(results, key=lambda r: r["seed"]),
        }


def main():
    batch = BatchSimulation(num_envs=4)
    stats = batch.run_batch(runs_per_env=5)
    print(f"Batch Run: {stats['runs']} runs, {stats['total_ticks']} ticks in {stats['wall_time']:.2f}s")
    print(f"Throughput: {stats['tps']:.2f} ticks/sec")
    print(f"Scores: best {stats['best_score']}, mean {stats['mean_score']:.1f}")


if __name__ == "__main__":
    main()
