from runner.batch_sim import BatchSimulation, autopilot, simulate_run
from runner.obstacles import make_obstacle
from runner.simulation import InputState, new_session, start_run


def test_autopilot_jumps_when_sign_is_close():
    state = start_run(new_session(1))
    assert not autopilot(state).jump_pressed
    sign = make_obstacle("sign", x=150, post_h=30, board_w=50, board_h=16, base_y=state.ground_y)
    state.obstacles.append(sign)
    intent = autopilot(state)
    assert intent.jump_pressed and intent.jump_held

    sign.x = 700
    assert not autopilot(state).jump_pressed


def test_simulate_run_is_deterministic():
    a = simulate_run(7, max_ticks=1500)
    b = simulate_run(7, max_ticks=1500)
    assert a == b
    assert a["ticks"] <= 1500
    assert a["score"] >= 0


def test_autopilot_beats_standing_still():
    idle = simulate_run(3, max_ticks=3000, policy=lambda s: InputState())
    auto = simulate_run(3, max_ticks=3000)
    assert auto["obstacles_passed"] >= idle["obstacles_passed"]


def test_batch_runs_in_parallel():
    stats = BatchSimulation(num_envs=2, base_seed=10).run_batch(runs_per_env=1, max_ticks=200)
    assert stats["runs"] == 2
    assert [r["seed"] for r in stats["results"]] == [10, 11]
    assert stats["total_ticks"] > 0
