import math

from runner.frame_clock import FrameClock, clamp_dt, run_ticks
from runner.obstacles import make_obstacle
from runner.simulation import InputState, new_session, start_run


def test_clamp_dt():
    assert clamp_dt(16.0) == 16.0
    assert clamp_dt(500.0) == 50.0
    assert clamp_dt(0.0) == 0.0
    assert clamp_dt(-3.0) == 0.0
    assert clamp_dt(math.nan) == 0.0
    assert clamp_dt(80.0, cap_ms=100.0) == 80.0


def test_frame_clock_deltas():
    clock = FrameClock()
    assert clock.advance(1000.0) == 0.0
    assert clock.advance(1016.0) == 16.0
    # tab was hidden for ten seconds
    assert clock.advance(11016.0) == 50.0
    clock.reset(20000.0)
    assert clock.advance(20010.0) == 10.0


def test_run_ticks_stops_when_run_ends():
    state = start_run(new_session(1))
    state.obstacles.append(make_obstacle("sign", x=80, post_h=30, board_w=50, board_h=16, base_y=state.ground_y))
    run_ticks(state, 100)
    assert not state.running
    assert state.elapsed_ms < 20


def test_run_ticks_accepts_input_sequences_and_policies():
    state = start_run(new_session(1))
    run_ticks(state, 3, inputs=[InputState(jump_pressed=True)])
    assert not state.character.on_ground

    seen = []

    def policy(s):
        seen.append(s.elapsed_ms)
        return InputState()

    state = start_run(new_session(1))
    run_ticks(state, 5, dt=10.0, inputs=policy)
    assert seen == [0.0, 10.0, 20.0, 30.0, 40.0]
