import pytest

from runner.constants import GROUND_Y
from runner.simulation import new_session, start_run
from runner.spawner import (
    cluster_config,
    cluster_gap,
    difficulty_factor,
    make_sign,
    maybe_spawn,
    phase_for,
    safe_jump_gap,
    spawn_cooldown_ms,
    spawn_group,
    update_clouds,
)


def _running(seed=1, elapsed_ms=0.0):
    state = start_run(new_session(seed))
    state.elapsed_ms = elapsed_ms
    return state


@pytest.mark.parametrize(
    "elapsed,phase",
    [(0, 1), (14999, 1), (15000, 2), (29999, 2), (30000, 3), (59999, 3), (60000, 4), (10**7, 4)],
)
def test_phase_boundaries(elapsed, phase):
    assert phase_for(elapsed) == phase


def test_cooldown_by_phase_and_speed():
    assert spawn_cooldown_ms(1, 4.6) == 1650
    assert spawn_cooldown_ms(2, 5.0) == 1300
    assert spawn_cooldown_ms(3, 6.0) == pytest.approx(1100 - 75)
    # speed reduction is capped at 420
    assert spawn_cooldown_ms(4, 50.0) == 950 - 420
    assert spawn_cooldown_ms(1, 50.0) >= 420


def test_difficulty_ramp():
    assert difficulty_factor(0) == 0.0
    assert difficulty_factor(60000) == pytest.approx(0.5)
    assert difficulty_factor(500000) == 1.0


def test_safe_gap_and_cluster_gap_clamped():
    assert 80 <= safe_jump_gap(4.6) <= 220
    assert safe_jump_gap(1.0) == safe_jump_gap(4.6)
    assert cluster_gap(4.6, 1.0, jitter=6) == 220
    for factor in (0.9, 0.92, 0.95, 1.0):
        for jitter in (-6, 0, 6):
            assert 80 <= cluster_gap(30.0, factor, jitter) <= 220


def test_cluster_configs():
    assert cluster_config(1).max_extras == 0
    assert cluster_config(4).probability == pytest.approx(0.65)
    assert cluster_config(9) == cluster_config(4)


def test_sign_size_bounds():
    for seed in range(100):
        state = _running(seed, elapsed_ms=seed * 1500.0)
        sign = make_sign(state, 500)
        diff = difficulty_factor(state.elapsed_ms)
        assert 24 <= sign.post_h <= 34 + diff * 4
        assert 44 <= sign.board_w <= 56
        assert sign.board_h in (16, 24)
        assert sign.base_y == GROUND_Y


def test_first_phase_never_clusters():
    for seed in range(50):
        group = spawn_group(_running(seed, elapsed_ms=1000.0))
        assert len(group) == 1
        assert group[0].x == 800 + 30


def test_late_clusters_share_size_and_keep_safe_spacing():
    sizes = []
    for seed in range(200):
        state = _running(seed, elapsed_ms=70000.0)
        state.speed = 9.0
        group = spawn_group(state)
        sizes.append(len(group))
        for prev, nxt in zip(group, group[1:]):
            gap = nxt.x - (prev.x + prev.w)
            assert 80 <= gap <= 220
            assert (nxt.post_h, nxt.board_w, nxt.board_h) == (prev.post_h, prev.board_w, prev.board_h)
    assert max(sizes) > 1
    assert max(sizes) <= 3


def test_maybe_spawn_respects_cooldown():
    state = _running(3)
    first = maybe_spawn(state, 16.0)
    assert len(first) >= 1
    assert state.spawn_cooldown_ms == 1650
    assert maybe_spawn(state, 32.0) == []
    assert state.spawn_cooldown_ms == pytest.approx(1650 - 16.0)


def test_clouds_spawn_drift_and_despawn():
    state = _running(4)
    update_clouds(state, 1000.0)
    assert state.clouds == []
    update_clouds(state, 2000.0)
    assert len(state.clouds) == 1
    cloud = state.clouds[0]
    assert cloud.x == 800 + 40
    assert 40 <= cloud.y <= 120

    update_clouds(state, 2016.0)
    assert cloud.x < 840

    cloud.x = -cloud.w - 1
    update_clouds(state, 2032.0)
    assert cloud not in state.clouds


def test_cooldown_never_increases_with_speed_or_phase():
    speeds = [4.6 + i * 0.25 for i in range(80)]
    for phase in (1, 2, 3, 4):
        cooldowns = [spawn_cooldown_ms(phase, s) for s in speeds]
        assert all(b <= a for a, b in zip(cooldowns, cooldowns[1:]))
    for s in speeds:
        by_phase = [spawn_cooldown_ms(p, s) for p in (1, 2, 3, 4)]
        assert all(b <= a for a, b in zip(by_phase, by_phase[1:]))
        assert spawn_cooldown_ms(4, s) <= spawn_cooldown_ms(1, s)
