import pytest

from runner.constants import CEILING_MARGIN, FRAME_MS, GRAVITY, GROUND_Y, MAX_JUMP_HOLD_MS
from runner.physics import Character, JumpHold, advance, effective_gravity, set_duck, try_jump


def _grounded():
    c = Character()
    c.stand_on(GROUND_Y)
    return c


def _airtime(jump_held: bool) -> int:
    c = _grounded()
    hold = JumpHold()
    assert try_jump(c, hold)
    ticks = 0
    while True:
        advance(c, FRAME_MS, jump_held, GROUND_Y, hold)
        ticks += 1
        if c.on_ground or ticks > 500:
            return ticks


def test_jump_only_from_ground():
    c = _grounded()
    hold = JumpHold()
    assert try_jump(c, hold)
    assert c.vy == -12.5 and not c.on_ground
    assert not try_jump(c, hold)


def test_tap_jump_lands_after_41_ticks():
    assert _airtime(jump_held=False) == 41


def test_tap_jump_never_reaches_ceiling():
    c = _grounded()
    hold = JumpHold()
    try_jump(c, hold)
    lowest_y = c.y
    while True:
        advance(c, FRAME_MS, False, GROUND_Y, hold)
        lowest_y = min(lowest_y, c.y)
        if c.on_ground:
            break
    assert lowest_y > CEILING_MARGIN


def test_holding_jump_floats_longer_and_is_capped():
    held = _airtime(jump_held=True)
    assert held > 41

    c = _grounded()
    hold = JumpHold()
    try_jump(c, hold)
    for _ in range(30):
        advance(c, FRAME_MS, True, GROUND_Y, hold)
    # float assist stops once the window is used up
    assert MAX_JUMP_HOLD_MS <= hold.ms < MAX_JUMP_HOLD_MS + FRAME_MS


def test_float_assist_needs_rising_airborne_character():
    hold = JumpHold()
    c = _grounded()
    assert effective_gravity(c, FRAME_MS, True, hold) == GRAVITY
    c.on_ground = False
    c.vy = 3.0  # falling
    assert effective_gravity(c, FRAME_MS, True, hold) == GRAVITY
    c.vy = -3.0
    assert effective_gravity(c, FRAME_MS, True, hold) < GRAVITY
    assert hold.ms == FRAME_MS


def test_ceiling_clamp():
    c = Character(y=10, vy=-5.0, on_ground=False)
    advance(c, FRAME_MS, False, GROUND_Y, JumpHold())
    assert c.y == CEILING_MARGIN
    assert c.vy == 0.0


def test_duck_keeps_feet_on_ground():
    c = _grounded()
    assert set_duck(c, True, GROUND_Y)
    assert c.h == 52 and c.bottom == GROUND_Y
    assert not set_duck(c, True, GROUND_Y)
    assert set_duck(c, False, GROUND_Y)
    assert c.h == 76 and c.bottom == GROUND_Y


def test_no_duck_in_air():
    c = _grounded()
    try_jump(c, JumpHold())
    assert not set_duck(c, True, GROUND_Y)
    assert c.h == 76


def test_airborne_vy_grows_by_gravity_each_tick():
    c = Character(y=40, vy=-5.0, on_ground=False)
    hold = JumpHold()
    for _ in range(5):
        before = c.vy
        advance(c, FRAME_MS, False, GROUND_Y, hold)
        assert not c.on_ground
        assert c.vy == pytest.approx(before + GRAVITY)


def test_fast_fall_lands_with_zero_velocity():
    c = Character(on_ground=False, vy=40.0)
    c.y = GROUND_Y - c.h - 10
    advance(c, FRAME_MS, False, GROUND_Y, JumpHold())
    assert c.on_ground
    assert c.vy == 0.0
    assert c.bottom == GROUND_Y
