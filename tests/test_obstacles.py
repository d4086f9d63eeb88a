import pytest

from runner.obstacles import (
    SignObstacle,
    get_obstacle_class,
    make_obstacle,
    obstacle_from_dict,
)


def test_sign_geometry():
    sign = make_obstacle("sign", x=200, post_h=30, board_w=50, board_h=24, base_y=242)
    assert isinstance(sign, SignObstacle)
    assert sign.kind == "sign"
    assert sign.w == 50
    assert sign.h == 54
    assert sign.y_top == 242 - 54

    post = sign.post_rect()
    board = sign.board_rect()
    # post is 6 wide, centred under the board, standing on the ground
    assert post.w == 6
    assert post.x + post.w / 2 == board.x + board.w / 2
    assert post.bottom == 242
    assert board.bottom == post.top
    assert sign.hitboxes() == (post, board)


def test_move_and_trailing_edge():
    sign = make_obstacle("sign", x=100, post_h=30, board_w=44, board_h=16, base_y=242)
    sign.move_by(-10)
    assert sign.x == 90
    assert sign.trailing_edge == 134


def test_registry_lookup():
    assert get_obstacle_class("sign") is SignObstacle
    with pytest.raises(ValueError):
        get_obstacle_class("cactus")


def test_from_dict():
    sign = make_obstacle("sign", x=12.5, post_h=28, board_w=48, board_h=16, base_y=242, passed=True)
    copy = obstacle_from_dict(sign.to_dict())
    assert copy == sign
    with pytest.raises(ValueError):
        obstacle_from_dict({"x": 1})
