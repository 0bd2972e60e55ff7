import math

import pytest

from cubed.controls import Controls, Key, move, try_move, turn
from cubed.scene import find_player

GRID = ("11111", "10001", "10N01", "10001", "11111")


@pytest.fixture
def player():
    return find_player(GRID)


def held(*keys):
    controls = Controls()
    for key in keys:
        controls.press(key)
    return controls


def test_key_codes_match_source():
    controls = held(13, 123, 2)
    assert controls.held == {Key.W, Key.LEFT, Key.D}
    controls.release(13)
    assert controls.held == {Key.LEFT, Key.D}


def test_press_and_release():
    controls = Controls()
    assert controls.active() is False
    controls.press(Key.W)
    assert controls.active() is True
    controls.release(Key.W)
    assert controls.active() is False


def test_press_ignores_non_movement_keys():
    controls = held(Key.ESCAPE, 999)
    assert controls.active() is False


def test_press_accepts_raw_key_code():
    controls = held(int(Key.D))
    assert controls.held == {Key.D}


def test_forward_moves_toward_view(player):
    start_x, start_y = player.x, player.y
    assert move(GRID, player, held(Key.W)) is True
    assert player.y < start_y
    assert player.x == start_x


def test_backward_moves_away(player):
    start_y = player.y
    move(GRID, player, held(Key.S))
    assert player.y > start_y


def test_strafe_directions(player):
    start_x = player.x
    move(GRID, player, held(Key.D))
    assert player.x > start_x
    move(GRID, player, held(Key.A))
    move(GRID, player, held(Key.A))
    assert player.x < start_x


def test_forward_never_enters_wall(player):
    controls = held(Key.W)
    for _ in range(500):
        move(GRID, player, controls)
    assert player.y >= 1.0
    assert GRID[int(player.y)][int(player.x)] != "1"


def test_no_keys_leaves_player(player):
    before = (player.x, player.y, player.dir_x, player.dir_y)
    assert move(GRID, player, Controls()) is False
    assert (player.x, player.y, player.dir_x, player.dir_y) == before


def test_quarter_turn_faces_east(player):
    east = find_player(("111", "1E1", "111"))
    turn(player, math.pi / 2)
    assert player.dir_x == pytest.approx(east.dir_x)
    assert player.dir_y == pytest.approx(east.dir_y, abs=1e-12)
    assert player.plane_x == pytest.approx(east.plane_x, abs=1e-12)
    assert player.plane_y == pytest.approx(east.plane_y)


def test_turn_round_trip_and_length(player):
    turn(player, 0.7)
    assert math.hypot(player.dir_x, player.dir_y) == pytest.approx(1.0)
    turn(player, -0.7)
    assert player.dir_x == pytest.approx(0.0, abs=1e-12)
    assert player.dir_y == pytest.approx(-1.0)


def test_left_and_right_turn_opposite_ways():
    left = find_player(GRID)
    right = find_player(GRID)
    move(GRID, left, held(Key.LEFT))
    move(GRID, right, held(Key.RIGHT))
    assert left.dir_x == pytest.approx(-right.dir_x)
    assert left.dir_y == pytest.approx(right.dir_y)


def test_left_wins_when_both_held():
    both = find_player(GRID)
    left = find_player(GRID)
    move(GRID, both, held(Key.LEFT, Key.RIGHT))
    move(GRID, left, held(Key.LEFT))
    assert (both.dir_x, both.dir_y) == (left.dir_x, left.dir_y)


def test_try_move_blocked_by_wall(player):
    before = (player.x, player.y)
    assert try_move(GRID, player, 0.0, -50.0, 1) is False
    assert (player.x, player.y) == before


def test_try_move_outside_map(player):
    before = (player.x, player.y)
    assert try_move(GRID, player, 0.0, -100.0, 1) is False
    assert (player.x, player.y) == before


def test_try_move_backward_sign(player):
    start_y = player.y
    assert try_move(GRID, player, 0.0, -1.0, -1) is True
    assert player.y > start_y


def test_try_move_rejects_bad_sign(player):
    with pytest.raises(ValueError):
        try_move(GRID, player, 0.0, 1.0, 0)