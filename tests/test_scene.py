import math

import pytest

from cubed.scene import (
    FOV,
    Player,
    SceneError,
    check_map,
    find_player,
    load_scene,
    pad_map,
    parse_color,
    parse_scene,
)

HEADER = (
    "NO ./textures/north.xpm\n"
    "SO ./textures/south.xpm\n"
    "WE ./textures/west.xpm\n"
    "EA ./textures/east.xpm\n"
    "\n"
    "F 255,255,255\n"
    "C 0,0,255\n"
)

MAP = "1111\n1N01\n1111\n"

SCENE = HEADER + "\n" + MAP


def test_parse_color_white():
    assert parse_color("F 255,255,255\n") == 16777215


@pytest.mark.parametrize("rgb", [(0, 0, 0), (12, 34, 56), (255, 0, 128), (1, 2, 3)])
def test_parse_color_channels_round_trip(rgb):
    red, green, blue = rgb
    color = parse_color(f"C {red},{green},{blue}\n")
    assert (color >> 16) & 0xFF == red
    assert (color >> 8) & 0xFF == green
    assert color & 0xFF == blue


def test_parse_color_skips_empty_fields():
    assert parse_color("F 10,,20,30\n") == parse_color("F 10,20,30\n")


def test_parse_color_needs_three_parts():
    with pytest.raises(SceneError):
        parse_color("F 10,20\n")


def test_pad_map_pads_to_widest_row():
    rows = ["111", "1", "11111"]
    padded = pad_map(rows)
    assert {len(row) for row in padded} == {max(len(row) for row in rows)}
    assert [row.rstrip(" ") for row in padded] == rows


def test_pad_map_rejects_unknown_character():
    with pytest.raises(SceneError):
        pad_map(["111", "1\t1", "111"])


def test_check_map_closed():
    assert check_map(["1111", "1N01", "1111"]) is True


@pytest.mark.parametrize(
    "grid",
    [
        ["1011", "1N01", "1111"],  # open top
        ["1111", "0N01", "1111"],  # open left
        ["1111", "1N01", "1101"],  # open bottom
        ["1111", "10 1", "1111"],  # floor next to space in a row
        ["1111", "1001", "1 11"],  # floor above a space in a column
    ],
)
def test_check_map_open(grid):
    assert check_map(grid) is False


def test_find_player_north():
    player = find_player(["111", "1N1", "111"])
    assert (player.x, player.y) == (1.5, 1.5)
    assert (player.dir_x, player.dir_y) == (0, -1)
    assert (player.plane_x, player.plane_y) == (FOV, 0)


@pytest.mark.parametrize(
    "heading, direction",
    [("N", (0, -1)), ("S", (0, 1)), ("W", (-1, 0)), ("E", (1, 0))],
)
def test_find_player_headings(heading, direction):
    player = find_player(["111", f"1{heading}1", "111"])
    assert (player.dir_x, player.dir_y) == direction
    assert player.dir_x * player.plane_x + player.dir_y * player.plane_y == 0
    assert math.isclose(math.hypot(player.plane_x, player.plane_y), FOV)


@pytest.mark.parametrize("grid", [["111", "101", "111"], ["1111", "1NS1", "1111"]])
def test_find_player_needs_exactly_one(grid):
    with pytest.raises(SceneError):
        find_player(grid)


def test_parse_scene_full():
    scene = parse_scene(SCENE)
    assert scene.textures == (
        "./textures/north.xpm",
        "./textures/south.xpm",
        "./textures/west.xpm",
        "./textures/east.xpm",
    )
    assert scene.floor == 16777215
    assert scene.ceiling == 255
    assert scene.grid == ("1111", "1N01", "1111")
    assert scene.player == find_player(scene.grid)
    assert isinstance(scene.player, Player) and scene.player.dir_y == -1


def test_parse_scene_ignores_unknown_header_lines():
    assert parse_scene("junk line\n" + SCENE) == parse_scene(SCENE)


def test_parse_scene_skips_blank_lines_before_map():
    assert parse_scene(HEADER + "\n\n\n" + MAP) == parse_scene(HEADER + MAP)


@pytest.mark.parametrize(
    "text",
    [
        HEADER + "1111\n\n1N01\n1111\n",  # blank line inside the map
        HEADER + MAP + "\n",  # trailing blank line
    ],
)
def test_parse_scene_rejects_empty_map_lines(text):
    with pytest.raises(SceneError):
        parse_scene(text)


def test_parse_scene_missing_texture():
    text = SCENE.replace("NO ./textures/north.xpm\n", "")
    with pytest.raises(SceneError):
        parse_scene(text)


def test_parse_scene_missing_colour():
    text = SCENE.replace("C 0,0,255\n", "")
    with pytest.raises(SceneError):
        parse_scene(text)


def test_parse_scene_texture_after_colours_is_map():
    text = (
        "SO a.xpm\nWE b.xpm\nEA c.xpm\nF 1,2,3\nC 4,5,6\nNO d.xpm\n" + MAP
    )
    with pytest.raises(SceneError):
        parse_scene(text)


def test_parse_scene_open_map():
    with pytest.raises(SceneError):
        parse_scene(HEADER + "1111\n1N0 \n1111\n")


def test_parse_scene_no_map():
    with pytest.raises(SceneError):
        parse_scene(HEADER + "\n")


def test_load_scene_round_trip(tmp_path):
    path = tmp_path / "map.cub"
    path.write_text(SCENE)
    assert load_scene(path) == parse_scene(SCENE)


@pytest.mark.parametrize("name", ["map.txt", ".cub", "map.cubx"])
def test_load_scene_wrong_extension(name):
    with pytest.raises(SceneError):
        load_scene(name)


def test_load_scene_missing_file(tmp_path):
    with pytest.raises(SceneError):
        load_scene(tmp_path / "absent.cub")