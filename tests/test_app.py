import pytest

from cubed.app import Game, load_textures, main
from cubed.controls import Key
from cubed.scene import SCREEN_HEIGHT, SCREEN_WIDTH, parse_scene
from cubed.xpm import Image, XpmError

MAP = (
    "1111111\n"
    "1000001\n"
    "1000001\n"
    "100N001\n"
    "1000001\n"
    "1000001\n"
    "1111111\n"
)

COLORS = (0x110000, 0x002200, 0x000033, 0x444444)


def scene_text(names=("no.xpm", "so.xpm", "we.xpm", "ea.xpm")):
    header = "".join(f"{key} {name}\n" for key, name in zip(("NO", "SO", "WE", "EA"), names))
    return header + "F 10,20,30\nC 40,50,60\n\n" + MAP


def solid(color):
    return Image(1, 1, (color,))


@pytest.fixture
def game():
    scene = parse_scene(scene_text())
    return Game(scene, [solid(c) for c in COLORS])


def write_xpm(path, color_hex):
    path.write_text(
        "/* XPM */\n"
        "static char *img[] = {\n"
        '"2 2 1 1",\n'
        f'"a c #{color_hex}",\n'
        '"aa",\n'
        '"aa"\n'
        "};\n"
    )


def test_main_without_map_prints_usage(capsys):
    assert main([]) == 1
    assert "single map" in capsys.readouterr().out


def test_main_with_two_args_fails(capsys):
    assert main(["a.cub", "b.cub"]) == 1
    assert "single map" in capsys.readouterr().out


def test_main_rejects_wrong_extension(capsys):
    assert main(["map.txt"]) == 1
    assert "error" in capsys.readouterr().out


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "absent.cub")]) == 1
    assert "error" in capsys.readouterr().out


def test_load_textures_reads_in_order(tmp_path):
    names = []
    for key, hex_color in zip(("no", "so", "we", "ea"), ("FF0000", "00FF00", "0000FF", "FFFFFF")):
        path = tmp_path / f"{key}.xpm"
        write_xpm(path, hex_color)
        names.append(str(path))
    scene = parse_scene(scene_text(names))
    textures = load_textures(scene)
    assert [t.pixel(0, 0) for t in textures] == [0xFF0000, 0x00FF00, 0x0000FF, 0xFFFFFF]
    assert all((t.width, t.height) == (2, 2) for t in textures)


def test_load_textures_missing_file(tmp_path):
    scene = parse_scene(scene_text([str(tmp_path / "none.xpm")] * 4))
    with pytest.raises(XpmError):
        load_textures(scene)


def test_game_rejects_wrong_texture_count():
    scene = parse_scene(scene_text())
    with pytest.raises(ValueError):
        Game(scene, [solid(0)])


def test_initial_frame_has_ceiling_wall_and_floor(game):
    frame = game.frame
    assert (frame.width, frame.height) == (SCREEN_WIDTH, SCREEN_HEIGHT)
    assert frame.get(0, 0) == game.scene.ceiling
    assert frame.get(SCREEN_WIDTH - 1, SCREEN_HEIGHT - 1) == game.scene.floor
    # Facing north the wall above the player uses the slot the renderer picks for it.
    assert frame.get(SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2) == COLORS[1]


def test_forward_key_moves_and_redraws(game):
    start_x, start_y = game.player.x, game.player.y
    game.handle_key(Key.W, True)
    assert game.tick() is True
    assert game.player.y < start_y
    assert game.player.x == pytest.approx(start_x)
    game.handle_key(Key.W, False)
    moved_y = game.player.y
    assert game.tick() is False
    assert game.player.y == moved_y


def test_game_does_not_mutate_scene_player(game):
    original = game.scene.player.y
    game.handle_key(Key.W, True)
    game.tick()
    assert game.scene.player.y == original
    assert game.player.y != original


def test_escape_stops_game(game):
    game.handle_key(Key.ESCAPE, True)
    assert game.running is False
    game.handle_key(Key.W, True)
    assert game.tick() is False


def test_escape_on_release_also_stops(game):
    game.handle_key(Key.ESCAPE, False)
    assert game.running is False


def test_unknown_key_is_ignored(game):
    game.handle_key(999, True)
    assert game.controls.active() is False
    assert game.running is True