# cubed

A small first-person raycaster. It reads a `.cub` scene file naming four
wall textures, a floor colour and a ceiling colour, followed by a grid map.
It checks that the map is closed by walls and lets you walk around it in a
pygame window.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Running

```
cubed path/to/scene.cub
```

Exactly one scene file must be given, and its name must end in `.cub`.
If the scene or a texture cannot be read, an error message is printed and
the command exits with status 1.

### Controls

| Key            | Action            |
|----------------|-------------------|
| W / S          | walk forward/back |
| A / D          | strafe left/right |
| Left / Right   | turn              |
| Esc            | quit              |

Closing the window also quits. Walking into a wall cell, or off the map, is
refused.

## Scene files

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm
F 220,100,0
C 225,30,0

111111
100001
10N001
111111
```

- `NO`, `SO`, `WE`, `EA` name the XPM wall textures. All four must appear
  before the later of the `F` and `C` lines, since reading the header stops
  once both colours are known. Textures are sampled as 64×64 images.
- `F` and `C` give the floor and ceiling colours as `R,G,B`. The components
  are not range checked.
- Blank lines before the map are skipped. The map uses `1` for walls, `0`
  for open floor, spaces for nothing, and exactly one of `N`, `S`, `E`, `W`
  for the player's start and facing. Any other character is an error.
  Rows are padded with spaces to the widest row. Every open cell must be
  enclosed by walls, and the map may not contain blank lines.

XPM textures may use `#RRGGBB` colours or X11 colour names, and `None` for
transparent pixels. Comments outside quoted strings are ignored.

## Using it as a library

- `cubed.scene.load_scene(path)` / `parse_scene(text)` return a `Scene`
  with the texture paths, `ceiling` and `floor` colours, the padded `grid`
  and a `Player`. Problems raise `SceneError`. The helpers `parse_color`,
  `pad_map`, `check_map` and `find_player` are available on their own.
- `cubed.xpm.load_xpm(path)` / `parse_xpm(lines)` decode XPM data into an
  `Image` (`width`, `height`, `pixels`, `pixel(x, y)`). Problems raise
  `XpmError`. `strip_comments` and `color_from_spec` are also exposed.
  `cubed.colors.lookup_color(name)` resolves X11 colour names, ignoring
  case.
- `cubed.raycast.render(grid, player, textures, ceiling, floor)` draws a
  full 1280×720 `Frame` (`put`, `get`, `pixels`). `cast_ray(grid, player,
  column)` traces a single screen column and returns a `RayHit`.
- `cubed.controls` holds the key state (`Key`, `Controls` with `press`,
  `release` and `active`) and the movement and turning rules (`move`,
  `try_move`, `turn`).
- `cubed.app.Game` ties these together: `handle_key(key, pressed)` and
  `tick()` advance the state and redraw `game.frame`.
  `load_textures(scene)` loads a scene's four textures.

## What it does not do

There is no mouse look, no minimap, no sprites or doors, no sound, and no
enemies or shooting. The window is a fixed 1280×720.