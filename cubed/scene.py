"""Scene files: wall textures, floor and ceiling colours, map grid and player start."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from itertools import dropwhile, takewhile
from typing import Iterable, Iterator, Optional, Union

__all__ = [
    "SCREEN_WIDTH",
    "SCREEN_HEIGHT",
    "FOV",
    "WALK_SPEED",
    "WALK_STEP",
    "TURN_SPEED",
    "TEXTURE_SIZE",
    "TEXTURE_KEYS",
    "SceneError",
    "Player",
    "Scene",
    "parse_color",
    "pad_map",
    "check_map",
    "find_player",
    "parse_scene",
    "load_scene",
]

SCREEN_WIDTH = 1280
SCREEN_HEIGHT = 720
FOV = 0.66
WALK_SPEED = 3
WALK_STEP = 0.015
TURN_SPEED = 0.03
TEXTURE_SIZE = 64

# Texture slots, in the order the renderer indexes them.
TEXTURE_KEYS = ("NO", "SO", "WE", "EA")

MAP_CHARS = frozenset("10NSEW ")
PLAYER_CHARS = frozenset("NSEW")
_OPEN_CELLS = frozenset("0NSEW")

_HEADINGS = {
    "N": ((0.0, -1.0), (FOV, 0.0)),
    "S": ((0.0, 1.0), (-FOV, 0.0)),
    "W": ((-1.0, 0.0), (0.0, -FOV)),
    "E": ((1.0, 0.0), (0.0, FOV)),
}

_INT_MAX = 2**31 - 1
_ATOI = re.compile(r"[\t\n\v\f\r ]*([+-]?)0*([0-9]*)")


class SceneError(ValueError):
    """Raised when a scene file is malformed."""


@dataclass
class Player:
    """Player position, view direction and camera plane, in map cells."""

    x: float
    y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float


@dataclass(frozen=True)
class Scene:
    """A parsed scene: texture paths (NO, SO, WE, EA), colours, grid and player."""

    textures: tuple[str, ...]
    ceiling: int
    floor: int
    grid: tuple[str, ...]
    player: Player

    @property
    def width(self) -> int:
        return max((len(row) for row in self.grid), default=0)

    @property
    def height(self) -> int:
        return len(self.grid)


def _atoi(text: str) -> int:
    match = _ATOI.match(text)
    sign, digits = match.group(1), match.group(2)
    if not digits:
        return 0
    value = int(digits)
    if value > _INT_MAX:
        return 0 if sign == "-" else -1
    return -value if sign == "-" else value


def parse_color(line: str) -> int:
    """Read an ``F r,g,b`` or ``C r,g,b`` line into a 0xRRGGBB value.

    Empty fields between commas are skipped; components are not range checked.
    """
    parts = [part for part in line.split(",") if part]
    if len(parts) < 3:
        raise SceneError(f"colour needs three components: {line.strip()!r}")
    red = _atoi(parts[0][2:])
    green = _atoi(parts[1])
    blue = _atoi(parts[2])
    return (red << 16 | green << 8 | blue) & 0xFFFFFFFF


def pad_map(rows: Iterable[str]) -> tuple[str, ...]:
    """Check map characters and pad every row with spaces to the widest row."""
    rows = list(rows)
    for row in rows:
        bad = set(row) - MAP_CHARS
        if bad:
            raise SceneError(f"unsupported character {min(bad)!r} in map")
    width = max((len(row) for row in rows), default=0)
    return tuple(row.ljust(width) for row in rows)


def _rows_closed(rows: list[str]) -> bool:
    for row in rows:
        walled = False
        previous: Optional[str] = None
        for cell in row:
            if not walled and cell == "1":
                walled = True
            if not walled and cell in _OPEN_CELLS:
                return False
            if walled and cell == " ":
                if previous in _OPEN_CELLS:
                    return False
                walled = False
            previous = cell
    return True


def _columns_closed(rows: list[str]) -> bool:
    if not rows:
        return True
    last = len(rows) - 1
    for column in range(len(rows[0])):
        walled = False
        above: Optional[str] = None
        cells = (row[column] for row in takewhile(lambda r: column < len(r), rows))
        for depth, cell in enumerate(cells):
            if not walled and cell == "1":
                walled = True
            if not walled and cell in _OPEN_CELLS:
                return False
            if walled and cell == " ":
                if above in _OPEN_CELLS:
                    return False
                walled = False
            if depth == last and cell in _OPEN_CELLS:
                return False
            above = cell
    return True


def check_map(rows: Iterable[str]) -> bool:
    """Return True when floor and player cells are enclosed by walls."""
    rows = list(rows)
    return _rows_closed(rows) and _columns_closed(rows)


def find_player(grid: Iterable[str]) -> Player:
    """Locate the single N/S/E/W start cell and build the player facing that way."""
    starts = [
        (x, y, cell)
        for y, row in enumerate(grid)
        for x, cell in enumerate(row)
        if cell in PLAYER_CHARS
    ]
    if len(starts) != 1:
        raise SceneError(f"map needs exactly one player start, found {len(starts)}")
    x, y, heading = starts[0]
    (dir_x, dir_y), (plane_x, plane_y) = _HEADINGS[heading]
    return Player(x + 0.5, y + 0.5, dir_x, dir_y, plane_x, plane_y)


def _split_lines(text: str) -> Iterator[str]:
    parts = text.split("\n")
    for part in parts[:-1]:
        yield part + "\n"
    if parts[-1]:
        yield parts[-1]


def _drop_newline(text: str) -> str:
    return text[:-1] if text.endswith("\n") else text


def _read_header(lines: Iterator[str]) -> tuple[tuple[str, ...], int, int]:
    textures: dict[str, str] = {}
    floor: Optional[int] = None
    ceiling: Optional[int] = None
    for line in lines:
        if line.startswith("\n"):
            continue
        key = line[:3]
        if key[:2] in TEXTURE_KEYS and key[2:] == " ":
            textures[key[:2]] = _drop_newline(line[3:])
        elif line.startswith("F "):
            floor = parse_color(line)
        elif line.startswith("C "):
            ceiling = parse_color(line)
        if floor is not None and ceiling is not None:
            break
    else:
        raise SceneError("floor and ceiling colours must both be given before the map")
    missing = [key for key in TEXTURE_KEYS if key not in textures]
    if missing:
        raise SceneError(f"missing texture for {', '.join(missing)}")
    return tuple(textures[key] for key in TEXTURE_KEYS), ceiling, floor


def _read_map(lines: Iterator[str]) -> list[str]:
    body = "".join(dropwhile(lambda line: line.startswith("\n"), lines))
    if not body:
        raise SceneError("scene has no map")
    if "\n\n" in body:
        raise SceneError("map must not contain empty lines")
    return [row for row in body.split("\n") if row]


def parse_scene(text: str) -> Scene:
    """Parse the contents of a scene file."""
    lines = _split_lines(text)
    textures, ceiling, floor = _read_header(lines)
    grid = pad_map(_read_map(lines))
    if not check_map(grid):
        raise SceneError("map and player must be enclosed by walls")
    return Scene(textures, ceiling, floor, grid, find_player(grid))


def load_scene(path: Union[str, "os.PathLike[str]"]) -> Scene:
    """Read and parse a ``.cub`` scene file."""
    name = os.fspath(path)
    if isinstance(name, bytes):
        name = os.fsdecode(name)
    if len(name) < 5 or not name.endswith(".cub"):
        raise SceneError("wrong file format: expected a file named like map.cub")
    try:
        with open(name, encoding="utf-8", newline="") as handle:
            text = handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise SceneError(f"cannot read {name}: {exc}") from exc
    return parse_scene(text)