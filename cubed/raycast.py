"""Grid ray casting and textured column rendering."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Sequence

from cubed.scene import SCREEN_HEIGHT, SCREEN_WIDTH, TEXTURE_SIZE, Player
from cubed.xpm import Image

__all__ = ["RayHit", "Frame", "cast_ray", "render"]

_INT_MAX = 2**31 - 1
_HALF_HEIGHT = SCREEN_HEIGHT // 2


@dataclass(frozen=True)
class RayHit:
    """Where one screen column's ray ended and how its wall slice is drawn.

    ``side`` is 0 when an x-facing grid line was crossed last and 1 for a
    y-facing one. ``wall`` indexes the textures in NO, SO, WE, EA order.
    ``wall_x`` is the fractional position along the wall face that was hit.
    """

    hit: bool
    map_x: int
    map_y: int
    side: int
    ray_dir_x: float
    ray_dir_y: float
    perp_dist: float
    line_height: int
    draw_start: int
    draw_end: int
    wall: int
    wall_x: float
    tex_x: int


@dataclass
class Frame:
    """A row-major buffer of 0xRRGGBB pixels."""

    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    pixels: list[int] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"frame size must be positive, got {self.width}x{self.height}")
        self.pixels = [0] * (self.width * self.height)

    def put(self, x: int, y: int, color: int) -> None:
        """Set one pixel; coordinates outside the frame are ignored."""
        if 0 <= x < self.width and 0 <= y < self.height:
            self.pixels[y * self.width + x] = color

    def get(self, x: int, y: int) -> int:
        """Return the pixel at column ``x`` and row ``y``."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} frame")
        return self.pixels[y * self.width + x]


def _inverse_abs(value: float) -> float:
    return math.inf if value == 0 else abs(1.0 / value)


def _line_height(perp: float) -> int:
    if math.isnan(perp):
        return 0
    if perp <= 0:
        return _INT_MAX
    return min(int(SCREEN_HEIGHT / perp), _INT_MAX)


def cast_ray(grid: Sequence[str], player: Player, column: int) -> RayHit:
    """Walk the grid along the ray for screen ``column`` until a wall is met."""
    camera = 2 * column / SCREEN_WIDTH - 1
    ray_x = player.dir_x + player.plane_x * camera
    ray_y = player.dir_y + player.plane_y * camera
    map_x, map_y = int(player.x), int(player.y)
    delta_x = _inverse_abs(ray_x)
    delta_y = _inverse_abs(ray_y)

    if ray_x < 0:
        step_x, side_x = -1, (player.x - map_x) * delta_x
    else:
        step_x, side_x = 1, (map_x + 1.0 - player.x) * delta_x
    if ray_y < 0:
        step_y, side_y = -1, (player.y - map_y) * delta_y
    else:
        step_y, side_y = 1, (map_y + 1.0 - player.y) * delta_y

    hit = False
    side = 0
    while not hit:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1
        if not 0 <= map_y < len(grid):
            break
        row = grid[map_y]
        if not 0 <= map_x < len(row):
            break
        hit = row[map_x] == "1"

    perp = side_x - delta_x if side == 0 else side_y - delta_y
    height = _line_height(perp)
    draw_start = max(-(height // 2) + _HALF_HEIGHT, 0)
    draw_end = min(height // 2 + _HALF_HEIGHT, SCREEN_HEIGHT)

    if side == 0:
        wall_pos = player.y + perp * ray_y
        wall = 3 if map_x < player.x else 2
    else:
        wall_pos = player.x + perp * ray_x
        wall = 1 if map_y < player.y else 0
    wall_x = wall_pos - math.floor(wall_pos) if math.isfinite(wall_pos) else 0.0

    tex_x = int(wall_x * TEXTURE_SIZE)
    if (side == 0 and ray_x > 0) or (side == 1 and ray_y < 0):
        tex_x = TEXTURE_SIZE - tex_x - 1

    return RayHit(
        hit=hit,
        map_x=map_x,
        map_y=map_y,
        side=side,
        ray_dir_x=ray_x,
        ray_dir_y=ray_y,
        perp_dist=perp,
        line_height=height,
        draw_start=draw_start,
        draw_end=draw_end,
        wall=wall,
        wall_x=wall_x,
        tex_x=tex_x,
    )


def _column(ray: RayHit, texture: Image, ceiling: int, floor: int) -> list[int]:
    height = ray.line_height
    step = TEXTURE_SIZE / height if height else 0.0
    tex_pos = (ray.draw_start - _HALF_HEIGHT + height // 2) * step
    tex_x = ray.tex_x % texture.width
    wall = []
    for _ in range(ray.draw_end - ray.draw_start):
        tex_y = int(tex_pos) & (TEXTURE_SIZE - 1)
        tex_pos += step
        wall.append(texture.pixel(tex_x, tex_y % texture.height))
    return [ceiling] * ray.draw_start + wall + [floor] * (SCREEN_HEIGHT - ray.draw_end)


def render(
    grid: Sequence[str],
    player: Player,
    textures: Sequence[Image],
    ceiling: int,
    floor: int,
) -> Frame:
    """Draw a full view: ceiling, textured walls and floor for every column.

    ``textures`` holds the wall images in NO, SO, WE, EA order.
    """
    frame = Frame()
    for column in range(frame.width):
        ray = cast_ray(grid, player, column)
        frame.pixels[column::frame.width] = _column(ray, textures[ray.wall], ceiling, floor)
    return frame