"""Keyboard state, player turning and collision-checked movement."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional, Sequence, Union

from cubed.scene import TURN_SPEED, WALK_SPEED, WALK_STEP, Player

__all__ = ["Key", "Controls", "turn", "try_move", "move"]

_BLOCKING = frozenset("1C")


class Key(IntEnum):
    """Game keys, valued by their macOS key codes."""

    A = 0
    S = 1
    D = 2
    W = 13
    ESCAPE = 53
    LEFT = 123
    RIGHT = 124


_MOVEMENT = frozenset({Key.W, Key.A, Key.S, Key.D, Key.LEFT, Key.RIGHT})


def _as_key(key: Union[Key, int]) -> Optional[Key]:
    try:
        return Key(key)
    except ValueError:
        return None


@dataclass
class Controls:
    """The set of movement keys currently held down."""

    held: set[Key] = field(default_factory=set)

    def press(self, key: Union[Key, int]) -> None:
        """Mark a movement key as held; other keys are ignored."""
        resolved = _as_key(key)
        if resolved in _MOVEMENT:
            self.held.add(resolved)

    def release(self, key: Union[Key, int]) -> None:
        """Mark a key as no longer held."""
        resolved = _as_key(key)
        if resolved is not None:
            self.held.discard(resolved)

    def active(self) -> bool:
        """Return True while any movement key is held."""
        return bool(self.held)


def turn(player: Player, angle: float) -> None:
    """Rotate the player's direction and camera plane by ``angle`` radians."""
    cos, sin = math.cos(angle), math.sin(angle)
    player.dir_x, player.dir_y = (
        player.dir_x * cos - player.dir_y * sin,
        player.dir_x * sin + player.dir_y * cos,
    )
    player.plane_x, player.plane_y = (
        player.plane_x * cos - player.plane_y * sin,
        player.plane_x * sin + player.plane_y * cos,
    )


def try_move(grid: Sequence[str], player: Player, dx: float, dy: float, sign: int) -> bool:
    """Step the player along (dx, dy), forwards for sign 1 or backwards for -1.

    The step is refused when the target cell is a wall, lies outside the
    map, or is past the end of its row. Returns whether the player moved.
    """
    if sign not in (1, -1):
        raise ValueError(f"sign must be 1 or -1, got {sign!r}")
    reach = WALK_SPEED * WALK_STEP
    target_x = player.x + sign * dx * reach
    target_y = player.y + sign * dy * reach
    row_index = int(target_y)
    if not 0 <= row_index < len(grid):
        return False
    row = grid[row_index]
    column = int(target_x)
    if not 0 <= column < len(row) or row[column] in _BLOCKING:
        return False
    player.x, player.y = target_x, target_y
    return True


def move(grid: Sequence[str], player: Player, controls: Controls) -> bool:
    """Apply one frame of held keys to the player.

    Returns True when any movement key is held, meaning the view needs redrawing.
    """
    held = controls.held
    if Key.W in held:
        try_move(grid, player, player.dir_x, player.dir_y, 1)
    if Key.S in held:
        try_move(grid, player, player.dir_x, player.dir_y, -1)
    if Key.D in held:
        try_move(grid, player, player.plane_x, player.plane_y, 1)
    if Key.A in held:
        try_move(grid, player, player.plane_x, player.plane_y, -1)
    if Key.LEFT in held or Key.RIGHT in held:
        turn(player, -TURN_SPEED if Key.LEFT in held else TURN_SPEED)
    return controls.active()