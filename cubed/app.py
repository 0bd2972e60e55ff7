"""Game state, window loop and command-line entry point."""

from __future__ import annotations

import sys
from array import array
from dataclasses import dataclass, field, replace
from typing import Optional, Sequence, Union

import pygame

from cubed.controls import Controls, Key, move
from cubed.raycast import Frame, render
from cubed.scene import (
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    TEXTURE_KEYS,
    Player,
    Scene,
    SceneError,
    load_scene,
)
from cubed.xpm import Image, XpmError, load_xpm

__all__ = ["Game", "load_textures", "main"]

USAGE = "error: please run with single map: cubed map.cub"
_FPS = 60


def load_textures(scene: Scene) -> tuple[Image, ...]:
    """Load the scene's wall textures in NO, SO, WE, EA order."""
    return tuple(load_xpm(path) for path in scene.textures)


@dataclass
class Game:
    """A running game: the scene, its textures, the player and the last drawn frame."""

    scene: Scene
    textures: Sequence[Image]
    player: Player = field(init=False)
    controls: Controls = field(init=False, default_factory=Controls)
    frame: Frame = field(init=False, repr=False)
    running: bool = field(init=False, default=True)

    def __post_init__(self) -> None:
        self.textures = tuple(self.textures)
        if len(self.textures) != len(TEXTURE_KEYS):
            raise ValueError(
                f"expected {len(TEXTURE_KEYS)} wall textures, got {len(self.textures)}"
            )
        self.player = replace(self.scene.player)
        self.frame = self._draw()

    def _draw(self) -> Frame:
        return render(
            self.scene.grid, self.player, self.textures, self.scene.ceiling, self.scene.floor
        )

    def handle_key(self, key: Union[Key, int], pressed: bool) -> None:
        """React to a key going down or up; escape ends the game either way."""
        try:
            resolved = Key(key)
        except ValueError:
            return
        if resolved is Key.ESCAPE:
            self.running = False
        elif pressed:
            self.controls.press(resolved)
        else:
            self.controls.release(resolved)

    def tick(self) -> bool:
        """Advance one frame; returns True when the view was redrawn."""
        if not self.running:
            return False
        if move(self.scene.grid, self.player, self.controls):
            self.frame = self._draw()
            return True
        return False


def _show(screen: "pygame.Surface", frame: Frame) -> None:
    data = array("I", ((pixel & 0xFFFFFF) << 8 for pixel in frame.pixels))
    if sys.byteorder == "little":
        data.byteswap()
    surface = pygame.image.frombuffer(data.tobytes(), (frame.width, frame.height), "RGBX")
    screen.blit(surface, (0, 0))
    pygame.display.flip()


def _run(game: Game) -> None:
    keymap = {
        pygame.K_w: Key.W,
        pygame.K_a: Key.A,
        pygame.K_s: Key.S,
        pygame.K_d: Key.D,
        pygame.K_LEFT: Key.LEFT,
        pygame.K_RIGHT: Key.RIGHT,
        pygame.K_ESCAPE: Key.ESCAPE,
    }
    pygame.init()
    try:
        screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("cubed")
        clock = pygame.time.Clock()
        _show(screen, game.frame)
        while game.running:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.running = False
                elif event.type in (pygame.KEYDOWN, pygame.KEYUP):
                    key = keymap.get(event.key)
                    if key is not None:
                        game.handle_key(key, event.type == pygame.KEYDOWN)
            if game.tick():
                _show(screen, game.frame)
            clock.tick(_FPS)
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load the scene named on the command line and play it in a window."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print(USAGE)
        return 1
    try:
        scene = load_scene(args[0])
        textures = load_textures(scene)
        game = Game(scene, textures)
    except (SceneError, XpmError) as exc:
        print(f"error: {exc}")
        return 1
    _run(game)
    return 0


if __name__ == "__main__":
    sys.exit(main())