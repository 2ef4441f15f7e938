"""Texture loading, frame rendering and the interactive game window."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import numpy as np

os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")
import pygame  # noqa: E402

from cubcaster.errors import CubError, print_error  # noqa: E402
from cubcaster.player import GameState, Key, Player  # noqa: E402
from cubcaster.raycast import (  # noqa: E402
    HEIGHT,
    TX_HEIGHT,
    TX_WIDTH,
    WIDTH,
    Face,
    Ray,
    cast_ray,
    has_resized,
    texture_face,
    texture_x,
)
from cubcaster.scene import Scene, load_scene  # noqa: E402

TITLE = "Mercadooma"
ICON_FILE = Path("textures") / "icon.png"
DOOR_FILE = Path("textures") / "puerta_pixel.png"
KART_FILE = Path("textures") / "carro_pixel.png"
FPS = 60

_KEYS = {
    pygame.K_w: Key.W,
    pygame.K_s: Key.S,
    pygame.K_a: Key.A,
    pygame.K_d: Key.D,
    pygame.K_LEFT: Key.LEFT,
    pygame.K_RIGHT: Key.RIGHT,
    pygame.K_SPACE: Key.SPACE,
    pygame.K_ESCAPE: Key.ESCAPE,
}


def _load_surface(path: Path) -> pygame.Surface:
    try:
        return pygame.image.load(str(path))
    except (pygame.error, OSError) as exc:
        raise CubError(f"Cannot load texture {path}") from exc


def _rgba_bytes(surface: pygame.Surface) -> bytes:
    """Return the surface as raw RGBA bytes at the fixed texture size."""
    if surface.get_bitsize() != 32:
        canvas = pygame.Surface(surface.get_size(), pygame.SRCALPHA, 32)
        canvas.blit(surface, (0, 0))
        surface = canvas
    if surface.get_size() != (TX_WIDTH, TX_HEIGHT):
        surface = pygame.transform.scale(surface, (TX_WIDTH, TX_HEIGHT))
    return pygame.image.tostring(surface, "RGBA")


def _pack(data: bytes) -> np.ndarray:
    """Pack raw RGBA bytes into ``0xRRGGBBAA`` values, one per texel."""
    channels = np.frombuffer(data, dtype=np.uint8).reshape(-1, 4).astype(np.uint32)
    return (
        (channels[:, 0] << 24)
        | (channels[:, 1] << 16)
        | (channels[:, 2] << 8)
        | channels[:, 3]
    )


@dataclass
class Textures:
    """Wall and door pixel data (raw RGBA) plus the icon and overlay images."""

    north: bytes
    south: bytes
    east: bytes
    west: bytes
    door: bytes
    icon: pygame.Surface | None = None
    kart: pygame.Surface | None = None

    @classmethod
    def load(cls, scene: Scene, base_dir: str | os.PathLike[str] = ".") -> Textures:
        """Load the scene's wall textures and the fixed assets under ``base_dir``."""
        base = Path(base_dir)

        def wall(path: str | Path) -> bytes:
            return _rgba_bytes(_load_surface(base / path))

        north = wall(scene.north)
        south = wall(scene.south)
        east = wall(scene.east)
        west = wall(scene.west)
        icon = _load_surface(base / ICON_FILE)
        door = wall(DOOR_FILE)
        kart = _load_surface(base / KART_FILE)
        return cls(
            north=north,
            south=south,
            east=east,
            west=west,
            door=door,
            icon=icon,
            kart=kart,
        )


def _faces(textures: Textures) -> dict[Face, bytes]:
    return {
        Face.NORTH: textures.north,
        Face.SOUTH: textures.south,
        Face.EAST: textures.east,
        Face.WEST: textures.west,
        Face.DOOR: textures.door,
    }


class Game:
    """A scene being played: map state, player and the rendered frame."""

    def __init__(
        self,
        scene: Scene,
        textures: Textures,
        width: int = WIDTH,
        height: int = HEIGHT,
    ) -> None:
        self.scene = scene
        self.textures = textures
        self.state = GameState(
            grid=list(scene.grid),
            player=Player.from_view(scene.view, scene.start_x, scene.start_y),
            map_lines=scene.map_lines,
            max_size=scene.max_size,
        )
        self.width = width
        self.height = height
        self.frame = np.zeros((height, width), dtype=np.uint32)
        self._packed = {face: _pack(data) for face, data in _faces(textures).items()}
        self._kart_scaled: pygame.Surface | None = None
        self.state.moved = 1
        self._draw()
        self.state.moved = 0

    def _column(self, ray: Ray) -> np.ndarray:
        height = self.height
        column = np.full(height, self.scene.floor, dtype=np.uint32)
        top = max(0, min(ray.draw_start, height))
        column[:top] = self.scene.ceiling
        if ray.line_height <= 0:
            return column
        end = min(ray.draw_end, height)
        count = end - top
        if count <= 0:
            return column
        step = TX_HEIGHT / ray.line_height
        start = (ray.draw_start - height // 2 + ray.line_height // 2) * step
        positions = np.cumsum(np.concatenate(([start], np.full(count - 1, step))))
        tex_y = positions.astype(np.int64) & (TX_HEIGHT - 1)
        texels = self._packed[texture_face(ray)]
        column[top:end] = texels[tex_y * TX_WIDTH + texture_x(ray)]
        return column

    def _draw(self) -> None:
        grid = self.state.grid
        player = self.state.player
        for x in range(self.width):
            ray = cast_ray(player, grid, x, self.width, self.height)
            self.frame[:, x] = self._column(ray)

    def _resize(self, width: int, height: int) -> None:
        if not (has_resized(self.width, width) or has_resized(self.height, height)):
            return
        self.width = width
        self.height = height
        self.frame = np.zeros((height, width), dtype=np.uint32)
        self._kart_scaled = None
        self._draw()

    def render_frame(self) -> bool:
        """Advance the player one frame; redraw and return True if anything moves."""
        self.state.move_player()
        if not self.state.moved:
            return False
        self._draw()
        return True

    def _present(self, screen: pygame.Surface) -> None:
        frame = self.frame.T
        rgb = np.empty((self.width, self.height, 3), dtype=np.uint8)
        rgb[..., 0] = (frame >> 24) & 0xFF
        rgb[..., 1] = (frame >> 16) & 0xFF
        rgb[..., 2] = (frame >> 8) & 0xFF
        pygame.surfarray.blit_array(screen, rgb)
        if self.textures.kart is not None:
            if self._kart_scaled is None or self._kart_scaled.get_size() != (
                self.width,
                self.height,
            ):
                self._kart_scaled = pygame.transform.scale(
                    self.textures.kart, (self.width, self.height)
                )
            screen.blit(self._kart_scaled, (0, 0))
        pygame.display.flip()

    def run(self) -> int:
        """Open the window and play until it is closed or Escape is pressed."""
        pygame.init()
        try:
            screen = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
            pygame.display.set_caption(TITLE)
            if self.textures.icon is not None:
                pygame.display.set_icon(self.textures.icon)
            clock = pygame.time.Clock()
            while True:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        return 0
                    if event.type == pygame.KEYDOWN and event.key in _KEYS:
                        key = _KEYS[event.key]
                        if key is Key.ESCAPE:
                            return 0
                        self.state.key_pressed(key)
                        if key is Key.SPACE:
                            self._draw()
                    elif event.type == pygame.KEYUP and event.key in _KEYS:
                        self.state.key_released(_KEYS[event.key])
                    elif event.type == pygame.VIDEORESIZE:
                        screen = pygame.display.get_surface()
                        self._resize(*screen.get_size())
                self.render_frame()
                self._present(screen)
                clock.tick(FPS)
        finally:
            pygame.quit()


def main(argv: Sequence[str] | None = None) -> int:
    """Load the scene named on the command line and play it."""
    args = sys.argv[1:] if argv is None else list(argv)
    if len(args) != 1:
        print_error("Incorrect number of arguments")
        return 1
    try:
        scene = load_scene(args[0])
        textures = Textures.load(scene, ".")
    except CubError as exc:
        print_error(exc.message)
        return 1
    return Game(scene, textures).run()


if __name__ == "__main__":
    sys.exit(main())