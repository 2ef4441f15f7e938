"""Player pose, movement, rotation and door toggling."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum

MOVESPEED = 0.025
ROTSPEED = 0.05
PLANE = 0.66

# view -> (dir_x, dir_y, plane_x, plane_y)
_VIEWS = {
    "N": (0.0, -1.0, PLANE, 0.0),
    "S": (0.0, 1.0, -PLANE, 0.0),
    "E": (1.0, 0.0, 0.0, PLANE),
    "W": (-1.0, 0.0, 0.0, -PLANE),
}

_BLOCKING = frozenset("12 ")
_CLOSED_DOOR = "2"
_OPEN_DOOR = "."


@dataclass
class Player:
    """Position, facing direction and camera plane of the player."""

    pos_x: float
    pos_y: float
    view: str = "N"
    dir_x: float = 0.0
    dir_y: float = 0.0
    plane_x: float = 0.0
    plane_y: float = 0.0
    move_x: int = 0
    move_y: int = 0
    turn: int = 0

    @classmethod
    def from_view(cls, view: str, x: float, y: float) -> Player:
        """Create a player at ``(x, y)`` looking towards ``view`` (N, S, E or W)."""
        try:
            dir_x, dir_y, plane_x, plane_y = _VIEWS[view]
        except KeyError:
            raise ValueError(f"unknown view {view!r}") from None
        return cls(
            pos_x=float(x),
            pos_y=float(y),
            view=view,
            dir_x=dir_x,
            dir_y=dir_y,
            plane_x=plane_x,
            plane_y=plane_y,
        )

    def rotate(self, rotdir: float) -> None:
        """Turn direction and camera plane by ``ROTSPEED * rotdir`` radians."""
        angle = ROTSPEED * rotdir
        cos_a = math.cos(angle)
        sin_a = math.sin(angle)
        self.dir_x, self.dir_y = (
            self.dir_x * cos_a - self.dir_y * sin_a,
            self.dir_x * sin_a + self.dir_y * cos_a,
        )
        self.plane_x, self.plane_y = (
            self.plane_x * cos_a - self.plane_y * sin_a,
            self.plane_x * sin_a + self.plane_y * cos_a,
        )


class Key(Enum):
    """Keys the game reacts to."""

    W = "w"
    S = "s"
    A = "a"
    D = "d"
    LEFT = "left"
    RIGHT = "right"
    SPACE = "space"
    ESCAPE = "escape"


_GAME_KEYS = frozenset(
    {Key.W, Key.S, Key.A, Key.D, Key.LEFT, Key.RIGHT, Key.SPACE}
)


@dataclass
class GameState:
    """The mutable map and player, driven by key events."""

    grid: list[str]
    player: Player
    map_lines: int = 0
    max_size: int = 0
    moved: int = 0
    _rows: list[str] = field(init=False, repr=False, default_factory=list)

    def __post_init__(self) -> None:
        self.grid = list(self.grid)
        if self.map_lines <= 0:
            self.map_lines = len(self.grid)
        if self.max_size <= 0:
            self.max_size = max((len(row) for row in self.grid), default=0)

    def walkable(self, x: float, y: float) -> bool:
        """Tell whether the player may stand at ``(x, y)``."""
        if x < 0 or y < 0 or y >= self.map_lines or x >= self.max_size:
            return False
        row_index = int(y)
        if row_index >= len(self.grid):
            return False
        row = self.grid[row_index]
        col = int(x)
        if col >= len(row):
            return False
        return row[col] not in _BLOCKING

    def _step_to(self, x: float, y: float) -> None:
        if self.walkable(x, y):
            self.player.pos_x = x
            self.player.pos_y = y

    def move_player(self) -> None:
        """Apply one frame of walking, strafing and turning."""
        p = self.player
        if p.move_y:
            self._step_to(
                p.pos_x + p.dir_x * MOVESPEED * p.move_y,
                p.pos_y + p.dir_y * MOVESPEED * p.move_y,
            )
        if p.move_x:
            self._step_to(
                p.pos_x + p.dir_y * MOVESPEED * p.move_x,
                p.pos_y + p.dir_x * MOVESPEED * -p.move_x,
            )
        p.rotate(p.turn)

    def key_pressed(self, key: Key) -> None:
        """Start the action bound to ``key``."""
        if key not in _GAME_KEYS:
            return
        p = self.player
        if key is Key.SPACE:
            self.toggle_doors()
        elif key is Key.W:
            p.move_y += 1
        elif key is Key.S:
            p.move_y -= 1
        elif key is Key.A:
            p.move_x += 1
        elif key is Key.D:
            p.move_x -= 1
        elif key is Key.LEFT:
            p.turn -= 1
        elif key is Key.RIGHT:
            p.turn += 1
        self.moved += 1

    def key_released(self, key: Key) -> None:
        """Stop the action bound to ``key``."""
        if key not in _GAME_KEYS:
            return
        p = self.player
        if key in (Key.W, Key.S):
            p.move_y = 0
        elif key in (Key.A, Key.D):
            p.move_x = 0
        elif key in (Key.LEFT, Key.RIGHT):
            p.turn = 0
        self.moved -= 1

    def toggle_doors(self) -> None:
        """Open closed doors and close open doors in the eight surrounding cells."""
        row = int(self.player.pos_y)
        col = int(self.player.pos_x)
        swap = {_CLOSED_DOOR: _OPEN_DOOR, _OPEN_DOOR: _CLOSED_DOOR}
        for i in range(row - 1, row + 2):
            if not 0 <= i < len(self.grid):
                continue
            cells = list(self.grid[i])
            for j in range(col - 1, col + 2):
                if (i, j) == (row, col) or not 0 <= j < len(cells):
                    continue
                cells[j] = swap.get(cells[j], cells[j])
            self.grid[i] = "".join(cells)