"""Ray casting through the grid and texture sampling for one screen column."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from cubcaster.player import Player

WIDTH = 1080
HEIGHT = 720
TX_WIDTH = 512
TX_HEIGHT = 512
BYTES_PER_PIXEL = 4

_HIT_CHARS = frozenset("12 ")
_DOOR = "2"
_MAX_LINE = 2**31 - 1


@dataclass
class Ray:
    """State of one cast ray and the wall slice it produces."""

    camera_x: float = 0.0
    dir_x: float = 0.0
    dir_y: float = 0.0
    map_x: int = 0
    map_y: int = 0
    step_x: int = 0
    step_y: int = 0
    sidedist_x: float = 0.0
    sidedist_y: float = 0.0
    deltadist_x: float = 0.0
    deltadist_y: float = 0.0
    wall_dist: float = 0.0
    wall_x: float = 0.0
    side: int = 0
    line_height: int = 0
    draw_start: int = 0
    draw_end: int = 0
    door: bool = False


class Face(Enum):
    """Which texture a wall slice is drawn with."""

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"
    DOOR = "door"


def has_resized(old: int, new: int) -> bool:
    """Tell whether a window dimension has changed."""
    return old != new


def check_ray(grid: Sequence[str], map_x: int, map_y: int) -> bool:
    """Tell whether the cell ``(map_x, map_y)`` lies inside the grid."""
    return 0 <= map_y < len(grid) and 0 <= map_x < len(grid[map_y])


def check_hit(grid: Sequence[str], ray: Ray) -> bool:
    """Tell whether the ray's cell stops it; marks the ray when it is a door."""
    cell = grid[ray.map_y][ray.map_x]
    if cell in _HIT_CHARS:
        if cell == _DOOR:
            ray.door = True
        return True
    return False


def _delta(direction: float) -> float:
    return math.inf if direction == 0 else abs(1 / direction)


def _init_steps(ray: Ray, player: Player) -> None:
    if ray.dir_x < 0:
        ray.step_x = -1
        ray.sidedist_x = (player.pos_x - ray.map_x) * ray.deltadist_x
    else:
        ray.step_x = 1
        ray.sidedist_x = (ray.map_x + 1.0 - player.pos_x) * ray.deltadist_x
    if ray.dir_y < 0:
        ray.step_y = -1
        ray.sidedist_y = (player.pos_y - ray.map_y) * ray.deltadist_y
    else:
        ray.step_y = 1
        ray.sidedist_y = (ray.map_y + 1.0 - player.pos_y) * ray.deltadist_y


def _walk(ray: Ray, grid: Sequence[str]) -> None:
    ray.door = False
    while True:
        if ray.sidedist_x < ray.sidedist_y:
            ray.sidedist_x += ray.deltadist_x
            ray.map_x += ray.step_x
            ray.side = 0
        else:
            ray.sidedist_y += ray.deltadist_y
            ray.map_y += ray.step_y
            ray.side = 1
        if not check_ray(grid, ray.map_x, ray.map_y) or check_hit(grid, ray):
            return


def _measure(ray: Ray, player: Player, height: int) -> None:
    if ray.side == 0:
        ray.wall_dist = ray.sidedist_x - ray.deltadist_x
    else:
        ray.wall_dist = ray.sidedist_y - ray.deltadist_y
    ray.line_height = int(height / ray.wall_dist) if ray.wall_dist > 0 else _MAX_LINE
    ray.draw_start = max(0, -(ray.line_height // 2) + height // 2)
    ray.draw_end = min(height - 1, ray.line_height // 2 + height // 2)
    if ray.side == 0:
        wall_x = player.pos_y + ray.wall_dist * ray.dir_y
    else:
        wall_x = player.pos_x + ray.wall_dist * ray.dir_x
    ray.wall_x = wall_x - math.floor(wall_x)


def cast_ray(
    player: Player, grid: Sequence[str], x: int, width: int, height: int
) -> Ray:
    """Cast the ray for screen column ``x`` and return its wall slice."""
    ray = Ray()
    ray.camera_x = 2 * x / float(width) - 1
    ray.map_x = int(player.pos_x)
    ray.map_y = int(player.pos_y)
    ray.dir_x = player.dir_x + player.plane_x * ray.camera_x
    ray.dir_y = player.dir_y + player.plane_y * ray.camera_x
    ray.deltadist_x = _delta(ray.dir_x)
    ray.deltadist_y = _delta(ray.dir_y)
    _init_steps(ray, player)
    _walk(ray, grid)
    _measure(ray, player, height)
    return ray


def texture_face(ray: Ray) -> Face:
    """Return the texture the ray's wall slice uses."""
    if ray.door:
        return Face.DOOR
    if ray.side == 0:
        return Face.WEST if ray.dir_x < 0 else Face.EAST
    return Face.SOUTH if ray.dir_y > 0 else Face.NORTH


def texture_x(ray: Ray) -> int:
    """Return the texture column hit by the ray."""
    tex_x = int(ray.wall_x * TX_WIDTH)
    if (ray.side == 0 and ray.dir_x < 0) or (ray.side == 1 and ray.dir_y > 0):
        tex_x = TX_HEIGHT - tex_x - 1
    return tex_x


def texture_color(pixels: Sequence[int], tex_x: int, tex_y: int) -> int:
    """Return the packed ``0xRRGGBBAA`` value of a texel in RGBA pixel data."""
    index = (tex_y * TX_WIDTH + tex_x) * BYTES_PER_PIXEL
    r, g, b, a = (int(value) for value in pixels[index : index + BYTES_PER_PIXEL])
    return (r << 24) | (g << 16) | (b << 8) | a


def column_colors(
    ray: Ray, height: int, ceiling: int, floor: int, texture: Sequence[int]
) -> list[int]:
    """Return the colours of one screen column, top to bottom."""
    top = max(0, min(ray.draw_start, height))
    column = [ceiling] * top
    if ray.line_height > 0:
        step = TX_HEIGHT / ray.line_height
        tex_pos = (ray.draw_start - height // 2 + ray.line_height // 2) * step
        tex_x = texture_x(ray)
        for _ in range(top, min(ray.draw_end, height)):
            tex_y = int(tex_pos) & (TX_HEIGHT - 1)
            tex_pos += step
            column.append(texture_color(texture, tex_x, tex_y))
    column.extend([floor] * (height - len(column)))
    return column