"""Reading and parsing of ``.cub`` scene description files."""

from __future__ import annotations

import os
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from cubcaster.colors import parse_color
from cubcaster.errors import CubError
from cubcaster.mapcheck import START_CHARS, pad_map, validate_map

EXTENSION = ".cub"
MIN_LAST_LINE = 9
TEXTURE_KEYS = ("NO", "SO", "EA", "WE")


@dataclass
class Scene:
    """A fully parsed scene: padded map, textures, colours and start pose."""

    grid: list[str]
    north: str
    south: str
    east: str
    west: str
    ceiling: int
    floor: int
    start_x: int
    start_y: int
    view: str
    map_lines: int
    max_size: int


def read_lines(path: str | os.PathLike[str]) -> list[str]:
    """Return the lines of ``path``, each keeping its trailing newline."""
    try:
        with open(path, encoding="utf-8", errors="surrogateescape", newline="") as handle:
            text = handle.read()
    except OSError as exc:
        raise CubError("Invalid document") from exc
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def extract_map(lines: Sequence[str]) -> list[str]:
    """Return the map rows: every line after the last empty line, newlines trimmed."""
    separator = next(
        (index for index in range(len(lines) - 1, 0, -1) if lines[index] == "\n"),
        None,
    )
    if separator is None:
        raise CubError("Map no separated")
    return [line.strip("\n") for line in lines[separator + 1 :]]


def _skip_blank(line: str, pos: int) -> int:
    while pos < len(line) and "\0" < line[pos] <= " ":
        pos += 1
    return pos


def _search(lines: Iterable[str], key: str) -> str | None:
    for line in lines:
        pos = _skip_blank(line, 0)
        if line.startswith(key, pos):
            pos = _skip_blank(line, pos + len(key))
            # The last character is taken to be the line's newline.
            value = line[pos : len(line) - 1]
            return value if len(value) > 1 else None
    return None


def search_texture(lines: Iterable[str], key: str) -> str | None:
    """Return the value of the first line introduced by the two-letter ``key``.

    Gives ``None`` when no line matches or the first match is too short.
    """
    return _search(lines, key[:2])


def search_color(lines: Iterable[str], key: str) -> str | None:
    """Return the value of the first line introduced by the one-letter ``key``.

    Gives ``None`` when no line matches or the first match is too short.
    """
    return _search(lines, key[:1])


def find_player(grid: Sequence[str]) -> tuple[int, int, str]:
    """Return ``(x, y, view)`` of the first start position in the grid."""
    for y, row in enumerate(grid):
        for x, char in enumerate(row):
            if char in START_CHARS:
                return x, y, char
    raise CubError("No start position")


def _required(value: str | None, message: str) -> str:
    if value is None:
        raise CubError(message)
    return value


def parse_scene(lines: Iterable[str]) -> Scene:
    """Parse the lines of a scene description into a ``Scene``."""
    doc = list(lines)
    if len(doc) - 1 < MIN_LAST_LINE:
        raise CubError("Invalid document")
    rows = extract_map(doc)
    validate_map(rows)
    max_size = max((len(row) + 3 for row in rows), default=0)
    grid = pad_map(rows)
    start_x, start_y, view = find_player(grid)
    north, south, east, west = (
        _required(search_texture(doc, key), "Texture not found") for key in TEXTURE_KEYS
    )
    ceiling_text = _required(search_color(doc, "C"), "Color not found")
    floor_text = _required(search_color(doc, "F"), "Color not found")
    ceiling = parse_color(ceiling_text)
    floor = parse_color(floor_text)
    return Scene(
        grid=grid,
        north=north,
        south=south,
        east=east,
        west=west,
        ceiling=ceiling,
        floor=floor,
        start_x=start_x,
        start_y=start_y,
        view=view,
        map_lines=len(rows),
        max_size=max_size,
    )


def load_scene(path: str | os.PathLike[str]) -> Scene:
    """Read and parse the ``.cub`` file at ``path``."""
    if not os.fspath(path).endswith(EXTENSION):
        raise CubError("Extension not valid")
    return parse_scene(read_lines(path))