"""Validation and padding of the map grid."""

from __future__ import annotations

from collections.abc import Sequence

from cubcaster.errors import CubError

MAP_CHARS = frozenset("01NSEW 2")
START_CHARS = frozenset("NSEW")
_INTERIOR = frozenset("0NSWE2")
_BORDER = frozenset("1 ")


def check_characters(grid: Sequence[str]) -> None:
    """Raise ``CubError`` if the grid holds a character outside the map set."""
    if any(char not in MAP_CHARS for row in grid for char in row):
        raise CubError("Incorrect characters in map")


def check_start(grid: Sequence[str]) -> None:
    """Raise ``CubError`` unless the grid has exactly one start position."""
    starts = sum(char in START_CHARS for row in grid for char in row)
    if starts > 1:
        raise CubError("Multiple start position")
    if starts == 0:
        raise CubError("No start position")


def _is_side(char: str) -> bool:
    return char not in _INTERIOR


def _neighbour_ok(neighbour: str, pos: int) -> bool:
    last = len(neighbour) - 1
    if last > pos and neighbour[pos] == " ":
        return False
    return last >= pos


def _vertical_ok(grid: Sequence[str], line: int, pos: int) -> bool:
    if grid[line][pos] in _BORDER:
        return True
    return _neighbour_ok(grid[line - 1], pos) and _neighbour_ok(grid[line + 1], pos)


def check_holes(grid: Sequence[str], last_line: int) -> bool:
    """Tell whether the inner rows (1 .. last_line-1) have no leaks."""
    for line in range(1, last_line):
        row = grid[line]
        for pos in range(1, len(row)):
            char = row[pos]
            if char == " ":
                after = row[pos + 1] if pos + 1 < len(row) else ""
                if not _is_side(row[pos - 1]) or not _is_side(after):
                    return False
            if not _vertical_ok(grid, line, pos):
                return False
    return True


def check_borders(grid: Sequence[str]) -> bool:
    """Tell whether the map is closed by walls on every side."""
    if not grid:
        return False
    for row in grid:
        if not row or row[0] not in _BORDER or row[-1] not in _BORDER:
            return False
    if any(char not in _BORDER for char in grid[0] + grid[-1]):
        return False
    return check_holes(grid, len(grid) - 1)


def validate_map(grid: Sequence[str]) -> None:
    """Raise ``CubError`` describing the first problem found in the grid."""
    check_characters(grid)
    check_start(grid)
    if not check_borders(grid):
        raise CubError("Map not closed")


def pad_map(grid: Sequence[str]) -> list[str]:
    """Return the grid with three wall cells added at both ends of each row."""
    return [f"111{row}111" for row in grid]