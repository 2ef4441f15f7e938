"""Parsing of ``R,G,B`` colour descriptions into packed RGBA values."""

from __future__ import annotations

from cubcaster.errors import CubError

RANGE_MESSAGE = "The color range has to be between 0 - 255"

_LONG_MAX = 2**63 - 1
_WHITESPACE = frozenset("\t\n\v\f\r ")


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def atoi(text: str) -> int:
    """Convert the leading integer of ``text``, C ``atoi`` style.

    Leading whitespace and one sign are accepted; parsing stops at the first
    non-digit. Values past the signed 64-bit range give -1 when positive and
    0 when negative; the result wraps to a 32-bit signed integer.
    """
    pos = 0
    while pos < len(text) and text[pos] in _WHITESPACE:
        pos += 1
    sign = 1
    if pos < len(text) and text[pos] in "+-":
        if text[pos] == "-":
            sign = -1
        pos += 1
    result = 0
    for char in text[pos:]:
        if not "0" <= char <= "9":
            break
        result = result * 10 + (ord(char) - ord("0"))
        if result > _LONG_MAX:
            return 0 if sign == -1 else -1
    return _to_int32(result * sign)


def check_color_string(color: str) -> bool:
    """Tell whether ``color`` holds only digits and exactly two commas.

    Checking stops at the first newline.
    """
    body = color.split("\n", 1)[0]
    if any(not ("0" <= char <= "9") and char != "," for char in body):
        return False
    return body.count(",") == 2


def _component(text: str) -> int:
    value = atoi(text)
    if not 0 <= value <= 255:
        raise CubError(RANGE_MESSAGE)
    return value


def _require_comma(color: str) -> None:
    if "," not in color:
        raise CubError(RANGE_MESSAGE)


def find_red(color: str) -> int:
    """Return the red component: the text before the first comma."""
    _require_comma(color)
    return _component(color.split(",", 1)[0])


def find_green(color: str) -> int:
    """Return the green component: the text between the first two commas."""
    parts = color.split(",", 2)
    if len(parts) < 3:
        raise CubError(RANGE_MESSAGE)
    return _component(parts[1])


def find_blue(color: str) -> int:
    """Return the blue component: the text after the last comma."""
    _require_comma(color)
    return _component(color.rsplit(",", 1)[1])


def get_rgba(r: int, g: int, b: int, a: int) -> int:
    """Pack four channels into a 32-bit ``0xRRGGBBAA`` value."""
    return (r << 24 | g << 16 | b << 8 | a) & 0xFFFFFFFF


def parse_color(color: str) -> int:
    """Parse an ``R,G,B`` string into an opaque packed RGBA value."""
    if not check_color_string(color):
        raise CubError(RANGE_MESSAGE)
    return get_rgba(find_red(color), find_green(color), find_blue(color), 255)