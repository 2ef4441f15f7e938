import pytest

from cubcaster.colors import RANGE_MESSAGE, get_rgba
from cubcaster.errors import CubError
from cubcaster.mapcheck import pad_map
from cubcaster.scene import (
    Scene,
    extract_map,
    find_player,
    load_scene,
    parse_scene,
    read_lines,
    search_color,
    search_texture,
)

MAP_ROWS = ["1111111", "1000001", "10N0001", "1111111"]


def _doc(
    north="NO ./textures/north.png\n",
    ceiling="C 225,30,0\n",
    floor="F 220,100,0\n",
    rows=MAP_ROWS,
):
    header = [
        north,
        "SO ./textures/south.png\n",
        "WE ./textures/west.png\n",
        "EA ./textures/east.png\n",
        "\n",
        floor,
        ceiling,
        "\n",
    ]
    return [line for line in header if line is not None] + [row + "\n" for row in rows]


def _message(excinfo):
    return excinfo.value.message


def test_read_lines_keeps_newlines(tmp_path):
    path = tmp_path / "a.cub"
    path.write_text("first\nsecond\n\nlast")
    assert read_lines(path) == ["first\n", "second\n", "\n", "last"]


def test_read_lines_missing_file(tmp_path):
    with pytest.raises(CubError) as excinfo:
        read_lines(tmp_path / "missing.cub")
    assert _message(excinfo) == "Invalid document"


def test_extract_map_takes_lines_after_last_blank():
    lines = ["NO x\n", "\n", "junk\n", "\n", "111\n", "1N1\n", "111"]
    assert extract_map(lines) == ["111", "1N1", "111"]


def test_extract_map_without_separator():
    with pytest.raises(CubError) as excinfo:
        extract_map(["NO x\n", "111\n", "1N1\n"])
    assert _message(excinfo) == "Map no separated"


def test_extract_map_blank_only_first_line():
    with pytest.raises(CubError) as excinfo:
        extract_map(["\n", "111\n", "1N1\n"])
    assert _message(excinfo) == "Map no separated"


def test_search_texture_skips_whitespace():
    lines = ["SO other\n", "  NO   ./north.png\n"]
    assert search_texture(lines, "NO") == "./north.png"


def test_search_texture_first_match_too_short():
    assert search_texture(["NO a\n", "NO ./good.png\n"], "NO") is None


def test_search_texture_absent():
    assert search_texture(["SO ./south.png\n"], "NO") is None


def test_search_color_value():
    assert search_color(["NO ./n.png\n", "F 1,2,3\n"], "F") == "1,2,3"


def test_find_player_position_holds_view():
    grid = pad_map(MAP_ROWS)
    x, y, view = find_player(grid)
    assert view == "N"
    assert grid[y][x] == view


def test_find_player_none():
    with pytest.raises(CubError):
        find_player(["111", "101", "111"])


def test_parse_scene_valid():
    scene = parse_scene(_doc())
    assert isinstance(scene, Scene)
    assert scene.north == "./textures/north.png"
    assert scene.south == "./textures/south.png"
    assert scene.west == "./textures/west.png"
    assert scene.east == "./textures/east.png"
    assert scene.ceiling == get_rgba(225, 30, 0, 255)
    assert scene.floor == get_rgba(220, 100, 0, 255)
    assert scene.grid == pad_map(MAP_ROWS)
    assert scene.map_lines == len(MAP_ROWS)
    assert scene.max_size == len(MAP_ROWS[0]) + 3
    assert scene.view == "N"
    assert scene.grid[scene.start_y][scene.start_x] == "N"


def test_parse_scene_too_short():
    with pytest.raises(CubError) as excinfo:
        parse_scene(_doc()[:9])
    assert _message(excinfo) == "Invalid document"


def test_parse_scene_missing_texture():
    with pytest.raises(CubError) as excinfo:
        parse_scene(_doc(north=None))
    assert _message(excinfo) == "Texture not found"


def test_parse_scene_missing_color():
    with pytest.raises(CubError) as excinfo:
        parse_scene(_doc(ceiling=None))
    assert _message(excinfo) == "Color not found"


def test_parse_scene_color_out_of_range():
    with pytest.raises(CubError) as excinfo:
        parse_scene(_doc(floor="F 256,0,0\n"))
    assert _message(excinfo) == RANGE_MESSAGE


def test_parse_scene_open_map():
    rows = ["1111111", "1000001", "10N0000", "1111111"]
    with pytest.raises(CubError) as excinfo:
        parse_scene(_doc(rows=rows))
    assert _message(excinfo) == "Map not closed"


def test_parse_scene_two_starts():
    rows = ["1111111", "1S00001", "10N0001", "1111111"]
    with pytest.raises(CubError) as excinfo:
        parse_scene(_doc(rows=rows))
    assert _message(excinfo) == "Multiple start position"


def test_load_scene_bad_extension(tmp_path):
    with pytest.raises(CubError) as excinfo:
        load_scene(tmp_path / "scene.txt")
    assert _message(excinfo) == "Extension not valid"


def test_load_scene_round_trip(tmp_path):
    path = tmp_path / "scene.cub"
    path.write_text("".join(_doc()))
    assert load_scene(path) == parse_scene(_doc())