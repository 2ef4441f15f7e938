import numpy as np
import pygame
import pytest

from cubcaster.colors import get_rgba
from cubcaster.errors import CubError
from cubcaster.player import Key
from cubcaster.raycast import (
    BYTES_PER_PIXEL,
    TX_HEIGHT,
    TX_WIDTH,
    Face,
    cast_ray,
    column_colors,
    texture_face,
)
from cubcaster.render import Game, Textures, main
from cubcaster.scene import Scene, parse_scene

WIDTH = 64
HEIGHT = 48
TEXEL_BYTES = TX_WIDTH * TX_HEIGHT * BYTES_PER_PIXEL

ROOM = ["111111", "100001", "100001", "100001", "100001", "10N001", "111111"]
DOOR_ROOM = ["111111", "100001", "100001", "100201", "100001", "10N001", "111111"]


def scene_lines(rows, prefix="./"):
    header = [
        f"NO {prefix}n.png\n",
        f"SO {prefix}s.png\n",
        f"WE {prefix}w.png\n",
        f"EA {prefix}e.png\n",
        "\n",
        "F 220,100,0\n",
        "C 225,30,0\n",
        "\n",
    ]
    return header + [row + "\n" for row in rows]


def solid(r, g, b):
    return bytes((r, g, b, 255)) * (TX_WIDTH * TX_HEIGHT)


def solid_textures():
    return Textures(
        north=solid(10, 20, 30),
        south=solid(40, 50, 60),
        east=solid(70, 80, 90),
        west=solid(100, 110, 120),
        door=solid(130, 140, 150),
    )


def random_bytes(seed):
    rng = np.random.default_rng(seed)
    return rng.integers(0, 256, TEXEL_BYTES, dtype=np.uint8).tobytes()


def test_initial_frame_centre_column():
    scene = parse_scene(scene_lines(ROOM))
    game = Game(scene, solid_textures(), WIDTH, HEIGHT)
    centre = WIDTH // 2
    assert int(game.frame[0, centre]) == scene.ceiling
    assert int(game.frame[HEIGHT - 1, centre]) == scene.floor
    assert int(game.frame[HEIGHT // 2, centre]) == get_rgba(10, 20, 30, 255)
    assert game.state.moved == 0


def test_frame_matches_column_colors():
    scene = parse_scene(scene_lines(ROOM))
    faces = {
        Face.NORTH: random_bytes(1),
        Face.SOUTH: random_bytes(2),
        Face.EAST: random_bytes(3),
        Face.WEST: random_bytes(4),
        Face.DOOR: random_bytes(5),
    }
    textures = Textures(
        north=faces[Face.NORTH],
        south=faces[Face.SOUTH],
        east=faces[Face.EAST],
        west=faces[Face.WEST],
        door=faces[Face.DOOR],
    )
    game = Game(scene, textures, WIDTH, HEIGHT)
    for x in range(WIDTH):
        ray = cast_ray(game.state.player, game.state.grid, x, WIDTH, HEIGHT)
        expected = column_colors(
            ray, HEIGHT, scene.ceiling, scene.floor, faces[texture_face(ray)]
        )
        assert [int(value) for value in game.frame[:, x]] == expected


def test_render_frame_without_movement_keeps_frame():
    scene = parse_scene(scene_lines(ROOM))
    game = Game(scene, solid_textures(), WIDTH, HEIGHT)
    before = game.frame.copy()
    assert game.render_frame() is False
    assert np.array_equal(game.frame, before)
    assert game.state.player.pos_y == 5.0


def test_render_frame_moves_player_forward():
    scene = parse_scene(scene_lines(ROOM))
    game = Game(scene, solid_textures(), WIDTH, HEIGHT)
    game.state.key_pressed(Key.W)
    assert game.render_frame() is True
    assert game.state.player.pos_y < 5.0
    assert game.state.player.pos_x == 5.0
    game.state.key_released(Key.W)
    assert game.render_frame() is False


def test_door_is_drawn_and_can_be_opened():
    scene = parse_scene(scene_lines(DOOR_ROOM))
    textures = solid_textures()
    game = Game(scene, textures, WIDTH, HEIGHT)
    centre = WIDTH // 2
    assert int(game.frame[HEIGHT // 2, centre]) == get_rgba(130, 140, 150, 255)

    game.state.player.pos_y = 4.5
    game.state.key_pressed(Key.SPACE)
    assert game.state.grid[3][5] == "."
    assert game.render_frame() is True
    assert int(game.frame[HEIGHT // 2, centre]) == get_rgba(10, 20, 30, 255)


def save_png(path, color, size=(8, 8)):
    surface = pygame.Surface(size, pygame.SRCALPHA, 32)
    surface.fill(color)
    path.parent.mkdir(parents=True, exist_ok=True)
    pygame.image.save(surface, str(path))


def make_assets(base):
    save_png(base / "n.png", (10, 20, 30, 255))
    save_png(base / "s.png", (40, 50, 60, 255))
    save_png(base / "w.png", (70, 80, 90, 255))
    save_png(base / "e.png", (100, 110, 120, 255))
    save_png(base / "textures" / "icon.png", (1, 2, 3, 255))
    save_png(base / "textures" / "puerta_pixel.png", (130, 140, 150, 255))
    save_png(base / "textures" / "carro_pixel.png", (5, 6, 7, 255))


def test_textures_load(tmp_path):
    make_assets(tmp_path)
    scene = parse_scene(scene_lines(ROOM))
    textures = Textures.load(scene, tmp_path)
    assert len(textures.north) == TEXEL_BYTES
    assert textures.north[:4] == bytes((10, 20, 30, 255))
    assert textures.west[-4:] == bytes((70, 80, 90, 255))
    assert textures.east[:4] == bytes((100, 110, 120, 255))
    assert textures.door[:4] == bytes((130, 140, 150, 255))
    assert textures.kart.get_size() == (8, 8)
    assert textures.icon.get_size() == (8, 8)


def test_textures_load_missing_asset(tmp_path):
    make_assets(tmp_path)
    (tmp_path / "textures" / "icon.png").unlink()
    scene = parse_scene(scene_lines(ROOM))
    with pytest.raises(CubError):
        Textures.load(scene, tmp_path)


def test_textures_load_missing_wall(tmp_path):
    make_assets(tmp_path)
    scene = parse_scene(scene_lines(ROOM))
    broken = Scene(**{**scene.__dict__, "north": "missing.png"})
    with pytest.raises(CubError):
        Textures.load(broken, tmp_path)


def test_main_wrong_argument_count(capsys):
    assert main([]) == 1
    assert capsys.readouterr().err == "Error\nIncorrect number of arguments\n"


def test_main_bad_extension(capsys):
    assert main(["scene.txt"]) == 1
    assert capsys.readouterr().err == "Error\nExtension not valid\n"


def test_main_short_document(tmp_path, capsys):
    path = tmp_path / "short.cub"
    path.write_text("NO ./n.png\n\n111\n")
    assert main([str(path)]) == 1
    assert capsys.readouterr().err == "Error\nInvalid document\n"


def test_main_missing_textures(tmp_path, monkeypatch, capsys):
    path = tmp_path / "room.cub"
    path.write_text("".join(scene_lines(ROOM)))
    monkeypatch.chdir(tmp_path)
    assert main([str(path)]) == 1
    assert capsys.readouterr().err.startswith("Error\nCannot load texture")