# cubcaster

A first-person raycasting engine that draws a textured maze from a `.cub`
scene file, in a resizable pygame window.

## Installing

    pip install .

## Playing

    cubcaster path/to/level.cub

Exactly one argument is taken, and it must end in `.cub`. Texture paths
inside the scene are read relative to the directory you run the command
from. Three more images are expected there as well:

* `textures/puerta_pixel.png`: the door texture,
* `textures/carro_pixel.png`: an overlay drawn over the whole view,
* `textures/icon.png`: the window icon.

Wall and door images of any size are scaled to 512x512 before use.

### Controls

| Key           | Action                                        |
|---------------|-----------------------------------------------|
| W / S         | walk forwards / backwards                     |
| A / D         | strafe                                        |
| Left / Right  | turn                                          |
| Space         | open or close the doors in the eight cells around you |
| Escape        | quit                                          |

Walls (`1`), closed doors (`2`) and empty space (` `) block movement; open
doors can be walked through.

## Scene files

A scene holds four wall textures, two colours and a map. The map comes last,
after a blank line, and the file must have at least ten lines:

    NO ./textures/north.png
    SO ./textures/south.png
    WE ./textures/west.png
    EA ./textures/east.png

    F 220,100,0
    C 225,30,0

    111111
    100101
    1020N1
    111111

* `NO`, `SO`, `WE`, `EA`: paths to the wall textures. The first line
  introduced by each key is used.
* `F`, `C`: floor and ceiling colours written `R,G,B` with digits and two
  commas only (no spaces inside), each value 0 to 255.
* Map cells: `1` wall, `0` floor, `2` closed door, `N`/`S`/`E`/`W` the
  player's start and facing, and spaces for empty space outside the walls.
  The map is every line after the last blank line. It must be closed by
  walls and hold exactly one start position.

When a scene is invalid, or a texture cannot be loaded, the program prints
`Error` and a reason on standard error, then exits with status 1.

## Using the library

    from cubcaster.scene import load_scene

    scene = load_scene("level.cub")
    print(scene.view, scene.start_x, scene.start_y, hex(scene.ceiling))

* `cubcaster.scene`: `load_scene`, `parse_scene` (from a list of lines),
  `read_lines`, `extract_map`, `search_texture`, `search_color`,
  `find_player` and the `Scene` dataclass. The grid in a `Scene` is padded
  with three wall cells on each side of every row.
* `cubcaster.mapcheck`: `validate_map`, `check_characters`, `check_start`,
  `check_borders`, `check_holes` and `pad_map`.
* `cubcaster.colors`: `parse_color` turns `"R,G,B"` into a packed
  `0xRRGGBBAA` value; `get_rgba`, `find_red`, `find_green`, `find_blue`,
  `check_color_string` and a C-style `atoi` are also available.
* `cubcaster.player`: `Player` (with `from_view` and `rotate`), the `Key`
  enum and `GameState`, which applies key presses, movement and door
  toggling to a grid.
* `cubcaster.raycast`: `cast_ray` returns a `Ray` for one screen column
  without opening a window; `texture_face`, `texture_x`, `texture_color` and
  `column_colors` turn it into pixel colours.
* `cubcaster.render`: `Textures.load`, and `Game`, which keeps the current
  frame as a NumPy array of packed colours (`render_frame` advances one
  frame) and opens the window with `run`.
* `cubcaster.errors`: `CubError`, raised on bad input, and `print_error`.

## Running the tests

    pip install .[test]
    pytest