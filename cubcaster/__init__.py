"""Textured raycasting engine: .cub scene parsing, ray casting and a pygame viewer."""

__version__ = "0.1.0"
__all__ = ["errors", "colors", "mapcheck", "scene", "player", "raycast", "render"]