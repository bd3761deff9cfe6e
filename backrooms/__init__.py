"""First-person raycasting exploration game: level generation, rendering, menus and saves."""

__version__ = "0.1.0"