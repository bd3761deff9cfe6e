"""Grid ray casting and camera helpers."""

from __future__ import annotations

import math
from typing import NamedTuple

from backrooms.state import MapState, PlayerState


class RayHit(NamedTuple):
    """Perpendicular distance to the wall hit, its tile value and side (0 = x, 1 = y)."""

    distance: float
    wall_type: int
    wall_side: int


def cast_ray(
    player_state: PlayerState, map_state: MapState, ray_dir_x: float, ray_dir_y: float
) -> RayHit:
    """Step through the grid from the player until a wall tile is hit.

    Every cell crossed is marked as discovered.
    """
    x = player_state.player.x
    y = player_state.player.y

    delta_x = 1e30 if ray_dir_x == 0 else abs(1 / ray_dir_x)
    delta_y = 1e30 if ray_dir_y == 0 else abs(1 / ray_dir_y)

    map_x = int(x)
    map_y = int(y)

    if ray_dir_x < 0:
        step_x = -1
        side_x = (x - map_x) * delta_x
    else:
        step_x = 1
        side_x = (map_x + 1.0 - x) * delta_x

    if ray_dir_y < 0:
        step_y = -1
        side_y = (y - map_y) * delta_y
    else:
        step_y = 1
        side_y = (map_y + 1.0 - y) * delta_y

    grid = map_state.map
    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = 0
        else:
            side_y += delta_y
            map_y += step_y
            side = 1

        if not (0 <= map_y < len(grid) and 0 <= map_x < len(grid[map_y])):
            raise ValueError("ray left the map without hitting a wall")

        map_state.map_discovered[map_y][map_x] = 1
        cell = grid[map_y][map_x]
        if cell > 0:
            distance = side_x - delta_x if side == 0 else side_y - delta_y
            return RayHit(distance, cell, side)


def calculate_fov_render(fov: float) -> float:
    """Projection-plane scale for a field of view given in degrees."""
    return math.tan(math.radians(fov / 2.0))


def calculate_dir_render(angle: float) -> tuple[float, float]:
    """Unit direction vector for an angle in degrees."""
    radians = math.radians(angle)
    return math.cos(radians), math.sin(radians)