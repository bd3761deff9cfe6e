import math

import pytest

from backrooms.raycast import calculate_dir_render, calculate_fov_render, cast_ray
from backrooms.state import MapState, Player, PlayerState


def box_map(size=5, wall=2):
    grid = [
        [wall if x in (0, size - 1) or y in (0, size - 1) else 0 for x in range(size)]
        for y in range(size)
    ]
    discovered = [[0] * size for _ in range(size)]
    return MapState(size, size, grid, discovered)


def player_at(x, y):
    return PlayerState(player=Player(x, y, 0.0))


def test_ray_hits_east_wall():
    ms = box_map()
    hit = cast_ray(player_at(2.5, 2.5), ms, 1.0, 0.0)
    assert hit.distance == pytest.approx(1.5)
    assert hit.wall_type == 2
    assert hit.wall_side == 0


def test_ray_along_y_reports_side_one():
    ms = box_map()
    hit = cast_ray(player_at(2.5, 2.5), ms, 0.0, -1.0)
    assert hit.wall_side == 1
    assert hit.wall_type == 2


def test_symmetric_distances():
    ms = box_map()
    player = player_at(2.5, 2.5)
    east = cast_ray(player, ms, 1.0, 0.0)
    west = cast_ray(player, ms, -1.0, 0.0)
    north = cast_ray(player, ms, 0.0, -1.0)
    assert east.distance == pytest.approx(west.distance)
    assert east.distance == pytest.approx(north.distance)


def test_cells_are_discovered():
    ms = box_map()
    cast_ray(player_at(2.5, 2.5), ms, 1.0, 0.0)
    assert ms.map_discovered[2][3] == 1
    assert ms.map_discovered[2][4] == 1
    assert ms.map_discovered[1][1] == 0


def test_open_map_raises():
    ms = MapState(3, 3, [[0] * 3 for _ in range(3)], [[0] * 3 for _ in range(3)])
    with pytest.raises(ValueError):
        cast_ray(player_at(1.5, 1.5), ms, 1.0, 0.0)


def test_fov_render_right_angle():
    assert calculate_fov_render(90.0) == pytest.approx(1.0)
    assert calculate_fov_render(0.0) == 0.0


def test_dir_render_unit_vector():
    assert calculate_dir_render(0.0) == (1.0, 0.0)
    for angle in (13.0, 90.0, 200.0, 359.0):
        dx, dy = calculate_dir_render(angle)
        assert math.isclose(dx * dx + dy * dy, 1.0)
    dx, dy = calculate_dir_render(90.0)
    assert dx == pytest.approx(0.0, abs=1e-12)
    assert dy == pytest.approx(1.0)