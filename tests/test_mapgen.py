import random

import pytest

from backrooms.mapgen import (
    ALL_ROOMS,
    MIN_REGION_SIZE,
    SPAWN_TILE,
    TILE_SIZE,
    RoomPattern,
    connect_isolated_zones,
    flood_fill,
    generate_map,
    rotate_room,
    spawn_player_from_map,
)
from backrooms.state import MapState, PlayerState


def _grid_from(rows):
    return [[0 if c == "." else 1 for c in row] for row in rows]


def _map_state(rows):
    grid = _grid_from(rows)
    return MapState(
        map_width=len(grid[0]),
        map_height=len(grid),
        map=grid,
        map_discovered=[[0] * len(grid[0]) for _ in grid],
    )


def _reachable(grid, start):
    height, width = len(grid), len(grid[0])
    region = [[-1] * width for _ in range(height)]
    flood_fill(grid, width, height, region, start[0], start[1], 0)
    return {(x, y) for y, row in enumerate(region) for x, v in enumerate(row) if v == 0}


ASYM = RoomPattern(3, 3, ("#..", "...", "..."), None)


def test_rotation_zero_returns_same_room():
    assert rotate_room(ASYM, 0) is ASYM


def test_rotate_90_moves_corner_clockwise():
    assert rotate_room(ASYM, 90).tiles == ("..#", "...", "...")


def test_four_quarter_turns_restore_room():
    room = ALL_ROOMS[3]
    turned = room
    for _ in range(4):
        turned = rotate_room(turned, 90)
    assert turned.tiles == room.tiles


def test_two_quarter_turns_equal_half_turn():
    room = ALL_ROOMS[6]
    assert rotate_room(rotate_room(room, 90), 90).tiles == rotate_room(room, 180).tiles


def test_90_then_270_restores_room():
    room = ALL_ROOMS[4]
    assert rotate_room(rotate_room(room, 90), 270).tiles == room.tiles


def test_rotation_preserves_wall_count():
    room = ALL_ROOMS[1]
    walls = sum(row.count("#") for row in room.tiles)
    for angle in (90, 180, 270):
        rotated = rotate_room(room, angle)
        assert sum(row.count("#") for row in rotated.tiles) == walls
        assert len(rotated.tiles) == rotated.height


def test_invalid_rotation_raises():
    with pytest.raises(ValueError):
        rotate_room(ASYM, 45)


def test_rotated_rooms_match_their_sizes():
    for room in ALL_ROOMS:
        rotated = rotate_room(room, 90)
        assert (rotated.width, rotated.height) == (room.height, room.width)
        assert len(rotated.tiles) == rotated.height
        assert all(len(row) == rotated.width for row in rotated.tiles)


def test_flood_fill_stops_at_walls():
    grid = _grid_from(["..#..", "..#..", "..#.."])
    reached = _reachable(grid, (0, 0))
    assert reached == {(x, y) for y in range(3) for x in range(2)}


def test_flood_fill_on_wall_does_nothing():
    grid = _grid_from(["#.", ".."])
    region = [[-1, -1], [-1, -1]]
    flood_fill(grid, 2, 2, region, 0, 0, 5)
    assert region == [[-1, -1], [-1, -1]]


TWO_ROOMS = [
    "#############",
    "#.....#.....#",
    "#.....#.....#",
    "#.....#.....#",
    "#.....#.....#",
    "#.....#.....#",
    "#############",
]


def test_connect_joins_large_regions():
    state = _map_state(TWO_ROOMS)
    assert (7, 1) not in _reachable(state.map, (1, 1))
    connect_isolated_zones(state, random.Random(0))
    assert (7, 1) in _reachable(state.map, (1, 1))


def test_connect_ignores_small_regions():
    rows = [
        "########",
        "#....#.#",
        "#....###",
        "#....#..",
        "########",
    ]
    state = _map_state(rows)
    before = [row[:] for row in state.map]
    connect_isolated_zones(state, random.Random(1))
    assert state.map == before
    assert len(_reachable(state.map, (6, 1))) < MIN_REGION_SIZE


def _generated(seed, wide=3, high=3):
    state = MapState()
    generate_map(state, wide, high, random.Random(seed))
    return state


def test_generate_map_dimensions():
    state = _generated(7, 3, 2)
    assert state.map_width == 3 * TILE_SIZE + 1
    assert state.map_height == 2 * TILE_SIZE + 1
    assert len(state.map) == state.map_height
    assert all(len(row) == state.map_width for row in state.map)
    assert all(v == 0 for row in state.map_discovered for v in row)


def test_generate_map_borders_are_walls():
    state = _generated(11)
    grid = state.map
    assert all(v == 1 for v in grid[0])
    assert all(v == 1 for v in grid[-1])
    assert all(row[0] == 1 and row[-1] == 1 for row in grid)


def test_generate_map_tile_values_and_single_spawn():
    state = _generated(3, 6, 6)
    values = {v for row in state.map for v in row}
    assert values <= {0, 1, 2, SPAWN_TILE}
    assert sum(row.count(SPAWN_TILE) for row in state.map) == 1


def test_generate_map_is_deterministic_for_seed():
    first = _generated(42)
    second = _generated(42)
    assert len(first.map) == 3 * TILE_SIZE + 1
    assert first.map == second.map
    assert sum(row.count(SPAWN_TILE) for row in first.map) == 1


def test_spawn_player_uses_spawn_tile():
    state = _generated(5)
    spots = [(x, y) for y, row in enumerate(state.map) for x, v in enumerate(row) if v == SPAWN_TILE]
    player_state = PlayerState()
    assert spawn_player_from_map(player_state, state) is True
    x, y = spots[0]
    assert player_state.player.x == x + 0.5
    assert player_state.player.y == y + 0.5
    assert player_state.player.angle == 0.0
    assert state.map[y][x] == 0


def test_spawn_player_default_without_spawn_tile():
    state = _map_state(TWO_ROOMS)
    player_state = PlayerState()
    player_state.player.angle = 90.0
    assert spawn_player_from_map(player_state, state) is False
    assert (player_state.player.x, player_state.player.y) == (1.5, 1.5)
    assert player_state.player.angle == 0.0