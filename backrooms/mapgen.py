"""Procedural level generation from room patterns, and player spawning."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace

from backrooms.state import MapState, PlayerState

log = logging.getLogger(__name__)

TILE_SIZE = 12
MAX_REGIONS = 100
MIN_REGION_SIZE = 10
MAX_TRIES = 20
SPAWN_TILE = 9
_UNSET = -1


@dataclass(frozen=True)
class RoomPattern:
    """A room layout: '.' is floor, anything else is wall.

    ``max_occurrences`` of ``None`` means the room may be used any number of times.
    """

    width: int
    height: int
    tiles: tuple[str, ...]
    max_occurrences: int | None = None


_PILLARS = "." + "#." * 19 + "#"

ALL_ROOMS: tuple[RoomPattern, ...] = (
    RoomPattern(10, 10, ("..........",) * 10, 3),
    RoomPattern(
        10,
        10,
        ("..........", "..........")
        + ("...####...",) * 6
        + ("..........", ".........."),
        None,
    ),
    RoomPattern(
        40,
        40,
        ("." * 40, _PILLARS) * 19 + ("." * 40, "." * 40),
        2,
    ),
    RoomPattern(
        10,
        10,
        (
            "..........",
            "..........",
            "...#####..",
            "...#......",
            "...#####..",
            "...#......",
            "...#......",
            "..........",
            "..........",
            "..........",
        ),
        2,
    ),
    RoomPattern(
        10,
        10,
        (
            "..........",
            "..........",
            "..######..",
            "..#....#..",
            "....##....",
            "..#....#..",
            "..######..",
            "..........",
            "..........",
            "..........",
        ),
        None,
    ),
    RoomPattern(10, 10, ("..........", "##########") * 5, None),
    RoomPattern(
        10,
        10,
        (
            "##########",
            "#........#",
            "#........#",
            "######D###",
            "..........",
            "######D###",
            "#........#",
            "#........#",
            "##########",
            "##########",
        ),
        None,
    ),
)


def rotate_room(room: RoomPattern, rotation: int) -> RoomPattern:
    """Return the room turned clockwise by 0, 90, 180 or 270 degrees."""
    w, h, tiles = room.width, room.height, room.tiles
    if rotation == 0:
        return room
    if rotation == 90:
        rows = tuple("".join(tiles[h - 1 - x][y] for x in range(h)) for y in range(w))
        return replace(room, width=h, height=w, tiles=rows)
    if rotation == 180:
        rows = tuple(row[::-1] for row in reversed(tiles))
        return replace(room, tiles=rows)
    if rotation == 270:
        rows = tuple("".join(tiles[x][w - 1 - y] for x in range(h)) for y in range(w))
        return replace(room, width=h, height=w, tiles=rows)
    raise ValueError(f"unsupported rotation: {rotation}")


def flood_fill(
    grid: list[list[int]],
    width: int,
    height: int,
    region_map: list[list[int]],
    x: int,
    y: int,
    region_id: int,
) -> None:
    """Label every floor cell 4-connected to (x, y) that has no region yet."""
    stack = [(x, y)]
    while stack:
        cx, cy = stack.pop()
        if not (0 <= cx < width and 0 <= cy < height):
            continue
        if grid[cy][cx] != 0 or region_map[cy][cx] != _UNSET:
            continue
        region_map[cy][cx] = region_id
        stack.extend(((cx + 1, cy), (cx - 1, cy), (cx, cy + 1), (cx, cy - 1)))


def _label_regions(map_state: MapState) -> tuple[list[list[int]], int]:
    width, height = map_state.map_width, map_state.map_height
    region_map = [[_UNSET] * width for _ in range(height)]
    count = 0
    for y, row in enumerate(map_state.map[:height]):
        for x, cell in enumerate(row[:width]):
            if cell == 0 and region_map[y][x] == _UNSET and count < MAX_REGIONS:
                flood_fill(map_state.map, width, height, region_map, x, y, count)
                count += 1
    return region_map, count


def _distance_to_region(region_map: list[list[int]], region_id: int) -> list[list[int]]:
    """City-block distance from every cell to the nearest cell of a region."""
    height = len(region_map)
    width = len(region_map[0]) if height else 0
    far = width + height + 1
    dist = [[0 if cell == region_id else far for cell in row] for row in region_map]
    for y in range(height):
        for x in range(width):
            if y > 0:
                dist[y][x] = min(dist[y][x], dist[y - 1][x] + 1)
            if x > 0:
                dist[y][x] = min(dist[y][x], dist[y][x - 1] + 1)
    for y in reversed(range(height)):
        for x in reversed(range(width)):
            if y < height - 1:
                dist[y][x] = min(dist[y][x], dist[y + 1][x] + 1)
            if x < width - 1:
                dist[y][x] = min(dist[y][x], dist[y][x + 1] + 1)
    return dist


def _step_toward(current: int, target: int) -> int:
    return current + (1 if target > current else -1)


def connect_isolated_zones(map_state: MapState, rng: random.Random | None = None) -> None:
    """Carve corridors linking every sizeable floor region to the first one."""
    rng = rng or random.Random()
    region_map, count = _label_regions(map_state)
    if count < 2:
        return

    cells: dict[int, list[tuple[int, int]]] = {}
    for y, row in enumerate(region_map):
        for x, region in enumerate(row):
            if region != _UNSET:
                cells.setdefault(region, []).append((x, y))

    origin = cells.get(0, [])
    if not origin:
        return
    dist = _distance_to_region(region_map, 0)
    grid = map_state.map

    for region in range(1, count):
        members = cells.get(region, [])
        if len(members) < MIN_REGION_SIZE:
            continue

        ax, ay = min(members, key=lambda c: dist[c[1]][c[0]])
        best = dist[ay][ax]
        bx, by = next((x, y) for x, y in origin if abs(x - ax) + abs(y - ay) == best)

        direction = 1 if bx > ax else -1
        pivot_x = ax + rng.randrange(abs(bx - ax) + 1) * direction
        pivot_y = by

        cx = ax
        while cx != pivot_x:
            grid[ay][cx] = 0
            cx = _step_toward(cx, pivot_x)

        cy = ay
        while cy != pivot_y:
            grid[cy][pivot_x] = 0
            cy = _step_toward(cy, pivot_y)

        cx = pivot_x
        while cx != bx:
            grid[by][cx] = 0
            cx = _step_toward(cx, bx)


def _pick_room(
    rng: random.Random,
    usage: list[int],
    previous: list[list[int]],
    room_x: int,
    room_y: int,
) -> int | None:
    for _ in range(MAX_TRIES):
        index = rng.randrange(len(ALL_ROOMS))
        limit = ALL_ROOMS[index].max_occurrences
        if limit is not None and usage[index] >= limit:
            continue
        if room_x > 0 and previous[room_y][room_x - 1] == index:
            continue
        if room_y > 0 and previous[room_y - 1][room_x] == index:
            continue
        return index
    return None


def generate_map(
    map_state: MapState,
    rooms_wide: int,
    rooms_high: int,
    rng: random.Random | None = None,
) -> None:
    """Fill ``map_state`` with a new level of ``rooms_wide`` x ``rooms_high`` rooms.

    Tile values: 0 floor, 1 outer wall, 2 room wall, 9 spawn point.
    """
    rng = rng or random.Random()
    total_w = rooms_wide * TILE_SIZE + 1
    total_h = rooms_high * TILE_SIZE + 1
    map_state.map_width = total_w
    map_state.map_height = total_h
    grid = [[1] * total_w for _ in range(total_h)]
    map_state.map = grid
    map_state.map_discovered = [[0] * total_w for _ in range(total_h)]

    usage = [0] * len(ALL_ROOMS)
    previous = [[_UNSET] * rooms_wide for _ in range(rooms_high)]
    half = TILE_SIZE // 2

    for room_y in range(rooms_high):
        for room_x in range(rooms_wide):
            if rng.randrange(10) == 0:
                continue

            index = _pick_room(rng, usage, previous, room_x, room_y)
            if index is None:
                continue
            previous[room_y][room_x] = index

            room = rotate_room(ALL_ROOMS[index], rng.randrange(4) * 90)
            start_x = room_x * TILE_SIZE + 1
            start_y = room_y * TILE_SIZE + 1
            if start_x + room.width >= total_w or start_y + room.height >= total_h:
                continue

            for ry, row in enumerate(room.tiles):
                grid[start_y + ry][start_x : start_x + room.width] = [
                    0 if tile == "." else 2 for tile in row
                ]

            for ty in range(max(start_y - 1, 0), min(start_y + room.height + 1, total_h)):
                for tx in range(max(start_x - 1, 0), min(start_x + room.width + 1, total_w)):
                    if grid[ty][tx] == 1:
                        grid[ty][tx] = 2

            if room_x > 0 and previous[room_y][room_x - 1] != _UNSET:
                mid_y = start_y + half
                for i in (-1, 0, 1):
                    for j in range(3):
                        grid[mid_y + i][start_x - j] = 0

            if room_y > 0 and previous[room_y - 1][room_x] != _UNSET:
                mid_x = start_x + half
                for i in (-1, 0, 1):
                    for j in range(3):
                        grid[start_y - j][mid_x + i] = 0

            usage[index] += 1

    connect_isolated_zones(map_state, rng)

    for row in grid:
        row[0] = 1
        row[-1] = 1
    grid[0] = [1] * total_w
    grid[-1] = [1] * total_w

    for y in range(1, total_h - 1):
        for x in range(1, total_w - 1):
            if grid[y][x] == 0:
                grid[y][x] = SPAWN_TILE
                return


def spawn_player_from_map(player_state: PlayerState, map_state: MapState) -> bool:
    """Place the player on the spawn tile and clear it.

    Returns False, leaving the player at (1.5, 1.5), when the map has no spawn tile.
    """
    player = player_state.player
    for y, row in enumerate(map_state.map[: map_state.map_height]):
        for x, cell in enumerate(row[: map_state.map_width]):
            if cell == SPAWN_TILE:
                player.x = x + 0.5
                player.y = y + 0.5
                player.angle = 0.0
                row[x] = 0
                return True

    player.x = 1.5
    player.y = 1.5
    player.angle = 0.0
    log.warning("no spawn point found, using the default position")
    return False