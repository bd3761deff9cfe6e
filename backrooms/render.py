"""Software ray-cast rendering of the scene into the screen buffer."""

from __future__ import annotations

import math
import random
import struct
import time

import pygame

from backrooms.entity import render_sprites
from backrooms.raycast import cast_ray
from backrooms.state import TEXTURE_SIZE, AppState, GameState, GraphicsBuffers

_TEX_MASK = TEXTURE_SIZE - 1
_SPAWN_TILE = 9
_FOG_DISTANCE = 30.0
_FOG_LIMIT = 0.5
_FLAT_FOG_COLOR = 170
_FLAT_CEILING = 0xFF474112
_FLAT_FLOOR = 0xFF524B1C
_FLAT_COLORS = {
    1: (184, 181, 55),
    2: (184, 181, 55),
    3: (0, 255, 0),
    4: (0, 0, 255),
    5: (255, 0, 255),
}
_MAX_WALL_HEIGHT = 1 << 30
_SCAN_LINE = 50 << 24
_GLITCH_BAND = 15


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _fog(distance: float) -> float:
    factor = min(distance / _FOG_DISTANCE, _FOG_LIMIT)
    return factor * factor


def _wall_height(screen_height: int, distance: float) -> int:
    if distance <= 0:
        return _MAX_WALL_HEIGHT
    return int(screen_height / distance)


def _halved(pixel: int) -> int:
    """Turn an RRGGBBAA texel into an AARRGGBB screen pixel at half brightness."""
    r = ((pixel >> 24) & 0xFF) // 2
    g = ((pixel >> 16) & 0xFF) // 2
    b = ((pixel >> 8) & 0xFF) // 2
    return ((pixel & 0xFF) << 24) | (r << 16) | (g << 8) | b


def _prepare_buffers(state: GameState) -> None:
    w, h = state.app.screen_width, state.app.screen_height
    if len(state.graphics.screen_buffers) != w * h:
        state.graphics.screen_buffers = [0] * (w * h)
    if len(state.entity_state.z_buffer) != w:
        state.entity_state.z_buffer = [0.0] * w


def _rays(state: GameState, dir_x: float, dir_y: float, plane_x: float, plane_y: float):
    """Cast one ray per screen column, recording its depth; yield column data."""
    w = state.app.screen_width
    inv_width = 2.0 / w
    z_buffer = state.entity_state.z_buffer
    for x in range(w):
        camera_x = x * inv_width - 1.0
        ray_x = dir_x + plane_x * camera_x
        ray_y = dir_y + plane_y * camera_x
        hit = cast_ray(state.player_state, state.map_state, ray_x, ray_y)
        z_buffer[x] = hit.distance
        yield x, ray_x, ray_y, hit


def _draw_floor_and_ceiling(
    state: GameState, dir_x: float, dir_y: float, plane_x: float, plane_y: float
) -> None:
    w, h = state.app.screen_width, state.app.screen_height
    buffer = state.graphics.screen_buffers
    floor_tex = state.graphics.texture_buffers[3]
    ceiling_tex = state.graphics.texture_buffers[2]
    player = state.player_state.player

    ray_x0, ray_y0 = dir_x - plane_x, dir_y - plane_y
    ray_x1, ray_y1 = dir_x + plane_x, dir_y + plane_y
    pos_z = 0.5 * h
    half = h // 2

    for y in range(half + 1, h):
        row_distance = pos_z / (y - half)
        step_x = row_distance * (ray_x1 - ray_x0) / w
        step_y = row_distance * (ray_y1 - ray_y0) / w
        floor_x = player.x + row_distance * ray_x0
        floor_y = player.y + row_distance * ray_y0
        row = y * w
        mirror = (h - y - 1) * w

        for x in range(w):
            tex_x = int(TEXTURE_SIZE * (floor_x - int(floor_x))) & _TEX_MASK
            tex_y = int(TEXTURE_SIZE * (floor_y - int(floor_y))) & _TEX_MASK
            index = TEXTURE_SIZE * tex_y + tex_x
            floor_x += step_x
            floor_y += step_y

            buffer[row + x] = _halved(floor_tex[index])
            buffer[mirror + x] = _halved(ceiling_tex[index])


def _draw_textured_walls(
    state: GameState, dir_x: float, dir_y: float, plane_x: float, plane_y: float
) -> None:
    w, h = state.app.screen_width, state.app.screen_height
    buffer = state.graphics.screen_buffers
    textures = state.graphics.texture_buffers
    player = state.player_state.player

    for x, ray_x, ray_y, hit in _rays(state, dir_x, dir_y, plane_x, plane_y):
        wall_height = _wall_height(h, hit.distance)
        if hit.wall_type == _SPAWN_TILE or wall_height <= 0:
            continue

        draw_start = max(-(wall_height // 2) + h // 2, 0)
        draw_end = min(wall_height // 2 + h // 2, h - 1)

        if hit.wall_side == 0:
            wall_x = player.y + hit.distance * ray_y
        else:
            wall_x = player.x + hit.distance * ray_x
        wall_x -= math.floor(wall_x)

        tex_x = int(wall_x * TEXTURE_SIZE)
        if (hit.wall_side == 0 and ray_x > 0) or (hit.wall_side == 1 and ray_y < 0):
            tex_x = TEXTURE_SIZE - tex_x - 1

        step = TEXTURE_SIZE / wall_height
        tex_pos = (draw_start - h // 2 + wall_height // 2) * step
        texture = textures[hit.wall_type - 1]
        shade = 2 if hit.wall_side == 1 else 1
        keep = 1.0 - _fog(hit.distance)

        for y in range(draw_start, draw_end):
            tex_y = int(tex_pos) & _TEX_MASK
            tex_pos += step
            pixel = texture[TEXTURE_SIZE * tex_y + tex_x]
            r = int(keep * (((pixel >> 24) & 0xFF) // shade))
            g = int(keep * (((pixel >> 16) & 0xFF) // shade))
            b = int(keep * (((pixel >> 8) & 0xFF) // shade))
            buffer[y * w + x] = ((pixel & 0xFF) << 24) | (r << 16) | (g << 8) | b


def _draw_flat_walls(
    state: GameState, dir_x: float, dir_y: float, plane_x: float, plane_y: float
) -> None:
    w, h = state.app.screen_width, state.app.screen_height
    buffer = state.graphics.screen_buffers

    for x, _ray_x, _ray_y, hit in _rays(state, dir_x, dir_y, plane_x, plane_y):
        wall_height = _wall_height(h, hit.distance)
        draw_start = max(_tdiv(h - wall_height, 2), 0)
        bottom = draw_start + wall_height

        channels = _FLAT_COLORS.get(hit.wall_type, (0, 0, 0))
        if hit.wall_side == 1:
            channels = tuple(c // 2 for c in channels)
        fog = _fog(hit.distance)
        r, g, b = (int((1 - fog) * c + fog * _FLAT_FOG_COLOR) for c in channels)
        wall = 0xFF000000 | (r << 16) | (g << 8) | b

        for y in range(h):
            if y < draw_start:
                buffer[y * w + x] = _FLAT_CEILING
            elif y > bottom:
                buffer[y * w + x] = _FLAT_FLOOR
            else:
                buffer[y * w + x] = wall


def render_scene(state: GameState) -> None:
    """Ray-cast the scene into the screen buffer, add sprites and present it."""
    _prepare_buffers(state)
    cache = state.graphics.render_cache
    dir_x, dir_y = cache.dir_x, cache.dir_y
    plane_x = -dir_y * cache.fov_render
    plane_y = dir_x * cache.fov_render

    if state.player_state.show_textures:
        _draw_floor_and_ceiling(state, dir_x, dir_y, plane_x, plane_y)
        _draw_textured_walls(state, dir_x, dir_y, plane_x, plane_y)
    else:
        _draw_flat_walls(state, dir_x, dir_y, plane_x, plane_y)

    render_sprites(state, state.entity_state.sprites, state.entity_state.z_buffer)
    present_screen(state)


def present_screen(state: GameState) -> pygame.Surface | None:
    """Copy the screen buffer onto the window surface, scaled to fit.

    Returns the frame surface, or None when there is no window to draw on.
    """
    target = state.app.window
    if target is None:
        return None
    w, h = state.app.screen_width, state.app.screen_height
    buffer = state.graphics.screen_buffers
    data = struct.pack(f">{len(buffer)}I", *((p & 0xFFFFFFFF) | 0xFF000000 for p in buffer))
    frame = pygame.image.frombuffer(data, (w, h), "ARGB").copy()
    if target.get_size() != (w, h):
        frame = pygame.transform.scale(frame, target.get_size())
    target.blit(frame, (0, 0))
    state.graphics.screen_texture = frame
    return frame


def glitch_effect(app: AppState, graphics: GraphicsBuffers, speed: int) -> None:
    """Overlay scan lines and shift horizontal bands of the screen buffer."""
    if not 1 <= speed <= 1000:
        raise ValueError(f"speed must be between 1 and 1000, got {speed}")
    ticks = int(time.process_time() * 1_000_000)
    rng = random.Random(ticks // (1000 // speed))

    w, h = app.screen_width, app.screen_height
    buffer = graphics.screen_buffers

    for y in range(0, h, 2):
        buffer[y * w : (y + 1) * w] = [_SCAN_LINE] * w

    for y in range(0, h, _GLITCH_BAND):
        shift = rng.randrange(10) - 5
        row = y * w
        for x in range(w):
            shifted = x + shift
            if 0 <= shifted < w:
                buffer[row + x] = buffer[row + shifted]