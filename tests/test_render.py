import pygame
import pytest

from backrooms.raycast import calculate_dir_render, calculate_fov_render
from backrooms.render import glitch_effect, present_screen, render_scene
from backrooms.state import (
    NUMBER_TEXTURES,
    TEXTURE_SIZE,
    AppState,
    GameState,
    GraphicsBuffers,
    MapState,
    Sprite,
)

W, H = 16, 12
CENTER = W // 2


def _room(size=8):
    grid = [[1] * size]
    grid += [[1] + [0] * (size - 2) + [1] for _ in range(size - 2)]
    grid += [[1] * size]
    return MapState(
        map_width=size,
        map_height=size,
        map=grid,
        map_discovered=[[0] * size for _ in range(size)],
    )


def _textures(wall=0x808080FF, ceiling=0x10203040, floor=0xA0B0C0FF, sprite=0xC8C8C8FF):
    colors = [wall, wall, ceiling, floor, sprite]
    assert len(colors) == NUMBER_TEXTURES
    return [[c] * (TEXTURE_SIZE * TEXTURE_SIZE) for c in colors]


def _state(show_textures, textures=None):
    state = GameState()
    state.app.screen_width = W
    state.app.screen_height = H
    state.player_state.player.x = 4.5
    state.player_state.player.y = 4.5
    state.player_state.player.angle = 0.0
    state.player_state.show_textures = show_textures
    state.map_state = _room()
    cache = state.graphics.render_cache
    cache.dir_x, cache.dir_y = calculate_dir_render(0.0)
    cache.fov_render = calculate_fov_render(85.0)
    state.graphics.texture_buffers = textures or _textures()
    return state


def _pixel(state, x, y):
    return state.graphics.screen_buffers[y * W + x]


def test_flat_render_sizes_buffers():
    state = _state(False)
    render_scene(state)
    assert len(state.graphics.screen_buffers) == W * H
    assert len(state.entity_state.z_buffer) == W


def test_flat_render_ceiling_floor_and_wall():
    state = _state(False)
    render_scene(state)
    assert _pixel(state, CENTER, 0) == 0xFF474112
    assert _pixel(state, CENTER, H - 1) == 0xFF524B1C
    wall = _pixel(state, CENTER, H // 2)
    assert wall >> 24 == 0xFF
    assert wall not in (0xFF474112, 0xFF524B1C)


def test_center_ray_depth_is_recorded():
    state = _state(False)
    render_scene(state)
    assert state.entity_state.z_buffer[CENTER] == pytest.approx(2.5)
    assert all(d > 0 for d in state.entity_state.z_buffer)


def test_textured_floor_and_ceiling_rows_are_uniform():
    state = _state(True)
    render_scene(state)
    top = [_pixel(state, x, 0) for x in range(W)]
    bottom = [_pixel(state, x, H - 1) for x in range(W)]
    assert len(set(top)) == 1
    assert len(set(bottom)) == 1
    assert top[0] != bottom[0]
    assert top[0] >> 24 == 0x40
    assert bottom[0] >> 24 == 0xFF


def test_textured_wall_keeps_texture_alpha():
    state = _state(True, _textures(wall=0x8080807F))
    render_scene(state)
    assert _pixel(state, CENTER, 6) >> 24 == 0x7F


def test_spawn_tile_column_is_not_drawn_as_wall():
    state = _state(True, _textures(wall=0x8080807F))
    state.map_state.map[4][7] = 9
    render_scene(state)
    assert _pixel(state, CENTER, 7) == _pixel(state, CENTER, H - 1)

    walled = _state(True, _textures(wall=0x8080807F))
    render_scene(walled)
    assert _pixel(walled, CENTER, 7) >> 24 == 0x7F


def test_sprite_in_front_of_wall_is_drawn():
    state = _state(True, _textures(wall=0x8080807F))
    state.entity_state.sprites.append(Sprite(x=6.0, y=4.5, texture_id=4))
    render_scene(state)
    assert _pixel(state, CENTER, 6) >> 24 == 0xFF


def test_present_screen_copies_buffer_opaque():
    state = _state(False)
    state.app.window = pygame.Surface((W, H))
    state.graphics.screen_buffers = [0x00112233] * (W * H)
    frame = present_screen(state)
    assert frame.get_size() == (W, H)
    assert tuple(state.app.window.get_at((3, 4)))[:3] == (0x11, 0x22, 0x33)
    assert state.graphics.screen_texture is frame


def test_present_screen_scales_to_window():
    state = _state(False)
    state.app.window = pygame.Surface((W * 2, H * 2))
    state.graphics.screen_buffers = [0xFF445566] * (W * H)
    frame = present_screen(state)
    assert frame.get_size() == (W * 2, H * 2)
    assert tuple(state.app.window.get_at((W * 2 - 1, H * 2 - 1)))[:3] == (0x44, 0x55, 0x66)


def test_present_screen_without_window_returns_none():
    state = _state(False)
    state.graphics.screen_buffers = [0] * (W * H)
    assert present_screen(state) is None
    assert state.graphics.screen_texture is None


def test_glitch_effect_invariants():
    width, height = 20, 31
    app = AppState(screen_width=width, screen_height=height)
    original = list(range(width * height))
    graphics = GraphicsBuffers(screen_buffers=list(original))
    glitch_effect(app, graphics, 1)
    buf = graphics.screen_buffers

    for y in range(height):
        row = buf[y * width : (y + 1) * width]
        source = original[y * width : (y + 1) * width]
        if y % 2 == 0:
            assert row == [50 << 24] * width
        elif y % 15 == 0:
            assert set(row) <= set(source)
        else:
            assert row == source


@pytest.mark.parametrize("speed", [0, -3, 1001])
def test_glitch_effect_rejects_bad_speed(speed):
    app = AppState(screen_width=4, screen_height=4)
    graphics = GraphicsBuffers(screen_buffers=[0] * 16)
    with pytest.raises(ValueError):
        glitch_effect(app, graphics, speed)