"""Heads-up display: frame timing, text, debug panel, minimap and hotbar."""

from __future__ import annotations

import functools
import logging
import time
from pathlib import Path

import pygame

from backrooms.state import Alignment, AppState, Color, MapState, PlayerState, TextType

log = logging.getLogger(__name__)

INVENTORY_BAR = "textures/inventoryBar.png"
FRAME_SELECT = "textures/frameSelect.png"

_WHITE = Color(255, 255, 255, 255)
_FPS_REFRESH = 0.5
_BAR_WIDTH = 358
_SLOT_SIZE = 64
_BOTTOM_MARGIN = 20
_SLOT_STEP = 49
_MAP_BACKGROUND = (220, 180, 120)
_MAP_FLOOR = (160, 125, 72)
_MAP_COLORS = {
    1: (54, 43, 26),
    2: (92, 70, 37),
    3: (92, 70, 37),
    4: (92, 70, 37),
    5: (92, 70, 37),
}
_MAP_PLAYER = (196, 65, 65)


class _FpsLabel:
    """Last FPS text shown; refreshed at most every half second."""

    text = ""


_fps_label = _FpsLabel()


def calculate_fps(app: AppState, player_state: PlayerState) -> float:
    """Measure the frame time, scale player speeds by it and store the frame rate."""
    now = time.perf_counter()
    elapsed = now - app.start_time
    app.start_time = now

    player_state.player_move_speed = player_state.move_speed * elapsed
    player_state.player_rotate_speed = player_state.rotate_speed * elapsed
    app.fps = float(int(1.0 / elapsed)) if elapsed > 0 else 0.0
    return app.fps


def render_text(
    app: AppState,
    alignment: Alignment,
    x: int,
    y: int,
    text: str,
    color: Color,
    text_type: TextType,
) -> pygame.Rect:
    """Draw text vertically centred on ``y`` and aligned on ``x``; return its rectangle."""
    font = app.fonts[text_type]
    surface = font.render(text, True, (color.r, color.g, color.b, color.a))
    width, height = font.size(text)

    if alignment == Alignment.CENTER:
        x -= width // 2
    elif alignment == Alignment.RIGHT:
        x -= width

    rect = pygame.Rect(x, y - height // 2, width, height)
    app.window.blit(surface, rect)
    return rect


def _fill_translucent(target: pygame.Surface, rect: pygame.Rect, rgba: tuple) -> None:
    if rect.w <= 0 or rect.h <= 0:
        return
    overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
    overlay.fill(rgba)
    target.blit(overlay, rect.topleft)


def show_state_interface(app: AppState, player_state: PlayerState) -> list[str]:
    """Draw the debug panel and return the lines shown on it."""
    target = app.window
    panel_w = app.screen_width // 3 - 10
    panel_h = app.screen_height // 2 - 10
    _fill_translucent(target, pygame.Rect(10, 10, panel_w, panel_h), (0, 0, 0, 190))

    if app.start_time - app.previous_time >= _FPS_REFRESH:
        app.previous_time = time.perf_counter()
        _fps_label.text = f"FPS: {app.fps:.0f}"
    render_text(app, Alignment.LEFT, 30, 40, _fps_label.text, _WHITE, TextType.XS)

    if panel_w - 50 > 0:
        pygame.draw.rect(target, (255, 255, 255), pygame.Rect(30, 70, panel_w - 50, 2))

    lines = [
        f"Colision: {int(player_state.collision)}",
        f"Texture: {int(player_state.show_textures)}",
        f"Map: {int(player_state.show_map)}",
    ]
    for top, line in zip((90, 120, 150), lines):
        render_text(app, Alignment.LEFT, 30, top, line, _WHITE, TextType.XS)
    return [_fps_label.text, *lines]


def show_map_interface(
    app: AppState, map_state: MapState, player_state: PlayerState
) -> pygame.Rect:
    """Draw the discovered part of the map as a trapezoid; return the player marker."""
    target = app.window
    screen_w, screen_h = app.screen_width, app.screen_height
    view_w, view_h = map_state.map_width, map_state.map_height

    draw_size = int(screen_h * 0.4 / view_h)
    increment = 0.5 / (view_h - 1) if view_h > 1 else 0.0

    player_x = int(player_state.player.x)
    player_y = int(player_state.player.y)

    start_x = max(player_x - view_w // 2, 0)
    start_y = max(player_y - view_h // 2, 0)
    if start_x + view_w > map_state.map_width:
        start_x = map_state.map_width - view_w
    if start_y + view_h > map_state.map_height:
        start_y = map_state.map_height - view_h
    start_x = max(start_x, 0)
    start_y = max(start_y, 0)

    top = screen_h - draw_size * view_h - 25

    def cell_rect(x: int, y: int) -> pygame.Rect:
        scaled = draw_size * (1.0 + y * increment)
        return pygame.Rect(
            int((screen_w - scaled * view_w) / 2 + x * scaled),
            top + y * draw_size,
            int(scaled + 1),
            draw_size,
        )

    for y in range(view_h):
        for x in range(view_w):
            pygame.draw.rect(target, _MAP_BACKGROUND, cell_rect(x, y))

    for y in range(view_h):
        discovered = map_state.map_discovered[start_y + y]
        tiles = map_state.map[start_y + y]
        for x in range(view_w):
            if discovered[start_x + x] == 1:
                color = _MAP_COLORS.get(tiles[start_x + x], _MAP_FLOOR)
                pygame.draw.rect(target, color, cell_rect(x, y))

    marker = cell_rect(player_x - start_x, player_y - start_y)
    player_rect = pygame.Rect(marker.x, marker.y, 4, 4)
    pygame.draw.rect(target, _MAP_PLAYER, player_rect)
    return player_rect


@functools.lru_cache(maxsize=8)
def _load_image(path: str) -> pygame.Surface:
    return pygame.image.load(path)


def item_frame(app: AppState, select_frame: int) -> pygame.Rect | None:
    """Draw the hotbar with the selected slot; return the selection rectangle.

    Returns None, drawing nothing, when an image cannot be loaded.
    """
    try:
        bar = _load_image(str(Path(INVENTORY_BAR).resolve()))
        frame = _load_image(str(Path(FRAME_SELECT).resolve()))
    except (pygame.error, OSError) as exc:
        log.error("cannot load hotbar image: %s", exc)
        return None

    left = int((app.screen_width - _BAR_WIDTH) / 2)
    top = app.screen_height - _SLOT_SIZE - _BOTTOM_MARGIN
    bar_rect = pygame.Rect(left, top, _BAR_WIDTH, _SLOT_SIZE)
    frame_rect = pygame.Rect(left + _SLOT_STEP * (select_frame - 1), top, _SLOT_SIZE, _SLOT_SIZE)

    app.window.blit(pygame.transform.scale(bar, bar_rect.size), bar_rect)
    app.window.blit(pygame.transform.scale(frame, frame_rect.size), frame_rect)
    return frame_rect