"""Window set-up, resources, tear-down and the main game loop."""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time

import pygame

from backrooms.controls import (
    controller_down,
    controller_input,
    keyboard_down,
    keyboard_input,
    mouse_handle,
)
from backrooms.entity import add_entity
from backrooms.hud import calculate_fps, item_frame, show_map_interface, show_state_interface
from backrooms.menu import draw_menu, initialize_menu
from backrooms.raycast import calculate_fov_render
from backrooms.render import render_scene
from backrooms.state import (
    FONT_JERSEY,
    FONT_ROBOTO,
    ICON_FILE,
    TEXTURE_SIZE,
    WINDOW_TITLE,
    AppState,
    GameState,
    MenuType,
    Sprite,
    TransformSprite,
    new_game_state,
)

log = logging.getLogger(__name__)

TEXTURE_PATHS = (
    "textures/breadMat.png",
    "textures/breadMat.png",
    "textures/floor.png",
    "textures/ceiling.png",
    "textures/e1.png",
)

FONT_TYPES = (
    (FONT_ROBOTO, 26),
    (FONT_ROBOTO, 28),
    (FONT_ROBOTO, 32),
    (FONT_ROBOTO, 36),
    (FONT_ROBOTO, 48),
    (FONT_ROBOTO, 72),
    (FONT_JERSEY, 94),
)


def _open_controller():
    """Open the game controllers found; keep the last one, as SDL enumerates them."""
    try:
        from pygame._sdl2 import controller as sdl_controller

        sdl_controller.init()
        found = None
        for index in range(sdl_controller.get_count()):
            if sdl_controller.is_controller(index):
                found = sdl_controller.Controller(index)
        return found
    except (ImportError, pygame.error) as exc:
        log.warning("game controllers unavailable: %s", exc)
        return None


def initialize_window(state: GameState) -> None:
    """Open a borderless window covering the desktop, load the icon and fonts."""
    app = state.app
    try:
        pygame.display.init()
        pygame.font.init()
    except pygame.error as exc:
        raise RuntimeError(f"cannot initialise display: {exc}") from exc

    sizes = pygame.display.get_desktop_sizes()
    if sizes:
        app.screen_width, app.screen_height = sizes[0]

    os.environ.setdefault("SDL_VIDEO_WINDOW_POS", "0,0")
    try:
        app.window = pygame.display.set_mode((app.screen_width, app.screen_height), pygame.NOFRAME)
    except pygame.error as exc:
        raise RuntimeError(f"cannot create window: {exc}") from exc
    pygame.display.set_caption(WINDOW_TITLE)

    try:
        icon = pygame.image.load(ICON_FILE)
    except (pygame.error, OSError) as exc:
        raise RuntimeError(f"cannot load icon {ICON_FILE}: {exc}") from exc
    pygame.display.set_icon(icon)

    fonts = []
    for family, size in FONT_TYPES:
        try:
            fonts.append(pygame.font.Font(family, size))
        except (pygame.error, OSError) as exc:
            raise RuntimeError(f"cannot load font {family}: {exc}") from exc
    app.fonts = fonts

    pygame.mouse.set_visible(True)
    pygame.event.set_grab(False)
    app.keystate = pygame.key.get_pressed()
    app.controller = _open_controller()


def initialize_screen(state: GameState) -> None:
    """Allocate the screen and depth buffers for the current size."""
    w, h = state.app.screen_width, state.app.screen_height
    state.graphics.screen_texture = None
    state.graphics.screen_buffers = [0] * (w * h)
    state.entity_state.z_buffer = [0.0] * w
    state.graphics.render_cache.fov_render = calculate_fov_render(state.settings.fov)


def _texture_from_surface(surface: pygame.Surface, path: str) -> list[int]:
    width, height = surface.get_size()
    if width < TEXTURE_SIZE or height < TEXTURE_SIZE:
        raise ValueError(f"texture {path} is smaller than {TEXTURE_SIZE}x{TEXTURE_SIZE}")
    pixels = []
    for y in range(TEXTURE_SIZE):
        for x in range(TEXTURE_SIZE):
            c = surface.get_at((x, y))
            pixels.append((c.r << 24) | (c.g << 16) | (c.b << 8) | c.a)
    return pixels


def load_textures(state: GameState) -> None:
    """Load every texture as RRGGBBAA pixels into the graphics buffers."""
    buffers = []
    for path in TEXTURE_PATHS:
        try:
            surface = pygame.image.load(path)
        except (pygame.error, OSError) as exc:
            raise RuntimeError(f"cannot load texture {path}: {exc}") from exc
        buffers.append(_texture_from_surface(surface, path))
    state.graphics.texture_buffers = buffers


def close_window(state: GameState) -> None:
    """Release buffers, the controller, fonts and the display."""
    state.graphics.texture_buffers = []
    state.entity_state.sprites = []
    state.entity_state.z_buffer = []

    controller = state.app.controller
    if controller is not None:
        try:
            controller.quit()
        except pygame.error:
            pass
        state.app.controller = None

    state.app.fonts = []
    state.app.window = None
    pygame.quit()


def has_window_resize(app: AppState) -> bool:
    """True when the window size differs from the recorded screen size."""
    return tuple(app.window.get_size()) != (app.screen_width, app.screen_height)


def _run(state: GameState) -> None:
    app = state.app
    app.start_time = app.previous_time = time.perf_counter()

    while app.running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                app.running = False
            mouse_handle(state, event)
            keyboard_down(state, event)
            if app.controller is not None:
                controller_down(state, event)

        if has_window_resize(app):
            app.screen_width, app.screen_height = app.window.get_size()
            initialize_screen(state)
            initialize_menu(state)

        app.window.fill((0, 0, 0))

        if state.menu.display_menu != MenuType.NONE:
            draw_menu(state)
        else:
            calculate_fps(app, state.player_state)
            app.keystate = pygame.key.get_pressed()
            keyboard_input(state)
            if app.controller is not None:
                controller_input(state)

            render_scene(state)

            item_frame(app, state.player_state.select_frame)
            if state.player_state.show_state:
                show_state_interface(app, state.player_state)
            if state.player_state.show_map:
                show_map_interface(app, state.map_state, state.player_state)

        pygame.display.flip()


def main(argv=None) -> int:
    """Start the game; return the process exit status."""
    parser = argparse.ArgumentParser(prog="backrooms", description=WINDOW_TITLE.title())
    parser.parse_args(argv)

    state = new_game_state()
    try:
        initialize_window(state)
        initialize_menu(state)
        initialize_screen(state)
        load_textures(state)
    except (RuntimeError, ValueError) as exc:
        print(exc, file=sys.stderr)
        pygame.quit()
        return 1

    add_entity(
        state.entity_state,
        Sprite(
            x=4.0,
            y=4.0,
            scale_x=0.8,
            scale_y=0.8,
            texture_id=4,
            transform=TransformSprite(transparency=1.0, move_y=-64.0),
        ),
    )

    try:
        _run(state)
    finally:
        close_window(state)
    return 0


if __name__ == "__main__":
    sys.exit(main())