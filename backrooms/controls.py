"""Keyboard, mouse and game-controller handling."""

from __future__ import annotations

import math

import pygame

from backrooms.menu import handle_menu_buttons
from backrooms.raycast import calculate_dir_render
from backrooms.state import GameState, MenuType

MIN_FRAME = 1
MAX_FRAME = 7
SCROLL_STEP = 20
MAX_SCROLL_OFFSET = 995  # (10 - 3) * 125 + ((10 - 3) - 1) * 20
AXIS_DEADZONE = 8000
AXIS_MAX = 32767.0

_FORWARD_KEYS = (pygame.K_UP, pygame.K_w)
_BACKWARD_KEYS = (pygame.K_DOWN, pygame.K_s)


def _pressed(keystate, key: int) -> bool:
    if keystate is None:
        return False
    try:
        return bool(keystate[key])
    except (IndexError, KeyError):
        return False


def _release_mouse() -> None:
    try:
        pygame.mouse.set_visible(True)
        pygame.event.set_grab(False)
    except pygame.error:
        pass


def _try_move(state: GameState, new_x: float, new_y: float) -> bool:
    """Move the player if the target cell allows it; return whether it moved.

    With collision on only floor cells are entered; with it off only the
    outer wall (tile 1) stops the player.
    """
    grid = state.map_state.map
    cell_x, cell_y = int(new_x), int(new_y)
    if not (0 <= cell_y < len(grid) and 0 <= cell_x < len(grid[cell_y])):
        return False
    cell = grid[cell_y][cell_x]
    allowed = cell == 0 if state.player_state.collision else cell != 1
    if allowed:
        player = state.player_state.player
        player.x, player.y = new_x, new_y
    return allowed


def _set_angle(state: GameState, angle: float) -> None:
    state.player_state.player.angle = angle
    cache = state.graphics.render_cache
    cache.dir_x, cache.dir_y = calculate_dir_render(angle)


def _wrap(angle: float) -> float:
    if angle < 0:
        angle += 360
    if angle >= 360:
        angle -= 360
    return angle


def keyboard_down(state: GameState, event) -> None:
    """Toggle display and debug options, or pause the game, on a key press."""
    if event.type != pygame.KEYDOWN:
        return
    ps = state.player_state
    key = event.key
    if key == pygame.K_m:
        ps.show_map = not ps.show_map
    elif key == pygame.K_f:
        ps.show_state = not ps.show_state
    elif key == pygame.K_t:
        ps.show_textures = not ps.show_textures
    elif key == pygame.K_c:
        ps.collision = not ps.collision
    elif key == pygame.K_ESCAPE:
        if state.menu.display_menu == MenuType.NONE:
            state.menu.display_menu = MenuType.BREAK
            _release_mouse()


def controller_down(state: GameState, event) -> None:
    """Handle a game-controller button press."""
    if event.type != pygame.CONTROLLERBUTTONDOWN:
        return
    ps = state.player_state
    in_game = state.menu.display_menu == MenuType.NONE
    button = event.button
    if button == pygame.CONTROLLER_BUTTON_Y:
        ps.show_map = not ps.show_map
    elif button == pygame.CONTROLLER_BUTTON_BACK:
        ps.show_textures = not ps.show_textures
    elif button == pygame.CONTROLLER_BUTTON_START:
        ps.show_state = not ps.show_state
    elif button == pygame.CONTROLLER_BUTTON_RIGHTSHOULDER:
        if in_game and ps.select_frame < MAX_FRAME:
            ps.select_frame += 1
    elif button == pygame.CONTROLLER_BUTTON_LEFTSHOULDER:
        if in_game and ps.select_frame > MIN_FRAME:
            ps.select_frame -= 1


def mouse_handle(state: GameState, event) -> None:
    """Turn the view with the mouse, scroll with the wheel and click menu buttons."""
    in_game = state.menu.display_menu == MenuType.NONE
    ps = state.player_state

    if event.type == pygame.MOUSEMOTION and in_game:
        angle = ps.player.angle + event.rel[0] * state.settings.sensitivity
        _set_angle(state, _wrap(angle))
    elif event.type == pygame.MOUSEWHEEL:
        if event.y > 0 and ps.select_frame > MIN_FRAME:
            ps.select_frame -= 1
        elif event.y < 0 and ps.select_frame < MAX_FRAME:
            ps.select_frame += 1

        menu = state.menu
        if event.y > 0 and menu.scroll_offset > 0:
            menu.scroll_offset = max(menu.scroll_offset - SCROLL_STEP, 0)
        elif event.y < 0:
            menu.scroll_offset = min(menu.scroll_offset + SCROLL_STEP, MAX_SCROLL_OFFSET)

    if event.type == pygame.MOUSEBUTTONDOWN and event.button == pygame.BUTTON_LEFT and not in_game:
        mouse_x, mouse_y = event.pos
        handle_menu_buttons(state, mouse_x, mouse_y)


def keyboard_input(state: GameState) -> None:
    """Apply held keys: move, strafe and turn the player."""
    keys = state.app.keystate
    ps = state.player_state
    speed = ps.player_move_speed

    def heading() -> tuple[float, float]:
        radians = math.radians(ps.player.angle)
        return math.cos(radians), math.sin(radians)

    if any(_pressed(keys, k) for k in _FORWARD_KEYS):
        cos_a, sin_a = heading()
        _try_move(state, ps.player.x + cos_a * speed, ps.player.y + sin_a * speed)

    if any(_pressed(keys, k) for k in _BACKWARD_KEYS):
        cos_a, sin_a = heading()
        _try_move(state, ps.player.x - cos_a * speed, ps.player.y - sin_a * speed)

    if _pressed(keys, pygame.K_a):
        cos_a, sin_a = heading()
        _try_move(state, ps.player.x + sin_a * speed / 2, ps.player.y - cos_a * speed / 2)

    if _pressed(keys, pygame.K_d):
        cos_a, sin_a = heading()
        _try_move(state, ps.player.x - sin_a * speed / 2, ps.player.y + cos_a * speed / 2)

    if _pressed(keys, pygame.K_LEFT):
        angle = ps.player.angle - ps.player_rotate_speed
        if angle < 0:
            angle += 360
        _set_angle(state, angle)

    if _pressed(keys, pygame.K_RIGHT):
        angle = ps.player.angle + ps.player_rotate_speed
        if angle >= 360:
            angle -= 360
        _set_angle(state, angle)


def controller_input(state: GameState) -> None:
    """Apply the controller sticks: left stick moves, right stick turns."""
    controller = state.app.controller
    if controller is None:
        return
    ps = state.player_state
    left_x = controller.get_axis(pygame.CONTROLLER_AXIS_LEFTX)
    left_y = controller.get_axis(pygame.CONTROLLER_AXIS_LEFTY)
    right_x = controller.get_axis(pygame.CONTROLLER_AXIS_RIGHTX)

    if abs(left_y) > AXIS_DEADZONE:
        radians = math.radians(ps.player.angle)
        amount = left_y / AXIS_MAX * ps.player_move_speed
        _try_move(
            state,
            ps.player.x - math.cos(radians) * amount,
            ps.player.y - math.sin(radians) * amount,
        )

    if abs(left_x) > AXIS_DEADZONE:
        radians = math.radians(ps.player.angle)
        amount = left_x / AXIS_MAX * ps.player_move_speed / 2
        _try_move(
            state,
            ps.player.x - math.sin(radians) * amount,
            ps.player.y + math.cos(radians) * amount,
        )

    if abs(right_x) > AXIS_DEADZONE:
        angle = ps.player.angle + right_x / AXIS_MAX * ps.player_rotate_speed
        _set_angle(state, _wrap(angle))