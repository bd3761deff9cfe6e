"""Menus: button layout, hit testing, drawing and menu navigation."""

from __future__ import annotations

import logging
from pathlib import Path

import pygame

from backrooms.hud import render_text
from backrooms.mapgen import generate_map, spawn_player_from_map
from backrooms.raycast import calculate_dir_render
from backrooms.render import present_screen, render_scene
from backrooms.savedata import SaveError, save_data
from backrooms.state import (
    MAP_SIZE_LEVEL0,
    Alignment,
    AppState,
    BackgroundType,
    Button,
    ButtonType,
    Color,
    GameState,
    MapState,
    MenuType,
    Player,
    PlayerState,
    Rect,
    TextType,
)

log = logging.getLogger(__name__)

SAVES_DIR = "saves"
SAVE_SLOTS = 3
ACHIEVEMENT_COUNT = 10

_WHITE = Color(255, 255, 255, 255)
_MAIN_COLOR = Color(137, 136, 113, 127)
_LOAD_COLOR = Color(0, 0, 0, 255)
_MAIN_TOP = 300
_MAIN_STEP = 50 + 20
_LOAD_TOP = 100
_LOAD_STEP = 145
_SIDE_MARGIN = 120
_SELECTED_BORDER = 5
_MENU_SPIN = 0.025
_MENU_ROOMS = 10


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def _button_rect(button: Button) -> pygame.Rect:
    r = button.rect
    return pygame.Rect(r.x - _tdiv(r.w, 2), r.y - _tdiv(r.h, 2), r.w, r.h)


def _fill(target: pygame.Surface, rect: pygame.Rect, rgba: tuple) -> None:
    if rect.w <= 0 or rect.h <= 0:
        return
    overlay = pygame.Surface(rect.size, pygame.SRCALPHA)
    overlay.fill(rgba)
    target.blit(overlay, rect.topleft)


def _set_relative_mouse(enabled: bool) -> None:
    try:
        pygame.mouse.set_visible(not enabled)
        pygame.event.set_grab(enabled)
    except pygame.error:
        pass


def _set_hand_cursor(hand: bool) -> None:
    cursor = pygame.SYSTEM_CURSOR_HAND if hand else pygame.SYSTEM_CURSOR_ARROW
    try:
        pygame.mouse.set_cursor(cursor)
    except pygame.error:
        pass


def _mouse_position() -> tuple[int, int]:
    try:
        return pygame.mouse.get_pos()
    except pygame.error:
        return 0, 0


def initialize_menu(state: GameState) -> None:
    """Lay out every menu button for the current screen size."""
    w = state.app.screen_width
    h = state.app.screen_height
    menu = state.menu
    cx = w // 2

    def main_button(row: int, text: str) -> Button:
        return Button(Rect(cx, _MAIN_TOP + row * _MAIN_STEP, 400, 50), Color(*vars(_MAIN_COLOR).values()), text)

    def wide_button(y: int, height: int, text: str) -> Button:
        return Button(Rect(cx, y, w - _SIDE_MARGIN, height), Color(*vars(_LOAD_COLOR).values()), text)

    menu.play_button = main_button(0, "Jouer")
    menu.achievements_button = main_button(1, "Succes")
    menu.settings_button = main_button(2, "Parametres")
    menu.exit_button = main_button(3, "Quitter")
    menu.resume_game_button = main_button(0, "Reprendre")
    menu.exit_game_button = main_button(3, "Quitter et sauvegarder")

    menu.load_game1 = wide_button(_LOAD_TOP + _LOAD_STEP * 0, 125, "Load Game 1")
    menu.load_game2 = wide_button(_LOAD_TOP + _LOAD_STEP * 1, 125, "Load Game 2")
    menu.load_game3 = wide_button(_LOAD_TOP + _LOAD_STEP * 2, 125, "Load Game 3")
    menu.launch_game = wide_button(_LOAD_TOP + _LOAD_STEP * 3, 100, "Start Game")
    menu.return_button = wide_button(h - 25 - 20, 50, "Retourner")


def clicked_button(button: Button, mouse_x: int, mouse_y: int) -> bool:
    """True when the point lies inside the button (rectangle centred on its position)."""
    rect = _button_rect(button)
    if rect.w <= 0 or rect.h <= 0:
        return False
    return rect.x <= mouse_x < rect.x + rect.w and rect.y <= mouse_y < rect.y + rect.h


def draw_button(app: AppState, button: Button, button_type: ButtonType) -> pygame.Rect:
    """Draw a button with its label; return the rectangle filled with its colour."""
    target = app.window
    rect = _button_rect(button)

    if button_type == ButtonType.SELECTED:
        _fill(target, rect, (255, 255, 255, 255))
        rect = pygame.Rect(
            rect.x + _SELECTED_BORDER,
            rect.y + _SELECTED_BORDER,
            rect.w - 2 * _SELECTED_BORDER,
            rect.h - 2 * _SELECTED_BORDER,
        )

    color = button.color
    alpha = 255 if button_type == ButtonType.HOVER else color.a
    _fill(target, rect, (color.r, color.g, color.b, alpha))

    render_text(app, Alignment.CENTER, button.rect.x, button.rect.y, button.text, _WHITE, TextType.S)
    return rect


def handle_buttons(app: AppState, mouse_x: int, mouse_y: int, *args: Button) -> bool:
    """Draw buttons, highlighting the one under the mouse; return whether one is hovered."""
    hovered = False
    for button in args:
        if clicked_button(button, mouse_x, mouse_y):
            hovered = True
            draw_button(app, button, ButtonType.HOVER)
        else:
            draw_button(app, button, ButtonType.NORMAL)
    _set_hand_cursor(hovered)
    return hovered


def _return_target(state: GameState) -> MenuType:
    return MenuType.BREAK if state.menu.background_type == BackgroundType.GAME else MenuType.MAIN


def handle_menu_buttons(state: GameState, mouse_x: int, mouse_y: int) -> None:
    """Act on a left click at the given point for the menu on display."""
    menu = state.menu

    def hit(button: Button) -> bool:
        return clicked_button(button, mouse_x, mouse_y)

    shown = menu.display_menu
    if shown == MenuType.MAIN:
        if hit(menu.play_button):
            menu.display_menu = MenuType.LOAD
        elif hit(menu.achievements_button):
            menu.display_menu = MenuType.ACHIEVEMENTS
        elif hit(menu.settings_button):
            menu.display_menu = MenuType.SETTINGS
        elif hit(menu.exit_button):
            state.app.running = False

    elif shown == MenuType.LOAD:
        if hit(menu.load_game1):
            state.map_state.type_launch_game = 1
        elif hit(menu.load_game2):
            state.map_state.type_launch_game = 2
        elif hit(menu.load_game3):
            state.map_state.type_launch_game = 3
        elif hit(menu.launch_game):
            menu.display_menu = MenuType.NONE
            menu.background_type = BackgroundType.GAME
            _set_relative_mouse(True)
        elif hit(menu.return_button):
            menu.display_menu = MenuType.MAIN

    elif shown in (MenuType.ACHIEVEMENTS, MenuType.SETTINGS):
        if hit(menu.return_button):
            menu.display_menu = _return_target(state)

    elif shown == MenuType.BREAK:
        if hit(menu.resume_game_button):
            menu.display_menu = MenuType.NONE
            _set_relative_mouse(True)
        elif hit(menu.achievements_button):
            menu.display_menu = MenuType.ACHIEVEMENTS
        elif hit(menu.settings_button):
            menu.display_menu = MenuType.SETTINGS
        elif hit(menu.exit_game_button):
            menu.display_menu = MenuType.MAIN
            menu.background_type = BackgroundType.MENU
            try:
                save_data(state, "Save1", SAVES_DIR)
            except SaveError as exc:
                log.error("cannot save game: %s", exc)


class _MenuScene:
    """Slowly turning view of a level shown behind the main menus."""

    def __init__(self) -> None:
        self.player_state = PlayerState(
            player=Player(5.0, 5.0, 0.0), rotate_speed=0.0, move_speed=0.0
        )
        self.map_state = MapState(_MENU_ROOMS, _MENU_ROOMS)
        self.generated = False

    def ensure_generated(self) -> None:
        if not self.generated:
            generate_map(self.map_state, self.map_state.map_width, self.map_state.map_height)
            spawn_player_from_map(self.player_state, self.map_state)
            self.generated = True


_menu_scene = _MenuScene()


def background(state: GameState, background_type: BackgroundType) -> None:
    """Draw the menu backdrop: a rotating level view, or the dimmed game frame."""
    if background_type == BackgroundType.MENU:
        scene = _menu_scene
        scene.ensure_generated()
        player = scene.player_state.player
        player.angle += _MENU_SPIN
        if player.angle > 360:
            player.angle = 0.0
        cache = state.graphics.render_cache
        cache.dir_x, cache.dir_y = calculate_dir_render(player.angle)

        view = GameState(
            app=state.app,
            player_state=scene.player_state,
            entity_state=state.entity_state,
            map_state=scene.map_state,
            graphics=state.graphics,
            settings=state.settings,
        )
        render_scene(view)

    elif background_type == BackgroundType.GAME:
        present_screen(state)
        target = state.app.window
        if target is not None:
            _fill(
                target,
                pygame.Rect(0, 0, state.app.screen_width, state.app.screen_height),
                (0, 0, 0, 190),
            )


def _refresh_load_labels(state: GameState) -> None:
    menu = state.menu
    slots = (menu.load_game1, menu.load_game2, menu.load_game3)
    for number, button in enumerate(slots, start=1):
        if (Path(SAVES_DIR) / f"Save{number}.dat").is_file():
            button.text = f"Charger Sauvegarde {number}"
        else:
            button.text = "Nouvelle Partie"


def draw_menu(state: GameState) -> None:
    """Draw whichever menu is on display."""
    mouse_x, mouse_y = _mouse_position()
    menu = state.menu
    app = state.app
    shown = menu.display_menu

    if shown == MenuType.MAIN:
        background(state, menu.background_type)
        render_text(app, Alignment.CENTER, app.screen_width // 2, 100, "ESCAPE", _WHITE, TextType.TITLE)
        render_text(app, Alignment.CENTER, app.screen_width // 2, 175, "THE BACKROOMS", _WHITE, TextType.TITLE)
        handle_buttons(
            app, mouse_x, mouse_y,
            menu.play_button, menu.achievements_button, menu.settings_button, menu.exit_button,
        )

    elif shown == MenuType.LOAD:
        background(state, menu.background_type)
        _refresh_load_labels(state)

        chosen = state.map_state.type_launch_game
        for number, button in enumerate((menu.load_game1, menu.load_game2, menu.load_game3), start=1):
            draw_button(app, button, ButtonType.SELECTED if chosen == number else ButtonType.NORMAL)
        draw_button(app, menu.launch_game, ButtonType.NORMAL)

        generate_map(state.map_state, MAP_SIZE_LEVEL0, MAP_SIZE_LEVEL0)
        spawn_player_from_map(state.player_state, state.map_state)

    elif shown == MenuType.ACHIEVEMENTS:
        background(state, menu.background_type)
        target = app.window
        for i in range(ACHIEVEMENT_COUNT):
            block = pygame.Rect(
                60,
                100 + 125 * i + 20 * i - menu.scroll_offset,
                app.screen_width - _SIDE_MARGIN,
                125,
            )
            _fill(target, block, (0, 0, 0, 225))

        _fill(target, pygame.Rect(60, 20, app.screen_width - _SIDE_MARGIN, 50), (0, 0, 0, 255))
        render_text(app, Alignment.LEFT, 120, 45, "Succes", _WHITE, TextType.S)
        render_text(app, Alignment.RIGHT, app.screen_width - 60 - 20, 45, "0 / 25", _WHITE, TextType.XS)

    elif shown == MenuType.SETTINGS:
        background(state, menu.background_type)
        draw_button(app, menu.return_button, ButtonType.NORMAL)

    elif shown == MenuType.BREAK:
        background(state, menu.background_type)
        handle_buttons(
            app, mouse_x, mouse_y,
            menu.resume_game_button, menu.achievements_button, menu.settings_button, menu.exit_game_button,
        )