"""Game state: enumerations, value types and the aggregate game state."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

WINDOW_TITLE = "ESCAPE THE BACKROOMS"
TEXTURE_SIZE = 64
NUMBER_TEXTURES = 5
MAP_SIZE_LEVEL0 = 6

FONT_ROBOTO = "font/Roboto-Regular.ttf"
FONT_JERSEY = "font/Jersey25-Regular.ttf"
ICON_FILE = "image/The_Backrooms_logo.png"


class TextType(IntEnum):
    """Text sizes used by the interface."""

    XS = 0
    S = 1
    M = 2
    L = 3
    XL = 4
    XXL = 5
    TITLE = 6


class Alignment(IntEnum):
    LEFT = 0
    CENTER = 1
    RIGHT = 2


class ButtonType(IntEnum):
    NORMAL = 0
    SELECTED = 1
    HOVER = 2


class MenuType(IntEnum):
    NONE = 0
    MAIN = 1
    LOAD = 2
    ACHIEVEMENTS = 3
    SETTINGS = 4
    BREAK = 5


class BackgroundType(IntEnum):
    MENU = 0
    GAME = 1


@dataclass
class Player:
    x: float = 0.0
    y: float = 0.0
    angle: float = 0.0


@dataclass
class TransformSprite:
    transparency: float = 1.0
    move_y: float = 0.0


@dataclass
class Sprite:
    x: float
    y: float
    scale_x: float = 1.0
    scale_y: float = 1.0
    texture_id: int = 0
    transform: TransformSprite = field(default_factory=TransformSprite)


@dataclass
class Color:
    r: int
    g: int
    b: int
    a: int = 255


@dataclass
class Rect:
    x: int = 0
    y: int = 0
    w: int = 0
    h: int = 0


@dataclass
class Button:
    rect: Rect = field(default_factory=Rect)
    color: Color = field(default_factory=lambda: Color(0, 0, 0, 0))
    text: str = ""


@dataclass
class RenderCache:
    """Camera direction and the projection-plane scale."""

    dir_x: float = 0.0
    dir_y: float = 0.0
    fov_render: float = 0.0


@dataclass
class AppState:
    screen_width: int = 800
    screen_height: int = 600
    running: bool = True
    window: Any = None
    keystate: Any = None
    controller: Any = None
    fonts: list = field(default_factory=list)
    fps: float = 0.0
    start_time: float = 0.0
    previous_time: float = 0.0


@dataclass
class PlayerState:
    player: Player = field(default_factory=lambda: Player(1.0, 1.0, 0.0))
    rotate_speed: float = 150.0
    move_speed: float = 3.0
    player_rotate_speed: float = 0.0
    player_move_speed: float = 0.0
    select_frame: int = 1
    show_map: bool = False
    show_state: bool = False
    show_textures: bool = True
    collision: bool = True


@dataclass
class EntityState:
    sprites: list[Sprite] = field(default_factory=list)
    z_buffer: list[float] = field(default_factory=list)


@dataclass
class MenuState:
    display_menu: MenuType = MenuType.MAIN
    background_type: BackgroundType = BackgroundType.MENU
    scroll_offset: int = 0

    play_button: Button = field(default_factory=Button)
    achievements_button: Button = field(default_factory=Button)
    settings_button: Button = field(default_factory=Button)
    exit_button: Button = field(default_factory=Button)
    resume_game_button: Button = field(default_factory=Button)
    exit_game_button: Button = field(default_factory=Button)
    load_game1: Button = field(default_factory=Button)
    load_game2: Button = field(default_factory=Button)
    load_game3: Button = field(default_factory=Button)
    launch_game: Button = field(default_factory=Button)
    return_button: Button = field(default_factory=Button)


@dataclass
class MapState:
    map_width: int = MAP_SIZE_LEVEL0
    map_height: int = MAP_SIZE_LEVEL0
    map: list[list[int]] = field(default_factory=list)
    map_discovered: list[list[int]] = field(default_factory=list)
    type_launch_game: int = 0


@dataclass
class GraphicsBuffers:
    """Screen pixels (0xAARRGGBB) and texture pixels (0xRRGGBBAA)."""

    screen_buffers: list[int] = field(default_factory=list)
    screen_texture: Any = None
    texture_buffers: list[list[int]] = field(default_factory=list)
    render_cache: RenderCache = field(default_factory=RenderCache)


@dataclass
class Settings:
    sensitivity: float = 0.2
    fov: float = 85.0
    volume: float = 1.0


@dataclass
class GameState:
    app: AppState = field(default_factory=AppState)
    player_state: PlayerState = field(default_factory=PlayerState)
    entity_state: EntityState = field(default_factory=EntityState)
    menu: MenuState = field(default_factory=MenuState)
    map_state: MapState = field(default_factory=MapState)
    graphics: GraphicsBuffers = field(default_factory=GraphicsBuffers)
    settings: Settings = field(default_factory=Settings)


def new_game_state() -> GameState:
    """Return a fresh game state with the start-up defaults."""
    return GameState()