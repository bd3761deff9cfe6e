"""Saving and loading of player position and map to text files."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from backrooms.state import GameState


class SaveError(Exception):
    """A save file could not be written or read."""


def _save_path(name_save: str, saves_dir: str | Path) -> Path:
    return Path(saves_dir) / f"{name_save}.dat"


def _grid_lines(grid: list[list[int]], width: int, height: int) -> list[str]:
    return ["".join(f"{value} " for value in row[:width]) for row in grid[:height]]


def save_data(state: GameState, name_save: str, saves_dir: str | Path = "saves") -> Path:
    """Write the player position and map to ``<saves_dir>/<name_save>.dat``."""
    path = _save_path(name_save, saves_dir)
    player = state.player_state.player
    ms = state.map_state

    lines = [
        f"PLAYER_X {player.x:.6f}",
        f"PLAYER_Y {player.y:.6f}",
        f"PLAYER_A {player.angle:.6f}",
        "",
        f"MAP_WIDTH  {ms.map_width}",
        f"MAP_HEIGHT {ms.map_height}",
        "",
        *_grid_lines(ms.map, ms.map_width, ms.map_height),
        "",
        *_grid_lines(ms.map_discovered, ms.map_width, ms.map_height),
    ]
    try:
        path.write_text("\n".join(lines) + "\n", encoding="ascii")
    except OSError as exc:
        raise SaveError(f"cannot write {path}") from exc
    return path


class _Tokens:
    def __init__(self, text: str) -> None:
        self._it: Iterator[str] = iter(text.split())

    def word(self) -> str:
        try:
            return next(self._it)
        except StopIteration:
            raise SaveError("unexpected end of save file") from None

    def expect(self, label: str) -> None:
        found = self.word()
        if found != label:
            raise SaveError(f"expected {label}, found {found!r}")

    def number(self, kind: type):
        token = self.word()
        try:
            return kind(token)
        except ValueError:
            raise SaveError(f"bad number {token!r}") from None


def read_data(state: GameState, name_save: str, saves_dir: str | Path = "saves") -> None:
    """Load player position and map from ``<saves_dir>/<name_save>.dat`` into ``state``.

    Accepts the header either as ``PLAYER x y a`` or as separate
    ``PLAYER_X``/``PLAYER_Y``/``PLAYER_A`` lines.
    """
    path = _save_path(name_save, saves_dir)
    try:
        text = path.read_text(encoding="ascii")
    except (OSError, UnicodeDecodeError) as exc:
        raise SaveError(f"cannot read {path}") from exc

    tokens = _Tokens(text)
    head = tokens.word()
    if head == "PLAYER":
        x, y, angle = (tokens.number(float) for _ in range(3))
    elif head == "PLAYER_X":
        x = tokens.number(float)
        tokens.expect("PLAYER_Y")
        y = tokens.number(float)
        tokens.expect("PLAYER_A")
        angle = tokens.number(float)
    else:
        raise SaveError(f"unexpected header {head!r}")

    tokens.expect("MAP_WIDTH")
    width = tokens.number(int)
    tokens.expect("MAP_HEIGHT")
    height = tokens.number(int)

    grid = [[tokens.number(int) for _ in range(width)] for _ in range(height)]
    discovered = [[tokens.number(int) for _ in range(width)] for _ in range(height)]

    player = state.player_state.player
    player.x, player.y, player.angle = x, y, angle
    ms = state.map_state
    ms.map_width, ms.map_height = width, height
    ms.map = grid
    ms.map_discovered = discovered