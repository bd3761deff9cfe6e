# backrooms

`backrooms` is a small first-person exploration game. You walk through a maze of rooms, and a new maze is built each time you start a game. A grid raycaster draws the 3D view in software. `pygame` puts it on screen.

## Installing

```
pip install .
```

The only runtime dependency is `pygame`.

The game loads its assets by relative path, so run it from a directory that holds them. These files are not part of the package:

- `font/Roboto-Regular.ttf`
- `font/Jersey25-Regular.ttf`
- `image/The_Backrooms_logo.png`
- `textures/breadMat.png`
- `textures/floor.png`
- `textures/ceiling.png`
- `textures/e1.png`
- `textures/inventoryBar.png`
- `textures/frameSelect.png`

If the icon, a font or a texture cannot be loaded, `backrooms` prints the error and exits with status 1.

## Playing

```
backrooms
```

This opens a borderless window the size of the desktop. The main menu offers four buttons:

- **Jouer** opens the save-slot screen. Pick a slot, then press **Start Game**. A new level of 6 × 6 rooms is generated.
- **Succes** opens the achievements screen.
- **Parametres** opens the settings screen.
- **Quitter** closes the game.

### Keyboard and mouse

| Input                  | Action                                     |
|------------------------|--------------------------------------------|
| Up / `W`               | move forward                               |
| Down / `S`             | move backward                              |
| `A` / `D`              | strafe                                     |
| Left / Right, mouse    | turn                                       |
| Mouse wheel            | change the selected hotbar slot (1–7)      |
| `M`                    | toggle the minimap                         |
| `F`                    | toggle the status panel (FPS and toggles)  |
| `T`                    | toggle textured / flat-colour rendering    |
| `C`                    | toggle collision with room walls           |
| `Esc`                  | open the pause menu                        |

Collision works as follows:

- **On:** you can only step onto floor.
- **Off:** you can walk through room walls, but the outer wall still stops you.

### Game controller

If a game controller is found, it works as follows:

- The left stick moves.
- The right stick turns.
- **Y** toggles the map.
- **Back** toggles textures.
- **Start** toggles the status panel.
- The shoulder buttons change the selected hotbar slot.

### Pause menu

The pause menu offers these buttons:

- **Reprendre** returns to the game.
- **Succes** opens the achievements screen.
- **Parametres** opens the settings screen.
- **Quitter et sauvegarder** returns to the main menu. It first writes your position and the map to `saves/Save1.dat`. The `saves/` directory must already exist. If the file cannot be written, the error is logged.

## What the game does not do

- **No loading of saved games.** The save-slot screen only reports which slots are in use. A slot with a file shows "Charger Sauvegarde n"; an empty one shows "Nouvelle Partie". Choosing a slot only highlights it, and **Start Game** always starts on a freshly generated level.
- **No real settings.** The settings screen only has a return button. Mouse sensitivity (0.2) and field of view (85°) are fixed defaults.
- **No achievements.** The achievements screen shows empty placeholder boxes and "0 / 25".
- **No sound.**
- **No goal, enemies or items.** There is one decorative sprite, and the hotbar selection has no effect.

## Using the pieces

The modules can be used without opening a window.

```python
import random

from backrooms.state import new_game_state
from backrooms.mapgen import generate_map, spawn_player_from_map
from backrooms.raycast import calculate_dir_render, cast_ray
from backrooms.savedata import read_data, save_data

state = new_game_state()
generate_map(state.map_state, 3, 3, random.Random(1))
spawn_player_from_map(state.player_state, state.map_state)

dir_x, dir_y = calculate_dir_render(state.player_state.player.angle)
hit = cast_ray(state.player_state, state.map_state, dir_x, dir_y)
print(hit.distance, hit.wall_type, hit.wall_side)

path = save_data(state, "demo", "saves")  # writes saves/demo.dat
read_data(state, "demo", "saves")
```

### `backrooms.state`

Holds the dataclasses for the whole game (`GameState`, `PlayerState`, `MapState` and the others) and the enumerations (`MenuType`, `TextType`, …). `new_game_state()` returns a state with the start-up defaults.

### `backrooms.mapgen`

`generate_map(map_state, rooms_wide, rooms_high, rng=None)` builds a grid of `rooms_wide * 12 + 1` by `rooms_high * 12 + 1` tiles. The tile values are:

| Value | Meaning        |
|-------|----------------|
| `0`   | floor          |
| `1`   | outer wall     |
| `2`   | room wall      |
| `9`   | the spawn tile |

The level is built in these steps:

1. Rooms are chosen at random from `ALL_ROOMS`, each with a `RoomPattern` limit on how often it may appear.
2. Each room is rotated with `rotate_room`.
3. Neighbouring rooms are joined by short corridors.
4. `connect_isolated_zones` links large isolated floor regions.

`spawn_player_from_map` moves the player onto the spawn tile and clears it. It returns `False`, leaving the player at (1.5, 1.5), when there is none.

### `backrooms.raycast`

`cast_ray` returns a `RayHit(distance, wall_type, wall_side)` and marks every cell it crosses as discovered. It raises `ValueError` if the ray leaves the map.

`calculate_dir_render(angle)` and `calculate_fov_render(fov)` turn degrees into the camera's direction vector and projection-plane scale.

### `backrooms.savedata`

`save_data(state, name_save, saves_dir="saves")` writes `<saves_dir>/<name_save>.dat` and returns its path. The file holds:

- the player position and angle;
- the map size;
- the tile grid;
- the discovered grid.

`read_data` loads such a file back into a state. It raises `SaveError` when the file is missing, truncated or malformed.

### Rendering, HUD, menus and input

These modules draw on or react to a `pygame` window:

- `backrooms.render`: `render_scene`, `present_screen` and `glitch_effect`.
- `backrooms.entity`: sprite drawing.
- `backrooms.hud`: FPS, text, status panel, minimap and hotbar.
- `backrooms.menu`: menu layout and navigation.
- `backrooms.controls`: keyboard, mouse and controller handling.

`backrooms.app.main()` runs the whole game.

## Tests

```
pip install .[test]
pytest
```