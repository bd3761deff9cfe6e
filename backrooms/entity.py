"""Billboard sprites: registration and projection into the screen buffer."""

from __future__ import annotations

from backrooms.state import TEXTURE_SIZE, EntityState, GameState, Sprite


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def add_entity(entity_state: EntityState, sprite: Sprite) -> None:
    """Register a sprite in the entity state."""
    entity_state.sprites.append(sprite)


def render_sprites(state: GameState, sprites: list[Sprite], z_buffer: list[float]) -> None:
    """Draw sprites far-to-near into the screen buffer, hidden behind closer walls."""
    if not sprites:
        return

    pos_x = state.player_state.player.x
    pos_y = state.player_state.player.y
    cache = state.graphics.render_cache
    dir_x, dir_y = cache.dir_x, cache.dir_y
    plane_x = -dir_y * cache.fov_render
    plane_y = dir_x * cache.fov_render

    det = plane_x * dir_y - dir_x * plane_y
    if det == 0:
        return
    inv_det = 1.0 / det

    w = state.app.screen_width
    h = state.app.screen_height
    buffer = state.graphics.screen_buffers
    textures = state.graphics.texture_buffers

    ordered = sorted(
        sprites,
        key=lambda s: (pos_x - s.x) ** 2 + (pos_y - s.y) ** 2,
        reverse=True,
    )

    for sprite in ordered:
        v_div = sprite.scale_y or 1.0
        u_div = sprite.scale_x or 1.0
        transparency = sprite.transform.transparency
        opaque = transparency >= 1.0 or transparency <= 0.0

        rel_x = sprite.x - pos_x
        rel_y = sprite.y - pos_y
        transform_x = inv_det * (dir_y * rel_x - dir_x * rel_y)
        transform_y = inv_det * (-plane_y * rel_x + plane_x * rel_y)
        if transform_y <= 0:
            continue

        screen_x = int((w // 2) * (1 + transform_x / transform_y))
        v_move_screen = int(-sprite.transform.move_y / transform_y)

        base = abs(int(h / transform_y))
        sprite_height = int(base / (1.0 / v_div))
        sprite_width = int(base / (1.0 / u_div))

        start_y = max(_tdiv(-sprite_height, 2) + h // 2 + v_move_screen, 0)
        end_y = min(_tdiv(sprite_height, 2) + h // 2 + v_move_screen, h - 1)

        left = _tdiv(-sprite_width, 2) + screen_x
        start_x = max(left, 0)
        end_x = min(_tdiv(sprite_width, 2) + screen_x, w - 1)

        texture = textures[sprite.texture_id]

        for stripe in range(start_x, end_x):
            if not transform_y < z_buffer[stripe]:
                continue
            tex_x = _tdiv(_tdiv(256 * (stripe - left) * TEXTURE_SIZE, sprite_width), 256)

            for y in range(start_y, end_y):
                d = (y - v_move_screen) * 256 - h * 128 + sprite_height * 128
                tex_y = _tdiv(_tdiv(d * TEXTURE_SIZE, sprite_height), 256)
                index = TEXTURE_SIZE * tex_y + tex_x
                if not 0 <= index < len(texture):
                    continue

                pixel = texture[index]
                if pixel & 0xFF == 0:
                    continue

                r = ((pixel >> 24) & 0xFF) // 2
                g = ((pixel >> 16) & 0xFF) // 2
                b = ((pixel >> 8) & 0xFF) // 2
                pos = y * w + stripe

                if not opaque:
                    bg = buffer[pos]
                    keep = 1.0 - transparency
                    r = int(r * transparency + ((bg >> 16) & 0xFF) * keep)
                    g = int(g * transparency + ((bg >> 8) & 0xFF) * keep)
                    b = int(b * transparency + (bg & 0xFF) * keep)

                buffer[pos] = 0xFF000000 | (r << 16) | (g << 8) | b