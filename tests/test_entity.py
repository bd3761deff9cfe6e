from backrooms.entity import add_entity, render_sprites
from backrooms.state import (
    TEXTURE_SIZE,
    EntityState,
    Player,
    RenderCache,
    Sprite,
    TransformSprite,
    new_game_state,
)

W = H = 20
CENTER = 10 * W + 10
BACKGROUND = 0xFF000000


def solid(pixel):
    return [pixel] * (TEXTURE_SIZE * TEXTURE_SIZE)


def make_state():
    state = new_game_state()
    state.app.screen_width = W
    state.app.screen_height = H
    state.player_state.player = Player(1.0, 1.0, 0.0)
    state.graphics.render_cache = RenderCache(1.0, 0.0, 1.0)
    state.graphics.screen_buffers = [BACKGROUND] * (W * H)
    state.graphics.texture_buffers = [
        solid(0xC86432FF),
        solid(0x102030FF),
        solid(0xC8643200),
    ]
    return state


def far_z():
    return [100.0] * W


def test_add_entity_appends():
    entities = EntityState()
    first = Sprite(4.0, 4.0, 0.8, 0.8, 4, TransformSprite(1.0, -64.0))
    second = Sprite(2.0, 3.0)
    add_entity(entities, first)
    add_entity(entities, second)
    assert entities.sprites == [first, second]


def test_opaque_sprite_halves_colour():
    state = make_state()
    render_sprites(state, [Sprite(3.0, 1.0, texture_id=0)], far_z())
    assert state.graphics.screen_buffers[CENTER] == 0xFF643219
    assert state.graphics.screen_buffers[0] == BACKGROUND


def test_sprite_behind_player_is_not_drawn():
    state = make_state()
    render_sprites(state, [Sprite(-1.0, 1.0, texture_id=0)], far_z())
    assert state.graphics.screen_buffers == [BACKGROUND] * (W * H)


def test_sprite_hidden_by_closer_wall():
    state = make_state()
    render_sprites(state, [Sprite(3.0, 1.0, texture_id=0)], [1.0] * W)
    assert state.graphics.screen_buffers == [BACKGROUND] * (W * H)


def test_transparent_texels_are_skipped():
    state = make_state()
    render_sprites(state, [Sprite(3.0, 1.0, texture_id=2)], far_z())
    assert state.graphics.screen_buffers == [BACKGROUND] * (W * H)


def test_nearer_sprite_drawn_last_regardless_of_order():
    near = Sprite(3.0, 1.0, texture_id=0)
    far = Sprite(5.0, 1.0, texture_id=1)

    alone = make_state()
    render_sprites(alone, [near], far_z())

    for order in ([near, far], [far, near]):
        state = make_state()
        render_sprites(state, order, far_z())
        assert state.graphics.screen_buffers[CENTER] == alone.graphics.screen_buffers[CENTER]


def test_blend_with_same_colour_is_unchanged():
    state = make_state()
    render_sprites(state, [Sprite(3.0, 1.0, texture_id=0)], far_z())
    before = list(state.graphics.screen_buffers)
    half = Sprite(3.0, 1.0, texture_id=0, transform=TransformSprite(0.5, 0.0))
    render_sprites(state, [half], far_z())
    assert state.graphics.screen_buffers == before


def test_zero_scale_treated_as_one():
    scaled = make_state()
    render_sprites(scaled, [Sprite(3.0, 1.0, 0.0, 0.0, 0)], far_z())
    unit = make_state()
    render_sprites(unit, [Sprite(3.0, 1.0, 1.0, 1.0, 0)], far_z())
    assert scaled.graphics.screen_buffers == unit.graphics.screen_buffers