from hexgrid import hex_to_world, ring
from sim.outcomes import CallerPrivilege
from sim.state import PlayerSpatialState
from systems.vision import (
    is_hex_visible,
    update_vision,
    visibility_mask,
    vision_radius,
    visible_hexes,
)


def _player(at=(5, 5), exploration=0) -> PlayerSpatialState:
    wx, wz = hex_to_world(at)
    return PlayerSpatialState(
        player_id="p1", name="Avatar", world_x=wx, world_z=wz,
        competences={"exploration": exploration},
    )


def test_vision_radius_threshold():
    assert vision_radius(0) == 1
    assert vision_radius(1) == 1
    assert vision_radius(2) == 2
    assert vision_radius(5) == 2


def test_visible_hexes_sizes():
    assert len(visible_hexes((5, 5), 0)) == 7
    assert len(visible_hexes((5, 5), 1)) == 7
    assert len(visible_hexes((5, 5), 2)) == 19
    assert visible_hexes((6, 3), 2) == ring((6, 3), 2)


def test_visible_hexes_deterministic():
    assert visible_hexes((7, 2), 2) == visible_hexes((7, 2), 2)


def test_visible_hexes_at_corner_skip_negative():
    vis = visible_hexes((0, 0), 2)
    assert all(x >= 0 and y >= 0 for x, y in vis)


def test_update_vision_does_not_explore():
    p = _player(exploration=2)
    vision = update_vision(p)
    assert p.current_vision == vision
    assert len(vision) == 19
    assert p.explored == set()


def test_is_hex_visible():
    p = _player()
    update_vision(p)
    assert is_hex_visible((5, 5), p)
    assert not is_hex_visible((9, 9), p)
    p.mark_explored((9, 9))
    assert is_hex_visible((9, 9), p)
    assert is_hex_visible((20, 20), p, CallerPrivilege.UNRESTRICTED)


def test_visibility_mask():
    mask = visibility_mask({(1, 0), (0, 2), (9, 9)}, width=3, height=3)
    assert mask.shape == (3, 3)
    assert mask[0, 1] and mask[2, 0]
    assert int(mask.sum()) == 2
