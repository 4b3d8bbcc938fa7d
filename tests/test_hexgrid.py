import math

import pytest

from hexgrid import (
    HexCoord,
    hex_distance,
    hex_to_world,
    is_adjacent,
    is_valid,
    neighbors,
    parse_key,
    ring,
    to_key,
    world_to_hex,
)


SAMPLE_HEXES = [(x, y) for x in range(2, 9) for y in range(2, 9)]


def test_neighbors_even_column():
    assert set(neighbors((4, 4))) == {(3, 4), (5, 4), (4, 3), (4, 5), (3, 3), (5, 3)}


def test_neighbors_odd_column():
    assert set(neighbors((5, 4))) == {(4, 4), (6, 4), (5, 3), (5, 5), (4, 5), (6, 5)}


@pytest.mark.parametrize("h", SAMPLE_HEXES)
def test_neighbors_are_six_distinct_and_exclude_self(h):
    ns = neighbors(h)
    assert len(ns) == 6
    assert len(set(ns)) == 6
    assert h not in ns


@pytest.mark.parametrize("h", SAMPLE_HEXES)
def test_neighbors_are_symmetric(h):
    for n in neighbors(h):
        assert HexCoord(*h) in neighbors(n)


@pytest.mark.parametrize("h", SAMPLE_HEXES)
def test_ring_cardinalities(h):
    assert ring(h, 0) == {h}
    r1 = ring(h, 1)
    r2 = ring(h, 2)
    assert len(r1) == 7
    assert len(r2) == 19
    assert h in r1 and h in r2
    assert r1 <= r2


@pytest.mark.parametrize("h", SAMPLE_HEXES)
def test_ring_matches_hex_distance(h):
    for c in ring(h, 2):
        assert hex_distance(h, c) <= 2
    outer = ring(h, 2) - ring(h, 1)
    assert all(hex_distance(h, c) == 2 for c in outer)


def test_ring_clip_drops_negative_positions():
    clipped = ring((0, 0), 2, clip=True)
    assert all(is_valid(c) for c in clipped)
    assert (0, 0) in clipped
    assert len(clipped) < 19


def test_ring_rejects_unsupported_radius():
    with pytest.raises(ValueError):
        ring((3, 3), 3)
    with pytest.raises(ValueError):
        ring((3, 3), -1)


def test_is_valid():
    assert is_valid((0, 0))
    assert not is_valid((-1, 0))
    assert not is_valid((0, -1))


def test_is_adjacent():
    assert is_adjacent((4, 4), (5, 3))
    assert not is_adjacent((4, 4), (5, 5))
    assert is_adjacent((5, 4), (6, 5))


def test_world_hex_roundtrip():
    for x in range(6):
        for y in range(6):
            wx, wz = hex_to_world((x, y))
            assert world_to_hex(wx, wz) == (x, y)


def test_world_to_hex_snaps_to_nearest():
    wx, wz = hex_to_world((3, 2))
    assert world_to_hex(wx + 0.2, wz - 0.2) == (3, 2)


def test_hex_to_world_pitch():
    wx, wz = hex_to_world((2, 4))
    assert wx == pytest.approx(3.0)
    assert wz == pytest.approx(4 * math.sqrt(3) * 0.5)


def test_key_roundtrip():
    assert parse_key(to_key((12, 7))) == (12, 7)
