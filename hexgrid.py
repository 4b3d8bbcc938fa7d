"""Hex grid offset coordinate utilities.

The map uses a "shoved column" offset layout: odd columns are drawn half a
hex lower than even columns.  Neighbor and ring lookups therefore depend on
the parity of the column, and are kept as offset tables indexed by parity.
"""
from __future__ import annotations
import math
from typing import Dict, List, NamedTuple, Set, Tuple

SQRT3 = math.sqrt(3.0)

# World units between column centers and between row centers
COLUMN_PITCH = 1.5
ROW_PITCH = SQRT3 * 0.5


class HexCoord(NamedTuple):
    """Integer ``(x, y)`` hex position; x is the column, y the row."""

    x: int
    y: int


Coord = Tuple[int, int]

# Parity (x % 2) -> offsets of the six adjacent hexes.
# Order: left, right, up, down, then the two diagonals of that parity.
NEIGHBOR_OFFSETS: Dict[int, Tuple[Coord, ...]] = {
    0: ((-1, 0), (1, 0), (0, -1), (0, 1), (-1, -1), (1, -1)),
    1: ((-1, 0), (1, 0), (0, -1), (0, 1), (-1, 1), (1, 1)),
}

# Parity -> offsets of the twelve hexes exactly two steps away.
RING2_OFFSETS: Dict[int, Tuple[Coord, ...]] = {
    0: (
        (-2, 0), (2, 0), (0, -2), (0, 2),
        (-1, 1), (1, 1), (-2, -1), (2, -1),
        (-1, -2), (1, -2), (-2, 1), (2, 1),
    ),
    1: (
        (-2, 0), (2, 0), (0, -2), (0, 2),
        (-1, -1), (1, -1), (-2, 1), (2, 1),
        (-1, 2), (1, 2), (-2, -1), (2, -1),
    ),
}

MAX_RING_RADIUS = 2


def _parity(x: int) -> int:
    return x & 1


def neighbors(h: Coord) -> List[HexCoord]:
    """Return the six hexes adjacent to ``h`` (unclipped)."""
    x, y = h
    return [HexCoord(x + dx, y + dy) for dx, dy in NEIGHBOR_OFFSETS[_parity(x)]]


def ring(h: Coord, radius: int, clip: bool = False) -> Set[HexCoord]:
    """Return every hex within ``radius`` steps of ``h``, ``h`` included.

    Radius 1 yields 7 hexes and radius 2 yields 19.  With ``clip`` set,
    positions with a negative component are dropped, which only matters
    along the top and left map edges.
    """
    if radius < 0:
        raise ValueError(f"radius must be >= 0, got {radius}")
    if radius > MAX_RING_RADIUS:
        raise ValueError(f"radius above {MAX_RING_RADIUS} is not supported, got {radius}")

    x, y = h
    center = HexCoord(x, y)
    out: Set[HexCoord] = {center}
    if radius >= 1:
        out.update(neighbors(center))
    if radius >= 2:
        out.update(HexCoord(x + dx, y + dy) for dx, dy in RING2_OFFSETS[_parity(x)])
    if clip:
        out = {c for c in out if is_valid(c)}
    return out


def is_valid(h: Coord) -> bool:
    """Return True if ``h`` has no negative component."""
    return h[0] >= 0 and h[1] >= 0


def in_bounds(h: Coord, width: int, height: int) -> bool:
    """Return True if ``h`` lies within a ``width`` x ``height`` map."""
    return 0 <= h[0] < width and 0 <= h[1] < height


def is_adjacent(a: Coord, b: Coord) -> bool:
    return HexCoord(b[0], b[1]) in neighbors(a)


def offset_to_cube(h: Coord) -> Tuple[int, int, int]:
    """Convert an offset position to cube coordinates ``(cx, cy, cz)``."""
    col, row = h
    cx = col
    cz = row - (col - (col & 1)) // 2
    cy = -cx - cz
    return cx, cy, cz


def hex_distance(a: Coord, b: Coord) -> int:
    """Return the number of steps between two offset positions."""
    ax, ay, az = offset_to_cube(a)
    bx, by, bz = offset_to_cube(b)
    return (abs(ax - bx) + abs(ay - by) + abs(az - bz)) // 2


def _round_half_up(v: float) -> int:
    return int(math.floor(v + 0.5))


def nearest_hex(h: Coord) -> HexCoord:
    """Round a possibly fractional ``(x, y)`` position to the nearest hex."""
    return HexCoord(_round_half_up(h[0]), _round_half_up(h[1]))


def world_to_hex(world_x: float, world_z: float) -> HexCoord:
    """Snap a free-roaming world position to the nearest hex."""
    return HexCoord(
        _round_half_up(world_x / COLUMN_PITCH),
        _round_half_up(world_z / ROW_PITCH),
    )


def hex_to_world(h: Coord) -> Tuple[float, float]:
    """Return the ``(x, z)`` world position of the center of ``h``."""
    return h[0] * COLUMN_PITCH, h[1] * ROW_PITCH


def parse_key(key: str) -> HexCoord:
    """Parse an ``"x,y"`` key as written by :func:`to_key`."""
    xs, ys = key.split(",")
    return HexCoord(int(xs), int(ys))


def to_key(h: Coord) -> str:
    return f"{h[0]},{h[1]}"
