from __future__ import annotations

"""Terrain kinds, movement costs and a grid-backed terrain provider."""

import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Union

import numpy as np

from hexgrid import Coord, in_bounds
from resources import ResourceKind

logger = logging.getLogger(__name__)


class TerrainKind(str, Enum):
    FERTILE_LAND = "fertile_land"
    SACRED_PLAINS = "sacred_plains"
    ENCHANTED_MEADOW = "enchanted_meadow"
    WASTELAND = "wasteland"
    FOREST = "forest"
    HILLS = "hills"
    DESERT = "desert"
    ANCIENT_RUINS = "ancient_ruins"
    SWAMP = "swamp"
    CAVES = "caves"
    VOLCANO = "volcano"
    MOUNTAINS = "mountains"
    SHALLOW_WATER = "shallow_water"
    DEEP_WATER = "deep_water"


# Ground units can never enter a terrain with this cost or more
BLOCKING_COST = 999

# Unknown terrain names fall back to this cost
DEFAULT_COST = 1

# Action points needed to enter one hex of each terrain
MOVEMENT_COSTS: Dict[TerrainKind, int] = {
    TerrainKind.FERTILE_LAND: 1,
    TerrainKind.SACRED_PLAINS: 1,
    TerrainKind.ENCHANTED_MEADOW: 1,
    TerrainKind.WASTELAND: 2,
    TerrainKind.FOREST: 2,
    TerrainKind.HILLS: 2,
    TerrainKind.DESERT: 2,
    TerrainKind.ANCIENT_RUINS: 2,
    TerrainKind.SWAMP: 3,
    TerrainKind.CAVES: 3,
    TerrainKind.VOLCANO: 4,
    TerrainKind.MOUNTAINS: 5,
    TerrainKind.SHALLOW_WATER: BLOCKING_COST,
    TerrainKind.DEEP_WATER: BLOCKING_COST,
}

TerrainLike = Union[TerrainKind, str]


def _as_kind(terrain: TerrainLike) -> Optional[TerrainKind]:
    if isinstance(terrain, TerrainKind):
        return terrain
    try:
        return TerrainKind(str(terrain).lower())
    except ValueError:
        return None


def movement_cost(terrain: TerrainLike) -> int:
    """Return the action point cost of entering ``terrain``."""
    kind = _as_kind(terrain)
    if kind is None:
        logger.warning("movement_cost: unknown terrain %r, using %d", terrain, DEFAULT_COST)
        return DEFAULT_COST
    return MOVEMENT_COSTS[kind]


def is_blocking(terrain: TerrainLike) -> bool:
    return movement_cost(terrain) >= BLOCKING_COST


def can_afford(available_points: int, terrain: TerrainLike) -> bool:
    """Return True if ``available_points`` cover entering ``terrain``.

    Blocking terrain is never affordable.  Nothing is deducted here.
    """
    cost = movement_cost(terrain)
    if cost >= BLOCKING_COST:
        return False
    return available_points >= cost


def path_cost(terrain_provider, path: Sequence[Coord]) -> int:
    """Return the total cost of walking ``path``.

    ``path`` lists the hexes entered, so the starting hex must not be
    included.
    """
    return sum(movement_cost(terrain_provider.terrain_at(h)) for h in path)


# =============================== PROVIDER =====================================

# Stable terrain ids for array storage, in declaration order
TERRAIN_IDS: Dict[TerrainKind, int] = {kind: i for i, kind in enumerate(TerrainKind)}
_TERRAIN_BY_ID: List[TerrainKind] = list(TerrainKind)

RESOURCE_IDS: Dict[ResourceKind, int] = {kind: i for i, kind in enumerate(ResourceKind)}
_RESOURCE_BY_ID: List[ResourceKind] = list(ResourceKind)
NO_RESOURCE = -1


class GridTerrain:
    """Terrain provider backed by NumPy arrays indexed ``[y, x]``.

    This is the collaborator the spatial systems query for terrain and
    resources; it does not generate anything itself.
    """

    def __init__(self, terrain_map: np.ndarray, resource_map: Optional[np.ndarray] = None):
        t = np.asarray(terrain_map)
        if t.ndim != 2:
            raise ValueError("terrain_map must be 2D")
        if t.dtype != np.uint8:
            raise ValueError(f"terrain_map dtype {t.dtype} != uint8")
        if t.size and int(t.max()) >= len(_TERRAIN_BY_ID):
            raise ValueError("terrain_map contains unknown terrain ids")
        if resource_map is None:
            resource_map = np.full(t.shape, NO_RESOURCE, dtype=np.int16)
        res = np.asarray(resource_map)
        if res.shape != t.shape:
            raise ValueError(f"resource_map shape {res.shape} != {t.shape}")
        if res.dtype != np.int16:
            raise ValueError(f"resource_map dtype {res.dtype} != int16")
        self.terrain_map = np.ascontiguousarray(t)
        self.resource_map = np.ascontiguousarray(res)

    @property
    def height(self) -> int:
        return int(self.terrain_map.shape[0])

    @property
    def width(self) -> int:
        return int(self.terrain_map.shape[1])

    def in_bounds(self, h: Coord) -> bool:
        return in_bounds(h, self.width, self.height)

    def terrain_at(self, h: Coord) -> TerrainKind:
        if not self.in_bounds(h):
            raise IndexError(f"hex {tuple(h)} outside {self.width}x{self.height} map")
        return _TERRAIN_BY_ID[int(self.terrain_map[h[1], h[0]])]

    def resource_at(self, h: Coord) -> Optional[ResourceKind]:
        if not self.in_bounds(h):
            return None
        rid = int(self.resource_map[h[1], h[0]])
        if rid == NO_RESOURCE:
            return None
        return _RESOURCE_BY_ID[rid]

    def set_resource(self, h: Coord, resource: Optional[ResourceKind]) -> None:
        if not self.in_bounds(h):
            raise IndexError(f"hex {tuple(h)} outside {self.width}x{self.height} map")
        self.resource_map[h[1], h[0]] = NO_RESOURCE if resource is None else RESOURCE_IDS[resource]

    @classmethod
    def filled(cls, width: int, height: int, terrain: TerrainKind = TerrainKind.FERTILE_LAND) -> "GridTerrain":
        """Build a ``width`` x ``height`` map of a single terrain."""
        if width <= 0 or height <= 0:
            raise ValueError("width and height must be positive")
        arr = np.full((height, width), TERRAIN_IDS[terrain], dtype=np.uint8)
        return cls(arr)

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[TerrainLike]]) -> "GridTerrain":
        """Build a map from rows of terrain kinds (``rows[y][x]``)."""
        ids: List[List[int]] = []
        for row in rows:
            out_row = []
            for cell in row:
                kind = _as_kind(cell)
                if kind is None:
                    raise ValueError(f"unknown terrain {cell!r}")
                out_row.append(TERRAIN_IDS[kind])
            ids.append(out_row)
        return cls(np.asarray(ids, dtype=np.uint8))

    def set_terrain(self, h: Coord, terrain: TerrainKind) -> None:
        if not self.in_bounds(h):
            raise IndexError(f"hex {tuple(h)} outside {self.width}x{self.height} map")
        self.terrain_map[h[1], h[0]] = TERRAIN_IDS[terrain]

    def passable_mask(self) -> np.ndarray:
        """Return a bool array, True where ground units may enter."""
        blocked = [TERRAIN_IDS[k] for k, c in MOVEMENT_COSTS.items() if c >= BLOCKING_COST]
        return ~np.isin(self.terrain_map, blocked)
