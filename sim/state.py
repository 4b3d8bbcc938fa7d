from __future__ import annotations

"""Player spatial state as read and updated by the spatial systems."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Set

from hexgrid import Coord, HexCoord, hex_to_world, to_key, world_to_hex
from sim.safe_parse import to_float, to_hex_set, to_level

# Competence names read by this core
EXPLORATION = "exploration"
CARTOGRAPHY = "cartography"
LOCAL_INFLUENCE = "local_influence"


@dataclass
class PlayerSpatialState:
    """Container for the per-player data the spatial systems consume.

    The host owns this record.  Movement updates ``world_x``/``world_z``,
    ``action_points`` and ``current_vision``; the explore action adds to
    ``explored``.  Nothing else here is written by this core.
    """

    player_id: str
    name: str
    world_x: float = 0.0
    world_z: float = 0.0
    action_points: int = 0
    faction_id: Optional[str] = None
    faction_name: Optional[str] = None
    competences: Dict[str, int] = field(default_factory=dict)
    explored: Set[HexCoord] = field(default_factory=set)
    current_vision: Set[HexCoord] = field(default_factory=set)

    def __post_init__(self) -> None:
        if self.action_points < 0:
            raise ValueError("action_points must be >= 0")
        for name, level in self.competences.items():
            if level < 0:
                raise ValueError(f"competence {name!r} level must be >= 0")

    # --- Position -------------------------------------------------------------

    @property
    def avatar_hex(self) -> HexCoord:
        """Hex under the avatar, rounded from its world position."""
        return world_to_hex(self.world_x, self.world_z)

    def place_at(self, h: Coord) -> None:
        """Move the avatar to the center of ``h``."""
        self.world_x, self.world_z = hex_to_world(h)

    # --- Competences ----------------------------------------------------------

    def level(self, competence: str) -> int:
        return int(self.competences.get(competence, 0))

    @property
    def exploration_level(self) -> int:
        return self.level(EXPLORATION)

    @property
    def cartography_level(self) -> int:
        return self.level(CARTOGRAPHY)

    @property
    def influence_level(self) -> int:
        return self.level(LOCAL_INFLUENCE)

    # --- Action points --------------------------------------------------------

    def spend(self, points: int) -> bool:
        """Deduct ``points`` if the balance covers them."""
        if points < 0:
            raise ValueError("points must be >= 0")
        if points > self.action_points:
            return False
        self.action_points -= points
        return True

    # --- Exploration ----------------------------------------------------------

    def is_explored(self, h: Coord) -> bool:
        return HexCoord(h[0], h[1]) in self.explored

    def mark_explored(self, h: Coord) -> bool:
        """Set the explored flag on ``h``; return True if it was unset."""
        key = HexCoord(h[0], h[1])
        if key in self.explored:
            return False
        self.explored.add(key)
        return True

    # --- Persistence helpers --------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary the host may serialize as it likes."""
        return {
            "player_id": self.player_id,
            "name": self.name,
            "world_x": float(self.world_x),
            "world_z": float(self.world_z),
            "action_points": int(self.action_points),
            "faction_id": self.faction_id,
            "faction_name": self.faction_name,
            "competences": dict(self.competences),
            "explored": sorted(to_key(h) for h in self.explored),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PlayerSpatialState":
        """Build a state from ``to_dict`` output, tolerating bad values."""
        required = {"player_id", "name"}
        missing = required.difference(data)
        if missing:
            raise ValueError(f"missing keys: {sorted(missing)}")

        competences = {
            str(k): to_level(v) for k, v in (data.get("competences") or {}).items()
        }
        return cls(
            player_id=str(data["player_id"]),
            name=str(data["name"]),
            world_x=to_float(data.get("world_x")),
            world_z=to_float(data.get("world_z")),
            action_points=to_level(data.get("action_points", 0)),
            faction_id=data.get("faction_id"),
            faction_name=data.get("faction_name"),
            competences=competences,
            explored=to_hex_set(data.get("explored")),
        )
