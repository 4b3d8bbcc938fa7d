"""
Territory and colony ledger.

Every hex moves through at most three states:

    Unclaimed -> Claimed -> Claimed + Colonized

- A claim is permanent: it is never removed, and only gains a colony id.
- Exactly zero or one claim exists per hex.
- A colony is founded on a hex claimed by the founder's faction and starts
  controlling only that hex.  It grows by adding hexes claimed by the same
  faction.
- The first colony ever founded in a ledger is its capital.

Unrestricted (game-master) callers skip prerequisite checks but not the
uniqueness rules.  All operations return an :class:`ActionResult`.

The ledger is an owned object.  Hosts create one per game, pass it to
whoever needs it and call :meth:`TerritoryLedger.reset` only from admin or
test code.  Every operation holds a re-entrant lock, so check-then-insert
sequences stay atomic and reads see whole updates on a multi-threaded host.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional, Set
import logging
import threading
import time

from hexgrid import Coord, HexCoord, hex_distance, is_adjacent, is_valid, nearest_hex, to_key
from modifiers import MODIFIERS, SpatialModifiers
from sim.outcomes import ActionResult, CallerPrivilege, FailureReason
from sim.safe_parse import to_float, to_hex, to_hex_set, to_level
from sim.terrain import TerrainKind

logger = logging.getLogger(__name__)


# =============================== DATA TYPES ===================================

@dataclass
class Claimant:
    """Who is acting on the ledger and what they bring with them."""

    player_id: str
    player_name: str
    faction_id: Optional[str] = None
    faction_name: Optional[str] = None
    influence_level: int = 0
    position: Optional[HexCoord] = None  # avatar hex, None if unknown


@dataclass
class ClaimedTerritory:
    hex: HexCoord
    faction_id: Optional[str]
    faction_name: Optional[str]
    claimed_by_player_id: str
    claimed_by_name: str
    claimed_at: float
    colony_id: Optional[str] = None

    @property
    def is_colonized(self) -> bool:
        return self.colony_id is not None


@dataclass
class Colony:
    id: str
    name: str
    hex: HexCoord
    founder_id: str
    founder_name: str
    faction_id: Optional[str]
    faction_name: Optional[str]
    founded_at: float
    population: int
    controlled_territory: Set[HexCoord] = field(default_factory=set)
    buildings: List[str] = field(default_factory=list)
    is_capital: bool = False


@dataclass
class TerritoryStats:
    total_claimed: int
    total_colonies: int
    capital_count: int
    territories_per_faction: Dict[Optional[str], int]
    colonies_per_faction: Dict[Optional[str], int]


# =============================== LEDGER =======================================

class TerritoryLedger:
    """In-memory store of claims and colonies."""

    def __init__(self, modifiers: Optional[SpatialModifiers] = None,
                 clock: Callable[[], float] = time.time):
        self.modifiers = modifiers or MODIFIERS
        self.clock = clock
        self._lock = threading.RLock()
        self._claims: Dict[HexCoord, ClaimedTerritory] = {}
        self._colonies: Dict[str, Colony] = {}
        self._founded_total = 0

    # ----- Helpers -----------------------------------------------------------

    @staticmethod
    def _reject(reason: FailureReason, message: str) -> ActionResult:
        logger.info("rejected (%s): %s", reason.value, message)
        return ActionResult.fail(reason, message)

    @staticmethod
    def _hex(h: Coord) -> HexCoord:
        return nearest_hex(h)

    # ----- Claims ------------------------------------------------------------

    def claim(self, h: Coord, claimant: Claimant,
              privilege: CallerPrivilege = CallerPrivilege.NORMAL) -> ActionResult:
        """Claim ``h`` for the claimant's faction.

        Normal callers need the minimum local influence, a faction and an
        avatar standing on ``h``.  The payload is the new
        :class:`ClaimedTerritory`.
        """
        target = self._hex(h)
        if not is_valid(target):
            return self._reject(FailureReason.INVALID_HEX, f"Invalid hex {tuple(target)}")

        with self._lock:
            existing = self._claims.get(target)
            if existing is not None:
                return self._reject(
                    FailureReason.ALREADY_CLAIMED,
                    f"Hex {tuple(target)} already claimed by {existing.faction_name or existing.claimed_by_name}",
                )

            if not privilege.unrestricted:
                if claimant.influence_level < self.modifiers.claim_min_influence:
                    return self._reject(
                        FailureReason.PREREQUISITES_NOT_MET,
                        f"Local influence level {self.modifiers.claim_min_influence} required",
                    )
                if not claimant.faction_id:
                    return self._reject(FailureReason.PREREQUISITES_NOT_MET, "Faction membership required")
                if claimant.position is None or self._hex(claimant.position) != target:
                    return self._reject(
                        FailureReason.NOT_PRESENT_AT_HEX,
                        f"Avatar must stand on {tuple(target)} to claim it",
                    )

            record = ClaimedTerritory(
                hex=target,
                faction_id=claimant.faction_id,
                faction_name=claimant.faction_name,
                claimed_by_player_id=claimant.player_id,
                claimed_by_name=claimant.player_name,
                claimed_at=self.clock(),
            )
            self._claims[target] = record

        logger.info("hex %s claimed by %s for faction %s", tuple(target), claimant.player_name, claimant.faction_name)
        return ActionResult.ok(f"Territory {tuple(target)} claimed", payload=record)

    # ----- Colonies ----------------------------------------------------------

    def found_colony(self, h: Coord, name: str, claimant: Claimant,
                     privilege: CallerPrivilege = CallerPrivilege.NORMAL) -> ActionResult:
        """Found a colony named ``name`` on the claimed hex ``h``.

        The payload is the new :class:`Colony`.  An unrestricted caller may
        found on an unclaimed hex; the claim is recorded on their behalf
        first.
        """
        target = self._hex(h)
        if not is_valid(target):
            return self._reject(FailureReason.INVALID_HEX, f"Invalid hex {tuple(target)}")
        colony_name = (name or "").strip()
        if not colony_name:
            return self._reject(FailureReason.MISSING_NAME, "A colony name is required")
        if not privilege.unrestricted and not claimant.faction_id:
            return self._reject(FailureReason.PREREQUISITES_NOT_MET, "Faction membership required")

        with self._lock:
            claim = self._claims.get(target)
            if claim is None and privilege.unrestricted:
                result = self.claim(target, claimant, privilege)
                if not result:
                    return result
                claim = result.payload
            if claim is None or (not privilege.unrestricted and claim.faction_id != claimant.faction_id):
                return self._reject(
                    FailureReason.TERRITORY_NOT_CONTROLLED,
                    f"Hex {tuple(target)} is not claimed by your faction",
                )
            if claim.colony_id is not None:
                return self._reject(
                    FailureReason.COLONY_ALREADY_EXISTS,
                    f"A colony already exists at {tuple(target)}",
                )

            spacing = self.modifiers.min_colony_spacing
            if spacing > 0 and not privilege.unrestricted:
                for other in self._colonies.values():
                    dist = hex_distance(target, other.hex)
                    if dist < spacing:
                        return self._reject(
                            FailureReason.TOO_CLOSE_TO_COLONY,
                            f"Colony {other.name} is {dist} hexes away; minimum is {spacing}",
                        )

            self._founded_total += 1
            colony = Colony(
                id=f"colony_{self._founded_total}",
                name=colony_name,
                hex=target,
                founder_id=claimant.player_id,
                founder_name=claimant.player_name,
                faction_id=claim.faction_id,
                faction_name=claim.faction_name,
                founded_at=self.clock(),
                population=self.modifiers.starting_colony_population,
                controlled_territory={target},
                is_capital=self._founded_total == 1,
            )
            self._colonies[colony.id] = colony
            claim.colony_id = colony.id

        logger.info(
            "colony %r (%s) founded at %s by %s%s",
            colony.name, colony.id, tuple(target), claimant.player_name,
            " as capital" if colony.is_capital else "",
        )
        return ActionResult.ok(f"Colony {colony.name} founded", payload=colony)

    def expand_territory(self, colony_id: str, h: Coord) -> ActionResult:
        """Add the claimed hex ``h`` to a colony's controlled territory.

        Adjacency is only enforced when
        ``modifiers.require_contiguous_expansion`` is set.
        """
        target = self._hex(h)
        if not is_valid(target):
            return self._reject(FailureReason.INVALID_HEX, f"Invalid hex {tuple(target)}")

        with self._lock:
            colony = self._colonies.get(colony_id)
            if colony is None:
                return self._reject(FailureReason.UNKNOWN_COLONY, f"Unknown colony {colony_id!r}")
            claim = self._claims.get(target)
            if claim is None or claim.faction_id != colony.faction_id:
                return self._reject(
                    FailureReason.TERRITORY_NOT_CONTROLLED,
                    f"Hex {tuple(target)} is not claimed by {colony.faction_name}",
                )
            if target in colony.controlled_territory:
                return self._reject(
                    FailureReason.ALREADY_CONTROLLED,
                    f"Hex {tuple(target)} already belongs to {colony.name}",
                )
            if self.modifiers.require_contiguous_expansion and not any(
                is_adjacent(c, target) for c in colony.controlled_territory
            ):
                return self._reject(
                    FailureReason.NOT_ADJACENT,
                    f"Hex {tuple(target)} does not touch {colony.name}",
                )
            colony.controlled_territory.add(target)

        logger.info("hex %s added to colony %s", tuple(target), colony.name)
        return ActionResult.ok(f"Territory {tuple(target)} added to {colony.name}", payload=colony)

    def add_building(self, colony_id: str, building_id: str) -> ActionResult:
        with self._lock:
            colony = self._colonies.get(colony_id)
            if colony is None:
                return self._reject(FailureReason.UNKNOWN_COLONY, f"Unknown colony {colony_id!r}")
            if not building_id:
                return self._reject(FailureReason.MISSING_NAME, "A building id is required")
            colony.buildings.append(building_id)
        logger.info("building %s added to colony %s", building_id, colony.name)
        return ActionResult.ok(f"{building_id} built in {colony.name}", payload=colony)

    def colony_controls_terrain(self, colony_id: str, required: Iterable[TerrainKind], terrain) -> bool:
        """Return True if any hex the colony controls has a required terrain."""
        with self._lock:
            colony = self._colonies.get(colony_id)
            if colony is None:
                return False
            controlled = list(colony.controlled_territory)
        wanted = set(required)
        for h in controlled:
            if terrain.in_bounds(h) and terrain.terrain_at(h) in wanted:
                return True
        return False

    def can_access_construction(self, player_id: str,
                                privilege: CallerPrivilege = CallerPrivilege.NORMAL) -> bool:
        if privilege.unrestricted:
            return True
        with self._lock:
            return any(c.founder_id == player_id for c in self._colonies.values())

    # ----- Queries -----------------------------------------------------------
    # Reads hold the lock as well.

    def territory_at(self, h: Coord) -> Optional[ClaimedTerritory]:
        with self._lock:
            return self._claims.get(self._hex(h))

    def is_claimed(self, h: Coord) -> bool:
        with self._lock:
            return self._hex(h) in self._claims

    def all_territories(self) -> List[ClaimedTerritory]:
        with self._lock:
            return list(self._claims.values())

    def territories_of(self, faction_id: str) -> List[ClaimedTerritory]:
        with self._lock:
            return [t for t in self._claims.values() if t.faction_id == faction_id]

    def territories_of_player(self, player_id: str) -> List[ClaimedTerritory]:
        with self._lock:
            return [t for t in self._claims.values() if t.claimed_by_player_id == player_id]

    def colony(self, colony_id: str) -> Optional[Colony]:
        with self._lock:
            return self._colonies.get(colony_id)

    def colony_at(self, h: Coord) -> Optional[Colony]:
        with self._lock:
            claim = self._claims.get(self._hex(h))
            if claim is None or claim.colony_id is None:
                return None
            return self._colonies.get(claim.colony_id)

    def all_colonies(self) -> List[Colony]:
        with self._lock:
            return list(self._colonies.values())

    def colonies_of_player(self, player_id: str) -> List[Colony]:
        with self._lock:
            return [c for c in self._colonies.values() if c.founder_id == player_id]

    def colonies_of_faction(self, faction_id: str) -> List[Colony]:
        with self._lock:
            return [c for c in self._colonies.values() if c.faction_id == faction_id]

    def stats(self) -> TerritoryStats:
        with self._lock:
            claims = list(self._claims.values())
            colonies = list(self._colonies.values())
        per_faction: Dict[Optional[str], int] = {}
        for t in claims:
            per_faction[t.faction_id] = per_faction.get(t.faction_id, 0) + 1
        colonies_per_faction: Dict[Optional[str], int] = {}
        for c in colonies:
            colonies_per_faction[c.faction_id] = colonies_per_faction.get(c.faction_id, 0) + 1
        return TerritoryStats(
            total_claimed=len(claims),
            total_colonies=len(colonies),
            capital_count=sum(1 for c in colonies if c.is_capital),
            territories_per_faction=per_faction,
            colonies_per_faction=colonies_per_faction,
        )

    # ----- Admin ---------------------------------------------------------------

    def reset(self) -> None:
        """Forget every claim and colony, including who founded the capital."""
        with self._lock:
            self._claims.clear()
            self._colonies.clear()
            self._founded_total = 0
        logger.info("territory ledger reset")

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain snapshot of the ledger."""
        with self._lock:
            return {
                "founded_total": self._founded_total,
                "claims": [
                    {
                        "hex": to_key(t.hex),
                        "faction_id": t.faction_id,
                        "faction_name": t.faction_name,
                        "claimed_by_player_id": t.claimed_by_player_id,
                        "claimed_by_name": t.claimed_by_name,
                        "claimed_at": t.claimed_at,
                        "colony_id": t.colony_id,
                    }
                    for t in self._claims.values()
                ],
                "colonies": [
                    {
                        "id": c.id,
                        "name": c.name,
                        "hex": to_key(c.hex),
                        "founder_id": c.founder_id,
                        "founder_name": c.founder_name,
                        "faction_id": c.faction_id,
                        "faction_name": c.faction_name,
                        "founded_at": c.founded_at,
                        "population": c.population,
                        "controlled_territory": sorted(to_key(h) for h in c.controlled_territory),
                        "buildings": list(c.buildings),
                        "is_capital": c.is_capital,
                    }
                    for c in self._colonies.values()
                ],
            }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], modifiers: Optional[SpatialModifiers] = None,
                  clock: Callable[[], float] = time.time) -> "TerritoryLedger":
        """Rebuild a ledger from :meth:`to_dict` output.

        Entries with malformed or duplicate hexes are skipped with a warning,
        as are colonies that their hex claim does not reference.
        """
        ledger = cls(modifiers, clock)
        for raw in data.get("claims", []):
            h = to_hex(raw.get("hex"))
            if h is None or h in ledger._claims:
                logger.warning("from_dict: skipping claim %r", raw.get("hex"))
                continue
            ledger._claims[h] = ClaimedTerritory(
                hex=h,
                faction_id=raw.get("faction_id"),
                faction_name=raw.get("faction_name"),
                claimed_by_player_id=str(raw.get("claimed_by_player_id", "")),
                claimed_by_name=str(raw.get("claimed_by_name", "")),
                claimed_at=to_float(raw.get("claimed_at")),
                colony_id=str(raw["colony_id"]) if raw.get("colony_id") is not None else None,
            )
        for raw in data.get("colonies", []):
            h = to_hex(raw.get("hex"))
            colony_id = str(raw["id"]) if raw.get("id") is not None else None
            claim = ledger._claims.get(h) if h is not None else None
            if colony_id is None or colony_id in ledger._colonies:
                logger.warning("from_dict: skipping colony %r (missing or duplicate id)", raw.get("id"))
                continue
            if claim is None or claim.colony_id != colony_id:
                logger.warning("from_dict: skipping colony %r, no matching claim at %r", colony_id, raw.get("hex"))
                continue
            controlled = to_hex_set(raw.get("controlled_territory"))
            controlled.add(h)
            ledger._colonies[colony_id] = Colony(
                id=colony_id,
                name=str(raw.get("name", "")),
                hex=h,
                founder_id=str(raw.get("founder_id", "")),
                founder_name=str(raw.get("founder_name", "")),
                faction_id=raw.get("faction_id"),
                faction_name=raw.get("faction_name"),
                founded_at=to_float(raw.get("founded_at")),
                population=to_level(raw.get("population", 0)),
                controlled_territory=controlled,
                buildings=[str(b) for b in raw.get("buildings", [])],
                is_capital=bool(raw.get("is_capital", False)),
            )
        for t in ledger._claims.values():
            if t.colony_id is not None and t.colony_id not in ledger._colonies:
                logger.warning("from_dict: clearing dangling colony %r on %r", t.colony_id, t.hex)
                t.colony_id = None
        ledger._founded_total = max(to_level(data.get("founded_total", 0)), len(ledger._colonies))
        return ledger
