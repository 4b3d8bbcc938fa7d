from __future__ import annotations
from typing import Dict, Optional
import logging

from hexgrid import Coord, HexCoord, is_valid
from modifiers import MODIFIERS, SpatialModifiers
from pathfinding import astar
from resources import ResourceKind
from sim.outcomes import ActionResult, CallerPrivilege, FailureReason
from sim.state import PlayerSpatialState
from sim.terrain import can_afford, is_blocking, path_cost
from systems.resource_discovery import explore_zone, visible_resources
from systems.territory import Claimant, TerritoryLedger
from systems.vision import update_vision

logger = logging.getLogger(__name__)


def claimant_for(player: PlayerSpatialState) -> Claimant:
    """Describe ``player`` to the territory ledger."""
    return Claimant(
        player_id=player.player_id,
        player_name=player.name,
        faction_id=player.faction_id,
        faction_name=player.faction_name,
        influence_level=player.influence_level,
        position=player.avatar_hex,
    )


class SpatialEngine:
    """Pure spatial API usable by a UI, a server or tests.

    Wires the spatial systems together for a host that supplies a terrain
    provider and player records:

    * ``move_avatar`` validates the route, deducts its cost, moves the
      avatar and recomputes vision;
    * ``explore`` spends action points to mark the current vision explored;
    * ``resources_in_view`` lists what the resource gate discloses;
    * ``claim``/``found_colony``/``expand_territory`` go to the ledger.
    """

    def __init__(self, terrain, ledger: Optional[TerritoryLedger] = None,
                 modifiers: Optional[SpatialModifiers] = None):
        self.terrain = terrain
        self.modifiers = modifiers or MODIFIERS
        self.ledger = ledger if ledger is not None else TerritoryLedger(self.modifiers)

    # ----- Movement -------------------------------------------------------------

    def move_avatar(self, player: PlayerSpatialState, target: Coord) -> ActionResult:
        """Walk the avatar to ``target`` along the cheapest route.

        Rejected moves leave position, action points and vision untouched.
        The payload of a successful move is ``{"path": [...], "cost": n}``.
        """
        goal = HexCoord(int(target[0]), int(target[1]))
        if not is_valid(goal) or not self.terrain.in_bounds(goal):
            return self._reject(FailureReason.INVALID_HEX, f"Hex {tuple(goal)} is outside the map")

        start = player.avatar_hex
        if goal == start:
            return ActionResult.ok("Already there", payload={"path": [], "cost": 0})

        terrain = self.terrain.terrain_at(goal)
        if is_blocking(terrain):
            return self._reject(
                FailureReason.IMPASSABLE_TERRAIN,
                f"{terrain.value} at {tuple(goal)} cannot be entered without a ship",
            )

        path = astar(self.terrain, start, goal)
        if not path:
            return self._reject(FailureReason.NO_PATH, f"No route from {tuple(start)} to {tuple(goal)}")

        cost = path_cost(self.terrain, path)
        if len(path) == 1:
            affordable = can_afford(player.action_points, terrain)
        else:
            affordable = player.action_points >= cost
        if not affordable:
            return self._reject(
                FailureReason.INSUFFICIENT_ACTION_POINTS,
                f"Not enough action points: {cost} needed, {player.action_points} available",
            )

        player.spend(cost)
        player.place_at(goal)
        update_vision(player)
        logger.info(
            "%s moved %s -> %s over %d hexes for %d AP (%d left)",
            player.player_id, tuple(start), tuple(goal), len(path), cost, player.action_points,
        )
        return ActionResult.ok(f"Moved to {tuple(goal)} for {cost} AP", payload={"path": path, "cost": cost})

    def refresh_vision(self, player: PlayerSpatialState):
        return update_vision(player)

    # ----- Exploration ----------------------------------------------------------

    def explore(self, player: PlayerSpatialState) -> ActionResult:
        return explore_zone(player, self.modifiers)

    def resources_in_view(self, player: PlayerSpatialState,
                          privilege: CallerPrivilege = CallerPrivilege.NORMAL) -> Dict[HexCoord, ResourceKind]:
        """Return the resources disclosed to ``player`` in their current vision."""
        return visible_resources(player.current_vision, self.terrain, player, privilege)

    # ----- Territory ------------------------------------------------------------

    def claim(self, player: PlayerSpatialState, h: Optional[Coord] = None,
              privilege: CallerPrivilege = CallerPrivilege.NORMAL) -> ActionResult:
        """Claim ``h`` (the avatar's hex by default) for the player's faction."""
        target = player.avatar_hex if h is None else h
        return self.ledger.claim(target, claimant_for(player), privilege)

    def found_colony(self, player: PlayerSpatialState, name: str, h: Optional[Coord] = None,
                     privilege: CallerPrivilege = CallerPrivilege.NORMAL) -> ActionResult:
        target = player.avatar_hex if h is None else h
        return self.ledger.found_colony(target, name, claimant_for(player), privilege)

    def expand_territory(self, colony_id: str, h: Coord) -> ActionResult:
        return self.ledger.expand_territory(colony_id, h)

    # ----- Helpers --------------------------------------------------------------

    @staticmethod
    def _reject(reason: FailureReason, message: str) -> ActionResult:
        logger.info("move rejected (%s): %s", reason.value, message)
        return ActionResult.fail(reason, message)
