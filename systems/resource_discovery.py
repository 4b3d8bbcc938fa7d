"""
Resource discovery gate and the explore action.

Being able to see a hex does not reveal what lies on it.  A normal viewer
is told about a hex's resource only when all of these hold:

- the hex carries a resource,
- the viewer's exploration level is at least 1,
- the viewer explored the hex earlier with :func:`explore_zone`,
- the resource's rarity tier is unlocked at the viewer's exploration level.

Unrestricted callers are told everything.
"""

from __future__ import annotations
import logging
from typing import Dict, Iterable, Optional, Union

from hexgrid import Coord, HexCoord
from modifiers import MODIFIERS, SpatialModifiers
from resources import ResourceKind, is_tier_unlocked
from sim.outcomes import ActionResult, CallerPrivilege, FailureReason
from systems.vision import update_vision

logger = logging.getLogger(__name__)

MIN_DISCLOSURE_LEVEL = 1


def is_resource_visible(
    h: Coord,
    resource: Union[ResourceKind, str, None],
    viewer,
    privilege: CallerPrivilege = CallerPrivilege.NORMAL,
) -> bool:
    if privilege.unrestricted:
        return True
    if resource is None:
        return False
    level = viewer.exploration_level
    if level < MIN_DISCLOSURE_LEVEL:
        return False
    if not viewer.is_explored(h):
        return False
    return is_tier_unlocked(resource, level)


def visible_resources(
    hexes: Iterable[Coord],
    terrain,
    viewer,
    privilege: CallerPrivilege = CallerPrivilege.NORMAL,
) -> Dict[HexCoord, ResourceKind]:
    """Return the resources among ``hexes`` that may be shown to ``viewer``.

    Hexes outside the terrain provider's map are skipped without lookup.
    """
    out: Dict[HexCoord, ResourceKind] = {}
    for h in hexes:
        if not terrain.in_bounds(h):
            continue
        resource: Optional[ResourceKind] = terrain.resource_at(h)
        if resource is None:
            continue
        if is_resource_visible(h, resource, viewer, privilege):
            out[HexCoord(h[0], h[1])] = resource
    return out


def explore_zone(player, modifiers: Optional[SpatialModifiers] = None) -> ActionResult:
    """Spend action points to mark every hex the avatar can see as explored.

    Vision is recomputed from the avatar hex and exploration level first.

    The payload is the number of hexes that were not explored before.
    """
    mods = modifiers or MODIFIERS
    if player.exploration_level < mods.explore_min_level:
        logger.info("explore rejected for %s: exploration level %d", player.player_id, player.exploration_level)
        return ActionResult.fail(
            FailureReason.PREREQUISITES_NOT_MET,
            f"Exploration level {mods.explore_min_level} required",
        )
    cost = mods.exploration_action_cost
    if not player.spend(cost):
        logger.info("explore rejected for %s: %d AP available, %d needed", player.player_id, player.action_points, cost)
        return ActionResult.fail(
            FailureReason.INSUFFICIENT_ACTION_POINTS,
            f"Not enough action points: {cost} needed, {player.action_points} available",
        )
    zone = update_vision(player)
    newly = sum(1 for h in zone if player.mark_explored(h))
    logger.info("%s explored %d new hexes (%d in vision)", player.player_id, newly, len(zone))
    return ActionResult.ok(f"Explored {len(zone)} hexes", payload=newly)
