"""
Vision resolver.

Vision is the set of hexes a viewer can currently see around their avatar.
Its radius depends only on the exploration competence:

    level 0 -> radius 1 (7 hexes)
    level 1 -> radius 1 (7 hexes)
    level 2+ -> radius 2 (19 hexes)

Only crossing into level 2 widens vision.  Seeing a hex never marks it as
explored; that takes the explicit explore action in
:mod:`systems.resource_discovery`.
"""

from __future__ import annotations
import logging
from typing import Iterable, Set

import numpy as np

from hexgrid import Coord, HexCoord, in_bounds, ring
from sim.outcomes import CallerPrivilege

logger = logging.getLogger(__name__)

WIDE_VISION_LEVEL = 2


def vision_radius(exploration_level: int) -> int:
    if exploration_level >= WIDE_VISION_LEVEL:
        return 2
    return 1


def visible_hexes(center: Coord, exploration_level: int) -> Set[HexCoord]:
    """Return the hexes visible from ``center``.

    Deterministic for a given ``(center, exploration_level)``.  Positions
    with a negative component are left out so callers never look them up.
    """
    return ring(center, vision_radius(exploration_level), clip=True)


def update_vision(player) -> Set[HexCoord]:
    """Recompute and store ``player.current_vision`` from the avatar hex."""
    vision = visible_hexes(player.avatar_hex, player.exploration_level)
    player.current_vision = vision
    logger.debug("vision for %s at %s: %d hexes", player.player_id, player.avatar_hex, len(vision))
    return vision


def is_hex_visible(h: Coord, player, privilege: CallerPrivilege = CallerPrivilege.NORMAL) -> bool:
    """Return True if the map shows ``h`` to ``player``.

    A hex is shown when it is in current vision or was explored before.
    Unrestricted callers see the whole map.
    """
    if privilege.unrestricted:
        return True
    key = HexCoord(h[0], h[1])
    return key in player.current_vision or key in player.explored


def visibility_mask(hexes: Iterable[Coord], width: int, height: int) -> np.ndarray:
    """Return a ``(height, width)`` bool array with ``hexes`` set.

    Off-map hexes are ignored.
    """
    if width <= 0 or height <= 0:
        raise ValueError("width and height must be positive")
    mask = np.zeros((height, width), dtype=bool)
    for h in hexes:
        if in_bounds(h, width, height):
            mask[h[1], h[0]] = True
    return mask
