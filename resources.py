from __future__ import annotations
from enum import Enum
from typing import Dict, Optional, Union


class ResourceKind(str, Enum):
    WHEAT = "wheat"
    CATTLE = "cattle"
    FISH = "fish"
    WOOD = "wood"
    STONE = "stone"
    COPPER = "copper"
    IRON = "iron"
    COAL = "coal"
    GOLD = "gold"
    OIL = "oil"
    URANIUM = "uranium"
    SILK = "silk"
    SPICES = "spices"
    GEMS = "gems"
    IVORY = "ivory"
    HERBS = "herbs"
    CRYSTALS = "crystals"
    SACRED_STONES = "sacred_stones"
    ANCIENT_ARTIFACTS = "ancient_artifacts"
    MANA_STONES = "mana_stones"
    ENCHANTED_WOOD = "enchanted_wood"


class Rarity(str, Enum):
    COMMON = "common"
    STRATEGIC = "strategic"
    RARE = "rare"
    MAGICAL = "magical"


RESOURCE_RARITY: Dict[ResourceKind, Rarity] = {
    ResourceKind.WHEAT: Rarity.COMMON,
    ResourceKind.CATTLE: Rarity.COMMON,
    ResourceKind.FISH: Rarity.COMMON,
    ResourceKind.WOOD: Rarity.COMMON,
    ResourceKind.STONE: Rarity.STRATEGIC,
    ResourceKind.COPPER: Rarity.STRATEGIC,
    ResourceKind.IRON: Rarity.STRATEGIC,
    ResourceKind.COAL: Rarity.STRATEGIC,
    ResourceKind.GOLD: Rarity.RARE,
    ResourceKind.OIL: Rarity.RARE,
    ResourceKind.URANIUM: Rarity.RARE,
    ResourceKind.SILK: Rarity.RARE,
    ResourceKind.SPICES: Rarity.RARE,
    ResourceKind.GEMS: Rarity.RARE,
    ResourceKind.IVORY: Rarity.RARE,
    ResourceKind.HERBS: Rarity.MAGICAL,
    ResourceKind.CRYSTALS: Rarity.MAGICAL,
    ResourceKind.SACRED_STONES: Rarity.MAGICAL,
    ResourceKind.ANCIENT_ARTIFACTS: Rarity.MAGICAL,
    ResourceKind.MANA_STONES: Rarity.MAGICAL,
    ResourceKind.ENCHANTED_WOOD: Rarity.MAGICAL,
}

# Minimum exploration level at which each rarity tier can be disclosed.
# Must stay non-decreasing from common to magical.
RARITY_UNLOCK_LEVEL: Dict[Rarity, int] = {
    Rarity.COMMON: 1,
    Rarity.STRATEGIC: 1,
    Rarity.RARE: 2,
    Rarity.MAGICAL: 3,
}


def resource_kind(value: Union[ResourceKind, str, None]) -> Optional[ResourceKind]:
    """Return ``value`` as a :class:`ResourceKind`, or None if unknown."""
    if value is None or isinstance(value, ResourceKind):
        return value
    try:
        return ResourceKind(str(value).lower())
    except ValueError:
        return None


def rarity_of(resource: Union[ResourceKind, str]) -> Optional[Rarity]:
    kind = resource_kind(resource)
    if kind is None:
        return None
    return RESOURCE_RARITY[kind]


def is_tier_unlocked(resource: Union[ResourceKind, str], exploration_level: int) -> bool:
    """Return True if ``exploration_level`` unlocks the tier of ``resource``.

    Resources missing from the rarity table are never unlocked.
    """
    rarity = rarity_of(resource)
    if rarity is None:
        return False
    return exploration_level >= RARITY_UNLOCK_LEVEL[rarity]
