"""
Systems package: vision, resource discovery and territory.
"""

from .vision import vision_radius, visible_hexes, update_vision, is_hex_visible
from .resource_discovery import is_resource_visible, visible_resources, explore_zone
from .territory import (
    Claimant,
    ClaimedTerritory,
    Colony,
    TerritoryLedger,
    TerritoryStats,
)

__all__ = [
    "vision_radius", "visible_hexes", "update_vision", "is_hex_visible",
    "is_resource_visible", "visible_resources", "explore_zone",
    "Claimant", "ClaimedTerritory", "Colony", "TerritoryLedger", "TerritoryStats",
]
