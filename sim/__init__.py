"""
Core spatial data: terrain and movement costs, player state, outcomes.
"""
from .outcomes import ActionResult, CallerPrivilege, FailureReason
from .state import PlayerSpatialState
from .terrain import (
    BLOCKING_COST,
    MOVEMENT_COSTS,
    GridTerrain,
    TerrainKind,
    can_afford,
    is_blocking,
    movement_cost,
)

__all__ = [
    "ActionResult", "CallerPrivilege", "FailureReason",
    "PlayerSpatialState",
    "BLOCKING_COST", "MOVEMENT_COSTS", "GridTerrain", "TerrainKind",
    "can_afford", "is_blocking", "movement_cost",
]
