from __future__ import annotations

"""Caller privilege and action result types shared by every system."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class CallerPrivilege(Enum):
    """Who is asking.

    ``UNRESTRICTED`` is the game-master mode: prerequisite checks are skipped
    but uniqueness rules (one claim per hex, one colony per claim) still hold.
    """

    NORMAL = "normal"
    UNRESTRICTED = "unrestricted"

    @property
    def unrestricted(self) -> bool:
        return self is CallerPrivilege.UNRESTRICTED


class FailureReason(Enum):
    ALREADY_CLAIMED = "already_claimed"
    PREREQUISITES_NOT_MET = "prerequisites_not_met"
    NOT_PRESENT_AT_HEX = "not_present_at_hex"
    TERRITORY_NOT_CONTROLLED = "territory_not_controlled"
    COLONY_ALREADY_EXISTS = "colony_already_exists"
    INSUFFICIENT_ACTION_POINTS = "insufficient_action_points"
    IMPASSABLE_TERRAIN = "impassable_terrain"
    INVALID_HEX = "invalid_hex"
    UNKNOWN_COLONY = "unknown_colony"
    MISSING_NAME = "missing_name"
    ALREADY_CONTROLLED = "already_controlled"
    NOT_ADJACENT = "not_adjacent"
    NO_PATH = "no_path"
    TOO_CLOSE_TO_COLONY = "too_close_to_colony"


@dataclass
class ActionResult:
    """Outcome of a game action.

    Rejections are ordinary values carrying a :class:`FailureReason` so the
    presentation layer can pick a specific message.  The result is truthy
    only when the action succeeded.
    """

    success: bool
    message: str
    reason: Optional[FailureReason] = None
    payload: Any = None

    def __bool__(self) -> bool:
        return self.success

    @classmethod
    def ok(cls, message: str, payload: Any = None) -> "ActionResult":
        return cls(True, message, None, payload)

    @classmethod
    def fail(cls, reason: FailureReason, message: str) -> "ActionResult":
        return cls(False, message, reason)
