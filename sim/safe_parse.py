from __future__ import annotations
"""Helpers for safely coercing host-supplied player data.

Player records arrive from the surrounding application (save files, forms,
network payloads).  These helpers turn competence levels, action point
balances and ``"x,y"`` hex keys into clean values, falling back to a
default and logging a warning instead of letting malformed data crash the
spatial systems.
"""

from typing import Any, Iterable, Optional, Set
import math
import logging

from hexgrid import HexCoord, is_valid

logger = logging.getLogger(__name__)


def to_level(value: Any, default: int = 0) -> int:
    """Coerce ``value`` to a non-negative integer level.

    Integers and finite floats are truncated, digit strings are parsed.
    Anything else, including negative numbers, yields ``default``.
    """
    level: Optional[int] = None
    if isinstance(value, bool):
        level = None
    elif isinstance(value, int):
        level = value
    elif isinstance(value, float) and math.isfinite(value):
        level = int(value)
    elif isinstance(value, str) and value.strip().isdigit():
        level = int(value.strip())
    if value is None:
        return default
    if level is None or level < 0:
        logger.warning("to_level: coercing %r to default %r", value, default)
        return default
    return level


def to_float(value: Any, default: float = 0.0) -> float:
    """Coerce ``value`` to a finite ``float``.

    Numbers and numeric strings are accepted.  Non finite or invalid input
    emits a warning and ``default`` is returned.
    """
    if value is None:
        return default
    f: Optional[float] = None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        f = float(value)
    elif isinstance(value, str):
        try:
            f = float(value.strip())
        except ValueError:
            f = None
    if f is None or not math.isfinite(f):
        logger.warning("to_float: coercing %r to default %r", value, default)
        return default
    return f


def to_hex(value: Any) -> Optional[HexCoord]:
    """Coerce an ``"x,y"`` key or an ``(x, y)`` pair to a :class:`HexCoord`.

    Returns None (with a warning) for malformed or negative positions.
    """
    parts: Any = value
    if isinstance(value, str):
        parts = value.split(",")
    try:
        x, y = (int(str(p).strip()) for p in parts)
    except (TypeError, ValueError):
        logger.warning("to_hex: ignoring malformed hex %r", value)
        return None
    h = HexCoord(x, y)
    if not is_valid(h):
        logger.warning("to_hex: ignoring negative hex %r", value)
        return None
    return h


def to_hex_set(values: Optional[Iterable[Any]]) -> Set[HexCoord]:
    """Coerce a collection of hex keys, dropping the malformed ones."""
    out: Set[HexCoord] = set()
    for v in values or ():
        h = to_hex(v)
        if h is not None:
            out.add(h)
    return out
