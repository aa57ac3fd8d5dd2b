"""
meeple.constants — Level Table & Leveling Helpers
==================================================

Single source of truth for the level ladder.  Import from here instead of
duplicating thresholds in services, routes, and the asset table.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "LEVELS",
    "MAX_LEVEL",
    "LevelDefinition",
    "calculate_level",
    "get_level",
    "get_xp_for_next_level",
]


@dataclass(frozen=True, slots=True)
class LevelDefinition:
    """One rung of the level ladder."""

    level: int
    name: str
    xp_required: int


# ---------------------------------------------------------------------------
# Level ladder: ordered ascending by xp_required, levels contiguous from 1
# ---------------------------------------------------------------------------
LEVELS: tuple[LevelDefinition, ...] = (
    LevelDefinition(1, "Commoner", 0),
    LevelDefinition(2, "Squire", 100),
    LevelDefinition(3, "Knight", 250),
    LevelDefinition(4, "Champion", 500),
    LevelDefinition(5, "Baron/Baroness", 900),
    LevelDefinition(6, "Lord/Lady", 1400),
    LevelDefinition(7, "Archmage", 2000),
    LevelDefinition(8, "Duke/Duchess", 2800),
    LevelDefinition(9, "Prince", 4000),
    LevelDefinition(10, "King/Queen", 6000),
)

MAX_LEVEL: int = LEVELS[-1].level

_BY_LEVEL: dict[int, LevelDefinition] = {d.level: d for d in LEVELS}


def get_level(level: int) -> LevelDefinition | None:
    """Return the definition for *level*, or None if it is off the ladder."""
    return _BY_LEVEL.get(level)


# ---------------------------------------------------------------------------
# Leveling formula
# ---------------------------------------------------------------------------
def calculate_level(xp: int) -> LevelDefinition:
    """Highest level whose threshold is at or below *xp*.

    Scans from the top of the ladder downward.  Always returns a level:
    anything below the first threshold is level 1.
    """
    for definition in reversed(LEVELS):
        if xp >= definition.xp_required:
            return definition
    return LEVELS[0]


def get_xp_for_next_level(xp: int) -> int:
    """XP still needed to reach the next level (0 at the top of the ladder)."""
    current = calculate_level(xp)
    next_level = get_level(current.level + 1)
    if next_level is None:
        return 0
    return next_level.xp_required - xp
