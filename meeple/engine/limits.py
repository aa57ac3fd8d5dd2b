"""
meeple.engine.limits — Daily Limit Policy & Day Boundary
=========================================================

Per-action caps that reset at a calendar-day boundary:

* ``max_actions_per_day`` — how many times the action may be *logged*.
* ``max_xp_per_day`` — how much the action may credit in one day.  For the
  like/vote actions in ``XP_SUMMED_ACTIONS`` the credited XP is summed; for
  every other capped action the cap is compared against the number of
  occurrences instead.

Actions without an entry (e.g. ``CREATE_DISCUSSION``) are unlimited.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from meeple.engine.records import XPHistoryEntry

__all__ = [
    "DAILY_LIMITS",
    "XP_SUMMED_ACTIONS",
    "DailyLimitRule",
    "DayBoundary",
    "daily_xp_usage",
    "entries_for_day",
    "get_limit_rule",
]

# ---------------------------------------------------------------------------
# Raw limit values (forum reputation rules)
# ---------------------------------------------------------------------------
DAILY_POST_LIMIT = 10
DAILY_COMMENT_LIMIT = 50
DAILY_IMAGE_LIMIT = 10
DAILY_LOGIN_LIMIT = 10

DAILY_POST_XP_LIMIT = 10
DAILY_COMMENT_XP_LIMIT = 20
DAILY_IMAGE_XP_LIMIT = 5
DAILY_LOGIN_XP_LIMIT = 10
DAILY_LIKE_XP_LIMIT = 100
DAILY_VOTE_XP_LIMIT = 50


@dataclass(frozen=True, slots=True)
class DailyLimitRule:
    """Two independent daily caps; None means unlimited."""

    max_actions_per_day: int | None = None
    max_xp_per_day: int | None = None


# Voting/like actions carry no action-count cap: the XP lands on the content
# owner, not the voter.
DAILY_LIMITS: dict[str, DailyLimitRule] = {
    "CREATE_POST": DailyLimitRule(DAILY_POST_LIMIT, DAILY_POST_XP_LIMIT),
    "CREATE_COMMENT": DailyLimitRule(DAILY_COMMENT_LIMIT, DAILY_COMMENT_XP_LIMIT),
    "COMMENT_GALLERY": DailyLimitRule(DAILY_COMMENT_LIMIT, DAILY_COMMENT_XP_LIMIT),
    "UPLOAD_IMAGE": DailyLimitRule(DAILY_IMAGE_LIMIT, DAILY_IMAGE_XP_LIMIT),
    "DAILY_LOGIN": DailyLimitRule(DAILY_LOGIN_LIMIT, DAILY_LOGIN_XP_LIMIT),
    "POST_GETS_LIKE": DailyLimitRule(max_xp_per_day=DAILY_LIKE_XP_LIMIT),
    "COMMENT_GETS_LIKE": DailyLimitRule(max_xp_per_day=DAILY_LIKE_XP_LIMIT),
    "VOTE_GAME": DailyLimitRule(max_xp_per_day=DAILY_VOTE_XP_LIMIT),
}

XP_SUMMED_ACTIONS: frozenset[str] = frozenset({
    "POST_GETS_LIKE",
    "COMMENT_GETS_LIKE",
    "VOTE_GAME",
})


def get_limit_rule(
    action: str, limits: dict[str, DailyLimitRule] | None = None
) -> DailyLimitRule | None:
    """Return the rule for *action* from *limits* (defaults to DAILY_LIMITS)."""
    table = DAILY_LIMITS if limits is None else limits
    return table.get(action)


# ---------------------------------------------------------------------------
# Day boundary
# ---------------------------------------------------------------------------
class DayBoundary(enum.StrEnum):
    """Where "today" starts and ends.

    ``LOCAL`` follows the server's local midnight.  ``UTC`` pins the window
    to UTC midnight regardless of where the process runs.
    """
    LOCAL = "local"
    UTC = "utc"

    def day_of(self, ts: datetime) -> date:
        """Calendar day *ts* falls on under this boundary."""
        if self is DayBoundary.UTC:
            return ts.astimezone(UTC).date()
        return ts.astimezone().date()


def entries_for_day(
    entries: Iterable[XPHistoryEntry], day: date, boundary: DayBoundary
) -> list[XPHistoryEntry]:
    """History entries recorded on *day*."""
    return [e for e in entries if boundary.day_of(e.timestamp) == day]


def daily_xp_usage(action: str, todays_entries: Iterable[XPHistoryEntry]) -> int:
    """Today's usage of *action* measured the way its XP cap measures it.

    Summed credited XP for like/vote actions, occurrence count otherwise.
    """
    matching = [e for e in todays_entries if e.action == action]
    if action in XP_SUMMED_ACTIONS:
        return sum(e.xp for e in matching)
    return len(matching)
