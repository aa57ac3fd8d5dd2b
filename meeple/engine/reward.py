"""
meeple.engine.reward — Award Decision Pipeline
===============================================

Pure calculation pipeline for a single award.
No store I/O inside the engine; the reputation service loads the record,
runs :func:`calculate_award`, and writes back only when the result asks
for it.

Pipeline stages:
  UserXPRecord + ActionDefinition → Spam Guard → Daily Action Cap
  → Daily XP Cap → Credit → Level Recompute → History Append → AwardResult

Rejections at the spam guard or the daily action cap leave the record
untouched and are never persisted.  The daily XP cap is softer: the action
is still logged, with zero XP credited.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from meeple.constants import calculate_level
from meeple.engine.actions import ActionDefinition
from meeple.engine.assets import UnlockedAsset, get_newly_unlocked_assets
from meeple.engine.limits import (
    DailyLimitRule,
    DayBoundary,
    daily_xp_usage,
    entries_for_day,
    get_limit_rule,
)
from meeple.engine.records import UserXPRecord, XPHistoryEntry, as_aware

logger = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_SPAM_WINDOW_SECONDS",
    "NO_XP_SUFFIX",
    "AwardResult",
    "calculate_award",
    "is_action_capped",
    "is_spam_blocked",
    "is_xp_capped",
]

DEFAULT_SPAM_WINDOW_SECONDS = 5
NO_XP_SUFFIX = " (no XP - daily limit reached)"


# ---------------------------------------------------------------------------
# AwardResult: output of the pipeline
# ---------------------------------------------------------------------------
@dataclass
class AwardResult:
    """Outcome of one award attempt.

    ``user_xp`` is None only for an unknown action.  ``new_level`` is set
    only when ``leveled_up`` is True.
    """

    user_xp: UserXPRecord | None = None
    leveled_up: bool = False
    new_level: int | None = None
    daily_limit_reached: bool = False
    spam_blocked: bool = False
    xp_awarded: bool = False
    xp_cap_reached: bool = False
    unlocked_assets: list[UnlockedAsset] = field(default_factory=list)

    @property
    def should_persist(self) -> bool:
        """True when the record changed and must be written back."""
        return self.user_xp is not None and not (
            self.spam_blocked or self.daily_limit_reached
        )


# ---------------------------------------------------------------------------
# Stage 1: Spam guard (global per-user cooldown across all actions)
# ---------------------------------------------------------------------------
def is_spam_blocked(
    entries: list[XPHistoryEntry], now: datetime, window_seconds: float
) -> bool:
    """True if any history entry is younger than *window_seconds*."""
    return any(
        (now - e.timestamp).total_seconds() < window_seconds for e in entries
    )


# ---------------------------------------------------------------------------
# Stage 2: Daily action-count cap
# ---------------------------------------------------------------------------
def is_action_capped(
    action: str, todays_entries: list[XPHistoryEntry], rule: DailyLimitRule | None
) -> bool:
    if rule is None or rule.max_actions_per_day is None:
        return False
    count = sum(1 for e in todays_entries if e.action == action)
    return count >= rule.max_actions_per_day


# ---------------------------------------------------------------------------
# Stage 3: Daily XP cap
# ---------------------------------------------------------------------------
def is_xp_capped(
    action: str, todays_entries: list[XPHistoryEntry], rule: DailyLimitRule | None
) -> bool:
    if rule is None or rule.max_xp_per_day is None:
        return False
    return daily_xp_usage(action, todays_entries) >= rule.max_xp_per_day


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------
def calculate_award(
    record: UserXPRecord,
    definition: ActionDefinition,
    *,
    now: datetime,
    related_id: str | None = None,
    spam_window_seconds: float = DEFAULT_SPAM_WINDOW_SECONDS,
    day_boundary: DayBoundary = DayBoundary.LOCAL,
    limits: dict[str, DailyLimitRule] | None = None,
) -> AwardResult:
    """Run the award pipeline against *record*, mutating it on success.

    Parameters
    ----------
    record : the user's ledger (freshly created for a first award)
    definition : resolved catalog entry for the action
    now : wall-clock time of the award; also the history timestamp
    related_id : optional id of the post/image/game the award concerns
    spam_window_seconds : global per-user cooldown
    day_boundary : where "today" starts for the daily caps
    limits : override table for the daily caps (tests, tuning)
    """
    now = as_aware(now)
    action = definition.key
    today = day_boundary.day_of(now)
    todays_entries = entries_for_day(record.actions, today, day_boundary)
    rule = get_limit_rule(action, limits)

    # 1. Spam guard
    if is_spam_blocked(record.actions, now, spam_window_seconds):
        logger.debug(
            "Spam prevention: %s for user %s blocked due to recent activity",
            action, record.user_id,
        )
        return AwardResult(user_xp=record, spam_blocked=True)

    # 2. Daily action-count cap
    if is_action_capped(action, todays_entries, rule):
        logger.debug(
            "Daily action limit reached for %s (user %s, limit %s)",
            action, record.user_id, rule.max_actions_per_day,
        )
        return AwardResult(user_xp=record, daily_limit_reached=True)

    # 3. Daily XP cap (still logged, with zero XP)
    xp_capped = is_xp_capped(action, todays_entries, rule)
    if xp_capped:
        logger.debug(
            "Daily XP limit reached for %s (user %s, limit %s) — no XP awarded",
            action, record.user_id, rule.max_xp_per_day,
        )

    # 4. Credit
    old_level = calculate_level(record.xp).level
    credited = 0 if xp_capped else definition.xp_value
    record.xp += credited

    # 5. Level recompute
    record.refresh_level()

    # 6. History append
    description = definition.description
    if xp_capped:
        description += NO_XP_SUFFIX
    record.actions.append(XPHistoryEntry(
        action=action,
        xp=credited,
        description=description,
        timestamp=now,
        related_id=related_id,
    ))
    if action == "DAILY_LOGIN":
        record.last_login = now

    leveled_up = record.level > old_level
    unlocked: list[UnlockedAsset] = []
    if leveled_up:
        unlocked = get_newly_unlocked_assets(old_level, record.level)
        logger.info(
            "%s leveled up to %s (level %d), %d assets unlocked",
            record.username, record.level_name, record.level, len(unlocked),
        )

    return AwardResult(
        user_xp=record,
        leveled_up=leveled_up,
        new_level=record.level if leveled_up else None,
        xp_awarded=not xp_capped,
        xp_cap_reached=xp_capped,
        unlocked_assets=unlocked,
    )
