"""
meeple.services.reputation_service — Award Application & Ledger Queries
========================================================================

Shared service module callable from the API and from any other caller that
holds a store.  Handles:

* ``award_xp`` — resolve the action, run the pure award pipeline inside an
  atomic per-user store update, and write back only when the pipeline
  changed the record.
* Read-side projections: user record, leaderboard, history, daily-login
  gate, and level progress.

The store passed in must be scoped to the XP ledger (namespace ``xp``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime

from meeple.config import DEFAULT_CONFIG, MeepleConfig
from meeple.constants import calculate_level, get_level, get_xp_for_next_level
from meeple.engine.actions import resolve_action
from meeple.engine.limits import DailyLimitRule
from meeple.engine.records import UserXPRecord, XPHistoryEntry, as_aware
from meeple.engine.reward import AwardResult, calculate_award
from meeple.services.store import RecordStore

logger = logging.getLogger(__name__)


def _now(now: datetime | None) -> datetime:
    """Current time, or *now* made timezone-aware (naive means server-local)."""
    return as_aware(now) if now is not None else datetime.now(UTC)


def _load(store: RecordStore, user_id: str) -> UserXPRecord | None:
    raw = store.get(user_id)
    return UserXPRecord.from_dict(raw) if raw is not None else None


# ---------------------------------------------------------------------------
# Award
# ---------------------------------------------------------------------------
def award_xp(
    store: RecordStore,
    user_id: str,
    username: str,
    action: str,
    related_id: str | None = None,
    *,
    now: datetime | None = None,
    config: MeepleConfig = DEFAULT_CONFIG,
    limits: dict[str, DailyLimitRule] | None = None,
) -> AwardResult:
    """Award *action* to *user_id*.

    1. Resolve the action in the XP catalog, then the reputation catalog
    2. Load or lazily create the user's record (under the per-user lock)
    3. Run spam guard, daily caps, credit and level recompute
    4. Persist unless the award was rejected outright

    Unknown actions are logged and return an empty ``AwardResult``
    (``user_xp=None``) without touching the store.
    """
    definition = resolve_action(action)
    if definition is None:
        logger.error("Invalid XP action: %s", action)
        return AwardResult()

    timestamp = _now(now)

    def _apply(current: dict | None) -> tuple[dict | None, AwardResult]:
        if current is None:
            record = UserXPRecord(user_id=user_id, username=username)
        else:
            record = UserXPRecord.from_dict(current)
        result = calculate_award(
            record,
            definition,
            now=timestamp,
            related_id=related_id,
            spam_window_seconds=config.spam_window_seconds,
            day_boundary=config.day_boundary,
            limits=limits,
        )
        return (record.to_dict() if result.should_persist else None), result

    return store.update(user_id, _apply)


# ---------------------------------------------------------------------------
# Ledger queries
# ---------------------------------------------------------------------------
def get_user_xp(store: RecordStore, user_id: str) -> UserXPRecord | None:
    return _load(store, user_id)


def get_all_users_xp(store: RecordStore) -> list[UserXPRecord]:
    return [UserXPRecord.from_dict(raw) for raw in store.values()]


def get_top_users_by_xp(store: RecordStore, limit: int = 10) -> list[UserXPRecord]:
    """Users ordered by XP, highest first (ties by user id)."""
    users = sorted(get_all_users_xp(store), key=lambda u: (-u.xp, u.user_id))
    return users[:limit]


def get_user_xp_history(
    store: RecordStore, user_id: str, limit: int = 50
) -> list[XPHistoryEntry]:
    """Most recent history entries for *user_id*, newest first."""
    record = _load(store, user_id)
    if record is None:
        return []
    entries = sorted(record.actions, key=lambda e: e.timestamp, reverse=True)
    return entries[:limit]


def can_perform_daily_login(
    store: RecordStore,
    user_id: str,
    *,
    now: datetime | None = None,
    config: MeepleConfig = DEFAULT_CONFIG,
) -> bool:
    """Advisory: True unless the user already logged in today.

    The login itself goes through ``award_xp(..., "DAILY_LOGIN")``, which
    also records ``last_login``.
    """
    record = _load(store, user_id)
    if record is None or record.last_login is None:
        return True
    boundary = config.day_boundary
    return boundary.day_of(record.last_login) != boundary.day_of(_now(now))


# ---------------------------------------------------------------------------
# Level progress
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class LevelProgress:
    current_level: int
    current_level_name: str
    current_xp: int
    xp_for_next_level: int
    progress_percentage: float

    def to_dict(self) -> dict:
        return {
            "current_level": self.current_level,
            "current_level_name": self.current_level_name,
            "current_xp": self.current_xp,
            "xp_for_next_level": self.xp_for_next_level,
            "progress_percentage": self.progress_percentage,
        }


def level_progress_for_xp(xp: int) -> LevelProgress:
    """Progress projection for a raw XP total."""
    current = calculate_level(xp)
    next_level = get_level(current.level + 1)
    floor = current.xp_required
    ceiling = next_level.xp_required if next_level else floor
    span = ceiling - floor
    if span > 0:
        percentage = (xp - floor) / span * 100
    else:
        percentage = 100.0
    return LevelProgress(
        current_level=current.level,
        current_level_name=current.name,
        current_xp=xp,
        xp_for_next_level=get_xp_for_next_level(xp),
        progress_percentage=min(100.0, max(0.0, percentage)),
    )


def get_level_progress(store: RecordStore, user_id: str) -> LevelProgress:
    """Level, XP, XP-to-next and a 0–100 progress figure for *user_id*.

    Unknown users report the starting position (level 1, 0 XP, 0%).
    """
    record = _load(store, user_id)
    return level_progress_for_xp(record.xp if record else 0)
