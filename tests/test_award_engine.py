"""
tests/test_award_engine.py — Unit Tests for the Award Pipeline
================================================================

Tests the pure calculation pipeline (no store, no API).
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from meeple.engine.actions import REPUTATION_ACTIONS, XP_ACTIONS, Catalog, resolve_action
from meeple.engine.limits import DailyLimitRule, DayBoundary, daily_xp_usage
from meeple.engine.records import UserXPRecord, XPHistoryEntry
from meeple.engine.reward import (
    NO_XP_SUFFIX,
    calculate_award,
    is_action_capped,
    is_spam_blocked,
    is_xp_capped,
)

T0 = datetime(2026, 3, 14, 12, 0, 0, tzinfo=UTC)


def _record(xp: int = 0, entries: list[XPHistoryEntry] | None = None) -> UserXPRecord:
    record = UserXPRecord(user_id="u1", username="Ada", xp=xp, actions=entries or [])
    record.refresh_level()
    return record


def _entry(action: str, ts: datetime, xp: int = 1) -> XPHistoryEntry:
    return XPHistoryEntry(action=action, xp=xp, description="", timestamp=ts)


def _award(record, key, at, **kwargs):
    kwargs.setdefault("day_boundary", DayBoundary.UTC)
    return calculate_award(record, resolve_action(key), now=at, **kwargs)


# ---------------------------------------------------------------------------
# Catalogs
# ---------------------------------------------------------------------------
class TestCatalogs:
    def test_xp_catalog_values(self):
        assert XP_ACTIONS["DAILY_LOGIN"].xp_value == 2
        assert XP_ACTIONS["CREATE_DISCUSSION"].xp_value == 5
        assert XP_ACTIONS["UPLOAD_IMAGE"].xp_value == 10
        assert XP_ACTIONS["WIN_DICE_THRONE_VOTE"].xp_value == 20

    def test_catalogs_are_distinct(self):
        assert "CREATE_POST" in REPUTATION_ACTIONS
        assert "CREATE_POST" not in XP_ACTIONS
        assert "WIN_DICE_THRONE_VOTE" not in REPUTATION_ACTIONS

    def test_shared_key_resolves_to_xp_catalog(self):
        assert resolve_action("POST_GETS_LIKE").catalog is Catalog.XP
        assert resolve_action("CREATE_POST").catalog is Catalog.REPUTATION

    def test_unknown_key(self):
        assert resolve_action("NOT_A_REAL_ACTION") is None

    def test_no_negative_values(self):
        for table in (XP_ACTIONS, REPUTATION_ACTIONS):
            assert all(d.xp_value >= 0 for d in table.values())


# ---------------------------------------------------------------------------
# Stage helpers
# ---------------------------------------------------------------------------
class TestStages:
    def test_spam_window_is_global(self):
        entries = [_entry("UPLOAD_IMAGE", T0 - timedelta(seconds=2))]
        assert is_spam_blocked(entries, T0, 5)

    def test_spam_window_edge(self):
        entries = [_entry("UPLOAD_IMAGE", T0 - timedelta(seconds=5))]
        assert not is_spam_blocked(entries, T0, 5)

    def test_action_cap_ignores_other_actions(self):
        rule = DailyLimitRule(max_actions_per_day=1)
        today = [_entry("UPLOAD_IMAGE", T0)]
        assert not is_action_capped("CREATE_POST", today, rule)
        assert is_action_capped("UPLOAD_IMAGE", today, rule)

    def test_no_rule_never_capped(self):
        today = [_entry("CREATE_DISCUSSION", T0)] * 100
        assert not is_action_capped("CREATE_DISCUSSION", today, None)
        assert not is_xp_capped("CREATE_DISCUSSION", today, None)

    def test_like_usage_sums_xp(self):
        today = [_entry("POST_GETS_LIKE", T0, xp=1), _entry("POST_GETS_LIKE", T0, xp=0)]
        assert daily_xp_usage("POST_GETS_LIKE", today) == 1

    def test_other_usage_counts_occurrences(self):
        today = [_entry("UPLOAD_IMAGE", T0, xp=10), _entry("UPLOAD_IMAGE", T0, xp=10)]
        assert daily_xp_usage("UPLOAD_IMAGE", today) == 2


# ---------------------------------------------------------------------------
# Full pipeline
# ---------------------------------------------------------------------------
class TestCalculateAward:
    def test_first_award_credits(self):
        record = _record()
        result = _award(record, "CREATE_DISCUSSION", T0, related_id="post-1")
        assert result.xp_awarded
        assert record.xp == 5
        assert record.actions[-1].related_id == "post-1"
        assert result.should_persist

    def test_spam_rejection_leaves_record_alone(self):
        record = _record()
        _award(record, "CREATE_DISCUSSION", T0)
        result = _award(record, "UPLOAD_IMAGE", T0 + timedelta(seconds=3))
        assert result.spam_blocked
        assert not result.should_persist
        assert record.xp == 5
        assert len(record.actions) == 1

    def test_action_cap_rejects_without_logging(self):
        limits = {"CREATE_DISCUSSION": DailyLimitRule(max_actions_per_day=1)}
        record = _record()
        _award(record, "CREATE_DISCUSSION", T0, limits=limits)
        result = _award(record, "CREATE_DISCUSSION", T0 + timedelta(seconds=10), limits=limits)
        assert result.daily_limit_reached
        assert not result.xp_awarded
        assert len(record.actions) == 1

    def test_xp_cap_logs_zero_entry(self):
        limits = {"POST_GETS_LIKE": DailyLimitRule(max_xp_per_day=1)}
        record = _record()
        _award(record, "POST_GETS_LIKE", T0, limits=limits)
        result = _award(record, "POST_GETS_LIKE", T0 + timedelta(seconds=10), limits=limits)
        assert not result.xp_awarded
        assert result.xp_cap_reached
        assert not result.daily_limit_reached
        assert result.should_persist
        assert record.xp == 1
        assert record.actions[-1].xp == 0
        assert record.actions[-1].description.endswith(NO_XP_SUFFIX)

    def test_counted_cap_allows_large_awards(self):
        # UPLOAD_IMAGE's XP cap counts uploads (5/day), not XP earned.
        record = _record()
        for i in range(5):
            result = _award(record, "UPLOAD_IMAGE", T0 + timedelta(seconds=10 * i))
            assert result.xp_awarded
        result = _award(record, "UPLOAD_IMAGE", T0 + timedelta(seconds=60))
        assert not result.xp_awarded
        assert record.xp == 50

    def test_yesterday_does_not_count(self):
        limits = {"CREATE_DISCUSSION": DailyLimitRule(max_actions_per_day=1)}
        late = datetime(2026, 3, 14, 23, 59, 0, tzinfo=UTC)
        record = _record()
        _award(record, "CREATE_DISCUSSION", late, limits=limits)
        result = _award(record, "CREATE_DISCUSSION", late + timedelta(minutes=2), limits=limits)
        assert result.xp_awarded
        assert len(record.actions) == 2

    def test_level_up_reported(self):
        record = _record(xp=95)
        result = _award(record, "UPLOAD_IMAGE", T0)
        assert result.leveled_up
        assert result.new_level == 2
        assert record.level_name == "Squire"
        assert {u.asset for u in result.unlocked_assets} >= {"BlueDice", "Bow"}

    def test_no_level_up_leaves_new_level_unset(self):
        result = _award(_record(), "DAILY_LOGIN", T0)
        assert not result.leveled_up
        assert result.new_level is None
        assert result.unlocked_assets == []

    def test_daily_login_sets_last_login(self):
        record = _record()
        _award(record, "DAILY_LOGIN", T0)
        assert record.last_login == T0

    @pytest.mark.parametrize("key", ["VOTE_GAME_DOWN"])
    def test_zero_value_action_logged(self, key):
        record = _record()
        result = _award(record, key, T0)
        assert result.xp_awarded
        assert record.xp == 0
        assert len(record.actions) == 1
